import threading

from .models import TimerState

SEC_PER_HOUR = 3600
SEC_PER_MINUTE = 60


def format_elapsed(counter: int) -> str:
    hours, rem = divmod(int(counter), SEC_PER_HOUR)
    minutes, seconds = divmod(rem, SEC_PER_MINUTE)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


class ElapsedTicker:
    """
    One-second elapsed-time counter driven by an external periodic source
    (a QTimer in the GUI). The source calls tick(); a completion signal from
    another thread goes through request_stop(). `halt` is called once, from
    tick(), to switch the periodic source off.
    """

    def __init__(self, halt=None):
        self.state = TimerState()
        self._halt = halt
        self._lock = threading.Lock()
        self._stop_requested = False

    @property
    def running(self):
        with self._lock: return self.state.running

    @property
    def elapsed_seconds(self):
        with self._lock: return self.state.elapsed_seconds

    @property
    def display(self):
        return format_elapsed(self.elapsed_seconds)

    def start(self):
        with self._lock:
            self._stop_requested = False
            self.state.elapsed_seconds = 0
            self.state.running = True

    def request_stop(self):
        with self._lock:
            self.state.elapsed_seconds = 0
            self.state.running = False
            self._stop_requested = True

    def tick(self):
        """Advance one second. Returns the new display text, or None once stopped."""
        halted = False
        with self._lock:
            if self._stop_requested:
                self._stop_requested = False
                self.state.elapsed_seconds = 0
                self.state.running = False
                halted = True
            elif not self.state.running:
                return None
            else:
                self.state.elapsed_seconds += 1
                text = format_elapsed(self.state.elapsed_seconds)
        if halted:
            if self._halt: self._halt()
            return None
        return text
