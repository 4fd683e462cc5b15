from PySide6.QtCore import QObject, Signal

from wagonflow.core.events import AppEvent, EventType


class WagonFlowAdapter(QObject):
    """
    Receives AppEvents from the worker thread and re-emits them as Qt signals.
    Cross-thread signal delivery is queued, so connected slots run on the GUI thread.
    """
    sig_log = Signal(str, str)
    sig_status = Signal(str, str, str)
    sig_notification = Signal(dict)
    sig_done = Signal(object)

    def ingest_event(self, event: AppEvent):
        p = event.payload
        if event.type == EventType.LOG:
            self.sig_log.emit(p["msg"], p["level"])
        elif event.type == EventType.STATUS_CHANGE:
            self.sig_status.emit(p["stage"], p["msg"], p["color"])
        elif event.type == EventType.NOTIFICATION:
            self.sig_notification.emit(p)
        elif event.type == EventType.DONE:
            self.sig_done.emit(p)
