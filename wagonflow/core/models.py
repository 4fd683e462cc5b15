from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional

from ..config import DEFAULT_DIRECTORY

FILE_PLACEHOLDER = "<Select a file>"
SQL_PLACEHOLDER = "Automatically acquire the data."
DEFAULT_DESTINATION_SENTINEL = "<Default>"


def as_date(value):
    """Reduce a datetime to its date; plain dates pass through."""
    if isinstance(value, datetime): return value.date()
    return value


@dataclass
class AnalysisConfig:
    """
    Everything the user has chosen on the form. The window mutates one
    instance field by field; each run works on its own snapshot().
    """
    input_path: Optional[str] = None
    use_sql_source: bool = False
    destination_dir: str = DEFAULT_DIRECTORY
    from_date: date = date.min
    to_date: date = date.max
    produce_volume_model_output: bool = False
    combine_intermodal_and_steel: bool = False

    def set_use_sql_source(self, enabled: bool):
        self.use_sql_source = bool(enabled)
        if self.use_sql_source:
            self.input_path = None

    def set_date_range(self, from_date, to_date):
        self.from_date = as_date(from_date)
        self.to_date = as_date(to_date)

    def snapshot(self) -> "AnalysisConfig":
        return replace(self)


@dataclass
class TimerState:
    elapsed_seconds: int = 0
    running: bool = False


@dataclass(frozen=True)
class RunResult:
    status: str                 # "ok" | "failed" | "skipped"
    source: str                 # "file" | "sql" | "none"
    destination_dir: str
    from_date: date
    to_date: date
    duration_seconds: int = 0
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.status == "ok"
