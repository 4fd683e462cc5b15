from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

class EventType(Enum):
    LOG = auto()
    STATUS_CHANGE = auto()
    NOTIFICATION = auto()   # Modal notices
    DONE = auto()           # Run finished, whatever the outcome

@dataclass
class AppEvent:
    type: EventType
    payload: Any = None

    @staticmethod
    def log(msg: str, level: str = "INFO"):
        return AppEvent(EventType.LOG, {"msg": msg, "level": level})

    @staticmethod
    def status(stage: str, message: str, color_hint: str = "blue"):
        return AppEvent(EventType.STATUS_CHANGE, {"stage": stage, "msg": message, "color": color_hint})

    @staticmethod
    def notify(title: str, message: str, level: str = "INFO", open_path: str = None):
        data = {"title": title, "msg": message, "level": level}
        if open_path: data["open_path"] = open_path
        return AppEvent(EventType.NOTIFICATION, data)

    @staticmethod
    def done(result=None):
        return AppEvent(EventType.DONE, result)
