import enum
import datetime as dt
from dataclasses import dataclass
from typing import Optional

NORMAL = "normal termination"
ABNORMAL = "abnormal termination"


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def month_window(now: dt.datetime):
    """(first instant of the month, now truncated to the minute + 1 minute), both UTC."""
    now = now.astimezone(dt.timezone.utc)
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    end = now.replace(second=0, microsecond=0) + dt.timedelta(minutes=1)
    return start, end


class TransitionDecision(enum.Enum):
    NO_CHANGE = "noop"
    TAKE_OFFLINE = "take_offline"
    BRING_ONLINE = "bring_online"


@dataclass(frozen=True)
class UsageReport:
    bytes_transferred: float
    period_start: dt.datetime
    period_end: dt.datetime
    no_datapoints: bool = False


@dataclass(frozen=True)
class NotificationEvent:
    became_online: bool
    bytes_transferred: float
    timestamp: dt.datetime


@dataclass
class RunOutcome:
    online: Optional[bool] = None
    usage: Optional[UsageReport] = None
    decision: TransitionDecision = TransitionDecision.NO_CHANGE
    short_circuit: bool = False
    notification: Optional[NotificationEvent] = None
    error: Optional[Exception] = None
    status_code: int = 200

    @property
    def body(self) -> str:
        return ABNORMAL if self.error is not None else NORMAL

    def response(self):
        return {"statusCode": self.status_code, "body": self.body}

    def summary(self):
        return {
            "online": self.online,
            "bytes": None if self.usage is None else self.usage.bytes_transferred,
            "decision": self.decision.value,
            "short_circuit": self.short_circuit,
            "notified": self.notification is not None,
            "body": self.body,
            "error": None if self.error is None else f"{type(self.error).__name__}: {self.error}",
        }
