from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Notification:
    notification_id: int
    user_id: int
    message: str
    is_read: bool = False
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.notification_id,
            "user_id": self.user_id,
            "message": self.message,
            "read": self.is_read,
            "created": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass
class DeliveryReport:
    """What a dispatch actually delivered.

    Channel failures are collected here instead of undoing the workflow step
    that triggered the dispatch.
    """

    sms_sent: int = 0
    emails_sent: int = 0
    in_app_created: int = 0
    failures: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def to_dict(self) -> dict:
        return {
            "sms_sent": self.sms_sent,
            "emails_sent": self.emails_sent,
            "in_app_created": self.in_app_created,
            "failures": list(self.failures),
        }
