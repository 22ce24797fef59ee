from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import TransferStatus


@dataclass(frozen=True)
class TransferRecord:
    """A room-change request or action (table `transfer_room`)."""

    record_id: int
    transfer_room_id: Optional[int]
    current_room_id: Optional[int]
    status: TransferStatus
    reason: Optional[str]
    request_by: int
    processed_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.status == TransferStatus.PENDING
