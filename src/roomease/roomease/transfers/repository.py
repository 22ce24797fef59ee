from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import TransferStatus
from .model import TransferRecord


class TransferRepository(Protocol):
    def create(
        self,
        *,
        transfer_room_id: int,
        current_room_id: Optional[int],
        status: TransferStatus,
        reason: Optional[str],
        request_by: int,
        processed_by: Optional[int] = None,
    ) -> int:
        raise NotImplementedError

    def get(self, record_id: int) -> Optional[TransferRecord]:
        raise NotImplementedError

    def decide(self, *, record_id: int, status: TransferStatus, processed_by: int) -> bool:
        """Move a pending record to `status`; False when it is missing or no longer pending."""

        raise NotImplementedError

    def list_by_status(self, status: TransferStatus) -> Sequence[TransferRecord]:
        raise NotImplementedError

    def list_for_user(self, user_id: int, *, statuses: Sequence[TransferStatus]) -> Sequence[TransferRecord]:
        """Newest first."""

        raise NotImplementedError

    def has_pending(self, user_id: int) -> bool:
        raise NotImplementedError
