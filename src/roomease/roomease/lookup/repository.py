from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import LookupCategory
from .model import LookupRecord


class LookupRepository(Protocol):
    """Repository interface for the lookup table (floors, rooms, departments, faculties)."""

    def get_by_id(self, lookup_id: int) -> Optional[LookupRecord]:
        raise NotImplementedError

    def get_many(self, lookup_ids: Sequence[int]) -> Sequence[LookupRecord]:
        raise NotImplementedError

    def get_by_name(self, name: str, *, category: Optional[LookupCategory] = None) -> Optional[LookupRecord]:
        raise NotImplementedError

    def list_by_category(
        self,
        category: LookupCategory,
        *,
        parent_id: Optional[int] = None,
    ) -> Sequence[LookupRecord]:
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        description: Optional[str],
        group: int,
        category: LookupCategory,
        parent_id: Optional[int],
    ) -> int:
        raise NotImplementedError

    def update(self, lookup_id: int, *, name: Optional[str] = None, description: Optional[str] = None) -> bool:
        raise NotImplementedError
