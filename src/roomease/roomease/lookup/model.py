from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from ..core.enums import LookupCategory

_LEADING_INT = re.compile(r"^\s*(\d+)")


@dataclass(frozen=True)
class LookupRecord:
    """One row of the lookup table: a floor, room, department or faculty.

    Rooms keep their capacity in `description`; faculties keep their long name there.
    """

    lookup_id: int
    name: str
    description: Optional[str]
    group: int
    category: LookupCategory
    parent_id: Optional[int] = None

    @property
    def parsed_capacity(self) -> Optional[int]:
        m = _LEADING_INT.match(self.description or "")
        return int(m.group(1)) if m else None

    @property
    def capacity(self) -> int:
        return self.parsed_capacity or 0

    def to_dict(self) -> dict:
        return {
            "id": self.lookup_id,
            "name": self.name,
            "description": self.description,
            "group": self.group,
            "category": self.category.value,
            "parent_id": self.parent_id,
        }
