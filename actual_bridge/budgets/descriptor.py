"""Mini README: Normalised view of one budget file listing entry.

Structure:
    * BudgetDescriptor - frozen snapshot of the identifiers of a budget file.

Listing entries come back from the client as loose mappings using the
server's camelCase keys. ``BudgetDescriptor.from_raw`` collapses falsy
identifiers to ``None`` and derives a ``state`` when the server omitted it,
so the rest of the service can compare identifiers without guarding.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple


@dataclass(frozen=True, slots=True)
class BudgetDescriptor:
    """Identifiers and state of a budget file known to the server or disk."""

    name: Optional[str]
    id: Optional[str] = None
    group_id: Optional[str] = None
    cloud_file_id: Optional[str] = None
    state: str = "remote"

    @classmethod
    def from_raw(cls, raw: Optional[Mapping[str, Any]]) -> "BudgetDescriptor":
        """Build a descriptor from a listing entry, tolerating missing keys."""

        raw = raw or {}
        local_id = raw.get("id") or None
        return cls(
            name=raw.get("name"),
            id=local_id,
            group_id=raw.get("groupId") or None,
            cloud_file_id=raw.get("cloudFileId") or None,
            state=raw.get("state") or ("local" if local_id else "remote"),
        )

    @property
    def is_local(self) -> bool:
        """True once the file has been materialised and has a local id."""

        return self.id is not None

    def identifiers(self) -> Tuple[Optional[str], Optional[str], Optional[str]]:
        """Return the local id, groupId and cloudFileId in that order."""

        return (self.id, self.group_id, self.cloud_file_id)

    def matches(self, identifier: str) -> bool:
        """True when any of the three identifiers equals ``identifier``."""

        return identifier in self.identifiers()

    def as_dict(self) -> Dict[str, Optional[str]]:
        """Export using the server's key names for JSON responses."""

        return {
            "name": self.name,
            "id": self.id,
            "groupId": self.group_id,
            "cloudFileId": self.cloud_file_id,
            "state": self.state,
        }
