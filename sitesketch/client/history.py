"""
Version History Store

Linear, append-only history of committed generations with a cursor for
undo/redo. Committing after navigating back appends at the tail; later
versions stay in the list and remain reachable.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional


@dataclass(frozen=True)
class VersionEntry:
    source: str
    prompt: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class VersionHistory:

    def __init__(self):
        self._entries: List[VersionEntry] = []
        self.current_index = -1

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> VersionEntry:
        return self._entries[index]

    @property
    def entries(self) -> List[VersionEntry]:
        return list(self._entries)

    @property
    def current(self) -> Optional[VersionEntry]:
        if self.current_index < 0:
            return None
        return self._entries[self.current_index]

    @property
    def can_undo(self) -> bool:
        return self.current_index > 0

    @property
    def can_redo(self) -> bool:
        return self.current_index < len(self._entries) - 1

    @property
    def status(self) -> str:
        if not self._entries:
            return "No versions"
        return f"Version {self.current_index + 1} of {len(self._entries)}"

    def commit(self, source: str, prompt: str) -> VersionEntry:
        entry = VersionEntry(source=source, prompt=prompt)
        self._entries.append(entry)
        self.current_index = len(self._entries) - 1
        return entry

    def navigate(self, delta: int) -> Optional[VersionEntry]:
        """Move the cursor by ``delta``; out-of-range moves are ignored."""
        new_index = self.current_index + delta
        if not 0 <= new_index < len(self._entries):
            return None
        self.current_index = new_index
        return self._entries[new_index]

    def undo(self) -> Optional[VersionEntry]:
        return self.navigate(-1)

    def redo(self) -> Optional[VersionEntry]:
        return self.navigate(1)
