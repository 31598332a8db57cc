from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass
class EmbedReport:
    """Outcome of one commit pass: embedded overlay ids and (overlay_id, reason) skips."""
    embedded: List[str] = field(default_factory=list)
    skipped: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.skipped
