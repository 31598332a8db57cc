from __future__ import annotations
from dataclasses import dataclass
from typing import Literal, Optional

from .signature_overlay import SignatureOverlay

StoreEventKind = Literal["added", "removed", "updated", "reset"]


@dataclass(frozen=True)
class StoreEvent:
    """Change notification emitted by the geometry store."""
    kind: StoreEventKind
    index: int = -1
    overlay: Optional[SignatureOverlay] = None
