# signplace/models/interaction_enums.py
from __future__ import annotations
from enum import Enum


class InteractionMode(str, Enum):
    """State of the drag/resize controller."""
    IDLE = "idle"
    DRAGGING = "dragging"
    RESIZING = "resizing"


class PointerKind(str, Enum):
    MOUSE = "mouse"
    TOUCH = "touch"


class ReleaseReason(str, Enum):
    """Events that end a gesture; all of them return the controller to IDLE."""
    UP = "up"
    LEAVE = "leave"
    TOUCH_END = "touch_end"
    CANCEL = "cancel"
