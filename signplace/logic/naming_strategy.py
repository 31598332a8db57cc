from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class NamingContext:
    input_path: str


class NamingStrategy(Protocol):
    def strategy_id(self) -> str: ...
    def propose_output_path(self, ctx: NamingContext) -> str: ...


class CompletedPrefixStrategy:
    """Default: dir/file.pdf -> dir/completed-file.pdf"""
    def __init__(self, prefix: str = "completed-") -> None:
        self.prefix = prefix

    def strategy_id(self) -> str:
        return "completed_prefix"

    def propose_output_path(self, ctx: NamingContext) -> str:
        head, tail = os.path.split(ctx.input_path)
        root, ext = os.path.splitext(tail or "document.pdf")
        if ext.lower() != ".pdf":
            ext = ".pdf"
        return os.path.join(head, f"{self.prefix}{root}{ext}")
