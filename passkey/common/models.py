# passkey/common/models.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Literal

SchedulerState = Literal[
    "STOPPED",
    "RUNNING",
]

ValidationOutcome = Literal[
    "ok",
    "malformed",
    "unauthorized",
]

SlotName = Literal[
    "previous",
    "current",
    "next",
]

SLOT_NAMES: tuple[SlotName, ...] = ("previous", "current", "next")

@dataclass(frozen=True)
class SlotView:
    """
    Snapshot of one window slot, for display.
    """
    name: SlotName
    bucket: int
    code: int

    @property
    def populated(self) -> bool:
        return self.code != 0
