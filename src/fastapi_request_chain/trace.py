"""ChainTrace and TraceEntry — debug dispatch recording."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal


@dataclass(frozen=True)
class TraceEntry:
    """Single stage dispatch record."""

    stage_name: str
    mode: Literal["CONTINUING", "TERMINAL", "SKIPPED"]
    duration_ms: float
    outcome: Literal["OK", "FAILED"]
    reason: str | None = None


@dataclass
class ChainTrace:
    """Structured record of one chain dispatch.

    Entries are appended as stages return, so nested stages precede the
    stages that advanced into them.
    """

    entries: list[TraceEntry] = field(default_factory=list)
    outcome: Literal["OK", "ERROR"] = "OK"
    error: Exception | None = None
