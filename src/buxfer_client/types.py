from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class DryRun:
    """A fully assembled request that was not sent."""

    endpoint: str
    params: dict[str, Any]
