from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class StatusMessage:
    text: str
    level: str = "info"
    until: Optional[float] = None
