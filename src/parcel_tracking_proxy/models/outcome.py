"""Result of one provider attempt, consumed by the orchestrator."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from .normalized import ShipmentResult


@dataclass(frozen=True)
class Success:
    result: ShipmentResult


@dataclass(frozen=True)
class RecoverableError:
    """The provider could not be used; the next candidate may still succeed."""
    reason: str
    upstream_status: Optional[int] = None


@dataclass(frozen=True)
class FatalError:
    http_status: int
    message: str
    hint: Optional[str] = None


AttemptOutcome = Union[Success, RecoverableError, FatalError]
