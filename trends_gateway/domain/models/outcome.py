from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional, Union

if TYPE_CHECKING:
    from trends_gateway.infrastructure.error.handler import ErrorCategory


class FailureKind(str, Enum):
    """Whether an upstream failure is worth retrying."""
    TRANSIENT = "transient"
    FATAL = "fatal"


@dataclass(frozen=True)
class UpstreamSuccess:
    """Raw payload returned by a successful upstream call."""

    payload: str
    attempts: int = 1


@dataclass(frozen=True)
class UpstreamFailure:
    """Terminal, classified upstream failure."""

    kind: FailureKind
    message: str
    category: Optional["ErrorCategory"] = None
    attempts: int = 1

    @property
    def is_transient(self) -> bool:
        return self.kind == FailureKind.TRANSIENT


UpstreamOutcome = Union[UpstreamSuccess, UpstreamFailure]
