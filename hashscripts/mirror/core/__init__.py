"""Core components."""

from .enums import MIRROR_URLS, FetchOutcome, Network, TokenType, TraversalState
from .exceptions import (
    EntityNotFoundError,
    MirrorError,
    ProtocolError,
    TraversalAbortedError,
    TraversalCancelledError,
    ValidationError,
)

__all__ = [
    "MIRROR_URLS",
    "Network",
    "TokenType",
    "TraversalState",
    "FetchOutcome",
    "MirrorError",
    "ProtocolError",
    "TraversalAbortedError",
    "TraversalCancelledError",
    "EntityNotFoundError",
    "ValidationError",
]
