"""Hashscripts Mirror - paginated mirror-node queries with retry and backoff."""

from .api import ENDPOINTS, MirrorEndpointSpec, MirrorNodeClient, get_endpoint_spec
from .config import MirrorSettings, get_settings
from .core import (
    EntityNotFoundError,
    FetchOutcome,
    MirrorError,
    Network,
    ProtocolError,
    TokenType,
    TraversalAbortedError,
    TraversalCancelledError,
    TraversalState,
    ValidationError,
)
from .models import (
    HbarTransfer,
    Nft,
    NftAllowance,
    NftTransaction,
    NftTransfer,
    RoyaltyFee,
    TokenBalance,
    TokenInfo,
    TokenRelationship,
    Transaction,
)
from .runtime import (
    CancellationToken,
    FetchPolicy,
    FetchResult,
    PageTraversal,
    RequestLimiter,
    RetryingFetcher,
    TraversalResult,
    fan_out,
    traverse,
)

__version__ = "0.1.0"

__all__ = [
    # Client
    "MirrorNodeClient",
    "MirrorEndpointSpec",
    "ENDPOINTS",
    "get_endpoint_spec",
    # Config
    "MirrorSettings",
    "get_settings",
    # Runtime
    "FetchPolicy",
    "FetchResult",
    "TraversalResult",
    "RetryingFetcher",
    "PageTraversal",
    "traverse",
    "RequestLimiter",
    "CancellationToken",
    "fan_out",
    # Enums
    "Network",
    "TokenType",
    "TraversalState",
    "FetchOutcome",
    # Models
    "TokenInfo",
    "RoyaltyFee",
    "TokenBalance",
    "TokenRelationship",
    "Nft",
    "NftAllowance",
    "NftTransaction",
    "NftTransfer",
    "HbarTransfer",
    "Transaction",
    # Exceptions
    "MirrorError",
    "ProtocolError",
    "TraversalAbortedError",
    "TraversalCancelledError",
    "EntityNotFoundError",
    "ValidationError",
]
