"""Enumerations shared across the package."""

from __future__ import annotations

from enum import Enum


class Network(str, Enum):
    """Public ledger networks with a hosted mirror node."""

    MAINNET = "mainnet"
    TESTNET = "testnet"
    PREVIEWNET = "previewnet"

    @property
    def mirror_url(self) -> str:
        return MIRROR_URLS[self]


MIRROR_URLS = {
    Network.MAINNET: "https://mainnet-public.mirrornode.hedera.com",
    Network.TESTNET: "https://testnet.mirrornode.hedera.com",
    Network.PREVIEWNET: "https://previewnet.mirrornode.hedera.com",
}


class TokenType(str, Enum):
    """Token types reported by the mirror node."""

    FUNGIBLE_COMMON = "FUNGIBLE_COMMON"
    NON_FUNGIBLE_UNIQUE = "NON_FUNGIBLE_UNIQUE"


class TraversalState(str, Enum):
    """States of a single paginated traversal.

    FETCHING_PAGE -> FOLDING_ITEMS -> ADVANCING_CURSOR -> FETCHING_PAGE ...
    ending in DONE (cursor absent) or ABORTED (a page exhausted its retries).
    """

    FETCHING_PAGE = "fetching_page"
    FOLDING_ITEMS = "folding_items"
    ADVANCING_CURSOR = "advancing_cursor"
    DONE = "done"
    ABORTED = "aborted"

    @property
    def is_terminal(self) -> bool:
        return self in (TraversalState.DONE, TraversalState.ABORTED)


class FetchOutcome(str, Enum):
    """Tag of a FetchResult."""

    SUCCESS = "success"
    EXHAUSTED = "exhausted"
