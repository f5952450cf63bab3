"""Mirror-node endpoint specifications.

Each endpoint declares how to build its path and query from request params
and, for collections, which response field holds the page items. Cursors are
always read from ``links.next``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote, urlencode

DEFAULT_PAGE_SIZE = 100


@dataclass(frozen=True)
class MirrorEndpointSpec:
    id: str
    build_path: Callable[[dict[str, Any]], str]
    build_query: Callable[[dict[str, Any]], dict[str, Any]] | None = None
    items_field: str | None = None  # None for single-entity endpoints

    @property
    def paginated(self) -> bool:
        return self.items_field is not None

    def url(self, params: dict[str, Any]) -> str:
        path = self.build_path(params)
        query = self.build_query(params) if self.build_query else None
        query = {k: v for k, v in (query or {}).items() if v is not None}
        if not query:
            return path
        return f"{path}?{urlencode(query)}"


def _id(value: Any) -> str:
    return quote(str(value), safe=".-")


def _page_query(params: dict[str, Any]) -> dict[str, Any]:
    return {
        "account.id": params.get("account_id"),
        "limit": params.get("limit", DEFAULT_PAGE_SIZE),
    }


TOKEN_INFO = MirrorEndpointSpec(
    id="token_info",
    build_path=lambda p: f"/api/v1/tokens/{_id(p['token_id'])}",
)

TOKENS = MirrorEndpointSpec(
    id="tokens",
    build_path=lambda p: "/api/v1/tokens",
    build_query=lambda p: {
        "type": p.get("token_type"),
        "account.id": p.get("account_id"),
        "limit": p.get("limit", DEFAULT_PAGE_SIZE),
    },
    items_field="tokens",
)

TOKEN_BALANCES = MirrorEndpointSpec(
    id="token_balances",
    build_path=lambda p: f"/api/v1/tokens/{_id(p['token_id'])}/balances",
    build_query=_page_query,
    items_field="balances",
)

TOKEN_NFTS = MirrorEndpointSpec(
    id="token_nfts",
    build_path=lambda p: f"/api/v1/tokens/{_id(p['token_id'])}/nfts",
    build_query=_page_query,
    items_field="nfts",
)

NFT_TRANSACTIONS = MirrorEndpointSpec(
    id="nft_transactions",
    build_path=lambda p: (
        f"/api/v1/tokens/{_id(p['token_id'])}/nfts/{_id(p['serial'])}/transactions"
    ),
    build_query=lambda p: {"limit": p.get("limit", DEFAULT_PAGE_SIZE)},
    items_field="transactions",
)

ACCOUNT_TOKENS = MirrorEndpointSpec(
    id="account_tokens",
    build_path=lambda p: f"/api/v1/accounts/{_id(p['account_id'])}/tokens",
    build_query=lambda p: {"limit": p.get("limit", DEFAULT_PAGE_SIZE)},
    items_field="tokens",
)

NFT_ALLOWANCES = MirrorEndpointSpec(
    id="nft_allowances",
    build_path=lambda p: f"/api/v1/accounts/{_id(p['account_id'])}/allowances/nfts",
    build_query=lambda p: {"limit": p.get("limit", DEFAULT_PAGE_SIZE)},
    items_field="allowances",
)

TRANSACTION = MirrorEndpointSpec(
    id="transaction",
    build_path=lambda p: f"/api/v1/transactions/{_id(p['transaction_id'])}",
)

ENDPOINTS: dict[str, MirrorEndpointSpec] = {
    spec.id: spec
    for spec in (
        TOKEN_INFO,
        TOKENS,
        TOKEN_BALANCES,
        TOKEN_NFTS,
        NFT_TRANSACTIONS,
        ACCOUNT_TOKENS,
        NFT_ALLOWANCES,
        TRANSACTION,
    )
}


def get_endpoint_spec(endpoint_id: str) -> MirrorEndpointSpec:
    try:
        return ENDPOINTS[endpoint_id]
    except KeyError:
        raise ValueError(f"Unknown mirror endpoint: {endpoint_id}") from None
