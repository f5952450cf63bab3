"""Mirror-node query client.

Architecture:
    MirrorNodeClient owns one HTTP session, a default FetchPolicy, a
    RequestLimiter and a CancellationToken. Collection queries are expressed
    as a MirrorEndpointSpec plus a fold callback and run through
    PageTraversal; single-entity queries go straight through the
    RetryingFetcher. Every request made by the client, including those of
    concurrent traversals, shares the same limiter.

Error policy:
    - Exhausted retries on any page surface as TraversalAbortedError
    - Malformed pages and items the models reject surface as ProtocolError
    - A fired cancellation token surfaces as TraversalCancelledError
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Collection, Iterable
from typing import Any, TypeVar

from pydantic import ValidationError as ModelValidationError

from ..config import MirrorSettings, get_settings
from ..core.enums import Network, TokenType
from ..core.exceptions import EntityNotFoundError, ProtocolError
from ..models import (
    Nft,
    NftAllowance,
    NftTransaction,
    TokenBalance,
    TokenInfo,
    TokenRelationship,
    Transaction,
)
from ..runtime import (
    CancellationToken,
    FetchPolicy,
    FetchResult,
    HTTPClient,
    RequestLimiter,
    RetryingFetcher,
    TraversalResult,
    fan_out,
    traverse,
)
from ..runtime.fetcher import Sleep
from . import endpoints
from .endpoints import MirrorEndpointSpec

logger = logging.getLogger(__name__)

S = TypeVar("S")
T = TypeVar("T")


class MirrorNodeClient:
    """Async client for read-only mirror-node queries."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        network: Network | None = None,
        policy: FetchPolicy | None = None,
        limiter: RequestLimiter | None = None,
        cancel_token: CancellationToken | None = None,
        http: HTTPClient | None = None,
        sleep: Sleep | None = None,
    ) -> None:
        """Initialize client.

        Args:
            base_url: Mirror-node origin; wins over ``network``
            network: Public network whose mirror node to use (default mainnet)
            policy: Default retry policy for every request
            limiter: Admission control shared by all requests of this client
            cancel_token: Token that stops every traversal of this client
            http: Pre-built HTTP client (tests inject a mock here)
            sleep: Backoff sleep override
        """
        if base_url is None:
            base_url = (network or Network.MAINNET).mirror_url
        self.base_url = base_url.rstrip("/")
        self.policy = policy or FetchPolicy()
        self.limiter = limiter
        self.cancel_token = cancel_token or CancellationToken()
        self._http = http or HTTPClient(base_url=self.base_url)
        self._fetcher = RetryingFetcher(
            self._http,
            self.policy,
            limiter=self.limiter,
            cancel_token=self.cancel_token,
            sleep=sleep,
        )

    @classmethod
    def from_settings(
        cls,
        settings: MirrorSettings | None = None,
        *,
        network: Network | None = None,
        verbose: bool = False,
    ) -> MirrorNodeClient:
        """Build a client from environment settings.

        An explicit ``network`` overrides ``MIRROR_NODE_BASEURL``.
        """
        settings = settings or get_settings()
        base_url = network.mirror_url if network is not None else settings.mirror_node_baseurl
        return cls(
            base_url,
            policy=settings.fetch_policy(verbose=verbose),
            limiter=settings.limiter(),
        )

    @property
    def fetcher(self) -> RetryingFetcher:
        return self._fetcher

    def cancel(self, reason: str | None = None) -> None:
        """Stop every in-flight and future traversal of this client."""
        logger.info("client_cancelled", extra={"base_url": self.base_url, "reason": reason})
        self.cancel_token.cancel(reason)

    # ------------------------------------------------------------------
    # Generic access
    # ------------------------------------------------------------------

    async def fetch_json(self, path: str, *, policy: FetchPolicy | None = None) -> FetchResult:
        return await self._fetcher.fetch(path, policy=policy)

    async def iterate(
        self,
        spec: MirrorEndpointSpec,
        params: dict[str, Any],
        *,
        fold: Callable[[Any, S], Any],
        initial: S,
        policy: FetchPolicy | None = None,
        max_pages: int | None = None,
    ) -> TraversalResult[S]:
        """Traverse every page of a collection endpoint."""
        if not spec.paginated:
            raise ValueError(f"Endpoint {spec.id} is not a paginated collection")
        return await traverse(
            self._fetcher,
            self._url(spec, params),
            items_field=spec.items_field,
            fold=fold,
            initial=initial,
            policy=policy,
            max_pages=max_pages,
        )

    async def collect(
        self,
        spec: MirrorEndpointSpec,
        params: dict[str, Any],
        *,
        policy: FetchPolicy | None = None,
        max_pages: int | None = None,
    ) -> list[Any]:
        """Raw items of every page, in page order."""
        result = await self.iterate(
            spec,
            params,
            fold=_append,
            initial=[],
            policy=policy,
            max_pages=max_pages,
        )
        return result.unwrap()

    async def fan_out(self, jobs: Iterable[Awaitable[T]]) -> list[T]:
        return await fan_out(jobs)

    def _url(self, spec: MirrorEndpointSpec, params: dict[str, Any]) -> str:
        return self._fetcher.resolve(spec.url(params))

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    async def get_token_info(self, token_id: str) -> TokenInfo:
        result = await self.fetch_json(endpoints.TOKEN_INFO.url({"token_id": token_id}))
        return _parse(TokenInfo.model_validate, result.unwrap(), result.url)

    async def list_tokens(
        self,
        *,
        token_type: TokenType | None = None,
        account_id: str | None = None,
        max_pages: int | None = None,
    ) -> list[str]:
        """Token ids known to the mirror node, optionally filtered."""
        params = {
            "token_type": token_type.value if token_type else None,
            "account_id": account_id,
        }
        url = self._url(endpoints.TOKENS, params)

        def fold(item: dict[str, Any], acc: list[str]) -> None:
            token_id = item.get("token_id") if isinstance(item, dict) else None
            if not isinstance(token_id, str):
                raise ProtocolError(f"Token listing item without a token_id from {url}", url=url)
            acc.append(token_id)

        result = await self.iterate(
            endpoints.TOKENS, params, fold=fold, initial=[], max_pages=max_pages
        )
        return result.unwrap()

    async def get_token_balances(
        self,
        token_id: str,
        *,
        account_id: str | None = None,
        exclude: Collection[str] = (),
    ) -> dict[str, int]:
        """Raw balance per holder account."""
        params = {"token_id": token_id, "account_id": account_id}
        url = self._url(endpoints.TOKEN_BALANCES, params)

        def fold(item: dict[str, Any], acc: dict[str, int]) -> None:
            holder = _parse(TokenBalance.model_validate, item, url)
            if holder.account in exclude:
                return
            acc[holder.account] = holder.balance

        result = await self.iterate(endpoints.TOKEN_BALANCES, params, fold=fold, initial={})
        return result.unwrap()

    async def get_tokens_in_wallet(self, account_id: str, *, zero_only: bool = False) -> list[str]:
        """Token ids associated with ``account_id``; ``zero_only`` keeps empty associations."""
        params = {"account_id": account_id}
        url = self._url(endpoints.ACCOUNT_TOKENS, params)

        def fold(item: dict[str, Any], acc: list[str]) -> None:
            relationship = _parse(TokenRelationship.model_validate, item, url)
            if zero_only and relationship.balance != 0:
                return
            acc.append(relationship.token_id)

        result = await self.iterate(endpoints.ACCOUNT_TOKENS, params, fold=fold, initial=[])
        return result.unwrap()

    # ------------------------------------------------------------------
    # NFTs
    # ------------------------------------------------------------------

    async def get_nfts(
        self,
        token_id: str,
        *,
        account_id: str | None = None,
        serials: Collection[int] | None = None,
        exclude: Collection[str] = (),
        include_deleted: bool = False,
    ) -> list[Nft]:
        wanted = set(serials) if serials else None
        params = {"token_id": token_id, "account_id": account_id}
        url = self._url(endpoints.TOKEN_NFTS, params)

        def fold(item: dict[str, Any], acc: list[Nft]) -> None:
            nft = _parse(Nft.model_validate, item, url)
            if wanted is not None and nft.serial_number not in wanted:
                return
            if nft.deleted and not include_deleted:
                return
            if nft.account_id in exclude:
                return
            acc.append(nft)

        result = await self.iterate(endpoints.TOKEN_NFTS, params, fold=fold, initial=[])
        return result.unwrap()

    async def get_nft_ownership(
        self,
        token_id: str,
        *,
        account_id: str | None = None,
        serials: Collection[int] | None = None,
        exclude: Collection[str] = (),
    ) -> dict[str, list[int]]:
        """Serials held per account, in the order the mirror node lists them."""
        ownership: dict[str, list[int]] = {}
        for nft in await self.get_nfts(
            token_id, account_id=account_id, serials=serials, exclude=exclude
        ):
            if nft.account_id is None:
                continue
            ownership.setdefault(nft.account_id, []).append(nft.serial_number)
        return ownership

    async def get_serials(self, token_id: str) -> list[int]:
        """Serial numbers of every non-deleted NFT of ``token_id``."""
        return [nft.serial_number for nft in await self.get_nfts(token_id)]

    async def get_nft_transactions(
        self, token_id: str, serial: int, *, limit: int = endpoints.DEFAULT_PAGE_SIZE
    ) -> list[NftTransaction]:
        """Full movement history of one serial, newest first."""
        params = {"token_id": token_id, "serial": serial, "limit": limit}
        url = self._url(endpoints.NFT_TRANSACTIONS, params)

        def fold(item: dict[str, Any], acc: list[NftTransaction]) -> None:
            acc.append(_parse(_nft_movement(token_id, serial), item, url))

        result = await self.iterate(endpoints.NFT_TRANSACTIONS, params, fold=fold, initial=[])
        return result.unwrap()

    async def get_last_nft_transaction(self, token_id: str, serial: int) -> NftTransaction | None:
        """Most recent movement of one serial (when the current holder received it)."""
        params = {"token_id": token_id, "serial": serial, "limit": 1}
        result = await self.fetch_json(endpoints.NFT_TRANSACTIONS.url(params))
        transactions = _transactions_of(result)
        if not transactions:
            return None
        return _parse(_nft_movement(token_id, serial), transactions[0], result.url)

    # ------------------------------------------------------------------
    # Accounts and transactions
    # ------------------------------------------------------------------

    async def get_nft_allowances(self, account_id: str) -> list[NftAllowance]:
        params = {"account_id": account_id}
        url = self._url(endpoints.NFT_ALLOWANCES, params)

        def fold(item: dict[str, Any], acc: list[NftAllowance]) -> None:
            acc.append(_parse(NftAllowance.from_mirror, item, url))

        result = await self.iterate(endpoints.NFT_ALLOWANCES, params, fold=fold, initial=[])
        return result.unwrap()

    async def get_transaction(self, transaction_id: str) -> Transaction:
        """Parent transaction for ``transaction_id``.

        Raises:
            EntityNotFoundError: If the mirror node lists no transaction
        """
        url = endpoints.TRANSACTION.url({"transaction_id": transaction_id})
        result = await self.fetch_json(url)
        transactions = _transactions_of(result)
        if not transactions:
            raise EntityNotFoundError(f"Transaction not found: {transaction_id}", transaction_id)
        return _parse(Transaction.model_validate, transactions[0], result.url)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        await self._http.close()

    async def __aenter__(self) -> MirrorNodeClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


def _append(item: Any, acc: list[Any]) -> None:
    acc.append(item)


def _parse(parser: Callable[[dict[str, Any]], T], item: Any, url: str) -> T:
    """Build a model from one response object, as ProtocolError on rejection."""
    if not isinstance(item, dict):
        raise ProtocolError(
            f"Expected a JSON object item from {url}, got {type(item).__name__}", url=url
        )
    try:
        return parser(item)
    except ModelValidationError as e:
        raise ProtocolError(
            f"Unexpected item from {url}: {e.error_count()} invalid field(s)", url=url
        ) from e


def _nft_movement(token_id: str, serial: int) -> Callable[[dict[str, Any]], NftTransaction]:
    def parser(item: dict[str, Any]) -> NftTransaction:
        return NftTransaction.model_validate({**item, "token_id": token_id, "serial_number": serial})

    return parser


def _transactions_of(result: FetchResult) -> list[dict[str, Any]]:
    data = result.unwrap()
    transactions = data.get("transactions") if isinstance(data, dict) else None
    if not isinstance(transactions, list):
        raise ProtocolError(f"Response from {result.url} has no 'transactions' list", url=result.url)
    return transactions
