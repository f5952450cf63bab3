"""Token ownership lookup.

Examples:
    mirror-ownership -t 0.0.1234                      # every holder of a token
    mirror-ownership -w 0.0.5678 --zero               # empty associations of a wallet
    mirror-ownership -t 0.0.1234 -s 1-10 --royalties  # holders of serials 1..10
    mirror-ownership -t 0.0.1234 --audit-serials --hodl --epoch 1700000000
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import UTC, datetime
from decimal import Decimal
from pathlib import Path
from typing import TextIO

from ..api import MirrorNodeClient
from ..config import MirrorSettings, get_settings
from ..core.enums import Network
from ..core.exceptions import MirrorError, ValidationError
from ..models import TokenInfo
from ..reports import (
    OwnershipRow,
    SerialAuditRow,
    ownership_audit_rows,
    serial_audit_rows,
    write_ownership_audit,
    write_serial_audit,
)
from ..utils import configure_logging, parse_accounts, parse_serials, validate_entity_id

logger = logging.getLogger(__name__)

# Marketplace escrow that holds listed NFTs on mainnet.
ZUSE_ESCROW = "0.0.690356"


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="mirror-ownership",
        description="Show who holds a token, or which tokens a wallet holds",
    )
    p.add_argument("-t", "--token", help="token id, or comma separated token ids")
    p.add_argument("-w", "--wallet", help="wallet to inspect (all tokens when -t is omitted)")
    p.add_argument(
        "-s", "--serials", help="NFT serials: single (7), list (2,5,10) or range (1-10)"
    )
    p.add_argument("--exclude", help="comma separated wallets to leave out")
    p.add_argument(
        "--threshold", type=Decimal, default=Decimal(1), help="minimum holding to show"
    )
    p.add_argument("--zero", action="store_true", help="only associations with zero balance")
    p.add_argument("-r", "--royalties", action="store_true", help="show token royalties")
    p.add_argument("--audit", action="store_true", help="write a holdings audit CSV")
    p.add_argument("--audit-serials", action="store_true", help="write a per-serial audit CSV")
    p.add_argument(
        "--hodl", action="store_true", help="with --audit-serials, add when each serial arrived"
    )
    p.add_argument(
        "--epoch",
        type=float,
        help="with --hodl, drop serials received after this unix time",
    )
    p.add_argument("--output-dir", type=Path, default=Path("."), help="where audit files go")
    p.add_argument("--network", choices=[n.value for n in Network], help="public network to query")
    p.add_argument("-v", "--verbose", action="store_true", help="log every request")
    return p


def _account_label(account: str, info: TokenInfo) -> str:
    if account == info.treasury_account_id:
        return f"**TSRY**{account}**TSRY**"
    if account == ZUSE_ESCROW:
        return f"ZUSE ESCROW ({ZUSE_ESCROW})"
    return account


def _describe(info: TokenInfo, amount: Decimal | int, serials: list[int] | None) -> str:
    if not info.is_nft:
        return f"**FC** {info.name} -> {amount:,} of {info.token_id} tokens **FC**"
    if not serials:
        return f"{info.name} -> {info.token_id}@ **EMPTY ASSOCIATION**"
    return f"{info.name} -> {info.token_id}@{','.join(str(s) for s in serials)}"


async def run(
    args: argparse.Namespace,
    client: MirrorNodeClient,
    *,
    out: TextIO | None = None,
    now: datetime | None = None,
) -> int:
    """Run one ownership lookup against ``client``; returns the exit status."""
    if out is None:
        out = sys.stdout
    started = now or datetime.now(UTC)
    if args.token is None and args.wallet is None:
        raise ValidationError("Specify a token (-t) or a wallet (-w)")
    if args.serials and args.token is None:
        raise ValidationError("Checking serials needs a token (-t)")
    exclude = parse_accounts(args.exclude)
    serials = parse_serials(args.serials)
    wallet = validate_entity_id(args.wallet) if args.wallet else None
    threshold = Decimal(0) if args.zero else args.threshold
    epoch = datetime.fromtimestamp(args.epoch, tz=UTC) if args.epoch is not None else started

    whole_wallet = args.token is None
    if whole_wallet:
        token_ids = await client.get_tokens_in_wallet(wallet, zero_only=args.zero)
    else:
        token_ids = [validate_entity_id(t) for t in args.token.split(",") if t.strip()]

    audit_rows: list[OwnershipRow] = []
    serial_rows: list[SerialAuditRow] = []
    wallet_total = Decimal(0)
    wallet_collections = 0
    wallet_empty = 0

    for token_id in token_ids:
        logger.debug("processing_token", extra={"token_id": token_id})
        info = await client.get_token_info(token_id)

        if not info.is_nft:
            if serials:
                raise ValidationError(
                    f"Serials can only be checked for NFTs; {token_id} is {info.type.value}"
                )
            balances = await client.get_token_balances(
                token_id, account_id=wallet, exclude=exclude
            )
            holdings = {acct: info.scaled(raw) for acct, raw in balances.items()}
            serial_lists = {}
        elif args.audit_serials:
            nfts = await client.get_nfts(token_id, serials=serials or None, exclude=exclude)
            holds = None
            if args.hodl:
                lasts = await client.fan_out(
                    client.get_last_nft_transaction(token_id, nft.serial_number) for nft in nfts
                )
                holds = {nft.serial_number: last for nft, last in zip(nfts, lasts, strict=True)}
            labels = {ZUSE_ESCROW: f"ZUSE ({ZUSE_ESCROW})"}
            if info.treasury_account_id:
                labels[info.treasury_account_id] = f"MINT/TREASURY ({info.treasury_account_id})"
            serial_rows.extend(
                serial_audit_rows(token_id, nfts, holds=holds, epoch=epoch, labels=labels)
            )
            continue
        else:
            ownership = await client.get_nft_ownership(
                token_id, account_id=wallet, serials=serials or None, exclude=exclude
            )
            holdings = {acct: len(owned) for acct, owned in ownership.items()}
            serial_lists = ownership

        if wallet is not None and wallet not in holdings:
            holdings[wallet] = 0

        if args.audit:
            audit_rows.extend(ownership_audit_rows(token_id, holdings))
            continue

        for account, amount in holdings.items():
            if not (wallet is None or account == wallet or serials):
                continue
            if amount < threshold:
                if whole_wallet:
                    wallet_empty += 1
                continue
            if whole_wallet:
                wallet_total += amount
                wallet_collections += 1
            line = f"Account {_account_label(account, info)} owns {amount:,}"
            if args.royalties:
                line += f" -> Royalties: {info.royalty_summary()}"
            print(f"{line} -> {_describe(info, amount, serial_lists.get(account))}", file=out)

        if not whole_wallet:
            total = sum(holdings.values(), Decimal(0))
            print(f"Found {total:,} of {token_id} across {len(holdings)} wallet(s)", file=out)

    if whole_wallet:
        print(
            f"Found {wallet_total:,} tokens [unique collections -> {wallet_collections}"
            f" & zero owned but associated {wallet_empty}] for {wallet}",
            file=out,
        )

    stamp = started.strftime("%Y%m%dT%H%M%SZ")
    if args.audit:
        path = write_ownership_audit(
            args.output_dir / f"auditOutput{stamp}.csv", audit_rows, generated_at=started
        )
        print(f"Audit file created: {path}", file=out)
    elif args.audit_serials:
        path = write_serial_audit(
            args.output_dir / f"auditOutput{stamp}.csv",
            serial_rows,
            generated_at=started,
            hodl=args.hodl,
        )
        print(f"Audit file created: {path}", file=out)
    return 0


async def _main(args: argparse.Namespace, settings: MirrorSettings) -> int:
    network = Network(args.network) if args.network else None
    client = MirrorNodeClient.from_settings(settings, network=network, verbose=args.verbose)
    async with client:
        return await run(args, client)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level, verbose=args.verbose)
    try:
        return asyncio.run(_main(args, settings))
    except MirrorError as e:
        logger.error("ownership_failed", extra={"error": str(e)})
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
