"""NFT trade history export.

Walks the movement history of every requested serial, looks up the parent
transaction of each movement and keeps those that paid at least the hbar
threshold. Output is a TSV file named ``{token}_Transactions_{time}.tsv``
or, with ``--console``, standard output.
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
from ..reports import format_history_tsv, nft_history_rows, unique_transaction_ids, write_nft_history
from ..utils import configure_logging, parse_serials, validate_entity_id

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="mirror-nft-history",
        description="Export the paid trade history of an NFT collection",
    )
    p.add_argument("-t", "--token", required=True, help="NFT token id")
    p.add_argument(
        "-s", "--serials", help="serials: single (4), list (4,9,11) or range (2-8); default all"
    )
    p.add_argument(
        "--threshold",
        type=Decimal,
        default=Decimal(1),
        help="skip transactions paying less than this many hbar (default: 1)",
    )
    p.add_argument("--console", action="store_true", help="print the TSV instead of writing a file")
    p.add_argument("--output-dir", type=Path, default=Path("."), help="where the TSV file goes")
    p.add_argument("--network", choices=[n.value for n in Network], help="public network to query")
    p.add_argument("-v", "--verbose", action="store_true", help="log every request")
    return p


async def run(
    args: argparse.Namespace,
    client: MirrorNodeClient,
    *,
    out: TextIO | None = None,
    now: datetime | None = None,
) -> int:
    if out is None:
        out = sys.stdout
    token_id = validate_entity_id(args.token)
    info = await client.get_token_info(token_id)
    if not info.is_nft:
        raise ValidationError(f"Token {token_id} is not an NFT ({info.type.value})")

    serials = parse_serials(args.serials)
    if not serials:
        logger.info("history_all_serials", extra={"token_id": token_id})
        serials = await client.get_serials(token_id)

    histories = await client.fan_out(
        client.get_nft_transactions(token_id, serial) for serial in serials
    )
    movements = [movement for history in histories for movement in history]
    tx_ids = unique_transaction_ids(movements)
    logger.debug("history_transactions", extra={"token_id": token_id, "count": len(tx_ids)})

    transactions = await client.fan_out(client.get_transaction(tx_id) for tx_id in tx_ids)
    rows = nft_history_rows(
        movements, dict(zip(tx_ids, transactions, strict=True)), threshold_hbar=args.threshold
    )

    if args.console:
        out.write(format_history_tsv(rows))
        return 0

    stamp = (now or datetime.now(UTC)).strftime("%Y%m%dT%H%M%SZ")
    path = write_nft_history(args.output_dir / f"{token_id}_Transactions_{stamp}.tsv", rows)
    print(f"Transaction file created: {path} ({len(rows)} rows)", file=out)
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
        logger.error("nft_history_failed", extra={"error": str(e)})
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
