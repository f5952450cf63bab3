"""Ownership audit CSV output."""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from ..models import Nft, NftTransaction

logger = logging.getLogger(__name__)

OWNERSHIP_HEADER = ["Wallet", "Token", "Owned", "Timestamp"]
SERIAL_HEADER = ["Wallet", "Token", "Serial", "Timestamp"]
SERIAL_HODL_HEADER = ["Wallet", "Token", "Serial", "From Account", "HODL Time", "Timestamp"]


@dataclass(frozen=True)
class OwnershipRow:
    wallet: str
    token_id: str
    owned: int | Decimal


@dataclass(frozen=True)
class SerialAuditRow:
    """One serial held by one wallet; hold fields are set for hodl audits."""

    wallet: str
    token_id: str
    serial: int
    from_account: str | None = None
    held_since: datetime | None = None


def ownership_audit_rows(token_id: str, holdings: dict[str, int | Decimal]) -> list[OwnershipRow]:
    """Rows for holders with a positive balance."""
    return [
        OwnershipRow(wallet=wallet, token_id=token_id, owned=owned)
        for wallet, owned in holdings.items()
        if owned > 0
    ]


def serial_audit_rows(
    token_id: str,
    nfts: Iterable[Nft],
    *,
    holds: Mapping[int, NftTransaction | None] | None = None,
    epoch: datetime | None = None,
    labels: Mapping[str, str] | None = None,
) -> list[SerialAuditRow]:
    """Rows for each serial; with ``holds``, serials received after ``epoch`` are dropped.

    ``labels`` renames well-known sender accounts (treasury, escrow) in the
    ``From Account`` column.
    """
    labels = labels or {}
    rows = []
    for nft in nfts:
        if nft.account_id is None:
            continue
        if holds is None:
            rows.append(SerialAuditRow(nft.account_id, token_id, nft.serial_number))
            continue
        last = holds.get(nft.serial_number)
        if last is None:
            continue
        if epoch is not None and last.consensus_timestamp > epoch:
            continue
        sender = last.sender_account_id or ""
        rows.append(
            SerialAuditRow(
                nft.account_id,
                token_id,
                nft.serial_number,
                from_account=labels.get(sender, sender),
                held_since=last.consensus_timestamp,
            )
        )
    return rows


def write_ownership_audit(
    path: str | Path, rows: Iterable[OwnershipRow], *, generated_at: datetime
) -> Path:
    stamp = generated_at.isoformat()
    return _write_csv(
        path,
        OWNERSHIP_HEADER,
        ([row.wallet, row.token_id, row.owned, stamp] for row in rows),
    )


def write_serial_audit(
    path: str | Path,
    rows: Iterable[SerialAuditRow],
    *,
    generated_at: datetime,
    hodl: bool = False,
) -> Path:
    stamp = generated_at.isoformat()
    if hodl:
        header = SERIAL_HODL_HEADER
        lines = (
            [
                row.wallet,
                row.token_id,
                row.serial,
                row.from_account or "",
                row.held_since.isoformat() if row.held_since else "",
                stamp,
            ]
            for row in rows
        )
    else:
        header = SERIAL_HEADER
        lines = ([row.wallet, row.token_id, row.serial, stamp] for row in rows)
    return _write_csv(path, header, lines)


def _write_csv(path: str | Path, header: list[str], lines: Iterable[list[object]]) -> Path:
    out = Path(path)
    with open(out, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        count = 0
        for line in lines:
            writer.writerow(line)
            count += 1
    logger.info("audit_written", extra={"path": str(out), "rows": count})
    return out
