"""NFT trade history report.

Joins the per-serial movement list with the parent transaction of each
movement to recover what was paid, and keeps movements at or above an hbar
threshold.
"""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from ..models import NftTransaction, Transaction
from ..models.timestamps import to_consensus_timestamp

logger = logging.getLogger(__name__)

HISTORY_HEADER = [
    "Receiver",
    "Sender",
    "Token",
    "Serial",
    "PmtAmount",
    "PkgTrade",
    "Type",
    "txId",
    "EpochTime",
    "DateTime",
]


@dataclass(frozen=True)
class HistoryRow:
    receiver: str
    sender: str
    token_id: str
    serial: int
    payment_hbar: Decimal
    package_trade: bool
    tx_type: str
    transaction_id: str
    consensus_timestamp: datetime

    def as_list(self) -> list[str]:
        return [
            self.receiver,
            self.sender,
            self.token_id,
            str(self.serial),
            format(self.payment_hbar.normalize(), "f"),
            str(self.package_trade).lower(),
            self.tx_type,
            self.transaction_id,
            to_consensus_timestamp(self.consensus_timestamp),
            self.consensus_timestamp.strftime("%Y-%m-%dT%H:%M:%S"),
        ]


def unique_transaction_ids(movements: Iterable[NftTransaction]) -> list[str]:
    """Transaction ids in first-seen order."""
    return list(dict.fromkeys(m.transaction_id for m in movements))


def nft_history_rows(
    movements: Iterable[NftTransaction],
    transactions: Mapping[str, Transaction],
    *,
    threshold_hbar: Decimal | float | int = 1,
) -> list[HistoryRow]:
    """Movements whose parent transaction paid at least ``threshold_hbar``."""
    rows = []
    for movement in movements:
        tx = transactions.get(movement.transaction_id)
        if tx is None:
            logger.debug("history_missing_tx", extra={"transaction_id": movement.transaction_id})
            continue
        if not tx.meets_threshold(threshold_hbar):
            logger.debug(
                "history_below_threshold",
                extra={"transaction_id": tx.transaction_id, "payment_hbar": str(tx.payment_hbar)},
            )
            continue
        rows.append(
            HistoryRow(
                receiver=movement.receiver_account_id or "",
                sender=movement.sender_account_id or "",
                token_id=movement.token_id or "",
                serial=movement.serial_number or 0,
                payment_hbar=tx.payment_hbar,
                package_trade=tx.is_package_trade,
                tx_type=movement.type,
                transaction_id=movement.transaction_id,
                consensus_timestamp=movement.consensus_timestamp,
            )
        )
    return rows


def format_history_tsv(rows: Iterable[HistoryRow]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, delimiter="\t", lineterminator="\n")
    writer.writerow(HISTORY_HEADER)
    for row in rows:
        writer.writerow(row.as_list())
    return buf.getvalue()


def write_nft_history(path: str | Path, rows: Iterable[HistoryRow]) -> Path:
    out = Path(path)
    out.write_text(format_history_tsv(rows), encoding="utf-8")
    logger.info("history_written", extra={"path": str(out)})
    return out
