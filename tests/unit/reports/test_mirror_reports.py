"""Unit tests for audit and history reports."""

from __future__ import annotations

import csv
from datetime import UTC, datetime
from decimal import Decimal

from hashscripts.mirror.models import Nft, NftTransaction, Transaction
from hashscripts.mirror.reports import (
    SerialAuditRow,
    format_history_tsv,
    nft_history_rows,
    ownership_audit_rows,
    serial_audit_rows,
    unique_transaction_ids,
    write_nft_history,
    write_ownership_audit,
    write_serial_audit,
)

GENERATED = datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)


def movement(tx_id, serial, ts="1650000001.000000000", receiver="0.0.3", sender="0.0.4"):
    return NftTransaction(
        transaction_id=tx_id,
        consensus_timestamp=ts,
        type="CRYPTOTRANSFER",
        receiver_account_id=receiver,
        sender_account_id=sender,
        token_id="0.0.9",
        serial_number=serial,
    )


def transaction(tx_id, tinybars, nft_legs=1):
    return Transaction.model_validate(
        {
            "transaction_id": tx_id,
            "consensus_timestamp": "1650000001.000000000",
            "nft_transfers": [
                {"token_id": "0.0.9", "serial_number": n + 1} for n in range(nft_legs)
            ],
            "transfers": [
                {"account": "0.0.3", "amount": -tinybars},
                {"account": "0.0.4", "amount": tinybars},
            ],
        }
    )


class TestOwnershipAudit:
    """Test the holdings audit."""

    def test_rows_skip_empty_holders(self):
        rows = ownership_audit_rows("0.0.9", {"0.0.1": 3, "0.0.2": 0, "0.0.3": Decimal("1.5")})
        assert [(r.wallet, r.owned) for r in rows] == [("0.0.1", 3), ("0.0.3", Decimal("1.5"))]

    def test_write(self, tmp_path):
        rows = ownership_audit_rows("0.0.9", {"0.0.1": 3})
        path = write_ownership_audit(tmp_path / "audit.csv", rows, generated_at=GENERATED)

        with open(path, newline="") as f:
            lines = list(csv.reader(f))
        assert lines == [
            ["Wallet", "Token", "Owned", "Timestamp"],
            ["0.0.1", "0.0.9", "3", "2024-01-02T03:04:05+00:00"],
        ]


class TestSerialAudit:
    """Test the per-serial audit."""

    NFTS = [
        Nft(token_id="0.0.9", serial_number=1, account_id="0.0.1"),
        Nft(token_id="0.0.9", serial_number=2, account_id="0.0.2"),
        Nft(token_id="0.0.9", serial_number=3, account_id=None),
    ]

    def test_plain_rows(self):
        rows = serial_audit_rows("0.0.9", self.NFTS)
        assert rows == [
            SerialAuditRow("0.0.1", "0.0.9", 1),
            SerialAuditRow("0.0.2", "0.0.9", 2),
        ]

    def test_hodl_rows_filter_by_epoch_and_label_sender(self):
        holds = {
            1: movement("a", 1, ts="1600000000.000000000", sender="0.0.99"),
            2: movement("b", 2, ts="1700000000.000000000"),
        }
        epoch = datetime(2022, 1, 1, tzinfo=UTC)

        rows = serial_audit_rows(
            "0.0.9", self.NFTS, holds=holds, epoch=epoch, labels={"0.0.99": "MINT/TREASURY (0.0.99)"}
        )

        assert len(rows) == 1
        assert rows[0].serial == 1
        assert rows[0].from_account == "MINT/TREASURY (0.0.99)"
        assert rows[0].held_since == datetime(2020, 9, 13, 12, 26, 40, tzinfo=UTC)

    def test_write_hodl(self, tmp_path):
        rows = [
            SerialAuditRow(
                "0.0.1", "0.0.9", 1, from_account="0.0.4", held_since=datetime(2020, 1, 1, tzinfo=UTC)
            )
        ]
        path = write_serial_audit(tmp_path / "s.csv", rows, generated_at=GENERATED, hodl=True)

        with open(path, newline="") as f:
            lines = list(csv.reader(f))
        assert lines[0] == ["Wallet", "Token", "Serial", "From Account", "HODL Time", "Timestamp"]
        assert lines[1] == [
            "0.0.1",
            "0.0.9",
            "1",
            "0.0.4",
            "2020-01-01T00:00:00+00:00",
            "2024-01-02T03:04:05+00:00",
        ]

    def test_write_plain(self, tmp_path):
        path = write_serial_audit(
            tmp_path / "s.csv", [SerialAuditRow("0.0.1", "0.0.9", 1)], generated_at=GENERATED
        )
        assert path.read_text().splitlines()[0] == "Wallet,Token,Serial,Timestamp"


class TestNftHistory:
    """Test the trade history report."""

    def test_unique_ids_keep_first_seen_order(self):
        moves = [movement("b", 1), movement("a", 2), movement("b", 3)]
        assert unique_transaction_ids(moves) == ["b", "a"]

    def test_threshold_filter(self):
        moves = [movement("paid", 1), movement("gift", 2), movement("orphan", 3)]
        txs = {
            "paid": transaction("paid", 250_000_000, nft_legs=2),
            "gift": transaction("gift", 10_000_000),
        }

        rows = nft_history_rows(moves, txs, threshold_hbar=1)

        assert len(rows) == 1
        row = rows[0]
        assert row.transaction_id == "paid"
        assert row.payment_hbar == Decimal("2.5")
        assert row.package_trade
        assert row.serial == 1

    def test_tsv(self, tmp_path):
        rows = nft_history_rows(
            [movement("paid", 7)], {"paid": transaction("paid", 100_000_000)}, threshold_hbar=1
        )

        text = format_history_tsv(rows)
        header, line = text.splitlines()
        assert header.split("\t") == [
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
        assert line.split("\t") == [
            "0.0.3",
            "0.0.4",
            "0.0.9",
            "7",
            "1",
            "false",
            "CRYPTOTRANSFER",
            "paid",
            "1650000001.000000000",
            "2022-04-15T05:20:01",
        ]

        path = write_nft_history(tmp_path / "h.tsv", rows)
        assert path.read_text() == text
