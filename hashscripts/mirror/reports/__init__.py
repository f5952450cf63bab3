"""Report writers for ownership audits and NFT trade history."""

from .audit import (
    OwnershipRow,
    SerialAuditRow,
    ownership_audit_rows,
    serial_audit_rows,
    write_ownership_audit,
    write_serial_audit,
)
from .history import (
    HistoryRow,
    format_history_tsv,
    nft_history_rows,
    unique_transaction_ids,
    write_nft_history,
)

__all__ = [
    "OwnershipRow",
    "SerialAuditRow",
    "ownership_audit_rows",
    "serial_audit_rows",
    "write_ownership_audit",
    "write_serial_audit",
    "HistoryRow",
    "nft_history_rows",
    "unique_transaction_ids",
    "format_history_tsv",
    "write_nft_history",
]
