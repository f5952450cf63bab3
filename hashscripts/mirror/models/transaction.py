"""Transaction data models."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .timestamps import parse_consensus_timestamp

TINYBARS_PER_HBAR = Decimal(100_000_000)


class NftTransaction(BaseModel):
    """One movement of a serial, from ``/api/v1/tokens/{id}/nfts/{serial}/transactions``."""

    transaction_id: str
    consensus_timestamp: datetime
    type: str = ""
    receiver_account_id: str | None = None
    sender_account_id: str | None = None
    is_approval: bool = False
    token_id: str | None = None
    serial_number: int | None = None

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("consensus_timestamp", mode="before")
    @classmethod
    def _parse_timestamp(cls, v: Any) -> datetime | None:
        return parse_consensus_timestamp(v)


class NftTransfer(BaseModel):
    """NFT leg of a transaction."""

    token_id: str
    serial_number: int
    sender_account_id: str | None = None
    receiver_account_id: str | None = None
    is_approval: bool = False

    model_config = ConfigDict(frozen=True, extra="ignore")


class HbarTransfer(BaseModel):
    """Hbar leg of a transaction, amount in tinybars (negative = debit)."""

    account: str
    amount: int
    is_approval: bool = False

    model_config = ConfigDict(frozen=True, extra="ignore")


class Transaction(BaseModel):
    """Transaction details from ``/api/v1/transactions/{id}``."""

    transaction_id: str
    consensus_timestamp: datetime
    name: str = ""
    result: str = ""
    scheduled: bool = False
    charged_tx_fee: int = 0
    nft_transfers: list[NftTransfer] = Field(default_factory=list)
    transfers: list[HbarTransfer] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("consensus_timestamp", mode="before")
    @classmethod
    def _parse_timestamp(cls, v: Any) -> datetime | None:
        return parse_consensus_timestamp(v)

    @field_validator("nft_transfers", "transfers", mode="before")
    @classmethod
    def _null_as_empty(cls, v: Any) -> Any:
        return v or []

    @property
    def payment_tinybars(self) -> int:
        """Amount of the first debit leg; a trade is assumed to carry one payment."""
        for transfer in self.transfers:
            if transfer.amount < 0:
                return -transfer.amount
        return 0

    @property
    def payment_hbar(self) -> Decimal:
        return Decimal(self.payment_tinybars) / TINYBARS_PER_HBAR

    @property
    def is_package_trade(self) -> bool:
        return len(self.nft_transfers) > 1

    def meets_threshold(self, hbar: Decimal | float | int) -> bool:
        return self.payment_hbar >= Decimal(str(hbar))
