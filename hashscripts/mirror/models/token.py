"""Token data models."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..core.enums import TokenType


def _plain(value: Decimal) -> str:
    return format(value.normalize(), "f")


class RoyaltyFee(BaseModel):
    """Royalty fee attached to an NFT collection."""

    numerator: int = 0
    denominator: int = 0
    collector_account_id: str | None = None
    fallback_amount: int | None = None
    fallback_token_id: str | None = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _flatten(cls, data: Any) -> Any:
        """Accept the nested mirror-node shape ({amount: {...}, fallback_fee: {...}})."""
        if not isinstance(data, dict) or "amount" not in data:
            return data
        amount = data.get("amount") or {}
        fallback = data.get("fallback_fee") or {}
        return {
            "numerator": amount.get("numerator", 0),
            "denominator": amount.get("denominator") or 0,
            "collector_account_id": data.get("collector_account_id"),
            "fallback_amount": fallback.get("amount"),
            "fallback_token_id": fallback.get("denominating_token_id"),
        }

    @property
    def percentage(self) -> Decimal | None:
        if not self.denominator:
            return None
        return Decimal(self.numerator) / Decimal(self.denominator) * 100

    def describe(self) -> str:
        pct = "N/A" if self.percentage is None else f"{_plain(self.percentage)}%"
        if self.fallback_amount is None:
            fallback = "N/A"
        elif self.fallback_token_id:
            fallback = f"{self.fallback_amount} of {self.fallback_token_id}"
        else:
            fallback = f"{_plain(Decimal(self.fallback_amount) / Decimal(10**8))} hbar"
        return f"amount {pct}, fallback {fallback}, paid to {self.collector_account_id or 'N/A'}"


class TokenInfo(BaseModel):
    """Token details from ``/api/v1/tokens/{id}``."""

    token_id: str = Field(..., min_length=1)
    type: TokenType
    name: str = ""
    symbol: str = ""
    decimals: int = Field(default=0, ge=0)
    total_supply: int = 0
    max_supply: int = 0
    supply_type: str | None = None
    treasury_account_id: str | None = None
    royalty_fees: list[RoyaltyFee] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _lift_royalties(cls, data: Any) -> Any:
        if isinstance(data, dict) and "royalty_fees" not in data:
            custom_fees = data.get("custom_fees") or {}
            data = {**data, "royalty_fees": custom_fees.get("royalty_fees") or []}
        return data

    @property
    def is_nft(self) -> bool:
        return self.type is TokenType.NON_FUNGIBLE_UNIQUE

    def scaled(self, amount: int) -> Decimal:
        """Convert a raw balance into whole-token units using ``decimals``."""
        return Decimal(amount).scaleb(-self.decimals)

    def royalty_summary(self) -> str:
        if not self.royalty_fees:
            return "NONE"
        return "; ".join(fee.describe() for fee in self.royalty_fees)


class TokenBalance(BaseModel):
    """One holder from ``/api/v1/tokens/{id}/balances``."""

    account: str
    balance: int
    decimals: int | None = None

    model_config = ConfigDict(frozen=True, extra="ignore")


class TokenRelationship(BaseModel):
    """One token association from ``/api/v1/accounts/{id}/tokens``."""

    token_id: str
    balance: int = 0
    automatic_association: bool = False

    model_config = ConfigDict(frozen=True, extra="ignore")
