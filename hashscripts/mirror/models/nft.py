"""NFT data models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .timestamps import parse_consensus_timestamp


class Nft(BaseModel):
    """One serial from ``/api/v1/tokens/{id}/nfts``."""

    token_id: str
    serial_number: int = Field(..., ge=1)
    account_id: str | None = None
    deleted: bool = False
    spender: str | None = None
    metadata: str | None = None
    created_timestamp: datetime | None = None
    modified_timestamp: datetime | None = None

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("created_timestamp", "modified_timestamp", mode="before")
    @classmethod
    def _parse_timestamp(cls, v: Any) -> datetime | None:
        return parse_consensus_timestamp(v)


class NftAllowance(BaseModel):
    """One entry from ``/api/v1/accounts/{id}/allowances/nfts``."""

    owner: str
    spender: str
    token_id: str
    approved_for_all: bool = False
    granted_at: datetime | None = None

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("granted_at", mode="before")
    @classmethod
    def _parse_timestamp(cls, v: Any) -> datetime | None:
        if isinstance(v, dict):
            v = v.get("from")
        return parse_consensus_timestamp(v)

    @classmethod
    def from_mirror(cls, item: dict[str, Any]) -> NftAllowance:
        return cls.model_validate({**item, "granted_at": item.get("timestamp")})
