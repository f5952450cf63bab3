"""Data models."""

from .nft import Nft, NftAllowance
from .timestamps import parse_consensus_timestamp, to_consensus_timestamp
from .token import RoyaltyFee, TokenBalance, TokenInfo, TokenRelationship
from .transaction import HbarTransfer, NftTransaction, NftTransfer, Transaction

__all__ = [
    "TokenInfo",
    "RoyaltyFee",
    "TokenBalance",
    "TokenRelationship",
    "Nft",
    "NftAllowance",
    "NftTransaction",
    "NftTransfer",
    "HbarTransfer",
    "Transaction",
    "parse_consensus_timestamp",
    "to_consensus_timestamp",
]
