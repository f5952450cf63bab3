"""Utility functions."""

from .log_config import configure_logging
from .parsing import parse_accounts, parse_serials, validate_entity_id

__all__ = ["configure_logging", "parse_accounts", "parse_serials", "validate_entity_id"]
