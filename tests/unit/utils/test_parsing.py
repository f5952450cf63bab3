"""Unit tests for input parsing helpers."""

from __future__ import annotations

import logging

import pytest

from hashscripts.mirror.core import ValidationError
from hashscripts.mirror.utils import (
    configure_logging,
    parse_accounts,
    parse_serials,
    validate_entity_id,
)


class TestParseSerials:
    """Test parse_serials."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("7", [7]),
            ("2,5,10", [2, 5, 10]),
            ("1-5", [1, 2, 3, 4, 5]),
            ("3-3", [3]),
            (" 4 ", [4]),
            (None, []),
            ("", []),
        ],
    )
    def test_valid(self, value, expected):
        assert parse_serials(value) == expected

    @pytest.mark.parametrize("value", ["5-1", "0", "a,b", "1-x", "-3"])
    def test_invalid(self, value):
        with pytest.raises(ValidationError):
            parse_serials(value)


class TestEntityIds:
    """Test entity id parsing."""

    def test_validate(self):
        assert validate_entity_id(" 0.0.1234 ") == "0.0.1234"

    @pytest.mark.parametrize("value", ["0.0", "abc", "0.0.x", "1234"])
    def test_validate_invalid(self, value):
        with pytest.raises(ValidationError):
            validate_entity_id(value)

    def test_parse_accounts(self):
        assert parse_accounts("0.0.1,0.0.2") == ["0.0.1", "0.0.2"]
        assert parse_accounts("0.0.1") == ["0.0.1"]
        assert parse_accounts(None) == []


class TestConfigureLogging:
    """Test configure_logging."""

    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        root = logging.getLogger()
        level, handlers = root.level, root.handlers[:]
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_level(self):
        configure_logging("WARNING")
        assert logging.getLogger().level == logging.WARNING

    def test_verbose_forces_debug(self):
        configure_logging("ERROR", verbose=True)
        assert logging.getLogger().level == logging.DEBUG
