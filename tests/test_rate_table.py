"""Tests for strategy/rate_table.py."""

from __future__ import annotations

from decimal import Decimal

import pytest

from config.chains import DEFAULT_CHAINS, ETH_PLACEHOLDER_ADDRESS
from core.exceptions import ConfigurationError
from strategy.rate_table import RateTable

from .helpers import DAI, ETH, USDT, WETH

SEPOLIA = DEFAULT_CHAINS[11155111]


@pytest.fixture
def table() -> RateTable:
    return RateTable.default(DEFAULT_CHAINS)


class TestDefaultRates:

    def test_eth_to_usdt(self, table: RateTable):
        assert table.rate(1, ETH, USDT) == Decimal("3100")

    def test_usdt_to_eth(self, table: RateTable):
        assert table.rate(1, USDT, ETH) == Decimal("0.0004")

    def test_native_and_wrapped_share_rate(self, table: RateTable):
        assert table.rate(1, WETH, USDT) == table.rate(1, ETH, USDT)
        assert table.rate(1, ETH_PLACEHOLDER_ADDRESS, USDT) == Decimal("3100")

    def test_lookup_ignores_case(self, table: RateTable):
        assert table.rate(1, WETH.lower(), USDT.upper().replace("0X", "0x")) == Decimal("3100")

    def test_rates_are_per_chain(self, table: RateTable):
        assert table.rate(11155111, ETH, SEPOLIA.usdt) == Decimal("3100")
        # Mainnet USDT is not a sepolia token.
        assert table.rate(11155111, ETH, USDT) == Decimal("0")

    def test_missing_pair_is_zero(self, table: RateTable):
        assert table.rate(1, ETH, DAI) == Decimal("0")
        assert table.supports(1, ETH, DAI) is False
        assert table.supports(1, ETH, USDT) is True


class TestConstruction:

    def test_non_positive_rate_rejected(self):
        with pytest.raises(ConfigurationError, match="must be positive"):
            RateTable(DEFAULT_CHAINS, {(1, WETH, DAI): Decimal("0")})

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "rates.yaml"
        path.write_text(
            "rates:\n"
            f"  - chain_id: 1\n    from: \"{WETH}\"\n    to: \"{DAI}\"\n    rate: \"3050.5\"\n"
            f"  - chain_id: 1\n    from: \"{DAI}\"\n    to: \"{ETH}\"\n    rate: 0.0003\n"
        )
        table = RateTable.from_yaml(path, DEFAULT_CHAINS)
        assert len(table) == 2
        assert table.rate(1, ETH, DAI) == Decimal("3050.5")
        assert table.rate(1, DAI, WETH) == Decimal("0.0003")
        assert table.rate(1, ETH, USDT) == Decimal("0")

    def test_from_yaml_invalid_entry(self, tmp_path):
        path = tmp_path / "rates.yaml"
        path.write_text("rates:\n  - chain_id: 1\n    from: \"0xabc\"\n")
        with pytest.raises(ConfigurationError, match="invalid rate entry"):
            RateTable.from_yaml(path, DEFAULT_CHAINS)

    def test_from_yaml_empty_file(self, tmp_path):
        path = tmp_path / "rates.yaml"
        path.write_text("")
        assert len(RateTable.from_yaml(path, DEFAULT_CHAINS)) == 0
