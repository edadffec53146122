import pytest

from exchanges.btcmarkets.errors import ConfigError
from exchanges.btcmarkets.pairs import normalize_pairs, split_pair
from exchanges.btcmarkets.schemas import to_exchange_units
from exchanges.btcmarkets.settings import BtcMarketsSettings


def test_split_pair_uses_fixed_width_convention():
    assert split_pair("BTCAUD") == ("BTC", "AUD")
    assert split_pair(" ethaud ") == ("ETH", "AUD")


@pytest.mark.parametrize("symbol", ["BTC", "BTCAUDD", "BTC/AU", "", "DOGEAUD"])
def test_split_pair_rejects_out_of_convention_symbols(symbol):
    with pytest.raises(ConfigError):
        split_pair(symbol)


def test_normalize_pairs_dedupes_and_keeps_order():
    assert normalize_pairs(["ltcaud", "BTCAUD", "LTCAUD", " "]) == ["LTCAUD", "BTCAUD"]


def test_to_exchange_units():
    assert to_exchange_units(0.01) == 1_000_000
    assert to_exchange_units(45000) == 4_500_000_000_000


def test_settings_defaults_match_exchange_defaults(monkeypatch):
    for name in ("BTCMARKETS_FEE", "BTCMARKETS_POLLING_DELAY", "BTCMARKETS_ENABLED"):
        monkeypatch.delenv(name, raising=False)

    settings = BtcMarketsSettings()

    assert settings.name == "BTC Markets"
    assert settings.fee == 0.85
    assert settings.polling_delay == 10.0
    assert settings.enabled is True
    assert settings.verbose is False
    assert settings.websocket is False
    assert settings.authenticated_api_support is False


def test_settings_from_env_overrides_config(monkeypatch):
    monkeypatch.setenv("BTCMARKETS_ENABLED_PAIRS", "btcaud, ethaud")
    monkeypatch.setenv("BTCMARKETS_POLLING_DELAY", "3")
    monkeypatch.setenv("BTCMARKETS_VERBOSE", "yes")
    monkeypatch.setenv("BTCMARKETS_API_KEY", "key")
    monkeypatch.setenv("BTCMARKETS_API_SECRET", "c2VjcmV0")
    monkeypatch.setenv("BTCMARKETS_REPORTING_CURRENCY", "eur")

    settings = BtcMarketsSettings.from_env()

    assert settings.enabled_pairs == ["BTCAUD", "ETHAUD"]
    assert settings.polling_delay == 3.0
    assert settings.verbose is True
    assert settings.reporting_currency == "EUR"
    assert settings.authenticated_api_support is True


def test_public_view_hides_credentials():
    settings = BtcMarketsSettings(api_key="key", api_secret="c2VjcmV0", enabled_pairs=["BTCAUD"])

    view = settings.public_view()

    assert "api_key" not in view and "api_secret" not in view
    assert view["authenticated_api_support"] is True
    assert view["enabled_pairs"] == ["BTCAUD"]
