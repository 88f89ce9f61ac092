"""
Tests for pricing configuration loading.
"""

import io
import json
import logging

import pytest
import yaml

from pricing_config import (
    DEFAULT_CONFIG_PATH,
    PricingConfig,
    configure_pricing_logging,
    get_active_config,
)
from pricing_config.loader import compute_checksum, parse_pricing_config
from pricing_kernel.logging_config import configure_logging, get_logger, reset_logging
from pricing_kernel.selectors.in_memory import InMemoryCatalog
from pricing_services.quote_service import PriceQuoteService


def _write(tmp_path, data) -> str:
    path = tmp_path / "pricing.yaml"
    path.write_text(yaml.safe_dump(data))
    return str(path)


class TestDefaults:

    def test_bundled_defaults(self):
        config = get_active_config()
        assert config.rate_places == 2
        assert config.discount_places == 2
        assert config.effective_rate_places == 4
        assert config.quantity_places is None
        assert config.batch_max_workers == 8
        assert config.log_level == "INFO"
        assert len(config.checksum) == 64

    def test_default_path_exists(self):
        assert DEFAULT_CONFIG_PATH.exists()

    def test_dataclass_defaults_match_file(self):
        loaded = get_active_config()
        assert PricingConfig(checksum=loaded.checksum) == loaded

    def test_config_trace_logged(self, captured_logs):
        get_active_config()
        traces = [r for r in captured_logs() if r["message"] == "PRICING_CONFIG_TRACE"]
        assert traces
        assert traces[0]["config_path"].endswith("defaults.yaml")


class TestOverrides:

    def test_custom_file(self, tmp_path):
        path = _write(tmp_path, {"pricing": {"effective_rate_places": 2, "log_level": "debug"}})
        config = get_active_config(path)
        assert config.effective_rate_places == 2
        assert config.log_level == "DEBUG"
        assert config.rate_places == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_active_config(tmp_path / "nope.yaml")

    def test_missing_section(self, tmp_path):
        with pytest.raises(KeyError):
            get_active_config(_write(tmp_path, {"other": {}}))

    def test_unknown_key_rejected(self, tmp_path):
        with pytest.raises(ValueError, match="Unknown pricing config keys"):
            get_active_config(_write(tmp_path, {"pricing": {"rounding": "bankers"}}))

    @pytest.mark.parametrize(
        "values",
        [
            {"rate_places": -1},
            {"batch_max_workers": 0},
            {"quantity_places": "two"},
            {"log_level": "LOUD"},
        ],
    )
    def test_invalid_values(self, values):
        with pytest.raises(ValueError):
            parse_pricing_config({"pricing": values})

    def test_service_uses_config_places(self, tmp_path):
        config = get_active_config(_write(tmp_path, {"pricing": {"rate_places": 3}}))
        service = PriceQuoteService(InMemoryCatalog(), config=config)
        assert service.config.rate_places == 3


class TestChecksum:

    def test_key_order_irrelevant(self):
        assert compute_checksum({"a": 1, "b": 2}) == compute_checksum({"b": 2, "a": 1})

    def test_value_change_detected(self):
        assert compute_checksum({"a": 1}) != compute_checksum({"a": 2})


class TestLoggingFromConfig:

    def setup_method(self):
        reset_logging()

    def teardown_method(self):
        reset_logging()
        configure_logging(level=logging.DEBUG)

    def test_log_level_applied(self, tmp_path):
        stream = io.StringIO()
        config = get_active_config(_write(tmp_path, {"pricing": {"log_level": "warning"}}))
        configure_pricing_logging(config, stream=stream)

        assert logging.getLogger("pricing_kernel").level == logging.WARNING
        get_logger("test").info("dropped")
        get_logger("test").warning("kept")
        assert [json.loads(line)["message"] for line in stream.getvalue().splitlines()] == ["kept"]
