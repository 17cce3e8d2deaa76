"""Tests for adapter configuration and logging setup."""

import logging

import pytest
from pydantic import ValidationError
from yaqlib import AdapterConfig, RequestDefaults, allow_4xx_statuses, setup_logging


class TestRequestDefaults:
    """Tests for RequestDefaults."""

    def test_empty_defaults_match_baseline(self):
        """Test empty defaults produce the baseline options."""
        options = RequestDefaults().to_options()
        assert options.method == "GET"
        assert len(options.headers) == 0
        assert options.allowed_statuses == ()

    def test_to_options(self):
        """Test all fields carry over to RequestOptions."""
        defaults = RequestDefaults(
            method="patch",
            headers={"Accept": "application/json"},
            content_type="application/json",
            allowed_statuses=[404, allow_4xx_statuses],
            only_allowed_statuses=True,
        )
        options = defaults.to_options()

        assert options.method == "PATCH"
        assert options.headers.get("accept") == "application/json"
        assert options.headers.content_type == "application/json"
        assert options.allowed_statuses == (404, allow_4xx_statuses)
        assert options.only_allowed_statuses is True

    def test_rejects_invalid_headers(self):
        """Test header input is validated."""
        with pytest.raises(ValidationError):
            RequestDefaults(headers="Accept: */*")

    def test_rejects_unknown_fields(self):
        """Test extra fields are forbidden."""
        with pytest.raises(ValidationError):
            RequestDefaults(allowedStatues=[404])


class TestAdapterConfig:
    """Tests for AdapterConfig."""

    def test_from_yaml(self):
        """Test loading config from YAML."""
        config = AdapterConfig.from_yaml(
            """
base_url: https://api.example.com/
defaults:
  headers:
    Accept: application/json
    X-Multi: [a, b]
  allowed_statuses: [404]
"""
        )
        options = config.defaults.to_options()

        assert config.base_url == "https://api.example.com/"
        assert options.headers.get_all("x-multi") == ["a", "b"]
        assert options.is_status_allowed(404)

    def test_from_yaml_file(self, tmp_path):
        """Test loading config from a YAML file."""
        path = tmp_path / "adapter.yaml"
        path.write_text("base_url: http://localhost:8080/\n")

        config = AdapterConfig.from_yaml_file(path)
        assert config.base_url == "http://localhost:8080/"
        assert config.defaults == RequestDefaults()

    def test_empty_yaml(self):
        """Test an empty document gives the default config."""
        assert AdapterConfig.from_yaml("") == AdapterConfig()


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_configures_yaqlib_logger(self, tmp_path):
        """Test handlers, level and propagation."""
        log_file = tmp_path / "yaqlib.log"
        logger = setup_logging(level="debug", log_file=str(log_file), force=True)

        try:
            assert logger.name == "yaqlib"
            assert logger.level == logging.DEBUG
            assert logger.propagate is False
            assert len(logger.handlers) == 2

            logging.getLogger("yaqlib.adapter").debug("hello")
            for handler in logger.handlers:
                handler.flush()
            assert "hello" in log_file.read_text()
        finally:
            for handler in list(logger.handlers):
                logger.removeHandler(handler)
                handler.close()
            logger.propagate = True

    def test_does_not_duplicate_handlers(self):
        """Test repeated setup keeps a single handler."""
        logger = setup_logging(force=True)
        try:
            setup_logging()
            assert len(logger.handlers) == 1
        finally:
            for handler in list(logger.handlers):
                logger.removeHandler(handler)
            logger.propagate = True
