"""Tests for geography allow-list validation."""

import logging

import pytest

from trends_gateway.services.geo_validator import validate_geo

ALLOWED = ["US", "GB", "CA", "AU", "IN", "DE", "JP", "BR"]


class TestValidateGeo:
    @pytest.mark.parametrize("geo", ALLOWED)
    def test_allowed_geo_passes_through(self, geo):
        assert validate_geo(geo, ALLOWED) == geo

    def test_absent_geo_uses_default(self):
        assert validate_geo(None, ALLOWED) == "US"

    @pytest.mark.parametrize("geo", ["FR", "", "XX", "USA"])
    def test_disallowed_geo_uses_default(self, geo):
        assert validate_geo(geo, ALLOWED) == "US"

    def test_matching_is_case_sensitive(self):
        assert validate_geo("gb", ALLOWED) == "US"

    def test_custom_default(self):
        assert validate_geo("FR", ALLOWED, default="DE") == "DE"

    def test_substitution_logs_warning(self, caplog):
        with caplog.at_level(logging.WARNING):
            validate_geo("FR", ALLOWED)
        assert any("FR" in record.getMessage() for record in caplog.records)
        assert all(record.levelno == logging.WARNING for record in caplog.records)

    def test_allowed_geo_does_not_warn(self, caplog):
        with caplog.at_level(logging.WARNING):
            validate_geo("JP", ALLOWED)
        assert not caplog.records
