"""Tests for MDAD value types and AlertConfig validation."""

from datetime import datetime, timezone

import numpy as np
import pytest
import sys, os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from mdad.mdad_types import (
    AlertConfig, ConfigurationError, DEFAULT_CONFIG, Domain, MDADError,
    Severity, Signal, SignalValidationError, round_half_up, to_base36,
)

T0 = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


class TestSignal:

    def test_string_enums_coerced(self):
        s = Signal("a", T0, 48.0, 37.0, "cyber", 0.5, "critical")
        assert s.domain is Domain.CYBER
        assert s.severity is Severity.CRITICAL

    def test_frozen(self):
        s = Signal("a", T0, 48.0, 37.0, Domain.CYBER, 0.5, Severity.LOW)
        with pytest.raises(AttributeError):
            s.confidence = 0.9

    @pytest.mark.parametrize("kwargs", [
        {"confidence": 1.2},
        {"confidence": -0.01},
        {"domain": "sigint"},
        {"severity": "extreme"},
        {"latitude": 91.0},
        {"longitude": -181.0},
        {"timestamp": datetime(2024, 3, 1)},
        {"timestamp": "2024-03-01T00:00:00Z"},
        {"confidence": None},
        {"latitude": None},
        {"longitude": "east"},
    ])
    def test_invalid_values(self, kwargs):
        fields = dict(id="a", timestamp=T0, latitude=48.0, longitude=37.0,
                      domain="physical", confidence=0.5, severity="medium")
        fields.update(kwargs)
        with pytest.raises(SignalValidationError):
            Signal(**fields)

    def test_error_hierarchy(self):
        assert issubclass(SignalValidationError, ValueError)
        assert issubclass(ConfigurationError, MDADError)


class TestBase36:

    def test_digits(self):
        assert to_base36(0) == "0"
        assert to_base36(35) == "Z"
        assert to_base36(36) == "10"


class TestAlertConfig:

    def test_defaults(self):
        cfg = DEFAULT_CONFIG
        assert cfg.spatial_radius_km == 50
        assert cfg.temporal_window_hours == 72
        assert cfg.min_confidence_threshold == 40
        assert cfg.max_signals == 200
        assert cfg.validate() is cfg

    @pytest.mark.parametrize("kwargs", [
        {"spatial_radius_km": 0},
        {"temporal_window_hours": -1},
        {"refresh_interval_seconds": 0},
        {"min_confidence_threshold": 120},
        {"max_signals": 0},
        {"spatial_radius_km": float("inf")},
        {"spatial_radius_km": True},
        {"temporal_window_hours": "72"},
        {"min_confidence_threshold": None},
        {"min_confidence_threshold": float("nan")},
        {"max_signals": None},
        {"max_signals": 2.5},
        {"max_signals": True},
    ])
    def test_validate_rejects(self, kwargs):
        with pytest.raises(ConfigurationError):
            AlertConfig(**kwargs).validate()

    def test_numpy_scalars_accepted(self):
        cfg = AlertConfig(spatial_radius_km=np.int64(50), temporal_window_hours=np.float64(24),
                          min_confidence_threshold=np.int32(40), max_signals=np.int64(100))
        assert cfg.validate() is cfg

    def test_updated_partial(self):
        cfg = DEFAULT_CONFIG.updated(spatial_radius_km=25)
        assert cfg.spatial_radius_km == 25
        assert cfg.temporal_window_hours == DEFAULT_CONFIG.temporal_window_hours
        assert DEFAULT_CONFIG.spatial_radius_km == 50

    def test_updated_validates(self):
        with pytest.raises(ConfigurationError):
            DEFAULT_CONFIG.updated(temporal_window_hours=0)

    def test_updated_unknown_field(self):
        with pytest.raises(ConfigurationError):
            DEFAULT_CONFIG.updated(radius=10)

    def test_summary(self):
        assert DEFAULT_CONFIG.summary()["spatial_radius_km"] == 50


class TestRounding:

    @pytest.mark.parametrize("value,ndigits,expected", [
        (39.5, 0, 40), (40.5, 0, 41), (39.49, 0, 39), (0.125, 2, 0.13), (0.5, 0, 1),
    ])
    def test_half_up(self, value, ndigits, expected):
        assert round_half_up(value, ndigits) == pytest.approx(expected)
