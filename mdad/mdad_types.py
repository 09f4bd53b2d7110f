"""MDAD Core Types — Signals, Clusters, Intents, Alert Configuration.

Value types shared by the clustering, fusion and intent modules.
Signals and clusters are frozen dataclasses: the engine never mutates
its inputs and never updates a cluster in place.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Dict, List, Tuple


# ===== EXCEPTIONS =====

class MDADError(Exception):
    """Base class for all MDAD errors."""


class ConfigurationError(MDADError, ValueError):
    """Raised when an AlertConfig violates its invariants."""


class SignalValidationError(MDADError, ValueError):
    """Raised when a Signal is built from out-of-range or malformed values."""


# ===== ENUMS =====

class Domain(Enum):
    """Intelligence discipline of an observation."""
    PHYSICAL = "physical"
    CYBER = "cyber"
    HUMINT = "humint"


class Severity(Enum):
    """Ordinal severity reported by the source."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ThreatTimeline(Enum):
    """Expected onset of a predicted adversary action."""
    IMMINENT = "imminent"          # <24h
    NEAR_TERM = "near-term"        # 24-72h
    MEDIUM_TERM = "medium-term"    # >72h


class AttackVector(Enum):
    """Predicted category of adversary action."""
    CYBER_ATTACK = "cyber-attack"
    PHYSICAL_ASSAULT = "physical-assault"
    RECONNAISSANCE = "reconnaissance"
    SUPPLY_DISRUPTION = "supply-disruption"
    INFILTRATION = "infiltration"
    SABOTAGE = "sabotage"


class TargetType(Enum):
    """Predicted target of adversary action."""
    MILITARY_BASE = "military-base"
    INFRASTRUCTURE = "infrastructure"
    CIVILIAN_AREA = "civilian-area"
    COMMUNICATIONS = "communications"
    SUPPLY_LINE = "supply-line"
    COMMAND_CENTER = "command-center"


class ClusterStatus(Enum):
    """Lifecycle status of a threat cluster."""
    ACTIVE = "active"
    MONITORING = "monitoring"
    RESOLVED = "resolved"


# ===== SIGNAL =====

@dataclass(frozen=True)
class Signal:
    """One atomic, geolocated, timestamped intelligence observation.

    Attributes:
        id: Unique identifier
        timestamp: Timezone-aware instant of observation
        latitude, longitude: Decimal degrees
        domain: Collection discipline
        confidence: Source reliability estimate in [0, 1]
        severity: Reported severity
        description: Free text, used for display and keyword matching
        source_type: Provenance tag (e.g. "RADAR-STATION-ALPHA")
    """
    id: str
    timestamp: datetime
    latitude: float
    longitude: float
    domain: Domain
    confidence: float
    severity: Severity
    description: str = ""
    source_type: str = ""

    def __post_init__(self):
        # Accept plain strings for enums ("cyber", "high") and coerce.
        try:
            if not isinstance(self.domain, Domain):
                object.__setattr__(self, "domain", Domain(self.domain))
            if not isinstance(self.severity, Severity):
                object.__setattr__(self, "severity", Severity(self.severity))
        except ValueError as exc:
            raise SignalValidationError(f"Signal {self.id!r}: {exc}") from exc

        if not isinstance(self.timestamp, datetime):
            raise SignalValidationError(
                f"Signal {self.id!r}: timestamp must be a datetime, "
                f"got {type(self.timestamp).__name__}")
        if self.timestamp.tzinfo is None:
            raise SignalValidationError(
                f"Signal {self.id!r}: timestamp must be timezone-aware")

        try:
            conf = float(self.confidence)
            lat, lon = float(self.latitude), float(self.longitude)
        except (TypeError, ValueError) as exc:
            raise SignalValidationError(f"Signal {self.id!r}: {exc}") from exc

        if not 0.0 <= conf <= 1.0:
            raise SignalValidationError(
                f"Signal {self.id!r}: confidence {conf} outside [0, 1]")
        object.__setattr__(self, "confidence", conf)

        if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
            raise SignalValidationError(
                f"Signal {self.id!r}: position ({lat}, {lon}) out of range")
        object.__setattr__(self, "latitude", lat)
        object.__setattr__(self, "longitude", lon)


# ===== ALERT CONFIG =====

def _is_real(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


@dataclass(frozen=True)
class AlertConfig:
    """Run parameters supplied by the caller.

    Attributes:
        spatial_radius_km: Clustering distance threshold (inclusive)
        temporal_window_hours: Clustering time threshold (inclusive)
        min_confidence_threshold: Alerting threshold (0-100), not used by
            the clustering itself
        enable_auto_refresh: Caller-side live re-run toggle
        refresh_interval_seconds: Caller-side re-run interval
        max_signals: Live signal retention cap
    """
    spatial_radius_km: float = 50.0
    temporal_window_hours: float = 72.0
    min_confidence_threshold: float = 40.0
    enable_auto_refresh: bool = True
    refresh_interval_seconds: float = 30.0
    max_signals: int = 200

    def validate(self) -> "AlertConfig":
        """Raise ConfigurationError if any invariant is violated."""
        for name in ("spatial_radius_km", "temporal_window_hours",
                     "refresh_interval_seconds"):
            value = getattr(self, name)
            if not (_is_real(value) and math.isfinite(value) and value > 0):
                raise ConfigurationError(f"{name} must be a positive number, got {value!r}")
        threshold = self.min_confidence_threshold
        if not (_is_real(threshold) and 0 <= threshold <= 100):
            raise ConfigurationError(
                f"min_confidence_threshold must be within [0, 100], "
                f"got {self.min_confidence_threshold!r}")
        if not (isinstance(self.max_signals, numbers.Integral)
                and not isinstance(self.max_signals, bool) and self.max_signals >= 1):
            raise ConfigurationError(f"max_signals must be >= 1, got {self.max_signals!r}")
        return self

    def updated(self, **changes) -> "AlertConfig":
        """Return a validated copy with the given fields replaced."""
        try:
            new = replace(self, **changes)
        except TypeError as exc:
            raise ConfigurationError(str(exc)) from exc
        return new.validate()

    def summary(self) -> Dict[str, float]:
        return {
            "spatial_radius_km": self.spatial_radius_km,
            "temporal_window_hours": self.temporal_window_hours,
            "min_confidence_threshold": self.min_confidence_threshold,
            "enable_auto_refresh": self.enable_auto_refresh,
            "refresh_interval_seconds": self.refresh_interval_seconds,
            "max_signals": self.max_signals,
        }


DEFAULT_CONFIG = AlertConfig()


# ===== DERIVED OUTPUTS =====

@dataclass(frozen=True)
class PredictedIntent:
    """A predicted adversary intent nested inside a ThreatCluster."""
    vector: AttackVector
    target: TargetType
    probability: float          # 0.0-1.0, rounded to 2 dp
    timeline: ThreatTimeline


@dataclass(frozen=True)
class ThreatCluster:
    """A group of >= 2 spatiotemporally proximate signals with a fused score."""
    id: str
    created_at: datetime
    updated_at: datetime
    center_lat: float
    center_lon: float
    confidence_score: int       # 0-99
    signal_count: int
    domain_mix: Dict[Domain, int] = field(hash=False)
    signals: Tuple[Signal, ...]
    predicted_intents: Tuple[PredictedIntent, ...]
    status: ClusterStatus
    radius_km: float
    cross_domain_bonus: bool


@dataclass(frozen=True)
class ResponseRecommendation:
    """Priority and recommended action for a confidence score."""
    priority: str               # LOW / MEDIUM / HIGH / CRITICAL
    action: str


@dataclass
class DashboardMetrics:
    """Aggregate view over a signal batch and its clusters."""
    total_active_threats: int = 0
    highest_confidence_threat: int = 0
    signals_last_24h: int = 0
    cross_domain_correlations: int = 0
    threats_by_domain: Dict[Domain, int] = field(
        default_factory=lambda: {d: 0 for d in Domain})
    confidence_distribution: List[Tuple[str, int]] = field(default_factory=list)
    threat_timeline: List[Tuple[str, int]] = field(default_factory=list)


def empty_domain_mix() -> Dict[Domain, int]:
    return {d: 0 for d in Domain}


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round with ties away from zero for non-negative values.

    Python's round() uses banker's rounding; confidence scores and
    intent probabilities round half up instead.
    """
    scale = 10 ** ndigits
    return math.floor(value * scale + 0.5) / scale


_BASE36 = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def to_base36(n: int) -> str:
    """Upper-case base-36 digits of a non-negative integer."""
    if n == 0:
        return "0"
    digits = []
    while n:
        n, r = divmod(n, 36)
        digits.append(_BASE36[r])
    return "".join(reversed(digits))
