"""MDAD Fusion Engine — orchestration, alert filtering, live signal buffer.

One engine run:
    1. validate the AlertConfig (fails before any output is produced)
    2. partition the batch into one-hop groups (mdad_cluster)
    3. per group: center, radius, cross-domain flag, fused confidence,
       predicted intents
    4. return ThreatClusters sorted by confidence, highest first
       (stable: builder emission order on ties)

The run is a pure function of (signals, config, now). It holds no state
between calls and is safe to invoke concurrently on separate batches.

Example::

    engine = ThreatFusionEngine(AlertConfig(spatial_radius_km=50))
    result = engine.process(signals)
    for threat in result.clusters:
        rec = recommended_action(threat.confidence_score)
        print(threat.id, threat.confidence_score, rec.priority)
"""

from __future__ import annotations

import logging
import time
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Collection, Iterable, List, Optional, Sequence, Tuple

from .mdad_cluster import build_partition
from .mdad_confidence import count_domains, fuse_confidence, has_cross_domain
from .mdad_geo import cluster_center, cluster_radius
from .mdad_intent import predict_intents
from .mdad_types import (
    DEFAULT_CONFIG, AlertConfig, ClusterStatus, ConfigurationError,
    ResponseRecommendation, Signal, ThreatCluster, to_base36,
)

logger = logging.getLogger(__name__)

ACTIVE_THRESHOLD = 70
ALERT_FEED_LIMIT = 10


def make_cluster_id(now: datetime, seq: int) -> str:
    """THR-<epoch ms base36>-<sequence base36>; unique within one run."""
    ms = int(now.timestamp() * 1000)
    return f"THR-{to_base36(ms)}-{to_base36(seq).rjust(3, '0')}"


# ===== RESULTS =====

@dataclass
class FusionResult:
    """Complete result of one engine run.

    Attributes:
        clusters: ThreatClusters sorted by confidence, highest first
        unclustered: Signals that joined no cluster, in input order
        total_signals: Batch size
        total_time_s: Wall-clock processing time
    """
    clusters: List[ThreatCluster] = field(default_factory=list)
    unclustered: List[Signal] = field(default_factory=list)
    total_signals: int = 0
    total_time_s: float = 0.0


# ===== ENGINE =====

def assemble_cluster(members: Sequence[Signal], cluster_id: str,
                     now: datetime) -> ThreatCluster:
    """Derive every ThreatCluster field from one member group."""
    members = tuple(members)
    center = cluster_center(members)
    cross_domain = has_cross_domain(members)
    confidence = fuse_confidence(members, cross_domain)

    return ThreatCluster(
        id=cluster_id,
        created_at=now,
        updated_at=now,
        center_lat=center[0],
        center_lon=center[1],
        confidence_score=confidence,
        signal_count=len(members),
        domain_mix=count_domains(members),
        signals=members,
        predicted_intents=predict_intents(members),
        status=ClusterStatus.ACTIVE if confidence >= ACTIVE_THRESHOLD else ClusterStatus.MONITORING,
        radius_km=cluster_radius(members, center),
        cross_domain_bonus=cross_domain,
    )


class ThreatFusionEngine:
    """Clusters a signal batch and scores each cluster.

    Args:
        config: AlertConfig; validated on construction and on every run
        clock: Zero-arg callable returning the current aware datetime,
            used for cluster ids and timestamps
    """

    def __init__(self, config: Optional[AlertConfig] = None, clock=None):
        self.config = (config or DEFAULT_CONFIG).validate()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def process(self, signals: Iterable[Signal],
                config: Optional[AlertConfig] = None) -> FusionResult:
        """Run one fusion pass over a batch.

        Args:
            signals: Ordered batch; order decides seeding when
                neighborhoods overlap
            config: Optional per-run override of the engine config

        Returns:
            FusionResult with sorted clusters and the unclustered remainder.

        Raises:
            ConfigurationError: non-positive radius / window
        """
        cfg = (config or self.config).validate()
        t_start = time.perf_counter()
        signals = list(signals)
        now = self._clock()

        partition = build_partition(signals, cfg)
        clusters = [
            assemble_cluster(group, make_cluster_id(now, seq), now)
            for seq, group in enumerate(partition.groups)
        ]
        # sorted() is stable: ties keep builder emission order.
        clusters = sorted(clusters, key=lambda c: c.confidence_score, reverse=True)

        result = FusionResult(
            clusters=clusters,
            unclustered=partition.unclustered,
            total_signals=len(signals),
            total_time_s=time.perf_counter() - t_start,
        )
        logger.info(
            "fusion run: %d signals -> %d clusters (%d unclustered) in %.1f ms",
            result.total_signals, len(clusters), len(result.unclustered),
            result.total_time_s * 1000.0)
        return result


def cluster_signals(signals: Iterable[Signal],
                    config: AlertConfig = DEFAULT_CONFIG,
                    now: Optional[datetime] = None) -> List[ThreatCluster]:
    """Convenience: one engine run, returning only the sorted clusters."""
    clock = (lambda: now) if now is not None else None
    return ThreatFusionEngine(config, clock=clock).process(signals).clusters


# ===== RESPONSE GUIDANCE =====

_RESPONSE_LEVELS: Tuple[Tuple[float, ResponseRecommendation], ...] = (
    (40, ResponseRecommendation(
        "LOW", "Monitor Only - Continue passive surveillance")),
    (70, ResponseRecommendation(
        "MEDIUM", "Prepare Assets - Increase surveillance, brief response units")),
    (90, ResponseRecommendation(
        "HIGH", "Deploy Reconnaissance - Alert units, position assets")),
)
_CRITICAL_RESPONSE = ResponseRecommendation(
    "CRITICAL", "Immediate Response - Activate protocols, engage command")


def recommended_action(confidence: float) -> ResponseRecommendation:
    """Map a confidence score to a priority and recommended action."""
    for upper, rec in _RESPONSE_LEVELS:
        if confidence < upper:
            return rec
    return _CRITICAL_RESPONSE


# ===== ALERTING =====

def filter_alerts(threats: Sequence[ThreatCluster], config: AlertConfig,
                  dismissed: Collection[str] = (),
                  limit: Optional[int] = ALERT_FEED_LIMIT) -> List[ThreatCluster]:
    """Clusters at or above the alert threshold that were not dismissed."""
    out = [t for t in threats
           if t.confidence_score >= config.min_confidence_threshold
           and t.id not in dismissed]
    return out if limit is None else out[:limit]


def active_threats(threats: Sequence[ThreatCluster]) -> List[ThreatCluster]:
    return [t for t in threats if t.confidence_score >= ACTIVE_THRESHOLD]


def monitoring_threats(threats: Sequence[ThreatCluster]) -> List[ThreatCluster]:
    return [t for t in threats if t.confidence_score < ACTIVE_THRESHOLD]


# ===== LIVE BUFFER =====

class SignalBuffer:
    """Newest-first bounded signal store for live re-runs.

    The caller owns scheduling: add signals as they arrive and re-run the
    engine on ``signals`` (debounced on the caller side).

    Args:
        max_signals: Retention cap; oldest-added signals drop first
    """

    def __init__(self, max_signals: int = DEFAULT_CONFIG.max_signals):
        if max_signals < 1:
            raise ConfigurationError(f"max_signals must be >= 1, got {max_signals}")
        self._buf: deque = deque(maxlen=max_signals)

    @property
    def max_signals(self) -> int:
        return self._buf.maxlen

    def add(self, signal: Signal) -> None:
        self._buf.appendleft(signal)

    def extend(self, signals: Iterable[Signal]) -> None:
        """Add in arrival order; the last one ends up newest."""
        for s in signals:
            self.add(s)

    @property
    def signals(self) -> Tuple[Signal, ...]:
        return tuple(self._buf)

    def clear(self) -> None:
        self._buf.clear()

    def __len__(self) -> int:
        return len(self._buf)
