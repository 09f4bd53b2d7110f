"""MDAD Dashboard Metrics — aggregate view over a batch and its clusters."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import List, Sequence, Tuple

import numpy as np

from .mdad_types import (
    ClusterStatus, DashboardMetrics, Signal, ThreatCluster, empty_domain_mix,
    round_half_up,
)

# (label, inclusive upper bound) over cluster confidence scores
CONFIDENCE_BUCKETS: Tuple[Tuple[str, int], ...] = (
    ("0-20%", 20),
    ("21-40%", 40),
    ("41-60%", 60),
    ("61-80%", 80),
    ("81-100%", 100),
)
TIMELINE_DAYS = 7


def confidence_distribution(threats: Sequence[ThreatCluster]) -> List[Tuple[str, int]]:
    counts = [0] * len(CONFIDENCE_BUCKETS)
    for t in threats:
        for i, (_, upper) in enumerate(CONFIDENCE_BUCKETS):
            if t.confidence_score <= upper or i == len(CONFIDENCE_BUCKETS) - 1:
                counts[i] += 1
                break
    return [(label, c) for (label, _), c in zip(CONFIDENCE_BUCKETS, counts)]


def threat_timeline(signals: Sequence[Signal], now: datetime,
                    days: int = TIMELINE_DAYS) -> List[Tuple[str, int]]:
    """Mean signal confidence (0-100) per calendar day, oldest day first.

    Days are compared in ``now``'s timezone. Days without signals report 0.
    """
    tz = now.tzinfo
    out = []
    for i in range(days - 1, -1, -1):
        day = (now - timedelta(days=i)).date()
        conf = [s.confidence for s in signals
                if s.timestamp.astimezone(tz).date() == day]
        level = int(round_half_up(float(np.mean(conf)) * 100)) if conf else 0
        out.append(((now - timedelta(days=i)).strftime("%a"), level))
    return out


def compute_dashboard_metrics(signals: Sequence[Signal],
                              threats: Sequence[ThreatCluster],
                              now: datetime) -> DashboardMetrics:
    """Build DashboardMetrics for one batch and its engine output.

    Args:
        signals: Batch the clusters were built from
        threats: Engine output
        now: Aware reference instant for the 24h count and the timeline
    """
    last_24h = now - timedelta(hours=24)

    by_domain = empty_domain_mix()
    for s in signals:
        by_domain[s.domain] += 1

    return DashboardMetrics(
        total_active_threats=sum(1 for t in threats if t.status is ClusterStatus.ACTIVE),
        highest_confidence_threat=max((t.confidence_score for t in threats), default=0),
        signals_last_24h=sum(1 for s in signals if s.timestamp >= last_24h),
        cross_domain_correlations=sum(1 for t in threats if t.cross_domain_bonus),
        threats_by_domain=by_domain,
        confidence_distribution=confidence_distribution(threats),
        threat_timeline=threat_timeline(signals, now),
    )
