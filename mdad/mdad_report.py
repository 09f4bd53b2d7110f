"""MDAD Report Export — JSON report and tabular cluster view.

The JSON layout uses camelCase keys so it can be consumed by the
dashboard front end unchanged.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Sequence

from .mdad_types import DashboardMetrics, PredictedIntent, Signal, ThreatCluster

logger = logging.getLogger(__name__)

REPORT_SIGNAL_LIMIT = 50


def _intent_dict(intent: PredictedIntent) -> Dict[str, Any]:
    return {
        "vector": intent.vector.value,
        "target": intent.target.value,
        "probability": intent.probability,
        "timeline": intent.timeline.value,
    }


def metrics_dict(metrics: DashboardMetrics) -> Dict[str, Any]:
    return {
        "totalActiveThreats": metrics.total_active_threats,
        "highestConfidenceThreat": metrics.highest_confidence_threat,
        "signalsLast24h": metrics.signals_last_24h,
        "crossDomainCorrelations": metrics.cross_domain_correlations,
        "threatsByDomain": {d.value: n for d, n in metrics.threats_by_domain.items()},
        "confidenceDistribution": [
            {"range": r, "count": c} for r, c in metrics.confidence_distribution],
        "threatTimeline": [
            {"date": d, "level": lvl} for d, lvl in metrics.threat_timeline],
    }


def threat_dict(threat: ThreatCluster) -> Dict[str, Any]:
    return {
        "id": threat.id,
        "confidence": threat.confidence_score,
        "location": {"lat": threat.center_lat, "lon": threat.center_lon},
        "signalCount": threat.signal_count,
        "domainMix": {d.value: n for d, n in threat.domain_mix.items()},
        "predictedIntents": [_intent_dict(i) for i in threat.predicted_intents],
        "status": threat.status.value,
    }


def signal_dict(signal: Signal) -> Dict[str, Any]:
    return {
        "id": signal.id,
        "timestamp": signal.timestamp.isoformat(),
        "domain": signal.domain.value,
        "confidence": signal.confidence,
        "severity": signal.severity.value,
        "description": signal.description,
    }


def build_report(metrics: DashboardMetrics, threats: Sequence[ThreatCluster],
                 signals: Sequence[Signal],
                 exported_at: Optional[datetime] = None) -> Dict[str, Any]:
    """JSON-serialisable report: metrics, all clusters, first 50 signals."""
    exported_at = exported_at or datetime.now(timezone.utc)
    return {
        "exportedAt": exported_at.isoformat(),
        "metrics": metrics_dict(metrics),
        "threats": [threat_dict(t) for t in threats],
        "signals": [signal_dict(s) for s in list(signals)[:REPORT_SIGNAL_LIMIT]],
    }


def default_report_name(exported_at: datetime) -> str:
    return f"mdad-report-{int(exported_at.timestamp() * 1000)}.json"


def export_report(path: Optional[str], metrics: DashboardMetrics,
                  threats: Sequence[ThreatCluster], signals: Sequence[Signal],
                  exported_at: Optional[datetime] = None) -> str:
    """Write the report as indented JSON.

    Args:
        path: Output file, or a directory (default name is used inside it),
            or None for the default name in the current directory

    Returns:
        Path written.
    """
    exported_at = exported_at or datetime.now(timezone.utc)
    if path is None:
        path = default_report_name(exported_at)
    elif os.path.isdir(path):
        path = os.path.join(path, default_report_name(exported_at))

    report = build_report(metrics, threats, signals, exported_at)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(report, f, indent=2)
    logger.info("report written to %s (%d threats)", path, len(threats))
    return path


def threats_to_frame(threats: Sequence[ThreatCluster]):
    """One row per cluster as a pandas DataFrame (requires the viz extra)."""
    import pandas as pd

    rows = []
    for t in threats:
        top = t.predicted_intents[0] if t.predicted_intents else None
        rows.append({
            "id": t.id,
            "confidence": t.confidence_score,
            "status": t.status.value,
            "center_lat": t.center_lat,
            "center_lon": t.center_lon,
            "radius_km": t.radius_km,
            "signal_count": t.signal_count,
            "cross_domain": t.cross_domain_bonus,
            **{f"n_{d.value}": n for d, n in t.domain_mix.items()},
            "top_intent": top.vector.value if top else None,
            "top_probability": top.probability if top else None,
        })
    columns = ["id", "confidence", "status", "center_lat", "center_lon",
               "radius_km", "signal_count", "cross_domain",
               "n_physical", "n_cyber", "n_humint",
               "top_intent", "top_probability"]
    return pd.DataFrame(rows, columns=columns)
