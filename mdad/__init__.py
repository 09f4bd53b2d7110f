"""MDAD: Multi-domain threat fusion — spatiotemporal clustering of intelligence signals.

Groups physical, cyber and HUMINT signals into threat clusters, scores
each cluster with a Bayesian-style fusion and predicts adversary intent
from the cluster's domain mix.

Quick Start::

    from mdad import AlertConfig, cluster_signals, recommended_action
    threats = cluster_signals(signals, AlertConfig(spatial_radius_km=50))
    for t in threats:
        print(t.id, t.confidence_score, recommended_action(t.confidence_score).priority)
"""

__version__ = "1.0.0"
__license__ = "AGPL-3.0-or-later"

# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------
from .mdad_types import (
    MDADError,
    ConfigurationError,
    SignalValidationError,
    Domain,
    Severity,
    ThreatTimeline,
    AttackVector,
    TargetType,
    ClusterStatus,
    Signal,
    AlertConfig,
    DEFAULT_CONFIG,
    PredictedIntent,
    ThreatCluster,
    ResponseRecommendation,
    DashboardMetrics,
)

# ---------------------------------------------------------------------------
# Engine — geometry, clustering, fusion, intent
# ---------------------------------------------------------------------------
from .mdad_geo import (
    haversine_km,
    within_temporal_window,
    cluster_center,
    cluster_radius,
)
from .mdad_cluster import (
    ClusterPartition,
    build_partition,
    find_neighbors,
)
from .mdad_confidence import (
    fuse_confidence,
    has_cross_domain,
    count_domains,
    SEVERITY_WEIGHTS,
)
from .mdad_intent import (
    IntentRule,
    INTENT_RULES,
    predict_intents,
)
from .mdad_engine import (
    ThreatFusionEngine,
    FusionResult,
    cluster_signals,
    recommended_action,
    filter_alerts,
    active_threats,
    monitoring_threats,
    SignalBuffer,
)

# ---------------------------------------------------------------------------
# Metrics, reporting, datasets
# ---------------------------------------------------------------------------
from .mdad_metrics import compute_dashboard_metrics
from .mdad_report import build_report, export_report, threats_to_frame
from .mdad_datasets import SignalCSVAdapter, SyntheticSignalGenerator

__all__ = [
    "__version__",
    # Errors
    "MDADError", "ConfigurationError", "SignalValidationError",
    # Types
    "Domain", "Severity", "ThreatTimeline", "AttackVector", "TargetType",
    "ClusterStatus", "Signal", "AlertConfig", "DEFAULT_CONFIG",
    "PredictedIntent", "ThreatCluster", "ResponseRecommendation", "DashboardMetrics",
    # Geometry
    "haversine_km", "within_temporal_window", "cluster_center", "cluster_radius",
    # Clustering / fusion / intent
    "ClusterPartition", "build_partition", "find_neighbors",
    "fuse_confidence", "has_cross_domain", "count_domains", "SEVERITY_WEIGHTS",
    "IntentRule", "INTENT_RULES", "predict_intents",
    # Engine
    "ThreatFusionEngine", "FusionResult", "cluster_signals", "recommended_action",
    "filter_alerts", "active_threats", "monitoring_threats", "SignalBuffer",
    # Metrics / reporting / datasets
    "compute_dashboard_metrics", "build_report", "export_report", "threats_to_frame",
    "SignalCSVAdapter", "SyntheticSignalGenerator",
]
