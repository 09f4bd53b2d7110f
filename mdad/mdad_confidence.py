"""MDAD Confidence Fusion — Bayesian-style cluster scoring.

Combines member confidences into a posterior threat probability, weights
it by mean severity, and adds bonuses for cluster size and cross-domain
corroboration. Output is an integer score in [0, 99].

The combined likelihood is a product over members, so it shrinks as the
cluster grows; the Bayes normalisation keeps the posterior bounded.
"""

from __future__ import annotations

from typing import Dict, Sequence

import numpy as np

from .mdad_types import Domain, Severity, Signal, empty_domain_mix, round_half_up

# ===== CONSTANTS =====
PRIOR_THREAT = 0.10
LIKELIHOOD_SCALE = 0.9
LIKELIHOOD_FLOOR = 0.1
COUNT_BONUS_MAX = 0.15
COUNT_BONUS_SATURATION = 5      # members at which the count bonus saturates
CROSS_DOMAIN_BONUS = 0.20
MAX_SCORE = 99

SEVERITY_WEIGHTS: Dict[Severity, float] = {
    Severity.LOW: 0.6,
    Severity.MEDIUM: 0.8,
    Severity.HIGH: 0.95,
    Severity.CRITICAL: 1.0,
}


def count_domains(signals: Sequence[Signal]) -> Dict[Domain, int]:
    """Member count per domain; every domain key is present."""
    counts = empty_domain_mix()
    for s in signals:
        counts[s.domain] += 1
    return counts


def has_cross_domain(signals: Sequence[Signal]) -> bool:
    """True iff the members span at least two distinct domains."""
    return len({s.domain for s in signals}) >= 2


def combined_likelihood(signals: Sequence[Signal]) -> float:
    """Product of per-signal likelihoods 0.9 * c + 0.1."""
    conf = np.array([s.confidence for s in signals], dtype=float)
    return float(np.prod(LIKELIHOOD_SCALE * conf + LIKELIHOOD_FLOOR))


def bayes_posterior(likelihood: float, prior: float = PRIOR_THREAT) -> float:
    """P(threat | evidence) for a single combined likelihood."""
    evidence = likelihood * prior + (1 - likelihood) * (1 - prior)
    return (likelihood * prior) / evidence


def mean_severity_weight(signals: Sequence[Signal]) -> float:
    return float(np.mean([SEVERITY_WEIGHTS[s.severity] for s in signals]))


def fused_score(signals: Sequence[Signal], cross_domain: bool) -> float:
    """Pre-scale fused score (posterior x severity + bonuses)."""
    n = len(signals)
    posterior = bayes_posterior(combined_likelihood(signals))
    count_bonus = min(n / COUNT_BONUS_SATURATION, 1.0) * COUNT_BONUS_MAX
    domain_bonus = CROSS_DOMAIN_BONUS if cross_domain else 0.0
    return posterior * mean_severity_weight(signals) + count_bonus + domain_bonus


def fuse_confidence(signals: Sequence[Signal], cross_domain: bool) -> int:
    """Cluster confidence score in [0, 99].

    Args:
        signals: Cluster members
        cross_domain: Whether the members span >= 2 domains

    Returns:
        Integer score; 0 for an empty member set.
    """
    if not signals:
        return 0
    score = int(round_half_up(fused_score(signals, cross_domain) * 100))
    return max(0, min(score, MAX_SCORE))
