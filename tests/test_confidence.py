"""Tests for MDAD Bayesian confidence fusion.

pytest tests/test_confidence.py -v
"""

import math
from datetime import datetime, timezone

import pytest
import sys, os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from mdad.mdad_confidence import (
    fuse_confidence, fused_score, combined_likelihood, bayes_posterior,
    mean_severity_weight, count_domains, has_cross_domain,
    SEVERITY_WEIGHTS, PRIOR_THREAT,
)
from mdad.mdad_types import Domain, Severity, Signal

T0 = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_signal(sid, domain="physical", confidence=0.5, severity="medium"):
    return Signal(id=sid, timestamp=T0, latitude=48.0, longitude=37.0,
                  domain=domain, confidence=confidence, severity=severity)


def reference_score(confs, severities, cross_domain):
    """Direct transcription of the fusion formula."""
    L = 1.0
    for c in confs:
        L *= 0.9 * c + 0.1
    prior = 0.10
    posterior = (L * prior) / (L * prior + (1 - L) * (1 - prior))
    weights = {"low": 0.6, "medium": 0.8, "high": 0.95, "critical": 1.0}
    sev = sum(weights[s] for s in severities) / len(severities)
    score = posterior * sev + min(len(confs) / 5, 1) * 0.15 + (0.20 if cross_domain else 0)
    return min(math.floor(score * 100 + 0.5), 99)


# ============================================================
# DOMAIN COMPOSITION
# ============================================================

class TestDomainComposition:

    def test_count_domains_all_keys(self):
        mix = count_domains([make_signal("a", "cyber"), make_signal("b", "cyber")])
        assert mix == {Domain.PHYSICAL: 0, Domain.CYBER: 2, Domain.HUMINT: 0}

    def test_cross_domain_true(self):
        assert has_cross_domain([make_signal("a", "cyber"), make_signal("b", "humint")])

    def test_cross_domain_false(self):
        assert not has_cross_domain([make_signal("a", "cyber"), make_signal("b", "cyber")])

    def test_cross_domain_empty(self):
        assert not has_cross_domain([])


# ============================================================
# FUSION COMPONENTS
# ============================================================

class TestFusionComponents:

    def test_severity_weights(self):
        assert SEVERITY_WEIGHTS[Severity.LOW] == 0.6
        assert SEVERITY_WEIGHTS[Severity.MEDIUM] == 0.8
        assert SEVERITY_WEIGHTS[Severity.HIGH] == 0.95
        assert SEVERITY_WEIGHTS[Severity.CRITICAL] == 1.0

    def test_likelihood_product(self):
        sigs = [make_signal("a", confidence=0.8), make_signal("b", confidence=0.7)]
        assert combined_likelihood(sigs) == pytest.approx(0.82 * 0.73)

    def test_likelihood_floor(self):
        """Zero-confidence signals still contribute likelihood 0.1."""
        assert combined_likelihood([make_signal("a", confidence=0.0)]) == pytest.approx(0.1)

    def test_posterior_certain(self):
        assert bayes_posterior(1.0) == pytest.approx(1.0)

    def test_posterior_uninformative(self):
        """L = 0.5 -> evidence 0.5 -> posterior 0.1."""
        assert bayes_posterior(0.5) == pytest.approx(PRIOR_THREAT)

    def test_mean_severity(self):
        sigs = [make_signal("a", severity="low"), make_signal("b", severity="critical")]
        assert mean_severity_weight(sigs) == pytest.approx(0.8)


# ============================================================
# FUSED SCORE
# ============================================================

class TestFuseConfidence:

    def test_two_signal_cross_domain_scenario(self):
        """physical 0.8 + cyber 0.7, both high, cross-domain."""
        sigs = [make_signal("a", "physical", 0.8, "high"),
                make_signal("b", "cyber", 0.7, "high")]
        expected = reference_score([0.8, 0.7], ["high", "high"], True)
        assert fuse_confidence(sigs, True) == expected
        assert expected == 40

    def test_same_domain_no_bonus(self):
        sigs = [make_signal("a", "physical", 0.8, "high"),
                make_signal("b", "physical", 0.7, "high")]
        assert fuse_confidence(sigs, False) == reference_score([0.8, 0.7], ["high", "high"], False)
        assert fuse_confidence(sigs, False) == 20

    def test_domain_bonus_is_twenty_points(self):
        sigs = [make_signal("a", confidence=0.6), make_signal("b", confidence=0.4)]
        assert fused_score(sigs, True) - fused_score(sigs, False) == pytest.approx(0.20)

    def test_count_bonus_saturates(self):
        five = [make_signal(str(i), confidence=1.0, severity="critical") for i in range(5)]
        ten = [make_signal(str(i), confidence=1.0, severity="critical") for i in range(10)]
        assert fused_score(five, False) == pytest.approx(1.15)
        assert fused_score(ten, False) == pytest.approx(1.15)

    def test_capped_at_99(self):
        sigs = [make_signal(str(i), confidence=1.0, severity="critical") for i in range(8)]
        assert fuse_confidence(sigs, True) == 99

    def test_empty_is_zero(self):
        assert fuse_confidence([], False) == 0

    @pytest.mark.parametrize("confs,sevs,cross", [
        ([0.2, 0.3], ["low", "low"], False),
        ([0.9, 0.85, 0.95], ["critical", "high", "critical"], True),
        ([0.5] * 6, ["medium"] * 6, False),
        ([0.15, 0.95, 0.4, 0.6], ["low", "critical", "medium", "high"], True),
    ])
    def test_matches_formula(self, confs, sevs, cross):
        sigs = [make_signal(str(i), confidence=c, severity=s)
                for i, (c, s) in enumerate(zip(confs, sevs))]
        score = fuse_confidence(sigs, cross)
        assert score == reference_score(confs, sevs, cross)
        assert 0 <= score <= 99
        assert isinstance(score, int)

    def test_low_confidence_member_lowers_posterior(self):
        strong = [make_signal("a", confidence=0.9), make_signal("b", confidence=0.9)]
        diluted = strong[:1] + [make_signal("c", confidence=0.1)]
        assert fused_score(diluted, False) < fused_score(strong, False)
