"""MDAD Intent Predictor — rule-based adversary intent from cluster composition.

Not a learned model. Each rule is an explicit predicate over the
cluster's domain mix (and, for the physical rule, description keywords)
paired with a builder that produces one intent. All rules are evaluated
independently; the fired intents are ranked by probability and the top
three are kept.

Rules, in evaluation order:
    cyber_attack       cyber > 0 and cyber >= physical
    physical           physical > 0 (reconnaissance if keywords match)
    infiltration       humint >= 2
    supply_disruption  cyber > 0 and physical > 0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence, Tuple

from .mdad_confidence import count_domains
from .mdad_types import (
    AttackVector, Domain, PredictedIntent, Severity, Signal, TargetType,
    ThreatTimeline, round_half_up,
)

MAX_INTENTS = 3
RECON_KEYWORDS: Tuple[str, ...] = ("reconnaissance", "surveillance", "photographing")


@dataclass(frozen=True)
class IntentContext:
    """Features a rule may look at, computed once per cluster."""
    signals: Tuple[Signal, ...]
    domain_mix: Dict[Domain, int]
    total: int
    has_critical: bool
    recon_match: bool

    @property
    def cyber(self) -> int:
        return self.domain_mix[Domain.CYBER]

    @property
    def physical(self) -> int:
        return self.domain_mix[Domain.PHYSICAL]

    @property
    def humint(self) -> int:
        return self.domain_mix[Domain.HUMINT]

    @classmethod
    def from_signals(cls, signals: Sequence[Signal]) -> "IntentContext":
        signals = tuple(signals)
        return cls(
            signals=signals,
            domain_mix=count_domains(signals),
            total=len(signals),
            has_critical=any(s.severity is Severity.CRITICAL for s in signals),
            recon_match=matches_recon_keywords(signals),
        )


@dataclass(frozen=True)
class IntentRule:
    """Predicate -> intent mapping."""
    name: str
    applies: Callable[[IntentContext], bool]
    build: Callable[[IntentContext], PredictedIntent]


def matches_recon_keywords(signals: Sequence[Signal]) -> bool:
    """Case-insensitive substring match of any description against RECON_KEYWORDS."""
    for s in signals:
        text = (s.description or "").lower()
        if any(k in text for k in RECON_KEYWORDS):
            return True
    return False


# ===== RULE BUILDERS =====

def _cyber_attack(ctx: IntentContext) -> PredictedIntent:
    return PredictedIntent(
        vector=AttackVector.CYBER_ATTACK,
        target=TargetType.COMMUNICATIONS,
        probability=0.3 + (ctx.cyber / ctx.total) * 0.4,
        timeline=ThreatTimeline.IMMINENT if ctx.has_critical else ThreatTimeline.NEAR_TERM,
    )


def _physical(ctx: IntentContext) -> PredictedIntent:
    recon = ctx.recon_match
    return PredictedIntent(
        vector=AttackVector.RECONNAISSANCE if recon else AttackVector.PHYSICAL_ASSAULT,
        target=TargetType.MILITARY_BASE,
        probability=0.25 + (ctx.physical / ctx.total) * 0.35,
        timeline=ThreatTimeline.MEDIUM_TERM if recon else ThreatTimeline.NEAR_TERM,
    )


def _infiltration(ctx: IntentContext) -> PredictedIntent:
    return PredictedIntent(
        vector=AttackVector.INFILTRATION,
        target=TargetType.COMMAND_CENTER,
        probability=0.2 + (ctx.humint / ctx.total) * 0.3,
        timeline=ThreatTimeline.NEAR_TERM,
    )


def _supply_disruption(ctx: IntentContext) -> PredictedIntent:
    return PredictedIntent(
        vector=AttackVector.SUPPLY_DISRUPTION,
        target=TargetType.SUPPLY_LINE,
        # capped at 1.0 for large mixed clusters
        probability=min(0.15 + min(ctx.cyber, ctx.physical) * 0.1, 1.0),
        timeline=ThreatTimeline.NEAR_TERM,
    )


INTENT_RULES: Tuple[IntentRule, ...] = (
    IntentRule("cyber_attack",
               lambda c: c.cyber > 0 and c.cyber >= c.physical,
               _cyber_attack),
    IntentRule("physical",
               lambda c: c.physical > 0,
               _physical),
    IntentRule("infiltration",
               lambda c: c.humint >= 2,
               _infiltration),
    IntentRule("supply_disruption",
               lambda c: c.cyber > 0 and c.physical > 0,
               _supply_disruption),
)


def fired_rules(signals: Sequence[Signal],
                rules: Sequence[IntentRule] = INTENT_RULES) -> List[str]:
    """Names of the rules whose predicate holds, in rule order."""
    if not signals:
        return []
    ctx = IntentContext.from_signals(signals)
    return [r.name for r in rules if r.applies(ctx)]


def predict_intents(signals: Sequence[Signal],
                    rules: Sequence[IntentRule] = INTENT_RULES) -> Tuple[PredictedIntent, ...]:
    """Top intents for a cluster, highest probability first.

    Ranking uses the unrounded probabilities (stable on ties, rule order);
    the kept intents are then rounded to 2 decimals.

    Args:
        signals: Cluster members
        rules: Ordered rule set

    Returns:
        0-3 PredictedIntent.
    """
    if not signals:
        return ()

    ctx = IntentContext.from_signals(signals)
    intents = [r.build(ctx) for r in rules if r.applies(ctx)]
    intents.sort(key=lambda i: i.probability, reverse=True)

    return tuple(
        PredictedIntent(i.vector, i.target, round_half_up(i.probability, 2), i.timeline)
        for i in intents[:MAX_INTENTS]
    )
