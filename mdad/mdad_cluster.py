"""MDAD Cluster Builder — single-pass greedy spatiotemporal grouping.

Each unprocessed signal, in input order, acts as a seed. Its one-hop
neighborhood (unprocessed signals within the spatial radius AND the
temporal window, seed included) becomes a group when it has >= 2
members. There is no transitive expansion to neighbors-of-neighbors:
this is not DBSCAN, and downstream signal counts and radii depend on
the one-hop behavior.

A seed whose neighborhood is too small is not marked processed and can
still be absorbed by a later seed. Input order decides which signal
seeds first when neighborhoods overlap.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Set, Tuple

import numpy as np

from .mdad_geo import distances_from, within_temporal_window
from .mdad_types import AlertConfig, Signal

logger = logging.getLogger(__name__)

MIN_CLUSTER_SIZE = 2


@dataclass
class ClusterPartition:
    """Result of one builder pass.

    Attributes:
        groups: Member tuples, in emission order (each >= 2 signals)
        unclustered: Signals that ended up in no group, in input order
    """
    groups: List[Tuple[Signal, ...]] = field(default_factory=list)
    unclustered: List[Signal] = field(default_factory=list)

    @property
    def n_clustered(self) -> int:
        return sum(len(g) for g in self.groups)


def find_neighbors(seed: Signal, signals: Sequence[Signal],
                   processed: Set[int], config: AlertConfig) -> List[int]:
    """Indices of unprocessed signals within both thresholds of the seed.

    Args:
        seed: Signal at the neighborhood center
        signals: Full batch
        processed: Indices already assigned to a group
        config: Spatial / temporal thresholds (inclusive)

    Returns:
        Indices in input order.
    """
    dist = distances_from(seed.latitude, seed.longitude, signals)
    out = []
    for i in np.flatnonzero(dist <= config.spatial_radius_km):
        i = int(i)
        if i in processed:
            continue
        if within_temporal_window(seed, signals[i], config.temporal_window_hours):
            out.append(i)
    return out


def build_partition(signals: Sequence[Signal], config: AlertConfig) -> ClusterPartition:
    """Partition a batch into disjoint one-hop groups.

    Processed state is tracked by batch index and is local to this call.
    """
    signals = list(signals)
    processed: Set[int] = set()
    result = ClusterPartition()

    for idx, seed in enumerate(signals):
        if idx in processed:
            continue

        members = find_neighbors(seed, signals, processed, config)
        if len(members) < MIN_CLUSTER_SIZE:
            continue

        processed.update(members)
        result.groups.append(tuple(signals[i] for i in members))
        logger.debug("seed %s formed group of %d signals", seed.id, len(members))

    result.unclustered = [s for i, s in enumerate(signals) if i not in processed]
    return result
