"""
Network Consolidation

Converts an unordered, possibly redundant collection of strut curves into a
clean lattice graph of unique nodes and unique struts.

Consolidation steps for every input strut:
1. Reject null, invalid and too-short curves (the minimum length is the
   larger of the user tolerance and 100x the model tolerance)
2. Reparametrize the curve to the unit domain [0, 1]
3. Resolve both endpoints to node indices through a SpatialIndex, creating
   nodes on first encounter
4. Reject the strut as a duplicate only if an already accepted strut joins the
   same (unordered) node pair AND has the same midpoint within tolerance

Two curves sharing both endpoints are not duplicates by themselves; two arcs
bulging in different directions between the same nodes are both kept.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from lattice_frame.config import DEFAULT_MODEL_TOLERANCE, MIN_LENGTH_FACTOR
from lattice_frame.curves import StrutCurve
from lattice_frame.spatial_index import MatchPolicy, SpatialIndex, epsilon_equals

logger = logging.getLogger(__name__)


class StrutRejection(Enum):
    """Reasons a strut is dropped during consolidation."""
    NULL = "null curve"
    INVALID = "invalid geometry"
    SHORT = "shorter than minimum length"
    DUPLICATE = "duplicate strut"


@dataclass(frozen=True)
class SkippedStrut:
    """An input strut dropped during consolidation."""
    index: int  # Position in the input list
    reason: StrutRejection


@dataclass
class CleanNetworkResult:
    """Result of network consolidation."""
    # Unique struts, unitized to [0, 1], in input order
    struts: List[StrutCurve]
    # Unique node positions (Nx3), in first-encounter order
    nodes: np.ndarray
    # (start node, end node) for each strut, 1:1 with struts
    node_pairs: List[Tuple[int, int]]
    # Every dropped input strut, in input order
    skipped: List[SkippedStrut] = field(default_factory=list)

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def strut_count(self) -> int:
        return len(self.struts)

    @property
    def is_empty(self) -> bool:
        return len(self.struts) == 0

    def skipped_count(self, reason: Optional[StrutRejection] = None) -> int:
        """Number of skipped struts, optionally for a single reason."""
        if reason is None:
            return len(self.skipped)
        return sum(1 for s in self.skipped if s.reason is reason)


def minimum_strut_length(tol: float, model_tolerance: float = DEFAULT_MODEL_TOLERANCE) -> float:
    """
    Minimum accepted strut length.

    Very small user tolerances fall back to MIN_LENGTH_FACTOR times the model
    tolerance so that degenerate micro-struts never enter the lattice.
    """
    return max(tol, MIN_LENGTH_FACTOR * model_tolerance)


def _rejection_reason(strut: Optional[StrutCurve], min_length: float) -> Optional[StrutRejection]:
    if strut is None:
        return StrutRejection.NULL
    if not strut.is_valid:
        return StrutRejection.INVALID
    if strut.is_short(min_length):
        return StrutRejection.SHORT
    return None


def clean_network(
    struts: Sequence[Optional[StrutCurve]],
    tol: float,
    model_tolerance: float = DEFAULT_MODEL_TOLERANCE,
    match: MatchPolicy = epsilon_equals
) -> CleanNetworkResult:
    """
    Remove duplicate, invalid and tiny struts and build the node graph.

    Never raises for bad input curves; every dropped strut is reported in
    the result's skipped list instead.

    Args:
        struts: Raw strut curves (None entries are allowed and skipped)
        tol: Spatial tolerance for node identity and midpoint comparison,
            also the minimum strut length
        model_tolerance: Absolute model tolerance; struts shorter than
            100x this value are rejected even when tol is smaller
        match: Node matching policy forwarded to the SpatialIndex

    Returns:
        CleanNetworkResult with unique struts, nodes and node pairs
    """
    min_length = minimum_strut_length(tol, model_tolerance)
    index = SpatialIndex(match=match)

    clean_struts: List[StrutCurve] = []
    node_pairs: List[Tuple[int, int]] = []
    skipped: List[SkippedStrut] = []
    # Unordered node pair -> positions in clean_struts
    pair_lookup: Dict[Tuple[int, int], List[int]] = defaultdict(list)

    for i, strut in enumerate(struts):
        reason = _rejection_reason(strut, min_length)
        if reason is not None:
            skipped.append(SkippedStrut(i, reason))
            continue

        strut = strut.unitized()

        start_node = index.lookup_or_insert(strut.start, tol)
        end_node = index.lookup_or_insert(strut.end, tol)
        key = (min(start_node, end_node), max(start_node, end_node))

        midpoint = strut.point_at(0.5)
        is_duplicate = any(
            match(midpoint, clean_struts[j].point_at(0.5), tol)
            for j in pair_lookup.get(key, ())
        )
        if is_duplicate:
            skipped.append(SkippedStrut(i, StrutRejection.DUPLICATE))
            continue

        pair_lookup[key].append(len(clean_struts))
        clean_struts.append(strut)
        node_pairs.append((start_node, end_node))

    result = CleanNetworkResult(
        struts=clean_struts,
        nodes=index.points,
        node_pairs=node_pairs,
        skipped=skipped
    )

    logger.info(f"Network cleaned: {len(struts)} input struts -> "
                f"{result.strut_count} struts, {result.node_count} nodes")
    if skipped:
        logger.debug(
            f"Skipped struts: "
            f"{result.skipped_count(StrutRejection.NULL)} null, "
            f"{result.skipped_count(StrutRejection.INVALID)} invalid, "
            f"{result.skipped_count(StrutRejection.SHORT)} short, "
            f"{result.skipped_count(StrutRejection.DUPLICATE)} duplicate"
        )

    return result
