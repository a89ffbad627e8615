"""
Point Sampling

Generates pseudo-random source points inside a design space.

Candidates are drawn uniformly inside the design space's bounding box (in the
frame of an orientation plane), independently along each local axis, and
candidates outside the design space are culled. By default a single batch of
the requested size is drawn, so a design space filling a small fraction of its
box yields far fewer points than requested. fill_to_count=True keeps drawing
batches until the requested count is reached or the round limit runs out.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np

from lattice_frame.bounds import OrientedBox, Plane
from lattice_frame.config import DEFAULT_CONTAINMENT_TOLERANCE, DEFAULT_MAX_SAMPLING_ROUNDS
from lattice_frame.design_space import DesignSpace

logger = logging.getLogger(__name__)

SeedLike = Union[None, int, np.random.Generator]


@dataclass
class SampleResult:
    """Result of design space sampling."""
    # Interior points (Nx3), in draw order
    points: np.ndarray
    # Total candidates drawn over all rounds
    candidate_count: int
    # Candidates culled as outside the design space
    exterior_count: int
    # Number of batches drawn
    rounds: int
    # The box candidates were drawn from
    box: Optional[OrientedBox] = None

    @property
    def interior_count(self) -> int:
        return len(self.points)

    @property
    def is_empty(self) -> bool:
        return len(self.points) == 0

    @property
    def yield_ratio(self) -> float:
        """Fraction of candidates that landed inside the design space."""
        if self.candidate_count == 0:
            return 0.0
        return self.interior_count / self.candidate_count


def draw_candidates(box: OrientedBox, count: int, rng: np.random.Generator) -> np.ndarray:
    """Draw count points uniformly inside box (world coordinates)."""
    uvw = rng.random((count, 3))
    local = box.local.min_point + uvw * box.local.size
    return box.plane.to_world(local)


def sample_points(
    design_space: DesignSpace,
    count: int,
    plane: Optional[Plane] = None,
    box: Optional[OrientedBox] = None,
    tol: float = DEFAULT_CONTAINMENT_TOLERANCE,
    strict: bool = False,
    seed: SeedLike = None,
    fill_to_count: bool = False,
    max_rounds: int = DEFAULT_MAX_SAMPLING_ROUNDS
) -> SampleResult:
    """
    Sample points inside a design space.

    Args:
        design_space: Classified design space (see DesignSpace.from_geometry)
        count: Number of candidates to draw (and the target interior count)
        plane: Orientation plane for the bounding box (world XY by default)
        box: Box to draw from; defaults to the design space's bounding box
            in plane
        tol: Containment tolerance
        strict: If True, points within tol of the boundary are culled
        seed: Seed or Generator for reproducible sampling
        fill_to_count: Keep drawing until count interior points exist
        max_rounds: Batch limit when fill_to_count is set

    Returns:
        SampleResult with at most count interior points
    """
    design_space = DesignSpace.from_geometry(design_space)
    if box is None:
        box = design_space.bounding_box(plane)

    if count <= 0:
        logger.warning(f"Sample count must be positive (got {count}); no points drawn")
        return SampleResult(points=np.zeros((0, 3)), candidate_count=0,
                            exterior_count=0, rounds=0, box=box)

    rng = seed if isinstance(seed, np.random.Generator) else np.random.default_rng(seed)

    interior = []
    found = 0
    drawn = 0
    rounds = 0
    batch = count

    while True:
        candidates = draw_candidates(box, batch, rng)
        inside = np.asarray(design_space.contains(candidates, tol, strict), dtype=bool)

        # Stop counting at the candidate that completes count interior points
        hits = np.flatnonzero(inside)
        if len(hits) > count - found:
            cut = int(hits[count - found - 1]) + 1
            candidates, inside = candidates[:cut], inside[:cut]

        interior.append(candidates[inside])
        found += int(inside.sum())
        drawn += len(candidates)
        rounds += 1

        if not fill_to_count or found >= count or rounds >= max_rounds:
            break

        # Size the next batch from the yield observed so far
        remaining = count - found
        ratio = found / drawn
        batch = int(np.ceil(remaining / ratio * 1.1)) if ratio > 0 else 2 * batch
        logger.debug(f"Sampling round {rounds}: {found}/{count} interior, next batch {batch}")

    points = np.vstack(interior)

    result = SampleResult(
        points=points,
        candidate_count=drawn,
        exterior_count=drawn - found,
        rounds=rounds,
        box=box
    )

    logger.info(f"Sampled {result.interior_count} interior points from {drawn} candidates "
                f"({result.yield_ratio:.1%} yield, {rounds} round(s))")
    if fill_to_count and result.interior_count < count:
        logger.warning(f"Only {result.interior_count} of {count} points found "
                       f"after {rounds} rounds")

    return result
