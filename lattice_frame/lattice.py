"""
Voronoi Lattice

End-to-end generation of a pseudo-random Voronoi lattice trimmed to a
design space.

Algorithm:
1. Validate parameters and classify the design space
2. Bound the design space in the frame of the orientation plane
3. Sample source points inside the design space
4. Partition and trim (see cell_pipeline)
5. Extract the feature edges of every trimmed cell as line struts and
   consolidate them into a clean node/strut network

Adjacent cells share faces, so most edges appear two or three times;
consolidation collapses them into single struts.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np
import trimesh

from lattice_frame.bounds import Plane
from lattice_frame.cell_pipeline import CellPipelineResult, run_cell_pipeline
from lattice_frame.config import DEFAULT_FEATURE_ANGLE_DEGREES, VoronoiLatticeParams
from lattice_frame.curves import LineCurve
from lattice_frame.design_space import DesignSpace
from lattice_frame.errors import EmptyNetworkError, EmptySampleError
from lattice_frame.network import CleanNetworkResult, clean_network
from lattice_frame.sampling import SampleResult, sample_points

logger = logging.getLogger(__name__)


@dataclass
class VoronoiLatticeResult:
    """Result of Voronoi lattice generation."""
    design_space: DesignSpace
    samples: SampleResult
    cells: CellPipelineResult
    # None when strut extraction was not requested
    network: Optional[CleanNetworkResult] = None

    @property
    def fragments(self) -> List[trimesh.Trimesh]:
        return self.cells.fragments


def feature_edges(mesh: trimesh.Trimesh, angle_degrees: float = DEFAULT_FEATURE_ANGLE_DEGREES) -> np.ndarray:
    """
    Edges of a mesh where adjacent faces meet at more than angle_degrees.

    Edges between coplanar triangles of the same polygonal face are dropped.

    Returns:
        (E, 2) array of vertex index pairs
    """
    if len(mesh.faces) == 0:
        return np.zeros((0, 2), dtype=np.int64)
    sharp = mesh.face_adjacency_angles > np.radians(angle_degrees)
    return np.asarray(mesh.face_adjacency_edges[sharp], dtype=np.int64)


def extract_cell_struts(
    fragments: Sequence[trimesh.Trimesh],
    angle_degrees: float = DEFAULT_FEATURE_ANGLE_DEGREES
) -> List[LineCurve]:
    """
    Line struts along the feature edges of every fragment.

    Args:
        fragments: Trimmed cell meshes
        angle_degrees: Minimum dihedral angle for an edge to become a strut

    Returns:
        Line struts (with duplicates across neighbouring cells)
    """
    struts: List[LineCurve] = []
    for fragment in fragments:
        vertices = fragment.vertices
        for a, b in feature_edges(fragment, angle_degrees):
            struts.append(LineCurve(vertices[a], vertices[b]))
    return struts


def generate_voronoi_lattice(
    geometry,
    params: VoronoiLatticeParams,
    plane: Optional[Plane] = None
) -> VoronoiLatticeResult:
    """
    Generate a pseudo-random 3D Voronoi lattice within a design space.

    Args:
        geometry: Design space (Manifold, closed Trimesh or closed primitive)
        params: Validated generation parameters
        plane: Lattice orientation plane (world XY by default)

    Returns:
        VoronoiLatticeResult with samples, trimmed cells and strut network

    Raises:
        InvalidDesignSpaceError: If the design space is not a closed solid
        EmptySampleError: If no sample lands inside the design space
        VoronoiError, BooleanIntersectionError: If a kernel stage fails
        EmptyNetworkError: If strut extraction leaves no valid struts
    """
    logger.info(f"Generating Voronoi lattice: {params.num_points} points, "
                f"tolerance={params.tolerance}, strict={params.strict}")

    # 1. Validate the design space
    design_space = DesignSpace.from_geometry(geometry)

    # 2. & 3. Bound and sample
    box = design_space.bounding_box(plane)
    samples = sample_points(
        design_space,
        params.num_points,
        box=box,
        tol=params.containment_tolerance,
        strict=params.strict,
        seed=params.seed,
        fill_to_count=params.fill_to_count,
        max_rounds=params.max_sampling_rounds
    )
    if samples.is_empty:
        raise EmptySampleError(
            f"None of {samples.candidate_count} candidate points fell inside the design space")

    # 4. Partition and trim
    cells = run_cell_pipeline(
        samples.points,
        design_space,
        scale_factor=params.scale_factor,
        keep_raw_cells=params.keep_raw_cells
    )

    result = VoronoiLatticeResult(design_space=design_space, samples=samples, cells=cells)
    if not params.extract_struts:
        return result

    # 5. Struts from cell edges
    raw_struts = extract_cell_struts(cells.fragments, params.feature_angle_degrees)
    network = clean_network(raw_struts, params.tolerance, model_tolerance=params.model_tolerance)
    if network.is_empty:
        raise EmptyNetworkError(
            f"No struts longer than {params.tolerance} remain from {len(raw_struts)} cell edges")

    result.network = network
    logger.info(f"Voronoi lattice complete: {cells.fragment_count} cells, "
                f"{network.strut_count} struts, {network.node_count} nodes")
    return result
