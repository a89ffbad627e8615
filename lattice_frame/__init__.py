# Strut-and-node lattice generation: network consolidation and Voronoi cells
from lattice_frame.errors import (
    LatticeError,
    InvalidDesignSpaceError,
    EmptySampleError,
    EmptyNetworkError,
    PipelineStageError,
    VoronoiError,
    BooleanIntersectionError,
)
from lattice_frame.config import (
    VoronoiLatticeParams,
    configure_logging,
    DEFAULT_MODEL_TOLERANCE,
    DEFAULT_CONTAINMENT_TOLERANCE,
    DEFAULT_SCALE_FACTOR,
)
from lattice_frame.spatial_index import SpatialIndex, epsilon_equals, within_radius
from lattice_frame.curves import StrutCurve, LineCurve, PolylineCurve, ArcCurve
from lattice_frame.network import (
    clean_network,
    minimum_strut_length,
    CleanNetworkResult,
    SkippedStrut,
    StrutRejection,
)
from lattice_frame.bounds import BoundingBox, OrientedBox, Plane
from lattice_frame.design_space import (
    classify_design_space,
    is_point_inside,
    distance_to,
    DesignSpace,
    DesignSpaceKind,
    BrepDesignSpace,
    MeshDesignSpace,
    SolidSurfaceDesignSpace,
)
from lattice_frame.sampling import sample_points, SampleResult
from lattice_frame.voronoi import voronoi_partition
from lattice_frame.booleans import (
    intersect_cells,
    trimesh_to_manifold,
    manifold_to_trimesh,
    validate_cell_mesh,
    TrimResult,
    CellValidation,
)
from lattice_frame.cell_pipeline import (
    run_cell_pipeline,
    compute_centroid,
    scale_points,
    enclosing_box,
    CellPipelineResult,
)
from lattice_frame.lattice import (
    generate_voronoi_lattice,
    extract_cell_struts,
    VoronoiLatticeResult,
)
from lattice_frame.gradients import GradientType, evaluate_gradient
from lattice_frame.loader import DesignSpaceLoader, load_design_space_mesh, LoadResult

__all__ = [
    # Errors
    'LatticeError',
    'InvalidDesignSpaceError',
    'EmptySampleError',
    'EmptyNetworkError',
    'PipelineStageError',
    'VoronoiError',
    'BooleanIntersectionError',
    # Configuration
    'VoronoiLatticeParams',
    'configure_logging',
    'DEFAULT_MODEL_TOLERANCE',
    'DEFAULT_CONTAINMENT_TOLERANCE',
    'DEFAULT_SCALE_FACTOR',
    # Network consolidation
    'SpatialIndex',
    'epsilon_equals',
    'within_radius',
    'StrutCurve',
    'LineCurve',
    'PolylineCurve',
    'ArcCurve',
    'clean_network',
    'minimum_strut_length',
    'CleanNetworkResult',
    'SkippedStrut',
    'StrutRejection',
    # Design space
    'BoundingBox',
    'OrientedBox',
    'Plane',
    'classify_design_space',
    'is_point_inside',
    'distance_to',
    'DesignSpace',
    'DesignSpaceKind',
    'BrepDesignSpace',
    'MeshDesignSpace',
    'SolidSurfaceDesignSpace',
    # Cells
    'sample_points',
    'SampleResult',
    'voronoi_partition',
    'intersect_cells',
    'trimesh_to_manifold',
    'manifold_to_trimesh',
    'validate_cell_mesh',
    'TrimResult',
    'CellValidation',
    'run_cell_pipeline',
    'compute_centroid',
    'scale_points',
    'enclosing_box',
    'CellPipelineResult',
    # Lattice
    'generate_voronoi_lattice',
    'extract_cell_struts',
    'VoronoiLatticeResult',
    'GradientType',
    'evaluate_gradient',
    'DesignSpaceLoader',
    'load_design_space_mesh',
    'LoadResult',
]
