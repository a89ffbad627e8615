"""
Design Space Loader

Loads a design space mesh from a mesh file (STL, OBJ, PLY or OFF) using
trimesh, and classifies it. Load problems are reported in the LoadResult;
they are never raised.
"""

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import trimesh

from lattice_frame.design_space import DesignSpaceKind, classify_design_space


@dataclass
class LoadResult:
    """Result of design space file loading."""
    mesh: Optional[trimesh.Trimesh]
    kind: DesignSpaceKind
    file_path: str
    file_name: str
    file_size_bytes: int
    success: bool
    error_message: Optional[str] = None
    load_time_ms: float = 0.0


class DesignSpaceLoader:
    """
    Mesh file loader for design spaces.

    A file that loads but does not describe a closed solid is still a
    failed load: the result carries the mesh and kind INVALID.
    """

    SUPPORTED_EXTENSIONS = {'.stl', '.obj', '.ply', '.off'}

    def __init__(self):
        self._last_result: Optional[LoadResult] = None

    @property
    def last_result(self) -> Optional[LoadResult]:
        """Get the result of the last load operation."""
        return self._last_result

    def is_valid_file(self, file_path: str) -> Tuple[bool, str]:
        """
        Check if a file can be loaded as a design space.

        Args:
            file_path: Path to the file to check

        Returns:
            Tuple of (is_valid, error_message)
        """
        path = Path(file_path)

        if not path.exists():
            return False, f"File does not exist: {file_path}"

        if not path.is_file():
            return False, f"Path is not a file: {file_path}"

        if path.suffix.lower() not in self.SUPPORTED_EXTENSIONS:
            expected = ", ".join(sorted(self.SUPPORTED_EXTENSIONS))
            return False, f"Unsupported file extension: {path.suffix}. Expected one of {expected}"

        if path.stat().st_size == 0:
            return False, "File is empty"

        return True, ""

    def _failure(self, path: Path, message: str, start_time: float,
                 mesh: Optional[trimesh.Trimesh] = None, file_size: int = 0) -> LoadResult:
        self._last_result = LoadResult(
            mesh=mesh,
            kind=DesignSpaceKind.INVALID,
            file_path=str(path.absolute()),
            file_name=path.name,
            file_size_bytes=file_size,
            success=False,
            error_message=message,
            load_time_ms=(time.perf_counter() - start_time) * 1000
        )
        return self._last_result

    def load(self, file_path: str) -> LoadResult:
        """
        Load a mesh file as a design space.

        Args:
            file_path: Path to the mesh file

        Returns:
            LoadResult containing the mesh and its classification, or error
            information
        """
        start_time = time.perf_counter()
        path = Path(file_path)

        is_valid, error_msg = self.is_valid_file(file_path)
        if not is_valid:
            return self._failure(path, error_msg, start_time)

        file_size = path.stat().st_size

        try:
            mesh = trimesh.load(
                file_path,
                file_type=path.suffix.lower().lstrip('.'),
                force='mesh'  # Ensure we get a Trimesh, not Scene
            )
        except Exception as e:
            return self._failure(path, str(e), start_time, file_size=file_size)

        if not isinstance(mesh, trimesh.Trimesh) or len(mesh.faces) == 0:
            return self._failure(path, "No mesh geometry found in file", start_time,
                                 file_size=file_size)

        kind = classify_design_space(mesh)
        if kind is DesignSpaceKind.INVALID:
            return self._failure(path, "Mesh is not closed (watertight)", start_time,
                                 mesh=mesh, file_size=file_size)

        self._last_result = LoadResult(
            mesh=mesh,
            kind=kind,
            file_path=str(path.absolute()),
            file_name=path.name,
            file_size_bytes=file_size,
            success=True,
            load_time_ms=(time.perf_counter() - start_time) * 1000
        )
        return self._last_result


def load_design_space_mesh(file_path: str) -> LoadResult:
    """
    Convenience function to load a design space mesh file.

    Args:
        file_path: Path to the mesh file

    Returns:
        LoadResult containing the mesh or error information
    """
    loader = DesignSpaceLoader()
    return loader.load(file_path)
