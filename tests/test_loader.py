import trimesh

from lattice_frame.design_space import DesignSpaceKind
from lattice_frame.loader import DesignSpaceLoader, load_design_space_mesh


def test_load_closed_stl(tmp_path, cube_mesh):
    path = tmp_path / "cube.stl"
    cube_mesh.export(path)

    result = load_design_space_mesh(str(path))

    assert result.success
    assert result.kind is DesignSpaceKind.MESH
    assert result.file_name == "cube.stl"
    assert result.file_size_bytes > 0
    assert result.mesh.is_watertight
    assert abs(result.mesh.volume - 1.0) < 1e-6


def test_open_mesh_keeps_geometry(tmp_path, open_mesh):
    path = tmp_path / "open.ply"
    open_mesh.export(path)

    result = DesignSpaceLoader().load(str(path))

    assert not result.success
    assert result.kind is DesignSpaceKind.INVALID
    assert isinstance(result.mesh, trimesh.Trimesh)
    assert "not closed" in result.error_message


def test_missing_file(tmp_path):
    result = load_design_space_mesh(str(tmp_path / "missing.stl"))
    assert not result.success
    assert result.mesh is None
    assert "does not exist" in result.error_message


def test_unsupported_extension(tmp_path):
    path = tmp_path / "cube.step"
    path.write_text("solid")
    loader = DesignSpaceLoader()
    valid, message = loader.is_valid_file(str(path))
    assert not valid
    assert "Unsupported" in message
    assert not loader.load(str(path)).success
    assert loader.last_result.error_message == message


def test_empty_file(tmp_path):
    path = tmp_path / "empty.obj"
    path.touch()
    result = load_design_space_mesh(str(path))
    assert not result.success
    assert result.error_message == "File is empty"
