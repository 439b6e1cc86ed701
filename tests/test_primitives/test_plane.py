import numpy.testing as npt
import pytest

from occsketch.cad_types import BASE_NORMAL, X_NORMAL, Y_NORMAL, Z_NORMAL
from occsketch.plane import CustomPlane, Plane, resolve_plane
from occsketch.quaternion import UnitQuaternion
from occsketch.transform import TandR


def test_xy_is_identity():
    t = Plane.XY.transform()
    npt.assert_allclose(t.translation, [0.0, 0.0, 0.0])
    assert t.rotation.is_close(UnitQuaternion.identity())
    assert t == TandR.identity()


@pytest.mark.parametrize(
    "plane, normal",
    [
        (Plane.XY, (0.0, 0.0, 1.0)),
        (Plane.YZ, (1.0, 0.0, 0.0)),
        (Plane.ZX, (0.0, 1.0, 0.0)),
        (Plane.YX, (0.0, 0.0, -1.0)),
        (Plane.ZY, (-1.0, 0.0, 0.0)),
        (Plane.XZ, (0.0, -1.0, 0.0)),
    ],
)
def test_named_plane_normals(plane, normal):
    t = plane.transform()
    npt.assert_allclose(t.rotate_normal(BASE_NORMAL), normal, atol=1e-12)


@pytest.mark.parametrize("plane", list(Plane))
def test_named_planes_have_no_translation(plane):
    npt.assert_allclose(plane.transform().translation, [0.0, 0.0, 0.0])


def test_yz_maps_base_normal_onto_x():
    npt.assert_allclose(Plane.YZ.transform_point(Z_NORMAL), X_NORMAL, atol=1e-12)


def test_yx_is_reproducible():
    assert Plane.YX.transform() == Plane.YX.transform()


def test_from_name():
    assert Plane.from_name("xz") is Plane.XZ
    assert resolve_plane("YZ") is Plane.YZ
    with pytest.raises(ValueError, match="Unknown plane"):
        Plane.from_name("AB")


def test_resolve_plane_rejects_other_types():
    with pytest.raises(TypeError):
        resolve_plane(42)


class TestCustomPlane:
    def test_axes_follow_inputs(self):
        plane = CustomPlane(x_dir=(0.0, 1.0, 0.0), normal_dir=(1.0, 0.0, 0.0))
        t = plane.transform()
        npt.assert_allclose(t.rotate_normal(X_NORMAL), [0.0, 1.0, 0.0], atol=1e-12)
        npt.assert_allclose(t.rotate_normal(Z_NORMAL), [1.0, 0.0, 0.0], atol=1e-12)
        # y = normal x x_dir
        npt.assert_allclose(t.rotate_normal(Y_NORMAL), [0.0, 0.0, 1.0], atol=1e-12)
        npt.assert_allclose(t.translation, [0.0, 0.0, 0.0])

    def test_inputs_are_normalized_and_orthogonalized(self):
        plane = CustomPlane(x_dir=(2.0, 0.0, 0.5), normal_dir=(0.0, 0.0, 3.0))
        x_axis, y_axis, z_axis = plane.basis()
        npt.assert_allclose(x_axis, [1.0, 0.0, 0.0], atol=1e-12)
        npt.assert_allclose(y_axis, [0.0, 1.0, 0.0], atol=1e-12)
        npt.assert_allclose(z_axis, [0.0, 0.0, 1.0], atol=1e-12)

    def test_matches_named_plane(self):
        custom = CustomPlane(x_dir=(1.0, 0.0, 0.0), normal_dir=(0.0, 0.0, 1.0)).transform()
        assert custom == Plane.XY.transform()

    def test_parallel_directions_rejected(self):
        with pytest.raises(ValueError, match="parallel"):
            CustomPlane(x_dir=(0.0, 0.0, 1.0), normal_dir=(0.0, 0.0, 2.0)).transform()

    def test_zero_direction_rejected(self):
        with pytest.raises(ValueError):
            CustomPlane(x_dir=(0.0, 0.0, 0.0), normal_dir=(0.0, 0.0, 1.0)).transform()
