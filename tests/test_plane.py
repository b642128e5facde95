import numpy as np
import pytest

from sobeledge.errors import GeometryError
from sobeledge.partition import Partition
from sobeledge.plane import Plane


def test_zero_filled_plane():
    p = Plane(4, 3)
    assert p.shape == (3, 4)
    assert p.size == 12
    assert p.dtype == np.uint8
    assert not p.samples.any()


def test_row_major_addressing():
    p = Plane(4, 3, np.arange(12))
    assert p.index(1, 2) == 6
    assert p[1, 2] == 6
    assert p[2, 3] == 11
    with pytest.raises(IndexError):
        p[3, 0]


def test_grid_is_view():
    p = Plane(4, 3, np.arange(12))
    p.grid[2, 1] = 100
    assert p.samples[9] == 100


@pytest.mark.parametrize("w,h,n", [(4,3,11), (0,3,0), (3,-1,0)])
def test_invalid_geometry(w, h, n):
    with pytest.raises(GeometryError):
        Plane(w, h, np.zeros(n) if n else None)


def test_from_array():
    a = np.arange(6, dtype=np.uint8).reshape(2, 3)
    p = Plane.from_array(a)
    assert (p.width, p.height) == (3, 2)
    a[0, 0] = 9
    assert p[0, 0] == 0
    with pytest.raises(TypeError):
        Plane.from_array([[1, 2]])
    with pytest.raises(GeometryError):
        Plane.from_array(np.zeros((2, 2, 1)))


def test_interior():
    assert Plane(5, 4).interior == Partition(1, 3, 1, 4)
    assert Plane(5, 4).has_interior
    assert not Plane(2, 5).has_interior
    assert Plane(2, 5).interior.size == 0


def test_to_u8_clamps():
    p = Plane(3, 1, [-5, 128, 300], np.int32)
    assert p.to_u8().samples.tolist() == [0, 128, 255]


def test_equality_and_copy():
    p = Plane(2, 2, [1, 2, 3, 4])
    q = p.copy()
    assert p == q
    q.samples[0] = 7
    assert p != q


def test_samples_keep_their_type():
    p = Plane(2, 2, np.array([1, 2, 3, 300]))
    assert p.samples.tolist() == [1, 2, 3, 300]
    assert p.dtype == np.array([300]).dtype
    assert Plane(2, 2, np.array([1, 2, 3, 4], np.int16)).dtype == np.int16


@pytest.mark.parametrize("samples", [[1, 2, 3, 300], np.array([1, 2, 3, 300]), np.array([-1, 0, 0, 0])])
def test_out_of_range_samples(samples):
    with pytest.raises(ValueError):
        Plane(2, 2, samples, np.uint8)


def test_explicit_dtype_in_range():
    p = Plane(2, 2, np.array([0, 7, 128, 255], np.int64), np.uint8)
    assert p.dtype == np.uint8
    assert p.samples.tolist() == [0, 7, 128, 255]
    assert Plane(2, 2, None, np.dtype(np.int32)).dtype == np.int32
