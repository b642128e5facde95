import numpy as np
import pytest

from sobeledge.gradient import sobel
from sobeledge.normalize import (interior_max, normalize, parts_max, region_max, rescale_parts,
                                 rescale_region)
from sobeledge.partition import Partition, RowMajor, Tiled
from sobeledge.plane import Plane


def interior_plane(values, dtype=np.int32):
    """ Plane with given interior values and zero border """
    values = np.asarray(values)
    h, w = values.shape
    p = Plane(w+2, h+2, None, dtype)
    p.grid[1:-1, 1:-1] = values
    return p


def test_rescale_truncates():
    g = interior_plane([[0, 10], [50, 100]])
    assert normalize(g) == 100
    assert g.grid[1:-1, 1:-1].tolist() == [[0, 25], [127, 255]]
    assert not g.grid[0].any() and not g.grid[-1].any()


def test_max_255_is_noop():
    values = [[255, 3, 17], [0, 128, 254]]
    g = interior_plane(values)
    normalize(g)
    assert g.grid[1:-1, 1:-1].tolist() == values


def test_all_zero_is_noop():
    g = Plane(6, 5, None, np.int32)
    assert normalize(g) == 0
    assert not g.samples.any()


def test_border_values_are_ignored():
    g = interior_plane([[10, 20]])
    g.grid[0, 0] = 1000
    assert interior_max(g) == 20
    normalize(g)
    assert g.grid[1, 1:-1].tolist() == [127, 255]
    assert g.grid[0, 0] == 1000


def test_empty_interior():
    g = Plane(2, 7, np.arange(14), np.int32)
    assert interior_max(g) == 0
    assert normalize(g) == 0
    assert g.samples.tolist() == list(range(14))


def test_region_kernels():
    g = interior_plane([[1, 2, 3], [4, 5, 6]])
    assert region_max(g, Partition(1, 2, 1, 4)) == 3
    assert region_max(g, Partition(1, 1, 1, 4)) == 0
    rescale_region(g, Partition(2, 3, 1, 4), 6)
    assert g.grid[1:-1, 1:-1].tolist() == [[1, 2, 3], [170, 212, 255]]


@pytest.mark.parametrize("workers,strategy", [
    (1, RowMajor()), (2, RowMajor()), (8, RowMajor()),
    (1, Tiled(1)), (4, Tiled(16)), (4, Tiled(1000)),
])
def test_partition_invariance(random_image, workers, strategy):
    expected = sobel(random_image)
    expected_max = normalize(expected)
    g = sobel(random_image, workers=workers, strategy=strategy)
    assert normalize(g, workers=workers, strategy=strategy) == expected_max
    assert g == expected
    assert g.samples.max() == 255


def test_work_list_kernels():
    g = interior_plane([[1, 2, 3], [4, 5, 6]])
    parts = [Partition(1, 2, 1, 4), Partition(2, 3, 1, 3)]
    assert parts_max(g, parts) == 5
    assert parts_max(g, []) == 0
    rescale_parts(g, parts, 5)
    assert g.grid[1:-1, 1:-1].tolist() == [[51, 102, 153], [204, 255, 6]]
