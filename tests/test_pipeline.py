import numpy as np
import pytest

from sobeledge.errors import FormatError, SourceError
from sobeledge.gradient import sobel
from sobeledge.pgm import decode, encode, read_pgm, write_pgm
from sobeledge.pipeline import check_opts, default_opts, edge_map, process_file
from sobeledge.plane import Plane


def test_check_opts_defaults():
    assert check_opts() == default_opts
    assert check_opts({"workers": 3})["workers"] == 3
    assert check_opts({"tile_size": (4, 8)})["tile_size"] == (4, 8)
    assert check_opts({"tile_size": np.int64(8)})["tile_size"] == 8


@pytest.mark.parametrize("opts", [
    {"workers": 0},
    {"strategy": "columns"},
    {"tile_size": 0},
    {"threads": 2},
])
def test_check_opts_invalid(opts):
    with pytest.raises(ValueError):
        check_opts(opts)


def test_round_trip_5x5():
    rng = np.random.default_rng(2)
    image = Plane.from_array(rng.integers(0, 256, (5, 5), dtype=np.uint8))
    decoded = decode(encode(image))
    edges = edge_map(decoded)
    assert edges.shape == image.shape
    g = edges.grid
    assert not g[0].any() and not g[-1].any() and not g[:, 0].any() and not g[:, -1].any()
    assert g.max() == 255


def test_edge_map_matches_stages(random_image):
    expected = sobel(random_image)
    peak = int(expected.samples.max())
    interior = expected.grid[1:-1, 1:-1]
    interior[:] = interior.astype(np.int64) * 255 // peak
    stats = {}
    edges = edge_map(random_image, {"workers": 4, "strategy": "rows"}, stats)
    assert edges == expected
    assert stats["max_gradient"] == peak
    assert stats["gradient_time"] >= 0 and stats["normalize_time"] >= 0


@pytest.mark.parametrize("opts", [
    {"workers": 1},
    {"workers": 2, "strategy": "rows"},
    {"workers": 8, "strategy": "rows"},
    {"workers": 4, "tile_size": 1},
    {"workers": 4, "tile_size": 16, "unroll": False},
    {"workers": 2, "tile_size": 5000},
])
def test_options_do_not_change_result(random_image, opts):
    assert edge_map(random_image, opts) == edge_map(random_image)


def test_flat_image():
    image = Plane(8, 8, np.full(64, 90, np.uint8))
    stats = {}
    edges = edge_map(image, stats=stats)
    assert not edges.samples.any()
    assert stats["max_gradient"] == 0


def test_process_file(tmp_path, random_image):
    src, dst = tmp_path / "in.pgm", tmp_path / "out.pgm"
    write_pgm(src, random_image)
    stats = process_file(src, dst, {"workers": 2})
    assert (stats["width"], stats["height"]) == (67, 45)
    result = read_pgm(dst)
    assert result.shape == random_image.shape
    assert result == edge_map(random_image).to_u8()


def test_process_file_errors(tmp_path):
    with pytest.raises(SourceError):
        process_file(tmp_path / "missing.pgm", tmp_path / "out.pgm")
    bad = tmp_path / "bad.pgm"
    bad.write_bytes(b"P6\n1 1\n255\n\x00\x00\x00")
    with pytest.raises(FormatError):
        process_file(bad, tmp_path / "out.pgm")
    assert not (tmp_path / "out.pgm").exists()
