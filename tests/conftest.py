import numpy as np
import pytest

from sobeledge.plane import Plane


@pytest.fixture
def random_image():
    rng = np.random.default_rng(0)
    return Plane.from_array(rng.integers(0, 256, size=(45, 67), dtype=np.uint8))


@pytest.fixture
def step_image():
    """ 3x3 vertical step edge: left column 0, right two columns 255 """
    return Plane.from_array(np.array([[0, 255, 255]]*3, np.uint8))
