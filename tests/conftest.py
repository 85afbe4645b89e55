import numpy as np
import pytest
import torch as t


def pytest_addoption(parser):
    parser.addoption(
        "--runslow",
        action="store_true",
        default=False,
        help="run slow tests, primarily large canvas propagations."
    )


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: mark test as slow to run")
    config.addinivalue_line("markers", "cuda: mark test as needing a GPU")


def pytest_collection_modifyitems(config, items):
    skip_slow = pytest.mark.skip(reason="need --runslow option to run")
    skip_cuda = pytest.mark.skip(reason="no CUDA device available")
    for item in items:
        if "slow" in item.keywords and not config.getoption("--runslow"):
            item.add_marker(skip_slow)
        if "cuda" in item.keywords and not t.cuda.is_available():
            item.add_marker(skip_cuda)


@pytest.fixture(scope='module')
def gaussian_field():
    """A 64x64 gaussian spot with a smooth phase, well inside the array"""
    i = np.arange(64) - 32
    Is, Js = np.meshgrid(i, i, indexing='ij')
    amplitude = np.exp(-(Is**2 + Js**2) / (2 * 5**2))
    phase = np.exp(1j * (0.05 * Is + 0.002 * Js**2))
    return amplitude * phase


@pytest.fixture(scope='module')
def random_field():
    """A 24x40 non-square field of complex noise"""
    rng = np.random.default_rng(1)
    return rng.standard_normal((24, 40)) + 1j * rng.standard_normal((24, 40))
