import warnings

import numpy as np
import torch as t
import pytest

from holoprop.errors import ShapeMismatch
from holoprop.tools import backends
from holoprop.tools import padding


@pytest.fixture(scope='module')
def backend():
    return backends.Backend.host()


def test_border_value_square():
    rng = np.random.default_rng(0)
    field = rng.standard_normal((10, 10)) + 1j * rng.standard_normal((10, 10))

    # For square fields, the mean of the edge means is the same as
    # averaging all the edges together
    concatenated = np.mean(np.concatenate(
        [field[0, :], field[-1, :], field[:, 0], field[:, -1]]))
    value = padding.border_value(t.as_tensor(field))
    assert np.isclose(value.item(), concatenated)


def test_border_value_non_square(random_field):
    field = random_field
    edge_means = [np.mean(field[0, :]), np.mean(field[-1, :]),
                  np.mean(field[:, 0]), np.mean(field[:, -1])]
    value = padding.border_value(t.as_tensor(field))
    assert np.isclose(value.item(), np.mean(edge_means))

    # Which is not the plain mean of the concatenated border, where the
    # long rows would count for more
    concatenated = np.mean(np.concatenate(
        [field[0, :], field[-1, :], field[:, 0], field[:, -1]]))
    assert not np.isclose(value.item(), concatenated)


def test_border_value_ignores_interior():
    field = t.ones((6, 8), dtype=t.complex128)
    field[1:-1, 1:-1] = 100
    assert padding.border_value(field).item() == 1


def test_canvas_offsets():
    assert padding.canvas_offsets((10, 20), (10, 20)) == (0, 0)
    assert padding.canvas_offsets((10, 20), (32, 32)) == (11, 6)

    with pytest.raises(ShapeMismatch) as excinfo:
        padding.canvas_offsets((10, 20), (16, 16))
    assert excinfo.value.expected == (10, 20)
    assert excinfo.value.actual == (16, 16)


def test_canvas_offsets_odd_margin():
    with pytest.warns(UserWarning):
        assert padding.canvas_offsets((10, 10), (13, 12)) == (1, 1)

    with warnings.catch_warnings():
        warnings.simplefilter('error')
        assert padding.canvas_offsets((10, 10), (13, 12), warn=False) \
            == (1, 1)


def test_pad_to_canvas_odd_margin(backend):
    field = t.ones((10, 10), dtype=t.complex128)
    with pytest.warns(UserWarning) as record:
        padded = padding.pad_to_canvas(field, (13, 12), backend)
    assert padded.shape == t.Size([13, 12])
    assert len(record) == 1
    # The warning points at the caller of pad_to_canvas
    assert record[0].filename == __file__

    with warnings.catch_warnings():
        warnings.simplefilter('error')
        padding.pad_to_canvas(field, (13, 12), backend, warn=False)


def test_pad_to_canvas_same_shape(backend, random_field):
    field = t.as_tensor(random_field)
    with warnings.catch_warnings():
        warnings.simplefilter('error')
        padded = padding.pad_to_canvas(field, (24, 40), backend)
    assert t.equal(padded, field)


def test_pad_to_canvas(backend, random_field):
    field = t.as_tensor(random_field)
    padded = padding.pad_to_canvas(field, (32, 48), backend)
    value = padding.border_value(field)

    assert padded.shape == t.Size([32, 48])
    assert t.equal(padded[4:28, 4:44], field)

    margin = t.ones((32, 48), dtype=t.bool)
    margin[4:28, 4:44] = False
    assert t.all(padded[margin] == value)

    # The input is not touched
    assert t.equal(field, t.as_tensor(random_field))


def test_crop_from_canvas(backend, random_field):
    field = t.as_tensor(random_field)
    padded = padding.pad_to_canvas(field, (40, 64), backend)
    assert t.equal(padding.crop_from_canvas(padded, (24, 40)), field)

    # Leading dimensions are passed through
    stack = t.stack([padded, 2 * padded, 3 * padded])
    cropped = padding.crop_from_canvas(stack, (24, 40))
    assert cropped.shape == t.Size([3, 24, 40])
    assert t.equal(cropped[2], 3 * field)
