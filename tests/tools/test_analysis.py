import numpy as np
import pytest

import holoprop
from holoprop.tools import analysis


def test_fresnel_critical_distance():
    ps = 6.5e-6
    wavelength = 632.8e-9
    z_c = analysis.fresnel_critical_distance((32, 32), ps, wavelength)
    assert np.isclose(z_c, (32 * ps)**2 / (wavelength * 31))

    # Close to the textbook N*dx**2/wavelength
    assert np.isclose(z_c, 32 * ps**2 / wavelength, rtol=0.05)

    # The smaller side of the canvas sets the limit
    assert analysis.fresnel_critical_distance((64, 32), ps, wavelength) \
        == pytest.approx(z_c)


def test_fresnel_phase_step():
    ps = 6.5e-6
    wavelength = 632.8e-9
    z_c = analysis.fresnel_critical_distance((32, 32), ps, wavelength)

    steps = analysis.fresnel_phase_step((32, 32), ps, wavelength,
                                        [0, 0.5 * z_c, z_c, -2 * z_c])
    assert np.allclose(steps, [0, np.pi / 2, np.pi, 2 * np.pi])


def test_kernel_phase_step():
    ps = 6.5e-6
    wavelength = 632.8e-9
    distances = [0, 5e-4, -1e-3]
    field = np.ones((32, 32), dtype=np.complex128)

    _, kernels = holoprop.propagate(field, wavelength, distances, ps,
                                    return_kernels=True)
    measured = analysis.kernel_phase_step(kernels)
    expected = analysis.fresnel_phase_step((32, 32), ps, wavelength,
                                           distances)

    # All of these distances are below the critical distance, so the
    # sampled kernel shows the true phase step
    assert np.all(expected < np.pi)
    assert np.allclose(measured.numpy(), expected, atol=1e-8)

    # A single kernel works too
    single = analysis.kernel_phase_step(kernels[:, :, 1])
    assert np.allclose(single.numpy(), expected[1:2], atol=1e-8)


def test_find_aliased_distances():
    ps = 6.5e-6
    wavelength = 632.8e-9
    z_c = analysis.fresnel_critical_distance((32, 32), ps, wavelength)
    distances = [0, 0.5 * z_c, 1.5 * z_c, -0.9 * z_c, -3 * z_c]

    with pytest.warns(UserWarning, match='critical distance'):
        indices = analysis.find_aliased_distances(
            (32, 32), ps, wavelength, distances)
    assert list(indices) == [2, 4]


def test_find_aliased_distances_none(recwarn):
    indices = analysis.find_aliased_distances(
        (1024, 1024), 6.5e-6, 632.8e-9, [0, 1e-3, -1e-3])
    assert len(indices) == 0
    assert len(recwarn) == 0


def test_single_pixel_axes():
    ps = 6.5e-6
    wavelength = 632.8e-9

    # An axis one pixel long sets no limit, so the other axis decides
    z_c = analysis.fresnel_critical_distance((1, 64), ps, wavelength)
    assert z_c > 0
    assert z_c == pytest.approx(
        analysis.fresnel_critical_distance((64, 64), ps, wavelength))
    assert analysis.fresnel_critical_distance((1, 1), ps, wavelength) \
        == np.inf

    steps = analysis.fresnel_phase_step((1, 16), ps, wavelength,
                                        [0, 2e-4, -5e-4])
    assert np.all(np.isfinite(steps))
    assert np.allclose(steps, analysis.fresnel_phase_step(
        (16, 16), ps, wavelength, [0, 2e-4, -5e-4]))
    assert np.array_equal(
        analysis.fresnel_phase_step((1, 1), ps, wavelength, [0, 1e-3]),
        [0, 0])


def test_kernel_phase_step_single_row():
    ps = 6.5e-6
    wavelength = 632.8e-9
    distances = [0, 2e-4, -5e-4]

    _, kernels = holoprop.propagate(np.ones((1, 16)), wavelength, distances,
                                    ps, return_kernels=True)
    assert kernels.shape == (1, 16, 3)
    measured = analysis.kernel_phase_step(kernels)
    expected = analysis.fresnel_phase_step((1, 16), ps, wavelength,
                                           distances)
    assert np.allclose(measured.numpy(), expected, atol=1e-8)

    # A single sample has no neighbours at all
    single = analysis.kernel_phase_step(kernels[:1, :1, :])
    assert np.array_equal(single.numpy(), [0, 0, 0])


def test_find_aliased_distances_single_row():
    ps = 6.5e-6
    wavelength = 632.8e-9
    z_c = analysis.fresnel_critical_distance((1, 64), ps, wavelength)

    with pytest.warns(UserWarning, match='critical distance') as record:
        indices = analysis.find_aliased_distances(
            (1, 64), ps, wavelength, [0, 2 * z_c])
    assert list(indices) == [1]
    assert '%.3g m' % z_c in str(record[0].message)
    assert '-' not in str(record[0].message).split('distance of ')[1]
