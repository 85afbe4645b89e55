"""Contains tools for checking Fresnel transfer functions for aliasing

The Fresnel transfer function is a quadratic phase in frequency space,
so its local frequency grows with both the propagation distance and the
distance from the zero frequency. Once the phase changes by more than pi
between neighbouring samples at the edge of the canvas, the kernel is
undersampled and the propagated fields pick up spurious copies. This
happens just beyond the well known critical distance
z_c = N * dx**2 / wavelength.
"""

import warnings

import numpy as np
import torch as t

__all__ = ['fresnel_critical_distance', 'fresnel_phase_step',
           'kernel_phase_step', 'find_aliased_distances']


def fresnel_critical_distance(shape, pixel_pitch, wavelength):
    """Returns the largest distance that a canvas can propagate unaliased

    This is the distance at which fresnel_phase_step reaches pi, which for
    even canvases is (N*dx)**2 / (wavelength*(N-1)). An axis only one pixel
    long has no neighbouring samples to alias, so it sets no limit, and a
    single pixel canvas never aliases.

    Parameters
    ----------
    shape : tuple
        The (M,N) shape of the canvas
    pixel_pitch : float
        The pixel pitch, in m
    wavelength : float
        The wavelength of the light, in m

    Returns
    -------
    z_c : float
        The critical distance, in m, along the more restrictive axis
    """
    return min(((n * pixel_pitch)**2 / (wavelength * (2 * (n // 2) - 1))
                for n in shape if n > 1), default=np.inf)


def fresnel_phase_step(shape, pixel_pitch, wavelength, distances):
    """Returns the largest phase step between neighbouring kernel samples

    This is calculated analytically, from the pair of samples at the
    most negative frequency of each axis. Axes one pixel long are skipped.

    Parameters
    ----------
    shape : tuple
        The (M,N) shape of the canvas
    pixel_pitch : float
        The pixel pitch, in m
    wavelength : float
        The wavelength of the light, in m
    distances : array
        The propagation distances, in m

    Returns
    -------
    steps : np.ndarray
        The unwrapped phase step, in radians, for each distance
    """
    distances = np.abs(np.atleast_1d(np.asarray(distances, dtype=np.float64)))
    steps = [np.pi * wavelength * distances * (2 * (n // 2) - 1)
             / (n * pixel_pitch)**2 for n in shape if n > 1]
    if len(steps) == 0:
        return np.zeros_like(distances)
    return np.max(np.stack(steps), axis=0)


def kernel_phase_step(kernels):
    """Measures the largest phase step between neighbouring kernel samples

    The steps are measured from the samples themselves, so they are
    wrapped into [0, pi]. Below the critical distance they match
    fresnel_phase_step, and above it they no longer grow.

    Parameters
    ----------
    kernels : torch.Tensor
        An MxNxL stack of transfer functions, as returned by propagate

    Returns
    -------
    steps : torch.Tensor
        The length-L maximum absolute phase step, in radians
    """
    kernels = t.as_tensor(kernels)
    if kernels.dim() == 2:
        kernels = kernels[:, :, None]
    M, N, L = kernels.shape
    steps = t.zeros(L, dtype=kernels.real.dtype, device=kernels.device)
    if M > 1:
        down = t.angle(kernels[1:, :, :] * t.conj(kernels[:-1, :, :]))
        steps = t.maximum(steps, t.amax(t.abs(down), dim=(0, 1)))
    if N > 1:
        across = t.angle(kernels[:, 1:, :] * t.conj(kernels[:, :-1, :]))
        steps = t.maximum(steps, t.amax(t.abs(across), dim=(0, 1)))
    return steps


def find_aliased_distances(shape, pixel_pitch, wavelength, distances):
    """Returns the indices of the distances whose kernel is undersampled

    A UserWarning is emitted if any are found.

    Parameters
    ----------
    shape : tuple
        The (M,N) shape of the canvas
    pixel_pitch : float
        The pixel pitch, in m
    wavelength : float
        The wavelength of the light, in m
    distances : array
        The propagation distances, in m

    Returns
    -------
    indices : np.ndarray
        The indices into distances of the aliased kernels
    """
    steps = fresnel_phase_step(shape, pixel_pitch, wavelength, distances)
    indices = np.nonzero(steps > np.pi)[0]
    if len(indices) != 0:
        z_c = fresnel_critical_distance(shape, pixel_pitch, wavelength)
        warnings.warn(str(len(indices)) + ' of ' + str(len(steps))
                      + ' distances exceed the critical distance of '
                      + '%.3g m; enlarge the canvas to avoid aliasing.' % z_c)
    return indices
