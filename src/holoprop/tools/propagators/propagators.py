"""This module contains the Fresnel transfer function propagator

The functions here implement propagation of a complex field between
parallel planes, in the Fresnel (paraxial) approximation to the angular
spectrum method. The propagator is split into the same pieces that one
would use when refocusing a hologram to many planes: the frequency grid
and the forward transform are made once, and a cheap transfer function is
generated and applied for every distance.

All spectra and transfer functions here are stored "centered", with the
zero frequency at index (M//2, N//2), matching the output of fftshift.
"""

import numpy as np
import torch as t

__all__ = ['generate_fresnel_frequencies',
           'generate_transfer_coefficients',
           'generate_fresnel_propagator',
           'centered_fft2', 'centered_ifft2',
           'fresnel_near_field']


def generate_fresnel_frequencies(shape, pixel_pitch, backend):
    """Generates the spatial frequency grid for a canvas

    The offsets run over arange(N) - N//2 along the columns (x) and
    arange(M) - M//2 along the rows (y), which for even sizes is the
    familiar -N/2 .. N/2-1, and are normalized by the physical extent of
    the canvas along the same axis.

    Parameters
    ----------
    shape : tuple
        The (M,N) shape of the canvas
    pixel_pitch : float
        The pixel pitch, in m
    backend : Backend
        The backend to allocate the grid on

    Returns
    -------
    fx : torch.Tensor
        The MxN grid of x frequencies, in 1/m
    fy : torch.Tensor
        The MxN grid of y frequencies, in 1/m
    fx2fy2 : torch.Tensor
        fx**2 + fy**2
    """
    M, N = shape
    x = (backend.arange(N) - N // 2) / (pixel_pitch * N)
    y = (backend.arange(M) - M // 2) / (pixel_pitch * M)
    fy, fx = t.meshgrid(y, x, indexing='ij')
    return fx, fy, fx**2 + fy**2


def generate_transfer_coefficients(wavelength, distances, enabled, backend):
    """Generates the global phase factor of each transfer function

    This is the exp(ikz) term of the Fresnel propagator. It doesn't change
    the intensity at any plane, so by default it is left out and every
    coefficient is 1.

    Parameters
    ----------
    wavelength : float
        The wavelength of the light, in m
    distances : torch.Tensor
        The length-L vector of propagation distances, in m
    enabled : bool
        Whether to calculate the coefficients at all
    backend : Backend
        The backend to allocate the coefficients on

    Returns
    -------
    coefficients : torch.Tensor
        The length-L vector of complex coefficients
    """
    distances = backend.asarray(distances, dtype=backend.real_dtype)
    if not enabled:
        return backend.full(distances.shape, 1)
    phase = (2 * np.pi / wavelength) * distances
    return backend.exp(1j * phase.to(backend.dtype))


def generate_fresnel_propagator(fx2fy2, wavelength, distances, backend,
                                coefficients=None):
    """Generates a stack of Fresnel transfer functions

    For each distance Z_i, this makes the centered kernel
    H_i = C_i * exp(-i*pi*wavelength*Z_i*(fx**2 + fy**2)). Negative
    distances propagate backward, and H for -Z is the conjugate of H for Z
    when the coefficients are left at 1.

    Parameters
    ----------
    fx2fy2 : torch.Tensor
        The MxN squared frequency magnitude, from generate_fresnel_frequencies
    wavelength : float
        The wavelength of the light, in m
    distances : torch.Tensor
        The length-L vector of propagation distances, in m
    backend : Backend
        The backend to compute on
    coefficients : torch.Tensor
        Optional, the length-L transfer coefficients. Default is all ones.

    Returns
    -------
    propagator : torch.Tensor
        The LxMxN stack of transfer functions
    """
    distances = backend.asarray(distances, dtype=backend.real_dtype)
    phase = -np.pi * wavelength * distances[:, None, None] * fx2fy2[None, :, :]
    propagator = backend.exp(1j * phase.to(backend.dtype))
    if coefficients is not None:
        propagator = propagator * coefficients[:, None, None]
    return propagator


def centered_fft2(field, backend):
    """Returns the 2D spectrum of a field with the zero frequency centered"""
    return backend.fftshift(backend.fft2(field))


def centered_ifft2(spectrum, backend):
    """Inverts centered_fft2"""
    return backend.ifft2(backend.ifftshift(spectrum))


def fresnel_near_field(spectrum, propagator, backend, mask=None):
    """Applies a stack of transfer functions to a centered spectrum

    The same spectrum is reused for every kernel in the stack, and it is
    never modified in place.

    Parameters
    ----------
    spectrum : torch.Tensor
        The MxN centered spectrum of the input field
    propagator : torch.Tensor
        The MxN or LxMxN stack of centered transfer functions
    backend : Backend
        The backend to compute on
    mask : torch.Tensor
        Optional, an MxN aperture applied in frequency space

    Returns
    -------
    propagated : torch.Tensor
        The propagated field, with the same leading dimensions as propagator
    """
    filtered = spectrum * propagator
    if mask is not None:
        filtered = filtered * mask
    return centered_ifft2(filtered, backend)
