"""Contains propagate, which refocuses a complex field to many distances

This is the main entry point of holoprop. It puts the tools together in
the order needed to propagate one field through a whole stack of
distances as cheaply as possible:

1. The options are resolved and every input is checked
2. A backend is chosen, and the field is padded onto the canvas
3. The frequency grid and the centered spectrum of the padded field are
   calculated, once
4. For each batch of distances, the transfer functions are generated,
   applied to the spectrum (and aperture mask), inverted and cropped
5. The results are gathered back to host memory
"""

import logging

import torch as t

from holoprop.errors import ShapeMismatch
from holoprop.tools import backends
from holoprop.tools import padding
from holoprop.tools import phantoms
from holoprop.tools import propagators
from holoprop.propagation.options import (
    DEFAULT_WAVELENGTH, DEFAULT_DISTANCE, DEFAULT_PIXEL_PITCH,
    PropagationOptions, resolve_options, resolve_distances, check_positive)

__all__ = ['propagate', 'MAX_BATCH_ELEMENTS', 'default_batch_size']

logger = logging.getLogger(__name__)

# Each batch holds several LxMxN complex intermediates, so this bounds the
# working memory of a propagation to a few hundred MB in complex128
MAX_BATCH_ELEMENTS = 2**22


def default_batch_size(canvas_shape):
    """Returns how many distances to propagate together on a canvas"""
    M, N = canvas_shape
    return max(1, MAX_BATCH_ELEMENTS // (M * N))


def _check_field(field):
    if field.dim() != 2:
        raise ShapeMismatch('The field must be a 2D array, got shape '
                            + str(tuple(field.shape)),
                            actual=tuple(field.shape))
    if field.shape[0] == 0 or field.shape[1] == 0:
        raise ShapeMismatch('The field must not be empty',
                            actual=tuple(field.shape))


def _check_mask(mask, canvas_shape):
    if tuple(mask.shape) != tuple(canvas_shape):
        raise ShapeMismatch('The aperture mask has shape '
                            + str(tuple(mask.shape))
                            + ' but the canvas has shape '
                            + str(tuple(canvas_shape)),
                            expected=tuple(canvas_shape),
                            actual=tuple(mask.shape))


def propagate(field=None, wavelength=DEFAULT_WAVELENGTH,
              distances=DEFAULT_DISTANCE, pixel_pitch=DEFAULT_PIXEL_PITCH,
              *args, options=None, **kwargs):
    """Propagates a complex field to a sequence of planes

    The field is propagated with the Fresnel transfer function, evaluated
    on the FFT grid of a canvas which is, by default, the same size as the
    field. A larger canvas can be requested to push the wraparound of the
    circular convolution away from the field; the extra margin is filled
    with the average value of the field's border. One forward transform is
    shared by all the distances.

    Propagating by 0 with no mask and no transfer coefficient returns the
    input field. Negative distances propagate backward.

    Extra options can be passed either as keywords (canvas_size,
    force_host_backend, aperture_mask, enable_transfer_coefficient,
    return_kernels, batch_size, dtype, or the short names zpad, cpu, mask
    and tfc), as a ready-made PropagationOptions via the options keyword,
    or, for the canvas size only, as a single extra positional number.

    Parameters
    ----------
    field : array
        The mxn complex field at the input plane. If None, a 256x256
        Shepp-Logan phantom is used
    wavelength : float
        Default 632.8e-9, the wavelength of the light, in m
    distances : float or array
        Default 0, the length-L sequence of propagation distances, in m
    pixel_pitch : float
        Default 6.5e-6, the pixel pitch of the field, in m
    options : PropagationOptions
        Optional, used instead of any extra arguments

    Returns
    -------
    propagated : torch.Tensor
        The mxnxL stack of propagated fields, one per distance, on the CPU
    kernels : torch.Tensor
        Only if return_kernels is set, the MxNxL stack of centered
        transfer functions, one per distance

    Raises
    ------
    InvalidOption
        If an option is not recognized
    ShapeMismatch
        If the field is not 2D, is larger than the canvas, or the aperture
        mask does not match the canvas
    """
    if options is None:
        options = resolve_options(*args, **kwargs)
    elif args or kwargs:
        raise ValueError('Pass either options or extra arguments, not both')
    elif not isinstance(options, PropagationOptions):
        raise TypeError('options must be a PropagationOptions')

    wavelength = check_positive('wavelength', wavelength)
    pixel_pitch = check_positive('pixel_pitch', pixel_pitch)
    distances = resolve_distances(distances)

    if field is None:
        field = phantoms.shepp_logan()

    # Everything is checked on the host before any device work is done
    field = t.as_tensor(field)
    _check_field(field)
    field_shape = tuple(field.shape)
    canvas_shape = options.canvas_shape(field_shape)
    padding.canvas_offsets(field_shape, canvas_shape, stacklevel=3)
    mask = options.aperture_mask
    if mask is not None:
        mask = t.as_tensor(mask)
        _check_mask(mask, canvas_shape)

    backend = backends.select_backend(backends.probe_accelerator(),
                                      force_host=options.force_host_backend)
    backend = backend.with_dtype(options.dtype)
    logger.debug('Propagating a %s field on a %s canvas to %d distances',
                 field_shape, canvas_shape, len(distances))

    field = backend.asarray(field)
    if mask is not None:
        mask = backend.asarray(mask)
    Zs = backend.asarray(distances, dtype=backend.real_dtype)
    coefficients = propagators.generate_transfer_coefficients(
        wavelength, Zs, options.enable_transfer_coefficient, backend)

    padded = padding.pad_to_canvas(field, canvas_shape, backend, warn=False)
    _, _, fx2fy2 = propagators.generate_fresnel_frequencies(
        canvas_shape, pixel_pitch, backend)
    spectrum = propagators.centered_fft2(padded, backend)

    n_distances = len(distances)
    batch_size = options.batch_size or default_batch_size(canvas_shape)
    propagated = backend.zeros((n_distances,) + field_shape)
    if options.return_kernels:
        kernels = backend.zeros((n_distances,) + tuple(canvas_shape))

    for start in range(0, n_distances, batch_size):
        batch = slice(start, min(start + batch_size, n_distances))
        H = propagators.generate_fresnel_propagator(
            fx2fy2, wavelength, Zs[batch], backend,
            coefficients=coefficients[batch])
        result = propagators.fresnel_near_field(spectrum, H, backend,
                                                mask=mask)
        propagated[batch] = padding.crop_from_canvas(result, field_shape)
        if options.return_kernels:
            kernels[batch] = H

    # Distance goes last in the returned stacks
    propagated = backend.gather(propagated.permute(1, 2, 0))
    if options.return_kernels:
        return propagated, backend.gather(kernels.permute(1, 2, 0))
    return propagated
