"""Contains the option handling for propagate

All of the optional behaviour of propagate is described by a single
PropagationOptions object. It can be built directly, or from the loose
positional and keyword arguments that propagate accepts, in which case the
old short option names (zpad, cpu, mask, tfc) are also understood.
Everything is validated once, when the object is made, so a bad option is
reported before any work is done.
"""

import numbers
from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

import numpy as np
import torch as t

from holoprop.errors import InvalidOption

__all__ = ['DEFAULT_WAVELENGTH', 'DEFAULT_DISTANCE', 'DEFAULT_PIXEL_PITCH',
           'OPTION_ALIASES', 'PropagationOptions', 'resolve_options',
           'resolve_distances', 'check_positive']

DEFAULT_WAVELENGTH = 632.8e-9  # HeNe, m
DEFAULT_DISTANCE = 0.0
DEFAULT_PIXEL_PITCH = 6.5e-6  # m

# Maps every accepted (lowercased) option name to its field
OPTION_ALIASES = {
    'canvas_size': 'canvas_size',
    'zpad': 'canvas_size',
    'force_host_backend': 'force_host_backend',
    'cpu': 'force_host_backend',
    'aperture_mask': 'aperture_mask',
    'mask': 'aperture_mask',
    'enable_transfer_coefficient': 'enable_transfer_coefficient',
    'tfc': 'enable_transfer_coefficient',
    'return_kernels': 'return_kernels',
    'batch_size': 'batch_size',
    'dtype': 'dtype',
}


def _is_integral(value):
    if isinstance(value, bool):
        return False
    if isinstance(value, numbers.Integral):
        return True
    return isinstance(value, numbers.Real) and float(value).is_integer()


def _is_number(value):
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def check_positive(name, value):
    """Raises a ValueError unless value is a positive, finite real number"""
    if isinstance(value, bool) or not isinstance(value, numbers.Real) \
       or not np.isfinite(value) or value <= 0:
        raise ValueError(name + ' must be a positive number, got '
                         + repr(value))
    return float(value)


def resolve_distances(distances):
    """Converts a scalar or sequence of distances into a 1D array

    Parameters
    ----------
    distances : float or array
        One distance, or a sequence of them, in m

    Returns
    -------
    distances : np.ndarray
        A length-L float64 array, in the order given
    """
    if isinstance(distances, t.Tensor):
        distances = distances.detach().cpu().numpy()
    distances = np.asarray(distances, dtype=np.float64)
    if distances.ndim > 1:
        raise ValueError('distances must be a scalar or a 1D sequence')
    distances = np.atleast_1d(distances)
    if len(distances) == 0:
        raise ValueError('At least one distance must be given')
    if not np.all(np.isfinite(distances)):
        raise ValueError('distances must be finite')
    return distances


@dataclass
class PropagationOptions:
    """Optional settings for a propagation

    Attributes:
        canvas_size: Side length (or (M,N) shape) of the padded canvas.
            None propagates on a canvas the size of the field.
        force_host_backend: Run on the CPU even if a GPU is available
        aperture_mask: Array the size of the canvas, multiplied into the
            centered spectrum of the field
        enable_transfer_coefficient: Include the exp(i*2*pi*z/wavelength)
            global phase in each transfer function
        return_kernels: Also return the stack of transfer functions
        batch_size: Number of distances propagated in one batched
            operation. None picks as many as fit in a batch of
            MAX_BATCH_ELEMENTS canvas samples, and at least one.
        dtype: Complex dtype to compute in
    """
    canvas_size: Optional[Union[int, Tuple[int, int]]] = None
    force_host_backend: bool = False
    aperture_mask: Any = None
    enable_transfer_coefficient: bool = False
    return_kernels: bool = False
    batch_size: Optional[int] = None
    dtype: t.dtype = t.complex128

    def __post_init__(self):
        if self.canvas_size is not None:
            if isinstance(self.canvas_size, (tuple, list)):
                size = tuple(self.canvas_size)
            else:
                size = (self.canvas_size, self.canvas_size)
            if len(size) != 2 or not all(_is_integral(s) and s > 0
                                         for s in size):
                raise ValueError('canvas_size must be a positive integer or '
                                 'a pair of them, got '
                                 + repr(self.canvas_size))
            self.canvas_size = tuple(int(s) for s in size)

        if self.batch_size is not None:
            if not _is_integral(self.batch_size) or self.batch_size <= 0:
                raise ValueError('batch_size must be a positive integer, got '
                                 + repr(self.batch_size))
            self.batch_size = int(self.batch_size)

        if not isinstance(self.dtype, t.dtype) or not self.dtype.is_complex:
            raise ValueError('dtype must be a complex torch dtype, got '
                             + repr(self.dtype))

        for name in ('force_host_backend', 'enable_transfer_coefficient',
                     'return_kernels'):
            value = getattr(self, name)
            if not isinstance(value, (bool, np.bool_)):
                raise ValueError(name + ' must be True or False, got '
                                 + repr(value))
            setattr(self, name, bool(value))

    def canvas_shape(self, field_shape):
        """Returns the (M,N) canvas shape to use with a given field"""
        if self.canvas_size is None:
            return tuple(field_shape)
        return self.canvas_size


def resolve_options(*args, **kwargs):
    """Builds a PropagationOptions from loose arguments

    A single extra positional number is read as the canvas size, and must
    be a positive integer like the canvas_size option. Keyword
    names are case insensitive and may use the short names in
    OPTION_ALIASES. Nothing is applied unless every argument is
    recognized.

    Returns
    -------
    options : PropagationOptions
        The validated options

    Raises
    ------
    InvalidOption
        If an option name, or an extra positional argument, is not
        recognized
    """
    fields = {}
    if len(args) == 1 and _is_number(args[0]):
        fields['canvas_size'] = args[0]
    elif len(args) != 0:
        raise InvalidOption(repr(args[0]) if len(args) == 1 else repr(args))

    for name, value in kwargs.items():
        key = OPTION_ALIASES.get(name.lower())
        if key is None:
            raise InvalidOption(name)
        if key in fields:
            raise ValueError('Option ' + key + ' was given more than once')
        fields[key] = value

    return PropagationOptions(**fields)
