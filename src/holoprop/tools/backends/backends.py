"""Contains the array backends that the propagator runs on

The propagation algorithm is written once, against the small interface of
the Backend class defined here. A backend is just a torch device plus the
handful of array operations the algorithm needs, so the host and the
accelerator implementations differ only in where their tensors live.

Choosing a backend is split in two steps. probe_accelerator asks torch
whether a CUDA device can be used and reports the answer as an
AcceleratorStatus, and select_backend turns that answer and the user's
override into a Backend. Keeping the second step a pure function makes it
easy to test the selection policy on machines without a GPU.
"""

import enum
import logging

import numpy as np
import torch as t

from holoprop.errors import AcceleratorUnavailable

__all__ = ['AcceleratorStatus', 'Backend', 'probe_accelerator',
           'select_backend']

logger = logging.getLogger(__name__)


class AcceleratorStatus(enum.Enum):
    """Result of probing for an accelerator"""
    AVAILABLE = 'available'
    UNAVAILABLE = 'unavailable'


def probe_accelerator():
    """Reports whether a CUDA device can be used

    torch.cuda.is_available already returns False when the driver is
    missing or no device is visible, so this never raises.

    Returns
    -------
    status : AcceleratorStatus
        AVAILABLE if at least one CUDA device is usable
    """
    if t.cuda.is_available() and t.cuda.device_count() > 0:
        return AcceleratorStatus.AVAILABLE
    return AcceleratorStatus.UNAVAILABLE


def select_backend(status, force_host=False):
    """Chooses a backend from a probe result and the host override

    Parameters
    ----------
    status : AcceleratorStatus
        The result of probe_accelerator
    force_host : bool
        Default False, if True the host backend is used regardless

    Returns
    -------
    backend : Backend
        The backend to run the propagation on
    """
    if force_host or status is not AcceleratorStatus.AVAILABLE:
        backend = Backend.host()
    else:
        backend = Backend.accelerator()
    logger.debug('Selected %s backend (accelerator %s, force_host=%s)',
                 backend.name, status.value, force_host)
    return backend


class Backend(object):
    """Array operations on a single torch device

    Every tensor created or accepted by a backend is moved to its device,
    and gather is the only way results leave it.

    Parameters
    ----------
    device : str or torch.device
        The device that all arrays are allocated on
    dtype : torch.dtype
        Default torch.complex128, the complex dtype used for fields
    """

    def __init__(self, device='cpu', dtype=t.complex128):
        self.device = t.device(device)
        self.dtype = dtype

    @classmethod
    def host(cls, dtype=t.complex128):
        """Creates the host (CPU) backend"""
        return cls('cpu', dtype=dtype)

    @classmethod
    def accelerator(cls, dtype=t.complex128, index=0):
        """Creates a backend on a CUDA device

        Raises
        ------
        AcceleratorUnavailable
            If no CUDA device is available
        """
        if probe_accelerator() is not AcceleratorStatus.AVAILABLE:
            raise AcceleratorUnavailable('No CUDA device is available')
        return cls(t.device('cuda', index), dtype=dtype)

    @property
    def name(self):
        return 'host' if self.device.type == 'cpu' else 'accelerator'

    @property
    def real_dtype(self):
        """The real dtype matching the complex dtype of this backend"""
        return t.empty(0, dtype=self.dtype).real.dtype

    def with_dtype(self, dtype):
        """Returns a backend on the same device with a different dtype"""
        return Backend(self.device, dtype=dtype)

    def asarray(self, x, dtype=None):
        """Moves an array-like onto the device as a tensor

        By default, the result is cast to the complex dtype of the backend.
        Pass the real dtype explicitly for real-valued coordinates.
        """
        if dtype is None:
            dtype = self.dtype
        if isinstance(x, np.ndarray) and not x.flags.writeable:
            x = x.copy()
        return t.as_tensor(x, dtype=dtype, device=self.device)

    def zeros(self, shape, dtype=None):
        if dtype is None:
            dtype = self.dtype
        return t.zeros(tuple(shape), dtype=dtype, device=self.device)

    def full(self, shape, value, dtype=None):
        if dtype is None:
            dtype = self.dtype
        value = t.as_tensor(value, dtype=dtype, device=self.device)
        return value.expand(tuple(shape)).clone()

    def arange(self, n, dtype=None):
        if dtype is None:
            dtype = self.real_dtype
        return t.arange(n, dtype=dtype, device=self.device)

    def exp(self, x):
        return t.exp(x)

    def fft2(self, x):
        return t.fft.fft2(x, dim=(-2, -1))

    def ifft2(self, x):
        return t.fft.ifft2(x, dim=(-2, -1))

    def fftshift(self, x):
        return t.fft.fftshift(x, dim=(-2, -1))

    def ifftshift(self, x):
        return t.fft.ifftshift(x, dim=(-2, -1))

    def gather(self, x):
        """Returns a tensor in host memory, detached from the device"""
        return x.detach().cpu().contiguous()

    def __repr__(self):
        return 'Backend(device=%r, dtype=%s)' % (str(self.device), self.dtype)
