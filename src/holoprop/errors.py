"""Exceptions raised while setting up a propagation

All of the checks that can fail are run before any transform is computed,
so a caller sees at most one of these per call and never gets a partially
filled result back.
"""

__all__ = ['PropagationError', 'InvalidOption', 'ShapeMismatch',
           'AcceleratorUnavailable']


class PropagationError(Exception):
    """Base class for all errors raised by holoprop"""


class InvalidOption(PropagationError, KeyError):
    """Raised when an option name is not recognized

    Parameters
    ----------
    name : str
        The offending option name (or the repr of an unexpected positional)
    """

    def __init__(self, name):
        self.name = name
        super(InvalidOption, self).__init__(name)

    def __str__(self):
        return 'Unexpected option: ' + str(self.name)


class ShapeMismatch(PropagationError, ValueError):
    """Raised when an array does not fit the canvas it is used with"""

    def __init__(self, message, expected=None, actual=None):
        self.expected = expected
        self.actual = actual
        super(ShapeMismatch, self).__init__(message)


class AcceleratorUnavailable(PropagationError, RuntimeError):
    """Raised when an accelerator backend is requested without a device

    The propagator itself never lets this escape: backend selection checks
    the probe result first and falls back to the host.
    """
