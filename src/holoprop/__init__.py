# This is needed to allow us to use torch.tensor in the module without it
# constantly complaining.
import warnings
warnings.filterwarnings("ignore",
                        message='To copy construct from a tensor, ')

__all__ = ['tools', 'propagation', 'errors', 'propagate',
           'PropagationOptions']

from ._version import __version__

from holoprop import errors
from holoprop import tools
from holoprop import propagation
from holoprop.propagation import propagate, PropagationOptions
