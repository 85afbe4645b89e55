"""This module contains the Fresnel propagation engine

The engine lives in engine.py and the handling of its optional arguments
in options.py. Both are re-exported here, so the usual entry point is
simply holoprop.propagate.
"""

__all__ = ['propagate', 'PropagationOptions', 'resolve_options']

from holoprop.propagation.options import PropagationOptions, resolve_options
from holoprop.propagation.engine import propagate
