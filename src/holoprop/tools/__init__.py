""" This module contains the building blocks of the Fresnel propagator

Each tool lives in its own subpackage, with an __init__ file that uses an
import * statement to pull in the functions defined in a file of the same
name. This keeps numpy and torch from leaking into the namespace of
holoprop.tools.propagators and friends, and lets a script import only the
set of tools it needs.
"""

from holoprop.tools import backends
from holoprop.tools import propagators
from holoprop.tools import padding
from holoprop.tools import analysis
from holoprop.tools import phantoms
