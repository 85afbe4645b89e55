from holoprop.tools.propagators.propagators import *
