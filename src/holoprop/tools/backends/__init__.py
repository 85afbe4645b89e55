from holoprop.tools.backends.backends import *
