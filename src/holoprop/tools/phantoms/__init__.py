from holoprop.tools.phantoms.phantoms import *
