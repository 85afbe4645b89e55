from holoprop.tools.padding.padding import *
