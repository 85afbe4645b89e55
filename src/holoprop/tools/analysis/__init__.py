from holoprop.tools.analysis.analysis import *
