"""
Refocuses a simulated hologram through a stack of planes.

A phantom is defocused by a known distance to make a "hologram", which is
then propagated back through a range of distances. The plane where the
field is sharpest (here, using the variance of the intensity as a focus
metric) should come out at the distance the phantom was defocused by.
"""
import logging

import numpy as np
import torch as t
import holoprop
from holoprop.tools import analysis, phantoms

logging.basicConfig(level=logging.DEBUG)

wavelength = 632.8e-9
pixel_pitch = 6.5e-6
defocus = 2e-3

# We make a phase object from the phantom and blur it by propagation
obj = t.exp(1j * np.pi * phantoms.shepp_logan(256))
hologram = holoprop.propagate(obj, wavelength, defocus, pixel_pitch,
                              canvas_size=512)[:, :, 0]

# Then we scan back through a range of distances, keeping the kernels so
# we can check them for aliasing
distances = np.linspace(-4e-3, 0, 81)
stack, kernels = holoprop.propagate(hologram, wavelength, distances,
                                    pixel_pitch, canvas_size=512,
                                    return_kernels=True, batch_size=16)

aliased = analysis.find_aliased_distances(kernels.shape[:2], pixel_pitch,
                                          wavelength, distances)
print('Aliased kernels:', len(aliased))

# A phase object is in focus where its intensity is most uniform
sharpness = t.var(t.abs(stack)**2, dim=(0, 1))
best = distances[t.argmin(sharpness).item()]
print('Best focus at %.2f mm (expected %.2f mm)' % (best * 1e3,
                                                   -defocus * 1e3))
