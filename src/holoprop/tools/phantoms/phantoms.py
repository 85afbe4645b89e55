"""Contains standard test patterns

These are used as a stand-in input when no field is given, so a quick
call to propagate always has something recognizable to refocus.
"""

import numpy as np
import torch as t

__all__ = ['MODIFIED_SHEPP_LOGAN', 'shepp_logan']


# Each row is (intensity, semi-axis a, semi-axis b, x0, y0, angle in degrees)
# This is the higher-contrast version of the Shepp-Logan head phantom, from
# Toft, "The Radon Transform: Theory and Implementation" (1996)
MODIFIED_SHEPP_LOGAN = np.array([
    [1.0, 0.6900, 0.9200, 0.00, 0.0000, 0.0],
    [-0.8, 0.6624, 0.8740, 0.00, -0.0184, 0.0],
    [-0.2, 0.1100, 0.3100, 0.22, 0.0000, -18.0],
    [-0.2, 0.1600, 0.4100, -0.22, 0.0000, 18.0],
    [0.1, 0.2100, 0.2500, 0.00, 0.3500, 0.0],
    [0.1, 0.0460, 0.0460, 0.00, 0.1000, 0.0],
    [0.1, 0.0460, 0.0460, 0.00, -0.1000, 0.0],
    [0.1, 0.0460, 0.0230, -0.08, -0.6050, 0.0],
    [0.1, 0.0230, 0.0230, 0.00, -0.6060, 0.0],
    [0.1, 0.0230, 0.0460, 0.06, -0.6050, 0.0],
])


def shepp_logan(size=256, ellipses=MODIFIED_SHEPP_LOGAN, dtype=t.float64):
    """Generates a Shepp-Logan style phantom made from a sum of ellipses

    The image spans [-1,1] in both directions, with y increasing towards
    the top row of the array.

    Parameters
    ----------
    size : int
        Default 256, the side length of the square image
    ellipses : array
        Default MODIFIED_SHEPP_LOGAN, an Ex6 array of ellipse parameters
    dtype : torch.dtype
        Default torch.float64, the dtype of the output

    Returns
    -------
    phantom : torch.Tensor
        The size x size phantom image
    """
    axis = (np.arange(size) - (size - 1) / 2) / ((size - 1) / 2)
    Xs, Ys = np.meshgrid(axis, axis[::-1])

    image = np.zeros((size, size))
    for A, a, b, x0, y0, phi in ellipses:
        phi = np.deg2rad(phi)
        dx, dy = Xs - x0, Ys - y0
        u = dx * np.cos(phi) + dy * np.sin(phi)
        v = dy * np.cos(phi) - dx * np.sin(phi)
        image[(u / a)**2 + (v / b)**2 <= 1] += A

    return t.as_tensor(image, dtype=dtype)
