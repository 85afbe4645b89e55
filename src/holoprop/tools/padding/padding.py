"""Contains tools to embed a field in a larger canvas and cut it back out

The FFT based propagator implements a circular convolution, so light
leaving one side of the array comes back in on the other. Propagating on
a canvas larger than the field pushes that wraparound away from the region
of interest. The margin is filled with the mean value of the field's
border, rather than zeros, to avoid introducing a sharp edge that would
itself diffract.
"""

import warnings

import torch as t

from holoprop.errors import ShapeMismatch

__all__ = ['border_value', 'canvas_offsets', 'pad_to_canvas',
           'crop_from_canvas']


def border_value(field):
    """Returns the average value along the border of a field

    The four edges (top row, bottom row, left column, right column) are
    each averaged separately and the result is the mean of those four
    means. For a square field this is the same as averaging all the border
    samples together, and for a non-square field it keeps the long edges
    from outweighing the short ones.

    Parameters
    ----------
    field : torch.Tensor
        An MxN field

    Returns
    -------
    value : torch.Tensor
        A 0-dimensional tensor with the border average
    """
    edges = [field[0, :], field[-1, :], field[:, 0], field[:, -1]]
    return t.stack([t.mean(edge) for edge in edges]).mean()


def canvas_offsets(field_shape, canvas_shape, warn=True, stacklevel=2):
    """Returns the (i,j) position of a field centered in a canvas

    Parameters
    ----------
    field_shape : tuple
        The (m,n) shape of the field
    canvas_shape : tuple
        The (M,N) shape of the canvas
    warn : bool
        Default True, whether to warn when the margin is odd
    stacklevel : int
        Default 2, passed to warnings.warn so the warning points at the
        code that asked for the canvas

    Returns
    -------
    offsets : tuple
        The ((M-m)//2, (N-n)//2) offset of the field's top left corner
    """
    m, n = field_shape
    M, N = canvas_shape
    if M < m or N < n:
        raise ShapeMismatch(
            'Canvas of shape ' + str((M, N)) + ' cannot hold a field of '
            'shape ' + str((m, n)), expected=(m, n), actual=(M, N))

    if warn and ((M - m) % 2 or (N - n) % 2):
        warnings.warn('The canvas margin around the field is odd, so the '
                      'field sits half a pixel off the canvas center.',
                      stacklevel=stacklevel)

    return (M - m) // 2, (N - n) // 2


def pad_to_canvas(field, canvas_shape, backend, warn=True):
    """Embeds a field in the center of a canvas filled with its border value

    If the canvas has the same shape as the field, the field is returned
    unchanged.

    Parameters
    ----------
    field : torch.Tensor
        The mxn field to pad
    canvas_shape : tuple
        The (M,N) shape of the canvas
    backend : Backend
        The backend to allocate the canvas on
    warn : bool
        Default True, whether to warn when the margin is odd

    Returns
    -------
    padded : torch.Tensor
        The MxN padded field
    """
    field_shape = tuple(field.shape[-2:])
    canvas_shape = tuple(canvas_shape)
    i0, j0 = canvas_offsets(field_shape, canvas_shape, warn=warn,
                            stacklevel=3)
    if canvas_shape == field_shape:
        return field

    padded = backend.full(canvas_shape, border_value(field))
    padded[i0:i0 + field_shape[0], j0:j0 + field_shape[1]] = field
    return padded


def crop_from_canvas(canvas, field_shape):
    """Cuts the field region back out of a canvas, or a stack of canvases

    The region is the one that pad_to_canvas fills. Any leading dimensions
    are passed through.

    Parameters
    ----------
    canvas : torch.Tensor
        The (Leading Dims)xMxN canvas
    field_shape : tuple
        The (m,n) shape of the original field

    Returns
    -------
    cropped : torch.Tensor
        The (Leading Dims)xmxn field
    """
    m, n = field_shape
    M, N = canvas.shape[-2:]
    i0, j0 = (M - m) // 2, (N - n) // 2
    return canvas[..., i0:i0 + m, j0:j0 + n]
