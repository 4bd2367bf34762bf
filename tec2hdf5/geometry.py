import numpy as np

from tec2hdf5.linalg import determinant


def tet_volume(v0, v1, v2, v3):
    """
    Compute the signed volume of the tetrahedron (or tetrahedra) with the
    given vertices.  The sign depends on the winding of the vertices, so
    callers that need the unsigned volume must take the absolute value.

    Parameters
    ----------
    v0, v1, v2, v3 : array_like
        Cartesian coordinates of the four vertices, each with shape
        ``(..., 3)``

    Returns
    -------
    volume : float or numpy.ndarray
        The signed volume, with shape ``v0.shape[:-1]``
    """
    points = np.stack(np.broadcast_arrays(v0, v1, v2, v3), axis=-2)
    points = np.asarray(points, dtype=float)
    ones = np.ones(points.shape[:-1] + (1,))
    return (1.0 / 6.0) * determinant(np.concatenate([points, ones], axis=-1))


def tet_lin_scal_integral(vertices, values):
    """
    Integrate a scalar field that is linear over a tetrahedron: the mean of
    the vertex values times the unsigned volume.  For a field that is not
    linear over the element this is only an approximation.

    Parameters
    ----------
    vertices : array_like
        The vertices of the tetrahedron, shape ``(..., 4, 3)``

    values : array_like
        The field value at each vertex, shape ``(..., 4)``

    Returns
    -------
    integral : float or numpy.ndarray
        The integral, with shape ``values.shape[:-1]``
    """
    vertices = np.asarray(vertices, dtype=float)
    values = np.asarray(values, dtype=float)
    volume = np.abs(_element_volume(vertices))
    return volume * (values[..., 0] + values[..., 1] + values[..., 2] +
                     values[..., 3]) / 4.0


def tet_lin_vec_integral(vertices, vectors):
    """
    Integrate a vector field that is linear over a tetrahedron, one component
    at a time (see :py:func:`tet_lin_scal_integral`)

    Parameters
    ----------
    vertices : array_like
        The vertices of the tetrahedron, shape ``(..., 4, 3)``

    vectors : array_like
        The field vector at each vertex, shape ``(..., 4, 3)``

    Returns
    -------
    integral : numpy.ndarray
        The integral of each component, shape ``(..., 3)``
    """
    vertices = np.asarray(vertices, dtype=float)
    vectors = np.asarray(vectors, dtype=float)
    volume = np.abs(_element_volume(vertices))
    total = (vectors[..., 0, :] + vectors[..., 1, :] + vectors[..., 2, :] +
             vectors[..., 3, :])
    return np.asarray(volume)[..., np.newaxis] * total / 4.0


def _element_volume(vertices):
    if vertices.shape[-2:] != (4, 3):
        raise ValueError(f'Expected tetrahedron vertices with shape '
                         f'(..., 4, 3), got {vertices.shape}')
    return tet_volume(vertices[..., 0, :], vertices[..., 1, :],
                      vertices[..., 2, :], vertices[..., 3, :])
