"""
Closed-form determinant, adjugate and inverse of 2x2, 3x3 and 4x4 matrices.

All functions accept a single matrix or a stack of matrices with shape
``(..., N, N)``; the leading dimensions are carried through unchanged so that
every element of a mesh can be handled in one call.
"""
import numpy as np

# below this magnitude a determinant is treated as zero by ``inverse()``
SINGULAR_THRESHOLD = 1e-14


def determinant(m):
    """
    Compute the determinant by cofactor expansion along the first row

    Parameters
    ----------
    m : array_like
        A matrix or stack of matrices with shape ``(..., N, N)`` and
        ``N`` in 2, 3 or 4

    Returns
    -------
    det : float or numpy.ndarray
        The determinant(s), with shape ``m.shape[:-2]``
    """
    m = _as_square(m)
    size = m.shape[-1]
    if size == 2:
        return m[..., 0, 0] * m[..., 1, 1] - m[..., 0, 1] * m[..., 1, 0]
    if size == 3:
        return (m[..., 0, 0] * (m[..., 1, 1] * m[..., 2, 2] -
                                m[..., 1, 2] * m[..., 2, 1]) -
                m[..., 0, 1] * (m[..., 1, 0] * m[..., 2, 2] -
                                m[..., 1, 2] * m[..., 2, 0]) +
                m[..., 0, 2] * (m[..., 1, 0] * m[..., 2, 1] -
                                m[..., 1, 1] * m[..., 2, 0]))

    # the first column of the adjugate holds the first-row cofactors
    adj = _adjugate4(m)
    return (m[..., 0, 0] * adj[..., 0, 0] + m[..., 0, 1] * adj[..., 1, 0] +
            m[..., 0, 2] * adj[..., 2, 0] + m[..., 0, 3] * adj[..., 3, 0])


def adjugate(m):
    """
    Compute the adjugate (transpose of the cofactor matrix)

    Parameters
    ----------
    m : array_like
        A matrix or stack of matrices with shape ``(..., N, N)`` and
        ``N`` in 2, 3 or 4

    Returns
    -------
    adj : numpy.ndarray
        The adjugate(s), with the same shape as ``m``
    """
    m = _as_square(m)
    size = m.shape[-1]
    if size == 2:
        adj = np.empty_like(m)
        adj[..., 0, 0] = m[..., 1, 1]
        adj[..., 0, 1] = -m[..., 0, 1]
        adj[..., 1, 0] = -m[..., 1, 0]
        adj[..., 1, 1] = m[..., 0, 0]
        return adj
    if size == 3:
        return _adjugate3(m)
    return _adjugate4(m)


def inverse(m):
    """
    Compute the inverse of a single matrix as its adjugate scaled by the
    reciprocal of its determinant

    Parameters
    ----------
    m : array_like
        A matrix with shape ``(N, N)`` and ``N`` in 2, 3 or 4

    Returns
    -------
    inv : numpy.ndarray or None
        The inverse, or ``None`` if the magnitude of the determinant is below
        ``SINGULAR_THRESHOLD``
    """
    m = _as_square(m)
    if m.ndim != 2:
        raise ValueError(f'inverse() expects a single matrix, got shape '
                         f'{m.shape}')
    det = determinant(m)
    if abs(det) < SINGULAR_THRESHOLD:
        return None
    return adjugate(m) * (1.0 / det)


def _as_square(m):
    m = np.asarray(m, dtype=float)
    if m.ndim < 2 or m.shape[-1] != m.shape[-2] or \
            m.shape[-1] not in (2, 3, 4):
        raise ValueError(f'Expected a 2x2, 3x3 or 4x4 matrix, got shape '
                         f'{m.shape}')
    return m


def _adjugate3(m):
    adj = np.empty_like(m)
    adj[..., 0, 0] = m[..., 1, 1] * m[..., 2, 2] - m[..., 1, 2] * m[..., 2, 1]
    adj[..., 0, 1] = m[..., 0, 2] * m[..., 2, 1] - m[..., 0, 1] * m[..., 2, 2]
    adj[..., 0, 2] = m[..., 0, 1] * m[..., 1, 2] - m[..., 0, 2] * m[..., 1, 1]
    adj[..., 1, 0] = m[..., 1, 2] * m[..., 2, 0] - m[..., 1, 0] * m[..., 2, 2]
    adj[..., 1, 1] = m[..., 0, 0] * m[..., 2, 2] - m[..., 0, 2] * m[..., 2, 0]
    adj[..., 1, 2] = m[..., 0, 2] * m[..., 1, 0] - m[..., 0, 0] * m[..., 1, 2]
    adj[..., 2, 0] = m[..., 1, 0] * m[..., 2, 1] - m[..., 1, 1] * m[..., 2, 0]
    adj[..., 2, 1] = m[..., 0, 1] * m[..., 2, 0] - m[..., 0, 0] * m[..., 2, 1]
    adj[..., 2, 2] = m[..., 0, 0] * m[..., 1, 1] - m[..., 0, 1] * m[..., 1, 0]
    return adj


def _adjugate4(m):
    a00, a01, a02, a03 = m[..., 0, 0], m[..., 0, 1], m[..., 0, 2], m[..., 0, 3]
    a10, a11, a12, a13 = m[..., 1, 0], m[..., 1, 1], m[..., 1, 2], m[..., 1, 3]
    a20, a21, a22, a23 = m[..., 2, 0], m[..., 2, 1], m[..., 2, 2], m[..., 2, 3]
    a30, a31, a32, a33 = m[..., 3, 0], m[..., 3, 1], m[..., 3, 2], m[..., 3, 3]

    # 2x2 minors of the top two rows
    s0 = a00 * a11 - a10 * a01
    s1 = a00 * a12 - a10 * a02
    s2 = a00 * a13 - a10 * a03
    s3 = a01 * a12 - a11 * a02
    s4 = a01 * a13 - a11 * a03
    s5 = a02 * a13 - a12 * a03

    # 2x2 minors of the bottom two rows
    c0 = a20 * a31 - a30 * a21
    c1 = a20 * a32 - a30 * a22
    c2 = a20 * a33 - a30 * a23
    c3 = a21 * a32 - a31 * a22
    c4 = a21 * a33 - a31 * a23
    c5 = a22 * a33 - a32 * a23

    adj = np.empty_like(m)
    adj[..., 0, 0] = a11 * c5 - a12 * c4 + a13 * c3
    adj[..., 0, 1] = -a01 * c5 + a02 * c4 - a03 * c3
    adj[..., 0, 2] = a31 * s5 - a32 * s4 + a33 * s3
    adj[..., 0, 3] = -a21 * s5 + a22 * s4 - a23 * s3

    adj[..., 1, 0] = -a10 * c5 + a12 * c2 - a13 * c1
    adj[..., 1, 1] = a00 * c5 - a02 * c2 + a03 * c1
    adj[..., 1, 2] = -a30 * s5 + a32 * s2 - a33 * s1
    adj[..., 1, 3] = a20 * s5 - a22 * s2 + a23 * s1

    adj[..., 2, 0] = a10 * c4 - a11 * c2 + a13 * c0
    adj[..., 2, 1] = -a00 * c4 + a01 * c2 - a03 * c0
    adj[..., 2, 2] = a30 * s4 - a31 * s2 + a33 * s0
    adj[..., 2, 3] = -a20 * s4 + a21 * s2 - a23 * s0

    adj[..., 3, 0] = -a10 * c3 + a11 * c1 - a12 * c0
    adj[..., 3, 1] = a00 * c3 - a01 * c1 + a02 * c0
    adj[..., 3, 2] = -a30 * s3 + a31 * s1 - a32 * s0
    adj[..., 3, 3] = a20 * s3 - a21 * s1 + a22 * s0
    return adj
