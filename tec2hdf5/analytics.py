"""
Integrated quantities of a tetrahedral mesh: its volume and the net moment
of each of its vector fields.

Per-element contributions are evaluated for all elements at once, then added
up one element at a time in element order so that results are reproducible
bit for bit.
"""
import numpy as np
from tqdm import tqdm

from tec2hdf5.geometry import tet_lin_vec_integral, tet_volume


def compute_volume(mesh):
    """
    Compute the signed volume of the mesh, the sum of the signed volumes of
    its elements.  Elements with inconsistent winding reduce the total
    rather than being silently corrected.  The result is cached in
    ``mesh.volume``.

    Parameters
    ----------
    mesh : tec2hdf5.mesh.Mesh
        The mesh

    Returns
    -------
    volume : float
        The signed volume
    """
    if mesh.volume is not None:
        return mesh.volume

    corners = mesh.vertices[mesh.elements]
    volumes = tet_volume(corners[:, 0, :], corners[:, 1, :],
                         corners[:, 2, :], corners[:, 3, :])
    volume = 0.0
    for element_volume in volumes.tolist():
        volume += element_volume

    mesh.volume = volume
    return volume


def compute_net_moments(mesh, show_progress=False):
    """
    Compute the net moment (volume integral) of each field of the mesh,
    assuming each field varies linearly over every element.  The result is
    cached in ``mesh.net_moments``.

    Parameters
    ----------
    mesh : tec2hdf5.mesh.Mesh
        The mesh

    show_progress : bool, optional
        Whether to display a progress bar over the fields

    Returns
    -------
    net_moments : list of numpy.ndarray
        One 3-vector per field, in the order of ``mesh.fields``
    """
    if mesh.net_moments is not None:
        return mesh.net_moments

    corners = mesh.vertices[mesh.elements]

    fields = mesh.fields
    if show_progress:
        fields = tqdm(fields, desc='Net moments')

    net_moments = []
    for field in fields:
        integrals = tet_lin_vec_integral(corners,
                                         field.vectors[mesh.elements])
        moment = np.zeros(3)
        for integral in integrals:
            moment += integral
        net_moments.append(moment)

    mesh.net_moments = net_moments
    return net_moments
