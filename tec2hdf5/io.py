import csv

import h5py
import numpy

from tec2hdf5.mesh import Field, Mesh

default_label_length = 64


def write_mesh_hdf5(mesh, filename, label_length=None, logger=None):
    """
    Write a mesh and its fields to an HDF5 container with the layout::

        /mesh/vertices            (nvert, 3) float64
        /mesh/elements            (nelem, 4) uint64, zero-based
        /mesh/submesh             (nelem,) uint64
        /fields/field{k}/vectors  (nvert, 3) float64, one group per field
        /fields/labels            (nfields,) fixed-width ASCII

    The mesh label is stored in the ``label`` attribute of the root group.
    If they have been computed, the volume is stored in the ``volume``
    attribute and the net moments in ``/fields/net_moments``.

    Parameters
    ----------
    mesh : tec2hdf5.mesh.Mesh
        The mesh to write

    filename : str
        The path of the HDF5 file to create (overwritten if it exists)

    label_length : int, optional
        The fixed width of field labels; longer labels are truncated.
        Default is ``tec2hdf5.io.default_label_length``

    logger : logging.Logger, optional
        A logger for progress messages
    """
    if label_length is None:
        label_length = default_label_length

    if logger is not None:
        logger.info(f'Writing HDF5 mesh file: {filename}')

    with h5py.File(filename, 'w') as h5_file:
        h5_file.attrs['label'] = mesh.label
        if mesh.volume is not None:
            h5_file.attrs['volume'] = mesh.volume

        h5_file.create_dataset('/mesh/vertices', data=mesh.vertices,
                               dtype='f8')
        h5_file.create_dataset('/mesh/elements', data=mesh.elements,
                               dtype='u8')
        h5_file.create_dataset('/mesh/submesh', data=mesh.submesh_indices,
                               dtype='u8')

        fields_group = h5_file.require_group('fields')
        for field_index, field in enumerate(mesh.fields):
            fields_group.create_dataset(f'field{field_index}/vectors',
                                        data=field.vectors, dtype='f8')

        labels = numpy.array(
            [_fixed_width_ascii(field.label, label_length)
             for field in mesh.fields],
            dtype=f'S{label_length}')
        fields_group.create_dataset('labels', data=labels)

        if mesh.net_moments is not None:
            fields_group.create_dataset('net_moments',
                                        data=numpy.array(mesh.net_moments),
                                        dtype='f8')


def read_mesh_hdf5(filename):
    """
    Read a mesh written by :py:func:`write_mesh_hdf5`

    Parameters
    ----------
    filename : str
        The path of the HDF5 file

    Returns
    -------
    mesh : tec2hdf5.mesh.Mesh
        The mesh, with ``volume`` and ``net_moments`` filled in if they were
        stored in the file
    """
    with h5py.File(filename, 'r') as h5_file:
        label = h5_file.attrs.get('label', '')
        if isinstance(label, bytes):
            label = label.decode('ascii')
        vertices = h5_file['/mesh/vertices'][:]
        elements = h5_file['/mesh/elements'][:].astype(numpy.int64)
        submesh = h5_file['/mesh/submesh'][:].astype(numpy.int64)

        fields_group = h5_file['fields']
        labels = [raw.decode('ascii') for raw in fields_group['labels'][:]]
        fields = [Field(label=field_label,
                        vectors=fields_group[f'field{index}/vectors'][:])
                  for index, field_label in enumerate(labels)]

        mesh = Mesh(label=str(label), vertices=vertices, elements=elements,
                    submesh_indices=submesh, fields=fields)

        if 'volume' in h5_file.attrs:
            mesh.volume = float(h5_file.attrs['volume'])
        if 'net_moments' in fields_group:
            mesh.net_moments = list(fields_group['net_moments'][:])

    return mesh


def write_moments_csv(mesh, filename, index_base=1, float_format=None):
    """
    Write the net moment of each field to a CSV file with columns
    ``index, mom_x, mom_y, mom_z``

    Parameters
    ----------
    mesh : tec2hdf5.mesh.Mesh
        A mesh whose net moments have been computed

    filename : str
        The path of the CSV file to write

    index_base : int, optional
        The index written for the first field

    float_format : str, optional
        A python format spec for the moment components.  By default each
        component is written as the shortest text that reads back as the
        same float
    """
    if mesh.net_moments is None:
        raise ValueError('The net moments of the mesh have not been computed')

    with open(filename, 'w', newline='') as csv_file:
        writer = csv.writer(csv_file)
        writer.writerow(['index', 'mom_x', 'mom_y', 'mom_z'])
        for index, moment in enumerate(mesh.net_moments, start=index_base):
            writer.writerow([index] + [_format_component(component,
                                                         float_format)
                                       for component in moment])


def _fixed_width_ascii(label, length):
    return label.encode('ascii', 'replace')[:length]


def _format_component(component, float_format):
    if float_format is None:
        return repr(float(component))
    return format(float(component), float_format)
