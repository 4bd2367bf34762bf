import csv

import h5py
import numpy as np
import pytest

from tec2hdf5.analytics import compute_net_moments, compute_volume
from tec2hdf5.io import read_mesh_hdf5, write_mesh_hdf5, write_moments_csv
from tec2hdf5.mesh import read_mesh_from_tecplot

from .util import get_test_data_file


def _two_zone_mesh():
    return read_mesh_from_tecplot(get_test_data_file('two_zones.tec'))


def test_write_mesh_hdf5_layout(tmp_path):
    mesh = _two_zone_mesh()
    filename = str(tmp_path / 'mesh.h5')
    write_mesh_hdf5(mesh, filename)

    with h5py.File(filename, 'r') as h5_file:
        vertices = h5_file['/mesh/vertices']
        assert vertices.shape == (5, 3)
        assert vertices.dtype == np.float64
        elements = h5_file['/mesh/elements']
        assert elements.shape == (2, 4)
        assert elements.dtype == np.uint64
        np.testing.assert_array_equal(elements[:],
                                      [[0, 1, 2, 3], [1, 2, 3, 4]])
        submesh = h5_file['/mesh/submesh']
        assert submesh.shape == (2,)
        assert submesh.dtype == np.uint64
        for index in range(2):
            vectors = h5_file[f'/fields/field{index}/vectors']
            assert vectors.shape == (5, 3)
            np.testing.assert_array_equal(vectors[:],
                                          mesh.fields[index].vectors)
        labels = h5_file['/fields/labels']
        assert labels.dtype == np.dtype('S64')
        assert [label.decode('ascii') for label in labels[:]] == \
            ['400.0000 mT', '380.0000 mT']
        assert 'volume' not in h5_file.attrs
        assert 'net_moments' not in h5_file['fields']


def test_labels_are_truncated(tmp_path):
    mesh = _two_zone_mesh()
    filename = str(tmp_path / 'mesh.h5')
    write_mesh_hdf5(mesh, filename, label_length=4)
    with h5py.File(filename, 'r') as h5_file:
        labels = h5_file['/fields/labels'][:]
    assert list(labels) == [b'400.', b'380.']


def test_hdf5_round_trip_with_quantities(tmp_path):
    mesh = _two_zone_mesh()
    compute_volume(mesh)
    compute_net_moments(mesh)
    filename = str(tmp_path / 'mesh.h5')
    write_mesh_hdf5(mesh, filename)

    with h5py.File(filename, 'r') as h5_file:
        assert h5_file.attrs['volume'] == pytest.approx(-0.5)
        assert h5_file['/fields/net_moments'].shape == (2, 3)

    other = read_mesh_hdf5(filename)
    assert other.label == mesh.label
    np.testing.assert_array_equal(other.vertices, mesh.vertices)
    np.testing.assert_array_equal(other.elements, mesh.elements)
    np.testing.assert_array_equal(other.submesh_indices,
                                  mesh.submesh_indices)
    assert [field.label for field in other.fields] == \
        [field.label for field in mesh.fields]
    assert other.volume == pytest.approx(mesh.volume)
    np.testing.assert_allclose(other.net_moments, mesh.net_moments)


def test_write_moments_csv(tmp_path):
    mesh = _two_zone_mesh()
    compute_net_moments(mesh)
    filename = str(tmp_path / 'quants.csv')
    write_moments_csv(mesh, filename)

    with open(filename, newline='') as csv_file:
        rows = list(csv.reader(csv_file))
    assert rows[0] == ['index', 'mom_x', 'mom_y', 'mom_z']
    assert len(rows) == 3
    assert rows[1][0] == '1'
    assert rows[2][0] == '2'
    assert float(rows[1][1]) == pytest.approx(0.5)
    assert float(rows[2][3]) == pytest.approx(-0.5)


def test_write_moments_csv_zero_based(tmp_path):
    mesh = _two_zone_mesh()
    compute_net_moments(mesh)
    filename = str(tmp_path / 'quants.csv')
    write_moments_csv(mesh, filename, index_base=0, float_format='.3f')
    with open(filename, newline='') as csv_file:
        rows = list(csv.reader(csv_file))
    assert rows[1] == ['0', '0.500', '0.000', '0.000']


def test_write_moments_csv_needs_moments(tmp_path):
    mesh = _two_zone_mesh()
    with pytest.raises(ValueError):
        write_moments_csv(mesh, str(tmp_path / 'quants.csv'))


def test_moments_csv_reads_back_exactly(tmp_path):
    mesh = _two_zone_mesh()
    # a field whose moment is not a short decimal
    mesh.fields[1].vectors[:, 1] = 0.1
    compute_net_moments(mesh)
    filename = str(tmp_path / 'quants.csv')
    write_moments_csv(mesh, filename)

    with open(filename, newline='') as csv_file:
        rows = list(csv.reader(csv_file))[1:]
    assert len(rows) == len(mesh.net_moments)
    for row, moment in zip(rows, mesh.net_moments):
        for text, component in zip(row[1:], moment):
            assert float(text) == component
