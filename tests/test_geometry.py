import itertools

import numpy as np
import pytest

from tec2hdf5.geometry import tet_lin_scal_integral, tet_lin_vec_integral, \
    tet_volume

UNIT_TET = np.array([[0., 0., 0.],
                     [1., 0., 0.],
                     [0., 1., 0.],
                     [0., 0., 1.]])


def test_unit_tet_volume():
    assert tet_volume(*UNIT_TET) == pytest.approx(-1. / 6.)


def test_flat_tet_has_zero_volume():
    v0 = [0., 0., 0.]
    v1 = [1., 0., 0.]
    v2 = [0., 1., 0.]
    v3 = [1., 1., 0.]
    assert tet_volume(v0, v1, v2, v3) == pytest.approx(0., abs=1e-15)


def test_repeated_vertex_has_zero_volume():
    assert tet_volume(UNIT_TET[0], UNIT_TET[1], UNIT_TET[2],
                      UNIT_TET[1]) == 0.


def test_large_tet_volume():
    v0 = [0., 0., 0.]
    v1 = [100., 0., 0.]
    v2 = [0., 100., 0.]
    v3 = [0., 0., 200.]
    assert tet_volume(v0, v1, v2, v3) == pytest.approx(-333333.333333333,
                                                       rel=1e-12)


@pytest.mark.parametrize('i, j', list(itertools.combinations(range(4), 2)))
def test_swapping_two_vertices_negates_volume(i, j):
    rng = np.random.default_rng(3)
    points = rng.uniform(-2., 2., (4, 3))
    swapped = points.copy()
    swapped[[i, j]] = swapped[[j, i]]
    assert tet_volume(*swapped) == pytest.approx(-tet_volume(*points),
                                                 rel=1e-12)


def test_translation_does_not_change_volume():
    shifted = UNIT_TET + np.array([10., -3., 7.])
    assert tet_volume(*shifted) == pytest.approx(-1. / 6., rel=1e-12)


def test_volume_of_many_tets():
    rng = np.random.default_rng(4)
    corners = rng.uniform(-1., 1., (6, 4, 3))
    volumes = tet_volume(corners[:, 0], corners[:, 1], corners[:, 2],
                         corners[:, 3])
    assert volumes.shape == (6,)
    for index in range(6):
        assert volumes[index] == pytest.approx(tet_volume(*corners[index]))


def test_scalar_integral():
    values = [1., 2., 3., 4.]
    assert tet_lin_scal_integral(UNIT_TET, values) == \
        pytest.approx(10. / 4. / 6.)


def test_scalar_integral_ignores_winding():
    values = [1., 2., 3., 4.]
    reordered = UNIT_TET[[1, 0, 2, 3]]
    assert tet_lin_scal_integral(reordered, values) == \
        pytest.approx(tet_lin_scal_integral(UNIT_TET, values))
    assert tet_lin_scal_integral(reordered, values) > 0.


def test_vector_integral_of_constant_field():
    vectors = np.tile([1., 0., 0.], (4, 1))
    integral = tet_lin_vec_integral(UNIT_TET, vectors)
    np.testing.assert_allclose(integral, [1. / 6., 0., 0.])


def test_vector_integral_is_componentwise():
    rng = np.random.default_rng(5)
    vectors = rng.uniform(-1., 1., (4, 3))
    integral = tet_lin_vec_integral(UNIT_TET, vectors)
    for component in range(3):
        assert integral[component] == pytest.approx(
            tet_lin_scal_integral(UNIT_TET, vectors[:, component]))


def test_vector_integral_of_many_tets():
    rng = np.random.default_rng(6)
    corners = rng.uniform(-1., 1., (5, 4, 3))
    vectors = rng.uniform(-1., 1., (5, 4, 3))
    integrals = tet_lin_vec_integral(corners, vectors)
    assert integrals.shape == (5, 3)
    np.testing.assert_allclose(integrals[2],
                               tet_lin_vec_integral(corners[2], vectors[2]))


def test_integral_rejects_bad_shape():
    with pytest.raises(ValueError):
        tet_lin_vec_integral(np.zeros((3, 3)), np.zeros((3, 3)))
