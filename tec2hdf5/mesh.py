"""
The tetrahedral mesh with per-vertex vector fields and its reconstruction
from a parsed tecplot document
"""
import numpy as np

from tec2hdf5.tecplot import read_tecplot

# in the first zone, a number without a decimal point or exponent ends the
# floating-point values
_INTEGER_FORMATTED_FLOATS = 'coordinates and field components must be ' \
    'written with a decimal point or exponent, e.g. 0.0 rather than 0'


class ReconstructionError(ValueError):
    """
    The token streams of a tecplot document do not match the vertex and
    element counts declared in its zone headers

    Attributes
    ----------
    stream : str
        A description of the token stream that was being consumed

    expected : int
        The number of tokens the zone headers call for

    found : int
        The number of tokens that were actually available

    kind : {'too few', 'too many'}
        Whether the stream was short or had tokens left over
    """

    def __init__(self, stream, expected, found, message=None, hint=None):
        self.stream = stream
        self.expected = expected
        self.found = found
        self.kind = 'too few' if found < expected else 'too many'
        if message is None:
            message = f'{self.kind} tokens in {stream}: expected ' \
                      f'{expected}, found {found}'
        if hint is not None:
            message = f'{message} ({hint})'
        super().__init__(message)


class ConnectivityError(ReconstructionError):
    """
    An element refers to a vertex that does not exist

    Attributes
    ----------
    element : int
        The zero-based index of the offending element

    vertex : int
        The offending zero-based vertex index
    """

    def __init__(self, element, vertex, nvert):
        self.element = element
        self.vertex = vertex
        message = f'element {element} refers to vertex {vertex}, but ' \
                  f'vertex indices must be in [0, {nvert})'
        super().__init__('element connectivity', expected=nvert,
                         found=vertex, message=message)
        self.kind = 'out of range'


class Field(object):
    """
    A vector field with one value per mesh vertex

    Attributes
    ----------
    label : str
        The field label (the title of the zone it came from)

    vectors : numpy.ndarray
        The field vectors, shape ``(nvert, 3)``
    """

    def __init__(self, label, vectors):
        self.label = label
        self.vectors = np.asarray(vectors, dtype=float)


class Mesh(object):
    """
    A tetrahedral mesh with any number of vector fields on its vertices

    Attributes
    ----------
    label : str
        The mesh label

    vertices : numpy.ndarray
        Vertex coordinates, shape ``(nvert, 3)``

    elements : numpy.ndarray
        Zero-based vertex indices of each tetrahedron, shape ``(nelem, 4)``

    submesh_indices : numpy.ndarray
        The submesh tag of each element, shape ``(nelem,)``

    fields : list of tec2hdf5.mesh.Field
        The vector fields

    volume : float or None
        The signed mesh volume, once computed by
        :py:func:`tec2hdf5.analytics.compute_volume`

    net_moments : list of numpy.ndarray or None
        The net moment of each field, once computed by
        :py:func:`tec2hdf5.analytics.compute_net_moments`
    """

    def __init__(self, label, vertices, elements, submesh_indices, fields):
        """
        Make a new mesh, checking that the arrays are consistent with each
        other

        Parameters
        ----------
        label : str
            The mesh label

        vertices : array_like
            Vertex coordinates, shape ``(nvert, 3)``

        elements : array_like
            Zero-based vertex indices of each tetrahedron, shape
            ``(nelem, 4)``

        submesh_indices : array_like
            The submesh tag of each element, shape ``(nelem,)``

        fields : list of tec2hdf5.mesh.Field
            The vector fields, each with one vector per vertex
        """
        self.label = label
        self.vertices = _as_table(vertices, float, 3, 'vertices')
        self.elements = _as_table(elements, np.int64, 4, 'elements')
        self.submesh_indices = np.asarray(submesh_indices, dtype=np.int64)
        self.fields = list(fields)
        self.volume = None
        self.net_moments = None

        self._check()

    @property
    def nvert(self):
        return self.vertices.shape[0]

    @property
    def nelem(self):
        return self.elements.shape[0]

    def _check(self):
        nvert = self.nvert
        if self.submesh_indices.shape != (self.nelem,):
            raise ValueError(f'Expected {self.nelem} submesh indices, got '
                             f'shape {self.submesh_indices.shape}')
        for field in self.fields:
            if field.vectors.shape != (nvert, 3):
                raise ValueError(f'Field {field.label!r} has shape '
                                 f'{field.vectors.shape}, expected '
                                 f'({nvert}, 3)')
        bad = np.logical_or(self.elements < 0, self.elements >= nvert)
        if np.any(bad):
            element, corner = np.argwhere(bad)[0]
            raise ConnectivityError(element=int(element),
                                    vertex=int(self.elements[element, corner]),
                                    nvert=nvert)


def _as_table(values, dtype, ncols, name):
    values = np.asarray(values, dtype=dtype)
    if values.ndim == 1 and values.size == 0:
        return np.empty((0, ncols), dtype=dtype)
    if values.ndim != 2 or values.shape[1] != ncols:
        raise ValueError(f'Expected {name} with shape (n, {ncols}), got '
                         f'shape {values.shape}')
    return values


class _TokenCursor(object):
    """ Read consecutive slices from a token stream without modifying it """

    def __init__(self, tokens, stream, hint=None):
        self.tokens = tokens
        self.stream = stream
        self.hint = hint
        self.position = 0

    def take(self, count):
        available = len(self.tokens) - self.position
        if count > available:
            raise ReconstructionError(self.stream,
                                      expected=self.position + count,
                                      found=len(self.tokens), hint=self.hint)
        values = self.tokens[self.position:self.position + count]
        self.position += count
        return values

    def take_columns(self, nrows):
        """ Take x, y and z blocks of ``nrows`` values and interleave them """
        columns = [self.take(nrows) for _ in range(3)]
        return np.stack(columns, axis=1)

    def finish(self):
        if self.position != len(self.tokens):
            raise ReconstructionError(self.stream, expected=self.position,
                                      found=len(self.tokens))


def create_mesh(document):
    """
    Build a mesh from a parsed tecplot document.

    The first zone's floating-point stream holds the x, y and z coordinates
    (``nvert`` values each) followed by the x, y and z components of the
    first field.  Its integer stream holds one submesh index per element
    followed by four one-based vertex indices per element.  Each further zone
    holds the x, y and z components of one more field.

    Parameters
    ----------
    document : tec2hdf5.tecplot.Document
        The parsed document

    Returns
    -------
    mesh : tec2hdf5.mesh.Mesh
        The mesh, with ``volume`` and ``net_moments`` not yet computed

    Raises
    ------
    tec2hdf5.mesh.ReconstructionError
        If a token stream is too short or too long for the declared counts,
        or if a later zone declares a different number of vertices than the
        first

    tec2hdf5.mesh.ConnectivityError
        If an element refers to a vertex that does not exist
    """
    first_zone = document.first_zone
    nvert = first_zone.nvert
    nelem = first_zone.nelem

    floats = _TokenCursor(first_zone.float_list,
                          f'floating-point values of zone '
                          f'{first_zone.title!r}',
                          hint=_INTEGER_FORMATTED_FLOATS)
    integers = _TokenCursor(first_zone.integer_list,
                            f'integer values of zone {first_zone.title!r}')

    vertices = floats.take_columns(nvert)
    fields = [Field(label=first_zone.title,
                    vectors=floats.take_columns(nvert))]
    floats.finish()

    submesh_indices = integers.take(nelem)
    # the file uses one-based vertex indices
    elements = integers.take(4 * nelem).reshape((nelem, 4)) - 1
    integers.finish()

    for zone in document.zones:
        if zone.nvert != nvert:
            raise ReconstructionError(
                f'header of zone {zone.title!r}', expected=nvert,
                found=zone.nvert,
                message=f'zone {zone.title!r} declares N={zone.nvert}, but '
                        f'the first zone has {nvert} vertices')
        values = _TokenCursor(zone.float_list,
                              f'floating-point values of zone '
                              f'{zone.title!r}')
        fields.append(Field(label=zone.title,
                            vectors=values.take_columns(nvert)))
        values.finish()

    return Mesh(label=document.title, vertices=vertices, elements=elements,
                submesh_indices=submesh_indices, fields=fields)


def read_mesh_from_tecplot(filename, logger=None):
    """
    Read a tecplot file and build a mesh from it

    Parameters
    ----------
    filename : str
        The path to the tecplot file

    logger : logging.Logger, optional
        A logger for the mesh summary

    Returns
    -------
    mesh : tec2hdf5.mesh.Mesh
        The mesh, with ``volume`` and ``net_moments`` not yet computed
    """
    if logger is not None:
        logger.info(f'Reading tecplot file: {filename}')
    document = read_tecplot(filename)
    if logger is not None:
        first_zone = document.first_zone
        logger.debug(f'first zone {first_zone.title!r}: '
                     f'{len(first_zone.float_list)} floats, '
                     f'{len(first_zone.integer_list)} integers')
        for zone in document.zones:
            logger.debug(f'zone {zone.title!r}: {len(zone.float_list)} '
                         f'floats')
    mesh = create_mesh(document)
    if logger is not None:
        logger.info(f'  No. of vertices: {mesh.nvert}')
        logger.info(f'  No. of elements: {mesh.nelem}')
        logger.info(f'  No. of fields:   {len(mesh.fields)}')
    return mesh
