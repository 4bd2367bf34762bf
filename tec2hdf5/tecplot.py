"""
Parser for tecplot finite-element zone files

A file holds a title, a list of variable names and one or more zones::

    TITLE = "sphere_0000"
    VARIABLES = "X", "Y", "Z", "Mx", "My", "Mz", "SD"
    ZONE T="400.0000 mT", N=4, E=1, F=FEBLOCK, ET=TETRAHEDRON
    <floats: x, y, z then the field's x, y and z components, nvert each>
    <integers: nelem submesh indices then 4*nelem one-based vertex indices>
    ZONE T="380.0000 mT", N=4, E=1, VARSHARELIST=([1-3,7]=1)
    <floats: the field's x, y and z components, nvert each>

The parser only splits the zone bodies into token streams; turning them into
vertices, elements and fields is up to :py:func:`tec2hdf5.mesh.create_mesh`.
"""
import re

import numpy as np


class TecplotSyntaxError(ValueError):
    """
    A tecplot document could not be parsed

    Attributes
    ----------
    message : str
        A description of the problem

    line : int
        The one-based line where the problem was found

    column : int
        The one-based column where the problem was found
    """

    def __init__(self, message, line, column):
        super().__init__(f'line {line}, column {column}: {message}')
        self.message = message
        self.line = line
        self.column = column


class FirstZone(object):
    """
    The first zone of a tecplot document, holding the mesh geometry and the
    first field

    Attributes
    ----------
    title : str
        The zone title (the ``T`` key)

    nvert : int
        The number of vertices (the ``N`` key)

    nelem : int
        The number of elements (the ``E`` key)

    float_list : numpy.ndarray
        All floating-point tokens of the zone body, in file order

    integer_list : numpy.ndarray
        All integer tokens of the zone body, in file order
    """

    def __init__(self, title, nvert, nelem, float_list, integer_list):
        self.title = title
        self.nvert = nvert
        self.nelem = nelem
        self.float_list = np.asarray(float_list, dtype=float)
        self.integer_list = np.asarray(integer_list, dtype=np.int64)


class Zone(object):
    """
    A subsequent zone of a tecplot document, holding one more field on the
    vertices of the first zone

    Attributes
    ----------
    title : str
        The zone title (the ``T`` key)

    nvert : int
        The number of vertices (the ``N`` key)

    nelem : int or None
        The number of elements (the ``E`` key), if given

    float_list : numpy.ndarray
        All numeric tokens of the zone body, in file order
    """

    def __init__(self, title, nvert, nelem, float_list):
        self.title = title
        self.nvert = nvert
        self.nelem = nelem
        self.float_list = np.asarray(float_list, dtype=float)


class Document(object):
    """
    The parsed contents of a tecplot file

    Attributes
    ----------
    title : str
        The document title

    variables : list of str
        The variable names in declaration order.  The first three are the
        spatial coordinates.

    first_zone : tec2hdf5.tecplot.FirstZone
        The zone with the mesh geometry

    zones : list of tec2hdf5.tecplot.Zone
        Any further zones, in file order
    """

    def __init__(self, title, variables, first_zone, zones):
        self.title = title
        self.variables = variables
        self.first_zone = first_zone
        self.zones = zones


def read_tecplot(filename):
    """
    Read and parse a tecplot file.  The whole file is read into memory
    before parsing.

    Parameters
    ----------
    filename : str
        The path to the tecplot file

    Returns
    -------
    document : tec2hdf5.tecplot.Document
        The parsed document
    """
    with open(filename) as f:
        text = f.read()
    return parse_tecplot(text)


def parse_tecplot(text):
    """
    Parse the contents of a tecplot file

    Parameters
    ----------
    text : str
        The full text of the file

    Returns
    -------
    document : tec2hdf5.tecplot.Document
        The parsed document

    Raises
    ------
    tec2hdf5.tecplot.TecplotSyntaxError
        If the text does not follow the tecplot grammar
    """
    return _Parser(text).parse_document()


_TOKEN_RE = re.compile(r'''
    (?P<space>\s+)
  | (?P<string>"[^"\n]*")
  | (?P<int>\d+(?![\w.]))
  | (?P<float>[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?(?![\w.]))
  | (?P<ident>[A-Za-z_][A-Za-z0-9_]*)
  | (?P<punct>[=,()\[\]])
''', re.VERBOSE)

_EOF = 'eof'


class _Parser(object):
    """ A recursive-descent parser over a pre-scanned token list """

    def __init__(self, text):
        self.text = text
        self.tokens = self._scan(text)
        self.index = 0

    def parse_document(self):
        title = self._parse_title()
        variables = self._parse_variables()

        self._expect_keyword('ZONE')
        header = self._parse_zone_header(need_elements=True)
        float_list, integer_list = self._parse_first_zone_body()
        first_zone = FirstZone(title=header['T'], nvert=header['N'],
                               nelem=header['E'], float_list=float_list,
                               integer_list=integer_list)

        zones = []
        while self._peek_is('ident', 'ZONE'):
            self._next()
            header = self._parse_zone_header(need_elements=False)
            float_list = self._parse_zone_body()
            zones.append(Zone(title=header['T'], nvert=header['N'],
                              nelem=header.get('E'), float_list=float_list))

        kind, text, pos = self._peek()
        if kind != _EOF:
            self._error(f'expected ZONE or end of input, found '
                        f'{self._describe(kind, text)}', pos)

        return Document(title=title, variables=variables,
                        first_zone=first_zone, zones=zones)

    def _parse_title(self):
        self._expect_keyword('TITLE')
        self._expect('punct', '=')
        return self._expect_string()

    def _parse_variables(self):
        kind, text, pos = self._peek()
        self._expect_keyword('VARIABLES')
        self._expect('punct', '=')
        variables = [self._expect_string()]
        while self._peek_is('punct', ','):
            self._next()
            variables.append(self._expect_string())
        if len(variables) < 3:
            self._error(f'VARIABLES must name at least the 3 coordinates, '
                        f'found {len(variables)}', pos)
        return variables

    def _parse_zone_header(self, need_elements):
        header = dict()
        _, _, zone_pos = self.tokens[self.index - 1]
        while True:
            while self._peek_is('punct', ','):
                self._next()
            kind, key, pos = self._peek()
            next_kind, next_text, _ = self._peek(1)
            if kind != 'ident' or (next_kind, next_text) != ('punct', '='):
                break
            self._next()
            self._next()
            if key in header:
                self._error(f'duplicate zone key {key}', pos)
            header[key] = self._parse_header_value(key)

        required = ['T', 'N', 'E'] if need_elements else ['T', 'N']
        for key in required:
            if key not in header:
                self._error(f'zone header is missing the {key}= key',
                            zone_pos)
        return header

    def _parse_header_value(self, key):
        kind, text, pos = self._next()
        if key == 'T':
            if kind != 'string':
                self._error(f'expected a quoted zone title, found '
                            f'{self._describe(kind, text)}', pos)
            return text[1:-1]
        if key in ('N', 'E'):
            if kind != 'int':
                self._error(f'{key} must be a non-negative integer, found '
                            f'{self._describe(kind, text)}', pos)
            return int(text)
        if kind == 'string':
            return text[1:-1]
        if kind in ('int', 'float', 'ident'):
            return text
        if (kind, text) == ('punct', '('):
            return self._skip_group(pos)
        self._error(f'expected a value for {key}, found '
                    f'{self._describe(kind, text)}', pos)

    def _skip_group(self, start):
        depth = 1
        while depth > 0:
            kind, text, pos = self._next()
            if kind == _EOF:
                self._error('unbalanced "(" in zone header', start)
            if (kind, text) == ('punct', '('):
                depth += 1
            elif (kind, text) == ('punct', ')'):
                depth -= 1
        return self.text[start:pos + 1]

    def _parse_first_zone_body(self):
        float_list = []
        integer_list = []
        while self._peek_is('float'):
            float_list.append(float(self._next()[1]))
        while True:
            kind, text, pos = self._peek()
            if kind == 'int':
                integer_list.append(int(text))
                self._next()
            elif kind == 'float':
                self._error(f'expected an integer after the floating-point '
                            f'values of the first zone, found {text}', pos)
            else:
                break
        self._check_body_end()
        return float_list, integer_list

    def _parse_zone_body(self):
        float_list = []
        while self._peek()[0] in ('float', 'int'):
            float_list.append(float(self._next()[1]))
        self._check_body_end()
        return float_list

    def _check_body_end(self):
        kind, text, pos = self._peek()
        if kind != _EOF and (kind, text) != ('ident', 'ZONE'):
            self._error(f'expected a number, found '
                        f'{self._describe(kind, text)}', pos)

    def _expect_keyword(self, keyword):
        self._expect('ident', keyword)

    def _expect_string(self):
        kind, text, pos = self._next()
        if kind != 'string':
            self._error(f'expected a quoted string, found '
                        f'{self._describe(kind, text)}', pos)
        return text[1:-1]

    def _expect(self, kind, text):
        found_kind, found_text, pos = self._next()
        if (found_kind, found_text) != (kind, text):
            self._error(f'expected {text}, found '
                        f'{self._describe(found_kind, found_text)}', pos)

    def _peek(self, offset=0):
        index = min(self.index + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def _peek_is(self, kind, text=None):
        found_kind, found_text, _ = self._peek()
        return found_kind == kind and (text is None or found_text == text)

    def _next(self):
        token = self.tokens[self.index]
        if token[0] != _EOF:
            self.index += 1
        return token

    def _error(self, message, pos):
        line = self.text.count('\n', 0, pos) + 1
        column = pos - self.text.rfind('\n', 0, pos)
        raise TecplotSyntaxError(message, line, column)

    @staticmethod
    def _describe(kind, text):
        if kind == _EOF:
            return 'end of input'
        return repr(text)

    def _scan(self, text):
        tokens = []
        pos = 0
        end = len(text)
        while pos < end:
            match = _TOKEN_RE.match(text, pos)
            if match is None:
                if text[pos] == '"':
                    self._error('unterminated string', pos)
                self._error(f'invalid token starting with {text[pos]!r}', pos)
            kind = match.lastgroup
            if kind != 'space':
                tokens.append((kind, match.group(), pos))
            pos = match.end()
        tokens.append((_EOF, '', end))
        return tokens
