#!/usr/bin/env python
"""
Read a block of whitespace-delimited floats from stdin (newlines allowed,
end with Ctrl+D) and write them to a file, one per line
"""
import argparse
import sys

from tec2hdf5.config import Tec2Hdf5ConfigParser


def read_floats(text):
    """
    Parse whitespace-delimited floats

    Parameters
    ----------
    text : str
        The text to parse

    Returns
    -------
    values : list of float
        The floats, in order

    Raises
    ------
    ValueError
        If any token is not a float
    """
    values = []
    for token in text.split():
        try:
            values.append(float(token))
        except ValueError:
            raise ValueError(f'Not a float: {token!r}') from None
    return values


def format_floats(values, float_format='.7E'):
    """ Format floats one per line with the given python format spec """
    return '\n'.join(format(value, float_format) for value in values)


def main():
    parser = argparse.ArgumentParser(
        description=__doc__, formatter_class=argparse.RawTextHelpFormatter)
    parser.add_argument('output_file', metavar='OUTPUT_FILE',
                        help='The file to write the floats to')
    parser.add_argument('-c', '--config', dest='config', metavar='FILE',
                        help='A config file overriding the default options')
    args = parser.parse_args()

    config = Tec2Hdf5ConfigParser.from_defaults(args.config)

    print('Please paste a block of whitespace-delimited floats (you can '
          'include newlines) and press Ctrl+D (or Ctrl+Z on Windows) when '
          'done:')
    values = read_floats(sys.stdin.read())

    with open(args.output_file, 'w') as out_file:
        out_file.write(format_floats(
            values, float_format=config.get('spaghettify', 'float_format')))

    print(f'{len(values)} floats successfully written to {args.output_file}')


if __name__ == '__main__':
    main()
