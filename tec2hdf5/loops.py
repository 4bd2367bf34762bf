#!/usr/bin/env python
"""
Average a set of hysteresis loop files produced by repeated micromagnetic
runs over the same applied-field sweep
"""
import argparse
import logging
import os
import re

import numpy as np

from tec2hdf5.config import Tec2Hdf5ConfigParser
from tec2hdf5.logging import LoggingContext

LOOP_COLUMNS = ['b', 'bx', 'by', 'bz', 'mx', 'my', 'mz', 'ms', 'vol']

LOOP_DTYPE = np.dtype([(column, float) for column in LOOP_COLUMNS])


class LoopFileError(ValueError):
    """ A set of loop files cannot be combined into one stack """
    pass


class LoopStack(object):
    """
    Hysteresis loops that share the same applied-field sweep

    Attributes
    ----------
    loops : list of numpy.ndarray
        One structured array (``LOOP_DTYPE``) per loop file

    nloops : int
        The number of loops

    steps : int
        The number of field steps in each loop

    field_start, field_end, field_step : float
        The applied field at the first and last step and the (uniform) change
        in field between steps
    """

    def __init__(self, loops, field_start, field_end, field_step):
        self.loops = loops
        self.nloops = len(loops)
        self.steps = len(loops[0])
        self.field_start = field_start
        self.field_end = field_end
        self.field_step = field_step

    def average(self):
        """ The step-by-step average over all loops """
        return average_loop_stack(self)


def read_loop_file(filename):
    """
    Read a single hysteresis loop file.  The first line is a header; after
    that, each line with exactly nine comma-separated numbers
    (``b, bx, by, bz, mx, my, mz, ms, vol``) is one field step.  Other lines
    are skipped.

    Parameters
    ----------
    filename : str
        The path to the loop file

    Returns
    -------
    loop : numpy.ndarray
        A structured array with dtype ``LOOP_DTYPE``, one record per step
    """
    rows = []
    with open(filename) as loop_file:
        next(loop_file, None)
        for line in loop_file:
            values = _parse_row(line)
            if len(values) == len(LOOP_COLUMNS):
                rows.append(tuple(values))
    return np.array(rows, dtype=LOOP_DTYPE)


def read_loop_files(filenames, tolerance=1e-12):
    """
    Read hysteresis loop files and check that they can be averaged: each must
    have the same number of steps, the same uniform field step and the same
    start and end fields

    Parameters
    ----------
    filenames : list of str
        The paths to the loop files

    tolerance : float, optional
        The absolute tolerance for comparing fields

    Returns
    -------
    stack : tec2hdf5.loops.LoopStack
        The loops
    """
    loops = [read_loop_file(filename) for filename in filenames]
    if len(loops) == 0:
        raise LoopFileError('No loop files found.')

    first_loop = loops[0]
    steps = len(first_loop)
    for filename, loop in zip(filenames, loops):
        if len(loop) != steps:
            raise LoopFileError(f'Loop files are not the same length: '
                                f'{filenames[0]} has {steps} steps but '
                                f'{filename} has {len(loop)}.')
    if steps < 2:
        raise LoopFileError(f'Loop files need at least 2 field steps, found '
                            f'{steps}.')

    field_step = first_loop['b'][1] - first_loop['b'][0]
    field_start = first_loop['b'][0]
    field_end = first_loop['b'][-1]
    for filename, loop in zip(filenames, loops):
        sub_steps = np.diff(loop['b'])
        bad = np.nonzero(np.abs(sub_steps - field_step) > tolerance)[0]
        if len(bad) > 0:
            raise LoopFileError(f'Field step {bad[0]} of {filename} is '
                                f'{sub_steps[bad[0]]}, expected '
                                f'{field_step}.')
        if abs(loop['b'][0] - field_start) > tolerance:
            raise LoopFileError(f'Start field across loop files must be the '
                                f'same: {filename} starts at '
                                f'{loop["b"][0]}, expected {field_start}.')
        if abs(loop['b'][-1] - field_end) > tolerance:
            raise LoopFileError(f'End field across loop files must be the '
                                f'same: {filename} ends at {loop["b"][-1]}, '
                                f'expected {field_end}.')

    return LoopStack(loops, field_start=float(field_start),
                     field_end=float(field_end), field_step=float(field_step))


def average_loop_stack(stack):
    """
    Average each column over all loops, step by step

    Parameters
    ----------
    stack : tec2hdf5.loops.LoopStack
        The loops to average

    Returns
    -------
    average : numpy.ndarray
        A structured array with dtype ``LOOP_DTYPE``, one record per step
    """
    average = np.zeros(stack.steps, dtype=LOOP_DTYPE)
    for loop in stack.loops:
        for column in LOOP_COLUMNS:
            average[column] += loop[column]
    for column in LOOP_COLUMNS:
        average[column] /= stack.nloops
    return average


def find_loop_files(base_directory, pattern):
    """
    Find the files directly inside ``base_directory`` whose names match the
    regular expression ``pattern``, sorted by path
    """
    regex = re.compile(pattern)
    loop_files = []
    for name in os.listdir(base_directory):
        path = os.path.join(base_directory, name)
        if os.path.isfile(path) and regex.search(name):
            loop_files.append(path)
    return sorted(loop_files)


def write_average_loop(average, filename, float_format='>15.8E'):
    """
    Write an averaged loop with the applied field, the magnitude of the mean
    moment, the saturation magnetization and the volume at each step
    """
    moment = np.sqrt(average['mx']**2 + average['my']**2 + average['mz']**2)
    with open(filename, 'w') as out_file:
        out_file.write(f'{"B (Tesla)":>15}, {"<M> (Am^2)":>15}, '
                       f'{"Ms (A/m)":>15}, {"Volume (m^3)":>15}\n')
        for step in range(len(average)):
            values = [average['b'][step], moment[step], average['ms'][step],
                      average['vol'][step]]
            out_file.write(', '.join(format(float(value), float_format)
                                     for value in values))
            out_file.write('\n')


def main():
    parser = argparse.ArgumentParser(
        description=__doc__, formatter_class=argparse.RawTextHelpFormatter)
    parser.add_argument('base_directory', metavar='BASE_DIR',
                        help='The base directory containing the loop files')
    parser.add_argument('loop_file_match', metavar='LOOP_FILE_MATCH',
                        help='A regular expression to match the loop files')
    parser.add_argument('output_file', metavar='OUTPUT_FILE',
                        help='The output file')
    parser.add_argument('-c', '--config', dest='config', metavar='FILE',
                        help='A config file overriding the default options')
    parser.add_argument('-l', '--log', dest='log', metavar='FILE',
                        help='A log file (default: stdout)')
    parser.add_argument('-v', '--verbose', dest='verbose', action='store_true',
                        help='Include debugging output in the log')
    args = parser.parse_args()

    config = Tec2Hdf5ConfigParser.from_defaults(args.config)

    level = logging.DEBUG if args.verbose else logging.INFO
    with LoggingContext('loopavg', log_filename=args.log,
                        level=level) as logger:
        loop_files = find_loop_files(args.base_directory,
                                     args.loop_file_match)
        logger.info(f'Processing {len(loop_files)} loop files')
        for loop_file in loop_files:
            logger.info(f'\t{loop_file}')

        stack = read_loop_files(
            loop_files, tolerance=config.getfloat('loops', 'tolerance'))
        logger.debug(f'{stack.nloops} loops of {stack.steps} steps from '
                     f'{stack.field_start} to {stack.field_end} in steps '
                     f'of {stack.field_step}')
        write_average_loop(stack.average(), args.output_file,
                           float_format=config.get('loops', 'float_format'))
        logger.info(f'Wrote average loop: {args.output_file}')


def _parse_row(line):
    values = []
    for entry in line.split(','):
        try:
            values.append(float(entry.strip()))
        except ValueError:
            continue
    return values


if __name__ == '__main__':
    main()
