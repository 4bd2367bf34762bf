"""
Command-line tools that convert tecplot files produced by micromagnetic
simulations

* ``tec2hdf5`` writes the mesh and its fields to ``<BASENAME>.h5``, and
  optionally ``<BASENAME>.xdmf``
* ``quants`` writes the net moment of each field to a CSV file
"""
import argparse
import logging

from tec2hdf5.analytics import compute_net_moments, compute_volume
from tec2hdf5.config import Tec2Hdf5ConfigParser
from tec2hdf5.io import write_mesh_hdf5, write_moments_csv
from tec2hdf5.logging import LoggingContext
from tec2hdf5.mesh import read_mesh_from_tecplot
from tec2hdf5.xdmf import write_xdmf


def convert_tecplot_to_hdf5(tecplot_file, basename, with_xdmf=False,
                            config=None, logger=None):
    """
    Convert a tecplot file to an HDF5 mesh container

    Parameters
    ----------
    tecplot_file : str
        The input tecplot file

    basename : str
        The base name for the output; ``<basename>.h5`` is produced

    with_xdmf : bool, optional
        Whether to also write ``<basename>.xdmf`` describing the container

    config : tec2hdf5.config.Tec2Hdf5ConfigParser, optional
        Config options; the package defaults are used if not supplied

    logger : logging.Logger, optional
        A logger for the output

    Returns
    -------
    mesh : tec2hdf5.mesh.Mesh
        The converted mesh
    """
    if config is None:
        config = Tec2Hdf5ConfigParser.from_defaults()

    with LoggingContext(__name__, logger=logger) as logger:
        mesh = read_mesh_from_tecplot(tecplot_file, logger=logger)

        h5_filename = f'{basename}.h5'
        write_mesh_hdf5(mesh, h5_filename,
                        label_length=config.getint('hdf5', 'label_length'),
                        logger=logger)

        if with_xdmf:
            write_xdmf(mesh, h5_filename, f'{basename}.xdmf', logger=logger)

    return mesh


def compute_quantities(tecplot_file, output_file, config=None, logger=None,
                       show_progress=False):
    """
    Compute the volume of the mesh in a tecplot file and the net moment of
    each of its fields, writing the moments to a CSV file

    Parameters
    ----------
    tecplot_file : str
        The input tecplot file

    output_file : str
        The CSV file to write

    config : tec2hdf5.config.Tec2Hdf5ConfigParser, optional
        Config options; the package defaults are used if not supplied

    logger : logging.Logger, optional
        A logger for the output

    show_progress : bool, optional
        Whether to display a progress bar over the fields

    Returns
    -------
    mesh : tec2hdf5.mesh.Mesh
        The mesh with its volume and net moments computed
    """
    if config is None:
        config = Tec2Hdf5ConfigParser.from_defaults()

    with LoggingContext(__name__, logger=logger) as logger:
        mesh = read_mesh_from_tecplot(tecplot_file, logger=logger)
        volume = compute_volume(mesh)
        logger.info(f'  Volume:          {volume}')

        logger.info('Computing quantities')
        compute_net_moments(mesh, show_progress=show_progress)

        float_format = None
        if config.has_option('quants', 'float_format'):
            float_format = config.get('quants', 'float_format')
        write_moments_csv(mesh, output_file,
                          index_base=config.getint('quants', 'index_base'),
                          float_format=float_format)
        logger.info('Done')

    return mesh


def main_tec2hdf5():
    parser = argparse.ArgumentParser(
        description='Read a tecplot file and produce a MERRILL compatible '
                    'HDF5 file',
        formatter_class=argparse.RawTextHelpFormatter)
    parser.add_argument('tecplot_file', metavar='TECPLOT',
                        help='The input tecplot file')
    parser.add_argument('output_basename', metavar='BASENAME',
                        help="The base name for the output, the file "
                             "'<BASENAME>.h5' is produced.")
    parser.add_argument('--with-xdmf', dest='with_xdmf', action='store_true',
                        help="Also produce an accompanying "
                             "'<BASENAME>.xdmf' file.")
    parser.add_argument('-c', '--config', dest='config', metavar='FILE',
                        help='A config file overriding the default options')
    parser.add_argument('-l', '--log', dest='log', metavar='FILE',
                        help='A log file (default: stdout)')
    parser.add_argument('-v', '--verbose', dest='verbose', action='store_true',
                        help='Include debugging output in the log')
    args = parser.parse_args()

    config = Tec2Hdf5ConfigParser.from_defaults(args.config)

    level = logging.DEBUG if args.verbose else logging.INFO
    with LoggingContext('tec2hdf5', log_filename=args.log,
                        level=level) as logger:
        logger.info(f'tecplot file: {args.tecplot_file}')
        logger.info(f'output basename: {args.output_basename}')
        logger.info(f'output xdmf: {args.with_xdmf}')
        convert_tecplot_to_hdf5(args.tecplot_file, args.output_basename,
                                with_xdmf=args.with_xdmf,
                                config=config, logger=logger)


def main_quants():
    parser = argparse.ArgumentParser(
        description='Read a tecplot file and produce micromagnetic field '
                    'quantities',
        formatter_class=argparse.RawTextHelpFormatter)
    parser.add_argument('tecplot_file', metavar='TECPLOT',
                        help='The input tecplot file')
    parser.add_argument('output_file', metavar='OUTPUT',
                        help='The output csv file with the net moment of '
                             'each field')
    parser.add_argument('-c', '--config', dest='config', metavar='FILE',
                        help='A config file overriding the default options')
    parser.add_argument('-l', '--log', dest='log', metavar='FILE',
                        help='A log file (default: stdout)')
    parser.add_argument('-v', '--verbose', dest='verbose', action='store_true',
                        help='Include debugging output in the log')
    parser.add_argument('--progress', dest='progress', action='store_true',
                        help='Show a progress bar')
    args = parser.parse_args()

    config = Tec2Hdf5ConfigParser.from_defaults(args.config)

    level = logging.DEBUG if args.verbose else logging.INFO
    with LoggingContext('quants', log_filename=args.log,
                        level=level) as logger:
        logger.info(f'tecplot file: {args.tecplot_file}')
        logger.info(f'output file: {args.output_file}')
        compute_quantities(args.tecplot_file, args.output_file,
                           config=config, logger=logger,
                           show_progress=args.progress)
