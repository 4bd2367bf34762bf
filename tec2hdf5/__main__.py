"""
Tools for converting tecplot meshes from micromagnetic simulations
"""

import argparse

import tec2hdf5


def main():
    """
    Entry point for the main script ``tec2hdf5_tools``
    """

    parser = argparse.ArgumentParser(
        description=__doc__, formatter_class=argparse.RawTextHelpFormatter)
    parser.add_argument('-v', '--version',
                        action='version',
                        version='tec2hdf5 {}'.format(
                                tec2hdf5.__version__),
                        help="Show version number and exit")

    parser.parse_args()


if __name__ == "__main__":
    main()
