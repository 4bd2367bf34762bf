#!/usr/bin/env python

import os
import re
from setuptools import setup, find_packages


install_requires = [
    'h5py',
    'jinja2',
    'numpy',
    'tqdm']

here = os.path.abspath(os.path.dirname(__file__))
with open(os.path.join(here, 'tec2hdf5', '__init__.py')) as f:
    init_file = f.read()

version = re.search(r'{}\s*=\s*[(]([^)]*)[)]'.format('__version_info__'),
                    init_file).group(1).replace(', ', '.')

setup(name='tec2hdf5',
      version=version,
      description='Tools for converting tecplot tetrahedral meshes and '
                  'vector fields from micromagnetic simulations to HDF5 and '
                  'for computing integrated field quantities',
      license='BSD',
      classifiers=[
          'Development Status :: 3 - Alpha',
          'License :: OSI Approved :: BSD License',
          'Operating System :: OS Independent',
          'Intended Audience :: Science/Research',
          'Programming Language :: Python',
          'Programming Language :: Python :: 3',
          'Programming Language :: Python :: 3.9',
          'Programming Language :: Python :: 3.10',
          'Programming Language :: Python :: 3.11',
          'Topic :: Scientific/Engineering',
      ],
      packages=find_packages(include=['tec2hdf5', 'tec2hdf5.*']),
      package_data={'tec2hdf5': ['default.cfg', 'templates/*.xml']},
      install_requires=install_requires,
      extras_require={'test': ['pytest']},
      entry_points={'console_scripts':
                    ['tec2hdf5_tools = tec2hdf5.__main__:main',
                     'tec2hdf5 = tec2hdf5.conversion:main_tec2hdf5',
                     'quants = tec2hdf5.conversion:main_quants',
                     'loopavg = tec2hdf5.loops:main',
                     'spaghettify = tec2hdf5.spaghettify:main']})
