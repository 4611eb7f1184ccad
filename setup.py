#-----------------------------------------------------------------------------
# Name:        setup.py
# Purpose:     Install odimgrid
#
# Author:      ODIMGRID Developers
#
# Licence:     GNU General Public License, v.3
#-----------------------------------------------------------------------------
import os
import re

from setuptools import setup, find_packages

NAME                = 'odimgrid'
MAINTAINER          = "ODIMGRID Developers"
MAINTAINER_EMAIL    = "odimgrid-dev@example.org"
DESCRIPTION         = "Conversion of OPERA/ODIM HDF5 weather radar data into gridded netCDF"
LONG_DESCRIPTION    = ("Reads OPERA/ODIM HDF5 radar composites, images, Cartesian and polar "
                       "volumes and writes them as a regular parameter x time x level x grid "
                       "cube into a netCDF file")
URL                 = "https://github.com/odimgrid/odimgrid"
DOWNLOAD_URL        = "https://github.com/odimgrid/odimgrid"
LICENSE             = "GNU General Public License"
CLASSIFIERS         = [
        'Development Status :: 5 - Production/Stable',
        'Environment :: Console',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: GNU General Public License v3 (GPLv3)',
        'Natural Language :: English',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Topic :: Scientific/Engineering',
        'Topic :: Scientific/Engineering :: Atmospheric Science',
        'Topic :: Utilities'
    ]
AUTHOR              = "ODIMGRID Developers"
AUTHOR_EMAIL        = "odimgrid-dev@example.org"
PLATFORMS           = ["Linux", "OS X", "Windows"]


def read_version():
    with open(os.path.join(os.path.dirname(__file__), NAME, '__init__.py')) as fobj:
        return re.search(r"^__version__ = '([^']+)'", fobj.read(), re.M).group(1)


VERSION             = read_version()
REQS                = [
                        "numpy",
                        "GDAL",
                        "h5py",
                        "netCDF4",
                        "PyYAML",
                        "python-dateutil",
                    ]
TEST_REQS           = [
                        "pytest",
                        "mock",
                    ]

setup(
    name=NAME,
    version=VERSION,
    maintainer=MAINTAINER,
    maintainer_email=MAINTAINER_EMAIL,
    description=DESCRIPTION,
    long_description=LONG_DESCRIPTION,
    url=URL,
    download_url=DOWNLOAD_URL,
    license=LICENSE,
    classifiers=CLASSIFIERS,
    author=AUTHOR,
    author_email=AUTHOR_EMAIL,
    platforms=PLATFORMS,
    packages=find_packages(include=[NAME, NAME + '.*']),
    package_data={NAME: ['logging.yml']},
    entry_points={
        'console_scripts': ['odim2grid = odimgrid.cli.odim2grid:main'],
    },
    install_requires=REQS,
    extras_require={'test': TEST_REQS},
    test_suite="odimgrid.tests",
)
