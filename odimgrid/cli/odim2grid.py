# Name:         odim2grid.py
# Purpose:      Command line converter of ODIM HDF5 radar files to gridded netCDF
# Authors:      ODIMGRID Developers
# Licence:      This file is part of ODIMGRID. You can redistribute it or modify
#               under the terms of GNU General Public License, v.3
#               http://www.gnu.org/licenses/gpl-3.0.html
import sys
import argparse
import logging

from odimgrid import __version__
from odimgrid.converter import Options, convert
from odimgrid.exceptions import OdimError

PROGRAM_NAME = 'odim2grid'


def create_parser():
    parser = argparse.ArgumentParser(
        prog=PROGRAM_NAME,
        description='Convert OPERA/ODIM HDF5 radar data into gridded netCDF')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='set verbose mode on')
    parser.add_argument('-V', '--version', action='store_true',
                        help='display version number')
    parser.add_argument('-P', '--projection', default='',
                        help='output projection, e.g. '
                             '"+proj=stere +lat_0=90 +lon_0=25 -lle 10 55 35 72 -ts 500 600"')
    parser.add_argument('-i', '--infile', dest='infile_option',
                        help='input ODIM HDF5 file, - for standard input')
    parser.add_argument('-o', '--outfile', dest='outfile_option',
                        help='output netCDF file, - for standard output')
    parser.add_argument('--datasetname', default='dataset',
                        help='prefix of the numbered dataset groups')
    parser.add_argument('-p', '--producer',
                        help='producer number and name, e.g. 1014,RADAR')
    parser.add_argument('--producernumber', type=int, default=1014,
                        help='producer number')
    parser.add_argument('--producername', default='RADAR',
                        help='producer name')
    parser.add_argument('infile', nargs='?', help='input file')
    parser.add_argument('outfile', nargs='?', help='output file')
    return parser


def parse_options(args):
    """Convert command line arguments into Options, None if there is nothing to convert"""
    parsed = create_parser().parse_args(args)
    if parsed.version:
        print('%s v%s' % (PROGRAM_NAME, __version__))

    infile = parsed.infile_option or parsed.infile
    outfile = parsed.outfile_option or parsed.outfile
    if parsed.version and infile is None and outfile is None:
        return None
    if infile is None:
        raise OdimError('Expecting input file as parameter 1')
    if outfile is None:
        raise OdimError('Expecting output file as parameter 2')

    options = Options(infile=infile, outfile=outfile, verbose=parsed.verbose,
                      projection=parsed.projection, datasetname=parsed.datasetname,
                      producernumber=parsed.producernumber,
                      producername=parsed.producername)
    if parsed.producer is not None:
        options.set_producer(parsed.producer)
    return options


def main(args=None):
    """Run the conversion, return exit status"""
    if args is None:
        args = sys.argv[1:]
    logger = logging.getLogger('odimgrid')
    try:
        options = parse_options(args)
        if options is not None:
            convert(options)
    except (OdimError, OSError, RuntimeError) as e:
        logger.error('Error: %s', e)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
