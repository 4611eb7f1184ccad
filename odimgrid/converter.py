# Name:         converter.py
# Purpose:      Conversion of ODIM HDF5 files into gridded netCDF files
# Authors:      ODIMGRID Developers
# Licence:
# This file is part of ODIMGRID.
# ODIMGRID is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, version 3 of the License.
# http://www.gnu.org/licenses/gpl-3.0.html
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.
import os
import logging

from odimgrid.area import Grid
from odimgrid.descriptors import create_tdesc, create_pdesc, create_vdesc, create_hdesc
from odimgrid.exporter import Exporter
from odimgrid.grid import GridData
from odimgrid.inventory import Inventory, DEFAULT_DATASET_NAME
from odimgrid.resample import copy_datasets
from odimgrid.resolver import AttributeResolver
from odimgrid.store import AttributeStore, STDIN_NAME
from odimgrid.utils import add_logger
from odimgrid.exceptions import OdimError


class Options(object):
    """Settings of one conversion

    Parameters
    ----------
    infile : str
        ODIM HDF5 file, '-' for standard input
    outfile : str
        netCDF file, '-' for standard output
    verbose : bool
        log progress and all metadata attributes
    projection : str
        optional output grid, see Grid.from_spec
    datasetname : str
        prefix of the numbered dataset groups
    producernumber : int
    producername : str

    """
    def __init__(self, infile='-', outfile='-', verbose=False, projection='',
                 datasetname=DEFAULT_DATASET_NAME, producernumber=1014, producername='RADAR'):
        self.infile = infile
        self.outfile = outfile
        self.verbose = verbose
        self.projection = projection
        self.datasetname = datasetname
        self.producernumber = producernumber
        self.producername = producername

    def __repr__(self):
        return 'Options(%s)' % ', '.join('%s=%r' % item for item in sorted(vars(self).items()))

    def set_producer(self, producer):
        """Set producer number and name from 'number,name' string"""
        parts = producer.split(',')
        if len(parts) != 2:
            raise OdimError('Option --producer expects a comma separated number,name '
                            'argument, got "%s"' % producer)
        try:
            self.producernumber = int(parts[0])
        except ValueError:
            raise OdimError('Producer number must be integer, got "%s"' % parts[0])
        self.producername = parts[1]


def read_grid_data(store, options, logger):
    """Build GridData from an opened AttributeStore"""
    inventory = Inventory(AttributeResolver(store), options.datasetname)
    inventory.validate()
    if options.verbose:
        inventory.describe()

    tdesc = create_tdesc(inventory)
    params = create_pdesc(inventory)
    levels = create_vdesc(inventory)
    grid = create_hdesc(inventory)
    logger.info('Times: %s', [str(t) for t in tdesc.valid_times])
    logger.info('Parameters: %s', [p.name for p in params])
    logger.info('Levels: %s', [level.name for level in levels])
    logger.info('Grid: %r', grid)

    data = GridData(params, tdesc, levels, grid,
                    (options.producernumber, options.producername))
    copy_datasets(inventory, data)
    return data


def convert(options):
    """Convert options.infile into options.outfile

    Returns
    -------
    GridData
        the exported data

    Raises
    ------
    OdimError : on any problem with input, projection or conversion

    """
    logger = add_logger('odimgrid', logging.INFO if options.verbose else None)
    if options.infile != STDIN_NAME and not os.path.exists(options.infile):
        raise OdimError("Input file '%s' does not exist" % options.infile)

    # parse the projection before reading so that errors in it are reported early
    output_grid = None
    if options.projection:
        output_grid = Grid.from_spec(options.projection)

    with AttributeStore(options.infile) as store:
        data = read_grid_data(store, options, logger)

    if output_grid is not None:
        data = data.interpolate_to_grid(output_grid)

    Exporter(data, source_filename=options.infile).export(options.outfile)
    return data
