# Name:    utils.py
# Purpose: collection of data and funcs used in ODIMGRID modules
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

import numpy as np
from dateutil.parser import isoparse

from osgeo import gdal, osr
gdal.UseExceptions()
osr.UseExceptions()

from odimgrid.exceptions import OdimTypeError

DEFAULT_LOG_LEVEL = logging.WARNING


def add_logger(logName='', logLevel=None):
    """ Creates and returns logger with default formatting for odimgrid

    Parameters
    -----------
    logName : string, optional
        Name of the logger
    logLevel : int, optional
        Level of the logger and its first handler. If not given, the
        LOG_LEVEL environment variable is used (WARNING if unset).

    Returns
    --------
    logging.logger

    """
    if logLevel is not None:
        os.environ['LOG_LEVEL'] = str(logLevel)
    level = int(os.environ.get('LOG_LEVEL', DEFAULT_LOG_LEVEL))
    logger = logging.getLogger(logName)
    logger.setLevel(level)

    # handler is already there if logging.yml was loaded
    if len(logger.handlers) == 0:
        ch = logging.StreamHandler()
        formatter = logging.Formatter('%(asctime)s|%(levelno)s|%(module)s|'
                                      '%(funcName)s|%(message)s',
                                      datefmt='%I:%M:%S')
        ch.setFormatter(formatter)
        logger.addHandler(ch)

    logger.handlers[0].setLevel(level)

    return logger


def parse_odim_time(date_string, time_string):
    """ Parse ODIM date (YYYYMMDD) and time (HHmmss) into datetime

    Only the first 12 characters of the joined stamp are used, i.e. the
    seconds are truncated.

    Parameters
    ----------
    date_string : str
        YYYYMMDD
    time_string : str
        HHmmss

    Returns
    -------
    datetime.datetime

    """
    stamp = (date_string.strip() + time_string.strip())[:12]
    if len(stamp) != 12 or not stamp.isdigit():
        raise OdimTypeError('Invalid date/time stamp: %s %s' % (date_string, time_string))
    try:
        return isoparse('%sT%s' % (stamp[:8], stamp[8:]))
    except ValueError as e:
        raise OdimTypeError('Invalid date/time stamp %s: %s' % (stamp, e))


def decode_attribute(value):
    """ Convert a value read by h5py into a plain Python value

    Byte strings are decoded and trailing NUL characters removed, numpy
    scalars and one-element arrays are unwrapped. Arrays with several
    elements are returned as numpy arrays.
    """
    if isinstance(value, np.ndarray):
        if value.size != 1:
            return value
        value = value.reshape(-1)[0]
    if isinstance(value, (bytes, np.bytes_)):
        return bytes(value).decode('utf-8', 'replace').rstrip('\x00')
    if isinstance(value, str):
        return value.rstrip('\x00')
    if isinstance(value, np.generic):
        return value.item()
    return value
