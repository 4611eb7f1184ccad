# Name: __init__.py
# Purpose: Use the current folder as a package
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
import logging.config
import os
import sys
import os.path
import yaml

__version__ = '1.2.0'

from odimgrid.nsr import NSR
from odimgrid.area import Area, Grid
from odimgrid.grid import GridData
from odimgrid.converter import Options, convert

__all__ = ['NSR', 'Area', 'Grid', 'GridData', 'Options', 'convert']

DEFAULT_LOGGING_CONF_FILE = os.path.join(os.path.dirname(__file__), 'logging.yml')
LOGGING_CONF_FILE = os.getenv('ODIMGRID_LOG_CONF_PATH', DEFAULT_LOGGING_CONF_FILE)

try:
    with open(LOGGING_CONF_FILE, 'rb') as stream:
        logging_configuration = yaml.safe_load(stream)  # pylint: disable=invalid-name
except FileNotFoundError:
    print(f"'{LOGGING_CONF_FILE}' does not exist, logging can't be configured.", file=sys.stderr)
    logging_configuration = None  # pylint: disable=invalid-name

if logging_configuration:
    logging.config.dictConfig(logging_configuration)
    logging.captureWarnings(True)
