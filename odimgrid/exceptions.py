# Name:         exceptions.py
# Purpose:      Definitions of odimgrid exceptions
# Authors:      ODIMGRID Developers
# Licence:      This file is part of ODIMGRID. You can redistribute it or modify
#               under the terms of GNU General Public License, v.3
#               http://www.gnu.org/licenses/gpl-3.0.html


class OdimError(Exception):
    """ Base class of all conversion errors """
    pass


class OdimStructureError(OdimError):
    """ Required group or attribute is missing or the layout is not supported """
    pass


class UnsupportedParameterError(OdimStructureError):
    """ Product and quantity cannot be mapped to a known parameter """
    pass


class OdimTypeError(OdimError):
    """ Attribute or array has wrong type or wrong number of elements """
    pass


class ResamplingError(OdimError):
    """ Sample cannot be placed into the destination grid """
    pass


class GridProjectionError(OdimError):
    """ Cannot get the projection """
    pass
