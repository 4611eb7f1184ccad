# Name:    nsr.py
# Purpose: Container of NSR class
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
from odimgrid.utils import osr
from odimgrid.exceptions import GridProjectionError

# sphere radius used for radar-centred areas
EARTH_RADIUS = 6371220.0


class NSR(osr.SpatialReference, object):
    """Spatial Reference. Overrides constructor of osr.SpatialReference.

    Axis order is always the traditional GIS one: longitude (or easting)
    first, latitude (or northing) second.

    Parameters
    ----------
    srs : 0, PROJ4 or AUTH:CODE or WKT string, EPSG integer, osr.SpatialReference, NSR
        Specifies spatial reference system (SRS)
        PROJ4:
        string with proj4 options, e.g.:
        '+proj=stere +datum=WGS84 +ellps=WGS84 +lat_0=90 +lon_0=10 +no_defs'
        as found in ODIM where/projdef
        AUTH:CODE:
        e.g. 'EPSG:3067'
        EPSG:
        integer with EPSG number, e.g. 4326
        WKT:
        string with Well Know Text of SRS

    """

    def __init__(self, srs=0):
        """Create Spatial Reference System from input parameter"""
        osr.SpatialReference.__init__(self)

        if isinstance(srs, int) and srs == 0:
            # default WGS84 SRS
            self._import(self.ImportFromWkt, osr.SRS_WKT_WGS84)
        elif isinstance(srs, str):
            srs = srs.strip()
            if not (self._import(self.ImportFromProj4, srs) or
                    self._import(self.ImportFromWkt, srs) or
                    self._import(self.SetFromUserInput, srs)):
                raise GridProjectionError('Proj4 or WKT (%s) is wrong' % srs)
        elif isinstance(srs, int):
            if not self._import(self.ImportFromEPSG, srs):
                raise GridProjectionError('EPSG %d is wrong' % srs)
        elif isinstance(srs, osr.SpatialReference):
            if not self._import(self.ImportFromWkt, srs.ExportToWkt()):
                raise GridProjectionError('NSR %s is wrong' % srs)
        else:
            raise GridProjectionError('Cannot create spatial reference from %r' % (srs,))

        self.SetAxisMappingStrategy(osr.OAMS_TRADITIONAL_GIS_ORDER)

    @staticmethod
    def _import(method, value):
        """Call osr import method, return True on success"""
        try:
            status = method(value)
        except (RuntimeError, TypeError):
            return False
        return status == 0

    @classmethod
    def equidistant(cls, lon, lat):
        """Azimuthal equidistant projection centred at (lon, lat)"""
        return cls('+proj=aeqd +lat_0=%r +lon_0=%r +x_0=0 +y_0=0 +R=%r +units=m +no_defs'
                   % (float(lat), float(lon), EARTH_RADIUS))

    @property
    def wkt(self):
        """Well Known Text representation of SRS"""
        return self.ExportToWkt()

    @property
    def proj4(self):
        """PROJ4 representation of SRS"""
        return self.ExportToProj4()
