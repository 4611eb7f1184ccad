# Name:    area.py
# Purpose: Container of Area and Grid classes
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
import re

import numpy as np

from odimgrid.nsr import NSR
from odimgrid.utils import osr
from odimgrid.exceptions import GridProjectionError


class Area(object):
    """Projected rectangle given by world coordinates of two corners

    Parameters
    ----------
    srs : PROJ4, AUTH:CODE or WKT string, EPSG integer or NSR
        spatial reference of the world coordinates
    bottom_left : (float, float)
        world x, y of the bottom left corner
    top_right : (float, float)
        world x, y of the top right corner

    """
    def __init__(self, srs, bottom_left, top_right):
        self.nsr = NSR(srs)
        self.bottom_left = (float(bottom_left[0]), float(bottom_left[1]))
        self.top_right = (float(top_right[0]), float(top_right[1]))
        latlon = NSR()
        self._to_worldxy = osr.CoordinateTransformation(latlon, self.nsr)
        self._to_latlon = osr.CoordinateTransformation(self.nsr, latlon)

    def __repr__(self):
        return 'Area(%s, %s, %s)' % (self.nsr.proj4, self.bottom_left, self.top_right)

    @classmethod
    def from_corners(cls, srs, bottom_left_lonlat, top_right_lonlat):
        """Create area from longitude/latitude of bottom left and top right corners"""
        nsr = NSR(srs)
        x, y = cls(nsr, (0, 0), (0, 0)).latlon_to_worldxy(
            [bottom_left_lonlat[0], top_right_lonlat[0]],
            [bottom_left_lonlat[1], top_right_lonlat[1]])
        return cls(nsr, (x[0], y[0]), (x[1], y[1]))

    @classmethod
    def equidistant(cls, radius, lon, lat):
        """Azimuthal equidistant square of half-width <radius> metres centred at (lon, lat)"""
        return cls(NSR.equidistant(lon, lat), (-radius, -radius), (radius, radius))

    @property
    def width(self):
        return self.top_right[0] - self.bottom_left[0]

    @property
    def height(self):
        return self.top_right[1] - self.bottom_left[1]

    def latlon_to_worldxy(self, lon, lat):
        """Convert longitude/latitude (scalars or arrays) into world x, y"""
        return self._transform(self._to_worldxy, lon, lat)

    def worldxy_to_latlon(self, x, y):
        """Convert world x, y (scalars or arrays) into longitude/latitude"""
        return self._transform(self._to_latlon, x, y)

    @staticmethod
    def _transform(transformation, x, y):
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        shape = np.broadcast(x, y).shape
        x = np.broadcast_to(x, shape).ravel()
        y = np.broadcast_to(y, shape).ravel()
        if x.size == 0:
            return x.reshape(shape), y.reshape(shape)
        points = np.array(transformation.TransformPoints(np.column_stack([x, y]).tolist()))
        return points[:, 0].reshape(shape), points[:, 1].reshape(shape)


class Grid(object):
    """Area sampled by <xsize> x <ysize> points

    The first and the last points of each axis lie exactly on the area
    corners. Row 0 is the bottom row.

    Parameters
    ----------
    area : Area
    xsize : int
        number of points along x
    ysize : int
        number of points along y

    """
    def __init__(self, area, xsize, ysize):
        xsize = int(xsize)
        ysize = int(ysize)
        if xsize < 1 or ysize < 1:
            raise GridProjectionError('Grid size must be positive: %d x %d' % (xsize, ysize))
        self.area = area
        self.xsize = xsize
        self.ysize = ysize

    def __repr__(self):
        return 'Grid(%r, %d, %d)' % (self.area, self.xsize, self.ysize)

    @property
    def shape(self):
        return self.ysize, self.xsize

    @property
    def dx(self):
        if self.xsize == 1:
            return 1.0
        return self.area.width / (self.xsize - 1)

    @property
    def dy(self):
        if self.ysize == 1:
            return 1.0
        return self.area.height / (self.ysize - 1)

    @property
    def x_coords(self):
        """World x of grid columns"""
        return self.area.bottom_left[0] + self.dx * np.arange(self.xsize)

    @property
    def y_coords(self):
        """World y of grid rows, bottom row first"""
        return self.area.bottom_left[1] + self.dy * np.arange(self.ysize)

    def get_geotransform(self):
        """GDAL geotransform of the grid with the first raster line at the top"""
        return (self.area.bottom_left[0] - self.dx / 2., self.dx, 0.0,
                self.area.top_right[1] + self.dy / 2., 0.0, -self.dy)

    def get_geolocation_grids(self):
        """Longitude and latitude of all grid points, shape (ysize, xsize)"""
        x_grid, y_grid = np.meshgrid(self.x_coords, self.y_coords)
        return self.area.worldxy_to_latlon(x_grid, y_grid)

    def nearest_points(self, lon, lat):
        """Row and column of the grid points nearest to (lon, lat)

        Returns
        -------
        rows, cols : numpy.ndarray of int
        inside : numpy.ndarray of bool
            False where the nearest point would fall outside the grid

        """
        x, y = self.area.latlon_to_worldxy(lon, lat)
        with np.errstate(invalid='ignore'):
            cols = np.floor((x - self.area.bottom_left[0]) / self.dx + 0.5)
            rows = np.floor((y - self.area.bottom_left[1]) / self.dy + 0.5)
            inside = (np.isfinite(cols) & np.isfinite(rows) &
                      (cols >= 0) & (cols < self.xsize) &
                      (rows >= 0) & (rows < self.ysize))
        cols = np.where(inside, cols, -1).astype(int)
        rows = np.where(inside, rows, -1).astype(int)
        return rows, cols, inside

    @classmethod
    def from_spec(cls, spec):
        """Create grid from SRS followed by gdalwarp-like extent options

        Parameters
        ----------
        spec : str
            '<srs> -te x_min y_min x_max y_max -ts width height' or with
            '-lle min_lon min_lat max_lon max_lat' instead of '-te' and/or
            '-tr x_resolution y_resolution' instead of '-ts'. <srs> is
            PROJ4, AUTH:CODE, WKT or EPSG number.

        Examples
        --------
        >>> Grid.from_spec('+proj=stere +lat_0=90 +lon_0=25 +lat_ts=60 +ellps=WGS84 '
        ...                '-lle 10 55 35 72 -ts 500 600')

        """
        match = re.search(r'(^|\s)-(te|lle|ts|tr)\s', spec)
        if match is None:
            raise GridProjectionError('Projection "%s" has no extent options' % spec)
        srs = spec[:match.start()].strip()
        if not srs:
            raise GridProjectionError('Projection "%s" has no spatial reference' % spec)
        nsr = NSR(int(srs) if srs.isdigit() else srs)

        extent_dict = cls._create_extent_dict(spec[match.start():])
        if 'lle' in extent_dict:
            extent_dict = cls._convert_extent_dict(nsr, extent_dict)
        x_min, y_min, x_max, y_max = extent_dict['te']
        if 'ts' in extent_dict:
            xsize, ysize = extent_dict['ts']
        else:
            xsize = (x_max - x_min) / extent_dict['tr'][0] + 1
            ysize = (y_max - y_min) / extent_dict['tr'][1] + 1
        return cls(Area(nsr, (x_min, y_min), (x_max, y_max)), int(xsize), int(ysize))

    @staticmethod
    def _convert_extent_dict(nsr, extent_dict):
        """Convert -lle option (lon/lat) into -te in world coordinates of <nsr>"""
        lle = extent_dict['lle']
        x, y = Area(nsr, (0, 0), (0, 0)).latlon_to_worldxy(
            [lle[0], lle[2], lle[2], lle[0]], [lle[3], lle[3], lle[1], lle[1]])
        extent_dict['te'] = [x.min(), y.min(), x.max(), y.max()]
        return extent_dict

    @staticmethod
    def _gen_regexp(param_1, param_2, size):
        return r'(-%s|-%s)%s\s?' % (param_1, param_2, r'(\s+[-+]?\d*[.\d*]*)' * size)

    @staticmethod
    def _create_extent_dict(extent_str):
        """Create a dictionary from extent string

        '-te' and '-lle' take 4 numbers, '-ts' and '-tr' take 2 numbers.
        Exactly one of ('-te', '-lle') and one of ('-ts', '-tr') is required.

        Raises
        -------
        GridProjectionError : occurs when the extent_str is improper

        """
        combinations = [('te', 'lle', 4), ('ts', 'tr', 2)]
        extent_dict = {}
        for param_1, param_2, size in combinations:
            options = re.findall(Grid._gen_regexp(param_1, param_2, size), extent_str)
            if len(options) != 1:
                raise GridProjectionError('Extent must contain exactly 2 options '
                                          '("-te" or "-lle") and ("-ts" or "-tr"): %s'
                                          % extent_str)
            option = options[0]
            try:
                values = [float(el.strip()) for el in option[1:]]
            except ValueError:
                raise GridProjectionError('Extent values must be int or float: %s' % extent_str)
            key = option[0].strip().replace('-', '')
            if size == 4 and (values[0] >= values[2] or values[1] >= values[3]):
                raise GridProjectionError('Min cannot be bigger than max: %s' % extent_str)
            if size == 2 and (values[0] <= 0 or values[1] <= 0):
                raise GridProjectionError('Resolution or width and height must be '
                                          'bigger than 0: %s' % extent_str)
            extent_dict[key] = values
        return extent_dict
