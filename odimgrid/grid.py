# Name:    grid.py
# Purpose: Container of GridData class
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
import logging

import numpy as np

from odimgrid.utils import gdal
from odimgrid.exceptions import ResamplingError

DEFAULT_PRODUCER = (1014, 'RADAR')


class GridData(object):
    """Values on a parameter x time x level x grid cube

    Values are float32, missing values are NaN. Writing goes through a
    cursor: select_axes() picks parameter, time and level, the write
    methods fill the selected horizontal field.

    Parameters
    ----------
    params : sequence of Parameter
    tdesc : TimeDescriptor
    levels : sequence of Level
    grid : Grid
    producer : (int, str)
        producer number and name

    """
    FILL_VALUE = 9.96921e+36

    def __init__(self, params, tdesc, levels, grid, producer=DEFAULT_PRODUCER):
        self.params = tuple(params)
        self.tdesc = tdesc
        self.levels = tuple(levels)
        self.grid = grid
        self.producer = producer
        self.logger = logging.getLogger(__name__)
        self.array = np.full((len(self.params), len(self.tdesc.valid_times),
                              len(self.levels), grid.ysize, grid.xsize),
                             np.nan, dtype=np.float32)
        self._cursor = None

    def __repr__(self):
        return 'GridData(params=%s, times=%d, levels=%d, %r)' % (
            [p.name for p in self.params], len(self.tdesc.valid_times),
            len(self.levels), self.grid)

    @property
    def times(self):
        return self.tdesc.valid_times

    def select_axes(self, param, time, level):
        """Select parameter, time and level for the following writes

        Parameters
        ----------
        param : Parameter
        time : datetime.datetime
        level : Level or int
            level, or index of the level on the level axis

        Raises
        ------
        ResamplingError : if any of them is not on its axis

        """
        idents = [p.ident for p in self.params]
        if param.ident not in idents:
            raise ResamplingError('Failed to activate product %s in output grid with id %d'
                                  % (param.name, param.ident))
        if time not in self.times:
            raise ResamplingError('Failed to activate correct valid time %s in output grid'
                                  % time)
        if isinstance(level, int):
            if not 0 <= level < len(self.levels):
                raise ResamplingError('Failed to activate level number %d in output grid '
                                      'with %d levels' % (level, len(self.levels)))
            level_index = level
        elif level in self.levels:
            level_index = self.levels.index(level)
        else:
            raise ResamplingError('Failed to activate correct level %s in output grid'
                                  % (level,))
        self._cursor = (idents.index(param.ident), self.times.index(time), level_index)

    def _field(self):
        if self._cursor is None:
            raise ResamplingError('No parameter, time and level selected')
        return self.array[self._cursor]

    def write_field(self, values):
        """Write whole horizontal field, <values> has shape (ysize, xsize), row 0 at the bottom"""
        values = np.asarray(values, dtype=np.float32)
        if values.shape != self.grid.shape:
            raise ResamplingError('Field shape %s does not match grid shape %s'
                                  % (values.shape, self.grid.shape))
        self._field()[:] = values

    def write_points(self, rows, cols, values):
        """Write <values> at (<rows>, <cols>); later values win on repeated points"""
        rows = np.asarray(rows, dtype=int).ravel()
        cols = np.asarray(cols, dtype=int).ravel()
        values = np.asarray(values, dtype=np.float32).ravel()
        flat = rows * self.grid.xsize + cols
        # index of the last occurrence of every point
        _, first_reversed = np.unique(flat[::-1], return_index=True)
        last = flat.size - 1 - first_reversed
        self._field()[rows[last], cols[last]] = values[last]

    def get_field(self, param, time, level):
        """Horizontal field of given parameter, time and level (a copy)"""
        self.select_axes(param, time, level)
        return self._field().copy()

    def interpolate_to_grid(self, grid):
        """Bilinear reprojection of all fields to another grid

        Parameters
        ----------
        grid : Grid
            destination grid

        Returns
        -------
        GridData
            new container with the same parameter, time and level axes

        """
        self.logger.info('Interpolating %dx%d grid to %dx%d grid',
                         self.grid.xsize, self.grid.ysize, grid.xsize, grid.ysize)
        result = GridData(self.params, self.tdesc, self.levels, grid, self.producer)
        fields = self.array.reshape((-1,) + self.grid.shape)
        if fields.shape[0] == 0:
            return result
        src_ds = self._mem_dataset(self.grid, fields.shape[0])
        dst_ds = self._mem_dataset(grid, fields.shape[0])
        for i, field in enumerate(fields):
            # GDAL rasters start from the top row
            band = src_ds.GetRasterBand(i + 1)
            band.WriteArray(np.where(np.isnan(field), self.FILL_VALUE, field)[::-1])
        gdal.ReprojectImage(src_ds, dst_ds, None, None, gdal.GRA_Bilinear)

        out_fields = result.array.reshape((-1,) + grid.shape)
        for i in range(fields.shape[0]):
            data = dst_ds.GetRasterBand(i + 1).ReadAsArray()[::-1]
            out_fields[i] = np.where(data == np.float32(self.FILL_VALUE), np.nan, data)
        return result

    def _mem_dataset(self, grid, n_bands):
        dataset = gdal.GetDriverByName('MEM').Create('', grid.xsize, grid.ysize,
                                                     n_bands, gdal.GDT_Float32)
        dataset.SetGeoTransform(grid.get_geotransform())
        dataset.SetProjection(grid.area.nsr.wkt)
        for i in range(n_bands):
            band = dataset.GetRasterBand(i + 1)
            band.SetNoDataValue(self.FILL_VALUE)
            band.Fill(self.FILL_VALUE)
        return dataset
