# Name:  exporter.py
# Purpose: Container of Exporter class
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
import sys
import datetime
import logging
import tempfile

import numpy as np
from netCDF4 import Dataset

STDOUT_NAME = '-'


class Exporter(object):
    """Write GridData into a netCDF file

    Layout: dimensions time, level, y, x; one float32 variable
    (time, level, y, x) per parameter, 2D lon/lat and a 'crs' grid mapping
    variable with the WKT of the grid projection.
    """
    DEFAULT_INSTITUTE = 'Unknown'
    DEFAULT_SOURCE = 'Weather radar'
    CONVENTIONS = 'CF-1.6'

    def __init__(self, data, source_filename=None):
        self.data = data
        self.source_filename = source_filename
        self.logger = logging.getLogger(__name__)

    def export(self, filename, created=None):
        """Write netCDF file <filename>, '-' writes the file to standard output

        A file is first written next to <filename> and renamed when complete,
        so a failed export leaves no partial file behind.
        """
        tmp_filename = None
        if filename == STDOUT_NAME:
            # in-memory file, close() returns its image
            nc_out = Dataset('odimgrid.nc', 'w', memory=1024, format='NETCDF4')
        else:
            fd, tmp_filename = tempfile.mkstemp(
                suffix='.nc', prefix='.odimgrid_',
                dir=os.path.dirname(os.path.abspath(filename)))
            os.close(fd)
            nc_out = Dataset(tmp_filename, 'w', format='NETCDF4')
        try:
            self._create_dimensions(nc_out)
            self._create_grid_mapping(nc_out)
            for param in self.data.params:
                self._create_parameter_variable(nc_out, param)
            nc_out.setncatts(self._get_global_metadata(created))
        except Exception:
            nc_out.close()
            if tmp_filename is not None:
                os.remove(tmp_filename)
            raise
        image = nc_out.close()
        if filename == STDOUT_NAME:
            sys.stdout.buffer.write(bytes(image))
            sys.stdout.buffer.flush()
        else:
            # mkstemp creates the file readable by the owner only
            umask = os.umask(0)
            os.umask(umask)
            os.chmod(tmp_filename, 0o666 & ~umask)
            os.replace(tmp_filename, filename)
        self.logger.info('Wrote %s', filename)

    def _create_dimensions(self, nc_out):
        """Create time, level, y and x dimensions with coordinate variables"""
        tdesc = self.data.tdesc
        nc_out.createDimension('time', len(tdesc.valid_times))
        nc_out.createDimension('level', len(self.data.levels))
        nc_out.createDimension('y', self.data.grid.ysize)
        nc_out.createDimension('x', self.data.grid.xsize)

        out_var = nc_out.createVariable('time', '>f8', ('time', ))
        out_var.calendar = 'standard'
        out_var.long_name = 'time'
        out_var.standard_name = 'time'
        out_var.units = 'seconds since %s' % tdesc.origin_time.strftime('%Y-%m-%d %H:%M:%S')
        out_var.axis = 'T'
        out_var[:] = [(t - tdesc.origin_time).total_seconds() for t in tdesc.valid_times]

        out_var = nc_out.createVariable('level', '>f8', ('level', ))
        out_var.long_name = 'level'
        out_var.axis = 'Z'
        out_var.level_type = ','.join(level.level_type for level in self.data.levels)
        out_var.level_name = ','.join(level.name for level in self.data.levels)
        out_var[:] = [level.value for level in self.data.levels]

        for name, values in (('y', self.data.grid.y_coords), ('x', self.data.grid.x_coords)):
            out_var = nc_out.createVariable(name, '>f8', (name, ))
            out_var.standard_name = 'projection_%s_coordinate' % name
            out_var.units = 'm'
            out_var.axis = name.upper()
            out_var[:] = values

        lon, lat = self.data.grid.get_geolocation_grids()
        for name, values, units in (('lon', lon, 'degrees_east'), ('lat', lat, 'degrees_north')):
            out_var = nc_out.createVariable(name, '>f4', ('y', 'x'))
            out_var.standard_name = 'longitude' if name == 'lon' else 'latitude'
            out_var.units = units
            out_var[:] = values

    def _create_grid_mapping(self, nc_out):
        out_var = nc_out.createVariable('crs', 'i4')
        nsr = self.data.grid.area.nsr
        out_var.crs_wkt = nsr.wkt
        out_var.spatial_ref = nsr.wkt
        out_var.proj4 = nsr.proj4
        out_var.GeoTransform = ' '.join('%r' % v for v in self.data.grid.get_geotransform())

    def _create_parameter_variable(self, nc_out, param):
        index = self.data.params.index(param)
        out_var = nc_out.createVariable(param.name, 'f4', ('time', 'level', 'y', 'x'),
                                        fill_value=np.float32(self.data.FILL_VALUE))
        out_var.long_name = param.name
        out_var.units = param.units
        out_var.parameter_id = np.int32(param.ident)
        out_var.grid_mapping = 'crs'
        out_var.coordinates = 'lon lat'
        values = self.data.array[index]
        out_var[:] = np.ma.masked_invalid(values)

    def _get_global_metadata(self, created):
        if created is None:
            now = datetime.datetime.now(datetime.timezone.utc)
            created = now.strftime('%Y-%m-%d %H:%M:%S UTC')
        producer_id, producer_name = self.data.producer
        global_metadata = {
            'Conventions': self.CONVENTIONS,
            'institution': self.DEFAULT_INSTITUTE,
            'source': self.DEFAULT_SOURCE,
            'creation_date': created,
            'producer_id': np.int32(producer_id),
            'producer_name': producer_name,
            'origin_time': self.data.tdesc.origin_time.strftime('%Y-%m-%dT%H:%M:%SZ'),
            'history': ' '}
        if self.source_filename is not None:
            global_metadata['source_file'] = self.source_filename
        return global_metadata
