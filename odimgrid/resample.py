# Name:         resample.py
# Purpose:      Copy raw ODIM samples into the output grid
# Authors:      ODIMGRID Developers
# Licence:      This file is part of ODIMGRID. You can redistribute it or modify
#               under the terms of GNU General Public License, v.3
#               http://www.gnu.org/licenses/gpl-3.0.html
import logging
from collections import namedtuple

import numpy as np

from odimgrid.descriptors import Level, is_level_product, level_type, valid_time
from odimgrid.parameters import map_parameter
from odimgrid.exceptions import OdimTypeError, ResamplingError

logger = logging.getLogger(__name__)

TRANSFORM_ATTRIBUTES = ('nodata', 'undetect', 'gain', 'offset')


class ValueTransform(namedtuple('ValueTransform', TRANSFORM_ATTRIBUTES)):
    """Conversion of raw samples into physical values

    Samples equal to nodata become NaN, samples equal to undetect become
    the physical value of 0, all others raw * gain + offset. Missing gain
    and offset mean 1 and 0.
    """
    __slots__ = ()

    @classmethod
    def resolve(cls, resolver, parent_path):
        """Read the attributes from the nearest 'what' group at or above <parent_path>"""
        return cls(*[resolver.get_optional(parent_path, 'what', name)
                     for name in TRANSFORM_ATTRIBUTES])

    @classmethod
    def read(cls, resolver, path):
        """Read the attributes from the group at exactly <path>"""
        return cls(*[resolver.get_optional_value(path, name)
                     for name in TRANSFORM_ATTRIBUTES])

    def scale(self, values):
        if self.gain is not None:
            values = values * self.gain
        if self.offset is not None:
            values = values + self.offset
        return values

    def apply(self, raw):
        """Physical values of raw integer samples as float array"""
        raw = np.asarray(raw)
        values = self.scale(raw.astype(np.float64))
        if self.undetect is not None:
            values[raw == self.undetect] = self.scale(0.0)
        if self.nodata is not None:
            values[raw == self.nodata] = np.nan
        return values


def flip_indices(width, height):
    """Source index for every destination position of a vertically flipped raster

    ODIM rasters start from the top row, the output grid from the bottom
    row. Position pos = row * width + col is filled from
    col + width * (height - 1 - row).
    """
    pos = np.arange(width * height)
    row = pos // width
    col = pos % width
    return col + width * (height - 1 - row)


def copy_dataset(inventory, data, i):
    """Copy raster dataset number <i> (COMP, IMAGE, CVOL) into <data>"""
    resolver = inventory.resolver
    xsize, ysize = data.grid.xsize, data.grid.ysize
    n_datas = inventory.count_datas(i)
    if n_datas == 0:
        prefixes = [inventory.dataset(i)]
    else:
        prefixes = [inventory.data(i, j) for j in range(1, n_datas + 1)]
    time = valid_time(inventory, i)

    for prefix in prefixes:
        product = resolver.get(prefix, 'what', 'product')
        quantity = resolver.get(prefix, 'what', 'quantity')
        if is_level_product(product):
            prodpar = resolver.get(prefix, 'what', 'prodpar', float)
            level = Level(level_type(product), product, prodpar)
        else:
            level = 0
        transform = ValueTransform.resolve(resolver, prefix)
        parameter = map_parameter(
            product, quantity,
            lambda: resolver.get_value(prefix + '/what', 'threshold_id', int))
        data.select_axes(parameter, time, level)

        logger.info('Copying %s (%s/%s) with valid time %s', prefix, product, quantity, time)
        raw = resolver.store.read_array(prefix + '/data')
        if raw.size != xsize * ysize:
            raise OdimTypeError('%s/data: expected %d values, got %d'
                                % (prefix, xsize * ysize, raw.size))
        values = transform.apply(raw)[flip_indices(xsize, ysize)]
        data.write_field(values.reshape(ysize, xsize))


def polar_to_lonlat(area, lon, lat, elangle, nrays, nbins, rscale, rstart):
    """Longitude and latitude of all samples of a sweep, shape (nrays, nbins)

    Parameters
    ----------
    area : Area
        area used for the world coordinates
    lon, lat : float
        radar position
    elangle : float
        elevation angle in degrees
    nrays, nbins : int
        number of rays and bins per ray
    rscale : float
        bin length in metres
    rstart : float
        distance of the first bin in kilometres

    """
    center_x, center_y = area.latlon_to_worldxy(lon, lat)
    rays, bins = np.meshgrid(np.arange(nrays), np.arange(nbins), indexing='ij')
    azimuth = np.radians(360.0 * (rays + 0.5) / nrays)
    distance = (1000 * rstart + (bins + 0.5) * rscale) * np.cos(np.radians(elangle))
    return area.worldxy_to_latlon(center_x + distance * np.sin(azimuth),
                                  center_y + distance * np.cos(azimuth))


def copy_dataset_pvol(inventory, data, i):
    """Project sweep number <i> of a polar volume into <data>

    Every sample goes to the nearest grid point, later samples overwrite
    earlier ones. All sweeps use the valid time of the first dataset and
    sweep <i> fills level <i - 1>. Sweeps beyond the level axis (repeated
    elevation angles) are skipped.
    """
    resolver = inventory.resolver
    prefix = inventory.dataset(i)
    if i > len(data.levels):
        logger.warning('Skipping sweep %s: no level number %d in output grid with %d levels',
                       prefix, i - 1, len(data.levels))
        return
    time = valid_time(inventory, 1)

    product = resolver.get_value(prefix + '/what', 'product')
    quantity = resolver.get_value(prefix + '/data1/what', 'quantity')
    parameter = map_parameter(
        product, quantity, lambda: resolver.get_value(prefix, 'threshold_id', int))
    data.select_axes(parameter, time, i - 1)
    transform = ValueTransform.read(resolver, prefix + '/data1/what')

    lat = resolver.get_value('/where', 'lat', float)
    lon = resolver.get_value('/where', 'lon', float)
    where = prefix + '/where'
    elangle = resolver.get_value(where, 'elangle', float)
    nbins = resolver.get_value(where, 'nbins', int)
    nrays = resolver.get_value(where, 'nrays', int)
    rscale = resolver.get_value(where, 'rscale', float)
    rstart = resolver.get_value(where, 'rstart', float)

    logger.info('Copying sweep %s (%s/%s) at elevation %g', prefix, product, quantity, elangle)
    raw = resolver.store.read_array(prefix + '/data1/data')
    if raw.size < nrays * nbins:
        raise OdimTypeError('%s/data1/data: expected %d values, got %d'
                            % (prefix, nrays * nbins, raw.size))

    lons, lats = polar_to_lonlat(data.grid.area, lon, lat, elangle, nrays, nbins, rscale, rstart)
    rows, cols, inside = data.grid.nearest_points(lons, lats)
    if not inside.all():
        ray, bin_ = [int(v[0]) for v in np.nonzero(~inside)]
        raise ResamplingError('Failed to find nearest grid point for ray %d bin %d of %s '
                              '(lon=%f, lat=%f)' % (ray, bin_, prefix, lons[ray, bin_],
                                                    lats[ray, bin_]))
    data.write_points(rows, cols, transform.apply(raw[:nrays * nbins]))


def copy_datasets(inventory, data):
    """Copy all datasets of the source into <data>"""
    copy = copy_dataset_pvol if inventory.object_kind() == 'PVOL' else copy_dataset
    for i in range(1, inventory.count_datasets() + 1):
        copy(inventory, data, i)
