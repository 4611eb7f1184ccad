# Name:         descriptors.py
# Purpose:      Time, parameter, level and place axes of the output grid
# Authors:      ODIMGRID Developers
# Licence:      This file is part of ODIMGRID. You can redistribute it or modify
#               under the terms of GNU General Public License, v.3
#               http://www.gnu.org/licenses/gpl-3.0.html
import math
from collections import namedtuple

from odimgrid.area import Area, Grid
from odimgrid.parameters import map_parameter
from odimgrid.utils import parse_odim_time
from odimgrid.exceptions import OdimStructureError

TimeDescriptor = namedtuple('TimeDescriptor', ['origin_time', 'valid_times'])
Level = namedtuple('Level', ['level_type', 'name', 'value'])

LEVEL_TYPE_HEIGHT = 'height'
LEVEL_TYPE_ANY = 'any'
LEVEL_TYPE_NONE = 'none'

# used when no product carries level information
TRIVIAL_LEVEL = Level(LEVEL_TYPE_ANY, '', 0.0)

LEVEL_PRODUCTS = ('CAPPI', 'PCAPPI', 'PPI', 'ETOP', 'RHI')
HEIGHT_PRODUCTS = ('CAPPI', 'PCAPPI')

RASTER_OBJECTS = ('COMP', 'IMAGE', 'CVOL')
UNSUPPORTED_OBJECTS = {
    'RAY': 'single polar rays (RAY)',
    'AZIM': 'azimuthal objects (AZIM)',
    'XSEC': '2D vertical cross sections (XSEC)',
    'VP': 'vertical profile (VP)',
    'PIC': 'embedded graphical image (PIC)',
}


def is_level_product(product):
    return product in LEVEL_PRODUCTS


def level_type(product):
    if product in HEIGHT_PRODUCTS:
        return LEVEL_TYPE_HEIGHT
    return LEVEL_TYPE_ANY


def _unknown_object(kind):
    return OdimStructureError("Unknown data object: '%s' is not listed in the Opera "
                              "specs followed by this implementation" % kind)


def origin_time(resolver):
    """Nominal time of the file from /what date and time"""
    return parse_odim_time(resolver.get_value('/what', 'date'),
                           resolver.get_value('/what', 'time'))


def valid_time(inventory, i):
    """Valid time of the i-th dataset

    datasetN/what enddate and endtime are used when present. Without
    enddate both values come from /what: date, and endtime or else time.
    A dataset endtime without enddate is ignored.
    """
    resolver = inventory.resolver
    path = inventory.dataset(i) + '/what'
    date = resolver.get_optional_value(path, 'enddate', str)
    if date is None:
        path = '/what'
        date = resolver.get_value(path, 'date')
    time = resolver.get_optional_value(path, 'endtime', str)
    if time is None:
        time = resolver.get_value('/what', 'time')
    return parse_odim_time(date, time)


def create_tdesc(inventory):
    """Time axis: sorted distinct valid times of all datasets

    A file without datasets gets one time step at the origin time.
    """
    origin = origin_time(inventory.resolver)
    n_datasets = inventory.count_datasets()
    if n_datasets == 0:
        return TimeDescriptor(origin, (origin,))
    times = set(valid_time(inventory, i) for i in range(1, n_datasets + 1))
    return TimeDescriptor(origin, tuple(sorted(times)))


def create_pdesc(inventory):
    """Parameter axis: distinct parameters of all data entries ordered by identifier"""
    resolver = inventory.resolver
    parameters = set()
    for i in range(1, inventory.count_datasets() + 1):
        n_datas = inventory.count_datas(i)
        if n_datas == 0:
            # unnumbered data, always described by the first dataset
            prefix = inventory.dataset(1)
            product = resolver.get(prefix, 'what', 'product')
            quantity = resolver.get(prefix, 'what', 'quantity')
            parameters.add(map_parameter(
                product, quantity,
                lambda: resolver.get_value('/data', 'threshold_id', int)))
            continue
        for j in range(1, n_datas + 1):
            prefix = inventory.data(i, j)
            product = resolver.get(prefix, 'what', 'product')
            quantity = resolver.get(prefix, 'what', 'quantity')
            parameters.add(map_parameter(
                product, quantity,
                lambda: resolver.get_value(prefix + '/what', 'threshold_id', int)))
    return tuple(sorted(parameters, key=lambda parameter: parameter.ident))


def collect_levels(inventory):
    """Levels of raster products

    Products CAPPI, PCAPPI, PPI, ETOP and RHI have one level per distinct
    prodpar. All datasets must then share the same product. Other products
    give a single trivial level.
    """
    resolver = inventory.resolver
    n_datasets = inventory.count_datasets()
    level_product = None
    has_levels = False
    has_plain = False
    for i in range(1, n_datasets + 1):
        product = resolver.get_value(inventory.dataset(i) + '/what', 'product')
        if is_level_product(product):
            has_levels = True
            if level_product is None:
                level_product = product
            elif product != level_product:
                raise OdimStructureError('Cannot have different kinds of products when level '
                                         'data is used: %s and %s' % (level_product, product))
        else:
            has_plain = True

    if has_levels and has_plain:
        raise OdimStructureError('Cannot mix non-level type parameters with level type parameters')
    if not has_levels:
        return (TRIVIAL_LEVEL,)

    values = set(resolver.get_value(inventory.dataset(i) + '/what', 'prodpar', float)
                 for i in range(1, n_datasets + 1))
    return tuple(Level(level_type(level_product), level_product, value)
                 for value in sorted(values))


def pvol_level(elangle):
    return Level(LEVEL_TYPE_NONE, 'Elevation angle %g' % elangle, elangle)


def collect_pvol_levels(inventory):
    """Levels of polar volumes: one per distinct elevation angle"""
    resolver = inventory.resolver
    angles = set(resolver.get_value(inventory.dataset(i) + '/where', 'elangle', float)
                 for i in range(1, inventory.count_datasets() + 1))
    return tuple(pvol_level(angle) for angle in sorted(angles))


def create_vdesc(inventory):
    """Level axis depending on /what/object"""
    kind = inventory.object_kind()
    if kind in RASTER_OBJECTS or kind == 'SCAN':
        return collect_levels(inventory)
    if kind == 'PVOL':
        return collect_pvol_levels(inventory)
    if kind in UNSUPPORTED_OBJECTS:
        raise OdimStructureError('Cannot handle %s data' % UNSUPPORTED_OBJECTS[kind])
    raise _unknown_object(kind)


def pvol_range(inventory):
    """Maximum ground range of all sweeps in metres"""
    resolver = inventory.resolver
    max_range = 0.0
    for i in range(1, inventory.count_datasets() + 1):
        path = inventory.dataset(i) + '/where'
        rstart = resolver.get_value(path, 'rstart', float)
        rscale = resolver.get_value(path, 'rscale', float)
        nbins = resolver.get_value(path, 'nbins', int)
        elangle = resolver.get_value(path, 'elangle', float)
        max_range = max(max_range,
                        1000 * rstart + nbins * rscale * math.cos(math.radians(elangle)))
    return max_range


def _create_raster_hdesc(resolver):
    projdef = resolver.get_value('/where', 'projdef')
    xsize = resolver.get_value('/where', 'xsize', int)
    ysize = resolver.get_value('/where', 'ysize', int)

    if resolver.store.probe_attribute('/where', 'LL_lon'):
        bottom_left = (resolver.get_value('/where', 'LL_lon', float),
                       resolver.get_value('/where', 'LL_lat', float))
        top_right = (resolver.get_value('/where', 'UR_lon', float),
                     resolver.get_value('/where', 'UR_lat', float))
        return Grid(Area.from_corners(projdef, bottom_left, top_right), xsize, ysize)

    # only upper left and lower right corners are given
    ul_lon = resolver.get_value('/where', 'UL_lon', float)
    ul_lat = resolver.get_value('/where', 'UL_lat', float)
    lr_lon = resolver.get_value('/where', 'LR_lon', float)
    lr_lat = resolver.get_value('/where', 'LR_lat', float)
    tmp_area = Area.from_corners(projdef, (ul_lon, lr_lat), (lr_lon, ul_lat))
    x, y = tmp_area.latlon_to_worldxy([ul_lon, lr_lon], [ul_lat, lr_lat])
    lon, lat = tmp_area.worldxy_to_latlon([x[0], x[1]], [y[1], y[0]])
    return Grid(Area.from_corners(projdef, (lon[0], lat[0]), (lon[1], lat[1])), xsize, ysize)


def _create_pvol_hdesc(inventory):
    resolver = inventory.resolver
    lon = resolver.get_value('/where', 'lon', float)
    lat = resolver.get_value('/where', 'lat', float)
    range_km = math.ceil(pvol_range(inventory) / 1000.)
    max_nbins = max([resolver.get_value(inventory.dataset(i) + '/where', 'nbins', int)
                     for i in range(1, inventory.count_datasets() + 1)] or [0])
    area = Area.equidistant(1000. * range_km, lon, lat)
    return Grid(area, 2 * max_nbins, 2 * max_nbins)


def create_hdesc(inventory):
    """Horizontal grid depending on /what/object"""
    kind = inventory.object_kind()
    if kind in RASTER_OBJECTS:
        return _create_raster_hdesc(inventory.resolver)
    if kind == 'PVOL':
        return _create_pvol_hdesc(inventory)
    if kind == 'SCAN':
        raise OdimStructureError('Cannot handle SCAN data')
    if kind in UNSUPPORTED_OBJECTS:
        raise OdimStructureError('Cannot handle where-information of %s data' % kind)
    raise _unknown_object(kind)
