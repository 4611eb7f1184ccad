#------------------------------------------------------------------------------
# Name:         test_descriptors.py
# Purpose:      Test construction of time, parameter, level and place axes
#
# Author:       ODIMGRID Developers
#
# Licence:      This file is part of ODIMGRID. You can redistribute it or modify
#               under the terms of GNU General Public License, v.3
#               http://www.gnu.org/licenses/gpl-3.0.html
#------------------------------------------------------------------------------
import unittest
import datetime

import numpy as np

from odimgrid import parameters
from odimgrid.descriptors import (create_tdesc, create_pdesc, create_vdesc, create_hdesc,
                                  Level, TRIVIAL_LEVEL, LEVEL_TYPE_HEIGHT, LEVEL_TYPE_ANY,
                                  LEVEL_TYPE_NONE, pvol_range, valid_time)
from odimgrid.nsr import EARTH_RADIUS
from odimgrid.exceptions import OdimStructureError, UnsupportedParameterError
from odimgrid.tests.odim_test_base import OdimTestBase, comp_file, pvol_file

FIELD = np.zeros((2, 2), dtype=np.uint8)


def sweep(elangle, nbins=4, nrays=8, rscale=500.0, rstart=0.0, **kwargs):
    kwargs.update(elangle=elangle, nbins=nbins, nrays=nrays, rscale=rscale, rstart=rstart,
                  data=np.zeros((nrays, nbins), dtype=np.uint8))
    return kwargs


class TimeDescriptorTest(OdimTestBase):

    def test_times_from_enddate_and_endtime(self):
        attributes, arrays = comp_file([
            {'what': {'product': 'MAX', 'quantity': 'TH',
                      'enddate': '20230615', 'endtime': '121500'}, 'data': FIELD},
            {'what': {'product': 'MAX', 'quantity': 'TH',
                      'enddate': '20230615', 'endtime': '120500'}, 'data': FIELD},
        ])
        tdesc = create_tdesc(self.open_inventory(attributes, arrays))
        self.assertEqual(tdesc.origin_time, datetime.datetime(2023, 6, 15, 12, 0))
        self.assertEqual(tdesc.valid_times, (datetime.datetime(2023, 6, 15, 12, 5),
                                             datetime.datetime(2023, 6, 15, 12, 15)))

    def test_times_are_deduplicated(self):
        what = {'product': 'MAX', 'quantity': 'TH', 'enddate': '20230615', 'endtime': '121000'}
        attributes, arrays = comp_file([{'what': what, 'data': FIELD},
                                        {'what': what, 'data': FIELD}])
        tdesc = create_tdesc(self.open_inventory(attributes, arrays))
        self.assertEqual(tdesc.valid_times, (datetime.datetime(2023, 6, 15, 12, 10),))

    def test_missing_end_time_falls_back_to_nominal_time(self):
        attributes, arrays = comp_file([{'what': {'product': 'MAX', 'quantity': 'TH'},
                                         'data': FIELD}], time='123059')
        tdesc = create_tdesc(self.open_inventory(attributes, arrays))
        # seconds are truncated
        self.assertEqual(tdesc.valid_times, (datetime.datetime(2023, 6, 15, 12, 30),))

    def test_enddate_without_endtime(self):
        attributes, arrays = comp_file([{'what': {'product': 'MAX', 'quantity': 'TH',
                                                  'enddate': '20230616'}, 'data': FIELD}])
        tdesc = create_tdesc(self.open_inventory(attributes, arrays))
        self.assertEqual(tdesc.valid_times, (datetime.datetime(2023, 6, 16, 12, 0),))

    def test_endtime_without_enddate_is_ignored(self):
        attributes, arrays = comp_file([{'what': {'product': 'MAX', 'quantity': 'TH',
                                                  'endtime': '123000'}, 'data': FIELD}])
        inventory = self.open_inventory(attributes, arrays)
        self.assertEqual(valid_time(inventory, 1), datetime.datetime(2023, 6, 15, 12, 0))

    def test_top_level_endtime_without_enddate(self):
        attributes, arrays = comp_file([{'what': {'product': 'MAX', 'quantity': 'TH',
                                                  'endtime': '123000'}, 'data': FIELD}],
                                       endtime='124500')
        inventory = self.open_inventory(attributes, arrays)
        self.assertEqual(valid_time(inventory, 1), datetime.datetime(2023, 6, 15, 12, 45))

    def test_no_datasets_gives_origin_time(self):
        attributes, arrays = comp_file([])
        tdesc = create_tdesc(self.open_inventory(attributes, arrays))
        self.assertEqual(tdesc.valid_times, (tdesc.origin_time,))


class ParamDescriptorTest(OdimTestBase):

    def test_parameters_are_sorted_and_unique(self):
        attributes, arrays = comp_file([
            {'what': {'product': 'COMP'},
             'datas': [({'quantity': 'DBZH'}, FIELD), ({'quantity': 'TH'}, FIELD),
                       ({'quantity': 'PROB', 'threshold_id': 2}, FIELD)]},
            {'what': {'product': 'COMP'},
             'datas': [({'quantity': 'TH'}, FIELD)]},
        ])
        params = create_pdesc(self.open_inventory(attributes, arrays))
        self.assertEqual([p.name for p in params],
                         ['Reflectivity', 'CorrectedReflectivity', 'ProbabilityOfPrecLimit2'])

    def test_unmapped_quantity_fails(self):
        attributes, arrays = comp_file([{'what': {'product': 'COMP'},
                                         'datas': [({'quantity': 'XYZ'}, FIELD)]}])
        with self.assertRaises(UnsupportedParameterError):
            create_pdesc(self.open_inventory(attributes, arrays))

    def test_missing_product_fails(self):
        attributes, arrays = comp_file([{'datas': [({'quantity': 'TH'}, FIELD)]}])
        with self.assertRaises(OdimStructureError):
            create_pdesc(self.open_inventory(attributes, arrays))

    def test_unnumbered_data_is_described_by_first_dataset(self):
        attributes, arrays = comp_file([
            {'what': {'product': 'MAX', 'quantity': 'TH'}, 'data': FIELD},
            {'what': {'product': 'MAX', 'quantity': 'DBZH'}, 'data': FIELD},
        ])
        params = create_pdesc(self.open_inventory(attributes, arrays))
        # the second dataset is described by /dataset1 as well
        self.assertEqual(params, (parameters.REFLECTIVITY,))


class LevelDescriptorTest(OdimTestBase):

    def levels(self, products, object_kind='COMP'):
        datasets = [{'what': {'product': product, 'quantity': 'DBZH', 'prodpar': prodpar},
                     'data': FIELD} for product, prodpar in products]
        attributes, arrays = comp_file(datasets, object=object_kind)
        return create_vdesc(self.open_inventory(attributes, arrays))

    def test_cappi_levels_are_unique_and_sorted(self):
        levels = self.levels([('CAPPI', 1000.0), ('CAPPI', 500.0), ('CAPPI', 1000.0)])
        self.assertEqual(levels, (Level(LEVEL_TYPE_HEIGHT, 'CAPPI', 500.0),
                                  Level(LEVEL_TYPE_HEIGHT, 'CAPPI', 1000.0)))

    def test_duplicate_cappi_gives_one_level(self):
        levels = self.levels([('CAPPI', 1000.0), ('CAPPI', 1000.0)])
        self.assertEqual(levels, (Level(LEVEL_TYPE_HEIGHT, 'CAPPI', 1000.0),))

    def test_ppi_levels_have_any_type(self):
        levels = self.levels([('PPI', 0.5)], object_kind='IMAGE')
        self.assertEqual(levels, (Level(LEVEL_TYPE_ANY, 'PPI', 0.5),))

    def test_non_level_products_give_trivial_level(self):
        levels = self.levels([('MAX', 0.0), ('RR', 0.0)])
        self.assertEqual(levels, (TRIVIAL_LEVEL,))

    def test_mixing_level_and_non_level_products_fails(self):
        with self.assertRaises(OdimStructureError) as cm:
            self.levels([('CAPPI', 500.0), ('RR', 0.0)])
        self.assertIn('Cannot mix non-level type parameters', str(cm.exception))

    def test_different_level_products_fail(self):
        with self.assertRaises(OdimStructureError) as cm:
            self.levels([('CAPPI', 500.0), ('PPI', 0.5)])
        self.assertIn('CAPPI and PPI', str(cm.exception))

    def test_pvol_levels(self):
        attributes, arrays = pvol_file([sweep(1.5), sweep(0.5), sweep(1.5)])
        levels = create_vdesc(self.open_inventory(attributes, arrays))
        self.assertEqual(levels, (Level(LEVEL_TYPE_NONE, 'Elevation angle 0.5', 0.5),
                                  Level(LEVEL_TYPE_NONE, 'Elevation angle 1.5', 1.5)))

    def test_unsupported_objects(self):
        for kind in ('RAY', 'AZIM', 'XSEC', 'VP', 'PIC'):
            with self.assertRaises(OdimStructureError) as cm:
                self.levels([('MAX', 0.0)], object_kind=kind)
            self.assertIn('(%s)' % kind, str(cm.exception))

    def test_unknown_object(self):
        with self.assertRaises(OdimStructureError) as cm:
            self.levels([('MAX', 0.0)], object_kind='FOO')
        self.assertIn("Unknown data object: 'FOO'", str(cm.exception))


class PlaceDescriptorTest(OdimTestBase):

    def grid(self, **kwargs):
        attributes, arrays = comp_file([{'what': {'product': 'MAX', 'quantity': 'TH'},
                                         'data': FIELD}], **kwargs)
        return create_hdesc(self.open_inventory(attributes, arrays))

    def test_comp_grid_from_lower_left_and_upper_right(self):
        grid = self.grid()
        self.assertEqual((grid.xsize, grid.ysize), (2, 2))
        lon, lat = grid.area.worldxy_to_latlon(
            [grid.area.bottom_left[0], grid.area.top_right[0]],
            [grid.area.bottom_left[1], grid.area.top_right[1]])
        np.testing.assert_allclose(lon, [10.0, 12.0], atol=1e-6)
        np.testing.assert_allclose(lat, [60.0, 62.0], atol=1e-6)

    def test_comp_grid_from_upper_left_and_lower_right(self):
        grid = self.grid(corners='UL')
        ul_x, ul_y = grid.area.latlon_to_worldxy(9.5, 62.0)
        lr_x, lr_y = grid.area.latlon_to_worldxy(12.5, 60.0)
        np.testing.assert_allclose(grid.area.bottom_left, (ul_x, lr_y), atol=1e-3)
        np.testing.assert_allclose(grid.area.top_right, (lr_x, ul_y), atol=1e-3)

    def test_image_and_cvol_use_raster_grid(self):
        for kind in ('IMAGE', 'CVOL'):
            self.assertEqual(self.grid(object=kind).shape, (2, 2))

    def test_scan_has_no_grid(self):
        with self.assertRaises(OdimStructureError) as cm:
            self.grid(object='SCAN')
        self.assertEqual(str(cm.exception), 'Cannot handle SCAN data')

    def test_unsupported_objects(self):
        with self.assertRaises(OdimStructureError) as cm:
            self.grid(object='VP')
        self.assertEqual(str(cm.exception), 'Cannot handle where-information of VP data')

    def test_pvol_grid(self):
        attributes, arrays = pvol_file([sweep(0.0, nbins=4, rscale=500.0, rstart=0.5),
                                        sweep(60.0, nbins=6, rscale=500.0)])
        inventory = self.open_inventory(attributes, arrays)
        # max(500 + 4 * 500, 6 * 500 * cos(60))
        self.assertAlmostEqual(pvol_range(inventory), 2500.0, places=6)
        grid = create_hdesc(inventory)
        self.assertEqual(grid.shape, (12, 12))
        self.assertEqual(grid.area.bottom_left, (-3000.0, -3000.0))
        self.assertEqual(grid.area.top_right, (3000.0, 3000.0))
        self.assertIn('+proj=aeqd', grid.area.nsr.proj4)
        self.assertIn('+R=%d' % EARTH_RADIUS, grid.area.nsr.proj4)
        x, y = grid.area.latlon_to_worldxy(25.0, 60.0)
        self.assertAlmostEqual(float(x), 0.0, places=3)
        self.assertAlmostEqual(float(y), 0.0, places=3)


if __name__ == "__main__":
    unittest.main()
