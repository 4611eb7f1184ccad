#------------------------------------------------------------------------------
# Name:         test_grid.py
# Purpose:      Test the GridData class
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
from odimgrid.area import Area, Grid
from odimgrid.grid import GridData
from odimgrid.descriptors import TimeDescriptor, Level, TRIVIAL_LEVEL, LEVEL_TYPE_HEIGHT
from odimgrid.exceptions import ResamplingError

T0 = datetime.datetime(2023, 6, 15, 12, 0)
T1 = datetime.datetime(2023, 6, 15, 12, 5)


class GridDataTest(unittest.TestCase):

    def setUp(self):
        self.grid = Grid(Area.equidistant(1000.0, 25.0, 60.0), 3, 2)
        self.levels = (Level(LEVEL_TYPE_HEIGHT, 'CAPPI', 500.0),
                       Level(LEVEL_TYPE_HEIGHT, 'CAPPI', 1000.0))
        self.data = GridData((parameters.REFLECTIVITY, parameters.PRECIPITATION_RATE),
                             TimeDescriptor(T0, (T0, T1)), self.levels, self.grid)

    def test_init(self):
        self.assertEqual(self.data.array.shape, (2, 2, 2, 2, 3))
        self.assertEqual(self.data.array.dtype, np.float32)
        self.assertTrue(np.isnan(self.data.array).all())
        self.assertEqual(self.data.producer, (1014, 'RADAR'))

    def test_select_and_write_field(self):
        self.data.select_axes(parameters.PRECIPITATION_RATE, T1, self.levels[1])
        self.data.write_field([[1, 2, 3], [4, 5, 6]])
        self.assertEqual(self.data.array[1, 1, 1].tolist(), [[1, 2, 3], [4, 5, 6]])
        self.assertTrue(np.isnan(self.data.array[0]).all())

    def test_select_level_by_index(self):
        self.data.select_axes(parameters.REFLECTIVITY, T0, 1)
        self.data.write_points([0], [2], [7.5])
        self.assertEqual(self.data.array[0, 0, 1, 0, 2], 7.5)

    def test_select_unknown_parameter(self):
        with self.assertRaises(ResamplingError) as cm:
            self.data.select_axes(parameters.ECHO_TOP, T0, 0)
        self.assertIn('Failed to activate product EchoTop', str(cm.exception))

    def test_select_unknown_time(self):
        self.assertRaises(ResamplingError, self.data.select_axes,
                          parameters.REFLECTIVITY, datetime.datetime(2000, 1, 1), 0)

    def test_select_unknown_level(self):
        self.assertRaises(ResamplingError, self.data.select_axes,
                          parameters.REFLECTIVITY, T0, TRIVIAL_LEVEL)
        self.assertRaises(ResamplingError, self.data.select_axes,
                          parameters.REFLECTIVITY, T0, 2)

    def test_write_without_selection(self):
        self.assertRaises(ResamplingError, self.data.write_points, [0], [0], [1.0])

    def test_write_field_with_wrong_shape(self):
        self.data.select_axes(parameters.REFLECTIVITY, T0, 0)
        self.assertRaises(ResamplingError, self.data.write_field, np.zeros((3, 2)))

    def test_write_points_last_value_wins(self):
        self.data.select_axes(parameters.REFLECTIVITY, T0, 0)
        self.data.write_points([0, 1, 0, 0], [0, 2, 0, 1], [1.0, 2.0, 3.0, 4.0])
        field = self.data.array[0, 0, 0]
        self.assertEqual(field[0, 0], 3.0)
        self.assertEqual(field[0, 1], 4.0)
        self.assertEqual(field[1, 2], 2.0)
        self.assertTrue(np.isnan(field[1, 0]))

    def test_get_field_returns_copy(self):
        field = self.data.get_field(parameters.REFLECTIVITY, T0, 0)
        field[:] = 1.0
        self.assertTrue(np.isnan(self.data.array).all())

    def test_interpolate_to_same_grid(self):
        self.data.select_axes(parameters.REFLECTIVITY, T0, 0)
        self.data.write_field([[1, 2, 3], [4, 5, 6]])
        result = self.data.interpolate_to_grid(Grid(self.grid.area, 3, 2))
        self.assertEqual(result.array.shape, self.data.array.shape)
        self.assertEqual(result.params, self.data.params)
        np.testing.assert_allclose(result.array[0, 0, 0], [[1, 2, 3], [4, 5, 6]], atol=1e-3)
        self.assertTrue(np.isnan(result.array[1]).all())

    def test_interpolate_to_other_projection(self):
        self.data.select_axes(parameters.REFLECTIVITY, T0, 0)
        self.data.write_field(np.full((2, 3), 5.0))
        x, y = self.grid.area.worldxy_to_latlon([-500.0, 500.0], [-400.0, 400.0])
        target = Grid(Area.from_corners(4326, (x[0], y[0]), (x[1], y[1])), 4, 4)
        result = self.data.interpolate_to_grid(target)
        self.assertEqual(result.array.shape, (2, 2, 2, 4, 4))
        np.testing.assert_allclose(result.array[0, 0, 0], 5.0, atol=1e-4)


if __name__ == "__main__":
    unittest.main()
