# Name:         inventory.py
# Purpose:      Layout checks and dataset/data enumeration of ODIM files
# Authors:      ODIMGRID Developers
# Licence:      This file is part of ODIMGRID. You can redistribute it or modify
#               under the terms of GNU General Public License, v.3
#               http://www.gnu.org/licenses/gpl-3.0.html
import logging

from odimgrid.exceptions import OdimStructureError

DEFAULT_DATASET_NAME = 'dataset'
METADATA_GROUPS = ('what', 'where', 'how')


class Inventory(object):
    """Enumerate numbered datasetN and datasetN/dataM groups

    Numbering starts from 1 and must be contiguous: counting stops at the
    first missing number.

    Parameters
    ----------
    resolver : AttributeResolver
    datasetname : str
        prefix of the numbered dataset groups

    """
    def __init__(self, resolver, datasetname=DEFAULT_DATASET_NAME):
        self.resolver = resolver
        self.store = resolver.store
        self.datasetname = datasetname
        self.logger = logging.getLogger(__name__)

    def dataset(self, i):
        """Path of the i-th dataset group"""
        return '/%s%d' % (self.datasetname, i)

    def data(self, i, j):
        """Path of the j-th data group of the i-th dataset"""
        return '%s/data%d' % (self.dataset(i), j)

    def count_datasets(self):
        """Number of contiguous dataset groups at the file root"""
        names = set(self.store.list_groups('/'))
        count = 0
        while '%s%d' % (self.datasetname, count + 1) in names:
            count += 1
        return count

    def count_datas(self, i):
        """Number of contiguous data groups in the i-th dataset

        0 if the dataset group is missing or has no data groups, in which
        case the array lives directly in datasetN/data.
        """
        names = set(self.store.list_groups(self.dataset(i)))
        count = 0
        while 'data%d' % (count + 1) in names:
            count += 1
        return count

    def object_kind(self):
        """Value of /what/object"""
        return self.resolver.get_value('/what', 'object')

    def validate(self):
        """Check that mandatory top-level groups and attributes are present

        Raises
        ------
        OdimStructureError

        """
        if not self.store.probe_group('/what'):
            raise OdimStructureError('Attribute group "/what" missing')
        if not self.store.probe_attribute('/what', 'date'):
            raise OdimStructureError('Attribute "/what.date" missing')
        if not self.store.probe_attribute('/what', 'time'):
            raise OdimStructureError('Attribute "/what.time" missing')
        if not self.store.probe_group(self.dataset(1)):
            raise OdimStructureError('Group "%s" missing' % self.dataset(1))
        if not self.store.probe_group('/where'):
            raise OdimStructureError('Attribute group "/where" missing')

    def describe(self):
        """Log all metadata attributes of the file at INFO level"""
        n_datasets = self.count_datasets()
        self.logger.info('Number of datasets: %d', n_datasets)
        self._describe_groups('')
        for i in range(1, n_datasets + 1):
            self._describe_groups(self.dataset(i))
            for j in range(1, self.count_datas(i) + 1):
                self._describe_groups(self.data(i, j))

    def _describe_groups(self, prefix):
        for group in METADATA_GROUPS:
            path = '%s/%s' % (prefix, group)
            if not self.store.probe_group(path):
                continue
            for name, value in sorted(self.store.read_attributes(path).items()):
                self.logger.info('%s.%s = %s', path, name, value)
