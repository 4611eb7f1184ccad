# Name:         store.py
# Purpose:      Read-only access to groups, attributes and arrays of ODIM HDF5 files
# Authors:      ODIMGRID Developers
# Licence:      This file is part of ODIMGRID. You can redistribute it or modify
#               under the terms of GNU General Public License, v.3
#               http://www.gnu.org/licenses/gpl-3.0.html
import io
import sys
import logging

import h5py
import numpy as np

from odimgrid.utils import decode_attribute
from odimgrid.exceptions import OdimStructureError, OdimTypeError

STDIN_NAME = '-'


def _absolute(path):
    if not path.startswith('/'):
        path = '/' + path
    return path


class AttributeStore(object):
    """Read-only view of an HDF5 file

    Paths may be given with or without the leading slash, they are always
    interpreted from the file root.

    Parameters
    ----------
    filename : str
        Name of the HDF5 file or '-' to read the file from standard input

    Examples
    --------
    >>> with AttributeStore('radar.h5') as store:
    ...     obj = store.read_string('/what', 'object')

    """
    def __init__(self, filename):
        self.filename = filename
        self.logger = logging.getLogger(__name__)
        if filename == STDIN_NAME:
            self.logger.debug('Reading HDF5 image from standard input')
            self._buffer = io.BytesIO(sys.stdin.buffer.read())
            source = self._buffer
        else:
            self._buffer = None
            source = filename
        try:
            self.h5 = h5py.File(source, 'r')
        except OSError as e:
            raise OdimStructureError('Failed to open %s as HDF5: %s' % (filename, e))

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def close(self):
        """Close the file, repeated calls do nothing"""
        if self.h5 is not None:
            self.h5.close()
            self.h5 = None
        if self._buffer is not None:
            self._buffer.close()
            self._buffer = None

    def _get_object(self, path):
        """Return h5py object at <path> or None"""
        path = _absolute(path)
        try:
            return self.h5[path]
        except (KeyError, ValueError, TypeError):
            return None

    def probe_group(self, path):
        """Check if <path> is a group"""
        return isinstance(self._get_object(path), h5py.Group)

    def probe_attribute(self, path, name):
        """Check if object at <path> has attribute <name>"""
        obj = self._get_object(path)
        return obj is not None and name in obj.attrs

    def list_groups(self, path):
        """Names of child groups of <path>, empty if <path> is not a group"""
        group = self._get_object(path)
        if not isinstance(group, h5py.Group):
            return []
        return [name for name, child in group.items() if isinstance(child, h5py.Group)]

    def read_attributes(self, path):
        """All attributes of object at <path> as a dict of decoded values"""
        obj = self._get_object(path)
        if obj is None:
            return {}
        return dict((name, decode_attribute(obj.attrs[name])) for name in obj.attrs)

    def _read_attribute(self, path, name):
        obj = self._get_object(path)
        if obj is None or name not in obj.attrs:
            raise OdimStructureError('Failed to read attribute %s/%s' % (_absolute(path), name))
        return obj.attrs[name]

    def read_scalar(self, path, name, dtype=float):
        """Read numeric scalar attribute and convert it with <dtype>

        Parameters
        ----------
        path : str
            path of the group
        name : str
            name of the attribute
        dtype : type
            float or int

        Raises
        ------
        OdimStructureError : attribute is missing
        OdimTypeError : attribute is not numeric or has more than one element

        """
        raw = self._read_attribute(path, name)
        count = np.size(raw)
        if count != 1:
            raise OdimTypeError('Attribute %s/%s: expected 1 element, got %d'
                                % (_absolute(path), name, count))
        value = decode_attribute(raw)
        if isinstance(value, (bool, str)) or not isinstance(value, (int, float)):
            raise OdimTypeError('Attribute %s/%s: expected number, got %s'
                                % (_absolute(path), name, type(value).__name__))
        return dtype(value)

    def read_string(self, path, name):
        """Read string attribute"""
        raw = self._read_attribute(path, name)
        count = np.size(raw)
        if count != 1:
            raise OdimTypeError('Attribute %s/%s: expected 1 element, got %d'
                                % (_absolute(path), name, count))
        value = decode_attribute(raw)
        if not isinstance(value, str):
            raise OdimTypeError('Attribute %s/%s: expected string, got %s'
                                % (_absolute(path), name, type(value).__name__))
        return value

    def read_array(self, path):
        """Read dataset at <path> as flat array of integers

        Floating point samples are truncated toward zero.
        """
        obj = self._get_object(path)
        if not isinstance(obj, h5py.Dataset):
            raise OdimStructureError('Failed to read dataset %s' % _absolute(path))
        values = np.asarray(obj[()])
        if not np.issubdtype(values.dtype, np.number):
            raise OdimTypeError('Dataset %s: expected numeric data, got %s'
                                % (_absolute(path), values.dtype))
        return values.astype(np.int64).ravel()
