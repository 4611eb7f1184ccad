# Name:         resolver.py
# Purpose:      Lookup of ODIM attributes with fallback to ancestor groups
# Authors:      ODIMGRID Developers
# Licence:      This file is part of ODIMGRID. You can redistribute it or modify
#               under the terms of GNU General Public License, v.3
#               http://www.gnu.org/licenses/gpl-3.0.html
import posixpath

from odimgrid.exceptions import OdimStructureError


class AttributeResolver(object):
    """Resolve ODIM attributes from an AttributeStore

    ODIM allows an attribute to be given at the most specific level
    (e.g. /dataset1/data1/what) or inherited from any ancestor
    (/dataset1/what, /what). get() searches from the given path upward and
    returns the first hit; get_value() reads from one fixed group only.

    Parameters
    ----------
    store : AttributeStore
        opened source file

    """
    def __init__(self, store):
        self.store = store

    @staticmethod
    def candidate_paths(parent_path):
        """List <parent_path> and all its ancestors, most specific first

        Examples
        --------
        >>> AttributeResolver.candidate_paths('dataset1/data2')
        ['/dataset1/data2', '/dataset1', '/']

        """
        path = parent_path if parent_path.startswith('/') else '/' + parent_path
        path = posixpath.normpath(path)
        if path.startswith('//'):
            path = path[1:]
        candidates = [path]
        while path != '/':
            path = posixpath.dirname(path)
            candidates.append(path)
        return candidates

    def find(self, parent_path, group_name, attribute_name):
        """Path of the nearest <group_name> holding <attribute_name> or None"""
        for candidate in self.candidate_paths(parent_path):
            group_path = posixpath.join(candidate, group_name)
            if self.store.probe_attribute(group_path, attribute_name):
                return group_path
        return None

    def _read(self, path, name, dtype):
        if dtype is str:
            return self.store.read_string(path, name)
        return self.store.read_scalar(path, name, dtype)

    def get(self, parent_path, group_name, attribute_name, dtype=str):
        """Read attribute from the nearest <group_name> at or above <parent_path>

        Parameters
        ----------
        parent_path : str
            most specific group, e.g. '/dataset1/data1'
        group_name : str
            'what', 'where' or 'how'
        attribute_name : str
            name of the attribute
        dtype : type
            str, float or int

        Raises
        ------
        OdimStructureError : no candidate group has the attribute
        OdimTypeError : the attribute found has a wrong type

        """
        group_path = self.find(parent_path, group_name, attribute_name)
        if group_path is None:
            raise OdimStructureError('Did not find attribute: %s with group: %s'
                                     % (attribute_name, group_name))
        return self._read(group_path, attribute_name, dtype)

    def get_value(self, path, name, dtype=str):
        """Read attribute <name> of the group at exactly <path>"""
        return self._read(path, name, dtype)

    def get_optional(self, parent_path, group_name, attribute_name, dtype=float):
        """Same as get() but returns None if the attribute is absent"""
        group_path = self.find(parent_path, group_name, attribute_name)
        if group_path is None:
            return None
        return self._read(group_path, attribute_name, dtype)

    def get_optional_value(self, path, name, dtype=float):
        """Same as get_value() but returns None if the attribute is absent"""
        if not self.store.probe_attribute(path, name):
            return None
        return self._read(path, name, dtype)
