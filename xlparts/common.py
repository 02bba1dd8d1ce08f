# Copyright (c) 2005-2012 Stephen John Machin, Lingfo Pty Ltd
# This module is part of the xlparts package, which is released under a
# BSD-style licence.
"""
Names shared by every part of the container layer: the error base class,
the part kinds and encodings, and the logical path templates.
"""
from enum import Enum


class XLPartsError(Exception):
    """An exception indicating problems reading the container."""
    pass


class HeaderError(XLPartsError):
    """The container holds no workbook part, so it is not a spreadsheet."""
    pass


class BaseObject(object):
    """
    Parent of almost all other classes in the package.
    """
    _repr_these = []

    def __repr__(self):
        attrs = ', '.join(f'{name}={getattr(self, name)!r}' for name in self._repr_these)
        return f'{self.__class__.__name__}({attrs})'

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in self._repr_these)

    __hash__ = None


XML_FORMAT = 'xml'
BIN_FORMAT = 'bin'

NS_RELATIONSHIPS = 'http://schemas.openxmlformats.org/package/2006/relationships'
NS_OFFICE_RELATIONSHIPS = 'http://schemas.openxmlformats.org/officeDocument/2006/relationships'

PARTS_ROOT = 'xl/'

#: Relationships of a single worksheet. Only the XML form is ever looked up.
SHEET_RELS_TEMPLATE = 'xl/worksheets/_rels/{name}.{ext}.rels'

#: Suffix of the relationship types that point at a comments part. Both the
#: legacy and the threaded comment types end with it.
COMMENTS_REL_SUFFIX = 'comments'


class Encoding(Enum):
    XML = XML_FORMAT
    BINARY = BIN_FORMAT


class PartKind(Enum):
    """
    The well-known parts of a workbook package.

    Each value is ``(template, has_binary)``. Templates take the format
    extension as ``{ext}`` and, for per-sheet parts, a ``{name}``.
    Comments have no binary template: binary comment parts are not read.
    """
    WORKBOOK = ('xl/workbook.{ext}', True)
    SHARED_STRINGS = ('xl/sharedStrings.{ext}', True)
    STYLES = ('xl/styles.{ext}', True)
    WORKBOOK_RELATIONSHIPS = ('xl/_rels/workbook.{ext}.rels', True)
    WORKSHEET = ('xl/{name}', True)
    COMMENTS = ('xl/{name}', False)

    def template(self, encoding):
        """
        :returns: The path template for ``encoding``, or ``None`` when the
          part has no such encoding.
        """
        template, has_binary = self.value
        if encoding is Encoding.BINARY and not has_binary:
            return None
        return template


#: Parts found by trying the XML path and then the binary path.
FIXED_PARTS = (
    PartKind.WORKBOOK,
    PartKind.SHARED_STRINGS,
    PartKind.STYLES,
    PartKind.WORKBOOK_RELATIONSHIPS,
)

# Cell types. The numbering follows xlrd's XL_CELL_* constants; XL_CELL_SST
# marks a cell whose value is an index into the shared string table.
XL_CELL_EMPTY = 0
XL_CELL_TEXT = 1
XL_CELL_NUMBER = 2
XL_CELL_BOOLEAN = 4
XL_CELL_ERROR = 5
XL_CELL_SST = 7

error_text_from_code = {
    0x00: '#NULL!',
    0x07: '#DIV/0!',
    0x0F: '#VALUE!',
    0x17: '#REF!',
    0x1D: '#NAME?',
    0x24: '#NUM!',
    0x2A: '#N/A',
    0x2B: '#GETTING_DATA',
}

#: Sheet visibility as stored in workbook parts.
visibility_from_text = {
    'visible': 0,
    'hidden': 1,
    'veryhidden': 2,
}


def colx_from_letters(letters):
    """
    :param letters: Column letters of an A1-style reference, e.g. ``'AB'``.
    :returns: The zero-based column index.
    """
    colx = 0
    for c in letters.upper():
        if not 'A' <= c <= 'Z':
            raise XLPartsError(f'Unexpected character {c!r} in column name {letters!r}')
        colx = colx * 26 + ord(c) - ord('A') + 1
    return colx - 1


def cell_name_to_rowx_colx(cell_name):
    """
    Convert an A1-style reference like ``'C12'`` into zero-based
    ``(rowx, colx)``. Absolute markers (``$``) are ignored.
    """
    name = cell_name.replace('$', '')
    for i, c in enumerate(name):
        if c.isdigit():
            break
    else:
        raise XLPartsError(f'Missing row number in cell name {cell_name!r}')
    if i == 0:
        raise XLPartsError(f'Missing column letters in cell name {cell_name!r}')
    return int(name[i:]) - 1, colx_from_letters(name[:i])
