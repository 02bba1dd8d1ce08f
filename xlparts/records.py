# Copyright (c) 2005-2012 Stephen John Machin, Lingfo Pty Ltd
# This module is part of the xlparts package, which is released under a
# BSD-style licence.
"""
The records emitted by the part readers, and the reading contract they
all share.
"""
from .common import BaseObject


class Relationship(BaseObject):
    """One ``Relationship`` element of an OPC ``.rels`` document."""
    _repr_these = ['rid', 'rel_type', 'target', 'target_mode']

    def __init__(self, rid, rel_type, target, target_mode='Internal'):
        self.rid = rid
        self.rel_type = rel_type
        self.target = target
        self.target_mode = target_mode


class SharedStringRecord(BaseObject):
    _repr_these = ['text']

    def __init__(self, text):
        #: The plain text of the string, without phonetic runs.
        self.text = text


class NumberFormatRecord(BaseObject):
    _repr_these = ['format_id', 'format_code']

    def __init__(self, format_id, format_code):
        self.format_id = format_id
        self.format_code = format_code


class ExtendedFormatRecord(BaseObject):
    """
    A cell XF. Records come in table order, so the n-th record emitted is
    the one a cell refers to with ``xf_index == n``.
    """
    _repr_these = ['parent_xf', 'number_format', 'font']

    def __init__(self, parent_xf, number_format, font):
        self.parent_xf = parent_xf
        self.number_format = number_format
        self.font = font


class WorkbookPropertiesRecord(BaseObject):
    _repr_these = ['date_mode']

    def __init__(self, date_mode):
        #: 0: 1900 date system, 1: 1904 date system.
        self.date_mode = date_mode


class SheetRecord(BaseObject):
    """
    A sheet listed in the workbook part.

    ``path`` is ``None`` as read from the workbook part. It is filled in
    from the workbook relationships by
    :meth:`~xlparts.zipworker.ZipWorker.get_sheets`.
    """
    _repr_these = ['name', 'sheet_id', 'rid', 'visibility', 'path']

    def __init__(self, name, sheet_id, rid, visibility=0, path=None):
        self.name = name
        self.sheet_id = sheet_id
        #: Relationship id linking the sheet to its part.
        self.rid = rid
        #: 0 = visible, 1 = hidden, 2 = "very hidden".
        self.visibility = visibility
        self.path = path


class RowHeaderRecord(BaseObject):
    _repr_these = ['rowx', 'height', 'hidden']

    def __init__(self, rowx, height=None, hidden=False):
        self.rowx = rowx
        #: Row height in points, or ``None`` when the default applies.
        self.height = height
        self.hidden = hidden


class CellRecord(BaseObject):
    """
    One cell. ``ctype`` is one of the ``XL_CELL_*`` constants; for
    ``XL_CELL_SST`` the ``value`` is an index into the shared strings.
    """
    _repr_these = ['rowx', 'colx', 'ctype', 'value', 'xf_index']

    def __init__(self, rowx, colx, ctype, value, xf_index=0):
        self.rowx = rowx
        self.colx = colx
        self.ctype = ctype
        self.value = value
        self.xf_index = xf_index


class CommentRecord(BaseObject):
    _repr_these = ['ref', 'author', 'text']

    def __init__(self, ref, rowx, colx, author, text):
        self.ref = ref
        self.rowx = rowx
        self.colx = colx
        self.author = author
        self.text = text


class RecordReader(object):
    """
    Reads the records of one container part.

    Every variant wraps exactly one entry stream, opened when the reader
    was created, and closes it in :meth:`close`. Readers must be finished
    with before the container is released.
    """

    def __init__(self, stream):
        self.stream = stream
        self._records = None

    def _iter_records(self):
        raise NotImplementedError

    def read(self):
        """
        :returns: The next record, or ``None`` at the end of the part.
        """
        if self.stream is None:
            return None
        if self._records is None:
            self._records = self._iter_records()
        return next(self._records, None)

    def __iter__(self):
        while True:
            record = self.read()
            if record is None:
                return
            yield record

    def close(self):
        """Close the wrapped stream. Calling it again does nothing."""
        if self.stream is not None:
            self.stream.close()
            self.stream = None
        self._records = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, exc_tb):
        self.close()
