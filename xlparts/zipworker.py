# Copyright (c) 2005-2012 Stephen John Machin, Lingfo Pty Ltd
# This module is part of the xlparts package, which is released under a
# BSD-style licence.
from logging import getLogger

from .archive import ArchiveIndex
from .common import Encoding, HeaderError, PartKind, XLPartsError
from .factory import create_reader
from .paths import resolve_part, resolve_worksheet
from .records import SheetRecord
from .rels import find_comments_target, read_relationships, sheet_rels_path


logger = getLogger(__name__)


class ZipWorker(object):
    """
    Gives access to the parts of an Excel 2007+ container, in either the
    XML (``.xlsx``) or the binary (``.xlsb``) encoding.

    The worker owns ``stream`` and closes it in :meth:`release_resources`,
    after the ZIP archive itself. Use it in a ``with`` statement so that
    happens on every exit path.

    Readers returned by the ``get_*_reader`` methods own their entry
    stream, but those streams read through the container: finish with
    them (or close them) before releasing the worker.

    A worker is not thread-safe. Calls against one worker must be
    serialized by the caller.

    :param stream: A seekable binary file-like object holding the container.
    :raises ArchiveError: if ``stream`` is not a ZIP container.
    """

    _index = None
    _stream = None
    _resources_released = 0

    def __init__(self, stream):
        if stream is None:
            raise ValueError('stream is required')
        # the stream only becomes ours once the archive has been indexed
        index = ArchiveIndex(stream)
        self._stream = stream
        self._index = index

    def _check_open(self):
        if self._resources_released:
            raise XLPartsError("Can't read parts after releasing resources.")

    def _fixed_part_reader(self, kind):
        self._check_open()
        found = resolve_part(self._index, kind)
        if found is None:
            return None
        info, encoding = found
        return create_reader(self._index, info, kind, encoding)

    def has_workbook(self):
        self._check_open()
        return resolve_part(self._index, PartKind.WORKBOOK) is not None

    def get_shared_strings_reader(self):
        """
        :returns: A reader for the shared string table, or ``None`` if the
          workbook has none.
        """
        return self._fixed_part_reader(PartKind.SHARED_STRINGS)

    def get_styles_reader(self):
        """
        :returns: A reader for the style table, or ``None``.
        """
        return self._fixed_part_reader(PartKind.STYLES)

    def get_workbook_reader(self):
        """
        :returns: A reader for the workbook part.
        :raises HeaderError: if the container has no workbook part at all.
        """
        reader = self._fixed_part_reader(PartKind.WORKBOOK)
        if reader is None:
            raise HeaderError("Can't find workbook part in ZIP container; not an Excel 2007+ file")
        return reader

    def get_worksheet_reader(self, sheet_path):
        """
        :param sheet_path:
          Path of the worksheet part, either rooted (``/xl/worksheets/sheet1.xml``)
          or relative to ``xl/`` (``worksheets/sheet1.xml``), as found in
          the workbook relationships.
        :returns: A reader, or ``None`` if there is no such part or its
          extension is neither ``.xml`` nor ``.bin``.
        """
        self._check_open()
        found = resolve_worksheet(self._index, sheet_path)
        if found is None:
            return None
        info, encoding = found
        return create_reader(self._index, info, PartKind.WORKSHEET, encoding)

    def get_comments_reader(self, sheet):
        """
        Find the comments of a worksheet through the worksheet's
        relationships document.

        Only XML comment parts are read. A binary workbook gets ``None``
        here even when its sheets carry comments.

        :param sheet: A :class:`~xlparts.records.SheetRecord` with its
          ``path`` set, or the worksheet path itself.
        :returns: A comments reader, or ``None``.
        """
        self._check_open()
        sheet_path = sheet.path if isinstance(sheet, SheetRecord) else sheet
        if not sheet_path:
            return None
        rels_info = self._index.lookup(sheet_rels_path(sheet_path))
        if rels_info is None:
            return None
        with self._index.open_entry(rels_info) as rels_stream:
            comments_path = find_comments_target(rels_stream)
        if comments_path is None:
            return None
        logger.debug(f"Comments of {sheet_path!r} are in {comments_path!r}")
        return create_reader(self._index, self._index.lookup(comments_path),
                             PartKind.COMMENTS, Encoding.XML)

    def get_workbook_rels_stream(self):
        """
        :returns: The raw workbook relationships document as a binary
          stream, or ``None``. The caller closes it.
        """
        self._check_open()
        found = resolve_part(self._index, PartKind.WORKBOOK_RELATIONSHIPS)
        if found is None:
            return None
        return self._index.open_entry(found[0])

    def get_workbook_relationships(self):
        """
        :returns: The workbook's relationships in document order; an empty
          list when it has none.
        """
        stream = self.get_workbook_rels_stream()
        if stream is None:
            return []
        with stream:
            return read_relationships(stream)

    def get_sheets(self):
        """
        :returns: The workbook's :class:`~xlparts.records.SheetRecord`
          objects, in tab order, with ``path`` taken from the workbook
          relationships. A sheet whose relationship is missing keeps
          ``path = None``.
        """
        with self.get_workbook_reader() as reader:
            sheets = [record for record in reader if isinstance(record, SheetRecord)]
        relationships = self.get_workbook_relationships()
        for sheet in sheets:
            rel = next((rel for rel in relationships if rel.rid == sheet.rid), None)
            if rel is None:
                logger.warning(f"No relationship {sheet.rid!r} for sheet {sheet.name!r}")
                continue
            sheet.path = rel.target
        return sheets

    def release_resources(self):
        """
        Close the ZIP archive and then the container stream. Calling this
        method multiple times on the same object has no ill effect.
        """
        if self._resources_released:
            return
        self._resources_released = 1
        index, self._index = self._index, None
        stream, self._stream = self._stream, None
        try:
            if index is not None:
                index.close()
        finally:
            if stream is not None:
                stream.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, exc_tb):
        self.release_resources()

    def __del__(self):
        # leak guard only; owners release explicitly
        self.release_resources()
