# Copyright (c) 2005-2012 Stephen John Machin, Lingfo Pty Ltd
# This module is part of the xlparts package, which is released under a
# BSD-style licence.
"""
Locates the parts of an Excel 2007+ workbook container (``.xlsx`` or
``.xlsb``) and reads each of them as a stream of records.
"""
import io
import os
from logging import getLogger

from .archive import ArchiveError, ArchiveIndex, normalize_path
from .common import (XL_CELL_BOOLEAN, XL_CELL_EMPTY, XL_CELL_ERROR,
                     XL_CELL_NUMBER, XL_CELL_SST, XL_CELL_TEXT, Encoding,
                     HeaderError, PartKind, XLPartsError)
from .info import __VERSION__
from .records import (CellRecord, CommentRecord, ExtendedFormatRecord,
                      NumberFormatRecord, RecordReader, Relationship,
                      RowHeaderRecord, SharedStringRecord, SheetRecord,
                      WorkbookPropertiesRecord)
from .zipworker import ZipWorker


logger = getLogger(__name__)
__version__ = __VERSION__


def open_container(filename=None, file_contents=None, stream=None):
    """
    Open a workbook container for reading its parts.

    Give exactly one of the arguments.

    :param filename: The path to the ``.xlsx`` or ``.xlsb`` file. A leading
      ``~`` is expanded.
    :param file_contents: The whole container as :class:`bytes`.
    :param stream: A seekable binary file-like object. It becomes owned by
      the returned worker once the container has been recognised.
    :returns: A :class:`~xlparts.zipworker.ZipWorker`. Use it in a ``with``
      statement, or call its ``release_resources()`` method when done.
    :raises ArchiveError: if the data is not a ZIP container.
    :raises HeaderError: if the container has no workbook part.
    """
    given = [arg for arg in (filename, file_contents, stream) if arg is not None]
    if len(given) != 1:
        raise ValueError('Give exactly one of filename, file_contents or stream')

    owned = stream is None
    if filename is not None:
        stream = open(os.path.expanduser(filename), 'rb')
    elif file_contents is not None:
        stream = io.BytesIO(file_contents)

    try:
        worker = ZipWorker(stream)
    except Exception:
        if owned:
            stream.close()
        raise

    try:
        if not worker.has_workbook():
            raise HeaderError("Can't find workbook part in ZIP container; not an Excel 2007+ file")
    except Exception:
        worker.release_resources()
        raise
    logger.debug(f"Opened container {filename or type(stream).__name__}")
    return worker
