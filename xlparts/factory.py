# Copyright (c) 2005-2012 Stephen John Machin, Lingfo Pty Ltd
# This module is part of the xlparts package, which is released under a
# BSD-style licence.
from logging import getLogger

from .biffreaders import (BiffSharedStringsReader, BiffStylesReader,
                          BiffWorkbookReader, BiffWorksheetReader)
from .common import Encoding, PartKind
from .xmlreaders import (XmlCommentsReader, XmlSharedStringsReader,
                         XmlStylesReader, XmlWorkbookReader, XmlWorksheetReader)


logger = getLogger(__name__)

#: Reader class for each part kind and encoding. Binary comments are not
#: supported and have no entry.
READER_CLASSES = {
    (PartKind.SHARED_STRINGS, Encoding.XML): XmlSharedStringsReader,
    (PartKind.SHARED_STRINGS, Encoding.BINARY): BiffSharedStringsReader,
    (PartKind.STYLES, Encoding.XML): XmlStylesReader,
    (PartKind.STYLES, Encoding.BINARY): BiffStylesReader,
    (PartKind.WORKBOOK, Encoding.XML): XmlWorkbookReader,
    (PartKind.WORKBOOK, Encoding.BINARY): BiffWorkbookReader,
    (PartKind.WORKSHEET, Encoding.XML): XmlWorksheetReader,
    (PartKind.WORKSHEET, Encoding.BINARY): BiffWorksheetReader,
    (PartKind.COMMENTS, Encoding.XML): XmlCommentsReader,
}


def create_reader(index, info, kind, encoding):
    """
    Open an entry and wrap it in the reader for ``kind`` and ``encoding``.

    :param index: The :class:`~xlparts.archive.ArchiveIndex` owning ``info``.
    :param info: The entry, or ``None`` if it was not found.
    :returns: A :class:`~xlparts.records.RecordReader`, or ``None`` when
      there is no entry or no reader for the combination.
    """
    if info is None:
        return None
    reader_class = READER_CLASSES.get((kind, encoding))
    if reader_class is None:
        logger.debug(f"No reader for {kind.name} stored as {encoding.name}")
        return None
    logger.debug(f"Reading {info.filename!r} with {reader_class.__name__}")
    return reader_class(index.open_entry(info))
