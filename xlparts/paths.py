# Copyright (c) 2005-2012 Stephen John Machin, Lingfo Pty Ltd
# This module is part of the xlparts package, which is released under a
# BSD-style licence.
"""
Logical paths of the well-known workbook parts, and the choice between
their XML and binary encodings.
"""
import posixpath
from logging import getLogger

from .common import Encoding, FIXED_PARTS, PARTS_ROOT, PartKind


logger = getLogger(__name__)

#: XML is always tried before binary.
ENCODING_ORDER = (Encoding.XML, Encoding.BINARY)

_encoding_from_extension = {
    '.xml': Encoding.XML,
    '.bin': Encoding.BINARY,
}


def part_path(kind, encoding, name=None):
    """
    :returns: The logical path of ``kind`` stored as ``encoding``, or
      ``None`` if the part is never stored that way.
    """
    template = kind.template(encoding)
    if template is None:
        return None
    return template.format(ext=encoding.value, name=name)


def resolve_part(index, kind):
    """
    Find one of the fixed, one-per-package parts.

    :param index: An :class:`~xlparts.archive.ArchiveIndex`.
    :returns: ``(info, encoding)`` for the first encoding present, or
      ``None`` when the part is absent.
    """
    if kind not in FIXED_PARTS:
        raise ValueError(f'{kind} is not a fixed part')
    for encoding in ENCODING_ORDER:
        path = part_path(kind, encoding)
        info = index.lookup(path)
        if info is not None:
            logger.debug(f"{kind.name} found at {info.filename!r} ({encoding.name})")
            return info, encoding
    logger.debug(f"{kind.name} not found")
    return None


def worksheet_path(sheet_path):
    """
    Worksheet paths come either rooted (``/xl/worksheets/sheet1.xml``) or
    relative to the ``xl/`` directory (``worksheets/sheet1.xml``).
    Both map to ``xl/worksheets/sheet1.xml``.
    """
    if sheet_path.lower().startswith('/' + PARTS_ROOT):
        return sheet_path[1:]
    return part_path(PartKind.WORKSHEET, Encoding.XML, name=sheet_path)


def encoding_from_extension(path):
    ext = posixpath.splitext(path.replace('\\', '/'))[1]
    return _encoding_from_extension.get(ext)


def resolve_worksheet(index, sheet_path):
    """
    :returns: ``(info, encoding)`` for the worksheet, or ``None`` if the
      entry is missing or its extension is neither ``.xml`` nor ``.bin``.
    """
    path = worksheet_path(sheet_path)
    info = index.lookup(path)
    if info is None:
        logger.debug(f"worksheet {path!r} not found")
        return None
    encoding = encoding_from_extension(path)
    if encoding is None:
        logger.debug(f"worksheet {path!r} has an unsupported extension")
        return None
    return info, encoding
