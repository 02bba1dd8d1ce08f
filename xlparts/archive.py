# Copyright (c) 2005-2012 Stephen John Machin, Lingfo Pty Ltd
# This module is part of the xlparts package, which is released under a
# BSD-style licence.
"""
Opens the ZIP container of an Excel 2007+ workbook and indexes its
entries by normalized name.
"""
import zipfile
from logging import getLogger

from .common import XLPartsError


logger = getLogger(__name__)


class ArchiveError(XLPartsError):
    pass


def normalize_path(name):
    """
    Entry names are matched with backslashes turned into forward slashes
    and without regard to case.
    """
    return name.replace('\\', '/').lower()


class ArchiveIndex(object):
    """
    Case-insensitive index over the entries of a ZIP container.

    :param stream:
      A seekable binary file-like object holding the container. It is not
      closed by :meth:`close`; its owner does that.
    """

    def __init__(self, stream):
        if stream is None:
            raise ValueError('stream is required')
        try:
            self.zf = zipfile.ZipFile(stream)
        except (zipfile.BadZipFile, zipfile.LargeZipFile) as e:
            raise ArchiveError(f'Not a ZIP container: {e}') from e
        except EOFError as e:
            raise ArchiveError('Not a ZIP container: unexpected end of data') from e

        self._entries = {}
        for info in self.zf.infolist():
            key = normalize_path(info.filename)
            if key in self._entries:
                # first entry in the central directory wins
                logger.warning(f"Duplicate entry {info.filename!r} collides with "
                               f"{self._entries[key].filename!r}; ignored")
                continue
            self._entries[key] = info
        logger.debug(f"Indexed {len(self._entries)} container entries")

    def lookup(self, path):
        """
        :returns: The :class:`zipfile.ZipInfo` stored under ``path``, or
          ``None`` if there is no such entry.
        """
        return self._entries.get(normalize_path(path))

    def open_entry(self, info):
        return self.zf.open(info)

    def names(self):
        """Original names of the indexed entries, in archive order."""
        return [info.filename for info in self._entries.values()]

    def close(self):
        self.zf.close()

    def __contains__(self, path):
        return normalize_path(path) in self._entries

    def __len__(self):
        return len(self._entries)
