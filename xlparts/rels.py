# Copyright (c) 2005-2012 Stephen John Machin, Lingfo Pty Ltd
# This module is part of the xlparts package, which is released under a
# BSD-style licence.
"""
Reads OPC relationship documents (``*.rels``) without building the whole
tree, and uses them to find the comments part belonging to a worksheet.
"""
import posixpath
from logging import getLogger

from defusedxml import DefusedXmlException
from defusedxml.ElementTree import ParseError, iterparse

from .common import (COMMENTS_REL_SUFFIX, Encoding, NS_RELATIONSHIPS, PartKind,
                     SHEET_RELS_TEMPLATE, XML_FORMAT)
from .paths import part_path
from .records import Relationship


logger = getLogger(__name__)

START = 'start'
END = 'end'

ELEMENT_RELATIONSHIPS = 'Relationships'
ELEMENT_RELATIONSHIP = 'Relationship'
ATTRIBUTE_ID = 'Id'
ATTRIBUTE_TYPE = 'Type'
ATTRIBUTE_TARGET = 'Target'
ATTRIBUTE_TARGET_MODE = 'TargetMode'


class XmlCursor(object):
    """
    Pull-based cursor over the start and end tags of an XML document.

    The cursor is always positioned on one token: ``event`` is ``'start'``
    or ``'end'`` and ``element`` is the element it belongs to. Text,
    whitespace and comments are never tokens. ``depth`` counts the
    elements open after the current token. Elements are cleared once
    their end tag has been passed, so memory use stays flat.

    Malformed input raises :class:`xml.etree.ElementTree.ParseError`
    from whichever call reaches it.
    """

    def __init__(self, stream):
        self._events = iterparse(stream, events=(START, END))
        self.event = None
        self.element = None
        self.depth = 0
        self.eof = False
        self.read()

    def read(self):
        """
        Advance to the next token.

        :returns: ``False`` once the end of the document has been reached.
        """
        if self.eof:
            return False
        if self.event == END:
            self.element.clear()
        try:
            self.event, self.element = next(self._events)
        except StopIteration:
            self.event = self.element = None
            self.eof = True
            return False
        if self.event == START:
            self.depth += 1
        else:
            self.depth -= 1
        return True

    def is_start_element(self, local_name, namespace):
        return self.event == START and self.element.tag == f'{{{namespace}}}{local_name}'

    def get_attribute(self, name):
        if self.event != START:
            return None
        return self.element.get(name)

    def read_first_content(self):
        """
        Move from a start tag to its first child token.

        :returns: ``False`` if the element has no content, in which case
          the cursor is left past its end tag.
        """
        outer = self.depth - 1
        self.read()
        if self.event == END and self.depth == outer:
            self.read()
            return False
        return not self.eof

    def skip(self):
        """
        Skip the current element with everything inside it, leaving the
        cursor on the token that follows its end tag.
        """
        if self.event == START:
            outer = self.depth - 1
            while self.read():
                if self.event == END and self.depth == outer:
                    break
        self.read()

    def skip_content(self):
        """
        Skip whatever the cursor is on.

        :returns: ``False`` on an end tag (the enclosing element is done)
          or at the end of the document; the caller should stop scanning.
        """
        if self.eof:
            return False
        if self.event == END:
            self.read()
            return False
        self.skip()
        return True


def sheet_rels_path(sheet_path):
    """
    The relationships document of ``xl/worksheets/sheet1.xml`` (or of any
    part named ``sheet1.*``) is ``xl/worksheets/_rels/sheet1.xml.rels``.
    """
    base = posixpath.basename(sheet_path.replace('\\', '/'))
    name = posixpath.splitext(base)[0]
    return SHEET_RELS_TEMPLATE.format(name=name, ext=XML_FORMAT)


def comments_path_from_target(target):
    """Comment parts are looked up by file name directly under ``xl/``."""
    name = posixpath.basename(target.replace('\\', '/'))
    return part_path(PartKind.COMMENTS, Encoding.XML, name=name)


def _open_relationships(stream):
    cursor = XmlCursor(stream)
    if not cursor.is_start_element(ELEMENT_RELATIONSHIPS, NS_RELATIONSHIPS):
        logger.warning(f"Relationships document has unexpected root {cursor.element!r}")
        return None
    if not cursor.read_first_content():
        return None
    return cursor


def find_comments_target(stream):
    """
    Scan a worksheet's relationships document for its comments part.

    The first relationship whose type ends with ``comments`` wins; later
    ones are never inspected. Anything that is not a ``Relationship``
    element is skipped.

    :param stream: Binary file-like holding the ``.rels`` document.
    :returns: The logical path of the comments part (``xl/<file name>``),
      or ``None`` if there is no comments relationship. A document with
      an unexpected root or broken markup also gives ``None``.
    """
    comments_path = None
    try:
        cursor = _open_relationships(stream)
        if cursor is None:
            return None
        while not cursor.eof:
            if cursor.is_start_element(ELEMENT_RELATIONSHIP, NS_RELATIONSHIPS):
                rel_type = cursor.get_attribute(ATTRIBUTE_TYPE)
                if rel_type is not None and rel_type.endswith(COMMENTS_REL_SUFFIX):
                    target = cursor.get_attribute(ATTRIBUTE_TARGET)
                    if target is not None:
                        comments_path = comments_path_from_target(target)
                    break
                cursor.skip()
            elif not cursor.skip_content():
                break
    except (ParseError, DefusedXmlException) as e:
        logger.warning(f"Unreadable relationships document: {e}")
    return comments_path


def read_relationships(stream):
    """
    :param stream: Binary file-like holding a ``.rels`` document.
    :returns: A list of :class:`~xlparts.records.Relationship` in document
      order. Duplicates are kept as they are. Scanning stops at the first
      malformation and returns what was read up to that point.
    """
    result = []
    try:
        cursor = _open_relationships(stream)
        if cursor is None:
            return result
        while not cursor.eof:
            if cursor.is_start_element(ELEMENT_RELATIONSHIP, NS_RELATIONSHIPS):
                result.append(Relationship(
                    rid=cursor.get_attribute(ATTRIBUTE_ID),
                    rel_type=cursor.get_attribute(ATTRIBUTE_TYPE),
                    target=cursor.get_attribute(ATTRIBUTE_TARGET),
                    target_mode=cursor.get_attribute(ATTRIBUTE_TARGET_MODE) or 'Internal',
                ))
                cursor.skip()
            elif not cursor.skip_content():
                break
    except (ParseError, DefusedXmlException) as e:
        logger.warning(f"Unreadable relationships document: {e}")
    return result
