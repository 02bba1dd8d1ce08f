# Copyright (c) 2005-2012 Stephen John Machin, Lingfo Pty Ltd
# This module is part of the xlparts package, which is released under a
# BSD-style licence.
"""
Record readers for the XML (``.xlsx``) encoding of workbook parts.

Elements are matched on their local name, so both the transitional and the
strict SpreadsheetML namespaces are accepted.
"""
import re
from logging import getLogger

from defusedxml.ElementTree import iterparse

from .common import (NS_OFFICE_RELATIONSHIPS, XL_CELL_BOOLEAN, XL_CELL_EMPTY,
                     XL_CELL_ERROR, XL_CELL_NUMBER, XL_CELL_SST, XL_CELL_TEXT,
                     XLPartsError, cell_name_to_rowx_colx, visibility_from_text)
from .records import (CellRecord, CommentRecord, ExtendedFormatRecord,
                      NumberFormatRecord, RecordReader, RowHeaderRecord,
                      SharedStringRecord, SheetRecord, WorkbookPropertiesRecord)


logger = getLogger(__name__)

START = 'start'
END = 'end'

_true_values = ('1', 'true')


def local_name(tag):
    return tag.rpartition('}')[2]


def unescape(s, subber=re.compile(r'_x[0-9A-Fa-f]{4}_').sub,
             repl=lambda mobj: chr(int(mobj.group(0)[2:6], 16))):
    """Expand the ``_xHHHH_`` escapes Excel uses for control characters."""
    if '_' in s:
        return subber(repl, s)
    return s


def get_text_from_si_or_is(elem):
    """
    Plain text of a rich-text container (``si``, ``is`` or a comment's
    ``text``): the ``t`` children plus the ``t`` of each run. Phonetic
    runs (``rPh``) are left out.
    """
    pieces = []
    for child in elem:
        tag = local_name(child.tag)
        if tag == 't':
            pieces.append(child.text or '')
        elif tag == 'r':
            for tnode in child:
                if local_name(tnode.tag) == 't':
                    pieces.append(tnode.text or '')
    return unescape(''.join(pieces))


def _is_true(value):
    return value is not None and value.lower() in _true_values


def _int_attr(elem, name, default=0):
    value = elem.get(name)
    if value is None:
        return default
    return int(value)


class XmlRecordReader(RecordReader):

    def events(self):
        return iterparse(self.stream, events=(START, END))


class XmlSharedStringsReader(XmlRecordReader):

    def _iter_records(self):
        for event, elem in self.events():
            if event == END and local_name(elem.tag) == 'si':
                yield SharedStringRecord(get_text_from_si_or_is(elem))
                elem.clear()


class XmlStylesReader(XmlRecordReader):

    def _iter_records(self):
        in_num_fmts = in_cell_xfs = False
        for event, elem in self.events():
            tag = local_name(elem.tag)
            if tag == 'numFmts':
                in_num_fmts = event == START
            elif tag == 'cellXfs':
                in_cell_xfs = event == START
            elif event != START:
                continue
            # dxf elements carry numFmt children too; only the table counts
            elif tag == 'numFmt' and in_num_fmts:
                yield NumberFormatRecord(_int_attr(elem, 'numFmtId'), unescape(elem.get('formatCode', '')))
            elif tag == 'xf' and in_cell_xfs:
                yield ExtendedFormatRecord(
                    parent_xf=_int_attr(elem, 'xfId'),
                    number_format=_int_attr(elem, 'numFmtId'),
                    font=_int_attr(elem, 'fontId'),
                )


def _relationship_id(elem):
    rid = elem.get(f'{{{NS_OFFICE_RELATIONSHIPS}}}id')
    if rid is not None:
        return rid
    # strict OOXML puts the same attribute in another namespace
    for name, value in elem.attrib.items():
        if name.endswith('}id'):
            return value
    return None


class XmlWorkbookReader(XmlRecordReader):

    def _iter_records(self):
        for event, elem in self.events():
            if event == END:
                continue
            tag = local_name(elem.tag)
            if tag == 'workbookPr':
                yield WorkbookPropertiesRecord(int(_is_true(elem.get('date1904'))))
            elif tag == 'sheet':
                state = elem.get('state', 'visible')
                visibility = visibility_from_text.get(state.lower())
                if visibility is None:
                    logger.warning(f"Sheet {elem.get('name')!r} has unknown state {state!r}; taken as visible")
                    visibility = 0
                yield SheetRecord(
                    name=unescape(elem.get('name', '')),
                    sheet_id=_int_attr(elem, 'sheetId'),
                    rid=_relationship_id(elem),
                    visibility=visibility,
                )


class XmlWorksheetReader(XmlRecordReader):

    def _iter_records(self):
        next_rowx = 0
        rowx = -1
        next_colx = 0
        for event, elem in self.events():
            tag = local_name(elem.tag)
            if tag == 'row':
                if event == END:
                    elem.clear()
                    continue
                ref = elem.get('r')
                rowx = int(ref) - 1 if ref else next_rowx
                next_rowx = rowx + 1
                next_colx = 0
                height = elem.get('ht')
                yield RowHeaderRecord(
                    rowx,
                    height=float(height) if height is not None else None,
                    hidden=_is_true(elem.get('hidden')),
                )
            elif tag == 'c' and event == END:
                ref = elem.get('r')
                if ref:
                    cell_rowx, colx = cell_name_to_rowx_colx(ref)
                else:
                    cell_rowx, colx = rowx, next_colx
                next_colx = colx + 1
                ctype, value = self.cell_value(elem)
                yield CellRecord(cell_rowx, colx, ctype, value, _int_attr(elem, 's'))
                elem.clear()

    @staticmethod
    def cell_value(elem):
        """:returns: ``(ctype, value)`` for a ``c`` element."""
        cell_type = elem.get('t', 'n')
        text = None
        inline = None
        for child in elem:
            child_tag = local_name(child.tag)
            if child_tag == 'v':
                text = child.text
            elif child_tag == 'is':
                inline = get_text_from_si_or_is(child)

        if cell_type == 'inlineStr':
            if not inline:
                return XL_CELL_EMPTY, ''
            return XL_CELL_TEXT, inline
        if text is None:
            # formatted but empty, or an error cell without a value
            return XL_CELL_EMPTY, ''
        if cell_type == 'n':
            return XL_CELL_NUMBER, float(text)
        if cell_type == 's':
            return XL_CELL_SST, int(text)
        if cell_type in ('str', 'd'):
            return XL_CELL_TEXT, unescape(text)
        if cell_type == 'b':
            return XL_CELL_BOOLEAN, bool(int(text))
        if cell_type == 'e':
            return XL_CELL_ERROR, text
        raise XLPartsError(f'Unknown cell type {cell_type!r} in cell {elem.get("r")!r}')


class XmlCommentsReader(XmlRecordReader):

    def _iter_records(self):
        authors = []
        for event, elem in self.events():
            if event != END:
                continue
            tag = local_name(elem.tag)
            if tag == 'author':
                authors.append(unescape(elem.text or ''))
            elif tag == 'comment':
                ref = elem.get('ref', '')
                rowx, colx = cell_name_to_rowx_colx(ref)
                author_id = _int_attr(elem, 'authorId')
                author = authors[author_id] if 0 <= author_id < len(authors) else ''
                text = ''
                for child in elem:
                    if local_name(child.tag) == 'text':
                        text = get_text_from_si_or_is(child)
                        break
                yield CommentRecord(ref, rowx, colx, author, text)
                elem.clear()
