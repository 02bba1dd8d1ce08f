# Copyright (c) 2005-2012 Stephen John Machin, Lingfo Pty Ltd
# This module is part of the xlparts package, which is released under a
# BSD-style licence.
"""
Record readers for the binary (``.xlsb``, BIFF12) encoding of workbook
parts.

A BIFF12 part is a flat sequence of records. Both the record type and the
record size are stored in 7-bit groups, least significant first, with the
high bit of each byte set when another byte follows: at most 2 bytes for
the type and 4 for the size.
"""
import struct
from logging import getLogger

from .common import (XL_CELL_BOOLEAN, XL_CELL_EMPTY, XL_CELL_ERROR,
                     XL_CELL_NUMBER, XL_CELL_SST, XL_CELL_TEXT, XLPartsError,
                     error_text_from_code)
from .records import (CellRecord, ExtendedFormatRecord, NumberFormatRecord,
                      RecordReader, RowHeaderRecord, SharedStringRecord,
                      SheetRecord, WorkbookPropertiesRecord)


logger = getLogger(__name__)
unpack = struct.unpack
unpack_from = struct.unpack_from

BRT_ROWHDR = 0
BRT_CELLBLANK = 1
BRT_CELLRK = 2
BRT_CELLERROR = 3
BRT_CELLBOOL = 4
BRT_CELLREAL = 5
BRT_CELLST = 6
BRT_CELLISST = 7
BRT_FMLASTRING = 8
BRT_FMLANUM = 9
BRT_FMLABOOL = 10
BRT_FMLAERROR = 11
BRT_SSTITEM = 19
BRT_FMT = 44
BRT_XF = 47
BRT_WBPROP = 153
BRT_BUNDLESH = 156
BRT_BEGINCELLXFS = 617
BRT_ENDCELLXFS = 618

NULL_STRING_LENGTH = 0xFFFFFFFF


def unpack_RK(rk_str):
    flags = rk_str[0]
    if flags & 2:
        # There's a SIGNED 30-bit integer in there!
        i, = unpack('<i', rk_str)
        i >>= 2  # div by 4 to drop the 2 flag bits
        if flags & 1:
            return i / 100.0
        return float(i)
    else:
        # It's the most significant 30 bits of an IEEE 754 64-bit FP number
        d, = unpack('<d', b'\0\0\0\0' + bytes([flags & 252]) + rk_str[1:4])
        if flags & 1:
            return d / 100.0
        return d


def unpack_wide_string(data, pos):
    """
    :returns: ``(text, new_pos)`` for the XLWideString at ``pos``.
    """
    nchars, = unpack_from('<I', data, pos)
    pos += 4
    end = pos + 2 * nchars
    if end > len(data):
        raise XLPartsError(f'String of {nchars} characters overruns its record')
    return data[pos:end].decode('utf_16_le'), end


def unpack_nullable_wide_string(data, pos):
    nchars, = unpack_from('<I', data, pos)
    if nchars == NULL_STRING_LENGTH:
        return None, pos + 4
    return unpack_wide_string(data, pos)


class BiffRecordReader(RecordReader):
    """
    Splits the part into records and hands each one to
    :meth:`handle_record`, which returns a record to emit or ``None``.
    """

    def _read_varint(self, max_bytes, what):
        value = 0
        for shift in range(0, 7 * max_bytes, 7):
            byte = self.stream.read(1)
            if not byte:
                raise XLPartsError(f'Truncated record {what}')
            value |= (byte[0] & 0x7F) << shift
            if not byte[0] & 0x80:
                break
        return value

    def get_record_parts(self):
        """
        :returns: ``(code, length, data)``, or ``(None, 0, b'')`` at the end
          of the part.
        """
        first = self.stream.read(1)
        if not first:
            return None, 0, b''
        code = first[0] & 0x7F
        if first[0] & 0x80:
            second = self.stream.read(1)
            if not second:
                raise XLPartsError('Truncated record type')
            code |= (second[0] & 0x7F) << 7
        length = self._read_varint(4, 'size')
        data = self.stream.read(length)
        if len(data) < length:
            raise XLPartsError(f'Record {code} truncated: expected {length} bytes, got {len(data)}')
        return code, length, data

    def _iter_records(self):
        while True:
            code, length, data = self.get_record_parts()
            if code is None:
                return
            record = self.handle_record(code, data)
            if record is not None:
                yield record

    def handle_record(self, code, data):
        raise NotImplementedError


class BiffSharedStringsReader(BiffRecordReader):

    def handle_record(self, code, data):
        if code != BRT_SSTITEM:
            return None
        # byte 0 holds the rich/phonetic flags; the runs that follow the
        # string are not needed for plain text
        text, _ = unpack_wide_string(data, 1)
        return SharedStringRecord(text)


class BiffStylesReader(BiffRecordReader):

    def __init__(self, stream):
        super().__init__(stream)
        self.in_cell_xfs = False

    def handle_record(self, code, data):
        if code == BRT_BEGINCELLXFS:
            self.in_cell_xfs = True
        elif code == BRT_ENDCELLXFS:
            self.in_cell_xfs = False
        elif code == BRT_FMT:
            format_id, = unpack_from('<H', data, 0)
            format_code, _ = unpack_wide_string(data, 2)
            return NumberFormatRecord(format_id, format_code)
        elif code == BRT_XF and self.in_cell_xfs:
            parent_xf, number_format, font = unpack_from('<HHH', data, 0)
            return ExtendedFormatRecord(parent_xf, number_format, font)
        return None


class BiffWorkbookReader(BiffRecordReader):

    def handle_record(self, code, data):
        if code == BRT_WBPROP:
            flags, = unpack_from('<I', data, 0)
            return WorkbookPropertiesRecord(flags & 1)
        if code == BRT_BUNDLESH:
            state, sheet_id = unpack_from('<II', data, 0)
            rid, pos = unpack_nullable_wide_string(data, 8)
            name, _ = unpack_wide_string(data, pos)
            if state > 2:
                logger.warning(f"Sheet {name!r} has unknown state {state}; taken as visible")
                state = 0
            return SheetRecord(name, sheet_id, rid, visibility=state)
        return None


class BiffWorksheetReader(BiffRecordReader):

    def __init__(self, stream):
        super().__init__(stream)
        self.rowx = -1
        self.handlers = {
            BRT_CELLBLANK: self.handle_blank,
            BRT_CELLRK: self.handle_rk,
            BRT_CELLERROR: self.handle_error,
            BRT_FMLAERROR: self.handle_error,
            BRT_CELLBOOL: self.handle_bool,
            BRT_FMLABOOL: self.handle_bool,
            BRT_CELLREAL: self.handle_real,
            BRT_FMLANUM: self.handle_real,
            BRT_CELLST: self.handle_string,
            BRT_FMLASTRING: self.handle_string,
            BRT_CELLISST: self.handle_isst,
        }

    def handle_record(self, code, data):
        if code == BRT_ROWHDR:
            return self.handle_rowhdr(data)
        handler = self.handlers.get(code)
        if handler is None:
            return None
        colx, style = unpack_from('<II', data, 0)
        ctype, value = handler(data)
        return CellRecord(self.rowx, colx, ctype, value, style & 0xFFFFFF)

    def handle_rowhdr(self, data):
        self.rowx, _xf_index, height = unpack_from('<IIH', data, 0)
        hidden = len(data) > 11 and bool(data[11] & 0x10)
        # height is stored in twips
        return RowHeaderRecord(self.rowx, height=height / 20.0, hidden=hidden)

    def handle_blank(self, data):
        return XL_CELL_EMPTY, ''

    def handle_rk(self, data):
        return XL_CELL_NUMBER, unpack_RK(data[8:12])

    def handle_error(self, data):
        code = data[8]
        text = error_text_from_code.get(code)
        if text is None:
            text = f'#ERR{code}'
        return XL_CELL_ERROR, text

    def handle_bool(self, data):
        return XL_CELL_BOOLEAN, bool(data[8])

    def handle_real(self, data):
        return XL_CELL_NUMBER, unpack_from('<d', data, 8)[0]

    def handle_string(self, data):
        return XL_CELL_TEXT, unpack_wide_string(data, 8)[0]

    def handle_isst(self, data):
        return XL_CELL_SST, unpack_from('<I', data, 8)[0]
