import io

import pytest

from xlparts.archive import ArchiveError, ArchiveIndex, normalize_path

from .base import container_stream


def test_normalize_path():
    assert normalize_path('XL\\Worksheets\\Sheet1.XML') == 'xl/worksheets/sheet1.xml'
    assert normalize_path('xl/workbook.xml') == 'xl/workbook.xml'


@pytest.mark.parametrize('name', [
    'xl/worksheets/sheet1.xml',
    'XL/WORKSHEETS/SHEET1.XML',
    'xl\\worksheets\\sheet1.xml',
    'Xl\\Worksheets/Sheet1.Xml',
])
def test_lookup_ignores_case_and_separator(name):
    index = ArchiveIndex(container_stream({'xl/Worksheets/Sheet1.xml': '<worksheet/>'}))
    info = index.lookup(name)
    assert info is not None
    assert info.filename == 'xl/Worksheets/Sheet1.xml'


def test_backslash_entry_names_are_indexed():
    # some writers store Windows separators in entry names
    index = ArchiveIndex(container_stream({'xl\\workbook.xml': '<workbook/>'}))
    assert index.lookup('xl/workbook.xml') is not None
    assert 'XL/Workbook.xml' in index


def test_lookup_missing_entry():
    index = ArchiveIndex(container_stream({'xl/workbook.xml': '<workbook/>'}))
    assert index.lookup('xl/styles.xml') is None
    assert 'xl/styles.xml' not in index


def test_duplicates_coalesce_to_first_entry():
    index = ArchiveIndex(container_stream([
        ('xl/styles.xml', 'first'),
        ('XL/Styles.xml', 'second'),
    ]))
    assert len(index) == 1
    info = index.lookup('xl/styles.xml')
    assert info.filename == 'xl/styles.xml'
    with index.open_entry(info) as f:
        assert f.read() == b'first'


def test_names_in_archive_order():
    index = ArchiveIndex(container_stream([
        ('[Content_Types].xml', '<Types/>'),
        ('xl/workbook.xml', '<workbook/>'),
    ]))
    assert index.names() == ['[Content_Types].xml', 'xl/workbook.xml']


def test_not_a_zip():
    with pytest.raises(ArchiveError):
        ArchiveIndex(io.BytesIO(b'this is not a zip file at all'))


def test_empty_stream():
    with pytest.raises(ArchiveError):
        ArchiveIndex(io.BytesIO(b''))


def test_no_stream():
    with pytest.raises(ValueError):
        ArchiveIndex(None)


def test_close_leaves_stream_open():
    stream = container_stream({'xl/workbook.xml': '<workbook/>'})
    index = ArchiveIndex(stream)
    index.close()
    assert not stream.closed
