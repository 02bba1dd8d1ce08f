import pytest

from xlparts.records import Relationship
from xlparts.rels import (XmlCursor, comments_path_from_target, find_comments_target,
                          read_relationships, sheet_rels_path)

from .base import (NS_PKG_RELS, REL_COMMENTS, REL_HYPERLINK, REL_WORKSHEET,
                   rels_xml, xml_stream)


@pytest.mark.parametrize('sheet_path, expected', [
    ('worksheets/sheet1.xml', 'xl/worksheets/_rels/sheet1.xml.rels'),
    ('/xl/worksheets/sheet1.xml', 'xl/worksheets/_rels/sheet1.xml.rels'),
    ('xl\\worksheets\\Sheet2.xml', 'xl/worksheets/_rels/Sheet2.xml.rels'),
    # binary sheets still look for the XML relationships document
    ('worksheets/sheet3.bin', 'xl/worksheets/_rels/sheet3.xml.rels'),
])
def test_sheet_rels_path(sheet_path, expected):
    assert sheet_rels_path(sheet_path) == expected


def test_comments_path_from_target():
    assert comments_path_from_target('../comments1.xml') == 'xl/comments1.xml'
    assert comments_path_from_target('/xl/comments2.xml') == 'xl/comments2.xml'
    assert comments_path_from_target('..\\comments3.xml') == 'xl/comments3.xml'


class TestCursor:

    def test_walk(self):
        cursor = XmlCursor(xml_stream('<a><b x="1"><c/></b><d/></a>'))
        assert (cursor.event, cursor.element.tag, cursor.depth) == ('start', 'a', 1)
        assert cursor.read_first_content()
        assert cursor.event == 'start' and cursor.element.tag == 'b'
        assert cursor.get_attribute('x') == '1'
        cursor.skip()
        assert cursor.event == 'start' and cursor.element.tag == 'd'
        assert cursor.skip_content()
        assert cursor.event == 'end' and cursor.element.tag == 'a'
        assert cursor.get_attribute('x') is None
        assert not cursor.skip_content()
        assert cursor.eof
        assert not cursor.read()

    def test_read_first_content_of_empty_element(self):
        cursor = XmlCursor(xml_stream('<a/>'))
        assert not cursor.read_first_content()
        assert cursor.eof

    def test_is_start_element_checks_namespace(self):
        cursor = XmlCursor(xml_stream(f'<Relationships xmlns="{NS_PKG_RELS}"/>'))
        assert cursor.is_start_element('Relationships', NS_PKG_RELS)
        assert not cursor.is_start_element('Relationships', 'urn:other')
        assert not cursor.is_start_element('Relationship', NS_PKG_RELS)


def test_comments_found_after_other_relationships():
    doc = rels_xml(
        ('rId1', REL_HYPERLINK, 'http://example.com/'),
        ('rId2', REL_COMMENTS, '../comments1.xml'),
    )
    assert find_comments_target(xml_stream(doc)) == 'xl/comments1.xml'


def test_first_comments_relationship_wins():
    doc = rels_xml(
        ('rId1', REL_COMMENTS, '../comments7.xml'),
        ('rId2', REL_COMMENTS, '../comments1.xml'),
    )
    assert find_comments_target(xml_stream(doc)) == 'xl/comments7.xml'


def test_any_type_ending_in_comments_matches():
    doc = rels_xml(('rId1', 'urn:example:threadedcomments', '../threadedComments/tc1.xml'))
    assert find_comments_target(xml_stream(doc)) == 'xl/tc1.xml'


def test_no_comments_relationship():
    doc = rels_xml(
        ('rId1', REL_HYPERLINK, 'http://example.com/'),
        ('rId2', REL_WORKSHEET, 'worksheets/sheet2.xml'),
    )
    assert find_comments_target(xml_stream(doc)) is None


def test_empty_relationships():
    assert find_comments_target(xml_stream(f'<Relationships xmlns="{NS_PKG_RELS}"/>')) is None
    assert find_comments_target(xml_stream(f'<Relationships xmlns="{NS_PKG_RELS}"></Relationships>')) is None


def test_unknown_elements_are_skipped():
    doc = (
        f'<Relationships xmlns="{NS_PKG_RELS}">'
        '<Extra xmlns="urn:x"><Relationship Type="comments" Target="nested.xml"/></Extra>'
        f'<Relationship Id="rId1" Type="{REL_COMMENTS}" Target="../comments3.xml"/>'
        '</Relationships>'
    )
    assert find_comments_target(xml_stream(doc)) == 'xl/comments3.xml'


def test_relationship_without_type_is_not_a_match():
    doc = (
        f'<Relationships xmlns="{NS_PKG_RELS}">'
        '<Relationship Id="rId1" Target="../comments9.xml"/>'
        f'<Relationship Id="rId2" Type="{REL_COMMENTS}" Target="../comments1.xml"/>'
        '</Relationships>'
    )
    assert find_comments_target(xml_stream(doc)) == 'xl/comments1.xml'


def test_comments_relationship_without_target():
    doc = (
        f'<Relationships xmlns="{NS_PKG_RELS}">'
        f'<Relationship Id="rId1" Type="{REL_COMMENTS}"/>'
        f'<Relationship Id="rId2" Type="{REL_COMMENTS}" Target="../comments1.xml"/>'
        '</Relationships>'
    )
    assert find_comments_target(xml_stream(doc)) is None


@pytest.mark.parametrize('doc', [
    # wrong root element
    f'<Types xmlns="{NS_PKG_RELS}"><Relationship Type="{REL_COMMENTS}" Target="c.xml"/></Types>',
    # right name, no namespace
    f'<Relationships><Relationship Type="{REL_COMMENTS}" Target="c.xml"/></Relationships>',
    # not XML at all
    'garbage',
    '',
    # broken before any match
    f'<Relationships xmlns="{NS_PKG_RELS}"><Relationship Type="x" Target="y"></Oops>',
])
def test_malformed_documents_mean_no_comments(doc):
    assert find_comments_target(xml_stream(doc)) is None


def test_entity_expansion_is_refused():
    doc = (
        '<?xml version="1.0"?>'
        '<!DOCTYPE r [<!ENTITY e "comments">]>'
        f'<Relationships xmlns="{NS_PKG_RELS}">'
        '<Relationship Id="rId1" Type="&e;" Target="../comments1.xml"/>'
        '</Relationships>'
    )
    assert find_comments_target(xml_stream(doc)) is None


def test_read_relationships():
    doc = rels_xml(
        ('rId1', REL_WORKSHEET, 'worksheets/sheet1.xml'),
        ('rId2', REL_WORKSHEET, '/xl/worksheets/sheet2.xml'),
        ('rId1', REL_HYPERLINK, 'dup.xml'),
    )
    assert read_relationships(xml_stream(doc)) == [
        Relationship('rId1', REL_WORKSHEET, 'worksheets/sheet1.xml'),
        Relationship('rId2', REL_WORKSHEET, '/xl/worksheets/sheet2.xml'),
        Relationship('rId1', REL_HYPERLINK, 'dup.xml'),
    ]


def test_read_relationships_target_mode():
    doc = (
        f'<Relationships xmlns="{NS_PKG_RELS}">'
        f'<Relationship Id="rId1" Type="{REL_HYPERLINK}" Target="http://example.com/" TargetMode="External"/>'
        '</Relationships>'
    )
    rel, = read_relationships(xml_stream(doc))
    assert rel.target_mode == 'External'


def test_read_relationships_of_malformed_document():
    assert read_relationships(xml_stream('<nope/>')) == []
    assert read_relationships(xml_stream('<<<')) == []
