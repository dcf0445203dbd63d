"""
Tests for archive record types and field mapping
"""
import dataclasses

import pytest
from archivestats import ArchiveDocument, ArchiveEntry
from archivestats.schema import field_path, projection


class TestFieldMapping:
    """Test the store field mapping."""

    def test_field_path(self):
        """Test building store paths from field names."""
        assert field_path('documents', 'page_count') == '$Documents.PageCount'
        assert field_path('name') == '$Name'

    def test_field_path_unknown(self):
        """Test unmapped field names are rejected."""
        with pytest.raises(KeyError):
            field_path('pages')
        with pytest.raises(ValueError):
            field_path()

    def test_projection(self):
        """Test the local fetch only asks for mapped fields."""
        assert projection() == {'Documents.PageCount': 1}


class TestArchiveEntry:
    """Test decoding and encoding of entries."""

    def test_from_document(self):
        """Test decoding a stored entry."""
        entry = ArchiveEntry.from_document({
            '_id': '65a1f0',
            'Name': 'Letters',
            'Documents': [{'PageCount': 5}, {'PageCount': 3}],
        })

        assert entry.id == '65a1f0'
        assert entry.name == 'Letters'
        assert entry.documents == (ArchiveDocument(5), ArchiveDocument(3))
        assert entry.page_count == 8

    @pytest.mark.parametrize('raw', [
        {'_id': 'a'},
        {'_id': 'a', 'Documents': None},
        {'_id': 'a', 'Documents': []},
    ])
    def test_missing_documents(self, raw):
        """Test absent, null and empty document lists all read as empty."""
        entry = ArchiveEntry.from_document(raw)
        assert entry.documents == ()
        assert entry.page_count == 0
        assert entry.name is None

    def test_missing_page_count(self):
        """Test a document without PageCount counts as zero."""
        assert ArchiveDocument.from_document({}).page_count == 0

    def test_coerces_types(self):
        """Test mapped types are applied on read."""
        entry = ArchiveEntry.from_document({'_id': 42, 'Name': 7})
        assert entry.id == '42'
        assert entry.name == '7'

    def test_fractional_page_counts_kept(self):
        """Test page counts are not truncated per document."""
        entry = ArchiveEntry.from_document({'Documents': [{'PageCount': 2.5}, {'PageCount': 2.5}]})
        assert entry.page_count == 5

    @pytest.mark.parametrize('value', ['n/a', '5', True, [1]])
    def test_non_numeric_page_count(self, value):
        """Test non-numeric page counts are rejected."""
        with pytest.raises(ValueError):
            ArchiveDocument.from_document({'PageCount': value})

    def test_to_document(self):
        """Test encoding back to store field names."""
        entry = ArchiveEntry(id='a', name='n', documents=(ArchiveDocument(2),))
        assert entry.to_document() == {'_id': 'a', 'Name': 'n', 'Documents': [{'PageCount': 2}]}

    def test_to_document_omits_empty_documents(self):
        """Test entries without documents are stored without the field."""
        assert ArchiveEntry(id='a').to_document() == {'_id': 'a', 'Name': None}

    def test_immutable(self):
        """Test entries cannot be modified."""
        entry = ArchiveEntry(id='a')
        with pytest.raises(dataclasses.FrozenInstanceError):
            entry.name = 'changed'


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
