"""
archivestats schema - Archive record types and their store field mapping
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union

# field name -> (store field, type)
DOCUMENT_FIELDS: Dict[str, Tuple[str, type]] = {
    "page_count": ("PageCount", int),
}

ENTRY_FIELDS: Dict[str, Tuple[str, type]] = {
    "id": ("_id", str),
    "name": ("Name", str),
    "documents": ("Documents", list),
}


def store_field(fields: Dict[str, Tuple[str, type]], name: str) -> str:
    """Return the store field name mapped to ``name``."""
    return fields[name][0]


def field_path(*names: str) -> str:
    """
    Build a ``$``-prefixed dotted store path from entry/document field names.

    The first name is looked up in ``ENTRY_FIELDS``, the rest in
    ``DOCUMENT_FIELDS``.

    Example:
        >>> field_path('documents', 'page_count')
        '$Documents.PageCount'
    """
    if not names:
        raise ValueError("field_path needs at least one field name")
    parts = [store_field(ENTRY_FIELDS, names[0])]
    parts.extend(store_field(DOCUMENT_FIELDS, name) for name in names[1:])
    return "$" + ".".join(parts)


def projection() -> Dict[str, int]:
    """Store fields the local reduction needs to fetch."""
    return {field_path("documents", "page_count")[1:]: 1}


@dataclass(frozen=True)
class ArchiveDocument:
    """
    A document in an archive entry.

    Page counts are kept as stored, so fractional values add up the same way
    they do in the store. Non-numeric values are rejected.
    """
    page_count: Union[int, float] = 0

    @classmethod
    def from_document(cls, raw: Dict[str, Any]) -> "ArchiveDocument":
        key, kind = DOCUMENT_FIELDS["page_count"]
        value = raw.get(key)
        if value is None:
            return cls()
        if isinstance(value, bool) or not isinstance(value, (kind, float)):
            raise ValueError(f"{key} must be a number, got {value!r}")
        return cls(page_count=value)

    def to_document(self) -> Dict[str, Any]:
        return {store_field(DOCUMENT_FIELDS, "page_count"): self.page_count}


@dataclass(frozen=True)
class ArchiveEntry:
    """
    An archive entry owning an ordered tuple of documents.

    ``documents`` may be missing or null in the store; both read as empty.
    """
    id: Optional[str] = None
    name: Optional[str] = None
    documents: Tuple[ArchiveDocument, ...] = field(default_factory=tuple)

    @classmethod
    def from_document(cls, raw: Dict[str, Any]) -> "ArchiveEntry":
        id_key, id_kind = ENTRY_FIELDS["id"]
        name_key, name_kind = ENTRY_FIELDS["name"]
        docs_key, _ = ENTRY_FIELDS["documents"]

        raw_id = raw.get(id_key)
        raw_name = raw.get(name_key)
        return cls(
            id=id_kind(raw_id) if raw_id is not None else None,
            name=name_kind(raw_name) if raw_name is not None else None,
            documents=tuple(
                ArchiveDocument.from_document(doc) for doc in raw.get(docs_key) or ()
            ),
        )

    def to_document(self) -> Dict[str, Any]:
        raw: Dict[str, Any] = {}
        if self.id is not None:
            raw[store_field(ENTRY_FIELDS, "id")] = self.id
        raw[store_field(ENTRY_FIELDS, "name")] = self.name
        if self.documents:
            raw[store_field(ENTRY_FIELDS, "documents")] = [
                doc.to_document() for doc in self.documents
            ]
        return raw

    @property
    def page_count(self) -> int:
        return sum(doc.page_count for doc in self.documents)
