"""
Document layout of the index files.

The structured store is a YAML document::

    Index:
    - Paper:
        PDF_file: ...
        Title: ...
        ...

Field order and indentation are fixed so that entries appended later never
shift the lines of earlier ones; the editor integration jumps to a record by
line number. The queryable store is the same document rendered as JSON.
"""

import json
from typing import Any, Dict, List

import yaml

from ..utils import join_authors, join_tags, split_authors, split_tags
from .models import BibliographicRecord, Notes


ROOT_KEY = "Index"
ENTRY_KEY = "Paper"
NOTES_KEY = "Notes"
FILENAME_KEY = "PDF_file"

PAPER_FIELDS = [
    "PDF_file",
    "Title",
    "Authors",
    "Journal",
    "Year",
    "Issue",
    "Pages",
    "Tags",
    "Notes",
]

NOTES_FIELDS = [
    "Key_Question",
    "Key_Results",
    "Key_Impact",
    "Key_Points",
]

STRUCTURED_HEADER = f"{ROOT_KEY}:\n"

# Wide enough that PyYAML never folds a value onto a second line.
_YAML_WIDTH = 1 << 16


def record_to_entry(record: BibliographicRecord) -> Dict[str, Any]:
    """
    Convert a record into one ``{"Paper": {...}}`` entry.

    Args:
        record: Record to convert.

    Returns:
        Entry mapping with keys in PAPER_FIELDS order.
    """
    notes = record.notes
    return {
        ENTRY_KEY: {
            "PDF_file": record.filename,
            "Title": record.title,
            "Authors": join_authors(record.authors),
            "Journal": record.venue,
            "Year": str(record.year),
            "Issue": record.issue or "",
            "Pages": record.pages or "",
            "Tags": join_tags(record.tags),
            "Notes": {
                "Key_Question": notes.key_question,
                "Key_Results": notes.key_results,
                "Key_Impact": notes.key_impact,
                "Key_Points": list(notes.key_points),
            },
        }
    }


def entry_to_record(entry: Dict[str, Any]) -> BibliographicRecord:
    """
    Convert an entry read from either store back into a record.

    Hand-edited variants are accepted: tags or authors written as lists,
    years written as bare integers, missing fields, and notes written as
    plain text instead of a mapping (kept as the key question, or as key
    points when written as a list).

    Args:
        entry: Mapping holding a ``Paper`` key, or the paper mapping itself.

    Returns:
        The corresponding BibliographicRecord.

    Raises:
        ValueError: If the entry or its paper is not a mapping.
    """
    if not isinstance(entry, dict):
        raise ValueError(f"entry is not a mapping: {entry!r}")

    paper = entry.get(ENTRY_KEY, entry)
    if paper is None:
        paper = {}
    if not isinstance(paper, dict):
        raise ValueError(f"'{ENTRY_KEY}' is not a mapping: {paper!r}")

    notes = _notes_mapping(paper.get(NOTES_KEY))

    key_points = notes.get("Key_Points") or []
    if not isinstance(key_points, list):
        key_points = [key_points]

    return BibliographicRecord(
        filename=_text(paper.get("PDF_file")),
        title=_text(paper.get("Title")),
        authors=split_authors(paper.get("Authors")),
        venue=_text(paper.get("Journal")),
        year=_text(paper.get("Year")),
        issue=_text(paper.get("Issue")) or None,
        pages=_text(paper.get("Pages")) or None,
        tags=split_tags(paper.get("Tags")),
        notes=Notes(
            key_question=_text(notes.get("Key_Question")),
            key_results=_text(notes.get("Key_Results")),
            key_impact=_text(notes.get("Key_Impact")),
            key_points=[_text(point) for point in key_points if point is not None],
        ),
    )


def dump_entries(records: List[BibliographicRecord]) -> str:
    """
    Render records as YAML sequence items for the structured store.

    The output is meant to follow the ``Index:`` header or earlier entries.

    Args:
        records: Records to render, in order.

    Returns:
        YAML text, empty when there are no records.
    """
    if not records:
        return ""

    return yaml.safe_dump(
        [record_to_entry(record) for record in records],
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
        width=_YAML_WIDTH,
    )


def dump_structured(records: List[BibliographicRecord]) -> str:
    """Render a complete structured store document."""
    return STRUCTURED_HEADER + dump_entries(records)


def load_structured(text: str) -> Dict[str, Any]:
    """
    Parse structured store text into a document.

    Args:
        text: YAML content.

    Returns:
        Mapping with ROOT_KEY holding a list of entries.

    Raises:
        yaml.YAMLError: If the text is not valid YAML.
        ValueError: If the document does not have the expected shape.
    """
    document = yaml.safe_load(text) if text.strip() else None

    if document is None:
        return {ROOT_KEY: []}

    if not isinstance(document, dict) or ROOT_KEY not in document:
        raise ValueError(f"expected a top-level '{ROOT_KEY}' key")

    if document[ROOT_KEY] is None:
        document[ROOT_KEY] = []

    if not isinstance(document[ROOT_KEY], list):
        raise ValueError(f"'{ROOT_KEY}' must hold a list of entries")

    return document


def dump_queryable(document: Dict[str, Any]) -> str:
    """
    Render a structured document as queryable JSON.

    Output depends only on the document, so repeated calls are byte-identical.
    Values JSON has no type for (dates written by hand) become strings.
    """
    return json.dumps(document, indent=2, ensure_ascii=False, default=str) + "\n"


def _text(value) -> str:
    if value is None:
        return ""
    return str(value)


def _notes_mapping(notes) -> Dict[str, Any]:
    if notes is None:
        return {}
    if isinstance(notes, dict):
        return notes
    if isinstance(notes, list):
        return {"Key_Points": notes}
    return {"Key_Question": notes}


if __name__ == "__main__":
    record = BibliographicRecord(
        filename="2019_Bevacqua_etal_SciAdv_CompoundFlooding.pdf",
        title="CompoundFlooding",
        authors=["Bevacqua", "etal"],
        venue="SciAdv",
        year="2019",
    )

    text = dump_structured([record])
    print(text)
    print(dump_queryable(load_structured(text)))
