"""
Tests for the record store.

Tests appends, full rewrites, queryable regeneration and line lookup on
temporary index files.
"""

import pytest
from pathlib import Path

from paperindex.core.exceptions import (
    AmbiguousMatchError,
    IndexNotFoundError,
    RecordNotFoundError,
    StoreFormatError,
)
from paperindex.extraction import parse_filename
from paperindex.store import RecordStore, pick_single_match


def records_for(*names):
    return [parse_filename(name) for name in names]


class TestPickSingleMatch:
    """Tests for the shared lookup policy."""

    def test_single_candidate(self):
        """Test that one candidate is returned."""
        assert pick_single_match("Beva", ["2019_Bevacqua.pdf"]) == "2019_Bevacqua.pdf"

    def test_exact_name_wins(self):
        """Test that an exact filename beats longer names containing it."""
        names = ["a.pdf", "ba.pdf"]

        assert pick_single_match("a.pdf", names) == "a.pdf"

    def test_no_candidates(self):
        """Test that no candidates is a not-found error."""
        with pytest.raises(RecordNotFoundError):
            pick_single_match("x", [])

    def test_several_candidates(self):
        """Test that several candidates are ambiguous."""
        with pytest.raises(AmbiguousMatchError) as exc_info:
            pick_single_match("2019", ["2019_a.pdf", "2019_b.pdf"])

        assert exc_info.value.candidates == ["2019_a.pdf", "2019_b.pdf"]


class TestRecordStorePaths:
    """Tests for store construction."""

    def test_paths_from_config(self, config):
        """Test that paths come from config."""
        store = RecordStore(config=config)

        assert store.structured_path == config.paths.structured_index
        assert store.queryable_path == config.paths.queryable_index

    def test_explicit_paths(self, temp_dir: Path):
        """Test that explicit paths need no config."""
        store = RecordStore(temp_dir / "a.yaml", temp_dir / "a.json")

        assert store.structured_path == temp_dir / "a.yaml"
        assert not store.exists()


class TestAppend:
    """Tests for appending records."""

    def test_append_creates_missing_store(self, store: RecordStore):
        """Test that the first append creates the file with a header."""
        appended = store.append(records_for("2019_A_B_C.pdf"))

        assert appended == 1
        assert store.structured_path.read_text(encoding="utf-8").startswith("Index:\n- Paper:\n")

    def test_append_nothing(self, store: RecordStore):
        """Test that appending no records leaves the store untouched."""
        assert store.append([]) == 0
        assert not store.exists()

    def test_append_preserves_existing_bytes(self, store: RecordStore):
        """Test that earlier content is an unchanged prefix."""
        store.append(records_for("2019_A_B_C.pdf"))
        before = store.structured_path.read_text(encoding="utf-8")

        store.append(records_for("2020_D_E_F.pdf"))
        after = store.structured_path.read_text(encoding="utf-8")

        assert after.startswith(before)
        assert [r.filename for r in store.load_records()] == ["2019_A_B_C.pdf", "2020_D_E_F.pdf"]

    def test_append_in_steps_equals_append_at_once(self, config, temp_dir: Path):
        """Test that appending A then B equals appending A and B together."""
        stepwise = RecordStore(temp_dir / "one.yaml", temp_dir / "one.json")
        at_once = RecordStore(temp_dir / "two.yaml", temp_dir / "two.json")

        first = records_for("2019_A_B_C.pdf", "2018_G_H_I.pdf")
        second = records_for("2020_D_E_F.pdf")

        stepwise.append(first)
        stepwise.append(second)
        at_once.append(first + second)

        assert stepwise.structured_path.read_bytes() == at_once.structured_path.read_bytes()

    def test_append_keeps_hand_edits(self, store: RecordStore):
        """Test that notes typed into the file survive an append."""
        store.append(records_for("2019_A_B_C.pdf"))
        text = store.structured_path.read_text(encoding="utf-8")
        store.structured_path.write_text(
            text.replace("Key_Question: ''", "Key_Question: Does it flood?"), encoding="utf-8"
        )

        store.append(records_for("2020_D_E_F.pdf"))

        assert store.load_records()[0].notes.key_question == "Does it flood?"

    def test_append_after_header_only(self, store: RecordStore):
        """Test appending to a store built from an empty directory."""
        store.write_all([])

        store.append(records_for("2019_A_B_C.pdf"))

        assert len(store.load_records()) == 1

    def test_append_after_flow_empty_index(self, store: RecordStore):
        """Test that 'Index: []' is replaced rather than extended."""
        store.structured_path.parent.mkdir(parents=True, exist_ok=True)
        store.structured_path.write_text("Index: []\n", encoding="utf-8")

        store.append(records_for("2019_A_B_C.pdf"))

        assert len(store.load_records()) == 1

    def test_append_without_trailing_newline(self, store: RecordStore):
        """Test that a missing final newline is repaired before appending."""
        store.append(records_for("2019_A_B_C.pdf"))
        text = store.structured_path.read_text(encoding="utf-8")
        store.structured_path.write_text(text.rstrip("\n"), encoding="utf-8")

        store.append(records_for("2020_D_E_F.pdf"))

        assert len(store.load_records()) == 2


class TestWriteAll:
    """Tests for full rewrites."""

    def test_write_all_replaces_content(self, store: RecordStore):
        """Test that write_all discards previous records."""
        store.append(records_for("2019_A_B_C.pdf"))

        store.write_all(records_for("2020_D_E_F.pdf"))

        assert [r.filename for r in store.load_records()] == ["2020_D_E_F.pdf"]

    def test_write_all_leaves_no_temp_files(self, store: RecordStore):
        """Test that the atomic write cleans up after itself."""
        store.write_all(records_for("2019_A_B_C.pdf"))

        assert [p.name for p in store.structured_path.parent.iterdir()] == ["index.yaml"]


class TestLoad:
    """Tests for reading the structured store."""

    def test_missing_store_raises(self, store: RecordStore):
        """Test that reading a missing store is an index error."""
        with pytest.raises(IndexNotFoundError):
            store.load_records()

    def test_invalid_yaml_raises(self, store: RecordStore):
        """Test that a broken file is reported as a format error."""
        store.structured_path.parent.mkdir(parents=True, exist_ok=True)
        store.structured_path.write_text("Index:\n- Paper: [unclosed\n", encoding="utf-8")

        with pytest.raises(StoreFormatError):
            store.load_records()

    def test_scalar_paper_raises(self, store: RecordStore):
        """Test that a paper written as plain text is a format error naming the entry."""
        store.append(records_for("2019_A_B_C.pdf"))
        with open(store.structured_path, "a", encoding="utf-8") as f:
            f.write("- Paper: placeholder\n")

        with pytest.raises(StoreFormatError) as exc_info:
            store.load_records()

        assert "entry 2" in exc_info.value.message
        assert "placeholder" in exc_info.value.message

    def test_notes_as_text_are_loaded(self, store: RecordStore):
        """Test that free text under Notes is read as the key question."""
        store.structured_path.parent.mkdir(parents=True, exist_ok=True)
        store.structured_path.write_text(
            "Index:\n- Paper:\n    PDF_file: a.pdf\n    Notes: read this later\n", encoding="utf-8"
        )

        assert store.load_records()[0].notes.key_question == "read this later"

    def test_filenames(self, store: RecordStore):
        """Test the set of indexed filenames."""
        assert store.filenames() == set()

        store.append(records_for("2019_A_B_C.pdf", "2020_D_E_F.pdf"))

        assert store.filenames() == {"2019_A_B_C.pdf", "2020_D_E_F.pdf"}


class TestRegenerateQueryable:
    """Tests for deriving the queryable store."""

    def test_regenerate_writes_all_records(self, store: RecordStore):
        """Test that the JSON holds every structured record."""
        store.append(records_for("2019_A_B_C.pdf", "2020_D_E_F.pdf"))

        count = store.regenerate_queryable()

        assert count == 2
        assert store.load_queryable() == store.load_records()

    def test_regenerate_is_idempotent(self, store: RecordStore):
        """Test that two regenerations produce identical bytes."""
        store.append(records_for("2019_A_B_C.pdf"))

        store.regenerate_queryable()
        first = store.queryable_path.read_bytes()
        store.regenerate_queryable()
        second = store.queryable_path.read_bytes()

        assert first == second

    def test_regenerate_overwrites_stale_projection(self, store: RecordStore):
        """Test that a hand-modified JSON file is replaced in full."""
        store.append(records_for("2019_A_B_C.pdf"))
        store.queryable_path.parent.mkdir(parents=True, exist_ok=True)
        store.queryable_path.write_text('{"Index": [], "junk": true}', encoding="utf-8")

        store.regenerate_queryable()

        assert "junk" not in store.queryable_path.read_text(encoding="utf-8")

    def test_regenerate_without_structured_store_fails(self, store: RecordStore):
        """Test that regeneration needs the structured store."""
        with pytest.raises(IndexNotFoundError):
            store.regenerate_queryable()

        assert not store.queryable_path.exists()

    def test_queryable_mtime(self, store: RecordStore):
        """Test the watermark is absent until the JSON exists."""
        assert store.queryable_mtime() is None

        store.append(records_for("2019_A_B_C.pdf"))
        store.regenerate_queryable()

        assert store.queryable_mtime() == store.queryable_path.stat().st_mtime

    def test_load_missing_queryable_raises(self, store: RecordStore):
        """Test that searching before indexing is an index error."""
        with pytest.raises(IndexNotFoundError):
            store.load_queryable()

    def test_load_invalid_queryable_raises(self, store: RecordStore):
        """Test that a corrupted JSON file is a format error."""
        store.queryable_path.parent.mkdir(parents=True, exist_ok=True)
        store.queryable_path.write_text("{not json", encoding="utf-8")

        with pytest.raises(StoreFormatError):
            store.load_queryable()

    def test_load_queryable_with_scalar_entry_raises(self, store: RecordStore):
        """Test that a malformed JSON entry is a format error."""
        store.queryable_path.parent.mkdir(parents=True, exist_ok=True)
        store.queryable_path.write_text('{"Index": [{"Paper": "placeholder"}]}', encoding="utf-8")

        with pytest.raises(StoreFormatError):
            store.load_queryable()


class TestLocate:
    """Tests for finding a record's line."""

    def test_locate_returns_pdf_file_line(self, store: RecordStore):
        """Test that the line number points at the PDF_file line."""
        store.append(records_for("2019_A_B_C.pdf", "2020_D_E_F.pdf"))
        lines = store.structured_path.read_text(encoding="utf-8").splitlines()

        line = store.locate("2020_D")

        assert lines[line - 1].strip() == "PDF_file: 2020_D_E_F.pdf"

    def test_locate_first_record(self, store: RecordStore):
        """Test the first record sits right below the header."""
        store.append(records_for("2019_A_B_C.pdf"))

        assert store.locate("2019_A_B_C.pdf") == 3

    def test_locate_is_stable_across_appends(self, store: RecordStore):
        """Test that appends do not move earlier records."""
        store.append(records_for("2019_A_B_C.pdf"))
        before = store.locate("2019_A")

        store.append(records_for("2020_D_E_F.pdf"))

        assert store.locate("2019_A") == before

    def test_locate_not_found(self, store: RecordStore):
        """Test that an unknown filename is a not-found error."""
        store.append(records_for("2019_A_B_C.pdf"))

        with pytest.raises(RecordNotFoundError):
            store.locate("1999")

    def test_locate_ignores_other_fields(self, store: RecordStore):
        """Test that a filename mentioned in notes is not matched."""
        store.append(records_for("2019_A_B_C.pdf", "2020_D_E_F.pdf"))
        text = store.structured_path.read_text(encoding="utf-8")
        store.structured_path.write_text(
            text.replace("Key_Impact: ''", "Key_Impact: see 2020_D_E_F.pdf", 1), encoding="utf-8"
        )
        lines = store.structured_path.read_text(encoding="utf-8").splitlines()

        line = store.locate("2020_D_E_F")

        assert lines[line - 1].strip().startswith("PDF_file:")

    def test_locate_ambiguous(self, store: RecordStore):
        """Test that a fragment matching several records is ambiguous."""
        store.append(records_for("2019_A_B_C.pdf", "2019_D_E_F.pdf"))

        with pytest.raises(AmbiguousMatchError):
            store.locate("2019")

    def test_locate_without_store(self, store: RecordStore):
        """Test that locating needs the structured store."""
        with pytest.raises(IndexNotFoundError):
            store.locate("2019")
