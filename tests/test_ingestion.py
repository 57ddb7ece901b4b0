import pytest

from core.enums import BlockField
from core.exceptions import (
    DuplicateMarkError, EmptyDocument, IngestionError, NoValidRows, UnsupportedFormat
)
from ingestion import SpreadsheetIngestor, extract_blocks, find_header_row, is_droppable_mark

from conftest import HEADERS, workbook_bytes


def test_header_row_below_title_is_skipped():
    rows = [["x"], ["MARK", "A(W1)"], ["G14", "100"]]

    result = extract_blocks(rows)

    assert result.header_row_index == 1
    assert [b.mark for b in result.blocks] == ["G14"]
    assert result.blocks[0].w1 == "100"


def test_header_defaults_to_first_row():
    rows = [["Mark", "W1"], ["G1", 5], ["G2", 6]]

    assert find_header_row(rows) == 0
    assert [b.mark for b in extract_blocks(rows).blocks] == ["G1", "G2"]


@pytest.mark.parametrize("mark", [None, "", "   ", "MARK"])
def test_rows_without_usable_mark_are_dropped(mark):
    rows = [HEADERS, ["G14", 1], [mark, 2], ["G15", 3]]

    result = extract_blocks(rows)

    assert [b.mark for b in result.blocks] == ["G14", "G15"]
    assert result.dropped_rows == 1


def test_values_are_kept_as_provided():
    rows = [HEADERS, ["G14", "100", 250, "abc", None, "", 45.5]]

    block = extract_blocks(rows).blocks[0]

    assert block.w1 == "100"
    assert block.w2 == 250
    assert block.angle == "abc"
    assert block.length is None
    assert block.thickness is None
    assert block.alpha == 45.5
    assert block.display(BlockField.LENGTH) == "N/A"
    assert block.display(BlockField.W2) == 250


def test_short_rows_leave_trailing_fields_absent():
    block = extract_blocks([HEADERS, ["G14"]]).blocks[0]

    assert block.total_weight is None
    assert block.count is None


def test_numeric_mark_becomes_text():
    block = extract_blocks([HEADERS, [14.0, 1]]).blocks[0]

    assert block.mark == "14"


def test_single_row_is_empty_document():
    with pytest.raises(EmptyDocument):
        extract_blocks([HEADERS])


def test_all_rows_filtered_is_no_valid_rows():
    with pytest.raises(NoValidRows):
        extract_blocks([HEADERS, [None, 1], ["", 2]])


def test_xlsx_file(tmp_path):
    content = workbook_bytes([
        ["Requirements list"],
        HEADERS,
        ["G14", 100, 200, 90, 2000, 50, 12, None, None, None, 2],
        [None],
        ["G15", 120, 220, 90, 1800, 40, 0],
    ])
    path = tmp_path / "blocks.xlsx"
    path.write_bytes(content)

    result = SpreadsheetIngestor().ingest_file(path)

    assert result.file_name == "blocks.xlsx"
    assert result.header_row_index == 1
    assert [b.mark for b in result.blocks] == ["G14", "G15"]
    assert result.blocks[0].length == 2000
    assert result.blocks[0].count == 2


def test_csv_with_title_line_and_semicolons():
    content = "Project 7\nMARK;A(W1);B(W2)\nG14;100;200\n;5;5\nG15;110;210\n".encode("utf-8")

    result = SpreadsheetIngestor().ingest(content, file_name="blocks.csv")

    assert [b.mark for b in result.blocks] == ["G14", "G15"]
    assert result.blocks[1].w2 == "210"


def test_content_type_selects_parser():
    content = "MARK,A(W1)\nG14,1\n".encode("utf-8")

    result = SpreadsheetIngestor().ingest(content, content_type="text/csv; charset=utf-8")

    assert result.blocks[0].mark == "G14"


def test_unsupported_extension():
    with pytest.raises(UnsupportedFormat):
        SpreadsheetIngestor().ingest(b"data", file_name="blocks.pdf")


def test_corrupt_workbook_is_ingestion_error():
    with pytest.raises(IngestionError) as exc:
        SpreadsheetIngestor().ingest(b"not a zip", file_name="blocks.xlsx")

    assert exc.value.file_name == "blocks.xlsx"


def test_duplicate_marks_rejected():
    content = "MARK,A(W1)\nG14,1\nG15,2\nG14,3\n".encode("utf-8")

    with pytest.raises(DuplicateMarkError) as exc:
        SpreadsheetIngestor(reject_duplicates=True).ingest(content, file_name="b.csv")

    assert exc.value.marks == ["G14"]


def test_duplicate_marks_allowed_when_configured():
    content = "MARK,A(W1)\nG14,1\nG14,3\n".encode("utf-8")

    result = SpreadsheetIngestor(reject_duplicates=False).ingest(content, file_name="b.csv")

    assert len(result.blocks) == 2


def test_parsers_registered_by_their_extensions():
    ingestor = SpreadsheetIngestor()

    assert set(ingestor.parsers) == {".xlsx", ".xls", ".csv"}
    assert ingestor.parsers[".xls"] is ingestor.parsers[".xlsx"]


@pytest.mark.parametrize("value,droppable", [
    (None, True), ("", True), ("  ", True), ("MARK", True), (" MARK ", True),
    ("G14", False), ("mark", False),
])
def test_droppable_mark(value, droppable):
    assert is_droppable_mark(value) is droppable
