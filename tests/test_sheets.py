import pytest

from extensions import db
from recorder.errors import InvalidArgument
from recorder.sheets import column_index, column_letters, parse_a1, parse_range


def test_a1_references():
    assert parse_a1("B1") == (1, 2)
    assert parse_a1("e5") == (5, 5)
    assert parse_a1("AA10") == (10, 27)
    assert column_index("Z") == 26
    assert column_letters(28) == "AB"
    assert parse_range("E1:E5") == ((1, 5), (5, 5))
    assert parse_range("C3") == ((3, 3), (3, 3))


@pytest.mark.parametrize("ref", ["", "1A", "B0", "B", "A1:B2:C3"])
def test_invalid_references_raise(ref):
    with pytest.raises(InvalidArgument):
        parse_range(ref)


def test_append_and_read_back(workbook):
    sheet = workbook.insert_sheet("data")
    assert sheet.last_row() == 0
    assert sheet.append_row(["a", 1, True]) == 1
    assert sheet.append_row(["b", 2]) == 2
    db.session.commit()

    assert sheet.last_row() == 2
    assert sheet.last_column() == 3
    assert sheet.get_values("A1:C2") == [["a", 1, True], ["b", 2, ""]]
    assert sheet.get_row(2) == ["b", 2, ""]
    assert sheet.get_value("B2") == 2
    assert sheet.get_value("Z9") == ""


def test_set_value_bold_and_width(workbook):
    sheet = workbook.insert_sheet("fmt")
    sheet.set_value("A1", "header", bold=True)
    sheet.set_value((1, 1), "renamed")
    sheet.set_column_width(1, 250)
    sheet.set_column_width(1, 120)
    db.session.commit()

    assert sheet.get_value("A1") == "renamed"
    assert sheet.is_bold(1, 1)
    assert sheet.column_width(1) == 120
    assert sheet.column_width(2) is None


def test_workbook_lookup(workbook):
    assert workbook.get_sheet("missing") is None
    created = workbook.get_or_insert_sheet("once")
    again = workbook.get_or_insert_sheet("once")
    assert created.sheet.id == again.sheet.id


def test_set_bold_spans_columns(workbook):
    sheet = workbook.insert_sheet("bold")
    sheet.set_value("A1", "x")
    sheet.set_bold(1, 1, 3)
    db.session.commit()

    assert [sheet.is_bold(1, c) for c in range(1, 5)] == [True, True, True, False]
    assert sheet.get_value("A1") == "x"
    assert sheet.get_value("C1") == ""
