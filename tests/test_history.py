from extensions import db
from recorder.errors import Outcome
from recorder.history import hyperlink_formula

HEADERS = ["ファイル名", "保存日時", "フォルダパス", "ファイルリンク", "ファイル形式", "メディアタイプ"]


def test_ensure_store_creates_sheet(history, workbook, config):
    sheet = history.ensure_store()

    assert sheet.get_row(1) == HEADERS
    assert all(sheet.is_bold(1, col) for col in range(1, 7))
    assert [sheet.column_width(c) for c in range(1, 7)] == [250, 150, 250, 300, 100, 100]
    assert workbook.get_sheet(config.history_sheet_name) is not None


def test_ensure_store_is_idempotent(history):
    first = history.ensure_store()
    second = history.ensure_store()
    assert first.sheet.id == second.sheet.id
    assert second.get_row(1) == HEADERS
    assert second.last_row() == 1


def test_legacy_sheet_gets_media_type_column_once(history, workbook, config):
    legacy = workbook.insert_sheet(config.history_sheet_name)
    legacy.append_row(HEADERS[:5])
    legacy.append_row(["old.mp3", "2023/01/01 00:00:00", "-", "-", "MP3"])
    db.session.commit()

    sheet = history.ensure_store()
    assert sheet.get_row(1) == HEADERS
    assert sheet.is_bold(1, 6)
    assert sheet.column_width(6) == 100

    history.ensure_store()
    assert sheet.get_row(1) == HEADERS
    assert sheet.last_column() == 6


def test_legacy_sheet_missing_both_columns(history, workbook, config):
    legacy = workbook.insert_sheet(config.history_sheet_name)
    legacy.append_row(HEADERS[:4])
    db.session.commit()

    sheet = history.ensure_store()
    assert sheet.get_row(1) == HEADERS
    assert sheet.get_value("A1") == "ファイル名"


def test_empty_existing_sheet_gets_full_header(history, workbook, config):
    workbook.insert_sheet(config.history_sheet_name)
    db.session.commit()
    assert history.ensure_store().get_row(1) == HEADERS


def test_append_writes_formatted_row(history):
    outcome = history.append('say "hi".txt', "親 > 子", "http://f/1", "http://x/1", "txt", "テキスト")
    assert outcome is Outcome.OK

    sheet = history.ensure_store()
    assert sheet.get_row(2) == [
        'say "hi".txt',
        "2024/05/01 12:04:05",
        '=HYPERLINK("http://f/1","親 > 子")',
        '=HYPERLINK("http://x/1","say ""hi"".txt")',
        "TXT",
        "テキスト",
    ]


def test_rows_are_appended_in_order(history):
    history.append("a.mp3", "P", "u", "v", "mp3", "音声")
    history.append("b.png", "P", "u", "v", "png", "お絵かき")
    records = history.records()
    assert [r["ファイル名"] for r in records["rows"]] == ["a.mp3", "b.png"]
    assert records["headers"] == HEADERS


def test_append_failure_is_absorbed(history, monkeypatch):
    sheet = history.ensure_store()

    def boom(*a, **kw):
        raise RuntimeError("sheet locked")
    monkeypatch.setattr(type(sheet), "append_row", boom)

    assert history.append("x.mp3", "P", "u", "v", "mp3", "音声") is Outcome.ABSORBED
    assert history.ensure_store().last_row() == 1


def test_records_without_sheet(history):
    assert history.records() == {"headers": HEADERS, "rows": []}


def test_hyperlink_formula_quotes():
    assert hyperlink_formula("http://a", 'x"y') == '=HYPERLINK("http://a","x""y")'
