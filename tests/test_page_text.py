from datetime import date

import pytest

from sked_deconfliction.preprocessing.page_text import (
    TextFilePageProvider,
    TextFragment,
    assemble_page_text,
    build_schedule_url,
)


def test_text_files_split_on_form_feed(tmp_path):
    first = tmp_path / "a.txt"
    second = tmp_path / "b.txt"
    first.write_text("page one\fpage two", encoding="utf-8")
    second.write_text("page three", encoding="utf-8")

    assert TextFilePageProvider([first, second]).pages() == ["page one", "page two", "page three"]


def test_missing_page_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        TextFilePageProvider([tmp_path / "missing.txt"]).pages()


def test_assemble_rows_top_down_left_to_right():
    fragments = [
        TextFragment("0730", x=120.0, y=700.0),
        TextFragment("BT21", x=40.0, y=701.5),
        TextFragment("101", x=10.0, y=699.0),
        TextFragment("102", x=10.0, y=680.0),
        TextFragment("BT22", x=40.0, y=680.0),
        TextFragment("HEADER", x=10.0, y=750.0),
    ]
    assert assemble_page_text(fragments) == "HEADER\n101 BT21 0730\n102 BT22"


def test_assemble_tolerance():
    fragments = [TextFragment("A", x=0.0, y=100.0), TextFragment("B", x=5.0, y=96.0)]

    assert assemble_page_text(fragments) == "A\nB"
    assert assemble_page_text(fragments, tolerance=5.0) == "A B"


def test_assemble_empty():
    assert assemble_page_text([]) == ""


def test_schedule_url():
    url = build_schedule_url(date(2024, 3, 12))
    assert url == "https://www.cnatra.navy.mil/scheds/TW1/SQ-VT-9/!2024-03-12!VT-9!Frontpage.pdf"
    assert build_schedule_url(date(2024, 3, 12), "sked/{date}.pdf") == "sked/2024-03-12.pdf"
