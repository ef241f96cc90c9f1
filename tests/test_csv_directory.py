from __future__ import annotations

from callscreen.adapters.csv_directory import CsvDirectory


def test_lookup_uses_normalized_numbers(tmp_path) -> None:
    path = tmp_path / "contacts.csv"
    path.write_text(
        "name,number\n"
        "Alice,+1 (555) 123-4567\n"
        "Duplicate,+15551234567\n"
        ",555-0100\n"
        "Nobody,\n",
        encoding="utf-8",
    )
    directory = CsvDirectory(str(path))

    assert len(directory) == 2
    entry = directory.lookup("+15551234567")
    assert entry is not None
    assert entry.name == "Alice"
    assert directory.lookup("555 0100").name == "5550100"
    assert directory.lookup("5551234567") is None


def test_missing_or_unset_file_is_an_empty_directory(tmp_path) -> None:
    assert CsvDirectory(str(tmp_path / "absent.csv")).lookup("123") is None
    assert len(CsvDirectory(None)) == 0
