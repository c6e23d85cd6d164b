import locale
from typing import Iterator

import pytest

from qsolog.adif.record import AdifRecord
from qsolog.enums import KnownField
from qsolog.query import LogView, distinct_values, filter_records, sort_records
from qsolog.store import LogStore


@pytest.fixture
def records() -> list[AdifRecord]:
    return [
        AdifRecord(
            {"call": "W1AW", "band": "20m", "mode": "SSB", "qso_date": "20220401"}
        ),
        AdifRecord(
            {"call": "K1ABC", "band": "40m", "mode": "FT8", "qso_date": "20220402"}
        ),
        AdifRecord(
            {"call": "N0FOO", "band": "20m", "mode": "FT8", "qso_date": "20220315"}
        ),
        AdifRecord({"band": "10m", "mode": "CW", "comment": "w1aw was loud"}),
        AdifRecord(
            {"call": "K1ABC", "band": "20m", "mode": "CW", "qso_date": "20220501"}
        ),
    ]


@pytest.fixture
def view(records: list[AdifRecord]) -> LogView:
    store = LogStore()
    store.replace(records)
    return LogView(store)


def test_filter_pass_through(records: list[AdifRecord]) -> None:
    result = filter_records(records, "", "", "")
    assert result == records
    assert all(a is b for a, b in zip(result, records))


@pytest.mark.parametrize(
    "keyword,band,mode,expected",
    [
        # keyword matches call, band, mode or qso_date, ignoring case
        ("k1abc", "", "", [1, 4]),
        ("ft8", "", "", [1, 2]),
        ("202204", "", "", [0, 1]),
        ("20M", "", "", [0, 2, 4]),
        # but not other fields
        ("loud", "", "", []),
        ("", "20m", "", [0, 2, 4]),
        ("", "20M", "", []),
        ("", "", "CW", [3, 4]),
        ("", "20m", "FT8", [2]),
        ("k1", "20m", "CW", [4]),
        ("nothing", "", "", []),
    ],
)
def test_filter(
    records: list[AdifRecord], keyword: str, band: str, mode: str, expected: list[int]
) -> None:
    result = filter_records(records, keyword, band, mode)
    assert result == [records[i] for i in expected]


def test_sort(records: list[AdifRecord]) -> None:
    result = sort_records(records, "call")
    # Missing call sorts first, ties keep their order
    assert result == [records[i] for i in (3, 1, 4, 2, 0)]
    assert result[1] is records[1]
    assert result[2] is records[4]

    result = sort_records(records, KnownField.CALL, ascending=False)
    assert result == [records[i] for i in (0, 2, 1, 4, 3)]
    assert result[2] is records[1]
    assert result[3] is records[4]

    # The input isn't touched
    assert records[0].call == "W1AW"


def test_sort_missing_field(records: list[AdifRecord]) -> None:
    assert sort_records(records, "comment") == [records[i] for i in (0, 1, 2, 4, 3)]


def test_distinct_values(records: list[AdifRecord]) -> None:
    assert distinct_values(records, "band") == ["20m", "40m", "10m"]
    assert distinct_values(records, KnownField.MODE) == ["SSB", "FT8", "CW"]
    assert distinct_values(records, "freq") == []


def test_view_defaults_to_everything(view: LogView, records: list[AdifRecord]) -> None:
    assert view.records() == records
    assert view.bands() == ["20m", "40m", "10m"]
    assert view.modes() == ["SSB", "FT8", "CW"]


def test_view_filter(view: LogView, records: list[AdifRecord]) -> None:
    view.set_filter(band="20m")
    assert view.records() == [records[0], records[2], records[4]]

    # A filter that matches nothing gives nothing
    view.set_filter(keyword="zzz")
    assert view.records() == []

    view.clear_filter()
    assert view.records() == records


def test_view_sort_toggle(view: LogView, records: list[AdifRecord]) -> None:
    view.sort_by("call")
    assert view.sort_field == "call"
    assert view.sort_ascending
    assert [r.call for r in view.records()] == ["", "K1ABC", "K1ABC", "N0FOO", "W1AW"]

    view.sort_by(KnownField.CALL)
    assert not view.sort_ascending
    assert [r.call for r in view.records()] == ["W1AW", "N0FOO", "K1ABC", "K1ABC", ""]
    assert view.records()[2] is records[1]

    # New field starts ascending again
    view.sort_by("qso_date")
    assert view.sort_field == "qso_date"
    assert view.sort_ascending


def test_view_filter_and_sort(view: LogView, records: list[AdifRecord]) -> None:
    view.sort_by("qso_date")
    view.set_filter(mode="FT8")
    assert view.records() == [records[2], records[1]]

    # Sorting sticks when the filter changes
    view.set_filter(mode="CW")
    assert view.records() == [records[3], records[4]]


def test_view_follows_store(view: LogView) -> None:
    view.set_filter(band="20m")
    new = [AdifRecord({"call": "AA1A", "band": "20m"}), AdifRecord({"band": "6m"})]
    view.store.replace(new)
    assert view.records() == [new[0]]


@pytest.fixture
def collation() -> Iterator[str]:
    """
    Switch LC_COLLATE to a real language locale for the test, then put it back
    """
    old = locale.setlocale(locale.LC_COLLATE)
    for name in ("en_US.UTF-8", "en_US.utf8", "en_GB.UTF-8", "de_DE.UTF-8"):
        try:
            current = locale.setlocale(locale.LC_COLLATE, name)
            break
        except locale.Error:
            continue
    else:
        pytest.skip("No language locale installed")

    yield current
    locale.setlocale(locale.LC_COLLATE, old)


def test_sort_mixed_case(collation: str) -> None:
    records = [AdifRecord({"call": c}) for c in ("b", "B", "a", "A")]

    result = [r.call for r in sort_records(records, "call")]
    assert sorted(result[:2]) == ["A", "a"]
    assert sorted(result[2:]) == ["B", "b"]

    result = [r.call for r in sort_records(records, "call", ascending=False)]
    assert sorted(result[:2]) == ["B", "b"]


def test_whitespace_around_values() -> None:
    records = [
        AdifRecord({"call": "W1AW ", "band": "20m\n", "mode": "SSB "}),
        AdifRecord({"call": "K1ABC", "band": "40m", "mode": "FT8"}),
        AdifRecord({"call": "N0FOO ", "band": "20m ", "mode": "FT8\n"}),
    ]
    assert filter_records(records, band="20m") == [records[0], records[2]]
    assert filter_records(records, mode="FT8") == [records[1], records[2]]
    assert distinct_values(records, "band") == ["20m", "40m"]
    assert sort_records(records, "call") == [records[1], records[2], records[0]]
