"""
Tests for the JSON, name list and CSV views.
"""

import csv
import io

from conftest import ACME_ROW

from org_overview.encoders import (
    CSV_BOM,
    csv_cell,
    encode_csv,
    encode_full,
    encode_names,
    field_names,
    row_to_dict,
)
from org_overview.entities import AggregatedRow

HEADER = ["id", "name", "legalForm", "locality", "representative", "addedDate"]


def parse_csv(text: str) -> list[list[str]]:
    assert text.startswith(CSV_BOM)
    return list(csv.reader(io.StringIO(text[len(CSV_BOM) :]), delimiter=";"))


def test_field_names_follow_row_schema():
    assert field_names() == HEADER


def test_row_to_dict_uses_wire_names():
    assert row_to_dict(ACME_ROW) == {
        "id": "A1",
        "name": "Acme Inc",
        "legalForm": "AB",
        "locality": "Stockholm",
        "representative": "Acme Rep",
        "addedDate": "2024-01-05",
    }


def test_full_view_keeps_every_row():
    rows = [ACME_ROW, AggregatedRow(id="A2")]

    encoded = encode_full(rows)

    assert [item["id"] for item in encoded] == ["A1", "A2"]
    assert encoded[1] == dict.fromkeys(HEADER, "N/A") | {"id": "A2"}


def test_name_view_skips_unknown_names():
    rows = [ACME_ROW, AggregatedRow(id="A2"), AggregatedRow(id="A3", name="Beta HB")]

    assert encode_names(rows) == ["Acme Inc", "Beta HB"]


def test_csv_of_empty_aggregate_is_empty():
    assert encode_csv([]) == ""


def test_csv_layout():
    text = encode_csv([ACME_ROW, AggregatedRow(id="A2")])

    assert text == (
        CSV_BOM
        + "id;name;legalForm;locality;representative;addedDate\n"
        + "A1;Acme Inc;AB;Stockholm;Acme Rep;2024-01-05\n"
        + "A2;N/A;N/A;N/A;N/A;N/A"
    )


def test_csv_quotes_only_when_needed():
    row = AggregatedRow(id="A1", name='Acme "Best"; Inc', locality="Plain")

    line = encode_csv([row]).split("\n")[1]

    assert line.startswith('A1;"Acme ""Best""; Inc";N/A;Plain;')


def test_csv_round_trip_preserves_special_characters():
    """Delimiters, quotes and newlines survive a standard CSV reader."""
    tricky = AggregatedRow(
        id="A1",
        name='Acme; "Quoted" Inc',
        legal_form="Line one\nline two",
        representative="Ombud ÅÄÖ",
    )

    parsed = parse_csv(encode_csv([tricky, ACME_ROW]))

    assert parsed[0] == HEADER
    assert parsed[1] == list(row_to_dict(tricky).values())
    assert parsed[1][1] == 'Acme; "Quoted" Inc'
    assert parsed[2] == list(row_to_dict(ACME_ROW).values())


def test_csv_quotes_carriage_returns():
    """A bare carriage return is quoted so readers keep the value whole."""
    row = AggregatedRow(id="A1", name="line1\rline2")

    text = encode_csv([row])

    assert '"line1\rline2"' in text
    assert parse_csv(text)[1][1] == "line1\rline2"


def test_csv_cell():
    assert csv_cell("plain") == "plain"
    assert csv_cell(None) == ""
    assert csv_cell('say "hi"') == '"say ""hi"""'
    assert csv_cell("a;b") == '"a;b"'
