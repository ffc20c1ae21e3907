import pytest

from swissqr.core.address import parse_address
from swissqr.schemas.qr_bill import Address


def test_parse_two_line_address():
    address = parse_address("Bahnhofstrasse 12\n8001 Zürich")
    assert address == Address(
        street="Bahnhofstrasse",
        building_number="12",
        postal_code="8001",
        town="Zürich",
        country="CH",
    )


def test_parse_building_number_with_letter_suffix():
    address = parse_address("Rue du Rhône 15A\n1204 Genève")
    assert address.street == "Rue du Rhône"
    assert address.building_number == "15A"
    assert address.postal_code == "1204"
    assert address.town == "Genève"


def test_parse_uses_first_and_last_non_empty_lines():
    address = parse_address("  Avenue de la Gare 7 \n\n c/o Muster\n\n 1950 Sion  \n")
    assert address.street == "Avenue de la Gare"
    assert address.building_number == "7"
    assert address.postal_code == "1950"
    assert address.town == "Sion"


def test_parse_without_building_number_keeps_whole_line_as_street():
    address = parse_address("Postfach\n3000 Bern")
    assert address.street == "Postfach"
    assert address.building_number == ""
    assert address.postal_code == "3000"


def test_parse_last_line_without_postal_code_is_town():
    address = parse_address("Dorfstrasse 1\nBern")
    assert address.postal_code == ""
    assert address.town == "Bern"


def test_single_line_address_only_sets_street():
    address = parse_address("Hauptgasse 3")
    assert address.street == "Hauptgasse"
    assert address.building_number == "3"
    assert address.postal_code == ""
    assert address.town == ""
    assert not address.is_structured


@pytest.mark.parametrize("text", [None, "", "   ", "\n\n"])
def test_empty_input_yields_empty_address(text):
    assert parse_address(text) == Address()


def test_windows_line_endings_are_trimmed():
    address = parse_address("Seeweg 4\r\n6003 Luzern\r\n")
    assert address.building_number == "4"
    assert address.town == "Luzern"


def test_parse_is_idempotent():
    text = "Limmatquai 88b\n8001 Zürich"
    assert parse_address(text) == parse_address(text)
