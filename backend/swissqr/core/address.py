import re

from swissqr.schemas.qr_bill import Address


_STREET_NUMBER_RE = re.compile(r"^(.+?)\s+(\d+[A-Za-z]*)$")
_POSTAL_TOWN_RE = re.compile(r"^(\d{4})\s+(.+)$")


def parse_address(text: str | None, country: str = "CH") -> Address:
    """
    Parse a freeform address stored as lines separated by newlines.

    Examples:
        "Bahnhofstrasse 12\\n8001 Zürich" -> street, "12", "8001", "Zürich"
        "Rue du Rhône 15A\\n1204 Genève"  -> building number "15A"
        "Postfach\\nBern"                 -> street "Postfach", town "Bern"

    Unparseable input leaves fields empty rather than failing.
    """
    lines = [line.strip() for line in (text or "").split("\n")]
    lines = [line for line in lines if line]

    street = ""
    building_number = ""
    postal_code = ""
    town = ""

    if lines:
        match = _STREET_NUMBER_RE.match(lines[0])
        if match:
            street = match.group(1).strip()
            building_number = match.group(2).strip()
        else:
            street = lines[0]

    if len(lines) >= 2:
        match = _POSTAL_TOWN_RE.match(lines[-1])
        if match:
            postal_code = match.group(1)
            town = match.group(2)
        else:
            town = lines[-1]

    return Address(
        street=street,
        building_number=building_number,
        postal_code=postal_code,
        town=town,
        country=country,
    )
