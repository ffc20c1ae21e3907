import re

from swissqr.core.billing_reference import is_valid_qrr_reference, is_valid_scor_reference
from swissqr.core.errors import PayloadStructureInvalid
from swissqr.core.qr_payload import SUPPORTED_CURRENCIES


QR_PAYLOAD_LINES = 33

_AMOUNT_RE = re.compile(r"^\d{1,9}\.\d{2}$")

# Zero-indexed positions in the serialized payload
_AMOUNT_LINE = 18
_CURRENCY_LINE = 19
_REFERENCE_TYPE_LINE = 27
_REFERENCE_LINE = 28


def validate_qr_payload(serialized: str, currency: str) -> list[str]:
    """
    Last check before a payload is handed to the QR renderer.

    Returns the split lines on success, raises ``PayloadStructureInvalid``
    otherwise.
    """
    if "\r" in serialized:
        raise PayloadStructureInvalid("Invalid QR string: carriage return found")

    lines = serialized.split("\n")
    if len(lines) != QR_PAYLOAD_LINES:
        raise PayloadStructureInvalid(
            f"Invalid QR string: expected {QR_PAYLOAD_LINES} lines, got {len(lines)}"
        )

    if lines[0] != "SPC":
        raise PayloadStructureInvalid("Invalid QR Type")
    if lines[1] != "0200":
        raise PayloadStructureInvalid("Invalid Version")
    if lines[2] != "1":
        raise PayloadStructureInvalid("Invalid Coding Type")
    if lines[_CURRENCY_LINE] not in SUPPORTED_CURRENCIES or lines[_CURRENCY_LINE] != currency:
        raise PayloadStructureInvalid("Invalid Currency")

    amount = lines[_AMOUNT_LINE]
    if amount and not _AMOUNT_RE.match(amount):
        raise PayloadStructureInvalid("Invalid Amount")

    reference_type = lines[_REFERENCE_TYPE_LINE]
    reference = lines[_REFERENCE_LINE]
    if reference_type == "QRR":
        if not is_valid_qrr_reference(reference):
            raise PayloadStructureInvalid("Invalid QRR reference")
    elif reference_type == "SCOR":
        if not is_valid_scor_reference(reference):
            raise PayloadStructureInvalid("Invalid SCOR reference")
    elif reference_type == "NON":
        if reference:
            raise PayloadStructureInvalid("Reference must be empty for type NON")
    else:
        raise PayloadStructureInvalid("Invalid Reference Type")

    return lines
