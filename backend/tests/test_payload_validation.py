import pytest

from swissqr.core.errors import PayloadStructureInvalid
from swissqr.core.payload_validation import validate_qr_payload
from swissqr.core.qr_payload import build_qr_payload, serialize_qr_payload


@pytest.fixture
def lines(creditor, invoice):
    return serialize_qr_payload(build_qr_payload(creditor, None, invoice)).split("\n")


def _with(lines, index, value):
    changed = list(lines)
    changed[index] = value
    return "\n".join(changed)


def test_valid_payload_passes(lines):
    assert validate_qr_payload("\n".join(lines), "CHF") == lines


def test_qrr_payload_passes(qr_creditor, invoice):
    serialized = serialize_qr_payload(build_qr_payload(qr_creditor, None, invoice))
    assert len(validate_qr_payload(serialized, "CHF")) == 33


@pytest.mark.parametrize("count", [32, 34])
def test_wrong_line_count_is_rejected(lines, count):
    changed = (lines + [""])[:count] if count > 33 else lines[:count]
    with pytest.raises(PayloadStructureInvalid, match="expected 33 lines"):
        validate_qr_payload("\n".join(changed), "CHF")


def test_trailing_newline_is_rejected(lines):
    with pytest.raises(PayloadStructureInvalid):
        validate_qr_payload("\n".join(lines) + "\n", "CHF")


def test_carriage_return_is_rejected(lines):
    with pytest.raises(PayloadStructureInvalid):
        validate_qr_payload("\r\n".join(lines), "CHF")


@pytest.mark.parametrize(
    "index, value, message",
    [
        (0, "BCD", "Invalid QR Type"),
        (1, "0100", "Invalid Version"),
        (2, "2", "Invalid Coding Type"),
        (19, "USD", "Invalid Currency"),
        (18, "100", "Invalid Amount"),
        (18, "1234567890.00", "Invalid Amount"),
        (27, "XYZ", "Invalid Reference Type"),
        (28, "RF00INV2024001", "Invalid SCOR reference"),
    ],
)
def test_invalid_fields_are_rejected(lines, index, value, message):
    with pytest.raises(PayloadStructureInvalid, match=message):
        validate_qr_payload(_with(lines, index, value), "CHF")


def test_currency_must_match_declared_currency(lines):
    with pytest.raises(PayloadStructureInvalid, match="Invalid Currency"):
        validate_qr_payload("\n".join(lines), "EUR")


def test_non_reference_must_be_empty(lines):
    changed = list(lines)
    changed[27] = "NON"
    with pytest.raises(PayloadStructureInvalid):
        validate_qr_payload("\n".join(changed), "CHF")
    changed[28] = ""
    assert validate_qr_payload("\n".join(changed), "CHF")


def test_qrr_reference_checksum_is_verified(lines):
    changed = list(lines)
    changed[27] = "QRR"
    changed[28] = "210000000003139471430009016"
    with pytest.raises(PayloadStructureInvalid, match="Invalid QRR reference"):
        validate_qr_payload("\n".join(changed), "CHF")
