from datetime import date
import logging
import re

from swissqr.core.errors import ReferenceGenerationFailure
from swissqr.core.iban import is_qr_iban
from swissqr.schemas.qr_bill import PaymentReference, ReferenceOutcome, ReferenceType

logger = logging.getLogger(__name__)


QRR_LENGTH = 27
SCOR_MAX_PAYLOAD = 21

# Recursive Mod-10 transition table (ESR / QRR check digit)
_MOD10_TABLE = [
    [0, 9, 4, 6, 8, 2, 7, 1, 3, 5],
    [9, 4, 6, 8, 2, 7, 1, 3, 5, 0],
    [4, 6, 8, 2, 7, 1, 3, 5, 0, 9],
    [6, 8, 2, 7, 1, 3, 5, 0, 9, 4],
    [8, 2, 7, 1, 3, 5, 0, 9, 4, 6],
    [2, 7, 1, 3, 5, 0, 9, 4, 6, 8],
    [7, 1, 3, 5, 0, 9, 4, 6, 8, 2],
    [1, 3, 5, 0, 9, 4, 6, 8, 2, 7],
    [3, 5, 0, 9, 4, 6, 8, 2, 7, 1],
    [5, 0, 9, 4, 6, 8, 2, 7, 1, 3],
]


def _mod10_recursive(number: str) -> int:
    state = 0
    for ch in number:
        if not ch.isdigit():
            continue
        state = _MOD10_TABLE[state][int(ch)]
    return (10 - state) % 10


def _mod97(numeric_str: str) -> int:
    remainder = 0
    for ch in numeric_str:
        remainder = (remainder * 10 + int(ch)) % 97
    return remainder


def _alnum_to_numeric(value: str) -> str:
    digits = []
    for ch in value:
        if ch.isdigit():
            digits.append(ch)
        elif "A" <= ch.upper() <= "Z":
            digits.append(str(ord(ch.upper()) - 55))
    return "".join(digits)


def generate_qrr_reference(invoice_number: str, reference_date: date) -> str:
    """
    Build a 27-digit QR reference: invoice digits followed by the reference
    date (YYYYMMDD), zero-padded on the left to 26 digits, plus a recursive
    Mod-10 check digit.

    The date is an explicit argument so the same invoice always yields the
    same reference when callers pass a persisted seed date.
    """
    digits = re.sub(r"\D", "", invoice_number or "")
    base = f"{digits}{reference_date:%Y%m%d}".zfill(26)[:26]
    check = _mod10_recursive(base)
    return f"{base}{check}"


def generate_scor_reference(invoice_number: str) -> str:
    base = re.sub(r"[^0-9A-Za-z]", "", invoice_number or "").upper()[:SCOR_MAX_PAYLOAD]
    if not base:
        raise ReferenceGenerationFailure("Invalid invoice number for SCOR reference")
    numeric = _alnum_to_numeric(f"{base}RF00")
    check = 98 - _mod97(numeric)
    return f"RF{check:02d}{base}"


def is_valid_qrr_reference(reference: str | None) -> bool:
    if not re.fullmatch(r"\d{27}", reference or ""):
        return False
    return reference[-1] == str(_mod10_recursive(reference[:-1]))


def is_valid_scor_reference(reference: str | None) -> bool:
    reference = re.sub(r"\s", "", reference or "").upper()
    if not re.fullmatch(r"RF\d{2}[0-9A-Z]{1,21}", reference):
        return False
    return _mod97(_alnum_to_numeric(f"{reference[4:]}{reference[:4]}")) == 1


def generate_payment_reference(
    iban: str | None,
    invoice_number: str,
    reference_date: date,
) -> ReferenceOutcome:
    if is_qr_iban(iban):
        value = generate_qrr_reference(invoice_number, reference_date)
        return ReferenceOutcome(
            reference=PaymentReference(type=ReferenceType.QRR, value=value),
        )

    try:
        value = generate_scor_reference(invoice_number)
    except ReferenceGenerationFailure as exc:
        logger.warning(f"SCOR reference unavailable for invoice {invoice_number!r}, using NON: {exc.detail}")
        return ReferenceOutcome(
            reference=PaymentReference(type=ReferenceType.NON, value=""),
            fallback=True,
            reason=exc.detail,
        )
    return ReferenceOutcome(
        reference=PaymentReference(type=ReferenceType.SCOR, value=value),
    )


def format_reference(reference: str | None) -> str:
    cleaned = re.sub(r"\s", "", reference or "")
    if cleaned.upper().startswith("RF"):
        return " ".join(cleaned[i:i + 4] for i in range(0, len(cleaned), 4))
    if len(cleaned) == QRR_LENGTH:
        head, tail = cleaned[:2], cleaned[2:]
        return " ".join([head] + [tail[i:i + 5] for i in range(0, len(tail), 5)])
    return cleaned
