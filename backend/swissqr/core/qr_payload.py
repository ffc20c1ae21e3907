"""
Swiss QR-Bill payload assembly.

Builds the 33-field Swiss Payment Code record from a creditor profile, an
optional debtor address and an invoice. The result is validated by
``swissqr.core.payload_validation`` before it reaches the renderer.
"""

from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import logging
import re

from swissqr.core.address import parse_address
from swissqr.core.billing_reference import generate_payment_reference
from swissqr.core.config import settings
from swissqr.core.errors import (
    FieldTruncationViolatesRequired,
    InvalidIban,
    MissingCreditorConfig,
    PayloadStructureInvalid,
    ReferenceGenerationFailure,
)
from swissqr.core.iban import clean_iban, is_qr_iban, validate_swiss_iban
from swissqr.schemas.qr_bill import Address, CreditorProfile, Invoice, QrPayload

logger = logging.getLogger(__name__)


SUPPORTED_CURRENCIES = ("CHF", "EUR")

MAX_NAME = 70
MAX_STREET = 70
MAX_BUILDING_NUMBER = 16
MAX_POSTAL_CODE = 16
MAX_TOWN = 35
MAX_MESSAGE = 140

MAX_AMOUNT = Decimal("999999999.99")


def _clean(value: str | None) -> str:
    if value is None:
        return ""
    # Line breaks would shift every following field
    return re.sub(r"[\r\n]+", " ", str(value)).strip()


def _truncate(value: str | None, max_length: int, *, required: bool = False, field: str = "") -> str:
    truncated = _clean(value)[:max_length]
    if required and not truncated:
        raise FieldTruncationViolatesRequired(
            f"Required field {field or 'value'} cannot be empty (max length: {max_length})"
        )
    return truncated


def format_amount(total: Decimal | int | float | str | None) -> str:
    """Two-decimal amount, or an empty string for an open-amount bill."""
    if total is None:
        return ""
    try:
        amount = Decimal(str(total))
    except InvalidOperation as exc:
        raise PayloadStructureInvalid(f"Invalid amount '{total}'") from exc
    if not amount.is_finite():
        raise PayloadStructureInvalid(f"Invalid amount '{total}'")
    if amount <= 0:
        return ""
    # Anything at or above this would round past MAX_AMOUNT
    if amount >= MAX_AMOUNT + Decimal("0.005"):
        raise PayloadStructureInvalid(f"Amount {total} exceeds the maximum of {MAX_AMOUNT}")
    return f"{amount.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP):.2f}"


def _require_creditor(creditor: CreditorProfile) -> str:
    if not _clean(creditor.name):
        raise MissingCreditorConfig("Company name is required in settings")
    if not _clean(creditor.address):
        raise MissingCreditorConfig("Company address is required in settings")
    if not _clean(creditor.qr_iban):
        raise MissingCreditorConfig("QR-IBAN is required in settings")

    iban = clean_iban(creditor.qr_iban)
    if not validate_swiss_iban(iban):
        raise InvalidIban("Invalid Swiss IBAN format. Must be 21 characters starting with CH.")
    return iban


def build_qr_payload(
    creditor: CreditorProfile,
    debtor_address: Address | None,
    invoice: Invoice,
    *,
    reference_date: date | None = None,
) -> QrPayload:
    iban = _require_creditor(creditor)
    creditor_address = parse_address(creditor.address)

    currency = _clean(invoice.currency).upper()
    if currency not in SUPPORTED_CURRENCIES:
        raise PayloadStructureInvalid(f"Unsupported currency '{invoice.currency}'")

    reference_date = reference_date or invoice.reference_date
    if reference_date is None and is_qr_iban(iban):
        raise ReferenceGenerationFailure("Reference date required for QR reference")
    outcome = generate_payment_reference(iban, invoice.number, reference_date)
    reference = outcome.reference

    debtor_name = _truncate(invoice.customer_name, MAX_NAME)
    debtor = Address(country="")
    if debtor_name:
        debtor = debtor_address or Address()

    message = invoice.message or settings.QR_MESSAGE_TEMPLATE.format(number=invoice.number)

    payload = QrPayload(
        account=iban,
        creditor_address_type="S",
        creditor_name=_truncate(creditor.name, MAX_NAME, required=True, field="creditor name"),
        creditor_street=_truncate(creditor_address.street, MAX_STREET, required=True, field="creditor street"),
        creditor_building_number=_truncate(creditor_address.building_number, MAX_BUILDING_NUMBER),
        creditor_postal_code=_truncate(creditor_address.postal_code, MAX_POSTAL_CODE),
        creditor_town=_truncate(creditor_address.town, MAX_TOWN),
        creditor_country=creditor_address.country,
        amount=format_amount(invoice.total),
        currency=currency,
        debtor_address_type="S" if debtor_name and debtor.is_structured else "",
        debtor_name=debtor_name,
        debtor_street=_truncate(debtor.street, MAX_STREET),
        debtor_building_number=_truncate(debtor.building_number, MAX_BUILDING_NUMBER),
        debtor_postal_code=_truncate(debtor.postal_code, MAX_POSTAL_CODE),
        debtor_town=_truncate(debtor.town, MAX_TOWN),
        debtor_country=debtor.country if debtor_name else "",
        reference_type=reference.type,
        reference=reference.value,
        unstructured_message=_truncate(message, MAX_MESSAGE),
    )

    logger.info(
        f"QR payload built for invoice {invoice.number}: "
        f"reference={reference.type.value} amount={payload.amount or 'open'} currency={currency}"
    )
    return payload


def serialize_qr_payload(payload: QrPayload) -> str:
    # LF separated; trailing empty fields are kept so the record has 33 lines
    return "\n".join(payload.wire_fields())
