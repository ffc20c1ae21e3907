from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from swissqr.core.config import settings


class ReferenceType(str, Enum):
    QRR = "QRR"
    SCOR = "SCOR"
    NON = "NON"


class Address(BaseModel):
    model_config = ConfigDict(frozen=True)

    street: str = ""
    building_number: str = ""
    postal_code: str = ""
    town: str = ""
    country: str = "CH"

    @property
    def is_structured(self) -> bool:
        return bool(self.postal_code or self.town)


class PaymentReference(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: ReferenceType = ReferenceType.NON
    value: str = ""


class ReferenceOutcome(BaseModel):
    """Reference generation result; ``fallback`` marks a degraded NON reference."""

    model_config = ConfigDict(frozen=True)

    reference: PaymentReference
    fallback: bool = False
    reason: Optional[str] = None


class CreditorProfile(BaseModel):
    name: str = ""
    address: str = ""
    qr_iban: str = ""


class Invoice(BaseModel):
    number: str
    total: Decimal = Decimal("0")
    currency: str = Field(default_factory=lambda: settings.QR_DEFAULT_CURRENCY)
    due_date: Optional[date] = None
    customer_name: Optional[str] = None
    # Seed for the QRR date component, usually the invoice creation date
    reference_date: Optional[date] = None
    message: Optional[str] = None


# Wire order of the Swiss Payment Code, version 0200
QR_PAYLOAD_FIELDS = (
    "qr_type",
    "version",
    "coding_type",
    "account",
    "creditor_address_type",
    "creditor_name",
    "creditor_street",
    "creditor_building_number",
    "creditor_postal_code",
    "creditor_town",
    "creditor_country",
    "ultimate_creditor_address_type",
    "ultimate_creditor_name",
    "ultimate_creditor_street",
    "ultimate_creditor_building_number",
    "ultimate_creditor_postal_code",
    "ultimate_creditor_town",
    "ultimate_creditor_country",
    "amount",
    "currency",
    "debtor_address_type",
    "debtor_name",
    "debtor_street",
    "debtor_building_number",
    "debtor_postal_code",
    "debtor_town",
    "debtor_country",
    "reference_type",
    "reference",
    "unstructured_message",
    "bill_information",
    "alternative_scheme_1",
    "alternative_scheme_2",
)


class QrPayload(BaseModel):
    """
    The 33 fields of a Swiss QR-Bill payload, declared in wire order.

    Instances are immutable; ``wire_fields()`` walks ``QR_PAYLOAD_FIELDS`` so the
    serialized order never depends on attribute declaration alone.
    """

    model_config = ConfigDict(frozen=True)

    # Header
    qr_type: str = "SPC"
    version: str = "0200"
    coding_type: str = "1"

    # Creditor
    account: str
    creditor_address_type: str = "S"
    creditor_name: str
    creditor_street: str = ""
    creditor_building_number: str = ""
    creditor_postal_code: str = ""
    creditor_town: str = ""
    creditor_country: str = "CH"

    # Ultimate creditor (reserved, always empty)
    ultimate_creditor_address_type: str = ""
    ultimate_creditor_name: str = ""
    ultimate_creditor_street: str = ""
    ultimate_creditor_building_number: str = ""
    ultimate_creditor_postal_code: str = ""
    ultimate_creditor_town: str = ""
    ultimate_creditor_country: str = ""

    # Payment amount
    amount: str = ""
    currency: str = "CHF"

    # Ultimate debtor
    debtor_address_type: str = ""
    debtor_name: str = ""
    debtor_street: str = ""
    debtor_building_number: str = ""
    debtor_postal_code: str = ""
    debtor_town: str = ""
    debtor_country: str = ""

    # Reference
    reference_type: ReferenceType = ReferenceType.NON
    reference: str = ""

    # Additional information
    unstructured_message: str = ""
    bill_information: str = ""

    # Alternative schemes
    alternative_scheme_1: str = ""
    alternative_scheme_2: str = ""

    def wire_fields(self) -> List[str]:
        values = []
        for name in QR_PAYLOAD_FIELDS:
            value = getattr(self, name)
            if isinstance(value, Enum):
                value = value.value
            values.append(value)
        return values


class QrBillRequest(BaseModel):
    creditor: Optional[CreditorProfile] = None
    # Freeform two-line debtor address; looked up by customer name when absent
    debtor_address: Optional[str] = None
    invoice: Invoice


class QrPayloadResponse(BaseModel):
    payload: str
    lines: int = Field(..., ge=33, le=33)
    reference_type: ReferenceType
    reference: str
    amount: str
    currency: str
