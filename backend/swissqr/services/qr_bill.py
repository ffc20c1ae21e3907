"""
QR bill pipeline: lookups -> payload assembly -> self-validation.

Only a payload that passed ``validate_qr_payload`` leaves this module, so
renderers never see a partially valid record.
"""

from datetime import date
import logging

from pydantic import BaseModel, ConfigDict

from swissqr.core.errors import MissingCreditorConfig, QrBillError
from swissqr.core.payload_validation import validate_qr_payload
from swissqr.core.qr_payload import build_qr_payload, serialize_qr_payload
from swissqr.schemas.qr_bill import Address, Invoice, QrPayload, QrPayloadResponse
from swissqr.services.collaborators import CreditorProfileSource, DebtorAddressSource

logger = logging.getLogger(__name__)


class PreparedQrBill(BaseModel):
    model_config = ConfigDict(frozen=True)

    payload: QrPayload
    qr_data: str

    def summary(self) -> QrPayloadResponse:
        return QrPayloadResponse(
            payload=self.qr_data,
            lines=len(self.qr_data.split("\n")),
            reference_type=self.payload.reference_type,
            reference=self.payload.reference,
            amount=self.payload.amount,
            currency=self.payload.currency,
        )


async def _find_debtor_address(
    invoice: Invoice,
    debtor_source: DebtorAddressSource | None,
) -> Address | None:
    customer_name = (invoice.customer_name or "").strip()
    if not customer_name or debtor_source is None:
        return None
    try:
        address = await debtor_source.find(customer_name)
    except Exception as e:
        # Best effort: the bill stays valid without a debtor address
        logger.error(f"Could not fetch customer address for {customer_name!r}: {e}")
        return None
    if address is None:
        logger.warning(f"No customer address found for {customer_name!r}")
    return address


async def prepare_qr_bill(
    invoice: Invoice,
    *,
    creditor_source: CreditorProfileSource,
    debtor_source: DebtorAddressSource | None = None,
    today: date | None = None,
) -> PreparedQrBill:
    try:
        creditor = await creditor_source.get()
    except QrBillError:
        raise
    except Exception as exc:
        logger.error(f"Error fetching company settings: {exc}")
        raise MissingCreditorConfig("Failed to load company settings") from exc

    debtor_address = await _find_debtor_address(invoice, debtor_source)

    reference_date = invoice.reference_date
    if reference_date is None:
        reference_date = today or date.today()
        logger.warning(
            f"Invoice {invoice.number} has no reference date, using {reference_date.isoformat()}; "
            "a QR reference generated from it changes with the render date"
        )

    payload = build_qr_payload(creditor, debtor_address, invoice, reference_date=reference_date)
    qr_data = serialize_qr_payload(payload)
    validate_qr_payload(qr_data, payload.currency)

    logger.info(
        f"QR string validation passed for invoice {invoice.number} "
        f"({len(qr_data)} chars, reference {payload.reference_type.value})"
    )
    return PreparedQrBill(payload=payload, qr_data=qr_data)
