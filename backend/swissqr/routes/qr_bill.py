import logging

from fastapi import APIRouter, HTTPException, Response

from swissqr.core.config import settings
from swissqr.core.errors import QrBillError
from swissqr.pdf.swiss_qr_renderer import generate_qr_bill_pdf, render_qr_png, render_qr_svg
from swissqr.schemas.qr_bill import QrBillRequest, QrPayloadResponse
from swissqr.services.collaborators import (
    PostgresDebtorAddressSource,
    SettingsCreditorProfileSource,
    StaticCreditorProfileSource,
    StaticDebtorAddressSource,
)
from swissqr.services.qr_bill import PreparedQrBill, prepare_qr_bill

router = APIRouter(prefix="/qr-bill", tags=["qr-bill"])
logger = logging.getLogger(__name__)


def _debtor_source(body: QrBillRequest):
    if body.debtor_address is not None:
        return StaticDebtorAddressSource(body.debtor_address)
    if settings.DATABASE_URL:
        return PostgresDebtorAddressSource()
    return None


async def _prepare(body: QrBillRequest) -> PreparedQrBill:
    if body.creditor is not None:
        creditor_source = StaticCreditorProfileSource(body.creditor)
    else:
        creditor_source = SettingsCreditorProfileSource()

    try:
        return await prepare_qr_bill(
            body.invoice,
            creditor_source=creditor_source,
            debtor_source=_debtor_source(body),
        )
    except QrBillError as exc:
        logger.warning(f"QR bill rejected for invoice {body.invoice.number}: {exc.detail}")
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.post("/payload", response_model=QrPayloadResponse)
async def create_qr_payload(body: QrBillRequest):
    prepared = await _prepare(body)
    return prepared.summary()


@router.post("/image")
async def create_qr_image(body: QrBillRequest):
    prepared = await _prepare(body)
    return Response(content=render_qr_png(prepared.qr_data), media_type="image/png")


@router.post("/svg")
async def create_qr_svg(body: QrBillRequest):
    prepared = await _prepare(body)
    return Response(content=render_qr_svg(prepared.qr_data), media_type="image/svg+xml")


@router.post("/pdf")
async def create_qr_bill_pdf(body: QrBillRequest, language: str | None = None):
    prepared = await _prepare(body)
    filename = f"qr-bill-{body.invoice.number}.pdf"
    return Response(
        content=generate_qr_bill_pdf(prepared.payload, language=language, due_date=body.invoice.due_date),
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="{filename}"'},
    )
