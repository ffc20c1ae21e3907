"""
Generate a sample Swiss QR Bill for visual inspection and scanning tests.

Writes a PDF page and a PNG symbol next to the backend directory.
"""

import asyncio
import sys
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path

# Add backend to path
backend_path = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(backend_path))

from swissqr.pdf.swiss_qr_renderer import generate_qr_bill_pdf, render_qr_png
from swissqr.schemas.qr_bill import CreditorProfile, Invoice
from swissqr.services.collaborators import StaticCreditorProfileSource, StaticDebtorAddressSource
from swissqr.services.qr_bill import prepare_qr_bill


def main():
    qr_iban = "--qr-iban" in sys.argv
    creditor = CreditorProfile(
        name="Muster AG",
        address="Bahnhofstrasse 12\n8001 Zürich",
        qr_iban="CH44 3050 0123 4567 8901 2" if qr_iban else "CH93 0076 2011 6238 5295 7",
    )
    invoice = Invoice(
        number="INV-2024-001",
        total=Decimal("100.00"),
        customer_name="Hans Meier",
        reference_date=date.today(),
        due_date=date.today() + timedelta(days=30),
    )

    prepared = asyncio.run(
        prepare_qr_bill(
            invoice,
            creditor_source=StaticCreditorProfileSource(creditor),
            debtor_source=StaticDebtorAddressSource("Seestrasse 5\n8002 Zürich"),
        )
    )

    pdf_path = backend_path / "test_qr_bill.pdf"
    png_path = backend_path / "test_qr_bill.png"
    pdf_path.write_bytes(generate_qr_bill_pdf(prepared.payload, due_date=invoice.due_date))
    png_path.write_bytes(render_qr_png(prepared.qr_data))

    print(f"Reference: {prepared.payload.reference_type.value} {prepared.payload.reference}")
    print(f"[SUCCESS] PDF generated: {pdf_path}")
    print(f"[SUCCESS] PNG generated: {png_path}")


if __name__ == "__main__":
    main()
