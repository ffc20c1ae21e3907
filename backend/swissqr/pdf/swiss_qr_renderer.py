"""
Swiss QR Bill Renderer - SIX Interbank Clearing Compliant

Turns a validated Swiss Payment Code string into a scannable image:

- PNG pixel data (``qrcode``) for screens and e-mail
- SVG / ReportLab drawing for vector output
- a one-page A4 PDF with the receipt and payment part at the bottom

All outputs use error correction level M, a one-module quiet zone and the
Swiss cross overlay. Physical print size of the symbol is 46 x 46 mm.

References:
- SIX Implementation Guidelines v2.2
- SIX Swiss QR-Bill Implementation Guidelines
"""

import base64
from datetime import date
from io import BytesIO

import qrcode
from PIL import ImageDraw
from reportlab.graphics import renderSVG
from reportlab.graphics.barcode import qr
from reportlab.graphics.shapes import Drawing, Group, Rect
from reportlab.lib import colors
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas as pdf_canvas

from swissqr.core.billing_reference import format_reference
from swissqr.core.config import settings
from swissqr.core.iban import format_iban
from swissqr.core.payload_validation import validate_qr_payload
from swissqr.core.qr_payload import serialize_qr_payload
from swissqr.schemas.qr_bill import QrPayload


# ============================================================================
# LAYOUT CONSTANTS (SIX Implementation Guidelines)
# ============================================================================

# Page dimensions (A4)
A4_WIDTH = 210 * mm
A4_HEIGHT = 297 * mm

# Payment section dimensions (A6 landscape at bottom of A4)
PAYMENT_SECTION_WIDTH = 210 * mm
PAYMENT_SECTION_HEIGHT = 105 * mm

# QR Code dimensions
QR_SIZE = 46 * mm

# Swiss Cross dimensions (7 mm centered in the 46 mm QR)
SWISS_CROSS_RATIO = 7 / 46

# Receipt section (left part)
RECEIPT_WIDTH = 62 * mm
RECEIPT_MARGIN_LEFT = 5 * mm

# Payment section (right part)
PAYMENT_MARGIN_LEFT = RECEIPT_WIDTH + 5 * mm

# Vertical positions (from bottom of payment section)
TITLE_Y = 95 * mm

# Font sizes (SIX style guide)
FONT_TITLE = ("Helvetica-Bold", 11)
FONT_LABEL_RECEIPT = ("Helvetica-Bold", 6)
FONT_TEXT_RECEIPT = ("Helvetica", 8)
FONT_LABEL_PAYMENT = ("Helvetica-Bold", 8)
FONT_TEXT_PAYMENT = ("Helvetica", 10)

# Scissors line
SCISSORS_LINE_Y = PAYMENT_SECTION_HEIGHT
SCISSORS_DASH_PATTERN = [2, 2]

# Swiss cross geometry on a 19-unit grid: (x, y, width, height)
_CROSS_BARS = (
    (8.3, 4, 3.3, 11),
    (4.4, 7.9, 11, 3.3),
)


LABELS = {
    "de": {
        "receipt": "Empfangsschein",
        "payment_part": "Zahlteil",
        "account": "Konto / Zahlbar an",
        "reference": "Referenz",
        "additional_info": "Zusätzliche Informationen",
        "due_date": "Fälligkeitsdatum",
        "payable_by": "Zahlbar durch",
        "currency": "Währung",
        "amount": "Betrag",
        "acceptance_point": "Annahmestelle",
    },
    "fr": {
        "receipt": "Récépissé",
        "payment_part": "Section paiement",
        "account": "Compte / Payable à",
        "reference": "Référence",
        "additional_info": "Informations supplémentaires",
        "due_date": "Date d'échéance",
        "payable_by": "Payable par",
        "currency": "Monnaie",
        "amount": "Montant",
        "acceptance_point": "Point de dépôt",
    },
    "it": {
        "receipt": "Ricevuta",
        "payment_part": "Sezione pagamento",
        "account": "Conto / Pagabile a",
        "reference": "Riferimento",
        "additional_info": "Informazioni supplementari",
        "due_date": "Data di scadenza",
        "payable_by": "Pagabile da",
        "currency": "Valuta",
        "amount": "Importo",
        "acceptance_point": "Punto di accettazione",
    },
    "en": {
        "receipt": "Receipt",
        "payment_part": "Payment part",
        "account": "Account / Payable to",
        "reference": "Reference",
        "additional_info": "Additional information",
        "due_date": "Due date",
        "payable_by": "Payable by",
        "currency": "Currency",
        "amount": "Amount",
        "acceptance_point": "Acceptance point",
    },
}


# ============================================================================
# QR CODE GENERATION
# ============================================================================

def build_qr_drawing(qr_data: str, size: float = QR_SIZE) -> Drawing:
    """
    Generate a QR code drawing with the Swiss Cross overlay.

    Args:
        qr_data: The QR code payload (Swiss Payment Code)
        size: Size of the QR code in points

    Returns:
        ReportLab Drawing with QR code and Swiss Cross
    """
    qr_code = qr.QrCodeWidget(
        qr_data,
        barLevel="M",
        barBorder=settings.QR_BORDER,
    )
    bounds = qr_code.getBounds()
    width = bounds[2] - bounds[0]
    height = bounds[3] - bounds[1]

    drawing = Drawing(size, size)
    drawing.add(
        Group(
            qr_code,
            transform=[size / width, 0, 0, size / height, -bounds[0] * size / width, -bounds[1] * size / height],
        )
    )

    cross_size = size * SWISS_CROSS_RATIO
    cross_scale = cross_size / 19
    cross_origin = (size - cross_size) / 2

    drawing.add(
        Rect(
            cross_origin,
            cross_origin,
            cross_size,
            cross_size,
            fillColor=colors.black,
            strokeColor=None,
        )
    )
    for x, y, w, h in _CROSS_BARS:
        drawing.add(
            Rect(
                cross_origin + x * cross_scale,
                cross_origin + y * cross_scale,
                w * cross_scale,
                h * cross_scale,
                fillColor=colors.white,
                strokeColor=None,
            )
        )

    return drawing


def render_qr_svg(qr_data: str) -> bytes:
    return renderSVG.drawToString(build_qr_drawing(qr_data)).encode("utf-8")


def render_qr_png(qr_data: str) -> bytes:
    """Rasterize the payload as a PNG with the Swiss cross in the center."""
    code = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=settings.QR_BOX_SIZE,
        border=settings.QR_BORDER,
    )
    code.add_data(qr_data)
    code.make(fit=True)
    image = code.make_image(fill_color="black", back_color="white").get_image().convert("RGB")

    side = image.size[0]
    cross_size = side * SWISS_CROSS_RATIO
    cross_scale = cross_size / 19
    origin = (side - cross_size) / 2

    draw = ImageDraw.Draw(image)
    draw.rectangle(
        [origin, origin, origin + cross_size, origin + cross_size],
        fill="black",
    )
    for x, y, w, h in _CROSS_BARS:
        left = origin + x * cross_scale
        # ReportLab geometry is bottom-up, PIL is top-down
        top = origin + cross_size - (y + h) * cross_scale
        draw.rectangle(
            [left, top, left + w * cross_scale, top + h * cross_scale],
            fill="white",
        )

    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def render_qr_data_url(qr_data: str) -> str:
    encoded = base64.b64encode(render_qr_png(qr_data)).decode("ascii")
    return f"data:image/png;base64,{encoded}"


# ============================================================================
# TEXT RENDERING HELPERS
# ============================================================================

def _draw_label_value(
    canvas,
    x: float,
    y: float,
    label: str,
    value: str,
    label_font: tuple,
    value_font: tuple,
    line_height: float = 3 * mm,
):
    canvas.setFont(*label_font)
    canvas.drawString(x, y, label)

    canvas.setFont(*value_font)
    canvas.drawString(x, y - line_height, value)


def _draw_multiline_text(
    canvas,
    x: float,
    y: float,
    lines: list[str],
    font: tuple,
    line_height: float = 3 * mm,
) -> float:
    canvas.setFont(*font)
    current_y = y
    for line in lines:
        if line:
            canvas.drawString(x, current_y, line)
            current_y -= line_height
    return current_y


def _address_lines(name: str, street: str, building_number: str, postal_code: str, town: str) -> list[str]:
    return [
        name,
        " ".join(part for part in (street, building_number) if part),
        " ".join(part for part in (postal_code, town) if part),
    ]


# ============================================================================
# MAIN RENDERER
# ============================================================================

def render_swiss_qr_bill(
    canvas,
    payload: QrPayload,
    y_position: float = 0,
    *,
    language: str | None = None,
    due_date: date | None = None,
) -> None:
    """
    Render a complete Swiss QR Bill at the specified position.

    Draws the receipt (left), the payment part (right) with the QR code and
    Swiss cross, and the scissors line. The payload is validated first; an
    invalid payload raises before anything is drawn.

    Args:
        canvas: ReportLab Canvas object
        payload: Assembled QR-Bill payload
        y_position: Y coordinate for bottom of payment section (default: 0 = bottom of page)
        language: Language for labels (de, fr, it, en)
        due_date: Shown under the additional information when given
    """
    qr_data = serialize_qr_payload(payload)
    validate_qr_payload(qr_data, payload.currency)

    lang = LABELS.get(language or settings.QR_BILL_LANGUAGE, LABELS["de"])

    creditor_lines = [format_iban(payload.account)] + _address_lines(
        payload.creditor_name,
        payload.creditor_street,
        payload.creditor_building_number,
        payload.creditor_postal_code,
        payload.creditor_town,
    )
    debtor_lines = []
    if payload.debtor_name:
        debtor_lines = _address_lines(
            payload.debtor_name,
            payload.debtor_street,
            payload.debtor_building_number,
            payload.debtor_postal_code,
            payload.debtor_town,
        )
    reference = format_reference(payload.reference)

    # ========================================================================
    # SCISSORS LINE
    # ========================================================================
    canvas.saveState()
    canvas.setDash(SCISSORS_DASH_PATTERN)
    canvas.setStrokeColor(colors.black)
    canvas.setLineWidth(0.6)
    canvas.line(0, y_position + SCISSORS_LINE_Y, PAYMENT_SECTION_WIDTH, y_position + SCISSORS_LINE_Y)
    canvas.line(RECEIPT_WIDTH, y_position, RECEIPT_WIDTH, y_position + SCISSORS_LINE_Y)
    canvas.restoreState()

    # ========================================================================
    # RECEIPT SECTION (LEFT)
    # ========================================================================
    receipt_x = RECEIPT_MARGIN_LEFT
    receipt_y = y_position + TITLE_Y

    canvas.setFont(*FONT_TITLE)
    canvas.drawString(receipt_x, receipt_y, lang["receipt"])

    y = receipt_y - 7 * mm
    canvas.setFont(*FONT_LABEL_RECEIPT)
    canvas.drawString(receipt_x, y, lang["account"])
    y = _draw_multiline_text(canvas, receipt_x, y - 3 * mm, creditor_lines, FONT_TEXT_RECEIPT)

    if reference:
        y -= 2 * mm
        _draw_label_value(
            canvas, receipt_x, y,
            lang["reference"],
            reference,
            FONT_LABEL_RECEIPT,
            FONT_TEXT_RECEIPT,
        )
        y -= 6 * mm

    if debtor_lines:
        y -= 2 * mm
        canvas.setFont(*FONT_LABEL_RECEIPT)
        canvas.drawString(receipt_x, y, lang["payable_by"])
        _draw_multiline_text(canvas, receipt_x, y - 3 * mm, debtor_lines, FONT_TEXT_RECEIPT)

    y = y_position + 30 * mm
    _draw_label_value(
        canvas, receipt_x, y,
        lang["currency"],
        payload.currency,
        FONT_LABEL_RECEIPT,
        FONT_TEXT_RECEIPT,
    )
    _draw_label_value(
        canvas, receipt_x + 15 * mm, y,
        lang["amount"],
        payload.amount,
        FONT_LABEL_RECEIPT,
        FONT_TEXT_RECEIPT,
    )

    canvas.setFont(*FONT_LABEL_RECEIPT)
    canvas.drawRightString(RECEIPT_WIDTH - 5 * mm, y_position + 18 * mm, lang["acceptance_point"])

    # ========================================================================
    # PAYMENT SECTION (RIGHT)
    # ========================================================================
    payment_x = PAYMENT_MARGIN_LEFT
    payment_y = y_position + TITLE_Y

    canvas.setFont(*FONT_TITLE)
    canvas.drawString(payment_x, payment_y, lang["payment_part"])

    qr_drawing = build_qr_drawing(qr_data, QR_SIZE)
    qr_drawing.drawOn(canvas, payment_x, y_position + 37 * mm)

    y = y_position + 30 * mm
    _draw_label_value(
        canvas, payment_x, y,
        lang["currency"],
        payload.currency,
        FONT_LABEL_PAYMENT,
        FONT_TEXT_PAYMENT,
        line_height=4 * mm,
    )
    _draw_label_value(
        canvas, payment_x + 18 * mm, y,
        lang["amount"],
        payload.amount,
        FONT_LABEL_PAYMENT,
        FONT_TEXT_PAYMENT,
        line_height=4 * mm,
    )

    info_x = payment_x + QR_SIZE + 5 * mm
    y = payment_y

    canvas.setFont(*FONT_LABEL_PAYMENT)
    canvas.drawString(info_x, y, lang["account"])
    y = _draw_multiline_text(
        canvas, info_x, y - 4 * mm,
        creditor_lines,
        FONT_TEXT_PAYMENT,
        line_height=4 * mm,
    )

    if reference:
        y -= 2 * mm
        _draw_label_value(
            canvas, info_x, y,
            lang["reference"],
            reference,
            FONT_LABEL_PAYMENT,
            FONT_TEXT_PAYMENT,
            line_height=4 * mm,
        )
        y -= 8 * mm

    additional_lines = [payload.unstructured_message]
    if due_date is not None:
        additional_lines.append(f"{lang['due_date']}: {due_date:%d.%m.%Y}")
    if any(additional_lines):
        y -= 2 * mm
        canvas.setFont(*FONT_LABEL_PAYMENT)
        canvas.drawString(info_x, y, lang["additional_info"])
        y = _draw_multiline_text(
            canvas, info_x, y - 4 * mm,
            additional_lines,
            FONT_TEXT_PAYMENT,
            line_height=4 * mm,
        )

    if debtor_lines:
        y -= 2 * mm
        canvas.setFont(*FONT_LABEL_PAYMENT)
        canvas.drawString(info_x, y, lang["payable_by"])
        _draw_multiline_text(
            canvas, info_x, y - 4 * mm,
            debtor_lines,
            FONT_TEXT_PAYMENT,
            line_height=4 * mm,
        )


def generate_qr_bill_pdf(
    payload: QrPayload,
    *,
    language: str | None = None,
    due_date: date | None = None,
) -> bytes:
    """Generate a standalone A4 page with the QR bill at the bottom."""
    buffer = BytesIO()
    c = pdf_canvas.Canvas(buffer, pagesize=(A4_WIDTH, A4_HEIGHT))
    render_swiss_qr_bill(c, payload, y_position=0, language=language, due_date=due_date)
    c.showPage()
    c.save()
    return buffer.getvalue()
