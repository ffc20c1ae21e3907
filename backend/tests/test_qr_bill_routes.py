import pytest
from fastapi.testclient import TestClient

from swissqr.core.config import settings
from swissqr.main import app

CREDITOR = {
    "name": "Muster AG",
    "address": "Bahnhofstrasse 12\n8001 Zürich",
    "qr_iban": "CH93 0076 2011 6238 5295 7",
}
INVOICE = {
    "number": "INV-2024-001",
    "total": "100.00",
    "currency": "CHF",
    "customer_name": "Hans Meier",
    "reference_date": "2024-03-15",
}


@pytest.fixture
def client():
    return TestClient(app)


def test_health(client):
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_payload_endpoint(client):
    response = client.post(
        "/api/v1/qr-bill/payload",
        json={"creditor": CREDITOR, "invoice": INVOICE, "debtor_address": "Seestrasse 5\n8002 Zürich"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["lines"] == 33
    assert body["reference_type"] == "SCOR"
    assert body["reference"] == "RF78INV2024001"
    assert body["amount"] == "100.00"
    assert body["currency"] == "CHF"
    assert body["payload"].split("\n")[20] == "S"


def test_payload_endpoint_uses_configured_creditor(client, mocker):
    mocker.patch.object(settings, "BILLING_CREDITOR_NAME", CREDITOR["name"])
    mocker.patch.object(settings, "BILLING_CREDITOR_ADDRESS", CREDITOR["address"])
    mocker.patch.object(settings, "BILLING_CREDITOR_IBAN", "CH44 3050 0123 4567 8901 2")

    response = client.post("/api/v1/qr-bill/payload", json={"invoice": {**INVOICE, "total": 0}})
    assert response.status_code == 200
    body = response.json()
    assert body["reference_type"] == "QRR"
    assert len(body["reference"]) == 27
    assert body["amount"] == ""


def test_missing_creditor_configuration(client):
    response = client.post("/api/v1/qr-bill/payload", json={"invoice": INVOICE})
    assert response.status_code == 503


def test_invalid_iban(client):
    creditor = {**CREDITOR, "qr_iban": "CH00 1234"}
    response = client.post("/api/v1/qr-bill/payload", json={"creditor": creditor, "invoice": INVOICE})
    assert response.status_code == 422
    assert response.json()["detail"] == "Invalid Swiss IBAN format. Must be 21 characters starting with CH."


def test_image_endpoint(client):
    response = client.post("/api/v1/qr-bill/image", json={"creditor": CREDITOR, "invoice": INVOICE})
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert response.content.startswith(b"\x89PNG")


def test_svg_endpoint(client):
    response = client.post("/api/v1/qr-bill/svg", json={"creditor": CREDITOR, "invoice": INVOICE})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("image/svg+xml")


def test_pdf_endpoint(client):
    response = client.post(
        "/api/v1/qr-bill/pdf?language=fr",
        json={"creditor": CREDITOR, "invoice": INVOICE},
    )
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert 'filename="qr-bill-INV-2024-001.pdf"' in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")


def test_no_image_for_invalid_request(client):
    response = client.post(
        "/api/v1/qr-bill/image",
        json={"creditor": {**CREDITOR, "name": ""}, "invoice": INVOICE},
    )
    assert response.status_code == 503
    assert response.headers["content-type"] == "application/json"


def test_oversized_amount_is_a_classified_error(client):
    invoice = {**INVOICE, "total": "1" * 30}
    response = client.post("/api/v1/qr-bill/payload", json={"creditor": CREDITOR, "invoice": invoice})
    assert response.status_code == 500
    assert "exceeds the maximum" in response.json()["detail"]


def test_pdf_endpoint_with_due_date(client):
    invoice = {**INVOICE, "due_date": "2024-04-14"}
    response = client.post("/api/v1/qr-bill/pdf", json={"creditor": CREDITOR, "invoice": invoice})
    assert response.status_code == 200
    assert response.content.startswith(b"%PDF")
