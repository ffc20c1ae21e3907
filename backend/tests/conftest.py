from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from swissqr.core.config import settings
from swissqr.schemas.qr_bill import CreditorProfile, Invoice

STANDARD_IBAN = "CH93 0076 2011 6238 5295 7"
QR_IBAN = "CH44 3050 0123 4567 8901 2"


@pytest.fixture(autouse=True)
def isolated_settings(mocker):
    """Keep tests independent from any .env or environment configuration."""
    mocker.patch.object(settings, "DATABASE_URL", None)
    mocker.patch.object(settings, "BILLING_CREDITOR_NAME", None)
    mocker.patch.object(settings, "BILLING_CREDITOR_ADDRESS", None)
    mocker.patch.object(settings, "BILLING_CREDITOR_IBAN", None)
    mocker.patch.object(settings, "QR_DEFAULT_CURRENCY", "CHF")
    mocker.patch.object(settings, "QR_MESSAGE_TEMPLATE", "Rechnung {number}")
    mocker.patch.object(settings, "QR_BORDER", 1)
    mocker.patch.object(settings, "QR_BOX_SIZE", 10)


@pytest.fixture
def creditor():
    return CreditorProfile(
        name="Muster AG",
        address="Bahnhofstrasse 12\n8001 Zürich",
        qr_iban=STANDARD_IBAN,
    )


@pytest.fixture
def qr_creditor(creditor):
    return creditor.model_copy(update={"qr_iban": QR_IBAN})


@pytest.fixture
def invoice():
    return Invoice(
        number="INV-2024-001",
        total=Decimal("100.00"),
        currency="CHF",
        customer_name="Hans Meier",
        reference_date=date(2024, 3, 15),
    )


@pytest.fixture
def mock_db_connection(mocker):
    """
    Mock the database connection context manager.
    Usage:
        def test_something(mock_db_connection):
            mock_cursor = mock_db_connection
            mock_cursor.fetchone.return_value = (...)
    """
    mock_conn = MagicMock()
    mock_cursor = MagicMock()

    mock_conn.__enter__.return_value = mock_conn
    mock_conn.__exit__.return_value = None
    mock_conn.cursor.return_value = mock_cursor
    mock_cursor.__enter__.return_value = mock_cursor
    mock_cursor.__exit__.return_value = None

    mocker.patch("swissqr.services.collaborators.get_db_connection", return_value=mock_conn)

    return mock_cursor
