"""
Data sources consulted while preparing a QR bill.

The core never talks to storage directly: it receives a creditor profile and
an optional debtor address from these sources.
"""

import asyncio
import logging
from typing import Optional, Protocol

from swissqr.core.address import parse_address
from swissqr.core.config import settings
from swissqr.core.errors import MissingCreditorConfig
from swissqr.db.session import get_db_connection
from swissqr.schemas.qr_bill import Address, CreditorProfile

logger = logging.getLogger(__name__)


class CreditorProfileSource(Protocol):
    async def get(self) -> CreditorProfile:
        ...


class DebtorAddressSource(Protocol):
    async def find(self, customer_name: str) -> Optional[Address]:
        ...


class StaticCreditorProfileSource:
    def __init__(self, profile: CreditorProfile):
        self.profile = profile

    async def get(self) -> CreditorProfile:
        return self.profile


class SettingsCreditorProfileSource:
    """Creditor profile taken from the BILLING_CREDITOR_* settings."""

    async def get(self) -> CreditorProfile:
        name = settings.BILLING_CREDITOR_NAME
        address = settings.BILLING_CREDITOR_ADDRESS
        iban = settings.BILLING_CREDITOR_IBAN
        if not (name or address or iban):
            raise MissingCreditorConfig("No company settings found")
        return CreditorProfile(name=name or "", address=address or "", qr_iban=iban or "")


class StaticDebtorAddressSource:
    def __init__(self, address: str | None):
        self.address = address

    async def find(self, customer_name: str) -> Optional[Address]:
        if not (self.address or "").strip():
            return None
        return parse_address(self.address)


class PostgresDebtorAddressSource:
    """Looks up the stored freeform address of a customer by name."""

    def __init__(self, database_url: str | None = None):
        self.database_url = database_url

    def _lookup(self, customer_name: str) -> str | None:
        with get_db_connection(self.database_url) as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT address
                    FROM customers
                    WHERE name = %s
                    LIMIT 1
                    """,
                    (customer_name,),
                )
                row = cur.fetchone()
        if not row:
            return None
        return row[0]

    async def find(self, customer_name: str) -> Optional[Address]:
        address = await asyncio.to_thread(self._lookup, customer_name)
        if not (address or "").strip():
            return None
        logger.debug(f"Customer address found for {customer_name!r}")
        return parse_address(address)
