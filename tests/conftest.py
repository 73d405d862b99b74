"""Pytest configuration and fixtures."""

import pytest
from decimal import Decimal
from datetime import date

from peppol_ubl.config import Settings
from peppol_ubl.core.models import (
    Address,
    CreditNote,
    Invoice,
    InvoiceLine,
    Party,
)


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment."""
    return Settings(_env_file=None)


@pytest.fixture
def supplier() -> Party:
    return Party(
        name="Acme Belgium",
        registration_name="Acme Belgium BV",
        vat_id="BE0123456789",
        peppol_id="9925:BE0123456789",
        address=Address(
            street_name="Rue de la Loi 16",
            city_name="Brussels",
            postal_zone="1000",
            country_code="BE",
        ),
    )


@pytest.fixture
def customer() -> Party:
    return Party(
        name="Kunde GmbH",
        vat_id="9930DE123456789",
        peppol_id="9930:DE123456789",
        address=Address(
            street_name="Unter den Linden 1",
            city_name="Berlin",
            postal_zone="10117",
            country_code="DE",
        ),
    )


@pytest.fixture
def sample_lines() -> list[InvoiceLine]:
    """Two standard rated lines at 21% and 6%."""
    return [
        InvoiceLine(
            name="Product Alpha",
            description="Widgets",
            quantity=Decimal("10"),
            price=Decimal("100.00"),
            tax_percentage=Decimal("21"),
        ),
        InvoiceLine(
            name="Service Beta",
            quantity=Decimal("5"),
            price=Decimal("50.00"),
            tax_percentage=Decimal("6"),
        ),
    ]


@pytest.fixture
def sample_invoice(supplier, customer, sample_lines) -> Invoice:
    """Create a sample invoice for testing."""
    return Invoice(
        id="INV-2024-001",
        supplier=supplier,
        customer=customer,
        iban="BE68539007547034",
        bic="GEBABEBB",
        note="Net 30",
        lines=sample_lines,
    )


@pytest.fixture
def sample_credit_note(supplier, customer, sample_lines) -> CreditNote:
    """Create a sample credit note for testing."""
    return CreditNote(
        id="CN-2024-001",
        supplier=supplier,
        customer=customer,
        iban="BE68539007547034",
        lines=sample_lines,
    )


@pytest.fixture
def intra_community_invoice(supplier, customer) -> Invoice:
    """Invoice with one intra-community supply line."""
    return Invoice(
        id="INV-2024-IC",
        supplier=supplier,
        customer=customer,
        delivery_address=Address(city_name="Berlin", country_code="DE"),
        actual_delivery_date=date(2024, 1, 10),
        iban="BE68539007547034",
        lines=[
            InvoiceLine(
                name="Machine",
                quantity=Decimal("1"),
                price=Decimal("2500.00"),
                tax_percentage=Decimal("19"),
                tax_category_id="K",
                tax_category_name="Intra-community",
            ),
        ],
    )
