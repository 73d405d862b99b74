"""Peppol BIS Billing 3.0 / UBL 2.1 document generator."""

__version__ = "0.1.0"
