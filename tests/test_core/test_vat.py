"""Tests for VAT normalization and Peppol identifier splitting."""

import pytest

from peppol_ubl.core.errors import MalformedPeppolIdentifierError
from peppol_ubl.core.vat import normalize_vat_id, split_peppol_id


class TestNormalizeVatId:
    """Test cases for normalize_vat_id."""

    def test_routing_scheme_prefix_removed(self):
        """Test that a leaked scheme id is stripped."""
        assert normalize_vat_id("9925BE0123456789", "BE") == "BE0123456789"

    def test_prefixed_id_kept(self):
        assert normalize_vat_id("DE123456789", "BE") == "DE123456789"

    def test_greek_prefix_rewritten(self):
        assert normalize_vat_id("GR123456789", "GR") == "EL123456789"

    def test_lowercase_gets_country_prefix(self):
        """Test that a non-uppercase first char is treated as missing prefix."""
        assert normalize_vat_id("be0123", "BE") == "BEbe0123"

    def test_short_remainder_gets_country_prefix(self):
        assert normalize_vat_id("99X", "NL") == "NLX"

    def test_digits_only_leaves_country_code(self):
        assert normalize_vat_id("0123456789", "BE") == "BE"

    def test_country_code_gr_prepended_as_el(self):
        assert normalize_vat_id("123456789", "GR") == "EL"

    def test_missing_country_code(self):
        assert normalize_vat_id("12", None) == ""

    @pytest.mark.parametrize(
        "raw_id,country",
        [
            ("9925BE0123456789", "BE"),
            ("GR123456789", "GR"),
            ("123456789", "GR"),
            ("x12", "FR"),
            ("", "DE"),
            ("NL123456789B01", "NL"),
        ],
    )
    def test_idempotent(self, raw_id, country):
        """Test that normalizing twice changes nothing."""
        once = normalize_vat_id(raw_id, country)
        assert normalize_vat_id(once, country) == once


class TestSplitPeppolId:
    """Test cases for split_peppol_id."""

    def test_valid_identifier(self):
        endpoint = split_peppol_id("9925:BE0123456789")

        assert endpoint.scheme_id == "9925"
        assert endpoint.value == "BE0123456789"

    def test_value_may_contain_separator(self):
        endpoint = split_peppol_id("0088:1234:5678")

        assert endpoint.scheme_id == "0088"
        assert endpoint.value == "1234:5678"

    @pytest.mark.parametrize("compound", ["", "9925", "9925:", "9925BE0123", "99:BE012345"])
    def test_malformed_identifier_raises(self, compound):
        with pytest.raises(MalformedPeppolIdentifierError) as exc_info:
            split_peppol_id(compound)

        assert exc_info.value.identifier == compound
        assert "malformed Peppol identifier" in str(exc_info.value)

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            split_peppol_id("bad")
