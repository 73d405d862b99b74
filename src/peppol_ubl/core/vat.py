"""VAT identifier normalization and Peppol endpoint splitting."""

from .errors import MalformedPeppolIdentifierError
from .models import EndpointId

# Greece uses EL as VAT prefix instead of its ISO country code
VAT_PREFIX_OVERRIDES: dict[str, str] = {
    "GR": "EL",
}

PEPPOL_SCHEME_LENGTH = 4
PEPPOL_SEPARATOR = ":"


def _apply_prefix_override(vat_id: str) -> str:
    override = VAT_PREFIX_OVERRIDES.get(vat_id[:2])
    if override is None:
        return vat_id
    return override + vat_id[2:]


def normalize_vat_id(raw_id: str, country_code: str | None) -> str:
    """
    Rewrite a raw VAT identifier into its country-prefixed form.

    Leading digits are electronic routing scheme prefixes (e.g. "9925")
    that leaked into the tax id and are dropped. If no letter prefix
    remains, the party's country code is prepended.

    Args:
        raw_id: VAT identifier as supplied by the caller
        country_code: ISO 3166-1 alpha-2 code of the party's address

    Returns:
        Normalized identifier, e.g. ``BE0123456789`` or ``EL123456789``
    """
    vat_id = raw_id.lstrip("0123456789")
    country_code = country_code or ""

    if len(vat_id) < 2 or not ("A" <= vat_id[0] <= "Z"):
        return _apply_prefix_override(country_code + vat_id)

    return _apply_prefix_override(vat_id)


def split_peppol_id(compound: str) -> EndpointId:
    """
    Split ``"9925:BE0123456789"`` into scheme id and endpoint value.

    Raises:
        MalformedPeppolIdentifierError: If the identifier is too short or
            has no separator after the scheme id
    """
    value = compound[PEPPOL_SCHEME_LENGTH + 1:]
    if (
        len(compound) <= PEPPOL_SCHEME_LENGTH + 1
        or compound[PEPPOL_SCHEME_LENGTH] != PEPPOL_SEPARATOR
        or not value
    ):
        raise MalformedPeppolIdentifierError(compound)

    return EndpointId(scheme_id=compound[:PEPPOL_SCHEME_LENGTH], value=value)
