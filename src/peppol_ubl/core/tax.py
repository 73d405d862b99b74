"""Tax category resolution and per-rate aggregation."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, NamedTuple

from .models import InvoiceLine, LineAmounts, ResolvedTaxCategory, TaxSubtotal, TaxTotals
from .money import ZERO, round_amount

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY_CODE = "S"
DEFAULT_CATEGORY_NAME = "Standard rated"

INTRA_COMMUNITY_CODE = "K"
INTRA_COMMUNITY_EXEMPTION_CODE = "VATEX-EU-IC"
INTRA_COMMUNITY_EXEMPTION_REASON = "Intra-community supply"


@dataclass(frozen=True)
class CategoryPolicy:
    """Overrides applied to every line of a tax category."""

    forced_rate: Decimal | None = None
    default_exemption_code: str | None = None
    default_exemption_reason: str | None = None

    @property
    def requires_exemption(self) -> bool:
        return self.default_exemption_code is not None


# Categories not listed here pass their stated rate through unchanged.
CATEGORY_POLICIES: dict[str, CategoryPolicy] = {
    INTRA_COMMUNITY_CODE: CategoryPolicy(
        forced_rate=Decimal("0"),
        default_exemption_code=INTRA_COMMUNITY_EXEMPTION_CODE,
        default_exemption_reason=INTRA_COMMUNITY_EXEMPTION_REASON,
    ),
}


class TaxKey(NamedTuple):
    """Subtotal grouping key on the exact effective rate."""

    rate: Decimal
    category_code: str

    @classmethod
    def for_category(cls, category: ResolvedTaxCategory) -> "TaxKey":
        return cls(rate=category.rate.normalize(), category_code=category.code)


def resolve_tax_category(line: InvoiceLine) -> ResolvedTaxCategory:
    """
    Resolve the effective category, rate and exemption of a line.

    Both the line builder and the aggregator go through this function so
    they always observe the same effective rate.
    """
    code = line.tax_category_id or DEFAULT_CATEGORY_CODE
    name = line.tax_category_name or DEFAULT_CATEGORY_NAME

    policy = CATEGORY_POLICIES.get(code)
    if policy is None:
        return ResolvedTaxCategory(code=code, name=name, rate=line.tax_percentage)

    rate = line.tax_percentage if policy.forced_rate is None else policy.forced_rate
    if not policy.requires_exemption:
        return ResolvedTaxCategory(code=code, name=name, rate=rate)

    return ResolvedTaxCategory(
        code=code,
        name=name,
        rate=rate,
        exemption_reason_code=line.tax_exemption_code or policy.default_exemption_code,
        exemption_reason=line.tax_exemption_reason or policy.default_exemption_reason,
    )


def compute_line_amounts(line: InvoiceLine, category: ResolvedTaxCategory) -> LineAmounts:
    """Compute the rounded taxable and tax amount of one line."""
    taxable = round_amount(line.quantity * line.price)
    tax = round_amount(taxable * category.rate / Decimal("100"))
    return LineAmounts(taxable=taxable, tax=tax)


@dataclass
class _Accumulator:
    category: ResolvedTaxCategory
    taxable: Decimal = ZERO
    tax: Decimal = ZERO


def aggregate_taxes(lines: Iterable[InvoiceLine]) -> TaxTotals:
    """
    Group lines by (rate, category) and sum their rounded amounts.

    The first line seen for a key fixes the subtotal's display name and
    exemption fields. Subtotals are ordered by category code, then rate.
    """
    buckets: dict[TaxKey, _Accumulator] = {}
    line_extension = ZERO

    for line in lines:
        category = resolve_tax_category(line)
        amounts = compute_line_amounts(line, category)
        key = TaxKey.for_category(category)

        bucket = buckets.get(key)
        if bucket is None:
            bucket = buckets[key] = _Accumulator(category=category)
        bucket.taxable = round_amount(bucket.taxable + amounts.taxable)
        bucket.tax = round_amount(bucket.tax + amounts.tax)
        line_extension = round_amount(line_extension + amounts.taxable)

    subtotals = []
    for key in sorted(buckets, key=lambda k: (k.category_code, k.rate)):
        bucket = buckets[key]
        logger.debug(
            f"Tax subtotal {key.category_code} {bucket.category.rate}%: "
            f"taxable={bucket.taxable} tax={bucket.tax}"
        )
        subtotals.append(
            TaxSubtotal(
                taxable_amount=bucket.taxable,
                tax_amount=bucket.tax,
                category=bucket.category,
            )
        )

    tax_total = round_amount(sum((s.tax_amount for s in subtotals), ZERO))

    return TaxTotals(
        line_extension_amount=line_extension,
        tax_amount=tax_total,
        subtotals=subtotals,
    )
