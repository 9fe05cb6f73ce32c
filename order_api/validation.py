"""
Order API Request Validation
============================

What:  Declarative per-field rules checked before any database access.
How:   A rule set is a sequence of `FieldRule`s. `validate()` runs every
       applicable rule against the raw JSON body and collects the failures,
       in rule order. `require_valid()` turns a non-empty result into a
       `ValidationError` (HTTP 400).
Who:   Called by the order route handlers before the pool is touched.

Checks operate on raw JSON values. Numbers are judged by their decimal
string form, so ``1001`` and ``"1001"`` are both numeric while ``true`` and
``null`` are not.
"""

import math
import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable, List, Mapping, Optional, Sequence

from order_api.exceptions import ValidationError
from order_api.schemas.order import OrderAmountPatch, OrderPayload, Violation

_NUMERIC_RE = re.compile(r"^[+-]?([0-9]*[.])?[0-9]+$")
_FLOAT_RE = re.compile(r"^[+-]?(?:[0-9]+)?(?:\.[0-9]*)?(?:[eE][+-]?[0-9]+)?$")

# Signed 32-bit range of the `orders.ord_no` INTEGER column.
ORDER_NUMBER_MIN = -(2 ** 31)
ORDER_NUMBER_MAX = 2 ** 31 - 1


def _as_text(value: Any) -> Optional[str]:
    """Decimal string form of a JSON scalar, or None for anything else."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return value
    return None


# ══════════════════════════════════════════════════════════════════════════
# Checks
# ══════════════════════════════════════════════════════════════════════════


def is_numeric(value: Any) -> bool:
    """Optionally signed digits with at most one decimal point."""
    text = _as_text(value)
    return text is not None and bool(_NUMERIC_RE.match(text))


def is_float(value: Any) -> bool:
    """Anything parseable as a finite decimal, exponent allowed."""
    text = _as_text(value)
    if text is None or not _FLOAT_RE.match(text):
        return False
    try:
        return math.isfinite(float(text))
    except ValueError:
        return False


def parse_iso_date(value: str) -> date:
    """Calendar date of an ISO-8601 date or date-time string."""
    return datetime.fromisoformat(value).date()


def is_iso8601_date(value: Any) -> bool:
    if not isinstance(value, str) or not value:
        return False
    try:
        parse_iso_date(value)
    except ValueError:
        return False
    return True


def fits_order_number(value: Any) -> bool:
    """
    Whether a numeric value, once rounded, fits the `ord_no` column.

    Values that are not numeric pass; `is_numeric` reports those.
    """
    if not is_numeric(value):
        return True
    return ORDER_NUMBER_MIN <= to_order_number(value) <= ORDER_NUMBER_MAX


def is_not_empty(value: Any) -> bool:
    text = _as_text(value)
    return text is not None and text != ""


# ══════════════════════════════════════════════════════════════════════════
# Rules
# ══════════════════════════════════════════════════════════════════════════


class FieldRule:
    """
    One named check bound to one body field.

    An optional rule only runs when the field is present in the body;
    a present ``null`` still counts as present.
    """

    def __init__(
        self,
        field: str,
        check: Callable[[Any], bool],
        message: str,
        optional: bool = False,
    ):
        self.field = field
        self.check = check
        self.message = message
        self.optional = optional

    def evaluate(self, payload: Mapping[str, Any]) -> Optional[Violation]:
        if self.field not in payload:
            if self.optional:
                return None
            return Violation(field=self.field, message=self.message)
        if self.check(payload[self.field]):
            return None
        return Violation(field=self.field, message=self.message)

    def __repr__(self) -> str:
        return f"<FieldRule({self.field}, {self.check.__name__}, optional={self.optional})>"


ORDER_RULES = (
    FieldRule("ord_no", is_numeric, "Order number must be numeric"),
    FieldRule("ord_no", fits_order_number, "Order number is out of range", optional=True),
    FieldRule("purch_amt", is_float, "Purchase amount must be a valid number"),
    FieldRule("ord_date", is_iso8601_date, "Order date must be a valid date"),
    FieldRule("customer_id", is_not_empty, "Customer ID is required"),
)

PARTIAL_UPDATE_RULES = (
    FieldRule("purch_amt", is_float, "Purchase amount must be a valid number", optional=True),
)


def validate(payload: Mapping[str, Any], rules: Sequence[FieldRule]) -> List[Violation]:
    """Every violation of `rules` by `payload`; an empty list means valid."""
    violations = []
    for rule in rules:
        violation = rule.evaluate(payload)
        if violation is not None:
            violations.append(violation)
    return violations


def require_valid(payload: Mapping[str, Any], rules: Sequence[FieldRule]) -> None:
    violations = validate(payload, rules)
    if violations:
        raise ValidationError(violations)


# ══════════════════════════════════════════════════════════════════════════
# Normalization (only called on bodies that passed their rules)
# ══════════════════════════════════════════════════════════════════════════


def to_order_number(value: Any) -> int:
    """Integer order number; a fractional numeric rounds half-up."""
    return int(Decimal(_as_text(value)).to_integral_value(rounding=ROUND_HALF_UP))


def to_amount(value: Any) -> float:
    return float(_as_text(value))


def order_payload(body: Mapping[str, Any]) -> OrderPayload:
    """Validate a full order body and return its normalized values."""
    require_valid(body, ORDER_RULES)
    return OrderPayload(
        ord_no=to_order_number(body["ord_no"]),
        purch_amt=to_amount(body["purch_amt"]),
        ord_date=parse_iso_date(body["ord_date"]),
        customer_id=_as_text(body["customer_id"]),
    )


def amount_patch(body: Mapping[str, Any]) -> OrderAmountPatch:
    """Validate a partial-update body and return its normalized values."""
    require_valid(body, PARTIAL_UPDATE_RULES)
    if "purch_amt" not in body:
        return OrderAmountPatch()
    return OrderAmountPatch(purch_amt=to_amount(body["purch_amt"]))
