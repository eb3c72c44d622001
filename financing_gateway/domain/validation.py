"""Structural and semantic checks over extracted records and engine inputs"""

import logging
from collections import Counter
from typing import List, Sequence, Tuple

from financing_gateway.domain.models import (
    CanonicalFinancingInput,
    ExtraordinaryPayment,
    RawExtractedRecord,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "property_value",
    "financed_amount",
    "down_payment",
    "term_months",
    "first_installment",
    "nominal_rate",
    "effective_rate",
)

# Max |property - (financed + down)| as a share of property
CONSISTENCY_TOLERANCE = 0.01

# Financed + down may exceed the property value by at most this share
MAX_TOTAL_OVER_PROPERTY = 1.1


def _is_missing(value) -> bool:
    return value is None or (isinstance(value, (int, float)) and value <= 0)


def missing_fields(record: RawExtractedRecord) -> List[str]:
    """Names of required fields that are absent, zero or negative"""
    return [name for name in REQUIRED_FIELDS if _is_missing(getattr(record, name))]


def validate_structural(record: RawExtractedRecord) -> bool:
    """Every required field present and positive"""
    missing = missing_fields(record)
    if missing:
        logger.warning("Required field missing or invalid", extra={"step": "validation", "field": missing[0]})
        return False
    return True


def validate_semantic(record: RawExtractedRecord) -> bool:
    """
    Property value must match financed + down within 1%.

    Meant for corrected records; records missing one of the three amounts
    are left to the structural check.
    """
    if not (record.property_value and record.financed_amount and record.down_payment):
        return True

    difference = abs(record.property_value - (record.financed_amount + record.down_payment))
    if difference > record.property_value * CONSISTENCY_TOLERANCE:
        logger.warning("Property value inconsistent with financed amount plus down payment", extra={"step": "validation"})
        return False
    return True


def validate_raw_record(record: RawExtractedRecord) -> bool:
    return validate_structural(record) and validate_semantic(record)


def validate_financing_input(financing: CanonicalFinancingInput) -> Tuple[bool, List[str]]:
    """
    Check a canonical input before simulating.

    Returns: (valid, human-readable reasons)
    """
    errors: List[str] = []

    if _is_missing(financing.property_value):
        errors.append("Property value is invalid")
    if _is_missing(financing.financed_amount):
        errors.append("Financed amount is invalid")
    if _is_missing(financing.term_months):
        errors.append("Term is invalid")
    if financing.nominal_annual_rate is None or financing.nominal_annual_rate < 0:
        errors.append("Nominal interest rate is invalid")

    # Logical consistency
    if financing.financed_amount and financing.property_value and financing.financed_amount > financing.property_value:
        errors.append("Financed amount cannot exceed the property value")

    if financing.down_payment and financing.financed_amount and financing.property_value:
        total = financing.down_payment + financing.financed_amount
        if total > financing.property_value * MAX_TOTAL_OVER_PROPERTY:
            errors.append("Down payment plus financed amount is inconsistent with the property value")

    return len(errors) == 0, errors


def validate_extraordinary_payments(payments: Sequence[ExtraordinaryPayment], term_months: int) -> List[str]:
    """Reasons the payment set cannot be applied to a schedule of term_months"""
    errors: List[str] = []

    for payment in payments:
        if payment.month < 1:
            errors.append(f"Extraordinary payment month must be positive (got {payment.month})")
        elif payment.month > term_months:
            errors.append(f"Extraordinary payment month {payment.month} is beyond the {term_months}-month term")
        if payment.amount <= 0:
            errors.append(f"Extraordinary payment for month {payment.month} must have a positive amount")

    counts = Counter(p.month for p in payments)
    for month, count in sorted(counts.items()):
        if count > 1:
            errors.append(f"More than one extraordinary payment scheduled for month {month}")

    return errors
