"""Cross-field correction of extracted records"""

import logging
from dataclasses import replace
from typing import Callable, Optional, Tuple

from financing_gateway.domain.models import RawExtractedRecord

logger = logging.getLogger(__name__)

CorrectionRule = Callable[[RawExtractedRecord], RawExtractedRecord]

# Property value is reconciled to financed + down when they drift by less than this share
RECONCILE_TOLERANCE = 0.01


def derive_financed_amount(record: RawExtractedRecord) -> RawExtractedRecord:
    """financed = property - down, when only financed is missing"""
    if not record.financed_amount and record.property_value and record.down_payment:
        return replace(record, financed_amount=record.property_value - record.down_payment)
    return record


def derive_down_payment(record: RawExtractedRecord) -> RawExtractedRecord:
    """down = property - financed, when only down is missing"""
    if not record.down_payment and record.property_value and record.financed_amount:
        return replace(record, down_payment=record.property_value - record.financed_amount)
    return record


def default_total_installment(record: RawExtractedRecord) -> RawExtractedRecord:
    if not record.total_installment and record.first_installment:
        return replace(record, total_installment=record.first_installment)
    return record


def default_term(record: RawExtractedRecord) -> RawExtractedRecord:
    if not record.term_months and record.max_term_months:
        return replace(record, term_months=record.max_term_months)
    return record


def reconcile_property_value(record: RawExtractedRecord) -> RawExtractedRecord:
    """Absorb small rounding drift so property == financed + down"""
    if not (record.property_value and record.financed_amount and record.down_payment):
        return record

    total = record.financed_amount + record.down_payment
    if abs(total - record.property_value) < record.property_value * RECONCILE_TOLERANCE:
        return replace(record, property_value=total)
    return record


def normalize_system_label(label: Optional[str]) -> Optional[str]:
    """
    Canonical amortization system label by containment.

    Precedence: PRICE + TR -> "PRICE TR", PRICE -> "PRICE", SAC -> "SAC".
    Unrecognized labels come back unchanged.
    """
    if not label:
        return label
    upper = label.upper().strip()
    if "PRICE" in upper and "TR" in upper:
        return "PRICE TR"
    if "PRICE" in upper:
        return "PRICE"
    if "SAC" in upper:
        return "SAC"
    return label


def normalize_amortization_system(record: RawExtractedRecord) -> RawExtractedRecord:
    normalized = normalize_system_label(record.amortization_system)
    if normalized != record.amortization_system:
        return replace(record, amortization_system=normalized)
    return record


def default_down_payment_indexed(record: RawExtractedRecord) -> RawExtractedRecord:
    if record.down_payment_indexed is None:
        return replace(record, down_payment_indexed=False)
    return record


# Order matters: reconciliation needs the amounts derived by the first two rules
CORRECTION_RULES: Tuple[CorrectionRule, ...] = (
    derive_financed_amount,
    derive_down_payment,
    default_total_installment,
    default_term,
    reconcile_property_value,
    normalize_amortization_system,
    default_down_payment_indexed,
)


def apply_corrections(record: RawExtractedRecord) -> RawExtractedRecord:
    """
    Run every correction rule in order and return the repaired record.

    Pure: the input record is never modified. Applying the pipeline to its
    own output returns an equal record.
    """
    for rule in CORRECTION_RULES:
        corrected = rule(record)
        if corrected != record:
            logger.info("Automatic correction applied", extra={"step": "correction", "rule": rule.__name__})
        record = corrected
    return record
