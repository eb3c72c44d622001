"""Unit tests for cross-field correction rules"""

import pytest
from financing_gateway.domain.correction import (
    apply_corrections,
    default_term,
    default_total_installment,
    derive_down_payment,
    derive_financed_amount,
    normalize_system_label,
    reconcile_property_value,
)
from financing_gateway.domain.models import RawExtractedRecord


def test_financed_amount_derived_from_property_and_down():
    """Test scenario C: financed = property - down"""
    record = RawExtractedRecord(property_value=400000.0, down_payment=80000.0)

    corrected = apply_corrections(record)

    assert corrected.financed_amount == pytest.approx(320000.0)
    assert corrected.property_value == pytest.approx(400000.0)


def test_corrections_are_idempotent():
    """Test re-running the pipeline on corrected output is a no-op"""
    record = RawExtractedRecord(
        property_value=400000.0,
        down_payment=80000.0,
        first_installment=3100.0,
        max_term_months=420,
        amortization_system="SISTEMA PRICE TR",
    )

    once = apply_corrections(record)
    twice = apply_corrections(once)

    assert twice == once


def test_corrections_do_not_mutate_input():
    record = RawExtractedRecord(property_value=400000.0, down_payment=80000.0)
    apply_corrections(record)

    assert record.financed_amount is None
    assert record.down_payment_indexed is None


def test_down_payment_derived_from_property_and_financed():
    record = RawExtractedRecord(property_value=400000.0, financed_amount=300000.0)
    assert derive_down_payment(record).down_payment == pytest.approx(100000.0)


def test_derivation_rules_do_not_overwrite_present_values():
    """Test rules 1 and 2 only fire when their target is absent"""
    record = RawExtractedRecord(property_value=400000.0, financed_amount=300000.0, down_payment=90000.0)

    assert derive_financed_amount(record) is record
    assert derive_down_payment(record) is record


def test_total_installment_defaults_to_first_installment():
    record = RawExtractedRecord(first_installment=2611.09)
    assert default_total_installment(record).total_installment == pytest.approx(2611.09)


def test_term_defaults_to_max_term():
    record = RawExtractedRecord(max_term_months=420)
    assert default_term(record).term_months == 420

    explicit = RawExtractedRecord(term_months=360, max_term_months=420)
    assert default_term(explicit).term_months == 360


def test_property_value_reconciled_within_one_percent():
    """Test small drift is absorbed into the property value"""
    record = RawExtractedRecord(property_value=400000.0, financed_amount=300000.0, down_payment=99000.0)

    corrected = reconcile_property_value(record)

    assert corrected.property_value == pytest.approx(399000.0)


def test_property_value_kept_when_drift_exceeds_one_percent():
    record = RawExtractedRecord(property_value=400000.0, financed_amount=300000.0, down_payment=80000.0)

    corrected = reconcile_property_value(record)

    assert corrected.property_value == pytest.approx(400000.0)


@pytest.mark.parametrize(
    "label, expected",
    [
        ("PRICE TR", "PRICE TR"),
        ("price tr", "PRICE TR"),
        ("TABELA PRICE", "PRICE"),
        ("SAC", "SAC"),
        ("SAC TR", "SAC"),
        ("SACRE", "SAC"),
        ("MISTO", "MISTO"),
        (None, None),
    ],
)
def test_normalize_system_label(label, expected):
    """Test containment precedence PRICE+TR > PRICE > SAC"""
    assert normalize_system_label(label) == expected


def test_down_payment_indexed_defaults_to_false():
    assert apply_corrections(RawExtractedRecord()).down_payment_indexed is False
    assert apply_corrections(RawExtractedRecord(down_payment_indexed=True)).down_payment_indexed is True
