"""Mapping of corrected raw records into the canonical engine input"""

import math
import unicodedata
from typing import Optional

from financing_gateway.domain.correction import normalize_system_label
from financing_gateway.domain.models import (
    AmortizationSystem,
    CanonicalFinancingInput,
    PersonType,
    RawExtractedRecord,
    ResourceOrigin,
)


def _finite(value: Optional[float]) -> Optional[float]:
    if value is None or not math.isfinite(value):
        return None
    return float(value)


def _fold(value: str) -> str:
    """Upper-case and strip accents ("Física" -> "FISICA")"""
    decomposed = unicodedata.normalize("NFKD", value)
    return "".join(c for c in decomposed if not unicodedata.combining(c)).upper().strip()


def normalize_amortization_system(label: Optional[str]) -> AmortizationSystem:
    """Map a free-form label to the enum; unrecognized or missing labels default to PRICE"""
    normalized = normalize_system_label(label)
    for system in AmortizationSystem:
        if normalized == system.value:
            return system
    return AmortizationSystem.PRICE


def normalize_person_type(label: Optional[str]) -> Optional[PersonType]:
    if not label:
        return None
    folded = _fold(label)
    if "JURIDIC" in folded:
        return PersonType.JURIDICA
    if "FISIC" in folded:
        return PersonType.FISICA
    return None


def normalize_resource_origin(label: Optional[str]) -> Optional[ResourceOrigin]:
    if not label:
        return None
    folded = _fold(label)
    if "SBPE" in folded:
        return ResourceOrigin.SBPE
    if "FGTS" in folded:
        return ResourceOrigin.FGTS
    return None


def convert_to_canonical_input(record: RawExtractedRecord) -> CanonicalFinancingInput:
    """
    Build the engine input from a corrected raw record.

    Defaults:
    - amortization system: PRICE when the label is missing or unrecognized
    - person type / resource origin: None when unrecognized
    - appraisal value: the property value (the simulator prints no separate appraisal)
    - auctioneer expenses: 0 (printed together with notary expenses)
    """
    return CanonicalFinancingInput(
        financed_amount=_finite(record.financed_amount),
        nominal_annual_rate=_finite(record.nominal_rate),
        term_months=record.term_months,
        amortization_system=normalize_amortization_system(record.amortization_system),
        property_value=_finite(record.property_value),
        appraisal_value=_finite(record.property_value),
        down_payment=_finite(record.down_payment),
        effective_annual_rate=_finite(record.effective_rate),
        construction_term_months=record.construction_term_months,
        max_financing_quota=record.max_financing_quota,
        family_income=_finite(record.family_income),
        participants=record.participants,
        person_type=normalize_person_type(record.person_type),
        person_category=record.person_category,
        resource_origin=normalize_resource_origin(record.resource_origin),
        financing_type=record.financing_type,
        property_category=record.property_category,
        city=record.city,
        state=record.state,
        dfi_insurance=_finite(record.dfi_insurance),
        mip_insurance=_finite(record.mip_insurance),
        administration_fee=_finite(record.administration_fee),
        credit_risk_fee=_finite(record.credit_risk_fee),
        operational_fee=_finite(record.operational_fee),
        notary_expenses=_finite(record.notary_expenses),
        auctioneer_expenses=0.0,
        insurance_policy=record.insurance_policy,
        incorporate_fees=record.incorporate_fees,
        upfront_insurance=_finite(record.upfront_insurance),
        fees=_finite(record.fees),
        iof=_finite(record.iof),
    )
