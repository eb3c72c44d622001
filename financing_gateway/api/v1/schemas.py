"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import date
from typing import Any, Dict, List, Optional

from financing_gateway.config import settings
from financing_gateway.domain.models import (
    AmortizationSystem,
    PaymentEffect,
    PersonType,
    ResourceOrigin,
)


class ExtractionRequest(BaseModel):
    """Request body for POST /v1/extraction"""

    text: str = Field(..., min_length=1, max_length=settings.max_document_chars, description="Decoded document text")


class FinancingInputSchema(BaseModel):
    """Canonical financing input (mirrors CanonicalFinancingInput)"""

    model_config = ConfigDict(from_attributes=True, allow_inf_nan=False)

    financed_amount: float = Field(..., gt=0, description="Financed amount in BRL")
    nominal_annual_rate: float = Field(..., ge=0, description="Nominal annual rate in percent")
    term_months: int = Field(..., gt=0, le=settings.max_term_months)
    amortization_system: AmortizationSystem = AmortizationSystem.PRICE

    property_value: Optional[float] = None
    appraisal_value: Optional[float] = None
    down_payment: Optional[float] = None
    effective_annual_rate: Optional[float] = None
    construction_term_months: Optional[int] = None
    max_financing_quota: Optional[int] = None

    family_income: Optional[float] = None
    participants: Optional[int] = None
    person_type: Optional[PersonType] = None
    person_category: Optional[str] = None

    resource_origin: Optional[ResourceOrigin] = None
    financing_type: Optional[str] = None
    property_category: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None

    dfi_insurance: Optional[float] = Field(None, ge=0)
    mip_insurance: Optional[float] = Field(None, ge=0)
    administration_fee: Optional[float] = Field(None, ge=0)
    credit_risk_fee: Optional[float] = Field(None, ge=0)
    operational_fee: Optional[float] = Field(None, ge=0)

    notary_expenses: Optional[float] = None
    auctioneer_expenses: Optional[float] = None
    insurance_policy: Optional[int] = None
    incorporate_fees: Optional[bool] = None

    upfront_insurance: Optional[float] = None
    fees: Optional[float] = None
    iof: Optional[float] = None


class ExtractionResponse(BaseModel):
    """Response for POST /v1/extraction"""

    record: Dict[str, Any]
    valid: bool
    missing_fields: List[str]
    financing: Optional[FinancingInputSchema] = None
    financing_errors: List[str] = []


class ExtraordinaryPaymentSchema(BaseModel):
    """Single extraordinary principal payment"""

    model_config = ConfigDict(from_attributes=True, allow_inf_nan=False)

    month: int = Field(..., gt=0)
    amount: float = Field(..., gt=0)
    effect: PaymentEffect = PaymentEffect.SHORTEN_TERM


class SimulationRequest(BaseModel):
    """Request body for POST /v1/simulation"""

    financing: FinancingInputSchema
    extraordinary_payments: List[ExtraordinaryPaymentSchema] = []
    start_date: Optional[date] = Field(None, description="Due date of the first installment")


class InstallmentSchema(BaseModel):
    """Single month in an amortization schedule"""

    model_config = ConfigDict(from_attributes=True)

    month: int
    due_date: Optional[date] = None
    opening_balance: float
    principal: float
    interest: float
    installment: float
    dfi_insurance: float
    mip_insurance: float
    administration_fee: float
    credit_risk_fee: float
    operational_fee: float
    extraordinary_amount: Optional[float] = None
    total_installment: float
    closing_balance: float


class SimulationResponse(BaseModel):
    """Response for POST /v1/simulation"""

    financing: FinancingInputSchema
    installments: List[InstallmentSchema]
    total_interest: float
    total_principal: float
    total_insurance: float
    total_fees: float
    total_paid: float
    realized_term_months: int
    total_savings: float
    extraordinary_payments: List[ExtraordinaryPaymentSchema]
    first_installment: float
    last_installment: float
    formatted: Dict[str, str]
