"""Domain models - pure Python dataclasses representing financing entities"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional, Tuple


class AmortizationSystem(str, Enum):
    """Amortization regimes supported by the engine"""

    PRICE = "PRICE"
    PRICE_TR = "PRICE TR"
    SAC = "SAC"


class PaymentEffect(str, Enum):
    """Requested effect of an extraordinary payment"""

    SHORTEN_TERM = "shorten_term"
    REDUCE_INSTALLMENT = "reduce_installment"


class PersonType(str, Enum):
    FISICA = "Fisica"
    JURIDICA = "Juridica"


class ResourceOrigin(str, Enum):
    SBPE = "SBPE"
    FGTS = "FGTS"


@dataclass(frozen=True)
class RawExtractedRecord:
    """
    Fields recovered from a simulation document.

    Every field is optional: None means the extractor found nothing for it.
    Money values are in BRL, rates are percentages (9.0 == 9% a.a.).
    """

    # Main figures
    property_value: Optional[float] = None
    max_term_months: Optional[int] = None
    amortization_system: Optional[str] = None
    max_financing_quota: Optional[int] = None  # % of the property value
    down_payment: Optional[float] = None
    down_payment_indexed: Optional[bool] = None
    term_months: Optional[int] = None
    financed_amount: Optional[float] = None
    notary_expenses: Optional[float] = None
    insurance_policy: Optional[int] = None
    incorporate_fees: Optional[bool] = None

    # First installment
    first_installment: Optional[float] = None
    nominal_rate: Optional[float] = None
    effective_rate: Optional[float] = None

    # Upfront charges
    upfront_insurance: Optional[float] = None
    fees: Optional[float] = None
    iof: Optional[float] = None

    # Installment components
    principal_and_interest: Optional[float] = None
    dfi_insurance: Optional[float] = None
    mip_insurance: Optional[float] = None
    total_insurance: Optional[float] = None
    administration_fee: Optional[float] = None
    credit_risk_fee: Optional[float] = None
    operational_fee: Optional[float] = None
    total_installment: Optional[float] = None

    # Summary
    resource_origin: Optional[str] = None
    person_type: Optional[str] = None
    person_category: Optional[str] = None
    financing_type: Optional[str] = None
    property_category: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    construction_term_months: Optional[int] = None
    family_income: Optional[float] = None
    participants: Optional[int] = None
    birth_agreement_rate: Optional[float] = None
    birth_date: Optional[str] = None  # dd/mm/yyyy as printed


@dataclass(frozen=True)
class CanonicalFinancingInput:
    """Typed financing input consumed by the amortization engine"""

    financed_amount: Optional[float]
    nominal_annual_rate: Optional[float]
    term_months: Optional[int]
    amortization_system: AmortizationSystem = AmortizationSystem.PRICE

    property_value: Optional[float] = None
    appraisal_value: Optional[float] = None
    down_payment: Optional[float] = None
    effective_annual_rate: Optional[float] = None
    construction_term_months: Optional[int] = None
    max_financing_quota: Optional[int] = None

    # Borrower
    family_income: Optional[float] = None
    participants: Optional[int] = None
    person_type: Optional[PersonType] = None
    person_category: Optional[str] = None

    # Financing
    resource_origin: Optional[ResourceOrigin] = None
    financing_type: Optional[str] = None
    property_category: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None

    # Monthly add-ons
    dfi_insurance: Optional[float] = None
    mip_insurance: Optional[float] = None
    administration_fee: Optional[float] = None
    credit_risk_fee: Optional[float] = None
    operational_fee: Optional[float] = None

    # Expenses
    notary_expenses: Optional[float] = None
    auctioneer_expenses: Optional[float] = None
    insurance_policy: Optional[int] = None
    incorporate_fees: Optional[bool] = None

    # Upfront charges
    upfront_insurance: Optional[float] = None
    fees: Optional[float] = None
    iof: Optional[float] = None


@dataclass(frozen=True)
class ExtraordinaryPayment:
    """Out-of-schedule principal reduction applied in a given month"""

    month: int
    amount: float
    effect: PaymentEffect = PaymentEffect.SHORTEN_TERM


@dataclass
class InstallmentLine:
    """Single month of an amortization schedule"""

    month: int
    due_date: Optional[date]
    opening_balance: float
    principal: float
    interest: float
    installment: float  # principal + interest
    dfi_insurance: float
    mip_insurance: float
    administration_fee: float
    credit_risk_fee: float
    operational_fee: float
    total_installment: float
    closing_balance: float
    extraordinary_amount: Optional[float] = None

    @property
    def insurance_total(self) -> float:
        return self.dfi_insurance + self.mip_insurance

    @property
    def fees_total(self) -> float:
        return self.administration_fee + self.credit_risk_fee + self.operational_fee


@dataclass
class SimulationResult:
    """Full schedule plus aggregates for one financing input"""

    financing: CanonicalFinancingInput
    installments: List[InstallmentLine]
    total_interest: float
    total_principal: float
    total_insurance: float
    total_fees: float
    total_paid: float
    realized_term_months: int
    total_savings: float
    extraordinary_payments: Tuple[ExtraordinaryPayment, ...] = field(default_factory=tuple)

    @property
    def first_installment(self) -> float:
        return self.installments[0].total_installment if self.installments else 0.0

    @property
    def last_installment(self) -> float:
        return self.installments[-1].total_installment if self.installments else 0.0
