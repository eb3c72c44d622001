"""Amortization schedule generation (PRICE, PRICE TR and SAC)"""

import logging
from datetime import date
from typing import Dict, List, Optional, Sequence

from financing_gateway.domain.exceptions import DuplicateExtraordinaryPaymentError, MissingFinancingDataError
from financing_gateway.domain.models import (
    AmortizationSystem,
    CanonicalFinancingInput,
    ExtraordinaryPayment,
    InstallmentLine,
    PaymentEffect,
    SimulationResult,
)
from financing_gateway.utils.date_utils import add_months

logger = logging.getLogger(__name__)

# Balances below this many currency units are treated as paid off
BALANCE_EPSILON = 0.01


def calculate_price_installment(principal: float, monthly_rate: float, term_months: int) -> float:
    """
    Fixed installment of the French (PRICE) system.

    P * r * (1+r)^n / ((1+r)^n - 1), or P / n when r == 0.
    """
    if monthly_rate == 0:
        return principal / term_months

    growth = (1 + monthly_rate) ** term_months
    return principal * monthly_rate * growth / (growth - 1)


def _index_payments(payments: Sequence[ExtraordinaryPayment]) -> Dict[int, ExtraordinaryPayment]:
    by_month: Dict[int, ExtraordinaryPayment] = {}
    for payment in payments:
        if payment.month in by_month:
            raise DuplicateExtraordinaryPaymentError(payment.month)
        by_month[payment.month] = payment
    return by_month


def run_simulation(
    financing: CanonicalFinancingInput,
    extraordinary_payments: Sequence[ExtraordinaryPayment] = (),
    start_date: Optional[date] = None,
) -> SimulationResult:
    """
    Compute the full month-by-month schedule and its totals.

    Requirements:
    - monthly rate = nominal annual rate / 100 / 12 (no compounding conversion)
    - PRICE / PRICE TR: fixed base installment, principal = installment - interest
    - SAC: constant principal = financed / term, installment = principal + interest
    - Extraordinary payments reduce the balance in their month only; the
      scheduled split and the PRICE installment are never recomputed
    - Closing balance below 0.01 is clamped to zero
    - Exactly term_months lines; the realized term is the input term

    Args:
        financing: Canonical input; add-ons default to zero when absent
        extraordinary_payments: At most one per month
        start_date: Due date of month 1; lines carry no due date when omitted

    Raises:
        MissingFinancingDataError: financed amount, term or nominal rate missing
        DuplicateExtraordinaryPaymentError: two payments target the same month
    """
    if not financing.financed_amount or not financing.term_months or financing.nominal_annual_rate is None:
        raise MissingFinancingDataError("Financed amount, term and nominal rate are required")
    if financing.financed_amount < 0 or financing.term_months < 0:
        raise MissingFinancingDataError("Financed amount and term must be positive")

    principal_amount = financing.financed_amount
    term = financing.term_months
    monthly_rate = financing.nominal_annual_rate / 100 / 12
    payments_by_month = _index_payments(extraordinary_payments)

    # Monthly add-ons
    dfi = financing.dfi_insurance or 0.0
    mip = financing.mip_insurance or 0.0
    administration = financing.administration_fee or 0.0
    credit_risk = financing.credit_risk_fee or 0.0
    operational = financing.operational_fee or 0.0
    add_ons = dfi + mip + administration + credit_risk + operational

    is_sac = financing.amortization_system == AmortizationSystem.SAC
    price_installment = None if is_sac else calculate_price_installment(principal_amount, monthly_rate, term)
    sac_principal = principal_amount / term

    balance = principal_amount
    lines: List[InstallmentLine] = []

    for month in range(1, term + 1):
        opening_balance = balance
        interest = opening_balance * monthly_rate

        if is_sac:
            principal = sac_principal
            installment = principal + interest
        else:
            installment = price_installment
            principal = installment - interest

        extraordinary = 0.0
        payment = payments_by_month.get(month)
        if payment:
            extraordinary = payment.amount
            if payment.effect == PaymentEffect.SHORTEN_TERM:
                logger.warning(
                    "Term shortening is not applied; schedule keeps the original term",
                    extra={"step": "simulation", "month": month},
                )

        balance = opening_balance - extraordinary - principal
        if balance < BALANCE_EPSILON:
            balance = 0.0

        lines.append(
            InstallmentLine(
                month=month,
                due_date=add_months(start_date, month - 1) if start_date else None,
                opening_balance=opening_balance,
                principal=principal,
                interest=interest,
                installment=installment,
                dfi_insurance=dfi,
                mip_insurance=mip,
                administration_fee=administration,
                credit_risk_fee=credit_risk,
                operational_fee=operational,
                total_installment=installment + add_ons + extraordinary,
                closing_balance=balance,
                extraordinary_amount=extraordinary if extraordinary > 0 else None,
            )
        )

    return SimulationResult(
        financing=financing,
        installments=lines,
        total_interest=sum(line.interest for line in lines),
        total_principal=sum(line.principal for line in lines),
        total_insurance=sum(line.insurance_total for line in lines),
        total_fees=sum(line.fees_total for line in lines),
        total_paid=sum(line.total_installment for line in lines),
        realized_term_months=term,
        # Proxy figure: raw sum of payments, not interest avoided
        total_savings=sum(p.amount for p in extraordinary_payments),
        extraordinary_payments=tuple(extraordinary_payments),
    )
