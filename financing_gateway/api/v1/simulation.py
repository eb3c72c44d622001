"""POST /v1/simulation - Amortization schedule for a financing input"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException

from financing_gateway.api.v1.schemas import (
    ExtraordinaryPaymentSchema,
    FinancingInputSchema,
    InstallmentSchema,
    SimulationRequest,
    SimulationResponse,
)
from financing_gateway.api.dependencies import get_request_id
from financing_gateway.domain.amortization import run_simulation
from financing_gateway.domain.exceptions import DomainException
from financing_gateway.domain.models import CanonicalFinancingInput, ExtraordinaryPayment
from financing_gateway.domain.validation import validate_extraordinary_payments
from financing_gateway.infrastructure.observability.metrics import record_simulation, simulation_duration_histogram
from financing_gateway.infrastructure.observability.logging import log_simulation
from financing_gateway.utils.currency import format_currency

router = APIRouter()


@router.post("/simulation", response_model=SimulationResponse)
def create_simulation(request_body: SimulationRequest, request_id: str = Depends(get_request_id)):
    """
    Compute the month-by-month schedule and totals.

    Flow:
    1. Validate extraordinary payments against the term
    2. Run the amortization engine
    3. Return schedule, totals and display-formatted headline figures
    """
    start_time = time.time()

    financing = CanonicalFinancingInput(**request_body.financing.model_dump())
    payments = [
        ExtraordinaryPayment(month=p.month, amount=p.amount, effect=p.effect)
        for p in request_body.extraordinary_payments
    ]

    errors = validate_extraordinary_payments(payments, financing.term_months)
    if errors:
        logging.warning(f"Invalid extraordinary payments: {errors}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=errors)

    try:
        with simulation_duration_histogram.time():
            result = run_simulation(financing, payments, start_date=request_body.start_date)

    except DomainException as e:
        logging.warning(f"Simulation rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    # Record metrics and logs
    duration_ms = (time.time() - start_time) * 1000
    record_simulation(financing.amortization_system.value, [p.effect.value for p in payments])
    log_simulation(
        request_id,
        financing.amortization_system.value,
        result.realized_term_months,
        len(payments),
        duration_ms,
    )

    return SimulationResponse(
        financing=FinancingInputSchema.model_validate(result.financing),
        installments=[InstallmentSchema.model_validate(line) for line in result.installments],
        total_interest=result.total_interest,
        total_principal=result.total_principal,
        total_insurance=result.total_insurance,
        total_fees=result.total_fees,
        total_paid=result.total_paid,
        realized_term_months=result.realized_term_months,
        total_savings=result.total_savings,
        extraordinary_payments=[ExtraordinaryPaymentSchema.model_validate(p) for p in result.extraordinary_payments],
        first_installment=result.first_installment,
        last_installment=result.last_installment,
        formatted={
            "first_installment": format_currency(result.first_installment),
            "last_installment": format_currency(result.last_installment),
            "total_interest": format_currency(result.total_interest),
            "total_paid": format_currency(result.total_paid),
        },
    )
