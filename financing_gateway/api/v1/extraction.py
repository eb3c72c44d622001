"""POST /v1/extraction - Structured record from simulation document text"""

import time
import logging
from dataclasses import asdict
from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError

from financing_gateway.api.v1.schemas import ExtractionRequest, ExtractionResponse, FinancingInputSchema
from financing_gateway.api.dependencies import get_request_id
from financing_gateway.domain.extraction import parse_document_text
from financing_gateway.domain.normalization import convert_to_canonical_input
from financing_gateway.domain.validation import missing_fields, validate_financing_input, validate_raw_record
from financing_gateway.infrastructure.observability.metrics import record_extraction
from financing_gateway.infrastructure.observability.logging import log_extraction

router = APIRouter()


@router.post("/extraction", response_model=ExtractionResponse)
def extract_document(request_body: ExtractionRequest, request_id: str = Depends(get_request_id)):
    """
    Extract and correct financing fields from decoded document text.

    Flow:
    1. Run the field extractor + cross-field corrector
    2. Validate the corrected record (structural + semantic)
    3. Convert to the canonical engine input when valid
    """
    start_time = time.time()

    record = parse_document_text(request_body.text)
    if record is None:
        record_extraction(parsed=False, valid=False)
        logging.error("Could not extract financing data", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail="Could not extract financing data from document")

    valid = validate_raw_record(record)
    missing = missing_fields(record)

    financing = None
    financing_errors: list[str] = []
    if valid:
        canonical = convert_to_canonical_input(record)
        _, financing_errors = validate_financing_input(canonical)
        try:
            financing = FinancingInputSchema.model_validate(canonical)
        except ValidationError as e:
            financing_errors.extend(
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in e.errors()
            )

    # Record metrics and logs
    duration_ms = (time.time() - start_time) * 1000
    fields = asdict(record)
    record_extraction(parsed=True, valid=valid)
    log_extraction(
        request_id,
        sum(1 for value in fields.values() if value is not None),
        valid,
        missing,
        duration_ms,
    )

    return ExtractionResponse(
        record=fields,
        valid=valid,
        missing_fields=missing,
        financing=financing,
        financing_errors=financing_errors,
    )
