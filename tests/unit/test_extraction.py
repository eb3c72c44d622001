"""Unit tests for field extraction from simulation text"""

import re
import pytest
from financing_gateway.domain.extraction import (
    extract_field,
    extract_paired_rates,
    parse_document_text,
    split_lines,
)


def test_extract_field_first_matching_pattern_wins():
    """Test patterns are tried in priority order"""
    text = "Valor do imóvel: R$ 250.000,00\nvalor imovel R$ 1,00"
    patterns = [
        re.compile(r"Valor do im[óo]vel:\s*R?\$\s*([\d.,]+)"),
        re.compile(r"valor imovel[:\s]*R?\$\s*([\d.,]+)", re.IGNORECASE),
    ]

    assert extract_field(text, patterns, "Valor do imóvel") == "250.000,00"


def test_extract_field_accepts_string_patterns():
    assert extract_field("Prazo: 240 meses", [r"Prazo:\s*(\d+)\s*meses"], "Prazo") == "240"


def test_extract_field_line_scan_same_line():
    """Test fallback pulls a number from the labelled line when no pattern matches"""
    text = "Dados\nValor do imóvel ..... 180.000,00\nFim"
    assert extract_field(text, [r"nao existe (\d+)"], "valor do imóvel") == "180.000,00"


def test_extract_field_line_scan_next_line_currency():
    """Test fallback takes a currency amount from the line after the label"""
    text = "Renda Familiar\nR$ 12.500,00 (bruta)\n"
    assert extract_field(text, [], "Renda Familiar") == "12.500,00"


def test_extract_field_line_scan_next_line_percentage():
    text = "Juros Nominais\n8,1600 %\n"
    assert extract_field(text, [], "Juros Nominais") == "8,1600"


def test_extract_field_returns_none_when_exhausted():
    """Test unmatched field is a normal None outcome"""
    assert extract_field("nothing useful here", [r"Prazo:\s*(\d+)"], "Prazo") is None


def test_extract_field_pattern_without_group_is_a_miss():
    """Test a pattern with no capture group falls through to the line scan"""
    assert extract_field("Prazo: 240 meses", [r"Prazo:\s*\d+"], "Carencia") is None
    assert extract_field("Prazo: 240 meses", [r"Prazo:\s*\d+"], "Prazo") == "240"


def test_extract_field_is_deterministic(caixa_text: str):
    patterns = [r"Tarifas[:\s]*R?\$\s*([\d.,]+)"]
    results = {extract_field(caixa_text, patterns, "Tarifas") for _ in range(5)}
    assert results == {"2.500,00"}


def test_extract_paired_rates_positional():
    """Test nominal/effective rates recovered from the three-column block"""
    lines = split_lines(
        "Primeira Prestação Juros Nominais Juros Efetivos\n"
        "R$ 3.120,55 8,1600% 8,4722%\n"
    )
    assert extract_paired_rates(lines) == ("8,1600", "8,4722")


def test_extract_paired_rates_missing_header():
    lines = split_lines("Juros Nominais 8,16%\nJuros Efetivos 8,47%")
    assert extract_paired_rates(lines) == (None, None)


def test_parse_document_text_full_caixa_layout(caixa_text: str):
    """Test every field of a complete simulation document"""
    record = parse_document_text(caixa_text)

    assert record is not None
    assert record.property_value == pytest.approx(400000.0)
    assert record.max_term_months == 420
    assert record.amortization_system == "PRICE TR"
    assert record.max_financing_quota == 80
    assert record.down_payment == pytest.approx(100000.0)
    assert record.down_payment_indexed is False
    assert record.term_months == 360
    assert record.financed_amount == pytest.approx(300000.0)
    assert record.notary_expenses == pytest.approx(5000.0)
    assert record.insurance_policy == 1
    assert record.first_installment == pytest.approx(2611.09)
    assert record.nominal_rate == pytest.approx(9.0)
    assert record.effective_rate == pytest.approx(9.3807)
    assert record.upfront_insurance == 0.0
    assert record.fees == pytest.approx(2500.0)
    assert record.iof == 0.0
    assert record.principal_and_interest == pytest.approx(2413.87)
    assert record.dfi_insurance == pytest.approx(42.40)
    assert record.mip_insurance == pytest.approx(129.82)
    assert record.total_insurance == pytest.approx(172.22)
    assert record.administration_fee == pytest.approx(25.0)
    assert record.credit_risk_fee == 0.0
    assert record.operational_fee == 0.0
    assert record.total_installment == pytest.approx(2611.09)
    assert record.resource_origin == "SBPE"
    assert record.person_type == "Fisica"
    assert record.person_category == "Pessoa Física"
    assert record.financing_type == "Aquisição de Imóvel Novo"
    assert record.property_category == "Residencial"
    assert record.city == "Campo Grande"
    assert record.state == "MS"
    assert record.construction_term_months == 0
    assert record.family_income == pytest.approx(15000.0)
    assert record.participants == 1
    assert record.birth_agreement_rate == pytest.approx(100.0)
    assert record.birth_date == "15/03/1985"
    assert record.incorporate_fees is True


def test_parse_document_text_direct_rate_labels():
    """Test single-field rate patterns take priority over the paired block"""
    text = "Juros Nominais 7,6600%\nJuros Efetivos 7,9200%\n"
    record = parse_document_text(text)

    assert record.nominal_rate == pytest.approx(7.66)
    assert record.effective_rate == pytest.approx(7.92)


def test_parse_document_text_applies_corrections():
    """Test missing financed amount and term are repaired from siblings"""
    text = (
        "Valor do imóvel: R$ 500.000,00\n"
        "Valor de entrada: R$ 150.000,00\n"
        "Prazo Máximo: 420 meses\n"
        "Sistema de Amortização: SAC\n"
    )
    record = parse_document_text(text)

    assert record.financed_amount == pytest.approx(350000.0)
    assert record.term_months == 420
    assert record.amortization_system == "SAC"
    assert record.down_payment_indexed is False


def test_parse_document_text_garbage_yields_empty_record():
    """Test unrecognizable text is not an error"""
    record = parse_document_text("lorem ipsum dolor sit amet")

    assert record is not None
    assert record.property_value is None
    assert record.financed_amount is None
    assert record.nominal_rate is None


def test_parse_document_text_unexpected_failure_returns_none():
    """Test internal failures surface as None"""
    assert parse_document_text(None) is None
