"""Field extraction from mortgage simulation text (CAIXA Simulador Habitacional layout)"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from financing_gateway.domain.correction import apply_corrections
from financing_gateway.domain.models import RawExtractedRecord
from financing_gateway.utils.number_utils import parse_integer, parse_monetary

logger = logging.getLogger(__name__)

# A matcher receives the full text and its trimmed non-empty lines
Matcher = Callable[[str, List[str]], Optional[str]]

_NUMBER_OR_PERCENT = re.compile(r"([0-9][0-9.,]*%?)")
_CURRENCY_AMOUNT = re.compile(r"R?\$\s*([0-9][0-9.,]*)")
_PERCENT_TOKEN = re.compile(r"([0-9][0-9.,]*)\s*%")
_RATE_HEADER_LABELS = ("primeira presta", "juros nominais", "juros efetivos")
_BIRTH_AGREEMENT = re.compile(
    r"Pactua[çc][ãa]o Nascimento\s*([\d.,]+)\s*%\s*(\d{2}/\d{2}/\d{4})", re.IGNORECASE
)

_MONEY = r"R?\$\s*([\d.,]+)"


def split_lines(text: str) -> List[str]:
    """Trimmed, non-empty lines of text"""
    return [line.strip() for line in text.split("\n") if line.strip()]


def pattern_matcher(pattern: Union[str, re.Pattern[str]]) -> Matcher:
    """Match a regex against the whole text, returning its first capture group"""
    compiled = re.compile(pattern)

    def match(text: str, lines: List[str]) -> Optional[str]:
        if not compiled.groups:
            return None
        found = compiled.search(text)
        if found and found.group(1):
            return found.group(1).strip()
        return None

    return match


def line_scan_matcher(field_label: str) -> Matcher:
    """
    Fallback scan over lines containing field_label (case-insensitive).

    For each such line, in order: a number/percentage on the same line, a
    currency amount on the next line, any number/percentage on the next line.
    """
    label = field_label.lower()

    def match(text: str, lines: List[str]) -> Optional[str]:
        if not label:
            return None
        for i, line in enumerate(lines):
            if label not in line.lower():
                continue

            same_line = _NUMBER_OR_PERCENT.search(line)
            if same_line:
                return same_line.group(1)

            if i + 1 < len(lines):
                next_line = lines[i + 1]
                currency = _CURRENCY_AMOUNT.search(next_line)
                if currency:
                    return currency.group(1)
                number = _NUMBER_OR_PERCENT.search(next_line)
                if number:
                    return number.group(1)
        return None

    return match


def extract_field(
    text: str,
    patterns: Sequence[Union[str, re.Pattern[str]]],
    field_label: str,
    fallbacks: Sequence[Matcher] = (),
    lines: Optional[List[str]] = None,
) -> Optional[str]:
    """
    Return the first capture produced by the prioritized matcher chain.

    Chain: each pattern in order, then any field-specific fallbacks, then the
    line scan keyed on field_label. None is a normal outcome.
    """
    if lines is None:
        lines = split_lines(text)

    matchers: List[Matcher] = [pattern_matcher(p) for p in patterns]
    matchers.extend(fallbacks)
    matchers.append(line_scan_matcher(field_label))

    for matcher in matchers:
        value = matcher(text, lines)
        if value:
            return value
    return None


def extract_paired_rates(lines: List[str]) -> Tuple[Optional[str], Optional[str]]:
    """
    Recover (nominal, effective) rates from the three-column block:

        Primeira Prestação  Juros Nominais  Juros Efetivos
        R$ 2.611,09         9,0000%         9,3807%

    Percentage tokens on the data line are assigned positionally.
    """
    for i, line in enumerate(lines[:-1]):
        lowered = line.lower()
        if not all(label in lowered for label in _RATE_HEADER_LABELS):
            continue
        tokens = _PERCENT_TOKEN.findall(lines[i + 1])
        if tokens:
            return tokens[0], tokens[1] if len(tokens) > 1 else None
    return None, None


def paired_rate_matcher(position: int) -> Matcher:
    def match(text: str, lines: List[str]) -> Optional[str]:
        return extract_paired_rates(lines)[position]

    return match


def _parse_yes_no(value: str) -> bool:
    return value.strip().lower() == "sim"


def _clean_system_label(value: str) -> Optional[str]:
    cleaned = re.sub(r"\s+", " ", re.sub(r"[^A-Z\s]", "", value.upper())).strip()
    return cleaned or None


def _strip(value: str) -> Optional[str]:
    return value.strip() or None


@dataclass(frozen=True)
class FieldRule:
    """How one record field is located and converted"""

    name: str
    label: str
    patterns: Tuple[re.Pattern[str], ...]
    convert: Callable[[str], Any]
    fallbacks: Tuple[Matcher, ...] = ()


def _rule(
    name: str,
    label: str,
    patterns: List[str],
    convert: Callable[[str], Any],
    flags: int = re.IGNORECASE,
    fallbacks: Tuple[Matcher, ...] = (),
) -> FieldRule:
    return FieldRule(name, label, tuple(re.compile(p, flags) for p in patterns), convert, fallbacks)


FIELD_RULES: Tuple[FieldRule, ...] = (
    _rule("property_value", "Valor do imóvel", [
        rf"Valor do im[óo]vel:\s*{_MONEY}",
        rf"valor\s+im[óo]vel[:\s]*{_MONEY}",
    ], parse_monetary),
    _rule("max_term_months", "Prazo Máximo", [
        r"Prazo M[áa]ximo:\s*(\d+)\s*meses",
        r"prazo\s+m[áa]ximo[:\s]*(\d+)\s*meses",
    ], parse_integer),
    _rule("amortization_system", "Sistema de Amortização", [
        r"Sistema de Amortiza[çc][ãa]o:\s*([A-Z\s]+?)(?=\n|$)",
        r"(?i)sistema\s+de\s+amortiza[çc][ãa]o[:\s]*([a-z\s]+?)(?=\n|$)",
    ], _clean_system_label, flags=0),
    _rule("max_financing_quota", "Cota máx. financiamento", [
        r"Cota m[áa]x\.\s*financiamento:\s*(\d+)\s*%",
        r"Cota m[áa]x[.:\s]*financiamento[:\s]*(\d+)\s*%",
        r"financiamento[:\s]*(\d+)\s*%",
    ], parse_integer),
    _rule("down_payment", "Valor de entrada", [
        rf"Valor de entrada:\s*{_MONEY}",
        rf"Valor entrada[:\s]*{_MONEY}",
        rf"entrada[:\s]*{_MONEY}",
    ], parse_monetary),
    _rule("down_payment_indexed", "Entrada Atualizada", [
        r"Entrada Atualizada[:\s]*(Sim|N[ãa]o)",
    ], _parse_yes_no),
    _rule("term_months", "Prazo:", [
        r"Prazo:\s*(\d+)\s*meses",
        r"\bprazo[:\s]*(\d+)\s*meses",
    ], parse_integer),
    _rule("financed_amount", "Valor de Financiamento", [
        rf"Valor de Financiamento[\s\S]*?{_MONEY}",
        rf"Valor Financiamento[:\s]*{_MONEY}",
        rf"financiamento[:\s]*{_MONEY}",
    ], parse_monetary),
    _rule("notary_expenses", "Despesa Cartorária", [
        rf"Despesa Cartor[áa]ria\s*/\s*Leiloeiro:\s*{_MONEY}",
        rf"Despesa Cartor[áa]ria[:\s]*{_MONEY}",
        rf"despesa[:\s]*{_MONEY}",
    ], parse_monetary),
    _rule("insurance_policy", "Apólice de Seguro", [
        r"Ap[óo]lice de Seguro:\s*(\d+)",
        r"Ap[óo]lice[:\s]*(\d+)",
    ], parse_integer),
    _rule("first_installment", "Primeira Prestação", [
        rf"Primeira Presta[çc][ãa]o[\s\S]*?{_MONEY}",
        rf"presta[çc][ãa]o[:\s]*{_MONEY}",
    ], parse_monetary),
    _rule("nominal_rate", "Juros Nominais", [
        r"Juros Nominais\s*([\d.,]+)\s*%",
        r"juros nominais[:\s]*([\d.,]+)\s*%",
    ], parse_monetary, fallbacks=(paired_rate_matcher(0),)),
    _rule("effective_rate", "Juros Efetivos", [
        r"Juros Efetivos\s*([\d.,]+)\s*%",
        r"juros efetivos[:\s]*([\d.,]+)\s*%",
    ], parse_monetary, fallbacks=(paired_rate_matcher(1),)),
    _rule("upfront_insurance", "Seguro à vista", [
        rf"Seguro [àa] vista[:\s]*{_MONEY}",
        rf"seguro vista[:\s]*{_MONEY}",
    ], parse_monetary),
    _rule("fees", "Tarifas", [
        rf"Tarifas[:\s]*{_MONEY}",
    ], parse_monetary),
    _rule("iof", "IOF", [
        rf"\bIOF[:\s]*{_MONEY}",
    ], parse_monetary),
    _rule("principal_and_interest", "Amortização + Juros", [
        rf"Amortiza[çc][ãa]o\s*\+\s*Juros[:\s]*{_MONEY}",
    ], parse_monetary),
    _rule("dfi_insurance", "Seguro DFI", [
        rf"Seguro DFI[:\s]*{_MONEY}",
        rf"\bDFI[:\s]*{_MONEY}",
    ], parse_monetary),
    _rule("mip_insurance", "Seguro MIP", [
        rf"Seguro MIP[:\s]*{_MONEY}",
        rf"\bMIP[:\s]*{_MONEY}",
    ], parse_monetary),
    _rule("total_insurance", "Total Seguros", [
        rf"Total Seguros[:\s]*{_MONEY}",
    ], parse_monetary),
    _rule("administration_fee", "Taxa de administração", [
        rf"Taxa de administra[çc][ãa]o[:\s]*{_MONEY}",
        rf"taxa administra[çc][ãa]o[:\s]*{_MONEY}",
    ], parse_monetary),
    _rule("credit_risk_fee", "Taxa de risco de crédito", [
        rf"Taxa de risco de cr[ée]dito[:\s]*{_MONEY}",
        rf"taxa risco[:\s]*{_MONEY}",
    ], parse_monetary),
    _rule("operational_fee", "Taxa operacional mensal", [
        rf"Taxa operacional mensal[:\s]*{_MONEY}",
        rf"taxa operacional[:\s]*{_MONEY}",
    ], parse_monetary),
    _rule("total_installment", "TOTAL", [
        rf"Componentes da presta[çc][ãa]o[\s\S]*?\bTOTAL\s*{_MONEY}",
        rf"\bTOTAL[:\s]*{_MONEY}",
    ], parse_monetary),
    _rule("resource_origin", "Origem De Recurso", [
        r"Origem De Recurso:\s*(\w+)",
        r"origem\s+(?:de\s+)?recurso[:\s]*(\w+)",
    ], _strip),
    _rule("person_type", "Tipo De Pessoa", [
        r"Tipo De Pessoa:\s*(\w+)",
        r"tipo\s+(?:de\s+)?pessoa[:\s]*(\w+)",
    ], _strip),
    _rule("person_category", "Categoria De Pessoa", [
        r"Categoria De Pessoa:\s*([^\n]+)",
    ], _strip),
    _rule("financing_type", "Tipo De Financiamento", [
        r"Tipo De Financiamento:\s*([^\n]+)",
    ], _strip),
    _rule("property_category", "Categoria De Imóvel", [
        r"Categoria De Im[óo]vel:\s*([^\n]+)",
    ], _strip),
    _rule("city", "Cidade", [
        r"Cidade:\s*([^\n]+)",
    ], _strip),
    _rule("construction_term_months", "Prazo De Obra", [
        r"Prazo De Obra:\s*(\d+)\s*meses",
        r"prazo\s+(?:de\s+)?obra[:\s]*(\d+)\s*meses",
    ], parse_integer),
    _rule("family_income", "Renda Familiar", [
        rf"Renda Familiar:\s*{_MONEY}",
        rf"renda[:\s]*{_MONEY}",
    ], parse_monetary),
    _rule("participants", "Número De Participantes", [
        r"N[úu]mero De Participantes:\s*(\d+)",
        r"participantes[:\s]*(\d+)",
    ], parse_integer),
)


def _split_city_state(value: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """'Campo Grande - MS' -> ('Campo Grande', 'MS')"""
    if not value:
        return None, None
    city, separator, state = value.rpartition("-")
    if not separator:
        return value.strip(), None
    return city.strip() or None, state.strip() or None


def extract_fields(text: str) -> Dict[str, Any]:
    """Run every field rule over text; fields nothing matched are omitted"""
    lines = split_lines(text)
    values: Dict[str, Any] = {}

    for rule in FIELD_RULES:
        raw = extract_field(text, rule.patterns, rule.label, fallbacks=rule.fallbacks, lines=lines)
        if raw is None:
            continue
        converted = rule.convert(raw)
        if converted is not None:
            values[rule.name] = converted

    values["city"], values["state"] = _split_city_state(values.get("city"))

    birth = _BIRTH_AGREEMENT.search(text)
    if birth:
        values["birth_agreement_rate"] = parse_monetary(birth.group(1))
        values["birth_date"] = birth.group(2)

    return values


def parse_document_text(text: str) -> Optional[RawExtractedRecord]:
    """
    Main entry point: turn simulation document text into a corrected raw record.

    Unmatched fields stay None. Returns None only when extraction fails
    unexpectedly; the failure is logged.
    """
    try:
        values = extract_fields(text)
        # Not printed by the simulator; financed fees are incorporated by default
        values.setdefault("incorporate_fees", True)

        record = RawExtractedRecord(**values)
        logger.debug("Extracted %d fields from document text", len(values))
        return apply_corrections(record)

    except Exception:
        logger.exception("Failed to parse document text")
        return None
