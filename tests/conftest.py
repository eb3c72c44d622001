"""Pytest fixtures for testing"""

import pytest
from fastapi.testclient import TestClient
from financing_gateway.api.main import create_app
from financing_gateway.domain.models import AmortizationSystem, CanonicalFinancingInput


CAIXA_SIMULATION_TEXT = """\
SIMULADOR HABITACIONAL CAIXA
Simulação nº 0001234567
Valor do imóvel: R$ 400.000,00
Prazo Máximo: 420 meses
Sistema de Amortização: PRICE TR
Cota máx. financiamento: 80%
Valor de entrada: R$ 100.000,00
Entrada Atualizada: Nao
Prazo: 360 meses
Valor de Financiamento
R$ 300.000,00
Despesa Cartorária/Leiloeiro: R$ 5.000,00
Apólice de Seguro: 1
Primeira Prestação Juros Nominais Juros Efetivos
R$ 2.611,09 9,0000% 9,3807%
Taxas à vista
Seguro à vista R$ 0,00
Tarifas R$ 2.500,00
IOF R$ 0,00
Componentes da prestação
Amortização + Juros R$ 2.413,87
Seguro DFI R$ 42,40
Seguro MIP R$ 129,82
Total Seguros R$ 172,22
Taxa de administração R$ 25,00
Taxa de risco de crédito R$ 0,00
Taxa operacional mensal R$ 0,00
TOTAL R$ 2.611,09
Resumo
Origem De Recurso: SBPE
Tipo De Pessoa: Fisica
Categoria De Pessoa: Pessoa Física
Tipo De Financiamento: Aquisição de Imóvel Novo
Categoria De Imóvel: Residencial
Cidade: Campo Grande - MS
Prazo De Obra: 0 Meses
Renda Familiar: R$ 15.000,00
Número De Participantes: 1
Pactuação Nascimento 100.00% 15/03/1985
"""


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client"""
    return TestClient(create_app())


@pytest.fixture
def caixa_text() -> str:
    """Full simulation document as produced by the PDF text decoder"""
    return CAIXA_SIMULATION_TEXT


@pytest.fixture
def price_financing() -> CanonicalFinancingInput:
    """Scenario A: 300k over 360 months at 9% a.a., PRICE"""
    return CanonicalFinancingInput(
        financed_amount=300000.0,
        nominal_annual_rate=9.0,
        term_months=360,
        amortization_system=AmortizationSystem.PRICE,
        property_value=400000.0,
        down_payment=100000.0,
    )


@pytest.fixture
def sac_financing(price_financing: CanonicalFinancingInput) -> CanonicalFinancingInput:
    """Scenario B: same inputs, SAC"""
    return CanonicalFinancingInput(
        financed_amount=price_financing.financed_amount,
        nominal_annual_rate=price_financing.nominal_annual_rate,
        term_months=price_financing.term_months,
        amortization_system=AmortizationSystem.SAC,
        property_value=price_financing.property_value,
        down_payment=price_financing.down_payment,
    )
