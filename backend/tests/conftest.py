"""Configuração de fixtures para testes."""

from typing import Any, Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.main import app
from app.routers.boletos import get_hinova_client
from app.services.hinova import HinovaClient
from enhancer.config import EnhancerSettings


Handler = Callable[[httpx.Request], httpx.Response]


class FakeHinova:
    """Simula a API da Hinova para o httpx.MockTransport."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.autenticar: Handler = lambda req: httpx.Response(200, json={"token_usuario": "T1"})
        self.listar: Handler = lambda req: httpx.Response(200, json=[])

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path.endswith("/usuario/autenticar"):
            return self.autenticar(request)
        if request.url.path.endswith("/listar/boleto/periodo"):
            return self.listar(request)
        return httpx.Response(404, json={"error": "rota desconhecida"})

    @property
    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def hinova_settings() -> Settings:
    """Configurações com credenciais fictícias da Hinova."""
    return Settings(
        hinova_base_url="https://hinova.test/api/sga/v2",
        hinova_association_token="token-associacao",
        hinova_usuario="usuario-teste",
        hinova_senha="senha-teste",
        hinova_timeout=5.0,
    )


@pytest.fixture
def fake_hinova() -> FakeHinova:
    return FakeHinova()


@pytest.fixture
def hinova_client(hinova_settings, fake_hinova) -> HinovaClient:
    return HinovaClient(hinova_settings, transport=fake_hinova.transport())


@pytest.fixture(scope="function")
def client(hinova_client):
    """Cria um cliente de teste com a Hinova simulada."""
    app.dependency_overrides[get_hinova_client] = lambda: hinova_client
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def sample_boleto_hinova() -> dict[str, Any]:
    """Registro bruto de boleto como retornado pela Hinova."""
    return {
        "codigo_boleto": 77,
        "nosso_numero": "000123",
        "situacao_boleto": "ABERTO",
        "mes_referente": "10/2026",
        "linha_digitavel": "Não foi possível gerar a linha digitável",
        "pix": {"copia_cola": "00020126580014br.gov.bcb.pix"},
        "veiculo": [
            {
                "marca": "VW",
                "modelo": "Gol",
                "ano_modelo": "2020",
                "placa": "ABC1D23",
                "tipo_veiculo": "Carro",
            }
        ],
    }


@pytest.fixture
def enhancer_settings() -> EnhancerSettings:
    """Configurações do enhancer com tempos curtos para os testes."""
    return EnhancerSettings(
        proxy_base_url="http://proxy.test",
        debounce=0.01,
        atrasos_fallback=[],
        intervalo_verificacao=0.0,
        duracao_confirmacao=0.01,
    )
