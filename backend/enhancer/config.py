"""Configuração do enhancer de boletos (pydantic-settings, prefixo ENHANCER_)."""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class EnhancerSettings(BaseSettings):
    """Configurações do enhancer carregadas de variáveis de ambiente."""

    model_config = SettingsConfigDict(
        env_prefix="ENHANCER_",
        case_sensitive=False,
        extra="ignore",
    )

    # Proxy de boletos
    proxy_base_url: str = "http://localhost:3000"
    proxy_path: str = "/api/jrpv/boletos/consultar"
    timeout: float = 20.0  # seconds

    # Agendamento
    debounce: float = 0.3  # seconds
    atrasos_fallback: List[float] = [1.0]
    intervalo_verificacao: float = 0.0  # 0 desliga a verificação periódica

    # Contrato com o frontend
    seletor_card: str = '[class*="bg-white"][class*="rounded"]'
    seletor_cpf: str = 'input[type="text"]'
    seletor_botao_acao: str = 'button[class*="bg-blue-600"]'
    textos_secao_linha: List[str] = [
        "Linha Digitavel para Pagamento",
        "Linha digitavel nao disponivel",
    ]

    # Copiar para a área de transferência
    duracao_confirmacao: float = 2.0  # seconds


@lru_cache
def get_enhancer_settings() -> EnhancerSettings:
    """Retorna instância cacheada das configurações."""
    return EnhancerSettings()
