"""Schemas Pydantic para validação e serialização."""

import re
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


# === Enums ===


class SituacaoBoleto(str, Enum):
    """Situações de boleto relevantes retornadas pela Hinova."""

    ABERTO = "ABERTO"
    BAIXADO = "BAIXADO"
    CANCELADO = "CANCELADO"


# === Validators ===


DATA_BR_PATTERN = re.compile(r"^\d{2}/\d{2}/\d{4}$")


def only_digits(text: str) -> str:
    """Remove tudo que não for dígito."""
    return re.sub(r"\D", "", text or "")


# === Request Schemas ===


class ConsultaBoletosRequest(BaseModel):
    """Request de consulta de boletos por CPF."""

    model_config = ConfigDict(extra="ignore")

    cpf: str | None = Field(None, description="CPF do associado (com ou sem máscara)")
    cpf_associado: str | None = Field(None, description="Nome alternativo para o CPF")
    data_vencimento_inicial: str | None = Field(None, description="Início do período (dd/mm/aaaa)")
    data_vencimento_final: str | None = Field(None, description="Fim do período (dd/mm/aaaa)")

    @field_validator("cpf", "cpf_associado", mode="before")
    @classmethod
    def coerce_cpf(cls, v: Any) -> Any:
        """Aceita CPF numérico vindo de clientes JSON."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("data_vencimento_inicial", "data_vencimento_final")
    @classmethod
    def validate_data(cls, v: str | None) -> str | None:
        """Valida formato dd/mm/aaaa; string vazia vale como ausente."""
        if v is None:
            return None
        v = v.strip()
        if not v:
            return None
        if not DATA_BR_PATTERN.match(v):
            raise ValueError("Data deve estar no formato dd/mm/aaaa")
        try:
            datetime.strptime(v, "%d/%m/%Y")
        except ValueError:
            raise ValueError(f"Data inexistente: {v}")
        return v

    def get_cpf(self) -> str | None:
        """Retorna o CPF apenas com dígitos, preferindo o campo `cpf`."""
        raw = self.cpf or self.cpf_associado
        if not raw:
            return None
        return only_digits(raw) or None


# === Boleto Schemas ===


class DadosPagamento(BaseModel):
    """Dados de pagamento já validados para o frontend."""

    linha_digitavel: str | None = None
    codigo_barras: str | None = None


# === Response Schemas ===


class ConsultaBoletosResponse(BaseModel):
    """Response de sucesso da consulta de boletos.

    `data` é a lista normalizada; quando a Hinova devolve algo que não é
    lista, o corpo é repassado como veio.
    """

    success: bool = True
    data: list[dict[str, Any]] | Any


class ErrorResponse(BaseModel):
    """Envelope de erro uniforme."""

    success: bool = False
    error: str


# === Health Check ===


class HealthResponse(BaseModel):
    """Response do health check."""

    status: str
    hinova_configurado: bool
    version: str = "1.0.0"
