"""Cliente da API Hinova SGA (autenticação em 2 etapas).

1. `POST /usuario/autenticar` com o token da associação → token do usuário
2. `POST /listar/boleto/periodo` com o token do usuário → lista de boletos

Nenhuma chamada é repetida em caso de falha.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..config import Settings, settings
from ..exceptions import HinovaAutenticacaoError, HinovaConsultaError

logger = logging.getLogger(__name__)


def mask_cpf(cpf: str) -> str:
    """Mascara o CPF para logs, mantendo os 2 últimos dígitos."""
    if len(cpf) <= 2:
        return "*" * len(cpf)
    return "*" * (len(cpf) - 2) + cpf[-2:]


class HinovaClient:
    """Chamadas à Hinova com timeout explícito por requisição."""

    def __init__(
        self,
        config: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config or settings
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.config.hinova_base_url,
            timeout=self.config.hinova_timeout,
            transport=self.transport,
        )

    @staticmethod
    def _headers(bearer: str) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Authorization": f"Bearer {bearer}",
        }

    async def autenticar(self) -> str:
        """Retorna o token de usuário (`token_usuario`)."""
        if not self.config.hinova_configurado:
            logger.error("Credenciais da Hinova não configuradas")
            raise HinovaAutenticacaoError()

        payload = {
            "usuario": self.config.hinova_usuario,
            "senha": self.config.hinova_senha,
        }
        try:
            async with self._client() as client:
                resp = await client.post(
                    "/usuario/autenticar",
                    headers=self._headers(self.config.hinova_association_token),
                    json=payload,
                )
        except httpx.HTTPError as e:
            logger.error(f"Erro de comunicação ao autenticar na Hinova: {e!r}")
            raise HinovaAutenticacaoError() from e

        if resp.status_code >= 400:
            logger.error(f"Hinova recusou autenticação ({resp.status_code}): {resp.text}")
            raise HinovaAutenticacaoError()

        try:
            data = resp.json()
        except ValueError as e:
            logger.error(f"Resposta de autenticação inválida: {resp.text}")
            raise HinovaAutenticacaoError() from e

        token = data.get("token_usuario") if isinstance(data, dict) else None
        if not token:
            logger.error("Resposta de autenticação sem token_usuario")
            raise HinovaAutenticacaoError()

        return str(token)

    async def listar_boletos_periodo(
        self,
        token_usuario: str,
        cpf: str,
        data_inicial: str,
        data_final: str,
    ) -> Any:
        """Lista boletos do associado no período (datas dd/mm/aaaa)."""
        payload = {
            "cpf_associado": cpf,
            "data_vencimento_inicial": data_inicial,
            "data_vencimento_final": data_final,
        }
        try:
            async with self._client() as client:
                resp = await client.post(
                    "/listar/boleto/periodo",
                    headers=self._headers(token_usuario),
                    json=payload,
                )
        except httpx.HTTPError as e:
            logger.error(f"Erro de comunicação ao listar boletos: {e!r}")
            raise HinovaConsultaError() from e

        if resp.status_code >= 400:
            logger.error(
                f"Hinova API Error ({resp.status_code}) para CPF {mask_cpf(cpf)}: {resp.text}"
            )
            raise HinovaConsultaError()

        try:
            return resp.json()
        except ValueError as e:
            logger.error(f"Resposta de listagem inválida: {resp.text}")
            raise HinovaConsultaError() from e
