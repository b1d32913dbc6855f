"""Cliente HTTP do proxy de boletos."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .config import EnhancerSettings, get_enhancer_settings

logger = logging.getLogger(__name__)


class ProxyError(Exception):
    """Erro ao consultar o proxy de boletos."""
    pass


class ProxyClient:
    """Consulta `POST /api/jrpv/boletos/consultar` e devolve a lista de boletos."""

    def __init__(
        self,
        config: EnhancerSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config or get_enhancer_settings()
        self.transport = transport

    async def consultar(self, cpf: str) -> list[dict[str, Any]]:
        try:
            async with httpx.AsyncClient(
                base_url=self.config.proxy_base_url,
                timeout=self.config.timeout,
                transport=self.transport,
            ) as client:
                resp = await client.post(self.config.proxy_path, json={"cpf": cpf})
        except httpx.HTTPError as e:
            raise ProxyError(f"Falha de comunicação com o proxy: {e!r}") from e

        try:
            body = resp.json()
        except ValueError as e:
            raise ProxyError(f"Resposta inválida do proxy ({resp.status_code})") from e

        if not isinstance(body, dict) or not body.get("success"):
            erro = body.get("error") if isinstance(body, dict) else None
            raise ProxyError(erro or f"Consulta sem sucesso ({resp.status_code})")

        data = body.get("data")
        if not isinstance(data, list):
            raise ProxyError("Proxy não retornou lista de boletos")

        logger.debug(f"Proxy retornou {len(data)} boletos")
        return data
