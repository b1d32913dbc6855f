"""Widgets injetados nos cards de boleto e o botão de copiar."""

from __future__ import annotations

import asyncio
import logging
from html import escape
from typing import Any, Protocol

from bs4 import Tag

from .pagina import parse_fragmento

logger = logging.getLogger(__name__)

ROTULO_COPIADO = "✓ Copiado!"
ROTULO_COPIAR_PIX = "📱 Copiar Código PIX"
ROTULO_COPIAR_LINHA = "📋 Copiar Linha Digitável"


def _elemento(html: str) -> Tag:
    return parse_fragmento(html)[0]


def _botao_copiar(texto: str, rotulo: str, cor: str) -> str:
    return (
        f'<button type="button" data-copiar="{escape(texto)}" data-rotulo="{escape(rotulo)}" '
        f'class="bg-{cor}-600 text-white py-2 px-4 rounded text-sm font-medium '
        f'hover:bg-{cor}-700 transition-colors flex items-center">{escape(rotulo)}</button>'
    )


def widget_veiculo(veiculo: dict[str, Any]) -> Tag:
    """Bloco com marca/modelo/ano e placa/tipo do veículo."""
    def campo(nome: str) -> str:
        valor = veiculo.get(nome)
        return escape(str(valor)) if valor is not None else ""

    return _elemento(
        '<div data-veiculo-info="true" class="bg-blue-50 border border-blue-200 rounded-lg p-4 mb-4">'
        '<h4 class="font-semibold text-blue-800 mb-2">🚗 Veículo Protegido</h4>'
        f'<p class="text-blue-900 font-medium">{campo("marca")} {campo("modelo")} {campo("ano_modelo")}</p>'
        f'<p class="text-blue-700 text-sm">Placa: {campo("placa")} | Tipo: {campo("tipo_veiculo")}</p>'
        "</div>"
    )


def widget_pix(copia_cola: str) -> Tag:
    """Bloco com o código PIX copia e cola e botão de copiar."""
    return _elemento(
        '<div data-pix-info="true" class="bg-green-50 border border-green-200 rounded-lg p-4 mb-4">'
        '<h4 class="font-semibold text-green-800 mb-2">💚 PIX Copia e Cola</h4>'
        '<div class="bg-white p-3 rounded border font-mono text-xs break-all mb-3 max-h-24 overflow-y-auto">'
        f"{escape(copia_cola)}</div>"
        f"{_botao_copiar(copia_cola, ROTULO_COPIAR_PIX, 'green')}"
        "</div>"
    )


def widget_linha_digitavel(linha: str) -> list[Tag]:
    """Linha digitável real e botão de copiar (substitui o conteúdo do container)."""
    return parse_fragmento(
        '<div data-linha-real="true" class="bg-white p-3 rounded border font-mono text-sm break-all mb-3">'
        f"{escape(linha)}</div>"
        f"{_botao_copiar(linha, ROTULO_COPIAR_LINHA, 'blue')}"
    )


# === Copiar ===


class AreaTransferencia(Protocol):
    def write(self, texto: str) -> None: ...


class AreaTransferenciaMemoria:
    """Área de transferência em memória."""

    def __init__(self) -> None:
        self.conteudo: str | None = None

    def write(self, texto: str) -> None:
        self.conteudo = texto


class Copiador:
    """Copia o texto de um botão `data-copiar` e confirma por alguns segundos."""

    def __init__(self, area: AreaTransferencia | None = None, duracao: float = 2.0):
        self.area = area or AreaTransferenciaMemoria()
        self.duracao = duracao
        self._pendentes: dict[int, tuple[Tag, asyncio.TimerHandle]] = {}

    async def copiar(self, botao: Tag) -> None:
        texto = botao.get("data-copiar")
        if texto is None:
            raise ValueError("Botão sem atributo data-copiar")

        self.area.write(texto)

        rotulo = botao.get("data-rotulo") or botao.get_text(strip=True)
        botao.string = ROTULO_COPIADO

        # Novo clique reinicia a contagem
        anterior = self._pendentes.pop(id(botao), None)
        if anterior:
            anterior[1].cancel()

        loop = asyncio.get_running_loop()
        handle = loop.call_later(self.duracao, self._restaurar, botao, rotulo)
        self._pendentes[id(botao)] = (botao, handle)

    def _restaurar(self, botao: Tag, rotulo: str) -> None:
        # A entrada guarda o próprio botão: id() só vale enquanto ele existir
        pendente = self._pendentes.get(id(botao))
        if pendente is not None and pendente[0] is botao:
            del self._pendentes[id(botao)]
        botao.string = rotulo

    def pendente(self, botao: Tag) -> bool:
        """Indica se o botão ainda exibe a confirmação de cópia."""
        entrada = self._pendentes.get(id(botao))
        return entrada is not None and entrada[0] is botao
