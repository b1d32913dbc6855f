"""
Enhancer de cards de boleto.

Varre os cards renderizados pelo frontend, busca os boletos do CPF informado
no formulário via proxy e injeta, uma única vez por card:
1. dados do veículo protegido
2. PIX copia e cola (apenas boletos não pagos)
3. linha digitável real, quando válida

A varredura é idempotente: cards marcados com `data-enhanced` são ignorados
e cards sem boleto correspondente ficam pendentes para a próxima varredura.
"""

from __future__ import annotations

import asyncio
import logging
import re
from enum import Enum
from typing import Any

from bs4 import Tag

from .cache import CacheBoletos
from .cliente import ProxyClient
from .config import EnhancerSettings, get_enhancer_settings
from .observador import Observador
from .pagina import Pagina
from .widgets import Copiador, widget_linha_digitavel, widget_pix, widget_veiculo

logger = logging.getLogger(__name__)

NUMERO_BOLETO_PATTERN = re.compile(r"#(\d+)")
CPF_DIGITOS = 11


class Estado(str, Enum):
    """Estados do ciclo de vida do enhancer."""

    IDLE = "idle"
    OBSERVING = "observing"
    SCANNING = "scanning"
    FETCHING = "fetching"


def extrair_numero_boleto(card: Tag) -> str | None:
    """Número do boleto no título do card (`#<dígitos>`)."""
    titulo = card.select_one("h3")
    if titulo is None:
        return None
    match = NUMERO_BOLETO_PATTERN.search(titulo.get_text())
    return match.group(1) if match else None


def extrair_cpf(pagina: Pagina, seletor: str) -> str | None:
    """CPF do campo de texto da página; None se não tiver 11 dígitos."""
    campo = pagina.select_one(seletor)
    if campo is None:
        return None
    cpf = re.sub(r"\D", "", campo.get("value") or "")
    return cpf if len(cpf) == CPF_DIGITOS else None


def encontrar_boleto(boletos: list[dict[str, Any]], numero: str) -> dict[str, Any] | None:
    for boleto in boletos:
        if not isinstance(boleto, dict):
            continue
        codigo = boleto.get("codigo_boleto")
        if codigo is None:
            codigo = boleto.get("_id")
        if codigo is not None and str(codigo).strip() == numero:
            return boleto
    return None


class BoletoEnhancer:
    """Aprimora cards de boleto com dados vindos do proxy."""

    def __init__(
        self,
        pagina: Pagina,
        cliente: ProxyClient | None = None,
        config: EnhancerSettings | None = None,
        cache: CacheBoletos | None = None,
        copiador: Copiador | None = None,
    ):
        self.pagina = pagina
        self.config = config or get_enhancer_settings()
        self.cliente = cliente or ProxyClient(self.config)
        self.cache = cache or CacheBoletos()
        self.copiador = copiador or Copiador(duracao=self.config.duracao_confirmacao)

        self.estado = Estado.IDLE
        self._guarda_busca = asyncio.Lock()
        self._observador: Observador | None = None

    # === Ciclo de vida ===

    def iniciar(self) -> None:
        """Começa a observar a página (equivale ao "DOM pronto")."""
        if self._observador is None:
            self._observador = Observador(
                self.pagina,
                self.escanear,
                debounce=self.config.debounce,
                atrasos_fallback=self.config.atrasos_fallback,
                intervalo=self.config.intervalo_verificacao,
            )
        self._observador.iniciar()
        self.estado = Estado.OBSERVING
        logger.info("Enhancer de boletos observando a página")

    def parar(self) -> None:
        if self._observador:
            self._observador.parar()
        self.estado = Estado.IDLE

    def _estado_ocioso(self) -> Estado:
        if self._observador and self._observador.ativo:
            return Estado.OBSERVING
        return Estado.IDLE

    # === Varredura ===

    def _cards_pendentes(self) -> list[tuple[Tag, str]]:
        pendentes = []
        for card in self.pagina.select(self.config.seletor_card):
            if card.get("data-enhanced"):
                continue
            numero = extrair_numero_boleto(card)
            if not numero:
                continue
            pendentes.append((card, numero))
        return pendentes

    async def escanear(self) -> int:
        """Executa uma varredura; retorna quantos cards foram aprimorados."""
        if self._guarda_busca.locked():
            logger.debug("Busca em andamento; varredura descartada")
            return 0

        self.estado = Estado.SCANNING
        try:
            if not self._cards_pendentes():
                return 0

            cpf = extrair_cpf(self.pagina, self.config.seletor_cpf)
            if not cpf:
                return 0

            boletos = await self._obter_boletos(cpf)
            if boletos is None:
                return 0

            # Recalcula: cards podem ter surgido durante a busca
            aprimorados = 0
            for card, numero in self._cards_pendentes():
                try:
                    if self._aprimorar_card(card, numero, boletos):
                        aprimorados += 1
                except Exception as e:
                    logger.exception(f"Erro ao aprimorar boleto #{numero}: {e}")
            return aprimorados
        finally:
            self.estado = self._estado_ocioso()

    async def _obter_boletos(self, cpf: str) -> list[dict[str, Any]] | None:
        boletos = self.cache.get(cpf)
        if boletos is not None:
            return boletos

        if self._guarda_busca.locked():
            return None

        async with self._guarda_busca:
            self.estado = Estado.FETCHING
            try:
                boletos = await self.cliente.consultar(cpf)
            except Exception as e:
                logger.error(f"Erro ao buscar dados do boleto: {e}")
                return None
            finally:
                self.estado = Estado.SCANNING

        self.cache.put(cpf, boletos)
        return boletos

    # === Injeção ===

    def _secao_linha_digitavel(self, card: Tag) -> Tag | None:
        for div in card.find_all("div"):
            texto = div.get_text()
            if any(t in texto for t in self.config.textos_secao_linha):
                return div
            # Seção cujo aviso já foi trocado pela linha real
            if div.select_one("[data-linha-real]") is not None:
                return div
        return None

    def _botao_acao(self, card: Tag) -> Tag | None:
        for botao in card.select(self.config.seletor_botao_acao):
            if not botao.has_attr("data-copiar"):
                return botao
        return None

    def _aprimorar_card(self, card: Tag, numero: str, boletos: list[dict[str, Any]]) -> bool:
        boleto = encontrar_boleto(boletos, numero)
        if boleto is None:
            return False

        # Âncoras resolvidas uma única vez, antes de trocar a linha digitável
        botao = self._botao_acao(card)
        secao = self._secao_linha_digitavel(card)
        if botao is None and secao is None:
            logger.debug(f"Card #{numero} sem ponto de inserção")
            return False

        dados_pagamento = boleto.get("dados_pagamento") or {}
        linha = dados_pagamento.get("linha_digitavel") if isinstance(dados_pagamento, dict) else None
        if linha and secao is not None:
            self._aplicar_linha_digitavel(secao, str(linha))

        # O botão de ação pode ter saído junto com o conteúdo do container
        ancora = botao if botao is not None and botao.parent is not None else secao
        if ancora is None:
            logger.debug(f"Card #{numero} perdeu o ponto de inserção")
            return False

        veiculos = boleto.get("veiculo")
        if (
            isinstance(veiculos, list)
            and veiculos
            and isinstance(veiculos[0], dict)
            and not card.select_one("[data-veiculo-info]")
        ):
            ancora.insert_before(widget_veiculo(veiculos[0]))

        pix = boleto.get("pix")
        copia_cola = pix.get("copia_cola") if isinstance(pix, dict) else None
        if copia_cola and boleto.get("pago") != "S" and not card.select_one("[data-pix-info]"):
            ancora.insert_before(widget_pix(str(copia_cola)))

        card["data-enhanced"] = "true"
        logger.debug(f"Card #{numero} aprimorado")
        return True

    def _aplicar_linha_digitavel(self, secao: Tag, linha: str) -> None:
        if secao.select_one("[data-linha-real]"):
            return
        container = next(
            (
                div
                for div in secao.select('div[class*="bg-white"]')
                if div.find_parent(attrs={"data-pix-info": True}) is None
            ),
            None,
        )
        if container is None:
            return
        container.clear()
        for node in widget_linha_digitavel(linha):
            container.append(node)

    # === Interação ===

    async def clicar(self, botao: Tag) -> None:
        """Trata o clique em um botão de copiar injetado."""
        await self.copiador.copiar(botao)
