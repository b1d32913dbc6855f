"""Documento HTML observável.

`Pagina` guarda a árvore (BeautifulSoup) e publica uma `MudancaPagina` a
cada conteúdo renderizado, para que assinantes reajam às alterações.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)

PARSER = "lxml"


@dataclass(frozen=True)
class MudancaPagina:
    """Notificação de alteração no documento."""

    adicionados: tuple[Tag, ...] = ()
    destino: Tag | None = None


Assinante = Callable[[MudancaPagina], None]


def parse_fragmento(html: str) -> list[Tag]:
    """Converte um trecho de HTML em elementos soltos."""
    soup = BeautifulSoup(html, PARSER)
    root = soup.body or soup
    return [node.extract() for node in list(root.contents) if isinstance(node, Tag)]


class Pagina:
    """Documento HTML com assinatura de mudanças."""

    def __init__(self, html: str = "<html><body></body></html>"):
        self.soup = BeautifulSoup(html, PARSER)
        self._assinantes: list[Assinante] = []

    def inscrever(self, assinante: Assinante) -> Callable[[], None]:
        """Registra um assinante; retorna função para cancelar a inscrição."""
        self._assinantes.append(assinante)

        def cancelar() -> None:
            if assinante in self._assinantes:
                self._assinantes.remove(assinante)

        return cancelar

    def notificar(self, mudanca: MudancaPagina) -> None:
        for assinante in list(self._assinantes):
            try:
                assinante(mudanca)
            except Exception as e:
                logger.exception(f"Assinante falhou ao tratar mudança: {e}")

    def renderizar(self, html: str, destino: Tag | str | None = None) -> list[Tag]:
        """Acrescenta HTML ao destino (elemento ou seletor CSS; padrão: body)."""
        if isinstance(destino, str):
            alvo = self.soup.select_one(destino)
            if alvo is None:
                raise ValueError(f"Destino não encontrado: {destino}")
        else:
            alvo = destino or self.soup.body or self.soup

        novos = parse_fragmento(html)
        for node in novos:
            alvo.append(node)

        self.notificar(MudancaPagina(adicionados=tuple(novos), destino=alvo))
        return novos

    def select(self, selector: str) -> list[Tag]:
        return self.soup.select(selector)

    def select_one(self, selector: str) -> Tag | None:
        return self.soup.select_one(selector)

    def html(self) -> str:
        return str(self.soup)
