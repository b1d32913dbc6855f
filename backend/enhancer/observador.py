"""Observador de mudanças com debounce e verificações de reserva."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Iterable

from .pagina import MudancaPagina, Pagina

logger = logging.getLogger(__name__)


class Observador:
    """
    Dispara `callback` quando a página muda.

    - Rajadas de mudanças com nós adicionados viram uma única chamada após
      `debounce` segundos sem novas mudanças.
    - `atrasos_fallback` agenda chamadas únicas após o início, para conteúdo
      que não gerou notificação.
    - `intervalo` > 0 liga uma verificação periódica.

    Precisa de um event loop em execução (`iniciar` dentro de uma coroutine).
    """

    def __init__(
        self,
        pagina: Pagina,
        callback: Callable[[], Awaitable[object]],
        debounce: float = 0.3,
        atrasos_fallback: Iterable[float] = (1.0,),
        intervalo: float = 0.0,
    ):
        self.pagina = pagina
        self.callback = callback
        self.debounce = debounce
        self.atrasos_fallback = tuple(atrasos_fallback)
        self.intervalo = intervalo

        self._cancelar_inscricao: Callable[[], None] | None = None
        self._debounce_handle: asyncio.TimerHandle | None = None
        self._timers: list[asyncio.TimerHandle] = []
        self._periodico: asyncio.Task | None = None
        self._tarefas: set[asyncio.Task] = set()

    @property
    def ativo(self) -> bool:
        return self._cancelar_inscricao is not None

    def iniciar(self) -> None:
        if self.ativo:
            return
        loop = asyncio.get_running_loop()
        self._cancelar_inscricao = self.pagina.inscrever(self._ao_mudar)
        for atraso in self.atrasos_fallback:
            self._timers.append(loop.call_later(atraso, self._disparar))
        if self.intervalo > 0:
            self._periodico = loop.create_task(self._loop_periodico())
        logger.debug("Observador iniciado")

    def parar(self) -> None:
        if self._cancelar_inscricao:
            self._cancelar_inscricao()
            self._cancelar_inscricao = None
        if self._debounce_handle:
            self._debounce_handle.cancel()
            self._debounce_handle = None
        for timer in self._timers:
            timer.cancel()
        self._timers.clear()
        if self._periodico:
            self._periodico.cancel()
            self._periodico = None
        logger.debug("Observador parado")

    def _ao_mudar(self, mudanca: MudancaPagina) -> None:
        if not mudanca.adicionados:
            return
        if self._debounce_handle:
            self._debounce_handle.cancel()
        loop = asyncio.get_running_loop()
        self._debounce_handle = loop.call_later(self.debounce, self._disparar)

    async def _loop_periodico(self) -> None:
        while True:
            await asyncio.sleep(self.intervalo)
            self._disparar()

    def _disparar(self) -> None:
        self._debounce_handle = None
        task = asyncio.get_running_loop().create_task(self.callback())
        self._tarefas.add(task)
        task.add_done_callback(self._finalizar)

    def _finalizar(self, task: asyncio.Task) -> None:
        self._tarefas.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Verificação falhou: {exc!r}")
