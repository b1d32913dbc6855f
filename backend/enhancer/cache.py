"""Cache de boletos de uma única entrada, indexado por CPF."""

from typing import Any


class CacheBoletos:
    """Guarda os boletos do último CPF consultado.

    Um CPF novo substitui a entrada anterior; não há expiração.
    """

    def __init__(self) -> None:
        self._cpf: str | None = None
        self._boletos: list[dict[str, Any]] | None = None

    @property
    def cpf(self) -> str | None:
        return self._cpf

    def get(self, cpf: str) -> list[dict[str, Any]] | None:
        if self._cpf is not None and self._cpf == cpf:
            return self._boletos
        return None

    def put(self, cpf: str, boletos: list[dict[str, Any]]) -> None:
        self._cpf = cpf
        self._boletos = boletos

    def clear(self) -> None:
        self._cpf = None
        self._boletos = None
