"""Exceções de domínio da consulta de boletos.

Cada exceção carrega o status HTTP e uma mensagem segura para o cliente.
Detalhes da API upstream ficam apenas no log do servidor.
"""


class BoletosError(Exception):
    """Erro base da consulta de boletos."""

    status_code = 500
    message = "Erro ao consultar boletos"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class CpfObrigatorioError(BoletosError):
    """CPF ausente no corpo da requisição."""

    status_code = 400
    message = "CPF é obrigatório"


class HinovaAutenticacaoError(BoletosError):
    """Falha ao obter o token de usuário na Hinova."""

    message = "Falha na autenticação do usuário"


class HinovaConsultaError(BoletosError):
    """Falha ao listar boletos na Hinova."""

    message = "CPF não encontrado ou erro ao consultar boletos"
