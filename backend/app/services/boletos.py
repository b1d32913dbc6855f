"""Serviço de consulta de boletos: período, normalização e orquestração."""

from __future__ import annotations

import calendar
import logging
import unicodedata
from datetime import date, datetime, timedelta
from typing import Any

from ..exceptions import CpfObrigatorioError
from ..schemas import ConsultaBoletosRequest, DadosPagamento, SituacaoBoleto
from .hinova import HinovaClient, mask_cpf

logger = logging.getLogger(__name__)

# Limite da Hinova para o intervalo de vencimento
MAX_INTERVALO_DIAS = 365

# Frases que a Hinova coloca em `linha_digitavel` quando não gera o boleto
LINHA_INVALIDA_MARCADORES = ("nao foi possivel",)


# === Período ===


def format_data_br(d: date) -> str:
    return d.strftime("%d/%m/%Y")


def parse_data_br(text: str) -> date:
    return datetime.strptime(text.strip(), "%d/%m/%Y").date()


def _add_months(d: date, months: int) -> date:
    """Soma meses de calendário, limitando o dia ao fim do mês."""
    idx = d.month - 1 + months
    year = d.year + idx // 12
    month = idx % 12 + 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def periodo_padrao(hoje: date | None = None) -> tuple[str, str]:
    """Janela padrão: de 1 mês atrás até 11 meses à frente."""
    hoje = hoje or date.today()
    return format_data_br(_add_months(hoje, -1)), format_data_br(_add_months(hoje, 11))


def resolver_periodo(
    data_inicial: str | None,
    data_final: str | None,
    hoje: date | None = None,
) -> tuple[str, str]:
    """Resolve o período de vencimento respeitando o limite de 365 dias.

    Com as duas datas informadas, o início é mantido e o fim é limitado a
    início + 364 dias quando o intervalo passa de 365 dias. Sem as duas
    datas, usa `periodo_padrao`.
    """
    if not (data_inicial and data_final):
        return periodo_padrao(hoje)

    inicio = parse_data_br(data_inicial)
    fim = parse_data_br(data_final)

    if (fim - inicio).days > MAX_INTERVALO_DIAS:
        fim_limitado = inicio + timedelta(days=MAX_INTERVALO_DIAS - 1)
        logger.info(
            f"Período {data_inicial}-{data_final} excede {MAX_INTERVALO_DIAS} dias; "
            f"fim ajustado para {format_data_br(fim_limitado)}"
        )
        return data_inicial, format_data_br(fim_limitado)

    return data_inicial, data_final


# === Normalização ===


def _strip_accents(text: str) -> str:
    text = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in text if not unicodedata.combining(ch))


def linha_digitavel_valida(linha: Any) -> bool:
    """Linha digitável não vazia e que não seja mensagem de erro da Hinova."""
    if not linha or not isinstance(linha, str):
        return False
    key = _strip_accents(linha).casefold()
    return not any(m in key for m in LINHA_INVALIDA_MARCADORES)


def normalizar_boleto(boleto: dict[str, Any]) -> dict[str, Any]:
    """Converte um registro da Hinova no formato esperado pelo frontend.

    Todos os campos originais são mantidos; são acrescentados `_id`, `pago`,
    `referente` e `dados_pagamento`, e `pix`/`veiculo` ganham valores padrão.
    """
    linha = boleto.get("linha_digitavel")
    dados_pagamento = DadosPagamento(
        linha_digitavel=linha if linha_digitavel_valida(linha) else None,
        codigo_barras=None,
    )
    pago = "S" if boleto.get("situacao_boleto") == SituacaoBoleto.BAIXADO.value else "N"

    return {
        **boleto,
        "_id": boleto.get("codigo_boleto") or boleto.get("nosso_numero"),
        "pago": pago,
        "referente": boleto.get("mes_referente") or "",
        "dados_pagamento": dados_pagamento.model_dump(),
        "linha_digitavel": linha,
        "pix": boleto.get("pix") or None,
        "veiculo": boleto.get("veiculo") or [],
    }


def normalizar_boletos(data: Any) -> Any:
    """Normaliza a lista da Hinova; corpos que não são lista passam intactos."""
    if not isinstance(data, list):
        logger.warning(f"Hinova retornou {type(data).__name__} em vez de lista; repassando")
        return data
    return [normalizar_boleto(b) if isinstance(b, dict) else b for b in data]


# === Orquestração ===


async def consultar_boletos(
    req: ConsultaBoletosRequest,
    client: HinovaClient | None = None,
    hoje: date | None = None,
) -> Any:
    """Autentica, resolve o período e lista os boletos normalizados do CPF."""
    cpf = req.get_cpf()
    if not cpf:
        raise CpfObrigatorioError()

    client = client or HinovaClient()

    token = await client.autenticar()

    data_inicial, data_final = resolver_periodo(
        req.data_vencimento_inicial, req.data_vencimento_final, hoje
    )
    logger.info(f"Consultando boletos do CPF {mask_cpf(cpf)} de {data_inicial} a {data_final}")

    data = await client.listar_boletos_periodo(token, cpf, data_inicial, data_final)
    return normalizar_boletos(data)
