"""Testes para o serviço de boletos (período e normalização)."""

import asyncio
from datetime import date

import pytest

from app.exceptions import CpfObrigatorioError, HinovaAutenticacaoError
from app.schemas import ConsultaBoletosRequest
from app.services.boletos import (
    consultar_boletos,
    linha_digitavel_valida,
    normalizar_boleto,
    normalizar_boletos,
    periodo_padrao,
    resolver_periodo,
)


class TestResolverPeriodo:
    """Testes para o limite de 365 dias."""

    def test_periodo_dentro_do_limite(self):
        """Período curto passa sem alteração."""
        assert resolver_periodo("01/01/2025", "30/06/2025") == ("01/01/2025", "30/06/2025")

    def test_exatamente_365_dias(self):
        """365 dias ainda estão dentro do limite."""
        assert resolver_periodo("01/01/2025", "01/01/2026") == ("01/01/2025", "01/01/2026")

    def test_366_dias_limita_fim(self):
        """Acima de 365 dias o fim vira início + 364 dias."""
        assert resolver_periodo("01/01/2025", "02/01/2026") == ("01/01/2025", "31/12/2025")

    def test_periodo_longo_em_ano_bissexto(self):
        """Início mantido e fim limitado em ano bissexto."""
        assert resolver_periodo("01/01/2024", "01/06/2025") == ("01/01/2024", "30/12/2024")

    def test_sem_periodo_usa_padrao(self):
        """Sem datas usa de 1 mês atrás a 11 meses à frente."""
        hoje = date(2026, 10, 19)
        assert resolver_periodo(None, None, hoje) == ("19/09/2026", "19/09/2027")

    def test_apenas_uma_data_usa_padrao(self):
        """Uma data só é ignorada."""
        hoje = date(2026, 10, 19)
        assert resolver_periodo("01/01/2026", None, hoje) == periodo_padrao(hoje)

    def test_padrao_ajusta_fim_de_mes(self):
        """Dia inexistente no mês alvo vira o último dia do mês."""
        assert periodo_padrao(date(2025, 3, 31)) == ("28/02/2025", "28/02/2026")

    def test_padrao_vira_o_ano(self):
        """Janeiro volta para dezembro do ano anterior."""
        assert periodo_padrao(date(2026, 1, 15)) == ("15/12/2025", "15/12/2026")


class TestLinhaDigitavel:
    """Testes para validação da linha digitável."""

    @pytest.mark.parametrize(
        "linha",
        [
            "Não foi possível gerar a linha digitável",
            "Nao foi possivel gerar",
            "NÃO FOI POSSÍVEL GERAR",
            "Erro: nao foi possível emitir",
        ],
    )
    def test_mensagens_de_erro(self, linha):
        """Mensagens de erro da Hinova não são linhas válidas."""
        assert linha_digitavel_valida(linha) is False

    def test_vazia(self):
        """Linha vazia ou ausente é inválida."""
        assert linha_digitavel_valida("") is False
        assert linha_digitavel_valida(None) is False

    def test_linha_valida(self):
        """Linha numérica é válida."""
        assert linha_digitavel_valida("23793.38128 60000.000003 00000.000400 1 84340000012345") is True


class TestNormalizarBoleto:
    """Testes para normalização do registro da Hinova."""

    def test_baixado_e_pago(self):
        """Situação BAIXADO vira pago S."""
        assert normalizar_boleto({"codigo_boleto": 1, "situacao_boleto": "BAIXADO"})["pago"] == "S"

    @pytest.mark.parametrize("situacao", ["ABERTO", "CANCELADO", None, "baixado"])
    def test_outras_situacoes(self, situacao):
        """Qualquer outra situação vira pago N."""
        assert normalizar_boleto({"situacao_boleto": situacao})["pago"] == "N"

    def test_linha_invalida_vira_null(self, sample_boleto_hinova):
        """Linha inválida vira null em dados_pagamento e o original é mantido."""
        boleto = normalizar_boleto(sample_boleto_hinova)
        assert boleto["dados_pagamento"] == {"linha_digitavel": None, "codigo_barras": None}
        assert boleto["linha_digitavel"] == sample_boleto_hinova["linha_digitavel"]

    def test_linha_valida_preservada(self):
        """Linha válida aparece igual em dados_pagamento."""
        boleto = normalizar_boleto({"linha_digitavel": "23793381286"})
        assert boleto["dados_pagamento"]["linha_digitavel"] == "23793381286"

    def test_campos_padrao(self):
        """Campos ausentes recebem valores padrão."""
        boleto = normalizar_boleto({"nosso_numero": "000555"})
        assert boleto["_id"] == "000555"
        assert boleto["pix"] is None
        assert boleto["veiculo"] == []
        assert boleto["referente"] == ""

    def test_preserva_campos_originais(self, sample_boleto_hinova):
        """Campos desconhecidos continuam no resultado."""
        sample_boleto_hinova["valor_boleto"] = "150.00"
        boleto = normalizar_boleto(sample_boleto_hinova)
        assert boleto["valor_boleto"] == "150.00"
        assert boleto["_id"] == 77

    def test_normalizar_nao_lista(self):
        """Resposta que não é lista passa intacta."""
        assert normalizar_boletos({"erro": "x"}) == {"erro": "x"}


class FakeHinovaClient:
    """Cliente Hinova em memória."""

    def __init__(self, boletos=None, falhar_autenticacao=False):
        self.boletos = boletos if boletos is not None else []
        self.falhar_autenticacao = falhar_autenticacao
        self.listagens = []

    async def autenticar(self):
        if self.falhar_autenticacao:
            raise HinovaAutenticacaoError()
        return "T1"

    async def listar_boletos_periodo(self, token, cpf, data_inicial, data_final):
        self.listagens.append((token, cpf, data_inicial, data_final))
        return self.boletos


class TestConsultarBoletos:
    """Testes para a orquestração da consulta."""

    def test_consulta_normaliza(self, sample_boleto_hinova):
        """Lista normalizada com o CPF limpo e período padrão."""
        fake = FakeHinovaClient([sample_boleto_hinova])
        req = ConsultaBoletosRequest(cpf="123.456.789-00")

        data = asyncio.run(consultar_boletos(req, fake, hoje=date(2026, 10, 19)))

        assert data[0]["pago"] == "N"
        assert fake.listagens == [("T1", "12345678900", "19/09/2026", "19/09/2027")]

    def test_cpf_obrigatorio(self):
        """Sem CPF não autentica."""
        fake = FakeHinovaClient()
        with pytest.raises(CpfObrigatorioError):
            asyncio.run(consultar_boletos(ConsultaBoletosRequest(), fake))
        assert fake.listagens == []

    def test_falha_autenticacao_nao_lista(self):
        """Falha na autenticação interrompe a consulta."""
        fake = FakeHinovaClient(falhar_autenticacao=True)
        with pytest.raises(HinovaAutenticacaoError):
            asyncio.run(consultar_boletos(ConsultaBoletosRequest(cpf="12345678900"), fake))
        assert fake.listagens == []
