"""Router de consulta de boletos/PIX na Hinova."""

import logging

from fastapi import APIRouter, Body, Depends, Response

from ..exceptions import BoletosError, CpfObrigatorioError
from ..schemas import ConsultaBoletosRequest, ConsultaBoletosResponse, ErrorResponse
from ..services.boletos import consultar_boletos
from ..services.hinova import HinovaClient

logger = logging.getLogger(__name__)
router = APIRouter()


def get_hinova_client() -> HinovaClient:
    """Dependency que fornece o cliente da Hinova."""
    return HinovaClient()


@router.post(
    "/boletos/consultar",
    response_model=ConsultaBoletosResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def consultar(
    req: ConsultaBoletosRequest | None = Body(default=None),
    client: HinovaClient = Depends(get_hinova_client),
) -> ConsultaBoletosResponse:
    """
    Consulta boletos de um associado pelo CPF.

    Aceita `cpf` ou `cpf_associado`. O período de vencimento é opcional e
    limitado a 365 dias; sem período, usa de 1 mês atrás a 11 meses à frente.
    """
    if req is None:
        raise CpfObrigatorioError()

    try:
        data = await consultar_boletos(req, client)
    except BoletosError:
        raise
    except Exception as e:
        logger.exception(f"Erro inesperado na consulta de boletos: {e}")
        raise BoletosError() from e

    return ConsultaBoletosResponse(success=True, data=data)


@router.options("/boletos/consultar", include_in_schema=False)
def consultar_options() -> Response:
    """OPTIONS sem cabeçalhos de preflight (o CORSMiddleware trata os demais)."""
    return Response(status_code=200)
