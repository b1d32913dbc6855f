"""JRPV Boletos API - Aplicação principal FastAPI."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .exceptions import BoletosError
from .routers import boletos_router
from .schemas import HealthResponse

# === Logging ===

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# === Lifespan ===


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Gerencia o ciclo de vida da aplicação."""
    logger.info("Iniciando JRPV Boletos API...")

    if not settings.hinova_configurado:
        logger.warning("Credenciais da Hinova ausentes: consultas de boletos vão falhar")

    logger.info("API iniciada com sucesso!")
    yield

    # Shutdown
    logger.info("Encerrando JRPV Boletos API...")


# === App ===

app = FastAPI(
    title="JRPV Boletos API",
    description="Proxy de consulta de boletos e PIX na Hinova SGA",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
)


# === Middleware ===

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


# === Exception Handlers ===


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


@app.exception_handler(BoletosError)
async def boletos_exception_handler(request: Request, exc: BoletosError) -> JSONResponse:
    """Converte erros de domínio no envelope {success, error}."""
    if exc.status_code >= 500:
        logger.error(f"API Error: {exc.message}")
    return _error(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Erros de validação do corpo viram 400 com a primeira mensagem."""
    errors = exc.errors()
    message = "Requisição inválida"
    if errors:
        message = str(errors[0].get("msg", message)).removeprefix("Value error, ")
    return _error(400, message)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handler global para exceções não tratadas."""
    logger.exception(f"Erro não tratado: {exc}")
    return _error(500, BoletosError.message)


# === Routers ===

app.include_router(boletos_router, prefix="/api/jrpv", tags=["boletos"])


# === Health Check ===


@app.get("/health", response_model=HealthResponse, tags=["health"])
def health_check() -> HealthResponse:
    """Verifica a saúde da aplicação e sua configuração."""
    return HealthResponse(status="ok", hinova_configurado=settings.hinova_configurado)


# === Frontend (SPA) ===


class SPAStaticFiles(StaticFiles):
    """StaticFiles que devolve index.html para rotas desconhecidas do SPA."""

    async def get_response(self, path: str, scope):
        try:
            return await super().get_response(path, scope)
        except StarletteHTTPException as exc:
            if exc.status_code != 404 or path.startswith("api/"):
                raise
            return await super().get_response("index.html", scope)


if Path(settings.static_dir).is_dir():
    app.mount("/", SPAStaticFiles(directory=settings.static_dir, html=True), name="spa")
else:
    logger.info(f"Diretório estático {settings.static_dir} ausente; frontend não será servido")
