"""Enhancer de cards de boleto (veículo, PIX e linha digitável)."""

from .cache import CacheBoletos
from .cliente import ProxyClient, ProxyError
from .enhancer import BoletoEnhancer, Estado
from .pagina import MudancaPagina, Pagina

__all__ = [
    "BoletoEnhancer",
    "CacheBoletos",
    "Estado",
    "MudancaPagina",
    "Pagina",
    "ProxyClient",
    "ProxyError",
]
