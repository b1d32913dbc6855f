"""CLI: aprimora uma página HTML salva usando o proxy de boletos."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from .config import get_enhancer_settings
from .enhancer import BoletoEnhancer
from .pagina import Pagina

logger = logging.getLogger("enhancer")


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Aprimora cards de boleto de uma página HTML")
    parser.add_argument("pagina", type=Path, help="Arquivo HTML com os cards renderizados")
    parser.add_argument("--cpf", default=None, help="Preenche o campo de CPF antes da varredura")
    parser.add_argument("--proxy-url", default=None, help="URL base do proxy de boletos")
    parser.add_argument("--out", type=Path, default=None, help="Arquivo de saída (padrão: stdout)")
    parser.add_argument("--log-level", default="INFO")
    return parser.parse_args(argv)


async def aprimorar_arquivo(args: argparse.Namespace) -> tuple[str, int]:
    config = get_enhancer_settings()
    if args.proxy_url:
        config = config.model_copy(update={"proxy_base_url": args.proxy_url})

    pagina = Pagina(args.pagina.read_text(encoding="utf-8"))
    if args.cpf:
        campo = pagina.select_one(config.seletor_cpf)
        if campo is None:
            raise ValueError("Página não tem campo de CPF")
        campo["value"] = args.cpf

    enhancer = BoletoEnhancer(pagina, config=config)
    aprimorados = await enhancer.escanear()
    return pagina.html(), aprimorados


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        html, aprimorados = asyncio.run(aprimorar_arquivo(args))
    except (OSError, ValueError) as e:
        logger.error(f"Falha ao aprimorar página: {e}")
        return 1

    if args.out:
        args.out.write_text(html, encoding="utf-8")
    else:
        sys.stdout.write(html)
    logger.info(f"{aprimorados} card(s) aprimorado(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
