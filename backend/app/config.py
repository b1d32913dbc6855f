"""Configuração centralizada da aplicação usando pydantic-settings."""

from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configurações da aplicação carregadas de variáveis de ambiente."""

    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).resolve().parents[1] / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    env: str = "development"
    log_level: str = "INFO"
    port: int = 3000

    # CORS
    cors_origins: List[str] = ["*"]

    # Hinova SGA
    hinova_base_url: str = "https://api.hinova.com.br/api/sga/v2"
    hinova_association_token: str = ""
    hinova_usuario: str = ""
    hinova_senha: str = ""
    hinova_timeout: float = 15.0  # seconds

    # Frontend (SPA)
    static_dir: str = str(Path(__file__).resolve().parents[2] / "public")

    @property
    def is_development(self) -> bool:
        return self.env == "development"

    @property
    def hinova_configurado(self) -> bool:
        return bool(
            self.hinova_association_token and self.hinova_usuario and self.hinova_senha
        )


@lru_cache
def get_settings() -> Settings:
    """Retorna instância cacheada das configurações."""
    return Settings()


settings = get_settings()
