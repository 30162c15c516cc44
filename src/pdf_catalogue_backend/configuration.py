from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from omegaconf import DictConfig, OmegaConf
from pydantic import BaseModel

# Load environment variables from .env file
load_dotenv()

CONFIG_PATH = Path(__file__).resolve().parent / "config/config.yaml"


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 3000


class AuthSettings(BaseModel):
    admin_token: Optional[str] = None


class DatabaseSettings(BaseModel):
    path: Path = Path("data/catalogue.db")


class MediaSettings(BaseModel):
    bucket: Optional[str] = None
    region: Optional[str] = None
    endpoint_url: Optional[str] = None
    public_base_url: Optional[str] = None
    pdf_prefix: str = "pdfs"
    cover_folder: str = "pdf_covers"


class GeneratorSettings(BaseModel):
    api_key: Optional[str] = None
    model: str = "gemini-1.5-flash"
    api_base: str = "https://generativelanguage.googleapis.com/v1"
    response_mime_type: str = "image/png"
    timeout: float = 60.0


class StaticSettings(BaseModel):
    directory: Path = Path("public")
    index: str = "index.html"

    @property
    def index_path(self) -> Path:
        return self.directory / self.index


class LoggingSettings(BaseModel):
    level: str = "INFO"


class Settings(BaseModel):
    """Process-wide configuration, fixed once the application is built."""

    server: ServerSettings = ServerSettings()
    auth: AuthSettings = AuthSettings()
    database: DatabaseSettings = DatabaseSettings()
    media: MediaSettings = MediaSettings()
    generator: GeneratorSettings = GeneratorSettings()
    static: StaticSettings = StaticSettings()
    logging: LoggingSettings = LoggingSettings()


@lru_cache(maxsize=1)
def _load_default_config() -> DictConfig:
    if not CONFIG_PATH.exists():
        raise FileNotFoundError(f"Default config not found at {CONFIG_PATH}")
    return OmegaConf.load(CONFIG_PATH)


def load_settings(overrides: Optional[Dict[str, Any]] = None) -> Settings:
    """
    Build settings from the packaged defaults, the environment and overrides.

    Environment interpolations (``${oc.env:...}``) are resolved at call time,
    so each call sees the current environment. Overrides may only name keys
    that already exist in the defaults.

    Args:
        overrides: Nested mapping merged on top of the defaults

    Returns:
        Validated Settings instance

    Raises:
        omegaconf.errors.ConfigKeyError: If an override names an unknown key
        pydantic.ValidationError: If a resolved value has the wrong type
    """
    base_container = OmegaConf.to_container(_load_default_config(), resolve=False)
    base = OmegaConf.create(base_container)
    OmegaConf.set_struct(base, True)

    merged = OmegaConf.merge(base, OmegaConf.create(overrides or {}))
    container = OmegaConf.to_container(merged, resolve=True)
    return Settings.model_validate(container)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
