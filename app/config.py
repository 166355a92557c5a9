from enum import Enum
import configparser
from os import environ
from os.path import exists
from typing import Any, Optional
import logging

from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

_PATH = "app{suffix}.conf"
_CONFIG = None


def _as_bool(v: Any, default: bool) -> bool:
    if v in (None, "", " "):
        return default
    if isinstance(v, str):
        return v.lower() in ("yes", "true", "t", "1")
    return bool(v)


class LogLevel(str, Enum):
    debug = "debug"
    info = "info"
    warning = "warning"
    error = "error"
    critical = "critical"


class ConfigApp(BaseModel):
    loglevel: LogLevel = Field(default=LogLevel.info)


class ConfigUvicorn(BaseModel):
    swagger_enabled: bool = Field(default=False)
    docs_url: str = Field(default="/docs")
    redoc_url: str = Field(default="/redoc")
    host: str = Field(default="127.0.0.1")
    port: Optional[int] = Field(default=8080, gt=0, lt=65535)
    reload: bool = Field(default=True)
    reload_delay: float = Field(default=1)
    reload_dirs: list[str] = Field(default=["app"])
    use_ssl: bool = Field(default=False)
    ssl_base_dir: str | None = Field(default=None)
    ssl_cert_file: str | None = Field(default=None)
    ssl_key_file: str | None = Field(default=None)

    @field_validator("host", mode="before")
    def validate_host(cls, v: Any) -> str:
        if v in (None, "", " "):
            return "127.0.0.1"
        return str(v)

    @field_validator("port", mode="before")
    def validate_port(cls, v: Any) -> int:
        if v in (None, "", " "):
            return 8080
        return int(v)

    @field_validator("swagger_enabled", mode="before")
    def validate_swagger_enabled(cls, v: Any) -> bool:
        return _as_bool(v, False)

    @field_validator("reload", mode="before")
    def validate_reload(cls, v: Any) -> bool:
        return _as_bool(v, True)

    @field_validator("reload_delay", mode="before")
    def validate_reload_delay(cls, v: Any) -> float:
        if v in (None, "", " "):
            return 1.0
        return float(v)

    @field_validator("reload_dirs", mode="before")
    def validate_reload_dirs(cls, v: Any) -> list[str]:
        if v in (None, "", " "):
            return ["app"]
        if isinstance(v, str):
            return [d.strip() for d in v.split(",")]
        return v  # type: ignore

    @field_validator("use_ssl", mode="before")
    def validate_use_ssl(cls, v: Any) -> bool:
        return _as_bool(v, False)


class ConfigBackend(BaseModel):
    url: str = Field(default="http://localhost:3000")
    api_path: str = Field(default="/api")
    timeout: int = Field(default=10, gt=0)
    wake_up_on_start: bool = Field(default=True)
    wake_up_timeout: int = Field(default=5, gt=0)

    @field_validator("url", mode="before")
    def validate_url(cls, v: Any) -> str:
        if v in (None, "", " "):
            return "http://localhost:3000"
        return str(v).rstrip("/")

    @field_validator("api_path", mode="before")
    def validate_api_path(cls, v: Any) -> str:
        if v in (None, "", " "):
            return "/api"
        path = str(v).strip().rstrip("/")
        if path and not path.startswith("/"):
            path = f"/{path}"
        return path

    @field_validator("timeout", mode="before")
    def validate_timeout(cls, v: Any) -> int:
        if v in (None, "", " "):
            return 10
        return int(v)

    @field_validator("wake_up_timeout", mode="before")
    def validate_wake_up_timeout(cls, v: Any) -> int:
        if v in (None, "", " "):
            return 5
        return int(v)

    @field_validator("wake_up_on_start", mode="before")
    def validate_wake_up_on_start(cls, v: Any) -> bool:
        return _as_bool(v, True)

    @property
    def api_url(self) -> str:
        return f"{self.url}{self.api_path}"


class ConfigAuth(BaseModel):
    enabled: bool = Field(
        default=True,
        description="When off, any non-empty Authorization header is accepted and forwarded",
    )
    jwt_secret: str | None = Field(default=None)
    jwt_algorithm: str = Field(default="HS256")

    @field_validator("enabled", mode="before")
    def validate_enabled(cls, v: Any) -> bool:
        return _as_bool(v, True)

    @field_validator("jwt_secret", mode="before")
    def validate_jwt_secret(cls, v: Any) -> str | None:
        if v in (None, "", " "):
            return None
        return str(v)

    @field_validator("jwt_algorithm", mode="before")
    def validate_jwt_algorithm(cls, v: Any) -> str:
        if v in (None, "", " "):
            return "HS256"
        return str(v)


class ConfigFhir(BaseModel):
    extension_base_url: str = Field(
        default="http://mi-servidor.com/fhir/StructureDefinition"
    )

    @field_validator("extension_base_url", mode="before")
    def validate_extension_base_url(cls, v: Any) -> str:
        if v in (None, "", " "):
            return "http://mi-servidor.com/fhir/StructureDefinition"
        return str(v).rstrip("/")


class ConfigStats(BaseModel):
    enabled: bool = Field(default=False)
    host: str | None = Field(default=None)
    port: int | None = Field(default=None)
    module_name: str | None = Field(default=None)

    @field_validator("enabled", mode="before")
    def validate_enabled(cls, v: Any) -> bool:
        return _as_bool(v, False)

    @field_validator("port", mode="before")
    def validate_port(cls, v: Any) -> int | None:
        if v in (None, "", " "):
            return None
        return int(v)


class Config(BaseModel):
    app: ConfigApp
    uvicorn: ConfigUvicorn
    backend: ConfigBackend
    auth: ConfigAuth
    fhir: ConfigFhir
    stats: ConfigStats


def read_ini_file(path: str) -> Any:
    ini_data = configparser.ConfigParser()
    ini_data.read(path)

    ret = {}
    for section in ini_data.sections():
        ret[section] = dict(ini_data[section])

    return ret


def reset_config() -> None:
    global _CONFIG
    _CONFIG = None


def set_config(config: Config) -> None:
    global _CONFIG
    _CONFIG = config


def get_config(path: str | None = None) -> Config:
    global _CONFIG
    global _PATH

    if _CONFIG is not None:
        return _CONFIG

    if path is None:
        suffix = environ.get("APP_ENV", "")
        if suffix:
            suffix = f".{suffix}"
        path = _PATH.replace("{suffix}", suffix)
        logger.info(f"Reading configuration using file: {path}")

    if not exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")

    # INI files are flat strings per section, pydantic does the coercion. Sections that
    # only carry defaults may be left out of the file.
    ini_data = read_ini_file(path)
    for section in ("app", "uvicorn", "backend", "auth", "fhir", "stats"):
        ini_data.setdefault(section, {})

    try:
        _CONFIG = Config(**ini_data)
    except ValidationError as e:
        logger.error(f"Configuration validation error: {e}")
        raise e

    return _CONFIG
