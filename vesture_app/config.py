"""Configuration helpers for the Vesture API."""

from dataclasses import dataclass, field
from pathlib import Path
import os
from typing import Dict, List, Optional

from dotenv import load_dotenv

DEFAULT_DATABASE_PATH = "data/vesture.db"
DEFAULT_RECOGNITION_MODEL_URL = (
    "https://api.clarifai.com/v2/users/clarifai/apps/main/models/apparel-recognition/outputs"
)
DEFAULT_TOKEN_TTL_SECONDS = 3600


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def read_settings_file(path: Path) -> Dict[str, str]:
    """Read flat ``key: value`` settings from an environment YAML file.

    Keys are lower-cased, trailing ``#`` comments on unquoted values are
    dropped and blank values are treated as unset.
    """

    settings: Dict[str, str] = {}
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        key, sep, value = raw_line.partition(":")
        key = key.strip().lower()
        if not sep or not key or key.startswith("#"):
            continue
        value = value.strip()
        if value[:1] not in ("\"", "'"):
            value = value.split(" #", 1)[0].rstrip()
        value = _unquote(value)
        if value:
            settings[key] = value
    return settings


@dataclass
class AppConfig:
    """Configuration values for the Vesture API.

    Built once at process start and handed to the application container, which
    passes it by reference to the components that need secrets or endpoints.
    """

    jwt_secret: str
    port: int = 8000
    database_path: str = DEFAULT_DATABASE_PATH
    token_ttl_seconds: int = DEFAULT_TOKEN_TTL_SECONDS
    recognition_api_key: Optional[str] = None
    recognition_model_url: str = DEFAULT_RECOGNITION_MODEL_URL
    recognition_timeout_seconds: float = 10.0
    cors_origins: List[str] = field(default_factory=lambda: ["http://localhost:3001"])
    log_level: str = "INFO"
    environment: str | None = None

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Build a config from environment variables or an environment YAML file.

        A local ``.env`` file is loaded first. Environment specific YAML lives in
        ``config/environments/<env>.yaml`` by default and is merged under the
        environment variables so secrets can be injected by the runtime.
        """

        load_dotenv()
        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("VESTURE_CONFIG_DIR", "config/environments"))
        yaml_config: dict = {}

        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            yaml_config = read_settings_file(path)

        def get_value(key: str, default: Optional[str] = None) -> Optional[str]:
            env_key = key.upper()
            return os.getenv(env_key, yaml_config.get(key, default))

        jwt_secret = get_value("jwt_secret")
        if not jwt_secret:
            raise RuntimeError("JWT_SECRET is not set")

        origins = get_value("cors_origins", "http://localhost:3001") or ""

        return cls(
            jwt_secret=jwt_secret,
            port=int(get_value("port", "8000") or 8000),
            database_path=str(get_value("database_path", DEFAULT_DATABASE_PATH)),
            token_ttl_seconds=int(
                get_value("token_ttl_seconds", str(DEFAULT_TOKEN_TTL_SECONDS)) or DEFAULT_TOKEN_TTL_SECONDS
            ),
            recognition_api_key=get_value("recognition_api_key"),
            recognition_model_url=str(get_value("recognition_model_url", DEFAULT_RECOGNITION_MODEL_URL)),
            recognition_timeout_seconds=float(get_value("recognition_timeout_seconds", "10") or 10),
            cors_origins=[o.strip().rstrip("/") for o in origins.split(",") if o.strip()],
            log_level=str(get_value("log_level", "INFO")),
            environment=env_name,
        )

