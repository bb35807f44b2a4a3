import os
import json
from typing import Optional, Dict, Any, Mapping
import logging
from pydantic import BaseModel, ConfigDict, field_validator

CONFIG_PATH_ENV = "ZENDESK_MCP_CONFIG"

# (field, environment variable) pairs for the required Zendesk credentials
REQUIRED_ENV = (
    ("domain", "ZENDESK_DOMAIN"),
    ("email", "ZENDESK_EMAIL"),
    ("token", "ZENDESK_TOKEN"),
)


class ConfigError(Exception):
    """Raised when the server cannot be configured at startup."""


class ZendeskConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    domain: str
    email: str
    token: str

    @property
    def base_url(self) -> str:
        return f"https://{self.domain}"


class ServerConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = "zendesk-mcp-server"
    version: str = "1.0.0"
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.upper()
        if not isinstance(logging.getLevelName(value), int):
            raise ValueError(f"unknown log level {value}")
        return value


class Config(BaseModel):
    model_config = ConfigDict(frozen=True)

    zendesk: ZendeskConfig
    server: ServerConfig = ServerConfig()

    @classmethod
    def load(cls, config_path: Optional[str] = None,
             environ: Optional[Mapping[str, str]] = None) -> "Config":
        environ = os.environ if environ is None else environ
        config_path = config_path or environ.get(CONFIG_PATH_ENV, "config.json")

        data: Dict[str, Any] = {}
        if os.path.exists(config_path):
            try:
                with open(config_path, "r") as f:
                    data = json.load(f)
            except (OSError, ValueError) as e:
                raise ConfigError(f"Unable to read config file {config_path}: {e}") from e
            if not isinstance(data, dict):
                raise ConfigError(f"Config file {config_path} must contain a JSON object")

        # Environment always wins over the file
        zendesk_data = dict(data.get("zendesk") or {})
        for field, env_var in REQUIRED_ENV:
            zendesk_data[field] = environ.get(env_var) or zendesk_data.get(field)

        missing = [env_var for field, env_var in REQUIRED_ENV if not zendesk_data.get(field)]
        if missing:
            raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

        server_data = dict(data.get("server") or {})
        if environ.get("ZENDESK_MCP_LOG_LEVEL"):
            server_data["log_level"] = environ["ZENDESK_MCP_LOG_LEVEL"]

        try:
            return cls(zendesk=ZendeskConfig(**zendesk_data), server=ServerConfig(**server_data))
        except ValueError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    def mask_secrets(self) -> Dict[str, Any]:
        """Return a dict representation with secrets masked for logging."""
        d = self.model_dump()
        if d.get("zendesk", {}).get("token"):
            d["zendesk"]["token"] = "***"
        return d
