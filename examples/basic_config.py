"""Basic example: populate an application config from the environment."""

import json
import os
from dataclasses import dataclass, field
from typing import Optional

import numpy as np
from loguru import logger

from envbind import FieldParseError, env_field, load


class AllowedHosts(list):
    """Hosts parsed from a JSON array."""

    def unmarshal_env(self, value: str) -> None:
        self[:] = json.loads(value)


# Define configuration schema using dataclasses
@dataclass
class DatabaseConfig:
    """Database configuration."""

    host: str = "localhost"
    port: np.uint16 = np.uint16(5432)
    username: str = env_field(",required", default="")
    password: str = env_field("DB_PASSWORD,default=change\\sme", default="")


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "0.0.0.0"
    port: np.uint16 = np.uint16(8000)
    workers: np.uint8 = np.uint8(4)
    allowed_hosts: Optional[AllowedHosts] = None


@dataclass
class AppConfig:
    """Main application configuration."""

    name: str = "MyApp"
    debug: bool = False
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    internal_state: dict = env_field("-", default_factory=dict)


def main():
    """Load configuration from MYAPP_* variables and print it."""
    logger.enable("envbind")

    os.environ.setdefault("MYAPP_DEBUG", "true")
    os.environ.setdefault("MYAPP_DATABASE_USERNAME", "app")
    os.environ.setdefault("MYAPP_SERVER_ALLOWED_HOSTS", '["example.com", "api.example.com"]')

    try:
        config = load(AppConfig, prefix="MYAPP_")
    except FieldParseError as e:
        logger.error(f"Invalid configuration: {e}")
        raise SystemExit(1) from e

    print(f"App: {config.name} (debug={config.debug})")
    print(f"Database: {config.database.username}@{config.database.host}:{config.database.port}")
    print(f"Database password: {config.database.password}")
    print(f"Server: {config.server.host}:{config.server.port} x{config.server.workers}")
    print(f"Allowed hosts: {config.server.allowed_hosts}")


if __name__ == "__main__":
    main()
