import os
from functools import lru_cache
from pathlib import Path


DEVELOPERS = (
    {"first_name": "Guy", "last_name": "Cohen"},
    {"first_name": "Baruch", "last_name": "Ilyayev"},
    {"first_name": "Michael", "last_name": "Chernyak"},
)


class Settings:
    def __init__(
        self,
        database_url: str,
        timezone: str,
        log_level: str,
        host: str,
        ports: dict[str, int],
    ) -> None:
        self.database_url = database_url
        self.timezone = timezone
        self.log_level = log_level
        self.host = host
        self.ports = ports

    def port_for(self, service: str) -> int:
        override = os.getenv("PORT")
        if override:
            return int(override)
        return self.ports[service]


def _ensure_data_dir() -> Path:
    root = Path(os.getenv("COST_MANAGER_DATA_DIR", "./data")).resolve()
    root.mkdir(parents=True, exist_ok=True)
    return root


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    database_url = os.getenv("COST_MANAGER_DATABASE_URL")
    if not database_url:
        database_url = f"sqlite:///{_ensure_data_dir() / 'cost_manager.db'}"
    timezone = os.getenv("COST_MANAGER_TIMEZONE", "UTC")
    log_level = os.getenv("COST_MANAGER_LOG_LEVEL", "INFO").upper()
    host = os.getenv("COST_MANAGER_HOST", "127.0.0.1")
    ports = {
        "logs": int(os.getenv("COST_MANAGER_LOGS_PORT", "3001")),
        "users": int(os.getenv("COST_MANAGER_USERS_PORT", "3002")),
        "costs": int(os.getenv("COST_MANAGER_COSTS_PORT", "3003")),
        "about": int(os.getenv("COST_MANAGER_ABOUT_PORT", "3004")),
    }
    return Settings(
        database_url=database_url,
        timezone=timezone,
        log_level=log_level,
        host=host,
        ports=ports,
    )
