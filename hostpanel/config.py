from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings

BASE_DIR = Path(__file__).resolve().parent

DEFAULT_ADMIN_USERNAME = "admin"
DEFAULT_ADMIN_PASSWORD = "password"


class Settings(BaseSettings):
    # --- app ---
    app_name: str = "Host Panel"
    debug: bool = False
    log_level: str = "INFO"

    # --- database ---
    db_path: str = str(BASE_DIR / "db" / "hostpanel.db")

    # --- auth ---
    secret_key: str | None = None  # None = random per-process secret
    token_ttl_hours: float = 24.0
    bcrypt_rounds: int = 12
    admin_username: str = DEFAULT_ADMIN_USERNAME
    admin_password: str = DEFAULT_ADMIN_PASSWORD
    login_max_failures: int = 5  # 0 disables the throttle
    login_window_seconds: float = 60.0

    # --- collectors ---
    cache_ttl: float = 1.0  # must stay below the dashboard poll interval (2s)
    cpu_window_seconds: float = 0.25
    baseline_max_age: float = 5.0
    collect_timeout: float = 3.0
    disk_path: str = Path.cwd().anchor  # primary volume root
    aggregate_disks: bool = False
    process_limit: int = 20
    max_process_limit: int = 500

    # --- server ---
    host: str = "0.0.0.0"
    port: int = 3000
    request_timeout: float = 10.0
    cors_origins: list[str] = ["http://localhost:5173"]

    model_config = {"env_file": ".env", "env_prefix": "HOSTPANEL_"}


settings = Settings()
