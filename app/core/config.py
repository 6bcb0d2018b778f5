from pydantic_settings import BaseSettings
from dotenv import load_dotenv
from pathlib import Path
import os


load_dotenv()


class Settings(BaseSettings):
    app_name: str = "Rail Track Fitting Registry"
    app_version: str = "1.0.0"
    debug: bool = False
    database_url: str = ""
    host: str = "127.0.0.1"
    port: int = 8000
    secret_key: str = ""
    access_token_expire_minutes: int = 15
    refresh_token_expire_minutes: int = 60 * 24 * 7
    allowed_hosts: str = ""
    static_dir: Path = Path(__file__).parent.parent.parent / "static"
    public_url: str = "http://localhost:8000"
    log_file: str = "logs/application.log"

    # Shared secrets for the inbound integrations
    ircept_api_key: str = ""
    ireps_api_key: str = ""

    qr_code_max_attempts: int = 5
    scan_history_limit: int = 3
    recent_activity_limit: int = 20


settings = Settings()

if not settings.secret_key:
    raise RuntimeError("Secret key not configured.")

if not settings.database_url:
    raise RuntimeError("Database URL not configured.")


os.makedirs(settings.static_dir, exist_ok=True)
