from typing import Optional

from pydantic import PrivateAttr
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Finance Navigator API"
    debug: bool = False
    log_level: str = "INFO"

    database_url: str = "sqlite+aiosqlite:///./finance_navigator.db"
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"

    # Secrets are hashed (SHA-256) into AES-256 keys; no built-in fallback.
    data_encryption_key: str = ""
    transport_encryption_key: Optional[str] = None

    plaid_client_id: str = ""
    plaid_secret: str = ""
    plaid_base_url: str = "https://sandbox.plaid.com"
    plaid_timeout_seconds: float = 15.0

    smtp_host: str = ""
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_use_tls: bool = True
    mail_from: str = "Genius Toyota <no-reply@example.com>"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    _is_sqlite: bool = PrivateAttr(default=False)

    def model_post_init(self, __context: object) -> None:
        _scheme = self.database_url.split(":")[0].lower()
        object.__setattr__(self, "_is_sqlite", "sqlite" in _scheme)

    @property
    def is_sqlite(self) -> bool:
        return self._is_sqlite

    @property
    def transport_secret(self) -> str:
        return self.transport_encryption_key or self.data_encryption_key

    @property
    def plaid_configured(self) -> bool:
        return bool(self.plaid_client_id and self.plaid_secret)


settings = Settings()
