from pydantic import PrivateAttr
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Loan Origination Workflow API"
    debug: bool = False
    log_level: str = "INFO"

    database_url: str = "sqlite+aiosqlite:///./loan_workflow.db"
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"

    # External session provider; the request's cookies/authorization are forwarded to it
    session_url: str = "http://localhost:3000/api/session"
    session_timeout_seconds: float = 5.0
    auth_disabled: bool = False
    dev_user_role: str = "ADMIN"

    reference_prefix: str = "DASHEN"

    upload_dir: str = "./uploads"
    public_base_url: str = "http://localhost:3005/uploads"
    max_upload_mb: int = 5

    min_loan_amount: int = 100_000
    max_loan_amount: int = 10_000_000

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    _is_sqlite: bool = PrivateAttr(default=False)
    _is_postgresql: bool = PrivateAttr(default=False)

    def model_post_init(self, __context: object) -> None:
        _scheme = self.database_url.split(":")[0].lower()
        object.__setattr__(self, "_is_sqlite", "sqlite" in _scheme)
        object.__setattr__(self, "_is_postgresql", "postgresql" in _scheme)

    @property
    def is_sqlite(self) -> bool:
        return self._is_sqlite

    @property
    def is_postgresql(self) -> bool:
        return self._is_postgresql

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


settings = Settings()
