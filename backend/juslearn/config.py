"""Application settings and validation."""

import os
from pathlib import Path

BASE = Path(__file__).resolve().parent.parent


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class Settings:
    ENV: str
    DATABASE_URL: str
    UPLOAD_DIR: Path
    RESET_ON_STARTUP: bool
    ALLOW_RESET_OUTSIDE_DEV: bool
    ENFORCE_FOREIGN_KEYS: bool
    PASSWORD_ROUNDS: int
    ALLOW_DEV_CORS: bool
    LOG_LEVEL: str

    def __init__(self):
        self.ENV = os.getenv("ENV", "dev").lower()
        self.DATABASE_URL = os.getenv("JUSLEARN_DATABASE_URL", f"sqlite:///{BASE / 'juslearn.db'}")
        self.UPLOAD_DIR = Path(os.getenv("JUSLEARN_UPLOAD_DIR", str(BASE / "uploads")))
        # true wipes all tables on every start
        self.RESET_ON_STARTUP = _flag("JUSLEARN_RESET_ON_STARTUP", "true")
        self.ALLOW_RESET_OUTSIDE_DEV = _flag("JUSLEARN_ALLOW_RESET_OUTSIDE_DEV", "false")
        self.ENFORCE_FOREIGN_KEYS = _flag("JUSLEARN_ENFORCE_FOREIGN_KEYS", "false")
        self.PASSWORD_ROUNDS = int(os.getenv("JUSLEARN_PASSWORD_ROUNDS", "29000"))
        self.ALLOW_DEV_CORS = _flag("ALLOW_DEV_CORS", "true")
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self._validate()

    def _validate(self):
        if self.PASSWORD_ROUNDS < 10:
            raise RuntimeError("JUSLEARN_PASSWORD_ROUNDS must be at least 10")
        if self.ENV != "dev" and self.RESET_ON_STARTUP and not self.ALLOW_RESET_OUTSIDE_DEV:
            raise RuntimeError(
                "JUSLEARN_RESET_ON_STARTUP wipes all users and submissions; "
                "set JUSLEARN_ALLOW_RESET_OUTSIDE_DEV=true to use it outside dev"
            )


settings = Settings()
