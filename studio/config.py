from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass
class Config:
    secret_key: str = "change-me"
    database_url: str = "sqlite:///studio.db"
    session_cookie_name: str = "studio_sid"
    session_ttl_seconds: int = 86400  # 24h
    password_hash_method: str = "scrypt"
    app_env: str = "development"
    log_level: str = "INFO"
    public_dir: str = ""  # empty -> <project>/public

    @classmethod
    def from_env(cls) -> Config:
        return cls(
            secret_key=os.getenv("SECRET_KEY", "change-me"),
            database_url=os.getenv("DATABASE_URL", "sqlite:///studio.db"),
            session_cookie_name=os.getenv("SESSION_COOKIE_NAME", "studio_sid"),
            session_ttl_seconds=int(os.getenv("SESSION_TTL_SECONDS", "86400")),
            password_hash_method=os.getenv("PASSWORD_HASH_METHOD", "scrypt"),
            app_env=os.getenv("APP_ENV", "development"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            public_dir=os.getenv("PUBLIC_DIR", ""),
        )

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")

    def override(self, d: dict):
        for k, v in d.items():
            if hasattr(self, k):
                setattr(self, k, v)

    def to_flask_dict(self):
        return {
            "SECRET_KEY": self.secret_key,
            "SQLALCHEMY_DATABASE_URI": self.database_url,
            "SESSION_COOKIE_NAME_STUDIO": self.session_cookie_name,
            "SESSION_TTL_SECONDS": self.session_ttl_seconds,
            "PASSWORD_HASH_METHOD": self.password_hash_method,
            # Cookies carry the Secure flag only in production
            "COOKIE_SECURE": self.is_production,
            "SESSION_COOKIE_HTTPONLY": True,
            "SESSION_COOKIE_SAMESITE": "Lax",
        }
