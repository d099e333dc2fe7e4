# backend/settings/prod.py
"""
PRODUCTION SETTINGS

Fails closed on anything that would make the ledger unsafe to run:
- DEBUG forced off, real SECRET_KEY required
- Postgres only: supplier payments rely on SELECT ... FOR UPDATE row locks
- CORS/CSRF origins explicit and https-only (the dashboard holds an SSE stream)
- Static files served by WhiteNoise behind a TLS-terminating proxy
"""

from __future__ import annotations

from django.core.exceptions import ImproperlyConfigured

from .base import *  # noqa: F403
from .base import BASE_DIR, MIDDLEWARE, env


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise ImproperlyConfigured(message)


def _https_origins(name: str) -> list[str]:
    origins = env.list(name, default=[])
    _require(bool(origins), f"{name} must be set in production.")
    for origin in origins:
        _require(
            origin.startswith("https://"),
            f"{name} entries must be https:// in production (got {origin}).",
        )
        _require(
            "localhost" not in origin and "127.0.0.1" not in origin,
            f"Remove local origins from {name} in production.",
        )
    return origins


DEBUG = False

# ---------------- SECRET KEY ----------------
SECRET_KEY = (env("SECRET_KEY", default="") or "").strip()
_require(
    bool(SECRET_KEY) and SECRET_KEY != "dev-insecure-change-me",
    "SECRET_KEY must be set to a strong value in production.",
)

# ---------------- HOSTS ----------------
ALLOWED_HOSTS = env.list("ALLOWED_HOSTS", default=[])
_require(bool(ALLOWED_HOSTS), "ALLOWED_HOSTS must be set in production.")

# ---------------- DATABASE ----------------
_database_url = (env("DATABASE_URL", default="") or "").strip()
_require(
    _database_url.startswith(("postgres://", "postgresql://")),
    "DATABASE_URL must point at Postgres in production.",
)
DATABASES = {"default": env.db("DATABASE_URL")}
DATABASES["default"]["CONN_MAX_AGE"] = env.int("DB_CONN_MAX_AGE", default=60)

# ---------------- STATIC (WhiteNoise) ----------------
STATIC_ROOT = env("STATIC_ROOT", default=str(BASE_DIR / "staticfiles"))
MIDDLEWARE.insert(1, "whitenoise.middleware.WhiteNoiseMiddleware")
STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage"},
}

# ---------------- PROXY / TLS ----------------
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
SECURE_SSL_REDIRECT = env.bool("SECURE_SSL_REDIRECT", default=True)
SECURE_HSTS_SECONDS = env.int("SECURE_HSTS_SECONDS", default=3600)
SECURE_HSTS_INCLUDE_SUBDOMAINS = env.bool("SECURE_HSTS_INCLUDE_SUBDOMAINS", default=True)
SECURE_HSTS_PRELOAD = env.bool("SECURE_HSTS_PRELOAD", default=False)

# ---------------- COOKIES / HEADERS ----------------
SESSION_COOKIE_SECURE = CSRF_COOKIE_SECURE = True
SESSION_COOKIE_HTTPONLY = CSRF_COOKIE_HTTPONLY = True
SESSION_COOKIE_SAMESITE = CSRF_COOKIE_SAMESITE = "Lax"

SECURE_CONTENT_TYPE_NOSNIFF = True
SECURE_REFERRER_POLICY = "same-origin"
SECURE_CROSS_ORIGIN_OPENER_POLICY = "same-origin"
X_FRAME_OPTIONS = "DENY"

# ---------------- CORS / CSRF ----------------
CORS_ALLOWED_ORIGINS = _https_origins("CORS_ALLOWED_ORIGINS")
CSRF_TRUSTED_ORIGINS = _https_origins("CSRF_TRUSTED_ORIGINS")
CORS_ALLOW_CREDENTIALS = False
