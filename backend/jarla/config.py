import os


def _normalize_database_url(url: str) -> str:
    # Render/Heroku sometimes provide postgres:// which SQLAlchemy expects as postgresql://
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, "") or default)
    except ValueError:
        return default


class Config:
    # Base directory of the backend (one level above this `jarla` package)
    BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    INSTANCE_DIR = os.path.join(BACKEND_DIR, "instance")

    JARLA_ENV = (os.getenv("JARLA_ENV", "dev") or "dev").strip().lower()
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")

    _default_sqlite_path = os.path.join(INSTANCE_DIR, "jarla.db").replace("\\", "/")
    _db_url = os.getenv("DATABASE_URL") or os.getenv("SQLALCHEMY_DATABASE_URI") or f"sqlite:///{_default_sqlite_path}"
    SQLALCHEMY_DATABASE_URI = _normalize_database_url(_db_url)
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    AUTO_CREATE_TABLES = os.getenv("AUTO_CREATE_TABLES", "1") == "1"

    # CORS: comma-separated origins for web builds (e.g. https://jarla.app,https://business.jarla.app)
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "")

    # OpenAI-compatible chat completions gateway
    AI_GATEWAY_URL = os.getenv("AI_GATEWAY_URL", "https://ai.gateway.lovable.dev/v1/chat/completions")
    AI_GATEWAY_API_KEY = os.getenv("AI_GATEWAY_API_KEY", "")
    AI_RETRY_DELAY_SECONDS = _float_env("AI_RETRY_DELAY_SECONDS", 2.0)

    FIRECRAWL_API_URL = os.getenv("FIRECRAWL_API_URL", "https://api.firecrawl.dev/v1/scrape")
    FIRECRAWL_API_KEY = os.getenv("FIRECRAWL_API_KEY", "")

    HTTP_TIMEOUT_SECONDS = _float_env("HTTP_TIMEOUT_SECONDS", 20.0)

    # Background TikTok stats refresh; 0 disables the scheduler
    STATS_REFRESH_MINUTES = int(_float_env("STATS_REFRESH_MINUTES", 0))
    STATS_REFRESH_BATCH = int(_float_env("STATS_REFRESH_BATCH", 200))
