import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./review_access.db")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    API_RELOAD = data.get("API_RELOAD", False)
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    PUBLIC_ORIGIN = data.get("PUBLIC_ORIGIN", "http://localhost:5173")
    ACCESS_CODE_TTL_MINUTES = int(data.get("ACCESS_CODE_TTL_MINUTES", 30))
    INVITATION_TTL_DAYS = data.get("INVITATION_TTL_DAYS", None)
    BIND_MAX_ATTEMPTS = int(data.get("BIND_MAX_ATTEMPTS", 5))
    STREAM_POLL_SECONDS = float(data.get("STREAM_POLL_SECONDS", 2.0))
    STREAM_PING_SECONDS = float(data.get("STREAM_PING_SECONDS", 30))
