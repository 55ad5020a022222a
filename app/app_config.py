from pydantic import BaseModel

from app.shared.config import config


def _split_csv(value: str | None) -> list[str]:
    return [item.strip() for item in (value or "").split(",") if item.strip()]


class AppEnvironConfig(BaseModel):
    DEBUG: bool = str(config.get("DEBUG", "false")).strip().lower() == "true"

    API_HOST: str = config.get("API_HOST", "0.0.0.0").strip()  # type: ignore
    API_PORT: int = int((config.get("API_PORT") or "").strip() or 8000)
    API_WORKERS: int = int((config.get("API_WORKERS") or "").strip() or 1)
    API_CORS_ORIGINS: list[str] = _split_csv(config.get("API_CORS_ORIGINS")) or ["*"]

    # Auth: bearer tokens issued by the managed auth platform
    JWT_SECRET: str | None = (config.get("JWT_SECRET") or "").strip() or None
    JWT_AUDIENCE: str = config.get("JWT_AUDIENCE", "authenticated").strip()  # type: ignore

    # Cloudflare Stream configuration
    CF_ACCOUNT_ID: str | None = config.get_first("CF_ACCOUNT_ID", "CLOUDFLARE_ACCOUNT_ID")
    CF_API_TOKEN: str | None = config.get_first("CF_API_TOKEN", "CLOUDFLARE_API_TOKEN")
    CF_API_BASE_URL: str = config.get(
        "CF_API_BASE_URL", "https://api.cloudflare.com/client/v4"
    ).strip()  # type: ignore

    # FCM configuration
    FCM_SERVER_KEY: str | None = (config.get("FCM_SERVER_KEY") or "").strip() or None
    FCM_SEND_URL: str = config.get("FCM_SEND_URL", "https://fcm.googleapis.com/fcm/send").strip()  # type: ignore

    # Outbound HTTP timeout in seconds
    HTTP_TIMEOUT: float = float((config.get("HTTP_TIMEOUT") or "").strip() or 30)


_app_environ_config = AppEnvironConfig()


def get_app_environ_config() -> AppEnvironConfig:
    return _app_environ_config
