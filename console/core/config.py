from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Base URL of the Bencher API; endpoints are built as {base}/v0/...
    BENCHER_API_URL: str = "http://localhost"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Seconds before an upstream read or write is abandoned.
    API_TIMEOUT: float = 30.0

    # Attaching the bearer token only works with explicit CORS on the API,
    # so it stays off unless configured.
    ATTACH_AUTH_HEADER: bool = False
    API_TOKEN: str | None = None

    # Screen sessions kept per process before the oldest is evicted.
    MAX_SCREEN_SESSIONS: int = 1024

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://console.bencher.dev,https://bencher.dev"
    CORS_ORIGINS: str = "*"

    @property
    def api_url(self) -> str:
        return self.BENCHER_API_URL.rstrip("/")

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
