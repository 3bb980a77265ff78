"""Application config from environment."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str | None = None
    OTEL_EXPORTER_OTLP_ENDPOINT: str | None = None

    # NZBGeek indexer; the key goes into every outbound search URL
    NZBGEEK_API_KEY: str = ""
    NZBGEEK_API_URL: str = "https://api.nzbgeek.info/api"
    NZBGEEK_TIMEOUT_SECONDS: float = 30.0

    # sabcmd binary, relative to the working directory unless absolute
    SABCMD_PATH: str = "./sabcmd/sabcmd"
    SABCMD_TIMEOUT_SECONDS: float = 60.0
    SABCMD_MAX_CONCURRENCY: int = 4
    # When True, any stderr output from sabcmd counts as a failed add
    SABCMD_FAIL_ON_STDERR: bool = True


settings = Settings()
