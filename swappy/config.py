"""Application configuration."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings with env var overrides."""

    # Audio
    sample_rate: int | None = None  # None keeps the file's native rate
    frame_size: int = 2048  # samples per analysis frame

    # Streaming transient detection
    transient_threshold: float = 0.15
    min_transient_gap: float = 0.05  # seconds

    # Offline beat detection
    beat_peak_threshold: float = 0.75
    beat_relative_threshold: float = 0.5

    # Stem split
    stem_crossover_hz: float = 200.0

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    max_upload_mb: int = 50
    log_level: str = "INFO"

    model_config = {"env_prefix": "SWAPPY_"}


settings = Settings()
