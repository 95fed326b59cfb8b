"""Configuration for the archive REST client."""

from dataclasses import dataclass

from vidarchive.lib.config_manager import config


@dataclass
class ArchiveClientConfig:
    """Connection settings for the recording service.

    Attributes:
        api_key: Project API key (also part of every endpoint path)
        api_secret: Project API secret
        api_url: Base URL of the REST API
        timeout: Request timeout in seconds
    """

    api_key: str
    api_secret: str
    api_url: str = "https://api.opentok.com"
    timeout: float = 30.0

    def __post_init__(self):
        """Validate configuration."""
        if not self.api_key:
            raise ValueError("api_key is required")
        if not self.api_secret:
            raise ValueError("api_secret is required")
        if self.timeout <= 0:
            raise ValueError(f"Invalid timeout: {self.timeout}. Must be positive")
        self.api_url = self.api_url.rstrip("/")

    @classmethod
    def from_env(cls) -> "ArchiveClientConfig":
        """Load settings via the shared config manager (.env → env → defaults)."""
        return cls(
            api_key=str(config.get("ARCHIVE_API_KEY")),
            api_secret=str(config.get("ARCHIVE_API_SECRET")),
            api_url=config.get("ARCHIVE_API_URL"),
            timeout=float(config.get("ARCHIVE_TIMEOUT")),
        )
