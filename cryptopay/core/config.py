"""Application configuration using pydantic settings with structured sections."""

from decimal import Decimal
from functools import lru_cache
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class _Section(BaseModel):
    model_config = ConfigDict(frozen=True)


class ServerSettings(_Section):
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False


class DatabaseSettings(_Section):
    url: str = Field(default="sqlite+aiosqlite:///./payments.db", alias="url")
    echo: bool = False
    pool_size: Optional[int] = None
    max_overflow: Optional[int] = None


class WalletSettings(_Section):
    """Static receiving addresses, one per supported currency."""

    bitcoin_address: Optional[str] = None
    litecoin_address: Optional[str] = None

    def address_for(self, currency: str) -> Optional[str]:
        address = getattr(self, f"{currency}_address", None)
        return address or None


class RateSettings(_Section):
    coingecko_url: str = "https://api.coingecko.com/api/v3"
    coindesk_url: str = "https://api.coindesk.com/v1"
    fiat_currency: str = "EUR"
    bitcoin_default_price: Decimal = Decimal("90000")
    litecoin_default_price: Decimal = Decimal("120")
    cache_ttl_seconds: int = Field(default=30, ge=0, le=60)

    def default_price_for(self, currency: str) -> Decimal:
        return getattr(self, f"{currency}_default_price")


class ExplorerSettings(_Section):
    blockstream_url: str = "https://blockstream.info/api"
    mempool_url: str = "https://mempool.space/api"
    blockchair_url: str = "https://api.blockchair.com"
    blockchair_api_key: Optional[str] = None
    litecoinspace_url: str = "https://litecoinspace.org/api"
    tolerance_minor_units: int = Field(default=1000, ge=0)


class HttpSettings(_Section):
    timeout_seconds: float = Field(default=10.0, gt=0)
    user_agent: str = "cryptopay/0.1"


class ReconciliationSettings(_Section):
    sweep_enabled: bool = False
    sweep_interval_seconds: int = Field(default=300, ge=5)
    sweep_max_age_hours: int = Field(default=72, ge=1)
    sweep_batch_limit: Optional[int] = None
    binding_ttl_minutes: int = Field(default=60, ge=1)


class LoggingSettings(_Section):
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class Settings(BaseSettings):
    """Top-level application settings with nested sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
    )

    environment: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    project_name: str = "Crypto Payment Service"
    api_prefix: str = "/api"

    server: ServerSettings = ServerSettings()
    database: DatabaseSettings = DatabaseSettings()
    wallets: WalletSettings = WalletSettings()
    rates: RateSettings = RateSettings()
    explorers: ExplorerSettings = ExplorerSettings()
    http: HttpSettings = HttpSettings()
    reconciliation: ReconciliationSettings = ReconciliationSettings()
    logging: LoggingSettings = LoggingSettings()

    @property
    def database_url(self) -> str:
        return self.database.url

    @property
    def host(self) -> str:
        return self.server.host

    @property
    def port(self) -> int:
        return self.server.port


@lru_cache()
def get_settings() -> Settings:
    return Settings()
