from pydantic_settings import BaseSettings

from chainconn.domain.enums import ConnectorKind


class Settings(BaseSettings):
    walletconnect_project_id: str = ""
    rpc_overrides: dict[int, str] = {}  # chain id -> trusted endpoint, tried first
    rpc_timeout: float = 30.0
    rpc_failure_threshold: int = 3
    rpc_backoff_base: float = 5.0
    rpc_backoff_cap: float = 300.0
    handshake_timeout: float = 30.0
    wallet_connector: ConnectorKind = ConnectorKind.WALLETCONNECT
    app_name: str = "chainconn"
    app_description: str = "Multi-chain wallet connectivity"
    app_url: str = "https://localhost"
    app_icon: str = ""
    database_url: str = "sqlite+aiosqlite:///./chainconn.db"
    debug: bool = False

    @property
    def app_icons(self) -> list[str]:
        return [self.app_icon] if self.app_icon else []

    class Config:
        env_file = ".env"
