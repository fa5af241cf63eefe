import chainconn.config
from chainconn.config import Settings
from chainconn.container import Container
from chainconn.domain.enums import ConnectorKind
from chainconn.wallet.connectors import InjectedConnector, WalletConnectConnector


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("WALLETCONNECT_PROJECT_ID", raising=False)
        settings = Settings(_env_file=None)
        assert settings.walletconnect_project_id == ""
        assert settings.rpc_overrides == {}
        assert settings.rpc_failure_threshold == 3
        assert settings.wallet_connector == ConnectorKind.WALLETCONNECT
        assert settings.app_icons == []

    def test_overrides_from_env(self, monkeypatch):
        monkeypatch.setenv("RPC_OVERRIDES", '{"1": "https://my-node.example", "137": "wss://poly.example"}')
        monkeypatch.setenv("WALLET_CONNECTOR", "injected")
        monkeypatch.setenv("APP_ICON", "https://example.com/icon.png")
        settings = Settings(_env_file=None)
        assert settings.rpc_overrides == {1: "https://my-node.example", 137: "wss://poly.example"}
        assert settings.wallet_connector == ConnectorKind.INJECTED
        assert settings.app_icons == ["https://example.com/icon.png"]

    def test_only_built_by_the_container(self):
        assert not hasattr(chainconn.config, "settings")


class TestContainer:
    def test_wires_walletconnect_by_default(self):
        container = Container()
        container.settings.override(Settings(_env_file=None, walletconnect_project_id="pid"))
        bridge = container.bridge()
        assert bridge.connector_kind == ConnectorKind.WALLETCONNECT
        assert isinstance(container.connector(), WalletConnectConnector)

    def test_injected_connector(self):
        container = Container()
        container.settings.override(Settings(_env_file=None, wallet_connector=ConnectorKind.INJECTED))
        assert isinstance(container.connector(), InjectedConnector)

    def test_overrides_reach_resolver(self):
        container = Container()
        container.settings.override(Settings(_env_file=None, rpc_overrides={1: "https://my-node.example"}))
        candidates = container.resolver().candidates_for(1)
        assert candidates[0].url == "https://my-node.example"

    def test_context_is_singleton(self):
        container = Container()
        container.settings.override(Settings(_env_file=None))
        assert container.context() is container.context()
        assert len(container.context().registry) == 10
