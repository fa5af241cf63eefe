from dependency_injector import containers, providers

from chainconn.chains.registry import build_default_registry
from chainconn.config import Settings
from chainconn.connectivity import ConnectivityContext
from chainconn.db.repos.credential_repo import SqlCredentialStore
from chainconn.db.session import build_engine, build_session_factory
from chainconn.domain.models.session import AppMetadata
from chainconn.infra.rpc.resolver import EndpointResolver
from chainconn.infra.rpc.transport import TransportLayer
from chainconn.session.manager import SessionManager
from chainconn.wallet.bridge import WalletBridge
from chainconn.wallet.connectors import build_connector


class Container(containers.DeclarativeContainer):
    wiring_config = containers.WiringConfiguration(modules=["chainconn.api.deps"])

    settings = providers.Singleton(Settings)

    registry = providers.Singleton(build_default_registry)

    resolver = providers.Singleton(
        EndpointResolver,
        registry=registry,
        overrides=settings.provided.rpc_overrides,
    )

    transports = providers.Singleton(
        TransportLayer,
        resolver=resolver,
        timeout=settings.provided.rpc_timeout,
        failure_threshold=settings.provided.rpc_failure_threshold,
        backoff_base=settings.provided.rpc_backoff_base,
        backoff_cap=settings.provided.rpc_backoff_cap,
    )

    engine = providers.Singleton(
        build_engine,
        database_url=settings.provided.database_url,
        echo=settings.provided.debug,
    )

    session_factory = providers.Singleton(
        build_session_factory,
        engine=engine,
    )

    credentials = providers.Singleton(SqlCredentialStore, session_factory=session_factory)

    # Supplied by the host application (wallet extension bridge / WalletConnect SDK)
    injected_provider = providers.Object(None)
    provider_factory = providers.Object(None)

    connector = providers.Singleton(
        build_connector,
        kind=settings.provided.wallet_connector,
        chain_ids=registry.provided.ids.call(),
        injected_provider=injected_provider,
        provider_factory=provider_factory,
    )

    app_metadata = providers.Singleton(
        AppMetadata,
        name=settings.provided.app_name,
        description=settings.provided.app_description,
        url=settings.provided.app_url,
        icons=settings.provided.app_icons,
    )

    bridge = providers.Singleton(
        WalletBridge,
        connector=connector,
        app_metadata=app_metadata,
        project_id=settings.provided.walletconnect_project_id,
    )

    sessions = providers.Singleton(
        SessionManager,
        bridge=bridge,
        credentials=credentials,
        handshake_timeout=settings.provided.handshake_timeout,
    )

    context = providers.Singleton(
        ConnectivityContext,
        registry=registry,
        transports=transports,
        sessions=sessions,
    )
