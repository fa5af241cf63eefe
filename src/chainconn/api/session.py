from typing import Annotated, Optional

from fastapi import APIRouter, Depends

from chainconn.api.deps import get_context
from chainconn.api.schemas.session import InitializeRequest, SwitchChainRequest, WalletList
from chainconn.connectivity import ConnectivityContext
from chainconn.domain.models.session import Session
from chainconn.wallet.connectors import wallet_options

router = APIRouter(prefix="/api/session", tags=["session"])

ContextDep = Annotated[ConnectivityContext, Depends(get_context)]


@router.get("", response_model=Session)
async def get_session(context: ContextDep) -> Session:
    return context.session


@router.get("/wallets", response_model=WalletList)
async def list_wallets() -> WalletList:
    return WalletList(wallets=wallet_options())


@router.post("/initialize", response_model=Session)
async def initialize(context: ContextDep, body: Optional[InitializeRequest] = None) -> Session:
    """Handshake failures come back as state=error, not as an HTTP error."""
    chain_id = body.chain_id if body else None
    return await context.initialize(chain_id)


@router.post("/reconnect", response_model=Session)
async def reconnect(context: ContextDep) -> Session:
    return await context.reconnect()


@router.post("/switch-chain", response_model=Session)
async def switch_chain(body: SwitchChainRequest, context: ContextDep) -> Session:
    return await context.switch_chain(body.chain_id)


@router.post("/disconnect", response_model=Session)
async def disconnect(context: ContextDep) -> Session:
    return await context.disconnect()
