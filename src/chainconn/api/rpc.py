from typing import Annotated, Any

from fastapi import APIRouter, Depends

from chainconn.api.deps import get_context
from chainconn.api.schemas.rpc import EndpointHealthList, JsonRpcRequest
from chainconn.connectivity import ConnectivityContext

router = APIRouter(prefix="/api/rpc", tags=["rpc"])

ContextDep = Annotated[ConnectivityContext, Depends(get_context)]


@router.post("/{chain_id}")
async def forward_rpc(chain_id: int, body: JsonRpcRequest, context: ContextDep) -> dict[str, Any]:
    """Forward a JSON-RPC call through the chain's fallback transport.

    JSON-RPC error objects from the node are returned as-is with HTTP 200.
    """
    connection = await context.connect(chain_id)
    return await connection.transport.request(body.model_dump())


@router.get("/{chain_id}/health", response_model=EndpointHealthList)
async def endpoint_health(chain_id: int, context: ContextDep) -> EndpointHealthList:
    transport = context.transport_for(chain_id)
    return EndpointHealthList(chain_id=chain_id, endpoints=transport.health())
