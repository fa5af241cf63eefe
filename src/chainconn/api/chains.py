from typing import Annotated

from fastapi import APIRouter, Depends

from chainconn.api.deps import get_context
from chainconn.api.schemas.chains import ChainList, ChainResponse
from chainconn.connectivity import ConnectivityContext

router = APIRouter(prefix="/api/chains", tags=["chains"])

ContextDep = Annotated[ConnectivityContext, Depends(get_context)]


@router.get("", response_model=ChainList)
async def list_chains(context: ContextDep) -> ChainList:
    chains = [ChainResponse.from_descriptor(c) for c in context.registry.all()]
    return ChainList(chains=chains, total=len(chains))


@router.get("/{chain_id}", response_model=ChainResponse)
async def get_chain(chain_id: int, context: ContextDep) -> ChainResponse:
    return ChainResponse.from_descriptor(context.registry.lookup(chain_id))
