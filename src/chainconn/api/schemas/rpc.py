from typing import Any, Literal, Optional, Union

from pydantic import BaseModel

from chainconn.infra.rpc.transport import EndpointSnapshot


class JsonRpcRequest(BaseModel):
    jsonrpc: Literal["2.0"] = "2.0"
    id: Optional[Union[int, str]] = 1
    method: str
    params: list[Any] = []


class EndpointHealthList(BaseModel):
    chain_id: int
    endpoints: list[EndpointSnapshot]
