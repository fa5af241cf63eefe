from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from chainconn.connectivity import ConnectivityContext
from chainconn.container import Container


@inject
async def get_context(
    context: ConnectivityContext = Depends(Provide[Container.context]),
) -> ConnectivityContext:
    return context
