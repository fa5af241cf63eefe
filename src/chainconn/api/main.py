import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from chainconn.api.chains import router as chains_router
from chainconn.api.rpc import router as rpc_router
from chainconn.api.session import router as session_router
from chainconn.container import Container
from chainconn.db.session import create_schema
from chainconn.exceptions import (
    AllEndpointsExhaustedError,
    HandshakeError,
    NoEndpointsConfiguredError,
    SessionNotConnectedError,
    UnknownChainError,
)

logger = logging.getLogger("chainconn.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    container = Container()
    app.state.container = container
    await create_schema(container.engine())
    context = container.context()
    await context.start()
    yield
    await context.close()
    await container.engine().dispose()


app = FastAPI(title="chainconn", version="0.1.0", lifespan=lifespan)


@app.exception_handler(UnknownChainError)
async def unknown_chain_handler(request: Request, exc: UnknownChainError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(NoEndpointsConfiguredError)
async def no_endpoints_handler(request: Request, exc: NoEndpointsConfiguredError):
    logger.error("Misconfigured chain on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.exception_handler(AllEndpointsExhaustedError)
async def exhausted_handler(request: Request, exc: AllEndpointsExhaustedError):
    return JSONResponse(
        status_code=502,
        content={
            "detail": str(exc),
            "attempted": exc.attempted,
            "skipped": exc.skipped,
        },
    )


@app.exception_handler(SessionNotConnectedError)
async def not_connected_handler(request: Request, exc: SessionNotConnectedError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(HandshakeError)
async def handshake_handler(request: Request, exc: HandshakeError):
    return JSONResponse(status_code=502, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    tb = traceback.format_exception(type(exc), exc, exc.__traceback__)
    logger.error("Unhandled error on %s %s:\n%s", request.method, request.url.path, "".join(tb))
    return JSONResponse(status_code=500, content={"detail": str(exc)})


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(chains_router)
app.include_router(rpc_router)
app.include_router(session_router)


@app.get("/api/health")
async def health():
    return {"status": "ok", "version": "0.1.0"}
