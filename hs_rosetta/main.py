import base64
import binascii
import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from hs_rosetta.api_v1 import account, block, construction, mempool, network
from hs_rosetta.core import crypto
from hs_rosetta.core.chain import MongoChain
from hs_rosetta.core.config import settings
from hs_rosetta.core.database import close_mongo_connection, connect_to_mongo
from hs_rosetta.core.errors import InvalidFieldError, RosettaError, UnknownError

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("hs_rosetta")

app = FastAPI(title="Handshake Rosetta API", version=settings.MIDDLEWARE_VERSION)


@app.on_event("startup")
async def startup_event():
    await connect_to_mongo()
    app.state.chain = MongoChain(settings.network)

    if not settings.NO_AUTH and not settings.API_KEY:
        settings.API_KEY = crypto.generate_api_key()
        logger.warning("No API_KEY configured, generated one for this process: %s", settings.API_KEY)

    logger.info("Serving %s/%s on %s:%d.", settings.BLOCKCHAIN, settings.NETWORK, settings.HOST, settings.PORT)


@app.on_event("shutdown")
async def shutdown_event():
    await close_mongo_connection()


def _check_basic_auth(header: str) -> bool:
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() != "basic" or not settings.API_KEY:
        return False
    try:
        decoded = base64.b64decode(credentials, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return False
    _, _, password = decoded.partition(":")
    return crypto.verify_api_key(password, crypto.hash_api_key(settings.API_KEY))


def _is_preflight(request: Request) -> bool:
    return request.method == "OPTIONS" and "access-control-request-method" in request.headers


@app.middleware("http")
async def auth_and_log(request: Request, call_next):
    client = request.client.host if request.client else "-"
    logger.debug("Request for method=%s path=%s (%s).", request.method, request.url.path, client)

    if _is_preflight(request):
        return await call_next(request)

    if not settings.NO_AUTH and not _check_basic_auth(request.headers.get("authorization", "")):
        return JSONResponse(
            status_code=401,
            content={"code": 401, "message": "Unauthorized.", "retriable": False},
            headers={"WWW-Authenticate": 'Basic realm="node"'},
        )

    return await call_next(request)


# Added last so that it wraps the auth middleware and answers preflights.
if settings.CORS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["POST"],
        allow_headers=["*"],
    )


@app.exception_handler(RosettaError)
async def rosetta_error_handler(request: Request, exc: RosettaError):
    logger.debug("Request to %s failed: %s", request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"loc": ".".join(str(part) for part in err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    error = InvalidFieldError(details={"errors": errors})
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


@app.exception_handler(Exception)
async def unknown_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s", request.url.path)
    error = UnknownError()
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


# Include API routers
app.include_router(network.router)
app.include_router(account.router)
app.include_router(block.router)
app.include_router(construction.router)
app.include_router(mempool.router)


def main():
    uvicorn.run("hs_rosetta.main:app", host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
