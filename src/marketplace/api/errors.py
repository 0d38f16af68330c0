"""HTTP mapping for marketplace errors.

Protean's standard handlers cover validation (400), not-found (404),
invalid state (409) and invalid operation (422). Role failures and storage
failures need 403 and 503, so they get dedicated handlers here.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from marketplace.domain import logger
from marketplace.errors import PersistenceError, Unauthorized


def register_error_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)

    @app.exception_handler(Unauthorized)
    async def unauthorized_handler(request: Request, exc: Unauthorized) -> JSONResponse:
        return JSONResponse(status_code=403, content={"error": str(exc)})

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
        logger.warning("request_failed_on_storage", path=request.url.path, error=str(exc))
        return JSONResponse(status_code=503, content={"error": str(exc)})
