import logging

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from backend.app.errors import EntitlementError
from backend.app.routes.entitlements import router as entitlements_router
from backend.app.routes.notifications import router as notifications_router
from backend.app.services.entitlements import get_app_config

load_dotenv()

logger = logging.getLogger("entitlement_sync")

app = FastAPI(title="Entitlement Sync API")

app.include_router(entitlements_router)
app.include_router(notifications_router)


@app.exception_handler(EntitlementError)
async def handle_entitlement_error(_request: Request, exc: EntitlementError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=dict(exc.payload))


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info(
        "Rejected malformed request body",
        extra={"path": request.url.path, "error_count": len(exc.errors())},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "bad_request", "message": "Invalid request body"},
    )


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


def run() -> None:
    config = get_app_config()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Server starting on port %s", config.port)
    uvicorn.run(app, host="0.0.0.0", port=config.port)


if __name__ == "__main__":
    run()
