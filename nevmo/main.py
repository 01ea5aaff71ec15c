from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from nevmo.config import Settings, get_settings, settings
from nevmo.deps import aclose_shared, get_transfer_client
from nevmo.errors import MomoError, NotFoundError, ValidationError
from nevmo.logging_config import get_logger, setup_logging
from nevmo.records import utcnow
from nevmo.schemas.responses import HealthResponse
from nevmo.services.transfers import TransferClient

logger = get_logger("nevmo")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("Akin NevMo starting: donations go to +%s", settings.platform_phone)
    logger.info("Provider=%s environment=%s ledger=%s", settings.provider, settings.target_environment, settings.ledger_backend)
    if settings.provider == "mtn" and settings.uses_placeholder_credentials:
        logger.warning("MTN credentials are placeholders; set MTN_CONSUMER_KEY, MTN_CONSUMER_SECRET and MTN_SUBSCRIPTION_KEY in .env")
    yield
    await aclose_shared()
    logger.info("Akin NevMo shutting down")


app = FastAPI(
    title="Akin NevMo",
    description="Donate, save and withdraw through MTN Mobile Money disbursements",
    version="1.0.0",
    lifespan=lifespan,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    response = await call_next(request)
    logger.info("HTTP %s %s -> %s", request.method, request.url.path, response.status_code)
    return response


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    err = exc.errors()[0]
    field = err["loc"][-1] if err.get("loc") else "body"
    if err.get("type") == "missing":
        message = f"{field} is required"
    else:
        message = str(err.get("msg", "Invalid request")).removeprefix("Value error, ")
    return _error(400, message)


@app.exception_handler(ValidationError)
async def validation_handler(request: Request, exc: ValidationError):
    return _error(400, str(exc))


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return _error(404, str(exc))


@app.exception_handler(MomoError)
async def provider_error_handler(request: Request, exc: MomoError):
    # payload was logged where the error was raised
    return _error(500, str(exc))


@app.get("/health", response_model=HealthResponse)
def health_check(
    client: TransferClient = Depends(get_transfer_client),
    cfg: Settings = Depends(get_settings),
):
    return HealthResponse(
        status="OK",
        platform_phone=cfg.platform_phone,
        target_environment=cfg.target_environment,
        provider=client.provider.provider_name,
        transaction_count=client.store.count(),
        timestamp=utcnow(),
    )


from nevmo.routers import payments, transactions  # noqa: E402
app.include_router(payments.router, prefix="/api", tags=["payments"])
app.include_router(transactions.router, prefix="/api", tags=["transactions"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("nevmo.main:app", host=settings.host, port=settings.port, log_config=None)
