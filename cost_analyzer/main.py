"""
Main FastAPI application bootstrap.
Configures middleware and includes routers.
"""
import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from cost_analyzer.core.config import config
from cost_analyzer.api.pricing import router as pricing_router
from cost_analyzer.api.recommendations import router as recommendations_router
from cost_analyzer.api.providers import router as providers_router
from cost_analyzer.api.templates import router as templates_router
from cost_analyzer.middleware.error_shaping import SafeErrorMiddleware
from cost_analyzer.middleware.rate_limiter import RateLimitMiddleware
from cost_analyzer.middleware.request_id import RequestIdMiddleware
from cost_analyzer.middleware.request_size_limiter import RequestSizeLimiterMiddleware
from cost_analyzer.pricing.rate_tables import DEFAULT_RATE_TABLE
from cost_analyzer.services.workload_normalizer import WorkloadValidationError


logger = logging.getLogger(__name__)

# Validate configuration on startup
try:
    config.validate()
except ValueError as error:
    # Fail fast with a clear message
    raise RuntimeError(f"Configuration error: {error}") from error

logger.info(
    "Pricing with rate table %s; provider service %s",
    DEFAULT_RATE_TABLE.version,
    config.PROVIDER_SERVICE_URL or "not configured (embedded catalogue)",
)


app = FastAPI(
    title="Multi-Cloud Cost Analyzer",
    description="Workload pricing and cost optimization recommendations across cloud providers",
)

# Middleware added last runs first: request id -> safe errors -> rate limit -> size limit
app.add_middleware(RequestSizeLimiterMiddleware)
app.add_middleware(RateLimitMiddleware)
app.add_middleware(SafeErrorMiddleware)
app.add_middleware(RequestIdMiddleware)

app.include_router(pricing_router)
app.include_router(recommendations_router)
app.include_router(providers_router)
app.include_router(templates_router)


@app.exception_handler(WorkloadValidationError)
async def workload_validation_handler(request: Request, error: WorkloadValidationError) -> JSONResponse:
    """Map invalid workloads to a 400 with every field error."""
    return JSONResponse(
        status_code=400,
        content={
            "status": "error",
            "error": "invalid_workload",
            "message": error.message,
            "errors": error.errors,
        }
    )


@app.get("/health")
async def health() -> dict:
    """Liveness check."""
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}
