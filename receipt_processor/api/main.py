"""FastAPI application for receipt processing.

Endpoints:
- POST /receipts/process: validate and store a receipt, returning its id
- GET /receipts/{id}/points: score a stored receipt
- Health, readiness and Prometheus metrics endpoints

Run with: python -m receipt_processor.api.main

Based on FastAPI best practices:
https://fastapi.tiangolo.com/
"""

import logging
import time

from fastapi import Depends, FastAPI, HTTPException, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from receipt_processor.api import metrics
from receipt_processor.receipts.schema import PointsResponse, ProcessResponse, Receipt
from receipt_processor.receipts.scorer import score_receipt
from receipt_processor.receipts.validator import validate_receipt
from receipt_processor.shared.config import get_settings
from receipt_processor.storage.service import (
    IdentifierGenerationError,
    IdFactory,
    InMemoryReceiptStore,
    ReceiptNotFoundError,
    ReceiptStore,
    generate_receipt_id,
    save_receipt,
)

logger = logging.getLogger(__name__)

settings = get_settings()
app = FastAPI(
    title="Receipt Processor",
    description="Receipt validation and loyalty point scoring API",
    version=settings.service_version,
)

receipt_store = InMemoryReceiptStore()


def get_receipt_store() -> ReceiptStore:
    """Dependency providing the receipt store."""
    return receipt_store


def get_id_factory() -> IdFactory:
    """Dependency providing the receipt id generator."""
    return generate_receipt_id


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Middleware to collect request metrics.

    Tracks:
    - Request count by method, endpoint, and status
    - Request duration by method and endpoint
    """
    # Skip metrics for /metrics endpoint itself
    if request.url.path == "/metrics":
        return await call_next(request)

    start_time = time.time()
    response = await call_next(request)
    duration = time.time() - start_time

    # Label by route template so receipt ids don't explode label cardinality
    route = request.scope.get("route")
    endpoint = getattr(route, "path", request.url.path)

    metrics.http_requests_total.labels(
        method=request.method,
        endpoint=endpoint,
        status=response.status_code,
    ).inc()

    metrics.http_request_duration_seconds.labels(
        method=request.method,
        endpoint=endpoint,
    ).observe(duration)

    return response


@app.exception_handler(RequestValidationError)
async def malformed_payload_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report payloads that don't match the receipt schema as client errors."""
    logger.info(f"Malformed payload on {request.url.path}: {exc.errors()}")
    if request.url.path == "/receipts/process":
        metrics.receipts_processed_total.labels(status="rejected").inc()
        metrics.receipt_rejections_total.labels(reason="malformed-payload").inc()
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "The receipt is invalid"},
    )


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    service: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    ready: bool


@app.get("/health", response_model=HealthResponse, tags=["Health"])
def health_check() -> HealthResponse:
    """Health check endpoint for liveness probe.

    Returns:
        Health status information
    """
    return HealthResponse(
        status="healthy", version=settings.service_version, service=settings.service_name
    )


@app.get("/ready", response_model=ReadinessResponse, tags=["Health"])
def readiness_check() -> ReadinessResponse:
    """Readiness check endpoint.

    Returns:
        Readiness status
    """
    return ReadinessResponse(ready=True)


@app.get("/metrics", tags=["Monitoring"])
def get_metrics() -> Response:
    """Prometheus metrics endpoint.

    Returns:
        Prometheus metrics in text format
    """
    metrics_data, content_type = metrics.get_metrics()
    return Response(content=metrics_data, media_type=content_type)


@app.post("/receipts/process", response_model=ProcessResponse, tags=["Receipts"])
def process_receipt(
    receipt: Receipt,
    store: ReceiptStore = Depends(get_receipt_store),  # noqa: B008
    id_factory: IdFactory = Depends(get_id_factory),  # noqa: B008
) -> ProcessResponse:
    """Validate a receipt and store it under a new id.

    ## Usage Example

    ```bash
    curl -X POST "http://localhost:8080/receipts/process" \\
      -H "Content-Type: application/json" \\
      -d '{"retailer": "Target", "purchaseDate": "2022-01-01",
           "purchaseTime": "13:01", "total": "6.49",
           "items": [{"shortDescription": "Mountain Dew 12PK", "price": "6.49"}]}'
    ```

    ## Error Handling

    - Returns 400 if the receipt is malformed or fails validation
    - Returns 500 if no receipt id could be generated

    Args:
        receipt: Submitted receipt
        store: Receipt store
        id_factory: Receipt id generator

    Returns:
        Response carrying the new receipt id

    Raises:
        HTTPException: If the receipt is rejected or id generation fails
    """
    result = validate_receipt(receipt)
    if not result.accepted:
        reason = result.rejection
        logger.info(f"Rejected receipt from {receipt.retailer!r}: {reason.value}")
        metrics.receipts_processed_total.labels(status="rejected").inc()
        metrics.receipt_rejections_total.labels(reason=reason.value).inc()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=reason.message)

    try:
        receipt_id = save_receipt(
            store, receipt, id_factory=id_factory, max_attempts=settings.id_max_attempts
        )
    except IdentifierGenerationError as e:
        logger.error(f"Could not store receipt: {e}")
        metrics.receipts_processed_total.labels(status="failed").inc()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not generate a receipt id",
        ) from e

    metrics.receipts_processed_total.labels(status="accepted").inc()
    return ProcessResponse(id=receipt_id)


@app.get("/receipts/{receipt_id}/points", response_model=PointsResponse, tags=["Receipts"])
def get_points(
    receipt_id: str,
    store: ReceiptStore = Depends(get_receipt_store),  # noqa: B008
) -> PointsResponse:
    """Return the points awarded to a stored receipt.

    Args:
        receipt_id: Id returned by POST /receipts/process
        store: Receipt store

    Returns:
        Points response

    Raises:
        HTTPException: 404 if no receipt has this id
    """
    try:
        receipt = store.get(receipt_id)
    except ReceiptNotFoundError as e:
        metrics.points_lookups_total.labels(status="not_found").inc()
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="No receipt found for that ID."
        ) from e

    points = score_receipt(receipt)

    metrics.points_lookups_total.labels(status="found").inc()
    metrics.points_awarded.observe(points)
    return PointsResponse(points=points)


def main() -> None:
    """Run the API server with uvicorn."""
    import uvicorn

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info(f"Starting {settings.service_name} on {settings.host}:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
