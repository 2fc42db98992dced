"""Observability setup: logging, tracing, metrics, and error tracking."""

import logging
import time
import uuid
from contextvars import ContextVar

import sentry_sdk
import structlog
from fastapi import FastAPI, Request, Response
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from prometheus_client import Counter, Gauge, Histogram, generate_latest
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from linktracker.core.config import Settings

# Context variable for request ID (accessible throughout the request lifecycle)
request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)

# Prometheus metrics - HTTP requests
REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "endpoint"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

# Prometheus metrics - Slug resolution
REDIRECT_COUNT = Counter(
    "redirects_total",
    "Total slug resolutions",
    ["outcome"],  # redirect, not_found, asset
)

LINK_CACHE_LOOKUPS = Counter(
    "link_cache_lookups_total",
    "Link cache lookups on the redirect path",
    ["result"],  # hit, miss, error
)

LINK_OPERATIONS = Counter(
    "link_operations_total",
    "Total link operations",
    ["operation"],  # create, delete
)

# Prometheus metrics - Background click writes
CLICK_EVENTS_STORED = Counter(
    "click_events_stored_total",
    "Click events successfully stored",
)

CLICK_EVENTS_FAILED = Counter(
    "click_events_failed_total",
    "Click events that failed to store",
)

PENDING_CLICK_WRITES = Gauge(
    "click_events_pending",
    "Click event writes scheduled but not yet finished",
)


def get_request_id() -> str | None:
    """Get the current request ID from context."""
    return request_id_ctx.get()


def normalize_endpoint(path: str) -> str:
    """Collapse path parameters to keep metric label cardinality bounded."""
    if path.startswith("/api/analytics/"):
        return "/api/analytics/{slug}"
    if path.startswith("/api/") or path in ("/", "/analytics", "/health", "/metrics"):
        return path
    # Redirect and asset paths
    return "/{slug}"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Middleware to add a unique request ID to each request.

    The request ID is:
    - Generated if not provided in X-Request-ID header
    - Stored in context variable for access throughout the request
    - Added to response headers
    - Bound to structlog context for all log messages
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        token = request_id_ctx.set(request_id)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            request_id_ctx.reset(token)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all requests with timing information."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        logger = structlog.get_logger()
        start_time = time.perf_counter()

        logger.info(
            "Request started",
            client_ip=request.client.host if request.client else None,
            user_agent=request.headers.get("User-Agent"),
        )

        response = await call_next(request)
        duration = time.perf_counter() - start_time

        logger.info(
            "Request completed",
            status_code=response.status_code,
            duration_ms=round(duration * 1000, 2),
        )

        endpoint = normalize_endpoint(request.url.path)
        REQUEST_COUNT.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).inc()
        REQUEST_LATENCY.labels(
            method=request.method,
            endpoint=endpoint,
        ).observe(duration)

        return response


def configure_structlog(debug: bool = False) -> None:
    """Configure structlog for JSON logging with context variables."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=logging.DEBUG if debug else logging.INFO,
    )


def setup_opentelemetry(app: FastAPI, settings: Settings) -> None:
    """Set up OpenTelemetry tracing."""
    if not settings.otlp_endpoint:
        structlog.get_logger().info("OpenTelemetry disabled (no OTLP endpoint configured)")
        return

    resource = Resource(attributes={
        SERVICE_NAME: "link-tracker",
    })
    provider = TracerProvider(resource=resource)

    otlp_exporter = OTLPSpanExporter(
        endpoint=settings.otlp_endpoint,
        insecure=True,  # Set to False in production with TLS
    )
    provider.add_span_processor(BatchSpanProcessor(otlp_exporter))
    trace.set_tracer_provider(provider)

    FastAPIInstrumentor.instrument_app(app)

    structlog.get_logger().info(
        "OpenTelemetry configured",
        otlp_endpoint=settings.otlp_endpoint,
    )


def setup_sentry(settings: Settings) -> None:
    """Set up Sentry for error tracking."""
    if not settings.sentry_dsn:
        structlog.get_logger().info("Sentry disabled (no DSN configured)")
        return

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment="development" if settings.debug else "production",
        traces_sample_rate=0.1,
        integrations=[
            StarletteIntegration(transaction_style="endpoint"),
            FastApiIntegration(transaction_style="endpoint"),
        ],
        # Click metrics already hold IPs; keep them out of Sentry
        send_default_pii=False,
    )

    structlog.get_logger().info("Sentry configured")


def setup_observability(app: FastAPI, settings: Settings) -> None:
    """Set up logging, tracing, error tracking and the metrics endpoint."""
    configure_structlog(settings.debug)

    setup_sentry(settings)
    setup_opentelemetry(app, settings)

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        """Prometheus metrics endpoint."""
        return Response(
            content=generate_latest(),
            media_type="text/plain; charset=utf-8",
        )

    structlog.get_logger().info("Observability setup complete")


# Helper functions to record custom metrics
def record_resolution(outcome: str) -> None:
    """Record the outcome of a slug resolution."""
    REDIRECT_COUNT.labels(outcome=outcome).inc()


def record_cache_lookup(result: str) -> None:
    """Record a link cache lookup."""
    LINK_CACHE_LOOKUPS.labels(result=result).inc()


def record_link_operation(operation: str) -> None:
    """Record a link operation in Prometheus metrics."""
    LINK_OPERATIONS.labels(operation=operation).inc()


def record_click_stored() -> None:
    """Record a click event written to the store."""
    CLICK_EVENTS_STORED.inc()


def record_click_failed() -> None:
    """Record a click event that could not be written."""
    CLICK_EVENTS_FAILED.inc()


def set_pending_clicks(count: int) -> None:
    """Set the number of in-flight click writes."""
    PENDING_CLICK_WRITES.set(count)
