"""OpenTelemetry tracing hooks and in-process counters."""

from contextlib import contextmanager
from threading import Lock
from typing import Any, Generator, Optional

from opentelemetry import trace
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider

SERVICE_NAME = "whisperlink"

_metrics_lock = Lock()
_metrics: dict[str, int] = {
    "secrets_created_total": 0,
    "secrets_retrieved_total": 0,
    "secrets_not_found_total": 0,
    "secrets_expired_swept_total": 0,
    "sweeps_total": 0,
}


def get_tracer(name: str = SERVICE_NAME) -> Any:
    return trace.get_tracer(name)


def get_trace_context() -> dict[str, str]:
    """Return trace_id and span_id for current span (for log correlation)."""
    span_obj = trace.get_current_span()
    if span_obj is None or not span_obj.is_recording():
        return {}
    ctx = span_obj.get_span_context()
    return {"trace_id": format(ctx.trace_id, "032x"), "span_id": format(ctx.span_id, "016x")}


def init_telemetry(service_name: str = SERVICE_NAME, enabled: bool = False) -> None:
    """Install a tracer provider so spans are recorded and correlated in logs."""
    if not enabled:
        return
    if isinstance(trace.get_tracer_provider(), TracerProvider):
        return
    resource = Resource.create({"service.name": service_name})
    trace.set_tracer_provider(TracerProvider(resource=resource))


def instrument_fastapi(app: Any) -> None:
    """Instrument FastAPI app for automatic tracing."""
    FastAPIInstrumentor.instrument_app(app, excluded_urls="api/health")


def _incr(name: str, amount: int = 1) -> None:
    with _metrics_lock:
        _metrics[name] = _metrics.get(name, 0) + amount


def record_secret_created() -> None:
    _incr("secrets_created_total")


def record_secret_retrieved() -> None:
    _incr("secrets_retrieved_total")


def record_secret_not_found() -> None:
    _incr("secrets_not_found_total")


def record_sweep(removed: int) -> None:
    """Count one sweep and the expired entries it removed."""
    _incr("sweeps_total")
    _incr("secrets_expired_swept_total", removed)


def get_metrics() -> dict[str, int]:
    """Return current metrics snapshot (for /api/metrics or tests)."""
    with _metrics_lock:
        return dict(_metrics)


def reset_metrics() -> None:
    with _metrics_lock:
        for k in _metrics:
            _metrics[k] = 0


@contextmanager
def span(name: str, attributes: Optional[dict[str, Any]] = None) -> Generator[Any, None, None]:
    """Context manager for a child span."""
    tracer = get_tracer()
    with tracer.start_as_current_span(name) as span_obj:
        if attributes:
            for key, val in attributes.items():
                span_obj.set_attribute(key, str(val))
        yield span_obj
