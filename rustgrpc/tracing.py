import os
import threading
from contextlib import contextmanager
from functools import wraps
from log.log import get_logger
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
    OTLPSpanExporter,
)
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from rustgrpc.settings import (
    ENVVAR_OTEL_EXPORTER_OTLP_TRACES_ENDPOINT,
    PLUGIN_NAME,
)
from typing import Callable, Optional

logger = get_logger(__name__)

_provider: Optional[TracerProvider] = None
_process_name: Optional[str] = None
_start_lock = threading.Lock()


def force_flush_and_shutdown() -> None:
    # Before the plugin exits we must force-flush the provider, to make sure
    # all spans are recorded. protoc runs us as a short-lived process, so
    # without this the batch processor would never get to export anything.
    global _provider
    if _provider is None:
        return
    logger.debug(
        f"Force-flushing tracer for '{_process_name}'; "
        "this may delay shutdown..."
    )
    _provider.force_flush()
    _provider.shutdown()
    _provider = None


def start(process_name: str = PLUGIN_NAME) -> None:
    global _process_name
    global _provider

    with _start_lock:
        if _process_name is not None:
            return
        _process_name = process_name

        if ENVVAR_OTEL_EXPORTER_OTLP_TRACES_ENDPOINT not in os.environ:
            # Tracing is not enabled; do nothing, tracers continue to be
            # NOOPs.
            return

        _provider = TracerProvider(
            resource=Resource.create({SERVICE_NAME: process_name}),
        )
        _provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter()))
        trace.set_tracer_provider(_provider)


def _get_tracer() -> trace.Tracer:
    # Falls back to the global (by default no-op) provider when tracing was
    # never enabled.
    return trace.get_tracer(_process_name or PLUGIN_NAME)


@contextmanager
def span(span_name: str, **span_kwargs):
    """
    Start a new tracing span.
    """
    with _get_tracer().start_as_current_span(span_name, **span_kwargs):
        yield


def main_span(name: Optional[str] = None, **span_kwargs) -> Callable:
    """
    Convenience decorator to run synchronous 'main' functions in a span.

    A shorthand for something like:
      def main():
        rustgrpc.tracing.start("my-process")
        ...
        rustgrpc.tracing.force_flush_and_shutdown()

    Which can instead be written as:

      @main_span("my-process")
      def main():
        ...
    """

    def decorator(func: Callable) -> Callable:

        @wraps(func)
        def wrapper(*args, **kwargs):
            start(name or PLUGIN_NAME)
            try:
                with span(func.__qualname__ + "()", **span_kwargs):
                    return func(*args, **kwargs)
            finally:
                force_flush_and_shutdown()

        return wrapper

    return decorator
