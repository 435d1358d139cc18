"""Optional tracing hooks for the core shorten/lengthen operations.

A tracer hands out spans as context managers. The core opens one span per
operation and one per store or generator call inside it:

    >>> tracer = LoggingTracer()
    >>> with tracer.span('store.read', shortcode='yfzne'):
    ...     dao.read('yfzne')

`LoggingTracer` reports each finished span as a DEBUG log line carrying the
span name, its attributes, the outcome (`ok` or the exception class name) and
`duration_ms`, which the JSON log formatter nests under `span`. `NullTracer`
does nothing and is the default.
"""

import time
import logging
from contextlib import AbstractContextManager, contextmanager, nullcontext
from collections.abc import Iterator
from typing import Any, Protocol


class Tracer(Protocol):
    def span(self, name: str, **attributes: Any) -> AbstractContextManager[None]: ...


class NullTracer:
    """Tracer that records nothing."""

    def span(self, name: str, **attributes: Any) -> AbstractContextManager[None]:
        return nullcontext()


class LoggingTracer:
    """Tracer that logs every finished span."""

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger(__name__)

    @contextmanager
    def span(self, name: str, **attributes: Any) -> Iterator[None]:
        outcome = 'ok'
        start = time.perf_counter()
        try:
            yield
        except Exception as e:
            outcome = type(e).__name__
            raise
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 3)
            self.logger.debug(
                'Span %s finished (%s).',
                name,
                outcome,
                extra={'span': name, 'outcome': outcome, 'duration_ms': duration_ms, 'attributes': attributes},
            )


def get_tracer(enabled: bool) -> Tracer:
    return LoggingTracer() if enabled else NullTracer()
