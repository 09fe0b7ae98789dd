import functools
import inspect
from contextlib import contextmanager

from opentelemetry.trace import Status, StatusCode, get_tracer


@contextmanager
def using_trace(
    tracer_name: str,
    span_name: str,
    exception_types: tuple = (Exception,),
    attributes: dict | None = None,
):
    """
    Open a span for a step of the report, recording any exception on it.

    Parameters
    ----------
    tracer_name : str
        name of the tracer (usually the module name)
    span_name : str
        name of the span
    exception_types : tuple, optional
        Exceptions swallowed once recorded in the span, any other type is
        re-raised. By default every `Exception` is swallowed.
    attributes : dict, optional
        Attributes set on the span when it starts.

    Yields
    ------
    span : opentelemetry.trace.Span
    """
    tracer = get_tracer(tracer_name)
    with tracer.start_as_current_span(span_name, attributes=attributes) as span:
        try:
            yield span
            span.set_status(Status(StatusCode.OK))
        except Exception as exc:  # pylint: disable=broad-exception-caught
            span.set_status(Status(StatusCode.ERROR))
            span.record_exception(exc)
            if not isinstance(exc, tuple(exception_types)):
                raise


def trace_decorator(tracer_name=None, span_name=None, exception_types=()):
    """
    Run the decorated function inside `using_trace`.

    The tracer defaults to the function's module and the span to its
    qualified name. Exceptions are re-raised unless listed in
    `exception_types`.
    """

    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            with using_trace(
                tracer_name or inspect.getmodule(fn).__name__,
                span_name or fn.__qualname__,
                exception_types,
            ):
                return fn(*args, **kwargs)

        return wrapper

    return decorator
