"""log.py - the backbone. logger and tracer.

one call, console plus trace. every log line inside a span becomes a
span event, so a parse that fails leaves its story on the trace.
a sink can catch everything too (tests, ledgers, whatever).

in the world: the margin notes. the parser scribbles what it saw,
the tracer keeps the page.
"""

import sys
from datetime import datetime
from contextlib import contextmanager

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    SimpleSpanProcessor,
    ConsoleSpanExporter,
)

from inidb import __version__

# ============================================================
# TRACER SETUP
# ============================================================

_provider = TracerProvider()
_tracer = _provider.get_tracer("inidb", __version__)
_console_export = False


def enable_console_export():
    """turn on span export to stderr."""
    global _console_export
    if not _console_export:
        _provider.add_span_processor(
            SimpleSpanProcessor(ConsoleSpanExporter(out=sys.stderr))
        )
        _console_export = True


def add_exporter(exporter):
    """add a custom span exporter (OTLP, in-memory, etc)."""
    _provider.add_span_processor(SimpleSpanProcessor(exporter))


# ============================================================
# LOGGER
# ============================================================

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}

_level = LEVELS["info"]
_sink = None
_flush = None


def set_level(level: str):
    """set the console threshold. unknown names fall back to info."""
    global _level
    _level = LEVELS.get(level, LEVELS["info"])


def get_level() -> str:
    for name, value in LEVELS.items():
        if value == _level:
            return name
    return "info"


def set_sink(fn, flush_fn=None):
    """register where logs go besides console. fn(subsystem, level, message, attrs).
    optional flush_fn is called to commit buffered entries."""
    global _sink, _flush
    _sink = fn
    _flush = flush_fn


def flush_sink():
    """flush the log sink. call on exit."""
    if _flush is not None:
        try:
            _flush()
        except Exception:
            pass


def log(subsystem: str, level: str, message: str, **attrs):
    """log to console, record as span event, forward to sink."""
    if LEVELS.get(level, LEVELS["info"]) >= _level:
        ts = datetime.now().strftime("%H:%M:%S")
        prefix = f"[{ts} inidb:{subsystem}]"
        dest = sys.stderr if level in ("warn", "error") else sys.stdout
        print(f"{prefix} {message}", file=dest)

    # span events are recorded regardless of the console threshold
    span = trace.get_current_span()
    if span and span.is_recording():
        span.add_event(
            f"inidb.{subsystem}.{level}",
            attributes={"message": message, "subsystem": subsystem,
                        **{k: str(v) for k, v in attrs.items()}},
        )

    if _sink is not None:
        try:
            _sink(subsystem, level, message, attrs if attrs else None)
        except Exception:
            pass  # sink errors never block the caller


def debug(subsystem: str, message: str, **attrs):
    log(subsystem, "debug", message, **attrs)


def info(subsystem: str, message: str, **attrs):
    log(subsystem, "info", message, **attrs)


def warn(subsystem: str, message: str, **attrs):
    log(subsystem, "warn", message, **attrs)


def error(subsystem: str, message: str, **attrs):
    log(subsystem, "error", message, **attrs)


# ============================================================
# SPANS
# ============================================================

@contextmanager
def span(name: str, subsystem: str = "inidb", **attrs):
    """Create a traced span. Everything inside is connected.

    Usage:
        with span("read", subsystem="reader", source="app.ini") as s:
            result = read_stream(f)
            s.set_attribute("inidb.sections", result.data.count)

    Logs emitted inside the block land on the span as events, nested
    spans become children.
    """
    with _tracer.start_as_current_span(
        f"inidb.{subsystem}.{name}",
        attributes={f"inidb.{k}": str(v) for k, v in attrs.items()},
    ) as s:
        s.set_attribute("inidb.subsystem", subsystem)
        yield s
