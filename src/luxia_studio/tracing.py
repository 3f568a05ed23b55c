"""
Tracing configuration for LUXIA Studio.

Generation attempts run inside OpenAI Agents SDK traces. Traces can be
printed to the console, appended to a JSON Lines file, or exported to
the OpenAI dashboard.
"""

import json
import sys
from contextlib import contextmanager
from typing import Any, Iterator

from agents import set_tracing_disabled, trace
from agents.tracing import (
    Span,
    Trace,
    TracingProcessor,
    set_trace_processors,
)

from luxia_studio.config import get_config


class ConsoleTracingProcessor(TracingProcessor):
    """
    A simple tracing processor that prints traces to stderr.

    Useful for development and debugging.
    """

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def on_trace_start(self, trace: Trace) -> None:
        print(f"\n[TRACE START] {trace.name} (ID: {trace.trace_id[:8]}...)", file=sys.stderr)

    def on_trace_end(self, trace: Trace) -> None:
        print(f"[TRACE END] {trace.name}", file=sys.stderr)

    def on_span_start(self, span: Span[Any]) -> None:
        if self.verbose:
            print(f"  ├─ [SPAN START] {span.span_data}", file=sys.stderr)

    def on_span_end(self, span: Span[Any]) -> None:
        if self.verbose:
            print(f"  └─ [SPAN END] {span.span_data}", file=sys.stderr)

    def shutdown(self) -> None:
        pass

    def force_flush(self) -> None:
        pass


class FileTracingProcessor(TracingProcessor):
    """A tracing processor that appends finished traces to a JSON Lines file."""

    def __init__(self, file_path: str = "traces.jsonl"):
        self.file_path = file_path
        self._current: dict[str, dict[str, Any]] = {}

    def on_trace_start(self, trace: Trace) -> None:
        self._current[trace.trace_id] = {
            "trace_id": trace.trace_id,
            "name": trace.name,
            "spans": [],
        }

    def on_trace_end(self, trace: Trace) -> None:
        record = self._current.pop(trace.trace_id, None)
        if record is not None:
            with open(self.file_path, "a", encoding="utf-8") as f:
                f.write(json.dumps(record) + "\n")

    def on_span_start(self, span: Span[Any]) -> None:
        pass

    def on_span_end(self, span: Span[Any]) -> None:
        record = self._current.get(span.trace_id)
        if record is not None:
            record["spans"].append({
                "span_id": span.span_id,
                "data": str(span.span_data),
            })

    def shutdown(self) -> None:
        pass

    def force_flush(self) -> None:
        pass


def setup_tracing(
    enabled: bool = True,
    console: bool = True,
    verbose: bool = False,
    file_path: str | None = None,
) -> None:
    """
    Configure tracing for generation attempts.

    Args:
        enabled: Whether tracing is enabled.
        console: Whether to print traces to console.
        verbose: Whether to print detailed span information.
        file_path: Optional file path to write traces to.
    """
    if not enabled:
        set_tracing_disabled(True)
        return

    set_tracing_disabled(False)

    processors: list[TracingProcessor] = []
    if console:
        processors.append(ConsoleTracingProcessor(verbose=verbose))
    if file_path:
        processors.append(FileTracingProcessor(file_path=file_path))

    if processors:
        set_trace_processors(processors)


def disable_tracing() -> None:
    """Disable all tracing."""
    set_tracing_disabled(True)


def enable_tracing() -> None:
    """Enable tracing (uses default OpenAI dashboard)."""
    set_tracing_disabled(False)


@contextmanager
def traced_generation(service_name: str, invocation: int) -> Iterator[None]:
    """Wrap one generation attempt in a trace; a no-op unless config.enable_tracing."""
    config = get_config()
    with trace(
        f"{config.trace_name_prefix}:generation",
        metadata={"service": service_name, "invocation": str(invocation)},
        disabled=not config.enable_tracing,
    ):
        yield
