from pathlib import Path

import gifnoc
import pytest
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import (
    InMemorySpanExporter,
)

from storage_report.config import config

pytest_plugins = "fabric.testing.fixtures"

_span_exporter = InMemorySpanExporter()
_tracer_provider = TracerProvider()
_tracer_provider.add_span_processor(SimpleSpanProcessor(_span_exporter))
trace.set_tracer_provider(_tracer_provider)


@pytest.fixture
def captrace():
    _span_exporter.clear()
    yield _span_exporter
    _span_exporter.clear()


@pytest.fixture
def standard_config():
    with gifnoc.use(Path(__file__).parent / "storage-report-test.yaml"):
        yield config()


@pytest.fixture
def test_config(request, standard_config):
    """Overlay dotted config entries, passed as an indirect parameter."""
    vals = getattr(request, "param", dict())
    with gifnoc.overlay({f"storage_report.{k}": v for k, v in vals.items()}):
        yield config()


@pytest.fixture
def cli_main(standard_config):
    from storage_report.cli import main

    yield main
