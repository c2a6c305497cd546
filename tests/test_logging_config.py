# tests/test_logging_config.py
from opentelemetry.sdk.trace import TracerProvider

from wikiportraits import __version__
from wikiportraits.shared.config import AppEnv, settings
from wikiportraits.shared.logging_config import add_service_context, add_trace_ids
from wikiportraits.shared.observability import service_resource


class TestServiceContext:

    def test_lines_carry_service_and_env(self, monkeypatch):
        """
        Scenario: A log event from any module.
        Expected: The service name, environment and version are stamped on it.
        """
        monkeypatch.setattr(settings, "OTEL_SERVICE_NAME", "wikiportraits-test")
        monkeypatch.setattr(settings, "APP_ENV", AppEnv.PRODUCTION)

        event = add_service_context(None, "info", {"event": "file_uploaded"})

        assert event == {
            "event": "file_uploaded",
            "service": "wikiportraits-test",
            "env": "production",
            "version": __version__,
        }

    def test_explicit_fields_win(self):
        event = add_service_context(None, "info", {"event": "x", "service": "worker"})

        assert event["service"] == "worker"

    def test_resource_matches_log_context(self):
        attributes = service_resource().attributes

        assert attributes["service.name"] == settings.OTEL_SERVICE_NAME
        assert attributes["deployment.environment"] == settings.APP_ENV.value
        assert attributes["service.version"] == __version__


class TestTraceIds:

    def test_no_span_adds_nothing(self):
        event = add_trace_ids(None, "info", {"event": "app_startup"})

        assert event == {"event": "app_startup"}

    def test_recording_span(self):
        tracer = TracerProvider().get_tracer(__name__)

        with tracer.start_as_current_span("use_case.upload_image") as span:
            event = add_trace_ids(None, "info", {"event": "file_uploaded"})

        ctx = span.get_span_context()
        assert event["trace_id"] == format(ctx.trace_id, "032x")
        assert event["span_id"] == format(ctx.span_id, "016x")
