from enum import Enum

import pytest
from behave.model_core import Status

from bddbrowser.core.models import (
    RunReport,
    ScenarioContext,
    ScenarioRecord,
    StepRecord,
    StepStatus,
)


class RunnerStatus(Enum):
    passed = 1
    failed = 2
    untested = 3
    hook_error = 4


def make_context(**overrides) -> ScenarioContext:
    settings = {
        "scenario_name": "Login succeeds",
        "feature_name": "Login",
        "scenario_slug": "Login-succeeds",
    }
    settings.update(overrides)
    return ScenarioContext(**settings)


class TestStepStatus:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("passed", StepStatus.PASSED),
            ("FAILED", StepStatus.FAILED),
            ("ambiguous", StepStatus.AMBIGUOUS),
            (RunnerStatus.passed, StepStatus.PASSED),
            (RunnerStatus.untested, StepStatus.SKIPPED),
            (RunnerStatus.hook_error, StepStatus.FAILED),
            ("executing", StepStatus.PENDING),
            ("pending_warn", StepStatus.PENDING),
            ("untested_undefined", StepStatus.UNDEFINED),
            ("xfailed", StepStatus.FAILED),
            ("xpassed", StepStatus.PASSED),
            (StepStatus.UNDEFINED, StepStatus.UNDEFINED),
        ],
    )
    def test_coerce(self, value, expected) -> None:
        assert StepStatus.coerce(value) is expected

    def test_coerce_unknown_records_as_skipped(self) -> None:
        assert StepStatus.coerce("exploded") is StepStatus.SKIPPED

    @pytest.mark.parametrize("status", list(Status))
    def test_every_behave_status_coerces(self, status: Status) -> None:
        assert isinstance(StepStatus.coerce(status), StepStatus)


class TestScenarioContext:
    def test_display_name_joins_feature_and_scenario(self) -> None:
        assert make_context().display_name == "Login | Login succeeds"

    def test_attach_suffixes_duplicate_keys(self) -> None:
        ctx = make_context()

        first = ctx.attach("console", "one")
        second = ctx.attach("console", "two")
        third = ctx.attach("console", "three")

        assert (first, second, third) == ("console", "console-2", "console-3")
        assert list(ctx.attachments.values()) == ["one", "two", "three"]

    def test_attach_forwards_to_sink(self) -> None:
        received = []
        ctx = make_context(attachment_sink=lambda mime, data: received.append((mime, data)))

        ctx.attach("status", "Status: passed. Duration:1s")

        assert received == [("text/plain", "Status: passed. Duration:1s")]

    def test_forward_attachment_does_not_store(self) -> None:
        received = []
        ctx = make_context(attachment_sink=lambda mime, data: received.append(mime))

        ctx.forward_attachment("image/png", b"png")

        assert received == ["image/png"]
        assert ctx.attachments == {}

    def test_sink_failure_keeps_attachment(self) -> None:
        def broken_sink(mime: str, data: object) -> None:
            raise RuntimeError("no formatter accepts attachments")

        ctx = make_context(attachment_sink=broken_sink)
        ctx.attach("console", "hello")

        assert ctx.attachments == {"console": "hello"}

    def test_contexts_do_not_share_accumulators(self) -> None:
        first = make_context()
        second = make_context()
        first.step_log.append(StepRecord("nav", StepStatus.PASSED))
        first.attach("console", "x")

        assert second.step_log == []
        assert second.attachments == {}


class TestReportSerialization:
    def test_scenario_record_to_dict(self) -> None:
        record = ScenarioRecord(
            status="failed",
            name="Login | Login fails",
            attachments={"status": "Status: failed. Duration:2s"},
            step_log=(StepRecord("submit", StepStatus.FAILED),),
            image_string="aW1n",
        )

        assert record.to_dict() == {
            "status": "failed",
            "name": "Login | Login fails",
            "attachments": {"status": "Status: failed. Duration:2s"},
            "stepLog": [{"name": "submit", "status": "failed"}],
            "imageString": "aW1n",
            "url": None,
        }

    def test_run_report_omits_absent_build_fields(self) -> None:
        report = RunReport(build_name="Test Build")

        assert report.to_dict() == {"buildName": "Test Build", "scenarios": []}

    def test_run_report_includes_build_fields(self) -> None:
        report = RunReport(build_name="Test Build", build_id="B-1", url="https://x/B-1")

        payload = report.to_dict()

        assert payload["buildId"] == "B-1"
        assert payload["url"] == "https://x/B-1"
