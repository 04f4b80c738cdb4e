import base64
from enum import Enum

import pytest

from bddbrowser.core.exceptions import ScenarioStateError
from bddbrowser.core.models import ScenarioContext, StepStatus
from bddbrowser.core.recorder import ScenarioPhase
from tests.unit.fakes.fake_browser import PNG_BYTES, FakePlaywright, grid_reply


class RunnerStatus(Enum):
    passed = 1
    failed = 2
    skipped = 3


@pytest.fixture
def lifecycle(make_lifecycle):
    lifecycle, _ = make_lifecycle()
    return lifecycle


class TestPhases:
    def test_new_recorder_is_not_started(self, lifecycle) -> None:
        assert lifecycle.recorder.phase is ScenarioPhase.NOT_STARTED
        assert lifecycle.recorder.step_log == []

    def test_record_step_before_start_raises(self, lifecycle) -> None:
        with pytest.raises(ScenarioStateError):
            lifecycle.recorder.record_step("Given a page", "passed")

    def test_finalize_before_start_raises(self, lifecycle) -> None:
        with pytest.raises(ScenarioStateError):
            lifecycle.recorder.finalize("passed")

    def test_start_while_running_raises(self, lifecycle) -> None:
        recorder = lifecycle.recorder
        recorder.start(ScenarioContext("One", "F", "One"))

        with pytest.raises(ScenarioStateError):
            recorder.start(ScenarioContext("Two", "F", "Two"))

    def test_finalize_resets_for_next_scenario(self, lifecycle) -> None:
        recorder = lifecycle.recorder
        ctx = ScenarioContext("One", "F", "One")
        recorder.start(ctx)
        recorder.record_step("Given a page", "passed")

        recorder.finalize("passed", 1.0)

        assert recorder.phase is ScenarioPhase.RESET
        assert recorder.current is None
        assert recorder.step_log == []
        assert ctx.attachments == {}
        assert ctx.step_log == []

    def test_abandon_clears_running_scenario(self, lifecycle) -> None:
        recorder = lifecycle.recorder
        recorder.start(ScenarioContext("One", "F", "One"))

        recorder.abandon()

        assert recorder.phase is ScenarioPhase.RESET
        assert lifecycle.registry.state.report.scenarios == []


class TestStepLog:
    def test_steps_kept_in_order_with_any_status(self, lifecycle) -> None:
        recorder = lifecycle.recorder
        recorder.start(ScenarioContext("One", "F", "One"))

        recorder.record_step("Given a page", "passed")
        recorder.record_step("When it breaks", RunnerStatus.failed)
        recorder.record_step("Then nothing", "skipped")

        assert [(s.name, s.status) for s in recorder.step_log] == [
            ("Given a page", StepStatus.PASSED),
            ("When it breaks", StepStatus.FAILED),
            ("Then nothing", StepStatus.SKIPPED),
        ]

    def test_step_log_does_not_leak_between_scenarios(self, lifecycle) -> None:
        recorder = lifecycle.recorder
        recorder.start(ScenarioContext("One", "F", "One"))
        recorder.record_step("Given a page", "passed")
        recorder.finalize("passed")

        recorder.start(ScenarioContext("Two", "F", "Two"))
        recorder.record_step("Given another page", "passed")
        second = recorder.finalize("passed")

        assert [s.name for s in second.step_log] == ["Given another page"]


class TestFinalize:
    def test_passed_scenario_has_no_image(self, lifecycle) -> None:
        ctx = lifecycle.start_scenario("Login succeeds", "Login")

        record = lifecycle.finish_scenario(RunnerStatus.passed, 3.7)

        assert record.status == "passed"
        assert record.name == "Login | Login succeeds"
        assert record.image_string is None
        assert record.url is None
        assert record.attachments["status"] == "Status: passed. Duration:3s"
        assert "page.screenshot" not in ctx.browser_context.calls

    def test_failed_scenario_embeds_screenshot_and_keeps_trace(self, lifecycle) -> None:
        ctx = lifecycle.start_scenario("Login fails", "Login")
        trace_path = ctx.trace_path

        record = lifecycle.finish_scenario("failed", 2)

        assert base64.b64decode(record.image_string) == PNG_BYTES
        assert trace_path.exists()
        calls = ctx.browser_context.calls
        assert calls.index("page.screenshot") < calls.index("tracing.stop")

    def test_screenshot_forwarded_to_runner(self, lifecycle) -> None:
        received: list[tuple[str, object]] = []
        lifecycle.start_scenario(
            "Login fails",
            "Login",
            attachment_sink=lambda mime, data: received.append((mime, data)),
        )

        lifecycle.finish_scenario("failed")

        assert ("image/png", PNG_BYTES) in received
        assert received[0] == ("text/plain", "Status: failed. Duration:0s")

    def test_screenshot_failure_still_records(self, lifecycle) -> None:
        ctx = lifecycle.start_scenario("Page gone", "Login")
        ctx.page.raise_on_screenshot = True

        record = lifecycle.finish_scenario("failed")

        assert record.image_string is None
        assert lifecycle.registry.state.report.scenarios == [record]

    def test_record_appended_to_report(self, lifecycle) -> None:
        lifecycle.start_scenario("One", "F")
        lifecycle.finish_scenario("passed")

        assert lifecycle.recorder.scenarios_recorded == 1
        assert len(lifecycle.registry.state.report.scenarios) == 1

    def test_remote_grid_record_links_to_test(self, make_lifecycle) -> None:
        lifecycle, _ = make_lifecycle(
            FakePlaywright(evaluate_reply=grid_reply("B-9", "T-3")),
            browser="remote-grid",
            grid_username="u",
            grid_access_key="k",
        )
        lifecycle.start_scenario("Remote", "F")

        record = lifecycle.finish_scenario("passed")

        assert record.url == "https://automation.lambdatest.com/test?testID=T-3"
