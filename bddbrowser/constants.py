"""Constants for bddbrowser."""

from enum import Enum


class TargetKind(Enum):
    """Execution targets selectable through the BROWSER setting."""

    CHROMIUM = "chromium"
    FIREFOX = "firefox"
    WEBKIT = "webkit"
    REMOTE_GRID = "remote-grid"


REMOTE_GRID_ALIASES = ("LT", "lambdatest")

DEFAULT_BROWSER = TargetKind.CHROMIUM.value
DEFAULT_BUILD_NAME = "Test Build"
DEFAULT_TRACES_DIR = "traces"
DEFAULT_TEMP_DIR = "temp"
DEFAULT_CONFIG_FILENAME = "bddbrowser.yaml"

DEBUG_ACTION_TIMEOUT_MS = 0

USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/119.0.0.0 Safari/537.36"
)

STANDARD_VIEWPORT = {"width": 1200, "height": 800}
WIDE_VIEWPORT = {"width": 1920, "height": 1080}

CHROMIUM_MEDIA_ARGS = [
    "--use-fake-ui-for-media-stream",
    "--use-fake-device-for-media-stream",
]
FIREFOX_MEDIA_PREFS = {
    "media.navigator.streams.fake": True,
    "media.navigator.permission.disabled": True,
}

BLOCKED_DOMAINS = (
    "www.google.com.ar",
    "www.googletagmanager.com",
    "www.google-analytics.com",
    "www.fonts.gstatic.com",
    "www.googleadservices.com",
    "www.googleoptimize.com",
    "fonts.googleapis.com",
)

GRID_WS_ENDPOINT = "wss://cdp.lambdatest.com/playwright"
GRID_PLATFORM = "Windows 11"
GRID_BUILD_URL_TEMPLATE = "https://automation.lambdatest.com/build?buildID={build_id}"
GRID_TEST_URL_TEMPLATE = "https://automation.lambdatest.com/test?testID={test_id}"
GRID_TEST_DETAILS_ACTION = {"action": "getTestDetails"}

REPORT_FILENAME = "report.json"
TRACE_SUFFIX = "trace.zip"
FAILURE_IMAGE_MIME = "image/png"

IGNORE_TAG = "ignore"
DEBUG_TAG = "debug"
