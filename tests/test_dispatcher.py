import threading

import pytest
from conftest import FakeFileSystem, FakePackageSource, FakeRunner, FakeWindow

from bridge.commands import GROUP_COMMANDS, NotImplementedOutcome, Success, parse_request
from bridge.dispatcher import INLINE_COMMANDS, CommandDispatcher
from posture.engine import PostureEngine
from posture.policy import ProbePolicy


class InlineRunner:
    def __init__(self):
        self.submitted = []

    def submit(self, func, on_result, *, default, label="background probe"):
        self.submitted.append(label)
        on_result(func())


class ExplodingTamper:
    def is_device_rooted(self):
        raise RuntimeError("heuristic crashed")


@pytest.fixture
def dispatcher(make_engine):
    engine = make_engine(
        runner=FakeRunner({("getprop", "ro.debuggable"): "1\n"}, launch_error=FileNotFoundError("su")),
        filesystem=FakeFileSystem({"/system/xbin/su"}),
        source=FakePackageSource(["com.topjohnwu.magisk", "com.example.mail"]),
        window=FakeWindow(),
    )
    return CommandDispatcher(engine, runner=InlineRunner())


def test_every_command_has_a_handler(dispatcher):
    supported = dispatcher.supported()

    assert set(supported) == {"diagnostics", "security"}
    assert len(supported["diagnostics"]) == 9
    assert len(supported["security"]) == 6


@pytest.mark.parametrize(
    "group, method, expected",
    [
        ("security", "isRooted", True),
        ("security", "hasRootTools", True),
        ("security", "hasSecureLockScreen", False),
        ("security", "isCaptureEventDetected", False),
        ("diagnostics", "isVpnActive", False),
        ("diagnostics", "getNetworkInfo", {"type": "unknown", "isConnected": True}),
        ("diagnostics", "getBatteryInfo", {"level": 100, "isCharging": False}),
        ("diagnostics", "listInstalledPackages", ["com.topjohnwu.magisk", "com.example.mail"]),
        ("diagnostics", "getAppSignature", "3082abcd"),
        ("diagnostics", "getAppVersion", "1.4.2"),
        ("diagnostics", "getBuildNumber", "142"),
        ("diagnostics", "isInstalledFromTrustedStore", True),
    ],
)
def test_dispatch_results(dispatcher, group, method, expected):
    assert dispatcher.dispatch(group, method) == Success(expected)


def test_security_properties(dispatcher):
    response = dispatcher.dispatch("security", "getSecurityProperties")

    assert response.value == {"ro.debuggable": "1", "ro.secure": "1", "service.adb.root": "0"}


def test_unknown_method_is_not_implemented(dispatcher):
    response = dispatcher.dispatch("security", "isHooked")

    assert response == NotImplementedOutcome("security", "isHooked")


def test_unknown_group_is_not_implemented(dispatcher):
    assert isinstance(dispatcher.dispatch("camera", "isRooted"), NotImplementedOutcome)


def test_legacy_method_names(dispatcher):
    assert dispatcher.dispatch("security", "hasRootApps") == Success(True)
    assert dispatcher.dispatch("diagnostics", "isInstalledFromPlayStore") == Success(True)
    assert dispatcher.dispatch("security", "isScreenshotDetected") == Success(False)


def test_is_app_installed_argument(dispatcher):
    assert dispatcher.dispatch("diagnostics", "isAppInstalled", {"packageName": "com.example.mail"}).value
    assert not dispatcher.dispatch("diagnostics", "isAppInstalled", {"packageName": "com.example.x"}).value


@pytest.mark.parametrize("arguments", [None, {}, {"packageName": None}, {"packageName": 42}])
def test_is_app_installed_missing_argument_is_false(dispatcher, arguments):
    assert dispatcher.dispatch("diagnostics", "isAppInstalled", arguments) == Success(False)


def test_set_capture_blocked(dispatcher):
    capture = dispatcher.engine.capture

    assert dispatcher.dispatch("security", "setCaptureBlocked", {"prevent": True}) == Success(None)
    assert capture.is_capture_blocked()
    dispatcher.dispatch("security", "preventScreenshots", {"prevent": False})
    assert not capture.is_capture_blocked()


@pytest.mark.parametrize("arguments", [None, {}, {"prevent": "yes"}])
def test_set_capture_blocked_defaults_to_unprotected(dispatcher, arguments):
    dispatcher.engine.capture.set_capture_blocked(True)

    dispatcher.dispatch("security", "setCaptureBlocked", arguments)

    assert not dispatcher.engine.capture.is_capture_blocked()


def test_handler_fault_resolves_to_default(dispatcher):
    dispatcher.engine.tamper = ExplodingTamper()

    assert dispatcher.dispatch("security", "isRooted") == Success(False)


def test_dispatch_async_offloads_blocking_commands(dispatcher):
    responses = []

    dispatcher.dispatch_async("security", "isRooted", None, responses.append)
    dispatcher.dispatch_async("security", "hasSecureLockScreen", None, responses.append)
    dispatcher.dispatch_async("security", "setCaptureBlocked", {"prevent": True}, responses.append)
    dispatcher.dispatch_async("security", "nope", None, responses.append)

    assert responses == [
        Success(True),
        Success(False),
        Success(None),
        NotImplementedOutcome("security", "nope"),
    ]
    assert dispatcher.runner.submitted == ["security.isRooted", "security.hasSecureLockScreen"]


def test_only_in_memory_commands_run_inline():
    assert {command.value for command in INLINE_COMMANDS} == {
        "setCaptureBlocked",
        "isCaptureEventDetected",
        "getNetworkInfo",
        "isVpnActive",
        "getBatteryInfo",
    }


class ThreadRecordingRunner(FakeRunner):
    def __init__(self, outputs=None, launch_error=None):
        super().__init__(outputs, launch_error)
        self.threads = []

    def run(self, argv, *, timeout):
        self.threads.append(threading.get_ident())
        return super().run(argv, timeout=timeout)


def test_shell_backed_commands_leave_the_calling_thread():
    process_runner = ThreadRecordingRunner(
        {
            ("pm", "path", "com.topjohnwu.magisk"): "package:/data/app/magisk/base.apk\n",
            ("settings", "get", "secure", "lock_pattern_autolock"): "0\n",
            ("settings", "get", "secure", "lockscreen.password_type"): "65536\n",
        }
    )
    engine = PostureEngine.create(ProbePolicy(probe_timeout=1.0), runner=process_runner, android=False)
    dispatcher = CommandDispatcher(engine)
    responses = []
    done = threading.Event()

    def collect(response):
        responses.append(response)
        if len(responses) == 2:
            done.set()

    dispatcher.dispatch_async("security", "hasRootTools", None, collect)
    dispatcher.dispatch_async("security", "hasSecureLockScreen", None, collect)

    assert done.wait(timeout=10)
    assert sorted(response.value for response in responses) == [True, True]
    assert process_runner.threads
    assert threading.get_ident() not in process_runner.threads


def test_parse_request_resolves_every_command():
    for group, commands in GROUP_COMMANDS.items():
        for command in commands:
            request = parse_request(group.value, command.value)
            assert request.command is command
