"""Test configuration helpers and fake capabilities."""
from __future__ import annotations

import sys
from pathlib import Path


def _ensure_repo_root_on_path() -> None:
    root = Path(__file__).resolve().parent.parent
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


_ensure_repo_root_on_path()

import pytest

from posture.capabilities import ProcessResult
from posture.capture import ScreenCaptureGuard
from posture.engine import PostureEngine
from posture.errors import PackageNotFound
from posture.lockscreen import LockScreenPolicyCheck
from posture.packages import PackageInventory
from posture.policy import ProbePolicy
from posture.properties import PropertyProbe
from posture.tamper import TamperDetector


class FakeRunner:
    """Answers ``run`` from a table keyed by argv; unknown commands are missing."""

    def __init__(self, outputs=None, launch_error=None):
        self.outputs = dict(outputs or {})
        self.launch_error = launch_error
        self.calls = []
        self.launched = []

    def run(self, argv, *, timeout):
        argv = tuple(argv)
        self.calls.append((argv, timeout))
        outcome = self.outputs.get(argv)
        if outcome is None:
            raise FileNotFoundError(argv[0])
        if isinstance(outcome, BaseException):
            raise outcome
        if isinstance(outcome, str):
            return ProcessResult(returncode=0, stdout=outcome)
        return outcome

    def launch(self, argv, *, timeout):
        self.launched.append((tuple(argv), timeout))
        if self.launch_error is not None:
            raise self.launch_error


class FakeFileSystem:
    def __init__(self, existing=()):
        self.existing = set(existing)
        self.checked = []

    def exists(self, path):
        self.checked.append(path)
        return path in self.existing


class FakePackageSource:
    """In-memory package manager. Set ``fail`` to make every call raise."""

    def __init__(
        self,
        installed=(),
        *,
        own="com.example.app",
        signature="3082abcd",
        version_name="1.4.2",
        version_code=142,
        installer="com.android.vending",
        fail=None,
    ):
        self.installed = list(installed)
        self.own = own
        self._signature = signature
        self._version_name = version_name
        self._version_code = version_code
        self._installer = installer
        self.fail = fail
        self.lookups = []

    def _check(self):
        if self.fail is not None:
            raise self.fail

    def list_packages(self):
        self._check()
        return list(self.installed)

    def has_package(self, name):
        self.lookups.append(name)
        self._check()
        return name in self.installed

    def own_package(self):
        self._check()
        return self.own

    def _value(self, value, name):
        self._check()
        if name != self.own and name not in self.installed:
            raise PackageNotFound(name)
        if isinstance(value, BaseException):
            raise value
        return value

    def signature(self, name):
        return self._value(self._signature, name)

    def version_name(self, name):
        return self._value(self._version_name, name)

    def version_code(self, name):
        return self._value(self._version_code, name)

    def installer(self, name):
        return self._value(self._installer, name)


class FakeSettings:
    """Secure settings table; values that are exceptions are raised."""

    def __init__(self, values=None):
        self.values = dict(values or {})

    def get_int(self, name, default):
        value = self.values.get(name, default)
        if isinstance(value, BaseException):
            raise value
        return value


class FakeWindow:
    def __init__(self, error=None):
        self.calls = []
        self.error = error

    def set_secure(self, enabled):
        self.calls.append(enabled)
        if self.error is not None:
            raise self.error


@pytest.fixture
def probe_policy():
    return ProbePolicy(probe_timeout=1.5, launch_timeout=0.5)


@pytest.fixture
def make_engine(probe_policy):
    """Build a :class:`PostureEngine` over fakes; keyword overrides per test."""

    def _make(
        *,
        runner=None,
        filesystem=None,
        source=None,
        settings=None,
        window=None,
        build_tags=lambda: "release-keys",
        policy=None,
    ):
        policy = policy or probe_policy
        runner = runner or FakeRunner(launch_error=FileNotFoundError("su"))
        inventory = PackageInventory(source or FakePackageSource(), policy)
        return PostureEngine(
            inventory=inventory,
            tamper=TamperDetector(
                inventory,
                build_tags=build_tags,
                filesystem=filesystem or FakeFileSystem(),
                runner=runner,
                policy=policy,
            ),
            properties=PropertyProbe(runner, policy),
            lockscreen=LockScreenPolicyCheck(settings or FakeSettings()),
            capture=ScreenCaptureGuard(window or FakeWindow()),
            policy=policy,
        )

    return _make
