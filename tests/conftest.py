"""
Shared pytest fixtures.
"""
import shutil

import pytest

from hardener import host as host_mod
from hardener.host import HostEnvironment


class FakeHost(HostEnvironment):
    """
    Host with scripted answers.

    tools:   name → exit code returned by run(); None means the tool exists
             but cannot be started (run raises OSError).
    real_which: resolve names not in `tools` on the real PATH (for dispatch
             tests that need a real interpreter).
    """

    def __init__(
        self,
        system="linux",
        euid=1000,
        tools=None,
        real_which=False,
        argv=None,
        cwd="/work",
    ):
        super().__init__(system=system)
        self.euid = euid
        self.tools = dict(tools or {})
        self.real_which = real_which
        self.argv = argv or ["/usr/bin/python3", "-m", "hardener"]
        self._cwd = cwd
        self.ran: list[list[str]] = []

    def geteuid(self):
        return self.euid

    def which(self, name):
        if name in self.tools:
            return f"/fake/bin/{name}"
        if self.real_which:
            return shutil.which(name)
        return None

    def run(self, cmd, timeout=10):
        self.ran.append(list(cmd))
        name = cmd[0].rsplit("/", 1)[-1]
        code = self.tools.get(name)
        if code is None:
            raise OSError(f"cannot start {name}")
        return code

    def cwd(self):
        return self._cwd

    def relaunch_command(self):
        return list(self.argv)


@pytest.fixture
def fake_host():
    return FakeHost


@pytest.fixture
def posix_host():
    """A non-Windows host that resolves interpreters on the real PATH."""
    return FakeHost(system="linux", real_which=True)


@pytest.fixture(autouse=True)
def clear_lru_caches():
    """Prevent lru_cache state from leaking between tests."""
    yield
    host_mod.current_host.cache_clear()

