"""
Shared test fixtures and configuration.

Every renderer test runs against a temporary filesystem root and a
MockCommandRunner: nothing touches /etc or runs systemctl.
"""

from pathlib import Path
from types import SimpleNamespace

import pytest

from cfgd.adapters import MockCommandRunner
from cfgd.core.models.settings import SystemPaths
from cfgd.core.services.renderers import RenderContext


@pytest.fixture
def sys_root(tmp_path: Path) -> Path:
    """A fake filesystem root with the directories a stock host has."""
    root = tmp_path / "root"
    (root / "etc" / "systemd" / "network").mkdir(parents=True)
    (root / "home").mkdir()
    return root


@pytest.fixture
def paths(sys_root: Path) -> SystemPaths:
    return SystemPaths(
        timesyncd_conf=str(sys_root / "etc" / "systemd" / "timesyncd.conf"),
        resolved_conf=str(sys_root / "etc" / "systemd" / "resolved.conf"),
        network_dir=str(sys_root / "etc" / "systemd" / "network"),
        root_authorized_keys=str(sys_root / "home" / "root" / ".ssh" / "authorized_keys"),
        netconf_authorized_keys=str(sys_root / "etc" / "netconf" / "authorized_keys"),
    )


@pytest.fixture
def accounts(sys_root: Path) -> dict[str, SimpleNamespace]:
    """Fake account database: name → object with ``pw_dir``."""
    return {
        "alice": SimpleNamespace(pw_name="alice", pw_dir=str(sys_root / "home" / "alice")),
        "nohome": SimpleNamespace(pw_name="nohome", pw_dir=""),
    }


@pytest.fixture
def runner() -> MockCommandRunner:
    return MockCommandRunner()


@pytest.fixture
def ctx(runner: MockCommandRunner, paths: SystemPaths, accounts) -> RenderContext:
    return RenderContext(runner=runner, paths=paths, account_lookup=accounts.get)


@pytest.fixture
def settings_file(tmp_path: Path, paths: SystemPaths) -> Path:
    """A cfgd.yml pointing every artifact into the fake root."""
    import yaml

    path = tmp_path / "cfgd.yml"
    path.write_text(
        yaml.safe_dump(
            {
                "paths": paths.model_dump(),
                "audit_log": str(tmp_path / "audit.ndjson"),
            }
        )
    )
    return path


@pytest.fixture
def restore_logging():
    """Undo setup_logging(), which replaces the root logger's handlers."""
    import logging

    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
        if handler not in saved_handlers:
            handler.close()
    for handler in saved_handlers:
        root.addHandler(handler)
    root.setLevel(saved_level)
