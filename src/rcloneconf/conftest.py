import os

import pytest

import rcloneconf.config.encryption
from rcloneconf._output import output as _output
from rcloneconf.backends import Backend, Option, OptionExample, Registry
from rcloneconf.session import Session
from rcloneconf.terminal import Terminal


class CollectingBackend(object):
    """Output backend keeping the lines for inspection."""

    def __init__(self):
        self.lines = []

    def line(self, message, **format):
        self.lines.append(message)


class ScriptedTerminal(Terminal):
    """Terminal answering prompts from prepared lists."""

    def __init__(self, lines=(), passwords=(), auto_confirm=False):
        super().__init__(auto_confirm=auto_confirm)
        self.lines = list(lines)
        self.passwords = list(passwords)
        self.prompts = []

    def _input(self, prompt=""):
        self.prompts.append(prompt)
        if not self.lines:
            raise EOFError("no more scripted input for {!r}".format(prompt))
        return self.lines.pop(0)

    def _getpass(self, prompt=""):
        self.prompts.append(prompt)
        if not self.passwords:
            raise EOFError("no more scripted passwords")
        return self.passwords.pop(0)


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch, tmpdir):
    for key in list(os.environ):
        if key.startswith("RCLONE_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("HOME", str(tmpdir / "home"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmpdir / "xdg"))


@pytest.fixture(autouse=True)
def reset_output():
    backend, debug = _output.backend, _output.enable_debug
    encryption_debug = rcloneconf.config.encryption.debug
    yield
    _output.backend, _output.enable_debug = backend, debug
    rcloneconf.config.encryption.debug = encryption_debug


@pytest.fixture
def output(monkeypatch):
    backend = CollectingBackend()
    monkeypatch.setattr(_output, "backend", backend)
    return _output


@pytest.fixture
def registry():
    calls = []

    def configure(session, name):
        calls.append(name)

    registry = Registry()
    registry.calls = calls
    registry.register(
        Backend(
            "t",
            description="Test backend",
            options=[
                Option("host", help="Host to connect to"),
                Option(
                    "region",
                    help="Region",
                    examples=[
                        OptionExample("eu", "Europe"),
                        OptionExample("us", "United States"),
                    ],
                ),
            ],
            config=configure,
        )
    )
    registry.register(
        Backend(
            "p",
            description="Backend with a password",
            options=[
                Option("user", help="User name"),
                Option("pass", help="Password", is_password=True, optional=True),
            ],
        )
    )
    return registry


@pytest.fixture
def terminal():
    return ScriptedTerminal()


@pytest.fixture
def config_path(tmpdir):
    return tmpdir / "rclone.conf"


@pytest.fixture
def session(config_path, terminal, registry):
    return Session(str(config_path), terminal=terminal, registry=registry)
