import subprocess

import pytest

from pgp_engine.exceptions import ProcessInvocationError
from pgp_engine.process.spawn import engine_env, sanitize_args, spawn
from pgp_engine.tests.utils.fake_invoker import FakeRunner


def test_engine_env_copies_parent_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LANGUAGE", "fr")

    env = engine_env(parseable=True)

    assert env["LANGUAGE"] == "C"
    assert engine_env(parseable=False)["LANGUAGE"] == "fr"


def test_sanitize_args_masks_passphrase_value() -> None:
    args = ["--decrypt", "--batch", "--passphrase", "hunter2", "/tmp/msg"]

    assert sanitize_args(args) == ["--decrypt", "--batch", "--passphrase", "***", "/tmp/msg"]


def test_sanitize_args_keeps_passphrase_fd() -> None:
    args = ["--passphrase-fd", "0", "--sign"]

    assert sanitize_args(args) == args


def test_spawn_feeds_input() -> None:
    runner = FakeRunner()

    spawn(
        runner,
        ["gpg", "--import"],
        input=b"KEY\n",
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        parseable=False,
        timeout=None,
    )

    assert runner.last_kwargs["input"] == b"KEY\n"
    assert "stdin" not in runner.last_kwargs


def test_spawn_wraps_os_error() -> None:
    runner = FakeRunner(error=PermissionError("denied"))

    with pytest.raises(ProcessInvocationError, match="denied") as exc_info:
        spawn(
            runner,
            ["/opt/gpg", "--version"],
            input=None,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            parseable=True,
            timeout=None,
        )

    assert exc_info.value.context == {"binary": "/opt/gpg"}
    assert isinstance(exc_info.value.__cause__, PermissionError)
