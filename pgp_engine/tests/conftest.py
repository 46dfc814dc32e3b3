from collections.abc import Callable
from pathlib import Path

import pytest

from pgp_engine.process.flavor import LegacyFlavor, LoopbackFlavor
from pgp_engine.process.handle import EngineHandle
from pgp_engine.process.keyring import KeyringManager
from pgp_engine.tests.utils.fake_invoker import FakeInvoker


@pytest.fixture
def home(tmp_path: Path) -> Path:
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def handle(home: Path) -> EngineHandle:
    return EngineHandle(binary="gpg", home=home, flavor=LoopbackFlavor(), version=(2, 2, 40))


@pytest.fixture
def legacy_handle(home: Path) -> EngineHandle:
    return EngineHandle(binary="gpg", home=home, flavor=LegacyFlavor(), version=(1, 4, 23))


@pytest.fixture
def make_keyrings() -> Callable[[EngineHandle, FakeInvoker], KeyringManager]:
    def _make(handle: EngineHandle, invoker: FakeInvoker) -> KeyringManager:
        return KeyringManager(handle, invoker)

    return _make
