import shutil
from collections.abc import Iterator
from pathlib import Path

import pytest

from pgp_engine.client import PgpEngine
from pgp_engine.config import EngineConfig
from pgp_engine.models.params import KeyGenerationParams
from pgp_engine.models.results import GeneratedKeyPair
from pgp_engine.tests.integration.constants import CREATED, PASSPHRASE


def pytest_collection_modifyitems(config: pytest.Config, items: list) -> None:
    if shutil.which("gpg"):
        return
    mark_expr = getattr(config.option, "markexpr", "")
    if "integration" in mark_expr:
        return
    skip = pytest.mark.skip(reason="gpg binary not found on PATH")
    for item in items:
        if item.get_closest_marker("integration"):
            item.add_marker(skip)


@pytest.fixture
def engine(tmp_path: Path) -> Iterator[PgpEngine]:
    """Fresh engine per test, so no agent passphrase cache is shared."""
    with PgpEngine(EngineConfig(temp_dir=tmp_path)) as client:
        yield client


@pytest.fixture(scope="module")
def key_pair(tmp_path_factory: pytest.TempPathFactory) -> GeneratedKeyPair:
    params = KeyGenerationParams(
        name="Jane Doe",
        email="jane@example.com",
        comment="work",
        passphrase=PASSPHRASE,
        created=CREATED,
    )
    with PgpEngine(EngineConfig(temp_dir=tmp_path_factory.mktemp("keygen"))) as client:
        return client.generate_key(params)


@pytest.fixture(scope="module")
def other_key_pair(tmp_path_factory: pytest.TempPathFactory) -> GeneratedKeyPair:
    params = KeyGenerationParams(name="Bob Roe", email="bob@example.com", passphrase=PASSPHRASE)
    with PgpEngine(EngineConfig(temp_dir=tmp_path_factory.mktemp("keygen"))) as client:
        return client.generate_key(params)
