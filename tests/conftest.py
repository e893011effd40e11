from pathlib import Path

import pytest
import structlog

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def _isolated_config_env(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("BLOG_DOCS_INDEX_ROOT", str(tmp_path))
    monkeypatch.delenv("BLOG_DOCS_INDEX_CONFIG", raising=False)
    monkeypatch.delenv("BLOG_DOCS_INDEX_BASE_URL", raising=False)
    yield
    # the CLI binds structlog to the (captured) stderr of the test that ran it
    structlog.reset_defaults()


@pytest.fixture
def load_fixture():
    def _load(name: str) -> str:
        return (FIXTURES_DIR / name).read_text(encoding="utf-8")

    return _load
