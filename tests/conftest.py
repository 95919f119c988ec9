import pytest

from jsdoc_builder.parsers import build_syntax_index

AI_ENV_KEYS = ("OPENAI_API_KEY", "GEMINI_API_KEY", "GOOGLE_API_KEY")


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Run every test without AI credentials and outside any config file."""
    for key in AI_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def parse():
    """Parse script text into a SyntaxIndex."""

    def _parse(source: str, dialect: str = "typescript", oracle_factory=None):
        return build_syntax_index(source, dialect, oracle_factory)

    return _parse
