import os

import pytest

from leitner.domain.models import Flashcard


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point HOME at a temp dir and drop LEITNER_* variables so config is predictable."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for key in [k for k in os.environ if k.startswith("LEITNER_")]:
        monkeypatch.delenv(key)
    return home


@pytest.fixture
def make_card():
    def _make(front="Q", back="A", hint=None, tags=()):
        return Flashcard(front=front, back=back, hint=hint, tags=tuple(tags))

    return _make


@pytest.fixture
def cards(make_card):
    """Five distinct cards, A through E."""
    return {name: make_card(front=f"front {name}", back=f"back {name}") for name in "ABCDE"}
