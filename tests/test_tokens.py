# tests/test_tokens.py
import pytest

from codeprompt_lib import codeprompt_tokens
from codeprompt_lib.codeprompt_tokens import (
    count_tokens, get_model_info, get_tokenizer, normalize_encoding,
)


class FakeEncoding:
    """Whitespace tokenizer standing in for a downloaded tiktoken encoding."""

    def __init__(self, name):
        self.name = name
        self.calls = []

    def encode(self, text, allowed_special=()):
        self.calls.append(allowed_special)
        return text.split()


@pytest.fixture
def fake_tiktoken(monkeypatch):
    requested = []

    def get_encoding(name):
        requested.append(name)
        return FakeEncoding(name)

    monkeypatch.setattr(codeprompt_tokens.tiktoken, "get_encoding", get_encoding)
    monkeypatch.setattr(codeprompt_tokens, "_ENCODER_CACHE", {})
    return requested


@pytest.mark.parametrize("value, expected", [
    (None, "cl100k"),
    ("", "cl100k"),
    ("O200K", "o200k"),
    (" p50k ", "p50k"),
    ("unknown", "cl100k"),
])
def test_normalize_encoding(value, expected):
    assert normalize_encoding(value) == expected


def test_tokenizer_is_cached(fake_tiktoken):
    first = get_tokenizer("o200k")
    second = get_tokenizer("o200k")
    assert first is second
    assert fake_tiktoken == ["o200k_base"]


def test_count_tokens_allows_special_markers(fake_tiktoken):
    assert count_tokens("one two <|endoftext|>", "cl100k") == 3
    assert get_tokenizer("cl100k").calls == ["all"]


def test_model_info():
    assert get_model_info("o200k") == "GPT-4o models"
    assert get_model_info(None) == get_model_info("cl100k")
