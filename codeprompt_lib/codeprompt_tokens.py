# -*- coding: utf-8 -*-
"""
Token counting for rendered prompts, backed by tiktoken.
"""

from typing import Dict, Optional

import tiktoken

from .codeprompt_config import DEFAULT_ENCODING

# CLI encoding names -> tiktoken encoding names
TIKTOKEN_ENCODINGS: Dict[str, str] = {
    "cl100k": "cl100k_base",
    "o200k": "o200k_base",
    "p50k": "p50k_base",
    "p50k_edit": "p50k_edit",
    "r50k": "r50k_base",
    "gpt2": "gpt2",
}

MODEL_INFO: Dict[str, str] = {
    "cl100k": "ChatGPT models, text-embedding-ada-002",
    "o200k": "GPT-4o models",
    "p50k": "Code models, text-davinci-002, text-davinci-003",
    "p50k_edit": "Edit models like text-davinci-edit-001, code-davinci-edit-001",
    "r50k": "GPT-3 models like davinci",
    "gpt2": "GPT-3 models like davinci",
}

_ENCODER_CACHE: Dict[str, "tiktoken.Encoding"] = {}


def normalize_encoding(encoding: Optional[str]) -> str:
    """Maps an encoding option to a known name; unknown or empty names fall back to cl100k."""
    name = (encoding or DEFAULT_ENCODING).strip().lower()
    return name if name in TIKTOKEN_ENCODINGS else DEFAULT_ENCODING


def get_tokenizer(encoding: Optional[str] = None) -> "tiktoken.Encoding":
    name = normalize_encoding(encoding)
    if name not in _ENCODER_CACHE:
        _ENCODER_CACHE[name] = tiktoken.get_encoding(TIKTOKEN_ENCODINGS[name])
    return _ENCODER_CACHE[name]


def count_tokens(text: str, encoding: Optional[str] = None) -> int:
    """Number of tokens in ``text``; special-token markers count as single special tokens."""
    return len(get_tokenizer(encoding).encode(text, allowed_special="all"))


def get_model_info(encoding: Optional[str] = None) -> str:
    return MODEL_INFO[normalize_encoding(encoding)]
