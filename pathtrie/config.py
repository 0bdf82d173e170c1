"""Service settings, read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from pathtrie.errors import InvalidArgumentError
from pathtrie.fragments import as_delimiter


def _int(env: Mapping[str, str], name: str, default: int | None) -> int | None:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise InvalidArgumentError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class TrieConfig:
    port: int = 8080
    debug: bool = False
    delimiter: str = "/"
    # Longest key the service accepts, in bytes.
    max_key_len: int = 256
    max_results: int | None = None
    seed_file: str | None = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> TrieConfig:
        env = os.environ if env is None else env
        delimiter = env.get("TRIE_DELIMITER", "/")
        as_delimiter(delimiter)
        return cls(
            port=_int(env, "PORT", 8080),
            debug=env.get("FLASK_DEBUG", "0") == "1",
            delimiter=delimiter,
            max_key_len=_int(env, "TRIE_MAX_KEY_LEN", 256),
            max_results=_int(env, "TRIE_MAX_RESULTS", None),
            seed_file=env.get("TRIE_SEED_FILE") or None,
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )
