"""Normalização e matching de origem contra padrões glob.

Padrões aceitam `*` como curinga e são comparados sem distinção de
maiúsculas. `*.example.com` casa `a.example.com` e `a.b.example.com`,
mas não `example.com`.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

if TYPE_CHECKING:
    from collections.abc import Iterable


def normalize_host(origin: str | None) -> str:
    """Extrai hostname do header Origin, em minúsculas e sem `www.`.

    Args:
        origin: Valor bruto do header (ex.: "https://www.Example.com:8443")

    Returns:
        Hostname normalizado ou "" quando não parseável.
    """
    if not origin:
        return ""
    try:
        hostname = urlsplit(origin.strip()).hostname
    except ValueError:
        return ""
    if not hostname:
        return ""
    host = hostname.lower()
    if host.startswith("www."):
        host = host[4:]
    return host


@lru_cache(maxsize=256)
def _compile_pattern(pattern: str) -> re.Pattern[str]:
    expression = re.escape(pattern).replace(r"\*", ".*")
    return re.compile(expression, re.IGNORECASE)


def _matches_pattern(host: str, pattern: str) -> bool:
    if pattern == "*":
        return True
    return _compile_pattern(pattern).fullmatch(host) is not None


def matches_origin(host: str, patterns: Iterable[str]) -> bool:
    """Verifica se host casa algum padrão permitido.

    Lista vazia permite qualquer origem (válvula operacional).
    """
    pattern_list = list(patterns)
    if not pattern_list:
        return True
    return any(_matches_pattern(host, pattern) for pattern in pattern_list)
