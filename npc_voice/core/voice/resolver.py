"""플레이스홀더 치환

{name}  → context.named
#name#  → context.tagged

왼쪽부터 스캔한다. 닫는 구분자가 없거나 키가 토큰 문자([A-Za-z0-9_-])가
아니면 구분자를 일반 문자로 취급한다. 키가 없으면 fallback 문자열로
대체하고 PlaceholderMiss를 기록한다 (예외 없음).
"""

from __future__ import annotations

import re
from typing import Callable, Optional

from npc_voice.core.voice.models import (
    PlaceholderKind,
    PlaceholderMiss,
    RenderContext,
    ResolvedText,
)

_KEY_PATTERN = re.compile(r"[A-Za-z0-9_-]+")

# 여는 구분자 → (닫는 구분자, 종류)
_DELIMITERS = {
    "{": ("}", PlaceholderKind.NAMED),
    "#": ("#", PlaceholderKind.TAGGED),
}

Fallback = Callable[[PlaceholderMiss], str]


def token_fallback(miss: PlaceholderMiss) -> str:
    """원문 토큰 유지 ("#meal#" → "#meal#")"""
    return miss.token


def bracket_fallback(miss: PlaceholderMiss) -> str:
    """"[meal]" 형식"""
    return f"[{miss.key}]"


FALLBACKS: dict[str, Fallback] = {
    "token": token_fallback,
    "bracket": bracket_fallback,
}


def resolve(
    template: str,
    context: Optional[RenderContext] = None,
    fallback: Fallback = token_fallback,
) -> ResolvedText:
    """템플릿 치환. 같은 입력에 대해 항상 같은 결과."""
    if context is None:
        context = RenderContext()

    out: list[str] = []
    misses: list[PlaceholderMiss] = []
    pos = 0
    length = len(template)

    while pos < length:
        ch = template[pos]
        if ch not in _DELIMITERS:
            # 다음 구분자까지 한 번에 복사
            nxt = _next_delimiter(template, pos)
            out.append(template[pos:nxt])
            pos = nxt
            continue

        closer, kind = _DELIMITERS[ch]
        end = template.find(closer, pos + 1)
        key = template[pos + 1 : end] if end != -1 else ""
        if end == -1 or not _KEY_PATTERN.fullmatch(key):
            out.append(ch)
            pos += 1
            continue

        table = context.named if kind is PlaceholderKind.NAMED else context.tagged
        value = table.get(key)
        if value is None:
            miss = PlaceholderMiss(kind=kind, key=key, token=template[pos : end + 1])
            misses.append(miss)
            value = fallback(miss)
        out.append(value)
        pos = end + 1

    return ResolvedText(text="".join(out), misses=tuple(misses))


def find_placeholders(template: str) -> list[tuple[PlaceholderKind, str]]:
    """템플릿에 들어있는 플레이스홀더 목록 (등장 순서)."""
    found = resolve(template, RenderContext(), token_fallback)
    return [(m.kind, m.key) for m in found.misses]


def _next_delimiter(template: str, start: int) -> int:
    positions = [template.find(d, start) for d in _DELIMITERS]
    positions = [p for p in positions if p != -1]
    return min(positions) if positions else len(template)
