"""보이스 엔진 Core 패키지

스크립트 파싱 / 대사 선택 / 플레이스홀더 치환 / 저장소.
DB 무관 순수 Python.
"""

from npc_voice.core.voice.models import (
    LineRecord,
    PlaceholderKind,
    PlaceholderMiss,
    RelationshipState,
    RenderContext,
    RenderedLine,
    ResolvedText,
    VoiceDefinition,
)
from npc_voice.core.voice.errors import (
    MalformedVoiceScript,
    NoLineAvailable,
    UnknownVoice,
    VoiceError,
)
from npc_voice.core.voice.parser import LoadReport, parse, parse_voice_library
from npc_voice.core.voice.resolver import (
    FALLBACKS,
    bracket_fallback,
    find_placeholders,
    resolve,
    token_fallback,
)
from npc_voice.core.voice.selector import eligible_lines, select_line
from npc_voice.core.voice.context import (
    agenda_context,
    build_render_context,
    time_greeting,
)
from npc_voice.core.voice.registry import VoiceRegistry

__all__ = [
    "LineRecord",
    "PlaceholderKind",
    "PlaceholderMiss",
    "RelationshipState",
    "RenderContext",
    "RenderedLine",
    "ResolvedText",
    "VoiceDefinition",
    "MalformedVoiceScript",
    "NoLineAvailable",
    "UnknownVoice",
    "VoiceError",
    "LoadReport",
    "parse",
    "parse_voice_library",
    "FALLBACKS",
    "bracket_fallback",
    "find_placeholders",
    "resolve",
    "token_fallback",
    "eligible_lines",
    "select_line",
    "agenda_context",
    "build_render_context",
    "time_greeting",
    "VoiceRegistry",
]
