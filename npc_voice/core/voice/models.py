"""보이스 스크립트 도메인 모델 (DB 무관)

관계 상태 / 대사 레코드 / 보이스 정의 / 렌더 결과.
파싱 이후 불변이며 여러 호출에서 읽기 전용으로 공유된다.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional


class RelationshipState(str, Enum):
    """관계 상태 4종

    Stranger < Indifferent < Friendly 순으로 상승.
    Hostile은 별도 종착 상태로 하위 상태로 내려가지 않는다.
    """

    STRANGER = "Stranger"
    INDIFFERENT = "Indifferent"
    FRIENDLY = "Friendly"
    HOSTILE = "Hostile"

    @classmethod
    def from_literal(cls, text: str) -> Optional["RelationshipState"]:
        """스크립트 리터럴 → enum. 대소문자 정확히 일치해야 한다. 없으면 None."""
        for state in cls:
            if state.value == text:
                return state
        return None

    def fallback_chain(self) -> tuple["RelationshipState", ...]:
        """조회 순서: 자신 → 하위 상태. Hostile은 자신만."""
        if self is RelationshipState.HOSTILE:
            return (self,)
        idx = _ESCALATION.index(self)
        return tuple(reversed(_ESCALATION[: idx + 1]))


_ESCALATION = (
    RelationshipState.STRANGER,
    RelationshipState.INDIFFERENT,
    RelationshipState.FRIENDLY,
)


@dataclass(frozen=True)
class LineRecord:
    """대사 1줄 (state, tag, template)

    line_id는 "<voice_id>:<index>" 형식. exclude 이력에 사용.
    """

    line_id: str
    state: RelationshipState
    tag: Optional[str]
    template: str

    def matches_tag(self, tag: Optional[str]) -> bool:
        """태그 없는 대사는 항상 일치, 태그 있는 대사는 정확히 같을 때만."""
        return self.tag is None or self.tag == tag


@dataclass(frozen=True)
class VoiceDefinition:
    """보이스 1개 분량의 대사 묶음. 입력 순서 유지."""

    voice_id: str
    lines: tuple[LineRecord, ...] = ()

    def lines_for(self, state: RelationshipState) -> tuple[LineRecord, ...]:
        return tuple(r for r in self.lines if r.state == state)

    def states(self) -> set[RelationshipState]:
        """대사가 1줄 이상 있는 상태 집합"""
        return {r.state for r in self.lines}

    def __len__(self) -> int:
        return len(self.lines)


@dataclass(frozen=True)
class RenderContext:
    """치환 컨텍스트. {name} → named, #name# → tagged (서로 독립)."""

    named: Mapping[str, str] = field(default_factory=dict)
    tagged: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # 공유 시 외부 변경이 새지 않도록 읽기 전용 사본으로 고정
        object.__setattr__(self, "named", MappingProxyType(dict(self.named)))
        object.__setattr__(self, "tagged", MappingProxyType(dict(self.tagged)))


class PlaceholderKind(str, Enum):
    NAMED = "named"
    TAGGED = "tagged"


@dataclass(frozen=True)
class PlaceholderMiss:
    """치환 실패 진단 (예외 아님)"""

    kind: PlaceholderKind
    key: str
    token: str  # 원문 그대로 ("{village}", "#meal#")


@dataclass(frozen=True)
class ResolvedText:
    """Resolver 결과"""

    text: str
    misses: tuple[PlaceholderMiss, ...] = ()


@dataclass(frozen=True)
class RenderedLine:
    """Registry.get_line 결과"""

    voice_id: str
    record: LineRecord
    text: str
    misses: tuple[PlaceholderMiss, ...] = ()

    @property
    def line_id(self) -> str:
        return self.record.line_id
