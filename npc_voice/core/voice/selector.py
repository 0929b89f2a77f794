"""대사 선택

선택 규칙:
1. 요청 상태에서 태그 규칙에 맞는 대사를 모은다. 없으면 하위 상태로 내려간다
   (Friendly → Indifferent → Stranger). Hostile은 내려가지 않는다.
   태그 규칙은 모든 단계에서 동일하게 유지한다.
2. exclude에 있는 대사를 뺀다. 전부 빠지면 exclude를 무시한다.
3. 남은 후보 중 균등 확률로 1개.

선택기는 호출 간 상태를 갖지 않는다. exclude 이력 갱신은 호출자 몫.
"""

from __future__ import annotations

import random
from collections.abc import Collection
from typing import Optional

from npc_voice.core.voice.errors import NoLineAvailable
from npc_voice.core.voice.models import LineRecord, RelationshipState, VoiceDefinition


def eligible_lines(
    definition: VoiceDefinition,
    state: RelationshipState,
    tag: Optional[str] = None,
) -> tuple[RelationshipState, list[LineRecord]]:
    """fallback 적용 후 (실제 사용된 상태, 후보 목록). 없으면 NoLineAvailable."""
    for candidate_state in state.fallback_chain():
        pool = [
            r
            for r in definition.lines
            if r.state == candidate_state and r.matches_tag(tag)
        ]
        if pool:
            return candidate_state, pool
    raise NoLineAvailable(definition.voice_id, state, tag)


def select_line(
    definition: VoiceDefinition,
    state: RelationshipState,
    tag: Optional[str] = None,
    exclude: Collection[str] = (),
    rng: Optional[random.Random] = None,
) -> LineRecord:
    """후보 중 1줄 선택.

    Args:
        definition: 대상 보이스
        state: 현재 관계 상태
        tag: 활동 태그 (예: "working"). None이면 태그 없는 대사만
        exclude: 최근에 보여준 line_id
        rng: 난수원. 테스트에서는 시드 고정 Random 주입

    Raises:
        NoLineAvailable: 모든 fallback 단계에서 후보 없음
    """
    _, pool = eligible_lines(definition, state, tag)

    if exclude:
        excluded = set(exclude)
        fresh = [r for r in pool if r.line_id not in excluded]
        if fresh:
            pool = fresh

    chooser = rng if rng is not None else random
    return chooser.choice(pool)
