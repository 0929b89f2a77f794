"""RenderContext 조립 헬퍼

NPC 일정(agenda) 라벨과 게임 시각에서 활동 태그 / 치환값을 만든다.
일정 자체의 계산은 외부 담당.
"""

from __future__ import annotations

from typing import Mapping, Optional

from npc_voice.core.voice.models import RenderContext

WORKING_TAG = "working"
MEAL_LABELS = frozenset({"lunch", "supper"})


def time_greeting(hour: int) -> str:
    """0~23시 → 인사말"""
    if not 0 <= hour <= 23:
        raise ValueError(f"hour out of range: {hour}")
    if hour < 12:
        return "Good morning"
    if hour < 17:
        return "Good afternoon"
    return "Good evening"


def agenda_context(label: Optional[str]) -> tuple[Optional[str], dict[str, str]]:
    """일정 라벨 → (활동 태그, tagged 추가분)

    working → ("working", {})
    lunch / supper → (None, {"meal": label})
    그 외 → (None, {})
    """
    if label == WORKING_TAG:
        return WORKING_TAG, {}
    if label in MEAL_LABELS:
        return None, {"meal": label}
    return None, {}


def build_render_context(
    player_name: Optional[str] = None,
    village: Optional[str] = None,
    dungeon_dir: Optional[str] = None,
    inn_name: Optional[str] = None,
    hour: Optional[int] = None,
    agenda_label: Optional[str] = None,
    named: Optional[Mapping[str, str]] = None,
    tagged: Optional[Mapping[str, str]] = None,
) -> tuple[Optional[str], RenderContext]:
    """(활동 태그, RenderContext) 반환. None 값은 컨텍스트에 넣지 않는다.

    named / tagged 로 넘긴 값이 기본 키보다 우선한다.
    """
    base_named = {
        "player-name": player_name,
        "village": village,
        "dungeon-dir": dungeon_dir,
        "inn-name": inn_name,
        "time-greeting": time_greeting(hour) if hour is not None else None,
    }
    merged_named = {k: v for k, v in base_named.items() if v is not None}
    merged_named.update(named or {})

    activity, meal = agenda_context(agenda_label)
    merged_tagged = dict(meal)
    merged_tagged.update(tagged or {})

    return activity, RenderContext(named=merged_named, tagged=merged_tagged)
