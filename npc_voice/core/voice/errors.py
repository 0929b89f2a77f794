"""보이스 엔진 예외 계층"""

from __future__ import annotations

from typing import Optional

from npc_voice.core.voice.models import RelationshipState


class VoiceError(Exception):
    """보이스 엔진 공통 기반 예외"""


class MalformedVoiceScript(VoiceError):
    """스크립트 구조 오류. 해당 보이스 섹션 전체가 실패한다."""

    def __init__(self, voice_id: str, line_number: int, text: str, reason: str) -> None:
        self.voice_id = voice_id
        self.line_number = line_number
        self.text = text
        self.reason = reason
        super().__init__(
            f"voice '{voice_id}' line {line_number}: {reason} ({text!r})"
        )


class UnknownVoice(VoiceError):
    """Registry에 없는 voice_id"""

    def __init__(self, voice_id: str) -> None:
        self.voice_id = voice_id
        super().__init__(f"Unknown voice: {voice_id}")


class NoLineAvailable(VoiceError):
    """모든 fallback 단계에서 후보 대사가 없음"""

    def __init__(
        self, voice_id: str, state: RelationshipState, tag: Optional[str]
    ) -> None:
        self.voice_id = voice_id
        self.state = state
        self.tag = tag
        super().__init__(
            f"No line available for voice '{voice_id}' "
            f"(state={state.value}, tag={tag})"
        )
