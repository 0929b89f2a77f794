"""API request/response schemas."""

from typing import Optional

from pydantic import BaseModel, Field

from npc_voice.core.voice.models import RelationshipState


# === Request Schemas ===


class LineRequest(BaseModel):
    """대사 요청"""

    state: RelationshipState = Field(..., description="Stranger, Indifferent, Friendly, Hostile")
    tag: Optional[str] = Field(None, description="활동 태그 (예: working)")
    npc_id: Optional[str] = Field(
        None, min_length=1, max_length=50, description="지정 시 화자 이력 사용/갱신"
    )
    named: dict[str, str] = Field(default_factory=dict, description="{name} 치환값")
    tagged: dict[str, str] = Field(default_factory=dict, description="#name# 치환값")
    hour: Optional[int] = Field(
        None, ge=0, le=23, description="게임 시각. {time-greeting} 채움"
    )
    agenda_label: Optional[str] = Field(
        None, description="일정 라벨 (working → 태그, lunch/supper → #meal#)"
    )


class ScriptRequest(BaseModel):
    """보이스 스크립트 검증 요청"""

    text: str = Field(..., description="voice:<id> 섹션들로 된 스크립트 본문")


# === Response Schemas ===


class PlaceholderMissInfo(BaseModel):
    """치환 실패 정보"""

    kind: str
    key: str
    token: str


class LineResponse(BaseModel):
    """렌더링된 대사"""

    voice_id: str
    line_id: str
    state: RelationshipState
    tag: Optional[str] = None
    text: str
    misses: list[PlaceholderMissInfo] = []


class LineRecordInfo(BaseModel):
    """스크립트 대사 레코드"""

    line_id: str
    state: RelationshipState
    tag: Optional[str] = None
    template: str
    placeholders: list[str] = []


class VoiceSummary(BaseModel):
    """보이스 요약"""

    voice_id: str
    line_count: int
    state_counts: dict[str, int] = {}


class VoiceDetail(BaseModel):
    """보이스 상세"""

    voice_id: str
    lines: list[LineRecordInfo] = []


class ScriptErrorInfo(BaseModel):
    """스크립트 오류 위치"""

    voice_id: str
    line_number: int
    text: str
    reason: str


class ScriptReport(BaseModel):
    """스크립트 검증 결과"""

    voices: list[VoiceSummary] = []


class HistoryResponse(BaseModel):
    """화자 이력"""

    npc_id: str
    recent_line_ids: list[str] = []


class ErrorResponse(BaseModel):
    """에러 응답"""

    success: bool = False
    error: str
    detail: Optional[str] = None
