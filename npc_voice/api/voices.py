"""Voice API endpoints."""

import random
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from npc_voice.api.schemas import (
    ErrorResponse,
    HistoryResponse,
    LineRecordInfo,
    LineRequest,
    LineResponse,
    PlaceholderMissInfo,
    ScriptErrorInfo,
    ScriptReport,
    ScriptRequest,
    VoiceDetail,
    VoiceSummary,
)
from npc_voice.core.logging import get_logger
from npc_voice.core.voice.context import build_render_context
from npc_voice.core.voice.errors import NoLineAvailable, UnknownVoice
from npc_voice.core.voice.models import (
    PlaceholderKind,
    RelationshipState,
    RenderedLine,
    VoiceDefinition,
)
from npc_voice.core.voice.parser import parse_voice_library
from npc_voice.core.voice.registry import VoiceRegistry
from npc_voice.core.voice.resolver import find_placeholders
from npc_voice.db.database import get_db
from npc_voice.services.voice_service import DEFAULT_MEMORY_SIZE, VoiceService

logger = get_logger(__name__)

router = APIRouter(prefix="/voices", tags=["voices"])


def get_registry(request: Request) -> VoiceRegistry:
    """VoiceRegistry 인스턴스 반환 (의존성 주입)"""
    registry: VoiceRegistry = request.app.state.voice_registry
    return registry


def get_voice_service(
    request: Request, db: Session = Depends(get_db)
) -> VoiceService:
    """요청 단위 VoiceService (의존성 주입)"""
    rng: Optional[random.Random] = getattr(request.app.state, "voice_rng", None)
    memory_size: int = getattr(
        request.app.state, "recent_line_memory", DEFAULT_MEMORY_SIZE
    )
    return VoiceService(db, get_registry(request), rng=rng, memory_size=memory_size)


def _build_voice_summary(definition: VoiceDefinition) -> VoiceSummary:
    """VoiceDefinition을 VoiceSummary로 변환"""
    present = definition.states()
    return VoiceSummary(
        voice_id=definition.voice_id,
        line_count=len(definition),
        state_counts={
            state.value: len(definition.lines_for(state))
            for state in RelationshipState
            if state in present
        },
    )


def _build_line_response(rendered: RenderedLine) -> LineResponse:
    """RenderedLine을 LineResponse로 변환"""
    return LineResponse(
        voice_id=rendered.voice_id,
        line_id=rendered.line_id,
        state=rendered.record.state,
        tag=rendered.record.tag,
        text=rendered.text,
        misses=[
            PlaceholderMissInfo(kind=m.kind.value, key=m.key, token=m.token)
            for m in rendered.misses
        ],
    )


@router.get("", response_model=list[VoiceSummary])
def list_voices(registry: VoiceRegistry = Depends(get_registry)) -> list[VoiceSummary]:
    """등록된 보이스 목록과 상태별 대사 수"""
    return [_build_voice_summary(registry.get(v)) for v in registry.voice_ids()]


@router.post(
    "/validate",
    response_model=ScriptReport,
    responses={422: {"model": ErrorResponse}},
)
def validate_script(request: ScriptRequest) -> ScriptReport:
    """
    스크립트 검증

    저장소는 변경하지 않습니다. 잘못된 섹션이 하나라도 있으면
    422와 함께 각 오류의 voice_id / 줄 번호 / 원문을 돌려줍니다.
    """
    report = parse_voice_library(request.text)
    if not report.ok:
        errors = [
            ScriptErrorInfo(
                voice_id=e.voice_id,
                line_number=e.line_number,
                text=e.text,
                reason=e.reason,
            ).model_dump()
            for e in report.errors
        ]
        logger.info("Script validation failed: %d errors", len(errors))
        raise HTTPException(status_code=422, detail=errors)

    return ScriptReport(
        voices=[_build_voice_summary(d) for d in report.definitions.values()]
    )


@router.get(
    "/{voice_id}",
    response_model=VoiceDetail,
    responses={404: {"model": ErrorResponse}},
)
def get_voice(
    voice_id: str, registry: VoiceRegistry = Depends(get_registry)
) -> VoiceDetail:
    """보이스의 대사 레코드 전체"""
    try:
        definition = registry.get(voice_id)
    except UnknownVoice as e:
        raise HTTPException(status_code=404, detail=str(e))

    return VoiceDetail(
        voice_id=voice_id,
        lines=[
            LineRecordInfo(
                line_id=r.line_id,
                state=r.state,
                tag=r.tag,
                template=r.template,
                placeholders=[
                    f"{{{key}}}" if kind is PlaceholderKind.NAMED else f"#{key}#"
                    for kind, key in find_placeholders(r.template)
                ],
            )
            for r in definition.lines
        ],
    )


@router.post(
    "/{voice_id}/line",
    response_model=LineResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def render_line(
    voice_id: str,
    request: LineRequest,
    http_request: Request,
    db: Session = Depends(get_db),
) -> LineResponse:
    """
    대사 1줄 렌더링

    npc_id가 있으면 해당 화자의 최근 대사를 피하고 이력을 갱신합니다.
    없으면 이력 없이 선택합니다.
    """
    agenda_tag, context = build_render_context(
        hour=request.hour,
        agenda_label=request.agenda_label,
        named=request.named,
        tagged=request.tagged,
    )
    tag = request.tag if request.tag is not None else agenda_tag
    try:
        if request.npc_id is not None:
            service = get_voice_service(http_request, db)
            rendered = service.talk(
                request.npc_id,
                voice_id,
                request.state,
                activity=tag,
                context=context,
            )
        else:
            registry = get_registry(http_request)
            rendered = registry.get_line(
                voice_id,
                request.state,
                tag=tag,
                context=context,
                rng=getattr(http_request.app.state, "voice_rng", None),
            )
    except UnknownVoice as e:
        raise HTTPException(status_code=404, detail=str(e))
    except NoLineAvailable as e:
        raise HTTPException(status_code=409, detail=str(e))

    logger.info("Rendered %s for %s", rendered.line_id, request.npc_id or "-")
    return _build_line_response(rendered)


@router.get("/history/{npc_id}", response_model=HistoryResponse)
def get_history(
    npc_id: str, service: VoiceService = Depends(get_voice_service)
) -> HistoryResponse:
    """화자의 최근 대사 이력"""
    return HistoryResponse(npc_id=npc_id, recent_line_ids=service.get_history(npc_id))


@router.delete("/history/{npc_id}", responses={404: {"model": ErrorResponse}})
def clear_history(
    npc_id: str, service: VoiceService = Depends(get_voice_service)
) -> dict[str, bool]:
    """화자 이력 초기화"""
    if not service.clear_history(npc_id):
        raise HTTPException(status_code=404, detail=f"No history for: {npc_id}")
    return {"success": True}
