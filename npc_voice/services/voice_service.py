"""Voice Service: Core와 DB를 연결

화자(NPC)별 최근 대사 이력을 DB에 보관하고,
VoiceRegistry.get_line 호출 시 exclude로 넘긴다.
"""

from __future__ import annotations

import random
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.orm import Session

from npc_voice.core.logging import get_logger
from npc_voice.core.voice.models import RelationshipState, RenderContext, RenderedLine
from npc_voice.core.voice.registry import VoiceRegistry
from npc_voice.db.models import SpeakerHistoryModel

logger = get_logger(__name__)

DEFAULT_MEMORY_SIZE = 3


class VoiceService:
    """화자별 대사 조회 + 반복 회피 이력 관리

    이력은 화자(npc_id) 단위로 소유된다.
    같은 화자에 대한 동시 호출은 호출자가 직렬화해야 한다.
    """

    def __init__(
        self,
        db_session: Session,
        registry: VoiceRegistry,
        rng: Optional[random.Random] = None,
        memory_size: int = DEFAULT_MEMORY_SIZE,
    ) -> None:
        if memory_size < 0:
            raise ValueError("memory_size must be >= 0")
        self._db = db_session
        self._registry = registry
        self._rng = rng
        self._memory_size = memory_size

    @property
    def registry(self) -> VoiceRegistry:
        return self._registry

    # ── 대사 ─────────────────────────────────────────────────

    def talk(
        self,
        npc_id: str,
        voice_id: str,
        state: RelationshipState,
        activity: Optional[str] = None,
        context: Optional[RenderContext] = None,
    ) -> RenderedLine:
        """이력 조회 → 대사 선택/치환 → 이력 갱신 + 커밋

        Raises:
            UnknownVoice, NoLineAvailable: 이력은 변경하지 않는다
        """
        row = self._db.get(SpeakerHistoryModel, npc_id)
        history: List[str] = list(row.recent_line_ids) if row is not None else []

        # 다른 보이스로 바뀐 화자는 이전 이력이 의미 없음
        if row is not None and row.voice_id != voice_id:
            history = []

        rendered = self._registry.get_line(
            voice_id,
            state,
            tag=activity,
            context=context,
            exclude=history,
            rng=self._rng,
        )

        history = self._remember(history, rendered.line_id)
        now = datetime.now(timezone.utc)
        if row is None:
            row = SpeakerHistoryModel(
                npc_id=npc_id,
                voice_id=voice_id,
                recent_line_ids=history,
                updated_at=now,
            )
            self._db.add(row)
        else:
            row.voice_id = voice_id
            row.recent_line_ids = history
            row.updated_at = now
        self._db.commit()

        logger.debug(
            "%s (%s) said %s, history=%s", npc_id, voice_id, rendered.line_id, history
        )
        return rendered

    # ── 이력 ─────────────────────────────────────────────────

    def get_history(self, npc_id: str) -> List[str]:
        """최근 line_id 목록 (오래된 것 → 최근). 없으면 빈 리스트."""
        row = self._db.get(SpeakerHistoryModel, npc_id)
        if row is None:
            return []
        return list(row.recent_line_ids)

    def clear_history(self, npc_id: str) -> bool:
        """이력 삭제. 삭제했으면 True."""
        row = self._db.get(SpeakerHistoryModel, npc_id)
        if row is None:
            return False
        self._db.delete(row)
        self._db.commit()
        logger.info("Cleared voice history: %s", npc_id)
        return True

    def _remember(self, history: List[str], line_id: str) -> List[str]:
        if self._memory_size == 0:
            return []
        updated = [h for h in history if h != line_id]
        updated.append(line_id)
        return updated[-self._memory_size :]
