"""보이스 저장소: 스크립트 로드 + 대사 조회

로드 시점에만 등록하고, 이후에는 읽기 전용으로 공유한다.
get_line = select_line → resolve.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Collection
from pathlib import Path
from typing import Optional

from npc_voice.core.voice.errors import UnknownVoice
from npc_voice.core.voice.models import (
    RelationshipState,
    RenderContext,
    RenderedLine,
    VoiceDefinition,
)
from npc_voice.core.voice.parser import LoadReport, parse_voice_library
from npc_voice.core.voice.resolver import Fallback, resolve, token_fallback
from npc_voice.core.voice.selector import select_line

logger = logging.getLogger(__name__)


class VoiceRegistry:
    """
    voice_id → VoiceDefinition 저장소.
    """

    def __init__(
        self,
        definitions: Optional[dict[str, VoiceDefinition]] = None,
        fallback: Fallback = token_fallback,
    ) -> None:
        self._voices: dict[str, VoiceDefinition] = dict(definitions or {})
        self._fallback = fallback

    # ── 로드 ─────────────────────────────────────────────────

    def load_text(self, text: str) -> LoadReport:
        """스크립트 전체 로드. 실패한 섹션은 건너뛰고 report에 남긴다."""
        report = parse_voice_library(text)
        for definition in report.definitions.values():
            self.register(definition)
        return report

    def load_from_file(self, path: str | Path) -> LoadReport:
        """dialogue.txt 로드. 반환: LoadReport."""
        path = Path(path)
        with path.open("r", encoding="utf-8-sig") as f:
            report = self.load_text(f.read())

        logger.info("Loaded %d voices from %s", len(report.definitions), path)
        for error in report.errors:
            logger.warning("Voice script error in %s: %s", path, error)
        return report

    def register(self, definition: VoiceDefinition) -> None:
        """이미 존재하는 voice_id면 경고 로그 후 덮어쓴다."""
        if definition.voice_id in self._voices:
            logger.warning("Overwriting existing voice: %s", definition.voice_id)
        self._voices[definition.voice_id] = definition

    # ── 조회 ─────────────────────────────────────────────────

    def get(self, voice_id: str) -> VoiceDefinition:
        """없으면 UnknownVoice."""
        try:
            return self._voices[voice_id]
        except KeyError:
            raise UnknownVoice(voice_id) from None

    def __contains__(self, voice_id: object) -> bool:
        return voice_id in self._voices

    def voice_ids(self) -> list[str]:
        return sorted(self._voices)

    def count(self) -> int:
        return len(self._voices)

    def get_line(
        self,
        voice_id: str,
        state: RelationshipState,
        tag: Optional[str] = None,
        context: Optional[RenderContext] = None,
        exclude: Collection[str] = (),
        rng: Optional[random.Random] = None,
    ) -> RenderedLine:
        """화자 1명의 대사 1줄 렌더링.

        Raises:
            UnknownVoice: voice_id 미등록
            NoLineAvailable: 후보 대사 없음
        """
        definition = self.get(voice_id)
        record = select_line(definition, state, tag=tag, exclude=exclude, rng=rng)
        resolved = resolve(record.template, context, self._fallback)

        for miss in resolved.misses:
            logger.warning(
                "Placeholder miss: %s (%s) in %s",
                miss.token,
                miss.kind.value,
                record.line_id,
            )

        return RenderedLine(
            voice_id=voice_id,
            record=record,
            text=resolved.text,
            misses=resolved.misses,
        )
