"""보이스 스크립트 파서

포맷:
    voice:<voiceId>
    <State>|[Tag]|<Template>
    ...
    #

레코드 하나에서 오류가 나면 해당 섹션 전체를 MalformedVoiceScript로 실패시킨다.
라이브러리 로드(parse_voice_library)는 섹션 단위로 오류를 모아 계속 진행한다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from npc_voice.core.voice.errors import MalformedVoiceScript
from npc_voice.core.voice.models import LineRecord, RelationshipState, VoiceDefinition

logger = logging.getLogger(__name__)

VOICE_HEADER = "voice:"
SECTION_END = "#"
FIELD_SEPARATOR = "|"
BOM = "\ufeff"


@dataclass
class LoadReport:
    """라이브러리 로드 결과. 실패한 섹션은 errors에만 남는다."""

    definitions: dict[str, VoiceDefinition] = field(default_factory=dict)
    errors: list[MalformedVoiceScript] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def parse(script_text: str, voice_id: str, first_line: int = 1) -> VoiceDefinition:
    """섹션 본문 → VoiceDefinition.

    Args:
        script_text: 레코드 줄들 (헤더/종료자 포함 가능)
        voice_id: 섹션의 보이스 식별자 (외부에서 전달)
        first_line: script_text 첫 줄의 파일 내 줄 번호 (오류 메시지용)

    Raises:
        MalformedVoiceScript: 첫 번째 잘못된 레코드에서 즉시
    """
    if not voice_id:
        raise ValueError("voice_id must not be empty")

    records: list[LineRecord] = []
    for offset, raw in enumerate(script_text.splitlines()):
        line_number = first_line + offset
        stripped = raw.strip()
        if not stripped or stripped == SECTION_END:
            continue
        if stripped.startswith(VOICE_HEADER):
            header_id = stripped[len(VOICE_HEADER):].strip()
            if header_id != voice_id:
                raise MalformedVoiceScript(
                    voice_id, line_number, raw, "header for a different voice"
                )
            continue
        records.append(_parse_record(stripped, voice_id, line_number, len(records)))

    return VoiceDefinition(voice_id=voice_id, lines=tuple(records))


def _parse_record(
    text: str, voice_id: str, line_number: int, index: int
) -> LineRecord:
    """State|[Tag]|Template 1줄 파싱"""
    fields = text.split(FIELD_SEPARATOR, 2)
    if len(fields) < 2:
        raise MalformedVoiceScript(
            voice_id, line_number, text, "missing '|' field separator"
        )

    state = RelationshipState.from_literal(fields[0].strip())
    if state is None:
        raise MalformedVoiceScript(
            voice_id, line_number, text, f"unknown state '{fields[0].strip()}'"
        )

    tag: Optional[str] = None
    if len(fields) == 3:
        tag = fields[1].strip() or None

    template = fields[-1].strip()
    if not template:
        raise MalformedVoiceScript(voice_id, line_number, text, "empty template")

    return LineRecord(
        line_id=f"{voice_id}:{index}",
        state=state,
        tag=tag,
        template=template,
    )


def parse_voice_library(text: str) -> LoadReport:
    """여러 섹션이 담긴 스크립트 전체를 로드.

    - "voice:<id>" 로 섹션 시작, "#" 단독 줄로 종료
    - 종료자 없이 다음 헤더가 오면 이전 섹션을 닫는다
    - 같은 voice_id가 다시 나오면 뒤 섹션이 덮어쓴다 (경고)
    - 섹션 밖의 레코드는 오류로 보고하고 건너뛴다
    """
    report = LoadReport()
    # UTF-8 BOM이 붙은 파일은 첫 헤더를 놓치지 않도록 제거
    if text.startswith(BOM):
        text = text[len(BOM):]

    sections: list[tuple[str, int, list[str]]] = []
    current: Optional[tuple[str, int, list[str]]] = None
    skipping = False  # 헤더가 잘못된 섹션의 본문을 버리는 중

    for offset, raw in enumerate(text.splitlines()):
        line_number = offset + 1
        stripped = raw.strip()

        if stripped.startswith(VOICE_HEADER):
            if current is not None:
                sections.append(current)
            voice_id = stripped[len(VOICE_HEADER):].strip()
            if not voice_id:
                report.errors.append(
                    MalformedVoiceScript("", line_number, raw, "empty voice id")
                )
                current, skipping = None, True
            else:
                current, skipping = (voice_id, line_number + 1, []), False
            continue

        if stripped == SECTION_END:
            if current is not None:
                sections.append(current)
            current, skipping = None, False
            continue

        if current is not None:
            current[2].append(raw)
        elif stripped and not skipping:
            report.errors.append(
                MalformedVoiceScript(
                    "", line_number, raw, "record outside of a voice section"
                )
            )

    if current is not None:
        sections.append(current)

    for voice_id, first_line, lines in sections:
        try:
            definition = parse("\n".join(lines), voice_id, first_line=first_line)
        except MalformedVoiceScript as e:
            logger.warning("Skipping voice section %s: %s", voice_id, e)
            report.errors.append(e)
            continue
        if voice_id in report.definitions:
            logger.warning("Duplicate voice section, replacing: %s", voice_id)
        report.definitions[voice_id] = definition

    logger.info(
        "Parsed %d voice sections (%d errors)",
        len(report.definitions),
        len(report.errors),
    )
    return report
