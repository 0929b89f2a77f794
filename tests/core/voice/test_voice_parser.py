"""보이스 스크립트 파서 테스트 (섹션 파싱 + 라이브러리 로드)"""

from __future__ import annotations

import pytest

from npc_voice.core.voice.errors import MalformedVoiceScript
from npc_voice.core.voice.models import RelationshipState
from npc_voice.core.voice.parser import parse, parse_voice_library

SMITH_SECTION = """\
Stranger||Haven't seen you around {village} before.
Indifferent|working|{time-greeting}, looking for some armour or weapons?
Friendly|Back again, {player-name}?
Hostile||Get out of my sight.
"""


# ── parse ─────────────────────────────────────────────────────


class TestParseSection:
    def test_record_count_and_fields(self) -> None:
        definition = parse(SMITH_SECTION, "smith1")
        assert definition.voice_id == "smith1"
        assert len(definition) == 4

        first, second, third, fourth = definition.lines
        assert first.state == RelationshipState.STRANGER
        assert first.tag is None
        assert first.template == "Haven't seen you around {village} before."
        assert second.state == RelationshipState.INDIFFERENT
        assert second.tag == "working"
        assert (
            second.template
            == "{time-greeting}, looking for some armour or weapons?"
        )
        assert fourth.state == RelationshipState.HOSTILE

    def test_two_field_record_has_no_tag(self) -> None:
        """State|Template 형식 = 태그 없음"""
        definition = parse(SMITH_SECTION, "smith1")
        third = definition.lines[2]
        assert third.state == RelationshipState.FRIENDLY
        assert third.tag is None
        assert third.template == "Back again, {player-name}?"

    def test_line_ids_follow_insertion_order(self) -> None:
        definition = parse(SMITH_SECTION, "smith1")
        assert [r.line_id for r in definition.lines] == [
            "smith1:0",
            "smith1:1",
            "smith1:2",
            "smith1:3",
        ]

    def test_blank_and_separator_lines_skipped(self) -> None:
        text = "\nStranger||Hello.\n\n   \n#\n"
        definition = parse(text, "v")
        assert len(definition) == 1

    def test_template_may_contain_pipe(self) -> None:
        definition = parse("Friendly||Left | right", "v")
        assert definition.lines[0].template == "Left | right"

    def test_matching_header_skipped(self) -> None:
        definition = parse("voice:v\nStranger||Hello.\n#", "v")
        assert len(definition) == 1

    def test_empty_section(self) -> None:
        definition = parse("", "v")
        assert len(definition) == 0

    def test_unknown_state_fails(self) -> None:
        """"Angry" → MalformedVoiceScript (voice id + 줄 번호)"""
        text = "Stranger||Hello.\nAngry||Grr."
        with pytest.raises(MalformedVoiceScript) as exc_info:
            parse(text, "smith1")
        err = exc_info.value
        assert err.voice_id == "smith1"
        assert err.line_number == 2
        assert err.text == "Angry||Grr."
        assert "smith1" in str(err)
        assert "line 2" in str(err)

    def test_state_is_case_sensitive(self) -> None:
        with pytest.raises(MalformedVoiceScript):
            parse("friendly||Hi", "v")

    def test_missing_separator_fails(self) -> None:
        with pytest.raises(MalformedVoiceScript) as exc_info:
            parse("Just some words", "v")
        assert "separator" in exc_info.value.reason

    def test_empty_template_fails(self) -> None:
        with pytest.raises(MalformedVoiceScript):
            parse("Friendly|working|", "v")

    def test_header_for_other_voice_fails(self) -> None:
        with pytest.raises(MalformedVoiceScript):
            parse("voice:other\nStranger||Hello.", "v")

    def test_first_line_offset(self) -> None:
        with pytest.raises(MalformedVoiceScript) as exc_info:
            parse("Stranger||ok\nBad", "v", first_line=10)
        assert exc_info.value.line_number == 11

    def test_empty_voice_id_rejected(self) -> None:
        with pytest.raises(ValueError):
            parse("Stranger||Hello.", "")


# ── parse_voice_library ───────────────────────────────────────


LIBRARY = """\
voice:mayor1
Stranger||Welcome to {village}.
Friendly||Good to see you, {player-name}!
#
voice:broken1
Stranger||Hello.
Angry||Grr.
#
voice:smith1
Indifferent|working|{time-greeting}, looking for some armour or weapons?
#
"""


class TestParseLibrary:
    def test_good_sections_load_despite_bad_one(self) -> None:
        report = parse_voice_library(LIBRARY)
        assert set(report.definitions) == {"mayor1", "smith1"}
        assert len(report.definitions["mayor1"]) == 2
        assert not report.ok
        assert len(report.errors) == 1

    def test_error_line_number_is_file_relative(self) -> None:
        report = parse_voice_library(LIBRARY)
        err = report.errors[0]
        assert err.voice_id == "broken1"
        assert err.line_number == 7

    def test_section_closed_by_next_header(self) -> None:
        text = "voice:a\nStranger||A\nvoice:b\nStranger||B\n"
        report = parse_voice_library(text)
        assert report.ok
        assert report.definitions["a"].lines[0].template == "A"
        assert report.definitions["b"].lines[0].template == "B"

    def test_duplicate_section_replaces(self) -> None:
        text = "voice:a\nStranger||first\n#\nvoice:a\nStranger||second\n#\n"
        report = parse_voice_library(text)
        assert report.definitions["a"].lines[0].template == "second"

    def test_record_outside_section_reported(self) -> None:
        text = "Stranger||orphan\nvoice:a\nStranger||A\n#\n"
        report = parse_voice_library(text)
        assert set(report.definitions) == {"a"}
        assert len(report.errors) == 1
        assert report.errors[0].line_number == 1

    def test_empty_voice_id_header_skips_section(self) -> None:
        text = "voice:\nStranger||lost\n#\nvoice:a\nStranger||A\n#\n"
        report = parse_voice_library(text)
        assert set(report.definitions) == {"a"}
        assert len(report.errors) == 1

    def test_leading_bom_stripped(self) -> None:
        report = parse_voice_library("\ufeffvoice:a\nStranger||A\n#\n")
        assert report.ok
        assert set(report.definitions) == {"a"}

    def test_empty_text(self) -> None:
        report = parse_voice_library("")
        assert report.ok
        assert report.definitions == {}
