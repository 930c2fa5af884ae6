"""Unit tests for voice assistant configuration and the subject catalog."""

import pytest

from companion_service.domain.assistant import (
    DEFAULT_VOICE_ID,
    VOICE_CATALOG,
    configure_assistant,
    resolve_voice_id,
    session_overrides,
)
from companion_service.domain.subjects import DEFAULT_SUBJECT_COLOR, Subject, get_subject_color


@pytest.mark.unit
class TestConfigureAssistant:

    @pytest.mark.parametrize("voice", ["male", "female"])
    @pytest.mark.parametrize("style", ["formal", "casual"])
    def test_voice_id_from_catalog(self, voice, style):
        assistant = configure_assistant(voice, style)
        assert assistant["voice"]["voiceId"] == VOICE_CATALOG[voice][style]
        assert assistant["voice"]["provider"] == "11labs"

    def test_unknown_voice_falls_back_to_default(self):
        assert resolve_voice_id("robot", "casual") == DEFAULT_VOICE_ID
        assert resolve_voice_id("male", "whisper") == DEFAULT_VOICE_ID

    def test_prompt_uses_template_variables(self):
        assistant = configure_assistant("female", "casual")
        prompt = assistant["model"]["messages"][0]["content"]

        assert assistant["model"]["messages"][0]["role"] == "system"
        assert "{{ topic }}" in prompt
        assert "{{ subject }}" in prompt
        assert "{{ style }}" in prompt
        assert "{{topic}}" in assistant["firstMessage"]

    def test_transcriber(self):
        transcriber = configure_assistant("male", "formal")["transcriber"]
        assert transcriber == {"provider": "deepgram", "model": "nova-3", "language": "en"}


@pytest.mark.unit
class TestSessionOverrides:

    def test_variable_values(self):
        overrides = session_overrides("maths", "Algebra", "formal")
        assert overrides["variableValues"] == {
            "subject": "maths",
            "topic": "Algebra",
            "style": "formal",
        }
        assert overrides["clientMessages"] == ["transcript"]
        assert overrides["serverMessages"] == []


@pytest.mark.unit
class TestSubjectColors:

    def test_every_subject_has_a_color(self):
        for subject in Subject:
            assert get_subject_color(subject.value) != DEFAULT_SUBJECT_COLOR

    def test_lookup_is_case_insensitive(self):
        assert get_subject_color("Maths") == get_subject_color("maths")

    def test_unknown_subject_gets_default(self):
        assert get_subject_color("astrology") == DEFAULT_SUBJECT_COLOR
