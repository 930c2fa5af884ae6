"""
Voice assistant configuration for companion sessions.

The session UI starts a call on the third-party voice SDK with an assistant
payload and per-call variable overrides. Both are built here so the client
never assembles prompts or picks voice ids itself.

Usage:
    from companion_service.domain.assistant import configure_assistant, session_overrides

    assistant = configure_assistant(companion.voice, companion.style)
    overrides = session_overrides(companion.subject, companion.topic, companion.style)
"""

from typing import Any

from companion_service.domain.subjects import Style, Voice

# ElevenLabs voice ids by voice and delivery style
VOICE_CATALOG: dict[str, dict[str, str]] = {
    Voice.MALE.value: {
        Style.CASUAL.value: "2BJW5coyhAzSr8STdHbE",
        Style.FORMAL.value: "c6SfcYrb2t09NHXiT80T",
    },
    Voice.FEMALE.value: {
        Style.CASUAL.value: "ZIlrSGI4jZqobxRKprJz",
        Style.FORMAL.value: "sVB6RpH8yRiRTuzS5fbf",
    },
}

DEFAULT_VOICE_ID = "sarah"

FIRST_MESSAGE = "Hello, let's start the session. Today we'll be talking about {{topic}}."

SYSTEM_PROMPT = """You are a highly knowledgeable tutor teaching a real-time voice session with a student. Your goal is to teach the student about the topic and subject.

Tutor Guidelines:
Stick to the given topic - {{ topic }} and subject - {{ subject }} and teach the student about it.
Keep the conversation flowing smoothly while maintaining control.
From time to time make sure that the student is following you and understands you.
Break down the topic into smaller parts and teach the student one part at a time.
Keep your style of conversation {{ style }}.
Keep your responses short, like in a real voice conversation.
Do not include any special characters in your responses - this is a voice conversation.
"""


def resolve_voice_id(voice: str, style: str) -> str:
    """Voice id for a voice/style pair, falling back to the provider default."""
    return VOICE_CATALOG.get(voice, {}).get(style, DEFAULT_VOICE_ID)


def configure_assistant(voice: str, style: str) -> dict[str, Any]:
    """
    Build the assistant payload for a companion.

    Args:
        voice: Companion voice (``male`` or ``female``)
        style: Delivery style (``formal`` or ``casual``)

    Returns:
        Assistant definition accepted by the voice SDK's ``start`` call
    """
    return {
        "name": "Companion",
        "firstMessage": FIRST_MESSAGE,
        "transcriber": {
            "provider": "deepgram",
            "model": "nova-3",
            "language": "en",
        },
        "voice": {
            "provider": "11labs",
            "voiceId": resolve_voice_id(voice, style),
            "stability": 0.4,
            "similarityBoost": 0.8,
            "speed": 0.9,
            "style": 0.5,
            "useSpeakerBoost": True,
        },
        "model": {
            "provider": "openai",
            "model": "gpt-4",
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
            ],
        },
        "clientMessages": [],
        "serverMessages": [],
    }


def session_overrides(subject: str, topic: str, style: str) -> dict[str, Any]:
    """Per-call overrides filling the prompt's template variables."""
    return {
        "variableValues": {"subject": subject, "topic": topic, "style": style},
        "clientMessages": ["transcript"],
        "serverMessages": [],
    }
