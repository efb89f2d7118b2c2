from datetime import datetime
from types import SimpleNamespace

import pytest

from interview_core.errors import InteractionModeError
from interview_core.models import (
    ActionType,
    AlignmentFeedback,
    CommunicationScore,
    FeedbackReport,
    Grade,
    Improvement,
    InteractionModeType,
    InterviewAction,
    OverallScore,
    Priority,
    QuestionType,
    ResumeContext,
    ScoringRubric,
    Skill,
    TechnicalScore,
)
from interview_core.presentation import (
    TextInteractionMode,
    VoiceInteractionMode,
    create_mode,
    format_feedback,
    get_available_modes,
)
from interview_core.services.speech import SpeechService

from conftest import make_question


def _report(alignment=None) -> FeedbackReport:
    return FeedbackReport(
        session_id="s-1",
        scores=ScoringRubric(
            communication=CommunicationScore(8, 7.5, 7, 8, 30.5, Grade.B),
            technical_fit=TechnicalScore(6, 6, 7, 5, 24, Grade.D),
            overall=OverallScore(66.9, Grade.D),
        ),
        strengths=["Clear communication"],
        improvements=[
            Improvement("Technical - Problem Solving", "Low score", "Practice", Priority.HIGH),
            Improvement("Examples", "Few examples", "Use STAR", Priority.LOW),
        ],
        resume_alignment=alignment,
        question_breakdown=[],
        summary="Overall Performance: D (66.9/100)",
    )


class FakeSpeechClient:
    def __init__(self):
        self.spoken = []
        self.audio = SimpleNamespace(
            speech=SimpleNamespace(create=self._speak),
            transcriptions=SimpleNamespace(create=self._transcribe),
        )

    def _speak(self, *, model, voice, input):
        self.spoken.append(input)
        return SimpleNamespace(content=b"mp3")

    def _transcribe(self, *, model, file):
        return SimpleNamespace(text="  I would use a hash map.  ")


def test_available_modes_and_factory():
    assert get_available_modes() == ["text", "voice"]
    assert isinstance(create_mode("text"), TextInteractionMode)
    assert isinstance(create_mode(InteractionModeType.VOICE), VoiceInteractionMode)
    with pytest.raises(InteractionModeError, match="Unsupported interaction mode: video"):
        create_mode("video")


def test_text_question_with_resume_context():
    q = make_question()
    q.resume_context = ResumeContext("experience", "Built REST APIs", "Acme")
    out = TextInteractionMode().format_question(q)
    assert out == (
        "[🔧 Technical] Explain how a hash map handles collisions.\n\n"
        '📄 Context from your resume: "Built REST APIs"'
    )
    behavioral = make_question(qtype=QuestionType.BEHAVIORAL, text="Tell me about a conflict.")
    assert TextInteractionMode().format_question(behavioral) == "[💬 Behavioral] Tell me about a conflict."


def test_text_actions():
    mode = TextInteractionMode()
    follow = InterviewAction.follow_up(make_question(text="Can you elaborate?"))
    assert mode.format_interview_action(follow) == "\n🔍 Follow-up: Can you elaborate?"
    assert mode.format_interview_action(InterviewAction.redirect("Stay on topic")) == "⚠️  Stay on topic"
    complete = mode.format_interview_action(InterviewAction.complete(_report()))
    assert "INTERVIEW FEEDBACK REPORT" in complete


def test_text_parse_sanitizes_and_clips():
    mode = TextInteractionMode(max_response_chars=12)
    ts = datetime(2024, 1, 1)
    resp = mode.parse_user_input("q-1", "  hello\x00 world and more  ", ts)
    assert resp.text == "hello world "
    assert resp.word_count == 2
    assert resp.timestamp == ts
    assert resp.question_id == "q-1"


def test_feedback_report_sections():
    text = format_feedback(_report())
    assert text.startswith("═" * 55)
    assert "Grade: D" in text
    assert "Score: 66.9/100" in text
    assert "Overall Grade: B (30.5/40)" in text
    assert "Overall Grade: D (24/40)" in text
    assert "  • Articulation: 7.5/10" in text
    assert "  ✓ Clear communication" in text
    assert "High Priority:" in text
    assert "Medium Priority:" not in text
    assert "  🟢 Examples" in text
    assert "RESUME ALIGNMENT" not in text
    assert text.rstrip().endswith("═" * 55)


def test_feedback_report_with_alignment():
    alignment = AlignmentFeedback(
        alignment_score=65,
        matched_skills=[Skill("Python", "technical")],
        missing_skills=[Skill("Testing", "technical")],
        suggestions=["Add metrics"],
    )
    text = format_feedback(_report(alignment))
    assert "Alignment Score: 65.0/100" in text
    assert "  ✓ Python" in text
    assert "  ○ Testing" in text
    assert "  • Add metrics" in text


def test_voice_phrasing():
    mode = VoiceInteractionMode()
    q = make_question()
    assert mode.format_question(q) == (
        "Here's a technical question: Explain how a hash map handles collisions."
    )
    q.resume_context = ResumeContext("skills", "Redis", "caching")
    assert mode.format_question(q).endswith("I noticed on your resume you mentioned Redis.")
    follow = mode.format_interview_action(InterviewAction.follow_up(make_question(text="Why?")))
    assert follow == "Let me follow up on that. Why?"
    done = mode.format_interview_action(InterviewAction.complete(_report()))
    assert done.startswith("Great! We've completed the interview.")


def test_voice_strips_glyphs_and_rules():
    mode = VoiceInteractionMode()
    assert mode.format_conversational_response("📊 Score ══\n✓ ok") == " Score \n ok"


def test_voice_without_speech_service():
    mode = VoiceInteractionMode()
    assert mode.get_mode_type() == InteractionModeType.VOICE
    assert mode.speak("hello") == b""
    with pytest.raises(InteractionModeError, match="Speech-to-text is not configured"):
        mode.transcribe(b"RIFF")


def test_voice_speak_and_transcribe():
    client = FakeSpeechClient()
    mode = VoiceInteractionMode(SpeechService(client))
    assert mode.speak("✨ Nice work") == b"mp3"
    assert client.spoken == ["Nice work"]
    assert mode.transcribe(b"RIFF") == "I would use a hash map."

    muted = VoiceInteractionMode(SpeechService(client), text_to_speech_enabled=False)
    assert muted.speak("hello") == b""
    assert len(client.spoken) == 1


def test_voice_parses_transcripts_like_text():
    resp = VoiceInteractionMode().parse_user_input("q-2", " spoken answer ")
    assert resp.text == "spoken answer"
    assert resp.word_count == 2
