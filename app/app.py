"""
UI layer
Purpose: Streamlit-only glue. Renders widgets/tabs, collects user inputs, and delegates
all work to `InterviewPrep`. Keeps UI concerns (layout/state widgets) separate from
interview logic so that logic can be unit tested without Streamlit.
"""

import hashlib
from dataclasses import replace

import streamlit as st
from audio_recorder_streamlit import audio_recorder

from interview_core import InterviewPrep, load_settings
from interview_core.errors import InterviewSystemError
from interview_core.logging_config import setup_logging
from interview_core.models import ActionType, InterviewAction, SessionStatus
from interview_core.presentation import create_mode
from interview_core.services.speech import SpeechService, autoplay_html

# ---------------------------
# Page config
# ---------------------------
st.set_page_config(
    page_title="Mock Interview Coach",
    page_icon="🎯",
    layout="wide",
    initial_sidebar_state="expanded",
)


@st.cache_resource
def get_settings():
    settings = load_settings()
    setup_logging(settings.log_level, json_format=settings.log_json)
    return settings


SETTINGS = get_settings()

# ---------------------------
# Session state init
# ---------------------------
st_session = st.session_state
st_session.setdefault("prep", None)
st_session.setdefault("speech", None)
st_session.setdefault("session_id", None)
st_session.setdefault("messages", [])
st_session.setdefault("report_text", "")
st_session.setdefault("report", None)
st_session.setdefault("voice_mode", False)
st_session.setdefault("speak_replies", False)
st_session.setdefault("last_voice_sig", None)
st_session.setdefault("tts_text_queue", [])
st_session.setdefault("tts_audio_queue", [])
st_session.setdefault("resume_upload_key", 0)

if st_session.prep is None:
    st_session.prep = InterviewPrep(SETTINGS)
if st_session.speech is None:
    st_session.speech = SpeechService.from_settings(SETTINGS)


# ---------------------------
# Helpers
# ---------------------------
def get_prep() -> InterviewPrep:
    """Return the per-browser-session facade."""
    return st_session.prep


def current_session():
    sid = st_session.session_id
    if not sid:
        return None
    prep = get_prep()
    if not prep.store.exists(sid):
        return None
    return prep.get_session(sid)


def active_mode():
    """Presentation for the current mode; voice falls back to text without a key."""
    if st_session.voice_mode and st_session.speech.available:
        return create_mode(
            "voice",
            speech=st_session.speech,
            max_response_chars=SETTINGS.max_response_chars,
        )
    return create_mode("text", max_response_chars=SETTINGS.max_response_chars)


def push_assistant(text: str) -> None:
    st_session.messages.append({"role": "assistant", "content": text})
    if st_session.speak_replies and text.strip():
        st_session.tts_text_queue.append(text)


def handle_action(action: InterviewAction) -> None:
    """Append the controller's decision to the transcript."""
    mode = active_mode()
    if action.type == ActionType.COMPLETE:
        st_session.report = action.feedback
        st_session.report_text = mode.format_feedback(action.feedback)
        push_assistant(
            "Great! We've completed the interview. Open the **Feedback** tab for your report."
        )
        return
    if action.type in (ActionType.NEXT_QUESTION, ActionType.FOLLOW_UP):
        prefix = get_prep().get_acknowledgment(st_session.session_id)
        push_assistant(f"{prefix} {mode.format_interview_action(action).strip()}")
        return
    push_assistant(mode.format_interview_action(action))


def reset_session():
    """Drop the current interview and clear the transcript."""
    sid = st_session.session_id
    if sid and get_prep().store.exists(sid):
        get_prep().cleanup_session(sid)
    st_session.session_id = None
    st_session.messages = []
    st_session.report = None
    st_session.report_text = ""
    st_session.last_voice_sig = None
    st_session.tts_text_queue = []
    st_session.tts_audio_queue = []
    st_session.resume_upload_key += 1


def begin(session_id: str) -> None:
    """Start the interview for an already created session."""
    prep = get_prep()
    st_session.session_id = session_id
    st_session.messages = []
    st_session.report = None
    st_session.report_text = ""
    first = prep.start_interview(session_id)
    minutes = round(prep.get_expected_duration(session_id) / 60)
    push_assistant(
        f"Welcome! This interview should take about {minutes} minutes.\n\n"
        + active_mode().format_question(first)
    )


def format_duration(seconds: float) -> str:
    """Format seconds as Hh Mm Ss, skipping hours if zero."""
    seconds = int(max(0, seconds))
    h = seconds // 3600
    m = (seconds % 3600) // 60
    s = seconds % 60
    if h:
        return f"{h}h {m:02d}m {s:02d}s"
    return f"{m}m {s:02d}s"


def render_scores(report) -> None:
    comm = report.scores.communication
    tech = report.scores.technical_fit
    overall = report.scores.overall
    cols = st.columns(3)
    with cols[0]:
        st.metric("Overall", f"{overall.grade.value} · {overall.weighted_total:.1f}")
        st.progress(min(1.0, overall.weighted_total / 100))
    with cols[1]:
        st.metric("Communication", f"{comm.grade.value} · {comm.total:g}/40")
        st.progress(min(1.0, comm.total / 40))
    with cols[2]:
        st.metric("Technical fit", f"{tech.grade.value} · {tech.total:g}/40")
        st.progress(min(1.0, tech.total / 40))


# ---------------------------
# SIDEBAR: role, level, résumé
# ---------------------------
prep = get_prep()
roles = prep.get_available_roles()
levels = prep.get_available_experience_levels()

with st.sidebar:
    st.markdown("# Settings")
    session = current_session()
    locked = session is not None and session.status == SessionStatus.IN_PROGRESS

    role_name = st.selectbox("Target role", [r.name for r in roles], disabled=locked)
    level_name = st.selectbox(
        "Experience level",
        [lv.level.value for lv in levels],
        format_func=lambda v: v.capitalize(),
        disabled=locked,
    )

    st.markdown("## Resume (optional)")
    resume_text = st.text_area(
        "Paste your resume",
        height=160,
        key=f"resume_text_{st_session.resume_upload_key}",
        disabled=locked,
    )
    uploaded_pdf = st.file_uploader(
        "…or upload a PDF",
        type=["pdf"],
        key=f"resume_pdf_{st_session.resume_upload_key}",
        disabled=locked,
    )

    if st.button("Start interview", type="primary", disabled=locked):
        reset_session()
        mode = "voice" if st_session.voice_mode else "text"
        try:
            sid = prep.create_session(role_name, level_name, mode)
            if uploaded_pdf is not None:
                analysis = prep.upload_resume_pdf(sid, uploaded_pdf)
                st.toast(f"Resume alignment: {analysis.alignment_score.overall}%", icon="📄")
            elif resume_text.strip():
                analysis = prep.upload_resume(sid, resume_text)
                st.toast(f"Resume alignment: {analysis.alignment_score.overall}%", icon="📄")
            begin(sid)
        except InterviewSystemError as e:
            st.error(e.message)
        st.rerun()

    if st.button("Reset"):
        reset_session()
        st.rerun()

    if not st_session.speech.available:
        st.caption("Voice mode needs OPENAI_API_KEY in your environment or .env file.")


# ---------------------------
# Tabs
# ---------------------------
about_tab, practice_tab, feedback_tab = st.tabs(["About", "Practice", "Feedback"])

with about_tab:
    st.subheader("About this app")
    st.markdown(
        """
        Practice a structured mock interview for a chosen role and experience level.

        - Pick one of the predefined roles and a level in the sidebar.
        - Optionally paste or upload your resume so some questions refer to it.
        - Answer each question; vague or short answers get a follow-up.
        - End early at any time after your first answer.
        - Read a graded report on communication and technical fit, then keep
          practicing with another round or a drill on your weakest topic.
        """
    )

with practice_tab:
    session = current_session()
    if session is None:
        st.info("Choose a role and level in the sidebar, then press **Start interview**.")
    else:
        st.caption(
            f"Role: **{session.role.name}** · Level: **{session.experience_level.level.value}**"
            + (f" · Drill: **{session.drill_topic}**" if session.drill_topic else "")
        )
        progress = prep.get_progress(session.id)
        st.progress(
            min(1.0, progress.percent_complete / 100),
            text=f"{progress.answered_questions}/{progress.total_questions} answered",
        )
        if progress.estimated_time_remaining:
            st.caption(f"About {format_duration(progress.estimated_time_remaining)} left")

        vcol1, vcol2 = st.columns([1, 1])
        with vcol1:
            st_session.voice_mode = st.toggle(
                "🎙️ Voice mode",
                value=st_session.voice_mode,
                disabled=not st_session.speech.available,
            )
        with vcol2:
            st_session.speak_replies = st.toggle(
                "🔊 Speak interviewer",
                value=st_session.speak_replies,
                disabled=not st_session.speech.available,
            )
        if session.status == SessionStatus.IN_PROGRESS:
            prep.set_interaction_mode(session.id, "voice" if st_session.voice_mode else "text")

        if st_session.tts_audio_queue:
            st.html(autoplay_html(st_session.tts_audio_queue.pop(0)))

        if st_session.speak_replies and st_session.tts_text_queue:
            next_text = st_session.tts_text_queue.pop(0)
            with st.spinner("Preparing audio…"):
                try:
                    reader = create_mode("voice", speech=st_session.speech)
                    audio_bytes = reader.speak(next_text)
                    if audio_bytes:
                        st_session.tts_audio_queue.append(audio_bytes)
                        st.rerun()
                except InterviewSystemError as e:
                    st.toast(f"TTS failed: {e.message}", icon="⚠️")

        transcript = st.container(height=500, border=True)
        with transcript:
            for msg in st_session.messages:
                with st.chat_message(msg["role"]):
                    st.markdown(msg["content"])

        if session.status == SessionStatus.IN_PROGRESS:
            user_text = None
            if st_session.voice_mode:
                st.markdown("**Note on voice input:** it does not work on short inputs.")
                wav_bytes = audio_recorder(
                    pause_threshold=2,
                    sample_rate=16_000,
                    text="Press to record",
                    icon_size="2x",
                )
                if wav_bytes:
                    sig = hashlib.sha1(wav_bytes).hexdigest()
                    if sig != st_session.last_voice_sig:
                        try:
                            with st.spinner("Transcribing…"):
                                user_text = active_mode().transcribe(wav_bytes)
                        except InterviewSystemError as e:
                            st.toast(f"Transcription failed: {e.message}", icon="⚠️")
                        if user_text:
                            st_session.last_voice_sig = sig
            else:
                raw = st.chat_input("Type your answer…")
                if raw is not None and raw.strip():
                    user_text = raw.strip()
                elif raw is not None:
                    st.toast("Please enter a non-empty answer.", icon="⚠️")

            if user_text:
                st_session.messages.append({"role": "user", "content": user_text})
                try:
                    handle_action(prep.submit_response(session.id, user_text))
                except InterviewSystemError as e:
                    st.toast(e.message, icon="⚠️")
                st.rerun()

            if st.button("End interview early"):
                handle_action(prep.end_interview_early(session.id))
                st.rerun()

with feedback_tab:
    st.subheader("Feedback")
    session = current_session()
    report = st_session.report
    if report is None or session is None:
        st.info("Finish (or end) an interview to see your report here.")
    else:
        render_scores(report)
        st.code(st_session.report_text, language=None)

        if report.question_breakdown:
            st.markdown("### Question by question")
            for item in report.question_breakdown:
                label = ("↳ " if item.question.is_follow_up else "") + item.question.text
                with st.expander(label):
                    st.markdown(f"**Your answer:** {item.response.text}")
                    st.markdown(item.feedback)

        st.markdown("### Keep practicing")
        prompt = prep.get_continuation_options(session.id)
        st.caption(prompt.message)
        mode = "voice" if st_session.voice_mode else "text"
        for option in prompt.options:
            opts = option.continuation_options
            if opts.role is None:
                # Different role: reuse the sidebar selection
                opts = replace(
                    opts,
                    role=prep.catalog.get_role(role_name),
                    experience_level=prep.catalog.get_level(level_name),
                )
            if st.button(option.label, key=option.id, help=option.description):
                try:
                    new_sid = prep.continue_with_new_session(opts, mode)
                    old_sid = session.id
                    begin(new_sid)
                    prep.cleanup_session(old_sid)
                except InterviewSystemError as e:
                    st.error(e.message)
                st.rerun()
