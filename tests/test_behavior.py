from interview_core.models import BehaviorType, UserInteraction
from interview_core.services.behavior import (
    BehaviorClassifier,
    CommunicationAdapter,
    extract_keywords,
)

from conftest import T0, make_question, make_response

TWENTY_WORDS = (
    "- I profiled the service\n- I added an index on the orders table\n"
    "- latency dropped from two seconds to two hundred ms"
)
SIXTY_WORDS = " ".join(["We reviewed the design together and agreed on next steps."] * 6)


def interaction(content: str) -> UserInteraction:
    return UserInteraction(timestamp=T0, type="response", content=content)


def test_empty_history_is_standard():
    assert BehaviorClassifier().classify_behavior([], []) == BehaviorType.STANDARD


def test_confusion_takes_priority():
    classifier = BehaviorClassifier()
    responses = [
        make_response("q-1", "I'm not sure what you mean by that."),
        make_response("q-2", "Can you explain the question again?"),
        make_response("q-3", SIXTY_WORDS),
    ]
    assert classifier.classify_behavior(responses, []) == BehaviorType.CONFUSED


def test_short_question_burst_reads_as_confusion():
    classifier = BehaviorClassifier()
    assert classifier.detect_confusion(make_response("q-1", "What? Why? How?"))
    assert not classifier.detect_confusion(make_response("q-1", "I used Redis."))


def test_efficient_needs_structure_or_pace():
    classifier = BehaviorClassifier()
    bulleted = make_response("q-1", TWENTY_WORDS, response_time=600)
    plain = "I profiled the service and added an index on the orders table so latency dropped a lot today"
    assert classifier.detect_efficiency(bulleted)
    assert classifier.detect_efficiency(make_response("q-1", plain, response_time=10))
    assert not classifier.detect_efficiency(make_response("q-1", plain, response_time=100))
    assert classifier.detect_efficiency(make_response("q-1", plain, response_time=0))
    assert not classifier.detect_efficiency(make_response("q-1", "Too short."))


def test_all_efficient_answers_classify_as_efficient():
    responses = [make_response(f"q-{i}", TWENTY_WORDS) for i in range(4)]
    assert BehaviorClassifier().classify_behavior(responses, []) == BehaviorType.EFFICIENT


def test_verbose_answers_classify_as_chatty():
    long_text = " ".join(f"word{i}" for i in range(210))
    responses = [make_response("q-1", long_text), make_response("q-2", long_text)]
    classifier = BehaviorClassifier()
    assert classifier.detect_verbosity(responses[0])
    assert classifier.classify_behavior(responses, []) == BehaviorType.CHATTY


def test_repetitive_long_answer_is_verbose():
    repetitive = " ".join(["the same thing again"] * 30)
    assert BehaviorClassifier().detect_verbosity(make_response("q-1", repetitive))


def test_gaming_phrases_mark_edge_case():
    responses = [make_response("q-1", SIXTY_WORDS)]
    interactions = [interaction("Just give me the answers please")]
    assert BehaviorClassifier().classify_behavior(responses, interactions) == BehaviorType.EDGE_CASE


def test_off_topic_detection():
    classifier = BehaviorClassifier()
    question = make_question(text="Describe your experience designing distributed databases.")
    off = make_response(question.id, "I enjoy baking bread on weekends with family.")
    on = make_response(
        question.id, "My experience designing distributed databases covers sharding and replication."
    )
    assert classifier.detect_off_topic(off, question)
    assert not classifier.detect_off_topic(on, question)


def test_extract_keywords_drops_stop_words_and_short_tokens():
    assert extract_keywords("What is the CAP theorem, and why does it matter?") == [
        "what",
        "theorem",
        "matter",
    ]


def test_adapter_styles():
    adapter = CommunicationAdapter()
    efficient = adapter.adapt_response("one\n\ntwo\nthree\nfour", BehaviorType.EFFICIENT)
    assert efficient.content == "one\ntwo\nthree"
    assert efficient.style == BehaviorType.EFFICIENT

    confused = adapter.adapt_response("Next question.", BehaviorType.CONFUSED)
    assert confused.content.startswith("Let me help clarify: Next question.")
    assert "Added clarifying guidance" in confused.adjustments

    standard = adapter.adapt_response("Next question.", BehaviorType.STANDARD)
    assert standard.content == "Next question."
    assert standard.adjustments == []


def test_acknowledgments_and_transitions():
    adapter = CommunicationAdapter()
    assert adapter.get_acknowledgment(BehaviorType.EFFICIENT) == "Great, concise answer."
    assert adapter.get_transition(BehaviorType.STANDARD) == "Here's your next question:"
