import json

import pytest

from app.services.output_validator import validate_output

WRITING = {"corrected_text": "Hi.", "key_issues": [], "rewrite_suggestions": [], "quick_tips": []}


def _vocab_item(word: str, **extra):
    item = {"word": word, "definition": "d", "synonyms": [], "examples": [], "collocations": []}
    item.update(extra)
    return item


@pytest.mark.parametrize("kind", ["writing_feedback", "vocabulary", "sentences_feedback", "resume_score"])
def test_non_json_fails_with_raw_text(kind):
    reply = validate_output(kind, "not json")
    assert reply.ok is False
    assert reply.raw == "not json"


def test_fenced_json_is_not_accepted():
    raw = "```json\n" + json.dumps(WRITING) + "\n```"
    assert validate_output("writing_feedback", raw).ok is False


def test_writing_feedback_object_is_returned_as_parsed():
    raw = json.dumps({**WRITING, "extra": 1})
    reply = validate_output("writing_feedback", raw)
    assert reply.ok is True
    assert list(reply.value) == ["corrected_text", "key_issues", "rewrite_suggestions", "quick_tips", "extra"]


def test_object_endpoint_rejects_array():
    reply = validate_output("writing_feedback", "[]")
    assert reply.ok is False
    assert reply.error == "Model did not return a JSON object."


def test_object_endpoint_rejects_missing_keys():
    reply = validate_output("writing_feedback", json.dumps({"corrected_text": "Hi."}))
    assert reply.ok is False
    assert "key_issues" in reply.error


def test_vocabulary_requires_array():
    reply = validate_output("vocabulary", json.dumps(_vocab_item("run")))
    assert reply.ok is False
    assert reply.error == "Model did not return a valid JSON array."


def test_vocabulary_injects_missing_translations():
    raw = json.dumps([_vocab_item("run"), _vocab_item("set", translations={"es": "poner"})])
    reply = validate_output("vocabulary", raw, expected_count=2)
    assert reply.ok is True
    assert reply.value[0]["translations"] == {}
    assert reply.value[1]["translations"] == {"es": "poner"}


def test_vocabulary_count_mismatch_fails():
    reply = validate_output("vocabulary", json.dumps([_vocab_item("run")]), expected_count=2)
    assert reply.ok is False


def test_vocabulary_rejects_non_object_items():
    assert validate_output("vocabulary", '["run"]').ok is False


def test_resume_score_ranges_are_checked():
    body = {
        "summary": "ok",
        "score_total": 140,
        "breakdown": {"grammar": 20, "clarity": 20, "vocabulary": 20, "improvement": 20},
        "next_steps": [],
    }
    assert validate_output("resume_score", json.dumps(body)).ok is False
    body["score_total"] = 80
    assert validate_output("resume_score", json.dumps(body)).ok is True


def test_sentences_feedback_shape():
    correction = {"original": "a", "corrected": "b", "issues": [], "tips": []}
    body = {"results": [{"word": "run", "sentences": [correction, correction], "overall_tips": []}]}
    assert validate_output("sentences_feedback", json.dumps(body)).ok is True
    body["results"][0]["sentences"] = [correction]
    assert validate_output("sentences_feedback", json.dumps(body)).ok is False


@pytest.mark.parametrize("raw,ok", [("  Hello there!  ", True), ("   ", False), ("", False)])
def test_conversation_requires_non_empty_text(raw, ok):
    reply = validate_output("conversation", raw)
    assert reply.ok is ok
    if ok:
        assert reply.value == "Hello there!"
