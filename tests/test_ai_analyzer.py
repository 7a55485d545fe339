import json

import pytest

from app.schemas.plagiarism_schemas import CandidateSnippet
from app.utils import ai_analyzer
from app.utils.ai_analyzer import (
    AIResponseParseError,
    analyze_with_ai,
    build_ai_verdict,
    build_messages,
    parse_ai_response,
    parse_direct,
    parse_fenced_block,
    parse_first_object,
)


def _corpus():
    return [
        CandidateSnippet(id="db-1", title="Quick sort", code="def qs(a): ...", author="alice", provenance="database"),
        CandidateSnippet(
            id="internet-0",
            title="SO answer",
            code="def quicksort(arr): ...",
            author="stackoverflow",
            provenance="internet",
            sourceUrl="https://stackoverflow.com/q/1",
        ),
    ]


# ---- parser strategies ----

def test_direct_parser_accepts_plain_json():
    assert parse_direct('{"overallSimilarity": 0.4}') == {"overallSimilarity": 0.4}


def test_direct_parser_rejects_non_object_json():
    assert parse_direct("[1, 2]") is None


def test_fenced_parser_extracts_json_block():
    text = 'Here you go:\n```json\n{"overallSimilarity": 0.8}\n```\nThanks'
    assert parse_direct(text) is None
    assert parse_fenced_block(text) == {"overallSimilarity": 0.8}


def test_object_parser_extracts_embedded_object():
    text = 'Result: {"overallSimilarity": 0.1, "matches": []} -- end'
    assert parse_fenced_block(text) is None
    assert parse_first_object(text) == {"overallSimilarity": 0.1, "matches": []}


def test_parse_ai_response_tries_strategies_in_order():
    assert parse_ai_response('prefix {"status": "PASS"} suffix') == {"status": "PASS"}


def test_parse_ai_response_raises_when_nothing_parses():
    with pytest.raises(AIResponseParseError):
        parse_ai_response("I could not decide, sorry.")


# ---- prompt ----

def test_messages_embed_code_and_every_candidate():
    messages = build_messages("def mine(): pass", _corpus(), "python")

    assert [m["role"] for m in messages] == ["system", "user"]
    assert "PASS: similarity < 0.5" in messages[0]["content"]
    assert "FAIL: similarity > 0.7" in messages[0]["content"]
    user = messages[1]["content"]
    assert "def mine(): pass" in user
    for token in ("db-1", "Quick sort", "alice", "internet-0", "stackoverflow", "https://stackoverflow.com/q/1"):
        assert token in user
    assert "```python" in user


# ---- verdict mapping ----

def test_matches_are_resolved_against_corpus():
    ai_result = {
        "overallSimilarity": 0.82,
        "status": "FAIL",
        "analysis": "Same partition scheme.",
        "matches": [
            {"snippetId": "internet-0", "title": "Hallucinated", "similarity": 0.9, "explanation": "same"},
            {"snippetId": "ghost", "title": "Not real", "similarity": 0.99, "explanation": "?"},
            {"snippetId": "db-1", "similarity": "0.6", "explanation": "similar loop"},
        ],
    }

    verdict = build_ai_verdict(ai_result, _corpus(), internet_searched=True)

    assert verdict.status == "FAIL"
    assert verdict.isPlagiarized is True
    assert verdict.aiPowered is True
    assert verdict.internetSearched is True
    assert verdict.analysis == "Same partition scheme."
    assert [m.snippetId for m in verdict.matches] == ["internet-0", "db-1"]
    first = verdict.matches[0]
    assert first.title == "SO answer"
    assert first.author == "stackoverflow"
    assert first.provenance == "internet"
    assert first.sourceUrl == "https://stackoverflow.com/q/1"
    assert verdict.matches[1].similarity == pytest.approx(0.6)


def test_status_recomputed_from_similarity_when_missing():
    verdict = build_ai_verdict({"overallSimilarity": 0.55}, _corpus(), internet_searched=False)

    assert verdict.status == "REVIEW"
    assert verdict.isPlagiarized is True
    assert verdict.matches == []


def test_bands_override_model_status():
    verdict = build_ai_verdict({"overallSimilarity": 0.2, "status": "FAIL"}, _corpus(), internet_searched=False)

    assert verdict.status == "PASS"
    assert verdict.isPlagiarized is False


def test_ai_matches_capped_at_five():
    corpus = [
        CandidateSnippet(id=f"db-{i}", title=f"t{i}", code="x", author="a", provenance="database")
        for i in range(8)
    ]
    ai_result = {
        "overallSimilarity": 0.9,
        "matches": [{"snippetId": f"db-{i}", "similarity": 0.9} for i in range(8)],
    }

    verdict = build_ai_verdict(ai_result, corpus, internet_searched=False)

    assert [m.snippetId for m in verdict.matches] == ["db-0", "db-1", "db-2", "db-3", "db-4"]


@pytest.mark.asyncio
async def test_analyze_with_ai_uses_low_temperature_json_call(monkeypatch):
    captured = {}

    async def fake_call(messages, **kwargs):
        captured["messages"] = messages
        captured.update(kwargs)
        return "```json\n" + json.dumps({"overallSimilarity": 0.1, "analysis": "original"}) + "\n```"

    monkeypatch.setattr(ai_analyzer, "acall_openrouter", fake_call)

    verdict = await analyze_with_ai("def mine(): pass", _corpus(), "python", internet_searched=True)

    assert verdict.status == "PASS"
    assert verdict.analysis == "original"
    assert captured["temperature"] <= 0.3
    assert captured["max_tokens"] == 4000
    assert captured["response_format"] == "json"
