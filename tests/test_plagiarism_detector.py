import pytest

from app.schemas.plagiarism_schemas import InternetMatch, InternetSearchResult, PlagiarismVerdict
from app.utils import plagiarism_detector
from app.utils.llm_client import LLMConfigurationError, LLMProviderError
from app.utils.plagiarism_detector import detect_plagiarism


def _search_result(matches=(), searched=True):
    matches = list(matches)
    return InternetSearchResult(
        found=bool(matches),
        matches=matches,
        totalResults=len(matches),
        searchQuery="q",
        searched=searched,
    )


@pytest.fixture
def no_internet(monkeypatch):
    async def fake_search(code, language=None):
        return _search_result()

    monkeypatch.setattr(plagiarism_detector, "search_internet_for_code", fake_search)


@pytest.fixture
def ai_calls(monkeypatch):
    calls = []

    async def fail_if_called(*args, **kwargs):
        calls.append((args, kwargs))
        raise AssertionError("AI should not be called")

    monkeypatch.setattr(plagiarism_detector, "analyze_with_ai", fail_if_called)
    return calls


@pytest.mark.asyncio
async def test_empty_corpus_short_circuits_without_ai(no_internet, ai_calls):
    verdict = await detect_plagiarism("def a(): return 1", [])

    assert verdict.status == "PASS"
    assert verdict.similarity == 0
    assert verdict.aiPowered is False
    assert verdict.internetSearched is True
    assert ai_calls == []


@pytest.mark.asyncio
async def test_ai_timeout_falls_back_to_basic_detection(monkeypatch, no_internet):
    async def timeout(*args, **kwargs):
        raise LLMProviderError("OpenRouter API request timeout")

    monkeypatch.setattr(plagiarism_detector, "analyze_with_ai", timeout)

    verdict = await detect_plagiarism(
        "return a + b",
        [{"id": "1", "title": "Adder", "code": "RETURN a + b", "author": "bob"}],
    )

    assert verdict.aiPowered is False
    assert "basic detection" in verdict.message
    assert verdict.status == "FAIL"
    assert verdict.similarity == 1.0
    assert verdict.matches[0].snippetId == "1"


@pytest.mark.asyncio
async def test_missing_llm_key_is_absorbed_by_fallback(monkeypatch, no_internet):
    async def not_configured(*args, **kwargs):
        raise LLMConfigurationError("OPENROUTER_API_KEY is not configured")

    monkeypatch.setattr(plagiarism_detector, "analyze_with_ai", not_configured)

    verdict = await detect_plagiarism("select 1", [{"id": "1", "title": "t", "code": "drop table x", "author": "a"}])

    assert verdict.status == "PASS"
    assert verdict.similarity == 0.0
    assert verdict.aiPowered is False


@pytest.mark.asyncio
async def test_fallback_ignores_internet_matches_but_reports_search(monkeypatch):
    match = InternetMatch(
        url="https://github.com/x", title="x", snippet="return a + b", relevanceScore=0.9, source="github"
    )

    async def fake_search(code, language=None):
        return _search_result([match])

    async def broken(*args, **kwargs):
        raise ValueError("unparseable")

    monkeypatch.setattr(plagiarism_detector, "search_internet_for_code", fake_search)
    monkeypatch.setattr(plagiarism_detector, "analyze_with_ai", broken)

    verdict = await detect_plagiarism("return a + b", [])

    assert verdict.similarity == 0.0
    assert verdict.status == "PASS"
    assert verdict.aiPowered is False
    assert verdict.internetSearched is True


@pytest.mark.asyncio
async def test_ai_path_receives_local_then_internet_corpus(monkeypatch):
    match = InternetMatch(
        url="https://github.com/x", title="x", snippet="code", relevanceScore=0.9, source="github"
    )
    seen = {}

    async def fake_search(code, language=None):
        seen["language"] = language
        return _search_result([match])

    async def fake_ai(code, corpus, language=None, internet_searched=False):
        seen["corpus"] = [c.id for c in corpus]
        seen["internet_searched"] = internet_searched
        return PlagiarismVerdict(
            isPlagiarized=False,
            similarity=0.1,
            status="PASS",
            message="ok",
            matches=[],
            aiPowered=True,
            internetSearched=internet_searched,
        )

    monkeypatch.setattr(plagiarism_detector, "search_internet_for_code", fake_search)
    monkeypatch.setattr(plagiarism_detector, "analyze_with_ai", fake_ai)

    verdict = await detect_plagiarism("code", [{"id": "db-1", "title": "t", "code": "c", "author": "a"}], "go")

    assert verdict.aiPowered is True
    assert seen == {"language": "go", "corpus": ["db-1", "internet-0"], "internet_searched": True}


@pytest.mark.asyncio
async def test_non_string_code_is_a_contract_error(no_internet):
    with pytest.raises(TypeError):
        await detect_plagiarism(None, [])


@pytest.mark.asyncio
async def test_integer_snippet_ids_are_accepted(monkeypatch, no_internet):
    async def unavailable(*args, **kwargs):
        raise LLMProviderError("OpenRouter API error: HTTP 503")

    monkeypatch.setattr(plagiarism_detector, "analyze_with_ai", unavailable)

    verdict = await detect_plagiarism(
        "return a + b",
        [{"id": 7, "title": "Adder", "code": "return a + b", "author": "bob"}],
    )

    assert verdict.status == "FAIL"
    assert verdict.matches[0].snippetId == "7"
