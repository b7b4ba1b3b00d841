"""Tests for fusion prompt construction and response validation."""

from __future__ import annotations

import json

import pytest

from news_fusion.analyzers.fusion import FusionRequester, apply_tag_policy, build_report
from news_fusion.config import FusionConfig
from news_fusion.core.errors import GenerationError, SchemaError
from news_fusion.core.types import Article, MatchedPair
from news_fusion.core.vocabulary import DEFAULT_TAGS, Vocabulary, load_vocabulary
from news_fusion.llm.json_parser import parse_json_response
from news_fusion.llm.prompts import build_fusion_prompt


VOCAB = Vocabulary.from_terms(["Politics", "Economy", "Global"])


class _StubProvider:
    """Records prompts and replays a canned completion or error."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def generate(self, system_prompt, user_prompt, context=None):
        self.calls.append({"system": system_prompt, "user": user_prompt, "context": context})
        if self.error is not None:
            raise self.error
        return self.response


def _pair(primary_paragraphs=None, secondary_paragraphs=None) -> MatchedPair:
    return MatchedPair(
        primary=Article(
            title="Summit ends in agreement",
            url="https://edition.cnn.com/summit",
            paragraphs=primary_paragraphs or ["Leaders met.", "They agreed.", "Markets rose."],
        ),
        secondary=Article(
            title="World leaders reach summit deal",
            url="https://www.rt.com/news/summit/",
            paragraphs=secondary_paragraphs or ["A deal was reached.", "Details follow."],
        ),
        score=0.2,
    )


def _doc(**overrides) -> str:
    doc = {
        "title": "Leaders agree at summit",
        "summary": "Both outlets report a deal.",
        "tags": ["Politics", "Global"],
        "content": ["First paragraph.", "Second paragraph."],
    }
    doc.update(overrides)
    return json.dumps(doc)


def test_content_string_becomes_single_element_list():
    report = build_report(_doc(content="single para"), _pair(), VOCAB)
    assert report.content == ["single para"]


def test_content_list_passes_through_unchanged():
    report = build_report(_doc(content=["a", "b"]), _pair(), VOCAB)
    assert report.content == ["a", "b"]


def test_report_keeps_source_urls_verbatim():
    report = build_report(_doc(), _pair(), VOCAB)
    assert report.url_primary == "https://edition.cnn.com/summit"
    assert report.url_secondary == "https://www.rt.com/news/summit/"


@pytest.mark.parametrize(
    "payload",
    [
        "",
        "Here is your report: {\"title\": \"x\"}",
        "{not json}",
        "[1, 2, 3]",
    ],
)
def test_unparseable_or_non_object_payload_is_schema_error(payload):
    with pytest.raises(SchemaError):
        build_report(payload, _pair(), VOCAB)


def test_missing_field_is_schema_error():
    doc = json.loads(_doc())
    del doc["summary"]
    with pytest.raises(SchemaError, match="summary"):
        build_report(json.dumps(doc), _pair(), VOCAB)


@pytest.mark.parametrize(
    "overrides",
    [
        {"title": 42},
        {"summary": ["not", "a", "string"]},
        {"tags": "Politics"},
        {"content": {"para": "x"}},
        {"content": ["ok", 3]},
    ],
)
def test_mistyped_fields_are_schema_errors(overrides):
    with pytest.raises(SchemaError):
        build_report(_doc(**overrides), _pair(), VOCAB)


@pytest.mark.parametrize(
    "payload",
    [
        '{"title": "Bad \\ud83d", "summary": "s", "tags": [], "content": "c"}',
        '{"title": "t", "summary": "s", "tags": ["\\udc00"], "content": "c"}',
        '{"title": "t", "summary": "s", "tags": [], "content": ["ok", "\\ud800 half"]}',
    ],
)
def test_lone_surrogates_are_schema_errors(payload):
    with pytest.raises(SchemaError, match="UTF-8"):
        build_report(payload, _pair(), VOCAB)


def test_non_ascii_text_is_accepted():
    report = build_report(_doc(title="Gipfel in Genf – Einigung \U0001f30d"), _pair(), VOCAB)
    assert report.title.endswith("\U0001f30d")


def test_out_of_vocabulary_tags_pass_through_by_default():
    report = build_report(_doc(tags=["Politics", "Made Up", "Politics"]), _pair(), VOCAB)
    assert report.tags == ["Politics", "Made Up", "Politics"]


def test_filter_policy_drops_unknown_and_repeated_tags():
    assert apply_tag_policy(["Politics", "Made Up", "Politics", "Economy"], VOCAB, "filter") == [
        "Politics",
        "Economy",
    ]


def test_reject_policy_raises_on_unknown_tag():
    with pytest.raises(SchemaError, match="Made Up"):
        build_report(_doc(tags=["Politics", "Made Up"]), _pair(), VOCAB, tag_policy="reject")


def test_embedded_json_is_salvaged_only_when_enabled():
    wrapped = "Sure! Here it is:\n```json\n" + _doc() + "\n```\nHope this helps."
    with pytest.raises(SchemaError):
        build_report(wrapped, _pair(), VOCAB)
    report = build_report(wrapped, _pair(), VOCAB, extract_embedded=True)
    assert report.title == "Leaders agree at summit"


def test_parse_json_response_brace_fallback():
    text = 'Report follows {"title": "x"} end'
    assert parse_json_response(text, extract_embedded=True) == {"title": "x"}


def test_prompt_contains_both_articles_labels_and_vocabulary():
    prompt = build_fusion_prompt(_pair(), VOCAB, max_chars=12000, primary_label="CNN", secondary_label="RT")

    assert "unbiased journalist" in prompt.system
    assert "CNN article:\nLeaders met.\nThey agreed.\nMarkets rose." in prompt.user
    assert "RT article:\nA deal was reached.\nDetails follow." in prompt.user
    assert "Politics, Economy, Global" in prompt.user
    for field in ("title", "summary", "tags", "content"):
        assert f'"{field}"' in prompt.user


def test_prompt_truncates_each_article_block():
    pair = _pair(primary_paragraphs=["A" * 100], secondary_paragraphs=["B" * 100])
    prompt = build_fusion_prompt(pair, VOCAB, max_chars=10, primary_label="CNN", secondary_label="RT")

    assert "A" * 10 in prompt.user
    assert "A" * 11 not in prompt.user
    assert "B" * 11 not in prompt.user


def test_requester_fuses_pair_with_one_call():
    provider = _StubProvider(response=_doc(content="single para"))
    requester = FusionRequester(provider, VOCAB, FusionConfig())

    report = requester.fuse(_pair())

    assert len(provider.calls) == 1
    assert provider.calls[0]["context"] == {
        "url_primary": "https://edition.cnn.com/summit",
        "url_secondary": "https://www.rt.com/news/summit/",
    }
    assert report.content == ["single para"]


def test_requester_propagates_generation_error():
    provider = _StubProvider(error=GenerationError("ReadTimeout: timed out"))
    requester = FusionRequester(provider, VOCAB, FusionConfig())

    with pytest.raises(GenerationError):
        requester.fuse(_pair())


def test_requester_attaches_urls_to_schema_error():
    provider = _StubProvider(response="not json at all")
    requester = FusionRequester(provider, VOCAB, FusionConfig())

    with pytest.raises(SchemaError) as excinfo:
        requester.fuse(_pair())

    assert excinfo.value.url_primary == "https://edition.cnn.com/summit"
    assert excinfo.value.url_secondary == "https://www.rt.com/news/summit/"


def test_requester_rejects_unknown_tag_policy():
    with pytest.raises(ValueError, match="tag_policy"):
        FusionRequester(_StubProvider(), VOCAB, FusionConfig(tag_policy="strict"))


def test_default_vocabulary_is_ordered_and_deduplicated(tmp_path):
    vocab = load_vocabulary()
    assert len(vocab) == len(set(DEFAULT_TAGS))
    assert len(vocab) < len(DEFAULT_TAGS)
    assert vocab.terms[0] == "Politics"
    assert "Australia" in vocab

    path = tmp_path / "tags.yaml"
    path.write_text("- Space\n- Music\n- Space\n", encoding="utf-8")
    assert load_vocabulary(str(path)).terms == ("Space", "Music")


def test_vocabulary_file_must_be_a_list(tmp_path):
    path = tmp_path / "tags.yaml"
    path.write_text("just a string\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_vocabulary(str(path))
