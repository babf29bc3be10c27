import pytest

from bowlscan.core.vocabulary import DEFAULT_VOCABULARY, RecognitionVocabulary
from bowlscan.services.tokens import (
    TokenKind, classify_token, collect_tokens, extract_name_dictionary, resolve_name_fragments,
)


@pytest.mark.parametrize("text,kind", [
    ("", TokenKind.noise),
    ("   ", TokenKind.noise),
    ("합계", TokenKind.noise),
    ("total", TokenKind.noise),
    ("3GAME", TokenKind.noise),
    ("GARNE1", TokenKind.noise),
    ("---", TokenKind.noise),
    ("홍길동", TokenKind.name),
    (" 김철수 ", TokenKind.name),
    ("홍", TokenKind.fragment),
    ("180", TokenKind.digits),
    ("189-203", TokenKind.mixed),
    ("홍길동183", TokenKind.name_digits),
    ("Kim", TokenKind.other_name),
])
def test_classify_token(text, kind):
    assert classify_token(text).kind is kind


def test_mixed_token_yields_every_digit_run():
    tok = classify_token("581+45")
    assert tok.digit_runs == ("581", "45")


def test_name_glued_to_score_is_split():
    tok = classify_token("안성호183")
    assert tok.name == "안성호"
    assert tok.digit_runs == ("183",)


def test_collect_tokens():
    toks = collect_tokens(["1", "홍길동", "180", "200-195", "합계", "동"])
    assert toks.names == ["홍길동"]
    assert toks.fragments == ["동"]
    assert toks.scores == [1, 180, 200, 195]


def test_name_dictionary_in_first_seen_order_without_headers():
    text = "이름 1G 2G\n홍길동 180 200\n김철수 150 165\n홍길동 합계"
    assert extract_name_dictionary(text) == ["홍길동", "김철수"]
    assert extract_name_dictionary("") == []


def test_resolve_exact_name():
    res = resolve_name_fragments("김철수", ["안성호", "김철수"])
    assert res.is_resolved
    assert res.name == "김철수"


def test_shared_surname_glyph_stays_unresolved():
    res = resolve_name_fragments("안", ["안성호", "안호준", "김철수"])
    assert res.status == "ambiguous"
    assert res.name is None
    assert res.candidates == ["안성호", "안호준"]


def test_single_partial_match_is_still_not_picked():
    res = resolve_name_fragments("철", ["안성호", "김철수"])
    assert res.status == "ambiguous"
    assert res.candidates == ["김철수"]


def test_unknown_fragment():
    assert resolve_name_fragments("박", ["안성호"]).status == "unknown"
    assert resolve_name_fragments("박", []).status == "unknown"


def test_custom_vocabulary_script_and_headers():
    latin = RecognitionVocabulary(headers=frozenset({"PLAYER"}), name_char_first="A", name_char_last="Z")
    assert classify_token("PLAYER", latin).kind is TokenKind.noise
    assert classify_token("BOB", latin).kind is TokenKind.name
    assert classify_token("B", latin).kind is TokenKind.fragment

    extended = DEFAULT_VOCABULARY.with_extra_headers(["핸디포함", " "])
    assert extended.is_header("핸디포함")
    assert not DEFAULT_VOCABULARY.is_header("핸디포함")
    assert DEFAULT_VOCABULARY.with_extra_headers([]) is DEFAULT_VOCABULARY


def test_header_glued_to_number_is_not_a_name():
    tok = classify_token("합계575")
    assert tok.kind is TokenKind.mixed
    assert tok.digit_runs == ("575",)
