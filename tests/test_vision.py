import pytest

from bowlscan.core.models import Vertex
from bowlscan.services.ocr_parser import parse
from bowlscan.services.vision import EMPTY_RESPONSE, RecognizerPayloadError, response_from_json

from builders import vannotation, vpage, vword


def test_batch_envelope_uses_first_response():
    payload = {"responses": [
        {"fullTextAnnotation": {"text": "홍길동 180 200 195"}},
        {"fullTextAnnotation": {"text": "ignored"}},
    ]}
    assert response_from_json(payload).raw_text == "홍길동 180 200 195"


def test_empty_envelope_is_an_upstream_failure():
    resp = response_from_json({"responses": []})
    assert resp.error is not None
    result = parse(resp)
    assert not result.is_success
    assert result.error_message == EMPTY_RESPONSE


def test_raw_text_falls_back_to_first_annotation():
    resp = response_from_json({"textAnnotations": [vannotation("김철수 150", 0, 0, 100, 20)]})
    assert resp.raw_text is None
    assert parse(resp).raw_text == "김철수 150"


def test_missing_coordinates_stay_none():
    payload = {"textAnnotations": [{"description": "x", "boundingPoly": {"vertices": [{"x": 5}, {"y": 7}, {}, {"x": "bad"}]}}]}
    verts = response_from_json(payload).annotations[0].vertices
    assert verts == (Vertex(5, None), Vertex(None, 7), Vertex(None, None), Vertex(None, None))


def test_tree_words_are_symbol_concatenations():
    payload = {"fullTextAnnotation": {"text": "", "pages": [vpage([vword("홍길동", 0, 0, 60, 20)])]}}
    page = response_from_json(payload).pages[0]
    word = page.blocks[0].paragraphs[0].words[0]
    assert word.text == "홍길동"
    assert word.confidence == pytest.approx(0.98)
    assert word.bbox.vertices[2] == Vertex(60, 20)


def test_error_without_message():
    resp = response_from_json({"error": {"code": 7}})
    assert resp.error.describe() == "recognizer error (code 7)"


def test_malformed_nodes_are_skipped():
    payload = {
        "textAnnotations": ["junk", vannotation("a", 0, 0, 1, 1)],
        "fullTextAnnotation": {"pages": [{"blocks": [None, {"paragraphs": "nope"}]}]},
    }
    resp = response_from_json(payload)
    assert [a.text for a in resp.annotations] == ["a"]
    assert resp.pages[0].blocks[0].paragraphs == ()


def test_non_object_payload_raises():
    with pytest.raises(RecognizerPayloadError):
        response_from_json([1, 2, 3])
