from bowlscan.core.models import BoundingPoly, TextAnnotation, Vertex
from bowlscan.services.layout import filter_small, group_rows, merge_adjacent, should_merge

from builders import ann


def _texts(rows):
    return [[a.text for a in r] for r in rows]


def test_group_rows_by_y_then_x():
    anns = [
        ann("200", 150, 140, 180, 160),
        ann("홍길동", 10, 90, 60, 110),
        ann("김철수", 10, 145, 60, 165),
        ann("180", 100, 95, 130, 115),
    ]
    assert _texts(group_rows(anns)) == [["홍길동", "180"], ["김철수", "200"]]


def test_row_anchor_is_first_member():
    # centres 100, 125, 150: 150 is 50 away from the anchor, not 25 from its neighbour
    anns = [ann("a", 0, 90, 5, 110), ann("b", 10, 115, 15, 135), ann("c", 20, 140, 25, 160)]
    assert _texts(group_rows(anns)) == [["a", "b"], ["c"]]


def test_group_rows_skips_annotations_without_y():
    anns = [TextAnnotation("ghost"), ann("a", 0, 0, 5, 10)]
    assert _texts(group_rows(anns)) == [["a"]]
    assert group_rows([TextAnnotation("ghost")]) == []


def test_missing_x_sorts_first():
    no_x = TextAnnotation("n", BoundingPoly((Vertex(None, 0), Vertex(5, 0), Vertex(5, 10), Vertex(0, 10))))
    row = group_rows([ann("a", 20, 0, 25, 10), no_x])[0]
    assert [a.text for a in row] == ["n", "a"]


def test_merge_adjacent_glyphs_by_kind():
    row = [
        ann("2", 10, 0, 20, 20), ann("1", 22, 0, 32, 20), ann("4", 34, 0, 44, 20),
        ann("홍", 100, 0, 110, 20), ann("길", 112, 0, 122, 20), ann("동", 124, 0, 134, 20),
        ann("7", 136, 0, 146, 20),
    ]
    merged = merge_adjacent(row)
    assert [a.text for a in merged] == ["214", "홍길동", "7"]
    first = merged[0].poly.vertices
    assert (first[0].x, first[0].y, first[2].x, first[2].y) == (10, 0, 44, 20)


def test_merge_gap_bounds():
    a = ann("1", 0, 0, 10, 20)
    assert should_merge(a, ann("2", 24, 0, 34, 20))        # gap 14 < 15
    assert not should_merge(a, ann("2", 25, 0, 35, 20))    # gap 15, not below 1.5 widths
    assert should_merge(a, ann("2", 5, 0, 15, 20))         # overlap of half a glyph
    assert not should_merge(a, ann("2", 4, 0, 14, 20))


def test_merge_needs_single_glyphs_and_geometry():
    assert not should_merge(ann("12", 0, 0, 10, 20), ann("3", 11, 0, 21, 20))
    assert not should_merge(ann("A", 0, 0, 10, 20), ann("B", 11, 0, 21, 20))
    assert not should_merge(TextAnnotation("1"), ann("2", 11, 0, 21, 20))
    assert merge_adjacent([ann("1", 0, 0, 10, 20)])[0].text == "1"


def test_filter_small_drops_scratch_notes_but_keeps_names():
    anns = [
        ann("180", 0, 0, 30, 40),
        ann("200", 40, 0, 70, 40),
        ann("195", 80, 0, 110, 40),
        ann("362+184", 120, 30, 160, 40),
        ann("홍", 170, 30, 175, 40),
    ]
    kept = [a.text for a in filter_small(anns)]
    assert kept == ["180", "200", "195", "홍"]


def test_filter_small_needs_three_heights():
    anns = [ann("180", 0, 0, 30, 40), ann("1", 40, 0, 45, 5), TextAnnotation("x")]
    assert filter_small(anns) == anns
