# bowlscan/services/geometry.py
from __future__ import annotations
from typing import Iterable, List, Optional

from bowlscan.core.models import BoundingPoly, TextAnnotation, Vertex

# All helpers return None instead of raising when a polygon is missing or
# degenerate; callers skip size/adjacency heuristics for that annotation.

def center_y(a: TextAnnotation) -> Optional[float]:
    v = a.vertices
    if not v:
        return None
    if len(v) >= 4:
        top = v[0].y
        bottom = v[2].y if v[2].y is not None else v[3].y
        if top is None or bottom is None:
            return None
        return (top + bottom) / 2.0
    if len(v) >= 2:
        if v[0].y is None or v[1].y is None:
            return None
        return (v[0].y + v[1].y) / 2.0
    return float(v[0].y) if v[0].y is not None else None

def left_x(a: TextAnnotation) -> Optional[float]:
    v = a.vertices
    if not v or v[0].x is None:
        return None
    return float(v[0].x)

def right_x(a: TextAnnotation) -> Optional[float]:
    v = a.vertices
    if not v:
        return None
    if len(v) >= 2:
        return float(v[1].x) if v[1].x is not None else None
    xs = [p.x for p in v if p.x is not None]
    return float(max(xs)) if xs else None

def width(a: TextAnnotation) -> Optional[float]:
    lx, rx = left_x(a), right_x(a)
    if lx is None or rx is None:
        return None
    w = rx - lx
    return w if w > 0 else None

def height(a: TextAnnotation) -> Optional[float]:
    v = a.vertices
    if len(v) < 4:
        return None
    top = v[0].y
    bottom = v[2].y if v[2].y is not None else v[3].y
    if top is None or bottom is None:
        return None
    h = bottom - top
    return float(h) if h > 0 else None

def row_center_y(row: Iterable[TextAnnotation]) -> float:
    """Mean centre-Y of a row; 0.0 when no member has usable geometry."""
    ys = [y for y in (center_y(a) for a in row) if y is not None]
    return sum(ys) / len(ys) if ys else 0.0

def envelope(annotations: Iterable[TextAnnotation]) -> BoundingPoly:
    """Axis-aligned min/max box around every vertex of the given annotations."""
    pts: List[Vertex] = [p for a in annotations for p in a.vertices]
    xs = [p.x for p in pts if p.x is not None]
    ys = [p.y for p in pts if p.y is not None]
    x0, x1 = (min(xs), max(xs)) if xs else (0, 0)
    y0, y1 = (min(ys), max(ys)) if ys else (0, 0)
    return BoundingPoly(vertices=(Vertex(x0, y0), Vertex(x1, y0), Vertex(x1, y1), Vertex(x0, y1)))
