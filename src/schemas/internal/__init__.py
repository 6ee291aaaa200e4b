"""Internal schema definitions."""

from .annotations import (  # noqa: F401
    NO_ANNOTATION,
    AnnotationMap,
    ImageAnnotation,
    annotation_key,
    caption_key,
)
from .documents import (  # noqa: F401
    Cell,
    Document,
    Image,
    ImagePosition,
    Line,
    Page,
    Point,
    Segment,
    SegmentMeta,
    Style,
    Table,
)

__all__ = [
    "AnnotationMap",
    "Cell",
    "Document",
    "Image",
    "ImageAnnotation",
    "ImagePosition",
    "Line",
    "NO_ANNOTATION",
    "Page",
    "Point",
    "Segment",
    "SegmentMeta",
    "Style",
    "Table",
    "annotation_key",
    "caption_key",
]
