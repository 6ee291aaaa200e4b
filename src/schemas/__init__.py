"""Schema package for external and internal contracts."""

from .requests import AnnotatedImage, AnnotatedPage, DescribeImageRequest, ExportRequest
from .responses import DescribeImageResponse, ErrorResponse, ExtractResponse, UsageResponse

__all__ = [
    "AnnotatedImage",
    "AnnotatedPage",
    "DescribeImageRequest",
    "DescribeImageResponse",
    "ErrorResponse",
    "ExportRequest",
    "ExtractResponse",
    "UsageResponse",
]
