"""
Ranker Module - page assembly

Components:
- clamp_request: normalize page/limit input
- assemble_page: slice an ordered id list into a Page
"""

from .pager import clamp_request, assemble_page


__all__ = [
    "clamp_request",
    "assemble_page",
]
