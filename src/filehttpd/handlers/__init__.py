"""
=============================================================================
REQUEST PIPELINE
=============================================================================

    resource.py   Resolve the requested path to an open file, once
    content.py    Write the body: 404 page, byte copy, or templated text
    worker.py     RequestHandler: run parse → header → body for one client

=============================================================================
"""

from .resource import Resource, resolve_resource
from .content import ContentStreamer, write_body
from .worker import RequestHandler

__all__ = [
    "Resource",
    "resolve_resource",
    "ContentStreamer",
    "write_body",
    "RequestHandler",
]
