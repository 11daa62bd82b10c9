"""Request and response models."""

from flatten.models.responses import Halt, PageResponse, RequestContext

__all__ = ["Halt", "PageResponse", "RequestContext"]
