"""Typed failures raised by the CloudFront client."""

from __future__ import annotations

import xml.etree.ElementTree as ET


class CloudFrontError(Exception):
    """Base class for errors raised by this package."""


class UnsignedSignatureError(CloudFrontError):
    """Raised when a signed URL is required but the client holds no private key."""


class CloudFrontAPIError(CloudFrontError):
    """An error reported by the CloudFront management API."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        request_id: str = "",
        code: str = "",
        error_type: str = "",
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.request_id = request_id
        self.code = code
        self.error_type = error_type

    def __str__(self) -> str:
        label = f"{self.code}: {self.message}" if self.code else self.message
        return f"{label} (status {self.status_code}, request id {self.request_id or 'unknown'})"


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _find_text(element: ET.Element, name: str) -> str:
    for node in element.iter():
        if _local_name(node.tag) == name:
            return (node.text or "").strip()
    return ""


def parse_error_response(body: bytes, status_code: int, status_line: str) -> CloudFrontAPIError:
    """Translate an ``<ErrorResponse>`` body into a :class:`CloudFrontAPIError`.

    An empty or unparsable body yields an error carrying only the HTTP status
    line as its message.
    """
    code = error_type = message = request_id = ""
    if body.strip():
        try:
            root = ET.fromstring(body)
        except ET.ParseError:
            root = None
        if root is not None:
            code = _find_text(root, "Code")
            error_type = _find_text(root, "Type")
            message = _find_text(root, "Message")
            request_id = _find_text(root, "RequestId")

    return CloudFrontAPIError(
        message or status_line,
        status_code=status_code,
        request_id=request_id,
        code=code,
        error_type=error_type,
    )
