"""Structured view of failures raised by the remote model service.

Google APIs report errors as a JSON body of the form::

    {"error": {"code": 429, "message": "...", "status": "RESOURCE_EXHAUSTED",
               "details": [{"@type": "type.googleapis.com/google.rpc.ErrorInfo",
                            "reason": "RATE_LIMIT_EXCEEDED", ...},
                           {"@type": "type.googleapis.com/google.rpc.Help",
                            "links": [{"description": "...", "url": "..."}]}]}}

LLMStreamError flattens that body into the fields an operator needs when a
session dies mid-story.
"""

from typing import Any

_ERROR_INFO_TYPE = "google.rpc.ErrorInfo"
_HELP_TYPE = "google.rpc.Help"


class LLMStreamError(Exception):
    """A streaming request failed; carries whatever diagnostics the service sent."""

    def __init__(
        self,
        message: str,
        *,
        code: int | None = None,
        status: str | None = None,
        reason: str | None = None,
        help_links: list[str] | None = None,
        details: list[Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status = status
        self.reason = reason
        self.help_links = help_links or []
        self.details = details or []

    @classmethod
    def from_exception(cls, exc: BaseException) -> "LLMStreamError":
        """Build a report from any exception raised by a provider.

        Works with google.genai.errors.APIError (code, status, message and the
        raw JSON body in ``details``) and degrades to the exception text for
        transport errors that carry none of those.
        """
        if isinstance(exc, LLMStreamError):
            return exc

        body = _error_body(getattr(exc, "details", None))
        entries = body.get("details")
        entries = entries if isinstance(entries, list) else []

        code = getattr(exc, "code", None)
        if not isinstance(code, int):
            code = body.get("code") if isinstance(body.get("code"), int) else None

        error = cls(
            getattr(exc, "message", None) or body.get("message") or str(exc) or type(exc).__name__,
            code=code,
            status=getattr(exc, "status", None) or body.get("status"),
            reason=_find_reason(entries),
            help_links=_find_help_links(entries),
            details=entries,
        )
        error.__cause__ = exc
        return error


def _error_body(payload: Any) -> dict[str, Any]:
    """Return the inner ``error`` object of a Google API error payload."""
    # Streaming endpoints wrap the body in a one-element list
    if isinstance(payload, list):
        payload = next((item for item in payload if isinstance(item, dict)), None)
    if not isinstance(payload, dict):
        return {}
    inner = payload.get("error")
    return inner if isinstance(inner, dict) else payload


def _find_reason(entries: list[Any]) -> str | None:
    for entry in entries:
        if isinstance(entry, dict) and str(entry.get("@type", "")).endswith(_ERROR_INFO_TYPE):
            reason = entry.get("reason")
            if reason:
                return str(reason)
    return None


def _find_help_links(entries: list[Any]) -> list[str]:
    links: list[str] = []
    for entry in entries:
        if not isinstance(entry, dict) or not str(entry.get("@type", "")).endswith(_HELP_TYPE):
            continue
        for link in entry.get("links") or []:
            if isinstance(link, dict) and link.get("url"):
                description = link.get("description")
                links.append(f"{description}: {link['url']}" if description else link["url"])
    return links
