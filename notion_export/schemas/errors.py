"""
Schemas - Errors

Error taxonomy and the Result type returned across component boundaries.
"""

from dataclasses import dataclass, fields
from typing import Any, ClassVar, Dict, Generic, Optional, TypeVar, Union

from pydantic import BaseModel


T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value."""
    value: T


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed outcome carrying a typed error."""
    error: E


Result = Union[Ok[T], Err[E]]


def _describe_cause(cause: Any) -> Any:
    """Turn a cause into something json.dumps can handle."""
    if cause is None:
        return None
    if isinstance(cause, ExportError):
        return cause.to_dict()
    if isinstance(cause, BaseException):
        return {"type": type(cause).__name__, "message": str(cause)}
    if isinstance(cause, BaseModel):
        return cause.model_dump(mode="json")
    if isinstance(cause, (str, int, float, bool, list, dict)):
        return cause
    return repr(cause)


class ExportError:
    """Base for every error record. Subclasses are frozen dataclasses."""

    kind: ClassVar[str] = "unknown"

    def to_dict(self) -> Dict[str, Any]:
        """Structured payload for the error stream."""
        payload: Dict[str, Any] = {"kind": self.kind}
        for item in fields(self):
            value = getattr(self, item.name)
            if item.name == "cause":
                if value is None:
                    continue
                value = _describe_cause(value)
            payload[item.name] = value
        return payload

    def __str__(self) -> str:
        return f"{self.kind}: {getattr(self, 'message', '')}"


@dataclass(frozen=True)
class ApiKeyMissing(ExportError):
    message: str
    kind: ClassVar[str] = "api_key_missing"


@dataclass(frozen=True)
class MaxDepthExceeded(ExportError):
    depth: int
    message: str
    kind: ClassVar[str] = "max_depth_exceeded"


@dataclass(frozen=True)
class PageNotFound(ExportError):
    message: str
    page_id: str = ""
    kind: ClassVar[str] = "page_not_found"


@dataclass(frozen=True)
class Unauthorized(ExportError):
    message: str
    kind: ClassVar[str] = "unauthorized"


@dataclass(frozen=True)
class RateLimited(ExportError):
    message: str
    kind: ClassVar[str] = "rate_limited"


@dataclass(frozen=True)
class NetworkError(ExportError):
    message: str
    cause: Optional[BaseException] = None
    kind: ClassVar[str] = "network_error"


@dataclass(frozen=True)
class ApiError(ExportError):
    message: str
    cause: Any = None
    kind: ClassVar[str] = "api_error"


@dataclass(frozen=True)
class FetchFailed(ExportError):
    block_id: str
    message: str
    cause: Any = None
    kind: ClassVar[str] = "fetch_failed"


@dataclass(frozen=True)
class UnknownError(ExportError):
    message: str
    cause: Any = None
    kind: ClassVar[str] = "unknown"


# Errors produced by the node fetchers.
NotionApiError = Union[ApiError, NetworkError, PageNotFound, Unauthorized, RateLimited]

# Errors produced by the tree builder.
BuildError = Union[MaxDepthExceeded, ApiError, FetchFailed]

# Errors surfaced to callers of the page assembler.
FetchNotionPageError = Union[
    ApiKeyMissing,
    PageNotFound,
    Unauthorized,
    RateLimited,
    NetworkError,
    MaxDepthExceeded,
    UnknownError,
]
