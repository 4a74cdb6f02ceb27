"""Request context contract between the gate and its host.

The gate never owns a request. The host wraps each request in a
``RequestContext`` for the duration of one call, and the gate reads the
request fields, stores annotations, and signals the outcome through it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


class RequestContext(ABC):
    """Per-request view of the host request."""

    @abstractmethod
    def header(self, name: str) -> str:
        """Return the header value, or an empty string."""

    @abstractmethod
    def query(self, name: str) -> str:
        """Return the query string parameter, or an empty string."""

    @abstractmethod
    def form(self, name: str) -> str:
        """Return the form body field, or an empty string."""

    @abstractmethod
    def param(self, name: str) -> str:
        """Return the path parameter, or an empty string."""

    @abstractmethod
    def cookie(self, name: str) -> str:
        """Return the cookie value, or an empty string."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store an annotation for downstream handlers."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Read an annotation."""

    @abstractmethod
    def next(self) -> None:
        """Resume normal request processing."""

    @abstractmethod
    def abort_with_msg(self, message: str, status_code: int) -> None:
        """Stop processing and respond with a plain-text body."""

    @property
    @abstractmethod
    def aborted(self) -> bool:
        """Whether ``abort_with_msg`` has been called."""


@dataclass
class SimpleRequestContext(RequestContext):
    """In-memory request context.

    Useful for tests and for hosts that are not Starlette based. Lookups are
    exact-match except headers, which are case-insensitive as in HTTP.
    """

    headers: dict[str, str] = field(default_factory=dict)
    query_params: dict[str, str] = field(default_factory=dict)
    form_data: dict[str, str] = field(default_factory=dict)
    path_params: dict[str, str] = field(default_factory=dict)
    cookies: dict[str, str] = field(default_factory=dict)
    keys: dict[str, Any] = field(default_factory=dict)
    continued: bool = False
    status_code: int = 200
    body: str = ""
    _aborted: bool = field(default=False, init=False, repr=False)

    def header(self, name: str) -> str:
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return ""

    def query(self, name: str) -> str:
        return self.query_params.get(name, "")

    def form(self, name: str) -> str:
        return self.form_data.get(name, "")

    def param(self, name: str) -> str:
        return self.path_params.get(name, "")

    def cookie(self, name: str) -> str:
        return self.cookies.get(name, "")

    def set(self, key: str, value: Any) -> None:
        self.keys[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        return self.keys.get(key, default)

    def next(self) -> None:
        self.continued = True

    def abort_with_msg(self, message: str, status_code: int) -> None:
        self._aborted = True
        self.status_code = status_code
        self.body = message

    @property
    def aborted(self) -> bool:
        return self._aborted
