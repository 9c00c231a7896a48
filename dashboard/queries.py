"""
Query cache for the dashboard views.

Read queries are keyed by their API path. Each key is in one of four states:
loading (nothing fetched yet, render a skeleton), success, empty (null or an
empty list) and error. Mutations run one request each; on success they
invalidate the keys that depend on them, on failure they push a toast.
Nothing is updated optimistically.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional

logger = logging.getLogger(__name__)

LOADING = "loading"
SUCCESS = "success"
EMPTY = "empty"
ERROR = "error"

DEFAULT_ERROR_MESSAGE = "Something went wrong. Please try again."


@dataclass
class Toast:
    title: str
    description: str
    variant: str = "default"  # "default" | "destructive"
    dismissed: bool = False


@dataclass
class QueryState:
    key: str
    status: str = LOADING
    data: Any = None
    error: Optional[str] = None
    stale: bool = False

    @property
    def is_loading(self) -> bool:
        return self.status == LOADING


@dataclass
class MutationResult:
    ok: bool
    data: Any = None
    status_code: Optional[int] = None
    message: Optional[str] = None
    field_errors: dict = field(default_factory=dict)


def error_details(response) -> tuple:
    """Pull (message, field_errors) out of an error response body."""
    try:
        body = response.json()
    except ValueError:
        return None, {}
    if not isinstance(body, dict):
        return None, {}
    field_errors = {e["field"]: e["message"] for e in body.get("errors") or [] if "field" in e}
    return body.get("message"), field_errors


class QueryClient:
    def __init__(self, http):
        # `http` is an ApiSession or a TestClient
        self.http = http
        self._cache = {}
        self.toasts: List[Toast] = []

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def peek(self, key: str) -> QueryState:
        return self._cache.get(key) or QueryState(key=key)

    def query(self, key: str) -> QueryState:
        cached = self._cache.get(key)
        if cached and not cached.stale:
            return cached

        state = QueryState(key=key, status=LOADING)
        self._cache[key] = state
        try:
            response = self.http.get(key)
        except Exception as exc:
            logger.warning(f"Query {key} failed: {exc}")
            state.status, state.error = ERROR, DEFAULT_ERROR_MESSAGE
            return state

        if response.status_code == 404:
            state.status = EMPTY
        elif response.status_code >= 400:
            message, _ = error_details(response)
            state.status, state.error = ERROR, message or DEFAULT_ERROR_MESSAGE
        else:
            data = response.json()
            state.data = data
            state.status = EMPTY if data in (None, [], {}) else SUCCESS
        return state

    def invalidate(self, *keys: str):
        for key in keys:
            if key in self._cache:
                self._cache[key].stale = True

    def clear(self):
        self._cache.clear()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def mutate(
        self,
        method: str,
        path: str,
        json: Optional[dict] = None,
        invalidates: Iterable[str] = (),
        success_message: Optional[str] = None,
        error_title: str = "Error",
        error_message: str = DEFAULT_ERROR_MESSAGE,
        notify_errors: bool = True,
    ) -> MutationResult:
        sender = getattr(self.http, method.lower())
        try:
            response = sender(path, json=json) if json is not None else sender(path)
        except Exception as exc:
            logger.warning(f"{method} {path} failed: {exc}")
            if notify_errors:
                self.notify(error_title, error_message, variant="destructive")
            return MutationResult(ok=False, message=error_message)

        if response.status_code >= 400:
            message, field_errors = error_details(response)
            if notify_errors:
                self.notify(error_title, message or error_message, variant="destructive")
            return MutationResult(
                ok=False,
                status_code=response.status_code,
                message=message or error_message,
                field_errors=field_errors,
            )

        self.invalidate(*invalidates)
        if success_message:
            self.notify("Success!", success_message)
        data = response.json() if response.content else None
        return MutationResult(ok=True, data=data, status_code=response.status_code)

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def notify(self, title: str, description: str, variant: str = "default") -> Toast:
        toast = Toast(title=title, description=description, variant=variant)
        self.toasts.append(toast)
        return toast

    def dismiss(self, toast: Toast):
        toast.dismissed = True

    @property
    def visible_toasts(self) -> List[Toast]:
        return [t for t in self.toasts if not t.dismissed]
