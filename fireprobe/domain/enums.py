"""Domain enumerations (log classification, operator actions, auth states)."""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class LogClass(_ValuesMixin, str, Enum):
    """Classification of a log entry."""

    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


class StoreAction(_ValuesMixin, str, Enum):
    """Structured-store actions."""

    GET = "get"
    SET = "set"
    UPDATE = "update"
    DELETE = "delete"


class SortDirection(_ValuesMixin, str, Enum):
    """Query sort direction."""

    ASC = "asc"
    DESC = "desc"


class BlobAction(_ValuesMixin, str, Enum):
    """Blob storage actions."""

    LIST = "list"
    UPLOAD = "upload"
    DOWNLOAD = "download"
    DELETE = "delete"
    GET_METADATA = "get-metadata"


class HttpMethod(_ValuesMixin, str, Enum):
    """Methods accepted for HTTP (on_request) function invocation."""

    GET = "GET"
    POST = "POST"


class SignInMethod(_ValuesMixin, str, Enum):
    """How a principal was established; tags every auth-state event."""

    PASSWORD = "password"
    FEDERATED = "federated"
    MULTI_FACTOR = "multi_factor"


class AuthState(_ValuesMixin, str, Enum):
    """Auth controller lifecycle."""

    ANONYMOUS = "anonymous"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"
    CHALLENGE_PENDING = "challenge_pending"


PHONE_FACTOR_ID = "phone"
