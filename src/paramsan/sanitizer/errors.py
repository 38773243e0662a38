"""Error types and the failure marker used by the sanitization engine."""

from typing import Any


class SanitizationError(ValueError):
    """Raised by a coercer or rule that cannot handle a value."""

    pass


class CoercionError(SanitizationError):
    """A value could not be converted to the declared type."""

    pass


class RuleError(SanitizationError):
    """A rule rejected an otherwise coerced value."""

    pass


class Failure:
    """Marker returned by compiled chains when sanitization did not apply.

    Only one instance exists (``FAILED``); compare with ``is``. It is falsy so
    that ``if result:`` reads naturally, but callers must not confuse it with
    a falsy sanitized value such as ``0`` or ``False``.
    """

    _instance: "Failure | None" = None

    def __new__(cls) -> "Failure":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "FAILED"


FAILED = Failure()


def is_failed(value: Any) -> bool:
    return value is FAILED
