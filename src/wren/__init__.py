"""Wren — declarative, rule-string input validation.

Validate submitted values against pipe-delimited rules, collect
readable error messages per field, keep only the declared fields.

Basic usage::

    from wren import Validator

    v = Validator(
        {"name": "Ada", "start": "09:30", "role": "admin"},
        {"name": "required|string", "start": "time", "role": "in:admin,editor"},
    )
    v.errors()     # {}
    v.validated()  # {"name": "Ada", "start": "09:30", "role": "admin"}

Uniqueness against a database (``unique:users,email``)::

    from wren.records import DatabaseRecordChecker
    checker = DatabaseRecordChecker("sqlite:///app.db")
    Validator(data, rules, checker=checker)
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "DatabaseRecordChecker",
    "ErrorKind",
    "MemoryRecordChecker",
    "RecordCheckError",
    "RecordChecker",
    "RuleSyntaxError",
    "ValidationResult",
    "Validator",
    "ValidatorConfig",
    "WrenError",
    "validate",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wren`` fast while providing a clean top-level API.
    """
    if name in ("Validator", "validate", "ValidationResult"):
        from wren import validation

        return getattr(validation, name)

    if name == "ValidatorConfig":
        from wren.config import ValidatorConfig

        return ValidatorConfig

    if name == "ErrorKind":
        from wren.messages import ErrorKind

        return ErrorKind

    if name in ("RecordChecker", "MemoryRecordChecker", "DatabaseRecordChecker"):
        from wren import records

        return getattr(records, name)

    if name in ("WrenError", "ConfigurationError", "RuleSyntaxError", "RecordCheckError"):
        from wren import errors

        return getattr(errors, name)

    raise AttributeError(f"module 'wren' has no attribute {name!r}")
