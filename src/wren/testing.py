"""Assertion helpers for testing code that validates with wren.

Each assertion produces a clear error message on failure, including
the full error map, so a failing test shows what actually happened.
"""

from wren.messages import ErrorKind
from wren.validation.validator import Validator


def assert_valid(validator: Validator) -> None:
    """Assert the validator recorded no errors."""
    assert validator.passes(), f"Expected no errors, got {validator.errors()!r}"


def assert_invalid(validator: Validator) -> None:
    """Assert the validator recorded at least one error."""
    assert validator.fails(), "Expected validation errors, got none"


def assert_field_error(
    validator: Validator,
    field: str,
    kind: ErrorKind | None = None,
    *,
    count: int | None = None,
) -> None:
    """Assert *field* failed, optionally with a given kind or error count.

    ``count`` counts failures of *kind* when given, otherwise all of the
    field's failures.
    """
    failures = [f for f in validator.failures() if f.field == field]
    assert failures, f"Expected errors for {field!r}, got {validator.errors()!r}"

    if kind is not None:
        failures = [f for f in failures if f.kind is kind]
        assert failures, (
            f"Expected a {kind.value!r} error for {field!r}, "
            f"got {validator.errors().get(field)!r}"
        )

    if count is not None:
        assert len(failures) == count, (
            f"Expected {count} error(s) for {field!r}, got {len(failures)}: "
            f"{[f.message for f in failures]!r}"
        )


def assert_no_field_error(validator: Validator, field: str) -> None:
    """Assert *field* has no recorded errors."""
    messages = validator.errors().get(field)
    assert not messages, f"Expected no errors for {field!r}, got {messages!r}"
