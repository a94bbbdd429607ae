"""Validation result — immutable snapshot of a finished validation run."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """The outcome of validating submitted data against a rule set.

    ``is_valid`` is True when there are no errors.
    The result is falsy when invalid, so you can write::

        result = validate(form, rules)
        if not result:
            return render_form(form, errors=result.errors)

    ``data`` holds the submitted values of every declared field, whether
    or not it passed. Undeclared fields are never included.

    ``errors`` maps field names to lists of error messages::

        {"name": ["The name is required"],
         "photo": ["The photo must not exceed 2048 KB in size"]}
    """

    data: dict[str, Any]
    errors: dict[str, list[str]]

    @property
    def is_valid(self) -> bool:
        """True if validation passed with no errors."""
        return not self.errors

    def __bool__(self) -> bool:
        """Falsy when invalid — enables ``if not result:`` pattern."""
        return self.is_valid
