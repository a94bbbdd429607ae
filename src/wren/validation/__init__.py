"""Rule-string validation — declare rules per field, read back errors.

Usage::

    from wren.validation import Validator, validate

    v = Validator(form, {
        "name": "required|string",
        "age": "nullable|number",
        "photo": "image|max:2048",
    })
    if v.fails():
        return render_form(form, errors=v.errors())
    save(v.validated())

Or in one call::

    result = validate(form, rules)
    if not result:
        return render_form(form, errors=result.errors)
"""

from collections.abc import Mapping
from typing import Any

from wren.config import ValidatorConfig
from wren.messages import ErrorKind
from wren.records import RecordChecker
from wren.validation.parser import ParsedRule, parse_rules
from wren.validation.result import ValidationResult
from wren.validation.rules import RULES, UploadedFile, is_upload
from wren.validation.validator import FieldFailure, Validator

__all__ = [
    "RULES",
    "ErrorKind",
    "FieldFailure",
    "ParsedRule",
    "UploadedFile",
    "ValidationResult",
    "Validator",
    "is_upload",
    "parse_rules",
    "validate",
]


def validate(
    data: Mapping[str, Any],
    rules: Mapping[str, str],
    *,
    checker: RecordChecker | None = None,
    config: ValidatorConfig | None = None,
) -> ValidationResult:
    """Validate data against a set of rule strings.

    Args:
        data: Any mapping of field names to submitted values — scalars
            or upload records.
        rules: A mapping of field names to pipe-delimited rule strings.
        checker: Record store for ``unique`` rules.
        config: Optional ``ValidatorConfig``.

    Returns:
        A ``ValidationResult`` with ``.data`` (declared fields only) and
        ``.errors`` (field → list of error messages).

    Example::

        result = validate(form, {
            "title": "required|string",
            "slot": "required|time",
        })
        if not result:
            # result.errors == {"slot": ["The slot must be a valid time format"]}
            ...
    """
    return Validator(data, rules, checker=checker, config=config).result()
