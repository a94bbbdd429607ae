"""Error kinds and message templates.

Every failed rule maps to exactly one ``ErrorKind``. Templates use
``{field}`` plus rule-specific placeholders such as ``{value}``;
substitution is literal text replacement, not ``str.format``, so braces
in user-provided values are never interpreted.
"""

from collections.abc import Mapping
from enum import Enum


class ErrorKind(Enum):
    """The built-in validation failure kinds."""

    REQUIRED = "required"
    STRING = "string"
    NUMBER = "number"
    UNIQUE = "unique"
    TIME = "time"
    IMAGE = "image"
    MIN = "min"
    MAX = "max"
    IN = "in"


DEFAULT_MESSAGES: Mapping[ErrorKind, str] = {
    ErrorKind.REQUIRED: "The {field} is required",
    ErrorKind.STRING: "The {field} must be a string",
    ErrorKind.NUMBER: "The {field} must be a number",
    ErrorKind.UNIQUE: "The {field} has already been taken",
    ErrorKind.TIME: "The {field} must be a valid time format",
    ErrorKind.IMAGE: "The {field} must be a valid image file (jpg, jpeg, png, gif, webp)",
    ErrorKind.MIN: "The {field} must be at least {value} KB in size",
    ErrorKind.MAX: "The {field} must not exceed {value} KB in size",
    ErrorKind.IN: "The {field} must be one of the following: {value}",
}


def render_message(template: str, field: str, replacements: Mapping[str, str] | None = None) -> str:
    """Fill ``{field}`` and any ``{key}`` placeholders in *template*.

    ``{field}`` is substituted first, then each replacement in order.
    Placeholders without a replacement are left as-is.
    """
    message = template.replace("{field}", field)
    if replacements:
        for key, value in replacements.items():
            message = message.replace("{" + key + "}", value)
    return message
