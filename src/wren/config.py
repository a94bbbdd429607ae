"""Validator configuration.

ValidatorConfig is a frozen dataclass — immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from wren.errors import ConfigurationError
from wren.messages import DEFAULT_MESSAGES, ErrorKind
from wren.records import is_identifier

_DEFAULT_IMAGE_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "gif", "webp"})


@dataclass(frozen=True, slots=True)
class ValidatorConfig:
    """Validator configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = ValidatorConfig(
            messages={"required": "Please fill in {field}"},
            except_id_column="id",
        )

    ``messages`` is merged over the default template table, so partial
    overrides are fine. Keys may be an ``ErrorKind`` or its string value.
    """

    # Message templates (merged over DEFAULT_MESSAGES)
    messages: Mapping[ErrorKind | str, str] = field(default_factory=dict)

    # Upload checks
    image_extensions: frozenset[str] = _DEFAULT_IMAGE_EXTENSIONS

    # unique:table,column,except_id,<value> excludes rows where this column == <value>
    except_id_column: str = "record_id"

    # Reject "required|" style empty segments instead of ignoring them
    strict_segments: bool = False

    # Resolved template table, built once in __post_init__
    _templates: Mapping[ErrorKind, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not is_identifier(self.except_id_column):
            msg = f"except_id_column {self.except_id_column!r} is not a valid SQL identifier"
            raise ConfigurationError(msg)

        templates = dict(DEFAULT_MESSAGES)
        for key, template in self.messages.items():
            try:
                kind = key if isinstance(key, ErrorKind) else ErrorKind(key)
            except ValueError:
                known = ", ".join(k.value for k in ErrorKind)
                msg = f"Unknown error kind {key!r} in messages. Known kinds: {known}"
                raise ConfigurationError(msg) from None
            templates[kind] = template
        object.__setattr__(self, "_templates", MappingProxyType(templates))

    def message_for(self, kind: ErrorKind) -> str:
        """Return the effective template for *kind*."""
        return self._templates[kind]
