"""Wren exception hierarchy.

Validation failures are never raised: they are recorded on the
``Validator``. Exceptions here signal programming or infrastructure
problems: a broken rule declaration, or a record store that could not
answer a uniqueness query.
"""


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """Raised when validator configuration is invalid.

    Typically raised while a ``Validator`` is being constructed, before
    any rule has run.
    """


class RuleSyntaxError(ConfigurationError):
    """A rule string could not be turned into runnable checks.

    Unknown rule names, missing or unexpected parameters and malformed
    parameter lists all land here. ``field`` and ``rule`` point at the
    offending declaration.
    """

    def __init__(self, field: str, rule: str, reason: str) -> None:
        self.field = field
        self.rule = rule
        self.reason = reason
        super().__init__(f"Invalid rule {rule!r} for field {field!r}: {reason}")


class RecordCheckError(WrenError):
    """The record store failed while checking a ``unique`` rule.

    Always chained to the underlying exception. A failed query is never
    treated as "unique" or "taken".
    """
