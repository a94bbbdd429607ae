"""Built-in rule table.

Each rule is a check with the signature::

    def check(ctx: RuleContext, arg: Any) -> RuleFailure | None:
        '''Return a failure, or None if the value passes.'''

``arg`` is whatever the rule's ``prepare`` function produced from the
raw parameter text. Parameters are prepared once, when the validator is
built, so a malformed declaration fails before any value is inspected::

    def prepare_unique(field: str, param: str) -> UniqueTarget:
        ...  # raise RuleSyntaxError on bad input

Rules without a ``prepare`` function take no parameter. Dispatch is a
static name -> ``Rule`` mapping (``RULES``); there is no attribute
lookup on user-supplied names.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from numbers import Real
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Final, TypeAlias, TypedDict

from wren.errors import ConfigurationError, RecordCheckError, RuleSyntaxError
from wren.messages import ErrorKind
from wren.records import RecordChecker, is_identifier
from wren.validation.parser import ParsedRule

if TYPE_CHECKING:
    from wren.config import ValidatorConfig


class _Missing:
    """Marker for a field with no key in the submitted data."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final = _Missing()

# Control keyword, handled by the validator rather than the rule table
NULLABLE: Final = "nullable"


class UploadedFile(TypedDict, total=False):
    """Shape of a submitted file, as produced by form/multipart glue."""

    name: str
    type: str
    tmp_name: str
    error: int
    size: int


@dataclass(frozen=True, slots=True)
class RuleContext:
    """Everything a check may look at for the field being validated."""

    field: str
    value: Any
    data: Mapping[str, Any]
    config: ValidatorConfig
    checker: RecordChecker | None = None

    @property
    def exists(self) -> bool:
        """True when the field has a key in the data (value may be blank)."""
        return self.value is not MISSING


@dataclass(frozen=True, slots=True)
class RuleFailure:
    """A failed check: which template to use and what to fill into it."""

    kind: ErrorKind
    replacements: Mapping[str, str] = field(default_factory=dict)


Check: TypeAlias = Callable[[RuleContext, Any], RuleFailure | None]
Prepare: TypeAlias = Callable[[str, str], Any]


@dataclass(frozen=True, slots=True)
class Rule:
    """A named entry in the rule table."""

    name: str
    check: Check
    prepare: Prepare | None = None
    needs_checker: bool = False


@dataclass(frozen=True, slots=True)
class BoundRule:
    """A parsed rule resolved against the table, parameter prepared."""

    rule: Rule
    source: ParsedRule
    arg: Any = None

    def __call__(self, ctx: RuleContext) -> RuleFailure | None:
        return self.rule.check(ctx, self.arg)


# ---------------------------------------------------------------------------
# Value helpers
# ---------------------------------------------------------------------------


def is_upload(value: Any) -> bool:
    """True if *value* is a structured upload record rather than a scalar."""
    return isinstance(value, Mapping)


def _as_text(value: Any) -> str | None:
    """Text form of a scalar for comparisons, or None for non-scalars."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, (float, Decimal)):
        return str(int(value)) if _is_integral(value) else str(value)
    return None


def _is_integral(value: float | Decimal) -> bool:
    if isinstance(value, Decimal):
        return value.is_finite() and value == value.to_integral_value()
    return value.is_integer()


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, Real):
        return float(value)
    if isinstance(value, Decimal):
        return float(value) if value.is_finite() else None
    if isinstance(value, str) and _NUMERIC_RE.fullmatch(value):
        return float(value)
    return None


def _is_blank(value: Any) -> bool:
    """Blank for ``required_if``: absent, None, False, "", "0", 0, or empty collection."""
    if value is MISSING or value is None or value is False:
        return True
    if isinstance(value, str):
        return value in ("", "0")
    if isinstance(value, Decimal):
        return value.is_zero()
    if isinstance(value, Real):
        return value == 0
    if isinstance(value, (Mapping, list, tuple, set, frozenset)):
        return len(value) == 0
    return False


def _extension(filename: str) -> str:
    """Lowercased extension after the last dot of the base name."""
    base = filename.replace("\\", "/").rsplit("/", 1)[-1]
    if "." not in base:
        return ""
    return base.rsplit(".", 1)[1].lower()


def _is_empty_upload(record: Mapping[str, Any]) -> bool:
    """The record a browser submits for a file input left empty."""
    return (
        not record.get("name")
        and not record.get("type")
        and not record.get("tmp_name")
        and _as_number(record.get("error")) == 4
        and _as_number(record.get("size")) == 0
    )


# ---------------------------------------------------------------------------
# Presence
# ---------------------------------------------------------------------------


def required(ctx: RuleContext, _: Any) -> RuleFailure | None:
    """Field must be present, not None, and not the empty string."""
    value = ctx.value
    if not ctx.exists or value is None or (isinstance(value, str) and value == ""):
        return RuleFailure(ErrorKind.REQUIRED)
    return None


def prepare_required_if(field: str, param: str) -> tuple[str, str]:
    other, sep, expected = param.partition(",")
    if not sep or not other:
        raise RuleSyntaxError(field, f"required_if:{param}", "expected 'other_field,value'")
    return other, expected


def required_if(ctx: RuleContext, arg: tuple[str, str]) -> RuleFailure | None:
    """Field must not be blank when another field equals a given value."""
    other, expected = arg
    other_value = ctx.data.get(other)
    if other_value is None or _as_text(other_value) != expected:
        return None
    if _is_blank(ctx.value):
        return RuleFailure(ErrorKind.REQUIRED)
    return None


# ---------------------------------------------------------------------------
# Choice
# ---------------------------------------------------------------------------


def prepare_in(field: str, param: str) -> tuple[str, ...]:
    return tuple(param.split(","))


def in_(ctx: RuleContext, allowed: tuple[str, ...]) -> RuleFailure | None:
    """Value must be one of the listed options (exact text match)."""
    if not ctx.exists:
        return None
    if _as_text(ctx.value) not in allowed:
        return RuleFailure(ErrorKind.IN, {"value": ", ".join(allowed)})
    return None


# ---------------------------------------------------------------------------
# Format
# ---------------------------------------------------------------------------

_LETTERS_RE = re.compile(r"[a-zA-Z ]+")
_NUMERIC_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_TIME_RE = re.compile(r"(2[0-3]|[01]?[0-9]):([0-5][0-9])")


def string(ctx: RuleContext, _: Any) -> RuleFailure | None:
    """Letters and spaces only. Blank values pass."""
    value = ctx.value
    if not ctx.exists or value is None or value == "":
        return None
    if not isinstance(value, str) or not _LETTERS_RE.fullmatch(value):
        return RuleFailure(ErrorKind.STRING)
    return None


def number(ctx: RuleContext, _: Any) -> RuleFailure | None:
    """Integer or decimal, as a number or a numeric string."""
    if ctx.exists and _as_number(ctx.value) is None:
        return RuleFailure(ErrorKind.NUMBER)
    return None


def time(ctx: RuleContext, _: Any) -> RuleFailure | None:
    """24-hour ``H:MM`` / ``HH:MM``."""
    if not ctx.exists:
        return None
    if not isinstance(ctx.value, str) or not _TIME_RE.fullmatch(ctx.value):
        return RuleFailure(ErrorKind.TIME)
    return None


# ---------------------------------------------------------------------------
# Uploads
# ---------------------------------------------------------------------------


def image(ctx: RuleContext, _: Any) -> RuleFailure | None:
    """Uploaded file must carry an image extension. Empty uploads are skipped."""
    value = ctx.value
    if not ctx.exists or not is_upload(value) or _is_empty_upload(value):
        return None
    name = value.get("name")
    extension = _extension(name) if isinstance(name, str) else ""
    if extension not in ctx.config.image_extensions:
        return RuleFailure(ErrorKind.IMAGE)
    return None


def size_limit(rule: str) -> Prepare:
    """Parameter preparer for the kilobyte limit of *rule* (``min``/``max``)."""

    def prepare(field: str, param: str) -> tuple[float, str]:
        kb = _as_number(param.strip())
        if kb is None:
            msg = "size limit must be a number of kilobytes"
            raise RuleSyntaxError(field, f"{rule}:{param}", msg)
        return kb, param

    return prepare


def _upload_kb(ctx: RuleContext) -> float | None:
    value = ctx.value
    if not ctx.exists or not is_upload(value) or "size" not in value:
        return None
    size = _as_number(value["size"])
    return None if size is None else size / 1024


def min_(ctx: RuleContext, arg: tuple[float, str]) -> RuleFailure | None:
    """Uploaded file must be at least ``kb`` kilobytes."""
    kb, raw = arg
    size_kb = _upload_kb(ctx)
    if size_kb is not None and size_kb < kb:
        return RuleFailure(ErrorKind.MIN, {"value": raw})
    return None


def max_(ctx: RuleContext, arg: tuple[float, str]) -> RuleFailure | None:
    """Uploaded file must be at most ``kb`` kilobytes."""
    kb, raw = arg
    size_kb = _upload_kb(ctx)
    if size_kb is not None and size_kb > kb:
        return RuleFailure(ErrorKind.MAX, {"value": raw})
    return None


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------

EXCEPT_KEYWORD: Final = "except_id"


@dataclass(frozen=True, slots=True)
class UniqueTarget:
    """Prepared ``unique`` parameter."""

    table: str
    column: str
    except_value: str | None = None


def prepare_unique(field: str, param: str) -> UniqueTarget:
    parts = param.split(",")
    if len(parts) < 2 or len(parts) > 4:
        raise RuleSyntaxError(
            field, f"unique:{param}", "expected 'table,column' or 'table,column,except_id,value'"
        )
    table, column = parts[0], parts[1]
    for name in (table, column):
        if not is_identifier(name):
            raise RuleSyntaxError(field, f"unique:{param}", f"{name!r} is not a valid identifier")

    except_value = None
    if len(parts) == 4 and parts[2] == EXCEPT_KEYWORD and parts[3]:
        except_value = parts[3]
    return UniqueTarget(table, column, except_value)


def unique(ctx: RuleContext, target: UniqueTarget) -> RuleFailure | None:
    """No existing record may hold this value (optionally ignoring one id)."""
    if not ctx.exists:
        return None
    if ctx.checker is None:
        msg = f"unique rule on {ctx.field!r} needs a record checker"
        raise ConfigurationError(msg)

    value = ctx.value
    if isinstance(value, Decimal):
        value = _as_text(value)
    elif value is not None and _as_text(value) is None:
        # lists and upload records are never looked up
        return RuleFailure(ErrorKind.UNIQUE)

    except_column = ctx.config.except_id_column if target.except_value is not None else None
    try:
        count = ctx.checker.exists_record(
            target.table, target.column, value, except_column, target.except_value
        )
    except (ConfigurationError, RecordCheckError):
        raise
    except Exception as exc:
        msg = f"Uniqueness check failed for {ctx.field!r} on {target.table}.{target.column}: {exc}"
        raise RecordCheckError(msg) from exc

    if count > 0:
        return RuleFailure(ErrorKind.UNIQUE)
    return None


# ---------------------------------------------------------------------------
# Table
# ---------------------------------------------------------------------------

RULES: Mapping[str, Rule] = MappingProxyType(
    {
        "required": Rule("required", required),
        "required_if": Rule("required_if", required_if, prepare_required_if),
        "in": Rule("in", in_, prepare_in),
        "string": Rule("string", string),
        "number": Rule("number", number),
        "time": Rule("time", time),
        "image": Rule("image", image),
        "min": Rule("min", min_, size_limit("min")),
        "max": Rule("max", max_, size_limit("max")),
        "unique": Rule("unique", unique, prepare_unique, needs_checker=True),
    }
)


def bind(field: str, parsed: ParsedRule) -> BoundRule:
    """Resolve *parsed* against ``RULES`` and prepare its parameter.

    Raises ``RuleSyntaxError`` for unknown names and for a parameter
    that is missing, unexpected, or malformed.
    """
    rule = RULES.get(parsed.name)
    if rule is None:
        known = ", ".join([NULLABLE, *sorted(RULES)])
        raise RuleSyntaxError(field, str(parsed), f"unknown rule. Known rules: {known}")

    prepare = rule.prepare
    if prepare is None:
        if parsed.param is not None:
            raise RuleSyntaxError(field, str(parsed), "this rule takes no parameter")
        return BoundRule(rule, parsed)

    if parsed.param is None or parsed.param == "":
        raise RuleSyntaxError(field, str(parsed), "this rule requires a parameter")
    return BoundRule(rule, parsed, prepare(field, parsed.param))
