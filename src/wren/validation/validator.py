"""The Validator — runs every declared field through its rules.

Usage::

    v = Validator(
        {"name": "Ada", "email": "ada@example.com"},
        {"name": "required|string", "email": "required|unique:users,email"},
        checker=DatabaseRecordChecker(db),
    )
    if v.fails():
        return v.errors()
    save(v.validated())

Validation happens once, inside ``__init__``. Rule declarations are
parsed and bound before any value is inspected, so a malformed rule
raises ``RuleSyntaxError`` without leaving a half-validated instance.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from wren.config import ValidatorConfig
from wren.errors import RuleSyntaxError
from wren.messages import ErrorKind, render_message
from wren.records import RecordChecker
from wren.validation.parser import parse_rules
from wren.validation.result import ValidationResult
from wren.validation.rules import MISSING, NULLABLE, BoundRule, RuleContext, bind

logger = logging.getLogger("wren.validation")

_DEFAULT_CONFIG = ValidatorConfig()


@dataclass(frozen=True, slots=True)
class FieldFailure:
    """One recorded failure, in evaluation order."""

    field: str
    kind: ErrorKind
    message: str


@dataclass(frozen=True, slots=True)
class _FieldPlan:
    field: str
    nullable: bool
    rules: tuple[BoundRule, ...]


class Validator:
    """Validate *data* against pipe-delimited *rules*.

    Args:
        data: Submitted values keyed by field name. Never mutated.
        rules: Rule strings keyed by field name, e.g. ``"nullable|number"``.
            Only these fields are validated or returned by ``validated()``.
        checker: Record store consulted by ``unique`` rules. Required if
            any rule string uses ``unique``; never touched otherwise.
        config: Message templates and other knobs. Defaults to
            ``ValidatorConfig()``.

    Raises:
        RuleSyntaxError: A rule string is malformed.
        RecordCheckError: The record checker failed during a ``unique`` rule.
    """

    __slots__ = ("_checker", "_config", "_data", "_errors", "_failures", "_rules")

    def __init__(
        self,
        data: Mapping[str, Any],
        rules: Mapping[str, str],
        *,
        checker: RecordChecker | None = None,
        config: ValidatorConfig | None = None,
    ) -> None:
        self._data = data
        self._rules = rules
        self._checker = checker
        self._config = config or _DEFAULT_CONFIG
        self._errors: dict[str, list[str]] = {}
        self._failures: list[FieldFailure] = []

        plans = [self._plan(field, spec) for field, spec in rules.items()]
        for plan in plans:
            self._evaluate(plan)

    # -- Setup --

    def _plan(self, field: str, spec: str) -> _FieldPlan:
        if not isinstance(spec, str):
            raise RuleSyntaxError(field, repr(spec), "rule declaration must be a string")
        nullable = False
        bound: list[BoundRule] = []
        for parsed in parse_rules(field, spec, strict=self._config.strict_segments):
            if parsed.name == NULLABLE:
                if parsed.param is not None:
                    raise RuleSyntaxError(field, str(parsed), "nullable takes no parameter")
                nullable = True
                continue
            rule = bind(field, parsed)
            if rule.rule.needs_checker and self._checker is None:
                raise RuleSyntaxError(
                    field, str(parsed), "no record checker was given to the Validator"
                )
            bound.append(rule)
        return _FieldPlan(field, nullable, tuple(bound))

    # -- Evaluation --

    def _evaluate(self, plan: _FieldPlan) -> None:
        value = self._data.get(plan.field, MISSING)

        if plan.nullable and (value is MISSING or value is None or value == ""):
            # 0 and empty uploads are values, not emptiness
            logger.debug("Skipping nullable field %r: empty", plan.field)
            return

        logger.debug("Validating field %r against %d rule(s)", plan.field, len(plan.rules))
        ctx = RuleContext(
            field=plan.field,
            value=value,
            data=self._data,
            config=self._config,
            checker=self._checker,
        )
        for rule in plan.rules:
            failure = rule(ctx)
            if failure is None:
                continue
            template = self._config.message_for(failure.kind)
            message = render_message(template, plan.field, failure.replacements)
            self._errors.setdefault(plan.field, []).append(message)
            self._failures.append(FieldFailure(plan.field, failure.kind, message))
            logger.debug("Field %r failed %s", plan.field, rule.source)

    # -- Results --

    def errors(self) -> dict[str, list[str]]:
        """Messages per failing field, in rule order. Passing fields are absent."""
        return {field: list(messages) for field, messages in self._errors.items()}

    def failures(self) -> list[FieldFailure]:
        """Every failure with its ``ErrorKind``, in evaluation order."""
        return list(self._failures)

    def validated(self) -> dict[str, Any]:
        """Submitted values of declared fields only, in submission order."""
        return {field: value for field, value in self._data.items() if field in self._rules}

    def passes(self) -> bool:
        return not self._errors

    def fails(self) -> bool:
        return bool(self._errors)

    def result(self) -> ValidationResult:
        """Snapshot of ``validated()`` and ``errors()``."""
        return ValidationResult(data=self.validated(), errors=self.errors())

    def __repr__(self) -> str:
        state = "valid" if self.passes() else f"{len(self._errors)} invalid field(s)"
        return f"<Validator {len(self._rules)} field(s), {state}>"
