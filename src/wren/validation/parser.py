"""Rule string parsing.

Grammar::

    rules   := segment ('|' segment)*
    segment := name | name ':' parameter

There is no escaping. ``|`` always ends a segment and only the first
``:`` separates the name from its parameter, so parameters may carry
further colons and commas (``in:09:00,17:30``). Whitespace around a
segment is stripped; the parameter text itself is kept verbatim.
"""

from dataclasses import dataclass

from wren.errors import RuleSyntaxError


@dataclass(frozen=True, slots=True)
class ParsedRule:
    """One segment of a rule string: a rule name and its raw parameter."""

    name: str
    param: str | None = None

    def __str__(self) -> str:
        if self.param is None:
            return self.name
        return f"{self.name}:{self.param}"


def parse_rules(field: str, spec: str, *, strict: bool = False) -> tuple[ParsedRule, ...]:
    """Split a rule string into ordered ``ParsedRule`` entries.

    Empty segments (``"required|"``, ``"a||b"``) are dropped unless
    *strict* is set, in which case they raise ``RuleSyntaxError``.
    A segment with an empty name (``":10"``) is always an error.
    """
    parsed: list[ParsedRule] = []
    for raw in spec.split("|"):
        segment = raw.strip()
        if not segment:
            if strict:
                raise RuleSyntaxError(field, spec, "empty rule segment")
            continue

        name, sep, param = segment.partition(":")
        name = name.strip()
        if not name:
            raise RuleSyntaxError(field, segment, "missing rule name")
        parsed.append(ParsedRule(name, param if sep else None))

    return tuple(parsed)
