"""
Snippetbox — Form Validation
=============================

What:  Stateless predicate functions plus the `Validator` error accumulator
       that every form carries.
How:   Handlers call `form.check_field(predicate(...), field, message)` once per
       rule, in a fixed order, then branch on `form.valid()`.

Field error semantics:
    FieldErrors keeps one message per field and the FIRST failing rule wins.
    A later failing rule on the same field is recorded nowhere, so rules for a
    field should be ordered from most to least fundamental (blank before length).
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Pattern, Protocol, runtime_checkable

# W3C's recommended pattern for <input type="email">
EMAIL_RX: Pattern[str] = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)


# ══════════════════════════════════════════════════════════════════════════
# Predicates
# ══════════════════════════════════════════════════════════════════════════


def not_blank(value: str) -> bool:
    """False iff the value is empty after stripping whitespace."""
    return value.strip() != ""


def max_chars(value: str, n: int) -> bool:
    """True iff the value holds at most n characters."""
    return len(value) <= n


def min_chars(value: str, n: int) -> bool:
    """True iff the value holds at least n characters."""
    return len(value) >= n


def permitted_value(value, *permitted) -> bool:
    """True iff value equals one of the permitted values (exact set, not a range)."""
    return value in permitted


permitted_int = permitted_value


def matches(value: str, rx: Pattern[str]) -> bool:
    """True iff the whole value matches the compiled pattern."""
    return rx.fullmatch(value) is not None


# ══════════════════════════════════════════════════════════════════════════
# Accumulator
# ══════════════════════════════════════════════════════════════════════════


@runtime_checkable
class Validatable(Protocol):
    """Anything that accumulates field errors and can report validity."""

    field_errors: Dict[str, str]

    def check_field(self, ok: bool, key: str, message: str) -> None: ...

    def add_field_error(self, key: str, message: str) -> None: ...

    def valid(self) -> bool: ...


@dataclass
class Validator:
    """
    Error accumulator composed into every form.

    Attributes:
        field_errors:     field name → message shown next to that input
        non_field_errors: messages about the submission as a whole
    """

    field_errors: Dict[str, str] = field(default_factory=dict)
    non_field_errors: List[str] = field(default_factory=list)

    def valid(self) -> bool:
        return not self.field_errors and not self.non_field_errors

    def add_field_error(self, key: str, message: str) -> None:
        # First error per field wins
        if key not in self.field_errors:
            self.field_errors[key] = message

    def add_non_field_error(self, message: str) -> None:
        self.non_field_errors.append(message)

    def check_field(self, ok: bool, key: str, message: str) -> None:
        if not ok:
            self.add_field_error(key, message)
