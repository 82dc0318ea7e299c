# pattern_extractor.py

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Tuple


# -----------------------------------------------------------
# ERRORS
# -----------------------------------------------------------

class CompileError(ValueError):
    """Raised when a schema cannot be turned into a matcher."""


# -----------------------------------------------------------
# DATA MODEL
# -----------------------------------------------------------

@dataclass(frozen=True)
class FieldSpec:
    """
    One grammar element of a schema.

    name=None means the field is an anonymous separator: it has to match,
    but its text is thrown away.
    """
    name: Optional[str]
    pattern: str


def field(name: str, pattern: str) -> FieldSpec:
    return FieldSpec(name=name, pattern=pattern)


def sep(pattern: str) -> FieldSpec:
    return FieldSpec(name=None, pattern=pattern)


@dataclass(frozen=True)
class Matched:
    record: Mapping[str, str]

    def __bool__(self):
        return True


class _NotMatched:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "NotMatched"


NotMatched = _NotMatched()


# -----------------------------------------------------------
# COMPILED SCHEMA
# -----------------------------------------------------------

class CompiledSchema:
    """
    Matcher built from an ordered list of FieldSpecs.

    Holds no mutable state after construction, so a single instance can be
    shared between threads.
    """

    def __init__(self, regex: "re.Pattern", field_names: Tuple[str, ...]):
        self._regex = regex
        self._field_names = field_names

    @property
    def pattern(self) -> str:
        return self._regex.pattern

    @property
    def field_names(self) -> Tuple[str, ...]:
        return self._field_names

    def match(self, text: str):
        """
        Match `text` from its first character. Text left over after the last
        field is ignored. Returns Matched(record) or NotMatched.
        """
        if not isinstance(text, str):
            return NotMatched

        m = self._regex.match(text)
        if m is None:
            return NotMatched

        record = {name: m.group(name) for name in self._field_names}
        return Matched(MappingProxyType(record))

    def __repr__(self):
        return f"CompiledSchema(fields={list(self._field_names)!r})"


def compile_schema(schema: Iterable[FieldSpec], flags: int = 0) -> CompiledSchema:
    parts: List[str] = []
    names: List[str] = []

    for spec in schema:
        # each piece must be a complete expression on its own, otherwise
        # something like "a)(b" would splice into its neighbours' groups
        try:
            re.compile(spec.pattern, flags)
        except re.error as e:
            raise CompileError(f"invalid pattern {spec.pattern!r}: {e}") from e

        if spec.name is None:
            parts.append(f"(?:{spec.pattern})")
            continue

        if not spec.name.isidentifier():
            raise CompileError(f"invalid field name {spec.name!r}")
        if spec.name in names:
            raise CompileError(f"duplicate field name {spec.name!r}")

        names.append(spec.name)
        parts.append(f"(?P<{spec.name}>{spec.pattern})")

    combined = "".join(parts)
    try:
        regex = re.compile(combined, flags)
    except re.error as e:
        raise CompileError(f"invalid pattern {combined!r}: {e}") from e

    return CompiledSchema(regex, tuple(names))
