"""PHP coverage snapshot parser.

PHPUnit's --coverage-php writes a PHP script that rebuilds the coverage
object; hand-made fixtures often just return an array literal:

    <?php return ['src/Domain/User.php' => [10 => 1, 11 => null, 12 => 0]];

    <?php
    $coverage = new SebastianBergmann\\CodeCoverage\\CodeCoverage;
    $coverage->setData(array ('src/Legacy.php' => array (1 => array (0 => 'testFoo'))));
    return $coverage;

    <?php return \\unserialize(<<<'END_OF_COVERAGE_SERIALIZATION'
    a:1:{...}
    END_OF_COVERAGE_SERIALIZATION);

The script is never executed. It is read as a sequence of statements where
only data literals, object construction, property/setData assignment and
unserialize() calls are understood; other statements are skipped. The value
of the first ``return`` is the snapshot:

- an object: unwrapped through its ``data`` property, then normalized as
  nested test lists
- an array with a "coverage" key: taken as ``path -> line -> count``
- any other array: normalized as nested test lists
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, NamedTuple

import phpserialize

from covgraph.config.constants import EMBEDDED_CODE_SUFFIXES
from covgraph.coverage.lines import normalize_counts, normalize_nested
from covgraph.coverage.models import CoverageMap, CoverageParseError

from .base import hint_suffix
from .serialized import load_serialized, unwrap_snapshot

_OPEN_TAG = re.compile(rb"^\s*<\?php\b")
_CLOSE_TAG = re.compile(rb"\?>\s*$")
_DECIMAL_KEY = re.compile(r"^(?:-?[1-9]\d*|0)$")

_TOKEN_RE = re.compile(
    r"""
      (?P<skip>\s+|//[^\n]*|\#(?!\[)[^\n]*|/\*.*?\*/)
    | (?P<heredoc><<<[ \t]*(?P<quote>['"]?)(?P<tag>[A-Za-z_]\w*)(?P=quote)\r?\n
                  (?P<body>.*?)\r?\n[ \t]*(?P=tag)\b)
    | (?P<string>'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*")
    | (?P<number>\d+\.\d+|\d+)
    | (?P<variable>\$[A-Za-z_]\w*)
    | (?P<name>\\?[A-Za-z_][\w\\]*)
    | (?P<op>=>|->|::|[-\[\](),;=&])
    | (?P<other>\S)
    """,
    re.VERBOSE | re.DOTALL,
)

_DOUBLE_QUOTE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "0": "\0",
    "\\": "\\",
    '"': '"',
    "$": "$",
}


class _Token(NamedTuple):
    kind: str
    value: str


@dataclass(slots=True)
class _Snapshot:
    """An object built by the script (``new CodeCoverage``)."""

    class_name: str
    properties: dict[str, Any] = field(default_factory=dict)


_NO_RETURN = object()


def _tokenize(source: str) -> list[_Token]:
    tokens = []
    for match in _TOKEN_RE.finditer(source):
        kind = match.lastgroup
        if kind == "skip":
            continue
        if kind == "heredoc":
            tokens.append(_Token("heredoc", match.group("body")))
        else:
            tokens.append(_Token(kind or "other", match.group(0)))
    return tokens


def _unquote(literal: str) -> str:
    body = literal[1:-1]
    if literal[0] == "'":
        return re.sub(r"\\([\\'])", r"\1", body)
    return re.sub(
        r"\\(.)",
        lambda m: _DOUBLE_QUOTE_ESCAPES.get(m.group(1), m.group(0)),
        body,
    )


def _array_key(key: Any) -> int | str:
    """Apply PHP's array key casting rules."""
    if key is None:
        return ""
    if isinstance(key, bool | int | float):
        return int(key)
    text = str(key)
    if _DECIMAL_KEY.match(text):
        return int(text)
    return text


class _ScriptReader:
    """Reads statements from a tokenized PHP snapshot script."""

    def __init__(self, tokens: list[_Token]) -> None:
        self._tokens = tokens
        self._pos = 0
        self._vars: dict[str, Any] = {}

    def _peek(self, offset: int = 0) -> _Token | None:
        idx = self._pos + offset
        return self._tokens[idx] if idx < len(self._tokens) else None

    def _at(self, kind: str, value: str | None = None, offset: int = 0) -> bool:
        tok = self._peek(offset)
        return tok is not None and tok.kind == kind and (value is None or tok.value == value)

    def _next(self) -> _Token:
        tok = self._peek()
        if tok is None:
            raise CoverageParseError("Unexpected end of PHP script")
        self._pos += 1
        return tok

    def _expect(self, kind: str, value: str) -> None:
        tok = self._next()
        if tok.kind != kind or tok.value != value:
            raise CoverageParseError(f"Expected {value!r}, got {tok.value!r}")

    def run(self) -> Any:
        """Evaluate statements until the first return."""
        while (tok := self._peek()) is not None:
            result = self._statement(tok)
            if result is not _NO_RETURN:
                return result
        raise CoverageParseError("PHP script has no return statement")

    def _statement(self, tok: _Token) -> Any:
        """Evaluate one statement starting at tok, the current token."""
        if tok.kind == "name" and tok.value.lower() == "return":
            self._next()
            value = self._expression()
            self._end_statement()
            return value

        if tok.kind == "variable" and self._at("op", "=", 1):
            start = self._pos
            self._pos += 2
            try:
                value = self._expression()
                self._end_statement()
            except CoverageParseError:
                # Unsupported right-hand side ($filter = $coverage->filter();)
                self._pos = start
                self._skip_statement()
                value = None
            self._vars[tok.value] = value
            return _NO_RETURN

        if tok.kind == "variable" and self._at("op", "->", 1) and self._at("name", offset=2):
            target = self._vars.get(tok.value)
            member = self._tokens[self._pos + 2].value
            if isinstance(target, _Snapshot):
                if self._at("op", "=", 3):
                    self._pos += 4
                    target.properties[member] = self._expression()
                    self._end_statement()
                    return _NO_RETURN
                if member.lower() == "setdata" and self._at("op", "(", 3):
                    self._pos += 4
                    target.properties["data"] = self._expression()
                    self._expect("op", ")")
                    self._end_statement()
                    return _NO_RETURN

        self._skip_statement()
        return _NO_RETURN

    def _end_statement(self) -> None:
        if self._peek() is not None:
            self._expect("op", ";")

    def _skip_statement(self) -> None:
        depth = 0
        while (tok := self._peek()) is not None:
            self._pos += 1
            if tok.kind != "op":
                continue
            if tok.value in ("(", "["):
                depth += 1
            elif tok.value in (")", "]"):
                depth -= 1
            elif tok.value == ";" and depth <= 0:
                return

    def _expression(self) -> Any:
        tok = self._next()

        if tok.kind == "op":
            if tok.value == "[":
                return self._array("]")
            if tok.value == "-" and self._at("number"):
                return -self._number(self._next().value)
            if tok.value == "&":
                return self._expression()
            if tok.value == "(":
                value = self._expression()
                self._expect("op", ")")
                return value

        if tok.kind == "string":
            return _unquote(tok.value)
        if tok.kind == "heredoc":
            return tok.value
        if tok.kind == "number":
            return self._number(tok.value)
        if tok.kind == "variable":
            if tok.value not in self._vars:
                raise CoverageParseError(f"Undefined variable {tok.value}")
            return self._vars[tok.value]

        if tok.kind == "name":
            word = tok.value.lstrip("\\").lower()
            if word == "null":
                return None
            if word == "true":
                return True
            if word == "false":
                return False
            if word == "array" and self._at("op", "("):
                self._next()
                return self._array(")")
            if word == "new" and self._at("name"):
                class_name = self._next().value.lstrip("\\")
                if self._at("op", "("):
                    self._next()
                    self._skip_arguments()
                return _Snapshot(class_name)
            if word == "unserialize" and self._at("op", "("):
                self._next()
                payload = self._expression()
                self._expect("op", ")")
                if not isinstance(payload, str):
                    raise CoverageParseError("unserialize() expects a string")
                return load_serialized(payload.strip().encode("utf-8"))

        raise CoverageParseError(f"Unsupported PHP expression near {tok.value!r}")

    def _number(self, text: str) -> int | float:
        return float(text) if "." in text else int(text)

    def _skip_arguments(self) -> None:
        depth = 1
        while depth:
            tok = self._next()
            if tok.kind == "op" and tok.value == "(":
                depth += 1
            elif tok.kind == "op" and tok.value == ")":
                depth -= 1

    def _array(self, close: str) -> dict[int | str, Any]:
        result: dict[int | str, Any] = {}
        next_index = 0
        while not self._at("op", close):
            value = self._expression()
            if self._at("op", "=>"):
                self._next()
                key = _array_key(value)
                value = self._expression()
                if isinstance(key, int):
                    next_index = max(next_index, key + 1)
            else:
                key = next_index
                next_index += 1
            result[key] = value
            if not self._at("op", ","):
                break
            self._next()
        self._expect("op", close)
        return result


class PhpSourceParser:
    """Parser for PHP coverage snapshot scripts."""

    @property
    def format_id(self) -> str:
        return "php"

    def can_parse(self, data: bytes, hint: str) -> bool:  # noqa: ARG002
        """Only attempted for .php/.cov hints."""
        return hint_suffix(hint) in EMBEDDED_CODE_SUFFIXES

    def parse(self, data: bytes) -> CoverageMap:
        """Read the returned value of the script and normalize it."""
        if not _OPEN_TAG.match(data):
            raise CoverageParseError("Missing <?php open tag")

        source = _CLOSE_TAG.sub(b"", _OPEN_TAG.sub(b"", data, count=1))
        try:
            text = source.decode("utf-8")
        except UnicodeDecodeError as e:
            raise CoverageParseError(f"PHP script is not UTF-8: {e}") from e

        value = _ScriptReader(_tokenize(text)).run()

        if isinstance(value, _Snapshot):
            if "data" not in value.properties:
                raise CoverageParseError(f"{value.class_name} object carries no data")
            value = value.properties["data"]
        if isinstance(value, phpserialize.phpobject):
            value = unwrap_snapshot(value)

        if isinstance(value, Mapping) and "coverage" in value:
            return CoverageMap.from_lines(self.format_id, normalize_counts(value["coverage"]))
        return CoverageMap.from_lines(self.format_id, normalize_nested(value))
