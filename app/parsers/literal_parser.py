"""
app/parsers/literal_parser.py

Non-executing parser for account import payloads.

Accepts strict JSON and the JavaScript-style data exports operators tend to
upload (``const accounts = [...]``, ``module.exports = [...]``,
``export default [...]``). Only declarative literals are recognised: objects,
arrays, strings, numbers, booleans and null. Anything else, including
identifiers, calls and operators, is rejected with MalformedPayloadError.
The payload text is never evaluated.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any

DEFAULT_MAX_DEPTH = 32
# Same bound CPython 3.11+ applies to int() on decimal strings.
MAX_INTEGER_DIGITS = 4300

_NUMBER_RE = re.compile(
    r"[+-]?(?:0[xX][0-9a-fA-F]+|(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)"
)
_IDENT_RE = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")
_PUNCTUATION = frozenset("{}[]:,;=.()")
_DECLARATION_KEYWORDS = frozenset({"const", "let", "var"})
_LITERAL_KEYWORDS: dict[str, Any] = {"true": True, "false": False, "null": None}
_SIMPLE_ESCAPES = {
    '"': '"',
    "'": "'",
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "0": "\0",
}


class MalformedPayloadError(ValueError):
    """
    Raised when an import payload cannot be read as an array of records.
    """

    def __init__(self, message: str, *, line: int | None = None, column: int | None = None) -> None:
        if line is not None and column is not None:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message)
        self.line = line
        self.column = column

    def to_dict(self) -> dict[str, object]:
        return {"message": str(self), "accounts": []}


class PayloadTooLargeError(MalformedPayloadError):
    """
    Raised when an import payload exceeds the configured size limit.
    """


@dataclass(frozen=True)
class _Token:
    kind: str  # "punct", "string", "number", "ident", "eof"
    value: Any
    pos: int


def _line_and_column(text: str, pos: int) -> tuple[int, int]:
    line = text.count("\n", 0, pos) + 1
    column = pos - text.rfind("\n", 0, pos)
    return line, column


class _Tokenizer:
    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def error(self, message: str, pos: int) -> MalformedPayloadError:
        line, column = _line_and_column(self._text, pos)
        return MalformedPayloadError(message, line=line, column=column)

    def tokenize(self) -> list[_Token]:
        tokens: list[_Token] = []
        text = self._text
        while True:
            self._skip_whitespace_and_comments()
            if self._pos >= len(text):
                tokens.append(_Token("eof", None, self._pos))
                return tokens

            char = text[self._pos]
            if char in "\"'":
                tokens.append(self._read_string(char))
            elif char == "`":
                raise self.error("Template literals are not allowed", self._pos)
            elif char.isdigit() or (char in "+-." and _NUMBER_RE.match(text, self._pos)):
                tokens.append(self._read_number())
            elif char in _PUNCTUATION:
                tokens.append(_Token("punct", char, self._pos))
                self._pos += 1
            else:
                match = _IDENT_RE.match(text, self._pos)
                if match is None:
                    raise self.error(f"Unexpected character {char!r}", self._pos)
                tokens.append(_Token("ident", match.group(0), self._pos))
                self._pos = match.end()

    def _skip_whitespace_and_comments(self) -> None:
        text = self._text
        while self._pos < len(text):
            char = text[self._pos]
            if char.isspace():
                self._pos += 1
            elif text.startswith("//", self._pos):
                newline = text.find("\n", self._pos)
                self._pos = len(text) if newline == -1 else newline + 1
            elif text.startswith("/*", self._pos):
                end = text.find("*/", self._pos + 2)
                if end == -1:
                    raise self.error("Unterminated block comment", self._pos)
                self._pos = end + 2
            else:
                return

    def _read_number(self) -> _Token:
        start = self._pos
        match = _NUMBER_RE.match(self._text, start)
        if match is None:
            raise self.error("Invalid number", start)
        raw = match.group(0)
        end = match.end()
        if end < len(self._text) and (self._text[end].isalnum() or self._text[end] in "_$"):
            raise self.error("Invalid number", start)

        unsigned = raw.lstrip("+-")
        negative = raw.startswith("-")
        value: int | float
        if len(unsigned) > MAX_INTEGER_DIGITS:
            raise self.error("Number is out of range", start)
        try:
            if unsigned[:2].lower() == "0x":
                value = int(unsigned, 16)
            elif any(marker in unsigned for marker in ".eE"):
                value = float(unsigned)
            else:
                value = int(unsigned)
        except ValueError as exc:
            raise self.error("Number is out of range", start) from exc
        if isinstance(value, float) and not math.isfinite(value):
            raise self.error("Number is out of range", start)
        self._pos = end
        return _Token("number", -value if negative else value, start)

    def _read_string(self, quote: str) -> _Token:
        text = self._text
        start = self._pos
        self._pos += 1
        chunks: list[str] = []
        while True:
            if self._pos >= len(text):
                raise self.error("Unterminated string", start)
            char = text[self._pos]
            if char == quote:
                self._pos += 1
                break
            if char in "\r\n":
                raise self.error("Unterminated string", start)
            if char != "\\":
                chunks.append(char)
                self._pos += 1
                continue

            self._pos += 1
            if self._pos >= len(text):
                raise self.error("Unterminated string", start)
            escape = text[self._pos]
            if escape in _SIMPLE_ESCAPES:
                chunks.append(_SIMPLE_ESCAPES[escape])
                self._pos += 1
            elif escape == "x":
                chunks.append(self._read_hex_escape(2))
            elif escape == "u":
                chunks.append(self._read_hex_escape(4))
            elif escape == "\n":
                # line continuation
                self._pos += 1
            else:
                raise self.error(f"Invalid escape sequence '\\{escape}'", self._pos - 1)

        value = "".join(chunks)
        if any("\ud800" <= ch <= "\udfff" for ch in value):
            try:
                value = value.encode("utf-16", "surrogatepass").decode("utf-16")
            except UnicodeDecodeError as exc:
                raise self.error("Invalid unicode escape in string", start) from exc
        return _Token("string", value, start)

    def _read_hex_escape(self, width: int) -> str:
        start = self._pos - 1
        digits = self._text[self._pos + 1 : self._pos + 1 + width]
        if len(digits) != width or any(ch not in "0123456789abcdefABCDEF" for ch in digits):
            raise self.error("Invalid hex escape sequence", start)
        self._pos += 1 + width
        return chr(int(digits, 16))


class _Parser:
    def __init__(self, text: str, tokens: list[_Token], max_depth: int) -> None:
        self._text = text
        self._tokens = tokens
        self._index = 0
        self._max_depth = max_depth

    def parse_document(self) -> Any:
        self._skip_export_prefix()
        value = self._parse_value(depth=0)
        if self._is_punct(";"):
            self._advance()
        token = self._peek()
        if token.kind != "eof":
            raise self._unexpected(token, "Unexpected content after data literal")
        return value

    def _skip_export_prefix(self) -> None:
        token = self._peek()
        if token.kind != "ident":
            return

        if token.value == "export":
            self._advance()
            following = self._peek()
            if following.kind == "ident" and following.value == "default":
                self._advance()
                return
            if following.kind == "ident" and following.value in _DECLARATION_KEYWORDS:
                self._skip_declaration()
                return
            raise self._unexpected(following, "Expected 'default' or a declaration after 'export'")

        if token.value in _DECLARATION_KEYWORDS:
            self._skip_declaration()
            return

        if token.value == "module":
            self._advance()
            self._expect_punct(".")
            exports = self._advance()
            if exports.kind != "ident" or exports.value != "exports":
                raise self._unexpected(exports, "Expected 'module.exports'")
            self._expect_punct("=")

    def _skip_declaration(self) -> None:
        self._advance()
        name = self._advance()
        if name.kind != "ident" or name.value in _LITERAL_KEYWORDS:
            raise self._unexpected(name, "Expected a variable name")
        self._expect_punct("=")

    def _parse_value(self, *, depth: int) -> Any:
        token = self._peek()
        if token.kind == "punct" and token.value in "{[":
            if depth >= self._max_depth:
                raise self._error(f"Nesting exceeds maximum depth of {self._max_depth}", token)
            if token.value == "{":
                return self._parse_object(depth=depth + 1)
            return self._parse_array(depth=depth + 1)

        self._advance()
        if token.kind in ("string", "number"):
            return token.value
        if token.kind == "ident":
            if token.value in _LITERAL_KEYWORDS:
                return _LITERAL_KEYWORDS[token.value]
            if self._is_punct("("):
                raise self._error(f"Function calls are not allowed: '{token.value}(...)'", token)
            raise self._error(f"Unexpected identifier '{token.value}'", token)
        raise self._unexpected(token, "Expected a literal value")

    def _parse_object(self, *, depth: int) -> dict[str, Any]:
        self._expect_punct("{")
        result: dict[str, Any] = {}
        while not self._is_punct("}"):
            key_token = self._advance()
            if key_token.kind in ("string", "ident"):
                key = key_token.value
            elif key_token.kind == "number":
                key = str(key_token.value)
            else:
                raise self._unexpected(key_token, "Expected a property name")
            self._expect_punct(":")
            result[key] = self._parse_value(depth=depth)
            if not self._is_punct(","):
                break
            self._advance()
        self._expect_punct("}")
        return result

    def _parse_array(self, *, depth: int) -> list[Any]:
        self._expect_punct("[")
        result: list[Any] = []
        while not self._is_punct("]"):
            result.append(self._parse_value(depth=depth))
            if not self._is_punct(","):
                break
            self._advance()
        self._expect_punct("]")
        return result

    def _peek(self) -> _Token:
        return self._tokens[self._index]

    def _advance(self) -> _Token:
        token = self._tokens[self._index]
        if token.kind != "eof":
            self._index += 1
        return token

    def _is_punct(self, value: str) -> bool:
        token = self._peek()
        return token.kind == "punct" and token.value == value

    def _expect_punct(self, value: str) -> None:
        token = self._advance()
        if token.kind != "punct" or token.value != value:
            raise self._unexpected(token, f"Expected '{value}'")

    def _unexpected(self, token: _Token, message: str) -> MalformedPayloadError:
        if token.kind == "eof":
            return self._error(f"{message}, found end of input", token)
        return self._error(f"{message}, found {token.value!r}", token)

    def _error(self, message: str, token: _Token) -> MalformedPayloadError:
        line, column = _line_and_column(self._text, token.pos)
        return MalformedPayloadError(message, line=line, column=column)


def parse_literal(text: str, *, max_depth: int = DEFAULT_MAX_DEPTH) -> Any:
    """
    Parse one data literal, optionally preceded by an export/assignment prefix.

    Raises MalformedPayloadError on any token outside the literal grammar.
    """

    tokens = _Tokenizer(text).tokenize()
    return _Parser(text, tokens, max(1, max_depth)).parse_document()


def decode_account_payload(
    raw: bytes | str,
    *,
    max_bytes: int | None = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> list[Any]:
    """
    Decode an uploaded payload into the ordered list of candidate records.

    Args:
        raw:        Uploaded file content; bytes are read as UTF-8 (BOM allowed).
        max_bytes:  Optional size ceiling for the encoded payload.
        max_depth:  Maximum object/array nesting depth.

    Raises:
        PayloadTooLargeError:  payload exceeds ``max_bytes``.
        MalformedPayloadError: payload is not UTF-8, not a recognised data
                               literal, or its root is not an array.
    """

    size = len(raw) if isinstance(raw, bytes) else len(raw.encode("utf-8"))
    if max_bytes is not None and size > max_bytes:
        raise PayloadTooLargeError(f"Payload exceeds the maximum size of {max_bytes} bytes.")

    if isinstance(raw, bytes):
        try:
            text = raw.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise MalformedPayloadError("Payload must be UTF-8 encoded.") from exc
    else:
        text = raw.lstrip("\ufeff")

    if not text.strip():
        raise MalformedPayloadError("Payload is empty.")

    document = parse_literal(text, max_depth=max_depth)
    if not isinstance(document, list):
        raise MalformedPayloadError("File must contain an array of accounts.")
    return document
