"""Located token stream over a configuration string.

Tokens come from the stdlib :mod:`tokenize` module so that string, number
and operator lexing follows Python's own rules. The text is wrapped in
parentheses before tokenizing, which lets options span several lines
without tripping indentation handling.
"""

from __future__ import annotations

import ast
import io
import tokenize
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from guardtype.domain.errors import AttributeSyntaxError
from guardtype.domain.spans import DEFAULT_SOURCE, Span

_OPENERS = frozenset("([{")
_CLOSERS = frozenset(")]}")
_SKIPPED = frozenset({"NL", "NEWLINE", "COMMENT", "INDENT", "DEDENT", "ENDMARKER"})


class TokenKind(StrEnum):
    NAME = "name"
    NUMBER = "number"
    STRING = "string"
    OP = "op"
    END = "end"


@dataclass(frozen=True)
class Token:
    """A lexical token with its position.

    ``start``/``end`` are raw ``(row, col)`` offsets into the wrapped text
    and are only used for slicing expressions back out of the source.
    """

    kind: TokenKind
    text: str
    span: Span
    start: tuple[int, int]
    end: tuple[int, int]

    def is_op(self, op: str) -> bool:
        return self.kind is TokenKind.OP and self.text == op

    def describe(self) -> str:
        if self.kind is TokenKind.END:
            return "end of input"
        return f"`{self.text}`"


@dataclass(frozen=True)
class Value:
    """The source text of an ``= <value>`` clause."""

    text: str
    span: Span

    def literal(self) -> Any:
        """Evaluate the text as a Python literal.

        Raises:
            AttributeSyntaxError: if the text is not a literal.
        """
        try:
            return ast.literal_eval(self.text)
        except (ValueError, SyntaxError, TypeError, MemoryError, RecursionError) as exc:
            msg = f"Expected a literal value, got `{self.text}`"
            raise AttributeSyntaxError(msg, self.span) from exc

    def try_literal(self) -> tuple[bool, Any]:
        """Return ``(True, value)`` for literals and ``(False, None)`` otherwise."""
        try:
            return True, ast.literal_eval(self.text)
        except (ValueError, SyntaxError, TypeError, MemoryError, RecursionError):
            return False, None

    def expression(self) -> str:
        """Check the text parses as a single Python expression and return it."""
        try:
            ast.parse(self.text, mode="eval")
        except SyntaxError as exc:
            msg = f"Invalid expression `{self.text}`: {exc.msg}"
            raise AttributeSyntaxError(msg, self.span) from exc
        return self.text


def _tokenize(wrapped: str, source: str) -> list[tokenize.TokenInfo]:
    try:
        return list(tokenize.generate_tokens(io.StringIO(wrapped).readline))
    except tokenize.TokenError as exc:
        message = exc.args[0] if exc.args else "tokenize error"
        row, col = exc.args[1] if len(exc.args) > 1 else (2, 0)
        span = Span(max(row - 1, 1), col + 1, source)
        raise AttributeSyntaxError(f"Malformed configuration: {message}", span) from exc
    except SyntaxError as exc:
        span = Span(max((exc.lineno or 2) - 1, 1), exc.offset or 1, source)
        raise AttributeSyntaxError(f"Malformed configuration: {exc.msg}", span) from exc


class TokenStream:
    """Cursor over the tokens of one configuration string."""

    def __init__(self, text: str, *, source: str = DEFAULT_SOURCE) -> None:
        self.source = source
        wrapped = f"(\n{text}\n)"
        self._lines = wrapped.split("\n")
        self._tokens = self._convert(_tokenize(wrapped, source))
        self._pos = 0

    def _span(self, row: int, col: int) -> Span:
        return Span(max(row - 1, 1), col + 1, self.source)

    def _convert(self, raw: list[tokenize.TokenInfo]) -> list[Token]:
        tokens: list[Token] = []
        for tok in raw:
            name = tokenize.tok_name[tok.type]
            if name in _SKIPPED:
                continue
            if name == "ERRORTOKEN":
                if tok.string.isspace():
                    continue
                msg = f"Unexpected character `{tok.string}`"
                raise AttributeSyntaxError(msg, self._span(*tok.start))
            if name.startswith("FSTRING"):
                kind = TokenKind.STRING
            elif name in ("NAME", "NUMBER", "STRING"):
                kind = TokenKind(name.lower())
            else:
                kind = TokenKind.OP
            tokens.append(Token(kind, tok.string, self._span(*tok.start), tok.start, tok.end))
        # Drop the wrapping parentheses.
        inner = tokens[1:-1]
        last = inner[-1] if inner else tokens[0]
        end_span = self._span(*last.end) if inner else Span(1, 1, self.source)
        inner.append(Token(TokenKind.END, "", end_span, last.end, last.end))
        return inner

    # -- cursor -----------------------------------------------------------

    def peek(self) -> Token:
        return self._tokens[self._pos]

    def next(self) -> Token:
        token = self._tokens[self._pos]
        if token.kind is not TokenKind.END:
            self._pos += 1
        return token

    def at_end(self) -> bool:
        return self.peek().kind is TokenKind.END

    def is_op(self, op: str) -> bool:
        return self.peek().is_op(op)

    def expect_name(self, what: str = "a name") -> Token:
        token = self.next()
        if token.kind is not TokenKind.NAME:
            raise AttributeSyntaxError(f"Expected {what}, found {token.describe()}", token.span)
        return token

    def expect_op(self, op: str) -> Token:
        token = self.next()
        if not token.is_op(op):
            raise AttributeSyntaxError(f"Expected `{op}`, found {token.describe()}", token.span)
        return token

    def take_value(self) -> Value:
        """Consume tokens up to the next ``,`` or ``)`` at nesting depth 0."""
        first = self.peek()
        depth = 0
        last: Token | None = None
        while True:
            token = self.peek()
            if token.kind is TokenKind.END:
                break
            if depth == 0 and (token.is_op(",") or token.is_op(")")):
                break
            if token.kind is TokenKind.OP and token.text in _OPENERS:
                depth += 1
            elif token.kind is TokenKind.OP and token.text in _CLOSERS:
                depth -= 1
            last = self.next()
        if last is None:
            raise AttributeSyntaxError(
                f"Expected a value after `=`, found {first.describe()}", first.span
            )
        return Value(self._slice(first.start, last.end), first.span)

    def _slice(self, start: tuple[int, int], end: tuple[int, int]) -> str:
        (start_row, start_col), (end_row, end_col) = start, end
        if start_row == end_row:
            return self._lines[start_row - 1][start_col:end_col]
        parts = [self._lines[start_row - 1][start_col:]]
        parts.extend(self._lines[start_row : end_row - 1])
        parts.append(self._lines[end_row - 1][:end_col])
        return "\n".join(parts)
