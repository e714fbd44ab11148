import logging
from collections.abc import Sequence

from codegen_templates.core.tokens import Token, TokenKind, token_display_name
from codegen_templates.errors import ParseError
from codegen_templates.models import (
    DefineDirective,
    Directive,
    ForeachDirective,
    InsertDirective,
    ReplaceDirective,
    ReplaceFlags,
)

logger = logging.getLogger(__name__)

_REPLACE_FLAGS = {
    "REMOVE_IF_NULL": ReplaceFlags.REMOVE_IF_NULL,
}


class _TokenStream:
    def __init__(self, text: str, line_number: int, line_begin: int, tokens: Sequence[Token]) -> None:
        self._text = text
        self._line_number = line_number
        self._line_begin = line_begin
        self._tokens = tokens
        self._index = 0

    @property
    def current(self) -> Token:
        return self._tokens[self._index]

    def value(self, token: Token) -> str:
        return self._text[token.begin : token.end]

    def consume(self, expected: TokenKind) -> Token:
        token = self.current
        if token.kind is expected:
            self._index += 1
            return token
        raise ParseError(
            self._line_number,
            token.begin - self._line_begin,
            f"expected {token_display_name(expected)} got {token_display_name(token.kind)}",
        )

    def consume_quoted(self, expected: TokenKind) -> str:
        return self.value(self.consume(expected))[1:-1]


def parse_directives(text: str, line_number: int, line_begin: int, tokens: Sequence[Token]) -> list[Directive]:
    """Parse the directive tokens of one region-start line.

    A leading identifier that is not a directive keyword ends parsing: the
    directives gathered so far are returned and the rest of the line is left
    alone.
    """
    stream = _TokenStream(text, line_number, line_begin, tokens)
    directives: list[Directive] = []

    while stream.current.kind is not TokenKind.END_OF_LINE:
        keyword_token = stream.consume(TokenKind.IDENTIFIER)
        column = keyword_token.column
        keyword = stream.value(keyword_token)

        if keyword == "DEFINE":
            stream.consume(TokenKind.OPEN_PAREN)
            name = stream.consume_quoted(TokenKind.QUOTED_STRING)
            stream.consume(TokenKind.CLOSE_PAREN)
            directives.append(DefineDirective(line=line_number, column=column, name=name))
        elif keyword == "REPLACE":
            stream.consume(TokenKind.OPEN_PAREN)
            pattern = stream.consume_quoted(TokenKind.BACKTICK_STRING)
            stream.consume(TokenKind.COMMA)
            accessor = stream.value(stream.consume(TokenKind.FIELD_ACCESSOR))
            flags = _parse_replace_flags(stream, line_number, line_begin)
            stream.consume(TokenKind.CLOSE_PAREN)
            directives.append(
                ReplaceDirective(line=line_number, column=column, pattern=pattern, variable_name=accessor, flags=flags)
            )
        elif keyword == "FOREACH":
            stream.consume(TokenKind.OPEN_PAREN)
            variable = stream.value(stream.consume(TokenKind.FIELD_ACCESSOR))
            stream.consume(TokenKind.COLON)
            collection = stream.value(stream.consume(TokenKind.FIELD_ACCESSOR))
            stream.consume(TokenKind.CLOSE_PAREN)
            directives.append(
                ForeachDirective(line=line_number, column=column, variable_name=variable, collection_name=collection)
            )
        elif keyword == "INSERT":
            stream.consume(TokenKind.OPEN_PAREN)
            accessor = stream.value(stream.consume(TokenKind.FIELD_ACCESSOR))
            stream.consume(TokenKind.CLOSE_PAREN)
            directives.append(InsertDirective(line=line_number, column=column, variable_name=accessor))
        else:
            logger.debug("Line %d: '%s' is not a directive, ignoring the rest of the line", line_number, keyword)
            break

    return directives


def _parse_replace_flags(stream: _TokenStream, line_number: int, line_begin: int) -> ReplaceFlags:
    flags = ReplaceFlags.NONE
    while stream.current.kind is not TokenKind.CLOSE_PAREN:
        stream.consume(TokenKind.COMMA)
        flag_token = stream.consume(TokenKind.IDENTIFIER)
        flag_name = stream.value(flag_token)
        flag = _REPLACE_FLAGS.get(flag_name)
        if flag is None:
            raise ParseError(line_number, flag_token.begin - line_begin, f"Unknown replace flag {flag_name}")
        flags |= flag
    return flags
