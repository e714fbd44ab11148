import re
from dataclasses import dataclass
from enum import Enum

from codegen_templates.errors import LexError


class TokenKind(Enum):
    IDENTIFIER = "identifier"
    FIELD_ACCESSOR = "field_accessor"
    OPEN_PAREN = "open_paren"
    CLOSE_PAREN = "close_paren"
    QUOTED_STRING = "quoted_string"
    BACKTICK_STRING = "backtick_string"
    SPACES = "spaces"
    COMMA = "comma"
    COLON = "colon"
    END_OF_LINE = "end_of_line"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    begin: int
    end: int
    line: int
    column: int


_DISPLAY_NAMES = {
    TokenKind.IDENTIFIER: "Identifier",
    TokenKind.FIELD_ACCESSOR: "FieldAccessor",
    TokenKind.OPEN_PAREN: "(",
    TokenKind.CLOSE_PAREN: ")",
    TokenKind.QUOTED_STRING: "Quote delimited String",
    TokenKind.BACKTICK_STRING: "Backtick delimited String",
    TokenKind.SPACES: "Spaces",
    TokenKind.COMMA: ",",
    TokenKind.COLON: ":",
    TokenKind.END_OF_LINE: "<EOL>",
}

_IDENT = r"[_a-zA-Z][_a-zA-Z0-9]*"

# Order matters: the first rule matching at the cursor wins.
_RULES: tuple[tuple[TokenKind, re.Pattern[str]], ...] = tuple(
    (kind, re.compile(pattern, re.DOTALL))
    for kind, pattern in (
        (TokenKind.SPACES, r"\s+"),
        (TokenKind.IDENTIFIER, _IDENT),
        (TokenKind.FIELD_ACCESSOR, rf"\$(?:{_IDENT})?(?:\.{_IDENT})*"),
        (TokenKind.QUOTED_STRING, r'"[^"]*"'),
        (TokenKind.BACKTICK_STRING, r"`[^`]*`"),
        (TokenKind.OPEN_PAREN, r"\("),
        (TokenKind.CLOSE_PAREN, r"\)"),
        (TokenKind.COMMA, r","),
        (TokenKind.COLON, r":"),
    )
)


def token_display_name(kind: TokenKind) -> str:
    return _DISPLAY_NAMES[kind]


def tokenize_directives(text: str, begin: int, end: int, line: int, column: int) -> list[Token]:
    """Split ``text[begin:end]`` into directive tokens, ending with an END_OF_LINE token.

    ``line`` and ``column`` locate ``begin`` in the source and are carried on
    every token for diagnostics.
    """
    tokens: list[Token] = []
    position = begin
    while position < end:
        matched: tuple[TokenKind, int] | None = None
        for kind, rule in _RULES:
            match = rule.match(text, position, end)
            if match is not None and match.end() > position:
                matched = (kind, match.end() - position)
                break

        if matched is None:
            raise LexError(line, column, f"Unrecognized symbol '{text[position]}'")

        kind, length = matched
        if kind is not TokenKind.SPACES:
            tokens.append(Token(kind=kind, begin=position, end=position + length, line=line, column=column))

        column += length
        position += length

    tokens.append(Token(kind=TokenKind.END_OF_LINE, begin=end, end=end, line=line, column=column))
    return tokens
