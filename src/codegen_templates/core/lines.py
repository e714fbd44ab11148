import re
from dataclasses import dataclass, field
from enum import Enum

from codegen_templates.core.tokens import Token, tokenize_directives
from codegen_templates.errors import LexError

_REGION_START = re.compile(r"\s*#region( TEMPLATE )?(.*)")
_REGION_END = re.compile(r"\s*#endregion\s*")


class LineKind(Enum):
    EMPTY = "empty"
    REGION_START = "region_start"
    REGION_START_WITH_DIRECTIVES = "region_start_with_directives"
    REGION_END = "region_end"
    REGULAR = "regular"


@dataclass(frozen=True)
class ClassifiedLine:
    kind: LineKind
    begin: int
    end: int
    indentation: int
    directives_begin: int = -1
    tokens: tuple[Token, ...] = field(default=())

    def __str__(self) -> str:
        if self.kind is LineKind.REGION_START_WITH_DIRECTIVES:
            return f"Begin Region ({' '.join(token.kind.name for token in self.tokens)})"
        return self.kind.name.replace("_", " ").title()


def classify_lines(text: str, begin: int, end: int) -> list[ClassifiedLine]:
    """Split ``text[begin:end]`` into lines and classify each one.

    Tabs are rejected anywhere in the range. A final line without a trailing
    newline is only classified when it starts before ``end - 1``.
    """
    lines: list[ClassifiedLine] = []
    line_begin = begin
    indentation = 0
    seen_content = False

    def handle_line(line_end: int) -> None:
        if not seen_content:
            lines.append(ClassifiedLine(kind=LineKind.EMPTY, begin=line_begin, end=line_end, indentation=-1))
            return

        start_match = _REGION_START.fullmatch(text, line_begin, line_end)
        if start_match is not None:
            if start_match.group(1) is not None:
                directives_begin = start_match.end(1)
                tokens = tokenize_directives(
                    text, directives_begin, line_end, line=len(lines), column=directives_begin - line_begin
                )
                lines.append(
                    ClassifiedLine(
                        kind=LineKind.REGION_START_WITH_DIRECTIVES,
                        begin=line_begin,
                        end=line_end,
                        indentation=indentation,
                        directives_begin=directives_begin,
                        tokens=tuple(tokens),
                    )
                )
            else:
                lines.append(
                    ClassifiedLine(kind=LineKind.REGION_START, begin=line_begin, end=line_end, indentation=indentation)
                )
        elif _REGION_END.fullmatch(text, line_begin, line_end) is not None:
            lines.append(ClassifiedLine(kind=LineKind.REGION_END, begin=line_begin, end=line_end, indentation=indentation))
        else:
            lines.append(ClassifiedLine(kind=LineKind.REGULAR, begin=line_begin, end=line_end, indentation=indentation))

    for i in range(begin, end):
        char = text[i]
        if char == "\t":
            raise LexError(len(lines), i - line_begin, "Template text cannot contain tab characters")
        if char == " ":
            if not seen_content:
                indentation += 1
        elif char not in "\r\n":
            seen_content = True

        if char != "\n":
            continue

        line_end = i
        if i - 1 >= begin and text[i - 1] == "\r":
            line_end -= 1

        handle_line(line_end)
        line_begin = i + 1
        indentation = 0
        seen_content = False

    if line_begin < end - 1:
        handle_line(end)

    return lines
