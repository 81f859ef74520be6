"""Tokenizer and pretty-printer for GraphQL source text.

The formatter never raises. It re-emits whatever tokens it finds with
canonical 2-space indentation; use ``validate_balance`` to check that
braces, parentheses and strings are closed.

JSON helpers live here too, for the variables editor's "format / validate"
pair.
"""

import json
from dataclasses import dataclass
from enum import Enum

from .errors import BalanceError, JSONSyntaxError

INDENT = "  "

PUNCTUATORS = frozenset("{}():!$@[]=")

# Characters that end a word token
SEPARATORS = frozenset(" \t\n\r,{}()[]:!$@=\"#.")

# Words after which the next token stays on the same line
KEEPS_NEXT_INLINE = frozenset(
    {"query", "mutation", "subscription", "fragment", "on", "...", "@"}
)

# Tokens a field-level word attaches to without any separator
ATTACHES_TO_PREVIOUS = frozenset({"{", "(", ":", "!", "[", "]"})

# Inside arguments, no space is written after these
NO_SPACE_AFTER = frozenset({"(", ":", "$", "@", "["})


class TokenKind(Enum):
    """Lexical categories produced by ``tokenize``."""
    PUNCTUATOR = "punctuator"
    SPREAD = "spread"
    STRING = "string"
    COMMENT = "comment"
    WORD = "word"


@dataclass(frozen=True)
class Token:
    """A single lexical unit of GraphQL source."""
    kind: TokenKind
    value: str

    def __str__(self) -> str:
        return self.value


def tokenize(source: str) -> list[Token]:
    """Split GraphQL source into tokens.

    Whitespace and commas are insignificant and dropped. Strings and
    comments are kept verbatim, including their delimiters.
    """
    tokens: list[Token] = []
    i = 0
    n = len(source)

    while i < n:
        c = source[i]

        if c in " \t\n\r,":
            i += 1
            continue

        if c in PUNCTUATORS:
            tokens.append(Token(TokenKind.PUNCTUATOR, c))
            i += 1
            continue

        if source.startswith("...", i):
            tokens.append(Token(TokenKind.SPREAD, "..."))
            i += 3
            continue

        if c == '"':
            end = _scan_string(source, i)
            tokens.append(Token(TokenKind.STRING, source[i:end]))
            i = end
            continue

        if c == "#":
            end = source.find("\n", i)
            if end == -1:
                end = n
            tokens.append(Token(TokenKind.COMMENT, source[i:end]))
            i = end
            continue

        j = i
        while j < n and source[j] not in SEPARATORS:
            j += 1
        if j > i:
            tokens.append(Token(TokenKind.WORD, source[i:j]))
            i = j
        else:
            # stray "."
            i += 1

    return tokens


def _scan_string(source: str, start: int) -> int:
    """Return the index just past the string literal starting at ``start``."""
    n = len(source)
    if source.startswith('"""', start):
        end = source.find('"""', start + 3)
        return n if end == -1 else end + 3

    j = start + 1
    while j < n and source[j] != '"':
        if source[j] == "\\":
            j += 1
        j += 1
    if j < n:
        j += 1
    return min(j, n)


def format_graphql(source: str) -> str:
    """Format a GraphQL document with 2-space indentation.

    One field per line, arguments inline within parentheses. Formatting
    already formatted text returns it unchanged.
    """
    source = source.strip()
    if not source:
        return source

    lexed = tokenize(source)
    if not lexed:
        return source
    tokens = [t.value for t in lexed]

    out: list[str] = []
    indent = 0
    paren_depth = 0

    def newline():
        out.append("\n" + INDENT * indent)

    for i, tok in enumerate(tokens):
        nxt = tokens[i + 1] if i + 1 < len(tokens) else ""
        prev = tokens[i - 1] if i > 0 else ""

        if tok == "{":
            if out:
                out.append(" ")
            out.append("{")
            indent += 1
            newline()
        elif tok == "}":
            indent = max(indent - 1, 0)
            newline()
            out.append("}")
            if nxt and nxt != "}":
                newline()
        elif tok == "(":
            paren_depth += 1
            out.append("(")
        elif tok == ")":
            if paren_depth > 0:
                paren_depth -= 1
            out.append(")")
            if paren_depth == 0 and i + 1 < len(lexed) and lexed[i + 1].kind != TokenKind.PUNCTUATOR:
                newline()
        elif tok == ":":
            out.append(": ")
        elif tok in ("!", "[", "]", "="):
            out.append(tok)
        elif lexed[i].kind == TokenKind.COMMENT:
            # a comment runs to end of line, so whatever follows starts a new one
            if paren_depth > 0 and prev not in NO_SPACE_AFTER:
                out.append(" ")
            out.append(tok)
            if nxt and nxt != "}":
                newline()
        elif paren_depth > 0:
            if prev not in NO_SPACE_AFTER:
                out.append(" ")
            out.append(tok)
        else:
            out.append(tok)
            if nxt in ATTACHES_TO_PREVIOUS or nxt in ("}", ""):
                pass
            elif tok in KEEPS_NEXT_INLINE:
                out.append(" ")
            else:
                newline()

    return "".join(out).rstrip("\n ")


def validate_balance(source: str) -> BalanceError | None:
    """Check that braces, parentheses and strings are balanced.

    Returns a ``BalanceError`` describing the first problem, or None.
    Positions are byte offsets into the UTF-8 encoded, trimmed source.
    """
    source = source.strip()
    if not source:
        return None

    braces = 0
    parens = 0
    in_string = False
    offset = 0

    for i, c in enumerate(source):
        pos = offset
        offset += len(c.encode("utf-8", "surrogatepass"))
        if in_string:
            if c == '"' and (i == 0 or source[i - 1] != "\\"):
                in_string = False
            continue
        if c == '"':
            in_string = True
        elif c == "{":
            braces += 1
        elif c == "}":
            braces -= 1
            if braces < 0:
                return BalanceError(f"unexpected '}}' at position {pos}", position=pos)
        elif c == "(":
            parens += 1
        elif c == ")":
            parens -= 1
            if parens < 0:
                return BalanceError(f"unexpected ')' at position {pos}", position=pos)

    if braces > 0:
        return BalanceError(f"unclosed '{{' ({braces} open)", open_count=braces)
    if parens > 0:
        return BalanceError(f"unclosed '(' ({parens} open)", open_count=parens)
    if in_string:
        return BalanceError("unclosed string", open_count=1)
    return None


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


def decode_json(source: str):
    """Decode strict JSON: ``NaN`` and ``Infinity`` are rejected.

    Raises:
        ValueError: If the input is not valid JSON
    """
    return json.loads(source, parse_constant=_reject_constant)


def format_json(source: str) -> str:
    """Pretty-print JSON with 2-space indentation.

    Empty input is returned as an empty string.

    Raises:
        JSONSyntaxError: If the input is not valid JSON
    """
    source = source.strip()
    if not source:
        return source
    try:
        value = decode_json(source)
    except ValueError as e:
        raise JSONSyntaxError(str(e)) from e
    return json.dumps(value, indent=2, ensure_ascii=False)


def validate_json(source: str) -> JSONSyntaxError | None:
    """Return a ``JSONSyntaxError`` if the input is not valid JSON, else None."""
    source = source.strip()
    if not source:
        return None
    try:
        decode_json(source)
    except ValueError as e:
        return JSONSyntaxError(str(e))
    return None
