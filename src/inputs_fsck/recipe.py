"""PKGBUILD text extraction: `source`/`*sums` arrays and simple scalar variables.

This is a small quote-aware lexer, not a shell. It understands single and
double quotes, backslash escapes, line continuations, comments, heredocs and
function bodies well enough to pick the top-level assignments makepkg would
see, and performs one level of `$name`/`${name}` substitution from scalars
assigned earlier in the file. Everything else is kept verbatim.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field

from inputs_fsck.models import SKIP, Algorithm, ChecksumEntry, RecipeSource
from inputs_fsck.sources import classify

ASSIGNMENT_PATTERN = re.compile(r"([A-Za-z_][A-Za-z0-9_]*)(\+?)=")
VARIABLE_NAME_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
HEREDOC_PATTERN = re.compile(r"<<(-?)[ \t]*(['\"]?)([A-Za-z_][A-Za-z0-9_]*)\2")
COMMAND_PREFIX_PATTERN = re.compile(r"(?:if|elif|then|else|while|until|do|!)(?=[ \t\n])")

BLANKS = " \t"
WORD_BREAKS = " \t\n"
SCALAR_TERMINATORS = ";&|<>"
COMMAND_SEPARATORS = ";&|"
ARRAY_TERMINATORS = ")"
DOUBLE_QUOTE_ESCAPES = '$`"\\'


@dataclass(frozen=True, slots=True)
class ParsedRecipe:
    variables: Mapping[str, str] = field(default_factory=dict)
    arrays: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    def array(self, name: str) -> tuple[str, ...]:
        return self.arrays.get(name, ())


def extract(text: str) -> tuple[list[RecipeSource], dict[Algorithm, list[ChecksumEntry]]]:
    """Return the classified sources and the declared checksum arrays of a recipe."""
    parsed = parse_recipe(text)
    sources = [classify(raw, index) for index, raw in enumerate(parsed.array("source"))]

    checksums: dict[Algorithm, list[ChecksumEntry]] = {}
    for name, values in parsed.arrays.items():
        algorithm = Algorithm.from_array_name(name)
        if algorithm is None:
            continue
        checksums[algorithm] = [
            ChecksumEntry(
                algorithm=algorithm,
                value=SKIP if value.upper() == SKIP.value else value,
                index=index,
            )
            for index, value in enumerate(values)
        ]
    return sources, checksums


def parse_recipe(text: str) -> ParsedRecipe:
    """Collect top-level scalar and array assignments in textual order.

    Repeated array assignments to the same name are concatenated. Parsing is
    best-effort and never raises on malformed content.
    """
    lexer = _Lexer(text)
    arrays: dict[str, list[str]] = {}
    depth = 0

    while not lexer.at_end():
        lexer.skip_blanks()
        if lexer.at_end():
            break
        if lexer.peek() == "\n":
            lexer.advance()
            continue

        if depth == 0:
            lexer.skip_command_prefixes()
            match = ASSIGNMENT_PATTERN.match(lexer.text, lexer.pos)
            if match is not None:
                name, append = match.group(1), bool(match.group(2))
                lexer.pos = match.end()
                if lexer.peek() == "(":
                    lexer.advance()
                    arrays.setdefault(name, []).extend(lexer.read_array())
                else:
                    value = lexer.read_word(SCALAR_TERMINATORS)
                    if append:
                        value = lexer.variables.get(name, "") + value
                    lexer.variables[name] = value
                continue

        depth = max(depth + lexer.skip_command(), 0)

    return ParsedRecipe(
        variables=dict(lexer.variables),
        arrays={name: tuple(values) for name, values in arrays.items()},
    )


class _Lexer:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.variables: dict[str, str] = {}
        self._pending_heredocs: list[tuple[str, bool]] = []

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self, offset: int = 0) -> str:
        index = self.pos + offset
        return self.text[index] if index < len(self.text) else ""

    def advance(self) -> None:
        if self.peek() == "\n" and self._pending_heredocs:
            self.pos += 1
            self._skip_heredoc_bodies()
            return
        self.pos += 1

    def skip_blanks(self) -> None:
        while not self.at_end():
            char = self.peek()
            if char in BLANKS or char == ";":
                self.pos += 1
            elif char == "\\" and self.peek(1) == "\n":
                self.pos += 2
            else:
                return

    def skip_command_prefixes(self) -> None:
        """Step over reserved words that may precede a simple command, e.g. `then`."""
        while (match := COMMAND_PREFIX_PATTERN.match(self.text, self.pos)) is not None:
            self.pos = match.end()
            self.skip_blanks()

    def skip_comment(self) -> None:
        end = self.text.find("\n", self.pos)
        self.pos = len(self.text) if end == -1 else end

    def read_array(self) -> list[str]:
        words: list[str] = []
        while not self.at_end():
            char = self.peek()
            if char in WORD_BREAKS:
                self.pos += 1
            elif char == "\\" and self.peek(1) == "\n":
                self.pos += 2
            elif char == ")":
                self.pos += 1
                break
            elif char == "#":
                self.skip_comment()
            else:
                words.append(self.read_word(ARRAY_TERMINATORS))
        return words

    def read_word(self, terminators: str) -> str:
        parts: list[str] = []
        while not self.at_end():
            char = self.peek()
            if char in WORD_BREAKS or char in terminators:
                break
            if char == "\\":
                escaped = self.peek(1)
                self.pos += 2
                if escaped != "\n":
                    parts.append(escaped)
            elif char == "'":
                end = self.text.find("'", self.pos + 1)
                if end == -1:
                    end = len(self.text)
                parts.append(self.text[self.pos + 1 : end])
                self.pos = end + 1
            elif char == '"':
                parts.append(self._read_double_quoted())
            elif char == "$":
                parts.append(self._read_expansion())
            else:
                parts.append(char)
                self.pos += 1
        return "".join(parts)

    def skip_command(self) -> int:
        """Skip one non-assignment shell command, returning the brace depth change.

        Stops at a newline or after a run of `;`, `&` and `|`, so the next
        command on the same line is looked at again as a possible assignment.
        """
        delta = 0
        word_start = True
        while not self.at_end():
            char = self.peek()
            if char == "\n":
                break
            if char in COMMAND_SEPARATORS:
                while self.peek() and self.peek() in COMMAND_SEPARATORS:
                    self.pos += 1
                break
            if char in BLANKS or char in "()":
                self.pos += 1
                word_start = True
                continue

            if char == "#" and word_start:
                self.skip_comment()
                break
            if char == "{" and word_start and self.peek(1) in " \t\n":
                delta += 1
            elif char == "}" and word_start and self.peek(1) in " \t\n;)&|":
                delta -= 1
            elif char == "<" and self.peek(1) == "<":
                if self.peek(2) == "<":
                    # Here-string: the operand is an ordinary word, no body follows.
                    self.pos += 3
                    word_start = False
                    continue
                heredoc = HEREDOC_PATTERN.match(self.text, self.pos)
                if heredoc is not None:
                    self._pending_heredocs.append((heredoc.group(3), bool(heredoc.group(1))))
                    self.pos = heredoc.end()
                    word_start = False
                    continue

            if char == "\\":
                self.pos += 2
            elif char == "'":
                end = self.text.find("'", self.pos + 1)
                self.pos = len(self.text) if end == -1 else end + 1
            elif char == "`":
                end = self.text.find("`", self.pos + 1)
                self.pos = len(self.text) if end == -1 else end + 1
            elif char == '"':
                self._read_double_quoted()
            elif char == "$":
                self._read_expansion()
            else:
                self.pos += 1
            word_start = False
        return delta

    def _skip_heredoc_bodies(self) -> None:
        pending, self._pending_heredocs = self._pending_heredocs, []
        for delimiter, strip_tabs in pending:
            while not self.at_end():
                end = self.text.find("\n", self.pos)
                end = len(self.text) if end == -1 else end
                line = self.text[self.pos : end]
                self.pos = min(end + 1, len(self.text))
                if (line.lstrip("\t") if strip_tabs else line) == delimiter:
                    break

    def _read_double_quoted(self) -> str:
        parts: list[str] = []
        self.pos += 1
        while not self.at_end():
            char = self.peek()
            if char == '"':
                self.pos += 1
                break
            if char == "\\":
                escaped = self.peek(1)
                self.pos += 2
                if escaped == "\n":
                    continue
                if escaped in DOUBLE_QUOTE_ESCAPES:
                    parts.append(escaped)
                else:
                    parts.append("\\" + escaped)
            elif char == "$":
                parts.append(self._read_expansion())
            else:
                parts.append(char)
                self.pos += 1
        return "".join(parts)

    def _read_expansion(self) -> str:
        start = self.pos
        following = self.peek(1)

        if following == "{":
            end = self._find_closing(start + 1, "{", "}")
            self.pos = end + 1
            inner = self.text[start + 2 : end]
            if VARIABLE_NAME_PATTERN.fullmatch(inner) and inner in self.variables:
                return self.variables[inner]
            return self.text[start : self.pos]

        if following == "(":
            end = self._find_closing(start + 1, "(", ")")
            self.pos = end + 1
            return self.text[start : self.pos]

        name = VARIABLE_NAME_PATTERN.match(self.text, start + 1)
        if name is None:
            self.pos += 1
            return "$"
        self.pos = name.end()
        return self.variables.get(name.group(0), self.text[start : self.pos])

    def _find_closing(self, open_index: int, opener: str, closer: str) -> int:
        """Index of the bracket matching `open_index`, or the last index if unterminated."""
        depth = 0
        index = open_index
        quote = ""
        while index < len(self.text):
            char = self.text[index]
            if quote:
                if char == "\\" and quote == '"':
                    index += 1
                elif char == quote:
                    quote = ""
            elif char == "\\":
                index += 1
            elif char in "'\"":
                quote = char
            elif char == opener:
                depth += 1
            elif char == closer:
                depth -= 1
                if depth == 0:
                    return index
            index += 1
        return len(self.text) - 1


__all__ = ["ParsedRecipe", "extract", "parse_recipe"]
