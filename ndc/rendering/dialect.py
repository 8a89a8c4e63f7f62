"""Jinja2 extension for the double-brace dot-action template dialect.

Bundled assets are written with actions such as ``{{.ProjectName}}``,
``{{if .IncludeCache}} ... {{end}}`` and ``{{range .Services}}{{.}}{{end}}``.
The extension rewrites those actions into plain Jinja2 syntax before the
Jinja2 lexer runs, so compilation, ``StrictUndefined`` checks and execution
are all handled by Jinja2 itself. Line numbers are preserved.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, NoReturn, Optional

from jinja2 import TemplateSyntaxError
from jinja2.ext import Extension

# An action opens at the last "{{" of a brace run, so "{{{.ApiGuid}}}" keeps
# the outer braces as literal text. Quoted strings may contain "}}".
_ACTION = re.compile(
    r"\{\{(?!\{)(?P<ltrim>-\s)?"
    r"(?P<body>(?:\"(?:[^\"\\\n]|\\.)*\"|`[^`]*`|.)*?)"
    r"(?P<rtrim>\s-)?\}\}",
    re.DOTALL,
)
_JINJA_DELIMITERS = re.compile(r"\{[{%#]")
_KEYWORD = re.compile(r"(?P<word>[a-z]+)\b\s*(?P<rest>.*)", re.DOTALL)
_DECLARATION = re.compile(r"\$(?P<var>\w+)\s*:=\s*(?P<rest>.*)", re.DOTALL)
_ASSIGNMENT = re.compile(r"\$\w+\s*=(?!=)")
_RANGE_VARS = re.compile(
    r"\$(?P<first>\w+)(?:\s*,\s*\$(?P<second>\w+))?\s*:=\s*(?P<rest>.*)", re.DOTALL
)
_TOKEN = re.compile(
    r"""
      (?P<space>\s+)
    | (?P<string>"(?:[^"\\\n]|\\.)*")
    | (?P<raw>`[^`]*`)
    | (?P<lparen>\()
    | (?P<rparen>\))
    | (?P<number>-?\d+(?:\.\d+)?)
    | (?P<field>(?:\$\w*)?(?:\.\w+)+|\.(?!\w)|\$\w*)
    | (?P<ident>[A-Za-z_]\w*)
    | (?P<pipe>\|)
    | (?P<other>.)
    """,
    re.VERBOSE | re.DOTALL,
)

_LITERALS = {"true": "true", "false": "false", "nil": "none"}
_UNSUPPORTED = {"with", "define", "template", "block", "break", "continue"}


def _compare(op: str) -> Callable[[list[str]], str]:
    return lambda args: f"({args[0]} {op} {args[1]})"


# name -> (min args, max args or None, builder)
_FUNCTIONS: dict[str, tuple[int, Optional[int], Callable[[list[str]], str]]] = {
    "eq": (
        2,
        None,
        lambda args: "(" + " or ".join(f"{args[0]} == {arg}" for arg in args[1:]) + ")",
    ),
    "ne": (2, 2, _compare("!=")),
    "lt": (2, 2, _compare("<")),
    "le": (2, 2, _compare("<=")),
    "gt": (2, 2, _compare(">")),
    "ge": (2, 2, _compare(">=")),
    "and": (1, None, lambda args: "(" + " and ".join(args) + ")"),
    "or": (1, None, lambda args: "(" + " or ".join(args) + ")"),
    "not": (1, 1, lambda args: f"(not {args[0]})"),
    "len": (1, 1, lambda args: f"({args[0]}|length)"),
    "index": (2, None, lambda args: args[0] + "".join(f"[{arg}]" for arg in args[1:])),
}


def _escape_text(text: str, *, before_action: bool) -> str:
    """Make literal text inert for the Jinja2 lexer."""
    escaped = _JINJA_DELIMITERS.sub(lambda m: "{{ %r }}" % m.group(0), text)
    if before_action and escaped.endswith("{"):
        escaped = escaped[:-1] + "{{ '{' }}"
    return escaped


@dataclass
class _Block:
    kind: str
    dot_pushed: bool = False


class _Translator:
    def __init__(self, source: str, name: str | None, filename: str | None) -> None:
        self.source = source
        self.name = name
        self.filename = filename
        self.lineno = 1
        self.blocks: list[_Block] = []
        # None is the root context, where ".Key" means the context variable Key.
        self.dots: list[str | None] = [None]

    def error(self, message: str) -> NoReturn:
        raise TemplateSyntaxError(message, self.lineno, self.name, self.filename)

    def translate(self) -> str:
        parts: list[str] = []
        pos = 0
        for match in _ACTION.finditer(self.source):
            parts.append(_escape_text(self.source[pos : match.start()], before_action=True))
            self.lineno = self.source.count("\n", 0, match.start()) + 1
            parts.append(self._action(match))
            pos = match.end()
        parts.append(_escape_text(self.source[pos:], before_action=False))

        if self.blocks:
            self.lineno = self.source.count("\n") + 1
            self.error(f"unexpected EOF: unclosed '{self.blocks[-1].kind}' action")
        return "".join(parts)

    # -- actions ---------------------------------------------------------

    def _action(self, match: re.Match[str]) -> str:
        body = match.group("body").strip()
        lt = "-" if match.group("ltrim") else ""
        rt = "-" if match.group("rtrim") else ""
        # Keep the line count of the source action so error lines stay accurate.
        newlines = "\n" * match.group(0).count("\n")

        if body.startswith("/*"):
            if not body.endswith("*/"):
                self.error("unclosed comment")
            return f"{{#{lt} {newlines}{rt}#}}"

        statements = self._statements(body)
        if statements is None:
            return f"{{{{{lt} {self._pipeline(body)}{newlines} {rt}}}}}"

        tags = [f"{{% {statement} %}}" for statement in statements]
        tags[0] = f"{{%{lt} " + tags[0][3:]
        tags[-1] = tags[-1][:-3] + f"{newlines} {rt}%}}"
        return "".join(tags)

    def _statements(self, body: str) -> list[str] | None:
        """Translate a control action, or return None for an output action."""
        if _ASSIGNMENT.match(body):
            # Jinja2 "set" inside a loop is scoped to the loop body.
            self.error("variable reassignment is not supported; declare a new variable with :=")
        declaration = _DECLARATION.fullmatch(body)
        if declaration:
            value = self._pipeline(declaration.group("rest"))
            return [f"set _v_{declaration.group('var')} = {value}"]

        keyword = _KEYWORD.fullmatch(body)
        if keyword is None:
            return None
        word, rest = keyword.group("word"), keyword.group("rest").strip()

        if word == "if":
            self.blocks.append(_Block("if"))
            return [f"if {self._pipeline(rest)}"]
        if word == "else":
            return self._else(rest)
        if word == "end":
            if rest:
                self.error(f"unexpected {rest!r} after end")
            return self._end()
        if word == "range":
            return self._range(rest)
        if word in _UNSUPPORTED:
            self.error(f"unsupported action '{word}'")
        return None

    def _else(self, rest: str) -> list[str]:
        if not self.blocks:
            self.error("unexpected else")
        block = self.blocks[-1]
        if rest:
            condition = _KEYWORD.fullmatch(rest)
            if condition is None or condition.group("word") != "if":
                self.error(f"unexpected {rest!r} after else")
            if block.kind != "if":
                self.error("'else if' is only allowed inside 'if'")
            return [f"elif {self._pipeline(condition.group('rest'))}"]
        if block.kind == "range" and block.dot_pushed:
            # The empty branch of a range sees the enclosing dot again.
            self.dots.pop()
            block.dot_pushed = False
        return ["else"]

    def _end(self) -> list[str]:
        if not self.blocks:
            self.error("unexpected end")
        block = self.blocks.pop()
        if block.kind == "if":
            return ["endif"]
        if block.dot_pushed:
            self.dots.pop()
        return ["endfor"]

    def _range(self, rest: str) -> list[str]:
        index_var = element_var = None
        declared = _RANGE_VARS.fullmatch(rest)
        if declared:
            if declared.group("second"):
                index_var, element_var = declared.group("first"), declared.group("second")
            else:
                element_var = declared.group("first")
            rest = declared.group("rest")

        iterable = self._pipeline(rest)
        dot = f"_dot{len(self.dots)}"
        self.dots.append(dot)
        self.blocks.append(_Block("range", dot_pushed=True))

        statements = [f"for {dot} in {iterable}"]
        if element_var:
            statements.append(f"set _v_{element_var} = {dot}")
        if index_var:
            statements.append(f"set _v_{index_var} = loop.index0")
        return statements

    # -- expressions -----------------------------------------------------

    def _tokenize(self, text: str) -> list[tuple[str, str]]:
        tokens: list[tuple[str, str]] = []
        pos = 0
        while pos < len(text):
            match = _TOKEN.match(text, pos)
            assert match is not None and match.lastgroup is not None
            if match.lastgroup != "space":
                tokens.append((match.lastgroup, match.group()))
            pos = match.end()
        return tokens

    def _pipeline(self, text: str) -> str:
        tokens = self._tokenize(text)
        if not tokens:
            self.error("missing value for action")
        if any(kind == "pipe" for kind, _ in tokens):
            self.error("pipelines are not supported")
        expr, pos = self._command(tokens, 0)
        if pos != len(tokens):
            self.error(f"unexpected {tokens[pos][1]!r} in action")
        return expr

    def _command(self, tokens: list[tuple[str, str]], pos: int) -> tuple[str, int]:
        kind, value = tokens[pos]
        if kind != "ident" or value not in _FUNCTIONS:
            return self._operand(tokens, pos)

        low, high, build = _FUNCTIONS[value]
        args: list[str] = []
        pos += 1
        while pos < len(tokens) and tokens[pos][0] != "rparen":
            arg, pos = self._operand(tokens, pos)
            args.append(arg)
        if len(args) < low or (high is not None and len(args) > high):
            self.error(f"wrong number of args for {value}: got {len(args)}")
        return build(args), pos

    def _operand(self, tokens: list[tuple[str, str]], pos: int) -> tuple[str, int]:
        kind, value = tokens[pos]
        if kind == "lparen":
            if pos + 1 >= len(tokens):
                self.error("unclosed left paren")
            expr, pos = self._command(tokens, pos + 1)
            if pos >= len(tokens) or tokens[pos][0] != "rparen":
                self.error("unclosed left paren")
            return f"({expr})", pos + 1
        if kind in ("string", "number"):
            return value, pos + 1
        if kind == "raw":
            return repr(value[1:-1]), pos + 1
        if kind == "field":
            return self._field(value), pos + 1
        if kind == "ident":
            if value in _LITERALS:
                return _LITERALS[value], pos + 1
            if value in _FUNCTIONS:
                self.error(f"function {value!r} must be parenthesised when used as an argument")
            self.error(f"function {value!r} not defined")
        self.error(f"unexpected {value!r} in action")

    def _field(self, text: str) -> str:
        if text.startswith("$"):
            var, _, path = text.partition(".")
            if var == "$":
                if not path:
                    self.error("'$' alone is not supported; reference a field such as $.Name")
                return path
            base = f"_v_{var[1:]}"
            return f"{base}.{path}" if path else base

        dot = self.dots[-1]
        if text == ".":
            if dot is None:
                self.error("'.' outside of range refers to the whole context, which is not supported")
            return dot
        return f"{dot}{text}" if dot else text[1:]


def translate(source: str, name: str | None = None, filename: str | None = None) -> str:
    """Translate dot-action template source into Jinja2 source.

    Raises:
        TemplateSyntaxError: On malformed or unsupported actions
    """
    return _Translator(source, name, filename).translate()


class DotActionExtension(Extension):
    """Rewrite ``{{.Field}}`` style actions into Jinja2 syntax before lexing."""

    def preprocess(
        self, source: str, name: str | None, filename: str | None = None
    ) -> str:
        return translate(source, name=name, filename=filename)
