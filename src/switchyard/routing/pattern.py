"""Route pattern compilation.

A pattern is compiled once, at registration, into a ``RoutePattern``:

- ``TemplatePattern`` for strings such as ``/users/:id``,
  ``/user/:id(\\d+)``, ``/flights/:from-:to`` or ``/posts/:slug?``
- ``RegexPattern`` for a pre-compiled ``re.Pattern``

Template syntax::

    /about             literal (regex metacharacters are literal: /random.txt)
    /users/:id         one non-"/" run captured as "id"
    /user/:id(\\d+)     the capture must fully match the constraint
    /flights/:from-:to two captures inside one segment
    /posts/:slug?      optional parameter, together with its leading "/"

Routes compile in *full* mode (the whole path must match). Middleware
and mounts compile in *prefix* mode: the pattern must match a leading
run of whole segments, and the matched part is reported so the mount
can strip it.
"""

import re
from dataclasses import dataclass, field

from switchyard.errors import PatternError

_NAME = re.compile(r"\w+")

# Default capture for ":name". Lazy, so compound segments split at the
# first literal that follows.
DEFAULT_PARAM_REGEX = r"[^/]+?"


@dataclass(frozen=True, slots=True)
class PatternMatch:
    """Result of matching a path against a ``RoutePattern``.

    ``path`` is the part of the request path the pattern consumed; for
    full-mode patterns it is the whole path.
    """

    path: str
    params: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class _Literal:
    text: str


@dataclass(frozen=True, slots=True)
class _Param:
    name: str
    constraint: str | None = None
    optional: bool = False


@dataclass(frozen=True, slots=True)
class TemplatePattern:
    """A compiled string pattern."""

    source: str
    regex: re.Pattern[str]
    param_names: tuple[str, ...]
    end: bool = True
    catch_all: bool = False

    def match(self, path: str) -> PatternMatch | None:
        if self.catch_all:
            return PatternMatch(path="")
        m = self.regex.match(path)
        if m is None:
            return None
        params = {
            name: value
            for name, value in zip(self.param_names, m.groups(), strict=True)
            if value is not None
        }
        matched = m.group(0)
        if not self.end:
            matched = matched.rstrip("/")
        return PatternMatch(path=matched, params=params)


@dataclass(frozen=True, slots=True)
class RegexPattern:
    """A caller-supplied regular expression.

    Full mode searches anywhere in the path; prefix mode must match at
    the start. Positional groups become params ``"0"``, ``"1"``, ...
    """

    regex: re.Pattern[str]
    end: bool = True

    @property
    def source(self) -> str:
        return self.regex.pattern

    @property
    def param_names(self) -> tuple[str, ...]:
        return tuple(str(i) for i in range(self.regex.groups))

    def match(self, path: str) -> PatternMatch | None:
        m = self.regex.search(path) if self.end else self.regex.match(path)
        if m is None:
            return None
        params = {str(i): value for i, value in enumerate(m.groups()) if value is not None}
        matched = m.group(0) if not self.end else path
        return PatternMatch(path=matched, params=params)


type RoutePattern = TemplatePattern | RegexPattern


# ---------------------------------------------------------------------------
# Template parsing
# ---------------------------------------------------------------------------


def _closing_paren(source: str, start: int) -> int:
    """Index of the ``)`` balancing the ``(`` at *start*.

    Escaped characters and character classes are skipped.
    """
    depth = 0
    in_class = False
    i = start
    while i < len(source):
        ch = source[i]
        if ch == "\\":
            i += 2
            continue
        if in_class:
            if ch == "]":
                in_class = False
        elif ch == "[":
            in_class = True
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    raise PatternError(source, f"unbalanced parentheses starting at position {start}")


def tokenize(source: str) -> list[_Literal | _Param]:
    """Split a template into literal runs and parameters."""
    tokens: list[_Literal | _Param] = []
    literal: list[str] = []
    i = 0

    while i < len(source):
        ch = source[i]
        if ch == ":":
            m = _NAME.match(source, i + 1)
            if m is None:
                raise PatternError(source, f"expected a parameter name after ':' at position {i}")
            if literal:
                tokens.append(_Literal("".join(literal)))
                literal = []
            name = m.group(0)
            i = m.end()
            constraint = None
            if i < len(source) and source[i] == "(":
                close = _closing_paren(source, i)
                constraint = source[i + 1 : close]
                if not constraint:
                    raise PatternError(source, f"empty constraint for parameter {name!r}")
                i = close + 1
            optional = i < len(source) and source[i] == "?"
            if optional:
                i += 1
            tokens.append(_Param(name, constraint, optional))
        elif ch in "()":
            raise PatternError(source, f"unexpected {ch!r} at position {i} outside a parameter")
        else:
            literal.append(ch)
            i += 1

    if literal:
        tokens.append(_Literal("".join(literal)))
    return tokens


def _param_regex(source: str, param: _Param, group: str) -> str:
    body = param.constraint or DEFAULT_PARAM_REGEX
    try:
        compiled = re.compile(body)
    except re.error as exc:
        raise PatternError(source, f"invalid regex for parameter {param.name!r}: {exc}") from exc
    if compiled.groups:
        raise PatternError(
            source,
            f"constraint for parameter {param.name!r} has capturing groups; use (?:...)",
        )
    return f"(?P<{group}>{body})"


def _compile_template(
    source: str,
    *,
    end: bool,
    case_sensitive: bool,
    strict: bool,
) -> TemplatePattern:
    if source and not source.startswith("/"):
        raise PatternError(source, "must start with '/'")

    # Prefixes always compare whole segments; full routes only ignore a
    # trailing slash when not strict.
    text = source.rstrip("/") if (not end or not strict) else source
    if not end and not text:
        # "/" as a prefix matches every path
        return TemplatePattern(source, re.compile(""), (), end=False, catch_all=True)

    parts: list[str] = []
    names: list[str] = []
    for token in tokenize(text):
        if isinstance(token, _Literal):
            parts.append(re.escape(token.text))
            continue
        if token.name in names:
            raise PatternError(source, f"duplicate parameter name {token.name!r}")
        group = _param_regex(source, token, f"p{len(names)}")
        names.append(token.name)
        if token.optional and parts and parts[-1].endswith("/"):
            parts[-1] = parts[-1][:-1]
            parts.append(f"(?:/{group})?")
        elif token.optional:
            parts.append(f"{group}?")
        else:
            parts.append(group)

    body = "".join(parts)
    if end:
        if not strict:
            body += "/?"
        regex_source = f"^{body}$"
    else:
        regex_source = f"^{body}(?=/|$)"

    flags = 0 if case_sensitive else re.IGNORECASE
    try:
        regex = re.compile(regex_source, flags)
    except re.error as exc:
        raise PatternError(source, str(exc)) from exc
    return TemplatePattern(source, regex, tuple(names), end=end)


def compile_pattern(
    pattern: str | re.Pattern[str],
    *,
    end: bool = True,
    case_sensitive: bool = False,
    strict: bool = False,
) -> RoutePattern:
    """Compile *pattern* into a matcher.

    Raises ``PatternError`` for malformed parameter syntax, unbalanced
    parentheses, invalid or capturing constraints and duplicate names.
    """
    if isinstance(pattern, re.Pattern):
        return RegexPattern(pattern, end=end)
    if not isinstance(pattern, str):
        raise PatternError(repr(pattern), "expected a path string or a compiled regex")
    return _compile_template(pattern, end=end, case_sensitive=case_sensitive, strict=strict)
