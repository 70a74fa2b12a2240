r"""
Filter Patterns
^^^^^^^^^^^^^^^

Filter patterns follow the RE2 syntax of the catalog collectors.
They are translated to python regular expressions, so that matching and replacing gives the
same results as in RE2:

* :code:`\d`, :code:`\w`, :code:`\s`, :code:`\b` and their negations only know ASCII
  characters
* without the :code:`m` flag, :code:`$` only matches at the end of the text and :code:`^` only
  at its beginning
* POSIX classes like :code:`[[:digit:]]` are supported
* a replacement is not applied to an empty match directly after a previous match

Constructs RE2 does not support are rejected: backreferences, lookaround assertions,
conditional and atomic groups, comments and possessive quantifiers.
"""

import re
from typing import Callable, List

from catalogprep.filter.exceptions import InvalidPatternError

_WORD = "0-9A-Za-z_"
_SPACE = r"\t\n\f\r "

_ESCAPES = {
    "d": "[0-9]",
    "D": "[^0-9]",
    "w": f"[{_WORD}]",
    "W": f"[^{_WORD}]",
    "s": f"[{_SPACE}]",
    "S": f"[^{_SPACE}]",
    "b": f"(?:(?<=[{_WORD}])(?![{_WORD}])|(?<![{_WORD}])(?=[{_WORD}]))",
    "B": f"(?:(?<=[{_WORD}])(?=[{_WORD}])|(?<![{_WORD}])(?![{_WORD}]))",
    "z": r"\Z",
}

_CLASS_ESCAPES = {"d": "0-9", "w": _WORD, "s": _SPACE}

_POSIX_CLASSES = {
    "alnum": "0-9A-Za-z",
    "alpha": "A-Za-z",
    "ascii": r"\x00-\x7f",
    "blank": r"\t ",
    "cntrl": r"\x00-\x1f\x7f",
    "digit": "0-9",
    "graph": "!-~",
    "lower": "a-z",
    "print": " -~",
    "punct": r"!-/:-@\[-`{-~",
    "space": r"\t\n\v\f\r ",
    "upper": "A-Z",
    "word": _WORD,
    "xdigit": "0-9A-Fa-f",
}

_UNSUPPORTED_GROUPS = {
    "(?=": "lookahead assertions are not supported",
    "(?!": "lookahead assertions are not supported",
    "(?<=": "lookbehind assertions are not supported",
    "(?<!": "lookbehind assertions are not supported",
    "(?P=": "backreferences are not supported",
    "(?(": "conditional groups are not supported",
    "(?>": "atomic groups are not supported",
    "(?#": "comments are not supported",
}

_FLAG_GROUP = re.compile(r"\(\?([a-zA-Z]*)(?:-([a-zA-Z]*))?([:)])")


def _line_start(multiline: bool) -> str:
    return r"(?:\A|(?<=\n))" if multiline else r"\A"


def _line_end(multiline: bool) -> str:
    return r"(?:\Z|(?=\n))" if multiline else r"\Z"


def _translate_class(pattern: str, position: int, parts: List[str]) -> int:
    """translate the character class starting at position, returns the position after it"""
    parts.append("[")
    position += 1
    if pattern.startswith("^", position):
        parts.append("^")
        position += 1
    if pattern.startswith("]", position):
        parts.append(r"\]")
        position += 1
    while position < len(pattern):
        char = pattern[position]
        if char == "]":
            parts.append("]")
            return position + 1
        if char == "\\" and position + 1 < len(pattern):
            escaped = pattern[position + 1]
            parts.append(_CLASS_ESCAPES.get(escaped, "\\" + escaped))
            position += 2
            continue
        if pattern.startswith("[:", position):
            end = pattern.find(":]", position + 2)
            if end >= 0:
                name = pattern[position + 2 : end]
                if name not in _POSIX_CLASSES:
                    raise InvalidPatternError(
                        pattern, f"invalid character class `[:{name}:]' at position {position}"
                    )
                parts.append(_POSIX_CLASSES[name])
                position = end + 2
                continue
        if char == "[":
            parts.append(r"\[")
        else:
            parts.append(char)
        position += 1
    return position


def translate(pattern: str) -> str:
    """Translate an RE2 pattern into an equivalent python pattern.

    Raises
    ------
    InvalidPatternError
        If the pattern uses a construct RE2 does not support.
    """
    parts: List[str] = []
    multiline = [False]
    position = 0
    while position < len(pattern):
        char = pattern[position]
        if char == "\\":
            escaped = pattern[position + 1 : position + 2]
            if escaped and escaped in "123456789":
                raise InvalidPatternError(pattern, "backreferences are not supported")
            parts.append(_ESCAPES.get(escaped, "\\" + escaped))
            position += 2
        elif char == "[":
            position = _translate_class(pattern, position, parts)
        elif char == "(":
            position = _translate_group(pattern, position, parts, multiline)
        elif char == ")":
            if len(multiline) > 1:
                multiline.pop()
            parts.append(char)
            position += 1
        elif char == "^":
            parts.append(_line_start(multiline[-1]))
            position += 1
        elif char == "$":
            parts.append(_line_end(multiline[-1]))
            position += 1
        elif char in "*+?":
            if pattern.startswith("+", position + 1):
                raise InvalidPatternError(
                    pattern, f"invalid nested repetition operator `{char}+'"
                )
            parts.append(char)
            position += 1
        else:
            parts.append(char)
            position += 1
    return "".join(parts)


def _translate_group(pattern: str, position: int, parts: List[str], multiline: List[bool]) -> int:
    """translate the group opening at position, returns the position after its prefix"""
    for prefix, reason in _UNSUPPORTED_GROUPS.items():
        if pattern.startswith(prefix, position):
            raise InvalidPatternError(pattern, reason)
    for prefix in ("(?P<", "(?<"):
        if pattern.startswith(prefix, position):
            multiline.append(multiline[-1])
            parts.append("(?P<")
            return position + len(prefix)
    flags = _FLAG_GROUP.match(pattern, position)
    if flags is None:
        multiline.append(multiline[-1])
        parts.append("(")
        return position + 1
    enabled, disabled, terminator = flags.group(1), flags.group(2) or "", flags.group(3)
    if set(enabled + disabled) - set("ims"):
        raise InvalidPatternError(pattern, f"unsupported flags `{flags.group(0)}'")
    state = multiline[-1]
    if "m" in enabled:
        state = True
    if "m" in disabled:
        state = False
    if terminator == ":":
        multiline.append(state)
    else:
        multiline[-1] = state
    parts.append(flags.group(0))
    return flags.end()


def compile_pattern(pattern: str) -> re.Pattern:
    """Compile an RE2 pattern.

    Raises
    ------
    InvalidPatternError
        If the pattern is not valid or uses a construct RE2 does not support.
    """
    try:
        return re.compile(translate(pattern))
    except re.error as error:
        raise InvalidPatternError(pattern, str(error)) from error


def replace_all(pattern: re.Pattern, value: str, expand: Callable[[re.Match], str]) -> str:
    """Replace all non-overlapping matches of pattern in value by the result of expand.

    An empty match directly after a previous match is not replaced.
    """
    result = []
    last_end = 0
    position = 0
    while position <= len(value):
        match = pattern.search(value, position)
        if match is None:
            break
        start, end = match.span()
        result.append(value[last_end:start])
        if end > last_end or start == 0:
            result.append(expand(match))
        last_end = end
        position = max(position + 1, end)
    result.append(value[last_end:])
    return "".join(result)
