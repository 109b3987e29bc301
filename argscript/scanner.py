r"""
argscript lexical primitives.

Overview
- Every rule is a plain function `rule(input, /)` over the remaining text of a
  line. It returns `(rest, value)` on success and None when it does not match;
  a rule that does not match never consumes anything, so callers can try the
  next alternative with the same input.
- Rules that need parameters are built by small factories (tag, take_till) and
  composed by alt() (ordered alternation, first success wins).

Character classes
- name characters:        [A-Za-z0-9_.-]
- function-name chars:    anything but whitespace and " ' ` ( ) [ ] { } < > $ & \ ; |
- short-flag characters:  ASCII function-name characters except '-'

Values
- quoted strings: '...' or "..." where a backslash may only escape the matching
  quote; the returned text is un-escaped. Running off the end of the line with
  an open quote raises Incomplete, which the line driver turns into a
  structural failure.
- default values: quoted, or a (possibly empty) bare run up to whitespace or '#'.
- choice values: never start with '=' or '`'; quoted, or a non-empty bare run
  up to '|' or ']'.
- value notations: '<' ... '>' with nested angle brackets balanced by depth.
"""
import functools
import re

_NAME = re.compile(r"[A-Za-z0-9_.-]+")
_FN_NAME = re.compile(r"[^ \t\"'`()\[\]{}<>$&\\;|]+")
_SPACES = re.compile(r"[ \t]*")


class Incomplete(Exception):
    """
    Raised when a rule reaches the end of input in the middle of a token.

    This is not a "no match": no alternative can recover from it, so it
    propagates to the line driver untouched.
    """

    def __init__(self, reason, /):
        super().__init__(reason)
        self.reason = reason


def is_name_char(char, /):
    return char.isascii() and (char.isalnum() or char in "_-.")


def is_fn_name_char(char, /):
    return char not in " \t\"'`()[]{}<>$&\\;|"


def is_short_char(char, /):
    return char.isascii() and is_fn_name_char(char) and char != "-"


def is_default_value_terminate(char, /):
    return char.isspace() or char == "#"


def is_choice_value_terminate(char, /):
    return char in "|]"


def alt(*rules):
    """
    Ordered alternation: the first rule that matches wins.
    """
    def rule(input, /):
        for candidate in rules:
            if (result := candidate(input)) is not None:
                return result
        return None
    return rule


@functools.cache
def tag(literal, /):
    """
    Build a rule matching `literal` exactly.
    """
    def rule(input, /):
        if input.startswith(literal):
            return input[len(literal):], literal
        return None
    return rule


def space0(input, /):
    """
    Zero or more spaces/tabs (always matches).
    """
    end = _SPACES.match(input).end()
    return input[end:], input[:end]


def space1(input, /):
    """
    One or more spaces/tabs.
    """
    if (end := _SPACES.match(input).end()) == 0:
        return None
    return input[end:], input[:end]


def name(input, /):
    """
    A parameter/tag name: one or more of [A-Za-z0-9_.-].
    """
    if match := _NAME.match(input):
        return input[match.end():], match.group()
    return None


def fn_name(input, /):
    """
    A shell function name.
    """
    if match := _FN_NAME.match(input):
        return input[match.end():], match.group()
    return None


def short_char(input, /):
    if input and is_short_char(input[0]):
        return input[1:], input[0]
    return None


def take_till(predicate, /):
    """
    Build a rule consuming characters up to (not including) the first one
    satisfying `predicate`. It matches the empty string too.
    """
    def rule(input, /):
        for index, current in enumerate(input):
            if predicate(current):
                return input[index:], input[:index]
        return "", input
    return rule


def quoted_string(input, /):
    """
    A single- or double-quoted string, returned without quotes and un-escaped.

    Only the matching quote may be escaped ("\\'" inside '...', '\\"' inside
    "..."); any other backslash sequence means this is not a quoted string.
    """
    if not input or (quote := input[0]) not in "'\"":
        return None
    chunks = []
    index = 1
    while index < len(input):
        current = input[index]
        if current == quote:
            return input[index + 1:], "".join(chunks)
        if current == "\\":
            if index + 1 >= len(input):
                raise Incomplete("unterminated quoted string")
            if input[index + 1] != quote:
                return None
            chunks.append(quote)
            index += 2
            continue
        chunks.append(current)
        index += 1
    raise Incomplete("unterminated quoted string")


def default_value(input, /):
    return alt(quoted_string, take_till(is_default_value_terminate))(input)


def choice_value(input, /):
    # '=' and '`' introduce the defaulted-list and generator forms.
    if input.startswith(("=", "`")):
        return None
    if (result := quoted_string(input)) is not None:
        return result
    residual, value = take_till(is_choice_value_terminate)(input)
    if not value:
        return None
    return residual, value


def value_fn(input, /):
    """
    A generator function reference: `name`.
    """
    if not input.startswith("`"):
        return None
    if (result := fn_name(input[1:])) is None:
        return None
    residual, value = result
    if not residual.startswith("`"):
        return None
    return residual[1:], value


def notation(input, /):
    """
    A value notation: '<' interior '>' where the interior may nest '<' '>' pairs.

    The interior is returned verbatim (display text only); the scan stops when
    the depth counter returns to zero. An unterminated notation does not match.
    """
    if not input.startswith("<"):
        return None
    depth = 1
    for index in range(1, len(input)):
        match input[index]:
            case "<":
                depth += 1
            case ">":
                depth -= 1
                if depth == 0:
                    return input[index + 1:], input[1:index]
    return None


def tail(input, /):
    """
    Trailing free text: end of line (empty text), or one or more spaces/tabs
    followed by the rest of the line stripped of surrounding whitespace.
    """
    if not input:
        return "", ""
    if (result := space1(input)) is None:
        return None
    residual, _ = result
    return "", residual.strip()


__all__ = (
    "Incomplete",
    "is_name_char",
    "is_fn_name_char",
    "is_short_char",
    "is_default_value_terminate",
    "is_choice_value_terminate",
    "alt",
    "tag",
    "space0",
    "space1",
    "name",
    "fn_name",
    "short_char",
    "take_till",
    "quoted_string",
    "default_value",
    "choice_value",
    "value_fn",
    "notation",
    "tail",
)
