"""
argscript grammar: directive lines and function headers.

What this module provides
- parse_line(line): classify one physical line as
  • None       → ignored (blank, code, shebang, plain comment, ...)
  • malformed  → a parameter tag whose body does not parse
  • EventData  → a parsed directive or function header
- parse_option_param / parse_flag_param / parse_positional_param: parse the
  body of a parameter tag into its record (None when it does not parse).
- parse_normal_comment(line): the text of a plain (non-directive) comment
  line, used to fold continuation lines into descriptions.

Parameter clauses
- The name/modifier/clause part is tried in this order, first match wins:
    1. name[!*+][=a|b|...]    defaulted choice list (forces required=False)
    2. name[!*+][`fn`]        choices generated by fn ([?`fn`] skips validation)
    3. name[!*+][a|b|...]     choice list
    4. name=`fn`              default generated by fn
    5. name=value             literal default
    6. name[!*+]              bare modifier
  The order matters: `=a|b` must be read as a defaulted list before `=value`
  gets a chance to consume `=a`.

Errors
- Unterminated quoted values raise scanner.Incomplete from every entry point;
  the line driver reports them as structural failures.
"""
import copy

from rich.text import Text

from .events import EventKind, EventData
from .params import ParamData, FlagOptionParam, PositionalParam
from .scanner import *
from .utils import fields

# Outcome of a line that opens a parameter tag but whose body does not parse.
# Falsy like the ignored outcome, so always compare by identity.
malformed = type("malformed-type", (), {
    "__module__": None,
    "__slots__": (),
    "__rich__": lambda self: Text.assemble(("(", "yellow"), ("malformed", "red"), (")", "yellow")),
    "__repr__": lambda self: "(malformed)",
    "__bool__": lambda self: False,
    "__doc__": "internal singleton for directive lines whose body does not parse",
})()


# --- parameter clauses ---

def _param_name(input, /):
    if (result := name(input)) is None:
        return None
    residual, value = result
    return residual, ParamData(value)


def _param_modifier(input, /):
    """
    `name!` required, `name*` multiple, `name+` required and multiple, `name`.
    """
    if (result := _param_name(input)) is None:
        return None
    residual, arg = result
    match residual[:1]:
        case "!":
            return residual[1:], copy.replace(arg, required=True)
        case "*":
            return residual[1:], copy.replace(arg, multiple=True)
        case "+":
            return residual[1:], copy.replace(arg, required=True, multiple=True)
    return residual, arg


def _bracketed(rule, /):
    def bracketed(input, /):
        if not input.startswith("["):
            return None
        if (result := rule(input[1:])) is None:
            return None
        residual, value = result
        if not residual.startswith("]"):
            return None
        return residual[1:], value
    return bracketed


def _choices(input, /):
    """
    `a|b|c`: one or more choice values separated by '|'.
    """
    if (result := choice_value(input)) is None:
        return None
    residual, head = result
    choices = [head]
    while residual.startswith("|") and (result := choice_value(residual[1:])) is not None:
        residual, value = result
        choices.append(value)
    return residual, tuple(choices)


def _choices_default(input, /):
    """
    `=a|b|c`: at least two choices, the first one being the default.
    """
    if not input.startswith("="):
        return None
    if (result := _choices(input[1:])) is None:
        return None
    residual, choices = result
    if len(choices) < 2:
        return None
    return residual, choices


def _choices_fn(input, /):
    """
    `` `fn` `` (validated) or `` ?`fn` `` (suggestions only).
    """
    validate = not input.startswith("?")
    if (result := value_fn(input if validate else input[1:])) is None:
        return None
    residual, function = result
    return residual, (function, validate)


def _param_modifier_choices_default(input, /):
    if (result := _param_modifier(input)) is None:
        return None
    residual, arg = result
    if (result := _bracketed(_choices_default)(residual)) is None:
        return None
    residual, choices = result
    return residual, copy.replace(arg, choices=choices, required=False, default=choices[0])


def _param_modifier_choices_fn(input, /):
    if (result := _param_modifier(input)) is None:
        return None
    residual, arg = result
    if (result := _bracketed(_choices_fn)(residual)) is None:
        return None
    residual, choices_fn = result
    return residual, copy.replace(arg, choices_fn=choices_fn)


def _param_modifier_choices(input, /):
    if (result := _param_modifier(input)) is None:
        return None
    residual, arg = result
    if (result := _bracketed(_choices)(residual)) is None:
        return None
    residual, choices = result
    return residual, copy.replace(arg, choices=choices)


def _param_assign_fn(input, /):
    if (result := _param_name(input)) is None:
        return None
    residual, arg = result
    if not residual.startswith("=") or (result := value_fn(residual[1:])) is None:
        return None
    residual, function = result
    return residual, copy.replace(arg, default_fn=function)


def _param_assign(input, /):
    if (result := _param_name(input)) is None:
        return None
    residual, arg = result
    if not residual.startswith("=") or (result := default_value(residual[1:])) is None:
        return None
    residual, value = result
    return residual, copy.replace(arg, default=value)


_param = alt(
    _param_modifier_choices_default,
    _param_modifier_choices_fn,
    _param_modifier_choices,
    _param_assign_fn,
    _param_assign,
    _param_modifier,
)


# --- shared pieces of named parameters ---

def _short(input, /):
    """
    Optional `-X` short form; X must be followed by whitespace.
    """
    if input.startswith("-") and (result := short_char(input[1:])) is not None:
        residual, value = result
        if space1(residual) is not None:
            return residual, value
    return input, None


def _dashes(input, /):
    return alt(tag("--"), tag("-"))(input)


def _value_notation(input, /):
    residual, _ = space0(input)
    return notation(residual)


def _zero_or_many_value_notations(input, /):
    notations = []
    while (result := _value_notation(input)) is not None:
        input, value = result
        notations.append(value)
    return input, tuple(notations)


def _zero_or_one_value_notation(input, /):
    if (result := _value_notation(input)) is None:
        return input, None
    return result


def _single_char(input, /):
    # rejects `-fo...` so that only a lone short name reaches the short-only forms
    count = 0
    for current in input:
        if not (current.isascii() and current.isalnum()):
            break
        count += 1
    return (input, "") if count <= 1 else None


# --- @option ---

def _with_long_option_param(input, /):
    residual, short = _short(input)
    residual, _ = space0(residual)
    if (result := _dashes(residual)) is None:
        return None
    residual, dashes = result
    if (result := _param(residual)) is None:
        return None
    residual, arg = result
    residual, notations = _zero_or_many_value_notations(residual)
    if (result := tail(residual)) is None:
        return None
    residual, describe = result
    return residual, FlagOptionParam(
        **fields(arg),
        describe=describe,
        short=short,
        flag=False,
        dashes=dashes,
        notations=notations
    )


def _no_long_option_param(input, /):
    residual, _ = space0(input)
    if not residual.startswith("-") or _single_char(residual[1:]) is None:
        return None
    if (result := _param(residual[1:])) is None:
        return None
    residual, arg = result
    if len(arg.name) != 1 or not is_short_char(arg.name):
        return None
    residual, notations = _zero_or_many_value_notations(residual)
    if (result := tail(residual)) is None:
        return None
    residual, describe = result
    return residual, FlagOptionParam(
        **fields(arg),
        describe=describe,
        short=arg.name[0],
        flag=False,
        dashes="",
        notations=notations
    )


# --- @flag ---

def _with_long_flag_param(input, /):
    residual, short = _short(input)
    residual, _ = space0(residual)
    if (result := _dashes(residual)) is None:
        return None
    residual, dashes = result
    if (result := _param_name(residual)) is None:
        return None
    residual, arg = result
    if multiple := residual.startswith("*"):
        residual = residual[1:]
    if (result := tail(residual)) is None:
        return None
    residual, describe = result
    return residual, FlagOptionParam(
        arg.name,
        describe=describe,
        short=short,
        flag=True,
        dashes=dashes,
        multiple=multiple
    )


def _no_long_flag_param(input, /):
    residual, _ = space0(input)
    if not residual.startswith("-") or (result := short_char(residual[1:])) is None:
        return None
    residual, short = result
    if multiple := residual.startswith("*"):
        residual = residual[1:]
    if (result := tail(residual)) is None:
        return None
    residual, describe = result
    return residual, FlagOptionParam(
        short,
        describe=describe,
        short=short,
        flag=True,
        dashes="",
        multiple=multiple
    )


# --- @arg ---

def _positional_param(input, /):
    if (result := _param(input)) is None:
        return None
    residual, arg = result
    residual, notation = _zero_or_one_value_notation(residual)
    if (result := tail(residual)) is None:
        return None
    residual, describe = result
    return residual, PositionalParam(**fields(arg), describe=describe, notation=notation)


_option_param = alt(_with_long_option_param, _no_long_option_param)
_flag_param = alt(_with_long_flag_param, _no_long_flag_param)


def parse_option_param(input, /):
    """
    Parse an `@option` body, e.g. `-f --foo=a <FOO> A foo option`.

    Returns the FlagOptionParam, or None when the body does not parse.
    """
    if (result := _option_param(input)) is None:
        return None
    return result[1]


def parse_flag_param(input, /):
    """
    Parse a `@flag` body, e.g. `-f --foo* A repeatable flag`.
    """
    if (result := _flag_param(input)) is None:
        return None
    return result[1]


def parse_positional_param(input, /):
    """
    Parse an `@arg` body, e.g. `foo*[a|b] <FOO> A foo arg`.
    """
    if (result := _positional_param(input)) is None:
        return None
    return result[1]


# --- tags ---

_TEXT_TAGS = {
    "describe": EventKind.DESCRIBE,
    "version": EventKind.VERSION,
    "author": EventKind.AUTHOR,
    "cmd": EventKind.CMD,
}

_PARAM_TAGS = {
    "flag": (_flag_param, EventKind.FLAG_OPTION),
    "option": (_option_param, EventKind.FLAG_OPTION),
    "arg": (_positional_param, EventKind.POSITIONAL),
}


def _introducer(input, /):
    """
    One or more '#', optional spaces/tabs, then '@'.
    """
    residual = input.lstrip("#")
    if residual == input:
        return None
    residual, _ = space0(residual)
    if not residual.startswith("@"):
        return None
    return residual[1:], "@"


def _tag_text(input, /):
    for keyword, kind in _TEXT_TAGS.items():
        if (result := tag(keyword)(input)) is None:
            continue
        if (result := tail(result[0])) is None:
            continue
        residual, text = result
        return residual, EventData(kind, text)
    return None


def _tag_param(input, /):
    if not input.startswith(tuple(_PARAM_TAGS)):
        return None
    for keyword, (rule, kind) in _PARAM_TAGS.items():
        if (result := tag(keyword)(input)) is None or (result := space1(result[0])) is None:
            continue
        if (result := rule(result[0])) is not None:
            residual, param = result
            return residual, EventData(kind, param)
    # the keyword is committed: no other tag may claim this line
    return input, malformed


def _name_list(input, /):
    """
    `a, b ,c`: names separated by ',' with optional spaces/tabs around each.
    """
    def element(input, /):
        residual, _ = space0(input)
        if (result := name(residual)) is None:
            return None
        residual, value = result
        return space0(residual)[0], value

    if (result := element(input)) is None:
        return None
    residual, head = result
    names = [head]
    # a trailing ',' without a name after it is left unconsumed
    while residual.startswith(",") and (result := element(residual[1:])) is not None:
        residual, value = result
        names.append(value)
    return residual, tuple(names)


def _tag_alias(input, /):
    if (result := tag("alias")(input)) is None or (result := space1(result[0])) is None:
        return None
    if (result := _name_list(result[0])) is None:
        return None
    residual, names = result
    return residual, EventData(EventKind.ALIASES, names)


def _tag_unknown(input, /):
    if (result := name(input)) is None:
        return None
    residual, word = result
    return residual, EventData(EventKind.UNKNOWN, word)


def _tag(input, /):
    if (result := _introducer(input)) is None:
        return None
    return alt(_tag_text, _tag_param, _tag_alias, _tag_unknown)(result[0])


# --- function headers ---

def _fn_keyword(input, /):
    """
    `function foo`
    """
    residual, _ = space0(input)
    if (result := tag("function")(residual)) is None or (result := space1(result[0])) is None:
        return None
    return fn_name(result[0])


def _fn_no_keyword(input, /):
    """
    `foo ()`, `foo()`, `foo ( )`
    """
    residual, _ = space0(input)
    if (result := fn_name(residual)) is None:
        return None
    residual, value = result
    residual, _ = space0(residual)
    if not residual.startswith("("):
        return None
    residual, _ = space0(residual[1:])
    if not residual.startswith(")"):
        return None
    return residual[1:], value


def _fn(input, /):
    if (result := alt(_fn_keyword, _fn_no_keyword)(input)) is None:
        return None
    residual, value = result
    return residual, EventData(EventKind.FUNC, value)


# --- lines ---

def parse_line(line, /):
    """
    Classify one physical line.

    Returns
    - None when the line is ignored,
    - malformed when it opens a parameter tag whose body does not parse,
    - the EventData of a directive or function header otherwise.

    Raises
    - scanner.Incomplete when a quoted value is not terminated.
    """
    if (result := alt(_tag, _fn)(line)) is None:
        return None
    return result[1]


def parse_normal_comment(line, /):
    """
    Return the text of a plain comment line, or None for any other line.

    A plain comment is '#'s followed by nothing but spaces/tabs, or '#'s plus
    at most one space/tab whose remainder does not start a '@' directive. The
    remainder keeps any further indentation.
    """
    residual = line.lstrip("#")
    if residual == line:
        return None
    if not residual.strip(" \t"):
        return ""
    if residual.startswith((" ", "\t")):
        residual = residual[1:]
    if space0(residual)[0].startswith("@"):
        return None
    return residual


__all__ = (
    "malformed",
    "parse_line",
    "parse_option_param",
    "parse_flag_param",
    "parse_positional_param",
    "parse_normal_comment",
)
