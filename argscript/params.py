r"""
argscript parameter records.

Overview
- Records
  • ParamData: the core shared by every parameter (name, required/multiple
    modifiers, default/default_fn, choices/choices_fn).
  • FlagOptionParam: a `@flag` or `@option` parameter (short form, dash style,
    value notations).
  • PositionalParam: an `@arg` parameter (optional single value notation).

- Rendering
  • render() returns the canonical directive body; parsing it again yields an
    equal record. Canonical modifiers: '+' required+multiple, '!' required,
    '*' multiple.

Metadata (sanitized on construction)
- name: non-empty, [A-Za-z0-9_.-]+ (a short-only flag/option may use its
  short character instead, e.g. '#' for `-#`).
- default / default_fn: mutually exclusive.
- choices / choices_fn: mutually exclusive; choices is non-empty.
- choices_fn: (function name, validate) where validate is False for `[?`fn`]`.
- short: a single ASCII character other than '-'.
- dashes: "-" or "--", or "" when only a short form was declared.

Records are immutable; derive copies with copy.replace(record, field=value).

Quick example:
    >>> from argscript.grammar import parse_option_param
    >>> param = parse_option_param("-f --foo=a <FOO> A foo option")
    >>> param.short, param.default, param.notations
    ('f', 'a', ('FOO',))
    >>> param.render()
    '-f --foo=a <FOO> A foo option'
"""
from .scanner import Incomplete, is_name_char, is_short_char, default_value, choice_value
from .utils import *


def _render_value(value, rule, /):
    """
    Write `value` so that `rule` scans it back unchanged: bare when the bare
    text already does, double-quoted otherwise.

    A quoted value cannot carry a backslash, so a value holding one must be
    writable bare; anything else raises ValueError.
    """
    try:
        bare = rule(value) == ("", value)
    except Incomplete:
        bare = False
    if bare:
        return value
    if "\\" in value:
        raise ValueError(f"value {value!r} can be written neither bare nor quoted")
    return '"%s"' % value.replace('"', '\\"')


def _sanitize_core(cls, metadata, /):
    """
    Internal: validate and normalize the metadata shared by every parameter.

    Responsibilities
    - name: must be a non-empty string.
    - required/multiple: coerced to bool.
    - default/default_fn: strings or None, never both.
    - choices: None or a non-empty sequence of strings (normalized to a tuple).
    - choices_fn: None or a (name, validate) pair; never together with choices.

    Side effects
    - Mutates the provided metadata dict in place.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not name:
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")

    metadata["required"] = bool(metadata["required"])
    metadata["multiple"] = bool(metadata["multiple"])

    for field in ("default", "default_fn"):
        if not isinstance(metadata[field], str | None):
            raise TypeError(f"{cls.__typename__} '{field}' must be a string")
    if metadata["default"] is not None and metadata["default_fn"] is not None:
        raise ValueError(f"{cls.__typename__} cannot have both 'default' and 'default_fn'")

    if (choices := metadata["choices"]) is not None:
        if isinstance(choices, str):
            raise TypeError(f"{cls.__typename__} 'choices' must be a sequence of strings")
        choices = tuple(choices)
        if not all(isinstance(choice, str) for choice in choices):
            raise TypeError(f"{cls.__typename__} 'choices' must be a sequence of strings")
        if not choices:
            raise ValueError(f"{cls.__typename__} 'choices' cannot be empty")
        metadata["choices"] = choices

    if (choices_fn := metadata["choices_fn"]) is not None:
        try:
            function, validate = choices_fn
        except (TypeError, ValueError):
            raise TypeError(f"{cls.__typename__} 'choices_fn' must be a (name, validate) pair") from None
        if not isinstance(function, str) or not function:
            raise TypeError(f"{cls.__typename__} 'choices_fn' name must be a non-empty string")
        metadata["choices_fn"] = (function, bool(validate))
        if choices is not None:
            raise ValueError(f"{cls.__typename__} cannot have both 'choices' and 'choices_fn'")


def _sanitize_describe(cls, metadata, /):
    if not isinstance(metadata["describe"], str):
        raise TypeError(f"{cls.__typename__} 'describe' must be a string")


class ParamData(Record):
    """
    The core of a parameter declaration.

    ParamData is what the modifier grammar produces from a bare name plus its
    suffixes; FlagOptionParam and PositionalParam extend it with the fields
    specific to their tag.
    """

    __fields__ = (
        "name",
        "required",
        "multiple",
        "default",
        "default_fn",
        "choices",
        "choices_fn",
    )

    def __new__(
            cls,
            name,
            *,
            required=False,
            multiple=False,
            default=None,
            default_fn=None,
            choices=None,
            choices_fn=None,
            **extra
    ):
        metadata = {
            "name": name,
            "required": required,
            "multiple": multiple,
            "default": default,
            "default_fn": default_fn,
            "choices": choices,
            "choices_fn": choices_fn,
        } | extra
        _sanitize_core(cls, metadata)
        cls.__sanitize__(metadata)

        with super().__new__(cls) as self:
            for field in cls.__fields__:
                setattr(self, "-" + field, metadata[field])
        return self

    @classmethod
    def __sanitize__(cls, metadata, /):
        """
        Hook for subclasses: validate the fields they add to the core.
        """
        if extra := set(metadata) - set(cls.__fields__):
            raise TypeError(f"{cls.__typename__} got unexpected field(s) {', '.join(sorted(extra))}")
        if not all(map(is_name_char, metadata["name"])):
            raise ValueError(f"{cls.__typename__} 'name' must only contain [A-Za-z0-9_.-]")

    def render_name_value(self):
        """
        Render the name, its modifier and its choice/default clause.

        Examples
        - foo!           required
        - foo*[=a|b]     multiple, choices a|b, default a
        - foo=`_foo`     default generated by _foo
        - foo[?`_foo`]   suggestions from _foo, not validated
        """
        output = self.name
        match self.required, self.multiple:
            case True, True:
                output += "+"
            case True, False:
                output += "!"
            case False, True:
                output += "*"

        if self.choices is not None:
            values = [_render_value(value, choice_value) for value in self.choices]
            prefix = "=" if self.default is not None else ""
            output += "[%s%s]" % (prefix, "|".join(values))
        elif self.choices_fn is not None:
            function, validate = self.choices_fn
            output += "[%s`%s`]" % ("" if validate else "?", function)
        elif self.default is not None:
            output += "=" + _render_value(self.default, default_value)
        elif self.default_fn is not None:
            output += "=`%s`" % self.default_fn
        return output


class FlagOptionParam(ParamData):
    """
    A named parameter declared by `@flag` or `@option`.

    Highlights
    - flag: True for presence-only flags (no value notations, no clauses
      other than the '*' repeat modifier).
    - short: optional single character used as `-X`.
    - dashes: the dash style of the long form, kept verbatim for rendering;
      empty when the parameter only has a short form (then name == short).
    - notations: value-notation texts, e.g. ("FOO",) for `<FOO>`.
    """

    __fields__ = ParamData.__fields__ + (
        "describe",
        "short",
        "flag",
        "dashes",
        "notations",
    )

    def __new__(
            cls,
            name,
            *,
            describe="",
            short=None,
            flag=False,
            dashes="--",
            notations=(),
            **core
    ):
        return super().__new__(
            cls,
            name,
            describe=describe,
            short=short,
            flag=flag,
            dashes=dashes,
            notations=notations,
            **core
        )

    @classmethod
    def __sanitize__(cls, metadata, /):
        _sanitize_describe(cls, metadata)

        if (short := metadata["short"]) is not None:
            if not isinstance(short, str) or len(short) != 1 or not is_short_char(short):
                raise ValueError(f"{cls.__typename__} 'short' must be a single ASCII character other than '-'")

        if metadata["dashes"] not in ("-", "--", ""):
            raise ValueError(f"{cls.__typename__} 'dashes' must be '-', '--' or empty")
        if not metadata["dashes"] and (short is None or metadata["name"] != short):
            raise ValueError(f"{cls.__typename__} without a long form must be named after its short form")

        metadata["flag"] = bool(metadata["flag"])
        if isinstance(metadata["notations"], str):
            raise TypeError(f"{cls.__typename__} 'notations' must be a sequence of strings")
        metadata["notations"] = tuple(metadata["notations"])
        if not all(isinstance(notation, str) for notation in metadata["notations"]):
            raise TypeError(f"{cls.__typename__} 'notations' must be a sequence of strings")

        if metadata["flag"]:
            if metadata["notations"]:
                raise ValueError(f"{cls.__typename__} flags cannot have value notations")
            if metadata["required"]:
                raise ValueError(f"{cls.__typename__} flags cannot be required")
            if any(metadata[field] is not None for field in ("default", "default_fn", "choices", "choices_fn")):
                raise ValueError(f"{cls.__typename__} flags cannot have defaults or choices")

        if metadata["dashes"]:
            super().__sanitize__(metadata)
        elif extra := set(metadata) - set(cls.__fields__):
            raise TypeError(f"{cls.__typename__} got unexpected field(s) {', '.join(sorted(extra))}")

    def render(self):
        """
        Render the canonical `@flag`/`@option` body, e.g. `-f --foo=a <FOO> A foo option`.
        """
        output = []
        if self.dashes:
            if self.short is not None:
                output.append("-" + self.short)
            output.append(self.dashes + self.render_name_value())
        else:
            output.append("-" + self.render_name_value())
        output.extend("<%s>" % notation for notation in self.notations)
        if self.describe:
            output.append(self.describe)
        return " ".join(output)


class PositionalParam(ParamData):
    """
    A positional parameter declared by `@arg`.
    """

    __fields__ = ParamData.__fields__ + (
        "describe",
        "notation",
    )

    def __new__(cls, name, *, describe="", notation=None, **core):
        return super().__new__(cls, name, describe=describe, notation=notation, **core)

    @classmethod
    def __sanitize__(cls, metadata, /):
        _sanitize_describe(cls, metadata)
        if not isinstance(metadata["notation"], str | None):
            raise TypeError(f"{cls.__typename__} 'notation' must be a string")
        super().__sanitize__(metadata)

    def render(self):
        """
        Render the canonical `@arg` body, e.g. `foo <FOO> A foo arg`.
        """
        output = [self.render_name_value()]
        if self.notation is not None:
            output.append("<%s>" % self.notation)
        if self.describe:
            output.append(self.describe)
        return " ".join(output)


__all__ = (
    "ParamData",
    "FlagOptionParam",
    "PositionalParam",
)
