"""
argscript faults (script parse errors) and how they are shown.

Scope
- FaultCode: stable numeric identifiers for the two ways a script fails to parse.
- ParseException: base fault; carries the message plus an immutable options
  mapping and renders itself with rich.
- StructuralParseFailure / DirectiveBodyInvalid: the concrete faults.
- trigger(): surfaces a fault (raise, or print and exit in shell mode).
- getdoc(): host-supplied documentation for a fault code.

What a rendered fault shows
- a header  [ prog — code | Title ]
- the message, e.g. "syntax error at line 7"
- the offending script line behind a line-number gutter
- a single hint, and the host documentation for the code when there is one

Host configuration (optional attributes of __main__)
- __prog__:   program name in the header (defaults to "argscript").
- __styles__: overrides for the style names used below.
- __codes__:  FaultCode → label shown instead of the number.
- __docs__:   FaultCode → documentation text (see getdoc()).
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    fault codes of the script parser.

    - STRUCTURAL_PARSE_FAILURE: a line could not be tokenized (an open quote).
    - DIRECTIVE_BODY_INVALID: a @flag/@option/@arg body does not parse.
    """
    STRUCTURAL_PARSE_FAILURE = 21101
    DIRECTIVE_BODY_INVALID   = 21102

    def normalize(self):
        """
        label of this code for display: the host's __codes__ entry, or the number.
        """
        labels = getattr(__import__("__main__"), "__codes__", {})
        return str(labels.get(self, self.value))


class ParseException(Exception):
    """
    base type of every script parse fault.

    options
    - position / line: 1-based number and text of the offending script line.
    - code / title / hint: presentation, defaulted from the concrete fault type.
    - shell / fancy / colorful: how trigger() surfaces the fault.
    """
    __code__ = Unset
    __title__ = Unset
    __hint__ = Unset

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType({
            "code": type(self).__code__,
            "title": type(self).__title__,
            "hint": type(self).__hint__,
            "position": None,
            "line": None,
            "shell": False,
            "fancy": False,
            "colorful": True,
        } | options)

    @property
    def position(self):
        return self.options["position"]

    @property
    def line(self):
        return self.options["line"]

    def __rich__(self):
        main = __import__("__main__")
        palette = defaultdict(str, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB454",
            "title": "bold #FF6B6B",
            "message": "#D0D0D8",
            "gutter": "#6B6F7A",
            "source": "#E6E6F0",
            "caret": "bold #FF6B6B",
            "hint": "italic #9CE19C",
            "docs": "dim #9CA3AF",
        } | getattr(main, "__styles__", {}))

        def styled(fragment, name):
            fragment = "" if fragment is None or fragment is Unset else str(fragment)
            return Text(fragment, palette[name] if self.options["colorful"] else "")

        code = self.options["code"]
        header = Text.assemble(
            "[ ",
            styled(getattr(main, "__prog__", "argscript"), "prog-name"),
            " — ",
            styled(code.normalize() if isinstance(code, FaultCode) else None, "code"),
            " | ",
            styled(str(self.options["title"] or "").title(), "title"),
            " ]"
        )

        renders = [styled(self.message or None, "message")]
        if self.line is not None:
            gutter = f"{self.position or ''} | "
            renders.append(Text.assemble(styled(gutter, "gutter"), styled(self.line, "source")))
            indent = len(self.line) - len(self.line.lstrip())
            renders.append(Text.assemble(
                " " * (len(gutter) + indent),
                styled("^" * max(len(self.line.strip()), 1), "caret")
            ))
        if self.options["hint"]:
            renders.append(styled("→ %s" % self.options["hint"], "hint"))
        if isinstance(code, FaultCode) and (docs := getdoc(code)):
            renders.append(styled(docs, "docs"))

        if self.options["fancy"]:
            return Panel(Group(*renders), title=header, title_align="left")
        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options["shell"]:
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **(dict(self.options) | overrides))


class StructuralParseFailure(ParseException):
    __code__ = FaultCode.STRUCTURAL_PARSE_FAILURE
    __title__ = "structural parse failure"
    __hint__ = "close every quoted value on the line where it starts"


class DirectiveBodyInvalid(ParseException):
    __code__ = FaultCode.DIRECTIVE_BODY_INVALID
    __title__ = "invalid directive"
    __hint__ = "check the parameter name, its modifier and its [..] or = clause"


def trigger(fault, /, **options):
    """
    surface `fault` after merging `options` into it with copy.replace().

    the fault must implement __trigger__ and __replace__ (see ParseException);
    outside shell mode this raises, in shell mode it prints and exits.
    """
    if not callable(getattr(fault, "__trigger__", None)) or not callable(getattr(fault, "__replace__", None)):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    documentation registered by the host for `code` in __main__.__docs__, or None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    return getattr(__import__("__main__"), "__docs__", {}).get(code)


__all__ = (
    "ParseException",
    "StructuralParseFailure",
    "DirectiveBodyInvalid",
    "FaultCode",
    "trigger",
    "getdoc",
)
