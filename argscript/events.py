"""
argscript events: the ordered output of a parse.

Scope
- EventKind: the closed set of directive kinds a script line can produce.
- EventData: a kind-tagged payload (one record class, dispatched by kind).
- Event: an EventData plus the 1-based line number it came from.

Payloads per kind
- DESCRIBE, VERSION, AUTHOR, CMD: free text (str)
- ALIASES: names of the preceding CMD (tuple[str, ...])
- FLAG_OPTION: FlagOptionParam
- POSITIONAL: PositionalParam
- FUNC: shell function name (str)
- UNKNOWN: the unrecognized tag word (str); kept for diagnostics, not an error

Matching
    match event.data:
        case EventData(EventKind.CMD, text): ...
        case EventData(EventKind.FLAG_OPTION, param): ...
"""
import copy
from enum import Enum

from .params import FlagOptionParam, PositionalParam
from .utils import *


class EventKind(Enum):
    """
    kinds of events (one per directive or function header).
    """
    DESCRIBE    = "describe"
    VERSION     = "version"
    AUTHOR      = "author"
    CMD         = "cmd"
    ALIASES     = "aliases"
    FLAG_OPTION = "flag-option"
    POSITIONAL  = "positional"
    FUNC        = "func"
    UNKNOWN     = "unknown"

    @property
    def describable(self):
        """
        whether this kind carries free text that continuation lines extend.
        """
        return self in (EventKind.DESCRIBE, EventKind.CMD, EventKind.FLAG_OPTION, EventKind.POSITIONAL)


_PAYLOADS = {
    EventKind.DESCRIBE: str,
    EventKind.VERSION: str,
    EventKind.AUTHOR: str,
    EventKind.CMD: str,
    EventKind.ALIASES: tuple,
    EventKind.FLAG_OPTION: FlagOptionParam,
    EventKind.POSITIONAL: PositionalParam,
    EventKind.FUNC: str,
    EventKind.UNKNOWN: str,
}


class EventData(Record):
    """
    A kind-tagged event payload.

    Construction validates the payload type against the kind; ALIASES accepts
    any sequence of strings and stores it as a tuple.
    """

    __fields__ = (
        "kind",
        "value",
    )

    def __new__(cls, kind, value):
        if not isinstance(kind, EventKind):
            raise TypeError(f"{cls.__typename__} 'kind' must be an event kind")
        if kind is EventKind.ALIASES:
            if isinstance(value, str):
                raise TypeError(f"{cls.__typename__} aliases must be a sequence of strings")
            value = tuple(value)
            if not all(isinstance(name, str) for name in value):
                raise TypeError(f"{cls.__typename__} aliases must be a sequence of strings")
        if not isinstance(value, _PAYLOADS[kind]):
            raise TypeError(f"{cls.__typename__} {kind.value} payload must be {_PAYLOADS[kind].__name__}")

        with super().__new__(cls) as self:
            setattr(self, "-kind", kind)
            setattr(self, "-value", value)
        return self

    def describe(self):
        """
        Return the free-text field of a describable payload.
        """
        match self:
            case EventData(EventKind.DESCRIBE | EventKind.CMD, text):
                return text
            case EventData(EventKind.FLAG_OPTION | EventKind.POSITIONAL, param):
                return param.describe
        raise TypeError(f"{self.kind.value} events carry no description")

    def with_describe(self, text, /):
        """
        Return a copy whose free-text field is replaced by `text`.
        """
        match self:
            case EventData(EventKind.DESCRIBE | EventKind.CMD, _):
                return EventData(self.kind, text)
            case EventData(EventKind.FLAG_OPTION | EventKind.POSITIONAL, param):
                return EventData(self.kind, copy.replace(param, describe=text))
        raise TypeError(f"{self.kind.value} events carry no description")


class Event(Record):
    """
    An EventData produced by the directive starting at `position` (1-based).
    """

    __fields__ = (
        "data",
        "position",
    )

    def __new__(cls, data, position):
        if not isinstance(data, EventData):
            raise TypeError(f"{cls.__typename__} 'data' must be event data")
        if not isinstance(position, int) or isinstance(position, bool) or position < 1:
            raise ValueError(f"{cls.__typename__} 'position' must be a positive line number")

        with super().__new__(cls) as self:
            setattr(self, "-data", data)
            setattr(self, "-position", position)
        return self


__all__ = (
    "EventKind",
    "EventData",
    "Event",
)
