"""
argscript line driver.

Scope
- parse(source): walk a script line by line and return its ordered events.
- take_comment_lines(lines, start): fold the plain comment lines following a
  describable directive into one text block.

Line model
- Lines are split on '\\n'; a trailing '\\r' is dropped from each line and a
  final newline does not produce an extra empty line.
- Positions are 1-based line numbers of the directive itself; consumed
  continuation lines never produce events.

Faults
- a parameter tag whose body does not parse → DirectiveBodyInvalid
  ("syntax error at line N")
- a quoted value running off the end of its line → StructuralParseFailure
  ("fail to parse at line N, unterminated quoted string")
Both are surfaced through faults.trigger() with the caller's options.
"""
from .events import Event
from .faults import StructuralParseFailure, DirectiveBodyInvalid, trigger
from .grammar import malformed, parse_line, parse_normal_comment
from .scanner import Incomplete


def split_lines(source, /):
    if not isinstance(source, str):
        raise TypeError("parse() argument must be a string")
    lines = source.split("\n")
    if not lines[-1]:
        lines.pop()
    return [line.removesuffix("\r") for line in lines]


def take_comment_lines(lines, start, /):
    """
    Collect the plain comment lines starting at index `start`.

    Returns (text, count): the consumed remainders, each prefixed with a
    newline, and how many lines were consumed.
    """
    text = ""
    index = start
    while index < len(lines) and (comment := parse_normal_comment(lines[index])) is not None:
        text += "\n" + comment
        index += 1
    return text, index - start


def parse(source, /, *, shell=False, fancy=False, colorful=True):
    """
    Parse a script and return its events in source order.

    Options
    - shell: render faults on stderr and exit(1) instead of raising.
    - fancy: wrap rendered faults in a panel.
    - colorful: style rendered faults.

    Example
        >>> [event.data.kind.value for event in parse("# @cmd Build\\nbuild() { :; }")]
        ['cmd', 'func']
    """
    options = {"shell": shell, "fancy": fancy, "colorful": colorful}
    lines = split_lines(source)
    events = []
    index = 0
    while index < len(lines):
        line = lines[index]
        position = index + 1
        try:
            data = parse_line(line)
        except Incomplete as error:
            return trigger(StructuralParseFailure(
                f"fail to parse at line {position}, {error.reason}",
                position=position,
                line=line
            ), **options)

        if data is malformed:
            return trigger(DirectiveBodyInvalid(
                f"syntax error at line {position}",
                position=position,
                line=line
            ), **options)

        index += 1
        if data is None:
            continue

        if data.kind.describable:
            text, count = take_comment_lines(lines, index)
            data = data.with_describe((data.describe() + text).strip())
            index += count

        events.append(Event(data, position))
    return events


__all__ = (
    "parse",
    "take_comment_lines",
)
