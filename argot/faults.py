"""
Argot faults: configuration errors, configuration warnings, and cancellation.

Kinds
- CommandException (raised) and CommandWarning (warnings.warn) report mistakes
  in how a command or argument was declared. Both carry a message plus
  free-form options (title, code, hint, tool, colorful, fancy, argument, ...)
  and render themselves with rich.
- CommandCancelled is raised when a parse is stopped on purpose. It derives
  from Exception directly, never from CommandException, so a host can tell an
  intended stop apart from a declaration mistake or a failing resolver.

Surfacing
- trigger(fault, **options) copies the fault with the options merged in
  (copy.replace) and calls its __trigger__: errors raise, warnings warn.
- Command.trigger adds the command itself as `tool` together with its
  colorful/fancy switches.

Host hooks read from __main__
- __prog__   : program name shown in rendered faults.
- __codes__  : {FaultCode: label} replacing numeric codes when rendering.
- __docs__   : {FaultCode: text} returned by getdoc().
- __styles__ : {style-name: rich style} overriding the default palettes.
"""
import copy
import inspect
import warnings
from abc import ABC
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


def _host(name, default):
    return getattr(__import__("__main__"), name, default)


class FaultCode(IntEnum):
    """
    Stable numeric identifiers of argot faults.

    211xx are declaration errors, 221xx declaration warnings.
    """
    UNKNOWN_MATCH               = 21101
    MISSING_PREFIX              = 21102

    DUPLICATED_IDENTIFIER       = 22101

    def normalize(self):
        """
        Label for this code: the host's __codes__ entry, else the number.
        """
        return str(_host("__codes__", {}).get(self, self.value))


def _render(fault, palette, kind):
    """
    Rich renderable for a fault.

    Layout: a "[ prog — code | Title ]" header, the message, then an arrow and
    the hint when one is given. With `fancy` the body goes in a Panel titled
    by the header, as wide as `ratio` of the console when that option is set.
    Styles apply only with `colorful`.
    """
    options = fault.options
    colorful = options.get("colorful", False)
    styles = defaultdict(str, palette | _host("__styles__", {}))

    def styled(fragment, style):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style])

    code = options.get("code")
    header = Text.assemble(
        "[ ",
        styled(_host("__prog__", getattr(options.get("tool"), "name", "argot")), "prog-name"),
        " — ",
        styled(code.normalize() if isinstance(code, FaultCode) else "?", "code"),
        " | ",
        styled(options.get("title", type(fault).__name__).title(), kind + "-title"),
        " ]",
    )

    body = [styled(coalesce(fault.message, ""), kind + "-message")]
    if hint := options.get("hint"):
        body.append(Text.assemble(styled(" → ", "hint-arrow"), styled(hint, "hint")))

    if not options.get("fancy", False):
        return Group(header, *body)

    width = None
    if "ratio" in options:
        width = int((console.width - 4) * options["ratio"])
    return Panel(Group(*body), title=header, title_align="left", width=width)


class _Fault:
    """
    Message and read-only options shared by errors and warnings.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = message
        self.options = MappingProxyType(options)

    def __replace__(self, *positional, **overrides):
        assert not positional, "copy.replace() only takes keyword options"
        return type(self)(self.message, **(dict(self.options) | overrides))


class CommandException(_Fault, Exception):
    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        }, "error")

    def __trigger__(self):
        raise self from None


class UnknownMatchError(CommandException): ...
class MissingPrefixError(CommandException): ...


class CommandWarning(_Fault, ABC, Warning):
    def __rich__(self):
        # Warnings use the amber/soft palette.
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",
            "warning-title": "bold #FFC2E0",
            "warning-message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        }, "warning")

    def __trigger__(self):
        warnings.warn(self, stacklevel=len(inspect.stack()))


class DuplicatedIdentifierWarning(CommandWarning): ...


class CommandCancelled(Exception):
    """
    Raised by Command.parse when a cancellation probe stops the parse.

    `feedback` is what the probe returned (already sent to the context), or
    Unset when it cancelled silently. Resolvers may raise it too.
    """

    def __init__(self, feedback=Unset, /):
        super().__init__("command cancelled")
        self.feedback = feedback

    def __repr__(self):
        if self.feedback is Unset:
            return "CommandCancelled()"
        return "CommandCancelled(%r)" % (self.feedback,)


def trigger(fault, /, **options):
    """
    Merge `options` into a copy of `fault`, then raise or warn it.
    """
    for hook in ("__trigger__", "__replace__"):
        if not callable(getattr(fault, hook, None)):
            raise TypeError("trigger() expects a fault implementing __trigger__ and __replace__")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    Host documentation for `code` (from __main__.__docs__), or None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() expects a FaultCode")
    return _host("__docs__", {}).get(code)


__all__ = (
    "CommandException",
    "UnknownMatchError",
    "MissingPrefixError",
    "CommandWarning",
    "DuplicatedIdentifierWarning",
    "CommandCancelled",
    "FaultCode",
    "trigger",
    "getdoc",
)
