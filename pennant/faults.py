"""
Pennant faults (configuration errors, parse faults) and rendering.

Scope
- ErrorPolicy: what a command does when parsing fails (continue, exit, panic, log).
- FaultCode: stable numeric identifiers for every user-facing fault. Codes are
  grouped by domain so logs and searches stay predictable.
- ConfigurationError and subclasses: programming mistakes made while declaring
  flags and commands. Raised immediately, never routed through a policy.
- CommandException and subclasses: faults caused by user input (unknown flags,
  missing or malformed values) plus the NoMainFunctionError usage fault. They
  carry a message and options, and know how to render themselves.
- trigger(): central entry point that merges runtime options into a fault and
  applies the error policy.
- getdoc(): optional description lookup for a code from the host application.

UX goals
- Flag-first messages: every message names the offending flag and, for value
  faults, quotes the literal text that was rejected.
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).

Integration
- Command.handle(fault) calls trigger(fault, command=..., policy=..., console=...,
  colorful=..., fancy=...).
- PANIC raises the fault; EXIT prints it and exits with EXIT_STATUS; CONTINUE prints
  it and returns it; LOG prints it and returns None.
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .logger import logger
from .utils import Unset

console = Console(stderr=True)

# Process status used by ErrorPolicy.EXIT, Command.print_help() and Command.exit() defaults.
EXIT_STATUS = 1


class ErrorPolicy(IntEnum):
    """
    response mode applied to every parse fault of a command (inherited by children).

    - CONTINUE: print the fault and hand it back to the caller.
    - EXIT: print the fault and terminate the process with EXIT_STATUS.
    - PANIC: raise the fault.
    - LOG: print the fault and carry on as if nothing happened.
    """
    CONTINUE = 0
    EXIT = 1
    PANIC = 2
    LOG = 3


class FaultCode(IntEnum):
    """
    canonical fault codes used across pennant (stable identifiers).

    grouping (by high-level domain)
    - flags (1111x)
      • UNKNOWN_FLAG, BOOLEAN_ASSIGNMENT, MISSING_VALUE, MISPLACED_VALUE_FLAG
    - values (1112x)
      • INVALID_VALUE, VALUE_OUT_OF_RANGE
    - usage (1115x)
      • NO_MAIN_FUNCTION

    normalize() lets the host remap codes to custom labels while the numbers stay stable.
    """
    # --- flag errors (1111x) ---
    UNKNOWN_FLAG         = 11112
    BOOLEAN_ASSIGNMENT   = 11113
    MISSING_VALUE        = 11117
    MISPLACED_VALUE_FLAG = 11118

    # --- value errors (1112x) ---
    INVALID_VALUE        = 11123
    VALUE_OUT_OF_RANGE   = 11124

    # --- usage errors (1115x) ---
    NO_MAIN_FUNCTION     = 11151

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ConfigurationError(ValueError):
    """Base class for mistakes made while declaring flags and commands."""


class DuplicateFlagNameError(ConfigurationError): ...
class InvalidFlagNameError(ConfigurationError): ...
class ShortNameCollisionError(ConfigurationError): ...
class NameInUseError(ConfigurationError): ...
class UndefinedHelpFlagError(ConfigurationError): ...


class CommandException(Exception):
    """
    Base type for faults raised while parsing or executing a command.

    Options recognized while rendering and triggering
    - command: the Command that failed (its root name titles the output).
    - policy: the ErrorPolicy to apply (PANIC when absent).
    - console: the rich Console to print on (module console when absent).
    - colorful / fancy: styling switches.
    - code / title / hint: override the class defaults.
    - docs: host documentation for the code, shown under the hint.
    - flag / literal: the offending flag name and value text, when relevant.
    """
    __fault__ = None
    __title__ = "command error"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def flag(self):
        return self.options.get("flag")

    @property
    def literal(self):
        return self.options.get("literal")

    @property
    def code(self):
        return self.options.get("code", type(self).__fault__)

    def __str__(self):
        return self.message if self.message is not Unset else type(self).__title__

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
            "docs": "dim #C8C8D0",  # host documentation line
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        command = self.options.get("command")
        prog = text(
            getattr(main, "__prog__", command.root.name if command is not None else "pennant"),
            styler("prog-name"),
        )
        code = self.code

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code.normalize() if code is not None else "-", styler("code")),
            " | ",
            text(self.options.get("title", type(self).__title__).title(), styler("error-title")),
            " ]"
        )
        message = text(str(self), styler("error-message"))

        parts = [message]
        if hint := self.options.get("hint"):
            parts.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))
        if docs := self.options.get("docs"):
            parts.append(text(docs, styler("docs")))

        if fancy:
            return Panel(Group(*parts), title=header, title_align="left")

        return Group(header, *parts)

    def __trigger__(self):
        policy = self.options.get("policy", ErrorPolicy.PANIC)
        logger.debug("triggering %s under %s", type(self).__name__, policy.name)
        match policy:
            case ErrorPolicy.PANIC:
                raise self
            case ErrorPolicy.EXIT:
                self.options.get("console", console).print(self)
                sys.exit(EXIT_STATUS)
            case ErrorPolicy.CONTINUE:
                self.options.get("console", console).print(self)
                return self
            case ErrorPolicy.LOG:
                self.options.get("console", console).print(self)
                return None
        raise ValueError(f"unrecognized error policy {policy!r}")

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        replica = type(self)(self.message, **{**self.options, **overrides})
        replica.__cause__ = self.__cause__
        return replica


class UnknownFlagError(CommandException):
    __fault__ = FaultCode.UNKNOWN_FLAG
    __title__ = "unknown flag"


class UnexpectedValueError(CommandException):
    __fault__ = FaultCode.BOOLEAN_ASSIGNMENT
    __title__ = "unexpected value"


class MisplacedValueFlagError(UnexpectedValueError):
    __fault__ = FaultCode.MISPLACED_VALUE_FLAG
    __title__ = "misplaced value flag"


class MissingValueError(CommandException):
    __fault__ = FaultCode.MISSING_VALUE
    __title__ = "missing value"


class ValueParseError(CommandException):
    __fault__ = FaultCode.INVALID_VALUE
    __title__ = "invalid value"


class ValueRangeError(CommandException):
    __fault__ = FaultCode.VALUE_OUT_OF_RANGE
    __title__ = "value out of range"


class NoMainFunctionError(CommandException):
    __fault__ = FaultCode.NO_MAIN_FUNCTION
    __title__ = "nothing to execute"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandException).
    - options are merged into the fault via copy.replace(fault, **options) before triggering.
    - the return value is whatever the policy hands back: the fault under CONTINUE,
      None under LOG; PANIC raises and EXIT never returns.

    typical options
    - command, policy, console, colorful, fancy, and any per-call override of
      code, title or hint.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    return copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    lookup
    - the host application may expose a __docs__ mapping in __main__ where keys
      are FaultCode instances and values are short documentation strings.
    - when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "EXIT_STATUS",
    "ErrorPolicy",
    "FaultCode",
    "ConfigurationError",
    "DuplicateFlagNameError",
    "InvalidFlagNameError",
    "ShortNameCollisionError",
    "NameInUseError",
    "UndefinedHelpFlagError",
    "CommandException",
    "UnknownFlagError",
    "UnexpectedValueError",
    "MisplacedValueFlagError",
    "MissingValueError",
    "ValueParseError",
    "ValueRangeError",
    "NoMainFunctionError",
    "trigger",
    "getdoc",
)
