"""
Flagset faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing fault.
  Codes are grouped by domain (parsing, registration, completion) so logs and
  searches stay predictable.
- FlagSetException: base type that carries a message plus options and knows how
  to render itself with rich in a friendly, actionable way.
- trigger(): central entry point to surface a fault (raise it, or render it and
  exit when running in shell mode).
- getdoc(): optional description lookup for a code from the host application.

Integration
- The flag set raises faults while registering, parsing and completing.
- Hosts either catch them, or call trigger()/FlagSet.trigger() to render them
  with the usage text and exit.
"""
import sys
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, UnsetType

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the flag set (stable identifiers).

    grouping (by high-level domain)
    - parsing (2111x flags / 2112x positionals)
      • UNKNOWN_FLAG, MALFORMED_FLAG, MISSING_VALUE, TYPE_MISMATCH,
        ARGUMENT_COUNT, UNKNOWN_ARGUMENT
    - registration (2121x flags / 2122x positionals)
      • DUPLICATE_FLAG, MALFORMED_FLAG_NAME, DUPLICATE_ARGUMENT,
        INVALID_CARDINALITY, ARGUMENT_ORDER
    - completion (2131x)
      • DELEGATED_COMPLETION
    """
    # --- parsing: flags (2111x) ---
    UNKNOWN_FLAG                = 21111
    MALFORMED_FLAG              = 21112
    MISSING_VALUE               = 21113
    TYPE_MISMATCH               = 21114

    # --- parsing: positionals (2112x) ---
    ARGUMENT_COUNT              = 21121
    UNKNOWN_ARGUMENT            = 21122

    # --- registration: flags (2121x) ---
    DUPLICATE_FLAG              = 21211
    MALFORMED_FLAG_NAME         = 21212

    # --- registration: positionals (2122x) ---
    DUPLICATE_ARGUMENT          = 21221
    INVALID_CARDINALITY         = 21222
    ARGUMENT_ORDER              = 21223

    # --- completion (2131x) ---
    DELEGATED_COMPLETION        = 21311

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class FlagSetException(Exception):
    """
    base fault: a message plus read-only rendering/context options.

    common options
    - code: FaultCode, title: str, hint: str (set by the raising site).
    - tool: the FlagSet that raised it, shell/fancy/colorful: rendering switches
      (merged in by FlagSet.trigger or trigger()).
    - any context the raising site attaches (input, argument, leftover, ...).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | UnsetType)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        main = __import__("__main__")

        styles = {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {})

        colorful = self.options.get("colorful", False)
        fancy = self.options.get("fancy", False)

        def styler(style):
            return styles.get(style, "") if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        tool = self.options.get("tool")
        prog = text(getattr(main, "__prog__", getattr(tool, "name", "flagset")), styler("prog-name"))
        code = self.options.get("code")

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code.normalize() if code else "", styler("code")),
            " | ",
            text(str(self.options.get("title", "error")).title(), styler("error-title")),
            " ]"
        )
        message = text(_message(self), styler("error-message"))
        hint = Text.assemble(text(" → ", styler("hint-arrow")), text(self.options.get("hint", ""), styler("hint")))

        if fancy:
            return Panel(Group(message, hint), title=header, title_align="left", width=console.width - 4)

        return Group(header, message, hint)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from self.__cause__
        console.print(self)
        tool = self.options.get("tool")
        if tool is not None:
            console.print(tool.usage(), markup=False, highlight=False, end="")
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        replaced = type(self)(self.message, **{**self.options, **overrides})
        replaced.__cause__ = self.__cause__
        return replaced


def _message(fault, /):
    """
    message of a fault, or an empty string when it was built without one.
    """
    return "" if fault.message is Unset else fault.message


# --- parse-time faults ---
class UnknownFlagError(FlagSetException): ...
class MalformedFlagError(FlagSetException): ...
class MissingValueError(FlagSetException): ...
class TypeMismatchError(FlagSetException): ...
class ArgumentCountError(FlagSetException): ...
class UnknownArgumentError(FlagSetException): ...

# --- registration-time faults ---
class DuplicateFlagError(FlagSetException): ...
class MalformedFlagNameError(FlagSetException): ...
class DuplicateArgumentError(FlagSetException): ...
class InvalidCardinalityError(FlagSetException): ...
class ArgumentOrderError(FlagSetException): ...

# --- completion-time faults ---
class DelegatedCompletionError(FlagSetException): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see FlagSetException).
    - options are merged into a copy of the fault via __replace__(**options) before triggering.
    - in shell mode the fault is rendered via the rich console and the process exits;
      otherwise the fault is raised.

    typical options
    - tool, shell, fancy, colorful, title, code, hint, docs.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FlagSetException",
    "UnknownFlagError",
    "MalformedFlagError",
    "MissingValueError",
    "TypeMismatchError",
    "ArgumentCountError",
    "UnknownArgumentError",
    "DuplicateFlagError",
    "MalformedFlagNameError",
    "DuplicateArgumentError",
    "InvalidCardinalityError",
    "ArgumentOrderError",
    "DelegatedCompletionError",
    "FaultCode",
    "trigger",
    "getdoc",
)
