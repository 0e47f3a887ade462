r"""
Flagset registries, parser and usage rendering.

Overview
- FlagSet: one parsing context (a command or a subcommand).
  • Flag Registry: name → Flag, registered with flag() or its typed shortcuts
    (bool, int, ints, number, numbers, string, strings).
  • Positional Argument Registry: ordered Arguments, registered with argument()
    or its typed shortcuts (string_arg, int_arg, number_arg).
  • parse(): two-phase parse (flags, then positional arguments) into a ParseResult.
  • compgen(): shell completion for a partial command line (see flagset.completion).
  • usage(), short_usage(), flag_defaults(), arg_defaults(): help text.
- ParseResult: read-only mapping of flag and argument names to typed values, plus
  the leftover tokens in .args when no arguments are registered.

Command-line grammar (flag phase)
- "--" ends the flag phase and is consumed.
- "-" alone, or any token not starting with "-", ends the flag phase.
- -name / --name / -name=value / --name=value are flags.
- bool flags take no separate token; -name=false sets an explicit value.
- other flags take the inline value or the next token.

Quick example:
    >>> fs = FlagSet("subcommand")
    >>> times = fs.number("times", 1, "Number help string")
    >>> files = fs.string_arg("file", "+", "input files")
    >>> result = fs.parse(["-times", "2", "a.txt", "b.txt"])
    >>> result.times, result.file
    (2.0, ('a.txt', 'b.txt'))
"""
import logging
import os
import re
import shlex
import sys
from collections.abc import Iterable, Mapping

from .arguments import *
from .completion import resolve
from .faults import *
from .utils import *
from .values import *

logger = logging.getLogger(__name__)

# <marker><name>[=<value>]; the name cannot start with '-' or '='
_FLAG = re.compile(r"--?(?P<name>[^-=][^=]*)(=(?P<value>.*))?", re.DOTALL)


def _tokenize(args, /):
    """
    normalize a parse() argument into a list of tokens.

    - Unset: sys.argv[1:].
    - str: shell-like string split with shlex.split.
    - Iterable[str]: taken as-is (empty strings are meaningful values).
    """
    if args is Unset:
        return sys.argv[1:]
    elif isinstance(args, str):
        return shlex.split(args)
    elif isinstance(args, Iterable):
        tokens = list(args)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("parse() argument must be a string or an iterable of strings")
        return tokens
    raise TypeError("parse() argument must be a string or an iterable of strings")


def _quote(string, /):
    return '"%s"' % string.replace("\\", "\\\\").replace('"', '\\"')


def _unquote_usage(flag, /):
    """
    split a flag's usage into (type label, usage text).

    a back-quoted word in the usage string becomes the type label and loses its
    quotes ("a `path` to read" → ("path", "a path to read")); otherwise the label
    comes from the flag kind.
    """
    if match := re.search(r"`([^`]*)`", flag.usage):
        return match[1], flag.usage[:match.start()] + match[1] + flag.usage[match.end():]
    return flag.kind.typename, flag.usage


def _counted(count, /):
    return "%d value%s" % (count, "" if count == 1 else "s")


class ParseResult(Mapping):
    """
    Typed outcome of one successful FlagSet.parse().

    - Mapping from flag/argument name to value; names are also attributes.
    - args: leftover tokens (only filled when the flag set has no arguments).

    A fresh result is produced by every parse; it never changes afterwards.
    """

    args = mirror("args")

    def __init__(self, values, args=(), /):
        object.__setattr__(self, "_values", dict(values))
        object.__setattr__(self, "_args", tuple(args))

    def __getitem__(self, name, /):
        return self._values[name]

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __getattr__(self, name, /):
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._values[name]
        except KeyError:
            raise AttributeError("parse result has no value named %r" % name) from None

    def __setattr__(self, name, value, /):
        raise AttributeError("parse result is read-only")

    def __repr__(self):
        return "ParseResult(%r, args=%r)" % (self._values, self._args)

    def __rich_repr__(self):
        yield from self._values.items()
        yield "args", self._args


class FlagSet:
    """
    Registration and parsing context for one command or subcommand.

    Lifecycle
    - construct, register flags and arguments, then parse() or compgen() as
      many times as needed. Each parse resets the flag value cells first, so
      repeated flags never accumulate across parses.

    Runtime switches (keyword-only)
    - shell: render faults with the usage text and exit instead of raising
      (applies to run() and trigger()).
    - fancy: wrap rendered faults in a panel.
    - colorful: style rendered faults (palette overridable via __main__.__styles__).
    """

    name = mirror("name")
    shell = mirror("shell")
    fancy = mirror("fancy")
    colorful = mirror("colorful")
    flags = mirror("flags")
    arguments = mirror("arguments")

    def __init__(self, name=Unset, /, *, shell=False, fancy=False, colorful=False):
        name = coalesce(name, os.path.basename(sys.argv[0]))
        if not isinstance(name, str):
            raise TypeError("flag set 'name' must be a string")
        self._name = name
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)
        self._flags = {}
        self._arguments = []
        self._actual = set()

    def __repr__(self):
        return "flag-set(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())

    def __rich_repr__(self):
        yield "name", self._name
        yield "flags", tuple(self._flags)
        yield "arguments", tuple(argument.name for argument in self._arguments)

    # ── Flag Registry ──────────────────────────────────────────────────────────

    def flag(self, name, /, kind, default=Unset, usage="", completer=None):
        """
        Register a flag and return its declaration.

        Raises
        - DuplicateFlagError: the name is already a flag (or an argument).
        - MalformedFlagNameError / TypeMismatchError: see Flag.
        """
        flag = Flag(name, kind, default, usage, completer)
        if name in self._flags or any(argument.name == name for argument in self._arguments):
            raise DuplicateFlagError(
                "flag redefined: %s" % name,
                title="duplicate flag",
                code=FaultCode.DUPLICATE_FLAG,
                input=name,
                hint="pick a name that is not already used by %s" % self._name,
                docs=getdoc(FaultCode.DUPLICATE_FLAG),
            )
        self._flags[name] = flag
        logger.debug("%s: registered flag -%s (%s)", self._name, name, flag.kind.value)
        return flag

    def lookup(self, name, /):
        """Return the Flag registered under name, or None."""
        return self._flags.get(name)

    def visit_all(self):
        """Iterate over every registered flag, sorted by name."""
        return iter(sorted(self._flags.values(), key=lambda flag: flag.name))

    def visit(self):
        """Iterate over the flags set by the last successful parse, sorted by name."""
        return iter(sorted((self._flags[name] for name in self._actual), key=lambda flag: flag.name))

    # ── Positional Argument Registry ───────────────────────────────────────────

    def argument(self, name, /, type=Kind.STRING, cardinality=1, usage="", completer=None):
        """
        Register a positional argument and return its declaration.

        Raises
        - DuplicateArgumentError: the name is already an argument or a flag.
        - ArgumentOrderError: a variadic argument is already registered.
        - InvalidCardinalityError: see Cardinality.parse.
        """
        argument = Argument(name, type, cardinality, usage, completer)
        if name in self._flags or any(other.name == name for other in self._arguments):
            raise DuplicateArgumentError(
                "argument redefined: %s" % name,
                title="duplicate argument",
                code=FaultCode.DUPLICATE_ARGUMENT,
                input=name,
                hint="argument names share the result namespace with flag names",
                docs=getdoc(FaultCode.DUPLICATE_ARGUMENT),
            )
        if self._arguments and self._arguments[-1].cardinality.variadic:
            raise ArgumentOrderError(
                "argument %s cannot follow variadic argument %s" % (name, self._arguments[-1].name),
                title="argument order",
                code=FaultCode.ARGUMENT_ORDER,
                input=name,
                hint="register %s before %s" % (name, self._arguments[-1].name),
                docs=getdoc(FaultCode.ARGUMENT_ORDER),
            )
        self._arguments.append(argument)
        logger.debug("%s: registered argument %s (%s, %r)", self._name, name, argument.type.value, argument.cardinality)
        return argument

    # ── Parser ─────────────────────────────────────────────────────────────────

    def _scan(self, tokens, values, /):
        r"""
        run the flag phase over tokens.

        purpose
        - coerce every flag occurrence into values (name → scalar, or name → list
          for repeated kinds) without touching the value cells.
        - values is filled in place, so callers keep what was scanned before a fault.

        returns
        - list[str]: the tokens left for the positional phase.
        """
        index = 0
        while index < len(tokens):
            token = tokens[index]
            if token == "--":
                index += 1
                break
            if token == "-" or not token.startswith("-"):
                break
            index += 1

            match = _FLAG.fullmatch(token)
            if not match:
                raise MalformedFlagError(
                    "bad flag syntax: %s" % token,
                    title="malformed flag",
                    code=FaultCode.MALFORMED_FLAG,
                    input=token,
                    hint="spell flags as -name, -name=value or --name=value",
                    docs=getdoc(FaultCode.MALFORMED_FLAG),
                )
            name, value = match["name"], match["value"]

            if (flag := self._flags.get(name)) is None:
                raise UnknownFlagError(
                    "flag provided but not defined: -%s" % name,
                    title="unknown flag",
                    code=FaultCode.UNKNOWN_FLAG,
                    input=name,
                    hint="see the usage below for the flags %s accepts" % self._name,
                    docs=getdoc(FaultCode.UNKNOWN_FLAG),
                )

            if flag.kind is Kind.BOOL:
                if value is None:
                    value = "true"
            elif value is None:
                if index >= len(tokens):
                    raise MissingValueError(
                        "flag needs an argument: -%s" % name,
                        title="missing value",
                        code=FaultCode.MISSING_VALUE,
                        input=name,
                        flag=flag,
                        hint="pass a value after -%s (or -%s=value)" % (name, name),
                        docs=getdoc(FaultCode.MISSING_VALUE),
                    )
                value = tokens[index]
                index += 1

            try:
                element = coerce(flag.kind, value)
            except TypeMismatchError as fault:
                raise TypeMismatchError(
                    "invalid value %s for flag -%s: %s" % (_quote(value), name, fault.message),
                    **fault.options | {"flag": flag},
                ) from None

            if flag.kind.repeated:
                values.setdefault(name, []).append(element)
            else:
                values[name] = element
        return tokens[index:]

    def _distribute(self, tokens, /):
        """
        run the positional phase: hand tokens to the arguments in registration order.

        returns
        - dict[Argument, Any]: collected value of each argument.
        """
        collected = {}
        for argument in self._arguments:
            count = argument.cardinality.consume(len(tokens))
            if count is None:
                minimum = argument.cardinality.minimum
                raise ArgumentCountError(
                    "argument %s: expected %s%s, got %d" % (
                        argument.name,
                        "at least " if argument.cardinality.variadic else "",
                        _counted(minimum),
                        len(tokens),
                    ),
                    title="missing argument",
                    code=FaultCode.ARGUMENT_COUNT,
                    input=argument.name,
                    argument=argument,
                    hint="usage: %s" % self.short_usage(),
                    docs=getdoc(FaultCode.ARGUMENT_COUNT),
                )
            collected[argument] = argument.collect(tokens[:count])
            tokens = tokens[count:]

        if tokens:
            raise UnknownArgumentError(
                "unknown argument: [%s]" % " ".join(tokens),
                title="unknown argument",
                code=FaultCode.UNKNOWN_ARGUMENT,
                leftover=tuple(tokens),
                hint="remove the extra inputs; usage: %s" % self.short_usage(),
                docs=getdoc(FaultCode.UNKNOWN_ARGUMENT),
            )
        return collected

    def parse(self, args=Unset, /):
        """
        Parse a command line into a ParseResult.

        Parameters
        - args:
          • Unset: read tokens from sys.argv[1:].
          • str: shell-like string; will be split via shlex.split.
          • Iterable[str]: pre-tokenized sequence.

        Behavior
        - flag phase, then positional phase (see the module docstring).
        - value cells are committed only when both phases succeed.

        Raises
        - TypeError: when args is not Unset/str/Iterable[str].
        - FlagSetException subclasses for every user error.
        """
        tokens = _tokenize(args)
        logger.debug("%s: parsing %r", self._name, tokens)

        values = {}
        tokens = self._scan(tokens, values)
        logger.debug("%s: flag phase done, %d token(s) left", self._name, len(tokens))

        if self._arguments:
            collected, leftovers = self._distribute(tokens), ()
        else:
            collected, leftovers = {}, tuple(tokens)

        for flag in self._flags.values():
            if flag.name not in values:
                flag._reset()
            elif flag.kind.repeated:
                flag._commit(tuple(values[flag.name]))
            else:
                flag._commit(values[flag.name])
        self._actual = set(values)
        for argument, value in collected.items():
            argument._commit(value)

        return ParseResult(
            {flag.name: flag.value for flag in self._flags.values()} |
            {argument.name: argument.value for argument in self._arguments},
            leftovers,
        )

    def run(self, args=Unset, /):
        """
        Parse like parse(), surfacing faults through trigger().

        In shell mode a fault is rendered with the usage text and the process
        exits with status 1; otherwise it is raised.
        """
        try:
            return self.parse(args)
        except FlagSetException as fault:
            self.trigger(fault)

    def trigger(self, fault, /, **options):
        """Surface a fault with this flag set's runtime switches (see faults.trigger)."""
        trigger(fault, **options | {
            "tool": self,
            "shell": self._shell,
            "fancy": self._fancy,
            "colorful": self._colorful,
        })

    # ── Completion ─────────────────────────────────────────────────────────────

    def compgen(self, cword, words, /):
        """
        Completion candidates for the word under the cursor.

        Parameters
        - cword: int, 1-based index of the word under the cursor.
        - words: Sequence[str], the raw words; words[0] is the program name.

        Returns
        - str: space-separated candidates ("" when nothing applies).

        Raises
        - DelegatedCompletionError: a completer raised or returned a non-string.
        """
        return resolve(self, cword, words)

    # ── Usage ──────────────────────────────────────────────────────────────────

    def short_usage(self):
        """One-line usage: name, [options] when flags exist, and argument notations."""
        parts = [self._name]
        if self._flags:
            parts.append("[options]")
        parts.extend(argument.short_usage() for argument in self._arguments)
        return " ".join(parts)

    def flag_defaults(self):
        """Help block of every flag, sorted by name, in the conventional flag layout."""
        lines = []
        for flag in self.visit_all():
            label, usage = _unquote_usage(flag)
            line = "  -" + flag.name
            if label:
                line += " " + label
            # one-letter bool flags keep their usage on the same line
            line += "\t" if len(line) <= 4 else "\n    \t"
            line += usage.replace("\n", "\n    \t")
            if flag.default != flag.kind.zero:
                default = render(flag.kind, flag.default)
                line += " (default %s)" % (_quote(default) if flag.kind is Kind.STRING else default)
            lines.append(line + "\n")
        return "".join(lines)

    def arg_defaults(self):
        """Help block of every positional argument, in registration order."""
        return "".join(
            "  %s %s\n    \t%s\n" % (argument.short_usage(), argument.type.value, argument.usage.replace("\n", "\n    \t"))
            for argument in self._arguments
        )

    def usage(self):
        """Full usage text: short usage line, then flag and argument blocks."""
        return "usage: %s\n%s%s" % (self.short_usage(), self.flag_defaults(), self.arg_defaults())

    # ── Typed shortcuts ────────────────────────────────────────────────────────

    def string_arg(self, name, /, cardinality=1, usage="", completer=None):
        """Register a string positional argument."""
        return self.argument(name, Kind.STRING, cardinality, usage, completer)

    def int_arg(self, name, /, cardinality=1, usage="", completer=None):
        """Register an int positional argument."""
        return self.argument(name, Kind.INT, cardinality, usage, completer)

    def number_arg(self, name, /, cardinality=1, usage="", completer=None):
        """Register a float positional argument."""
        return self.argument(name, Kind.FLOAT, cardinality, usage, completer)

    # these shadow builtins inside the class body, so they come last

    def bool(self, name, /, default=False, usage=""):
        """Register a presence-only bool flag."""
        return self.flag(name, Kind.BOOL, default, usage)

    def int(self, name, /, default=0, usage="", completer=None):
        """Register an int flag."""
        return self.flag(name, Kind.INT, default, usage, completer)

    def ints(self, name, /, usage="", completer=None):
        """Register a repeated int flag (one element per occurrence)."""
        return self.flag(name, Kind.INTS, Unset, usage, completer)

    def number(self, name, /, default=0.0, usage="", completer=None):
        """Register a float flag."""
        return self.flag(name, Kind.FLOAT, default, usage, completer)

    def numbers(self, name, /, usage="", completer=None):
        """Register a repeated float flag."""
        return self.flag(name, Kind.FLOATS, Unset, usage, completer)

    def string(self, name, /, default="", usage="", completer=None):
        """Register a string flag."""
        return self.flag(name, Kind.STRING, default, usage, completer)

    def strings(self, name, /, usage="", completer=None):
        """Register a repeated string flag."""
        return self.flag(name, Kind.STRINGS, Unset, usage, completer)


__all__ = (
    "FlagSet",
    "ParseResult",
)
