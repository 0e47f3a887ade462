r"""
Flagset flag and positional argument declarations.

Overview
- Declarations
  • Flag: named switch of a given Kind carrying a typed value cell (bool, int,
    float, string, or a repeated variant), e.g. -times 2 / -times=2 / -q.
  • Argument: positional value of type int, float or string consumed by its
    Cardinality (exact n, optional, zero-or-more, one-or-more).

- Introspection & representation
  • SpecType metaclass provides stable __repr__/__rich_repr__ and exposes selected
    fields via read-only properties declared in __introspectable__.

Metadata (sanitized on construction)
- Shared
  • name: str, non-empty.
  • usage: str (help text, may be empty).
  • completer: None | Callable[[str, Mapping[str, str], Sequence[str]], str].
- Flag only
  • kind: Kind (or its value, e.g. "int").
  • default: value matching the kind; the kind's zero value when omitted.
- Argument only
  • type: Kind.INT | Kind.FLOAT | Kind.STRING.
  • cardinality: Cardinality or its "?" / "*" / "+" / int shorthand.

Validation highlights
- Flag names must not be empty, start with '-' or contain '='.
- Flag defaults must match the kind (TypeMismatchError).
- Bool flags never take a completer (they take no value to complete).

Quick example:
    >>> from flagset.arguments import Flag, Argument
    >>> Flag("times", Kind.FLOAT, 1, "Number help string")
    flag(name='times', kind=<Kind.FLOAT: 'float'>, default=1.0, usage='Number help string', completer=None)
    >>> Argument("file", Kind.STRING, "+", "input files").short_usage()
    'file [file...]'
"""
import functools
import operator
import re

from .faults import *
from .utils import *
from .values import *


class SpecType(type):
    """
    Metaclass that turns declarations into introspectable descriptors.

    Responsibilities
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics and usage output.
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - flag(name='q', kind=<Kind.BOOL: 'bool'>, default=False, usage='', completer=None)
            """
            return "%s(%s)" % (
                type(self).__typename__,
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__())),
            )
        self.__repr__ = __repr__

        def __rich_repr__(self):
            """
            Yield (name, object) pairs for pretty printers, in __introspectable__ order.
            """
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate the fields shared by Flag and Argument.

    - name: must be a non-empty string.
    - usage: must be a string (empty allowed).
    - completer: must be None or callable.
    """
    if not isinstance(metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    if not isinstance(metadata["usage"], str):
        raise TypeError(f"{cls.__typename__} 'usage' must be a string")
    if metadata["completer"] is not None and not callable(metadata["completer"]):
        raise TypeError(f"{cls.__typename__} 'completer' must be callable")


def _sanitize_kind(cls, kind, /):
    if isinstance(kind, Kind):
        return kind
    try:
        return Kind(kind)
    except ValueError:
        raise TypeError(f"{cls.__typename__} 'kind' must be one of {', '.join(map(repr, (k.value for k in Kind)))}") from None


class Flag(metaclass=SpecType):
    """
    Named, value-bearing (or presence-only, for bool) flag declaration.

    Highlights
    - Identified by name; spelled -name or --name on the command line.
    - kind fixed at registration; the value cell starts at the default.
    - Repeated kinds accumulate one element per occurrence.

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes.
    - value: current content of the value cell (written by FlagSet.parse).
    """

    __introspectable__ = (
        "name",
        "kind",
        "default",
        "usage",
        "completer",
    )

    value = mirror("value")

    def __new__(cls, name, /, kind, default=Unset, usage="", completer=None):
        """
        Construct a Flag declaration.

        Parameters
        - name: str
          Flag name without the leading marker ("times" for -times).
        - kind: Kind | str
          Value kind of the flag.
        - default: Any
          Default value; must match the kind. Unset means the kind's zero value.
        - usage: str
          Help string shown by FlagSet.usage().
        - completer: None | Callable
          Completion callback for the flag's value.

        Raises
        - MalformedFlagNameError: empty name, leading '-', or embedded '='.
        - TypeMismatchError: default does not match the kind.
        - TypeError: wrongly typed metadata, or a completer on a bool flag.
        """
        metadata = {
            "name": name,
            "kind": kind,
            "default": default,
            "usage": usage,
            "completer": completer,
        }
        _sanitize_metadata(cls, metadata)
        metadata["kind"] = kind = _sanitize_kind(cls, kind)

        if not name or name.startswith("-") or "=" in name:
            raise MalformedFlagNameError(
                "bad flag name: %r" % name,
                title="malformed flag name",
                code=FaultCode.MALFORMED_FLAG_NAME,
                input=name,
                hint="flag names are registered without a leading '-' and cannot contain '='",
                docs=getdoc(FaultCode.MALFORMED_FLAG_NAME),
            )

        if default is Unset:
            default = kind.zero
        elif not kind.accepts(default):
            raise TypeMismatchError(
                "default %r does not match flag -%s of kind %s" % (default, name, kind.value),
                title="type mismatch",
                code=FaultCode.TYPE_MISMATCH,
                input=default,
                kind=kind,
                hint="use a %s default for -%s" % (kind.value, name),
                docs=getdoc(FaultCode.TYPE_MISMATCH),
            )
        if kind.element is Kind.FLOAT:
            default = tuple(map(float, default)) if kind.repeated else float(default)
        metadata["default"] = tuple(default) if kind.repeated else default

        if kind is Kind.BOOL and completer is not None:
            raise TypeError(f"bool {cls.__typename__} cannot have a 'completer'")

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        self._value = self._default
        return self

    def _reset(self):
        self._value = self._default

    def _commit(self, value, /):
        self._value = value


class Argument(metaclass=SpecType):
    """
    Positional argument declaration.

    Highlights
    - type is a scalar Kind (INT, FLOAT or STRING); every consumed token is
      coerced with it.
    - cardinality drives how many tokens are consumed and how the collected
      value is shaped:
      • exact(1)                       → scalar
      • OPTIONAL                       → scalar or None
      • exact(n>1), ZERO_OR_MORE,
        ONE_OR_MORE                    → tuple

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes.
    - value: collected value(s) of the last successful parse.
    """

    __introspectable__ = (
        "name",
        "type",
        "cardinality",
        "usage",
        "completer",
    )

    value = mirror("value")

    def __new__(cls, name, /, type=Kind.STRING, cardinality=1, usage="", completer=None):
        """
        Construct an Argument declaration.

        Parameters
        - name: str
          Result key and usage label.
        - type: Kind | str
          One of Kind.INT, Kind.FLOAT, Kind.STRING.
        - cardinality: Cardinality | int | "?" | "*" | "+"
        - usage: str
        - completer: None | Callable

        Raises
        - InvalidCardinalityError: bad cardinality specifier.
        - TypeError/ValueError: wrongly typed metadata or an empty name.
        """
        metadata = {
            "name": name,
            "type": type,
            "cardinality": cardinality,
            "usage": usage,
            "completer": completer,
        }
        _sanitize_metadata(cls, metadata)
        if not name:
            raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
        metadata["type"] = _sanitize_kind(cls, type)
        if metadata["type"] not in (Kind.INT, Kind.FLOAT, Kind.STRING):
            raise TypeError(f"{cls.__typename__} 'type' must be one of 'int', 'float' or 'string'")
        metadata["cardinality"] = Cardinality.parse(cardinality)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        self._value = None
        return self

    def short_usage(self):
        """Usage notation for this argument (e.g. "file [file...]")."""
        return self._cardinality.short_usage(self._name)

    def collect(self, tokens, /):
        """
        Coerce consumed tokens and shape them per cardinality.

        Raises
        - TypeMismatchError: a token is not a valid value of the argument type;
          the message names the argument.
        """
        values = []
        for token in tokens:
            try:
                values.append(coerce(self._type, token))
            except TypeMismatchError as fault:
                raise TypeMismatchError(
                    "argument %s: %s" % (self._name, fault.message),
                    **fault.options | {"argument": self},
                ) from None

        match self._cardinality:
            case Cardinality.OPTIONAL:
                return values[0] if values else None
            case cardinality if cardinality == Cardinality.exact(1):
                return values[0]
            case _:
                return tuple(values)

    def _commit(self, value, /):
        self._value = value


__all__ = (
    "Flag",
    "Argument",
)

# Internal metaclass, not part of the public API.
del SpecType
