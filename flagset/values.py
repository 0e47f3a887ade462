r"""
Flagset value coercion layer.

Overview
- Kind: closed set of value kinds a flag or a positional argument can carry.
  • scalars:   BOOL, INT, FLOAT, STRING
  • repeated:  INTS, FLOATS, STRINGS (one element appended per occurrence)
- Cardinality: how many positional tokens an argument consumes
  • Cardinality.exact(n), Cardinality.OPTIONAL, Cardinality.ZERO_OR_MORE,
    Cardinality.ONE_OR_MORE, or the "?" / "*" / "+" / int shorthand via parse().
- coerce(kind, raw): raw string → typed scalar, or TypeMismatchError.
- render(kind, value): typed value → display string (usage defaults, completion context).

Conversion rules
- bool accepts 1, t, T, TRUE, true, True, 0, f, F, FALSE, false, False.
- int accepts base prefixes and underscores (0x1f, 0o17, 0b101, 1_000) and plain
  decimals with leading zeros.
- float accepts whatever float() accepts (including inf/nan).
- string is taken verbatim.

Quick example:
    >>> coerce(Kind.INTS, "4")
    4
    >>> Cardinality.parse("+").short_usage("file")
    'file [file...]'
"""
import math
from enum import Enum
from typing import final

from .faults import *
from .utils import *

_BOOLEANS = {
    "1": True, "t": True, "T": True, "TRUE": True, "true": True, "True": True,
    "0": False, "f": False, "F": False, "FALSE": False, "false": False, "False": False,
}


class Kind(Enum):
    """
    Closed tagged variant over flag and argument value kinds.

    Every consumer (coercion, result building, usage, completion) handles the
    members exhaustively, so there is no "unknown type" path.
    """
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    INTS = "ints"
    FLOATS = "floats"
    STRINGS = "strings"

    @property
    def repeated(self):
        """True for the accumulating kinds (INTS, FLOATS, STRINGS)."""
        return self in (Kind.INTS, Kind.FLOATS, Kind.STRINGS)

    @property
    def element(self):
        """Scalar kind of a single occurrence (identity for scalars)."""
        match self:
            case Kind.INTS:
                return Kind.INT
            case Kind.FLOATS:
                return Kind.FLOAT
            case Kind.STRINGS:
                return Kind.STRING
            case _:
                return self

    @property
    def typename(self):
        """
        Type label for usage text; bool flags show none and repeated kinds
        show "value", like the conventional flag library does.
        """
        match self:
            case Kind.BOOL:
                return ""
            case Kind.INT | Kind.FLOAT | Kind.STRING:
                return self.value
            case Kind.INTS | Kind.FLOATS | Kind.STRINGS:
                return "value"

    @property
    def zero(self):
        """Zero value of the kind (the default of repeated kinds)."""
        match self:
            case Kind.BOOL:
                return False
            case Kind.INT:
                return 0
            case Kind.FLOAT:
                return 0.0
            case Kind.STRING:
                return ""
            case Kind.INTS | Kind.FLOATS | Kind.STRINGS:
                return ()

    def accepts(self, value, /):
        """
        Whether a Python value is a valid default for this kind.

        bool is not accepted for INT/FLOAT even though it subclasses int.
        """
        match self:
            case Kind.BOOL:
                return isinstance(value, bool)
            case Kind.INT:
                return isinstance(value, int) and not isinstance(value, bool)
            case Kind.FLOAT:
                return isinstance(value, int | float) and not isinstance(value, bool)
            case Kind.STRING:
                return isinstance(value, str)
            case Kind.INTS | Kind.FLOATS | Kind.STRINGS:
                return isinstance(value, tuple | list) and all(map(self.element.accepts, value))


def coerce(kind, raw, /):
    """
    Convert one raw token to the element type of `kind`.

    Raises
    - TypeError: when raw is not a string.
    - TypeMismatchError: when raw cannot be converted.
    """
    if not isinstance(kind, Kind):
        raise TypeError("coerce() first argument must be a kind")
    if not isinstance(raw, str):
        raise TypeError("coerce() second argument must be a string")

    element = kind.element
    try:
        match element:
            case Kind.BOOL:
                return _BOOLEANS[raw]
            case Kind.INT:
                try:
                    return int(raw, 0)
                except ValueError:
                    # int(..., 0) rejects "010"; plain decimals with leading zeros are fine
                    return int(raw, 10)
            case Kind.FLOAT:
                return float(raw)
            case Kind.STRING:
                return raw
    except (KeyError, ValueError):
        raise TypeMismatchError(
            "%r is not a valid %s" % (raw, element.value),
            title="type mismatch",
            code=FaultCode.TYPE_MISMATCH,
            input=raw,
            kind=kind,
            hint="use a valid %s value" % element.value,
            docs=getdoc(FaultCode.TYPE_MISMATCH),
        ) from None


def _render_float(value):
    # shortest round-trip form, without a trailing ".0" (2.0 → "2", 2.5 → "2.5")
    if math.isfinite(value) and value == int(value) and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def render(kind, value, /):
    """
    Display form of a typed value.

    - bool → "true"/"false"; float → shortest form; repeated → comma-joined elements.
    """
    match kind:
        case Kind.BOOL:
            return "true" if value else "false"
        case Kind.INT:
            return str(value)
        case Kind.FLOAT:
            return _render_float(float(value))
        case Kind.STRING:
            return value
        case Kind.INTS | Kind.FLOATS | Kind.STRINGS:
            return ",".join(render(kind.element, element) for element in value)


@final
class Cardinality:
    """
    Positional argument arity as an inclusive (minimum, maximum) token range.

    - Cardinality.exact(n)      → (n, n), n >= 1
    - Cardinality.OPTIONAL      → (0, 1)
    - Cardinality.ZERO_OR_MORE  → (0, unbounded)
    - Cardinality.ONE_OR_MORE   → (1, unbounded)

    Instances are immutable and compare by range.
    """
    __slots__ = ("_minimum", "_maximum")

    minimum = mirror("minimum")
    maximum = mirror("maximum")

    def __init__(self, minimum, maximum, /):
        object.__setattr__(self, "_minimum", minimum)
        object.__setattr__(self, "_maximum", maximum)

    def __setattr__(self, name, value, /):
        raise AttributeError("cardinality is read-only")

    @classmethod
    def exact(cls, count, /):
        """Exactly `count` tokens (count must be a positive integer)."""
        if not isinstance(count, int) or isinstance(count, bool) or count < 1:
            raise InvalidCardinalityError(
                "nargs should be an integer or one of '?', '*', or '+'",
                title="invalid cardinality",
                code=FaultCode.INVALID_CARDINALITY,
                input=count,
                hint="use a positive integer for an exact count",
                docs=getdoc(FaultCode.INVALID_CARDINALITY),
            )
        return cls(count, count)

    @classmethod
    def parse(cls, spec, /):
        """
        Normalize a cardinality specifier.

        Accepts a Cardinality, a positive int, or one of "?", "*", "+".
        """
        match spec:
            case Cardinality():
                return spec
            case "?":
                return cls.OPTIONAL
            case "*":
                return cls.ZERO_OR_MORE
            case "+":
                return cls.ONE_OR_MORE
            case int() if not isinstance(spec, bool):
                return cls.exact(spec)
        raise InvalidCardinalityError(
            "nargs should be an integer or one of '?', '*', or '+'",
            title="invalid cardinality",
            code=FaultCode.INVALID_CARDINALITY,
            input=spec,
            hint="use a positive integer, '?', '*' or '+'",
            docs=getdoc(FaultCode.INVALID_CARDINALITY),
        )

    @property
    def variadic(self):
        """True when the argument absorbs every remaining token."""
        return self._maximum is None

    def consume(self, available, /):
        """
        Number of tokens this cardinality takes out of `available` tokens,
        or None when fewer than the minimum are available.
        """
        if available < self._minimum:
            return None
        return available if self._maximum is None else min(self._maximum, available)

    def short_usage(self, name, /):
        """Usage notation for an argument called `name`."""
        match self._minimum, self._maximum:
            case 0, None:
                return "[%s...]" % name
            case 1, None:
                return "%s [%s...]" % (name, name)
            case 0, 1:
                return "[%s]" % name
            case count, _:
                return " ".join([name] * count)

    def __eq__(self, other, /):
        if not isinstance(other, Cardinality):
            return NotImplemented
        return (self._minimum, self._maximum) == (other._minimum, other._maximum)

    def __hash__(self):
        return hash((Cardinality, self._minimum, self._maximum))

    def __repr__(self):
        match self._minimum, self._maximum:
            case 0, None:
                return "Cardinality.ZERO_OR_MORE"
            case 1, None:
                return "Cardinality.ONE_OR_MORE"
            case 0, 1:
                return "Cardinality.OPTIONAL"
            case count, _:
                return "Cardinality.exact(%d)" % count


Cardinality.OPTIONAL = Cardinality(0, 1)
Cardinality.ZERO_OR_MORE = Cardinality(0, None)
Cardinality.ONE_OR_MORE = Cardinality(1, None)


__all__ = (
    "Kind",
    "Cardinality",
    "coerce",
    "render",
)
