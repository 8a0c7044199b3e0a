r"""
Pennant values: the typed containers behind every flag.

Overview
- ValueKind: the closed set of kinds a flag value can take.
  • BOOL, INT (word-sized), INT64, UINT (word-sized), UINT64, STRING,
    FLOAT, DURATION and FUNC (a side-effecting callback).
- Value: one flag's current value plus its text coercion.
  • set(text): parse and store; the previous value survives any failure.
  • render() / str(value): the inverse of set(); used for defaults and zero checks.
  • get(): the native value (refused for FUNC).
  • isbool(): True only for BOOL; boolean flags never consume a following token.
- Duration: int subclass counting nanoseconds, with the familiar text form
  ("1h30m", "250ms", "1.5µs", "0s").
- ParseError / RangeError: malformed text vs. well-formed text that does not fit.

Accepted text per kind
- BOOL: 1, 0, t, f, T, F, true, false, TRUE, FALSE, True, False (nothing else).
- INT/UINT kinds: decimal, 0x/0X hexadecimal, 0o/0O or leading-0 octal, 0b/0B binary;
  "_" may separate digits or follow a base prefix. Unsigned kinds reject any sign.
- FLOAT: decimal with optional exponent, hexadecimal with a mandatory p-exponent,
  inf, infinity and nan (any case).
- DURATION: [-+]?([0-9]*(\.[0-9]*)?[a-z]+)+ with units ns, us, µs, μs, ms, s, m, h,
  or the bare literal 0.

Quick example
    >>> count = Value(ValueKind.INT, 5)
    >>> count.set("0x10")
    >>> count.get()
    16
    >>> str(Value(ValueKind.DURATION, Duration.parse("90s")))
    '1m30s'
"""
import math
import re
import sys
from datetime import timedelta
from decimal import Decimal
from enum import StrEnum
from typing import final

from .utils import *

# Bit width of the word-sized integer kinds (INT, UINT).
WORD = sys.maxsize.bit_length() + 1

NANOSECOND = 1
MICROSECOND = 1000 * NANOSECOND
MILLISECOND = 1000 * MICROSECOND
SECOND = 1000 * MILLISECOND
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE

_UNITS = {
    "ns": NANOSECOND,
    "us": MICROSECOND,
    "µs": MICROSECOND,  # micro sign
    "μs": MICROSECOND,  # greek small letter mu
    "ms": MILLISECOND,
    "s": SECOND,
    "m": MINUTE,
    "h": HOUR,
}

_TERM = re.compile(r"(?P<whole>[0-9]*)(?:\.(?P<fraction>[0-9]*))?(?P<unit>[^0-9.]*)")
_DIGITS = re.compile(r"[0-9A-Za-z]+(?:_[0-9A-Za-z]+)*")
_DECIMAL = re.compile(
    r"[+-]?(?:[0-9](?:_?[0-9])*(?:\.(?:[0-9](?:_?[0-9])*)?)?|\.[0-9](?:_?[0-9])*)"
    r"(?:[eE][+-]?[0-9](?:_?[0-9])*)?"
)
_HEXADECIMAL = re.compile(
    r"[+-]?0[xX]_?(?:[0-9a-fA-F](?:_?[0-9a-fA-F])*(?:\.(?:[0-9a-fA-F](?:_?[0-9a-fA-F])*)?)?"
    r"|\.[0-9a-fA-F](?:_?[0-9a-fA-F])*)[pP][+-]?[0-9](?:_?[0-9])*"
)
_SPECIAL = re.compile(r"[+-]?(?:inf|infinity)|nan", re.IGNORECASE)

_TRUTHS = frozenset(("1", "t", "T", "true", "TRUE", "True"))
_FALSITIES = frozenset(("0", "f", "F", "false", "FALSE", "False"))


class ParseError(ValueError):
    """Text is not a well-formed literal for the value's kind."""


class RangeError(ValueError):
    """Text is well-formed but the number does not fit the value's kind."""


class ValueKind(StrEnum):
    """
    Closed set of flag value kinds.

    The string values double as the type names shown in diagnostics.
    """
    BOOL = "bool"
    INT = "int"
    INT64 = "int64"
    UINT = "uint"
    UINT64 = "uint64"
    STRING = "string"
    FLOAT = "float64"
    DURATION = "duration"
    FUNC = "func"

    @property
    def bits(self):
        """
        Bit width for integer kinds, None for everything else.
        """
        match self:
            case ValueKind.INT | ValueKind.UINT:
                return WORD
            case ValueKind.INT64 | ValueKind.UINT64:
                return 64
        return None

    @property
    def signed(self):
        return self in (ValueKind.INT, ValueKind.INT64)


def _fraction(value, precision):
    """
    Split the lowest `precision` digits of value into a ".ddd" suffix.

    Trailing zeros are dropped and the point is omitted when the fraction is
    zero. Returns (suffix, remaining integer part).
    """
    digits = []
    printing = False
    for _ in range(precision):
        value, digit = divmod(value, 10)
        printing = printing or digit != 0
        if printing:
            digits.append(str(digit))
    return ("." + "".join(reversed(digits)) if printing else ""), value


class Duration(int):
    """
    Signed duration counted in nanoseconds.

    Construction accepts an integer count of nanoseconds or a datetime.timedelta.
    The text form writes hours, minutes and seconds for a second or more
    ("72h3m0.5s") and the largest fitting sub-second unit below that ("1.5µs").
    Durations are limited to the signed 64-bit range.
    """
    __slots__ = ()

    def __new__(cls, nanoseconds=0, /):
        if isinstance(nanoseconds, timedelta):
            nanoseconds = (
                (nanoseconds.days * 86400 + nanoseconds.seconds) * SECOND
                + nanoseconds.microseconds * MICROSECOND
            )
        elif isinstance(nanoseconds, bool) or not isinstance(nanoseconds, int):
            raise TypeError("Duration() argument must be an integer or a timedelta")
        if not -(1 << 63) <= nanoseconds < (1 << 63):
            raise OverflowError("Duration() argument does not fit in 64 bits")
        return super().__new__(cls, nanoseconds)

    @classmethod
    def parse(cls, text, /):
        """
        Parse a duration string such as "300ms", "-1.5h" or "2h45m".

        Raises ParseError for malformed text, unknown units and overflow.
        """
        if not isinstance(text, str):
            raise TypeError("Duration.parse() argument must be a string")

        rest = text
        negative = False
        if rest[:1] in ("-", "+"):
            negative = rest[0] == "-"
            rest = rest[1:]
        if rest == "0":
            return cls(0)
        if not rest:
            raise ParseError("invalid duration %r" % text)

        total = 0
        while rest:
            if not (rest[0] == "." or "0" <= rest[0] <= "9"):
                raise ParseError("invalid duration %r" % text)
            match = _TERM.match(rest)
            rest = rest[match.end():]

            whole, fraction, unit = match["whole"], match["fraction"], match["unit"]
            if not whole and not fraction:
                raise ParseError("invalid duration %r" % text)
            if not unit:
                raise ParseError("missing unit in duration %r" % text)
            try:
                scale = _UNITS[unit]
            except KeyError:
                raise ParseError("unknown unit %r in duration %r" % (unit, text)) from None

            value = int(whole or "0")
            if value > (1 << 63) // scale:
                raise ParseError("invalid duration %r" % text)
            value *= scale

            # Digits beyond what fits in 63 bits are dropped, not rejected.
            numerator, denominator = 0, 1.0
            for digit in fraction or "":
                if numerator > ((1 << 63) - 1) // 10 or numerator * 10 + int(digit) > 1 << 63:
                    break
                numerator = numerator * 10 + int(digit)
                denominator *= 10
            if numerator:
                value += int(float(numerator) * (float(scale) / denominator))
                if value > 1 << 63:
                    raise ParseError("invalid duration %r" % text)

            total += value
            if total > 1 << 63:
                raise ParseError("invalid duration %r" % text)

        if negative:
            return cls(-total)
        if total > (1 << 63) - 1:
            raise ParseError("invalid duration %r" % text)
        return cls(total)

    def totimedelta(self):
        """
        Convert to datetime.timedelta (truncated to microseconds).
        """
        return timedelta(microseconds=int(self) // MICROSECOND)

    def __str__(self):
        magnitude = abs(int(self))
        if magnitude < SECOND:
            if magnitude == 0:
                return "0s"
            if magnitude < MICROSECOND:
                precision, unit = 0, "ns"
            elif magnitude < MILLISECOND:
                precision, unit = 3, "µs"
            else:
                precision, unit = 6, "ms"
            suffix, whole = _fraction(magnitude, precision)
            text = f"{whole}{suffix}{unit}"
        else:
            suffix, whole = _fraction(magnitude, 9)
            text = f"{whole % 60}{suffix}s"
            whole //= 60
            if whole:
                text = f"{whole % 60}m{text}"
                whole //= 60
                if whole:
                    text = f"{whole}h{text}"
        return "-" + text if self < 0 else text

    def __repr__(self):
        return f"Duration({str(self)!r})"


def _parse_bool(text):
    if text in _TRUTHS:
        return True
    if text in _FALSITIES:
        return False
    raise ParseError("invalid boolean %r" % text)


def _bounds(kind):
    if kind.signed:
        return -(1 << kind.bits - 1), (1 << kind.bits - 1) - 1
    return 0, (1 << kind.bits) - 1


def _parse_integer(text, kind):
    digits = text
    negative = False
    if digits[:1] in ("+", "-"):
        if not kind.signed:
            raise ParseError("invalid unsigned integer %r" % text)
        negative = digits[0] == "-"
        digits = digits[1:]

    base = 10
    if digits[:2].lower() in ("0x", "0o", "0b"):
        base = {"x": 16, "o": 8, "b": 2}[digits[1].lower()]
        digits = digits[2:].removeprefix("_")
    elif len(digits) > 1 and digits[0] == "0":
        base = 8
        digits = digits[1:].removeprefix("_")

    if not _DIGITS.fullmatch(digits):
        raise ParseError("invalid integer %r" % text)
    try:
        magnitude = int(digits, base)
    except ValueError:
        raise ParseError("invalid integer %r" % text) from None

    value = -magnitude if negative else magnitude
    low, high = _bounds(kind)
    if not low <= value <= high:
        raise RangeError("integer %r does not fit in %s" % (text, kind))
    return value


def _parse_float(text):
    if _SPECIAL.fullmatch(text):
        return float(text)
    if _DECIMAL.fullmatch(text):
        value = float(text.replace("_", ""))
    elif _HEXADECIMAL.fullmatch(text):
        try:
            value = float.fromhex(text.replace("_", ""))
        except OverflowError:
            raise RangeError("float %r is out of range" % text) from None
    else:
        raise ParseError("invalid float %r" % text)
    if math.isinf(value):
        raise RangeError("float %r is out of range" % text)
    return value


def _format_float(value):
    """
    Shortest text that parses back to exactly `value`.

    Fixed notation is used while the decimal exponent lies in [-4, 6);
    outside that window the exponent form is used ("1e+06", "2.5e-07").
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"

    sign = "-" if value < 0 else ""
    _, digits, exponent = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(map(str, digits))
    point = len(digits) + exponent  # position of the decimal point within digits
    magnitude = point - 1

    if magnitude < -4 or magnitude >= 6:
        mantissa = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
        return "%s%se%s%02d" % (sign, mantissa, "-" if magnitude < 0 else "+", abs(magnitude))
    if point <= 0:
        return sign + "0." + "0" * -point + digits
    if point >= len(digits):
        return sign + digits + "0" * (point - len(digits))
    return sign + digits[:point] + "." + digits[point:]


def _sanitize_default(kind, default):
    """
    Validate a default against its kind and return the stored form.

    Raises
    - TypeError: the default has the wrong Python type.
    - ValueError: an integer default does not fit the kind's width.
    """
    match kind:
        case ValueKind.BOOL:
            if not isinstance(default, bool):
                raise TypeError("bool value default must be a bool")
            return default
        case ValueKind.INT | ValueKind.INT64 | ValueKind.UINT | ValueKind.UINT64:
            if isinstance(default, bool) or not isinstance(default, int):
                raise TypeError(f"{kind} value default must be an integer")
            low, high = _bounds(kind)
            if not low <= default <= high:
                raise ValueError(f"{kind} value default {default} is out of range")
            return int(default)
        case ValueKind.STRING:
            if not isinstance(default, str):
                raise TypeError("string value default must be a string")
            return default
        case ValueKind.FLOAT:
            if isinstance(default, bool) or not isinstance(default, int | float):
                raise TypeError("float64 value default must be a number")
            return float(default)
        case ValueKind.DURATION:
            return Duration(default)
    raise RuntimeError("unreachable")


_ZEROS = {
    ValueKind.BOOL: False,
    ValueKind.INT: 0,
    ValueKind.INT64: 0,
    ValueKind.UINT: 0,
    ValueKind.UINT64: 0,
    ValueKind.STRING: "",
    ValueKind.FLOAT: 0.0,
    ValueKind.DURATION: Duration(0),
}


@final
class Value:
    """
    Typed container for one flag's current value.

    Construction
    - Value(kind, default=Unset): default falls back to the kind's zero value
      (False, 0, "", 0.0, Duration(0)).
    - Value(ValueKind.FUNC, callback=fn): every set(text) calls fn(text); an
      exception raised by fn becomes a ParseError chained to it.

    The class is closed: behaviour per kind is selected with match statements,
    and subclassing is rejected.
    """
    __slots__ = ("_kind", "_current", "_callback")

    def __init__(self, kind, default=Unset, /, *, callback=Unset):
        if not isinstance(kind, ValueKind):
            raise TypeError("value 'kind' must be a value kind")
        self._kind = kind
        self._callback = Unset
        self._current = Unset

        if kind is ValueKind.FUNC:
            if not callable(callback):
                raise TypeError("func value 'callback' must be callable")
            if default is not Unset:
                raise TypeError("func value cannot have a default")
            self._callback = callback
            return

        if callback is not Unset:
            raise TypeError(f"{kind} value cannot have a 'callback'")
        self._current = _sanitize_default(kind, coalesce(default, _ZEROS.get(kind)))

    def __init_subclass__(cls, **options):
        raise TypeError("type 'Value' is not an acceptable base type")

    @property
    def kind(self):
        return self._kind

    def isbool(self):
        """
        True only for BOOL values: such flags are switched on by their bare name.
        """
        return self._kind is ValueKind.BOOL

    def get(self):
        """
        Return the native value (bool, int, str, float or Duration).

        Raises
        - TypeError: for FUNC values, which exist only for their side effects.
        """
        if self._kind is ValueKind.FUNC:
            raise TypeError("func value has no retrievable value")
        return self._current

    def set(self, text, /):
        """
        Parse `text` and store the result.

        Raises
        - ParseError: malformed text (or a failing FUNC callback).
        - RangeError: a number that does not fit this kind.
        The stored value is left untouched when an error is raised.
        """
        if not isinstance(text, str):
            raise TypeError("set() argument must be a string")

        match self._kind:
            case ValueKind.BOOL:
                self._current = _parse_bool(text)
            case ValueKind.INT | ValueKind.INT64 | ValueKind.UINT | ValueKind.UINT64:
                self._current = _parse_integer(text, self._kind)
            case ValueKind.STRING:
                self._current = text
            case ValueKind.FLOAT:
                self._current = _parse_float(text)
            case ValueKind.DURATION:
                self._current = Duration.parse(text)
            case ValueKind.FUNC:
                try:
                    self._callback(text)
                except Exception as exception:
                    raise ParseError("invalid value %r: %s" % (text, exception)) from exception

    def render(self):
        """
        Text form of the current value; set(render()) restores it exactly.
        FUNC values render as the empty string.
        """
        match self._kind:
            case ValueKind.BOOL:
                return "true" if self._current else "false"
            case ValueKind.INT | ValueKind.INT64 | ValueKind.UINT | ValueKind.UINT64:
                return str(self._current)
            case ValueKind.STRING:
                return self._current
            case ValueKind.FLOAT:
                return _format_float(self._current)
            case ValueKind.DURATION:
                return str(self._current)
        return ""

    def zero(self):
        """
        Text form of this kind's zero value.
        """
        if self._kind is ValueKind.FUNC:
            return ""
        return Value(self._kind).render()

    def __str__(self):
        return self.render()

    def __repr__(self):
        if self._kind is ValueKind.FUNC:
            return f"value(kind={self._kind.value!r}, callback={self._callback!r})"
        return f"value(kind={self._kind.value!r}, current={self._current!r})"


__all__ = (
    "WORD",
    "NANOSECOND",
    "MICROSECOND",
    "MILLISECOND",
    "SECOND",
    "MINUTE",
    "HOUR",
    "ParseError",
    "RangeError",
    "ValueKind",
    "Duration",
    "Value",
)
