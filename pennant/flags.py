"""
Pennant flags: descriptors and the per-command registry.

Overview
- Flag: one declared flag (name, description, default text, short eligibility, Value).
  • usage(): one help line, "-v, --verbose\tdescription [default: x]".
  • eq(object): compare the flag's current native value.
- FlagRegistry: formal (declared) and actual (set while parsing) flags of one command.
  • register()/unregister(): declaration with naming and short-name rules.
  • accepts(token): resolve a long name or a single short character to a flag name.
  • visit_all()/visit_set(): ordered traversal by name.
- unquote(flag): placeholder for help text, taken from a back-quoted word in the
  description or guessed from the value kind.

Naming rules (raised immediately as ConfigurationError subclasses)
- A name must be non-empty, must not start with "-" and must not contain "=".
- Names are unique within a registry.
- Among short-eligible flags first characters are unique. The help flag is the
  exception: it silently gives up its short form when it collides, whichever of
  the two flags was registered first.
"""
from .faults import DuplicateFlagNameError, InvalidFlagNameError, ShortNameCollisionError
from .logger import logger
from .utils import *
from .utils import IntrospectiveType
from .values import Value, ValueKind


class Flag(metaclass=IntrospectiveType):
    """
    State of one declared flag.

    Properties
    - name: as written on the command line (without dashes).
    - descr: one-line description for help output.
    - default: the value rendered as text at declaration time; never changes.
    - short: whether the first character of the name may stand for the flag.
    - value: the owned Value.
    """
    __introspectable__ = (
        "name",
        "descr",
        "default",
        "short",
        "value",
    )

    def __init__(self, name, descr, value, short=False):
        if not isinstance(name, str):
            raise TypeError(f"{type(self).__typename__} 'name' must be a string")
        if not isinstance(descr, str):
            raise TypeError(f"{type(self).__typename__} 'descr' must be a string")
        if not isinstance(value, Value):
            raise TypeError(f"{type(self).__typename__} 'value' must be a value")

        self._name = name
        self._descr = descr
        self._value = value
        self._default = value.render()
        self._short = bool(short)

    def get(self):
        return self._value.get()

    def eq(self, object, /):
        """
        Whether the current native value equals `object`.

        Booleans only compare equal to booleans; func flags never compare equal.
        """
        if self._value.kind is ValueKind.FUNC:
            return False
        current = self._value.get()
        return isinstance(current, bool) == isinstance(object, bool) and current == object

    def usage(self):
        if self._short:
            line = f"-{self._name[0]}, --{self._name}"
        else:
            line = f"--{self._name}"
        line += f"\t{self._descr}"
        if self._default != self._value.zero():
            line += f" [default: {self._default}]"
        return line


def unquote(flag, /):
    """
    Extract the placeholder name of a flag for help output.

    Given a description "a `name` to show" it returns ("name", "a name to show").
    Without back quotes the placeholder is guessed from the value kind: "" for
    booleans, then "duration", "float", "int", "string", "uint", or "value".
    """
    if not isinstance(flag, Flag):
        raise TypeError("unquote() argument must be a flag")

    descr = flag.descr
    start = descr.find("`")
    if start != -1:
        end = descr.find("`", start + 1)
        if end != -1:
            name = descr[start + 1:end]
            return name, descr[:start] + name + descr[end + 1:]

    match flag.value.kind:
        case ValueKind.BOOL:
            name = ""
        case ValueKind.DURATION:
            name = "duration"
        case ValueKind.FLOAT:
            name = "float"
        case ValueKind.INT | ValueKind.INT64:
            name = "int"
        case ValueKind.STRING:
            name = "string"
        case ValueKind.UINT | ValueKind.UINT64:
            name = "uint"
        case _:
            name = "value"
    return name, descr


class FlagRegistry(metaclass=IntrospectiveType):
    """
    Formal and actual flags of one command.

    The registry knows the name of the command's help flag so that collisions on
    its short form can be resolved in favour of the other flag.
    """
    __introspectable__ = (
        "formal",
        "actual",
    )
    __displayable__ = (
        "helpname",
        "formal",
        "actual",
    )

    def __init__(self, helpname="help"):
        if not isinstance(helpname, str):
            raise TypeError(f"{type(self).__typename__} 'helpname' must be a string")
        self._helpname = helpname
        self._formal = {}
        self._actual = {}

    @property
    def helpname(self):
        return self._helpname

    @helpname.setter
    def helpname(self, name):
        if not isinstance(name, str):
            raise TypeError(f"{type(self).__typename__} 'helpname' must be a string")
        self._helpname = name

    def __contains__(self, name):
        return name in self._formal

    def __len__(self):
        return len(self._formal)

    def validate(self, name):
        """
        Check that `name` could be declared, without declaring it.

        Raises
        - InvalidFlagNameError: empty name, leading "-", or "=" inside the name.
        - DuplicateFlagNameError: the name is already declared.
        """
        if not isinstance(name, str):
            raise TypeError("flag name must be a string")
        if not name:
            raise InvalidFlagNameError("flag name cannot be empty")
        if name.startswith("-"):
            raise InvalidFlagNameError(f"flag {name!r} begins with -")
        if "=" in name:
            raise InvalidFlagNameError(f"flag {name!r} contains =")
        if name in self._formal:
            raise DuplicateFlagNameError(f"flag redefined: {name}")

    def register(self, name, descr, value, short=False):
        """
        Declare a new flag and return it.

        Raises
        - the errors of validate().
        - ShortNameCollisionError: another short-eligible flag, not the help flag,
          starts with the same character.
        """
        self.validate(name)

        # At most one short-eligible flag can own a given first character.
        if short and (other := self.lookup(self.shorts().get(name[0]))) is not None:
            if other.name == self._helpname:
                logger.debug("revoking short form of help flag %r in favour of %r", other.name, name)
                other._short = False
            elif name == self._helpname:
                logger.debug("registering help flag %r without short form", name)
                short = False
            else:
                raise ShortNameCollisionError(
                    f"short name collision between {name!r} and {other.name!r} flags"
                )

        flag = self._formal[name] = Flag(name, descr, value, short)
        logger.debug("registered flag %r (%s, short=%s)", name, value.kind, flag.short)
        return flag

    def unregister(self, name):
        """
        Forget a flag (formal and actual). Returns the removed flag, or None.
        """
        self._actual.pop(name, None)
        return self._formal.pop(name, None)

    def lookup(self, name):
        return self._formal.get(name)

    def accepts(self, token):
        """
        Resolve a token to a flag name, or None.

        An exact flag name wins; otherwise a single character resolves to the
        short-eligible flag it starts.
        """
        if token in self._formal:
            return token
        if len(token) == 1:
            for name, flag in self._formal.items():
                if flag.short and name[0] == token:
                    return name
        return None

    def shorts(self):
        """
        Mapping of short character to flag name for every short-eligible flag.
        """
        return {name[0]: name for name, flag in self._formal.items() if flag.short}

    def mark_set(self, name):
        self._actual[name] = self._formal[name]

    def visited(self, flag):
        name = flag.name if isinstance(flag, Flag) else flag
        return name in self._actual

    def visit_all(self, callback):
        for name in sorted(self._formal):
            callback(self._formal[name])

    def visit_set(self, callback):
        for name in sorted(self._actual):
            callback(self._actual[name])

    def reset(self):
        """
        Clear the actual set and restore every non-func flag to its default.
        """
        self._actual.clear()
        for flag in self._formal.values():
            if flag.value.kind is not ValueKind.FUNC:
                flag.value.set(flag.default)


__all__ = (
    "Flag",
    "FlagRegistry",
    "unquote",
)
