"""
Pennant command layer: declare flags, parse arguments, route to subcommands.

What this module provides
- Command: one node of a command tree.
  • Owns a FlagRegistry (formal/actual flags) and an ordered list of children.
  • Typed flag declaration: bool, int, int64, uint, uint64, string, float,
    duration, func and var (any pennant.values.Value).
  • parse(prompt): consumes tokens, sets flags, collects positionals, and hands
    the remainder to a child when the first positional names one.
  • handle(fault): the single gate applying the command's ErrorPolicy.
  • Help plumbing: usage(), defaults(), print_help(), help_if(), help_needed(),
    help_worthy(), help_wanted(), set_help_flag().
  • execute(prompt): parse, then run the selected command's main callable.
- env_url(name): project URL derived from $REPO_HOST and $DEVELOPER.

Accepted forms
    -f            boolean flag only
    --flag
    -f=x  --flag=x      non-boolean only
    flag=x              same as --flag=x; pass "a=b" after "--" to keep it positional
    -f x  --flag x      non-boolean only
    -abc                cluster of boolean short flags
    -abc val            cluster ending in a non-boolean short flag
    -name               single dash before a multi-character name
    --                  end of flags; the rest is positional
    -                   a literal positional argument

Quick start
    from pennant import Command, ErrorPolicy

    root = Command("tool", ErrorPolicy.EXIT)
    verbose = root.bool("verbose", False, "say more", short=True)
    count = root.int("count", 1, "how many `times`", short=True)
    build = root.child("build")
    build.string("target", "all", "what to build")

    root.parse("-v --count 3 build --target docs")
    assert verbose.get() and count.get() == 3
    assert root.selected is build and build.lookup("target").get() == "docs"

Design notes
- Faults caused by user input go through handle(); configuration mistakes
  (bad names, collisions) raise immediately.
- Policy, help-flag name, output and styling switches are inherited by
  children at creation time.
"""
import difflib
import os
import shlex
import sys
from collections import deque
from collections.abc import Iterable

from rich.console import Console

from .faults import *
from .faults import console as _console
from .flags import Flag, FlagRegistry
from .logger import logger
from .tokens import expand_token
from .utils import *
from .utils import IntrospectiveType
from .values import ParseError, RangeError, Value, ValueKind

HELP_DESCRIPTION = "print this message"


def env_url(name, /):
    """
    Join $REPO_HOST, $DEVELOPER and `name` into a URL, skipping empty parts.

        REPO_HOST=https://github.com DEVELOPER=acme -> "https://github.com/acme/<name>"
    """
    parts = (os.environ.get("REPO_HOST", ""), os.environ.get("DEVELOPER", ""), name)
    return "/".join(part.strip("/") for part in parts if part.strip("/"))


def _tokenize(prompt):
    if prompt is Unset:
        return sys.argv[1:]
    if isinstance(prompt, str):
        return shlex.split(prompt)
    if isinstance(prompt, Iterable):
        tokens = list(prompt)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("parse() argument must be a string or an iterable of strings")
        return tokens
    raise TypeError("parse() argument must be a string or an iterable of strings")


def _attach_to_parent(self, parent):
    """
    Register this command under its parent, enforcing unique names among siblings.
    """
    if self.name in parent.childnames():
        raise NameInUseError(f"{type(self).__typename__} name {self.name!r} is already in use")
    parent._children.append(self)


class Command(metaclass=IntrospectiveType):
    """
    Node of a command tree: flags, positionals, children and an error policy.

    Construction
    - Command(name, policy=ErrorPolicy.CONTINUE) builds a root.
    - command.child(name) builds a child; policy, help-flag name, output,
      colorful, fancy and url are inherited from the parent.
    - Unless the command is itself named like the help flag, a boolean help
      flag (short-eligible) is declared right away.

    Parse state
    - args: positionals left by the last parse (read-only tuple).
    - parsed: True once parse() has run, whatever its outcome.
    - selected: the child that received the remaining tokens, or None.
    """
    __introspectable__ = (
        "name",
        "aliases",
        "parent",
        "children",
        "policy",
        "helpname",
        "format",
        "url",
        "colorful",
        "fancy",
    )

    # Parent and children refer back to each other; showing both would recurse.
    __displayable__ = (
        "name",
        "aliases",
        "policy",
        "helpname",
        "url",
        "colorful",
        "fancy",
    )

    def __init__(
            self,
            name,
            /,
            policy=Unset,
            parent=Unset,
            *,
            helpname=Unset,
            output=Unset,
            colorful=Unset,
            fancy=Unset,
            format="%s [options] [args...]",
            url=Unset,
            usage=Unset,
            main=Unset
    ):
        """
        Parameters
        - name: str, as typed on the command line for children.
        - policy: ErrorPolicy; inherited from parent, else CONTINUE.
        - parent: Command | Unset; attaches this command as a child.
        - helpname: str; name of the help flag, inherited, else "help".
        - output: rich Console or writable file for faults and help; inherited,
          else the module console on stderr.
        - colorful / fancy: rendering switches for faults; inherited, else True / False.
        - format: usage header, "%s" is replaced by the command route.
        - url: shown under the usage text; inherited, else env_url(name).
        - usage: callable(command) -> str replacing the default usage text.
        - main: callable(command) run by execute().
        """
        if not isinstance(name, str):
            raise TypeError(f"{type(self).__typename__} 'name' must be a string")
        if not isinstance(parent, Command | Unset):
            raise TypeError(f"{type(self).__typename__} 'parent' must be a command")
        if not isinstance(format, str):
            raise TypeError(f"{type(self).__typename__} 'format' must be a string")
        if usage is not Unset and not callable(usage):
            raise TypeError(f"{type(self).__typename__} 'usage' must be callable")

        inherited = parent is not Unset
        policy = coalesce(policy, parent.policy if inherited else ErrorPolicy.CONTINUE)
        if not isinstance(policy, ErrorPolicy):
            raise TypeError(f"{type(self).__typename__} 'policy' must be an error policy")
        helpname = coalesce(helpname, parent.helpname if inherited else "help")
        if not isinstance(helpname, str):
            raise TypeError(f"{type(self).__typename__} 'helpname' must be a string")
        url = coalesce(url, parent.url if inherited else env_url(name))
        if not isinstance(url, str):
            raise TypeError(f"{type(self).__typename__} 'url' must be a string")

        self._name = name
        self._aliases = []
        self._parent = coalesce(parent)
        self._children = []
        self._policy = policy
        self._helpname = helpname
        self._output = Unset
        self._colorful = bool(coalesce(colorful, parent.colorful if inherited else True))
        self._fancy = bool(coalesce(fancy, parent.fancy if inherited else False))
        self._format = format
        self._url = url
        self._usage = usage
        self._main = Unset
        self.main = main

        self._registry = FlagRegistry(helpname)
        self._args = ()
        self._parsed = False
        self._selected = None

        self.set_output(coalesce(output, parent._output if inherited else Unset))

        if inherited:
            _attach_to_parent(self, parent)

        if name != helpname:
            self._registry.register(helpname, HELP_DESCRIPTION, Value(ValueKind.BOOL), short=True)

    # ── Tree ───────────────────────────────────────────────────────────────────

    @property
    def root(self):
        """
        Return the topmost command in the current command hierarchy.
        """
        child, parent = self, self.parent
        while parent:
            child, parent = parent, parent.parent
        return child

    @property
    def path(self):
        """
        Return the full ancestry from root to this command as a tuple.
        """
        path = [command := self]
        while command.parent:
            path.append(command := command.parent)
        return tuple(reversed(path))

    @property
    def route(self):
        """
        Names along the path joined with spaces, as typed on the command line.
        """
        return " ".join(step.name for step in self.path)

    def child(self, name, /, **options):
        """
        Create a child command; options override the inherited configuration.
        """
        return Command(name, parent=self, **options)

    def childnames(self):
        """
        Names and aliases of every child, in declaration order.
        """
        names = []
        for child in self._children:
            names.append(child.name)
            names.extend(child.aliases)
        return tuple(names)

    def alias(self, *names):
        """
        Add alternative names for this command.

        Raises
        - NameInUseError: a name is already taken by a sibling (name or alias).
        """
        for name in names:
            if not isinstance(name, str) or not name:
                raise TypeError("alias() arguments must be non-empty strings")
        if self._parent is not None:
            taken = set(self._parent.childnames()) - {self._name, *self._aliases}
            if blocked := [name for name in names if name in taken]:
                raise NameInUseError(f"the following names are taken: {', '.join(blocked)}")
        self._aliases.extend(name for name in names if name not in self._aliases)

    def _route_to(self, token):
        for child in self._children:
            if token == child.name or token in child.aliases:
                return child
        return None

    # ── Configuration ──────────────────────────────────────────────────────────

    @property
    def main(self):
        return self._main

    @main.setter
    def main(self, main):
        if main is not Unset and main is not None and not callable(main):
            raise TypeError(f"{type(self).__typename__} 'main' must be callable")
        self._main = coalesce(main)

    @property
    def output(self):
        """
        Console receiving faults, warnings and usage text.
        """
        return coalesce(self._output, _console)

    def set_output(self, output, /):
        """
        Redirect faults, warnings and help to a rich Console or a writable file.
        Passing None (or Unset) restores the default stderr console.
        """
        if output is None or output is Unset:
            self._output = Unset
        elif isinstance(output, Console):
            self._output = output
        elif callable(getattr(output, "write", None)):
            self._output = Console(file=output)
        else:
            raise TypeError("set_output() argument must be a console or a writable file")

    # ── Flag declaration ───────────────────────────────────────────────────────

    def var(self, value, name, descr="", short=False):
        """
        Declare a flag backed by an existing Value and return the Flag.
        """
        return self._registry.register(name, descr, value, short)

    def bool(self, name, default=False, descr="", short=False):
        return self.var(Value(ValueKind.BOOL, default), name, descr, short)

    def int(self, name, default=0, descr="", short=False):
        return self.var(Value(ValueKind.INT, default), name, descr, short)

    def int64(self, name, default=0, descr="", short=False):
        return self.var(Value(ValueKind.INT64, default), name, descr, short)

    def uint(self, name, default=0, descr="", short=False):
        return self.var(Value(ValueKind.UINT, default), name, descr, short)

    def uint64(self, name, default=0, descr="", short=False):
        return self.var(Value(ValueKind.UINT64, default), name, descr, short)

    def string(self, name, default="", descr="", short=False):
        return self.var(Value(ValueKind.STRING, default), name, descr, short)

    def float(self, name, default=0.0, descr="", short=False):
        return self.var(Value(ValueKind.FLOAT, default), name, descr, short)

    def duration(self, name, default=0, descr="", short=False):
        """
        Declare a duration flag; `default` is nanoseconds, a Duration or a timedelta.
        """
        return self.var(Value(ValueKind.DURATION, default), name, descr, short)

    def func(self, name, callback, descr="", short=False):
        """
        Declare a flag that calls `callback(text)` every time it is given.
        """
        return self.var(Value(ValueKind.FUNC, callback=callback), name, descr, short)

    def set_help_flag(self, name, short=False):
        """
        Replace the help flag with a new one called `name`.

        The name is validated first; on error the current help flag is kept.
        """
        if name != self._helpname:
            self._registry.validate(name)
        self._registry.unregister(self._helpname)
        self._registry.helpname = self._helpname = name
        return self._registry.register(name, HELP_DESCRIPTION, Value(ValueKind.BOOL), short)

    # ── Flag access ────────────────────────────────────────────────────────────

    def lookup(self, name):
        return self._registry.lookup(name)

    def set(self, name, text):
        """
        Set a flag from text as if it had been given on the command line.
        Failures go through handle() like parse faults.
        """
        try:
            self._apply(self._resolve(name, name, exact=True), text)
        except CommandException as fault:
            return self.handle(fault)
        return None

    def visit_all(self, callback):
        self._registry.visit_all(callback)

    def visit_set(self, callback):
        self._registry.visit_set(callback)

    def visited(self, flag):
        return self._registry.visited(flag)

    def nflag(self):
        return len(self._registry.actual)

    # ── Positional access ──────────────────────────────────────────────────────

    @property
    def args(self):
        return self._args

    def narg(self):
        return len(self._args)

    def arg(self, index):
        """
        The index-th positional argument, or "" when there is none.
        """
        if 0 <= index < len(self._args):
            return self._args[index]
        return ""

    def iterargs(self):
        """
        Yield the positional arguments one at a time (a fresh generator per call).
        """
        yield from self._args

    def invoked(self):
        return self.narg() + self.nflag() > 0

    @property
    def parsed(self):
        return self._parsed

    @property
    def selected(self):
        return self._selected

    # ── Parsing ────────────────────────────────────────────────────────────────

    def parse(self, prompt=Unset, /):
        """
        Parse a token stream against this command.

        Parameters
        - prompt:
          • Unset: read tokens from sys.argv[1:].
          • str: shell-like string; split via shlex.split.
          • Iterable[str]: pre-tokenized sequence.

        Returns
        - None on success (or when the policy swallowed the fault).
        - The fault under ErrorPolicy.CONTINUE. args then holds the positionals
          collected so far followed by every token not yet consumed.

        The command is marked parsed whatever the outcome. Flags set by an
        earlier parse stay set; call reset() to start from the defaults.
        """
        tokens = deque(_tokenize(prompt))
        self._selected = None
        logger.debug("parsing %r with %r", self.route, list(tokens))
        try:
            return self._parse(tokens)
        finally:
            self._parsed = True

    def _parse(self, tokens):
        positionals = []
        while tokens:
            token = tokens.popleft()

            if token == "--":
                positionals.extend(tokens)
                tokens.clear()
                break

            # "name=value" is an assignment even without dashes.
            if token == "-" or (not token.startswith("-") and "=" not in token):
                if not positionals and (child := self._route_to(token)) is not None:
                    logger.debug("routing %r to %r", list(tokens), child.route)
                    self._args = ()
                    self._selected = child
                    return child.parse(list(tokens))
                positionals.append(token)
                continue

            pending = deque(expand_token(self._registry, token, tokens))
            try:
                while pending:
                    self._dispatch(pending.popleft(), tokens)
            except CommandException as fault:
                self._args = tuple(positionals + list(tokens))
                if (fault := self.handle(fault)) is not None:
                    return fault

        self._args = tuple(positionals)
        return None

    def _dispatch(self, token, tokens):
        """
        Act on one expanded, flag-shaped token; may consume the next raw token.
        """
        if "=" in token:
            input, literal = token.split("=", 1)
            flag = self._resolve(input.removeprefix("-").removeprefix("-"), token)
            if flag.value.isbool():
                raise UnexpectedValueError(
                    "boolean flag %r cannot take a value" % flag.name,
                    flag=flag.name,
                    literal=literal,
                    hint="remove everything from '=' (for example: --%s)" % flag.name,
                )
            self._apply(flag, literal)
            return

        if token.startswith("--"):
            flag = self._resolve(token[2:], token)
            self._apply(flag, "true" if flag.value.isbool() else self._consume(flag, tokens))
            return

        characters = token[1:]
        for index, character in enumerate(characters):
            flag = self._resolve(character, token)
            if flag.value.isbool():
                self._apply(flag, "true")
            elif index == len(characters) - 1:
                self._apply(flag, self._consume(flag, tokens))
            else:
                raise MisplacedValueFlagError(
                    "flag %r takes a value and must be the last one in %r" % (flag.name, token),
                    flag=flag.name,
                    hint="move -%s to the end of the cluster or pass it on its own" % character,
                )

    def _resolve(self, name, token, *, exact=False):
        if exact:
            resolved = name if name in self._registry else None
        else:
            resolved = self._registry.accepts(name)
        if resolved is None:
            suggestions = difflib.get_close_matches(name, self._registry.formal.keys(), 5)
            try:
                hint = "did you mean '--%s'? you can also run '%s --%s' to see all flags" % (
                    suggestions[0], self.route, self._helpname
                )
            except IndexError:
                hint = "run '%s --%s' to see all available flags" % (self.route, self._helpname)
            raise UnknownFlagError(
                "unknown flag %r" % name,
                flag=name,
                literal=token,
                suggestions=tuple(suggestions),
                hint=hint,
            )
        return self._registry.lookup(resolved)

    def _consume(self, flag, tokens):
        if not tokens:
            raise MissingValueError(
                "flag %r needs a value" % flag.name,
                flag=flag.name,
                hint="pass it as --%s=<value> or --%s <value>" % (flag.name, flag.name),
            )
        return tokens.popleft()

    def _apply(self, flag, literal):
        try:
            flag.value.set(literal)
        except RangeError as error:
            raise ValueRangeError(
                "value %r is out of range for flag %r" % (literal, flag.name),
                flag=flag.name,
                literal=literal,
                hint=str(error),
            ) from error
        except ParseError as error:
            raise ValueParseError(
                "invalid value %r for flag %r" % (literal, flag.name),
                flag=flag.name,
                literal=literal,
                hint=str(error),
            ) from error
        self._registry.mark_set(flag.name)
        logger.debug("set %r to %r", flag.name, literal)

    def handle(self, fault, /):
        """
        Apply this command's ErrorPolicy to `fault` (no-op for None).

        CONTINUE prints and returns the fault, LOG prints and returns None,
        EXIT prints and exits with status 1, PANIC raises.
        """
        if fault is None:
            return None
        return trigger(
            fault,
            command=self,
            policy=self._policy,
            console=self.output,
            colorful=self._colorful,
            fancy=self._fancy,
            docs=getdoc(fault.code) if fault.code is not None else None,
        )

    def reset(self):
        """
        Forget the last parse: clear set flags, restore defaults, drop positionals.
        """
        self._registry.reset()
        self._args = ()
        self._parsed = False
        self._selected = None

    # ── Help ───────────────────────────────────────────────────────────────────

    def defaults(self):
        """
        One tab-indented usage line per flag, ordered by name.
        """
        lines = []
        self._registry.visit_all(lambda flag: lines.append("\t" + flag.usage()))
        return "\n".join(lines)

    def usage(self):
        """
        The usage text: custom callable output, or header, flag lines and url.
        """
        if self._usage is not Unset:
            return self._usage(self)
        header = self._format % self.route if "%s" in self._format else self._format
        parts = ["usage: " + header]
        if defaults := self.defaults():
            parts.append(defaults)
        if self._url:
            parts.append(self._url)
        return "\n".join(parts)

    def print_help(self):
        """
        Print the usage text and exit with status 1.
        """
        self.exit(self.usage(), EXIT_STATUS)

    def help_if(self, condition, message=Unset, /, *args):
        """
        When `condition` holds, print `message % args` (if given), then the help.
        """
        if condition:
            if message:
                self.warn(message % args if args else message)
            self.print_help()

    def _require_help_flag(self):
        if self._helpname not in self._registry:
            raise UndefinedHelpFlagError(f"help flag {self._helpname!r} is undefined for this command")

    def help_needed(self):
        """
        Parsed and the help flag was given.
        """
        self._require_help_flag()
        return self._parsed and self._registry.visited(self._helpname)

    def help_worthy(self):
        """
        Parsed and either the help flag was given, or nothing at all was passed
        (no flags, no positionals, nothing piped on stdin).
        """
        self._require_help_flag()
        used = self._registry.visited(self._helpname)
        return self._parsed and (used or (self.nflag() == 0 and self.narg() == 0 and not self.receiving()))

    def help_wanted(self):
        return self.help_needed() or self.help_worthy()

    def receiving(self):
        """
        Whether something is waiting on stdin (a pipe or redirected file with data).
        """
        try:
            return os.fstat(sys.stdin.fileno()).st_size > 0
        except (AttributeError, OSError, ValueError):
            return False

    # ── Messages ───────────────────────────────────────────────────────────────

    def warn(self, message, /):
        """
        Print a message (or an exception's text) on the output console; empty messages are ignored.
        """
        if message is None or not (text := str(message)):
            return
        self.output.print(text, markup=False, highlight=False)

    def warn_unless(self, condition, message=Unset, /, *args):
        if not condition and message:
            self.warn(message % args if args else message)

    def exit(self, message="", code=EXIT_STATUS, /):
        """
        Print `message` (when non-empty) and terminate with status `code`.
        """
        self.warn(message)
        sys.exit(code)

    # ── Execution ──────────────────────────────────────────────────────────────

    def execute(self, prompt=Unset, /):
        """
        Parse `prompt`, then call main(command) on the most deeply selected command.

        Returns main's result, or the fault handed back by the policy: the parse
        fault, or NoMainFunctionError when that command has no main.
        """
        if (fault := self.parse(prompt)) is not None:
            return fault
        command = self
        while command.selected is not None:
            command = command.selected
        if command.main is None:
            return command.handle(NoMainFunctionError(
                "command %r has nothing to execute" % command.route,
                hint="bind a main callable to %r before calling execute()" % command.name,
            ))
        logger.debug("executing %r", command.route)
        return command.main(command)


__all__ = (
    "HELP_DESCRIPTION",
    "Command",
    "env_url",
)
