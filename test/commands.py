"""
Commands module behavioral tests (parsing, policies, routing, help).

Scope
- Validate every accepted argument form and the faults raised for bad input.
- Validate the four error policies and what each leaves behind.
- Validate routing to children by name and alias, and inheritance.
- Validate help-flag management, usage text and execution.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (Command, ErrorPolicy, faults).
"""
import io
import os
import sys
import tempfile
import unittest
from unittest import TestCase, mock

from rich.console import Console

from pennant import *
from pennant.values import RangeError


def tool(policy=ErrorPolicy.PANIC, **options):
    return Command("tool", policy, output=io.StringIO(), url="", **options)


class TestCommandParsing(TestCase):
    """Argument forms and the actual set."""

    def setUp(self):
        self.root = tool()
        self.all = self.root.bool("all", False, "everything", short=True)
        self.brief = self.root.bool("brief", False, "less output", short=True)
        self.count = self.root.int("count", 5, "how many", short=True)
        self.number = self.root.int("number", 0, "a number", short=True)
        self.verbose = self.root.bool("verbose", False, "say more")

    def testAssignmentForm(self):
        self.assertIsNone(self.root.parse(["--count=10"]))
        self.assertEqual(self.count.get(), 10)
        self.assertTrue(self.root.visited("count"))
        self.assertTrue(self.root.visited(self.count))

    def testNoArguments(self):
        self.root.parse([])
        self.assertEqual(self.count.get(), 5)
        self.assertFalse(self.root.visited("count"))
        self.assertEqual(self.root.nflag(), 0)
        self.assertTrue(self.root.parsed)

    def testBooleanCluster(self):
        self.root.parse(["-ab"])
        self.assertTrue(self.all.get())
        self.assertTrue(self.brief.get())
        self.assertEqual(self.root.narg(), 0)

    def testClusterEndingInValueFlag(self):
        self.root.parse(["-an", "5"])
        self.assertTrue(self.all.get())
        self.assertEqual(self.number.get(), 5)
        self.assertEqual(self.root.narg(), 0)

    def testLongFlagWithSeparateValue(self):
        self.root.parse(["--count", "7", "file"])
        self.assertEqual(self.count.get(), 7)
        self.assertEqual(self.root.args, ("file",))

    def testShortFlagWithSeparateValue(self):
        self.root.parse(["-c", "7"])
        self.assertEqual(self.count.get(), 7)

    def testShortAssignment(self):
        self.root.parse(["-c=8"])
        self.assertEqual(self.count.get(), 8)

    def testSingleDashLongName(self):
        self.root.parse(["-verbose", "-count=3"])
        self.assertTrue(self.verbose.get())
        self.assertEqual(self.count.get(), 3)

    def testBooleanLongFlag(self):
        self.root.parse(["--verbose"])
        self.assertIs(self.verbose.get(), True)

    def testNegativeNumberAsValue(self):
        self.root.parse(["--count", "-3"])
        self.assertEqual(self.count.get(), -3)

    def testTerminator(self):
        self.root.parse(["--", "-notaflag"])
        self.assertEqual(self.root.args, ("-notaflag",))

    def testTerminatorKeepsClustersVerbatim(self):
        self.root.parse(["-a", "--", "-ab", "--count=1"])
        self.assertTrue(self.all.get())
        self.assertFalse(self.brief.get())
        self.assertEqual(self.root.args, ("-ab", "--count=1"))

    def testDashIsPositional(self):
        self.root.parse(["-", "-a"])
        self.assertEqual(self.root.args, ("-",))
        self.assertTrue(self.all.get())

    def testInterspersedPositionals(self):
        self.root.parse(["first", "--verbose", "second", "-c", "2", "third"])
        self.assertEqual(self.root.args, ("first", "second", "third"))
        self.assertTrue(self.verbose.get())
        self.assertEqual(self.count.get(), 2)

    def testStringPrompt(self):
        self.root.parse("--count 3 'a b' c")
        self.assertEqual(self.root.args, ("a b", "c"))

    def testDefaultPromptReadsArgv(self):
        with mock.patch.object(sys, "argv", ["tool", "-b", "x"]):
            self.root.parse()
        self.assertTrue(self.brief.get())
        self.assertEqual(self.root.args, ("x",))

    def testInvalidPrompt(self):
        with self.assertRaises(TypeError):
            self.root.parse(5)
        with self.assertRaises(TypeError):
            self.root.parse(["ok", 5])

    def testPositionalAccessors(self):
        self.root.parse(["a", "b"])
        self.assertEqual(self.root.arg(0), "a")
        self.assertEqual(self.root.arg(1), "b")
        self.assertEqual(self.root.arg(2), "")
        self.assertEqual(self.root.arg(-1), "")
        self.assertEqual(list(self.root.iterargs()), ["a", "b"])
        self.assertEqual(list(self.root.iterargs()), ["a", "b"])
        self.assertTrue(self.root.invoked())

    def testNotInvoked(self):
        self.root.parse([])
        self.assertFalse(self.root.invoked())

    def testReparseKeepsActualSet(self):
        self.root.parse(["--verbose", "x"])
        self.root.parse([])
        self.assertTrue(self.root.visited("verbose"))
        self.assertEqual(self.root.args, ())

    def testReset(self):
        self.root.parse(["--count=1", "-a", "x"])
        self.root.reset()
        self.assertEqual(self.count.get(), 5)
        self.assertFalse(self.all.get())
        self.assertEqual(self.root.nflag(), 0)
        self.assertEqual(self.root.args, ())
        self.assertFalse(self.root.parsed)

    def testVisitSetOrder(self):
        self.root.parse(["--verbose", "-a", "--count=2"])
        names = []
        self.root.visit_set(lambda flag: names.append(flag.name))
        self.assertEqual(names, ["all", "count", "verbose"])
        names.clear()
        self.root.visit_all(lambda flag: names.append(flag.name))
        self.assertEqual(names, ["all", "brief", "count", "help", "number", "verbose"])

    def testSet(self):
        self.assertIsNone(self.root.set("count", "9"))
        self.assertEqual(self.count.get(), 9)
        self.assertTrue(self.root.visited("count"))
        with self.assertRaises(UnknownFlagError):
            self.root.set("c", "1")
        with self.assertRaises(ValueParseError):
            self.root.set("count", "nine")

    def testFuncFlag(self):
        seen = []
        self.root.func("tag", seen.append, "add a tag")
        self.root.parse(["--tag", "a", "--tag=b"])
        self.assertEqual(seen, ["a", "b"])

    def testDurationFlag(self):
        timeout = self.root.duration("timeout", Duration.parse("30s"), "give up after")
        self.root.parse(["--timeout=1m30s"])
        self.assertEqual(timeout.get(), Duration.parse("90s"))

    def testTypedDeclarations(self):
        self.assertIs(self.root.int64("big").value.kind, ValueKind.INT64)
        self.assertIs(self.root.uint("u").value.kind, ValueKind.UINT)
        self.assertIs(self.root.uint64("u64").value.kind, ValueKind.UINT64)
        self.assertIs(self.root.string("s").value.kind, ValueKind.STRING)
        self.assertIs(self.root.float("f").value.kind, ValueKind.FLOAT)
        flag = self.root.var(Value(ValueKind.STRING, "x"), "custom", "custom value")
        self.assertIs(self.root.lookup("custom"), flag)


class TestCommandFaults(TestCase):
    """Faults raised under the PANIC policy."""

    def setUp(self):
        self.root = tool()
        self.count = self.root.int("count", 5, "how many", short=True)
        self.verbose = self.root.bool("verbose", False, "say more", short=True)
        self.big = self.root.int64("big", 0, "large number")

    def testInvalidValueKeepsPrevious(self):
        with self.assertRaises(ValueParseError) as context:
            self.root.parse(["--count=abc"])
        self.assertEqual(self.count.get(), 5)
        self.assertEqual(context.exception.flag, "count")
        self.assertEqual(context.exception.literal, "abc")
        self.assertIn("abc", str(context.exception))
        self.assertFalse(self.root.visited("count"))

    def testValueOutOfRange(self):
        with self.assertRaises(ValueRangeError) as context:
            self.root.parse(["--big=99999999999999999999"])
        self.assertIsInstance(context.exception.__cause__, RangeError)
        self.assertEqual(context.exception.literal, "99999999999999999999")

    def testUnknownLongFlag(self):
        with self.assertRaises(UnknownFlagError) as context:
            self.root.parse(["--verbos"])
        self.assertEqual(context.exception.flag, "verbos")
        self.assertIn("verbose", context.exception.options["suggestions"])
        self.assertIn("--verbose", context.exception.options["hint"])

    def testUnknownShortFlag(self):
        with self.assertRaises(UnknownFlagError) as context:
            self.root.parse(["-z"])
        self.assertEqual(context.exception.flag, "z")

    def testUnknownFlagInCluster(self):
        with self.assertRaises(UnknownFlagError):
            self.root.parse(["-vz"])
        # Booleans before the unknown character were applied.
        self.assertTrue(self.verbose.get())

    def testBooleanAssignment(self):
        with self.assertRaises(UnexpectedValueError):
            self.root.parse(["--verbose=true"])
        with self.assertRaises(UnexpectedValueError):
            self.root.parse(["-v=true"])

    def testBareAssignmentIsAFlag(self):
        with self.assertRaises(UnknownFlagError) as context:
            self.root.parse(["key=value"])
        self.assertEqual(context.exception.flag, "key")
        self.assertEqual(self.root.args, ())

    def testBareAssignmentSetsKnownFlag(self):
        self.root.parse(["count=10", "file"])
        self.assertEqual(self.count.get(), 10)
        self.assertEqual(self.root.args, ("file",))

    def testBareAssignmentAfterTerminatorIsPositional(self):
        self.assertIsNone(self.root.parse(["--", "count=10", "key=value"]))
        self.assertEqual(self.root.args, ("count=10", "key=value"))
        self.assertEqual(self.count.get(), 5)

    def testMissingValue(self):
        with self.assertRaises(MissingValueError):
            self.root.parse(["--count"])
        with self.assertRaises(MissingValueError):
            self.root.parse(["-c"])
        with self.assertRaises(MissingValueError):
            self.root.parse(["-vc"])

    def testMisplacedValueFlag(self):
        with self.assertRaises(MisplacedValueFlagError) as context:
            self.root.parse(["-cv", "3"])
        self.assertIsInstance(context.exception, UnexpectedValueError)
        self.assertEqual(context.exception.flag, "count")

    def testParsedEvenWhenRaising(self):
        with self.assertRaises(UnknownFlagError):
            self.root.parse(["--nope"])
        self.assertTrue(self.root.parsed)

    def testFaultKnowsItsCommand(self):
        with self.assertRaises(UnknownFlagError) as context:
            self.root.parse(["--nope"])
        self.assertIs(context.exception.options["command"], self.root)
        self.assertIs(context.exception.code, FaultCode.UNKNOWN_FLAG)


class TestErrorPolicies(TestCase):
    """Observable effect of each policy."""

    def build(self, policy):
        self.stream = io.StringIO()
        root = Command("tool", policy, output=self.stream, url="", colorful=False)
        self.count = root.int("count", 5, "how many")
        return root

    def testContinueReturnsFaultAndRemainder(self):
        root = self.build(ErrorPolicy.CONTINUE)
        fault = root.parse(["a", "--nope", "b", "--count=3"])
        self.assertIsInstance(fault, UnknownFlagError)
        self.assertEqual(root.args, ("a", "b", "--count=3"))
        self.assertEqual(self.count.get(), 5)
        self.assertIn("unknown flag 'nope'", self.stream.getvalue())

    def testContinueCanResume(self):
        root = self.build(ErrorPolicy.CONTINUE)
        root.parse(["--nope", "--count=3"])
        self.assertIsNone(root.parse(root.args))
        self.assertEqual(self.count.get(), 3)

    def testLogCarriesOn(self):
        root = self.build(ErrorPolicy.LOG)
        self.assertIsNone(root.parse(["--nope", "x", "--count=3"]))
        self.assertEqual(self.count.get(), 3)
        self.assertEqual(root.args, ("x",))
        self.assertIn("unknown flag 'nope'", self.stream.getvalue())

    def testExitTerminatesWithStatusOne(self):
        root = self.build(ErrorPolicy.EXIT)
        with self.assertRaises(SystemExit) as context:
            root.parse(["--count=abc"])
        self.assertEqual(context.exception.code, 1)
        self.assertIn("invalid value 'abc'", self.stream.getvalue())
        self.assertTrue(root.parsed)

    def testPanicRaises(self):
        root = self.build(ErrorPolicy.PANIC)
        with self.assertRaises(ValueParseError):
            root.parse(["--count=abc"])
        self.assertEqual(self.stream.getvalue(), "")

    def testHandleNone(self):
        root = self.build(ErrorPolicy.PANIC)
        self.assertIsNone(root.handle(None))

    def testHandleAppliesPolicy(self):
        root = self.build(ErrorPolicy.CONTINUE)
        fault = root.handle(MissingValueError("flag 'x' needs a value", flag="x"))
        self.assertIsInstance(fault, MissingValueError)
        self.assertIs(fault.options["policy"], ErrorPolicy.CONTINUE)


class TestCommandTree(TestCase):
    """Children, aliases, routing and inheritance."""

    def setUp(self):
        self.root = tool()
        self.verbose = self.root.bool("verbose", False, "say more", short=True)
        self.build = self.root.child("build")
        self.build_verbose = self.build.bool("verbose", False, "say more while building")
        self.test = self.root.child("test")

    def testDelegatesToChild(self):
        self.root.parse(["build", "--verbose"])
        self.assertIs(self.root.selected, self.build)
        self.assertTrue(self.build_verbose.get())
        self.assertFalse(self.verbose.get())
        self.assertEqual(self.root.args, ())
        self.assertTrue(self.build.parsed)

    def testParentFlagsBeforeChild(self):
        self.root.parse(["-v", "test", "a"])
        self.assertTrue(self.verbose.get())
        self.assertIs(self.root.selected, self.test)
        self.assertEqual(self.test.args, ("a",))

    def testOnlyFirstPositionalRoutes(self):
        self.root.parse(["file", "build"])
        self.assertIsNone(self.root.selected)
        self.assertEqual(self.root.args, ("file", "build"))

    def testTerminatorPreventsRouting(self):
        self.root.parse(["--", "build"])
        self.assertIsNone(self.root.selected)
        self.assertEqual(self.root.args, ("build",))

    def testAliasRouting(self):
        self.build.alias("b", "mk")
        self.root.parse(["mk", "x"])
        self.assertIs(self.root.selected, self.build)
        self.assertEqual(self.build.args, ("x",))
        self.assertEqual(self.root.childnames(), ("build", "b", "mk", "test"))

    def testAliasCollision(self):
        self.build.alias("b")
        with self.assertRaises(NameInUseError):
            self.test.alias("b")
        with self.assertRaises(NameInUseError):
            self.test.alias("build")
        self.assertEqual(self.test.aliases, ())

    def testChildNameCollision(self):
        self.build.alias("b")
        with self.assertRaises(NameInUseError):
            self.root.child("build")
        with self.assertRaises(NameInUseError):
            self.root.child("b")

    def testNestedChildren(self):
        remote = self.root.child("remote")
        add = remote.child("add")
        name = add.string("name", "origin", "remote name")
        self.root.parse(["remote", "add", "--name", "upstream", "url"])
        self.assertIs(self.root.selected, remote)
        self.assertIs(remote.selected, add)
        self.assertEqual(name.get(), "upstream")
        self.assertEqual(add.args, ("url",))
        self.assertIs(add.root, self.root)
        self.assertEqual(add.path, (self.root, remote, add))
        self.assertEqual(add.route, "tool remote add")

    def testChildFaultsUseInheritedPolicy(self):
        with self.assertRaises(UnknownFlagError) as context:
            self.root.parse(["build", "--nope"])
        self.assertIs(context.exception.options["command"], self.build)

    def testInheritance(self):
        stream = io.StringIO()
        root = Command("tool", ErrorPolicy.LOG, helpname="usage", output=stream, colorful=False, fancy=True, url="u")
        child = root.child("sub")
        self.assertIs(child.policy, ErrorPolicy.LOG)
        self.assertEqual(child.helpname, "usage")
        self.assertIs(child.output, root.output)
        self.assertFalse(child.colorful)
        self.assertTrue(child.fancy)
        self.assertEqual(child.url, "u")
        self.assertIsNotNone(child.lookup("usage"))
        self.assertIsNone(child.lookup("help"))
        self.assertIs(child.parent, root)
        self.assertEqual(root.children, (child,))

    def testChildOverrides(self):
        child = self.root.child("quiet", policy=ErrorPolicy.CONTINUE)
        self.assertIs(child.policy, ErrorPolicy.CONTINUE)

    def testCommandNamedLikeHelpFlagHasNoHelpFlag(self):
        help = self.root.child("help")
        self.assertIsNone(help.lookup("help"))
        with self.assertRaises(UndefinedHelpFlagError):
            help.help_needed()

    def testReprDoesNotRecurse(self):
        self.assertTrue(repr(self.build).startswith("command(name='build'"))
        self.assertNotIn("parent", repr(self.build))


class TestHelp(TestCase):
    """Help flag management and usage text."""

    def setUp(self):
        self.stream = io.StringIO()
        self.root = Command("tool", ErrorPolicy.PANIC, output=self.stream, url="")
        self.count = self.root.int("count", 5, "how many")

    def testHelpFlagIsShort(self):
        self.root.parse(["-h"])
        self.assertTrue(self.root.help_needed())
        self.assertTrue(self.root.help_wanted())

    def testHelpFlagLosesShortToOtherFlag(self):
        hosts = self.root.string("hosts", "", "where", short=True)
        self.assertTrue(hosts.short)
        self.assertFalse(self.root.lookup("help").short)
        self.root.parse(["-h", "a,b"])
        self.assertEqual(hosts.get(), "a,b")
        self.assertFalse(self.root.help_needed())

    def testHelpNeededRequiresParse(self):
        self.assertFalse(self.root.help_needed())

    def testHelpWorthy(self):
        with mock.patch.object(Command, "receiving", return_value=False):
            self.root.parse([])
            self.assertTrue(self.root.help_worthy())
            self.assertFalse(self.root.help_needed())
            self.root.parse(["x"])
            self.assertFalse(self.root.help_worthy())
        with mock.patch.object(Command, "receiving", return_value=True):
            self.root.parse([])
            self.assertFalse(self.root.help_worthy())

    def testSetHelpFlag(self):
        flag = self.root.set_help_flag("usage", short=True)
        self.assertIsNone(self.root.lookup("help"))
        self.assertIs(self.root.lookup("usage"), flag)
        self.assertEqual(self.root.helpname, "usage")
        self.root.parse(["-u"])
        self.assertTrue(self.root.help_needed())

    def testSetHelpFlagKeepsStateOnError(self):
        self.root.bool("verbose", False, "say more")
        help = self.root.lookup("help")
        for name, error in (("verbose", DuplicateFlagNameError), ("-x", InvalidFlagNameError), ("", InvalidFlagNameError)):
            with self.assertRaises(error, msg=name):
                self.root.set_help_flag(name)
            self.assertEqual(self.root.helpname, "help")
            self.assertIs(self.root.lookup("help"), help)
        self.root.parse(["-h"])
        self.assertTrue(self.root.help_needed())

    def testSetHelpFlagSameName(self):
        flag = self.root.set_help_flag("help")
        self.assertIs(self.root.lookup("help"), flag)
        self.assertFalse(flag.short)

    def testUsage(self):
        self.assertEqual(
            self.root.usage(),
            "usage: tool [options] [args...]\n"
            "\t--count\thow many [default: 5]\n"
            "\t-h, --help\tprint this message",
        )

    def testUsageWithUrlAndRoute(self):
        root = Command("tool", url="https://example.org/acme/tool", format="%s <file>")
        child = root.child("sub", format="%s <file>")
        self.assertEqual(
            child.usage(),
            "usage: tool sub <file>\n\t-h, --help\tprint this message\nhttps://example.org/acme/tool",
        )

    def testFormatWithoutPlaceholder(self):
        root = Command("tool", url="", format="just run it")
        self.assertTrue(root.usage().startswith("usage: just run it\n"))

    def testCustomUsage(self):
        root = Command("tool", usage=lambda command: "custom " + command.name)
        self.assertEqual(root.usage(), "custom tool")

    def testDefaults(self):
        self.assertEqual(self.root.defaults(), "\t--count\thow many [default: 5]\n\t-h, --help\tprint this message")

    def testPrintHelpExitsWithOne(self):
        with self.assertRaises(SystemExit) as context:
            self.root.print_help()
        self.assertEqual(context.exception.code, 1)
        self.assertIn("usage: tool", self.stream.getvalue())

    def testHelpIf(self):
        self.root.help_if(False, "never shown")
        self.assertEqual(self.stream.getvalue(), "")
        with self.assertRaises(SystemExit):
            self.root.help_if(True, "missing %s", "input")
        self.assertIn("missing input", self.stream.getvalue())

    def testReceiving(self):
        with mock.patch.object(sys, "stdin", io.StringIO()):
            self.assertFalse(self.root.receiving())
        with mock.patch.object(sys, "stdin", None):
            self.assertFalse(self.root.receiving())
        with tempfile.TemporaryFile("w+") as file:
            file.write("piped")
            file.flush()
            with mock.patch.object(sys, "stdin", file):
                self.assertTrue(self.root.receiving())


class TestMessages(TestCase):
    """warn, warn_unless, exit and set_output."""

    def setUp(self):
        self.stream = io.StringIO()
        self.root = Command("tool", output=self.stream, url="")

    def testWarn(self):
        self.root.warn("careful [now]")
        self.root.warn("")
        self.root.warn(None)
        self.assertEqual(self.stream.getvalue(), "careful [now]\n")

    def testWarnException(self):
        self.root.warn(ValueError("bad thing"))
        self.assertEqual(self.stream.getvalue(), "bad thing\n")

    def testWarnUnless(self):
        self.root.warn_unless(True, "hidden")
        self.root.warn_unless(False, "shown %d", 3)
        self.assertEqual(self.stream.getvalue(), "shown 3\n")

    def testExit(self):
        with self.assertRaises(SystemExit) as context:
            self.root.exit("bye", 3)
        self.assertEqual(context.exception.code, 3)
        self.assertEqual(self.stream.getvalue(), "bye\n")

    def testSetOutput(self):
        console = Console(file=io.StringIO())
        self.root.set_output(console)
        self.assertIs(self.root.output, console)
        self.root.set_output(None)
        self.assertIsNot(self.root.output, console)
        with self.assertRaises(TypeError):
            self.root.set_output(42)


class TestExecute(TestCase):
    """execute() runs the main callable of the selected command."""

    def testRunsRootMain(self):
        root = tool()
        flag = root.bool("go", False, "go")
        root.main = lambda command: ("ran", command.lookup("go").get(), command.args)
        self.assertEqual(root.execute(["--go", "x"]), ("ran", True, ("x",)))
        self.assertTrue(flag.get())

    def testRunsSelectedChildMain(self):
        root = tool(main=lambda command: "root")
        child = root.child("sub", main=lambda command: "child:" + command.arg(0))
        self.assertEqual(root.execute(["sub", "a"]), "child:a")
        self.assertEqual(root.execute([]), "root")
        self.assertIsNone(child.parent.selected)

    def testNoMainFunction(self):
        with self.assertRaises(NoMainFunctionError):
            tool().execute([])

    def testNoMainFunctionUnderContinue(self):
        root = tool(ErrorPolicy.CONTINUE)
        self.assertIsInstance(root.execute([]), NoMainFunctionError)

    def testParseFaultIsReturned(self):
        root = tool(ErrorPolicy.CONTINUE, main=lambda command: "ran")
        self.assertIsInstance(root.execute(["--nope"]), UnknownFlagError)

    def testInvalidMain(self):
        with self.assertRaises(TypeError):
            tool(main="not callable")


class TestEnvUrl(TestCase):

    def testJoinsEnvironment(self):
        with mock.patch.dict(os.environ, {"REPO_HOST": "https://github.com/", "DEVELOPER": "acme"}):
            self.assertEqual(env_url("tool"), "https://github.com/acme/tool")
            self.assertEqual(Command("tool").url, "https://github.com/acme/tool")

    def testSkipsEmptyParts(self):
        with mock.patch.dict(os.environ, {"REPO_HOST": "", "DEVELOPER": "acme"}):
            self.assertEqual(env_url("tool"), "acme/tool")
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(env_url("tool"), "tool")


class TestConstruction(TestCase):

    def testInvalidArguments(self):
        with self.assertRaises(TypeError):
            Command(1)
        with self.assertRaises(TypeError):
            Command("tool", "exit")
        with self.assertRaises(TypeError):
            Command("tool", parent="root")
        with self.assertRaises(TypeError):
            Command("tool", usage="text")

    def testConfigurationErrorsRaiseImmediately(self):
        root = tool(ErrorPolicy.CONTINUE)
        root.bool("verbose", short=True)
        with self.assertRaises(ShortNameCollisionError):
            root.bool("version", short=True)
        with self.assertRaises(DuplicateFlagNameError):
            root.int("verbose")
        with self.assertRaises(InvalidFlagNameError):
            root.int("-x")


if __name__ == "__main__":
    unittest.main()
