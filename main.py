from rich.pretty import pprint

from pennant import *


root = Command("pennant", ErrorPolicy.EXIT)
root.bool("verbose", False, "say more about what happens", short=True)
root.int("jobs", 1, "number of parallel `workers`", short=True)
root.duration("timeout", Duration.parse("30s"), "give up after this long")

build = root.child("build")
build.alias("b")
build.string("target", "all", "what to build", short=True)
build.main = lambda command: pprint({flag: command.lookup(flag).get() for flag in ("target",)})


if __name__ == '__main__':
    root.main = lambda command: command.help_if(command.help_wanted())
    pprint(root)
    root.execute()
