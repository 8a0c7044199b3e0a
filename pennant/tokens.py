"""
Pennant token expansion.

Rewrites single-dash tokens into the canonical long form the dispatcher works on:

    -v          -> --verbose
    -n=5        -> --number=5
    -verbose    -> --verbose            (single dash before a multi-character name)
    -vn 5       -> --verbose --number=5 (the following token binds to the last flag)

Anything else ("--x", "-", "--", plain words) passes through untouched. Nothing is
validated here: a cluster that cannot be rewritten cleanly (unknown characters, or a
value-taking flag before the last position) is left as-is for the dispatcher to report.

expand_token() works one raw token at a time so the dispatcher can stop rewriting at
"--" and hand untouched tokens to a child command; expand() is the whole-list form.
"""
from collections import deque

from .logger import logger


def _takes_value(registry, name):
    return not registry.lookup(name).value.isbool()


def expand_token(registry, token, tokens, /):
    """
    Expand one raw token against `registry`.

    `tokens` is the deque of raw tokens still to come; the token after a cluster is
    popped from it when it becomes the value of the cluster's last flag.
    Returns the list of expanded tokens.
    """
    if len(token) < 2 or token[0] != "-" or token[1] == "-":
        return [token]

    body = token[1:]
    if "=" in body:
        name, value = body.split("=", 1)
        if (resolved := registry.accepts(name)) is None:
            return [token]
        return [f"--{resolved}={value}"]

    if len(body) > 1 and body in registry:
        return ["--" + body]

    names = [registry.accepts(character) for character in body]
    if None in names or any(_takes_value(registry, name) for name in names[:-1]):
        return [token]

    expanded = ["--" + name for name in names]
    if len(names) > 1 and tokens and _takes_value(registry, names[-1]):
        expanded[-1] += "=" + tokens.popleft()

    if expanded != [token]:
        logger.debug("expanded %r into %r", token, expanded)
    return expanded


def expand(registry, args, /):
    """
    Expand a whole argument list. Tokens after a "--" terminator are kept verbatim.
    """
    tokens = deque(args)
    expanded = []
    while tokens:
        token = tokens.popleft()
        if token == "--":
            expanded.append(token)
            expanded.extend(tokens)
            break
        expanded.extend(expand_token(registry, token, tokens))
    return expanded


__all__ = (
    "expand_token",
    "expand",
)
