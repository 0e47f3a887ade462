"""
Flagset completion resolver.

resolve(flagset, cword, words) answers "what can go at word `cword` of this
partial command line" for FlagSet.compgen.

Routing
- cursor on the first word of a bare command line → every flag name.
- previous word is a value-bearing flag → that flag's completer.
- previous word is a bool flag → flag names when the current word starts
  with '-', nothing otherwise.
- current word starts with '-' → every flag name.
- otherwise → completer of the positional argument slot under the cursor.

Completers are called as completer(word, flags, words) where flags maps the
flags seen before the cursor to their values rendered as strings. Value cells
are never written, so resolving twice gives the same answer.
"""
import logging
from collections.abc import Sequence
from types import MappingProxyType

from .faults import *
from .values import *

logger = logging.getLogger(__name__)


def _flag_names(flagset, /):
    return " ".join("-" + flag.name for flag in flagset.visit_all())


def _flag_name(word, /):
    """
    name of a flag token still waiting for its value, or None.

    "-name" and "--name" qualify; "-", "--", "-name=value" and plain words don't.
    """
    if not word.startswith("-") or word in ("-", "--") or "=" in word:
        return None
    return word[2:] if word.startswith("--") else word[1:]


def _context(flagset, tokens, /):
    """
    flags seen in tokens, rendered as strings.

    scanning stops at the first fault; what was seen before it is kept.
    """
    seen = {}
    try:
        flagset._scan(tokens, seen)
    except FlagSetException as fault:
        logger.debug("%s: partial flag context (%s)", flagset.name, fault.message)
    return _render(flagset, seen)


def _render(flagset, seen, /):
    return MappingProxyType({
        name: render(flagset.lookup(name).kind, value) for name, value in seen.items()
    })


def _slot(arguments, count, /):
    """argument receiving the next positional token after `count` tokens, or None."""
    for argument in arguments:
        maximum = argument.cardinality.maximum
        if maximum is None or count < maximum:
            return argument
        count -= maximum
    return None


def _delegate(spec, word, flags, words, /):
    if spec.completer is None:
        return ""
    try:
        candidates = spec.completer(word, flags, words)
    except Exception as error:
        raise DelegatedCompletionError(
            "completion for %s %s failed: %s" % (type(spec).__typename__, spec.name, error),
            title="completion failed",
            code=FaultCode.DELEGATED_COMPLETION,
            input=word,
            spec=spec,
            hint="check the completer registered for %s" % spec.name,
            docs=getdoc(FaultCode.DELEGATED_COMPLETION),
        ) from error
    if not isinstance(candidates, str):
        raise DelegatedCompletionError(
            "completion for %s %s returned %s, expected a string" % (
                type(spec).__typename__, spec.name, type(candidates).__name__
            ),
            title="completion failed",
            code=FaultCode.DELEGATED_COMPLETION,
            input=word,
            spec=spec,
            hint="completers must return a space-separated string of candidates",
            docs=getdoc(FaultCode.DELEGATED_COMPLETION),
        )
    return candidates


def resolve(flagset, cword, words, /):
    """
    compute the completion string for word `cword` of `words`.

    parameters
    - flagset: the FlagSet whose registries drive completion.
    - cword: int, 1-based index of the word under the cursor.
    - words: Sequence[str], raw words with the program name at index 0.

    returns
    - str: space-separated candidates, "" when nothing applies.

    raises
    - TypeError: malformed cword/words.
    - DelegatedCompletionError: a completer raised or returned a non-string.
    """
    if not isinstance(cword, int) or isinstance(cword, bool):
        raise TypeError("compgen() first argument must be an integer")
    if isinstance(words, str) or not isinstance(words, Sequence) or not all(isinstance(word, str) for word in words):
        raise TypeError("compgen() second argument must be a sequence of strings")
    words = tuple(words)

    if cword == 1 and len(words) == 1:
        return _flag_names(flagset)
    if cword < 1 or cword > len(words):
        return ""

    current = words[cword] if cword < len(words) else ""
    previous = words[cword - 1]

    if cword > 1 and (name := _flag_name(previous)) is not None:
        if (flag := flagset.lookup(name)) is None:
            return ""
        if flag.kind is Kind.BOOL:
            return _flag_names(flagset) if current.startswith("-") else ""
        logger.debug("%s: completing value of flag -%s", flagset.name, name)
        return _delegate(flag, current, _context(flagset, words[1:cword - 1]), words)

    if current.startswith("-"):
        return _flag_names(flagset)

    seen = {}
    try:
        tokens = flagset._scan(words[1:cword], seen)
    except FlagSetException as fault:
        logger.debug("%s: no positional completion (%s)", flagset.name, fault.message)
        return ""

    if (argument := _slot(flagset.arguments, len(tokens))) is None:
        return ""
    logger.debug("%s: completing argument %s", flagset.name, argument.name)
    return _delegate(argument, current, _render(flagset, seen), words)


__all__ = (
    "resolve",
)
