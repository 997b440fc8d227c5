r"""
Argot argument specifications and decorators.

Overview
- Match: the closed set of extraction strategies an argument can use.
  • WORD     : one positional word at the cursor (or at an explicit index).
  • REST     : the positional words from the cursor on, joined back together.
  • SEPARATE : the same window as REST, each word resolved on its own.
  • PREFIX   : the word starting with one of the argument's prefixes (name:value).
  • FLAG     : whether a word equal to one of the prefixes is present (--verbose).
  • TEXT     : the positional words from index 0 (or index) on, joined.
  • CONTENT  : the raw content split by single spaces, from index 0 (or index) on.
  • NONE     : nothing; the resolver receives an empty string.
  A match may also be a callable (context, results) -> Match, computed when the
  argument is reached.

- Argument: one slot of a command's argument list.
- @argument(...): build an Argument with the decorated function as its resolver.

Metadata (sanitized on construction)
- id: str, trimmed, non-empty; key of the argument's value in the results.
- match: Match | str (case-insensitive) | Callable.
- index: Unset | int (>= 0); explicit position overriding the cursor.
- limit: Unset | int (>= 1); how many words a window may take (unbounded when Unset).
- prefix: Unset | str | Iterable[str]; required for a static PREFIX or FLAG match.
- allow: Callable (context, results) -> bool; the argument is skipped when False.
- default: any value, or a callable (context, results) returning one (may be async).
- process: Callable (word, context, results) -> value (may be async).
- descr: Unset | str, short description, non-empty when provided.

Quick example:
    >>> from argot.arguments import Argument, Match, argument
    >>> name = Argument("name")
    >>> verbose = Argument("verbose", match=Match.FLAG, prefix="--verbose")
    >>> @argument("count", default=1)
    ... async def count(word, context, results):
    ...     return int(word) if word else 1

Public API
- Classes: Match, Argument
- Decorators: argument
"""
from collections.abc import Iterable
from enum import StrEnum

from rich.text import Text

from .faults import FaultCode, UnknownMatchError, MissingPrefixError, trigger, getdoc
from .utils import *


class Match(StrEnum):
    WORD = "word"
    REST = "rest"
    SEPARATE = "separate"
    PREFIX = "prefix"
    FLAG = "flag"
    TEXT = "text"
    CONTENT = "content"
    NONE = "none"

    @classmethod
    def _missing_(cls, value):
        # Case-insensitive lookup by name or value; None falls through to ValueError.
        if isinstance(value, str):
            return cls.__members__.get(value.strip().upper())
        return None

    @property
    def positional(self):
        """
        Whether arguments of this kind consume a slot of the positional cursor.
        """
        return self in (Match.WORD, Match.REST, Match.SEPARATE)

    @property
    def marked(self):
        """
        Whether arguments of this kind are found through their prefixes.
        """
        return self in (Match.PREFIX, Match.FLAG)


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate the 'id' and 'descr' fields.

    - id: required string, trimmed, non-empty.
    - descr: optional short description. If omitted (Unset), it becomes None.
      If provided, it must be a non-empty string after trimming.

    Raises
    - TypeError: if 'id' or 'descr' has the wrong type.
    - ValueError: if either is a string but empty after trimming.
    """
    if not isinstance(id := metadata["id"], str):
        raise TypeError(f"{cls.__typename__} 'id' must be a string")
    elif not (id := id.strip()):
        raise ValueError(f"{cls.__typename__} 'id' cannot be empty")
    metadata["id"] = id

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)


def _sanitize_matching_metadata(cls, metadata, /):
    """
    Internal: validate and normalize how the argument finds its word(s).

    Responsibilities
    - match: a Match, a name of one (case-insensitive), or a callable computing
      it later. Unknown names trigger UnknownMatchError right away.
    - index: Unset or a non-negative integer (Unset becomes None).
    - limit: Unset or a positive integer (Unset becomes None, i.e. unbounded).
    - prefix: Unset, a string, or an iterable of strings. Normalized into a
      tuple keeping declaration order; duplicates (case-insensitive) are
      rejected. A static PREFIX or FLAG match without prefixes triggers
      MissingPrefixError.

    Side effects
    - Mutates the provided metadata dict in place.
    """
    if not callable(match := metadata["match"]):
        if not isinstance(match, str):
            raise TypeError(f"{cls.__typename__} 'match' must be a string or a callable")
        try:
            match = Match(match)
        except ValueError:
            trigger(UnknownMatchError(
                "unknown match %r for argument %r" % (match, metadata["id"]),
                title="unknown match",
                code=FaultCode.UNKNOWN_MATCH,
                hint="use one of %s" % ", ".join(map(str, Match)),
                argument=metadata["id"],
                match=match,
                docs=getdoc(FaultCode.UNKNOWN_MATCH)
            ))
    metadata["match"] = match

    for name, minimum in (("index", 0), ("limit", 1)):
        value = metadata[name]
        if not isinstance(value, int | Unset) or isinstance(value, bool):
            raise TypeError(f"{cls.__typename__} '{name}' must be an integer")
        if isinstance(value, int) and value < minimum:
            raise ValueError(f"{cls.__typename__} '{name}' must be greater than or equal to {minimum}")
        metadata[name] = coalesce(value)

    prefix = metadata["prefix"]
    if isinstance(prefix, str):
        prefix = (prefix,)
    elif prefix is Unset:
        prefix = ()
    elif not isinstance(prefix, Iterable):
        raise TypeError(f"{cls.__typename__} 'prefix' must be a string or an iterable of strings")

    prefixes = []
    for value in prefix:
        if not isinstance(value, str):
            raise TypeError(f"{cls.__typename__} prefixes must be strings")
        elif not (value := value.strip()):
            raise ValueError(f"{cls.__typename__} prefixes cannot be empty-strings")
        elif value.lower() in map(str.lower, prefixes):
            raise ValueError(f"{cls.__typename__} prefixes cannot contain duplicates")
        prefixes.append(value)
    metadata["prefix"] = tuple(prefixes)

    if isinstance(match, Match) and match.marked and not prefixes:
        trigger(MissingPrefixError(
            "%s argument %r has no prefix" % (match, metadata["id"]),
            title="missing prefix",
            code=FaultCode.MISSING_PREFIX,
            hint="pass prefix=... (for example: prefix=%r)" % ("--" + metadata["id"]),
            argument=metadata["id"],
            match=match,
            docs=getdoc(FaultCode.MISSING_PREFIX)
        ))


def _sanitize_callable_metadata(cls, metadata, /):
    """
    Internal: validate the hooks an argument calls while being parsed.

    - allow: Unset or callable; Unset means always allowed.
    - process: Unset or callable; Unset means the default resolver.
    - default: any value; callables are invoked with (context, results).
    """
    for name in ("allow", "process"):
        if metadata[name] is not Unset and not callable(metadata[name]):
            raise TypeError(f"{cls.__typename__} '{name}' must be callable")


class Argument(metaclass=IntrospectableType):
    """
    One argument slot of a command.

    An Argument tells the parser where its word lives (match, index, limit,
    prefix), whether it participates at all (allow), and how the extracted word
    becomes a value (process, default).

    Resolution
    - process(word, context, results) is the resolver. It may be sync or async
      and may raise; failures propagate out of Command.parse unchanged.
    - Without a resolver, the word itself is the value, or the default when the
      word is empty.
    - default(context, results) also decides a FLAG's polarity: a falsy default
      yields True when the flag is present, a truthy default yields False.

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes
      on instances, mirroring the sanitized metadata values.
    """

    __introspectable__ = (
        "id",
        "match",
        "index",
        "limit",
        "prefix",
        "descr",
    )

    def __new__(
            cls,
            id,
            /,
            match=Match.WORD,
            index=Unset,
            limit=Unset,
            prefix=Unset,
            allow=Unset,
            default=None,
            process=Unset,
            descr=Unset,
    ):
        """
        Construct an Argument with the provided metadata.

        Parameters
        - id: str
          Key of the resolved value in the results mapping.
        - match: Match | str | Callable
          Extraction strategy, or a function (context, results) returning one.
        - index: Unset | int
          Explicit position in the positional words, overriding the cursor
          for WORD/REST/SEPARATE and the 0 start of TEXT/CONTENT.
        - limit: Unset | int
          Maximum number of words a REST/SEPARATE/TEXT/CONTENT window takes.
        - prefix: Unset | str | Iterable[str]
          Marker(s) for PREFIX ("name:") and FLAG ("--name") matches.
        - allow: Unset | Callable
          Predicate (context, results); when False the argument is skipped.
        - default: Any | Callable
          Default value or provider (context, results), sync or async.
        - process: Unset | Callable
          Resolver (word, context, results), sync or async.
        - descr: Unset | str
          Short description. If Unset, becomes None.
        """
        metadata = {
            "id": id,
            "match": match,
            "index": index,
            "limit": limit,
            "prefix": prefix,
            "allow": allow,
            "default": default,
            "process": process,
            "descr": descr,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_matching_metadata(cls, metadata)
        _sanitize_callable_metadata(cls, metadata)

        self = super().__new__(cls)

        # Mirror sanitized metadata into private fields; read-only properties expose them.
        for name, object in metadata.items():
            setattr(self, "_" + name, object)

        return self

    @property
    def dynamic(self):
        """
        Whether the match is computed per parse rather than declared.
        """
        return callable(self._match)

    def allow(self, context, results, /):
        if self._allow is Unset:
            return True
        return bool(immediate(self._allow(context, results), "%s %r allow" % (type(self).__typename__, self.id)))

    async def default(self, context, results, /):
        if callable(self._default):
            return await settle(self._default(context, results))
        return self._default

    async def process(self, word, context, results, /):
        if self._process is Unset:
            return word or await self.default(context, results)
        return await settle(self._process(word, context, results))


def argument(*args, **kwargs):
    """
    Decorator/factory for defining an argument together with its resolver.

    Usage
        @argument("amount", match=Match.WORD, default=0)
        async def amount(word, context, results):
            return int(word) if word else 0

    Behavior
    - Validates that it decorates a callable.
    - Builds the Argument with the decorated function as 'process'.

    Parameters
    - *args, **kwargs: forwarded to Argument(...) (everything but 'process').

    Returns
    - Argument: the configured specification.
    """
    if "process" in kwargs:
        raise TypeError("@argument() binds the decorated function as 'process'")

    @rename("argument")
    def wrapper(process, /):
        if not callable(process):
            raise TypeError("@argument() must be applied to a callable")
        return Argument(*args, process=process, **kwargs)

    return wrapper


__all__ = (
    # Classes (specifications)
    "Match",
    "Argument",

    # Decorators
    "argument",
)
