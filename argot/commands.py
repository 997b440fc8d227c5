"""
Argot command layer: declare a command's arguments and parse content into values.

What this module provides
- Command: binds an ordered list of argument slots and a split strategy to a
  callback, and parses content into a results mapping:
  • Argument        : a single slot.
  • [Argument, ...] : an alternative group; the first allowed argument is used,
                      none allowed means the slot is skipped.
  • callable        : a cancellation probe (context, results). None/False lets
                      parsing continue, True cancels silently, anything else is
                      sent to context.send(...) and cancels.
- Factories and helpers:
  • command(...): create a Command or a decorator that produces one.
  • invoke(command, content, context): parse and run, treating cancellation as
    a quiet stop.

Parsing (Command.parse)
- tokenize the content with the command's split strategy,
- drop PREFIX/FLAG marker words from the pool used by positional arguments,
- walk the slots in order, one at a time; each argument's evaluator is awaited
  before the next slot is looked at, so later arguments can read earlier values
  from `results` (allow, dynamic match, default and process all receive it),
- WORD, REST and SEPARATE arguments consume one slot of the positional cursor.

Quick start
    from argot import command, Argument, Match, Split

    @command(split=Split.STICKY, args=(
        Argument("target"),
        Argument("reason", match=Match.REST),
        Argument("silent", match=Match.FLAG, prefix=("--silent", "-s")),
    ))
    async def kick(context, results):
        ...

    results = await kick.parse('someone "being rude" --silent', context)

Faults
- A dynamic match that names no Match raises UnknownMatchError; a PREFIX or FLAG
  match without prefixes raises MissingPrefixError. Both are configuration
  mistakes and surface the first time the argument is reached.
- Resolver failures propagate unchanged. Cancellation raises CommandCancelled.
"""
import inspect
import logging

from .arguments import Argument, Match
from .faults import *
from .matching import Extractor, markers, unmarked
from .splits import Split, sanitize, tokenize
from .utils import *

logger = logging.getLogger(__name__)


def _process_args(cls, metadata):
    """
    Validate and normalize the argument slots.

    Rules
    - An Argument is kept as-is.
    - A list/tuple is an alternative group: it must be non-empty and hold only
      Arguments; it is normalized into a tuple.
    - Any other callable is a cancellation probe.
    - Anything else raises TypeError.

    Side effects
    - metadata["args"] becomes a tuple of slots.
    - metadata["duplicates"] lists ids declared more than once, in order of
      their second appearance.
    """
    if isinstance(args := metadata["args"], str) or not hasattr(args, "__iter__"):
        raise TypeError(f"{cls.__typename__} 'args' must be an iterable of argument slots")

    slots = []
    seen = set()
    duplicates = []

    for slot in args:
        if isinstance(slot, Argument):
            group = (slot,)
        elif isinstance(slot, tuple | list):
            if not slot:
                raise ValueError(f"{cls.__typename__} alternative groups cannot be empty")
            if not all(isinstance(argument, Argument) for argument in slot):
                raise TypeError(f"{cls.__typename__} alternative groups must only contain arguments")
            group = slot = tuple(slot)
        elif callable(slot):
            group = ()
        else:
            raise TypeError(f"{cls.__typename__} argument slots must be arguments, lists of arguments, or callables")

        # Members of one group share an id on purpose; only count it once per slot.
        for id in dict.fromkeys(argument.id for argument in group):
            if id in seen and id not in duplicates:
                duplicates.append(id)
            seen.add(id)
        slots.append(slot)

    metadata["args"] = tuple(slots)
    metadata["duplicates"] = duplicates


def _process_strings(cls, metadata):
    """
    Validate 'name' and 'descr': strings, trimmed, non-empty when provided.
    """
    for name in ("name", "descr"):
        if not isinstance(value := metadata[name], str | Unset):
            raise TypeError(f"{cls.__typename__} '{name}' must be a string")
        elif isinstance(value, str) and not (value := value.strip()):
            raise ValueError(f"{cls.__typename__} '{name}' cannot be empty")
        metadata[name] = coalesce(value)


class Command(metaclass=IntrospectableType):
    """
    A command's argument declaration plus the callback that consumes the values.

    Responsibilities
    - Hold the ordered argument slots and the split strategy.
    - Parse content into a results mapping (parse), following the slots' order.
    - Run the callback with the parsed results (__invoke__).
    - Surface configuration faults with its rendering options (trigger).

    State
    - Nothing about a parse is stored on the command: tokens, the positional
      cursor and the results are local to each parse call, so one command can
      be parsed concurrently for different contexts.
    """

    __introspectable__ = (
        "name",
        "descr",
        "args",
        "split",
        "colorful",
        "fancy",
    )

    def __new__(
            cls,
            callback,
            /,
            name=Unset,
            args=(),
            split=Split.PLAIN,
            descr=Unset,
            *,
            colorful=False,
            fancy=False
    ):
        """
        Construct a Command bound to `callback`.

        Parameters
        - callback: Callable
          Called as callback(context, results) by __invoke__; may be async.
        - name: Unset | str
          Display name; defaults to the callback's __name__.
        - args: Iterable of slots
          Arguments, alternative groups (lists of arguments), and cancellation probes.
        - split: Split | str | re.Pattern | Callable
          Tokenization strategy (see argot.splits).
        - descr: Unset | str
          Short description; defaults to the callback's docstring.
        - colorful, fancy: bool
          Rendering switches forwarded to faults raised by this command.

        Raises
        - TypeError/ValueError on invalid metadata or slots.
        - DuplicatedIdentifierWarning (as a warning) when two slots share an id.
        """
        if not callable(callback):
            raise TypeError(f"{cls.__typename__} 'callback' must be callable")

        metadata = {
            "name": coalesce(name, getattr(callback, "__name__", Unset)),
            "descr": coalesce(descr, inspect.getdoc(callback) or Unset),
            "args": args,
            "split": sanitize(split),
            "colorful": bool(colorful),
            "fancy": bool(fancy),
        }
        _process_args(cls, metadata)
        _process_strings(cls, metadata)

        self = super().__new__(cls)
        self._callback = callback
        duplicates = metadata.pop("duplicates")
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        self._markers = markers(self._args)

        for id in duplicates:
            self.trigger(DuplicatedIdentifierWarning(
                "argument id %r is declared more than once" % id,
                title="duplicated identifier",
                code=FaultCode.DUPLICATED_IDENTIFIER,
                hint="the last argument to resolve wins; rename one of them",
                argument=id,
                docs=getdoc(FaultCode.DUPLICATED_IDENTIFIER)
            ))

        return self

    @property
    def dynamic(self):
        """
        Whether any argument computes its match at parse time.
        """
        return any(
            argument.dynamic
            for slot in self._args
            for argument in (slot if isinstance(slot, tuple) else (slot,))
            if isinstance(argument, Argument)
        )

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this command's rendering options merged in.
        """
        trigger(fault, **options, tool=self, colorful=self.colorful, fancy=self.fancy)

    def _match(self, argument, context, results):
        """
        Resolve the argument's match for this parse, validating dynamic results.
        """
        match = argument.match
        if argument.dynamic:
            match = immediate(match(context, results), "argument %r match" % argument.id)

        try:
            match = Match(match)
        except ValueError:
            self.trigger(UnknownMatchError(
                "unknown match %r for argument %r" % (match, argument.id),
                title="unknown match",
                code=FaultCode.UNKNOWN_MATCH,
                hint="return one of %s from the match function" % ", ".join(map(str, Match)),
                argument=argument.id,
                match=match,
                docs=getdoc(FaultCode.UNKNOWN_MATCH)
            ))

        if match.marked and not argument.prefix:
            self.trigger(MissingPrefixError(
                "%s argument %r has no prefix" % (match, argument.id),
                title="missing prefix",
                code=FaultCode.MISSING_PREFIX,
                hint="pass prefix=... (for example: prefix=%r)" % ("--" + argument.id),
                argument=argument.id,
                match=match,
                docs=getdoc(FaultCode.MISSING_PREFIX)
            ))

        return match

    async def _cancel(self, probe, context, results):
        """
        Run a cancellation probe; raise CommandCancelled when it asks to stop.
        """
        feedback = await settle(probe(context, results))
        if feedback is None or feedback is False:
            return

        if feedback is not True and feedback:
            await settle(context.send(feedback))
            logger.debug("%s cancelled with feedback %r", self.name, feedback)
            raise CommandCancelled(feedback)

        logger.debug("%s cancelled", self.name)
        raise CommandCancelled()

    async def parse(self, content, context=None, /):
        """
        Parse `content` into a mapping of argument id -> resolved value.

        Steps per slot, in declaration order
        - probe: run it, possibly cancelling (see _cancel).
        - alternative group: take the first allowed argument, or skip the slot.
        - argument: skip it when not allowed.
        - resolve the match, build its evaluator at the current cursor, advance
          the cursor for WORD/REST/SEPARATE, then await the evaluator and store
          its value under the argument's id.

        Raises
        - CommandCancelled when a probe cancels.
        - UnknownMatchError / MissingPrefixError on configuration mistakes.
        - Whatever a resolver raises, unchanged.
        """
        if not self._args:
            return {}

        words = tokenize(content, context, self._split)
        extractor = Extractor(content, words, unmarked(words, self._markers), self._split)

        results = {}
        cursor = 0

        for slot in self._args:
            if isinstance(slot, tuple):
                argument = next((argument for argument in slot if argument.allow(context, results)), None)
                if argument is None:
                    logger.debug("%s skipped an alternative group, no argument allowed", self.name)
                    continue
            elif isinstance(slot, Argument):
                if not slot.allow(context, results):
                    logger.debug("%s skipped argument %r, not allowed", self.name, slot.id)
                    continue
                argument = slot
            else:
                await self._cancel(slot, context, results)
                continue

            match = self._match(argument, context, results)
            evaluator = extractor(match, argument, cursor)
            if match.positional:
                cursor += 1

            results[argument.id] = await evaluator(context, results)

        return results

    async def __invoke__(self, content, context=None, /):
        """
        Parse `content` and hand the results to the callback.

        Returns whatever the callback returns (awaited when async).
        """
        results = await self.parse(content, context)
        return await settle(self._callback(context, results))


def command(source=Unset, /, *args, **kwargs):
    """
    Create a Command or return a decorator to build it later.

    Invocation modes
    - Direct callback:
        cmd = command(func, name="x", args=[...])
    - Decorator:
        @command(args=[...], split=Split.STICKY)
        async def func(context, results): ...

    Parameters
    - source: Unset | Callable
      When Unset, a decorator is returned. Otherwise a Command is created.
    - *args, **kwargs: forwarded to Command (name, args, split, descr, colorful, fancy).

    Returns
    - Command | Callable[[Callable], Command]
    """
    @rename("command")
    def wrapper(source, /):
        if not callable(source):
            raise TypeError("@command() must be applied to a callable")
        return Command(source, *args, **kwargs)

    return wrapper(source) if source is not Unset else wrapper


async def invoke(object, content, context=None, /):
    """
    Convenience runner for commands.

    Parameters
    - object: an instance providing an async __invoke__(content, context).
    - content: the text to parse.
    - context: forwarded to probes, predicates and resolvers.

    Behavior
    - Runs object.__invoke__(content, context) and returns its result.
    - A CommandCancelled stop is logged and turns into None; every other
      exception propagates.

    Raises
    - TypeError: when 'object' does not implement __invoke__.
    """
    if not hasattr(object, "__invoke__") or not callable(object.__invoke__):
        raise TypeError("invoke() first argument must implement __invoke__ method")

    try:
        return await object.__invoke__(content, context)
    except CommandCancelled as cancelled:
        logger.info("%s was cancelled (feedback: %r)", getattr(object, "name", object), cancelled.feedback)
        return None


__all__ = (
    "Command",
    "command",
    "invoke",
)
