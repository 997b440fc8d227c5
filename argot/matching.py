"""
Argot matching: find each argument's word(s) inside the tokenized content.

Pieces
- Marker / markers(args)
  • Every PREFIX and FLAG argument declares marker words ("name:", "--verbose").
    markers() collects them, lowercased, from a command's argument list
    (alternative groups are flattened, cancellation probes ignored).
- unmarked(words, markers)
  • Positional arguments must not land on marker words: a word starting with a
    prefix marker, or equal to a flag marker, is removed from the pool used by
    WORD, REST, SEPARATE and TEXT.
- Extractor
  • Built once per parse over the content, its words and the positional pool.
    extractor(match, argument, cursor) returns an async evaluator
    (context, results) -> value, one handler per Match member.

Windows
- REST, SEPARATE, TEXT and CONTENT take words[index:index + limit] (unbounded
  when the argument has no limit).
- Words produced by plain/quoted/sticky splitting keep their trailing
  whitespace, so REST and TEXT join them with "" and get the text back with
  runs of whitespace collapsed to one character. Words from the `split`
  strategy are joined with " ".
"""
import logging
import re
from collections import namedtuple

from .arguments import Argument, Match
from .splits import Split

logger = logging.getLogger(__name__)

Marker = namedtuple("Marker", ("value", "flag"))
Marker.__doc__ = "Lowercased prefix of a PREFIX (flag=False) or FLAG (flag=True) argument."

_quoted = re.compile(r'"[\s\S]+"')


def _cut(word, prefix, /):
    """
    Case-insensitively strip `prefix` from the start of `word`.

    Lowercasing may change the length of a character ("İ" becomes "i" plus a
    combining dot), so the cut is located on the lowercased text one original
    character at a time. Returns None when `word` does not start with `prefix`.
    """
    target = prefix.lower()
    folded = ""
    for end, character in enumerate(word, 1):
        folded += character.lower()
        if len(folded) >= len(target):
            return word[end:] if folded == target else None
    return None


def markers(args, /):
    """
    Collect the markers declared by a command's argument slots.

    Only arguments whose match is declared as PREFIX or FLAG contribute; a
    dynamic match is unknown until parse time and contributes nothing.
    """
    collected = []
    for slot in args:
        for argument in slot if isinstance(slot, tuple | list) else (slot,):
            if isinstance(argument, Argument) and not argument.dynamic and argument.match.marked:
                flag = argument.match is Match.FLAG
                collected.extend(Marker(prefix.lower(), flag) for prefix in argument.prefix)
    return tuple(collected)


def unmarked(words, markers, /):
    """
    Return the words available to positional arguments.
    """
    def marked(word):
        word = word.strip().lower()
        return any(word == marker.value if marker.flag else word.startswith(marker.value) for marker in markers)

    return [word for word in words if not marked(word)]


class Extractor:
    """
    Per-parse dispatcher from Match to extraction strategy.

    State
    - source: the raw content (CONTENT windows split it again by spaces).
    - words: the full token pool (PREFIX and FLAG scan it).
    - positionals: the pool without marker words (WORD, REST, SEPARATE, TEXT).
    - joiner: " " for the `split` strategy, "" otherwise.
    - quoted: whether one layer of double quotes is stripped from words.
    """

    def __init__(self, content, words, positionals, split, /):
        self.source = content
        self.words = words
        self.positionals = positionals
        self.joiner = " " if split is Split.SPLIT else ""
        self.quoted = words.quoted

    def __call__(self, match, argument, cursor, /):
        logger.debug("extracting %r as %s (cursor %d)", argument.id, match, cursor)
        match match:
            case Match.WORD:
                return self.word(argument, cursor)
            case Match.REST:
                return self.rest(argument, cursor)
            case Match.SEPARATE:
                return self.separate(argument, cursor)
            case Match.PREFIX:
                return self.prefix(argument)
            case Match.FLAG:
                return self.flag(argument)
            case Match.TEXT:
                return self.text(argument)
            case Match.CONTENT:
                return self.content(argument)
            case Match.NONE:
                return self.none(argument)
        raise ValueError(f"unsupported match {match!r}")

    def normalize(self, word, /):
        """
        Trim a word and, for quote-aware pools, strip one layer of quotes.
        """
        word = word.strip()
        if self.quoted and _quoted.fullmatch(word):
            return word[1:-1]
        return word

    @staticmethod
    def window(pool, index, limit, /):
        return pool[index:] if limit is None else pool[index:index + limit]

    @staticmethod
    def resolve(argument, word, /):
        async def evaluator(context, results):
            return await argument.process(word, context, results)
        return evaluator

    def scan(self, argument, /):
        """
        Walk the words from last to first; for each word try the prefixes in
        declaration order. Returns what follows the first matching prefix, or
        None when no word carries one.
        """
        for word in reversed(self.words):
            word = word.strip()
            for prefix in argument.prefix:
                if (remainder := _cut(word, prefix)) is not None:
                    return remainder
        return None

    def word(self, argument, cursor, /):
        index = argument.index if argument.index is not None else cursor
        try:
            word = self.positionals[index]
        except IndexError:
            word = ""
        return self.resolve(argument, self.normalize(word))

    def rest(self, argument, cursor, /):
        index = argument.index if argument.index is not None else cursor
        words = self.window(self.positionals, index, argument.limit)
        return self.resolve(argument, self.joiner.join(words))

    def separate(self, argument, cursor, /):
        index = argument.index if argument.index is not None else cursor
        words = [self.normalize(word) for word in self.window(self.positionals, index, argument.limit)]

        if not words:
            return self.resolve(argument, "")

        async def evaluator(context, results):
            # Published before resolving so each resolver sees the values before it.
            values = results[argument.id] = []
            for word in words:
                values.append(await argument.process(word, context, results))
            return values

        return evaluator

    def prefix(self, argument, /):
        remainder = self.scan(argument)
        return self.resolve(argument, "" if remainder is None else self.normalize(remainder))

    def flag(self, argument, /):
        prefixes = {prefix.lower() for prefix in argument.prefix}
        found = any(word.strip().lower() in prefixes for word in self.words)

        async def evaluator(context, results):
            inverse = not await argument.default(context, results)
            return found if inverse else not found

        return evaluator

    def text(self, argument, /):
        index = argument.index if argument.index is not None else 0
        words = self.window(self.positionals, index, argument.limit)
        return self.resolve(argument, self.joiner.join(words))

    def content(self, argument, /):
        index = argument.index if argument.index is not None else 0
        words = self.window(self.source.split(" "), index, argument.limit)
        return self.resolve(argument, " ".join(words))

    def none(self, argument, /):
        return self.resolve(argument, "")


__all__ = (
    "Marker",
    "markers",
    "unmarked",
    "Extractor",
)
