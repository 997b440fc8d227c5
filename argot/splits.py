"""
Argot tokenizer: turn command content into words.

Strategies (Split)
- plain  : words separated by whitespace; each word keeps at most one trailing
           whitespace character, extra whitespace between words is dropped.
- split  : words separated by single spaces (empty words are kept). Fragile
           with inconsistent whitespace, kept for compatibility.
- quoted : like plain, but "double quoted text" is one word, interior
           whitespace included. An unmatched quote stays glued to the word it opens.
- sticky : like quoted, but text glued before the opening quote stays in the
           same word, so key="a b" is one word rather than two.
- none   : the entire content is one word.

Besides the named strategies a command may use
- a callable (content, context) -> Sequence[str]; a truthy `quoted` attribute
  on the returned sequence marks the words as quote-aware,
- a compiled regex, splitting with pattern.split(content),
- any other non-empty string, used as a literal separator.

It is recommended to use either plain or sticky for new commands.

Example
    >>> tokenize('say "hello world"', split=Split.QUOTED)
    ['say ', '"hello world"']
"""
import logging
import re
from enum import StrEnum

logger = logging.getLogger(__name__)


class Split(StrEnum):
    PLAIN = "plain"
    SPLIT = "split"
    QUOTED = "quoted"
    STICKY = "sticky"
    NONE = "none"


_patterns = {
    Split.PLAIN: re.compile(r'\S+\s?'),
    Split.QUOTED: re.compile(r'"[\s\S]*?"\s?|\S+\s?|"'),
    Split.STICKY: re.compile(r'[^\s"]*?"[\s\S]*?"\s?|\S+\s?|"'),
}


class Words(list):
    """
    Token pool produced by tokenize().

    A plain list of strings plus `quoted`, telling the extractors whether one
    layer of surrounding double quotes should be stripped from a word.
    """

    def __init__(self, iterable=(), /, *, quoted=False):
        super().__init__(iterable)
        self.quoted = bool(quoted)

    def __repr__(self):
        return f"Words({super().__repr__()}, quoted={self.quoted})"


def sanitize(split, /):
    """
    Validate a split value and normalize named strategies into Split members.

    Returns
    - Split member for a known strategy name (case-insensitive).
    - The object unchanged for callables, compiled regexes and separators.

    Raises
    - TypeError: when split is not a string, a regex, or a callable.
    - ValueError: when split is an empty separator.
    """
    if isinstance(split, Split) or callable(split) or isinstance(split, re.Pattern):
        return split
    if not isinstance(split, str):
        raise TypeError("split must be a strategy name, a separator, a regex, or a callable")
    if not split:
        raise ValueError("split separator cannot be empty")
    try:
        return Split(split.lower())
    except ValueError:
        return split


def tokenize(content, context=None, split=Split.PLAIN, /):
    """
    Split `content` into a Words pool according to `split`.

    The context is only forwarded to a custom split function.
    """
    split = sanitize(split)
    match split:
        case Split.PLAIN | Split.QUOTED | Split.STICKY:
            words = Words(_patterns[split].findall(content), quoted=split is not Split.PLAIN)
        case Split.SPLIT:
            words = Words(content.split(" "))
        case Split.NONE:
            words = Words([content])
        case re.Pattern():
            words = Words(split.split(content))
        case str():
            words = Words(content.split(split))
        case _:
            result = split(content, context)
            words = Words(result or (), quoted=getattr(result, "quoted", False))

    logger.debug("tokenized %r with %s into %d word(s)", content, getattr(split, "pattern", split), len(words))
    return words


__all__ = (
    "Split",
    "Words",
    "tokenize",
)
