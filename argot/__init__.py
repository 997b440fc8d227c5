"""
argot: declarative, asynchronous argument parsing for chat-style commands.

    from argot import Argument, Match, Split, command, invoke

    @command(split=Split.STICKY, args=(
        Argument("target"),
        Argument("reason", match=Match.REST, default="no reason given"),
    ))
    async def kick(context, results):
        ...

    await invoke(kick, 'someone "being rude"', context)
"""
__title__ = 'argot'
__license__ = 'MIT'
__version__ = "0.1.0"

from collections import namedtuple

from . import arguments, commands, faults, splits
from .arguments import *
from .commands import *
from .faults import *
from .splits import *

VersionInfo = namedtuple("VersionInfo", ("major", "minor", "micro", "releaselevel"))

version_info = VersionInfo(*map(int, __version__.split(".")), "final")

__all__ = (
    "__title__",
    "__license__",
    "__version__",
    "version_info",
    *arguments.__all__,
    *commands.__all__,
    *faults.__all__,
    *splits.__all__,
)
