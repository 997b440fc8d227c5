import asyncio

from rich.pretty import pprint

from argot import *


class Channel:
    async def send(self, payload):
        pprint(payload)


@command(split=Split.STICKY, args=(
    Argument("target"),
    lambda context, results: "who should be kicked?" if not results["target"] else None,
    Argument("reason", match=Match.PREFIX, prefix="reason:", default="no reason given"),
    Argument("silent", match=Match.FLAG, prefix=("--silent", "-s")),
))
async def kick(context, results):
    """Remove a member from the channel."""
    pprint(results)


if __name__ == '__main__':
    pprint(kick)
    asyncio.run(invoke(kick, 'someone reason:"being rude" --silent', Channel()))
    asyncio.run(invoke(kick, "", Channel()))
