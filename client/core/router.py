from __future__ import annotations

import asyncio
import logging
from typing import List

from websockets.exceptions import ConnectionClosed

from shared.protocol import framing
from shared.protocol.errors import MalformedReplyError
from shared.protocol.framing import Fragment, Frame, FrameKind

from .connection import ConnectionContext

logger = logging.getLogger(__name__)


class FrameRouter:
    """Reads messages off the websocket and hands them to the reply/payload queues."""

    def __init__(self, ctx: ConnectionContext) -> None:
        self.ctx = ctx

    async def run(self) -> None:
        ctx = self.ctx
        try:
            while not ctx.closing.is_set():
                frame = await self.read_frame()
                if frame.kind is FrameKind.CLOSE:
                    logger.info("Close received from %s", ctx.endpoint)
                    break
                self.dispatch(frame)
        except asyncio.CancelledError:
            logger.debug("Frame router for %s cancelled", ctx.endpoint)
        finally:
            ctx.close_queues()

    async def read_frame(self) -> Frame:
        fragments: List[Fragment] = []
        try:
            async for fragment in self.ctx.websocket.recv_streaming():
                fragments.append(fragment)
        except ConnectionClosed as exc:
            logger.debug("Connection closed while reading: %s", exc)
            return Frame.close()
        return framing.assemble_fragments(fragments)

    def dispatch(self, frame: Frame) -> None:
        if frame.kind is FrameKind.BINARY:
            logger.debug("Payload of %s bytes received", len(frame.data))
            self.ctx.payloads.put_nowait(frame.data)
            return
        try:
            reply = framing.decode_reply(frame.data)
        except MalformedReplyError as exc:
            # Queued in place of the reply so the waiting request fails instead of timing out.
            logger.warning("Malformed reply from %s: %s", self.ctx.endpoint, exc)
            self.ctx.replies.put_nowait(exc)
            return
        logger.debug("Reply received: %s", reply.results)
        self.ctx.replies.put_nowait(reply)


__all__ = ["FrameRouter"]
