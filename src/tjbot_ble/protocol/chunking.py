"""Null-terminated framing for BLE write and notify streams.

Both directions use the same framing: a message is sent as any number of
data fragments followed by a single ``0x00`` byte. There is no length
prefix, so the receiver accumulates bytes until it sees the terminator.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

TERMINATOR = b"\x00"

_LOGGER = logging.getLogger(__name__)


class ChunkSequence:
    """Restartable sequence of outbound chunks for one message.

    Iterating yields the data slices in order and then one terminator chunk.
    Every new iteration starts again from the first slice.
    """

    def __init__(self, data: bytes, chunk_size: int | None = None):
        """Initialize chunk sequence.

        Args:
            data: Complete encoded message
            chunk_size: Negotiated maximum chunk size (0/None = no fragmentation)

        Raises:
            ValueError: If chunk_size is negative
        """
        if chunk_size is not None and chunk_size < 0:
            raise ValueError(f"Chunk size must be >= 0, got {chunk_size}")
        self.data = bytes(data)
        self.chunk_size = chunk_size or 0

    def __iter__(self) -> Iterator[bytes]:
        if self.chunk_size == 0:
            yield self.data
        else:
            for start in range(0, len(self.data), self.chunk_size):
                yield self.data[start:start + self.chunk_size]
        yield TERMINATOR

    def __len__(self) -> int:
        """Total number of chunks, terminator included."""
        if self.chunk_size == 0:
            return 2
        return -(-len(self.data) // self.chunk_size) + 1


def chunk_data(data: bytes, chunk_size: int | None = None) -> ChunkSequence:
    """Split a message into chunks of at most ``chunk_size`` bytes plus terminator."""
    return ChunkSequence(data, chunk_size)


@dataclass
class InboundBuffer:
    """Bytes received on one write channel that do not yet form a frame."""

    data: bytearray = field(default_factory=bytearray)

    def append(self, fragment: bytes) -> None:
        self.data.extend(fragment)

    def take_frame(self) -> bytes | None:
        """Remove and return the bytes before the first terminator, if any."""
        index = self.data.find(TERMINATOR)
        if index < 0:
            return None
        frame = bytes(self.data[:index])
        del self.data[:index + 1]
        return frame

    def clear(self) -> None:
        self.data.clear()

    def __len__(self) -> int:
        return len(self.data)


class FrameAssembler:
    """Reassembles null-terminated frames from arbitrarily split fragments.

    The buffer is owned by the caller's channel and passed in, so two
    channels never share partial data.
    """

    def __init__(self, buffer: InboundBuffer | None = None, name: str = "frames"):
        """Initialize frame assembler.

        Args:
            buffer: Inbound buffer for this channel (a fresh one if omitted)
            name: Channel name used in log messages
        """
        self.buffer = buffer if buffer is not None else InboundBuffer()
        self.name = name

    def feed(self, fragment: bytes) -> Iterator[bytes]:
        """Append a fragment and return an iterator over completed frames.

        The fragment is buffered immediately. Frames are extracted as the
        iterator is consumed; frames left unconsumed stay buffered and are
        returned by the next call.

        Args:
            fragment: Raw bytes exactly as received

        Returns:
            Iterator of complete frames (terminator excluded), possibly empty
        """
        self.buffer.append(fragment)
        _LOGGER.debug(
            "%s: received %d bytes (%d buffered)",
            self.name,
            len(fragment),
            len(self.buffer),
        )
        return self._drain()

    def _drain(self) -> Iterator[bytes]:
        while True:
            frame = self.buffer.take_frame()
            if frame is None:
                return
            _LOGGER.debug("%s: complete frame of %d bytes", self.name, len(frame))
            yield frame

    def reset(self) -> None:
        """Discard any partially received frame."""
        if len(self.buffer):
            _LOGGER.debug("%s: discarding %d buffered bytes", self.name, len(self.buffer))
        self.buffer.clear()

    @property
    def pending_bytes(self) -> int:
        """Number of buffered bytes not yet part of a complete frame."""
        return len(self.buffer)
