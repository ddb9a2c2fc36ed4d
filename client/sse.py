"""
Server-Sent Events frame parsing.

Lines are fed one at a time (without their line terminator); a blank line
completes a frame. Comment lines, such as keep-alive pings, are skipped.
"""

from dataclasses import dataclass
from typing import AsyncIterable, AsyncIterator

DEFAULT_EVENT = "message"


@dataclass(frozen=True)
class Frame:
    event: str
    data: str
    id: str | None = None


class FrameParser:
    """Incremental SSE parser."""

    def __init__(self) -> None:
        self._event: str | None = None
        self._data: list[str] = []
        self._id: str | None = None

    def feed(self, line: str) -> Frame | None:
        """
        Consume one line.

        Returns:
            The completed frame when ``line`` is blank and data was seen, else None
        """
        if not line:
            return self._dispatch()
        if line.startswith(":"):
            return None

        field, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]

        if field == "event":
            self._event = value
        elif field == "data":
            self._data.append(value)
        elif field == "id":
            self._id = value
        return None

    def _dispatch(self) -> Frame | None:
        frame = None
        if self._data:
            frame = Frame(
                event=self._event or DEFAULT_EVENT,
                data="\n".join(self._data),
                id=self._id,
            )
        self._event = None
        self._data = []
        return frame


async def parse_frames(lines: AsyncIterable[str]) -> AsyncIterator[Frame]:
    """Turn a stream of SSE lines into frames. A trailing partial frame is dropped."""
    parser = FrameParser()
    async for line in lines:
        frame = parser.feed(line.rstrip("\r"))
        if frame is not None:
            yield frame
