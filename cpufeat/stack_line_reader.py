"""Line reader with a bounded buffer that truncates overlong lines."""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO, Iterator

DEFAULT_BUFFER_SIZE = 1024


@dataclass(frozen=True)
class LineResult:
    """One line read from a stream.

    ``eof`` is set when nothing more can be read; ``full_line`` is False when
    the line was cut to the buffer size.
    """

    line: str
    eof: bool
    full_line: bool


class StackLineReader:
    """Reads a binary stream line by line using at most ``buffer_size`` bytes."""

    def __init__(self, stream: BinaryIO, buffer_size: int = DEFAULT_BUFFER_SIZE) -> None:
        if buffer_size < 1:
            raise ValueError("buffer_size must be positive")
        self._stream = stream
        self._size = buffer_size
        self._buffer = b""
        self._exhausted = False
        self._skip_mode = False

    def _load_more(self) -> None:
        while len(self._buffer) < self._size and not self._exhausted:
            chunk = self._stream.read(self._size - len(self._buffer))
            if not chunk:
                self._exhausted = True
            else:
                self._buffer += chunk

    def _skip_to_next_line(self) -> None:
        while True:
            eol = self._buffer.find(b"\n")
            if eol >= 0:
                self._buffer = self._buffer[eol + 1 :]
                return
            self._buffer = b""
            self._load_more()
            if not self._buffer:
                return

    @staticmethod
    def _decode(data: bytes) -> str:
        return data.decode("utf-8", errors="replace")

    def next_line(self) -> LineResult:
        """Read the next line, without its newline."""
        if self._skip_mode:
            self._skip_to_next_line()
            self._skip_mode = False
        eol = self._buffer.find(b"\n")
        if eol < 0 and len(self._buffer) < self._size:
            self._load_more()
            eol = self._buffer.find(b"\n")
        if eol >= 0:
            line, self._buffer = self._buffer[:eol], self._buffer[eol + 1 :]
            return LineResult(self._decode(line), eof=False, full_line=True)
        if len(self._buffer) < self._size:
            line, self._buffer = self._buffer, b""
            return LineResult(self._decode(line), eof=True, full_line=True)
        self._skip_mode = True
        return LineResult(self._decode(self._buffer), eof=False, full_line=False)

    def __iter__(self) -> Iterator[LineResult]:
        """Yield every line result, ending with the one that reports eof."""
        while True:
            result = self.next_line()
            yield result
            if result.eof:
                return