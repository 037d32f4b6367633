"""Line-oriented input for the interactive session."""

from __future__ import annotations

import sys
from typing import TextIO


class LineReader:
    """Read lines from a text stream (stdin by default).

    Raises ``EOFError`` once the stream is exhausted. The reader can also be
    handed to ``rich.prompt`` as its ``stream``; ``readline`` keeps the same
    end-of-input behaviour there.
    """

    def __init__(self, stream: TextIO | None = None):
        self._stream = stream

    def readline(self) -> str:
        stream = self._stream if self._stream is not None else sys.stdin
        line = stream.readline()
        if not line:
            raise EOFError
        return line

    def read(self) -> str:
        return self.readline().strip()
