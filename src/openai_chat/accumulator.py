"""Buffer for raw stream bytes collected along the failure path."""

import io


class ErrorAccumulator:
    """Collects raw bytes so a diagnostic error can show what was received."""

    def __init__(self) -> None:
        self._buffer = io.BytesIO()

    def write(self, data: bytes) -> None:
        self._buffer.write(data)

    def bytes(self) -> bytes:
        return self._buffer.getvalue()

    def __len__(self) -> int:
        return self._buffer.tell()
