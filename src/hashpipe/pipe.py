import io
from typing import Any, Callable, Optional, Protocol


class HashAccumulator(Protocol):
    def update(self, data: bytes) -> None: ...

    def digest(self) -> bytes: ...


class HashingWriter:
    """
    Writer that feeds everything accepted by ``raw`` into ``hash``.

    Only the bytes the destination reports as written are hashed, so the
    digest always matches what actually reached it.
    """

    def __init__(self, hash: HashAccumulator, raw: Any):
        self.hash = hash
        self.raw = raw
        self.closed = False

    def write(self, b) -> Optional[int]:
        # views are released before returning or raising so callers can resize b
        with memoryview(b) as view, view.cast("B") as data:
            try:
                n = self.raw.write(b)
            except BlockingIOError as e:
                self.hash.update(data[:e.characters_written])
                raise

            if n is None:
                # raw streams return None when nothing was written
                if not isinstance(self.raw, io.RawIOBase):
                    self.hash.update(data)
            else:
                self.hash.update(data[:n])
            return n

    def flush(self) -> None:
        flush = getattr(self.raw, "flush", None)
        if flush is not None:
            flush()

    def writable(self) -> bool:
        return True

    def close(self) -> None:
        # raw belongs to the caller
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


class HashingReader:
    """Reader that feeds every byte returned from ``raw`` into ``hash``."""

    def __init__(self, hash: HashAccumulator, raw: Any):
        self.hash = hash
        self.raw = raw
        self.closed = False

    def read(self, size: int = -1) -> Optional[bytes]:
        data = self.raw.read(size)
        if data:
            self.hash.update(data)
        return data

    def readinto(self, b) -> Optional[int]:
        readinto = getattr(self.raw, "readinto", None)
        with memoryview(b) as view, view.cast("B") as buffer:
            if readinto is not None:
                n = readinto(buffer)
            else:
                data = self.raw.read(len(buffer))
                n = None if data is None else len(data)
                if n:
                    buffer[:n] = data

            if n:
                self.hash.update(buffer[:n])
            return n

    def readable(self) -> bool:
        return True

    def close(self) -> None:
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


def new_writer(hash: HashAccumulator) -> Callable[[Any], HashingWriter]:
    """Bind ``hash`` to a destination: ``new_writer(h)(fp).write(...)``."""
    def bind(raw: Any) -> HashingWriter:
        return HashingWriter(hash, raw)
    return bind


def new_reader(hash: HashAccumulator) -> Callable[[Any], HashingReader]:
    """Bind ``hash`` to a source: ``new_reader(h)(fp).read(...)``."""
    def bind(raw: Any) -> HashingReader:
        return HashingReader(hash, raw)
    return bind
