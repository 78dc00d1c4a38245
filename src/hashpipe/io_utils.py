import hashlib
import shutil

CHUNK_SIZE = 64 * 1024

# shake_* need an explicit digest length
ALGORITHMS = sorted(
    name for name in hashlib.algorithms_guaranteed if not name.startswith("shake_"))


def new_hash(algorithm: str = "sha256"):
    if algorithm not in ALGORITHMS:
        raise ValueError(f"Unsupported hash algorithm: {algorithm}")
    return hashlib.new(algorithm)


def io_copy(r, w, chunk_size: int = CHUNK_SIZE) -> None:
    shutil.copyfileobj(r, w, chunk_size)


def drain(r, chunk_size: int = CHUNK_SIZE) -> int:
    """Read ``r`` until end-of-stream and return the number of bytes seen."""
    total = 0
    for chunk in iter(lambda: r.read(chunk_size), b""):
        total += len(chunk)
    return total


class HashSink:
    def __init__(self, algorithm: str = "sha256"):
        self.hasher = new_hash(algorithm)
        self.write = self.hasher.update

    @property
    def digest(self) -> bytes:
        return self.hasher.digest()

    @property
    def hexdigest(self) -> str:
        return self.hasher.hexdigest()
