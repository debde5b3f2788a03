from typing import Protocol


class BlobStore(Protocol):
    """
    Minimal interface for persisting encoded streams. A BlobStore keeps
    opaque byte blobs under caller-chosen names; it never looks inside a
    blob, and one encode call maps to exactly one blob.

    The interface does not prescribe durability or isolation.
    Implementations may provide stronger guarantees, but callers must not
    rely on anything beyond the behavior described here.
    """

    def write(self, name: str, data: bytes) -> None:
        """
        Store `data` under `name`. If the name already exists, its blob
        is replaced as a whole: readers see either the old or the new
        blob, never a mix of both.
        """

    def read(self, name: str) -> bytes | None:
        """
        Return the blob stored under `name`, or None if there is none.

        Implementations must not raise exceptions for missing names.
        """

    def delete(self, name: str) -> None:
        """
        Remove the blob stored under `name`. If there is none, the
        method must succeed silently.
        """

    def names(self) -> list[str]:
        """Return the names of all stored blobs, sorted."""

    def close(self) -> None:
        """
        Release all underlying resources (file handles, environments).
        After calling close(), the instance must not be used again.
        """
