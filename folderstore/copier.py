"""Chunked copy between open file handles with progress callbacks."""

from typing import BinaryIO, Callable, Optional

from common.constants import COPY_BLOCK_SIZE
from folderstore.exceptions import ShortReadError

# (total_size, read_so_far, read_since_last)
CopyCallback = Callable[[int, int, int], None]


def copy_file_contents(
    size: int,
    src: BinaryIO,
    dst: BinaryIO,
    callback: Optional[CopyCallback] = None,
    block_size: int = COPY_BLOCK_SIZE,
) -> None:
    """
    Copy exactly `size` bytes from src to dst in blocks.

    The callback is invoked after every block written. A source longer
    than `size` is only read up to `size`.

    Args:
        size: Number of bytes to copy
        src: Source handle opened for binary reading
        dst: Destination handle opened for binary writing
        callback: Optional progress callback
        block_size: Maximum bytes per block

    Raises:
        ShortReadError: If src ends before `size` bytes were read
        OSError: If a read or write fails
    """
    bytes_left = size
    while bytes_left > 0:
        next_block = min(block_size, bytes_left)
        data = src.read(next_block)
        if not data:
            raise ShortReadError(
                f"unexpected end of data after {size - bytes_left} of {size} bytes"
            )
        dst.write(data)
        bytes_left -= len(data)
        if callback is not None:
            callback(size, size - bytes_left, len(data))
