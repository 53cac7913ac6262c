"""Seekable byte stream over a file's chunk rows."""

import io
import logging
from typing import Final, final, override

from quickfile.apps.uploads.models import CHUNK_SIZE, Chunk

logger = logging.getLogger(__name__)

_EMPTY: Final = memoryview(b'')


@final
class ChunkReader(io.RawIOBase):
    """Random-access reader reconstructing a file from its chunks.

    Each reader owns its cursor: the file id, the total length (read
    once when the reader is opened), the current offset and the unread
    tail of the most recently fetched chunk. At most one chunk is held
    in memory, whatever the size of the file.

    Since every chunk except the last is exactly ``chunk_size`` bytes,
    the chunk covering any offset is ``offset // chunk_size``.

    Queries run on the calling thread's database connection, so a
    reader should be used from one thread at a time.
    """

    def __init__(
        self,
        file_id: int,
        length: int,
        chunk_size: int = CHUNK_SIZE,
    ) -> None:
        """Initialize ChunkReader.

        Args:
            file_id: ID of the file to read.
            length: Total file length in bytes.
            chunk_size: Size of every non-final chunk.
        """
        super().__init__()
        self.file_id = file_id
        self.length = length
        self.chunk_size = chunk_size
        self.offset = 0
        self._buffer = _EMPTY

    @override
    def readable(self) -> bool:
        return True

    @override
    def seekable(self) -> bool:
        return True

    @override
    def tell(self) -> int:
        self._ensure_open()
        return self.offset

    @override
    def readinto(self, buffer: bytearray | memoryview) -> int:  # type: ignore[override]
        """Copy bytes from the current chunk into ``buffer``.

        Serves at most the rest of the current chunk, so a read may
        return fewer bytes than requested. ``read()``/``readall()`` loop
        until end of stream.

        Args:
            buffer: Writable buffer to fill.

        Returns:
            Number of bytes copied; 0 at end of stream.
        """
        self._ensure_open()
        if not self._buffer and not self._load_chunk():
            return 0

        count = min(len(buffer), len(self._buffer))
        buffer[:count] = self._buffer[:count]
        self._buffer = self._buffer[count:]
        self.offset += count
        return count

    @override
    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        """Move the cursor.

        Args:
            offset: Position delta.
            whence: io.SEEK_SET, io.SEEK_CUR or io.SEEK_END.

        Returns:
            New absolute offset.

        Raises:
            ValueError: If whence is unknown or the target is negative.
        """
        self._ensure_open()
        if whence == io.SEEK_SET:
            target = offset
        elif whence == io.SEEK_CUR:
            target = self.offset + offset
        elif whence == io.SEEK_END:
            target = self.length + offset
        else:
            raise ValueError(f'Invalid whence ({whence})')

        if target < 0:
            raise ValueError(f'Negative seek position {target}')

        # Buffered bytes belong to the old position
        self._buffer = _EMPTY
        self.offset = target
        logger.debug('Reader for file %d seeked to %d', self.file_id, target)
        return target

    @override
    def close(self) -> None:
        """Release the buffered chunk and close the reader."""
        self._buffer = _EMPTY
        super().close()

    def _load_chunk(self) -> bool:
        """Fetch the chunk covering the current offset into the buffer.

        Returns:
            False at end of stream, True otherwise.
        """
        if self.offset >= self.length:
            return False

        index, skip = divmod(self.offset, self.chunk_size)
        data = Chunk.objects.filter(
            file_id=self.file_id,
            position=index,
        ).values_list('data', flat=True).first()
        if data is None:
            logger.warning(
                'Chunk %d missing for file %d (length %d)',
                index,
                self.file_id,
                self.length,
            )
            return False

        # Drop the part before the offset (reads right after a seek)
        self._buffer = memoryview(bytes(data))[skip:]
        return bool(self._buffer)

    def _ensure_open(self) -> None:
        if self.closed:
            raise ValueError('I/O operation on closed reader')
