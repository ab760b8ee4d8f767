"""Local file byte sources."""

import io
import os
from pathlib import Path
from typing import BinaryIO, Optional, Union


class LocalByteSource:
    """Seekable byte source over a local path or an already-open binary file."""

    def __init__(self, source: Union[Path, str, BinaryIO]):
        self._file = None
        self._should_close_file = False
        self._size: Optional[int] = None

        if hasattr(source, 'read'):
            # BinaryIO object, owned by the caller
            self._file = source
            if not source.seekable():
                raise IOError("Source is not seekable")
        else:
            # Path or str
            self._file = open(source, 'rb')
            self._should_close_file = True

    @property
    def size(self) -> int:
        """Return the total size of the source in bytes."""
        if self._size is None:
            try:
                self._size = os.fstat(self._file.fileno()).st_size
            except (io.UnsupportedOperation, OSError, AttributeError):
                # In-memory objects like BytesIO have no file descriptor
                current_pos = self._file.tell()
                self._size = self._file.seek(0, io.SEEK_END)
                self._file.seek(current_pos)
        return self._size

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        return self._file.seek(offset, whence)

    def readinto(self, buffer) -> int:
        """Fill `buffer` from the current position; 0 means end of file."""
        if self._file is None:
            raise ValueError("I/O operation on closed source")
        readinto = getattr(self._file, 'readinto', None)
        if readinto is not None:
            return readinto(buffer) or 0
        data = self._file.read(len(buffer))
        buffer[:len(data)] = data
        return len(data)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        """Close the file if we opened it."""
        if self._should_close_file and self._file is not None:
            self._file.close()
        self._file = None


def open_local_source(source: Union[Path, str, BinaryIO]) -> LocalByteSource:
    """Create a local byte source."""
    return LocalByteSource(source)
