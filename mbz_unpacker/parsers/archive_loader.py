"""
Backup Archive Loader

Sniffs the container format of a Moodle backup and unpacks every entry
into an in-memory archive tree. Moodle writes .mbz files either as ZIP or
as gzip-compressed TAR, and both are accepted.
"""

import gzip
import io
import tarfile
import zipfile
import zlib

from ..errors import UnsupportedFormatError
from ..models.archive_tree import ArchiveFolder

# Archive signatures
SIG_ZIP = b"PK\x03\x04"
SIG_ZIP_EMPTY = b"PK\x05\x06"
SIG_GZIP = b"\x1f\x8b"


class ArchiveLoader:
    """Load .mbz bytes into an ArchiveFolder tree"""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    @staticmethod
    def detect(data: bytes) -> str:
        """
        Detect container type from binary signature

        Returns:
            'zip' or 'gzip'

        Raises:
            UnsupportedFormatError: for any other signature
        """
        if data.startswith(SIG_ZIP) or data.startswith(SIG_ZIP_EMPTY):
            return 'zip'

        if data.startswith(SIG_GZIP):
            return 'gzip'

        raise UnsupportedFormatError(
            f"Unrecognized archive signature: {data[:4]!r}",
            signature=data[:4]
        )

    def load(self, data: bytes) -> ArchiveFolder:
        """
        Unpack a backup archive

        Args:
            data: Raw .mbz bytes

        Returns:
            Root folder of the unpacked tree
        """
        archive_format = self.detect(data)

        if self.verbose:
            print(f" Detected {archive_format} container ({len(data):,} bytes)")

        root = ArchiveFolder()

        if archive_format == 'zip':
            count = self._load_zip(data, root)
        else:
            count = self._load_tar_gz(data, root)

        if self.verbose:
            print(f"    Unpacked {count} entries")

        return root

    def _load_zip(self, data: bytes, root: ArchiveFolder) -> int:
        count = 0
        try:
            with zipfile.ZipFile(io.BytesIO(data), 'r') as zip_ref:
                for info in zip_ref.infolist():
                    if info.is_dir():
                        continue
                    root.insert(info.filename, zip_ref.read(info))
                    count += 1
        except (zipfile.BadZipFile, zlib.error, EOFError, NotImplementedError) as e:
            raise UnsupportedFormatError(f"Corrupt ZIP archive: {e}", SIG_ZIP) from e

        return count

    def _load_tar_gz(self, data: bytes, root: ArchiveFolder) -> int:
        try:
            tar_data = gzip.decompress(data)
        except (OSError, EOFError, zlib.error) as e:
            raise UnsupportedFormatError(f"Corrupt gzip stream: {e}", SIG_GZIP) from e

        count = 0
        try:
            with tarfile.open(fileobj=io.BytesIO(tar_data), mode='r:') as tf:
                for member in tf.getmembers():
                    if not member.isfile():
                        continue
                    fobj = tf.extractfile(member)
                    root.insert(member.name, fobj.read())
                    count += 1
        except tarfile.TarError as e:
            raise UnsupportedFormatError(f"Corrupt TAR archive: {e}", SIG_GZIP) from e

        return count
