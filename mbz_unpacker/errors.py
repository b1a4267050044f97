"""
Conversion Errors

Every error aborts the whole conversion; no partial archive is produced.
"""

from typing import Optional


class MbzError(Exception):
    """Base class for backup conversion failures"""


class UnsupportedFormatError(MbzError, ValueError):
    """Input bytes are neither a ZIP nor a gzip-compressed TAR"""

    def __init__(self, message: str, signature: bytes = b''):
        super().__init__(message)
        self.signature = signature


class MalformedDescriptorError(MbzError):
    """A required XML descriptor, element or attribute is missing or invalid"""

    def __init__(self, message: str, path: Optional[str] = None):
        if path:
            message = f"{message} ({path})"
        super().__init__(message)
        self.path = path


class UnresolvedContentError(MbzError):
    """files.xml lists a content hash with no matching blob"""

    def __init__(self, contenthash: str, file_id: int):
        super().__init__(
            f"No blob found for content hash {contenthash} (file id {file_id})"
        )
        self.contenthash = contenthash
        self.file_id = file_id


class MissingActivityError(MbzError):
    """A section references an activity that is not in the backup"""

    def __init__(self, activity_id: int, section_id: int):
        super().__init__(
            f"Section {section_id} references unknown activity {activity_id}"
        )
        self.activity_id = activity_id
        self.section_id = section_id
