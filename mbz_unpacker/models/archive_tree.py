"""
Virtual Archive Tree

In-memory folder/file tree rebuilt from the flat entry list of a backup
container, so the rest of the pipeline never sees the container format.
"""

from typing import Dict, List, Optional


class ArchiveFile:
    """File leaf holding the decoded bytes of one archive entry"""

    def __init__(self, name: str, content: bytes, parent: Optional['ArchiveFolder'] = None, order: int = 0):
        self.name = name
        self.content = content
        self.parent = parent  # diagnostics only
        self.order = order  # insertion position across the whole tree

    @property
    def path(self) -> str:
        """Slash-separated path from the root, for error messages"""
        if self.parent is None or not self.parent.path:
            return self.name
        return f"{self.parent.path}/{self.name}"

    def read_text(self) -> str:
        return self.content.decode('utf-8')

    def __repr__(self):
        return f"ArchiveFile({self.path!r}, {len(self.content)} bytes)"


class ArchiveFolder:
    """Folder node owning its child folders and files"""

    def __init__(self, name: str = '', parent: Optional['ArchiveFolder'] = None):
        self.name = name
        self.parent = parent
        self.folders: Dict[str, 'ArchiveFolder'] = {}
        self.files: List[ArchiveFile] = []
        self._inserted = 0  # only used on the root

    @property
    def root(self) -> 'ArchiveFolder':
        folder = self
        while folder.parent is not None:
            folder = folder.parent
        return folder

    @property
    def path(self) -> str:
        if self.parent is None:
            return self.name
        if not self.parent.path:
            return self.name
        return f"{self.parent.path}/{self.name}"

    def insert(self, path: str, content: bytes) -> ArchiveFile:
        """
        Add a file at a slash-delimited path relative to this folder

        Missing intermediate folders are created. Empty and '.' segments
        are skipped, so './a/b.xml' and 'a//b.xml' both land on 'a/b.xml'.

        Args:
            path: Relative entry path
            content: Entry bytes

        Returns:
            The new file leaf
        """
        segments = [s for s in path.split('/') if s and s != '.']
        if not segments:
            raise ValueError(f"Cannot insert a file at empty path {path!r}")

        folder = self
        for segment in segments[:-1]:
            child = folder.folders.get(segment)
            if child is None:
                child = ArchiveFolder(segment, folder)
                folder.folders[segment] = child
            folder = child

        root = self.root
        root._inserted += 1

        archive_file = ArchiveFile(segments[-1], content, folder, order=root._inserted)
        folder.files.append(archive_file)
        return archive_file

    def find_folder(self, name: str) -> Optional['ArchiveFolder']:
        return self.folders.get(name)

    def find_file(self, name: str, recursive: bool = False) -> Optional[ArchiveFile]:
        """First inserted file named exactly `name`, at any depth if recursive"""
        for archive_file in self.list_files(recursive):
            if archive_file.name == name:
                return archive_file
        return None

    def list_files(self, recursive: bool = False) -> List[ArchiveFile]:
        """Files in insertion order, whatever folder they sit in"""
        if not recursive:
            return list(self.files)

        files = list(self.files)
        for folder in self.folders.values():
            files.extend(folder.list_files(recursive=True))

        return sorted(files, key=lambda archive_file: archive_file.order)

    def index_files(self) -> Dict[str, ArchiveFile]:
        """Name -> first inserted file with that name, across the subtree"""
        index: Dict[str, ArchiveFile] = {}
        for archive_file in self.list_files(recursive=True):
            index.setdefault(archive_file.name, archive_file)
        return index

    def list_folders(self) -> List['ArchiveFolder']:
        return list(self.folders.values())

    def walk(self):
        """Yield (path, content) for every file below this folder"""
        for archive_file in self.list_files(recursive=True):
            yield archive_file.path, archive_file.content

    def __repr__(self):
        return f"ArchiveFolder({self.path!r}, {len(self.folders)} folders, {len(self.files)} files)"
