"""
Browsable ZIP Generator

Writes a Course as a ZIP with one folder per section and readable,
numbered names for every activity.
"""

import io
import zipfile
from typing import Dict, Optional

from ..errors import MissingActivityError
from ..models.course import Activity, ActivityType, Course, Section, Text
from ..utils.filename_cleaner import get_extension, strip_urls

TYPE_LABELS = {
    ActivityType.ASSIGN: 'Tarea',
    ActivityType.LABEL: 'Texto',
}


class ZipGenerator:
    """Generate a browsable ZIP archive from a Course"""

    def __init__(self, verbose: bool = False, compression: int = zipfile.ZIP_DEFLATED):
        self.verbose = verbose
        self.compression = compression

    def generate(self, course: Course) -> bytes:
        """
        Generate the output archive

        The whole layout is computed before anything is written, so an
        unresolved activity leaves no half-built archive behind.

        Args:
            course: Parsed and normalized course

        Returns:
            ZIP archive bytes
        """
        # path -> content; None marks a directory entry
        entries: Dict[str, Optional[bytes]] = {}

        for position, section in enumerate(course.sections.values(), start=1):
            self._add_section(position, section, course, entries)

        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, 'w', compression=self.compression) as zip_ref:
            for path, content in entries.items():
                if content is None:
                    zip_ref.writestr(path + '/', b'')
                else:
                    zip_ref.writestr(path, content)

        if self.verbose:
            file_count = sum(1 for content in entries.values() if content is not None)
            print(f"    Wrote {file_count} files in {len(course.sections)} section folders")

        return buffer.getvalue()

    def _add_section(self, position: int, section: Section, course: Course, entries: Dict):
        folder = strip_urls(f"{position}_{section.name}", keep_extension=False)
        entries[folder] = None

        for index, activity_id in enumerate(section.activity_ids):
            activity = course.activities.get(activity_id)
            if activity is None:
                raise MissingActivityError(activity_id, section.id)
            self._add_activity(index, activity, folder, course, entries)

    def _add_activity(self, index: int, activity: Activity, folder: str, course: Course, entries: Dict):
        """Place an activity's files according to how many it has"""
        activity_name = self.get_activity_name(index, activity)
        files = course.resolved_files(activity)

        if not files:
            if activity.description:
                self._add_text(activity_name, activity.description, folder, entries)
            else:
                self._add_file(f"{activity_name}.txt", b'', folder, entries)

        elif len(files) == 1:
            extension = get_extension(files[0].name)
            filename = f"{activity_name}.{extension}" if extension else activity_name
            self._add_file(filename, files[0].content, folder, entries)

        else:
            subfolder = f"{folder}/{strip_urls(activity_name, keep_extension=False)}"
            entries[subfolder] = None

            for position, moodle_file in enumerate(files, start=1):
                self._add_file(f"{position}_{moodle_file.name}", moodle_file.content, subfolder, entries)

            if activity.description:
                self._add_text(activity.name, activity.description, subfolder, entries)

    def get_activity_name(self, index: int, activity: Activity) -> str:
        """'{index}_{label}_{name}' with empty parts left out"""
        label = TYPE_LABELS.get(activity.activity_type, '')
        parts = [str(index), label, activity.name]
        return '_'.join(part for part in parts if part)

    def _add_text(self, name: str, text: Text, folder: str, entries: Dict):
        self._add_file(f"{name}.{text.extension}", text.content.encode('utf-8'), folder, entries)

    def _add_file(self, filename: str, content: bytes, folder: str, entries: Dict):
        entries[f"{folder}/{strip_urls(filename)}"] = content
