"""
Course Models

Typed records reconstructed from a Moodle backup. They know nothing about
the container the backup came in or the archive they are written to.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple


class ActivityType(Enum):
    """Moodle module types the converter distinguishes"""
    ASSIGN = 'assign'
    FORUM = 'forum'
    LABEL = 'label'
    RESOURCE = 'resource'
    QUIZ = 'quiz'
    UNKNOWN = 'unknown'

    @classmethod
    def from_name(cls, name: str) -> 'ActivityType':
        """Map a module name ('assign', 'label', ...) to its type"""
        for activity_type in cls:
            if activity_type.value == name and activity_type is not cls.UNKNOWN:
                return activity_type
        return cls.UNKNOWN


@dataclass(frozen=True)
class Text:
    """Rich text field: plain text or HTML markup"""
    is_plain: bool
    content: str

    @property
    def extension(self) -> str:
        return 'txt' if self.is_plain else 'html'


@dataclass(frozen=True)
class Activity:
    """One course module (assignment, label, resource, ...)"""
    id: int
    name: str
    activity_type: ActivityType
    description: Optional[Text] = None
    file_ids: Tuple[int, ...] = ()  # may hold ids of files missing from the backup
    due_date: Optional[datetime] = None  # assign only


@dataclass(frozen=True)
class MoodleFile:
    """File body resolved from the content-addressed store"""
    id: int
    name: str
    content: bytes = field(repr=False)


@dataclass(frozen=True)
class Section:
    """Course section listing its activities in display order"""
    id: int
    number: int
    name: str
    activity_ids: Tuple[int, ...] = ()


@dataclass(frozen=True)
class Course:
    """Whole backup: id-keyed activities, files and sections"""
    activities: Dict[int, Activity] = field(default_factory=dict)
    files: Dict[int, MoodleFile] = field(default_factory=dict)
    sections: Dict[int, Section] = field(default_factory=dict)

    def resolved_files(self, activity: Activity) -> List[MoodleFile]:
        """Files of an activity in file-id order, skipping unknown ids"""
        return [self.files[file_id] for file_id in activity.file_ids if file_id in self.files]

    def prune_dangling_files(self) -> 'Course':
        """
        Return a copy whose activities only reference existing files

        Backups routinely reference files that were left out of the export,
        so dangling ids are dropped without complaint.
        """
        activities = {
            activity_id: replace(
                activity,
                file_ids=tuple(f for f in activity.file_ids if f in self.files)
            )
            for activity_id, activity in self.activities.items()
        }
        return replace(self, activities=activities)

    def dangling_file_count(self) -> int:
        return sum(
            1
            for activity in self.activities.values()
            for file_id in activity.file_ids
            if file_id not in self.files
        )
