"""
Activity Readers

Turn a module descriptor (assign.xml, label.xml, ...) into an Activity.
Readers are picked by ActivityType; types without a dedicated reader use
the default one.
"""

import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from ..models.course import Activity, ActivityType, Text
from .xml_utils import get_text, require_text


class ActivityReader:
    """Read the fields every Moodle module shares"""

    def read(
        self,
        activity_id: int,
        activity_type: ActivityType,
        node: ET.Element,
        file_ids: Tuple[int, ...],
        path: str
    ) -> Activity:
        """
        Build an Activity from its module element

        Args:
            activity_id: Id taken from the activity folder name
            activity_type: Type taken from the activity folder name
            node: The module element (<assign>, <label>, ...)
            file_ids: Ids collected from inforef.xml
            path: Descriptor path, for error messages

        Returns:
            Activity record
        """
        return Activity(
            id=activity_id,
            name=require_text(node, 'name', path),
            activity_type=activity_type,
            description=self.read_text(node, 'intro'),
            file_ids=file_ids,
            **self.read_extra(node)
        )

    def read_text(self, node: ET.Element, tag: str) -> Optional[Text]:
        """Read `tag` and its `{tag}format` companion as a Text"""
        content = get_text(node, tag)
        if not content:
            return None

        is_plain = not get_text(node, f'{tag}format')
        return Text(is_plain=is_plain, content=content)

    def read_extra(self, node: ET.Element) -> Dict[str, Any]:
        """Type-specific fields; none by default"""
        return {}


class AssignReader(ActivityReader):
    """Assignments also carry a due date"""

    def read_extra(self, node: ET.Element) -> Dict[str, Any]:
        return {'due_date': self._parse_timestamp(get_text(node, 'duedate'))}

    def _parse_timestamp(self, value: str) -> Optional[datetime]:
        try:
            seconds = int(value)
        except ValueError:
            return None
        if seconds <= 0:
            return None
        return datetime.fromtimestamp(seconds, tz=timezone.utc)


DEFAULT_READER = ActivityReader()

ACTIVITY_READERS: Dict[ActivityType, ActivityReader] = {
    ActivityType.ASSIGN: AssignReader(),
}


def get_activity_reader(activity_type: ActivityType) -> ActivityReader:
    return ACTIVITY_READERS.get(activity_type, DEFAULT_READER)
