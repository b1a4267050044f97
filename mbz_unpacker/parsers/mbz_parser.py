"""
Moodle Backup Parser

Reads activities, files and sections out of an unpacked .mbz tree and
assembles them into a Course.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Tuple

from ..errors import MalformedDescriptorError, UnresolvedContentError
from ..models.archive_tree import ArchiveFile, ArchiveFolder
from ..models.course import Activity, ActivityType, Course, MoodleFile, Section
from .activity_readers import get_activity_reader
from .xml_utils import find_element, get_text, parse_xml, require_int, require_text


class MbzParser:
    """Parse an unpacked Moodle backup into a Course"""

    def __init__(self, verbose: bool = False, max_workers: int = 3):
        self.verbose = verbose
        self.max_workers = max_workers
        self.pruned_file_refs = 0

    def parse(self, root: ArchiveFolder) -> Course:
        """
        Parse the backup tree

        The three readers share nothing but the (read-only) tree, so they
        run side by side and are joined before dangling file references
        are pruned.

        Args:
            root: Root folder returned by ArchiveLoader.load

        Returns:
            Course with dangling file ids removed
        """
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            activities_future = executor.submit(self.read_activities, root)
            files_future = executor.submit(self.read_files, root)
            sections_future = executor.submit(self.read_sections, root)

            activities = activities_future.result()
            files = files_future.result()
            sections = sections_future.result()

        course = Course(
            activities={activity.id: activity for activity in activities},
            files={moodle_file.id: moodle_file for moodle_file in files},
            sections={section.id: section for section in sections},
        )

        self.pruned_file_refs = course.dangling_file_count()

        if self.verbose:
            print(f"   Activities: {len(course.activities)}")
            print(f"   Files: {len(course.files)}")
            print(f"   Sections: {len(course.sections)}")
            if self.pruned_file_refs:
                print(f"   Dropping {self.pruned_file_refs} references to files missing from the backup")

        return course.prune_dangling_files()

    # Activities

    def read_activities(self, root: ArchiveFolder) -> List[Activity]:
        """Read every activities/{type}_{id}/ folder"""
        activities_folder = root.find_folder('activities')

        if activities_folder is None:
            if self.verbose:
                print("  No activities folder found")
            return []

        return [
            self._read_activity(activity_folder)
            for activity_folder in activities_folder.list_folders()
        ]

    def _read_activity(self, activity_folder: ArchiveFolder) -> Activity:
        type_name, _, id_text = activity_folder.name.partition('_')
        activity_id = require_int(id_text, 'activity id', activity_folder.path)
        activity_type = ActivityType.from_name(type_name)

        descriptor = self._require_file(activity_folder, f'{type_name}.xml')
        xml_root = parse_xml(descriptor)
        node = find_element(xml_root, type_name)

        if node is None:
            raise MalformedDescriptorError(f"Missing <{type_name}> element", descriptor.path)

        file_ids = self._read_file_refs(activity_folder)

        reader = get_activity_reader(activity_type)
        return reader.read(activity_id, activity_type, node, file_ids, descriptor.path)

    def _read_file_refs(self, activity_folder: ArchiveFolder) -> Tuple[int, ...]:
        """Collect file/id values from inforef.xml in document order"""
        inforef = self._require_file(activity_folder, 'inforef.xml')
        xml_root = parse_xml(inforef)

        file_ids = []
        for file_node in xml_root.iter('file'):
            id_node = find_element(file_node, 'id')
            text = id_node.text if id_node is not None else None
            file_ids.append(require_int(text, 'file reference', inforef.path))

        return tuple(file_ids)

    # Files

    def read_files(self, root: ArchiveFolder) -> List[MoodleFile]:
        """Read files.xml and resolve each entry against the content store"""
        files_xml = self._require_file(root, 'files.xml')
        files_folder = root.find_folder('files')
        blobs = files_folder.index_files() if files_folder is not None else {}
        xml_root = parse_xml(files_xml)

        result = []
        for file_node in xml_root.iter('file'):
            filename = require_text(file_node, 'filename', files_xml.path)

            # Directory placeholders
            if filename == '.':
                continue

            file_id = require_int(file_node.get('id'), 'file id', files_xml.path)
            contenthash = require_text(file_node, 'contenthash', files_xml.path)
            result.append(MoodleFile(
                id=file_id,
                name=filename,
                content=self._resolve_content(blobs, contenthash, file_id)
            ))

        return result

    def _resolve_content(self, blobs: Dict[str, ArchiveFile], contenthash: str, file_id: int) -> bytes:
        blob = blobs.get(contenthash) if contenthash else None

        if blob is None:
            raise UnresolvedContentError(contenthash, file_id)

        return blob.content

    # Sections

    def read_sections(self, root: ArchiveFolder) -> List[Section]:
        """Read every *section.xml, most recent (highest number) first"""
        sections_folder = root.find_folder('sections')

        if sections_folder is None:
            if self.verbose:
                print("  No sections folder found")
            return []

        sections = [
            self._read_section(section_file)
            for section_file in sections_folder.list_files(recursive=True)
            if section_file.name.endswith('section.xml')
        ]

        return sorted(sections, key=lambda section: section.number, reverse=True)

    def _read_section(self, section_file: ArchiveFile) -> Section:
        xml_root = parse_xml(section_file)
        node = find_element(xml_root, 'section')

        if node is None:
            raise MalformedDescriptorError("Missing <section> element", section_file.path)

        sequence = get_text(node, 'sequence').strip()
        activity_ids = tuple(
            require_int(token, 'sequence entry', section_file.path)
            for token in sequence.split(',')
        ) if sequence else ()

        return Section(
            id=require_int(node.get('id'), 'section id', section_file.path),
            number=require_int(require_text(node, 'number', section_file.path), 'section number', section_file.path),
            name=get_text(node, 'name'),
            activity_ids=activity_ids
        )

    def _require_file(self, folder: ArchiveFolder, name: str) -> ArchiveFile:
        archive_file = folder.find_file(name)
        if archive_file is None:
            path = f"{folder.path}/{name}" if folder.path else name
            raise MalformedDescriptorError("Missing descriptor", path)
        return archive_file
