"""
Main Moodle Backup to ZIP Converter

Orchestrates the conversion pipeline.
"""

from collections import Counter
from pathlib import Path
from typing import Dict

from .parsers.archive_loader import ArchiveLoader
from .parsers.mbz_parser import MbzParser
from .generators.zip_generator import ZipGenerator
from .models.archive_tree import ArchiveFolder
from .models.course import Course


class MbzToZipConverter:
    """Main converter class orchestrating the pipeline"""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose
        self.loader = ArchiveLoader(verbose=verbose)
        self.parser = MbzParser(verbose=verbose)
        self.generator = ZipGenerator(verbose=verbose)
        self.report: Dict = {}

    def convert(self, data: bytes) -> bytes:
        """
        Convert a Moodle backup into a browsable ZIP

        Args:
            data: Raw .mbz bytes (ZIP or gzip-compressed TAR)

        Returns:
            Output ZIP bytes
        """

        if self.verbose:
            print("=" * 60)
            print("Moodle Backup to ZIP Converter")
            print("=" * 60)

        # Step 1: Unpack the container
        if self.verbose:
            print("\nStep 1: Unpacking backup...")

        source_format = self.loader.detect(data)
        root = self.loader.load(data)

        # Step 2: Read the course
        if self.verbose:
            print("\nStep 2: Reading course metadata...")

        course = self.parser.parse(root)

        # Step 3: Build the output archive
        if self.verbose:
            print("\nStep 3: Building output archive...")

        output = self.generator.generate(course)

        self.report = self._generate_report(course, root, source_format, output)

        if self.verbose:
            print("\n" + "=" * 60)
            print("Conversion Complete")
            print("=" * 60)

        return output

    def _generate_report(
        self,
        course: Course,
        root: ArchiveFolder,
        source_format: str,
        output: bytes
    ) -> Dict:
        """Generate conversion report"""

        activities_by_type = Counter(
            activity.activity_type.value for activity in course.activities.values()
        )

        due_dates = [
            {
                'id': activity.id,
                'name': activity.name,
                'due_date': activity.due_date.isoformat(),
            }
            for activity in course.activities.values()
            if activity.due_date is not None
        ]

        return {
            'source_format': source_format,
            'entries': len(root.list_files(recursive=True)),
            'sections': len(course.sections),
            'activities': len(course.activities),
            'files': len(course.files),
            'activities_by_type': dict(activities_by_type),
            'pruned_file_refs': self.parser.pruned_file_refs,
            'due_dates': due_dates,
            'output_size': len(output),
        }


def convert_mbz_to_zip(
    mbz_path: str,
    output_path: str,
    verbose: bool = True
) -> Dict:
    """
    Convenience function to convert a backup file on disk

    Args:
        mbz_path: Path to the Moodle .mbz backup
        output_path: Path of the ZIP to write
        verbose: Print progress messages

    Returns:
        Conversion report dictionary
    """
    mbz_path = Path(mbz_path)

    if not mbz_path.exists():
        raise FileNotFoundError(f"Backup file not found: {mbz_path}")

    converter = MbzToZipConverter(verbose=verbose)
    output = converter.convert(mbz_path.read_bytes())

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(output)

    report = dict(converter.report)
    report['source_file'] = mbz_path.name
    report['output_file'] = str(output_path)
    return report
