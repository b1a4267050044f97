"""Command-line entry point for the Moodle backup to ZIP converter"""

import sys
import argparse
from pathlib import Path

from .converter import convert_mbz_to_zip
from .errors import MbzError


def main():
    parser = argparse.ArgumentParser(
        description='Convert a Moodle course backup (.mbz) into a browsable ZIP',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  # Basic conversion
  mbz-unpacker backup-moodle2-course.mbz course.zip

  # Quiet mode
  mbz-unpacker backup-moodle2-course.mbz course.zip --quiet
        '''
    )
    parser.add_argument('mbz_file', help='Path to Moodle .mbz backup file')
    parser.add_argument('output_file', help='Path of the ZIP archive to write')
    parser.add_argument(
        '-q', '--quiet',
        action='store_true',
        help='Suppress progress and summary output'
    )

    args = parser.parse_args()
    verbose = not args.quiet

    if verbose and Path(args.mbz_file).suffix.lower() != '.mbz':
        print("⚠️  Warning: File does not have .mbz extension")

    try:
        report = convert_mbz_to_zip(args.mbz_file, args.output_file, verbose=verbose)
    except (MbzError, FileNotFoundError) as e:
        print(f"❌ Conversion failed: {e}", file=sys.stderr)
        return 1

    if verbose:
        print("\n📊 Conversion Summary:")
        print(f"   Format: {report['source_format']}")
        print(f"   Sections: {report['sections']}")
        print(f"   Activities: {report['activities']}")
        for activity_type, count in sorted(report['activities_by_type'].items()):
            print(f"     {activity_type}: {count}")
        print(f"   Files: {report['files']}")
        if report['pruned_file_refs']:
            print(f"   Dropped file references: {report['pruned_file_refs']}")
        for entry in report['due_dates']:
            print(f"   Due {entry['due_date']}: {entry['name']}")
        print(f"\n📁 Output: {report['output_file']}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
