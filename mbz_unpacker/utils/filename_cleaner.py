"""
Filename Cleaning Utilities

Activity names in Moodle often contain pasted links; they are removed
before the names end up as archive paths.
"""

import re

# A URL inside a file name runs until whitespace, or until the extension
# that ends the name
FILE_URL_PATTERN = re.compile(r'https?://\S+?(?=\s|\.[A-Za-z0-9]+$|$)')
FOLDER_URL_PATTERN = re.compile(r'https?://\S+')


def strip_urls(name: str, keep_extension: bool = True) -> str:
    """
    Remove embedded absolute URLs from a file or folder name

    'see http://example.com/x.png for reference.png' -> 'see  for reference.png'
    '0_http://example.com/doc.pdf' -> '0_.pdf'

    Args:
        name: File or folder name
        keep_extension: Leave a trailing '.ext' in place; pass False for
            folder names, which have no extension

    Returns:
        Name without URLs
    """
    pattern = FILE_URL_PATTERN if keep_extension else FOLDER_URL_PATTERN
    return pattern.sub('', name)


def get_extension(filename: str) -> str:
    """Text after the last '.', or '' when there is none"""
    if '.' not in filename:
        return ''
    return filename.rsplit('.', 1)[1]
