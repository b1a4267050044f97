#!/usr/bin/env python3
"""
Moodle Backup to ZIP Converter - Command Line Interface

Same as `python -m mbz_unpacker`, runnable straight from a checkout.
"""

import sys

from mbz_unpacker.__main__ import main


if __name__ == '__main__':
    sys.exit(main())
