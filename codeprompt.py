#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CodePrompt - Turn a codebase into a single prompt for Large Language Models

This script renders a source tree of a directory plus the contents of the
selected files (and optionally git data) into one prompt, copied to the
clipboard or written to a file.
"""

import sys
from pathlib import Path

# Allow running the script from a source checkout without installing the package
script_dir = Path(__file__).resolve().parent
if (script_dir / 'codeprompt_lib').is_dir() and str(script_dir) not in sys.path:
    sys.path.insert(0, str(script_dir))

from codeprompt_lib.codeprompt_cli import main

if __name__ == "__main__":
    sys.exit(main())
