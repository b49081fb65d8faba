from __future__ import annotations

import re

NSEC_PER_SEC = 1_000_000_000

# Characters that break shells, Windows or Samba shares.
PROBLEMATIC_CHARACTERS = re.compile(r'[:?*"<>|]', re.IGNORECASE)

# Anything FAT file systems refuse in a long file name.
INVALID_FAT_CHARACTERS = re.compile(r"[^a-zA-Z0-9!#$%&'()\-@^_`{}~/. ]", re.IGNORECASE)

# Path separators must never come from a tag value.
INVALID_DIR_CHARACTERS = re.compile(r"[/\\]", re.IGNORECASE)

# A path segment must not start with one of these.
INVALID_PREFIX_CHARACTERS = (".",)
