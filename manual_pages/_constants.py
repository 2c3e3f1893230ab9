"""Common literal values used across manual_pages.

These constants keep file extensions, metadata keys, and template filenames
centralized so the collation driver, the default weaver, and tests can import
the same values without drifting. Intended for internal use within the
manual_pages package.

Examples
--------
>>> from manual_pages import _constants
>>> _constants.PAGE_FILENAME_TEMPLATE.format(name="readme")
'readme.html'
>>> bool(_constants.DOC_EXTENSION_PATTERN.search("GUIDE.MD"))
True
"""

import re

DOC_EXTENSION_PATTERN = re.compile(r"\.(md|txt|rst)$", re.IGNORECASE)
FILE_EXTENSION_PATTERN = re.compile(r"^(.+)\.([^.]+)$")
GITHUB_URL_PATTERN = re.compile(r"github\.com[:/](.*)\.git$")

DOC_FORMATS: dict[str, str] = {
    "md": "markdown",
    "rst": "rst",
    "tex": "latex",
    "html": "html",
    "htm": "html",
}

TITLE_KEY = "title"
PART_KEY = "part"
ORDER_KEY = "order"

PKGNAME_KEY = "pkgname"
PKGVER_KEY = "pkgver"
PKGURL_KEY = "pkgurl"
TOC_KEY = "table-of-contents"

DEFAULT_TEMPLATE = "default"
PAGE_TEMPLATE_FILENAME = "template.html"
TEMPLATE_ASSET_DIRS = ("js", "css")
PAGE_FILENAME_TEMPLATE = "{name}.html"

DEFAULT_MAX_LEVEL = 2
DEFAULT_DOC_DIR = "doc"
DEFAULT_OUTPUT_SUBDIR = "html"
