"""
Content fixes applied to copied assets.
"""

import contextlib
import os
import re
import shutil
import tempfile

from loguru import logger

from assetsync.utils.logging import asset_log
from assetsync.utils.paths import join_paths

ICON_STYLESHEET = join_paths("css", "bootstrap-icons.min.css")

# Only the bare "fonts/" form matches; the rewritten "../fonts/" form does not.
ICON_FONT_URL = re.compile(r'url\("fonts/bootstrap-icons\.woff')
ICON_FONT_URL_FIXED = 'url("../fonts/bootstrap-icons.woff'


def fix_icon_font_paths(webroot: str | os.PathLike) -> bool:
    """
    Point the Bootstrap Icons stylesheet at the published font directory.

    The stylesheet ships with ``url("fonts/...")`` references relative to its
    own directory. Once copied to ``<webroot>/css`` the fonts live in the
    sibling ``<webroot>/fonts`` directory, so the references gain a ``../``.

    Args:
        webroot: Webroot the icon assets were copied into

    Returns:
        bool: True if the stylesheet was rewritten
    """
    css_file = join_paths(webroot, ICON_STYLESHEET)
    if not os.path.isfile(css_file):
        return False

    try:
        with open(css_file, encoding="utf-8", newline="") as file_handle:
            content = file_handle.read()
    except (OSError, UnicodeDecodeError) as error:
        logger.debug(f"Cannot read {css_file}: {error}")
        return False

    updated = ICON_FONT_URL.sub(ICON_FONT_URL_FIXED, content)
    if updated == content:
        return False

    # Write beside the stylesheet and swap it in, so a failed write leaves the original intact
    temp_path = None
    try:
        fd, temp_path = tempfile.mkstemp(dir=os.path.dirname(css_file), suffix=".tmp")
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as file_handle:
            file_handle.write(updated)
        shutil.copymode(css_file, temp_path)
        os.replace(temp_path, css_file)
    except OSError as error:
        if temp_path is not None:
            with contextlib.suppress(OSError):
                os.remove(temp_path)
        asset_log.error(f"Failed to rewrite font paths in {css_file}: {error}")
        return False

    asset_log.info(f"Corrected font paths in {css_file}")
    return True
