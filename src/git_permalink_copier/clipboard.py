import logging
import shutil
import subprocess
import sys
from typing import List, Optional

logger = logging.getLogger(__name__)

# Tried in order; the first one found on PATH is used
CLIPBOARD_COMMANDS = {
    "darwin": [["pbcopy"]],
    "win32": [["clip"]],
    "linux": [
        ["wl-copy"],
        ["xclip", "-selection", "clipboard"],
        ["xsel", "--clipboard", "--input"],
    ],
}


def find_clipboard_command(platform: Optional[str] = None) -> Optional[List[str]]:
    platform = platform or sys.platform
    key = "linux" if platform.startswith(("linux", "freebsd", "openbsd")) else platform
    for cmd in CLIPBOARD_COMMANDS.get(key, []):
        if shutil.which(cmd[0]):
            return cmd
    return None


def copy_to_clipboard(text: str) -> bool:
    """Writes `text` to the system clipboard. Returns False if no clipboard tool worked."""
    cmd = find_clipboard_command()
    if cmd is None:
        logger.warning("No clipboard tool found (tried pbcopy, clip, wl-copy, xclip, xsel)")
        return False
    try:
        subprocess.run(cmd, input=text, text=True, capture_output=True, check=True, timeout=5)
    except (subprocess.CalledProcessError, subprocess.TimeoutExpired) as e:
        logger.warning("Clipboard command '%s' failed: %s", subprocess.list2cmdline(cmd), e)
        return False
    return True
