"""Read the text currently selected in the focused window."""

import sys

from .applescript import run_applescript, run_command

# Copies the selection, reads it and puts the old clipboard back.
COPY_SELECTION_SCRIPT = """
set savedClipboard to the clipboard
set the clipboard to ""
tell application "System Events" to keystroke "c" using command down
delay 0.15
set selectedText to the clipboard as text
set the clipboard to savedClipboard
return selectedText
"""


async def get_selected_text() -> str | None:
    """Selected text, or None when nothing is selected.

    Raises when the platform offers no way to read the selection.
    """
    if sys.platform == "darwin":
        text = await run_applescript(COPY_SELECTION_SCRIPT)
    else:
        text = await run_command("xclip", "-o", "-selection", "primary")
    return text or None
