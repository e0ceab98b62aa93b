"""Copy the generated message to the system clipboard."""

import logging

import pyperclip

logger = logging.getLogger(__name__)


def copy_to_clipboard(text: str) -> bool:
    """Copy text to the clipboard.

    A missing clipboard backend (headless session, no xclip/xsel) is only a
    warning; the message is still printed by the caller.

    Returns:
        True if the text was copied.
    """
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as e:
        logger.warning("Could not copy to clipboard: %s", e)
        return False
    logger.debug("Copied %d characters to clipboard", len(text))
    return True
