# file_collector/clipboard_logic.py
import logging

import pyperclip

logger = logging.getLogger(__name__)

PART_SEPARATOR = "\n\n---\n\n"


def format_file_block(file_info):
    return (
        f"FILE PATH: {file_info['path']}\n\n"
        f"CONTENT:\n```{file_info.get('language') or ''}\n{file_info['content']}\n```"
    )


def compose_prompt(file_infos, system_prompt="", user_prompt=""):
    """
    Assembles the text that gets copied: system prompt, file blocks, user prompt.

    Files that failed to load (those with an 'error') are left out; empty
    parts are omitted together with their separator.
    """
    files_to_copy = [info for info in file_infos if info.get('content') and not info.get('error')]
    file_content = PART_SEPARATOR.join(format_file_block(info) for info in files_to_copy)

    content_parts = []
    if system_prompt and system_prompt.strip():
        content_parts.append(f"SYSTEM PROMPT:\n\n{system_prompt.strip()}")
    if file_content.strip():
        content_parts.append(file_content)
    if user_prompt and user_prompt.strip():
        content_parts.append(f"USER PROMPT:\n\n{user_prompt.strip()}")

    return PART_SEPARATOR.join(content_parts)


def copy_to_clipboard(text):
    """Copies text with pyperclip. Returns False if there was nothing to copy or copying failed."""
    if not text:
        logger.warning("No content to copy: select files or write a prompt.")
        return False

    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as e:
        logger.error("Could not write content to the clipboard: %s", e)
        return False
    return True
