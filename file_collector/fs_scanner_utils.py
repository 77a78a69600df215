# file_collector/fs_scanner_utils.py
from pathlib import Path

from file_collector.file_processing import BINARY_EXTENSIONS, MAX_FILE_SIZE_BYTES
from file_collector.ignore_evaluator import is_ignored

BINARY_STATUS_TAG = "status_binary"
LARGE_FILE_STATUS_TAG = "status_large_file"
ERROR_STATUS_TAG = "status_error"

DISABLED_STATUS_TAGS = {
    BINARY_STATUS_TAG,
    LARGE_FILE_STATUS_TAG,
    ERROR_STATUS_TAG
}


def entry_query_path(rel_path: str, is_dir: bool) -> str:
    """Query string for the ignore engine; directories carry a trailing '/'."""
    return rel_path + "/" if is_dir else rel_path


def should_exclude_item(rel_path: str, is_dir: bool, compiled_patterns) -> bool:
    if not compiled_patterns:
        return False
    return is_ignored(compiled_patterns, entry_query_path(rel_path, is_dir))


def get_item_status_info(item_path_obj: Path, is_dir: bool):
    """Returns (status_tags, status_message) for a tree entry."""
    status_tags = set()
    status_message = ""

    if is_dir:
        return status_tags, status_message

    if item_path_obj.suffix.lower() in BINARY_EXTENSIONS:
        status_tags.add(BINARY_STATUS_TAG)
        return status_tags, "binary"

    try:
        file_size = item_path_obj.stat().st_size
    except OSError as e:
        status_tags.add(ERROR_STATUS_TAG)
        return status_tags, f"stat failed: {e.strerror}"

    if file_size > MAX_FILE_SIZE_BYTES:
        status_tags.add(LARGE_FILE_STATUS_TAG)
        status_message = f"> {MAX_FILE_SIZE_BYTES // (1024 * 1024)}MB"

    return status_tags, status_message


def is_selectable(status_tags) -> bool:
    return not DISABLED_STATUS_TAGS.intersection(status_tags)
