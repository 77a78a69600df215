# file_collector/tree_scanner.py
import logging
import os
import threading
from pathlib import Path

from file_collector.fs_scanner_utils import get_item_status_info, is_selectable, should_exclude_item

logger = logging.getLogger(__name__)


class ScanError(RuntimeError):
    """The scan worker stopped before producing a tree."""


def _sort_key(node):
    return (not node['is_dir'], node['label'].casefold())


def _scan_recursive(cur_dir_obj: Path, rel_dir: str, compiled_patterns, update_queue=None):
    if update_queue is not None:
        update_queue.put(("progress_step", rel_dir or "."))

    try:
        if not (os.access(str(cur_dir_obj), os.R_OK) and os.access(str(cur_dir_obj), os.X_OK)):
            raise PermissionError(f"Access denied to '{cur_dir_obj}'")
        items = list(cur_dir_obj.iterdir())
    except OSError as e:
        warning_msg = f"Skipping unreadable directory '{cur_dir_obj}': {e}"
        if update_queue is not None:
            update_queue.put(("log_message", (warning_msg, 'warning')))
        else:
            logger.warning(warning_msg)
        return []

    nodes = []
    for item_path_obj in items:
        item_name = item_path_obj.name
        is_dir = item_path_obj.is_dir()
        rel_path = f"{rel_dir}/{item_name}" if rel_dir else item_name

        if should_exclude_item(rel_path, is_dir, compiled_patterns):
            continue

        if is_dir:
            children = _scan_recursive(item_path_obj, rel_path, compiled_patterns, update_queue)
            if not children:
                continue
            nodes.append({
                'label': item_name, 'value': str(item_path_obj), 'rel_path': rel_path,
                'is_dir': True, 'children': children,
            })
        else:
            status_tags, status_msg = get_item_status_info(item_path_obj, False)
            nodes.append({
                'label': item_name, 'value': str(item_path_obj), 'rel_path': rel_path,
                'is_dir': False, 'status_tags': status_tags, 'status_msg': status_msg,
            })

    nodes.sort(key=_sort_key)
    return nodes


def build_tree(root_dir, compiled_patterns, update_queue=None):
    """
    Walks root_dir and returns the filtered tree as a list of node dicts.

    Ignored entries are skipped (ignored directories are not descended) and
    directories left without children are dropped.
    """
    root_dir_obj = Path(root_dir)
    if not root_dir_obj.is_dir():
        raise NotADirectoryError(f"Not a directory: '{root_dir}'")
    return _scan_recursive(root_dir_obj, "", compiled_patterns, update_queue)


def flatten_files(nodes):
    """Returns every file node of the tree, sorted by label."""
    files = []
    for node in nodes:
        if node['is_dir']:
            files.extend(flatten_files(node['children']))
        else:
            files.append(node)
    files.sort(key=lambda node: node['label'].casefold())
    return files


def find_node(nodes, rel_path):
    """Returns the node at rel_path (slash-separated, relative to the root) or None."""
    for node in nodes:
        if node['rel_path'] == rel_path:
            return node
        if node['is_dir'] and rel_path.startswith(node['rel_path'] + "/"):
            return find_node(node['children'], rel_path)
    return None


def collect_file_paths(node, only_selectable=False):
    """
    All file paths under node (the node itself when it is a file).

    With only_selectable, files tagged binary, too large or unreadable are left out.
    """
    if not node['is_dir']:
        if only_selectable and not is_selectable(node['status_tags']):
            return []
        return [node['value']]
    paths = []
    for child in node['children']:
        paths.extend(collect_file_paths(child, only_selectable))
    return paths


def search_files(file_nodes, query):
    """Case-insensitive substring search over file paths."""
    query = query.strip().lower()
    if not query:
        return []
    return [node for node in file_nodes if query in node['value'].lower()]


def _scan_worker(root_dir, compiled_patterns, update_queue):
    try:
        nodes = build_tree(root_dir, compiled_patterns, update_queue)
    except Exception as e:
        logger.debug("Scan of '%s' failed", root_dir, exc_info=True)
        update_queue.put(("error", str(e) or type(e).__name__))
        return
    update_queue.put(("finished", nodes))


def scan_directory_threaded(root_dir, compiled_patterns, update_queue):
    """Runs build_tree on a daemon thread, reporting through update_queue."""
    scan_thread = threading.Thread(
        target=_scan_worker, args=(root_dir, compiled_patterns, update_queue), daemon=True
    )
    scan_thread.start()
    return scan_thread


def drain_scan_queue(update_queue):
    """
    Consumes messages from a threaded scan until it finishes.

    Returns the scanned nodes; raises ScanError if the worker failed.
    """
    while True:
        action, data = update_queue.get()
        if action == "progress_step":
            logger.debug("Scanning %s", data)
        elif action == "log_message":
            message, level = data
            logger.log(logging.WARNING if level == 'warning' else logging.INFO, message)
        elif action == "error":
            raise ScanError(data)
        elif action == "finished":
            return data
