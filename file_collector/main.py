# file_collector/main.py
import argparse
import logging
import queue
import sys
from datetime import datetime
from pathlib import Path

if __name__ == "__main__":
    current_file_path = Path(__file__).resolve()
    project_root = current_file_path.parent.parent
    if str(project_root) not in sys.path:
        sys.path.insert(0, str(project_root))

from file_collector import settings_store
from file_collector.clipboard_logic import compose_prompt, copy_to_clipboard
from file_collector.file_processing import count_tokens, estimate_tokens, read_files
from file_collector.ignore_compiler import compile_patterns
from file_collector.ignore_evaluator import Matcher
from file_collector.project_structure_utils import render_tree_text
from file_collector.tree_scanner import (
    ScanError, collect_file_paths, drain_scan_queue, find_node, flatten_files,
    scan_directory_threaded, search_files
)

APP_VERSION = datetime.now().strftime("%y.%m.%d")

logger = logging.getLogger("file_collector")


def load_directory_tree(directory, patterns_file=None):
    """Scans directory with the stored patterns, compiled once for the whole walk."""
    compiled_patterns = compile_patterns(settings_store.load_patterns(patterns_file))
    update_queue = queue.Queue()
    scan_directory_threaded(directory, compiled_patterns, update_queue)
    return drain_scan_queue(update_queue)


def cmd_scan(args):
    nodes = load_directory_tree(args.directory, args.patterns_file)
    root_name = Path(args.directory).resolve().name
    print(render_tree_text(root_name, nodes))
    logger.info("%d files listed.", len(flatten_files(nodes)))
    return 0


def cmd_search(args):
    files = flatten_files(load_directory_tree(args.directory, args.patterns_file))
    results = search_files(files, args.query)
    if not results:
        logger.info("No files found matching '%s'.", args.query)
    for node in results:
        print(node['rel_path'])
    return 0


def cmd_check(args):
    matcher = Matcher(settings_store.load_patterns(args.patterns_file), args.directory)
    for rel_path in args.paths:
        is_dir = True if rel_path.endswith("/") else None
        print(f"{'ignored' if matcher(rel_path, is_dir) else 'kept'}\t{rel_path}")
    return 0


def _selected_file_paths(args):
    nodes = load_directory_tree(args.directory, args.patterns_file)
    if args.files:
        selected_nodes = []
        for rel_path in args.files:
            rel_path = rel_path.replace("\\", "/").strip("/")
            node = find_node(nodes, rel_path)
            if node is None:
                logger.warning("'%s' is not in the scanned tree (missing or ignored).", rel_path)
            else:
                selected_nodes.append(node)
    else:
        selected_nodes = nodes

    selected, skipped = [], 0
    for node in selected_nodes:
        paths = collect_file_paths(node, only_selectable=True)
        skipped += len(collect_file_paths(node)) - len(paths)
        selected.extend(paths)
    if skipped:
        logger.info("Skipped %d files that cannot be copied (binary or too large).", skipped)
    # A file named both on its own and through its folder is copied once.
    return list(dict.fromkeys(selected))


def cmd_copy(args):
    system_prompt = ""
    if args.system_prompt:
        prompt = settings_store.find_system_prompt(args.system_prompt, args.prompts_file)
        if prompt is None:
            logger.error("System prompt '%s' not found.", args.system_prompt)
            return 1
        system_prompt = prompt.get("content", "")

    file_infos = read_files(_selected_file_paths(args))
    for info in file_infos:
        if info.get('error'):
            logger.warning("%s: %s", info['path'], info['error'])

    formatted_content = compose_prompt(file_infos, system_prompt, args.user_prompt or "")
    if not formatted_content:
        logger.warning("No content to copy: select files or write a prompt.")
        return 1

    if args.exact_tokens:
        total_tokens = count_tokens(formatted_content)
    else:
        total_tokens = estimate_tokens(formatted_content)

    if args.stdout:
        print(formatted_content)
    elif not copy_to_clipboard(formatted_content):
        return 1

    loaded = sum(1 for info in file_infos if not info.get('error'))
    target = "written" if args.stdout else "copied to clipboard"
    logger.info("%d files, ~%s tokens %s.", loaded, f"{total_tokens:,}", target)
    return 0


def cmd_patterns(args):
    store = args.patterns_file
    if args.action == "list":
        for index, pattern in enumerate(settings_store.load_patterns(store)):
            print(f"{index}\t{pattern}")
    elif args.action == "add":
        if settings_store.add_pattern(args.pattern, store):
            logger.info("Added '%s'.", args.pattern.strip())
        else:
            logger.info("The pattern '%s' is already in the list.", args.pattern.strip())
    elif args.action == "edit":
        settings_store.update_pattern(args.index, args.pattern, store)
        logger.info("Updated pattern %d.", args.index)
    elif args.action == "remove":
        removed = settings_store.delete_pattern(args.index, store)
        logger.info("Removed '%s'.", removed)
    elif args.action == "import":
        imported, added = settings_store.import_gitignore(args.file, store)
        if not imported:
            logger.warning("The selected file contained no valid patterns.")
        else:
            logger.info("Imported %d patterns. Added %d new unique patterns.", imported, added)
    return 0


def cmd_prompts(args):
    store = args.prompts_file
    if args.action == "list":
        for prompt in settings_store.load_system_prompts(store):
            print(f"{prompt.get('id', '')}\t{prompt.get('name', '')}")
    elif args.action == "add":
        prompt = settings_store.add_system_prompt(args.name, args.content, store)
        logger.info("Added prompt '%s' (%s).", prompt['name'], prompt['id'])
    elif args.action == "edit":
        prompt = settings_store.update_system_prompt(args.id, args.name, args.content, store)
        logger.info("Updated '%s'.", prompt['name'])
    elif args.action == "remove":
        settings_store.delete_system_prompt(args.id, store)
        logger.info("Removed prompt %s.", args.id)
    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        prog="file-collector",
        description="Collect project files into a single prompt for a language model.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show scan progress")
    parser.add_argument("--patterns-file", type=Path, default=None,
                        help="Ignore-pattern store (default: ~/FileCollector/gitignores.json)")
    parser.add_argument("--prompts-file", type=Path, default=None,
                        help="System prompt store (default: ~/FileCollector/system_prompts.json)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan_parser = subparsers.add_parser("scan", help="Print the filtered file tree")
    scan_parser.add_argument("directory")
    scan_parser.set_defaults(func=cmd_scan)

    search_parser = subparsers.add_parser("search", help="Search file paths in the filtered tree")
    search_parser.add_argument("directory")
    search_parser.add_argument("query")
    search_parser.set_defaults(func=cmd_search)

    check_parser = subparsers.add_parser("check", help="Show whether paths are ignored")
    check_parser.add_argument("directory")
    check_parser.add_argument("paths", nargs="+")
    check_parser.set_defaults(func=cmd_check)

    copy_parser = subparsers.add_parser("copy", help="Compose the prompt and copy it")
    copy_parser.add_argument("directory")
    copy_parser.add_argument("files", nargs="*", help="Files or folders relative to directory (default: all)")
    copy_parser.add_argument("--system-prompt", help="Id or name of a stored system prompt")
    copy_parser.add_argument("--user-prompt", help="Text appended after the files")
    copy_parser.add_argument("--stdout", action="store_true", help="Print instead of copying")
    copy_parser.add_argument("--exact-tokens", action="store_true", help="Count tokens with tiktoken")
    copy_parser.set_defaults(func=cmd_copy)

    patterns_parser = subparsers.add_parser("patterns", help="Manage ignore patterns")
    patterns_sub = patterns_parser.add_subparsers(dest="action", required=True)
    patterns_sub.add_parser("list")
    add_pattern_parser = patterns_sub.add_parser("add")
    add_pattern_parser.add_argument("pattern")
    edit_pattern_parser = patterns_sub.add_parser("edit")
    edit_pattern_parser.add_argument("index", type=int)
    edit_pattern_parser.add_argument("pattern")
    remove_pattern_parser = patterns_sub.add_parser("remove")
    remove_pattern_parser.add_argument("index", type=int)
    import_parser = patterns_sub.add_parser("import")
    import_parser.add_argument("file", type=Path)
    patterns_parser.set_defaults(func=cmd_patterns)

    prompts_parser = subparsers.add_parser("prompts", help="Manage system prompts")
    prompts_sub = prompts_parser.add_subparsers(dest="action", required=True)
    prompts_sub.add_parser("list")
    add_prompt_parser = prompts_sub.add_parser("add")
    add_prompt_parser.add_argument("name")
    add_prompt_parser.add_argument("content")
    edit_prompt_parser = prompts_sub.add_parser("edit")
    edit_prompt_parser.add_argument("id")
    edit_prompt_parser.add_argument("--name")
    edit_prompt_parser.add_argument("--content")
    remove_prompt_parser = prompts_sub.add_parser("remove")
    remove_prompt_parser.add_argument("id")
    prompts_parser.set_defaults(func=cmd_prompts)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    try:
        return args.func(args)
    except (OSError, IndexError, ValueError, ScanError, settings_store.PromptNotFoundError) as e:
        logger.error("%s", e)
    return 1


if __name__ == "__main__":
    sys.exit(main())
