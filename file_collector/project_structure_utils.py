# file_collector/project_structure_utils.py
LINE_VERTICAL = "│   "
LINE_INTERSECTION = "├── "
LINE_CORNER = "└── "
LINE_EMPTY = "    "


def _render_nodes(nodes, prefix_str: str):
    """Recursively generates tree structure strings."""
    lines = []
    num_items = len(nodes)
    for i, node in enumerate(nodes):
        is_last_item = (i == num_items - 1)
        if is_last_item:
            entry_line = prefix_str + LINE_CORNER
            new_prefix_for_children = prefix_str + LINE_EMPTY
        else:
            entry_line = prefix_str + LINE_INTERSECTION
            new_prefix_for_children = prefix_str + LINE_VERTICAL

        entry_line += node['label']
        if node['is_dir']:
            lines.append(entry_line + "/")
            lines.extend(_render_nodes(node['children'], new_prefix_for_children))
        else:
            if node.get('status_msg'):
                entry_line += f" ({node['status_msg']})"
            lines.append(entry_line)
    return lines


def render_tree_text(root_name: str, nodes) -> str:
    """Renders scanned nodes as a text tree headed by root_name."""
    return "\n".join([root_name] + _render_nodes(nodes, ""))
