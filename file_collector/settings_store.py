# file_collector/settings_store.py
"""
Persisted settings: the ignore-pattern list and the system prompts.

Both are JSON arrays stored under the user's home directory. The pattern
list is always rewritten as a whole.
"""
import json
import logging
import os
import uuid
from pathlib import Path

logger = logging.getLogger(__name__)

APP_DIR_NAME = "FileCollector"
GITIGNORE_FILE_NAME = "gitignores.json"
PROMPTS_FILE_NAME = "system_prompts.json"

HOME_ENV_VAR = "FILE_COLLECTOR_HOME"
GITIGNORE_PATH_ENV_VAR = "FILE_COLLECTOR_GITIGNORE_PATH"
PROMPTS_PATH_ENV_VAR = "FILE_COLLECTOR_PROMPTS_PATH"


class SettingsFormatError(ValueError):
    """A settings file does not contain a JSON array."""


class PromptNotFoundError(LookupError):
    """No stored system prompt has the requested id."""

    def __init__(self, prompt_id):
        super().__init__(f"System prompt '{prompt_id}' not found.")
        self.prompt_id = prompt_id


def settings_dir():
    base = os.environ.get(HOME_ENV_VAR)
    if base:
        return Path(base)
    return Path.home() / APP_DIR_NAME


def gitignore_store_path():
    override = os.environ.get(GITIGNORE_PATH_ENV_VAR)
    return Path(override) if override else settings_dir() / GITIGNORE_FILE_NAME


def prompts_store_path():
    override = os.environ.get(PROMPTS_PATH_ENV_VAR)
    return Path(override) if override else settings_dir() / PROMPTS_FILE_NAME


def _read_json_array(store_path: Path):
    if not store_path.exists():
        logger.info("File '%s' not found. Creating...", store_path)
        store_path.parent.mkdir(parents=True, exist_ok=True)
        store_path.write_text("[]", encoding="utf-8")
        return []

    content = store_path.read_text(encoding="utf-8")
    try:
        data = json.loads(content) if content.strip() else []
    except json.JSONDecodeError as e:
        raise SettingsFormatError(f"Failed to parse '{store_path}': {e}") from e
    if not isinstance(data, list):
        raise SettingsFormatError(f"Invalid data format in '{store_path.name}'. Expected an array.")
    return data


def _write_json_array(store_path: Path, data):
    store_path.parent.mkdir(parents=True, exist_ok=True)
    store_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")


# --- Ignore patterns ---

def load_patterns(store_path=None):
    """Returns the stored pattern strings in their authored order."""
    store_path = Path(store_path) if store_path else gitignore_store_path()
    patterns = []
    for item in _read_json_array(store_path):
        if isinstance(item, dict) and isinstance(item.get("pattern"), str):
            patterns.append(item["pattern"])
        else:
            logger.warning("Ignoring malformed pattern record in '%s': %r", store_path.name, item)
    return patterns


def save_patterns(patterns, store_path=None):
    """Saves the list, dropping blanks and duplicates. Returns the saved list."""
    store_path = Path(store_path) if store_path else gitignore_store_path()
    unique_patterns = []
    seen = set()
    for pattern in patterns:
        pattern = pattern.strip()
        if pattern and pattern not in seen:
            seen.add(pattern)
            unique_patterns.append(pattern)

    _write_json_array(store_path, [{"pattern": pattern} for pattern in unique_patterns])
    return unique_patterns


def add_pattern(pattern, store_path=None):
    """Appends a pattern. Returns True if it was not already present."""
    if not pattern.strip():
        raise ValueError("Pattern must not be blank.")
    current = load_patterns(store_path)
    updated = save_patterns(current + [pattern], store_path)
    return len(updated) > len(current)


def update_pattern(index, value, store_path=None):
    current = load_patterns(store_path)
    if not 0 <= index < len(current):
        raise IndexError(f"No pattern at index {index}.")
    current[index] = value.strip()
    return save_patterns(current, store_path)


def delete_pattern(index, store_path=None):
    """Removes the pattern at index and returns it."""
    current = load_patterns(store_path)
    if not 0 <= index < len(current):
        raise IndexError(f"No pattern at index {index}.")
    removed = current.pop(index)
    save_patterns(current, store_path)
    return removed


def import_gitignore(gitignore_file, store_path=None):
    """
    Appends the patterns of a .gitignore file to the stored list.

    Returns (imported, added): lines read from the file and how many of them
    were new.
    """
    content = Path(gitignore_file).read_text(encoding="utf-8")
    new_patterns = [
        line.strip() for line in content.splitlines()
        if line.strip() and not line.strip().startswith("#")
    ]
    if not new_patterns:
        return 0, 0

    current = load_patterns(store_path)
    updated = save_patterns(current + new_patterns, store_path)
    return len(new_patterns), len(updated) - len(current)


# --- System prompts ---

def load_system_prompts(store_path=None):
    store_path = Path(store_path) if store_path else prompts_store_path()
    if not store_path.exists():
        return []
    return _read_json_array(store_path)


def save_system_prompts(prompts, store_path=None):
    store_path = Path(store_path) if store_path else prompts_store_path()
    _write_json_array(store_path, prompts)


def add_system_prompt(name, content, store_path=None):
    name, content = name.strip(), content.strip()
    if not name or not content:
        raise ValueError("System prompt name and content must not be blank.")
    prompt = {"id": str(uuid.uuid4()), "name": name, "content": content}
    prompts = load_system_prompts(store_path)
    prompts.append(prompt)
    save_system_prompts(prompts, store_path)
    return prompt


def find_system_prompt(id_or_name, store_path=None):
    """Looks a prompt up by id first, then by name. Returns None if missing."""
    prompts = load_system_prompts(store_path)
    for prompt in prompts:
        if prompt.get("id") == id_or_name:
            return prompt
    for prompt in prompts:
        if prompt.get("name") == id_or_name:
            return prompt
    return None


def update_system_prompt(prompt_id, name=None, content=None, store_path=None):
    prompts = load_system_prompts(store_path)
    for prompt in prompts:
        if prompt.get("id") != prompt_id:
            continue
        new_name = prompt.get("name", "") if name is None else name.strip()
        new_content = prompt.get("content", "") if content is None else content.strip()
        if not new_name or not new_content:
            raise ValueError("System prompt name and content must not be blank.")
        prompt["name"], prompt["content"] = new_name, new_content
        save_system_prompts(prompts, store_path)
        return prompt
    raise PromptNotFoundError(prompt_id)


def delete_system_prompt(prompt_id, store_path=None):
    prompts = load_system_prompts(store_path)
    remaining = [prompt for prompt in prompts if prompt.get("id") != prompt_id]
    if len(remaining) == len(prompts):
        raise PromptNotFoundError(prompt_id)
    save_system_prompts(remaining, store_path)
