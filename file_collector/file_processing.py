# file_collector/file_processing.py
import logging
import re
from pathlib import Path

import tiktoken

logger = logging.getLogger(__name__)

BINARY_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.gif', '.bmp', '.tiff', '.webp', '.ico', '.mp3', '.wav', '.aac', '.ogg', '.flac', '.m4a', '.mp4', '.mkv', '.avi', '.mov', '.wmv', '.flv', '.webm', '.pdf', '.doc', '.docx', '.xls', '.xlsx', '.ppt', '.pptx', '.odt', '.ods', '.odp', '.zip', '.rar', '.tar', '.gz', '.bz2', '.7z', '.jar', '.war', '.exe', '.dll', '.so', '.dylib', '.app', '.msi', '.sqlite', '.db', '.mdb', '.ttf', '.otf', '.woff', '.woff2', '.pyc', '.pyo', '.pyd', '.class', '.bundle', '.swf', '.dat', '.bin', '.obj', '.lib', '.a', '.pak', '.assets', '.resource', '.ress'}
MAX_FILE_SIZE_BYTES = 1 * 1024 * 1024
# Files longer than this many characters are not loaded into the prompt.
MAX_FILE_CHARS = 200_000

LANGUAGE_BY_EXTENSION = {
    '.py': 'python', '.pyi': 'python', '.js': 'javascript', '.jsx': 'jsx', '.mjs': 'javascript',
    '.ts': 'typescript', '.tsx': 'tsx', '.json': 'json', '.md': 'markdown', '.html': 'html',
    '.htm': 'html', '.css': 'css', '.scss': 'scss', '.rs': 'rust', '.go': 'go', '.java': 'java',
    '.kt': 'kotlin', '.c': 'c', '.h': 'c', '.cpp': 'cpp', '.hpp': 'cpp', '.cc': 'cpp',
    '.cs': 'csharp', '.rb': 'ruby', '.php': 'php', '.swift': 'swift', '.sh': 'bash',
    '.bash': 'bash', '.ps1': 'powershell', '.sql': 'sql', '.yml': 'yaml', '.yaml': 'yaml',
    '.toml': 'toml', '.xml': 'xml', '.svg': 'xml', '.ini': 'ini', '.vue': 'vue', '.lua': 'lua',
}
LANGUAGE_BY_FILENAME = {
    'Dockerfile': 'dockerfile',
    'Makefile': 'makefile',
}

TOKEN_PATTERN = re.compile(r"\w+|[^\s\w]")


def get_language(file_path):
    """Returns the code-fence language for a file, or an empty string."""
    path_obj = Path(file_path)
    if path_obj.name in LANGUAGE_BY_FILENAME:
        return LANGUAGE_BY_FILENAME[path_obj.name]
    return LANGUAGE_BY_EXTENSION.get(path_obj.suffix.lower(), "")


def estimate_tokens(text):
    """Rough token estimate: word runs plus individual punctuation characters."""
    if not text:
        return 0
    return len(TOKEN_PATTERN.findall(text))


def count_tokens(text, model_name="gpt-4"):
    """Exact token count for model_name using tiktoken."""
    if not text or not text.strip():
        return 0
    encoding = tiktoken.encoding_for_model(model_name)
    return len(encoding.encode(text))


def read_file_info(file_path):
    """
    Reads a file for the prompt.

    Returns a dict with 'path' and either 'content', 'language' and
    'token_count', or 'error' describing why the file was not loaded.
    """
    file_path_obj = Path(file_path)
    path_str = str(file_path)

    if file_path_obj.suffix.lower() in BINARY_EXTENSIONS:
        return {'path': path_str, 'error': "Binary file, content not loaded."}

    try:
        with open(file_path_obj, 'r', encoding='utf-8') as f:
            content = f.read()
    except UnicodeDecodeError:
        logger.info("Skipping '%s': not valid UTF-8", file_path_obj.name)
        return {'path': path_str, 'error': "Failed to read file: not a UTF-8 text file."}
    except OSError as e:
        logger.warning("Failed to read '%s': %s", path_str, e)
        return {'path': path_str, 'error': f"Failed to read file: {e.strerror or e}"}

    if len(content) > MAX_FILE_CHARS:
        return {
            'path': path_str,
            'error': f"File is too large to display (over {MAX_FILE_CHARS // 1000}k characters).",
        }

    return {
        'path': path_str,
        'content': content,
        'language': get_language(file_path_obj),
        'token_count': estimate_tokens(content),
    }


def read_files(file_paths):
    """Reads every path; result is ordered by token count, largest first."""
    file_infos = [read_file_info(path) for path in file_paths]
    file_infos.sort(key=lambda info: info.get('token_count') or 0, reverse=True)
    return file_infos
