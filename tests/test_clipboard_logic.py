import pyperclip

from file_collector import clipboard_logic
from file_collector.clipboard_logic import compose_prompt, copy_to_clipboard, format_file_block


def _file(path, content, language=""):
    return {'path': path, 'content': content, 'language': language, 'token_count': 1}


def test_format_file_block():
    block = format_file_block(_file("/p/a.py", "x = 1", "python"))
    assert block == "FILE PATH: /p/a.py\n\nCONTENT:\n```python\nx = 1\n```"


def test_compose_prompt_full():
    files = [_file("/p/a.py", "x = 1", "python"), _file("/p/b.txt", "hello")]
    text = compose_prompt(files, system_prompt="  Be brief.  ", user_prompt="Explain.\n")
    assert text == (
        "SYSTEM PROMPT:\n\nBe brief."
        "\n\n---\n\n"
        "FILE PATH: /p/a.py\n\nCONTENT:\n```python\nx = 1\n```"
        "\n\n---\n\n"
        "FILE PATH: /p/b.txt\n\nCONTENT:\n```\nhello\n```"
        "\n\n---\n\n"
        "USER PROMPT:\n\nExplain."
    )


def test_compose_prompt_skips_failed_files_and_blank_parts():
    files = [{'path': "/p/big.txt", 'error': "too large"}, _file("/p/a.py", "x", "python")]
    text = compose_prompt(files, system_prompt="   ", user_prompt="")
    assert text == "FILE PATH: /p/a.py\n\nCONTENT:\n```python\nx\n```"


def test_compose_prompt_with_only_prompts():
    assert compose_prompt([], user_prompt="Question?") == "USER PROMPT:\n\nQuestion?"
    assert compose_prompt([]) == ""


def test_copy_to_clipboard(monkeypatch):
    copied = []
    monkeypatch.setattr(clipboard_logic.pyperclip, "copy", copied.append)
    assert copy_to_clipboard("text") is True
    assert copied == ["text"]


def test_copy_to_clipboard_refuses_empty_text(monkeypatch):
    copied = []
    monkeypatch.setattr(clipboard_logic.pyperclip, "copy", copied.append)
    assert copy_to_clipboard("") is False
    assert copied == []


def test_copy_to_clipboard_handles_missing_clipboard(monkeypatch, caplog):
    def failing_copy(text):
        raise pyperclip.PyperclipException("no clipboard mechanism")

    monkeypatch.setattr(clipboard_logic.pyperclip, "copy", failing_copy)
    assert copy_to_clipboard("text") is False
    assert "clipboard" in caplog.text
