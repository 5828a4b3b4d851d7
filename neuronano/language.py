"""
Language detection for the NeuroNano editor.

A pure lookup from a filename to a display label, shown in the header and used
to pick the header accent color.
"""
import os

LANGUAGES = {
    ".rs": "Rust",
    ".py": "Python",
    ".json": "JSON",
    ".md": "Markdown",
    ".markdown": "Markdown",
    ".txt": "Text",
    ".js": "JavaScript",
    ".ts": "TypeScript",
    ".go": "Go",
    ".c": "C",
    ".h": "C",
    ".cpp": "C++",
    ".java": "Java",
    ".sh": "Shell",
    ".toml": "TOML",
    ".yaml": "YAML",
    ".yml": "YAML",
    ".html": "HTML",
    ".css": "CSS",
    ".lua": "Lua",
}

# Files recognised by their whole name rather than an extension
SPECIAL_FILES = {
    "Makefile": "Makefile",
    "Dockerfile": "Dockerfile",
    "Cargo.toml": "TOML",
}


def detect_language(filename: str):
    """Return the language label for `filename`, or None if unknown."""
    if not filename:
        return None
    name = os.path.basename(filename)
    if name in SPECIAL_FILES:
        return SPECIAL_FILES[name]
    _, ext = os.path.splitext(name)
    return LANGUAGES.get(ext.lower())
