#!/usr/bin/env python3
"""
Filename utilities for per-page output.

Converts between wiki page titles and safe filenames.
"""

RESERVED = [
    ("/", "_SLASH_"),
    ("\\", "_BACKSLASH_"),
    (":", "_COLON_"),
    ("*", "_STAR_"),
    ("?", "_QUESTION_"),
    ('"', "_QUOTE_"),
    ("<", "_LT_"),
    (">", "_GT_"),
    ("|", "_PIPE_"),
]


def title_to_filename(title: str, extension: str = ".json") -> str:
    """
    Convert a wiki page title to a safe filename.

    Args:
        title: Wiki page title (e.g., "Category:Weapons")
        extension: Suffix appended to the escaped title

    Returns:
        Safe filename (e.g., "Category_COLON_Weapons.json")
    """
    safe = title
    for char, token in RESERVED:
        safe = safe.replace(char, token)
    return safe + extension


def filename_to_title(filename: str, extension: str = ".json") -> str:
    """
    Convert a filename back to a wiki page title.

    Args:
        filename: Safe filename (e.g., "Category_COLON_Weapons.json")
        extension: Suffix to strip

    Returns:
        Wiki page title (e.g., "Category:Weapons")
    """
    title = filename[: -len(extension)] if extension and filename.endswith(extension) else filename
    for char, token in RESERVED:
        title = title.replace(token, char)
    return title
