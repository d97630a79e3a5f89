"""
Track Solo - Shared Utilities

Common helpers used across multiple modules to avoid duplication.
"""


def sanitize_entry_label(label: str) -> str:
    """
    Make a track label safe to use inside a ZIP entry name.

    Path separators are replaced so a track called "AC/DC" or "../x" cannot
    turn into a directory inside the archive.  Everything else, including an
    empty label, is kept as-is.
    """
    replacements = {
        "/": "_",
        "\\": "_",
    }
    result = label
    for old, new in replacements.items():
        result = result.replace(old, new)
    return result
