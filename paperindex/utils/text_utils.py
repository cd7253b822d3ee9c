"""
Text utility functions for the paper index.

Provides tag splitting and joining in the stored format, author list
normalization, and the substring predicate shared by keyword and tag search.
"""

import re
from typing import Iterable, List

TAG_DELIMITER = ", "
AUTHOR_DELIMITER = ", "

_TAG_SPLIT_PATTERN = re.compile(r"[,\s]+")


def split_tags(value) -> List[str]:
    """
    Split a stored tag field into individual tags.

    Tags are separated by commas and/or whitespace. A hand-edited YAML list
    is accepted as well. Duplicates are dropped, first occurrence wins.

    Args:
        value: Tag field as a string, list, or None.

    Returns:
        Ordered list of distinct tags.
    """
    if not value:
        return []

    if isinstance(value, (list, tuple, set)):
        value = ",".join(str(item) for item in value)

    tags = []
    for tag in _TAG_SPLIT_PATTERN.split(str(value)):
        if tag and tag not in tags:
            tags.append(tag)

    return tags


def join_tags(tags: Iterable[str]) -> str:
    """Join tags into the stored comma-separated form."""
    return TAG_DELIMITER.join(tags)


def split_authors(value) -> List[str]:
    """
    Split a stored author field into author tokens.

    Args:
        value: Author field as a string, list, or None.

    Returns:
        Ordered list of author tokens.
    """
    if not value:
        return []

    if isinstance(value, (list, tuple)):
        return [str(author).strip() for author in value if str(author).strip()]

    return [author.strip() for author in str(value).split(",") if author.strip()]


def join_authors(authors: Iterable[str]) -> str:
    """Join author tokens into the stored comma-separated form."""
    return AUTHOR_DELIMITER.join(authors)


def contains_all(text: str, needles: Iterable[str], case_sensitive: bool = True) -> bool:
    """
    Check that every needle occurs in text as a substring.

    Args:
        text: String to search in.
        needles: Substrings that must all be present.
        case_sensitive: If False, compare case-insensitively.

    Returns:
        True if all needles are found.
    """
    text = text or ""

    if not case_sensitive:
        text = text.casefold()
        return all(needle.casefold() in text for needle in needles)

    return all(needle in text for needle in needles)


if __name__ == "__main__":
    print("=== split_tags ===")
    print(split_tags("new, unread"))
    print(split_tags("climate,  floods new, new"))

    print("\n=== split_authors ===")
    print(split_authors("Bevacqua, etal"))

    print("\n=== contains_all ===")
    name = "2019_Bevacqua_etal_SciAdv_CompoundFlooding.pdf"
    print(contains_all(name, ["2019", "Bevacqua"]))
    print(contains_all(name, ["2019", "bevacqua"]))
    print(contains_all(name, ["2019", "bevacqua"], case_sensitive=False))
