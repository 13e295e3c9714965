"""
Article image keys.

Images are stored one folder per id prefix:

    10/108775015.jpg
    11/118458003.jpg

The key depends only on the article id, never on how it is later turned into
a URL.
"""

from __future__ import annotations

DEFAULT_PREFIX_LENGTH = 2
DEFAULT_FILE_EXTENSION = ".jpg"


def derive_key(
    article_id: int | str,
    *,
    prefix_length: int = DEFAULT_PREFIX_LENGTH,
    file_extension: str = DEFAULT_FILE_EXTENSION,
) -> str:
    """
    Build the storage key `<prefix>/<id><ext>` for an article id.
    """
    article = str(article_id).strip()
    if not article:
        raise ValueError("Article id is empty.")
    if prefix_length < 1:
        raise ValueError("Key prefix length must be >= 1.")

    folder = article[:prefix_length]
    return f"{folder}/{article}{file_extension}"
