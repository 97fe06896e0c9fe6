"""
File utility functions for PDF Finder.

Provides the size/modification signature used for change detection and
title derivation from filenames.
"""

import os
from pathlib import Path
from typing import Tuple, Union


def get_file_signature(filepath: Union[str, Path]) -> Tuple[int, int]:
    """
    Get the change-detection signature of a file.

    Args:
        filepath: Path to the file. Symbolic links are followed.

    Returns:
        Tuple of (size in bytes, modification time in whole seconds).

    Raises:
        OSError: If the file cannot be stat'ed.
    """
    stat = os.stat(filepath)
    return stat.st_size, int(stat.st_mtime)


def title_from_path(filepath: Union[str, Path]) -> str:
    """Derive a document title from its filename stem."""
    return Path(filepath).stem or "Untitled"
