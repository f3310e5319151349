# kindguard/runtime/paths.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from kindguard.interfaces.types import Path


def path_literal(path: Path) -> str:
    """
    Render a validation path as a chain of subscripts, e.g. ``["items"][0]``.

    :param path: Keys leading from the validation root to a value.
    :return: The rendered path; empty for the root.
    """
    parts = []
    for key in path:
        if isinstance(key, str):
            parts.append(f'["{key}"]')
        else:
            parts.append(f"[{key}]")
    return "".join(parts)
