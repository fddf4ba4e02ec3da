"""Deep-partial patches over a document's JSON form.

Patch rules:

* dict into dict merges key by key, recursively;
* list into list replaces the whole list;
* dict into list addresses entries by ``id`` (or integer index) and merges
  each addressed entry in place;
* anything else replaces the value.
"""

from __future__ import annotations

import copy
from typing import Any

from pagecraft.errors import InvalidPatch, InvalidPath


def merge_patch(base: Any, patch: Any) -> Any:
    """Return ``base`` with ``patch`` applied.  Neither input is mutated."""
    if isinstance(patch, dict) and isinstance(base, dict):
        merged = dict(base)
        for key, value in patch.items():
            merged[key] = merge_patch(base[key], value) if key in base else copy.deepcopy(value)
        return merged
    if isinstance(patch, dict) and isinstance(base, list):
        merged_list = list(base)
        for key, value in patch.items():
            index = locate(merged_list, key)
            if index is None:
                raise InvalidPatch(f"No list entry addressed by {key!r}")
            merged_list[index] = merge_patch(merged_list[index], value)
        return merged_list
    return copy.deepcopy(patch)


def locate(items: list[Any], key: Any) -> int | None:
    """Find a list entry by ``id`` first, then by integer index."""
    for index, item in enumerate(items):
        if isinstance(item, dict) and item.get("id") == key:
            return index
    if isinstance(key, bool):
        return None
    if isinstance(key, str) and key.isdigit():
        key = int(key)
    if isinstance(key, int) and 0 <= key < len(items):
        return key
    return None


def split_path(path: str | tuple[Any, ...] | list[Any]) -> list[Any]:
    if isinstance(path, str):
        return [segment for segment in path.split(".") if segment]
    return list(path)


def toggle_at(data: dict[str, Any], path: str | tuple[Any, ...] | list[Any]) -> dict[str, Any]:
    """Return a copy of ``data`` with the boolean at ``path`` flipped.

    Raises:
        InvalidPath: If the path does not resolve or the leaf is not a bool.
    """
    segments = split_path(path)
    if not segments:
        raise InvalidPath(str(path), "empty path")
    result = copy.deepcopy(data)
    node: Any = result
    for depth, segment in enumerate(segments):
        last = depth == len(segments) - 1
        if isinstance(node, dict):
            if segment not in node:
                raise InvalidPath(str(path), f"no key {segment!r}")
            key: Any = segment
        elif isinstance(node, list):
            key = locate(node, segment)
            if key is None:
                raise InvalidPath(str(path), f"no entry {segment!r}")
        else:
            raise InvalidPath(str(path), f"{segment!r} is below a leaf value")
        if last:
            if not isinstance(node[key], bool):
                raise InvalidPath(str(path), "leaf is not a boolean")
            node[key] = not node[key]
        else:
            node = node[key]
    return result
