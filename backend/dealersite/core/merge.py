from __future__ import annotations

from collections.abc import Mapping
from copy import deepcopy
from typing import Any, Iterable


def deep_merge(target: Mapping[str, Any] | None, source: Mapping[str, Any] | None) -> dict[str, Any]:
    """
    Merge ``source`` onto ``target`` and return a new dict.

    Nested mappings merge key by key. Lists and scalars from ``source``
    replace the target value wholesale. A ``None`` value in ``source`` means
    "no override": the target keeps whatever it had, so ``None`` cannot be
    used to clear a field. Neither input is mutated.
    """
    result: dict[str, Any] = deepcopy(dict(target or {}))
    for key, value in (source or {}).items():
        if value is None:
            continue
        if isinstance(value, Mapping):
            existing = result.get(key)
            base = existing if isinstance(existing, Mapping) else {}
            result[key] = deep_merge(base, value)
        else:
            result[key] = deepcopy(value)
    return result


def merge_layers(layers: Iterable[Mapping[str, Any] | None]) -> dict[str, Any]:
    """Fold layers lowest precedence first; empty layers are skipped."""
    merged: dict[str, Any] = {}
    for layer in layers:
        if not layer:
            continue
        merged = deep_merge(merged, layer)
    return merged


# Theme folding. These are shallower than deep_merge on purpose: tokens and
# components overwrite per key, page blocks merge by position.


def merge_tokens(*layers: Mapping[str, str] | None) -> dict[str, str]:
    merged: dict[str, str] = {}
    for layer in layers:
        if layer:
            merged.update(layer)
    return merged


def merge_blocks(parent: list | None, child: list | None) -> list:
    """
    Positional merge: the child's block at index i replaces the parent's
    block at index i; indices the child leaves out (or sets to ``None``)
    inherit the parent's block.
    """
    parent = list(parent or [])
    if child is None:
        return parent
    merged = []
    for index in range(max(len(parent), len(child))):
        block = child[index] if index < len(child) else None
        if block is None and index < len(parent):
            block = parent[index]
        if block is not None:
            merged.append(block)
    return merged


def merge_pages(
    parent: Mapping[str, Mapping[str, Any]] | None,
    child: Mapping[str, Mapping[str, Any]] | None,
) -> dict[str, dict[str, Any]]:
    parent = parent or {}
    child = child or {}
    merged: dict[str, dict[str, Any]] = {}
    routes = list(parent) + [route for route in child if route not in parent]
    for route in routes:
        parent_page = parent.get(route) or {}
        child_page = child.get(route) or {}
        merged[route] = {
            "seo": {**(parent_page.get("seo") or {}), **(child_page.get("seo") or {})},
            "blocks": merge_blocks(parent_page.get("blocks"), child_page.get("blocks")),
        }
    return merged


def merge_components(*layers: Mapping[str, Any] | None) -> dict[str, Any]:
    merged: dict[str, Any] = {}
    for layer in layers:
        if layer:
            merged.update(layer)
    return merged
