"""
Field composition helpers.

Two merge directions are used by the pipeline:

- ``deep_merge(base, override)``: combines structured call arguments in the
  order they were passed. Nested mappings are merged recursively, any other
  value in ``override`` replaces the one in ``base``.
- ``merge_defaults(caller, defaults)``: fills logger-level extra fields into a
  call's extras. A key supplied by the caller is kept as-is (including its
  whole nested value); keys only present in ``defaults`` are added.

Neither function mutates its inputs.
"""

from __future__ import annotations

import copy
from typing import Any, Mapping


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    merged: dict[str, Any] = {key: copy.deepcopy(value) for key, value in base.items()}
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def merge_defaults(caller: Mapping[str, Any], defaults: Mapping[str, Any]) -> dict[str, Any]:
    merged: dict[str, Any] = {key: copy.deepcopy(value) for key, value in caller.items()}
    for key, value in defaults.items():
        if key not in merged:
            merged[key] = copy.deepcopy(value)
    return merged
