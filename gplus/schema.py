"""Column mapping, optimistic-lock metadata and update maps for dataclass models."""

from __future__ import annotations

import dataclasses
import inspect
import threading
import types
import typing
from dataclasses import dataclass
from typing import Any

from gplus.naming import ns_column_name

FieldPath = tuple


@dataclass(frozen=True)
class ColumnInfo:
    """A field location inside a model and the column it maps to."""

    path: tuple
    column_name: str


@dataclass(frozen=True)
class VersionFieldInfo:
    """The field marked ``gplus: version`` used for optimistic locking."""

    path: tuple
    column_name: str


_cache_lock = threading.Lock()
_column_cache: dict = {}
_version_cache: dict = {}

_SIMPLE_NAMES = {
    "int": int,
    "str": str,
    "float": float,
    "bool": bool,
    "bytes": bytes,
    "complex": complex,
    "None": type(None),
    "NoneType": type(None),
}

_UNRESOLVED = object()


def parse_tag_setting(text: str, sep: str) -> dict:
    """Parse a ``key:value;flag`` tag into a dict with upper-cased keys."""
    settings = {}
    names = text.split(sep)
    pending = iter(names)
    for name in pending:
        while name.endswith("\\"):
            following = next(pending, "")
            name = name[:-1] + sep + following
        key, has_value, value = name.partition(":")
        key = key.upper().strip()
        if has_value:
            settings[key] = value
        elif key:
            settings[key] = key
    return settings


def _resolve_class(model: Any) -> type:
    if model is None:
        raise TypeError("model must be a dataclass type or instance, not None")
    cls = model if isinstance(model, type) else type(model)
    if not dataclasses.is_dataclass(cls):
        raise TypeError(f"{cls.__name__} is not a dataclass")
    return cls


def _split_top_level(text: str, sep: str) -> list:
    """Split on a separator that is not nested inside brackets."""
    parts = []
    depth = 0
    current = []
    for ch in text:
        if ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
        if ch == sep and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
    parts.append("".join(current))
    return [p.strip() for p in parts]


def _lookup_name(name: str, cls: type) -> Any:
    if name == cls.__name__:
        return cls
    if name in _SIMPLE_NAMES:
        return _SIMPLE_NAMES[name]
    module = inspect.getmodule(cls)
    namespace = vars(module) if module is not None else {}
    head, *rest = name.split(".")
    if head not in namespace:
        return _UNRESOLVED
    value = namespace[head]
    for attr in rest:
        value = getattr(value, attr, _UNRESOLVED)
        if value is _UNRESOLVED:
            return _UNRESOLVED
    return value


def _make_union(members: list) -> Any:
    if len(members) == 1:
        return members[0]
    return typing.Union[tuple(members)]


def _resolve_annotation(text: str, cls: type) -> Any:
    """Resolve a string annotation for the few shapes that matter here."""
    text = text.strip()
    alternatives = _split_top_level(text, "|")
    if len(alternatives) > 1:
        members = [_resolve_annotation(part, cls) for part in alternatives]
        if any(isinstance(m, str) for m in members):
            return text
        return _make_union(members)
    if text.endswith("]") and "[" in text:
        outer, _, inner = text[:-1].partition("[")
        outer = outer.strip()
        short = outer.rsplit(".", 1)[-1]
        if short in ("Optional", "Union"):
            args = [_resolve_annotation(a, cls) for a in _split_top_level(inner, ",")]
            if any(isinstance(a, str) for a in args):
                return text
            if short == "Optional":
                args.append(type(None))
            return _make_union(args)
        return text
    value = _lookup_name(text, cls)
    return text if value is _UNRESOLVED else value


def _field_hints(cls: type) -> dict:
    """Map field names to their annotations, resolving string annotations."""
    hints = {}
    for f in dataclasses.fields(cls):
        ann = f.type
        if isinstance(ann, str):
            ann = _resolve_annotation(ann, cls)
        hints[f.name] = ann
    return hints


def _embed_target(hint: Any) -> tuple:
    """Return the dataclass behind an annotation and whether it may be None."""
    if isinstance(hint, type) and dataclasses.is_dataclass(hint):
        return hint, False
    origin = typing.get_origin(hint)
    if origin is typing.Union or origin is types.UnionType:
        args = typing.get_args(hint)
        optional = type(None) in args
        for arg in args:
            if isinstance(arg, type) and dataclasses.is_dataclass(arg):
                return arg, optional
    return None, False


def _exported_fields(cls: type):
    hints = _field_hints(cls)
    for f in dataclasses.fields(cls):
        if f.name.startswith("_"):
            continue
        yield f, hints.get(f.name, f.type)


def _parse_fields(cls: type, tag: str, label: str, prefix: tuple, res: dict) -> None:
    for f, hint in _exported_fields(cls):
        settings = parse_tag_setting(f.metadata.get(tag, ""), ";")
        if "-" in settings:
            continue
        path = prefix + (f.name,)
        if f.metadata.get("anonymous") or "EMBEDDED" in settings:
            target, is_pointer = _embed_target(hint)
            if target is not None and not is_pointer:
                _parse_fields(target, tag, label, path, res)
            continue
        res[path] = settings.get(label.upper(), ns_column_name(f.name))


def reflect_struct_schema(model: Any, tag: str, label: str) -> dict:
    """Map each field path of a dataclass model to its column name; cached per type."""
    cls = _resolve_class(model)
    key = (cls, tag, label)
    with _cache_lock:
        cached = _column_cache.get(key)
    if cached is not None:
        return cached
    res: dict = {}
    _parse_fields(cls, tag, label, (), res)
    with _cache_lock:
        return _column_cache.setdefault(key, res)


def clear_schema_cache() -> None:
    """Forget every cached column mapping and version field lookup."""
    with _cache_lock:
        _column_cache.clear()
        _version_cache.clear()


def init_ptr_embeds(instance: Any) -> None:
    """Allocate every optional anonymous embed that is None, recursively."""
    cls = _resolve_class(instance)
    hints = _field_hints(cls)
    for f in dataclasses.fields(cls):
        if not f.metadata.get("anonymous"):
            continue
        target, is_pointer = _embed_target(hints.get(f.name, f.type))
        if target is None or not is_pointer:
            continue
        value = getattr(instance, f.name)
        if value is None:
            value = target()
            setattr(instance, f.name, value)
        init_ptr_embeds(value)


def _find_version(cls: type, prefix: tuple):
    for f, hint in _exported_fields(cls):
        path = prefix + (f.name,)
        if f.metadata.get("anonymous"):
            target, is_pointer = _embed_target(hint)
            if target is not None and not is_pointer:
                info = _find_version(target, path)
                if info is not None:
                    return info
            continue
        if f.metadata.get("gplus") != "version" or hint is not int:
            continue
        settings = parse_tag_setting(f.metadata.get("gorm", ""), ";")
        column = settings.get("COLUMN") or ns_column_name(f.name)
        return VersionFieldInfo(path=path, column_name=column)
    return None


def find_version_field(model_type: Any):
    """Scan a model for its integer version field; None when there is none."""
    return _find_version(_resolve_class(model_type), ())


def get_version_field(model_type: Any):
    """Cached form of :func:`find_version_field`."""
    cls = _resolve_class(model_type)
    with _cache_lock:
        if cls in _version_cache:
            return _version_cache[cls]
    info = find_version_field(cls)
    with _cache_lock:
        return _version_cache.setdefault(cls, info)


def _walk(entity: Any, path: tuple) -> Any:
    for name in path:
        entity = getattr(entity, name)
    return entity


def read_version_value(entity: Any, info: VersionFieldInfo) -> int:
    """Read the version field of an entity."""
    return int(_walk(entity, info.path))


def write_version_value(entity: Any, info: VersionFieldInfo, new_value: int) -> None:
    """Store a new value in the version field of an entity."""
    parent = _walk(entity, info.path[:-1])
    setattr(parent, info.path[-1], int(new_value))


def _is_zero(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (bool, int, float, complex, str, bytes)):
        return not value
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return all(_is_zero(getattr(value, f.name)) for f in dataclasses.fields(value))
    if isinstance(value, (list, tuple, dict, set, frozenset)):
        return len(value) == 0
    return False


def _fill_update_map(entity, prefix, columns, excluded, result) -> None:
    cls = type(entity)
    for f, hint in _exported_fields(cls):
        path = prefix + (f.name,)
        value = getattr(entity, f.name)
        if f.metadata.get("anonymous"):
            target, is_pointer = _embed_target(hint)
            if target is not None and not is_pointer:
                if value is not None:
                    _fill_update_map(value, path, columns, excluded, result)
                continue
        if path == excluded:
            continue
        column = columns.get(path)
        if column is None:
            continue
        if "PRIMARYKEY" in parse_tag_setting(f.metadata.get("gorm", ""), ";"):
            continue
        if _is_zero(value):
            continue
        result[column] = value


def build_update_map(entity: Any, info) -> dict:
    """Collect non-zero, non-key columns of an entity, leaving out the version field."""
    _resolve_class(entity)
    columns = reflect_struct_schema(entity, "gorm", "COLUMN")
    excluded = info.path if info is not None else None
    result: dict = {}
    _fill_update_map(entity, (), columns, excluded, result)
    return result