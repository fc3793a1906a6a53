# skinswap/core/utils.py

from collections.abc import Mapping, MutableMapping, MutableSequence, Sequence
from typing import Any, Tuple, Union

from skinswap.core.contracts import PropertyPath, PropertyPathError, PropertyTarget

_MISSING = object()


def _parse_index(segment: str, path: str) -> int:
    # 只接受非负整数下标，`-1` 这类写法不从末尾取值
    if not (segment.isascii() and segment.isdigit()):
        raise PropertyPathError(path, segment, "is not a valid index")
    return int(segment)


def _read_segment(obj: Any, segment: str, path: str) -> Any:
    if isinstance(obj, PropertyTarget):
        try:
            return obj.get_property(segment)
        except KeyError:
            raise PropertyPathError(path, segment) from None

    if isinstance(obj, Mapping):
        if segment not in obj:
            raise PropertyPathError(path, segment)
        return obj[segment]

    if isinstance(obj, Sequence) and not isinstance(obj, (str, bytes)):
        index = _parse_index(segment, path)
        try:
            return obj[index]
        except IndexError:
            raise PropertyPathError(path, segment, "is out of range") from None

    value = getattr(obj, segment, _MISSING)
    if value is _MISSING or segment.startswith('_'):
        raise PropertyPathError(path, segment)
    return value


def _write_segment(obj: Any, segment: str, value: Any, path: str) -> None:
    if isinstance(obj, PropertyTarget):
        try:
            obj.set_property(segment, value)
        except KeyError:
            raise PropertyPathError(path, segment) from None
        return

    if isinstance(obj, MutableMapping):
        if segment not in obj:
            raise PropertyPathError(path, segment)
        obj[segment] = value
        return

    if isinstance(obj, MutableSequence):
        index = _parse_index(segment, path)
        try:
            obj[index] = value
        except IndexError:
            raise PropertyPathError(path, segment, "is out of range") from None
        return

    if segment.startswith('_') or not hasattr(obj, segment):
        raise PropertyPathError(path, segment)
    try:
        setattr(obj, segment, value)
    except (AttributeError, TypeError, ValueError) as e:
        raise PropertyPathError(path, segment, f"is not writable ({e})") from None


def navigate_to_parent(root_obj: Any, path: Union[str, PropertyPath]) -> Tuple[Any, str]:
    """
    Walks a nested property structure and returns the PARENT object and the FINAL segment.

    Example: for `sprite:frames:0`, it returns the list at root.sprite.frames and "0".
    This lets the caller read or write the final segment.

    Segments are followed over PropertyTarget objects (get_property), mappings,
    sequences (integer segments) and plain object attributes.

    Raises:
        PropertyPathError if an intermediate segment cannot be followed.
    """
    property_path = PropertyPath.parse(path)
    raw = str(property_path)

    current_obj = root_obj
    for segment in property_path.segments[:-1]:
        current_obj = _read_segment(current_obj, segment, raw)
        if current_obj is None:
            raise PropertyPathError(raw, segment, "is null")

    return current_obj, property_path.segments[-1]


def get_indexed(root_obj: Any, path: Union[str, PropertyPath]) -> Any:
    parent, key = navigate_to_parent(root_obj, path)
    return _read_segment(parent, key, str(PropertyPath.parse(path)))


def set_indexed(root_obj: Any, path: Union[str, PropertyPath], value: Any) -> None:
    """Writes `value` at `path`. The final segment must already exist; nothing is created."""
    parent, key = navigate_to_parent(root_obj, path)
    _write_segment(parent, key, value, str(PropertyPath.parse(path)))
