import typing
from dataclasses import fields, is_dataclass
from enum import Enum

# Type marker key used for serialization/deserialization
_TYPE_KEY = "_type"

# Registry mapping type names to classes (populated lazily)
_TYPE_REGISTRY: dict[str, type] = {}


def _serialize_for_json(value: typing.Any) -> typing.Any:
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value) and not isinstance(value, type):
        result = {
            _TYPE_KEY: type(value).__name__,
        }
        for item in fields(value):
            result[item.name] = _serialize_for_json(getattr(value, item.name))
        return result
    if isinstance(value, dict):
        return {str(key): _serialize_for_json(val) for key, val in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_serialize_for_json(item) for item in value]
    return value


def serialize_extraction(value: typing.Any) -> dict:
    serialized = _serialize_for_json(value)
    if isinstance(serialized, dict):
        return serialized
    return {"value": serialized}


def _get_type_registry() -> dict[str, type]:
    """Lazily populate and return the type registry."""
    if _TYPE_REGISTRY:
        return _TYPE_REGISTRY

    # Import all dataclass types from data_types module
    from redline2text.extractors import data_types

    # Get all classes from data_types that are dataclasses
    for name in dir(data_types):
        obj = getattr(data_types, name)
        if isinstance(obj, type) and is_dataclass(obj):
            _TYPE_REGISTRY[name] = obj

    return _TYPE_REGISTRY


def _get_field_types(cls: type) -> dict[str, typing.Any]:
    """Get the type hints for all fields of a dataclass."""
    hints = typing.get_type_hints(cls)
    return hints


def _unwrap_optional(tp: typing.Any) -> tuple[typing.Any, bool]:
    """Unwrap Optional[X] (or X | None) to (X, True); otherwise (tp, False)."""
    args = typing.get_args(tp)
    if type(None) in args:
        non_none_args = [a for a in args if a is not type(None)]
        if len(non_none_args) == 1:
            return non_none_args[0], True
    return tp, False


def _deserialize_value(value: typing.Any, expected_type: typing.Any) -> typing.Any:
    """Deserialize a value according to its expected type."""
    if value is None:
        return None

    # Handle Optional types
    inner_type, is_optional = _unwrap_optional(expected_type)
    if is_optional:
        expected_type = inner_type

    if isinstance(value, dict) and _TYPE_KEY in value:
        return _deserialize_dataclass(value)

    # Handle generic types (list, tuple, dict)
    origin = typing.get_origin(expected_type)

    if origin is list:
        item_type = typing.get_args(expected_type)
        item_type = item_type[0] if item_type else typing.Any
        if isinstance(value, list):
            return [_deserialize_value(item, item_type) for item in value]
        return value

    if origin is tuple:
        # only homogeneous tuple[X, ...] fields are used
        item_type = typing.get_args(expected_type)
        item_type = item_type[0] if item_type else typing.Any
        if isinstance(value, list):
            return tuple(_deserialize_value(item, item_type) for item in value)
        return value

    if origin is dict:
        args = typing.get_args(expected_type)
        value_type = args[1] if len(args) > 1 else typing.Any
        if isinstance(value, dict):
            return {k: _deserialize_value(v, value_type) for k, v in value.items()}
        return value

    if isinstance(expected_type, type) and issubclass(expected_type, Enum):
        return expected_type(value)

    # Handle dataclass types
    registry = _get_type_registry()
    if isinstance(expected_type, type) and expected_type.__name__ in registry:
        if isinstance(value, dict):
            return _deserialize_dataclass(value, expected_type)
        return value

    # Return primitive values as-is
    return value


def _deserialize_dataclass(
    data: dict, expected_class: typing.Optional[type] = None
) -> typing.Any:
    """Deserialize a dictionary to a dataclass instance."""
    registry = _get_type_registry()

    # Determine the target class
    type_name = data.get(_TYPE_KEY)
    if type_name and type_name in registry:
        cls = registry[type_name]
    elif expected_class is not None:
        cls = expected_class
    else:
        # Can't determine the class, return dict as-is
        return data

    # Get field type hints
    field_types = _get_field_types(cls)
    field_names = {f.name for f in fields(cls)}

    # Build kwargs for constructor
    kwargs = {}
    for field_name in field_names:
        if field_name in data:
            field_type = field_types.get(field_name, typing.Any)
            kwargs[field_name] = _deserialize_value(data[field_name], field_type)

    return cls(**kwargs)


def deserialize_extraction(data: dict) -> typing.Any:
    """
    Deserialize a JSON dictionary back to an extraction result.

    This is the inverse of serialize_extraction(). Tracked items keep their
    ids, so analysis results stored against those ids re-attach after the
    same document is parsed again.

    Args:
        data: A dictionary produced by serialize_extraction() or to_json()

    Returns:
        An instance of the serialized dataclass, e.g. TrackedChangesContent

    Raises:
        ValueError: If the data doesn't contain valid type information

    Example:
        >>> content = next(read_file("contract.docx"))
        >>> json_data = content.to_json()
        >>> restored = deserialize_extraction(json_data)
        >>> assert restored.items == content.items
    """
    if not isinstance(data, dict):
        raise ValueError("Input must be a dictionary")

    if _TYPE_KEY not in data:
        raise ValueError(
            f"Input dictionary must contain '{_TYPE_KEY}' key for deserialization"
        )

    return _deserialize_dataclass(data)
