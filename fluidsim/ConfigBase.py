"""Base class for simulation configurations with change notification and GUI metadata.

Uses dataclasses with field metadata for range constraints and GUI integration.
"""

from __future__ import annotations

import copy
import math
import threading
import warnings
from dataclasses import dataclass, fields, field, MISSING
from typing import Any, Callable, overload, TypeVar

T = TypeVar('T')


# Valid metadata keys for config fields
METADATA_KEYS = {
    "clamp",        # Assignments are clamped into [min, max]
    "description",  # Field description for tooltips/help
    "fixed",        # Field can be set at init, then becomes readonly
    "label",        # Custom display label (auto-generated if omitted)
    "min",          # Minimum value (GUI hint, enforced with clamp)
    "max",          # Maximum value (GUI hint, enforced with clamp)
}


def config_field(
    default: T = MISSING,
    *,
    default_factory: Any = MISSING,
    description: str = "",
    label: str | None = None,
    min: float | int | None = None,
    max: float | int | None = None,
    clamp: bool = False,
    fixed: bool = False,
    init: bool = True,
    repr: bool = True,
    compare: bool = True,
) -> T:
    """Create a config field with metadata.

    Note: Returns Field at runtime but typed as T for type checker compatibility.

    Args:
        default: Default value
        default_factory: Factory function for mutable defaults
        description: Field description for tooltips/help
        label: Custom display label (auto-generated if omitted)
        min: Minimum value
        max: Maximum value
        clamp: Silently clamp assigned values into [min, max]
        fixed: Field can be set during __init__, then becomes locked
        init: Include field in __init__ signature
        repr: Include field in __repr__ output
        compare: Include field in comparison operations

    Examples:
        >>> iterations: int = config_field(20, min=0, max=100, clamp=True, description="Jacobi iterations")
        >>> capacity: int = config_field(1024, fixed=True, description="Queue capacity")
    """
    metadata: dict[str, Any] = {}
    if description:
        metadata["description"] = description
    if label:
        metadata["label"] = label
    if min is not None:
        metadata["min"] = min
    if max is not None:
        metadata["max"] = max
    if clamp:
        metadata["clamp"] = True
    if fixed:
        metadata["fixed"] = True

    return field(  # type: ignore[return-value]
        default=default,
        default_factory=default_factory,
        init=init,
        repr=repr,
        compare=compare,
        metadata=metadata
    )


def _generate_label(name: str) -> str:
    """Convert field name to human-readable label, preserving uppercase acronyms.

    Examples:
        "vel_dissipation" -> "Vel Dissipation"
        "TCP_PORT" -> "TCP PORT"
    """
    parts: list[str] = name.split('_')
    result: list[str] = []
    for part in parts:
        if part.isupper() and len(part) > 1:
            result.append(part)
        else:
            result.append(part.capitalize())
    return ' '.join(result)


def _reject_nan(owner: str, name: str, value: Any, metadata: Any) -> None:
    """Ranged fields never take NaN, it compares false against both bounds."""
    if ('min' in metadata or 'max' in metadata) and isinstance(value, float) and math.isnan(value):
        raise ValueError(f"{owner}.{name}: NaN is not a valid value")


def _clamp(value: Any, metadata: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return value
    if 'min' in metadata and value < metadata['min']:
        value = metadata['min']
    if 'max' in metadata and value > metadata['max']:
        value = metadata['max']
    return value


@dataclass
class ConfigBase:
    """Base class for configs with change notification and GUI metadata.

    Subclasses use dataclass fields with metadata to define parameters:

    Example:
        @dataclass
        class MyConfig(ConfigBase):
            strength: float = config_field(1.0, min=0.0, max=10.0, clamp=True, description="Strength")
            capacity: int = config_field(64, fixed=True, description="Queue capacity")

    Metadata flags:
        - fixed: Field can be set during __init__, but becomes readonly after
        - min/max: Hints for GUI, enforced when clamp is set
        - clamp: Out-of-range assignments are silently clamped
        - description: Field documentation
        - label: Custom display name (auto-generated from field name if omitted)

    Features:
        - Thread-safe change notification via listeners
        - Consistent copies through snapshot()
        - GUI metadata with auto-generated labels from field names
    """

    def __post_init__(self) -> None:
        object.__setattr__(self, '_listeners', set())
        object.__setattr__(self, '_lock', threading.Lock())

        fixed_set: set[str] = set()
        for f in fields(self):
            for key in f.metadata:
                if key not in METADATA_KEYS:
                    warnings.warn(
                        f"{self.__class__.__name__}.{f.name}: unknown metadata key '{key}' "
                        f"(valid keys: {', '.join(sorted(METADATA_KEYS))})",
                        UserWarning,
                        stacklevel=2
                    )

            if f.metadata.get('fixed'):
                fixed_set.add(f.name)

            val = getattr(self, f.name)
            _reject_nan(self.__class__.__name__, f.name, val, f.metadata)
            if f.metadata.get('clamp'):
                object.__setattr__(self, f.name, _clamp(val, f.metadata))
            elif 'min' in f.metadata and 'max' in f.metadata:
                min_val, max_val = f.metadata['min'], f.metadata['max']
                if not (min_val <= val <= max_val):
                    warnings.warn(
                        f"{self.__class__.__name__}.{f.name}: value {val} "
                        f"is outside valid range [{min_val}, {max_val}]",
                        UserWarning,
                        stacklevel=2
                    )

        object.__setattr__(self, '_fixed_fields', fixed_set)
        object.__setattr__(self, '_initialized', True)

    def __setattr__(self, name: str, value: Any) -> None:
        """Intercept attribute changes for validation and notification.

        Raises:
            AttributeError: If field is undeclared, or fixed.
            ValueError: If a ranged field is set to NaN.
        """
        if name.startswith('_'):
            object.__setattr__(self, name, value)
            return

        declared = {f.name: f for f in fields(self)}
        if name not in declared:
            raise AttributeError(
                f"Cannot set undeclared attribute '{name}' on {self.__class__.__name__}. "
            )

        if not hasattr(self, '_initialized'):
            object.__setattr__(self, name, value)
            return

        if name in self._fixed_fields: # type: ignore
            raise AttributeError(f"Cannot modify field '{name}'")

        _reject_nan(self.__class__.__name__, name, value, declared[name].metadata)
        if declared[name].metadata.get('clamp'):
            value = _clamp(value, declared[name].metadata)

        with self._lock:  # type: ignore
            object.__setattr__(self, name, value)
            listeners_copy = list(self._listeners) # type: ignore

        # Notify listeners OUTSIDE lock to prevent deadlock
        for listener in listeners_copy:
            listener()

    def __deepcopy__(self, memo: dict) -> 'ConfigBase':
        clone = object.__new__(self.__class__)
        for f in fields(self):
            object.__setattr__(clone, f.name, copy.deepcopy(getattr(self, f.name), memo))
        object.__setattr__(clone, '_listeners', set())
        object.__setattr__(clone, '_lock', threading.Lock())
        object.__setattr__(clone, '_fixed_fields', set(self._fixed_fields)) # type: ignore
        object.__setattr__(clone, '_initialized', True)
        return clone

    def snapshot(self) -> 'ConfigBase':
        """Independent copy of the current values, without listeners.

        Taken under the config lock, so a snapshot never mixes values from two writes.
        """
        with self._lock:  # type: ignore
            return copy.deepcopy(self)

    @overload
    def watch(self, callback: Callable[[], None], attribute: None = None) -> Callable[[], None]:
        ...

    @overload
    def watch(self, callback: Callable[[Any], None], attribute: str) -> Callable[[], None]:
        ...

    def watch(self, callback: Callable, attribute: str | None = None) -> Callable[[], None]:
        """Watch for config changes.

        Args:
            callback: callback() for all changes, or callback(value) when attribute is given.
            attribute: Optional attribute name to watch.

        Returns:
            Function that when called, stops watching.

        Raises:
            AttributeError: If the specified attribute does not exist.
        """
        if attribute is None:
            with self._lock:  # type: ignore
                self._listeners.add(callback)  # type: ignore

            def unwatch() -> None:
                with self._lock:  # type: ignore
                    self._listeners.discard(callback)  # type: ignore
            return unwatch
        else:
            field_names = {f.name for f in fields(self)}
            if attribute not in field_names:
                raise AttributeError(
                    f"Attribute '{attribute}' not found in {self.__class__.__name__}. "
                    f"Available attributes: {', '.join(sorted(field_names))}"
                )

            def wrapper() -> None:
                callback(getattr(self, attribute))

            with self._lock:  # type: ignore
                self._listeners.add(wrapper)  # type: ignore

            def unwatch() -> None:
                with self._lock:  # type: ignore
                    self._listeners.discard(wrapper)  # type: ignore
            return unwatch

    def info(self, attribute: str | None = None) -> dict[str, Any] | dict[str, dict[str, Any]]:
        """Get field metadata for GUI generation.

        Returns:
            {field_name: {metadata_dict}, ...}, or a single metadata dict when attribute is given.

        Raises:
            AttributeError: If the specified field does not exist.
        """
        result: dict[str, dict[str, Any]] = {}
        for f in fields(self):
            if f.default is not MISSING:
                default_val = f.default
            elif f.default_factory is not MISSING:
                default_val = f.default_factory()
            else:
                default_val = None

            result[f.name] = {
                **f.metadata,
                "type": f.type,
                "default": default_val,
                "value": getattr(self, f.name),
            }
            result[f.name].setdefault("label", _generate_label(f.name))
            result[f.name].setdefault("description", "")
            result[f.name].setdefault("min", None)
            result[f.name].setdefault("max", None)
            result[f.name].setdefault("clamp", False)
            result[f.name].setdefault("fixed", False)

        if attribute is not None:
            if attribute not in result:
                raise AttributeError(f"Attribute '{attribute}' not found in {self.__class__.__name__}")
            return result[attribute]
        return result
