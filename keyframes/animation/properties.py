"""
Writable property handles.

The engine only ever calls ``get()`` and ``set(value)`` on a target. These
adapters expose plain values, object attributes and Qt object properties
through that contract; the presentation layer keeps ownership of the
underlying objects.
"""
from typing import Any, Callable, Generic, Optional, Protocol, TypeVar, runtime_checkable

from PySide6.QtCore import QObject

from keyframes.logging.logger import get_logger

logger = get_logger(__name__)

T = TypeVar('T')


@runtime_checkable
class WritableProperty(Protocol[T]):
    """Mutable external value referenced (never owned) by a schedule."""

    def get(self) -> T:
        ...

    def set(self, value: T) -> None:
        ...


class ValueProperty(Generic[T]):
    """Standalone value holder with an optional change listener."""

    def __init__(self, value: T, name: str = "",
                 on_change: Optional[Callable[[T, T], None]] = None):
        self._value = value
        self.name = name
        self._on_change = on_change

    def get(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        old = self._value
        self._value = value
        if self._on_change is not None and old != value:
            self._on_change(old, value)

    def __repr__(self) -> str:
        label = f"{self.name}=" if self.name else ""
        return f"ValueProperty({label}{self._value!r})"


class AttributeProperty:
    """Exposes ``obj.<attribute>`` as a writable property."""

    def __init__(self, obj: Any, attribute: str):
        if not hasattr(obj, attribute):
            raise AttributeError(f"{type(obj).__name__} has no attribute {attribute!r}")
        self._obj = obj
        self._attribute = attribute

    def get(self) -> Any:
        return getattr(self._obj, self._attribute)

    def set(self, value: Any) -> None:
        setattr(self._obj, self._attribute, value)

    def __repr__(self) -> str:
        return f"AttributeProperty({type(self._obj).__name__}.{self._attribute})"


class QtProperty:
    """
    Exposes a QObject property as a writable property.

    Prefers the Qt accessor pair (``opacity()`` / ``setOpacity()``) when the
    object has one and falls back to ``property()`` / ``setProperty()``, which
    also covers dynamic properties.
    """

    def __init__(self, target: QObject, property_name: str):
        if not property_name:
            raise ValueError("QtProperty requires a property_name")
        self._target = target
        self._name = property_name
        self._setter_name = f"set{property_name[:1].upper()}{property_name[1:]}"

    @property
    def target(self) -> QObject:
        return self._target

    @property
    def property_name(self) -> str:
        return self._name

    def get(self) -> Any:
        getter = getattr(self._target, self._name, None)
        if callable(getter):
            return getter()
        return self._target.property(self._name)

    def set(self, value: Any) -> None:
        setter = getattr(self._target, self._setter_name, None)
        if callable(setter):
            setter(value)
            return
        # setProperty returns False for dynamic properties; that is expected.
        self._target.setProperty(self._name, value)

    def __repr__(self) -> str:
        return f"QtProperty({type(self._target).__name__}.{self._name})"
