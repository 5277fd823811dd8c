"""Tests for writable property adapters."""
import pytest
from PySide6.QtCore import QObject
from PySide6.QtWidgets import QGraphicsOpacityEffect

from keyframes.animation.properties import (
    AttributeProperty,
    QtProperty,
    ValueProperty,
    WritableProperty,
)


def test_value_property_roundtrip_and_listener():
    changes = []
    prop = ValueProperty(1, name="x", on_change=lambda old, new: changes.append((old, new)))
    prop.set(1)
    prop.set(2)
    assert prop.get() == 2
    assert changes == [(1, 2)]
    assert "x=" in repr(prop)


def test_attribute_property():
    class Box:
        width = 10

    box = Box()
    prop = AttributeProperty(box, "width")
    prop.set(42)
    assert box.width == 42
    assert prop.get() == 42


def test_attribute_property_requires_existing_attribute():
    with pytest.raises(AttributeError):
        AttributeProperty(object(), "missing")


def test_adapters_satisfy_protocol(qt_app):
    class Box:
        width = 0

    assert isinstance(ValueProperty(0), WritableProperty)
    assert isinstance(AttributeProperty(Box(), "width"), WritableProperty)
    assert isinstance(QtProperty(QObject(), "level"), WritableProperty)
    assert not isinstance(object(), WritableProperty)


def test_qt_property_uses_accessor_pair(qt_app):
    effect = QGraphicsOpacityEffect()
    prop = QtProperty(effect, "opacity")
    prop.set(0.25)
    assert effect.opacity() == pytest.approx(0.25)
    assert prop.get() == pytest.approx(0.25)


def test_qt_property_falls_back_to_dynamic_property(qt_app):
    obj = QObject()
    prop = QtProperty(obj, "level")
    prop.set(7)
    assert obj.property("level") == 7
    assert prop.get() == 7


def test_qt_property_requires_name(qt_app):
    with pytest.raises(ValueError):
        QtProperty(QObject(), "")
