"""Completion events."""

from .event_types import ActionEvent, EventType

__all__ = ['ActionEvent', 'EventType']
