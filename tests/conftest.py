"""
Shared pytest fixtures for keyframes tests.
"""
import os
import sys

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication  # noqa: E402

from keyframes.animation.properties import ValueProperty  # noqa: E402


@pytest.fixture(scope='session')
def qt_app():
    """Create QApplication instance for tests."""
    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv)
    yield app
    # Don't quit - causes issues with pytest


@pytest.fixture
def prop():
    """Float property starting at 0.0."""
    return ValueProperty(0.0, name="prop")


@pytest.fixture
def recorder():
    """Callable that records every event it receives."""
    class Recorder:
        def __init__(self):
            self.events = []

        def __call__(self, event=None):
            self.events.append(event)

        @property
        def count(self):
            return len(self.events)

    return Recorder()
