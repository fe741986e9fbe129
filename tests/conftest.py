"""Shared fixtures: a container wired to a counting id generator and a
renderer that records every drawing request.
"""
from __future__ import annotations

import itertools
import pytest

from annotation import AnnotationContainer
from settings import AppSettings


class RecordingRenderer:
    """Renderer that remembers what it was asked to do."""

    def __init__(self):
        self.events = []

    def render(self, annotation):
        self.events.append(("render", annotation.uuid, annotation.color))

    def set_view_mode(self, annotation, enabled):
        self.events.append(("view", annotation.uuid, enabled))

    def remove(self, annotation):
        self.events.append(("remove", annotation.uuid))


@pytest.fixture()
def renderer():
    return RecordingRenderer()


@pytest.fixture()
def make_id():
    counter = itertools.count(1)
    return lambda: f"gen{next(counter)}"


@pytest.fixture()
def container(renderer, make_id):
    return AnnotationContainer(renderer=renderer, make_id=make_id, settings=AppSettings())


@pytest.fixture()
def updates(container):
    """List that grows by one on every annotationUpdated emission."""
    calls = []
    container.annotationUpdated.connect(lambda: calls.append(1))
    return calls
