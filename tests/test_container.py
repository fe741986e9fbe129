"""Tests for annotation/container.py: registry operations, queries,
color changes and change notifications.
"""
from __future__ import annotations

import pytest

from annotation import (
    AnnotationContainer,
    DuplicateAnnotationError,
    RelationAnnotation,
    SpanAnnotation,
)
from settings import AppSettings


def _span(uuid, text="x", read_only=False):
    return SpanAnnotation(uuid, text=text, read_only=read_only)


def _relation(uuid, direction="one-way", text="r", rel1=None, rel2=None):
    return RelationAnnotation(uuid, direction=direction, rel1=rel1, rel2=rel2, text=text)


# ─────────────────────────────────────────────────────────
# add / remove / destroy
# ─────────────────────────────────────────────────────────


class TestRegistry:
    def test_add_registers_and_notifies(self, container, updates):
        s = _span("a")
        container.add(s)
        assert container.get_all_annotations() == [s]
        assert s.container is container
        assert updates == [1]

    def test_add_same_entity_twice_keeps_one(self, container, updates):
        s = _span("a")
        container.add(s)
        container.add(s)
        assert len(container) == 1
        assert len(updates) == 2

    def test_add_other_entity_with_same_uuid_raises(self, container):
        container.add(_span("a"))
        with pytest.raises(DuplicateAnnotationError):
            container.add(_span("a"))

    def test_duplicate_error_is_value_error(self, container):
        container.add(_span("a"))
        with pytest.raises(ValueError):
            container.add(_span("a"))

    def test_remove_present(self, container, updates):
        s = _span("a")
        container.add(s)
        container.remove(s)
        assert len(container) == 0
        assert len(updates) == 2

    def test_remove_absent_still_notifies(self, container, updates):
        container.remove(_span("ghost"))
        assert updates == [1]

    def test_remove_does_not_drop_other_entity_with_same_uuid(self, container):
        kept = _span("a")
        container.add(kept)
        container.remove(_span("a"))
        assert container.find_by_id("a") is kept

    def test_destroy_clears_and_drops_visuals(self, container, renderer):
        container.add(_span("a"))
        container.add(_span("b"))
        container.destroy()
        assert len(container) == 0
        assert ("remove", "a") in renderer.events
        assert ("remove", "b") in renderer.events

    def test_entity_destroy_removes_it(self, container):
        s = _span("a")
        container.add(s)
        s.destroy()
        assert s not in container

    def test_save_adds_bound_entity(self, container):
        s = SpanAnnotation("a", container=container)
        assert s.save() is True
        assert container.find_by_id("a") is s

    def test_save_without_container(self):
        assert _span("a").save() is False

    def test_read_only_cannot_be_reassigned(self):
        s = _span("a", read_only=True)
        with pytest.raises(AttributeError):
            s.read_only = False

    def test_uuid_cannot_be_reassigned(self):
        s = _span("a")
        with pytest.raises(AttributeError):
            s.uuid = "b"


# ─────────────────────────────────────────────────────────
# Queries
# ─────────────────────────────────────────────────────────


class TestQueries:
    def test_find_by_id_coerces_to_string(self, container):
        s = _span("42")
        container.add(s)
        assert container.find_by_id(42) is s

    def test_find_by_id_missing(self, container):
        assert container.find_by_id("nope") is None

    def test_get_all_is_snapshot(self, container):
        container.add(_span("a"))
        snapshot = container.get_all_annotations()
        container.add(_span("b"))
        assert len(snapshot) == 1

    def test_selected(self, container):
        a, b = _span("a"), _span("b")
        container.add(a)
        container.add(b)
        b.selected = True
        assert container.get_selected_annotations() == [b]

    def test_partitions(self, container):
        p, r = _span("p"), _span("r", read_only=True)
        container.add(p)
        container.add(r)
        assert container.get_primary_annotations() == [p]
        assert container.get_reference_annotations() == [r]

    def test_by_type(self, container):
        s, rel = _span("s"), _relation("r")
        container.add(s)
        container.add(rel)
        assert container.get_annotations_by_type("relation") == [rel]

    def test_relations_for_span(self, container):
        s = _span("s")
        rel = _relation("r", rel1="s", rel2="t")
        container.add(s)
        container.add(rel)
        container.add(_relation("other", rel1="t", rel2="t"))
        assert container.get_relations_for(s) == [rel]

    def test_relation_endpoint_not_cascaded(self, container):
        s = _span("s")
        rel = _relation("r", rel1="s", rel2="s")
        container.add(s)
        container.add(rel)
        container.remove(s)
        assert rel.rel1 == "s"
        assert rel.span1 is None


# ─────────────────────────────────────────────────────────
# change_color / set_color
# ─────────────────────────────────────────────────────────


class TestChangeColor:
    def test_uuid_wins_over_text_and_type(self, container, renderer, updates):
        a, b = _span("a", text="x"), _span("b", text="x")
        container.add(a)
        container.add(b)
        updates.clear()
        changed = container.change_color(text="x", color="#abc", uuid="a", anno_type="relation")
        assert changed == [a]
        assert a.color == "#abc"
        assert b.color is None
        assert a.view_mode is True
        assert ("render", "a", "#abc") in renderer.events
        assert updates == [1]

    def test_unknown_uuid_changes_nothing(self, container, updates):
        container.add(_span("a"))
        updates.clear()
        assert container.change_color(color="#abc", uuid="zzz") == []
        assert updates == []

    def test_span_by_text(self, container):
        a, b, r = _span("a", text="x"), _span("b", text="y"), _relation("r", text="x")
        for e in (a, b, r):
            container.add(e)
        changed = container.change_color(text="x", color="#111", anno_type="span")
        assert changed == [a]
        assert r.color is None

    def test_direction_key_selects_relations(self, container):
        one, two = _relation("1", "one-way", "x"), _relation("2", "two-way", "x")
        container.add(one)
        container.add(two)
        assert container.change_color(text="x", color="#222", anno_type="two-way") == [two]

    def test_relation_with_direction_filter(self, container):
        one, two = _relation("1", "one-way", "x"), _relation("2", "two-way", "x")
        container.add(one)
        container.add(two)
        changed = container.change_color(text="x", color="#333", anno_type="relation", direction="one-way")
        assert changed == [one]

    def test_relation_without_direction_matches_all_relations(self, container):
        one, two = _relation("1", "one-way", "x"), _relation("2", "link", "x")
        container.add(one)
        container.add(two)
        changed = container.change_color(text="x", color="#444", anno_type="relation")
        assert set(changed) == {one, two}

    def test_unknown_type_matches_nothing(self, container):
        container.add(_span("a", text="x"))
        assert container.change_color(text="x", color="#555", anno_type="area") == []


class TestSetColor:
    def test_applies_each_type_text_pair(self, container):
        s, r = _span("s", text="Person"), _relation("r", "one-way", "cites")
        container.add(s)
        container.add(r)
        container.set_color({
            "default": "#000",
            "palette": ["#fff"],
            "span": {"Person": "#0f0"},
            "one-way": {"cites": "#00f"},
        })
        assert s.color == "#0f0"
        assert r.color == "#00f"

    def test_default_is_not_applied(self, container):
        s = _span("s", text="default")
        container.add(s)
        container.set_color({"default": "#000"})
        assert s.color is None


# ─────────────────────────────────────────────────────────
# Construction
# ─────────────────────────────────────────────────────────


class TestConstruction:
    def test_default_id_generator_is_unique(self):
        c = AnnotationContainer(settings=AppSettings())
        assert c.make_id() != c.make_id()

    def test_entities_use_container_renderer(self, container, renderer):
        s = _span("a")
        container.add(s)
        s.render()
        assert ("render", "a", None) in renderer.events
