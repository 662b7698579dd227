"""Tests for the live preview display block."""

import pytest

from live_preview.block.live_preview_block import LivePreviewBlock
from live_preview.config import Settings
from live_preview.errors import FormValidationError
from live_preview.models.context import CreatingContext, ViewingContext
from live_preview.models.entity import Entity
from live_preview.rendering.view_builder import ViewBuilder
from live_preview.storage.entity_store import EntityStore, default_node_types


def _make_store() -> EntityStore:
    store = EntityStore(default_node_types())
    store.save(Entity(
        id="100", type="article", title="Example article",
        values={"body": "<p>Example</p>"},
        field_definitions=store.get_node_type("article").fields,
    ))
    store.save(Entity(
        id="200", type="learn_article", title="Example lesson",
        field_definitions=store.get_node_type("learn_article").fields,
    ))
    return store


def _make_block(configuration: dict, context, store: EntityStore = None) -> LivePreviewBlock:
    return LivePreviewBlock(
        configuration,
        context,
        store or _make_store(),
        ViewBuilder(),
        settings=Settings(),
    )


class TestResolution:
    def test_create_page_loads_configured_node(self):
        block = _make_block({"nid_article": "100"}, CreatingContext(node_type="article"))
        assert block.node.id == "100"

    def test_create_page_without_configured_node(self):
        block = _make_block({"nid_page": "100"}, CreatingContext(node_type="article"))
        assert block.node is None

    def test_create_page_with_deleted_node(self):
        block = _make_block({"nid_article": "999"}, CreatingContext(node_type="article"))
        assert block.node is None

    def test_view_page_uses_context_entity(self):
        entity = Entity(id="5", type="page", title="About")
        block = _make_block({"nid_page": "100"}, ViewingContext(entity=entity))
        assert block.node is entity


class TestBuild:
    def test_placeholder_when_nothing_resolved(self):
        build = _make_block({}, CreatingContext(node_type="article")).build()
        assert build.markup == "View Preview Here"
        assert build.libraries == []
        assert build.cache_max_age == 0

    def test_configured_view_mode(self):
        block = _make_block(
            {"nid_article": "100", "view_mode": "teaser"},
            CreatingContext(node_type="article"),
        )
        build = block.build()
        assert "node--view-mode-teaser" in build.markup
        assert build.libraries == ["live_preview/live_preview-lib"]
        assert "c-block-sparklearn-live-preview" in build.classes

    def test_missing_view_mode_falls_back_to_full(self):
        block = _make_block(
            {"nid_article": "100", "view_mode": None},
            CreatingContext(node_type="article"),
        )
        assert "node--view-mode-full" in block.build().markup

    def test_learn_article_always_full(self):
        block = _make_block(
            {"nid_learn_article": "200", "view_mode": "teaser"},
            CreatingContext(node_type="learn_article"),
        )
        assert "node--view-mode-full" in block.build().markup

    def test_never_cached(self):
        block = _make_block({"nid_article": "100"}, CreatingContext(node_type="article"))
        assert block.get_cache_max_age() == 0
        assert block.build().cache_max_age == 0


class TestBlockForm:
    def test_one_picker_per_content_type_plus_view_mode(self):
        block = _make_block({"nid_article": "100"}, ViewingContext())
        elements = {e.name: e for e in block.block_form()}

        assert set(elements) == {
            "nid_learn_article", "nid_article", "nid_page", "view_mode",
        }
        picker = elements["nid_article"]
        assert picker.type == "entity_autocomplete"
        assert picker.title == "Article Node to display"
        assert picker.target_type == "node"
        assert picker.default_value.id == "100"
        assert elements["nid_page"].default_value is None

        view_mode = elements["view_mode"]
        assert view_mode.required is True
        assert view_mode.default_value == "full"
        assert "teaser" in view_mode.options

    def test_submit_persists_flat_configuration(self):
        block = _make_block({}, ViewingContext())
        configuration = block.block_submit({
            "nid_article": "100",
            "nid_learn_article": "",
            "view_mode": "teaser",
        })
        assert configuration == {
            "nid_learn_article": None,
            "nid_article": "100",
            "nid_page": None,
            "view_mode": "teaser",
        }

    def test_submit_rejects_unknown_view_mode(self):
        block = _make_block({}, ViewingContext())
        with pytest.raises(FormValidationError):
            block.block_submit({"view_mode": "poster"})

    def test_submit_rejects_missing_node(self):
        block = _make_block({"nid_article": "100"}, ViewingContext())
        with pytest.raises(FormValidationError) as excinfo:
            block.block_submit({"nid_article": "999", "view_mode": "full"})
        assert set(excinfo.value.errors) == {"nid_article"}
        assert block.get_configuration().node_id_for("article") == "100"

    def test_submit_rejects_non_node_entity(self):
        store = _make_store()
        store.save(Entity(id="t1", entity_type_id="taxonomy_term", type="tags", title="Python"))
        block = _make_block({}, ViewingContext(), store)
        with pytest.raises(FormValidationError) as excinfo:
            block.block_submit({"nid_page": "t1", "view_mode": "full"})
        assert "nid_page" in excinfo.value.errors
