"""Tests for core data models."""

import pytest
from pydantic import TypeAdapter

from live_preview.models import (
    AjaxResponse,
    BlockConfiguration,
    CreatingContext,
    Entity,
    FieldDefinition,
    FieldType,
    FormState,
    InvokeCommand,
    NodeType,
    PreviewMode,
    RenderArray,
    ReplaceCommand,
    ResolutionContext,
    ViewingContext,
)


class TestEntity:
    def test_new_entity_has_no_url(self):
        entity = Entity(type="article", title="Draft")
        assert entity.is_new is True
        assert entity.url is None

    def test_url_follows_entity_type(self):
        node = Entity(id="7", type="article")
        term = Entity(id="3", entity_type_id="taxonomy_term", type="tags")
        assert node.url == "/node/7"
        assert term.url == "/taxonomy/term/3"

    def test_iter_fields_yields_declared_fields_only(self):
        entity = Entity(
            type="article",
            values={"body": "<p>Hi</p>", "stray": 1},
            field_definitions=[
                FieldDefinition(name="body", type=FieldType.TEXT_LONG),
                FieldDefinition(name="field_tags", type=FieldType.ENTITY_REFERENCE),
            ],
        )
        fields = list(entity.iter_fields())
        assert [d.name for d, _ in fields] == ["body", "field_tags"]
        assert fields[0][1] == "<p>Hi</p>"
        assert fields[1][1] is None

    def test_node_type_field_lookup(self):
        node_type = NodeType(
            id="article",
            label="Article",
            fields=[FieldDefinition(name="body", type=FieldType.TEXT_LONG)],
        )
        assert node_type.preview_mode == PreviewMode.OPTIONAL
        assert node_type.get_field_definition("body").type == FieldType.TEXT_LONG
        assert node_type.get_field_definition("missing") is None


class TestBlockConfiguration:
    def test_flat_settings_shape(self):
        config = BlockConfiguration(
            node_ids={"article": "12", "page": None}, view_mode="teaser"
        )
        assert config.to_settings() == {
            "nid_article": "12",
            "nid_page": None,
            "view_mode": "teaser",
        }

    def test_from_settings_treats_empty_ids_as_unset(self):
        config = BlockConfiguration.from_settings({
            "nid_article": "",
            "nid_learn_article": 5,
            "view_mode": "",
            "label": "Live preview",
        })
        assert config.node_id_for("article") is None
        assert config.node_id_for("learn_article") == "5"
        assert config.node_id_for("page") is None
        assert config.view_mode is None


class TestAjaxResponse:
    def test_commands_serialize_in_order(self):
        response = AjaxResponse()
        response.add_command(ReplaceCommand(selector=".region", payload="<p>x</p>"))
        response.add_command(InvokeCommand(method="set_target_new"))
        assert response.to_json() == [
            {"command": "replace", "selector": ".region", "payload": "<p>x</p>"},
            {"command": "invoke", "selector": None, "method": "set_target_new", "args": []},
        ]


class TestRenderArray:
    def test_render_without_classes_is_bare_markup(self):
        assert RenderArray(markup="<p>x</p>").render() == "<p>x</p>"

    def test_render_wraps_markup_in_classes(self):
        build = RenderArray(markup="<p>x</p>")
        build.add_class("a")
        build.add_class("b")
        build.add_class("a")
        assert build.render() == '<div class="a b"><p>x</p></div>'

    def test_libraries_are_deduplicated(self):
        build = RenderArray(markup="")
        build.attach_library("live_preview/live_preview-lib")
        build.attach_library("live_preview/live_preview-lib")
        assert build.libraries == ["live_preview/live_preview-lib"]


class TestResolutionContext:
    def test_discriminates_on_kind(self):
        adapter = TypeAdapter(ResolutionContext)
        creating = adapter.validate_python({"kind": "creating", "node_type": "article"})
        viewing = adapter.validate_python({"kind": "viewing"})
        assert isinstance(creating, CreatingContext)
        assert isinstance(viewing, ViewingContext)
        assert viewing.entity is None

    def test_creating_requires_node_type(self):
        with pytest.raises(Exception):
            CreatingContext()


class TestFormState:
    def test_preview_op(self):
        assert FormState(op="Preview").is_preview is True
        assert FormState().is_preview is False

    def test_errors(self):
        state = FormState()
        state.set_error("title", "Title field is required.")
        assert state.has_errors()
        state.clear_errors()
        assert not state.has_errors()
