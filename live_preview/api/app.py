"""
Live Preview API: FastAPI endpoints.

Exposes:
- Node add/edit form submission, live preview and action access
- The live preview block, its configuration form and settings
- Node pages with the preview behaviour already applied
- The client asset
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Dict, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from live_preview.block.live_preview_block import LivePreviewBlock
from live_preview.client.normalizer import normalize
from live_preview.config import Settings, get_settings, setup_logging
from live_preview.errors import (
    EntityNotFoundError,
    FormValidationError,
    SubmitNotAllowedError,
    UnknownFormError,
    UnknownNodeTypeError,
)
from live_preview.forms.form_cache import FormCache
from live_preview.forms.node_form import LivePreviewNodeForm
from live_preview.models.context import CreatingContext, ViewingContext
from live_preview.models.entity import Entity
from live_preview.models.form import PREVIEW_OP, SAVE_OP, FormState, InlineWidgetState
from live_preview.rendering.display_repository import EntityDisplayRepository
from live_preview.rendering.view_builder import ViewBuilder
from live_preview.storage.config_store import ConfigStore
from live_preview.storage.entity_store import EntityStore, default_node_types

logger = logging.getLogger(__name__)

_STATIC_DIR = Path(__file__).resolve().parent.parent / "static"

NO_CACHE_HEADERS = {"Cache-Control": "max-age=0"}


# --- Request/Response Models ---

class FormSubmission(BaseModel):
    op: str = SAVE_OP
    values: dict = {}
    inline_entity_form: Dict[str, InlineWidgetState] = {}
    form_build_id: Optional[str] = None


class BlockBuildResponse(BaseModel):
    markup: str
    libraries: list
    cache_max_age: int


# --- Application Factory ---

@asynccontextmanager
async def lifespan(app: FastAPI):
    conf = app.state.settings
    setup_logging(conf.log_level, conf.log_format)
    yield


def create_app(
    entity_store: Optional[EntityStore] = None,
    config_store: Optional[ConfigStore] = None,
    display_repository: Optional[EntityDisplayRepository] = None,
    settings: Optional[Settings] = None,
    form_cache: Optional[FormCache] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Live Preview API",
        description="Live preview of node edit forms",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Initialize components
    es = entity_store or EntityStore(default_node_types())
    cs = config_store or ConfigStore()
    dr = display_repository or EntityDisplayRepository()
    vb = ViewBuilder(dr)
    conf = settings or get_settings()
    fc = form_cache or FormCache(
        ttl_seconds=conf.form_cache_ttl_seconds,
        max_entries=conf.form_cache_max_entries,
    )

    app.state.entity_store = es
    app.state.config_store = cs
    app.state.view_builder = vb
    app.state.settings = conf
    app.state.form_cache = fc

    def _node_form(node_type: str, original: Optional[Entity] = None) -> LivePreviewNodeForm:
        try:
            return LivePreviewNodeForm(
                node_type, es, vb, cs, original=original, settings=conf
            )
        except UnknownNodeTypeError:
            raise HTTPException(404, "Content type not found")

    def _load_node(nid: str) -> Entity:
        try:
            node = es.load_or_fail(nid)
        except EntityNotFoundError:
            raise HTTPException(404, "Node not found")
        if node.entity_type_id != "node":
            raise HTTPException(404, "Node not found")
        return node

    def _form_state(req: FormSubmission, form: LivePreviewNodeForm, op: str) -> FormState:
        try:
            previewed = fc.has_been_previewed(req.form_build_id, form.node_type.id)
        except UnknownFormError:
            raise HTTPException(400, "Unknown or expired form")
        return FormState(
            op=op,
            values=req.values,
            inline_entity_form=req.inline_entity_form,
            has_been_previewed=previewed,
        )

    def _preview(form: LivePreviewNodeForm, req: FormSubmission) -> JSONResponse:
        state = _form_state(req, form, PREVIEW_OP)
        response = form.live_preview(state)
        if req.form_build_id:
            fc.mark_previewed(req.form_build_id, form.node_type.id)
        return JSONResponse(response.to_json(), headers=NO_CACHE_HEADERS)

    def _submit(form: LivePreviewNodeForm, req: FormSubmission) -> dict:
        state = _form_state(req, form, req.op)
        try:
            entity = form.submit(state)
        except SubmitNotAllowedError as e:
            raise HTTPException(403, str(e))
        except FormValidationError as e:
            raise HTTPException(422, {"errors": e.errors})
        fc.forget(req.form_build_id)
        return {"status": "saved", "entity": entity.model_dump(mode="json")}

    def _block(context) -> LivePreviewBlock:
        return LivePreviewBlock(
            cs.get(conf.block_config_name, "settings", default={}),
            context,
            es,
            vb,
            display_repository=dr,
            settings=conf,
        )

    def _script_tags(*builds) -> str:
        urls = []
        for build in builds:
            for library in build.libraries:
                url = conf.library_assets.get(library)
                if url and url not in urls:
                    urls.append(url)
        return "".join(f'<script type="module" src="{url}"></script>' for url in urls)

    # === CONTENT ===

    @app.get("/node-types")
    def list_node_types():
        """All content types."""
        return [t.model_dump(mode="json") for t in es.list_node_types()]

    @app.get("/nodes/{nid}")
    def get_node(nid: str):
        """A stored node."""
        return _load_node(nid).model_dump(mode="json")

    @app.get("/node/{nid}", response_class=HTMLResponse)
    def view_node(nid: str):
        """Node page with the preview block region, links already normalized."""
        node = _load_node(nid)
        build = vb.view(node, conf.default_view_mode)
        block = _block(ViewingContext(entity=node)).build()
        page = (
            "<main>"
            f"{build.render()}"
            f"<aside>{block.render()}</aside>"
            "</main>"
            f"{_script_tags(build, block)}"
        )
        return HTMLResponse(normalize(page))

    # === NODE FORMS ===

    @app.get("/node/add/{node_type}/form-id")
    def new_form_build_id(node_type: str):
        """Issue a form build ID for a new node of ``node_type``."""
        form = _node_form(node_type)
        return {"form_build_id": fc.issue(form.node_type.id).form_build_id}

    @app.get("/node/{nid}/edit/form-id")
    def edit_form_build_id(nid: str):
        """Issue a form build ID for editing an existing node."""
        node = _load_node(nid)
        return {"form_build_id": fc.issue(node.type).form_build_id}

    @app.post("/node/add/{node_type}/actions")
    def node_add_actions(node_type: str, req: FormSubmission):
        """Form buttons and whether each is accessible."""
        form = _node_form(node_type)
        actions = form.actions(_form_state(req, form, req.op))
        return {name: a.model_dump(mode="json") for name, a in actions.items()}

    @app.post("/node/add/{node_type}/preview")
    def node_add_preview(node_type: str, req: FormSubmission):
        """Live preview of a node being created."""
        return _preview(_node_form(node_type), req)

    @app.post("/node/add/{node_type}")
    def node_add_submit(node_type: str, req: FormSubmission):
        """Save a new node."""
        return _submit(_node_form(node_type), req)

    @app.post("/node/{nid}/edit/preview")
    def node_edit_preview(nid: str, req: FormSubmission):
        """Live preview of an existing node being edited."""
        node = _load_node(nid)
        return _preview(_node_form(node.type, node), req)

    @app.post("/node/{nid}/edit")
    def node_edit_submit(nid: str, req: FormSubmission):
        """Save changes to an existing node."""
        node = _load_node(nid)
        return _submit(_node_form(node.type, node), req)

    # === BLOCK ===

    @app.get("/blocks/live-preview")
    def build_block(node_type: Optional[str] = None, nid: Optional[str] = None):
        """Render the live preview block for a create page or a node page."""
        if node_type is not None:
            if node_type not in {t.id for t in es.list_node_types()}:
                raise HTTPException(404, "Content type not found")
            context = CreatingContext(node_type=node_type)
        else:
            context = ViewingContext(entity=es.load(nid) if nid else None)
        build = _block(context).build()
        body = BlockBuildResponse(
            markup=build.render(),
            libraries=build.libraries,
            cache_max_age=build.cache_max_age,
        )
        return JSONResponse(body.model_dump(), headers=NO_CACHE_HEADERS)

    @app.get("/blocks/live-preview/form")
    def block_form():
        """Block configuration form elements."""
        elements = _block(ViewingContext()).block_form()
        return [e.model_dump(mode="json") for e in elements]

    @app.post("/blocks/live-preview/config")
    def block_submit(values: dict):
        """Save block configuration."""
        block = _block(ViewingContext())
        try:
            configuration = block.block_submit(values)
        except FormValidationError as e:
            raise HTTPException(422, {"errors": e.errors})
        cs.update(conf.block_config_name, "settings", dict(configuration))
        logger.info("Updated %s configuration", conf.block_config_name)
        return configuration

    app.mount("/assets", StaticFiles(directory=str(_STATIC_DIR)), name="assets")

    return app


# Default application instance
app = create_app()
