"""Integration tests for building the full Gradio app."""

import gradio as gr
import pytest

from nailstudio.ui.app import _bind, create_gallery_tab, create_generator_tab, create_ui
from nailstudio.ui.components import CUSTOM_CSS
from nailstudio.ui.handlers import gallery as gallery_handlers


class TestCreateUI:
    """Tests for create_ui function."""

    def test_returns_blocks_and_css(self, ctx):
        app, css = create_ui(ctx)
        assert isinstance(app, gr.Blocks)
        assert css == CUSTOM_CSS

    def test_building_makes_no_requests(self, ctx, fake_service):
        create_ui(ctx)
        assert fake_service.requests == []

    def test_handlers_are_registered(self, ctx):
        app, _ = create_ui(ctx)
        names = {getattr(d.fn, "__name__", None) for d in app.fns.values()}

        for expected in (
            "submit_prompt",
            "run_generation",
            "confirm_delete",
            "run_delete",
            "run_download",
            "begin_load",
            "load_designs",
            "change_sort_order",
            "dispatch_action",
            "run_pending_download",
            "run_pending_delete",
            "click_viewer_backdrop",
        ):
            assert expected in names


class TestTabs:
    def test_generator_outputs(self, ctx):
        with gr.Blocks():
            components = create_generator_tab(ctx)
        # state + 8 rendered components
        assert len(components["outputs"]) == 9

    def test_gallery_outputs(self, ctx):
        with gr.Blocks():
            components = create_gallery_tab(ctx)
        # state + 14 rendered components
        assert len(components["outputs"]) == 15
        assert components["sort_selector"].value == ctx.config.default_sort_order


class TestDownloadTrigger:
    """Each tab saves a finished download through a browser-side step."""

    @staticmethod
    def _trigger_steps(demo: gr.Blocks, token) -> list:
        return [
            d
            for d in demo.fns.values()
            if d.fn is None and (token._id, "change") in d.targets
        ]

    def test_generator_chain_clicks_download(self, ctx):
        with gr.Blocks() as demo:
            components = create_generator_tab(ctx)

        steps = self._trigger_steps(demo, components["download_token"])
        assert len(steps) == 1
        assert "#generator-download-file" in steps[0].js
        assert "#generator-download-link" in steps[0].js

    def test_gallery_chain_clicks_download(self, ctx):
        with gr.Blocks() as demo:
            components = create_gallery_tab(ctx)

        steps = self._trigger_steps(demo, components["download_token"])
        assert len(steps) == 1
        assert "#gallery-download-file" in steps[0].js

    @pytest.mark.parametrize(
        "create_tab,handler",
        [(create_generator_tab, "run_download"), (create_gallery_tab, "run_pending_download")],
    )
    def test_token_written_by_download_handler(self, ctx, create_tab, handler):
        with gr.Blocks() as demo:
            components = create_tab(ctx)

        token = components["download_token"]
        writers = [
            d for d in demo.fns.values() if getattr(d.fn, "__name__", None) == handler
        ]
        assert len(writers) == 1
        assert any(block is token for block in writers[0].outputs)


class TestBind:
    def test_keeps_name_and_binds_context(self, ctx, gallery_state):
        bound = _bind(gallery_handlers.begin_load, ctx)
        assert bound.__name__ == "begin_load"

        result = bound(gallery_state)
        assert result[0] is gallery_state
