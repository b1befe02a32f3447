"""Unit tests for Generator tab handlers."""

from pathlib import Path
from unittest.mock import MagicMock

from nailstudio.api.models import GeneratedDesign
from nailstudio.ui.handlers.generator import (
    begin_download,
    cancel_delete,
    confirm_delete,
    render_generator,
    request_delete,
    run_delete,
    run_download,
    run_generation,
    submit_prompt,
)
from nailstudio.ui.models import (
    DELETE_ERROR,
    DOWNLOAD_ERROR,
    GENERATE_ERROR,
    AppContext,
    GeneratorState,
    GeneratorStatus,
)
from nailstudio.ui.validation import EMPTY_PROMPT_MESSAGE

# Positions in the (state, *render_generator) tuple
STATE, GENERATE_BTN, ERROR, RESULT_GROUP, PROMPT, IMAGE, DELETE_BTN, DOWNLOAD_BTN, DIALOG = range(9)


def _ready_state(design_id: str = "g1") -> GeneratorState:
    return GeneratorState(
        status=GeneratorStatus.READY,
        prompt="red tips",
        design=GeneratedDesign(id=design_id, prompt="red tips", url=f"https://img.test/{design_id}.png"),
    )


def _generate(ctx, state, prompt):
    result = submit_prompt(prompt, state)
    return run_generation(ctx, result[STATE])


class TestRenderGenerator:
    def test_idle(self):
        updates = render_generator(GeneratorState())
        assert len(updates) == 8
        assert updates[0]["interactive"] is True
        assert updates[0]["value"] == "✨ Generar Diseño"
        assert updates[2]["visible"] is False

    def test_generating_disables_button(self):
        updates = render_generator(GeneratorState(status=GeneratorStatus.GENERATING))
        assert updates[0]["interactive"] is False
        assert updates[0]["value"] == "⏳ Generando..."

    def test_deleting_disables_actions(self):
        state = _ready_state()
        state.status = GeneratorStatus.DELETING
        updates = render_generator(state)
        assert updates[5]["interactive"] is False
        assert updates[5]["value"] == "⏳ Eliminando..."
        assert updates[6]["interactive"] is False


class TestSubmitAndGenerate:
    """Prompt submission followed by the service call."""

    def test_empty_prompt_sets_error_only(self, ctx, fake_service, generator_state):
        result = submit_prompt("   ", generator_state)

        state = result[STATE]
        assert state.error == EMPTY_PROMPT_MESSAGE
        assert state.status == GeneratorStatus.IDLE
        assert result[ERROR]["visible"] is True

        run_generation(ctx, state)
        assert fake_service.requests == []

    def test_empty_prompt_keeps_previous_design(self):
        state = _ready_state()
        result = submit_prompt("", state)
        assert result[STATE].design.id == "g1"
        assert result[STATE].status == GeneratorStatus.READY

    def test_submit_disables_button(self, generator_state):
        result = submit_prompt("red tips", generator_state)
        assert result[STATE].status == GeneratorStatus.GENERATING
        assert result[GENERATE_BTN]["interactive"] is False

    def test_success_shows_result(self, ctx, fake_service, generator_state):
        result = _generate(ctx, generator_state, "red french tips")

        state = result[STATE]
        assert len(fake_service.calls("nails-creator")) == 1
        assert state.status == GeneratorStatus.READY
        assert state.design.url == "https://img.test/new.png"
        assert result[RESULT_GROUP]["visible"] is True
        assert "red french tips" in result[PROMPT]["value"]
        assert "https://img.test/new.png" in result[IMAGE]["value"]
        assert result[GENERATE_BTN]["interactive"] is True

    def test_new_design_replaces_previous(self, ctx):
        result = _generate(ctx, _ready_state("old"), "another")
        assert result[STATE].design.id == "new-1"

    def test_service_message_shown_on_400(self, ctx, fake_service, generator_state):
        fake_service.respond("nails-creator", 400, {"message": "Descripción no permitida"})

        result = _generate(ctx, generator_state, "x")

        state = result[STATE]
        assert state.status == GeneratorStatus.FAILED
        assert state.error == "Descripción no permitida"
        assert state.design is None
        assert result[RESULT_GROUP]["visible"] is False
        assert result[GENERATE_BTN]["interactive"] is True

    def test_generic_message_on_server_error(self, ctx, fake_service, generator_state):
        fake_service.respond("nails-creator", 500, {"message": "internal"})
        result = _generate(ctx, generator_state, "x")
        assert result[STATE].error == GENERATE_ERROR

    def test_failure_clears_previous_design(self, ctx, fake_service):
        fake_service.respond("nails-creator", 502)
        result = _generate(ctx, _ready_state(), "x")
        assert result[STATE].design is None

    def test_prompt_kept_after_failure(self, ctx, fake_service, generator_state):
        fake_service.respond("nails-creator", 500)
        result = _generate(ctx, generator_state, "keep me")
        assert result[STATE].prompt == "keep me"

    def test_retry_after_failure(self, ctx, fake_service, generator_state):
        fake_service.respond("nails-creator", 500)
        state = _generate(ctx, generator_state, "x")[STATE]
        fake_service.reset("nails-creator")

        result = _generate(ctx, state, "x")

        assert result[STATE].status == GeneratorStatus.READY
        assert result[STATE].error == ""

    def test_run_generation_without_submit_is_noop(self, ctx, fake_service, generator_state):
        run_generation(ctx, generator_state)
        assert fake_service.requests == []

    def test_submit_ignored_while_generating(self):
        state = GeneratorState(status=GeneratorStatus.GENERATING, prompt="first")
        result = submit_prompt("second", state)
        assert result[STATE].prompt == "first"


class TestDelete:
    """Delete goes through the confirmation dialog."""

    def test_request_opens_dialog(self):
        result = request_delete(_ready_state())
        assert result[STATE].dialog.target_id == "g1"
        assert result[DIALOG]["visible"] is True

    def test_request_without_design(self, generator_state):
        result = request_delete(generator_state)
        assert not result[STATE].dialog.is_open()

    def test_cancel_makes_no_call(self, ctx, fake_service):
        state = request_delete(_ready_state())[STATE]
        state = cancel_delete(state)[STATE]
        result = run_delete(ctx, state)

        assert fake_service.calls("delete-image") == []
        assert result[STATE].design.id == "g1"
        assert result[DIALOG]["visible"] is False

    def test_confirm_deletes_and_clears(self, ctx, fake_service):
        state = request_delete(_ready_state())[STATE]
        result = confirm_delete(state)
        assert result[STATE].status == GeneratorStatus.DELETING
        assert result[DELETE_BTN]["interactive"] is False
        assert result[DIALOG]["visible"] is False

        result = run_delete(ctx, result[STATE])

        calls = fake_service.calls("delete-image")
        assert len(calls) == 1
        assert b'"g1"' in calls[0].content
        assert result[STATE].design is None
        assert result[STATE].status == GeneratorStatus.IDLE
        assert result[RESULT_GROUP]["visible"] is False

    def test_failure_keeps_design(self, ctx, fake_service):
        fake_service.respond("delete-image", 500)
        state = confirm_delete(request_delete(_ready_state())[STATE])[STATE]

        result = run_delete(ctx, state)

        assert result[STATE].design.id == "g1"
        assert result[STATE].status == GeneratorStatus.READY
        assert result[STATE].error == DELETE_ERROR
        assert result[DELETE_BTN]["interactive"] is True

    def test_confirmed_id_survives_dialog_reuse(self, ctx, fake_service):
        """Reopening the dialog after confirming does not change the deleted id."""
        state = confirm_delete(request_delete(_ready_state("g1"))[STATE])[STATE]
        state.dialog.open("other")

        run_delete(ctx, state)

        calls = fake_service.calls("delete-image")
        assert len(calls) == 1
        assert b'"g1"' in calls[0].content


class TestDownload:
    def test_begin_disables_button(self):
        result = begin_download(_ready_state())
        assert result[STATE].status == GeneratorStatus.DOWNLOADING
        assert result[DOWNLOAD_BTN]["interactive"] is False
        assert result[DOWNLOAD_BTN]["value"] == "⏳ Descargando..."

    def test_begin_without_design(self, generator_state):
        assert begin_download(generator_state)[STATE].status == GeneratorStatus.IDLE

    def test_download_serves_file(self, ctx, fake_service):
        state = begin_download(_ready_state("g1"))[STATE]

        result = run_download(ctx, state)

        assert len(result) == 12
        assert result[STATE].status == GeneratorStatus.READY
        file_update = result[-3]
        assert Path(file_update["value"]).name == "nail-design-g1.png"
        assert file_update["visible"] is True
        assert result[-2]["visible"] is False
        assert result[-1]["value"]
        assert result[DOWNLOAD_BTN]["interactive"] is True

    def test_malformed_payload_uses_link(self, ctx, fake_service):
        fake_service.download_base64 = "***"
        state = begin_download(_ready_state("g1"))[STATE]

        result = run_download(ctx, state)

        assert result[-3]["visible"] is False
        assert result[-2]["visible"] is True
        assert 'download="nail-design-g1.png"' in result[-2]["value"]
        assert result[-1]["value"]

    def test_failure_returns_to_ready(self, ctx, fake_service):
        fake_service.respond("download-image", 500)
        state = begin_download(_ready_state())[STATE]

        result = run_download(ctx, state)

        assert result[STATE].status == GeneratorStatus.READY
        assert result[STATE].error == DOWNLOAD_ERROR
        assert result[STATE].design.id == "g1"
        # nothing new to save
        assert result[-1] == {"__type__": "update"}

    def test_unexpected_error_returns_to_ready(self, test_config):
        client = MagicMock()
        client.fetch_download_payload.side_effect = RuntimeError("boom")
        state = begin_download(_ready_state())[STATE]

        result = run_download(AppContext(client=client, config=test_config), state)

        assert result[STATE].status == GeneratorStatus.READY
        assert result[STATE].error == DOWNLOAD_ERROR
