# tests/test_app_controller.py
from concurrent.futures import Future
from types import SimpleNamespace

import pytest

pytest.importorskip("tkinter")
pytest.importorskip("customtkinter")

from conftest import solid
from reconyx_overlay.config import AppConfig
from reconyx_overlay.controllers import app_controller
from reconyx_overlay.controllers.app_controller import AppController
from reconyx_overlay.controllers.pipeline import OverlayPipeline
from reconyx_overlay.errors import AssetLoadError, DecodeError
from reconyx_overlay.services.export_service import ExportService


class Recorder:
    """Stands in for a widget: records every public method call."""

    def __init__(self):
        self.calls = []

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)

        def record(*args, **kwargs):
            self.calls.append((name, args, kwargs))

        return record

    def called(self, name):
        return [(args, kwargs) for n, args, kwargs in self.calls if n == name]

    def last(self, name):
        return self.called(name)[-1]


class ImmediateWindow:
    def after(self, _ms, callback):
        callback()


class StubImageService:
    def __init__(self, overlay_future):
        self._overlay_future = overlay_future

    def load_fixed_overlay(self):
        return self._overlay_future

    def shutdown(self):
        pass


def done(result=None, error=None):
    future = Future()
    if error is not None:
        future.set_exception(error)
    else:
        future.set_result(result)
    return future


@pytest.fixture
def dialogs(monkeypatch):
    fake = Recorder()
    monkeypatch.setattr(app_controller, "messagebox", fake)
    return fake


@pytest.fixture
def make_controller(tmp_path):
    def build(overlay_future=None, pipeline=None):
        exporter = ExportService(clock=lambda: 1234)
        controller = AppController(
            viewer=Recorder(),
            sidebar=Recorder(),
            bottom=Recorder(),
            window=ImmediateWindow(),
            config=AppConfig(overlay_path=tmp_path / "overlay.png"),
            _image_service=StubImageService(overlay_future or Future()),
            _export_service=exporter,
            _pipeline=pipeline or OverlayPipeline(exporter=exporter),
        )
        controller.bind_events()
        return controller

    return build


def test_missing_overlay_disables_the_tool(make_controller):
    controller = make_controller(overlay_future=done(error=AssetLoadError("missing")))
    controller.start()

    assert controller.sidebar.last("set_upload_enabled") == ((False,), {})
    assert controller.bottom.last("set_controls_enabled") == ((False,), {})
    assert controller.bottom.last("set_download_enabled") == ((False,), {})
    (text,), kwargs = controller.sidebar.last("set_status")
    assert "недоступен" in text and kwargs == {"error": True}
    assert controller.viewer.last("set_image") == ((None,), {})
    (placeholder,), _ = controller.viewer.last("set_placeholder")
    assert "инструмент недоступен" in placeholder


def test_download_enabled_only_after_composite(make_controller, red_base, blue_overlay):
    controller = make_controller(overlay_future=done(blue_overlay))
    controller.start()
    assert controller.bottom.last("set_download_enabled") == ((False,), {})
    assert controller.viewer.called("set_image") == []

    generation = controller._pipeline.begin_upload()
    controller._on_base_loaded(generation, done(red_base))

    assert controller.bottom.last("set_download_enabled") == ((True,), {})
    (image,), _ = controller.viewer.last("set_image")
    assert image.size == red_base.size
    assert controller.sidebar.last("set_image_info") == ((red_base,), {})


def test_decode_error_keeps_previous_preview(make_controller, dialogs, red_base, blue_overlay):
    controller = make_controller(overlay_future=done(blue_overlay))
    controller.start()
    controller._on_base_loaded(controller._pipeline.begin_upload(), done(red_base))
    previews = len(controller.viewer.called("set_image"))

    generation = controller._pipeline.begin_upload()
    controller._on_base_loaded(generation, done(error=DecodeError("not an image")))

    assert len(dialogs.called("showerror")) == 1
    assert len(controller.viewer.called("set_image")) == previews
    assert controller._pipeline.state.base is red_base
    assert controller.sidebar.last("set_status")[1] == {"error": True}


def test_stale_decode_error_is_not_reported(make_controller, dialogs, blue_overlay):
    controller = make_controller(overlay_future=done(blue_overlay))
    older = controller._pipeline.begin_upload()
    controller._pipeline.begin_upload()

    controller._on_base_loaded(older, done(error=DecodeError("late failure")))

    assert dialogs.calls == []


def test_export_before_composite_warns(make_controller, dialogs, monkeypatch):
    save_dialog = Recorder()
    monkeypatch.setattr(app_controller, "filedialog", save_dialog)
    controller = make_controller()

    controller._handle_download()

    assert len(dialogs.called("showwarning")) == 1
    assert save_dialog.calls == []


def test_download_writes_file(make_controller, monkeypatch, tmp_path, red_base, blue_overlay):
    target = tmp_path / "out.png"
    monkeypatch.setattr(
        app_controller, "filedialog", SimpleNamespace(asksaveasfilename=lambda **kwargs: str(target))
    )
    controller = make_controller(overlay_future=done(blue_overlay))
    controller.start()
    controller._on_base_loaded(controller._pipeline.begin_upload(), done(red_base))

    controller._handle_download()

    assert target.read_bytes().startswith(b"\x89PNG")
    (text,), _ = controller.sidebar.last("set_status")
    assert "out.png" in text


def test_out_of_memory_during_recomposite_is_reported(make_controller):
    class ExhaustedCompositor:
        def composite(self, base, overlay, opacity):
            raise MemoryError

    controller = make_controller(pipeline=OverlayPipeline(compositor=ExhaustedCompositor()))

    controller._handle_opacity_change(40)

    assert controller._pipeline.state.opacity == 100
    assert controller.sidebar.last("set_status")[1] == {"error": True}


def test_slider_value_reaches_pipeline(make_controller, red_base, blue_overlay):
    controller = make_controller(overlay_future=done(blue_overlay))
    controller.start()
    controller._on_base_loaded(controller._pipeline.begin_upload(), done(red_base))

    controller.bottom.on_opacity_change(30)

    assert controller._pipeline.state.composite.opacity == 30
    assert controller.bottom.last("set_opacity_percent") == ((30,), {})


def test_controller_drives_every_public_viewer_method(make_controller, red_base, blue_overlay):
    from reconyx_overlay.ui.image_viewer import ImageViewer

    public = {name for name in vars(ImageViewer) if not name.startswith("_")}

    failed = make_controller(overlay_future=done(error=AssetLoadError("missing")))
    failed.start()
    working = make_controller(overlay_future=done(blue_overlay))
    working.start()
    working._on_base_loaded(working._pipeline.begin_upload(), done(red_base))

    used = {name for name, _, _ in failed.viewer.calls + working.viewer.calls}
    assert public == used
