import pygame
import pytest

from mandala.paint.app import _is_ctrl_key, _palette_from_config, _size_values_from_config
from mandala.ui.common import Button, is_gesture_interruption, is_primary_pointer_event, pointer_event_pos


def test_primary_pointer_event_accepts_left_mouse_button():
    event = pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=(10, 10))
    assert is_primary_pointer_event(event, is_down=True)


def test_primary_pointer_event_accepts_touch_emulated_mouse_button_zero():
    event = pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=0, pos=(10, 10), touch=True)
    assert is_primary_pointer_event(event, is_down=True)


def test_primary_pointer_event_rejects_right_mouse_button():
    event = pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=3, pos=(10, 10))
    assert not is_primary_pointer_event(event, is_down=True)


def test_pointer_event_pos_scales_finger_coordinates():
    if not hasattr(pygame, "FINGERDOWN"):
        pytest.skip("pygame build has no finger events")
    event = pygame.event.Event(pygame.FINGERDOWN, x=0.5, y=0.25)
    assert pointer_event_pos(event, pygame.Rect(0, 0, 200, 100)) == (100, 25)


def test_focus_loss_interrupts_gesture():
    if not hasattr(pygame, "WINDOWFOCUSLOST"):
        pytest.skip("pygame build has no window focus events")
    assert is_gesture_interruption(pygame.event.Event(pygame.WINDOWFOCUSLOST))
    assert not is_gesture_interruption(pygame.event.Event(pygame.MOUSEMOTION, pos=(0, 0)))


def test_disabled_button_ignores_hits():
    button = Button(rect=pygame.Rect(0, 0, 10, 10), label="Undo", enabled=False)
    assert not button.hit((5, 5))
    button.enabled = True
    assert button.hit((5, 5))


def test_ctrl_shortcuts_respect_shift():
    undo = pygame.event.Event(pygame.KEYDOWN, key=pygame.K_z, mod=pygame.KMOD_LCTRL)
    redo = pygame.event.Event(pygame.KEYDOWN, key=pygame.K_z, mod=pygame.KMOD_LCTRL | pygame.KMOD_LSHIFT)
    plain = pygame.event.Event(pygame.KEYDOWN, key=pygame.K_z, mod=0)

    assert _is_ctrl_key(undo, pygame.K_z)
    assert not _is_ctrl_key(redo, pygame.K_z)
    assert _is_ctrl_key(redo, pygame.K_z, shift=True)
    assert not _is_ctrl_key(plain, pygame.K_z)


def test_palette_from_config_skips_invalid_entries():
    palette = _palette_from_config({"palette": [[0, 0, 0], "blue", [10, 20, 30]]})
    assert palette == [(0, 0, 0), (10, 20, 30)]


def test_size_values_fall_back_to_line_width():
    assert _size_values_from_config({"size_values": [2, "x", -1, 6]}, 5.0) == [2.0, 6.0]
    assert _size_values_from_config({}, 5.0) == [5.0]


def _bare_app():
    from mandala.drawing.session import DrawingSession
    from mandala.paint.app import PaintApp

    app = PaintApp.__new__(PaintApp)
    app.session = DrawingSession(line_color=(0, 0, 0))
    app.session.add_listener(app)
    app.canvas_rect = pygame.Rect(100, 0, 200, 200)
    app.canvas_dirty = False
    app.current_tool = "pen"
    app.current_color = (0, 0, 0)
    app.action_buttons = {
        "undo": Button(rect=pygame.Rect(0, 0, 50, 20), label="Undo", enabled=False),
        "redo": Button(rect=pygame.Rect(0, 30, 50, 20), label="Redo", enabled=False),
        "save": Button(rect=pygame.Rect(0, 60, 50, 20), label="Save"),
    }
    app.tool_buttons = {}
    app.size_buttons = {}
    app.palette_buttons = []
    return app


def test_pointer_gesture_draws_in_canvas_coordinates():
    app = _bare_app()

    app._handle_pointer_down((110, 10))
    app._handle_pointer_move((120, 30))
    app._handle_pointer_up()

    strokes = app.session.history.strokes
    assert len(strokes) == 1
    assert strokes[0].points == ((10, 10), (20, 30))
    assert app.canvas_dirty
    assert app.action_buttons["undo"].enabled
    assert not app.action_buttons["redo"].enabled


def test_undo_button_updates_availability():
    app = _bare_app()
    app._handle_pointer_down((110, 10))
    app._handle_pointer_up()

    app._handle_pointer_down((5, 5))

    assert app.session.history.committed == ()
    assert not app.action_buttons["undo"].enabled
    assert app.action_buttons["redo"].enabled


def test_bucket_tool_fills_with_selected_color():
    app = _bare_app()
    app._select_color((255, 0, 0))
    for point in [(110, 10), (150, 10), (150, 50), (110, 50)]:
        if point == (110, 10):
            app._handle_pointer_down(point)
        else:
            app._handle_pointer_move(point)
    app._handle_pointer_up()

    app._select_tool("bucket")
    app._handle_pointer_down((130, 30))
    app._handle_pointer_up()

    fills = app.session.history.fills
    assert len(fills) == 1
    assert fills[0].color == (255, 0, 0)
    assert app.session.fill_mode
    assert not app.session.erase_mode



def test_pointer_down_marks_canvas_dirty_through_session():
    app = _bare_app()

    app._handle_pointer_down((110, 10))

    assert app.canvas_dirty
    assert app.session.current_stroke is not None
