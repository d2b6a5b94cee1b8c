"""
Tests for the Edit Session Controller.

Tests cover:
- Slider previews, superseded previews and edit commits
- Undo/redo round trips and transient state reset
- Placement gestures, confirmation, failures and retries
- Busy-state rejection while an external call is outstanding
- Queued edit commits and slider validation
- Scene masking and inpainting
- Automatic and brush-based background removal
- Intent dispatch
"""

import threading
import unittest

import numpy as np

from SC_Libs.constants import FILTER_COLOR_ADJUST, FILTER_SHARPEN, MASK_SELECTED, MAX_PLACEMENT_SCALE
from SC_Libs.errors import (
    EmptyMaskError,
    InputShapeError,
    MissingAssetError,
    NoEditsError,
    NoProposalError,
    PointOutsideImageError,
    ProposalActiveError,
    SessionBusyError,
    SessionStateError,
    UnsupportedImageError,
)
from SC_Libs.GeometryLib.letterbox import PercentPoint
from SC_Libs.ImageEditingLib.edit_pipeline import render_full_resolution
from SC_Libs.ImageEditingLib.filter_registry import FilterRegistry, register_default_filters
from SC_Libs.ImageEditingLib.image_models import RESET_EDITS, Edits, PixelBuffer
from SC_Libs.SessionLib.edit_session import (
    APPLY_EDITS_FAILED,
    BRUSH_BACKGROUND_FAILED,
    EMPTY_BACKGROUND_MASK_MESSAGE,
    EMPTY_OBJECT_MASK_MESSAGE,
    GENERATE_FAILED,
    REMOVE_OBJECT_FAILED,
    EditSessionController,
)
from SC_Libs.SessionLib.intents import (
    CancelPlacement,
    CommitEdits,
    CommitPlacement,
    ConfirmMask,
    PlaceProduct,
    PointerDown,
    PointerMove,
    PointerUp,
    Redo,
    SetPlacementScale,
    SliderChanged,
    ToggleMaskMode,
    Undo,
)
from SC_Libs.SessionLib.placement_model import ProductSlot
from SC_Libs.SessionLib.services import CompositeResult, SceneServices
from SC_Libs.SessionLib.session_config import SessionConfig
from conftest import make_gradient

TIMEOUT = 10


class FakeServices(SceneServices):
    """In-process stand-in for the image service."""

    def __init__(self):
        self.calls = []
        self.fail = False
        self.gate = None

    def _wait_and_maybe_fail(self):
        if self.gate is not None:
            self.gate.wait(TIMEOUT)
        if self.fail:
            raise RuntimeError("backend unavailable")

    def composite_scene(self, product_image, product_label, scene_image, scene_label, position, scale):
        self.calls.append(("composite_scene", product_label, scene_label, position, scale))
        self._wait_and_maybe_fail()
        return CompositeResult(
            final_image=PixelBuffer.blank(scene_image.width, scene_image.height, (0, 200, 0, 255)),
            debug_prompt="lamp on table",
        )

    def remove_background(self, product_image):
        self.calls.append(("remove_background", product_image))
        self._wait_and_maybe_fail()
        return PixelBuffer.blank(product_image.width, product_image.height)

    def remove_background_with_mask(self, product_image, mask):
        self.calls.append(("remove_background_with_mask", mask))
        self._wait_and_maybe_fail()
        return PixelBuffer.blank(product_image.width, product_image.height, (5, 5, 5, 5))

    def inpaint(self, scene_image, mask):
        self.calls.append(("inpaint", mask))
        self._wait_and_maybe_fail()
        return PixelBuffer.blank(scene_image.width, scene_image.height, (9, 9, 9, 255))


class SessionTestCase(unittest.TestCase):
    """Session with a 200x150 scene shown in a 300x150 container.

    The scene is height-fit: rendered 200x150 with a 50 px margin left and
    right. Previews and scene masks are 100x75.
    """

    registry = None

    def setUp(self):
        self.services = FakeServices()
        self.session = EditSessionController(
            self.services,
            config=SessionConfig(preview_max_dim=100),
            container_size=(300, 150),
            registry=self.registry,
        )
        self.scene = make_gradient(200, 150)
        self.session.load_scene(self.scene, "room.png")
        self.lamp = PixelBuffer.blank(20, 20, (255, 255, 0, 255))
        self.session.load_product(ProductSlot.PRODUCT_1, self.lamp, "lamp.png")

    def tearDown(self):
        if self.services.gate is not None:
            self.services.gate.set()
        self.session.shutdown()


class TestEdits(SessionTestCase):
    """Test slider previews and edit commits."""

    def test_preview_rendered_at_preview_size(self):
        outcome = self.session.set_edit("sharpen", 50).result(TIMEOUT)

        self.assertTrue(outcome.ok)
        self.assertEqual(outcome.image.size, (100, 75))
        self.assertIs(self.session.preview_image, outcome.image)
        self.assertIs(self.session.display_image, outcome.image)

    def test_commit_then_undo_is_bit_identical(self):
        """Test that undoing a committed edit restores the exact pre-edit entry."""
        self.session.set_edit("brightness", 150).result(TIMEOUT)

        outcome = self.session.commit_edits().result(TIMEOUT)

        self.assertTrue(outcome.ok)
        self.assertEqual(len(self.session.history), 2)
        self.assertEqual(outcome.entry.name, "edited-room.png")
        self.assertEqual(outcome.entry.image, render_full_resolution(self.scene, Edits(brightness=150)))
        self.assertEqual(self.session.edits, RESET_EDITS)
        self.assertIsNone(self.session.preview_image)

        self.assertTrue(self.session.undo())
        self.assertEqual(self.session.current_entry().image.to_bytes(), self.scene.to_bytes())

        self.assertTrue(self.session.redo())
        self.assertIs(self.session.current_entry(), outcome.entry)

    def test_commit_without_edits_rejected(self):
        with self.assertRaises(NoEditsError):
            self.session.commit_edits()
        self.assertEqual(len(self.session.history), 1)
        self.assertIsNotNone(self.session.error_message)

    def test_undo_resets_edits_mask_and_placement(self):
        self.session.set_edit("contrast", 120).result(TIMEOUT)
        self.session.commit_edits().result(TIMEOUT)
        self.session.set_edit("vignette", 40).result(TIMEOUT)
        self.session.toggle_mask_mode()

        self.assertTrue(self.session.undo())

        self.assertEqual(self.session.edits, RESET_EDITS)
        self.assertFalse(self.session.mask_mode)
        self.assertIsNone(self.session.placement.active)

    def test_unknown_edit_field_rejected(self):
        with self.assertRaises(InputShapeError):
            self.session.set_edit("hue", 10)
        self.assertEqual(self.session.edits, RESET_EDITS)
        self.assertIsNotNone(self.session.error_message)

    def test_out_of_range_edit_rejected(self):
        with self.assertRaises(InputShapeError):
            self.session.set_edit("brightness", 250)
        self.assertEqual(self.session.edits, RESET_EDITS)
        self.assertIsNotNone(self.session.error_message)

    def test_undo_redo_noop_at_bounds(self):
        self.assertFalse(self.session.undo())
        self.assertFalse(self.session.redo())
        self.assertEqual(self.session.history.cursor, 0)


class TestSupersededPreview(unittest.TestCase):
    """Test that an older preview never overwrites a newer one."""

    def test_stale_preview_discarded(self):
        gate = threading.Event()
        started = threading.Event()
        registry = FilterRegistry()
        register_default_filters(registry)
        sharpen = registry.get_executor(FILTER_SHARPEN)
        registry.unregister(FILTER_SHARPEN)
        calls = []

        def blocking_sharpen(buffer, edits):
            calls.append(edits)
            if len(calls) == 1:
                started.set()
                gate.wait(TIMEOUT)
            return sharpen(buffer, edits)

        registry.register(FILTER_SHARPEN, blocking_sharpen)

        session = EditSessionController(FakeServices(), registry=registry)
        try:
            session.load_scene(make_gradient(40, 30), "room.png")
            first = session.set_edit("brightness", 150)
            self.assertTrue(started.wait(TIMEOUT))
            second = session.set_edit("brightness", 50)
            gate.set()

            first_outcome = first.result(TIMEOUT)
            second_outcome = second.result(TIMEOUT)

            self.assertFalse(first_outcome.ok)
            self.assertTrue(second_outcome.ok)
            self.assertIs(session.preview_image, second_outcome.image)
        finally:
            gate.set()
            session.shutdown()


class TestPipelineFailure(SessionTestCase):
    """Test that a failing stage aborts the commit without touching history."""

    def setUp(self):
        registry = FilterRegistry()
        register_default_filters(registry)
        registry.unregister(FILTER_COLOR_ADJUST)

        def broken(buffer, edits):
            raise RuntimeError("corrupt buffer")

        registry.register(FILTER_COLOR_ADJUST, broken)
        self.registry = registry
        super().setUp()

    def test_failed_commit_leaves_history(self):
        preview = self.session.set_edit("brightness", 120).result(TIMEOUT)
        self.assertFalse(preview.ok)

        outcome = self.session.commit_edits().result(TIMEOUT)

        self.assertFalse(outcome.ok)
        self.assertTrue(outcome.message.startswith(APPLY_EDITS_FAILED))
        self.assertEqual(len(self.session.history), 1)
        self.assertFalse(self.session.is_busy)


class TestPlacement(SessionTestCase):
    """Test product placement."""

    def test_place_projects_pointer(self):
        proposal = self.session.place_product(ProductSlot.PRODUCT_1, (150, 75))
        self.assertEqual(proposal.position, PercentPoint(50.0, 50.0))
        self.assertEqual(proposal.scale, 1.0)

    def test_place_in_margin_rejected(self):
        with self.assertRaises(PointOutsideImageError):
            self.session.place_product(ProductSlot.PRODUCT_1, (20, 75))
        self.assertIsNone(self.session.placement.active)

    def test_second_proposal_rejected(self):
        self.session.place_product(ProductSlot.PRODUCT_1, (150, 75))
        with self.assertRaises(ProposalActiveError):
            self.session.place_product(ProductSlot.PRODUCT_1, (160, 75))

    def test_missing_product_rejected(self):
        with self.assertRaises(MissingAssetError):
            self.session.place_product(ProductSlot.PRODUCT_2, (150, 75))

    def test_drag_moves_proposal(self):
        self.session.dispatch(PlaceProduct(ProductSlot.PRODUCT_1, (150, 75)))
        self.session.dispatch(PointerDown(1, (150, 75)))
        proposal = self.session.dispatch(PointerMove(1, (180, 90)))
        self.session.dispatch(PointerUp(1))

        self.assertAlmostEqual(proposal.position.x, 60.0)
        self.assertAlmostEqual(proposal.position.y, 60.0)

    def test_pinch_scales_and_suspends_translation(self):
        self.session.place_product(ProductSlot.PRODUCT_1, (150, 75))
        self.session.pointer_down(1, (100, 75))
        self.session.pointer_down(2, (200, 75))

        proposal = self.session.pointer_move(2, (300, 75))
        self.assertAlmostEqual(proposal.scale, 2.0)

        self.session.pointer_up(2)
        proposal = self.session.pointer_move(1, (10, 10))
        self.assertEqual(proposal.position, PercentPoint(50.0, 50.0))

    def test_slider_scale_clamped(self):
        self.session.place_product(ProductSlot.PRODUCT_1, (150, 75))
        proposal = self.session.dispatch(SetPlacementScale(10))
        self.assertEqual(proposal.scale, MAX_PLACEMENT_SCALE)

    def test_cancel(self):
        self.session.place_product(ProductSlot.PRODUCT_1, (150, 75))
        self.session.dispatch(CancelPlacement())
        self.assertIsNone(self.session.placement.active)

    def test_confirm_commits_generated_scene(self):
        self.session.place_product(ProductSlot.PRODUCT_1, (150, 75))
        self.session.set_placement_scale(1.5)

        outcome = self.session.dispatch(CommitPlacement()).result(TIMEOUT)

        self.assertTrue(outcome.ok)
        self.assertEqual(len(self.session.history), 2)
        entry = self.session.current_entry()
        self.assertIs(entry, outcome.entry)
        self.assertTrue(entry.name.startswith("generated-scene-"))
        self.assertTrue(entry.name.endswith(".jpeg"))
        self.assertEqual(entry.debug.prompt, "lamp on table")
        self.assertIsNone(self.session.placement.active)
        self.assertEqual(
            self.services.calls[0],
            ("composite_scene", "lamp.png", "room.png", PercentPoint(50.0, 50.0), 1.5),
        )

    def test_failed_confirm_keeps_history_and_proposal(self):
        """Test that an external failure is retryable and commits nothing."""
        self.services.fail = True
        proposal = self.session.place_product(ProductSlot.PRODUCT_1, (150, 75))

        outcome = self.session.confirm_placement().result(TIMEOUT)

        self.assertFalse(outcome.ok)
        self.assertTrue(outcome.message.startswith(GENERATE_FAILED))
        self.assertEqual(self.session.error_message, outcome.message)
        self.assertEqual(len(self.session.history), 1)
        self.assertEqual(self.session.history.cursor, 0)
        self.assertEqual(self.session.placement.active, proposal)

        self.services.fail = False
        retry = self.session.confirm_placement().result(TIMEOUT)
        self.assertTrue(retry.ok)
        self.assertEqual(len(self.session.history), 2)
        self.assertIsNone(self.session.error_message)

    def test_confirm_without_proposal(self):
        with self.assertRaises(NoProposalError):
            self.session.confirm_placement()


class TestBusyState(SessionTestCase):
    """Test that destructive commands wait for outstanding external calls."""

    def test_no_idle_window_while_submitting(self):
        """Test that a concurrent undo never sees the session idle mid-confirm."""
        self.services.gate = threading.Event()
        self.session.place_product(ProductSlot.PRODUCT_1, (150, 75))
        results = []
        submit = self.session._submit_external

        def attempt_undo():
            try:
                self.session.undo()
                results.append("undo ran")
            except SessionBusyError:
                results.append("busy")

        racer = threading.Thread(target=attempt_undo)

        def submit_with_racer(*args):
            racer.start()
            racer.join(0.2)
            return submit(*args)

        self.session._submit_external = submit_with_racer
        future = self.session.confirm_placement()
        racer.join(TIMEOUT)

        self.assertEqual(results, ["busy"])
        self.services.gate.set()
        self.assertTrue(future.result(TIMEOUT).ok)

    def test_commands_rejected_while_busy(self):
        self.services.gate = threading.Event()
        self.session.place_product(ProductSlot.PRODUCT_1, (150, 75))
        future = self.session.confirm_placement()

        self.assertTrue(self.session.is_busy)
        with self.assertRaises(SessionBusyError):
            self.session.undo()
        with self.assertRaises(SessionBusyError):
            self.session.dispatch(Redo())
        with self.assertRaises(SessionBusyError):
            self.session.place_product(ProductSlot.PRODUCT_1, (150, 75))
        with self.assertRaises(SessionBusyError):
            self.session.confirm_placement()
        with self.assertRaises(SessionBusyError):
            self.session.commit_edits()
        with self.assertRaises(SessionBusyError):
            self.session.load_scene(self.scene, "other.png")

        self.services.gate.set()
        self.assertTrue(future.result(TIMEOUT).ok)
        self.assertFalse(self.session.is_busy)
        self.assertTrue(self.session.dispatch(Undo()))


class TestSceneMask(SessionTestCase):
    """Test remove-object masking."""

    def test_mask_sized_to_preview(self):
        self.assertTrue(self.session.dispatch(ToggleMaskMode()))
        self.assertEqual(self.session.stroke_mask.size, (100, 75))
        self.assertIsNone(self.session.mask_target)

        self.assertFalse(self.session.dispatch(ToggleMaskMode()))
        self.assertIsNone(self.session.stroke_mask)

    def test_empty_mask_rejected(self):
        self.session.toggle_mask_mode()
        with self.assertRaises(EmptyMaskError):
            self.session.dispatch(ConfirmMask())
        self.assertEqual(self.session.error_message, EMPTY_OBJECT_MASK_MESSAGE)
        self.assertEqual(self.services.calls, [])

    def test_confirm_without_mask_mode(self):
        with self.assertRaises(SessionStateError):
            self.session.confirm_mask()

    def _paint_stroke(self):
        self.session.dispatch(PointerDown(1, (150, 75)))
        self.session.dispatch(PointerMove(1, (200, 100)))
        self.session.dispatch(PointerUp(1))

    def test_inpaint_with_full_resolution_mask(self):
        self.session.toggle_mask_mode()
        self._paint_stroke()

        outcome = self.session.dispatch(ConfirmMask()).result(TIMEOUT)

        self.assertTrue(outcome.ok)
        name, mask = self.services.calls[0]
        self.assertEqual(name, "inpaint")
        self.assertEqual(mask.size, (200, 150))
        self.assertEqual(set(np.unique(mask.pixels[:, :, :3]).tolist()), {0, 255})
        self.assertEqual(tuple(mask.pixels[75, 100]), MASK_SELECTED)
        self.assertTrue(outcome.entry.name.startswith("inpainted-scene-"))
        self.assertEqual(len(self.session.history), 2)
        self.assertFalse(self.session.mask_mode)

    def test_failed_inpaint_keeps_mask(self):
        self.services.fail = True
        self.session.toggle_mask_mode()
        self._paint_stroke()

        outcome = self.session.confirm_mask().result(TIMEOUT)

        self.assertFalse(outcome.ok)
        self.assertTrue(outcome.message.startswith(REMOVE_OBJECT_FAILED))
        self.assertTrue(self.session.mask_mode)
        self.assertFalse(self.session.stroke_mask.is_empty())
        self.assertEqual(len(self.session.history), 1)

    def test_mask_mode_cancels_placement(self):
        self.session.place_product(ProductSlot.PRODUCT_1, (150, 75))
        self.session.toggle_mask_mode()
        self.assertIsNone(self.session.placement.active)


class TestBackgroundRemoval(SessionTestCase):
    """Test automatic and brush-based background removal."""

    def test_remove_background_replaces_product(self):
        outcome = self.session.remove_background(ProductSlot.PRODUCT_1).result(TIMEOUT)

        self.assertTrue(outcome.ok)
        self.assertEqual(outcome.product.name, "bg-removed-lamp.png")
        self.assertIs(self.session.products[ProductSlot.PRODUCT_1], outcome.product)
        self.assertEqual(len(self.session.history), 1)

    def test_remove_background_missing_product(self):
        with self.assertRaises(MissingAssetError):
            self.session.remove_background(ProductSlot.PRODUCT_2)

    def test_brush_removal_uses_product_sized_mask(self):
        mask = self.session.begin_manual_background_removal(ProductSlot.PRODUCT_1, (40, 40))
        self.assertEqual(mask.size, (20, 20))
        self.assertEqual(self.session.mask_target, ProductSlot.PRODUCT_1)

        self.session.dispatch(PointerDown(1, (20, 20)))
        self.session.dispatch(PointerMove(1, (30, 30)))
        self.session.dispatch(PointerUp(1))
        outcome = self.session.dispatch(ConfirmMask()).result(TIMEOUT)

        self.assertTrue(outcome.ok)
        name, sent_mask = self.services.calls[0]
        self.assertEqual(name, "remove_background_with_mask")
        self.assertEqual(sent_mask.size, (20, 20))
        self.assertEqual(tuple(sent_mask.pixels[12, 12]), MASK_SELECTED)
        self.assertEqual(self.session.products[ProductSlot.PRODUCT_1].name, "bg-removed-lamp.png")
        self.assertFalse(self.session.mask_mode)

    def test_brush_removal_empty_mask(self):
        self.session.begin_manual_background_removal(ProductSlot.PRODUCT_1, (40, 40))
        with self.assertRaises(EmptyMaskError):
            self.session.confirm_manual_background_removal()
        self.assertEqual(self.session.error_message, EMPTY_BACKGROUND_MASK_MESSAGE)

    def test_brush_removal_failure(self):
        self.services.fail = True
        self.session.begin_manual_background_removal(ProductSlot.PRODUCT_1, (40, 40))
        self.session.pointer_down(1, (10, 10))
        self.session.pointer_move(1, (30, 30))
        self.session.pointer_up(1)

        outcome = self.session.confirm_manual_background_removal().result(TIMEOUT)

        self.assertFalse(outcome.ok)
        self.assertTrue(outcome.message.startswith(BRUSH_BACKGROUND_FAILED))
        self.assertEqual(self.session.products[ProductSlot.PRODUCT_1].name, "lamp.png")


class TestCommitQueue(SessionTestCase):
    """Test that edit commits queue behind one another."""

    def setUp(self):
        self.commit_started = threading.Event()
        self.release = threading.Event()
        registry = FilterRegistry()
        register_default_filters(registry)
        sharpen = registry.get_executor(FILTER_SHARPEN)
        registry.unregister(FILTER_SHARPEN)

        def held_sharpen(buffer, edits):
            # Hold only the first full-resolution render.
            if threading.current_thread().name.startswith("sc-commit") and not self.commit_started.is_set():
                self.commit_started.set()
                self.release.wait(TIMEOUT)
            return sharpen(buffer, edits)

        registry.register(FILTER_SHARPEN, held_sharpen)
        self.registry = registry
        super().setUp()

    def tearDown(self):
        self.release.set()
        super().tearDown()

    def test_second_commit_stacks_on_first(self):
        self.session.set_edit("brightness", 150).result(TIMEOUT)
        first = self.session.commit_edits()
        self.assertTrue(self.commit_started.wait(TIMEOUT))

        self.session.set_edit("vignette", 50).result(TIMEOUT)
        second = self.session.commit_edits()
        self.session.set_edit("contrast", 80).result(TIMEOUT)
        self.assertTrue(self.session.is_busy)
        self.release.set()

        first_outcome = first.result(TIMEOUT)
        second_outcome = second.result(TIMEOUT)

        self.assertTrue(first_outcome.ok)
        self.assertTrue(second_outcome.ok)
        self.assertEqual(len(self.session.history), 3)
        self.assertIs(self.session.current_entry(), second_outcome.entry)
        self.assertEqual(second_outcome.entry.name, "edited-edited-room.png")
        self.assertEqual(
            second_outcome.entry.image,
            render_full_resolution(first_outcome.entry.image, Edits(brightness=150, vignette=50)),
        )
        self.assertFalse(self.session.is_busy)

    def test_slider_moves_during_commit_are_kept(self):
        self.session.set_edit("brightness", 150).result(TIMEOUT)
        future = self.session.commit_edits()
        self.assertTrue(self.commit_started.wait(TIMEOUT))
        self.session.set_edit("contrast", 80).result(TIMEOUT)
        self.release.set()

        self.assertTrue(future.result(TIMEOUT).ok)
        self.assertEqual(self.session.edits, Edits(brightness=150, contrast=80))


class TestSessionLifecycle(unittest.TestCase):
    """Test scene loading, reset and dispatch."""

    def test_load_scene_replaces_history(self):
        with EditSessionController(FakeServices(), container_size=(100, 100)) as session:
            session.load_scene(PixelBuffer.blank(10, 10), "a.png")
            session.set_edit("brightness", 120).result(TIMEOUT)
            session.commit_edits().result(TIMEOUT)
            self.assertEqual(len(session.history), 2)

            session.load_scene(PixelBuffer.blank(10, 10), "b.png")

            self.assertEqual(len(session.history), 1)
            self.assertEqual(session.current_entry().name, "b.png")
            self.assertEqual(session.edits, RESET_EDITS)

    def test_reset_clears_everything(self):
        with EditSessionController(FakeServices()) as session:
            session.load_scene(PixelBuffer.blank(10, 10), "a.png")
            session.load_product(ProductSlot.PRODUCT_2, PixelBuffer.blank(2, 2), "p.png")
            session.reset()
            self.assertEqual(len(session.history), 0)
            self.assertEqual(session.products, {})
            self.assertIsNone(session.selected_slot)

    def test_placement_requires_container(self):
        with EditSessionController(FakeServices()) as session:
            session.load_scene(PixelBuffer.blank(10, 10), "a.png")
            session.load_product(ProductSlot.PRODUCT_1, PixelBuffer.blank(2, 2), "p.png")
            with self.assertRaises(SessionStateError):
                session.place_product(ProductSlot.PRODUCT_1, (5, 5))

    def test_unsupported_scene_file(self):
        with EditSessionController(FakeServices()) as session:
            with self.assertRaises(UnsupportedImageError):
                session.load_scene_file("scene.gif")
            self.assertIsNotNone(session.error_message)

    def test_preview_requires_scene(self):
        with EditSessionController(FakeServices()) as session:
            with self.assertRaises(MissingAssetError):
                session.request_preview()

    def test_dispatch_slider_and_commit(self):
        with EditSessionController(FakeServices()) as session:
            session.load_scene(make_gradient(12, 12), "a.png")
            session.dispatch(SliderChanged("saturation", 0)).result(TIMEOUT)
            outcome = session.dispatch(CommitEdits()).result(TIMEOUT)
            self.assertTrue(outcome.ok)
            self.assertEqual(outcome.entry.name, "edited-a.png")

    def test_container_size_given_at_construction(self):
        with EditSessionController(FakeServices(), container_size=(800, 600)) as session:
            self.assertEqual(session.container_size, (800.0, 600.0))

    def test_set_edit_without_scene_leaves_edits(self):
        with EditSessionController(FakeServices()) as session:
            with self.assertRaises(MissingAssetError):
                session.set_edit("brightness", 150)
            self.assertEqual(session.edits, RESET_EDITS)
            self.assertIsNotNone(session.error_message)

    def test_dispatch_unknown_intent(self):
        with EditSessionController(FakeServices()) as session:
            with self.assertRaises(TypeError):
                session.dispatch(object())


if __name__ == "__main__":
    unittest.main()
