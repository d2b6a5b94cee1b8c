"""
Edit Session Controller.

Single owner of the scene history, the placement proposal, the loaded
products, the current slider edits and the stroke mask. UI code feeds it
intents one at a time; heavy work runs on two single-thread workers:

- the preview worker renders slider previews on a down-scaled copy; a newer
  request supersedes any older one and stale results are dropped
- the commit worker runs full-resolution edit commits and every external
  service call, so commits reach the history stack strictly one at a time

While an external call is outstanding the session is busy: undo, redo,
loading a scene and starting, confirming or masking a placement are rejected
with SessionBusyError.

Submitted work returns a Future resolving to an EditOutcome; worker tasks
never raise. The user-facing error of the last failure is kept in
``error_message``.

Example:
    >>> with EditSessionController(services, container_size=(800, 600)) as session:
    ...     session.load_scene(scene, "room.png")
    ...     session.load_product(ProductSlot.PRODUCT_1, lamp, "lamp.png")
    ...     session.place_product(ProductSlot.PRODUCT_1, (400, 300))
    ...     outcome = session.confirm_placement().result()
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple, Union

from SC_Libs.constants import (
    BG_REMOVED_PREFIX,
    EDITED_FILE_PREFIX,
    GENERATED_SCENE_PREFIX,
    INPAINTED_SCENE_PREFIX,
)
from SC_Libs.errors import (
    EmptyMaskError,
    ExternalServiceError,
    InputShapeError,
    MissingAssetError,
    NoEditsError,
    NoProposalError,
    PipelineError,
    PointOutsideImageError,
    ProposalActiveError,
    SceneCanvasError,
    SessionBusyError,
    SessionStateError,
)
from SC_Libs.GeometryLib.gestures import GestureTracker, clamp_scale
from SC_Libs.GeometryLib.letterbox import (
    Size,
    pointer_to_content_pixels,
    project_point,
    scale_brush_size,
)
from SC_Libs.ImageEditingLib.edit_pipeline import (
    downscale_for_preview,
    render_full_resolution,
    render_preview,
)
from SC_Libs.ImageEditingLib.filter_registry import FilterRegistry
from SC_Libs.ImageEditingLib.image_io import load_image_file, timestamped_name
from SC_Libs.ImageEditingLib.image_models import RESET_EDITS, Edits, PixelBuffer
from SC_Libs.ImageEditingLib.mask_encoder import StrokeMask, resize_mask
from SC_Libs.SessionLib.history_stack import DebugArtifact, HistoryEntry, HistoryStack
from SC_Libs.SessionLib.intents import (
    CancelPlacement,
    CommitEdits,
    CommitPlacement,
    ConfirmMask,
    Intent,
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
from SC_Libs.SessionLib.placement_model import (
    PlacementModel,
    PlacementProposal,
    Product,
    ProductSlot,
)
from SC_Libs.SessionLib.services import CompositeResult, SceneServices
from SC_Libs.SessionLib.session_config import SessionConfig

logger = logging.getLogger(__name__)

GENERATE_FAILED = "Failed to generate the image."
APPLY_EDITS_FAILED = "Failed to apply edits to the image."
REMOVE_OBJECT_FAILED = "Failed to remove object from the scene."
REMOVE_BACKGROUND_FAILED = "Failed to remove background."
BRUSH_BACKGROUND_FAILED = "Failed to remove background with brush."

EMPTY_OBJECT_MASK_MESSAGE = "Please paint a mask over the object you want to remove before confirming."
EMPTY_BACKGROUND_MASK_MESSAGE = "Please paint over the background areas you want to remove before confirming."


@dataclass(frozen=True)
class EditOutcome:
    """Result of a submitted task.

    Attributes:
        ok: True if the task completed and its result was applied
        message: User-facing error or status text
        entry: History entry committed by the task
        image: Rendered preview (preview tasks only)
        product: Replacement product (background removal only)
    """
    ok: bool
    message: str = ""
    entry: Optional[HistoryEntry] = None
    image: Optional[PixelBuffer] = None
    product: Optional[Product] = None


class EditSessionController:
    """Orchestrates one editing session."""

    def __init__(
        self,
        services: SceneServices,
        config: Optional[SessionConfig] = None,
        container_size: Optional[Tuple[float, float]] = None,
        registry: Optional[FilterRegistry] = None,
    ):
        self.services = services
        self.config = config or SessionConfig()
        self.registry = registry

        self.history = HistoryStack()
        self.placement = PlacementModel()
        self.products: Dict[ProductSlot, Product] = {}
        self.selected_slot: Optional[ProductSlot] = None
        self.edits: Edits = RESET_EDITS
        self.preview_image: Optional[PixelBuffer] = None
        self.error_message: Optional[str] = None

        self._lock = threading.RLock()
        self._preview_executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="sc-preview")
        self._commit_executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="sc-commit")

        self._container: Optional[Size] = None
        self._gestures = GestureTracker(container_size=(1, 1))
        if container_size is not None:
            self.set_container_size(*container_size)

        self._mask: Optional[StrokeMask] = None
        self._mask_target: Optional[ProductSlot] = None
        self._mask_container: Optional[Size] = None

        self._preview_cache: Optional[Tuple[HistoryEntry, PixelBuffer]] = None
        self._preview_generation = 0
        self._pending_commits = 0
        self._pending_external = 0

    # ------------------------------------------------------------------
    # Lifecycle

    def __enter__(self) -> "EditSessionController":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    def shutdown(self, wait: bool = True) -> None:
        """Stop both workers. Queued tasks still run when ``wait`` is True."""
        self._commit_executor.shutdown(wait=wait)
        self._preview_executor.shutdown(wait=wait)
        logger.debug("Edit session shut down")

    @property
    def is_busy(self) -> bool:
        with self._lock:
            return self._pending_external > 0 or self._pending_commits > 0

    @property
    def is_external_pending(self) -> bool:
        with self._lock:
            return self._pending_external > 0

    @property
    def container_size(self) -> Optional[Size]:
        return self._container

    def set_container_size(self, width: float, height: float) -> None:
        """Set the size of the display area the scene is letterboxed into."""
        if width <= 0 or height <= 0:
            raise InputShapeError(f"Container size must be positive, got {width}x{height}")
        with self._lock:
            self._container = Size(float(width), float(height))
            self._gestures.container_size = self._container

    def clear_error(self) -> None:
        with self._lock:
            self.error_message = None

    # ------------------------------------------------------------------
    # Scene and products

    def current_entry(self) -> Optional[HistoryEntry]:
        with self._lock:
            return self.history.current()

    @property
    def preview_source(self) -> Optional[PixelBuffer]:
        """Down-scaled copy of the current scene, the buffer previews and masks are sized to."""
        with self._lock:
            entry = self.history.current()
            if entry is None:
                return None
            if self._preview_cache is None or self._preview_cache[0] is not entry:
                self._preview_cache = (entry, downscale_for_preview(entry.image, self.config.preview_max_dim))
            return self._preview_cache[1]

    @property
    def display_image(self) -> Optional[PixelBuffer]:
        """What the scene view should show right now."""
        with self._lock:
            if self.preview_image is not None and self.edits.has_edits:
                return self.preview_image
            return self.preview_source

    def load_scene(self, image: PixelBuffer, name: str = "scene.png") -> HistoryEntry:
        """
        Start over from a new scene image.

        History is replaced by a single entry; edits, placement and the mask
        are cleared.

        Raises:
            SessionBusyError: While a commit or external call is outstanding
        """
        with self._lock:
            self._require_idle("load a scene")
            entry = HistoryEntry(image=image, name=name)
            self.history.reset()
            self.history.commit(entry)
            self._clear_transient_state()
            self.error_message = None
            logger.info(f"Loaded scene '{name}' ({image.width}x{image.height})")
            return entry

    def load_scene_file(self, path: Union[str, Path]) -> HistoryEntry:
        """Load a PNG/JPEG scene from disk."""
        try:
            image = load_image_file(path)
        except InputShapeError as e:
            self._reject(e)
        return self.load_scene(image, Path(path).name)

    def load_product(self, slot: ProductSlot, image: PixelBuffer, name: str) -> Product:
        """Put a product into a slot and select it."""
        with self._lock:
            product = Product(slot=slot, name=name, image=image)
            self.products[slot] = product
            self.selected_slot = slot
            if self._mask_target == slot:
                self._exit_mask_mode()
            logger.info(f"Loaded product '{name}' into {slot.value}")
            return product

    def load_product_file(self, slot: ProductSlot, path: Union[str, Path]) -> Product:
        try:
            image = load_image_file(path)
        except InputShapeError as e:
            self._reject(e)
        return self.load_product(slot, image, Path(path).name)

    def clear_product(self, slot: ProductSlot) -> None:
        with self._lock:
            self.products.pop(slot, None)
            if self.selected_slot == slot:
                self.selected_slot = None
            proposal = self.placement.active
            if proposal is not None and proposal.source == slot:
                self._cancel_placement()
            if self._mask_target == slot:
                self._exit_mask_mode()

    def select_product(self, slot: ProductSlot) -> Product:
        with self._lock:
            product = self._require_product(slot)
            self.selected_slot = slot
            return product

    # ------------------------------------------------------------------
    # Slider edits

    def set_edit(self, field_name: str, value: int) -> "Future[EditOutcome]":
        """
        Change one slider and schedule a preview render.

        Raises:
            MissingAssetError: If no scene is loaded
            InputShapeError: If the field is unknown or the value out of range
        """
        with self._lock:
            if self.history.current() is None:
                self._reject(MissingAssetError("Load a scene before editing"))
            try:
                edits = self.edits.with_value(field_name, value)
            except (KeyError, ValueError) as e:
                self._reject(InputShapeError(f"Invalid edit {field_name}={value}: {e}"))
            self.edits = edits
            return self.request_preview()

    def reset_edits(self) -> None:
        with self._lock:
            self.edits = RESET_EDITS
            self.preview_image = None
            self._preview_generation += 1

    def request_preview(self) -> "Future[EditOutcome]":
        """
        Render the current edits on the preview copy.

        Only the newest request updates ``preview_image``; results of older
        requests are discarded.

        Raises:
            MissingAssetError: If no scene is loaded
        """
        with self._lock:
            source = self.preview_source
            if source is None:
                self._reject(MissingAssetError("Load a scene before editing"))
            self._preview_generation += 1
            generation = self._preview_generation
            edits = self.edits
        return self._preview_executor.submit(self._preview_task, generation, source, edits)

    def _preview_task(self, generation: int, source: PixelBuffer, edits: Edits) -> EditOutcome:
        with self._lock:
            if generation != self._preview_generation:
                return EditOutcome(ok=False, message="Preview superseded")

        try:
            image = render_preview(source, edits, self.registry)
        except PipelineError as e:
            logger.exception("Preview render failed")
            with self._lock:
                if generation == self._preview_generation:
                    self.error_message = f"{APPLY_EDITS_FAILED} {e}"
                return EditOutcome(ok=False, message=f"{APPLY_EDITS_FAILED} {e}")

        with self._lock:
            if generation != self._preview_generation:
                logger.debug(f"Discarding stale preview {generation}")
                return EditOutcome(ok=False, message="Preview superseded")
            self.preview_image = image
        return EditOutcome(ok=True, image=image)

    def commit_edits(self) -> "Future[EditOutcome]":
        """
        Apply the current edits to the full-resolution scene and commit them.

        Commits queue on the commit worker and run one at a time. Each one
        applies to the entry that is current when it starts, so a queued
        commit stacks on top of the commits before it. Slider values are
        reset afterwards only if they have not moved since the commit was
        requested.

        Raises:
            NoEditsError: If every slider is at its reset value
            MissingAssetError: If no scene is loaded
            SessionBusyError: While an external call is outstanding
        """
        with self._lock:
            if self._pending_external:
                raise SessionBusyError("Cannot apply edits while a request is in progress")
            if not self.edits.has_edits:
                self._reject(NoEditsError("No edits to apply"))
            if self.history.current() is None:
                self._reject(MissingAssetError("Load a scene before editing"))
            edits = self.edits
            self._pending_commits += 1
            try:
                return self._commit_executor.submit(self._commit_edits_task, edits)
            except RuntimeError:
                self._pending_commits -= 1
                raise

    def _commit_edits_task(self, edits: Edits) -> EditOutcome:
        try:
            # History only moves through idle-gated commands, so the base
            # stays current until this task finishes.
            with self._lock:
                base = self.history.current()
            if base is None:
                return EditOutcome(ok=False, message="No scene to apply the edits to.")

            try:
                image = render_full_resolution(base.image, edits, self.registry)
            except PipelineError as e:
                logger.exception("Applying edits failed")
                with self._lock:
                    self.error_message = f"{APPLY_EDITS_FAILED} {e}"
                    return EditOutcome(ok=False, message=self.error_message)

            with self._lock:
                entry = HistoryEntry(image=image, name=f"{EDITED_FILE_PREFIX}{base.name}")
                self.history.commit(entry)
                self.preview_image = None
                self._preview_generation += 1
                self.error_message = None
                if self.edits == edits:
                    self.edits = RESET_EDITS
                else:
                    logger.debug(f"Keeping slider values changed since the commit: {self.edits.to_dict()}")
                    self.request_preview()
                return EditOutcome(ok=True, entry=entry)
        finally:
            with self._lock:
                self._pending_commits -= 1

    # ------------------------------------------------------------------
    # History

    def undo(self) -> bool:
        """Step back; edits, mask mode and placement are cleared. False at the first entry."""
        with self._lock:
            self._require_idle("undo")
            moved = self.history.undo()
            if moved:
                self._clear_transient_state()
            return moved

    def redo(self) -> bool:
        """Step forward; edits, mask mode and placement are cleared. False at the last entry."""
        with self._lock:
            self._require_idle("redo")
            moved = self.history.redo()
            if moved:
                self._clear_transient_state()
            return moved

    def reset(self) -> None:
        """Drop the scene, products, history and every transient state."""
        with self._lock:
            self._require_idle("reset the session")
            self.history.reset()
            self.products.clear()
            self.selected_slot = None
            self._clear_transient_state()
            self._preview_cache = None
            self.error_message = None
            logger.info("Session reset")

    # ------------------------------------------------------------------
    # Placement

    def place_product(self, source: ProductSlot, pointer) -> PlacementProposal:
        """
        Drop a product on the scene display at ``pointer``.

        Raises:
            SessionBusyError: While a commit or external call is outstanding
            ProposalActiveError: If a placement is already active
            MissingAssetError: If the product or scene is missing
            PointOutsideImageError: If the pointer is in the letterbox margin
        """
        with self._lock:
            self._require_idle("place a product")
            if self.placement.is_active:
                raise ProposalActiveError("Cancel or confirm the current placement first")
            self._require_product(source)
            scene = self._require_scene()
            container = self._require_container()

            position = project_point(pointer, container, scene.image.size)
            if position is None:
                self._reject(PointOutsideImageError("Drop the product onto the scene image"))

            if self._mask is not None:
                self._exit_mask_mode()
            self.selected_slot = source
            return self.placement.propose(source, position)

    def update_placement(self, position=None, scale: Optional[float] = None) -> PlacementProposal:
        with self._lock:
            if scale is not None:
                scale = clamp_scale(scale)
            return self.placement.update(position=position, scale=scale)

    def set_placement_scale(self, scale: float) -> PlacementProposal:
        """Set the scale from a slider; clamped like a pinch."""
        return self.update_placement(scale=scale)

    def cancel_placement(self) -> None:
        with self._lock:
            self._cancel_placement()

    def confirm_placement(self) -> "Future[EditOutcome]":
        """
        Send the active placement to the compositor.

        On success the generated scene is committed and the proposal cleared.
        On failure history and proposal are left as they were so the request
        can be retried.

        Raises:
            SessionBusyError: While a commit or external call is outstanding
            NoProposalError: If no placement is active
            MissingAssetError: If the product or scene is missing
        """
        with self._lock:
            self._require_idle("confirm the placement")
            proposal = self.placement.active
            if proposal is None:
                raise NoProposalError("No placement to confirm")
            product = self._require_product(proposal.source)
            scene = self._require_scene()
            request = self.placement.confirm(product, scene.image, scene.name)
            self._gestures.reset()

            def call() -> CompositeResult:
                return self.services.composite_scene(
                    request.product_image,
                    request.product_label,
                    request.scene_image,
                    request.scene_label,
                    request.position,
                    request.scale,
                )

            def apply(result: CompositeResult) -> EditOutcome:
                if not isinstance(result, CompositeResult) or not isinstance(result.final_image, PixelBuffer):
                    raise PipelineError("Compositor returned no image")
                debug = None
                if result.debug_image is not None or result.debug_prompt is not None:
                    debug = DebugArtifact(image=result.debug_image, prompt=result.debug_prompt)
                entry = HistoryEntry(
                    image=result.final_image,
                    name=timestamped_name(GENERATED_SCENE_PREFIX),
                    debug=debug,
                )
                self.history.commit(entry)
                self._clear_transient_state()
                return EditOutcome(ok=True, entry=entry)

            return self._submit_external("composite_scene", GENERATE_FAILED, call, apply)

    # ------------------------------------------------------------------
    # Masking

    @property
    def mask_mode(self) -> bool:
        return self._mask is not None

    @property
    def stroke_mask(self) -> Optional[StrokeMask]:
        return self._mask

    @property
    def mask_target(self) -> Optional[ProductSlot]:
        """Product being masked for background removal, or None for the scene."""
        return self._mask_target

    def toggle_mask_mode(self) -> bool:
        """
        Enter or leave "remove object" masking on the scene.

        Entering cancels any active placement. The stroke layer has the size
        of the preview copy. Returns the new mask mode.
        """
        with self._lock:
            if self._mask is not None:
                self._exit_mask_mode()
                return False

            source = self.preview_source
            if source is None:
                self._reject(MissingAssetError("Load a scene before masking"))
            self._cancel_placement()
            self._mask = StrokeMask(source.width, source.height, brush_size=self.config.brush_size)
            self._mask_target = None
            self._mask_container = None
            logger.debug(f"Mask mode on ({source.width}x{source.height})")
            return True

    def set_brush_size(self, brush_size: int) -> None:
        with self._lock:
            self.config = SessionConfig.from_dict({**self.config.to_dict(), "brush_size": brush_size})

    def clear_mask(self) -> None:
        with self._lock:
            if self._mask is not None:
                self._mask.clear()

    def confirm_mask(self) -> "Future[EditOutcome]":
        """
        Inpaint the masked area of the scene.

        The mask is painted at preview size and resized to the full scene
        before it is sent. On success the result is committed and mask mode
        ends; on failure the mask is kept for a retry.

        Raises:
            SessionStateError: If scene masking is not active
            EmptyMaskError: If nothing was painted
            SessionBusyError: While a commit or external call is outstanding
        """
        with self._lock:
            self._require_idle("remove an object")
            if self._mask is None or self._mask_target is not None:
                raise SessionStateError("Scene mask mode is not active")
            if self._mask.is_empty():
                self._reject(EmptyMaskError(EMPTY_OBJECT_MASK_MESSAGE))
            scene = self._require_scene()
            mask = resize_mask(self._mask.encode(), scene.image.size)

            def call() -> PixelBuffer:
                return self.services.inpaint(scene.image, mask)

            def apply(result: PixelBuffer) -> EditOutcome:
                if not isinstance(result, PixelBuffer):
                    raise PipelineError("Inpainting returned no image")
                entry = HistoryEntry(image=result, name=timestamped_name(INPAINTED_SCENE_PREFIX))
                self.history.commit(entry)
                self._clear_transient_state()
                return EditOutcome(ok=True, entry=entry)

            return self._submit_external("inpaint", REMOVE_OBJECT_FAILED, call, apply)

    # ------------------------------------------------------------------
    # Background removal

    def remove_background(self, slot: ProductSlot) -> "Future[EditOutcome]":
        """Automatically remove a product's background; the product is replaced on success."""
        with self._lock:
            self._require_idle("remove the background")
            product = self._require_product(slot)

            def call() -> PixelBuffer:
                return self.services.remove_background(product.image)

            return self._submit_external(
                "remove_background", REMOVE_BACKGROUND_FAILED, call,
                lambda result: self._replace_product(product, result),
            )

    def begin_manual_background_removal(self, slot: ProductSlot, container_size) -> StrokeMask:
        """
        Start painting background areas on a product.

        The stroke layer has the product's native size; pointer positions are
        mapped from ``container_size``, the area the product is shown in.
        """
        with self._lock:
            product = self._require_product(slot)
            container = Size(float(container_size[0]), float(container_size[1]))
            if container.width <= 0 or container.height <= 0:
                raise InputShapeError(f"Container size must be positive, got {container.width}x{container.height}")
            self._cancel_placement()
            self._mask = StrokeMask(product.image.width, product.image.height, brush_size=self.config.brush_size)
            self._mask_target = slot
            self._mask_container = container
            return self._mask

    def cancel_mask(self) -> None:
        with self._lock:
            self._exit_mask_mode()

    def confirm_manual_background_removal(self) -> "Future[EditOutcome]":
        """
        Send the painted product mask for background removal.

        Raises:
            SessionStateError: If product masking is not active
            EmptyMaskError: If nothing was painted
            SessionBusyError: While a commit or external call is outstanding
        """
        with self._lock:
            self._require_idle("remove the background")
            if self._mask is None or self._mask_target is None:
                raise SessionStateError("Product mask mode is not active")
            if self._mask.is_empty():
                self._reject(EmptyMaskError(EMPTY_BACKGROUND_MASK_MESSAGE))
            product = self._require_product(self._mask_target)
            mask = self._mask.encode()

            def call() -> PixelBuffer:
                return self.services.remove_background_with_mask(product.image, mask)

            def apply(result: PixelBuffer) -> EditOutcome:
                outcome = self._replace_product(product, result)
                self._exit_mask_mode()
                return outcome

            return self._submit_external("remove_background_with_mask", BRUSH_BACKGROUND_FAILED, call, apply)

    def _replace_product(self, product: Product, result: PixelBuffer) -> EditOutcome:
        if not isinstance(result, PixelBuffer):
            raise PipelineError("Background removal returned no image")
        replacement = Product(slot=product.slot, name=f"{BG_REMOVED_PREFIX}{product.name}", image=result)
        self.products[product.slot] = replacement
        logger.info(f"Replaced {product.slot.value} with '{replacement.name}'")
        return EditOutcome(ok=True, product=replacement)

    # ------------------------------------------------------------------
    # Pointer input

    def pointer_down(self, pointer_id: int, pointer) -> None:
        with self._lock:
            if self._mask is not None:
                if not self._mask.is_drawing:
                    container = self._mask_container or self._require_container()
                    self._mask.brush_size = scale_brush_size(self.config.brush_size, container, self._mask.size)
                    self._mask.begin_stroke(pointer_to_content_pixels(pointer, container, self._mask.size))
                return

            proposal = self.placement.active
            if proposal is not None:
                self._require_container()
                self._gestures.pointer_down(pointer_id, pointer, proposal.position, proposal.scale)

    def pointer_move(self, pointer_id: int, pointer) -> Optional[PlacementProposal]:
        with self._lock:
            if self._mask is not None:
                if self._mask.is_drawing:
                    container = self._mask_container or self._require_container()
                    self._mask.extend_stroke(pointer_to_content_pixels(pointer, container, self._mask.size))
                return None

            if not self.placement.is_active:
                return None
            update = self._gestures.pointer_move(pointer_id, pointer)
            if update.is_empty:
                return self.placement.active
            return self.placement.update(position=update.position, scale=update.scale)

    def pointer_up(self, pointer_id: int) -> None:
        with self._lock:
            if self._mask is not None:
                self._mask.end_stroke()
                return
            self._gestures.pointer_up(pointer_id)

    # ------------------------------------------------------------------
    # Intents

    def dispatch(self, intent: Intent) -> Any:
        """
        Process one intent.

        Returns whatever the matching operation returns (a Future for
        submitted work, the proposal for placement changes, a bool for
        undo/redo and mask toggling).

        Raises:
            TypeError: If the intent type is unknown
        """
        if isinstance(intent, PointerDown):
            return self.pointer_down(intent.pointer_id, intent.position)
        if isinstance(intent, PointerMove):
            return self.pointer_move(intent.pointer_id, intent.position)
        if isinstance(intent, PointerUp):
            return self.pointer_up(intent.pointer_id)
        if isinstance(intent, SliderChanged):
            return self.set_edit(intent.field, intent.value)
        if isinstance(intent, PlaceProduct):
            return self.place_product(intent.source, intent.position)
        if isinstance(intent, SetPlacementScale):
            return self.set_placement_scale(intent.scale)
        if isinstance(intent, Undo):
            return self.undo()
        if isinstance(intent, Redo):
            return self.redo()
        if isinstance(intent, CommitEdits):
            return self.commit_edits()
        if isinstance(intent, CommitPlacement):
            return self.confirm_placement()
        if isinstance(intent, CancelPlacement):
            return self.cancel_placement()
        if isinstance(intent, ToggleMaskMode):
            return self.toggle_mask_mode()
        if isinstance(intent, ConfirmMask):
            if self._mask_target is not None:
                return self.confirm_manual_background_removal()
            return self.confirm_mask()
        raise TypeError(f"Unknown intent: {type(intent).__name__}")

    # ------------------------------------------------------------------
    # Internals (call with the lock held)

    def _submit_external(
        self,
        operation: str,
        failure_prefix: str,
        call: Callable[[], Any],
        apply: Callable[[Any], EditOutcome],
    ) -> "Future[EditOutcome]":
        self._pending_external += 1
        try:
            return self._commit_executor.submit(self._external_task, operation, failure_prefix, call, apply)
        except RuntimeError:
            self._pending_external -= 1
            raise

    def _external_task(
        self,
        operation: str,
        failure_prefix: str,
        call: Callable[[], Any],
        apply: Callable[[Any], EditOutcome],
    ) -> EditOutcome:
        try:
            try:
                result = call()
            except Exception as e:
                raise ExternalServiceError(operation, e) from e

            with self._lock:
                outcome = apply(result)
                self.error_message = None
            logger.info(f"{operation} succeeded")
            return outcome
        except SceneCanvasError as e:
            logger.exception(f"{operation} failed")
            with self._lock:
                self.error_message = f"{failure_prefix} {e}"
                return EditOutcome(ok=False, message=self.error_message)
        finally:
            with self._lock:
                self._pending_external -= 1

    def _reject(self, error: SceneCanvasError) -> None:
        logger.warning(str(error))
        with self._lock:
            self.error_message = str(error)
        raise error

    def _require_idle(self, action: str) -> None:
        if self._pending_external or self._pending_commits:
            raise SessionBusyError(f"Cannot {action} while a request is in progress")

    def _require_scene(self) -> HistoryEntry:
        entry = self.history.current()
        if entry is None:
            self._reject(MissingAssetError("Load a scene first"))
        return entry

    def _require_product(self, slot: ProductSlot) -> Product:
        product = self.products.get(slot)
        if product is None:
            self._reject(MissingAssetError(f"No product loaded in {slot.value}"))
        return product

    def _require_container(self) -> Size:
        if self._container is None:
            raise SessionStateError("Display container size has not been set")
        return self._container

    def _cancel_placement(self) -> None:
        self.placement.cancel()
        self._gestures.reset()

    def _exit_mask_mode(self) -> None:
        if self._mask is not None:
            logger.debug("Mask mode off")
        self._mask = None
        self._mask_target = None
        self._mask_container = None

    def _clear_transient_state(self) -> None:
        self.edits = RESET_EDITS
        self.preview_image = None
        self._preview_generation += 1
        self._exit_mask_mode()
        self._cancel_placement()
