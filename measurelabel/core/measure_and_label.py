"""
Measure and Label: measure the current line selection and label it with its length
"""
import logging
from typing import Any, Callable, Dict, Optional

from measurelabel.core.dialog_model import DialogModel
from measurelabel.core.image_document import (
    ImageDocument, acquire_image_context, get_current_image
)
from measurelabel.core.overlay import RoiManager
from measurelabel.core.roi_handler import RoiHandler
from measurelabel.core.style import (
    SCALE_FONT, SCALE_LINE_WIDTH, StyleSettings, default_style_from_config, resolve_default_style
)

logger = logging.getLogger(__name__)

DialogFactory = Callable[[StyleSettings], DialogModel]


def _default_dialog_factory(settings: StyleSettings) -> DialogModel:
    from measurelabel.gui.dialogs.style_dialog import StyleDialog
    return StyleDialog(settings)


def measure_and_label(
    image: Optional[ImageDocument] = None,
    config: Optional[Dict[str, Any]] = None,
    dialog_factory: Optional[DialogFactory] = None,
    roi_manager: Optional[RoiManager] = None
) -> Optional[RoiHandler]:
    """
    Label the image's line selection with its length and let the user restyle it

    Args:
        image: Image to annotate; defaults to the current image
        config: Application configuration (style defaults, smart sizing)
        dialog_factory: Builds the style dialog from the default settings;
            defaults to the customtkinter StyleDialog
        roi_manager: ROI Manager used when the result is not kept on the
            overlay; defaults to the shared instance

    Returns:
        The handler (its state tells how the run ended), or None when no
        image is open
    """
    config = config or {}
    image = image or get_current_image()
    if image is None:
        logger.warning("No image open - nothing to measure")
        return None

    overlay, context = acquire_image_context(image)

    settings = resolve_default_style(
        context.height_px,
        smart_sizing=config.get('smart_sizing', True),
        base=default_style_from_config(config),
        scale_line_width=config.get('scale_line_width', SCALE_LINE_WIDTH),
        scale_font=config.get('scale_font', SCALE_FONT),
    )
    logger.debug(f"Default style: {settings}")

    handler = RoiHandler(
        image, overlay, settings,
        unit=context.unit,
        font_family=config.get('font_family', 'Serif'),
    )
    if not handler.handle(image.get_roi()):
        return handler

    dialog = (dialog_factory or _default_dialog_factory)(settings)
    dialog.add_dialog_listener(handler.startup_listener)
    dialog.add_dialog_listener(handler.change_listener)
    dialog.show_dialog()

    logger.info(f"Was dialog OKed? {dialog.was_oked()}")
    logger.info(f"Was dialog Canceled? {dialog.was_canceled()}")

    handler.finish(dialog.was_oked(), roi_manager)
    return handler
