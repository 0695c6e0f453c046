"""QR code rendering for member check-in passes."""
import io

import qrcode
from PIL import Image
from qrcode.constants import ERROR_CORRECT_H, ERROR_CORRECT_L, ERROR_CORRECT_M, ERROR_CORRECT_Q

from thermal.logging import get_logger

logger = get_logger(__name__)

ERROR_CORRECTION_LEVELS = {
    "L": ERROR_CORRECT_L,
    "M": ERROR_CORRECT_M,
    "Q": ERROR_CORRECT_Q,
    "H": ERROR_CORRECT_H,
}

MARGIN_MODULES = 4


def render_qr_png(
    payload: str,
    size: int = 200,
    level: str = "M",
    fg_color: str = "#000000",
    bg_color: str = "#FFFFFF",
    include_margin: bool = False,
) -> bytes:
    """
    Render `payload` as a square PNG of `size` pixels.

    Returns b"" when rendering fails; the error is logged.
    """
    try:
        border = MARGIN_MODULES if include_margin else 0
        qr = qrcode.QRCode(
            version=None,
            error_correction=ERROR_CORRECTION_LEVELS[level.upper()],
            box_size=1,
            border=border,
        )
        qr.add_data(payload)
        qr.make(fit=True)

        modules = qr.modules_count + 2 * border
        qr.box_size = max(1, size // modules)

        img = qr.make_image(fill_color=fg_color, back_color=bg_color).get_image()
        if img.size != (size, size):
            img = img.resize((size, size), resample=Image.NEAREST)

        buf = io.BytesIO()
        img.save(buf, format="PNG")
        return buf.getvalue()
    except Exception as e:
        logger.error(f"Error generating QR code: {e}", exc_info=True)
        return b""
