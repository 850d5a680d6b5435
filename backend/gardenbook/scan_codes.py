"""QR scan code rendering."""
import io

import qrcode
from qrcode.constants import ERROR_CORRECT_M
from qrcode.image.pil import PilImage


class QrScanCodeEncoder:
    """Renders a URL as a PNG QR code."""

    def __init__(self, box_size: int = 10, border: int = 4):
        self._box_size = box_size
        self._border = border

    def encode(self, target_url: str) -> bytes:
        qr = qrcode.QRCode(
            error_correction=ERROR_CORRECT_M,
            box_size=self._box_size,
            border=self._border,
            image_factory=PilImage,
        )
        qr.add_data(target_url)
        qr.make(fit=True)
        buffer = io.BytesIO()
        qr.make_image(fill_color="black", back_color="white").save(buffer, format="PNG")
        return buffer.getvalue()
