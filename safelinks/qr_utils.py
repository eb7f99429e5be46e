import base64
from io import BytesIO

import qrcode
from qrcode.constants import ERROR_CORRECT_M


def short_url_qr_base64(short_url: str, box_size: int = 8) -> str:
    """PNG QR code for ``short_url``, base64-encoded for embedding in JSON."""
    qr = qrcode.QRCode(border=4, box_size=box_size, error_correction=ERROR_CORRECT_M)
    qr.add_data(short_url)
    qr.make(fit=True)

    buf = BytesIO()
    qr.make_image(fill_color="black", back_color="white").save(buf)
    return base64.b64encode(buf.getvalue()).decode("ascii")
