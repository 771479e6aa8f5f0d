"""QR code rendering for retrieval URLs.

Renders the URL as a PNG image, either as raw bytes or as a ``data:`` URI
ready to embed in an ``<img>`` tag.
"""

from __future__ import annotations

import base64
from io import BytesIO
from urllib.parse import urlsplit

import qrcode
from qrcode.image.pil import PilImage

from docdrop.errors import InvalidUrlError

DATA_URI_PREFIX = "data:image/png;base64,"


def validate_url(url: str) -> str:
    """Return ``url`` unchanged if it is an absolute http(s) URL.

    Raises:
        InvalidUrlError: if the scheme is not http/https or there is no host.
    """
    try:
        parts = urlsplit(url)
    except ValueError as e:
        raise InvalidUrlError(url) from e
    if parts.scheme not in ("http", "https") or not parts.hostname:
        raise InvalidUrlError(url)
    return url


def generate_qrcode_png(url: str, *, box_size: int = 10, border: int = 4) -> bytes:
    """Generate a QR code for ``url`` as PNG bytes."""
    validate_url(url)

    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=box_size,
        border=border,
    )
    qr.add_data(url)
    qr.make(fit=True)

    img: PilImage = qr.make_image(fill_color="black", back_color="white")

    buf = BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def generate_qrcode_data_uri(url: str) -> str:
    png = generate_qrcode_png(url)
    return DATA_URI_PREFIX + base64.b64encode(png).decode("ascii")
