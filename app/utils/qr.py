import os
import random
import time
from typing import Optional

import qrcode
from app.core.config import settings


QR_CODE_DIR = settings.static_dir / "qrcodes"
STATIC_URL_PREFIX = "/static/qrcodes"
QR_CODE_PREFIX = "IR"


def generate_qr_code(now_ms: Optional[int] = None) -> str:
    """
    Builds a new fitting code: 'IR' + millisecond epoch + 3-digit random suffix.
    Example: 'IR1710166200123042'

    Uniqueness is not checked here; the unique constraint on
    QRCode.qr_code is the only guard, and callers retry on conflict.
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    suffix = random.randint(0, 999)
    return f"{QR_CODE_PREFIX}{now_ms}{suffix:03d}"


def generate_and_save_qr(data: str, filename: str) -> str:
    """
    Generates a QR code for the given data, saves it to the filesystem,
    and returns the public URL of the image.
    """
    os.makedirs(QR_CODE_DIR, exist_ok=True)

    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=4,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    file_path = QR_CODE_DIR / f"{filename}.png"
    img.save(file_path)

    return f"{settings.public_url}{STATIC_URL_PREFIX}/{filename}.png"
