import re

from app.utils import qr as qr_utils
from app.utils.qr import generate_qr_code, generate_and_save_qr


def test_code_is_prefix_timestamp_and_three_digit_suffix(monkeypatch):
    monkeypatch.setattr(qr_utils.random, "randint", lambda a, b: 42)

    assert generate_qr_code(now_ms=1710166200123) == "IR1710166200123042"


def test_suffix_is_zero_padded(monkeypatch):
    monkeypatch.setattr(qr_utils.random, "randint", lambda a, b: 7)

    assert generate_qr_code(now_ms=1).endswith("007")


def test_code_uses_current_time_by_default():
    code = generate_qr_code()

    assert re.fullmatch(r"IR\d{13}\d{3}", code)


def test_two_calls_in_the_same_millisecond_can_collide(monkeypatch):
    monkeypatch.setattr(qr_utils.random, "randint", lambda a, b: 500)

    assert generate_qr_code(now_ms=1000) == generate_qr_code(now_ms=1000)


def test_image_is_written_and_public_url_returned():
    url = generate_and_save_qr("IR1710166200123042", "IR1710166200123042")

    assert url.endswith("/static/qrcodes/IR1710166200123042.png")
    assert (qr_utils.QR_CODE_DIR / "IR1710166200123042.png").exists()
