import base64
from datetime import datetime

import pytest

from ojt_attendance.attendance.photos import PhotoStore, decode_photo
from ojt_attendance.core.exceptions import ValidationError

JPEG = b"\xff\xd8\xff\xe0jpeg-bytes"


def test_decode_accepts_data_url_and_raw_base64():
    encoded = base64.b64encode(JPEG).decode("ascii")
    assert decode_photo("data:image/jpeg;base64," + encoded) == JPEG
    assert decode_photo(encoded) == JPEG


@pytest.mark.parametrize("data", ["data:image/jpeg;base64,@@@", "not base64!", "data:image/jpeg;base64,"])
def test_decode_rejects_garbage(data):
    with pytest.raises(ValidationError):
        decode_photo(data)


def test_store_names_file_by_trainee_kind_and_time(tmp_path):
    store = PhotoStore(tmp_path / "uploads")
    path = store.save(
        base64.b64encode(JPEG).decode("ascii"), trainee_id=7, kind="out", now=datetime(2025, 3, 10, 18, 0, 5)
    )
    assert path == "uploads/7_out_20250310_180005.jpg"
    assert (tmp_path / "uploads" / "7_out_20250310_180005.jpg").read_bytes() == JPEG
