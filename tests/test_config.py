from kioskvote_app.config import find_font


def test_find_font_returns_first_existing(tmp_path):
    fallback = tmp_path / 'FreeSans.ttf'
    preferred = tmp_path / 'DejaVuSans.ttf'
    fallback.write_bytes(b'ttf')
    preferred.write_bytes(b'ttf')

    candidates = (str(tmp_path / 'missing.ttf'), str(preferred), str(fallback))

    assert find_font(candidates) == str(preferred)


def test_find_font_without_any_font(tmp_path):
    assert find_font((str(tmp_path / 'missing.ttf'),)) is None
