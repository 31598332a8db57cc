from __future__ import annotations

import pytest

from signplace.exceptions.errors import ImageDecodeError
from signplace.gui.overlay_image_cache import OverlayImageCache

from .conftest import make_png


def test_cache_reuses_decoded_image_for_same_blob() -> None:
    cache = OverlayImageCache()
    blob = make_png(40, 20)
    first = cache.get("ov1", blob)
    assert cache.get("ov1", blob) is first
    assert len(cache) == 1


def test_cache_redecodes_when_overlay_holds_other_blob() -> None:
    cache = OverlayImageCache()
    cache.get("ov1", make_png(40, 20))

    replaced = cache.get("ov1", make_png(10, 30))

    assert replaced.size == (10, 30)


def test_cache_never_shares_between_overlays() -> None:
    cache = OverlayImageCache()
    blob_a, blob_b = make_png(40, 20), make_png(12, 12)
    assert cache.get("a", blob_a).size == (40, 20)
    assert cache.get("b", blob_b).size == (12, 12)


def test_cache_evict_and_clear() -> None:
    cache = OverlayImageCache()
    cache.get("a", make_png())
    cache.get("b", make_png())
    cache.evict("a")
    cache.evict("unknown")
    assert len(cache) == 1
    cache.clear()
    assert len(cache) == 0


def test_cache_propagates_decode_errors() -> None:
    cache = OverlayImageCache()
    with pytest.raises(ImageDecodeError):
        cache.get("a", b"garbage")
    assert len(cache) == 0
