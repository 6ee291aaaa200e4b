from __future__ import annotations

import logging

from reporting.captions import CAPTION_FAILED, CaptionCache, generate_captions
from schemas.internal.annotations import ImageAnnotation
from schemas.internal.documents import Image, Page


class _FakeVision:
    def __init__(self, answers=None, fail_on=()):
        self.calls: list[str] = []
        self._answers = answers or {}
        self._fail_on = set(fail_on)

    def describe(self, base64: str):
        self.calls.append(base64)
        if base64 in self._fail_on:
            raise RuntimeError("vision down")
        return self._answers.get(base64, f"caption for {base64}")


def test_shared_image_is_captioned_once() -> None:
    vision = _FakeVision()
    pages = [
        Page(number=1, images=[Image(id="logo", base64="AAA")]),
        Page(number=2, images=[Image(id="logo", base64="AAA")]),
    ]
    captions = generate_captions(pages, {}, vision)
    assert captions == {"logo": "caption for AAA"}
    assert vision.calls == ["AAA"]


def test_failure_gets_placeholder_and_batch_continues(caplog) -> None:
    vision = _FakeVision(fail_on={"BAD"})
    page = Page(images=[Image(id="a", base64="BAD"), Image(id="b", base64="GOOD")])
    with caplog.at_level(logging.ERROR, logger="reporting.captions"):
        captions = generate_captions([page], {}, vision)
    assert captions == {"a": CAPTION_FAILED, "b": "caption for GOOD"}
    assert "vision down" in caplog.text


def test_empty_answer_gets_placeholder() -> None:
    vision = _FakeVision(answers={"AAA": ""})
    captions = generate_captions([Page(images=[Image(id="a", base64="AAA")])], {}, vision)
    assert captions == {"a": CAPTION_FAILED}


def test_skips_removed_missing_and_replaced_images() -> None:
    vision = _FakeVision()
    page = Page(
        images=[
            Image(id="removed", base64="R"),
            Image(id="no-payload"),
            Image(id="replaced", base64="X"),
        ]
    )
    annotations = {
        "removed": ImageAnnotation(removed=True),
        "replaced": ImageAnnotation(description="User text", replace_with_description=True),
    }
    captions = generate_captions([page], annotations, vision)
    assert captions == {"replaced": "User text"}
    assert vision.calls == []


def test_images_without_id_are_keyed_by_payload_prefix() -> None:
    vision = _FakeVision()
    payload = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    pages = [Page(images=[Image(base64=payload)]), Page(number=2, images=[Image(base64=payload)])]
    captions = generate_captions(pages, {}, vision)
    assert list(captions) == [payload[:16]]
    assert len(vision.calls) == 1


def test_cache_memoizes_by_key() -> None:
    vision = _FakeVision()
    cache = CaptionCache(vision)
    cache.seed("seeded", "given")
    assert cache.caption_for("seeded", "ZZZ") == "given"
    assert cache.caption_for("k", "AAA") == cache.caption_for("k", "BBB")
    assert vision.calls == ["AAA"]
