from __future__ import annotations

import re

from snapai.core.filenames import download_filename


def test_unsafe_characters_become_hyphens():
    assert download_filename("A cat! @ the/beach", prefix="snapai", max_chars=30) == (
        "snapai-A-cat----the-beach.png"
    )


def test_slug_is_alphanumeric_and_hyphens_only():
    name = download_filename("Café ☕ at 5:30 — \"late\" <night>?", prefix="snapai", max_chars=30)
    slug = name[len("snapai-"):-len(".png")]
    assert re.fullmatch(r"[A-Za-z0-9-]+", slug)


def test_prompt_truncated_before_substitution():
    prompt = "a very long prompt about a lighthouse on a rocky shore at dusk"
    name = download_filename(prompt, prefix="snapai", max_chars=30)

    slug = name[len("snapai-"):-len(".png")]
    assert len(slug) == 30
    assert slug == prompt[:30].replace(" ", "-")


def test_short_prompt_kept_whole():
    assert download_filename("sunset", prefix="snapai", max_chars=30) == "snapai-sunset.png"


def test_prefix_and_length_from_settings():
    from snapai.core.config import settings

    name = download_filename("x" * 100)
    assert name == f"{settings.filename_prefix}-{'x' * settings.filename_max_chars}.png"
