"""Tests for geminiwrap.core.presets — transform preset registry."""

from __future__ import annotations

import pytest

from geminiwrap.core.presets import (
    FIGURINE_PROMPT,
    HIJAB_PROMPT,
    IMAGE_AND_TEXT,
    SDMTINGGI_PROMPT,
    TEXT_ONLY,
    build_presets,
)

IMAGE_TRANSFORMS = ["figurine", "hijab", "sdmtinggi", "hitam"]


@pytest.fixture
def presets(test_config):
    return build_presets(test_config)


class TestRegistry:
    def test_all_presets_registered(self, presets):
        assert set(presets) == {
            "chat",
            "image-generate",
            "image-save",
            "figurine",
            "hijab",
            "sdmtinggi",
            "hitam",
        }

    def test_chat(self, presets, test_config):
        chat = presets["chat"]
        assert chat.prompt is None
        assert chat.streaming is True
        assert chat.output_policy is None
        assert chat.response_modalities == TEXT_ONLY
        assert chat.default_model(test_config) == test_config.chat_model
        assert not chat.requires_media

    def test_image_generate_and_save(self, presets, test_config):
        assert presets["image-generate"].output_policy == "inline"
        assert presets["image-save"].output_policy == "file"
        for name in ("image-generate", "image-save"):
            preset = presets[name]
            assert preset.input_contract == "text-only"
            assert preset.streaming is False
            assert preset.default_model(test_config) == test_config.image_model


class TestImageTransforms:
    @pytest.mark.parametrize("name", IMAGE_TRANSFORMS)
    def test_transform_shape(self, presets, test_config, name):
        preset = presets[name]
        assert preset.requires_media
        assert preset.streaming is False
        assert preset.output_policy == "buffer"
        assert preset.response_modalities == IMAGE_AND_TEXT
        assert preset.default_model(test_config) == test_config.image_model
        assert preset.download_name == f"{name}.png"
        assert preset.prompt

    def test_fixed_prompts(self, presets):
        assert presets["figurine"].prompt == FIGURINE_PROMPT
        assert presets["hijab"].prompt == HIJAB_PROMPT
        assert presets["sdmtinggi"].prompt == SDMTINGGI_PROMPT

    def test_hitam_prompt_comes_from_config(self, presets, test_config):
        assert presets["hitam"].prompt == test_config.hitam_prompt == "Darken this picture."

    def test_presets_are_frozen(self, presets):
        with pytest.raises(AttributeError):
            presets["figurine"].streaming = True  # type: ignore[misc]
