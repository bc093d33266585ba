"""Unit tests for TranscodeRule validation."""

import pytest
from pydantic import ValidationError

from asset_transcoder.domain import ImageFormat, OrphanPolicy, TranscodeMode
from asset_transcoder.rules import (
    DEFAULT_COMPRESS_SELECTOR,
    DEFAULT_CONVERT_SELECTOR,
    TranscodeRule,
)


class TestRuleDefaults:
    """Defaults depend on whether the rule converts."""

    def test_conversion_defaults(self) -> None:
        rule = TranscodeRule(target_format="avif")
        assert rule.selector == DEFAULT_CONVERT_SELECTOR
        assert rule.quality == 50
        assert rule.effort == 4
        assert rule.mode is TranscodeMode.CONVERT
        assert rule.target_image_format is ImageFormat.AVIF

    def test_compress_defaults(self) -> None:
        rule = TranscodeRule()
        assert rule.selector == DEFAULT_COMPRESS_SELECTOR
        assert rule.quality == 85
        assert rule.effort == 6
        assert rule.mode is TranscodeMode.IN_PLACE
        assert rule.target_image_format is None

    def test_explicit_values_win(self) -> None:
        rule = TranscodeRule(target_format="webp", quality=70, effort=2, selector=r"\.png$")
        assert (rule.quality, rule.effort, rule.selector) == (70, 2, r"\.png$")

    def test_avif_preset(self) -> None:
        rule = TranscodeRule.avif_preset()
        assert rule.target_format == "avif"
        assert rule.output_directory == "static/image"
        assert rule.orphan_policy is OrphanPolicy.ENTRYPOINTS

    def test_preset_overrides(self) -> None:
        rule = TranscodeRule.avif_preset(output_directory="img", quality=60)
        assert rule.output_directory == "img"
        assert rule.quality == 60

    def test_rule_is_frozen(self) -> None:
        rule = TranscodeRule()
        with pytest.raises(ValidationError):
            rule.quality = 10  # type: ignore[misc]


class TestRuleValidation:
    """Invalid rules fail at construction."""

    @pytest.mark.parametrize("quality", [0, 101])
    def test_quality_range(self, quality: int) -> None:
        with pytest.raises(ValidationError):
            TranscodeRule(quality=quality)

    @pytest.mark.parametrize("effort", [-1, 10])
    def test_effort_range(self, effort: int) -> None:
        with pytest.raises(ValidationError):
            TranscodeRule(effort=effort)

    def test_invalid_selector(self) -> None:
        with pytest.raises(ValidationError, match="Invalid selector"):
            TranscodeRule(selector="(unclosed")

    def test_empty_selector(self) -> None:
        with pytest.raises(ValidationError):
            TranscodeRule(selector="")

    def test_unknown_target_format(self) -> None:
        with pytest.raises(ValidationError, match="Invalid target_format"):
            TranscodeRule(target_format="bmp")

    def test_target_format_normalized(self) -> None:
        assert TranscodeRule(target_format=".WebP").target_format == "webp"

    def test_jpg_target_keeps_extension(self) -> None:
        rule = TranscodeRule(target_format="jpg")
        assert rule.target_format == "jpg"
        assert rule.target_image_format is ImageFormat.JPEG

    def test_extra_fields_forbidden(self) -> None:
        with pytest.raises(ValidationError):
            TranscodeRule(test=r"\.png$")  # type: ignore[call-arg]

    def test_output_directory_normalized(self) -> None:
        rule = TranscodeRule(target_format="avif", output_directory="static\\image\\")
        assert rule.output_directory == "static/image"

    def test_text_extensions_normalized(self) -> None:
        rule = TranscodeRule(text_extensions=("JS", ".css"))
        assert rule.text_extensions == (".js", ".css")

    def test_empty_text_extension_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TranscodeRule(text_extensions=("",))


class TestCodecOptions:
    """Codec options are checked against the target format."""

    def test_valid_option_for_target(self) -> None:
        rule = TranscodeRule(target_format="webp", codec_options={"lossless": True})
        assert rule.codec_options == {"lossless": True}

    def test_option_for_other_format_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Unknown codec_options for avif"):
            TranscodeRule(target_format="avif", codec_options={"progressive": True})

    def test_in_place_accepts_any_known_option(self) -> None:
        rule = TranscodeRule(codec_options={"progressive": True, "compress_level": 9})
        assert rule.codec_options["compress_level"] == 9

    def test_unknown_option_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Unknown codec_options"):
            TranscodeRule(codec_options={"bogus": 1})

    @pytest.mark.parametrize("key", ["quality", "format", "effort"])
    def test_reserved_option_rejected(self, key: str) -> None:
        with pytest.raises(ValidationError, match="may not set"):
            TranscodeRule(target_format="webp", codec_options={key: 1})
