"""Tests for category normalisation."""
import pytest

from myday.core.interpreter.categories import CANONICAL_CATEGORIES, normalize_category


class TestNormalizeCategory:
    @pytest.mark.parametrize("label", CANONICAL_CATEGORIES)
    def test_canonical_passes_through(self, label):
        assert normalize_category(label) == label

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("学习", "learning"),
            ("工作", "work"),
            ("个人", "personal"),
            ("健康", "health"),
            ("购物", "shopping"),
            ("其他", "other"),
        ],
    )
    def test_localized_labels(self, raw, expected):
        assert normalize_category(raw) == expected

    @pytest.mark.parametrize("raw", ["lreaning", "learing"])
    def test_known_misspellings(self, raw):
        assert normalize_category(raw) == "learning"

    @pytest.mark.parametrize("raw", ["unknown_value", "生活", "", "   ", "学 习"])
    def test_unknown_maps_to_other(self, raw):
        assert normalize_category(raw) == "other"

    def test_case_and_whitespace(self):
        assert normalize_category("  Work ") == "work"
        assert normalize_category("LEARNING") == "learning"

    def test_non_string_maps_to_other(self):
        assert normalize_category(None) == "other"
        assert normalize_category(3) == "other"

    @pytest.mark.parametrize(
        "raw",
        ["学习", "work", "lreaning", "unknown_value", " Health ", "", "购物", "其他"],
    )
    def test_idempotent(self, raw):
        once = normalize_category(raw)
        assert normalize_category(once) == once
