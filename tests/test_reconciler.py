"""Tests for remote identifier reconciliation."""

from __future__ import annotations

import pytest

from flashfind.application.search.reconciler import normalize_identifier, reconcile


# =============================================================================
# normalize_identifier
# =============================================================================


class TestNormalizeIdentifier:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("./app/img/sunset-beach.jpg", "sunset-beach.jpg"),
            ("app/img/Sunset-Beach.JPG", "sunset-beach.jpg"),
            ("/app/img/cat.jpg", "cat.jpg"),
            ("https://cdn.example.com/img/Cat.jpg?v=2", "cat.jpg"),
            ("file:///home/me/photos/dog.png", "dog.png"),
            ("cat.jpg#top", "cat.jpg"),
            ("my%20photo.jpg", "my photo.jpg"),
            ("  cat.jpg  ", "cat.jpg"),
        ],
    )
    def test_normalize(self, value, expected):
        assert normalize_identifier(value) == expected

    def test_blank(self):
        assert normalize_identifier("   ") == ""

    def test_custom_prefixes(self):
        assert normalize_identifier("bucket:photos/cat.jpg", ["bucket:"]) == "cat.jpg"


# =============================================================================
# reconcile
# =============================================================================


class TestReconcile:
    @pytest.fixture
    def images(self, make_image):
        return [
            make_image(1, "sunset-beach.jpg"),
            make_image(2, "mountain-lake.png"),
            make_image(3, "city-night.jpg"),
        ]

    def test_prefixed_identifier(self, images):
        assert [e.id for e in reconcile(images, ["./app/img/sunset-beach.jpg"])] == [1]

    def test_preserves_remote_order(self, images):
        result = reconcile(images, ["city-night.jpg", "sunset-beach.jpg"])
        assert [e.id for e in result] == [3, 1]

    def test_unmatched_ids_dropped(self, images):
        result = reconcile(images, ["unknown.jpg", "mountain-lake.png"])
        assert [e.id for e in result] == [2]

    def test_miss_is_empty(self, images):
        assert reconcile(images, ["forest.jpg"]) == []

    def test_no_duplicates(self, images):
        result = reconcile(images, ["sunset-beach.jpg", "./app/img/sunset-beach.jpg"])
        assert [e.id for e in result] == [1]

    def test_partial_match(self, images):
        # remote id is a substring of the local name
        assert [e.id for e in reconcile(images, ["mountain"])] == [2]

    def test_exact_beats_partial(self, make_image):
        images = [make_image(1, "bigcat.jpg"), make_image(2, "cat.jpg")]
        assert [e.id for e in reconcile(images, ["cat.jpg"])] == [2]

    def test_partial_ambiguity_first_in_collection_wins(self, make_image):
        images = [make_image(1, "bobcat.jpg"), make_image(2, "wildcat.jpg")]
        assert [e.id for e in reconcile(images, ["cat.jpg"])] == [1]

    def test_blank_ids_ignored(self, images):
        assert reconcile(images, ["", "   "]) == []

    def test_empty_collection(self):
        assert reconcile([], ["cat.jpg"]) == []
