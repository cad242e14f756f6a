"""Unit tests for type categorisation."""

import enum
from collections import OrderedDict

import pytest

from shapecheck.types import (
    TypeCategory,
    category_of,
    descriptor_category,
    is_container,
    is_primitive_marker,
)


class Color(enum.Enum):
    RED = 1


class Widget:
    pass


class TestCategoryOf:
    """Test classification of runtime values."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, TypeCategory.NULL),
            (True, TypeCategory.BOOLEAN),
            (0, TypeCategory.NUMBER),
            (2.5, TypeCategory.NUMBER),
            ("", TypeCategory.TEXT),
            (Color.RED, TypeCategory.SYMBOL),
            ({}, TypeCategory.OBJECT),
            (OrderedDict(), TypeCategory.OBJECT),
            (Widget(), TypeCategory.OBJECT),
            (Widget, TypeCategory.CALLABLE),
            (len, TypeCategory.CALLABLE),
        ],
    )
    def test_categories(self, value, expected):
        assert category_of(value) is expected

    def test_bool_is_not_a_number(self):
        """bool subclasses int but is categorised separately."""
        assert category_of(False) is TypeCategory.BOOLEAN

    def test_sequences_collapse_when_coarse(self):
        assert category_of([1]) is TypeCategory.OBJECT
        assert category_of((1,)) is TypeCategory.OBJECT

    def test_sequences_split_when_not_coarse(self):
        assert category_of([1], coarse_containers=False) is TypeCategory.SEQUENCE
        assert category_of({}, coarse_containers=False) is TypeCategory.OBJECT


class TestDescriptors:
    """Test classification of type descriptors."""

    @pytest.mark.parametrize("marker", [int, float, str, bool, list, tuple, dict, object, enum.Enum])
    def test_builtin_markers(self, marker):
        assert is_primitive_marker(marker) is True

    def test_category_markers(self):
        assert is_primitive_marker(TypeCategory.NUMBER) is True
        assert is_primitive_marker(TypeCategory.CALLABLE) is False
        assert is_primitive_marker(TypeCategory.NULL) is False

    def test_classes_are_not_markers(self):
        assert is_primitive_marker(Widget) is False
        assert is_primitive_marker(Color) is False

    def test_unhashable_descriptor_is_not_a_marker(self):
        assert is_primitive_marker([int]) is False

    def test_marker_category(self):
        assert descriptor_category(int) is TypeCategory.NUMBER
        assert descriptor_category(str) is TypeCategory.TEXT
        assert descriptor_category(TypeCategory.BOOLEAN) is TypeCategory.BOOLEAN

    def test_list_marker_respects_coarse_mode(self):
        assert descriptor_category(list) is TypeCategory.OBJECT
        assert descriptor_category(list, coarse_containers=False) is TypeCategory.SEQUENCE

    def test_class_descriptor_is_callable(self):
        assert descriptor_category(Widget) is TypeCategory.CALLABLE


class TestIsContainer:
    def test_containers(self):
        assert is_container({}) is True
        assert is_container([]) is True

    @pytest.mark.parametrize("value", [None, 1, "abc", (1, 2), frozenset()])
    def test_non_containers(self, value):
        assert is_container(value) is False
