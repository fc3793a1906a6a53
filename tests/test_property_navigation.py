# tests/test_property_navigation.py

import pytest

from skinswap.core.contracts import PropertyPathError, PropertyTarget
from skinswap.core.utils import get_indexed, navigate_to_parent, set_indexed


class Bag(PropertyTarget):
    def __init__(self, **props):
        self.props = dict(props)

    def get_property(self, name):
        return self.props[name]

    def set_property(self, name, value):
        if name not in self.props:
            raise KeyError(name)
        self.props[name] = value


class Plain:
    def __init__(self):
        self.texture = "tex"
        self._hidden = "secret"


class TestNavigation:

    def test_navigate_returns_parent_and_final_segment(self):
        inner = Bag(texture="t")
        root = Bag(sprite=inner)
        parent, key = navigate_to_parent(root, "sprite:texture")
        assert parent is inner
        assert key == "texture"

    def test_mixed_targets_mappings_sequences_and_attributes(self):
        root = Bag(frames=[{"image": Plain()}])
        assert get_indexed(root, "frames:0:image:texture") == "tex"

        set_indexed(root, "frames:0:image:texture", "other")
        assert root.props["frames"][0]["image"].texture == "other"

    def test_missing_intermediate_segment(self):
        with pytest.raises(PropertyPathError, match="segment 'nope'"):
            get_indexed(Bag(sprite=Bag()), "nope:texture")

    def test_missing_final_segment_on_write(self):
        root = Bag(sprite=Bag(texture=None))
        with pytest.raises(PropertyPathError):
            set_indexed(root, "sprite:normal_map", "x")

    def test_bad_index(self):
        root = Bag(frames=["a"])
        with pytest.raises(PropertyPathError, match="out of range"):
            get_indexed(root, "frames:3")
        with pytest.raises(PropertyPathError, match="not a valid index"):
            get_indexed(root, "frames:first")

    def test_negative_index_is_not_a_valid_index(self):
        root = Bag(frames=["a", "b"])
        with pytest.raises(PropertyPathError, match="not a valid index"):
            get_indexed(root, "frames:-1")
        with pytest.raises(PropertyPathError, match="not a valid index"):
            set_indexed(root, "frames:-1", "z")
        assert root.props["frames"] == ["a", "b"]

    def test_null_intermediate_value(self):
        with pytest.raises(PropertyPathError, match="is null"):
            get_indexed(Bag(sprite=None), "sprite:texture")

    def test_private_attributes_are_not_reachable(self):
        with pytest.raises(PropertyPathError):
            get_indexed(Bag(obj=Plain()), "obj:_hidden")

    def test_property_path_error_is_a_key_error(self):
        with pytest.raises(KeyError):
            get_indexed(Bag(), "missing")
