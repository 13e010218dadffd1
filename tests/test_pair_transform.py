import re

from partialdump.pair_transform import MASK_TOKEN, transform_pairs


def test_transform_pairs_without_hooks_is_unmodified_copy() -> None:
    original = {"a": 1}
    out, modified = transform_pairs(original)
    assert out == {"a": 1}
    assert out is not original
    assert modified is False


def test_mask_pattern_replaces_matching_values() -> None:
    out, modified = transform_pairs({"password": "hunter2", "user": "bob"}, mask_pattern=re.compile("pass"))
    assert out == {"password": MASK_TOKEN, "user": "bob"}
    assert modified is True


def test_mask_pattern_does_not_mask_twice() -> None:
    out, modified = transform_pairs({"password": MASK_TOKEN}, mask_pattern=re.compile("pass"))
    assert out == {"password": "***"}
    assert modified is False


def test_pair_filter_can_rename_drop_and_fan_out() -> None:
    def pair_filter(key, value):
        if key == "drop":
            return []
        if key == "pair":
            return [("left", value[0]), ("right", value[1])]
        if key == "old":
            return [("new", value)]
        return None

    out, modified = transform_pairs({"keep": 1, "drop": 2, "pair": (3, 4), "old": 5}, pair_filter=pair_filter)
    assert out == {"keep": 1, "left": 3, "right": 4, "new": 5}
    assert modified is True


def test_pair_filter_returning_same_pair_is_not_a_modification() -> None:
    value = ["x"]
    out, modified = transform_pairs({"a": value}, pair_filter=lambda key, item: {key: item})
    assert out == {"a": ["x"]}
    assert modified is False


def test_mask_applies_to_renamed_keys() -> None:
    out, modified = transform_pairs(
        {"pw": "secret"},
        pair_filter=lambda key, value: [("password", value)],
        mask_pattern=re.compile("^pass"),
    )
    assert out == {"password": MASK_TOKEN}
    assert modified is True
