from partialdump.key_selector import drop_hidden_keys, select_keys

SEVEN = {key: index for index, key in enumerate("abcdefg")}


def test_select_keys_keeps_mapping_under_limit() -> None:
    assert select_keys({"a": 1, "b": 2}, 5) == {"a": 1, "b": 2}


def test_select_keys_keeps_leading_keys() -> None:
    reduced = select_keys(SEVEN, 4)
    assert list(reduced) == ["a", "b", "c", "d"]


def test_select_keys_drops_worthless_keys_first() -> None:
    reduced = select_keys(SEVEN, 6, deprioritized=["a"])
    assert list(reduced) == ["b", "c", "d", "e", "f", "g"]


def test_select_keys_drops_only_as_many_worthless_keys_as_needed() -> None:
    reduced = select_keys(SEVEN, 5, deprioritized=["a", "b", "c"])
    assert len(reduced) == 5
    assert "a" in reduced
    assert "b" not in reduced
    assert "c" not in reduced


def test_select_keys_never_drops_protected_keys() -> None:
    reduced = select_keys(SEVEN, 2, protected=["f", "g"])
    assert list(reduced) == ["f", "g"]


def test_select_keys_counts_repeated_protected_keys_once() -> None:
    reduced = select_keys(SEVEN, 2, protected=["g", "g", "g"])
    assert list(reduced) == ["a", "g"]


def test_select_keys_raises_limit_to_fit_protected_keys() -> None:
    reduced = select_keys(SEVEN, 1, protected=["a", "b", "c"])
    assert list(reduced) == ["a", "b", "c"]


def test_select_keys_hidden_wins_over_protected() -> None:
    assert select_keys({"a": 1, "token": 2}, 5, protected=["token"], hidden=["token"]) == {"a": 1}


def test_select_keys_removes_hidden_keys_even_under_limit() -> None:
    assert select_keys({"a": 1, "b": 2}, 5, hidden=["b"]) == {"a": 1}


def test_drop_hidden_keys_returns_copy() -> None:
    original = {"a": 1, "b": 2}
    assert drop_hidden_keys(original, ["b"]) == {"a": 1}
    assert original == {"a": 1, "b": 2}
