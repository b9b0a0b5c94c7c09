import pytest

from modalkeyz.errors import ConfigError
from modalkeyz.models.binding import (HIDDEN, ActionBinding, SubTreeBinding,
                                      build_binding_map)


def noop():
    pass


def test_leaf_and_nested_entries():
    bindings = build_binding_map({
        "a": ["do a", noop],
        "w": ["window", {"c": ["clear", noop]}],
    })
    assert isinstance(bindings["a"], ActionBinding)
    assert bindings["a"].action is noop
    assert isinstance(bindings["w"], SubTreeBinding)
    assert "window" == bindings["w"].description
    assert isinstance(bindings["w"].children["c"], ActionBinding)

def test_tuples_accepted():
    bindings = build_binding_map({"a": ("do a", noop)})
    assert "do a" == bindings["a"].description

def test_hidden_description():
    bindings = build_binding_map({"x": [HIDDEN, noop], "y": ["shown", noop]})
    assert bindings["x"].is_hidden
    assert not bindings["y"].is_hidden

def test_hidden_is_a_single_value():
    from modalkeyz import HIDDEN as exported
    assert exported is HIDDEN
    assert "HIDDEN" == repr(HIDDEN)

def test_prebuilt_bindings_kept():
    leaf = ActionBinding("leaf", noop)
    bindings = build_binding_map({"l": leaf,
                                  "s": SubTreeBinding("sub", {"z": ["zz", noop]})})
    assert bindings["l"] is leaf
    assert isinstance(bindings["s"].children["z"], ActionBinding)

def test_empty_map_is_valid():
    assert {} == build_binding_map({})

def test_not_a_mapping():
    with pytest.raises(ConfigError):
        build_binding_map([("a", noop)])

def test_entry_not_a_pair():
    with pytest.raises(ConfigError) as e:
        build_binding_map({"w": ["window", {"c": ["clear"]}]})
    assert "w c" in str(e.value)

def test_bad_description():
    with pytest.raises(ConfigError):
        build_binding_map({"a": [42, noop]})

def test_bad_target():
    with pytest.raises(ConfigError) as e:
        build_binding_map({"a": ["do a", "not callable"]})
    assert "str" in str(e.value)

def test_non_string_key():
    with pytest.raises(ConfigError) as e:
        build_binding_map({1: ["one", noop]})
    assert "'1'" in str(e.value)

def test_non_string_nested_key():
    with pytest.raises(ConfigError) as e:
        build_binding_map({"w": ["window", {None: ["none", noop]}]})
    assert "w None" in str(e.value)

def test_prebuilt_action_without_callable():
    with pytest.raises(ConfigError) as e:
        build_binding_map({"w": ["window", {"x": ActionBinding("x")}]})
    assert "w x" in str(e.value)

def test_prebuilt_action_bad_description():
    with pytest.raises(ConfigError):
        build_binding_map({"a": ActionBinding(42, noop)})

def test_prebuilt_subtree_bad_description():
    with pytest.raises(ConfigError):
        build_binding_map({"s": SubTreeBinding(None, {"z": ["zz", noop]})})

def test_cycle_rejected():
    inner = {}
    outer = {"w": ["window", inner]}
    inner["back"] = ["again", outer]
    with pytest.raises(ConfigError) as e:
        build_binding_map(outer)
    assert "contains itself" in str(e.value)

def test_shared_subtree_is_not_a_cycle():
    shared = {"c": ["clear", noop]}
    bindings = build_binding_map({"a": ["one", shared], "b": ["two", shared]})
    assert set(bindings["a"].children) == set(bindings["b"].children)

def test_config_error_is_value_error():
    assert issubclass(ConfigError, ValueError)
