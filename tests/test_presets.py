from pathlib import Path

import pytest

from elfinctl.presets import (
    PresetDataBinding,
    PresetManager,
    natcasecmp,
    natural_key,
)


@pytest.fixture
def library(tmp_path):
    factory = tmp_path / "factory"
    (factory / "Bass").mkdir(parents=True)
    (factory / "Leads").mkdir()
    (factory / "Bass" / "Bass 10.elfin").write_text("<elfin ten/>", encoding="utf-8")
    (factory / "Bass" / "Bass 2.elfin").write_text("<elfin two/>", encoding="utf-8")
    (factory / "Leads" / "lead.elfin").write_text("<elfin lead/>", encoding="utf-8")
    (factory / "readme.txt").write_text("ignored", encoding="utf-8")

    user = tmp_path / "user"
    (user / "sub").mkdir(parents=True)
    (user / "alpha").mkdir()
    (user / "b10.elfin").write_text("x", encoding="utf-8")
    (user / "B2.syx").write_bytes(b"\xb0")
    (user / "notes.txt").write_text("x", encoding="utf-8")
    (user / "sub" / "z.elfin").write_text("x", encoding="utf-8")
    (user / "alpha" / "y.elfin").write_text("x", encoding="utf-8")
    return factory, user


@pytest.fixture
def manager(library):
    factory, user = library
    return PresetManager(user, factory)


def test_natural_order_of_numbers():
    assert natcasecmp("patch2", "patch10") < 0
    assert natcasecmp("patch10", "patch2") > 0
    assert sorted(["a10", "a2", "a1"], key=natural_key) == ["a1", "a2", "a10"]


def test_natcasecmp_ignores_case():
    assert natcasecmp("Abc", "aBC") == 0
    assert natcasecmp("apple", "Banana") < 0


def test_factory_vector_is_naturally_sorted(manager):
    assert manager.factory_patch_vector == [
        ("Bass", "Bass 2.elfin"),
        ("Bass", "Bass 10.elfin"),
        ("Leads", "lead.elfin"),
    ]
    assert list(manager.factory_patch_names) == ["Bass", "Leads"]


def test_factory_tree_indices_start_at_one(manager):
    assert manager.factory_patch_tree["Bass"] == [("Bass 2.elfin", 1), ("Bass 10.elfin", 2)]
    assert manager.factory_patch_tree["Leads"] == [("lead.elfin", 3)]


def test_factory_xml_for(manager):
    assert manager.factory_xml_for(0) == "<elfin two/>"
    assert manager.factory_xml_for(2) == "<elfin lead/>"
    assert manager.factory_xml_for(3) == ""
    assert manager.factory_xml_for(-1) == ""


def test_missing_factory_path_gives_no_factory_patches(tmp_path):
    pm = PresetManager(tmp_path / "user", tmp_path / "nowhere")
    assert pm.factory_patch_vector == []
    assert pm.user_patches == []
    assert pm.factory_xml_for(0) == ""


def test_user_patches_sorted_root_first(manager):
    assert manager.user_patches == [
        Path("B2.syx"),
        Path("b10.elfin"),
        Path("alpha/y.elfin"),
        Path("sub/z.elfin"),
    ]


def test_user_tree_indices_follow_factory(manager):
    tree = manager.user_patch_tree
    assert list(tree) == [Path("."), Path("alpha"), Path("sub")]
    assert tree[Path(".")] == [(Path("B2.syx"), 4), (Path("b10.elfin"), 5)]
    assert tree[Path("sub")] == [(Path("sub/z.elfin"), 7)]


def test_rescan_picks_up_new_files(manager, library):
    _, user = library
    (user / "a1.elfin").write_text("x", encoding="utf-8")
    manager.rescan_user_presets()
    assert manager.user_patches[0] == Path("a1.elfin")
    assert len(manager.user_patches) == 5


def test_binding_strings(manager):
    binding = PresetDataBinding(manager)
    assert binding.value_as_string_for(0) == "Init"
    assert binding.value_as_string_for(1) == "Bass/Bass 2"
    assert binding.value_as_string_for(3) == "Leads/lead"
    assert binding.value_as_string_for(4) == "B2"
    assert binding.value_as_string_for(6) == "alpha/y"
    assert binding.value_as_string_for(8) == "ERR"
    assert binding.value_as_string_for(-1) == "ERR"


def test_binding_dirty_postfix(manager):
    binding = PresetDataBinding(manager)
    binding.set_dirty_state(True)
    assert binding.value_as_string_for(0) == "Init *"
    assert binding.value_as_string_for(3) == "Leads/lead *"


def test_binding_range(manager):
    binding = PresetDataBinding(manager)
    assert binding.min_value == 0
    assert binding.max_value == 7
    binding.set_extra("Other")
    assert binding.min_value == -1
    assert binding.max_value == 8


def test_set_value_from_gui_dispatches(manager, library):
    _, user = library
    calls = []
    binding = PresetDataBinding(manager, lambda s, i, p: calls.append((s, i, p)))
    binding.set_value_from_gui(0)
    binding.set_value_from_gui(2)
    binding.set_value_from_gui(6)
    assert calls == [(0, 0, None), (1, 1, None), (2, 2, user / "alpha" / "y.elfin")]
    assert binding.value == 6


def test_set_value_from_gui_clears_dirty_and_extra(manager):
    binding = PresetDataBinding(manager, lambda s, i, p: None)
    binding.set_extra("Other")
    binding.set_dirty_state(True)
    binding.set_value_from_gui(1)
    assert binding.is_dirty is False
    assert binding.has_extra is False
    assert binding.value_as_string == "Bass/Bass 2"


def test_display_name_lookup(manager):
    binding = PresetDataBinding(manager)
    binding.set_state_for_display_name("Bass 2.elfin")
    assert binding.value == 1
    binding.set_state_for_display_name("y")
    assert binding.value == 6
    binding.set_state_for_display_name("Init")
    assert binding.value == 0


def test_display_name_unknown_becomes_extra(manager):
    binding = PresetDataBinding(manager)
    binding.set_state_for_display_name("Mystery")
    assert binding.value == -1
    assert binding.has_extra
    assert binding.value_as_string == "Mystery"


def test_set_value_from_model_does_not_load(manager):
    calls = []
    binding = PresetDataBinding(manager, lambda s, i, p: calls.append(s))
    binding.set_value_from_model(3)
    assert binding.value == 3
    assert calls == []