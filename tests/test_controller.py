import random
from pathlib import Path

import pytest

from elfinctl.configuration import ElfinControl
from elfinctl.controller import ElfinController, accepts_dropped_files, main
from elfinctl.processor import ElfinProcessor, PatchError, float_for_cc


def _ccs(processor):
    return [p.cc for p in processor.params]


def _patch_text(cutoff_cc):
    p = ElfinProcessor()
    p[ElfinControl.FILT_CUTOFF].set_value(float_for_cc(cutoff_cc))
    return p.to_xml()


@pytest.fixture
def factory(tmp_path):
    root = tmp_path / "factory"
    (root / "Bass").mkdir(parents=True)
    (root / "Lead").mkdir()
    (root / "Bass" / "Deep.elfin").write_text(_patch_text(10), encoding="utf-8")
    (root / "Lead" / "Bright.elfin").write_text(_patch_text(100), encoding="utf-8")
    return root


@pytest.fixture
def controller(tmp_path, factory):
    return ElfinController(ElfinProcessor(), tmp_path / "user", factory)


def test_accepts_dropped_files():
    assert accepts_dropped_files(["a.elfin"]) is True
    assert accepts_dropped_files(["a.syx"]) is True
    assert accepts_dropped_files(["a.txt"]) is False
    assert accepts_dropped_files(["a.elfin", "b.elfin"]) is False
    assert accepts_dropped_files([]) is False


def test_elfin_file_round_trip(tmp_path, controller):
    source = ElfinProcessor()
    source.randomize_patch(random.Random(7))
    f = tmp_path / "x.elfin"
    f.write_text(source.to_xml(), encoding="utf-8")
    assert controller.load_from_file(f) is True
    assert _ccs(controller.processor) == _ccs(source)


def test_syx_wrong_size_raises(tmp_path, controller):
    f = tmp_path / "short.syx"
    f.write_bytes(b"\xb0\x10\x00")
    before = _ccs(controller.processor)
    with pytest.raises(PatchError):
        controller.load_from_file(f)
    assert _ccs(controller.processor) == before


def test_unknown_extension_is_ignored(tmp_path, controller):
    f = tmp_path / "notes.txt"
    f.write_text("hello", encoding="utf-8")
    before = _ccs(controller.processor)
    assert controller.load_from_file(f) is False
    assert _ccs(controller.processor) == before


def test_save_patch_writes_and_rescans(controller):
    controller.processor.randomize_patch(random.Random(3))
    target = controller.save_patch("mine.elfin")
    assert target == controller.user_path / "mine.elfin"
    assert Path("mine.elfin") in controller.preset_manager.user_patches

    other = ElfinController(ElfinProcessor(), controller.user_path)
    other.load_from_file(target)
    assert _ccs(other.processor) == _ccs(controller.processor)


def test_save_patch_in_subfolder(controller):
    controller.save_patch(Path("Pads") / "soft.elfin")
    assert (controller.user_path / "Pads" / "soft.elfin").is_file()
    menu = controller.preset_menu()
    assert [label for label, _ in menu.user_folders["Pads"]] == ["soft"]


def test_setup_user_path_creates_folder(controller):
    assert not controller.user_path.exists()
    controller.setup_user_path()
    assert controller.user_path.is_dir()


def test_init_patch_restores_defaults(controller):
    controller.randomize_patch(random.Random(11))
    controller.init_patch()
    assert _ccs(controller.processor) == [p.desc.midi_cc_default for p in controller.processor.params]


def test_randomize_is_seeded(tmp_path):
    a = ElfinController(ElfinProcessor(), tmp_path / "a")
    b = ElfinController(ElfinProcessor(), tmp_path / "b")
    a.randomize_patch(random.Random(5))
    b.randomize_patch(random.Random(5))
    assert _ccs(a.processor) == _ccs(b.processor)


def test_handle_preset_load_factory(controller):
    controller.handle_preset_load(1, 0, None)
    assert controller.processor[ElfinControl.FILT_CUTOFF].cc == 10


def test_handle_preset_load_factory_out_of_range(controller):
    before = _ccs(controller.processor)
    controller.handle_preset_load(1, 99, None)
    assert _ccs(controller.processor) == before


def test_handle_preset_load_user_file(tmp_path, controller):
    f = tmp_path / "u.elfin"
    f.write_text(_patch_text(42), encoding="utf-8")
    controller.handle_preset_load(2, 0, f)
    assert controller.processor[ElfinControl.FILT_CUTOFF].cc == 42


def test_binding_selects_factory_and_init(controller):
    controller.preset_binding.set_value_from_gui(2)
    assert controller.processor[ElfinControl.FILT_CUTOFF].cc == 100
    controller.preset_binding.set_value_from_gui(0)
    desc = controller.processor[ElfinControl.FILT_CUTOFF].desc
    assert controller.processor[ElfinControl.FILT_CUTOFF].cc == desc.midi_cc_default


def test_files_dropped(tmp_path, controller):
    f = tmp_path / "d.elfin"
    f.write_text(_patch_text(20), encoding="utf-8")
    before = _ccs(controller.processor)
    controller.files_dropped([f, f])
    assert _ccs(controller.processor) == before
    controller.files_dropped([f])
    assert controller.processor[ElfinControl.FILT_CUTOFF].cc == 20


def test_preset_menu_factory_labels(controller):
    menu = controller.preset_menu()
    assert menu.factory == {"Bass": [("Deep", 1)], "Lead": [("Bright", 2)]}
    assert menu.user == []


def test_preset_menu_indices_match_binding(controller):
    controller.save_patch("top.elfin")
    menu = controller.preset_menu()
    assert menu.user == [("top", 3)]
    for label, idx in menu.entries():
        assert controller.preset_binding.value_as_string_for(idx).endswith(label)


def test_main_show(tmp_path, capsys):
    f = tmp_path / "s.elfin"
    f.write_text(_patch_text(30), encoding="utf-8")
    assert main(["--user-path", str(tmp_path / "u"), "show", str(f)]) == 0
    out = capsys.readouterr().out
    check = ElfinProcessor()
    check.from_xml(out)
    assert check[ElfinControl.FILT_CUTOFF].cc == 30


def test_main_midi_starts_with_all_notes_off(tmp_path, capsys):
    f = tmp_path / "m.elfin"
    f.write_text(_patch_text(30), encoding="utf-8")
    assert main(["--user-path", str(tmp_path / "u"), "midi", str(f)]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].split("\t")[1] == "b0 7b 00"
    assert len(lines) == 1 + len(ElfinControl)


def test_main_list(tmp_path, factory, capsys):
    code = main(["--user-path", str(tmp_path / "u"), "--factory-path", str(factory), "list"])
    assert code == 0
    assert capsys.readouterr().out.splitlines() == ["0\tInit", "1\tBass/Deep", "2\tLead/Bright"]


def test_main_bad_file(tmp_path, capsys):
    f = tmp_path / "bad.txt"
    f.write_text("x", encoding="utf-8")
    assert main(["--user-path", str(tmp_path / "u"), "show", str(f)]) == 1
    assert "not a patch file" in capsys.readouterr().err