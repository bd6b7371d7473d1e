"""Patch file handling, preset selection and a command line for the Elfin controller."""

from __future__ import annotations

import argparse
import logging
import random
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

from .presets import PresetDataBinding, PresetManager
from .processor import SYSEX_SIZE, ElfinProcessor, PatchError

log = logging.getLogger(__name__)

PATCH_SUFFIX = ".elfin"
SYSEX_SUFFIX = ".syx"
USER_FOLDER_NAME = "ElfinController"

PathLike = Union[str, Path]
MenuEntry = tuple[str, int]


def _default_user_path() -> Path:
    return Path.home() / "Documents" / USER_FOLDER_NAME


def accepts_dropped_files(files: Sequence[str]) -> bool:
    """True when exactly one patch or sysex file is dropped."""
    if len(files) != 1:
        return False
    name = str(files[0])
    return name.endswith(PATCH_SUFFIX) or name.endswith(SYSEX_SUFFIX)


@dataclass
class PresetMenu:
    """The preset choices: factory categories, top-level user patches and user folders."""

    factory: dict[str, list[MenuEntry]] = field(default_factory=dict)
    user: list[MenuEntry] = field(default_factory=list)
    user_folders: dict[str, list[MenuEntry]] = field(default_factory=dict)

    def entries(self) -> Iterable[MenuEntry]:
        for items in self.factory.values():
            yield from items
        yield from self.user
        for items in self.user_folders.values():
            yield from items


class ElfinController:
    """Ties a processor to the preset library and to patch files on disk."""

    def __init__(
        self,
        processor: Optional[ElfinProcessor] = None,
        user_path: Optional[PathLike] = None,
        factory_path: Optional[PathLike] = None,
    ):
        self.processor = processor if processor is not None else ElfinProcessor()
        self.user_path = Path(user_path) if user_path is not None else _default_user_path()
        self.preset_manager = PresetManager(self.user_path, factory_path)
        self.preset_binding = PresetDataBinding(self.preset_manager, self.handle_preset_load)

    def setup_user_path(self) -> None:
        """Create the user patch folder if it does not exist yet."""
        try:
            self.user_path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            log.warning("cannot create user folder %s: %s", self.user_path, exc)

    def load_from_file(self, path: PathLike) -> bool:
        """Load a .elfin or .syx file into the processor.

        Returns False for any other kind of file. Raises PatchError for bad
        patch data and OSError when the file cannot be read.
        """
        path = Path(path)
        if path.suffix == PATCH_SUFFIX:
            self.processor.from_xml(path.read_bytes().decode("utf-8"))
            return True
        if path.suffix == SYSEX_SUFFIX:
            size = path.stat().st_size
            if size != SYSEX_SIZE:
                raise PatchError(f"sysex file must be {SYSEX_SIZE} bytes, got {size}")
            self.processor.from_syx(path.read_bytes())
            return True
        return False

    def save_patch(self, path: PathLike) -> Path:
        """Write the current patch as XML; relative paths go under the user folder."""
        self.setup_user_path()
        target = Path(path)
        if not target.is_absolute():
            target = self.user_path / target
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.processor.to_xml(), encoding="utf-8")
        self.preset_manager.rescan_user_presets()
        return target

    def init_patch(self) -> None:
        self.processor.init_patch()

    def randomize_patch(self, rng: Optional[random.Random] = None) -> None:
        self.processor.randomize_patch(rng)

    def handle_preset_load(self, style: int, idx: int, path: Optional[Path]) -> None:
        """Load the preset chosen in the binding: 0 init, 1 factory, 2 user file."""
        if style == 0:
            self.init_patch()
        elif style == 1:
            text = self.preset_manager.factory_xml_for(idx)
            if text:
                self.processor.from_xml(text)
        elif style == 2 and path is not None:
            self.load_from_file(path)

    def files_dropped(self, files: Sequence[PathLike]) -> None:
        if len(files) != 1:
            return
        for name in files:
            self.load_from_file(name)

    def preset_menu(self) -> PresetMenu:
        """Describe the preset choices with the binding index of each."""
        menu = PresetMenu()
        for category, patches in self.preset_manager.factory_patch_tree.items():
            menu.factory[category] = [
                (name.partition(PATCH_SUFFIX)[0], idx) for name, idx in patches
            ]
        for folder, patches in self.preset_manager.user_patch_tree.items():
            if not folder.parts:
                menu.user.extend(
                    (patch.with_suffix("").as_posix(), idx) for patch, idx in patches
                )
            else:
                menu.user_folders[folder.as_posix()] = [
                    (patch.with_suffix("").name, idx) for patch, idx in patches
                ]
        return menu


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="elfinctl", description="Work with Elfin 04 patches and presets."
    )
    parser.add_argument("--user-path", type=Path, default=None, help="user patch folder")
    parser.add_argument("--factory-path", type=Path, default=None, help="factory patch library")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("list", help="list the available presets")

    show = commands.add_parser("show", help="print a patch file as XML")
    show.add_argument("file", type=Path)

    midi = commands.add_parser("midi", help="print the CC messages a patch file sends")
    midi.add_argument("file", type=Path)
    midi.add_argument("--sample-rate", type=float, default=48000.0)

    rand = commands.add_parser("random", help="print a random patch as XML")
    rand.add_argument("--seed", type=int, default=None)
    rand.add_argument("--save", type=Path, default=None, help="also save it to this file")
    return parser


def _print_menu(menu: PresetMenu) -> None:
    print("0\tInit")
    for category, items in menu.factory.items():
        for label, idx in items:
            print(f"{idx}\t{category}/{label}")
    for label, idx in menu.user:
        print(f"{idx}\t{label}")
    for folder, items in menu.user_folders.items():
        for label, idx in items:
            print(f"{idx}\t{folder}/{label}")


def _load_or_fail(controller: ElfinController, path: Path) -> None:
    if not controller.load_from_file(path):
        raise PatchError(f"not a patch file: {path}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    controller = ElfinController(user_path=args.user_path, factory_path=args.factory_path)
    processor = controller.processor
    try:
        if args.command == "list":
            _print_menu(controller.preset_menu())
        elif args.command == "show":
            _load_or_fail(controller, args.file)
            print(processor.to_xml(), end="")
        elif args.command == "midi":
            _load_or_fail(controller, args.file)
            processor.prepare_to_play(args.sample_rate, 512)
            for event in processor.process_block(1 << 20):
                print(f"{event.time}\t{event.to_bytes().hex(' ')}")
        elif args.command == "random":
            controller.randomize_patch(random.Random(args.seed))
            if args.save is not None:
                controller.save_patch(args.save)
            print(processor.to_xml(), end="")
    except (PatchError, OSError) as exc:
        print(f"elfinctl: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())