"""Factory and user preset discovery, and the preset selector binding."""

from __future__ import annotations

import logging
import re
from pathlib import Path, PurePosixPath
from typing import Callable, Iterator, Optional, Union

log = logging.getLogger(__name__)

PATCH_EXTENSIONS = (".elfin", ".syx")

_CHUNK = re.compile(r"([0-9]+)|([^0-9]+)")

PathLike = Union[str, Path]
LoadCallback = Callable[[int, int, Optional[Path]], None]


def natural_key(s: str) -> tuple:
    """Sort key that orders embedded numbers by value, ignoring case."""
    key = []
    for match in _CHUNK.finditer(s.lower()):
        digits, text = match.groups()
        if digits is not None:
            key.append((0, int(digits), ""))
        else:
            key.append((1, 0, text))
    return tuple(key)


def natcasecmp(a: str, b: str) -> int:
    """Case-insensitive natural comparison: negative, zero or positive."""
    ka, kb = natural_key(a), natural_key(b)
    return (ka > kb) - (ka < kb)


def _user_sort_key(path: Path) -> tuple:
    # Files at the top level come first, in natural order; nested ones follow by path.
    if len(path.parts) == 1:
        return (0, natural_key(path.name), ())
    return (1, (), path.parts)


class PresetManager:
    """Lists the factory patch library and the patches in a user folder."""

    def __init__(self, user_path: PathLike, factory_path: Optional[PathLike] = None):
        self.factory_path = Path(factory_path) if factory_path is not None else None
        self.factory_patch_names: dict[str, list[str]] = {}
        self.factory_patch_vector: list[tuple[str, str]] = []
        self.factory_patch_tree: dict[str, list[tuple[str, int]]] = {}
        self.user_patches: list[Path] = []
        self.user_patch_tree: dict[Path, list[tuple[Path, int]]] = {}

        self.load_factory_presets()
        self.user_patches_path = Path(user_path)
        self.rescan_user_presets()

    def load_factory_presets(self) -> None:
        """Read the category folders of the factory library."""
        self.factory_patch_names = {}
        self.factory_patch_vector = []
        self.factory_patch_tree = {}
        if self.factory_path is None:
            return
        try:
            names: dict[str, list[str]] = {}
            for category in sorted(self.factory_path.iterdir(), key=lambda p: p.name):
                if not category.is_dir():
                    continue
                entries = sorted(entry.name for entry in category.iterdir())
                names[category.name] = sorted(entries, key=natural_key)
        except OSError as exc:
            log.warning("cannot read factory presets: %s", exc)
            return

        self.factory_patch_names = names
        self.factory_patch_vector = [
            (category, patch) for category, patches in names.items() for patch in patches
        ]
        for index, (category, patch) in enumerate(self.factory_patch_vector, start=1):
            self.factory_patch_tree.setdefault(category, []).append((patch, index))

    def factory_xml_for(self, idx: int) -> str:
        """Return the text of the factory patch at a 0-based index, or "" on failure."""
        if not 0 <= idx < len(self.factory_patch_vector) or self.factory_path is None:
            log.warning("no factory patch at index %d", idx)
            return ""
        category, name = self.factory_patch_vector[idx]
        try:
            return (self.factory_path / category / name).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            log.warning("cannot read factory patch: %s", exc)
            return ""

    def _find_user_presets(self, directory: Path) -> Iterator[Path]:
        if not directory.is_dir():
            return
        for entry in directory.iterdir():
            if entry.is_dir():
                yield from self._find_user_presets(entry)
            elif entry.is_file() and entry.suffix in PATCH_EXTENSIONS:
                yield entry.relative_to(self.user_patches_path)

    def rescan_user_presets(self) -> None:
        """Rebuild the list and tree of user patches."""
        found: list[Path] = []
        try:
            found = sorted(self._find_user_presets(self.user_patches_path), key=_user_sort_key)
        except OSError:
            pass
        self.user_patches = found

        grouped: dict[Path, list[tuple[Path, int]]] = {}
        first = 1 + len(self.factory_patch_vector)
        for index, patch in enumerate(self.user_patches, start=first):
            grouped.setdefault(patch.parent, []).append((patch, index))
        self.user_patch_tree = {
            key: grouped[key] for key in sorted(grouped, key=lambda p: p.parts)
        }


def _log_load(style: int, idx: int, path: Optional[Path]) -> None:
    log.info("loading flavor %d from %s", style, path)


class PresetDataBinding:
    """A discrete selector over Init, the factory patches and the user patches."""

    label = "Presets"
    default_value = 0

    def __init__(self, manager: PresetManager, on_load: Optional[LoadCallback] = None):
        self.manager = manager
        self.on_load: LoadCallback = on_load or _log_load
        self.value = 0
        self.has_extra = False
        self.extra_name = ""
        self.is_dirty = False

    def set_extra(self, s: str) -> None:
        self.has_extra = True
        self.extra_name = s

    @property
    def min_value(self) -> int:
        return -1 if self.has_extra else 0

    @property
    def max_value(self) -> int:
        pm = self.manager
        return len(pm.factory_patch_vector) + len(pm.user_patches) + (1 if self.has_extra else 0)

    @property
    def value_as_string(self) -> str:
        return self.value_as_string_for(self.value)

    def value_as_string_for(self, i: int) -> str:
        if self.has_extra and i < 0:
            return self.extra_name
        postfix = " *" if self.is_dirty else ""
        if i == 0:
            return "Init" + postfix

        pm = self.manager
        fp = i - 1
        if 0 <= fp < len(pm.factory_patch_vector):
            category, name = pm.factory_patch_vector[fp]
            return str(PurePosixPath(category, name).with_suffix("")) + postfix
        fp -= len(pm.factory_patch_vector)
        if 0 <= fp < len(pm.user_patches):
            return pm.user_patches[fp].with_suffix("").as_posix() + postfix
        return "ERR"

    def set_value_from_gui(self, f: int) -> None:
        """Select entry f and ask on_load to load it."""
        self.is_dirty = False
        self.has_extra = False
        self.value = f
        if f == 0:
            self.on_load(0, 0, None)
            return

        pm = self.manager
        fp = f - 1
        if 0 <= fp < len(pm.factory_patch_vector):
            self.on_load(1, fp, None)
        fp -= len(pm.factory_patch_vector)
        if 0 <= fp < len(pm.user_patches):
            self.on_load(2, fp, pm.user_patches_path / pm.user_patches[fp])

    def set_value_from_model(self, f: int) -> None:
        self.value = f

    def set_dirty_state(self, b: bool) -> None:
        self.is_dirty = b

    def set_state_for_display_name(self, s: str) -> None:
        """Select the entry whose name is s, or show s as an extra entry."""
        if s == "Init":
            self.set_value_from_model(0)
            return

        pm = self.manager
        idx = 1
        for _, patch in pm.factory_patch_vector:
            if patch.partition(".sxsnp")[0] == s:
                self.set_value_from_model(idx)
                return
            idx += 1
        for patch in pm.user_patches:
            if patch.with_suffix("").name == s:
                self.set_value_from_model(idx)
                return
            idx += 1

        self.set_extra(s)
        self.set_value_from_model(-1)