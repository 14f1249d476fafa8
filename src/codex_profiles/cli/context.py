from pathlib import Path
from typing import Optional

import typer

from ..config import CONFIG_DIR, StoragePaths
from ..profiles import ProfileManager, ProfileStore
from ..sync.apply import ProfileSynchronizer
from ..sync.live import LiveConfigReader


class AppContext:
    """services wired against one resolved set of paths."""

    def __init__(self, paths: StoragePaths):
        self.paths = paths
        self.store = ProfileStore(paths)
        self.reader = LiveConfigReader(paths)
        self.manager = ProfileManager(self.store, self.reader)
        self.synchronizer = ProfileSynchronizer(self.store, paths)

    @classmethod
    def build(cls, root: Optional[Path] = None, codex_home: Optional[Path] = None) -> "AppContext":
        return cls(StoragePaths.from_environment(root or CONFIG_DIR, codex_home=codex_home))


def get_context(ctx: typer.Context) -> AppContext:
    """get the context created by the root callback, building a default one if absent."""
    root = ctx.find_root()
    if not isinstance(root.obj, AppContext):
        root.obj = AppContext.build()
    return root.obj
