"""
The version database: merges the Babric Maven listings with the game version
manifest into one immutable ``VersionSnapshot``, and keeps the process-wide
snapshot current.
"""

import concurrent.futures
import threading
import time
from typing import Callable, List, Optional

from .common import eprint
from .common.babric import (
    MAPPINGS_METADATA_URL,
    INTERMEDIARY_METADATA_URL,
    LOADER_METADATA_URL,
    INSTALLER_METADATA_URL,
    MAPPINGS_PREFIX,
    INTERMEDIARY_PREFIX,
    LOADER_PREFIX,
    INSTALLER_PREFIX,
)
from .errors import (
    AggregationError,
    DatabaseNotReadyError,
    FetchError,
    InconsistentDataError,
    UnknownGameVersionError,
    UnknownLoaderVersionError,
)
from .model.babric import (
    BaseVersion,
    LoaderInfo,
    MavenBuildGameVersion,
    MavenBuildVersion,
    MavenUrlVersion,
    MavenVersion,
)
from .upstream import LauncherMeta, fetch_launcher_meta, fetch_maven_versions

LoaderPredicate = Callable[[MavenVersion], bool]


def is_public_loader_version(version: MavenVersion) -> bool:
    return True


class VersionSnapshot:
    def __init__(self, launcher_meta: LauncherMeta, game, mappings, intermediary, loader, installer,
                 loader_predicate: LoaderPredicate = is_public_loader_version):
        self.launcher_meta = launcher_meta
        self.game = tuple(game)
        self.mappings = tuple(mappings)
        self.intermediary = tuple(intermediary)
        self.installer = tuple(installer)
        self._loader = tuple(loader)
        self._loader_predicate = loader_predicate

    def get_loader(self) -> List[MavenBuildVersion]:
        return [v for v in self._loader if self._loader_predicate(v)]

    def get_all_loader(self) -> List[MavenBuildVersion]:
        return list(self._loader)

    def get_mappings(self, game_version: str) -> List[MavenBuildGameVersion]:
        return [v for v in self.mappings if v.game_version == game_version]

    def get_intermediary(self, game_version: str) -> List[MavenVersion]:
        return [v for v in self.intermediary if v.version == game_version]

    def get_loader_info(self, loader_version: str, game_version: str) -> LoaderInfo:
        loader = next((v for v in self._loader if v.version == loader_version), None)
        if loader is None:
            raise UnknownLoaderVersionError(f"No loader version {loader_version}")
        intermediary = self.get_intermediary(game_version)
        if not intermediary:
            raise UnknownGameVersionError(f"No mappings for game version {game_version}")
        return LoaderInfo(loader=loader, intermediary=intermediary[0])


class VersionAggregator:
    def __init__(self, fetch=fetch_maven_versions, fetch_manifest=fetch_launcher_meta,
                 loader_predicate: LoaderPredicate = is_public_loader_version):
        self.fetch = fetch
        self.fetch_manifest = fetch_manifest
        self.loader_predicate = loader_predicate
        self.snapshot: Optional[VersionSnapshot] = None

    def designate_stable_loader(self, versions: List[MavenBuildVersion]) -> List[MavenBuildVersion]:
        versions = list(versions)
        for i, version in enumerate(versions):
            if self.loader_predicate(version):
                versions[i] = version.model_copy(update={"stable": True})
                break
        return versions

    def generate(self) -> VersionSnapshot:
        start = time.monotonic()
        with concurrent.futures.ThreadPoolExecutor(max_workers=5) as executor:
            mappings = executor.submit(self.fetch, MAPPINGS_METADATA_URL, MavenBuildGameVersion.from_maven,
                                       MAPPINGS_PREFIX)
            intermediary = executor.submit(self.fetch, INTERMEDIARY_METADATA_URL, MavenVersion.from_maven,
                                           INTERMEDIARY_PREFIX)
            loader = executor.submit(self.fetch, LOADER_METADATA_URL, MavenBuildVersion.from_maven,
                                     LOADER_PREFIX, self.designate_stable_loader)
            installer = executor.submit(self.fetch, INSTALLER_METADATA_URL, MavenUrlVersion.from_maven,
                                        INSTALLER_PREFIX)
            launcher_meta = executor.submit(self.fetch_manifest)

            try:
                snapshot = self.load_game_data(
                    launcher_meta.result(),
                    mappings.result(),
                    intermediary.result(),
                    loader.result(),
                    installer.result(),
                )
            except FetchError as e:
                raise AggregationError(f"Failed to fetch version data: {e}") from e

        print("DB update took %dms" % ((time.monotonic() - start) * 1000))
        self.snapshot = snapshot
        return snapshot

    def load_game_data(self, launcher_meta: LauncherMeta, mappings, intermediary, loader, installer) -> VersionSnapshot:
        if not mappings or not intermediary:
            raise InconsistentDataError("Mappings are empty")

        # sorts in the order of minecraft release dates
        intermediary = sorted(intermediary, key=lambda v: launcher_meta.get_index(v.version))
        intermediary = [v.model_copy(update={"stable": True}) for v in intermediary]

        # remove entries that do not match a valid mc version
        filtered = []
        for version in intermediary:
            if version.version not in launcher_meta:
                eprint("Removing %s as it does not match an mc version" % version.version)
                continue
            filtered.append(version)

        game = []
        seen = set()
        for version in filtered:
            if version.version in seen:
                continue
            seen.add(version.version)
            game.append(BaseVersion(version=version.version, stable=launcher_meta.is_stable(version.version)))

        return VersionSnapshot(launcher_meta, game, mappings, filtered, loader, installer, self.loader_predicate)

    def list_loader_versions(self) -> List[MavenBuildVersion]:
        return self._require_snapshot().get_loader()

    def list_all_loader_versions(self) -> List[MavenBuildVersion]:
        return self._require_snapshot().get_all_loader()

    def _require_snapshot(self) -> VersionSnapshot:
        if self.snapshot is None:
            raise DatabaseNotReadyError("Version database has not been generated yet")
        return self.snapshot


class MetaDatabase:
    """Holds the current snapshot; a new one replaces it only once fully built."""

    def __init__(self, aggregator: Optional[VersionAggregator] = None):
        self.aggregator = aggregator or VersionAggregator()
        self._snapshot: Optional[VersionSnapshot] = None
        self._regenerate_lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def snapshot(self) -> VersionSnapshot:
        snapshot = self._snapshot
        if snapshot is None:
            raise DatabaseNotReadyError("Version database has not been generated yet")
        return snapshot

    @property
    def ready(self) -> bool:
        return self._snapshot is not None

    def regenerate(self) -> VersionSnapshot:
        with self._regenerate_lock:
            snapshot = self.aggregator.generate()
            self._snapshot = snapshot
            return snapshot

    def _run(self, interval: float, on_update):
        while not self._stop.wait(interval):
            try:
                snapshot = self.regenerate()
            except Exception as e:
                eprint("Failed to update version database, keeping the previous one")
                eprint("Error is %s" % e)
                continue
            if on_update is not None:
                on_update(snapshot)

    def start(self, interval: float, on_update=None):
        if self._thread is not None:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, args=(interval, on_update),
                                        name="meta-database-update", daemon=True)
        self._thread.start()

    def wait(self):
        thread = self._thread
        while thread is not None and thread.is_alive():
            thread.join(1)

    def stop(self, timeout: Optional[float] = None):
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
