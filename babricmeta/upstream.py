"""
Readers for the upstream sources the version database is built from: Maven
``maven-metadata.xml`` listings, the game version manifest, per-version game
metadata, and the loader's own launcher meta.
"""

import threading
from typing import Callable, Dict, List, Optional
from xml.etree import ElementTree

from pydantic import ValidationError

from .common import default_session, get_maven_url, manifest_url
from .common.babric import MAVEN_URL
from .common.http import get_json, get_response
from .common.mojang import STABLE_VERSION_TYPES
from .errors import FetchError, MalformedUpstreamMetadataError, UnknownGameVersionError
from .model.babric import FabricInstallerDataV1, MavenVersion
from .model.mojang import MojangIndex, MojangIndexEntry, MojangVersion

_sess = None
_sess_lock = threading.Lock()


def shared_session():
    global _sess
    with _sess_lock:
        if _sess is None:
            _sess = default_session()
        return _sess


def mark_latest_stable(versions: List[MavenVersion]) -> List[MavenVersion]:
    """Default post-process hook: the newest listed build is the stable one."""
    versions = list(versions)
    if versions:
        versions[0] = versions[0].model_copy(update={"stable": True})
    return versions


class PomParser:
    def __init__(self, url: str, sess=None):
        self.url = url
        self.sess = sess
        self.versions: List[str] = []
        self.latest_version: Optional[str] = None

    def load(self):
        r = get_response(self.sess or shared_session(), self.url)
        # ElementTree expands internal entities; maven metadata never declares any
        if b"<!DOCTYPE" in r.content or b"<!ENTITY" in r.content:
            raise FetchError(f"Refusing maven metadata with a DTD at {self.url}")
        try:
            root = ElementTree.fromstring(r.content)
        except ElementTree.ParseError as e:
            raise FetchError(f"Invalid maven metadata at {self.url}") from e

        versions = [el.text.strip() for el in root.findall("./versioning/versions/version") if el.text]
        # maven lists oldest first
        versions.reverse()
        self.versions = versions
        self.latest_version = versions[0] if versions else None

    def get_meta(self, factory: Callable[[str], MavenVersion], prefix: str,
                 post_process: Optional[Callable[[List[MavenVersion]], List[MavenVersion]]] = None):
        self.load()
        try:
            versions = [factory(prefix + version) for version in self.versions]
        except (ValueError, IndexError) as e:
            raise FetchError(f"Unreadable version listed at {self.url}: {e}") from e

        if post_process is None:
            post_process = mark_latest_stable
        return post_process(versions)


def fetch_maven_versions(index_url: str, factory, prefix: str, post_process=None, sess=None) -> List[MavenVersion]:
    return PomParser(index_url, sess).get_meta(factory, prefix, post_process)


class LauncherMeta:
    """The game version manifest, with lookups by version id."""

    def __init__(self, index: MojangIndex, sess=None):
        self.index = index
        self.sess = sess
        self.versions: Dict[str, MojangIndexEntry] = {}
        self._order: Dict[str, int] = {}
        for i, entry in enumerate(index.versions):
            self.versions.setdefault(entry.id, entry)
            self._order.setdefault(entry.id, i)

    def __contains__(self, version_id):
        return version_id in self.versions

    def get_index(self, version_id: str) -> int:
        # manifest order, newest first; unknown ids sort last
        return self._order.get(version_id, len(self.index.versions))

    def is_stable(self, version_id: str) -> bool:
        entry = self.versions.get(version_id)
        return entry is not None and entry.type in STABLE_VERSION_TYPES

    def get_version_meta(self, version_id: str) -> MojangVersion:
        entry = self.versions.get(version_id)
        if entry is None:
            raise UnknownGameVersionError(f"No manifest entry for {version_id}")
        if not entry.url:
            raise MalformedUpstreamMetadataError(f"Manifest entry for {version_id} has no url")

        data = get_json(self.sess or shared_session(), entry.url)
        try:
            return MojangVersion.model_validate(data)
        except ValidationError as e:
            raise MalformedUpstreamMetadataError(f"Bad version meta for {version_id}: {e}") from e


def fetch_launcher_meta(sess=None, url=None) -> LauncherMeta:
    data = get_json(sess or shared_session(), url or manifest_url())
    try:
        index = MojangIndex.model_validate(data)
    except ValidationError as e:
        raise FetchError(f"Invalid version manifest: {e}") from e
    return LauncherMeta(index, sess)


def fetch_loader_installer_data(loader: MavenVersion, sess=None) -> FabricInstallerDataV1:
    url = get_maven_url(loader.maven, MAVEN_URL, ".json")
    data = get_json(sess or shared_session(), url)
    try:
        return FabricInstallerDataV1.model_validate(data)
    except ValidationError as e:
        raise MalformedUpstreamMetadataError(f"Bad launcher meta for loader {loader.version}: {e}") from e
