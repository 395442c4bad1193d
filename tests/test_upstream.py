import pytest

from babricmeta.common import get_maven_url
from babricmeta.common.babric import MAVEN_URL
from babricmeta.errors import FetchError, MalformedUpstreamMetadataError, UnknownGameVersionError
from babricmeta.model.babric import MavenBuildVersion, MavenVersion
from babricmeta.upstream import (
    PomParser,
    fetch_launcher_meta,
    fetch_loader_installer_data,
    fetch_maven_versions,
)

from conftest import B173_URL, LAUNCHER_META, MANIFEST, FakeSession

METADATA_URL = "https://maven.example/babric/fabric-loader/maven-metadata.xml"
MANIFEST_URL = "https://piston-meta.example/mc/game/version_manifest_v2.json"

MAVEN_METADATA = b"""<?xml version="1.0" encoding="UTF-8"?>
<metadata>
  <groupId>babric</groupId>
  <artifactId>fabric-loader</artifactId>
  <version>0.1.0</version>
  <versioning>
    <latest>0.3.0</latest>
    <release>0.3.0</release>
    <versions>
      <version>0.1.0</version>
      <version>0.2.0</version>
      <version>0.3.0</version>
    </versions>
    <lastUpdated>20240101000000</lastUpdated>
  </versioning>
</metadata>
"""


def test_pom_parser_lists_newest_first():
    parser = PomParser(METADATA_URL, FakeSession({METADATA_URL: MAVEN_METADATA}))
    parser.load()

    assert parser.versions == ["0.3.0", "0.2.0", "0.1.0"]
    assert parser.latest_version == "0.3.0"


def test_fetch_marks_newest_stable_by_default():
    sess = FakeSession({METADATA_URL: MAVEN_METADATA})
    versions = fetch_maven_versions(METADATA_URL, MavenBuildVersion.from_maven, "babric:fabric-loader:", sess=sess)

    assert [v.maven for v in versions] == [
        "babric:fabric-loader:0.3.0",
        "babric:fabric-loader:0.2.0",
        "babric:fabric-loader:0.1.0",
    ]
    assert [v.stable for v in versions] == [True, False, False]


def test_fetch_applies_post_process_hook():
    sess = FakeSession({METADATA_URL: MAVEN_METADATA})
    versions = fetch_maven_versions(METADATA_URL, MavenVersion.from_maven, "babric:fabric-loader:",
                                    lambda listed: listed[1:], sess=sess)

    assert [v.version for v in versions] == ["0.2.0", "0.1.0"]
    assert not any(v.stable for v in versions)


def test_fetch_http_error():
    with pytest.raises(FetchError):
        fetch_maven_versions(METADATA_URL, MavenVersion.from_maven, "babric:fabric-loader:", sess=FakeSession())


def test_fetch_invalid_xml():
    sess = FakeSession({METADATA_URL: b"<metadata><versioning>"})

    with pytest.raises(FetchError):
        fetch_maven_versions(METADATA_URL, MavenVersion.from_maven, "babric:fabric-loader:", sess=sess)


def test_launcher_meta_lookups():
    meta = fetch_launcher_meta(FakeSession({MANIFEST_URL: MANIFEST}), MANIFEST_URL)

    assert "b1.7.3" in meta
    assert "nightly-42" not in meta
    assert meta.get_index("1.0") < meta.get_index("b1.7.3") < meta.get_index("a1.2.6")
    assert meta.get_index("nightly-42") > meta.get_index("a1.2.6")
    assert meta.is_stable("1.0")
    assert not meta.is_stable("b1.7.3")
    assert not meta.is_stable("nightly-42")


def test_launcher_meta_rejects_bad_manifest():
    with pytest.raises(FetchError):
        fetch_launcher_meta(FakeSession({MANIFEST_URL: {"latest": {}}}), MANIFEST_URL)


def test_version_meta(launcher_meta, session):
    version_meta = launcher_meta.get_version_meta("b1.7.3")

    assert version_meta.minecraft_arguments.startswith("${auth_player_name}")
    assert str(version_meta.libraries[0].name) == "org.lwjgl.lwjgl:lwjgl:2.9.4-babric.1"
    assert session.requested[-1].endswith("b1.7.3.json")


def test_version_meta_unknown_version(launcher_meta):
    with pytest.raises(UnknownGameVersionError):
        launcher_meta.get_version_meta("nightly-42")


def test_version_meta_without_libraries(launcher_meta, session):
    session.routes[B173_URL] = {"id": "b1.7.3"}

    with pytest.raises(MalformedUpstreamMetadataError):
        launcher_meta.get_version_meta("b1.7.3")


def test_version_meta_fetch_failure(launcher_meta):
    with pytest.raises(FetchError):
        launcher_meta.get_version_meta("a1.2.6")


def test_loader_installer_data():
    loader = MavenBuildVersion.from_maven("babric:fabric-loader:0.1.0")
    url = get_maven_url(loader.maven, MAVEN_URL, ".json")

    data = fetch_loader_installer_data(loader, FakeSession({url: LAUNCHER_META}))
    assert data.main_class.client == "net.fabricmc.loader.impl.launch.knot.KnotClient"

    broken = dict(LAUNCHER_META)
    del broken["mainClass"]
    with pytest.raises(MalformedUpstreamMetadataError):
        fetch_loader_installer_data(loader, FakeSession({url: broken}))


class BrokenCacheSession(FakeSession):
    def get(self, url, timeout=None):
        raise OSError("cache directory is read-only")


def test_fetch_cache_failure_is_fetch_error():
    with pytest.raises(FetchError):
        fetch_maven_versions(METADATA_URL, MavenVersion.from_maven, "babric:fabric-loader:",
                             sess=BrokenCacheSession())
    with pytest.raises(FetchError):
        fetch_launcher_meta(BrokenCacheSession(), MANIFEST_URL)


def test_pom_parser_refuses_entity_declarations():
    payload = b"""<?xml version="1.0"?>
<!DOCTYPE metadata [<!ENTITY a "aaaaaaaaaa"><!ENTITY b "&a;&a;&a;&a;&a;">]>
<metadata><versioning><versions><version>&b;</version></versions></versioning></metadata>
"""
    parser = PomParser(METADATA_URL, FakeSession({METADATA_URL: payload}))

    with pytest.raises(FetchError):
        parser.load()
