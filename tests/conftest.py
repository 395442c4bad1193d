import copy
from datetime import datetime, timezone

import pytest
import requests

from babricmeta.common.babric import (
    MAPPINGS_METADATA_URL,
    INTERMEDIARY_METADATA_URL,
    LOADER_METADATA_URL,
    INSTALLER_METADATA_URL,
)
from babricmeta.database import MetaDatabase, VersionAggregator
from babricmeta.errors import FetchError
from babricmeta.model.babric import FabricInstallerDataV1
from babricmeta.model.mojang import MojangIndex
from babricmeta.upstream import LauncherMeta, mark_latest_stable

FIXED_NOW = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

B173_URL = "https://piston-meta.example/v1/packages/b1.7.3.json"
B181_URL = "https://piston-meta.example/v1/packages/b1.8.1.json"

MANIFEST = {
    "latest": {"release": "1.0", "snapshot": "1.0"},
    "versions": [
        {"id": "1.0", "type": "release", "url": "https://piston-meta.example/v1/packages/1.0.json",
         "releaseTime": "2011-11-17T22:00:00+00:00", "time": "2011-11-17T22:00:00+00:00"},
        {"id": "b1.8.1", "type": "old_beta", "url": B181_URL,
         "releaseTime": "2011-09-18T22:00:00+00:00", "time": "2011-09-18T22:00:00+00:00"},
        {"id": "b1.7.3", "type": "old_beta", "url": B173_URL,
         "releaseTime": "2011-07-07T22:00:00+00:00", "time": "2011-07-07T22:00:00+00:00"},
        {"id": "a1.2.6", "type": "old_alpha", "url": "https://piston-meta.example/v1/packages/a1.2.6.json",
         "releaseTime": "2010-12-02T22:00:00+00:00", "time": "2010-12-02T22:00:00+00:00"},
    ],
}


def version_meta(version_id):
    return {
        "id": version_id,
        "type": "old_beta",
        "mainClass": "net.minecraft.client.Minecraft",
        "minecraftArguments": "${auth_player_name} ${auth_session} --gameDir ${game_directory}",
        "libraries": [
            {"name": "org.lwjgl.lwjgl:lwjgl:2.9.4-babric.1", "url": "https://maven.glass-launcher.net/babric/"},
            {"name": "org.lwjgl.lwjgl:lwjgl:2.9.0"},
            {
                "name": "org.lwjgl.lwjgl:lwjgl-platform:2.9.4-babric.1",
                "natives": {"linux": "natives-linux", "windows": "natives-windows"},
                "extract": {"exclude": ["META-INF/"]},
                "url": "https://maven.glass-launcher.net/babric/",
            },
            {"name": "net.java.jinput:jinput:2.0.5"},
        ],
    }


LAUNCHER_META = {
    "version": 1,
    "libraries": {
        "client": [{"name": "babric:client-only:1.0", "url": "https://maven.glass-launcher.net/babric/"}],
        "common": [
            {"name": "net.fabricmc:tiny-mappings-parser:0.3.0+build.17", "url": "https://maven.fabricmc.net/"},
            {"name": "org.ow2.asm:asm:9.5", "url": "https://maven.fabricmc.net/"},
        ],
        "server": [{"name": "babric:server-only:1.0", "url": "https://maven.glass-launcher.net/babric/"}],
    },
    "mainClass": {
        "client": "net.fabricmc.loader.impl.launch.knot.KnotClient",
        "server": "net.fabricmc.loader.impl.launch.knot.KnotServer",
    },
}

LISTINGS = {
    MAPPINGS_METADATA_URL: ["b1.7.3+build.5", "b1.7.3+build.4", "b1.8.1+build.1"],
    INTERMEDIARY_METADATA_URL: ["b1.7.3", "nightly-42", "1.0", "b1.8.1", "b1.7.3", "a1.2.6"],
    LOADER_METADATA_URL: ["0.3.0-beta", "0.2.0", "0.1.0"],
    INSTALLER_METADATA_URL: ["0.2.0", "0.1.0"],
}


class FakeResponse:
    def __init__(self, url, payload=None, content=b"", status_code=200):
        self.url = url
        self.payload = payload
        self.content = content
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} for {self.url}")

    def json(self):
        if self.payload is None:
            raise ValueError("No JSON")
        return copy.deepcopy(self.payload)


class FakeSession:
    """Serves canned payloads by url; anything else is a 404."""

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.requested = []

    def get(self, url, timeout=None):
        self.requested.append(url)
        if url not in self.routes:
            return FakeResponse(url, status_code=404)
        body = self.routes[url]
        if isinstance(body, bytes):
            return FakeResponse(url, content=body)
        return FakeResponse(url, payload=body)


def make_fetch(listings, failing=()):
    def fetch(url, factory, prefix, post_process=None):
        if url in failing:
            raise FetchError(f"404 for {url}")
        versions = [factory(prefix + v) for v in listings.get(url, [])]
        return (post_process or mark_latest_stable)(versions)

    return fetch


@pytest.fixture
def session():
    return FakeSession({B173_URL: version_meta("b1.7.3"), B181_URL: version_meta("b1.8.1")})


@pytest.fixture
def launcher_meta(session):
    return LauncherMeta(MojangIndex.model_validate(MANIFEST), session)


@pytest.fixture
def aggregator(launcher_meta):
    return VersionAggregator(fetch=make_fetch(LISTINGS), fetch_manifest=lambda: launcher_meta)


@pytest.fixture
def database(aggregator):
    database = MetaDatabase(aggregator)
    database.regenerate()
    return database


@pytest.fixture
def installer_data():
    return FabricInstallerDataV1.model_validate(LAUNCHER_META)
