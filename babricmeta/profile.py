"""
Launch profiles for the vanilla launcher, built from the loader's launcher
meta and the game's version meta. This is based on what the installer does.
"""

import concurrent.futures
import copy
import io
import zipfile
from datetime import datetime
from typing import Callable, List, Optional, Union

from .common import now_utc, profile_timeout
from .common.babric import (
    ASM_ALL_EXCLUSION,
    CLIENT_JVM_ARGS,
    COMPATIBILITY_LIBRARIES,
    LOADER_NAME,
    MAVEN_CENTRAL_URL,
    MAVEN_URL,
    NATIVE_BUILD_TAG,
    NATIVE_LIBRARY_TAG,
    PROFILE_WORKERS,
)
from .errors import MalformedUpstreamMetadataError, PackagingError, UpstreamTimeoutError
from .model import GradleSpecifier, Library, MojangRule
from .model.babric import FabricInstallerDataV1, FabricMainClasses, LaunchProfile, LoaderInfo, ProfileArguments, Side
from .model.mojang import MojangVersion
from .upstream import fetch_loader_installer_data


def profile_name(loader_version: str, game_version: str) -> str:
    return "%s-%s-%s" % (LOADER_NAME, loader_version, game_version)


def profile_file_name(loader_version: str, game_version: str, ext: str) -> str:
    return "%s.%s" % (profile_name(loader_version, game_version), ext)


def get_library(maven: str, url: str, *rules: MojangRule) -> Library:
    return Library(name=GradleSpecifier.from_string(maven), url=url, rules=list(rules) or None)


def is_loader_native_library(library: Library) -> bool:
    # upstream has no tag for these, so match on the coordinate text
    name = str(library.name) if library.name is not None else ""
    return NATIVE_LIBRARY_TAG in name and NATIVE_BUILD_TAG in name


def resolve_main_class(main_class: Union[str, FabricMainClasses], side: Side) -> str:
    if isinstance(main_class, FabricMainClasses):
        resolved = getattr(main_class, side.value)
    else:
        resolved = main_class

    if not resolved:
        raise MalformedUpstreamMetadataError(f"Launcher meta has no {side} main class")
    return resolved


def build_launch_profile(info: LoaderInfo, launcher_meta: FabricInstallerDataV1, version_meta: MojangVersion,
                         side: Side, now: datetime) -> LaunchProfile:
    game_version = info.intermediary.version
    side = Side(side)

    # the launcher meta may be shared between requests, never append to it
    libraries: List[Library] = copy.deepcopy(launcher_meta.libraries.common or [])
    libraries.append(get_library(info.intermediary.maven, MAVEN_URL))
    libraries.append(get_library(info.loader.maven, MAVEN_URL))

    side_libraries = getattr(launcher_meta.libraries, side.value)
    if side_libraries:
        libraries.extend(copy.deepcopy(side_libraries))

    # make sure old versions of asm are excluded
    libraries.append(get_library(ASM_ALL_EXCLUSION, MAVEN_CENTRAL_URL, MojangRule(action="disallow")))

    for maven, url in COMPATIBILITY_LIBRARIES:
        libraries.append(get_library(maven, url))

    if side == Side.CLIENT:
        for library in version_meta.libraries:
            if is_loader_native_library(library):
                libraries.append(copy.deepcopy(library))

    arguments = ProfileArguments()
    if side == Side.CLIENT:
        if version_meta.minecraft_arguments:
            arguments.game = version_meta.minecraft_arguments.split()
        arguments.jvm = list(CLIENT_JVM_ARGS)

    return LaunchProfile(
        id=profile_name(info.loader.version, game_version),
        inherits_from=game_version,
        release_time=now,
        time=now,
        type="release",
        main_class=resolve_main_class(launcher_meta.main_class, side),
        arguments=arguments,
        libraries=libraries,
    )


def package_zip(name: str, profile_json: bytes) -> bytes:
    buffer = io.BytesIO()
    try:
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zip_file:
            zip_file.writestr(f"{name}/{name}.json", profile_json)
            # the installer replaces this with the real jar
            zip_file.writestr(f"{name}/{name}.jar", b"")
    except (OSError, ValueError, zipfile.BadZipFile) as e:
        raise PackagingError(f"Failed to package {name}: {e}") from e
    return buffer.getvalue()


class ProfileSynthesizer:
    def __init__(self, database, fetch_launcher_meta=fetch_loader_installer_data,
                 clock: Callable[[], datetime] = now_utc, workers: int = PROFILE_WORKERS,
                 timeout: Optional[float] = None):
        self.database = database
        self.fetch_launcher_meta = fetch_launcher_meta
        self.clock = clock
        self.timeout = timeout if timeout is not None else profile_timeout()
        self.executor = concurrent.futures.ThreadPoolExecutor(max_workers=workers,
                                                              thread_name_prefix="profile")

    def build_profile(self, loader_version: str, game_version: str, side: Union[Side, str]) -> LaunchProfile:
        side = Side(side)
        snapshot = self.database.snapshot
        info = snapshot.get_loader_info(loader_version, game_version)
        version_meta = snapshot.launcher_meta.get_version_meta(game_version)
        launcher_meta = self.fetch_launcher_meta(info.loader)
        return build_launch_profile(info, launcher_meta, version_meta, side, self.clock())

    def _profile_json(self, loader_version: str, game_version: str, side) -> bytes:
        return self.build_profile(loader_version, game_version, side).json().encode("utf-8")

    def _submit(self, fn, *args):
        future = self.executor.submit(fn, *args)
        try:
            return future.result(timeout=self.timeout)
        except concurrent.futures.TimeoutError as e:
            future.cancel()
            raise UpstreamTimeoutError(f"Building the profile took longer than {self.timeout}s") from e

    def profile_json(self, loader_version: str, game_version: str, side: Union[Side, str] = Side.CLIENT) -> bytes:
        return self._submit(self._profile_json, loader_version, game_version, side)

    def profile_zip(self, loader_version: str, game_version: str) -> bytes:
        profile_json = self.profile_json(loader_version, game_version, Side.CLIENT)
        return package_zip(profile_name(loader_version, game_version), profile_json)

    def shutdown(self):
        self.executor.shutdown(wait=False)
