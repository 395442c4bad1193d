from enum import Enum
from typing import Optional, List, Union

from pydantic import ConfigDict, Field

from . import Library, MetaBase, MetaDateTime
from ..common import get_maven_url
from ..common.babric import MAVEN_URL


class Side(str, Enum):
    CLIENT = "client"
    SERVER = "server"

    def __str__(self):
        return self.value


class BaseVersion(MetaBase):
    model_config = ConfigDict(frozen=True)

    version: str
    stable: bool = False


class MavenVersion(BaseVersion):
    """A published build of one artifact, e.g. "babric:intermediary:b1.7.3"."""

    maven: str

    @property
    def group_artifact(self) -> str:
        return self.maven.rsplit(":", 1)[0]

    @classmethod
    def from_maven(cls, maven: str, **kwargs):
        return cls(maven=maven, version=maven.split(":")[2], **kwargs)


class MavenBuildVersion(MavenVersion):
    separator: str
    build: Optional[int] = None

    @classmethod
    def from_maven(cls, maven: str, **kwargs):
        version = maven.split(":")[2]
        separator = "+build." if "+build." in version else "."
        build_str = version[version.rfind(".") + 1:]
        build = int(build_str) if build_str.isdigit() else None
        return super().from_maven(maven, separator=separator, build=build, **kwargs)


class MavenBuildGameVersion(MavenBuildVersion):
    game_version: str = Field(alias="gameVersion")

    @classmethod
    def from_maven(cls, maven: str, **kwargs):
        version = maven.split(":")[2]
        separator = "+build." if "+build." in version else "."
        game_version = version[:version.rfind(separator)] if separator in version else version
        return super().from_maven(maven, game_version=game_version, **kwargs)


class MavenUrlVersion(MavenVersion):
    url: str

    @classmethod
    def from_maven(cls, maven: str, **kwargs):
        return super().from_maven(maven, url=get_maven_url(maven, MAVEN_URL, ".jar"), **kwargs)


class FabricInstallerLibraries(MetaBase):
    client: Optional[List[Library]] = None
    common: Optional[List[Library]] = None
    server: Optional[List[Library]] = None


class FabricMainClasses(MetaBase):
    client: Optional[str] = None
    common: Optional[str] = None
    server: Optional[str] = None


class FabricInstallerDataV1(MetaBase):
    """The loader's launcher meta, published next to the loader jar."""

    version: int
    libraries: FabricInstallerLibraries
    main_class: Union[str, FabricMainClasses] = Field(alias="mainClass")


class LoaderInfo(MetaBase):
    loader: MavenBuildVersion
    intermediary: MavenVersion


class ProfileArguments(MetaBase):
    game: List[str] = Field(default_factory=list)
    jvm: List[str] = Field(default_factory=list)


class LaunchProfile(MetaBase):
    id: str
    inherits_from: str = Field(alias="inheritsFrom")
    release_time: MetaDateTime = Field(alias="releaseTime")
    time: MetaDateTime
    type: str = "release"
    main_class: str = Field(alias="mainClass")
    arguments: ProfileArguments
    libraries: List[Library]
