from datetime import datetime
from typing import Optional, List

from pydantic import Field

from . import MetaBase, Library


class MojangLatestVersion(MetaBase):
    release: Optional[str] = None
    snapshot: Optional[str] = None


class MojangIndexEntry(MetaBase):
    id: str
    release_time: Optional[datetime] = Field(None, alias="releaseTime")
    time: Optional[datetime] = None
    type: Optional[str] = None
    url: Optional[str] = None
    sha1: Optional[str] = None


class MojangIndex(MetaBase):
    latest: Optional[MojangLatestVersion] = None
    versions: List[MojangIndexEntry]


class MojangVersion(MetaBase):
    id: Optional[str] = None
    libraries: List[Library]
    main_class: Optional[str] = Field(None, alias="mainClass")
    minecraft_arguments: Optional[str] = Field(None, alias="minecraftArguments")
    release_time: Optional[datetime] = Field(None, alias="releaseTime")
    type: Optional[str] = None
