import json
from datetime import datetime
from typing import Annotated, Optional, List, Dict, Any

import pydantic
from pydantic import ConfigDict, PlainSerializer, field_validator
from pydantic_core import core_schema

from ..common import serialize_datetime

MetaDateTime = Annotated[datetime, PlainSerializer(serialize_datetime, return_type=str)]


class GradleSpecifier:
    """
        A gradle specifier - a maven coordinate. Like one of these:
        "org.lwjgl.lwjgl:lwjgl:2.9.0"
        "babric:fabric-loader:0.14.24-babric.1"
        "org.ow2.asm:asm-all:*"
    """

    def __init__(self, group: str, artifact: str, version: str, classifier: Optional[str] = None,
                 extension: Optional[str] = None, raw: Optional[str] = None):
        if extension is None:
            extension = "jar"
        self.group = group
        self.artifact = artifact
        self.version = version
        self.classifier = classifier
        self.extension = extension
        # the name exactly as upstream wrote it
        self.raw = raw

    def __str__(self):
        if self.raw is not None:
            return self.raw
        ext = ''
        if self.extension != 'jar':
            ext = "@%s" % self.extension
        if self.classifier:
            return "%s:%s:%s:%s%s" % (self.group, self.artifact, self.version, self.classifier, ext)
        else:
            return "%s:%s:%s%s" % (self.group, self.artifact, self.version, ext)

    def __repr__(self):
        return f"GradleSpecifier('{self}')"

    def __eq__(self, other):
        return str(self) == str(other)

    def __hash__(self):
        return hash(str(self))

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type, handler):
        return core_schema.no_info_plain_validator_function(
            cls.validate,
            serialization=core_schema.to_string_ser_schema(),
        )

    @classmethod
    def from_string(cls, v: str):
        ext_split = v.split('@')

        components = ext_split[0].split(':')
        if len(ext_split) > 2 or not 3 <= len(components) <= 4:
            raise ValueError(f"Invalid maven coordinate {v!r}")
        group = components[0]
        artifact = components[1]
        version = components[2]

        extension = None
        if len(ext_split) == 2:
            extension = ext_split[1]

        classifier = None
        if len(components) == 4:
            classifier = components[3]
        return cls(group, artifact, version, classifier, extension, raw=v)

    @classmethod
    def validate(cls, v):
        if isinstance(v, cls):
            return v
        if isinstance(v, str):
            return cls.from_string(v)
        raise ValueError("Invalid type")


class MetaBase(pydantic.BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def json(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True, indent=4)


class MojangArtifact(MetaBase):
    sha1: Optional[str] = None
    size: Optional[int] = None
    url: str
    path: Optional[str] = None


class MojangLibraryExtractRules(MetaBase):
    exclude: List[str]


class MojangLibraryDownloads(MetaBase):
    artifact: Optional[MojangArtifact] = None
    classifiers: Optional[Dict[Any, MojangArtifact]] = None


class OSRule(MetaBase):
    name: Optional[str] = None
    version: Optional[str] = None
    arch: Optional[str] = None


class MojangRule(MetaBase):
    """
            "rules": [
                {
                    "action": "allow"
                },
                {
                    "action": "disallow",
                    "os": {
                        "name": "osx"
                    }
                }
            ]
    """

    @field_validator("action")
    @classmethod
    def action_must_be_allow_disallow(cls, v):
        assert v in ["allow", "disallow"]
        return v

    action: str
    os: Optional[OSRule] = None


class Library(MetaBase):
    # upstream entries are re-emitted as-is, so unknown keys are kept
    model_config = ConfigDict(extra="allow")

    name: Optional[GradleSpecifier] = None
    url: Optional[str] = None
    extract: Optional[MojangLibraryExtractRules] = None
    downloads: Optional[MojangLibraryDownloads] = None
    natives: Optional[Dict[str, str]] = None
    rules: Optional[List[MojangRule]] = None
