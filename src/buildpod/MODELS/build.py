# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Models describing a requested build: where the source comes from and
where the resulting image is pushed.
"""
from typing import Optional
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, model_validator


class BuildSourceType(str, Enum):
    """
    Kinds of build source.
    """
    GIT = "git"
    OTHER = "other"


class _BuildModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class GitBuildSource(_BuildModel):
    """
    A version-control source: repository URI and the revision to build.
    """
    uri: str
    ref: str = ""


class BuildSource(_BuildModel):
    """
    The source of a build, tagged by kind.
    """
    type: BuildSourceType = BuildSourceType.OTHER
    git: Optional[GitBuildSource] = None

    @model_validator(mode="after")
    def _check_git_details(self) -> "BuildSource":
        if self.type is BuildSourceType.GIT and self.git is None:
            raise ValueError("a git build source requires 'git' details")
        return self


class BuildOutput(_BuildModel):
    """
    Where the built image goes.
    """
    docker_image_reference: str = Field(alias="dockerImageReference")
    push_secret: str = Field(default="", alias="pushSecret")


class BuildParameters(_BuildModel):
    """
    Source and output of a build.
    """
    source: BuildSource = Field(default_factory=BuildSource)
    output: BuildOutput


class Build(_BuildModel):
    """
    An immutable build request.
    """
    name: str
    namespace: str = ""
    parameters: BuildParameters
