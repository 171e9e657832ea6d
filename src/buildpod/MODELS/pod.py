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
Models for the build-worker pod: containers, volumes, mounts and environment.

Field names are snake_case; the Kubernetes camelCase spellings are accepted
as aliases so templates written as pod manifests load unchanged.
"""
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from ..errors import MissingPrimaryContainerError


class _PodModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class EnvVar(_PodModel):
    """
    A single name/value environment entry of a container.
    """
    name: str
    value: str = ""


class HostPathVolumeSource(_PodModel):
    """
    A file or directory on the node, exposed to the pod.
    """
    path: str


class ObjectReference(_PodModel):
    """
    Reference to another API object, e.g. a Secret in the pod's namespace.
    """
    kind: str
    name: str
    namespace: str = ""


class SecretVolumeSource(_PodModel):
    """
    A volume populated from a Secret object.
    """
    target: ObjectReference


class Volume(_PodModel):
    """
    A named volume attached to the pod.

    The source is given inline, as in a pod manifest: exactly one of
    host_path or secret is expected to be set.
    """
    name: str
    host_path: Optional[HostPathVolumeSource] = Field(default=None, alias="hostPath")
    secret: Optional[SecretVolumeSource] = None


class VolumeMount(_PodModel):
    """
    Mounts a pod volume, referenced by name, into a container.
    """
    name: str
    mount_path: str = Field(alias="mountPath")
    read_only: bool = Field(default=False, alias="readOnly")


class Container(_PodModel):
    """
    A container of the pod.
    """
    name: str
    image: str = ""
    env: List[EnvVar] = []
    volume_mounts: List[VolumeMount] = Field(default=[], alias="volumeMounts")


class PodSpec(_PodModel):
    """
    Containers and volumes of a pod. The first container is the primary one.
    """
    containers: List[Container] = []
    volumes: List[Volume] = []


class Pod(_PodModel):
    """
    A named, namespaced group of containers plus their attached volumes.
    """
    name: str
    namespace: str = ""
    spec: PodSpec = Field(default_factory=PodSpec)

    @property
    def primary_container(self) -> Container:
        """
        The container the build runs in.

        :raises MissingPrimaryContainerError: If the pod has no containers.
        """
        if not self.spec.containers:
            raise MissingPrimaryContainerError(self.name)
        return self.spec.containers[0]

    def to_manifest(self) -> dict:
        """
        Dumps the pod as a manifest dictionary using the camelCase field names.
        """
        return self.model_dump(by_alias=True, exclude_none=True)
