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
Builders for assembling a build-worker pod from a bare template.
"""
import logging
from typing import Iterable, Optional

from ..CONFIG.worker_contract import DEFAULT_CONTRACT, WorkerContract
from ..MANAGERS.environment_manager import EnvironmentManager
from ..MANAGERS.volume_manager import VolumeManager
from ..MODELS.build import Build
from ..MODELS.pod import EnvVar, Pod
from ..errors import BuilderFinalizedError, MissingPrimaryContainerError

logger = logging.getLogger(__name__)


class BuildPodBuilder:
    """
    Owns a private copy of a pod template and applies assembly stages to it.

    The template passed in is never modified. Each stage returns the builder
    so stages can be chained; build() hands the pod over and closes the builder.
    """
    def __init__(self, template: Pod, contract: WorkerContract = DEFAULT_CONTRACT):
        """
        Initializes the builder.

        :param template: The bare pod. Must have at least one container.
        :param contract: Paths and names shared with the build-worker image.
        :raises MissingPrimaryContainerError: If the template has no containers.
        """
        if not template.spec.containers:
            raise MissingPrimaryContainerError(template.name)
        self.contract = contract
        self.environment = EnvironmentManager(contract)
        self.volumes = VolumeManager(contract)
        self._pod: Optional[Pod] = template.model_copy(deep=True)

    @property
    def pod(self) -> Pod:
        if self._pod is None:
            raise BuilderFinalizedError("pod has already been built")
        return self._pod

    def with_engine_socket(self) -> "BuildPodBuilder":
        self.volumes.attach_engine_socket(self.pod)
        return self

    def with_build_identity(self, build: Build) -> "BuildPodBuilder":
        """
        Appends the build identity variables.

        :raises MalformedImageReferenceError: If the build's output reference is invalid.
        """
        self.environment.inject_build_identity(build, self.pod)
        return self

    def with_registry_secret(self, secret_name: str) -> "BuildPodBuilder":
        self.volumes.attach_registry_secret(self.pod, secret_name)
        return self

    def with_env(self, entries: Iterable[EnvVar]) -> "BuildPodBuilder":
        """
        Override-merges ``entries`` into the primary container's environment.
        """
        self.environment.merge_into_primary(self.pod, list(entries))
        return self

    def build(self) -> Pod:
        """
        Returns the assembled pod. The builder cannot be used afterwards.
        """
        pod = self.pod
        self._pod = None
        return pod


def assemble_build_pod(build: Build,
                       template: Pod,
                       contract: WorkerContract = DEFAULT_CONTRACT,
                       extra_env: Optional[Iterable[EnvVar]] = None) -> Pod:
    """
    Assembles a build-worker pod: engine socket, build identity, push secret
    and, last, any extra environment entries with override semantics.

    :param build: The build request.
    :param template: The bare pod. Left unmodified.
    :param contract: Paths and names shared with the build-worker image.
    :param extra_env: Entries overriding the template's environment.
    :return: A new, fully-configured pod.
    :raises MalformedImageReferenceError: If the build's output reference is invalid.
    :raises MissingPrimaryContainerError: If the template has no containers.
    """
    builder = BuildPodBuilder(template, contract)
    builder.with_engine_socket()
    builder.with_build_identity(build)
    builder.with_registry_secret(build.parameters.output.push_secret)
    if extra_env:
        builder.with_env(extra_env)

    pod = builder.build()
    logger.info("Assembled build pod %s for build %s", pod.name, build.name)
    return pod
