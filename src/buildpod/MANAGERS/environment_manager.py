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
Managers for container environment variables: override merging, build
identity injection and verbosity lookup.
"""
import logging
from typing import Dict, List

from ..CONFIG.worker_contract import DEFAULT_CONTRACT, WorkerContract
from ..MODELS.build import Build, BuildSourceType
from ..MODELS.pod import EnvVar, Pod
from ..REGISTRY.image_reference import ImageReference

logger = logging.getLogger(__name__)


def merge_without_duplicates(source: List[EnvVar], output: List[EnvVar]) -> None:
    """
    Merges ``source`` into ``output`` without producing duplicate names.

    Entries of ``output`` whose name also appears in ``source`` take the
    source value and keep their position. Source entries that matched
    nothing are appended afterwards in source order. ``output`` is modified
    in place and ``source`` is consumed: it is empty when the call returns.

    :param source: Entries that take precedence. Drained by the call.
    :param output: The list to merge into.
    """
    overrides: Dict[str, str] = {}
    for env in source:
        overrides[env.name] = env.value

    matched = set()
    for i, env in enumerate(output):
        if env.name in overrides:
            output[i] = EnvVar(name=env.name, value=overrides[env.name])
            matched.add(env.name)

    output.extend(env for env in source if env.name not in matched)
    source.clear()


def get_container_verbosity(container_env: List[EnvVar], contract: WorkerContract = DEFAULT_CONTRACT) -> str:
    """
    Returns the first BUILD_LOGLEVEL value of a container environment, or an empty string.
    """
    for env in container_env:
        if env.name == contract.log_level_env:
            return env.value
    return ""


def build_identity_env(build: Build, contract: WorkerContract = DEFAULT_CONTRACT) -> List[EnvVar]:
    """
    Derives the environment variables describing a build.

    Git sources contribute SOURCE_URI and SOURCE_REF, other sources nothing.
    The output reference contributes OUTPUT_REGISTRY and OUTPUT_IMAGE, the
    latter without the registry host.

    :param build: The build request.
    :param contract: Names of the variables.
    :return: The variables, in the order the worker image expects them.
    :raises MalformedImageReferenceError: If the output image reference cannot be parsed.
    """
    env: List[EnvVar] = []

    source = build.parameters.source
    if source.type is BuildSourceType.GIT:
        env.append(EnvVar(name=contract.source_uri_env, value=source.git.uri))
        env.append(EnvVar(name=contract.source_ref_env, value=source.git.ref))
    # Other source kinds contribute nothing

    ref = ImageReference.parse(build.parameters.output.docker_image_reference)
    env.append(EnvVar(name=contract.output_registry_env, value=ref.registry))
    env.append(EnvVar(name=contract.output_image_env, value=str(ref.without_registry())))
    return env


def inject_build_identity(build: Build, pod: Pod, contract: WorkerContract = DEFAULT_CONTRACT) -> None:
    """
    Appends the build identity variables to the primary container's environment.

    Existing entries are left alone, so a name already present ends up twice;
    use merge_without_duplicates when override semantics are wanted. A pod
    without containers is left untouched. If the output reference is invalid
    the error propagates and the pod is not modified.
    """
    env = build_identity_env(build, contract)
    if not pod.spec.containers:
        logger.debug("Pod %s has no containers, skipping build environment", pod.name)
        return
    pod.spec.containers[0].env.extend(env)


class EnvironmentManager:
    """
    Applies environment changes to build pods using a fixed worker contract.
    """
    def __init__(self, contract: WorkerContract = DEFAULT_CONTRACT):
        """
        Initializes the environment manager.

        :param contract: Variable names shared with the build-worker image.
        """
        self.contract = contract

    def inject_build_identity(self, build: Build, pod: Pod) -> None:
        inject_build_identity(build, pod, self.contract)

    def merge_into_primary(self, pod: Pod, entries: List[EnvVar]) -> None:
        """
        Override-merges ``entries`` into the primary container's environment.

        :param pod: The pod to modify.
        :param entries: Entries that take precedence. Consumed by the call.
        :raises MissingPrimaryContainerError: If the pod has no containers.
        """
        merge_without_duplicates(entries, pod.primary_container.env)

    def get_verbosity(self, pod: Pod) -> str:
        """
        Returns the BUILD_LOGLEVEL of the primary container, or an empty string.
        """
        return get_container_verbosity(pod.primary_container.env, self.contract)
