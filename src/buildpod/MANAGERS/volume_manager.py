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
Volume management for build pods: the container engine socket and
registry credential secrets.
"""
import logging
import posixpath

from ..CONFIG.worker_contract import DEFAULT_CONTRACT, WorkerContract
from ..MODELS.pod import (
    EnvVar,
    HostPathVolumeSource,
    ObjectReference,
    Pod,
    SecretVolumeSource,
    Volume,
    VolumeMount,
)

logger = logging.getLogger(__name__)


def attach_engine_socket(pod: Pod, contract: WorkerContract = DEFAULT_CONTRACT) -> None:
    """
    Exposes the host's container engine socket to the primary container.

    Adds a host-path volume and a mount at the same path. There is no
    existence check, calling it twice on the same pod adds the volume twice.

    :param pod: The pod to modify.
    :param contract: Socket volume name and path.
    :raises MissingPrimaryContainerError: If the pod has no containers.
    """
    container = pod.primary_container

    volume = Volume(
        name=contract.socket_volume_name,
        host_path=HostPathVolumeSource(path=contract.socket_path),
    )
    mount = VolumeMount(name=contract.socket_volume_name, mount_path=contract.socket_path)

    pod.spec.volumes.append(volume)
    container.volume_mounts.append(mount)


def attach_registry_secret(pod: Pod, secret_name: str, contract: WorkerContract = DEFAULT_CONTRACT) -> None:
    """
    Mounts a registry credentials secret into the primary container.

    The secret volume is named after the secret and mounted read-only under
    ``<secret base>/push``. PUSH_DOCKERCFG_PATH and PULL_DOCKERCFG_PATH both
    point at ``<mount path>/<secret name>``: push and pull credentials are the
    same secret, looked up in the pod's own namespace. The path is only valid
    when the secret holds a data key equal to its own name.

    Does nothing when ``secret_name`` is empty.

    :param pod: The pod to modify.
    :param secret_name: Name of the secret holding the dockercfg.
    :param contract: Mount path and variable names.
    :raises MissingPrimaryContainerError: If the pod has no containers.
    """
    if not secret_name:
        return

    container = pod.primary_container

    volume = Volume(
        name=secret_name,
        secret=SecretVolumeSource(
            target=ObjectReference(kind="Secret", name=secret_name, namespace=pod.namespace)
        ),
    )
    mount = VolumeMount(
        name=secret_name,
        mount_path=posixpath.join(contract.secret_mount_base, contract.secret_mount_suffix),
        read_only=True,
    )
    dockercfg_path = posixpath.join(mount.mount_path, secret_name)

    logger.debug("Adding %s secret to build pod %s", secret_name, pod.name)
    pod.spec.volumes.append(volume)
    container.volume_mounts.append(mount)
    container.env.extend([
        EnvVar(name=contract.push_dockercfg_env, value=dockercfg_path),
        EnvVar(name=contract.pull_dockercfg_env, value=dockercfg_path),
    ])


class VolumeManager:
    """
    Attaches the volumes a build worker needs, using a fixed worker contract.
    """
    def __init__(self, contract: WorkerContract = DEFAULT_CONTRACT):
        """
        Initializes the volume manager.

        :param contract: Paths and names shared with the build-worker image.
        """
        self.contract = contract

    def attach_engine_socket(self, pod: Pod) -> None:
        attach_engine_socket(pod, self.contract)

    def attach_registry_secret(self, pod: Pod, secret_name: str) -> None:
        attach_registry_secret(pod, secret_name, self.contract)
