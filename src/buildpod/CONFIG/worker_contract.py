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
Fixed paths and environment variable names shared with the build-worker image.

The image's tooling reads these exact names, so every component takes them
from a WorkerContract instead of spelling them out.
"""
from pydantic import BaseModel, ConfigDict


class WorkerContract(BaseModel):
    """
    Literals that the build-worker image relies on.
    """
    model_config = ConfigDict(frozen=True)

    # Container engine socket
    socket_volume_name: str = "docker-socket"
    socket_path: str = "/var/run/docker.sock"

    # Registry credentials
    secret_mount_base: str = "/var/run/secrets"
    secret_mount_suffix: str = "push"

    # Build identity
    source_uri_env: str = "SOURCE_URI"
    source_ref_env: str = "SOURCE_REF"
    output_registry_env: str = "OUTPUT_REGISTRY"
    output_image_env: str = "OUTPUT_IMAGE"

    push_dockercfg_env: str = "PUSH_DOCKERCFG_PATH"
    pull_dockercfg_env: str = "PULL_DOCKERCFG_PATH"

    log_level_env: str = "BUILD_LOGLEVEL"


DEFAULT_CONTRACT = WorkerContract()
