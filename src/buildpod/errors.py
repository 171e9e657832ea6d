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
Exception hierarchy for pod assembly.
"""
from typing import Optional


class BuildPodError(Exception):
    """Base class for every error raised by buildpod."""


class MalformedImageReferenceError(BuildPodError, ValueError):
    """
    Raised when an image reference string cannot be parsed.
    """

    def __init__(self, reference: str, reason: str):
        self.reference = reference
        self.reason = reason
        super().__init__(f"Invalid image reference {reference!r}: {reason}")


class MissingPrimaryContainerError(BuildPodError, LookupError):
    """
    Raised when an operation needs the primary container of a pod
    that has no containers at all.
    """

    def __init__(self, pod_name: Optional[str] = None):
        self.pod_name = pod_name
        if pod_name:
            message = f"Pod {pod_name!r} has no containers"
        else:
            message = "Pod has no containers"
        super().__init__(message)


class BuilderFinalizedError(BuildPodError, RuntimeError):
    """Raised when a stage is applied to a builder after build()."""


class TemplateLoadError(BuildPodError):
    """
    Raised when a pod template or build request cannot be loaded.
    """
