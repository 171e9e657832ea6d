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
Image reference parsing and handling.
Parses image references like 'nginx:latest' or 'registry.example.com/ns/img:tag'.
"""

import re
from dataclasses import dataclass, replace

from ..errors import MalformedImageReferenceError


_REGISTRY_RE = re.compile(r"^[a-zA-Z0-9](?:[a-zA-Z0-9.-]*[a-zA-Z0-9])?(?::[0-9]+)?$")
_COMPONENT_RE = re.compile(r"^[a-z0-9]+(?:(?:[._]|__|-+)[a-z0-9]+)*$")
_TAG_RE = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_.-]{0,127}$")
_DIGEST_RE = re.compile(r"^[A-Za-z][A-Za-z0-9]*(?:[-_+.][A-Za-z][A-Za-z0-9]*)*:[A-Za-z0-9=_-]+$")


def _looks_like_registry(segment: str) -> bool:
    return "." in segment or ":" in segment or segment == "localhost"


@dataclass
class ImageReference:
    """
    Parsed image reference. Nothing is defaulted: a reference without a
    registry or tag keeps those fields empty.

    Examples:
        - nginx -> name='nginx'
        - myuser/myimage:v1 -> namespace='myuser', name='myimage', tag='v1'
        - registry.example.com/ns/img:tag -> registry='registry.example.com', namespace='ns', name='img', tag='tag'
        - localhost:5000/myimage@sha256:abc123 -> registry='localhost:5000', name='myimage', digest='sha256:abc123'
    """

    name: str
    registry: str = ""
    namespace: str = ""
    tag: str = ""
    digest: str = ""

    @classmethod
    def parse(cls, reference: str) -> "ImageReference":
        """
        Parse an image reference string.

        Args:
            reference: Image reference string (e.g., 'nginx:latest', 'myuser/myimage:v1')

        Returns:
            Parsed ImageReference object.

        Raises:
            MalformedImageReferenceError: If the string is not a valid reference.
        """
        if not reference:
            raise MalformedImageReferenceError(reference, "empty reference")
        if any(ch.isspace() for ch in reference):
            raise MalformedImageReferenceError(reference, "contains whitespace")

        remainder = reference

        # Handle digest format (image@sha256:...)
        digest = ""
        if "@" in remainder:
            remainder, digest = remainder.rsplit("@", 1)
            if not _DIGEST_RE.match(digest):
                raise MalformedImageReferenceError(reference, f"invalid digest {digest!r}")

        # A colon followed by text without a slash is a tag; otherwise it
        # belongs to a registry port (e.g. localhost:5000/image)
        tag = ""
        last_colon = remainder.rfind(":")
        if last_colon != -1 and "/" not in remainder[last_colon + 1 :]:
            tag = remainder[last_colon + 1 :]
            remainder = remainder[:last_colon]
            if not _TAG_RE.match(tag):
                raise MalformedImageReferenceError(reference, f"invalid tag {tag!r}")

        parts = remainder.split("/")
        if any(not part for part in parts):
            raise MalformedImageReferenceError(reference, "empty path segment")

        registry = ""
        namespace = ""
        if len(parts) == 1:
            name = parts[0]
        elif len(parts) == 2:
            if _looks_like_registry(parts[0]):
                registry, name = parts
            else:
                namespace, name = parts
        else:
            registry = parts[0]
            namespace = "/".join(parts[1:-1])
            name = parts[-1]

        if registry and not _REGISTRY_RE.match(registry):
            raise MalformedImageReferenceError(reference, f"invalid registry {registry!r}")
        for component in ([namespace] if namespace else []) + [name]:
            for piece in component.split("/"):
                if not _COMPONENT_RE.match(piece):
                    raise MalformedImageReferenceError(
                        reference, f"invalid repository component {piece!r}"
                    )

        return cls(name=name, registry=registry, namespace=namespace, tag=tag, digest=digest)

    @property
    def repository(self) -> str:
        """Repository path without registry, tag or digest."""
        if self.namespace:
            return f"{self.namespace}/{self.name}"
        return self.name

    def without_registry(self) -> "ImageReference":
        """Copy of this reference with the registry cleared."""
        return replace(self, registry="")

    def __str__(self) -> str:
        name = self.repository
        if self.registry:
            name = f"{self.registry}/{name}"
        if self.tag:
            name = f"{name}:{self.tag}"
        if self.digest:
            name = f"{name}@{self.digest}"
        return name

    def __repr__(self) -> str:
        return f"ImageReference({self})"
