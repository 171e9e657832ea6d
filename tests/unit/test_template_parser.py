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
Unit tests for the template and .env parsers.
"""
import pytest
from buildpod.MODELS.build import BuildSourceType
from buildpod.PARSERS.template_parser import EnvFileParser, TemplateParser
from buildpod.errors import TemplateLoadError

POD_MANIFEST = """
apiVersion: v1
kind: Pod
metadata:
  name: build-1-pod
  namespace: ns
spec:
  containers:
    - name: builder
      image: builder:latest
      env:
        - name: BUILD_LOGLEVEL
          value: "3"
      volumeMounts:
        - name: cache
          mountPath: /cache
  volumes:
    - name: cache
      hostPath:
        path: /var/cache/builds
"""

BUILD_REQUEST = """
metadata:
  name: build-1
  namespace: ns
parameters:
  source:
    type: git
    git:
      uri: https://x/y.git
      ref: main
  output:
    dockerImageReference: registry.example.com/ns/img:tag
    pushSecret: mysecret
"""


class TestTemplateParser:
    """Tests for TemplateParser."""

    def test_parse_pod_manifest(self):
        pod = TemplateParser().parse_pod_from_string(POD_MANIFEST)
        assert pod.name == "build-1-pod"
        assert pod.namespace == "ns"
        container = pod.primary_container
        assert container.image == "builder:latest"
        assert container.env[0].value == "3"
        assert container.volume_mounts[0].mount_path == "/cache"
        assert pod.spec.volumes[0].host_path.path == "/var/cache/builds"

    def test_inline_volume_sources(self):
        """Test that hostPath and secret sources sit directly on the volume."""
        pod = TemplateParser().parse_pod_from_string(
            "name: p\n"
            "spec:\n"
            "  volumes:\n"
            "    - name: cache\n"
            "      hostPath:\n"
            "        path: /var/cache/builds\n"
            "    - name: creds\n"
            "      secret:\n"
            "        target: {kind: Secret, name: creds, namespace: ns}\n"
        )
        cache, creds = pod.spec.volumes
        assert cache.host_path is not None
        assert cache.host_path.path == "/var/cache/builds"
        assert cache.secret is None
        assert creds.secret.target.name == "creds"
        assert pod.to_manifest()["spec"]["volumes"] == [
            {"name": "cache", "hostPath": {"path": "/var/cache/builds"}},
            {"name": "creds", "secret": {"target": {"kind": "Secret", "name": "creds", "namespace": "ns"}}},
        ]

    def test_parse_build_request(self):
        build = TemplateParser().parse_build_from_string(BUILD_REQUEST)
        assert build.name == "build-1"
        assert build.parameters.source.type is BuildSourceType.GIT
        assert build.parameters.source.git.ref == "main"
        assert build.parameters.output.push_secret == "mysecret"

    def test_parse_from_file(self, tmp_path):
        path = tmp_path / "pod.yaml"
        path.write_text(POD_MANIFEST)
        assert TemplateParser().parse_pod(str(path)).name == "build-1-pod"

    def test_missing_file(self, tmp_path):
        with pytest.raises(TemplateLoadError):
            TemplateParser().parse_pod(str(tmp_path / "missing.yaml"))

    def test_invalid_yaml(self):
        with pytest.raises(TemplateLoadError):
            TemplateParser().parse_pod_from_string("spec: [unclosed")

    def test_not_a_mapping(self):
        with pytest.raises(TemplateLoadError):
            TemplateParser().parse_pod_from_string("- a\n- b\n")

    def test_validation_error(self):
        """Test that a build without output is rejected."""
        with pytest.raises(TemplateLoadError):
            TemplateParser().parse_build_from_string("name: b\nparameters: {}\n")


class TestEnvFileParser:
    """Tests for EnvFileParser."""

    def test_parse_from_string_keeps_order(self):
        content = (
            "# proxies\n"
            "HTTP_PROXY=http://proxy:3128\n"
            "BUILD_LOGLEVEL=\"5\"\n"
            "NO_PROXY='localhost'\n"
            "EMPTY=\n"
        )
        entries = EnvFileParser.parse_from_string(content)
        assert [(e.name, e.value) for e in entries] == [
            ("HTTP_PROXY", "http://proxy:3128"),
            ("BUILD_LOGLEVEL", "5"),
            ("NO_PROXY", "localhost"),
            ("EMPTY", ""),
        ]

    def test_parse_file(self, tmp_path):
        path = tmp_path / "build.env"
        path.write_text("A=1\nB=2\n")
        assert [e.name for e in EnvFileParser.parse(str(path))] == ["A", "B"]
