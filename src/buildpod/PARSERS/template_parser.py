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
Parsers for pod templates, build requests and extra environment files.
"""
import io
from typing import Any, Dict, List, Type, TypeVar

import yaml
from dotenv import dotenv_values
from pydantic import BaseModel, ValidationError

from ..MODELS.build import Build
from ..MODELS.pod import EnvVar, Pod
from ..errors import TemplateLoadError

ModelT = TypeVar("ModelT", bound=BaseModel)


class TemplateParser:
    """
    Loads pod templates and build requests from YAML documents.
    """
    def parse_pod(self, pod_path: str) -> Pod:
        """
        Parses a pod template from a path.

        :param pod_path: Path to the YAML file.
        :return: The pod template.
        :raises TemplateLoadError: If the file cannot be read or is not a valid pod.
        """
        return self._parse_file(pod_path, Pod)

    def parse_pod_from_string(self, content: str) -> Pod:
        return self._parse_string(content, Pod)

    def parse_build(self, build_path: str) -> Build:
        """
        Parses a build request from a path.

        :param build_path: Path to the YAML file.
        :return: The build request.
        :raises TemplateLoadError: If the file cannot be read or is not a valid build.
        """
        return self._parse_file(build_path, Build)

    def parse_build_from_string(self, content: str) -> Build:
        return self._parse_string(content, Build)

    def _parse_file(self, path: str, model: Type[ModelT]) -> ModelT:
        try:
            with open(path, 'r') as f:
                content = f.read()
        except OSError as e:
            raise TemplateLoadError(f"Cannot read {path}: {e}") from e
        return self._parse_string(content, model)

    def _parse_string(self, content: str, model: Type[ModelT]) -> ModelT:
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise TemplateLoadError(f"Invalid YAML: {e}") from e
        if not isinstance(data, dict):
            raise TemplateLoadError(f"Expected a mapping for {model.__name__}, got {type(data).__name__}")

        # Manifests may carry name/namespace under metadata
        data = self._flatten_metadata(data)
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise TemplateLoadError(f"Invalid {model.__name__}: {e}") from e

    @staticmethod
    def _flatten_metadata(data: Dict[str, Any]) -> Dict[str, Any]:
        metadata = data.get('metadata')
        if not isinstance(metadata, dict):
            return data
        flat = {k: v for k, v in data.items() if k not in ('metadata', 'kind', 'apiVersion')}
        for key in ('name', 'namespace'):
            if key in metadata and key not in flat:
                flat[key] = metadata[key]
        return flat


class EnvFileParser:
    """
    Reads .env files into ordered environment entries.
    """
    @staticmethod
    def parse(env_path: str) -> List[EnvVar]:
        """
        Parses an .env file from a path.

        :param env_path: Path to the .env file.
        :return: Entries in file order. Keys without a value get an empty value.
        """
        return EnvFileParser._to_env(dotenv_values(env_path))

    @staticmethod
    def parse_from_string(content: str) -> List[EnvVar]:
        return EnvFileParser._to_env(dotenv_values(stream=io.StringIO(content)))

    @staticmethod
    def _to_env(values: Dict[str, Any]) -> List[EnvVar]:
        return [EnvVar(name=k, value=v or "") for k, v in values.items()]
