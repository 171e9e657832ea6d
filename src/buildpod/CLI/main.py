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
Command Line Interface for buildpod.
"""
import sys

import click
import yaml

from ..BUILDERS.pod_builder import assemble_build_pod
from ..MANAGERS.environment_manager import EnvironmentManager
from ..PARSERS.template_parser import EnvFileParser, TemplateParser
from ..UTILS.logger import setup_logger
from ..errors import BuildPodError


@click.group()
@click.option('--verbose', '-v', count=True, help='Increase log verbosity (repeatable)')
@click.pass_context
def cli(ctx, verbose):
    """
    buildpod - assemble build-worker pods.

    Combines a build request with a bare pod template into a pod ready to be
    handed to the cluster.
    """
    ctx.ensure_object(dict)
    setup_logger(verbose)
    ctx.obj['parser'] = TemplateParser()


@cli.command()
@click.option('--build', '-b', 'build_path', required=True, type=click.Path(exists=True, dir_okay=False),
              help='Build request YAML file')
@click.option('--pod', '-p', 'pod_path', required=True, type=click.Path(exists=True, dir_okay=False),
              help='Pod template YAML file')
@click.option('--env-file', '-e', type=click.Path(exists=True, dir_okay=False),
              help='.env file whose entries override the template environment')
@click.option('--push-secret', '-s', envvar='BUILDPOD_PUSH_SECRET', default=None,
              help='Registry secret name, overrides the one in the build request')
@click.option('--output', '-o', type=click.Path(dir_okay=False, writable=True),
              help='Write the pod here instead of stdout')
@click.pass_context
def assemble(ctx, build_path, pod_path, env_file, push_secret, output):
    """Assemble a build pod and print it as YAML."""
    parser = ctx.obj['parser']
    try:
        build = parser.parse_build(build_path)
        template = parser.parse_pod(pod_path)
        if push_secret is not None:
            output_spec = build.parameters.output.model_copy(update={'push_secret': push_secret})
            parameters = build.parameters.model_copy(update={'output': output_spec})
            build = build.model_copy(update={'parameters': parameters})
        extra_env = EnvFileParser.parse(env_file) if env_file else None
        pod = assemble_build_pod(build, template, extra_env=extra_env)
    except BuildPodError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    manifest = yaml.safe_dump(pod.to_manifest(), sort_keys=False)
    if output:
        try:
            with open(output, 'w') as f:
                f.write(manifest)
        except OSError as e:
            click.echo(f"Error: cannot write {output}: {e}", err=True)
            sys.exit(1)
        click.echo(f"Pod written to {output}")
    else:
        click.echo(manifest, nl=False)


@cli.command()
@click.option('--pod', '-p', 'pod_path', required=True, type=click.Path(exists=True, dir_okay=False),
              help='Pod YAML file')
@click.pass_context
def verbosity(ctx, pod_path):
    """Print the BUILD_LOGLEVEL of the primary container."""
    try:
        pod = ctx.obj['parser'].parse_pod(pod_path)
        click.echo(EnvironmentManager().get_verbosity(pod))
    except BuildPodError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def main():
    """
    Main entry point for the CLI.
    """
    cli(obj={})


if __name__ == '__main__':
    main()
