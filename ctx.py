# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import dataclasses
import os
import typing
import urllib.parse

import dacite

import ci.util

'''
Execution context. Filled upon invocation of release_notes.cli, read by submodules
'''

args = None # the parsed command line arguments
cfg = None # initialised upon importing this module

default_cfg_file_name = '.release-notes.cfg'


@dataclasses.dataclass
class GithubCfg:
    hostname: str = 'github.com'
    token: typing.Optional[str] = None
    session_adapter: str = 'retry' # see github.SessionAdapter

    def http_url(self) -> str:
        return f'https://{self.hostname}'

    def raw_content_url(self) -> str:
        if self.hostname == 'github.com':
            return 'https://raw.githubusercontent.com'
        return f'https://{self.hostname}/raw'


@dataclasses.dataclass
class ReleaseNotesCfg:
    default_org: str = 'wp-cli'
    bundle_repo: str = 'wp-cli/wp-cli-bundle'
    # repositories whose lowest open milestone is part of the next bundle release
    bundle_repos: tuple[str, ...] = (
        'wp-cli/wp-cli-bundle',
        'wp-cli/wp-cli',
        'wp-cli/handbook',
        'wp-cli/wp-cli.github.com',
    )
    manifest_path: str = 'composer.lock'
    fallback_ref: str = 'master'
    # non-command packages from the bundle's lock file that are released on their own
    auxiliary_packages: tuple[str, ...] = (
        'wp-cli/wp-cli-tests',
        'wp-cli/regenerate-readme',
        'wp-cli/autoload-splitter',
        'wp-cli/wp-config-transformer',
        'wp-cli/php-cli-tools',
        'wp-cli/spyc',
    )


@dataclasses.dataclass
class GlobalConfig:
    github: typing.Optional[GithubCfg] = None
    release_notes: typing.Optional[ReleaseNotesCfg] = None


def _from_dict(ctor, raw: dict):
    return dacite.from_dict(
        data_class=ctor,
        data=raw,
        config=dacite.Config(cast=[tuple]),
    )


def _default_cfg() -> dict:
    return dataclasses.asdict(GlobalConfig(
        github=GithubCfg(),
        release_notes=ReleaseNotesCfg(),
    ))


def _config_from_file(cfg_file_path: str) -> dict | None:
    if not os.path.isfile(cfg_file_path):
        return None

    return ci.util.parse_yaml_file(cfg_file_path) or None


def _config_from_user_home():
    cfg_file_path = os.environ.get(
        'RELEASE_NOTES_CFG',
        os.path.join(os.path.expanduser('~'), default_cfg_file_name),
    )
    return _config_from_file(cfg_file_path)


def github_hostname(server_url: str) -> str:
    '''
    returns the hostname of the given github server url (e.g. as passed via `GITHUB_SERVER_URL`).
    Plain hostnames are returned unchanged.
    '''
    if (hostname := urllib.parse.urlparse(server_url).hostname):
        return hostname
    return server_url.strip('/')


def _config_from_env():
    env = os.environ
    github_cfg = {}

    if token := env.get('GITHUB_TOKEN'):
        github_cfg['token'] = token

    if server_url := env.get('GITHUB_SERVER_URL'):
        github_cfg['hostname'] = github_hostname(server_url)

    if not github_cfg:
        return None

    return {'github': github_cfg}


def _config_from_parsed_argv():
    if not args or not getattr(args, 'cfg_file', None):
        return None

    return _config_from_file(ci.util.existing_file(args.cfg_file))


def load_config():
    '''
    (re-)loads the global configuration. Each layer only contains the values it actually sets;
    later layers win:

    - built-in defaults
    - `~/.release-notes.cfg` (or the file named by `RELEASE_NOTES_CFG`)
    - environment (`GITHUB_TOKEN`, `GITHUB_SERVER_URL`)
    - file passed via `--cfg-file`
    '''
    global cfg

    layers = [
        layer for layer in (
            _config_from_user_home(),
            _config_from_env(),
            _config_from_parsed_argv(),
        ) if layer
    ]

    cfg = _from_dict(GlobalConfig, ci.util.merge_dicts(_default_cfg(), *layers))

    return cfg


load_config()
