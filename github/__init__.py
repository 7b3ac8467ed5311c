# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import enum
import logging

import cachecontrol
import github3
import github3.session

import http_requests

logger = logging.getLogger(__name__)


class SessionAdapter(enum.Enum):
    NONE = None
    RETRY = 'retry'
    CACHE = 'cache'


def split_repo_name(repo: str) -> tuple[str, str]:
    '''
    returns a two-tuple of `owner`, `name` for the given `<owner>/<name>` repository name
    '''
    owner, sep, name = repo.strip('/').partition('/')
    if not sep or not owner or not name or '/' in name:
        raise ValueError(f'expected repository name of form <owner>/<name>, got: {repo=}')

    return owner, name


def _session(
    session_adapter: SessionAdapter,
) -> github3.session.GitHubSession:
    session = github3.session.GitHubSession()
    session_adapter = SessionAdapter(session_adapter)

    if session_adapter is SessionAdapter.NONE or not session_adapter:
        pass
    elif session_adapter is SessionAdapter.RETRY:
        session = http_requests.mount_default_adapter(
            session=session,
            max_pool_size=16, # increase with care, might cause github api "secondary-rate-limit"
        )
    elif session_adapter is SessionAdapter.CACHE:
        session = cachecontrol.CacheControl(
            session,
            cache_etags=True,
        )
    else:
        raise NotImplementedError

    return session


def github_api(
    hostname: str='github.com',
    token: str=None,
    session_adapter: SessionAdapter | str | None=SessionAdapter.RETRY,
) -> github3.GitHub:
    '''
    returns an initialised github-api instance for the given host. For hosts other than
    github.com, a `github3.GitHubEnterprise` instance is returned.

    If no token is passed, the api is used anonymously (which is subject to much lower
    rate-limits).
    '''
    session = _session(session_adapter=session_adapter)

    if hostname.lower() == 'github.com':
        github_api = github3.GitHub(session=session)
    else:
        github_api = github3.GitHubEnterprise(
            url=f'https://{hostname}',
            session=session,
        )

    if token:
        github_api.login(token=token)
    else:
        logger.warning(f'no token configured for {hostname=} - using anonymous api access')

    return github_api
