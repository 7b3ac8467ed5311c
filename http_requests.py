# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import logging

import requests

from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)


class LoggingRetry(Retry):
    '''
    `Retry` for rate-limited and temporarily failing requests (which are common for the
    github-api), logging each retry attempt.
    '''
    def __init__(
        self,
        **kwargs,
    ):
        defaults = dict(
            total=3,
            connect=3,
            read=3,
            status=3,
            redirect=False,
            status_forcelist=(429, 500, 502, 503, 504),
            raise_on_status=False,
            respect_retry_after_header=True,
            backoff_factor=1.0,
        )

        super().__init__(**(defaults | kwargs))

    def increment(
        self,
        method=None,
        url=None,
        response=None,
        error=None,
        _pool=None,
        _stacktrace=None,
    ):
        # raises if retries are exhausted
        retry = super().increment(method, url, response, error, _pool, _stacktrace)

        status = response.status if response is not None else None
        logger.warning(
            f'{method} {url} failed ({status=} {error=}), retry {len(retry.history)}/{self.total}'
        )
        return retry


def mount_default_adapter(
    session: requests.Session,
    max_pool_size: int=32,
    retry_cfg: Retry=None,
) -> requests.Session:
    '''
    mounts an `HTTPAdapter` retrying failed requests (see `LoggingRetry`) for http and https
    '''
    adapter = HTTPAdapter(
        pool_maxsize=max_pool_size,
        max_retries=retry_cfg or LoggingRetry(),
    )
    session.mount('http://', adapter)
    session.mount('https://', adapter)

    return session


def session(
    auth_token: str=None,
) -> requests.Session:
    '''
    returns a `requests.Session` with the default adapter mounted. If `auth_token` is passed,
    it is sent as `Authorization` header with each request.
    '''
    sess = mount_default_adapter(session=requests.Session())
    if auth_token:
        sess.headers['Authorization'] = f'token {auth_token}'

    return sess
