'''
utils wrapping github3.py's release-API
'''

import logging

import github3.exceptions
import github3.repos
import github3.repos.release

logger = logging.getLogger(__name__)


def tag_name(
    version: str,
    prefix: str='v',
) -> str:
    '''
    returns the release-tag name for the given version; versions already carrying the prefix are
    returned unchanged.
    '''
    if version.startswith(prefix):
        return version
    return f'{prefix}{version}'


def find_release(
    repository: github3.repos.Repository,
    tag: str,
) -> github3.repos.release.Release | None:
    '''
    finds the (published) release for the given tag. Returns `None` if there is no such release,
    as not every tag (or milestone) has a corresponding release.
    '''
    try:
        return repository.release_from_tag(tag)
    except github3.exceptions.NotFoundError:
        logger.debug(f'no release for {tag=} in {repository.full_name}')
        return None
