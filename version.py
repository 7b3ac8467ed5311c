# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0


import collections.abc
import logging
import typing

import semver

logger = logging.getLogger(__name__)

Version = semver.VersionInfo | str


def parse_to_semver(
    version,
    invalid_semver_ok: bool=False,
) -> semver.VersionInfo:
    '''
    parses the given version into a semver.VersionInfo object.

    Different from strict semver, the given version is preprocessed, if required, to
    convert the version into a valid semver version, if possible.

    The following preprocessings are done:

    - strip away `v` prefix
    - append patch-level `.0` for two-digit versions
    - rm leading zeroes

    @param version: either a str, or an object with a `version` attr
    '''
    if isinstance(version, str):
        version_str = version
    elif isinstance(version, semver.VersionInfo):
        return version
    else:
        if hasattr(version, 'version'):
            if callable(version.version):
                version_str = version.version()
            else:
                version_str = str(version.version)
        elif version is None:
            raise ValueError('version must not be None')
        else:
            logger.warning(f'unexpected type for version: {type(version)}')
            version_str = str(version) # fallback

    try:
        semver_version_info, _ = _parse_to_semver_and_prefix(version_str)
    except ValueError:
        if invalid_semver_ok:
            return None

        raise

    return semver_version_info


def _parse_to_semver_and_prefix(version: str) -> tuple[semver.VersionInfo, str | None]:
    def raise_invalid():
        raise ValueError(f'not a valid (semver) version: `{version}`')

    if not version:
        raise_invalid()

    semver_version = version
    prefix = None

    # strip leading `v`
    if version[0] == 'v':
        semver_version = version[1:]
        prefix = 'v'

    # in most cases, we should be fine now
    try:
        return semver.VersionInfo.parse(semver_version), prefix
    except ValueError:
        pass # try extending `.0` as patch-level

    # blindly append patch-level
    if '-' in version:
        sep = '-'
    else:
        sep = '+'

    numeric, sep, suffix = semver_version.partition(sep)
    if len(tuple(c for c in numeric if c == '.')) == 1:
        numeric += '.0'

    try:
        return semver.VersionInfo.parse(numeric + sep + suffix), prefix
    except ValueError:
        pass # last try: strip leading zeroes

    try:
        major, minor, patch = numeric.split('.')
        numeric = '.'.join((
            str(int(major)),
            str(int(minor)),
            str(int(patch)),
        ))
    except ValueError:
        raise_invalid()

    try:
        return semver.VersionInfo.parse(numeric + sep + suffix), prefix
    except ValueError:
        # re-raise with original version str
        raise_invalid()


def is_semver_parseable(version_string: str):
    try:
        parse_to_semver(version_string)
    except ValueError:
        return False

    return True


T = typing.TypeVar('T')


def _iter_parsed(
    versions: collections.abc.Iterable[T],
    converter: typing.Callable[[T], Version]=None,
    invalid_semver_ok: bool=False,
) -> collections.abc.Generator[tuple[T, semver.VersionInfo], None, None]:
    for candidate in versions:
        candidate_version = converter(candidate) if converter else candidate
        candidate_semver = parse_to_semver(
            version=candidate_version,
            invalid_semver_ok=invalid_semver_ok,
        )

        if candidate_semver is None:
            logger.debug(f'ignoring {candidate_version=} (not a valid version)')
            continue

        yield candidate, candidate_semver


def greatest_version(
    versions: collections.abc.Iterable[T],
    converter: typing.Callable[[T], Version]=None,
    invalid_semver_ok: bool=False,
) -> T | None:
    '''
    returns the greatest version from the passed versions. versions are parsed as semver versions
    using relaxed semver (which allows a `v` prefix, as well as omitting the patchlevel).
    if `invalid_semver_ok` is set to True, versions that are not valid (relaxed) semver versions
    are ignored (will raise otherwise).

    `converter` may be passed to pick the version from elements that are not versions themselves
    (e.g. `lambda milestone: milestone.title`). The returned object is the passed-in element.
    '''
    greatest_candidate = None
    greatest_candidate_semver = None

    for candidate, candidate_semver in _iter_parsed(
        versions=versions,
        converter=converter,
        invalid_semver_ok=invalid_semver_ok,
    ):
        if greatest_candidate_semver is None or candidate_semver > greatest_candidate_semver:
            greatest_candidate_semver = candidate_semver
            greatest_candidate = candidate

    return greatest_candidate


def smallest_version(
    versions: collections.abc.Iterable[T],
    converter: typing.Callable[[T], Version]=None,
    invalid_semver_ok: bool=False,
) -> T | None:
    '''
    counterpart to `greatest_version`; on equal versions, the first one wins.
    '''
    smallest_candidate = None
    smallest_candidate_semver = None

    for candidate, candidate_semver in _iter_parsed(
        versions=versions,
        converter=converter,
        invalid_semver_ok=invalid_semver_ok,
    ):
        if smallest_candidate_semver is None or candidate_semver < smallest_candidate_semver:
            smallest_candidate_semver = candidate_semver
            smallest_candidate = candidate

    return smallest_candidate
