'''
Release notes for a bundle release.

A bundle release consists of the changes of a fixed set of repositories (for each of those, the
lowest open milestone denotes the upcoming release) plus the changes of all packages pinned in the
bundle's dependency manifest that were released after the pinned version.
'''

import collections.abc
import json
import logging
import re
import typing

import dacite
import requests

import ci.util
import ctx
import github.release
import release_notes.fetch as rnf
import release_notes.lookup as rnl
import release_notes.model as rnm
import release_notes.render as rnr
import version

logger = logging.getLogger(__name__)


def _milestone_title(milestone: rnm.Milestone) -> str:
    return milestone.title


def lowest_milestone(
    milestones: collections.abc.Iterable[rnm.Milestone],
) -> rnm.Milestone | None:
    return version.smallest_version(
        versions=milestones,
        converter=_milestone_title,
        invalid_semver_ok=True,
    )


def highest_milestone(
    milestones: collections.abc.Iterable[rnm.Milestone],
) -> rnm.Milestone | None:
    return version.greatest_version(
        versions=milestones,
        converter=_milestone_title,
        invalid_semver_ok=True,
    )


def milestones_newer_than(
    milestones: collections.abc.Iterable[rnm.Milestone],
    version_constraint: str | None,
) -> collections.abc.Generator[rnm.Milestone, None, None]:
    '''
    yields (retaining order) those milestones whose title is a version greater than the given one.
    If `version_constraint` is `None`, all milestones with a version title are yielded.
    '''
    if version_constraint is None:
        constraint_semver = None
    else:
        constraint_semver = version.parse_to_semver(version_constraint)

    for milestone in milestones:
        milestone_semver = version.parse_to_semver(
            milestone.title,
            invalid_semver_ok=True,
        )
        if milestone_semver is None:
            logger.debug(f'ignoring milestone {milestone.title!r} (not a valid version)')
            continue

        if constraint_semver is None or milestone_semver > constraint_semver:
            yield milestone


def parse_manifest(
    raw: dict,
) -> rnm.DependencyManifest:
    return dacite.from_dict(
        data_class=rnm.DependencyManifest,
        data=raw,
        config=dacite.Config(cast=[tuple]),
    )


def fetch_manifest(
    lookup: rnl.GithubLookup,
    repo: str,
    ref: str,
    path: str='composer.lock',
) -> rnm.DependencyManifest:
    response = lookup.raw_content(
        repo=repo,
        ref=ref,
        path=path,
    )
    if response.status_code != 200:
        ci.util.fail(f'Could not fetch {path} (HTTP code {response.status_code})')

    try:
        return parse_manifest(response.json())
    except (json.JSONDecodeError, requests.JSONDecodeError, dacite.DaciteError) as e:
        ci.util.fail(f'Could not parse {path} from {repo}@{ref}: {e}')


def is_released_package(
    package_name: str,
    org: str='wp-cli',
    auxiliary_packages: collections.abc.Container[str]=(),
) -> bool:
    '''
    returns whether the given package is released (and milestoned) on its own, i.e. is a command
    package of the given org, or one of the given auxiliary packages
    '''
    if re.fullmatch(rf'{re.escape(org)}/.+-command', package_name):
        return True

    return package_name in auxiliary_packages


def iter_released_packages(
    manifest: rnm.DependencyManifest,
    org: str='wp-cli',
    auxiliary_packages: collections.abc.Container[str]=(),
) -> collections.abc.Generator[rnm.DependencyManifestEntry, None, None]:
    for package in sorted(manifest.packages, key=lambda package: package.name):
        if not is_released_package(
            package_name=package.name,
            org=org,
            auxiliary_packages=auxiliary_packages,
        ):
            continue

        yield package


def bundle_release_notes(
    lookup: rnl.GithubLookup,
    source: rnm.Source | str,
    format: rnm.Format | str,
    outfh: typing.TextIO,
    release_notes_cfg: ctx.ReleaseNotesCfg=None,
    github_url: str='https://github.com',
):
    '''
    writes the release notes for the next bundle release to `outfh`.
    '''
    if not release_notes_cfg:
        release_notes_cfg = ctx.cfg.release_notes

    source = rnf.parse_choice(rnm.Source, source, option='source')
    format = rnf.parse_choice(rnm.Format, format, option='format')
    default_org = release_notes_cfg.default_org

    def repo_release_notes(repo: str, milestone_title: str):
        rnf.repo_release_notes(
            lookup=lookup,
            repo=repo,
            milestone_names=milestone_title,
            source=source,
            format=format,
            outfh=outfh,
            default_org=default_org,
        )

    # release notes of the lowest open milestones of the bundle's own repositories
    for repo in release_notes_cfg.bundle_repos:
        milestone = lowest_milestone(
            lookup.milestones(repo=repo, state=rnm.MilestoneState.OPEN),
        )

        if not milestone:
            logger.debug(f"No milestone found for repo '{repo}'")
            continue

        logger.debug(f"Using milestone '{milestone.title}' for repo '{repo}'")

        rnf.emit(outfh, rnr.repo_heading(repo=repo, format=format, github_url=github_url))
        repo_release_notes(repo=repo, milestone_title=milestone.title)

    # closed milestones denote tagged releases; the greatest one is the last bundle release
    bundle_repo = release_notes_cfg.bundle_repo
    last_release = highest_milestone(
        lookup.milestones(repo=bundle_repo, state=rnm.MilestoneState.CLOSED),
    )

    if last_release:
        ref = github.release.tag_name(last_release.title)
    else:
        ref = release_notes_cfg.fallback_ref
    logger.debug(f'reading dependency manifest of {bundle_repo}@{ref}')

    manifest = fetch_manifest(
        lookup=lookup,
        repo=bundle_repo,
        ref=ref,
        path=release_notes_cfg.manifest_path,
    )

    # release notes of all packages released since the last bundle release
    for package in iter_released_packages(
        manifest=manifest,
        org=default_org,
        auxiliary_packages=release_notes_cfg.auxiliary_packages,
    ):
        rnf.emit(outfh, rnr.repo_heading(repo=package.name, format=format, github_url=github_url))

        version_constraint = package.version_constraint
        # branch pins (e.g. `dev-main`) precede all releases
        if not version.is_semver_parseable(version_constraint):
            logger.warning(
                f'{package.name}: pinned version {package.version!r} is not a version, '
                'including all closed milestones'
            )
            version_constraint = None

        for milestone in milestones_newer_than(
            milestones=lookup.milestones(repo=package.name, state=rnm.MilestoneState.CLOSED),
            version_constraint=version_constraint,
        ):
            repo_release_notes(repo=package.name, milestone_title=milestone.title)
