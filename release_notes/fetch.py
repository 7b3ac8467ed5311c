import collections.abc
import logging
import typing

import ci.util
import github.release
import release_notes.lookup as rnl
import release_notes.model as rnm
import release_notes.render as rnr

logger = logging.getLogger(__name__)


def emit(
    outfh: typing.TextIO,
    text: str,
):
    outfh.write(text + '\n')
    outfh.flush()


def normalise_repo_name(
    repo: str,
    default_org: str='wp-cli',
) -> str:
    '''
    returns the given repository name in `<org>/<name>` form; names without an org are assumed to
    belong to `default_org`.
    '''
    if '/' not in repo:
        return f'{default_org}/{repo}'
    return repo


def resolve_milestones(
    available_milestones: collections.abc.Iterable[rnm.Milestone],
    milestone_names: collections.abc.Sequence[str],
) -> tuple[list[rnm.Milestone], list[str]]:
    '''
    matches the requested milestone names against the available milestones.

    :return: a tuple of the matching milestones (in requested order) and the names for which no
        milestone was found (also in requested order)
    '''
    available_milestones = list(available_milestones)
    milestones = []
    unmatched_names = []

    for milestone_name in milestone_names:
        for milestone in available_milestones:
            if milestone.title == milestone_name:
                milestones.append(milestone)
                available_milestones.remove(milestone)
                break
        else:
            unmatched_names.append(milestone_name)

    return milestones, unmatched_names


def parse_choice(ctor, value, option: str):
    try:
        return ctor(value)
    except ValueError:
        ci.util.fail(f'Unknown --{option}: {value}')


def _pull_request_entries(
    lookup: rnl.GithubLookup,
    repo: str,
    milestone: rnm.Milestone,
    format: rnm.Format,
) -> collections.abc.Generator[str, None, None]:
    for pull_request in lookup.milestone_pull_requests(
        repo=repo,
        milestone_number=milestone.number,
    ):
        yield rnr.pull_request_reference(
            pull_request=pull_request,
            format=format,
        )


def repo_release_notes(
    lookup: rnl.GithubLookup,
    repo: str,
    milestone_names: collections.abc.Sequence[str] | str,
    source: rnm.Source | str,
    format: rnm.Format | str,
    outfh: typing.TextIO,
    default_org: str='wp-cli',
):
    '''
    writes the release notes of the given milestones of the given repository to `outfh`.

    For `Source.RELEASE`, the body of the github-release tagged after the milestone is written
    as-is. Milestones without such a release fall back to `Source.PULL_REQUEST`, for which a list
    of the milestone's merged pull requests is rendered. The pull-request list (which may be
    empty) is written once, after all milestones were processed.
    '''
    repo = normalise_repo_name(repo=repo, default_org=default_org)
    source = parse_choice(rnm.Source, source, option='source')
    format = parse_choice(rnm.Format, format, option='format')

    if isinstance(milestone_names, str):
        milestone_names = (milestone_names,)

    milestones, unmatched_names = resolve_milestones(
        available_milestones=lookup.milestones(
            repo=repo,
            state=rnm.MilestoneState.ALL,
        ),
        milestone_names=milestone_names,
    )

    if unmatched_names:
        missing = "', '".join(unmatched_names)
        logger.warning(
            f"Couldn't find the requested milestone(s) '{missing}' in repository '{repo}'."
        )

    entries = []
    for milestone in milestones:
        logger.debug(f"Using milestone '{milestone.title}' for repo '{repo}'")

        if source is rnm.Source.RELEASE:
            tag = github.release.tag_name(milestone.title)

            if (release := lookup.release_by_tag(repo=repo, tag=tag)):
                emit(outfh, release.body)
                continue

            logger.warning(
                f'Release notes not found for {repo}@{tag}, falling back to pull-request source'
            )

        entries.extend(_pull_request_entries(
            lookup=lookup,
            repo=repo,
            milestone=milestone,
            format=format,
        ))

    emit(outfh, rnr.pull_request_list(entries=entries, format=format))
