# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import collections.abc
import logging

import github3.issues
import github3.issues.milestone
import github3.repos

logger = logging.getLogger(__name__)


def iter_milestones(
    repository: github3.repos.Repository,
    state: str='open',
) -> collections.abc.Generator[github3.issues.milestone.Milestone, None, None]:
    '''
    yields the repository's milestones with the given state (one of `open`, `closed`, `all`)
    '''
    if state not in ('open', 'closed', 'all'):
        raise ValueError(f'unknown milestone {state=}')

    yield from repository.milestones(
        state=state,
        number=-1,
    )


def is_merged_pull_request(
    issue: github3.issues.ShortIssue,
) -> bool:
    '''
    pull requests are issues with a `pull_request` member; for merged ones, the latter carries a
    `merged_at` timestamp.
    '''
    if not (pull_request := issue.pull_request_urls):
        return False

    return bool(pull_request.get('merged_at'))


def iter_merged_pull_requests(
    repository: github3.repos.Repository,
    milestone_number: int,
) -> collections.abc.Generator[github3.issues.ShortIssue, None, None]:
    '''
    yields the merged pull requests associated with the given milestone, in the order returned
    by the github-api. The issue-api is used, as the pull-request-api cannot filter by milestone.
    '''
    for issue in repository.issues(
        milestone=milestone_number,
        state='all',
        number=-1,
    ):
        if not is_merged_pull_request(issue):
            logger.debug(f'skipping #{issue.number} (not a merged pull request)')
            continue

        yield issue
