'''
Read-only queries against the code-hosting api.

Aggregation code depends on the `GithubLookup` protocol only, so alternative implementations
(e.g. in-memory fakes for testing) may be passed in place of `Github3Lookup`.
'''

import logging
import typing

import github3
import github3.exceptions
import github3.repos
import requests

import ci.util
import ctx
import github
import github.milestone
import github.release
import http_requests
import release_notes.model as rnm

logger = logging.getLogger(__name__)


class GithubLookup(typing.Protocol):
    def milestones(
        self,
        repo: str,
        state: rnm.MilestoneState=rnm.MilestoneState.OPEN,
    ) -> list[rnm.Milestone]:
        ...

    def release_by_tag(
        self,
        repo: str,
        tag: str,
    ) -> rnm.Release | None:
        ...

    def milestone_pull_requests(
        self,
        repo: str,
        milestone_number: int,
    ) -> list[rnm.PullRequestReference]:
        ...

    def raw_content(
        self,
        repo: str,
        ref: str,
        path: str,
    ) -> requests.Response:
        ...


class Github3Lookup:
    def __init__(
        self,
        github_api: github3.GitHub,
        raw_content_url: str='https://raw.githubusercontent.com',
        session: requests.Session=None,
    ):
        self.github_api = github_api
        self.raw_content_url = raw_content_url
        self.session = session or http_requests.session()
        self._repositories: dict[str, github3.repos.Repository] = {}

    def _repository(self, repo: str) -> github3.repos.Repository:
        if (repository := self._repositories.get(repo)):
            return repository

        owner, name = github.split_repo_name(repo)
        try:
            repository = self.github_api.repository(owner, name)
        except github3.exceptions.NotFoundError as nfe:
            raise RuntimeError(f'failed to retrieve repository {repo}', nfe)

        self._repositories[repo] = repository
        return repository

    def milestones(
        self,
        repo: str,
        state: rnm.MilestoneState=rnm.MilestoneState.OPEN,
    ) -> list[rnm.Milestone]:
        state = rnm.MilestoneState(state)
        return [
            rnm.Milestone(
                title=milestone.title,
                number=milestone.number,
                state=rnm.MilestoneState(milestone.state),
            ) for milestone in github.milestone.iter_milestones(
                repository=self._repository(repo),
                state=state.value,
            )
        ]

    def release_by_tag(
        self,
        repo: str,
        tag: str,
    ) -> rnm.Release | None:
        release = github.release.find_release(
            repository=self._repository(repo),
            tag=tag,
        )
        if not release:
            return None

        return rnm.Release(
            tag=release.tag_name,
            body=release.body or '',
        )

    def milestone_pull_requests(
        self,
        repo: str,
        milestone_number: int,
    ) -> list[rnm.PullRequestReference]:
        return [
            rnm.PullRequestReference(
                title=issue.title,
                number=issue.number,
                url=issue.html_url,
            ) for issue in github.milestone.iter_merged_pull_requests(
                repository=self._repository(repo),
                milestone_number=milestone_number,
            )
        ]

    def raw_content(
        self,
        repo: str,
        ref: str,
        path: str,
    ) -> requests.Response:
        url = ci.util.urljoin(self.raw_content_url, repo, ref, path)
        logger.debug(f'fetching {url=}')

        return self.session.get(url, timeout=(4, 31))


def github_lookup(
    github_cfg: ctx.GithubCfg=None,
) -> Github3Lookup:
    '''
    returns a `Github3Lookup` for the given (or the globally configured) github-cfg
    '''
    if not github_cfg:
        github_cfg = ctx.cfg.github

    github_api = github.github_api(
        hostname=github_cfg.hostname,
        token=github_cfg.token,
        session_adapter=github_cfg.session_adapter,
    )

    return Github3Lookup(
        github_api=github_api,
        raw_content_url=github_cfg.raw_content_url(),
        session=http_requests.session(auth_token=github_cfg.token),
    )
