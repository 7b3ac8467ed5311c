# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import collections
import json

import pytest
import requests

import ci.util
import release_notes.model as rnm


class FakeLookup:
    '''
    in-memory implementation of release_notes.lookup.GithubLookup
    '''
    def __init__(self):
        self.milestones_by_repo = collections.defaultdict(list)
        self.releases = {}
        self.pull_requests = {}
        self.raw_contents = {}
        self.calls = []

    def add_milestone(
        self,
        repo: str,
        title: str,
        number: int,
        state: rnm.MilestoneState=rnm.MilestoneState.OPEN,
    ) -> rnm.Milestone:
        milestone = rnm.Milestone(title=title, number=number, state=state)
        self.milestones_by_repo[repo].append(milestone)
        return milestone

    def add_release(self, repo: str, tag: str, body: str):
        self.releases[(repo, tag)] = rnm.Release(tag=tag, body=body)

    def add_pull_request(self, repo: str, milestone_number: int, title: str, number: int):
        self.pull_requests.setdefault((repo, milestone_number), []).append(
            rnm.PullRequestReference(
                title=title,
                number=number,
                url=f'https://github.com/{repo}/pull/{number}',
            )
        )

    def add_raw_content(self, repo: str, ref: str, path: str, content, status_code: int=200):
        if not isinstance(content, str):
            content = json.dumps(content)
        self.raw_contents[(repo, ref, path)] = (status_code, content)

    def milestones(self, repo, state=rnm.MilestoneState.OPEN):
        self.calls.append(('milestones', repo, rnm.MilestoneState(state)))
        milestones = self.milestones_by_repo.get(repo, [])
        if state == rnm.MilestoneState.ALL:
            return list(milestones)
        return [m for m in milestones if m.state == state]

    def release_by_tag(self, repo, tag):
        self.calls.append(('release_by_tag', repo, tag))
        return self.releases.get((repo, tag))

    def milestone_pull_requests(self, repo, milestone_number):
        self.calls.append(('milestone_pull_requests', repo, milestone_number))
        return list(self.pull_requests.get((repo, milestone_number), []))

    def raw_content(self, repo, ref, path):
        self.calls.append(('raw_content', repo, ref, path))
        status_code, content = self.raw_contents.get((repo, ref, path), (404, '404: Not Found'))

        response = requests.Response()
        response.status_code = status_code
        response.encoding = 'utf-8'
        response._content = content.encode('utf-8')
        return response


@pytest.fixture
def lookup() -> FakeLookup:
    return FakeLookup()


@pytest.fixture(autouse=True)
def no_cli_mode():
    ci.util._set_cli(False)
    yield
    ci.util._set_cli(False)
