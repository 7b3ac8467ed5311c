import unittest.mock

import pytest

import github
import github.milestone


def _issue(number: int, pull_request: dict | None):
    issue = unittest.mock.Mock()
    issue.number = number
    issue.pull_request_urls = pull_request
    return issue


def test_split_repo_name():
    assert github.split_repo_name('wp-cli/wp-cli') == ('wp-cli', 'wp-cli')
    assert github.split_repo_name('/acme/widget/') == ('acme', 'widget')

    for invalid in ('wp-cli', 'a/b/c', '/widget', 'acme/'):
        with pytest.raises(ValueError):
            github.split_repo_name(invalid)


def test_iter_milestones():
    repository = unittest.mock.Mock()
    repository.milestones.return_value = iter(('m1', 'm2'))

    assert list(github.milestone.iter_milestones(repository, state='closed')) == ['m1', 'm2']
    repository.milestones.assert_called_once_with(state='closed', number=-1)

    with pytest.raises(ValueError):
        list(github.milestone.iter_milestones(repository, state='merged'))


def test_is_merged_pull_request():
    # plain issue
    assert not github.milestone.is_merged_pull_request(_issue(1, None))
    # unmerged (closed or open) pull request
    assert not github.milestone.is_merged_pull_request(
        _issue(2, {'url': 'https://api.github.com/pulls/2', 'merged_at': None}),
    )
    assert github.milestone.is_merged_pull_request(
        _issue(3, {'url': 'https://api.github.com/pulls/3', 'merged_at': '2024-01-01T00:00:00Z'}),
    )


def test_iter_merged_pull_requests():
    issues = [
        _issue(1, None),
        _issue(2, {'merged_at': '2024-01-02T00:00:00Z'}),
        _issue(3, {'merged_at': None}),
        _issue(4, {'merged_at': '2024-01-01T00:00:00Z'}),
    ]
    repository = unittest.mock.Mock()
    repository.issues.return_value = iter(issues)

    merged = list(github.milestone.iter_merged_pull_requests(
        repository=repository,
        milestone_number=42,
    ))

    # order as returned by api is retained
    assert [issue.number for issue in merged] == [2, 4]
    repository.issues.assert_called_once_with(milestone=42, state='all', number=-1)
