import re

import release_notes.model as rnm

_inline_code_pattern = re.compile(r'`(.*?)`')


def format_title(
    title: str,
    format: rnm.Format,
) -> str:
    if format == rnm.Format.HTML:
        title = _inline_code_pattern.sub(r'<code>\1</code>', title)

    return title.strip()


def pull_request_reference(
    pull_request: rnm.PullRequestReference,
    format: rnm.Format,
) -> str:
    title = format_title(pull_request.title, format)

    if format == rnm.Format.HTML:
        return f'<li>{title} [<a href="{pull_request.url}">#{pull_request.number}</a>]</li>'

    return f'- {title} [[#{pull_request.number}]({pull_request.url})]\n'


def repo_url(
    repo: str,
    github_url: str='https://github.com',
) -> str:
    return f'{github_url.rstrip("/")}/{repo}/'


def repo_heading(
    repo: str,
    format: rnm.Format,
    github_url: str='https://github.com',
) -> str:
    url = repo_url(repo=repo, github_url=github_url)

    if format == rnm.Format.HTML:
        return f'<h4><a href="{url}">{repo}</a></h4>\n'

    return f'#### [{repo}]({url})\n'


def list_template(
    format: rnm.Format,
) -> str:
    if format == rnm.Format.HTML:
        return '<ul>{entries}</ul>'

    return '{entries}'


def pull_request_list(
    entries: list[str],
    format: rnm.Format,
) -> str:
    return list_template(format).format(entries=''.join(entries))
