import dataclasses
import enum


class Source(enum.StrEnum):
    '''
    where to take release notes from
    '''
    RELEASE = 'release' # body of published github-release
    PULL_REQUEST = 'pull-request' # titles of merged pull requests of milestone


class Format(enum.StrEnum):
    MARKDOWN = 'markdown'
    HTML = 'html'


class MilestoneState(enum.StrEnum):
    OPEN = 'open'
    CLOSED = 'closed'
    ALL = 'all'


@dataclasses.dataclass(frozen=True)
class Milestone:
    title: str
    number: int
    state: MilestoneState


@dataclasses.dataclass(frozen=True)
class Release:
    tag: str
    body: str


@dataclasses.dataclass(frozen=True)
class PullRequestReference:
    title: str
    number: int
    url: str


@dataclasses.dataclass(frozen=True)
class DependencyManifestEntry:
    '''
    a package pinned in the bundle's dependency manifest (composer.lock)
    '''
    name: str
    version: str

    @property
    def package_name(self) -> str:
        return self.name

    @property
    def version_constraint(self) -> str:
        return self.version.removeprefix('v')


@dataclasses.dataclass(frozen=True)
class DependencyManifest:
    packages: tuple[DependencyManifestEntry, ...]


@dataclasses.dataclass(frozen=True)
class AggregationRequest:
    repository: str | None
    milestone_names: tuple[str, ...] = ()
    source: Source = Source.RELEASE
    format: Format = Format.MARKDOWN
