'''
Release Notes Aggregator

Collects release notes for one or more milestones of a GitHub repository, either from the
published GitHub release of a milestone, or (if there is none, or if requested) from the titles of
the pull requests merged for that milestone.

Without a repository, release notes for the next bundle release are collected: for the lowest open
milestone of each of the bundle's own repositories, and for each milestone of the bundled packages
that was closed after the version pinned in the bundle's dependency manifest (composer.lock) of the
last bundle release.

Release notes are rendered as markdown or html.
'''
