#! /usr/bin/env python3
import argparse
import logging
import sys

import ci.log
import ci.util
import ctx
import release_notes.bundle as rnb
import release_notes.fetch as rnf
import release_notes.lookup as rnl
import release_notes.model as rnm

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    ''' Parses CLI for release notes retrieval '''
    parser = argparse.ArgumentParser(
        description='Gets the release notes for one or more milestones of a repository',
    )
    parser.add_argument(
        'repo',
        nargs='?',
        help=(
            'Name of the repository to fetch the release notes for. If no org is passed, the '
            'default org is assumed. If no repo is passed, release notes for the entire bundle '
            'since the last bundle release are fetched.'
        ),
    )
    parser.add_argument(
        'milestones',
        nargs='*',
        metavar='milestone',
        help='Name of one or more milestones to fetch the release notes for',
    )
    parser.add_argument(
        '--source',
        default=rnm.Source.RELEASE.value,
        choices=[source.value for source in rnm.Source],
        help='Choose source from where to copy content',
    )
    parser.add_argument(
        '--format',
        default=rnm.Format.MARKDOWN.value,
        choices=[format.value for format in rnm.Format],
        help='Render output in a specific format',
    )
    parser.add_argument(
        '--outfile', '-o',
        default='-',
        help='Write release notes to file instead of stdout',
    )
    parser.add_argument(
        '--cfg-file',
        default=None,
        help=f'Read configuration from file (default: ~/{ctx.default_cfg_file_name})',
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument('--quiet', action='store_true')
    verbosity.add_argument('--verbose', action='store_true')

    return parser.parse_args(argv)


def _log_level(args: argparse.Namespace) -> int:
    if args.verbose:
        return logging.DEBUG
    if args.quiet:
        return logging.WARNING
    return logging.INFO


def print_release_notes(
    args: argparse.Namespace,
    lookup: rnl.GithubLookup,
    outfh,
):
    cfg = ctx.cfg
    request = rnm.AggregationRequest(
        repository=args.repo,
        milestone_names=tuple(args.milestones),
        source=args.source,
        format=args.format,
    )

    if request.repository:
        rnf.repo_release_notes(
            lookup=lookup,
            repo=request.repository,
            milestone_names=request.milestone_names,
            source=request.source,
            format=request.format,
            outfh=outfh,
            default_org=cfg.release_notes.default_org,
        )
        return

    rnb.bundle_release_notes(
        lookup=lookup,
        source=request.source,
        format=request.format,
        outfh=outfh,
        release_notes_cfg=cfg.release_notes,
        github_url=cfg.github.http_url(),
    )


def main(argv=None):
    '''CLI entry point for release notes retrieval'''
    args = parse_args(argv)

    ci.log.configure_default_logging(stdout_level=_log_level(args))

    # mark 'cli' mode (before loading config, which might fail)
    ci.util._set_cli(True)

    # write parsed args to global ctx module, so config passed via argv is honoured
    ctx.args = args
    ctx.load_config()

    lookup = rnl.github_lookup(github_cfg=ctx.cfg.github)

    if args.outfile == '-':
        print_release_notes(args=args, lookup=lookup, outfh=sys.stdout)
        return

    with open(args.outfile, 'w') as outfh:
        print_release_notes(args=args, lookup=lookup, outfh=outfh)
    logger.info(f'wrote release notes to {args.outfile}')


if __name__ == '__main__':
    main()
