import io
import logging
import unittest.mock

import pytest

import ctx
import release_notes.cli as rnc
import release_notes.model as rnm


@pytest.fixture
def global_cfg(monkeypatch):
    cfg = ctx.GlobalConfig(
        github=ctx.GithubCfg(),
        release_notes=ctx.ReleaseNotesCfg(),
    )
    monkeypatch.setattr(ctx, 'cfg', cfg)
    return cfg


def test_parse_args_defaults():
    args = rnc.parse_args([])

    assert args.repo is None
    assert args.milestones == []
    assert args.source == 'release'
    assert args.format == 'markdown'
    assert args.outfile == '-'
    assert args.cfg_file is None
    assert rnc._log_level(args) == logging.INFO


def test_parse_args():
    args = rnc.parse_args([
        'wp-cli/wp-cli', '2.9.0', '2.10.0',
        '--source', 'pull-request',
        '--format', 'html',
        '-o', 'notes.html',
        '--verbose',
    ])

    assert args.repo == 'wp-cli/wp-cli'
    assert args.milestones == ['2.9.0', '2.10.0']
    assert args.source == rnm.Source.PULL_REQUEST
    assert args.format == rnm.Format.HTML
    assert args.outfile == 'notes.html'
    assert rnc._log_level(args) == logging.DEBUG

    assert rnc._log_level(rnc.parse_args(['--quiet'])) == logging.WARNING


@pytest.mark.parametrize('argv', (
    ['--source', 'changelog'],
    ['--format', 'rst'],
    ['--quiet', '--verbose'],
))
def test_parse_args_rejects_invalid(argv):
    with pytest.raises(SystemExit):
        rnc.parse_args(argv)


def test_print_repo_release_notes(global_cfg, lookup):
    lookup.add_milestone('wp-cli/handbook', '2.9.0', 1, rnm.MilestoneState.CLOSED)
    lookup.add_release('wp-cli/handbook', 'v2.9.0', 'handbook release')
    outfh = io.StringIO()

    rnc.print_release_notes(
        args=rnc.parse_args(['handbook', '2.9.0']),
        lookup=lookup,
        outfh=outfh,
    )

    assert outfh.getvalue() == 'handbook release\n\n'


def test_print_bundle_release_notes(global_cfg, lookup, monkeypatch):
    bundle_release_notes = unittest.mock.Mock()
    monkeypatch.setattr(rnc.rnb, 'bundle_release_notes', bundle_release_notes)
    outfh = io.StringIO()

    rnc.print_release_notes(
        args=rnc.parse_args(['--format', 'html']),
        lookup=lookup,
        outfh=outfh,
    )

    bundle_release_notes.assert_called_once_with(
        lookup=lookup,
        source='release',
        format='html',
        outfh=outfh,
        release_notes_cfg=global_cfg.release_notes,
        github_url='https://github.com',
    )


def test_main_writes_outfile(lookup, monkeypatch, tmp_path):
    monkeypatch.setattr(ctx, 'args', None)
    monkeypatch.setattr(ctx, 'cfg', None)
    monkeypatch.setenv('RELEASE_NOTES_CFG', str(tmp_path / 'does-not-exist.cfg'))
    monkeypatch.setattr(rnc.rnl, 'github_lookup', lambda github_cfg: lookup)
    # root logger is left untouched
    monkeypatch.setattr(rnc.ci.log, 'configure_default_logging', lambda stdout_level: None)

    lookup.add_milestone('wp-cli/wp-cli', '2.9.0', 1, rnm.MilestoneState.CLOSED)
    lookup.add_pull_request('wp-cli/wp-cli', 1, 'Fix `wp cli`', 7)
    outfile = tmp_path / 'notes.html'

    rnc.main([
        'wp-cli', '2.9.0',
        '--source', 'pull-request',
        '--format', 'html',
        '--outfile', str(outfile),
        '--quiet',
    ])

    assert outfile.read_text() == (
        '<ul><li>Fix <code>wp cli</code> '
        '[<a href="https://github.com/wp-cli/wp-cli/pull/7">#7</a>]</li></ul>\n'
    )


def test_main_with_missing_cfg_file(monkeypatch, tmp_path, capsys):
    monkeypatch.setattr(ctx, 'args', None)
    monkeypatch.setattr(ctx, 'cfg', None)
    monkeypatch.setenv('RELEASE_NOTES_CFG', str(tmp_path / 'does-not-exist.cfg'))
    monkeypatch.setattr(rnc.ci.log, 'configure_default_logging', lambda stdout_level: None)
    github_lookup = unittest.mock.Mock()
    monkeypatch.setattr(rnc.rnl, 'github_lookup', github_lookup)

    missing = tmp_path / 'missing.cfg'

    with pytest.raises(SystemExit) as exc_info:
        rnc.main(['--cfg-file', str(missing)])

    assert exc_info.value.code == 1
    assert f'ERROR: not an existing file: {missing}' in capsys.readouterr().err
    github_lookup.assert_not_called()
