# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import copy
import functools
import os
import pathlib
import sys

import deepmerge
import termcolor
import yaml


class Failure(RuntimeError, ValueError):
    pass


def _set_cli(is_cli: bool):
    '''
    in cli-mode, `Failure` is a `SystemExit`, so calling `fail` terminates the process with a
    non-zero exit code instead of raising an exception callers might handle.
    '''
    global Failure
    if is_cli:
        class Failure(SystemExit):
            pass
    else:
        class Failure(RuntimeError, ValueError):
            pass


def existing_file(path):
    if isinstance(path, pathlib.Path):
        is_file = path.is_file()
    else:
        is_file = os.path.isfile(path)
    if not is_file:
        fail('not an existing file: ' + str(path))
    return path


def _print(msg, colour, outfh=sys.stdout):
    if not msg:
        return
    if not outfh.isatty():
        outfh.write(msg + '\n')
    else:
        outfh.write(termcolor.colored(msg, colour) + '\n')

    outfh.flush()


def fail(msg=None):
    '''
    reports the given message as an error and raises `Failure`. Intended for errors that must
    abort the current run (and, in cli-mode, the process).
    '''
    if msg:
        _print('ERROR: ' + str(msg), colour='red', outfh=sys.stderr)
    raise Failure(1)


def parse_yaml_file(path):
    with open(path) as f:
        return yaml.load(f, Loader=yaml.SafeLoader)


def urljoin(*parts):
    if len(parts) == 1:
        return parts[0]
    first = parts[0]
    last = parts[-1]
    middle = parts[1:-1]

    first = first.rstrip('/')
    middle = list(map(lambda s: s.strip('/'), middle))
    last = last.lstrip('/')

    return '/'.join([first] + middle + [last])


def merge_dicts(base: dict, *other: dict) -> dict:
    '''
    deep-merges copies of the given dicts using `deepmerge` and returns the result; the arguments
    remain unmodified. Nested dicts are merged, all other values (including lists) from `other`
    replace those from `base`.
    '''
    merger = deepmerge.Merger(
        [(dict, ['merge'])],
        ['override'],
        ['override'],
    )

    return functools.reduce(
        lambda merged, o: merger.merge(merged, copy.deepcopy(o)),
        [base, *other],
        {},
    )
