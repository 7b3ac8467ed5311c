# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0


import copy
import logging
import sys

import termcolor


class CCFormatter(logging.Formatter):
    '''
    offers the `levelprefix` format-key: the record's level name, coloured if stderr is a tty
    '''
    level_colours = {
        logging.DEBUG: 'blue',
        logging.INFO: 'green',
        logging.WARNING: 'yellow',
        logging.ERROR: 'red',
        logging.CRITICAL: 'red',
    }

    def level_prefix(self, record: logging.LogRecord) -> str:
        if not sys.stderr.isatty() or not (colour := self.level_colours.get(record.levelno)):
            return record.levelname

        return termcolor.colored(record.levelname, colour, attrs=['bold'])

    def formatMessage(self, record):
        record = copy.copy(record)
        record.levelprefix = self.level_prefix(record)
        return super().formatMessage(record)


def default_fmt_string():
    return '%(asctime)s [%(levelprefix)s] %(name)s: %(message)s'


def configure_default_logging(
    stdout_level=None,
):
    '''
    replaces the root logger's handlers by a single stream-handler. Diagnostics are written to
    stderr, so they never mix with release notes written to stdout.
    '''
    if not stdout_level:
        stdout_level = logging.INFO

    for handler in list(logging.root.handlers):
        logging.root.removeHandler(handler)
        handler.close()

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setLevel(stdout_level)
    handler.setFormatter(CCFormatter(fmt=default_fmt_string()))

    logging.root.addHandler(handler)
    logging.root.setLevel(stdout_level)

    # both too verbose
    logging.getLogger('github3').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)
