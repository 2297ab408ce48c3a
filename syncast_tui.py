#!/usr/bin/env python3
"""Command-line entry point for SynCast.

Loads the folder config, fetches every feed once, then hands the terminal
to the curses session. Also exposes `get_user_data_path` for tests to
monkeypatch.
"""

import argparse
import curses
import logging
import sys
from typing import List, Optional

from storage import ConfigStore
from syncast.app import SynCastApp, configure_logging, status_channel
from syncast.errors import ConfigError
from syncast.io.opml import export_opml, import_opml, merge_folders
from syncast.services.feeds import fetch_all
from syncast.services.player import PlayerLauncher
from syncast.utils.paths import get_user_data_path as _paths_get_user_data_path


logger = logging.getLogger('syncast')


def get_user_data_path(filename: str) -> str:
    return _paths_get_user_data_path(filename)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog='syncast', description='Terminal podcast feed reader')
    parser.add_argument('-c', '--config', metavar='PATH', help='folder config file (default: feeds.txt in the data dir)')
    parser.add_argument('-p', '--player', metavar='CMD', help='media player executable (default: player_command setting)')
    parser.add_argument('--debug', action='store_true', help='debug logging and a separate settings profile')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--import-opml', metavar='PATH', help='merge folders from an OPML file into the config and exit')
    group.add_argument('--export-opml', metavar='PATH', help='write the config as OPML and exit')
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(debug=args.debug)
    config = ConfigStore(args.config or get_user_data_path('feeds.txt'))
    try:
        folders = config.load()
        if args.import_opml:
            added = merge_folders(folders, import_opml(args.import_opml))
            config.save(folders)
            logger.info('Imported %d feeds from %s', added, args.import_opml)
            return 0
        if args.export_opml:
            export_opml(args.export_opml, folders)
            logger.info('Exported %d folders to %s', len(folders), args.export_opml)
            return 0
    except ConfigError as e:
        logger.error('%s', e)
        return 1

    tree = fetch_all(folders)
    app = SynCastApp.from_user_data(tree, player=PlayerLauncher(args.player))
    # curses.wrapper restores cooked mode on every exit path
    with status_channel(app.status):
        try:
            curses.wrapper(app.run)
        except KeyboardInterrupt:
            pass
    return 0


if __name__ == '__main__':
    sys.exit(main())
