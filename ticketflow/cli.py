#!/usr/bin/env python3
"""ticketflow CLI entrypoint."""

import argparse
import logging
import sys
from pathlib import Path

from ticketflow.backlog import DialectConfig
from ticketflow.commands import add as cmd_add_module
from ticketflow.commands import attach as cmd_attach_module
from ticketflow.commands import check as cmd_check_module
from ticketflow.commands import edit as cmd_edit_module
from ticketflow.commands import export as cmd_export_module
from ticketflow.commands import list as cmd_list_module
from ticketflow.commands import new_id as cmd_new_id_module
from ticketflow.commands import remove_section as cmd_remove_section_module
from ticketflow.commands import show as cmd_show_module
from ticketflow.commands import toggle as cmd_toggle_module
from ticketflow.lib.config import find_config, load_dialect_config


def get_dialect(args) -> DialectConfig:
    """Load --config, else ticketflow.yaml next to the backlog file."""
    if args.config:
        return load_dialect_config(Path(args.config))
    return load_dialect_config(find_config(Path(args.file)))


def cmd_list(args):
    return cmd_list_module.cmd_list(args, get_dialect(args))


def cmd_show(args):
    return cmd_show_module.cmd_show(args, get_dialect(args))


def cmd_check(args):
    return cmd_check_module.cmd_check(args, get_dialect(args))


def cmd_toggle(args):
    return cmd_toggle_module.cmd_toggle(args, get_dialect(args))


def cmd_edit(args):
    return cmd_edit_module.cmd_edit(args, get_dialect(args))


def cmd_add(args):
    return cmd_add_module.cmd_add(args, get_dialect(args))


def cmd_attach(args):
    return cmd_attach_module.cmd_attach(args, get_dialect(args))


def cmd_export(args):
    return cmd_export_module.cmd_export(args, get_dialect(args))


def cmd_remove_section(args):
    return cmd_remove_section_module.cmd_remove_section(args, get_dialect(args))


def cmd_new_id(args):
    return cmd_new_id_module.cmd_new_id(args, get_dialect(args))


def main(argv=None):
    parser = argparse.ArgumentParser(prog='ticketflow', description='Markdown backlog tool')
    parser.add_argument('--verbose', '-v', action='store_true', help='Log parser decisions')
    parser.add_argument('--config', '-c', help='Dialect config (default: ticketflow.yaml next to FILE)')
    subparsers = parser.add_subparsers(dest='command', required=True)

    # ticketflow list
    p_list = subparsers.add_parser('list', help='List items')
    p_list.add_argument('file', help='Backlog markdown file')
    p_list.add_argument('--type', '-t', help='Only items of this type (e.g. BUG)')
    p_list.set_defaults(func=cmd_list)

    # ticketflow show
    p_show = subparsers.add_parser('show', help='Show one item')
    p_show.add_argument('file', help='Backlog markdown file')
    p_show.add_argument('id', help='Item ID')
    p_show.add_argument('--raw', action='store_true', help='Print the item block as written')
    p_show.add_argument('--json', action='store_true', help='Print the item as JSON')
    p_show.add_argument('--export', action='store_true',
                        help='Print the block with its source path and absolute screenshot paths')
    p_show.set_defaults(func=cmd_show)

    # ticketflow check
    p_check = subparsers.add_parser('check', help='Verify the file round-trips unchanged')
    p_check.add_argument('file', help='Backlog markdown file')
    p_check.set_defaults(func=cmd_check)

    # ticketflow toggle
    p_toggle = subparsers.add_parser('toggle', help='Toggle an acceptance criterion')
    p_toggle.add_argument('file', help='Backlog markdown file')
    p_toggle.add_argument('id', help='Item ID')
    p_toggle.add_argument('index', type=int, help='Criterion number (1-based)')
    p_toggle.set_defaults(func=cmd_toggle)

    # ticketflow edit
    p_edit = subparsers.add_parser('edit', help='Update item fields')
    p_edit.add_argument('file', help='Backlog markdown file')
    p_edit.add_argument('id', help='Item ID')
    p_edit.add_argument('--set', '-s', action='append', metavar='KEY=VALUE',
                        help='Field to change (repeatable, empty value clears)')
    p_edit.add_argument('--patch', help='YAML or JSON file with field changes')
    p_edit.set_defaults(func=cmd_edit)

    # ticketflow add
    p_add = subparsers.add_parser('add', help='Add a new item')
    p_add.add_argument('file', help='Backlog markdown file')
    p_add.add_argument('type', help='Item type (e.g. BUG, CT)')
    p_add.add_argument('title', help='Item title')
    p_add.add_argument('--set', '-s', action='append', metavar='KEY=VALUE',
                       help='Initial field value (repeatable)')
    p_add.add_argument('--patch', help='YAML or JSON file with initial field values')
    p_add.set_defaults(func=cmd_add)

    # ticketflow attach
    p_attach = subparsers.add_parser('attach', help='Attach a screenshot to an item')
    p_attach.add_argument('file', help='Backlog markdown file')
    p_attach.add_argument('id', help='Item ID')
    p_attach.add_argument('image', help='Image file (png, jpg, gif, webp)')
    p_attach.add_argument('--alt', help='Alt text (default: the file name)')
    p_attach.set_defaults(func=cmd_attach)

    # ticketflow export
    p_export = subparsers.add_parser('export', help='Export the parsed backlog as JSON')
    p_export.add_argument('file', help='Backlog markdown file')
    p_export.add_argument('--output', '-o', help='Output file (default: stdout)')
    p_export.set_defaults(func=cmd_export)

    # ticketflow remove-section
    p_remove = subparsers.add_parser('remove-section', help='Remove the section of a type')
    p_remove.add_argument('file', help='Backlog markdown file')
    p_remove.add_argument('type', help='Type ID (e.g. BUG_V5)')
    p_remove.set_defaults(func=cmd_remove_section)

    # ticketflow new-id
    p_new_id = subparsers.add_parser('new-id', help='Print the next free ID for a type')
    p_new_id.add_argument('file', help='Backlog markdown file')
    p_new_id.add_argument('type', help='Type ID (e.g. BUG)')
    p_new_id.set_defaults(func=cmd_new_id)

    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(levelname)s %(name)s: %(message)s')
    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())
