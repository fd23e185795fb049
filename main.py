import argparse
import json
import logging
import sys

from rich import print
from rich.markup import escape

from header_analyzer import analyze_header_set, parse_header_source
from header_analyzer.config import Settings, load_settings_file, settings_from_env
from header_analyzer.errors import ConfigError

CATEGORY_STYLES = {
    'security': 'red',
    'routing': 'yellow',
    'addressing': 'blue',
    'custom': 'green',
}

RESULT_STYLES = {
    'pass': 'green',
    'bestguesspass': 'green',
    'fail': 'red',
    'softfail': 'red',
    'permerror': 'red',
    'temperror': 'yellow',
    'unknown': 'yellow',
}


def _result_markup(result):
    text = escape(str(getattr(result, 'value', result)))
    style = RESULT_STYLES.get(text)
    return f'[{style}]{text}[/{style}]' if style else text


def pretty_print_result(header_set, summary, show_all=False):
    print('\n[bold underline]Header Summary[/bold underline]')
    for row in summary['basics']:
        if row['missing']:
            print(f"{row['label']}: [red]MISSING[/red]")
        elif row['error']:
            print(f"{row['label']}: [red]{escape(row['error'])}[/red]")
            for v in row['values']:
                print(f"   - {escape(v)}")
        else:
            print(f"{row['label']}: {escape(row['value'])}")

    if summary['warnings']:
        print('\n[yellow]Warnings:[/yellow]')
        for w in summary['warnings']:
            print(f" - {escape(w)}")

    print(f'\n[bold underline]Security ({header_set.direction.value})[/bold underline]')
    if summary['security']:
        for row in summary['security']:
            print(f"{row['label']}: {_result_markup(row['result'])} - {escape(str(row['meaning']))}")
    else:
        print('[red]No security/spam headers found![/red]')

    if summary['notes']:
        print('\nNotes:')
        for n in summary['notes']:
            print(f" - {escape(n)}")

    if header_set.custom_prefix:
        print(f'\n[bold underline]Custom Headers ({escape(header_set.custom_prefix)})[/bold underline]')
        if summary['custom_headers']:
            for h in summary['custom_headers']:
                print(f"[green]{escape(h['name'])}[/green]: {escape(h['value'])}")
        else:
            print(f'[yellow]found no headers prefixed with {escape(header_set.custom_prefix)}[/yellow]')

    if show_all:
        print('\n[bold underline]All Headers[/bold underline]')
        if not summary['headers']:
            print('[red]No headers found![/red]')
        for h in summary['headers']:
            style = CATEGORY_STYLES.get(h['category'])
            name = escape(h['name'])
            if style:
                name = f'[{style}]{name}[/{style}]'
            print(f"{name}: {escape(h['value'])}")


def resolve_settings(args):
    """Work out the effective settings: flag > settings file > environment > defaults."""
    settings = settings_from_env(base=Settings())
    if args.config:
        settings = load_settings_file(args.config, base=settings)
    if args.direction:
        settings = Settings(direction=args.direction, custom_prefix=settings.custom_prefix)
    if args.custom_prefix is not None:
        settings = Settings(direction=settings.direction, custom_prefix=args.custom_prefix.strip())
    return settings


def main(argv=None):
    parser = argparse.ArgumentParser(description='Email header analyzer')
    parser.add_argument('header_file', help="Path to raw header text or full message source ('-' for stdin)")
    parser.add_argument('--direction', choices=['inbound', 'outbound'], default=None,
                        help='Treat the mail as inbound (receiver POV) or outbound (sender POV)')
    parser.add_argument('--custom-prefix', default=None, help='Highlight headers starting with this prefix')
    parser.add_argument('--config', default=None, help='Path to a JSON or simple `key value` settings file')
    parser.add_argument('--json', action='store_true', help='Print the parsed header set and summary as JSON')
    parser.add_argument('--all-headers', action='store_true', help='Print every header with its category')
    parser.add_argument('--log-level', default='WARNING', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Set logging level')
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    try:
        settings = resolve_settings(args)
    except ConfigError as e:
        print(f'[yellow]Warning:[/yellow] {escape(str(e))}; using defaults.')
        settings = Settings(direction=args.direction or Settings.direction,
                            custom_prefix=(args.custom_prefix or '').strip())

    try:
        if args.header_file == '-':
            header_text = sys.stdin.read()
        else:
            with open(args.header_file, 'r', encoding='utf-8', errors='replace') as f:
                header_text = f.read()
    except OSError as e:
        print(f'[red]Error:[/red] failed to read {escape(args.header_file)}: {escape(str(e))}')
        return 2

    header_set = parse_header_source(header_text, settings.direction, settings.custom_prefix)
    summary = analyze_header_set(header_set)

    if args.json:
        sys.stdout.write(json.dumps({'header_set': header_set.to_dict(), 'summary': summary}, indent=2))
        sys.stdout.write('\n')
    else:
        pretty_print_result(header_set, summary, show_all=args.all_headers)
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
