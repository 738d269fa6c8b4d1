import argparse
import logging
import sys

from rbr.config import ConnectionConfig
from rbr.connection import StoreConnection
from rbr.dump import dump_to_file
from rbr.errors import RBRError
from rbr.printer import print_key
from rbr.restore import restore_from_file
from rbr.selector import select_keys

logger = logging.getLogger("rbr")


def build_parser():
    parser = argparse.ArgumentParser(
                        prog = 'RBR',
                        description = 'Redis backup and recovery tool',
                        epilog = 'dump keys to a file and restore them later')

    parser.add_argument('--host', help='server host')
    parser.add_argument('--port', type=int, help='server port')
    parser.add_argument('-a', '--auth', help='server password')
    parser.add_argument('-db', '--db', type=int, help='db number')
    parser.add_argument('--timeout', type=float, help='socket timeout in seconds')
    parser.add_argument('-k', '--keys', help='key glob pattern', default='*')
    parser.add_argument('-r', '--regex', help='filter keys by regex', default='')
    parser.add_argument('-v', '--invert', help='keep keys not matching --regex', action='store_true')
    parser.add_argument('--verbose', help='debug logging', action='store_true')

    sub = parser.add_subparsers(dest='command', required=True)
    sub.add_parser('list', help='list matching keys')

    dump = sub.add_parser('dump', help='dump matching keys to file')
    dump.add_argument('-o', '--output', help='dump file', required=True)

    restore = sub.add_parser('restore', help='restore keys from file')
    restore.add_argument('-i', '--input', help='dump file', required=True)
    restore.add_argument('-d', '--delete', help='delete each key before restoring', action='store_true')
    restore.add_argument('--ignore', help='skip keys that fail to restore', action='store_true')

    show = sub.add_parser('print', help='print matching keys')
    show.add_argument('-f', '--field', help='hash field to print', action='append', default=[])
    show.add_argument('-j', '--json', help='pretty print JSON values', action='store_true')
    return parser


def setup_logging(verbose=False):
    if logger.handlers:
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def run(args, conn, out=None):
    out = out or sys.stdout
    if args.command == 'restore':
        result = restore_from_file(conn, args.input, args.delete, args.ignore)
        print(f"restored {result.restored} keys", file=out)
        return 0

    keys, count = select_keys(conn, args.keys, args.regex, args.invert)
    if args.command == 'list':
        for key in keys:
            print(key.decode("utf-8", errors="replace"), file=out)
        print(f"{count} keys", file=out)
    elif args.command == 'dump':
        size = dump_to_file(conn, keys, args.output)
        print(f"dumped {count} keys ({size} bytes) to {args.output}", file=out)
    elif args.command == 'print':
        for key in keys:
            print_key(conn, key, args.field, args.json, out=out)
    return 0


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    try:
        config = ConnectionConfig.from_env().override(
            host=args.host,
            port=args.port,
            password=args.auth,
            db=args.db,
            socket_timeout=args.timeout,
        )
        with StoreConnection(config) as conn:
            return run(args, conn)
    except (RBRError, OSError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
