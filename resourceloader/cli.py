from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from resourceloader.core.context import ResourceLoaderContext
from resourceloader.core.errors import ResourceLoaderError
from resourceloader.core.registry import ModuleRegistry
from resourceloader.core.settings import LoaderSettings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="resourceloader")
    parser.add_argument("--modules", required=True, help="Module definitions file (JSON or YAML)")
    parser.add_argument("--root", default=None, help="Install root (default: RESOURCELOADER_INSTALL_ROOT or cwd)")
    parser.add_argument("--script-path", default=None, help="Public URL prefix of the install root")
    parser.add_argument("--lang", default="en")
    parser.add_argument("--skin", default="default")
    parser.add_argument("--debug", action="store_true")
    parser.add_argument("--log-level", default="WARNING")
    parser.add_argument("what", choices=["list", "script", "loader", "styles", "mtime", "info"])
    parser.add_argument("module", nargs="?", default=None)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    settings = LoaderSettings.from_env()
    updates = {}
    if args.root is not None:
        updates["install_root"] = Path(args.root)
    if args.script_path is not None:
        updates["script_path"] = args.script_path.rstrip("/")
    if updates:
        settings = settings.model_copy(update=updates)

    registry = ModuleRegistry(settings)
    try:
        registry.load_file(Path(args.modules))

        if args.what == "list":
            for name in registry.names():
                print(name)
            return 0

        if not args.module:
            print("ERROR: a module name is required", file=sys.stderr)
            return 2

        module = registry.get(args.module)
        ctx = ResourceLoaderContext(language=args.lang, skin=args.skin, debug=args.debug)

        if args.what == "script":
            sys.stdout.write(module.get_script(ctx))
        elif args.what == "loader":
            loader = module.get_loader_script()
            if loader is None:
                print("(no loader script)", file=sys.stderr)
                return 1
            sys.stdout.write(loader)
        elif args.what == "styles":
            for media, css in module.get_styles(ctx).items():
                print(f"/* media: {media} */")
                print(css)
        elif args.what == "mtime":
            print(module.get_modified_time(ctx))
        else:
            print(json.dumps({
                "name": module.name,
                "group": module.get_group(),
                "dependencies": module.get_dependencies(),
                "messages": module.get_messages(),
            }, indent=2))
        return 0
    except (ResourceLoaderError, KeyError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
