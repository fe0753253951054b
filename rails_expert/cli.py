"""
Rails Expert marketplace CLI.

Usage:
    rails-expert check                        # Run every content check
    rails-expert check --only versions bang   # Run selected checks
    rails-expert check --json                 # Machine-readable report
    rails-expert list                         # Plugins, agents, commands, skills
    rails-expert version show                 # Versions in both manifests
    rails-expert version bump patch           # Bump and write both manifests
    rails-expert version bump 1.0.0           # Set an explicit version
    rails-expert hooks match --tool Edit --file db/migrate/1_add.rb
    rails-expert settings show --project ~/app
    rails-expert settings check --project ~/app
    rails-expert serve                        # Catalog server

Exit codes: 0 on success, 1 when checks report findings, 2 on usage errors
or an unreadable repository.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from rails_expert import __version__
from rails_expert.config import Settings, get_settings, reload_settings
from rails_expert.core.checks import CHECKS, run_checks
from rails_expert.core.hooks import match_hooks
from rails_expert.core.marketplace import (
    discover_plugins,
    find_plugin,
    load_marketplace,
    load_plugin_manifest,
    resolve_plugin_path,
)
from rails_expert.core.user_settings import (
    check_user_settings,
    load_user_settings,
    settings_file,
)
from rails_expert.core.versioning import BUMP_PARTS, bump_version, next_version
from rails_expert.lib.logger import setup_logging
from rails_expert.lib.typed_errors import ManifestError, describe
from rails_expert.models.hooks import HookEvent

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_USAGE = 2


# --- Helpers ---


def _settings_for(args: argparse.Namespace) -> Settings:
    if getattr(args, "repo", None):
        return reload_settings(repo_path=Path(args.repo).expanduser().resolve())
    return get_settings()


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, default=str))


# --- Commands ---


def cmd_check(args: argparse.Namespace) -> int:
    settings = _settings_for(args)
    skip = list(args.skip or [])
    if not args.only:
        skip += [name for name in settings.skip_checks if name not in skip]

    if not settings.repo_path.is_dir():
        print(f"Error: Repository not found: {settings.repo_path}", file=sys.stderr)
        return EXIT_USAGE
    try:
        load_marketplace(settings.repo_path)
    except ManifestError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    try:
        report = run_checks(
            settings.repo_path,
            only=args.only,
            skip=skip,
            link_ignore=settings.link_ignore,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    if args.json:
        _print_json(report.to_dict())
        return EXIT_OK if report.ok else EXIT_FINDINGS

    print(f"Checking {settings.repo_path}")
    print("=" * 40)
    for result in report.results:
        print(f"\n{result.name}: {'PASS' if result.passed else 'FAIL'}")
        for item in result.findings:
            print(f"  {item.location()}: {item.message}")

    if report.ok:
        print(f"\nAll {len(report.results)} checks passed.")
        return EXIT_OK

    codes = sorted({f.code for f in report.findings})
    print(f"\n{len(report.findings)} finding(s):")
    for code in codes:
        info = describe(code)
        print(f"  {info.title}: {info.remedy}")
    return EXIT_FINDINGS


def cmd_list(args: argparse.Namespace) -> int:
    settings = _settings_for(args)
    try:
        plugins = discover_plugins(settings.repo_path)
    except ManifestError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    if args.json:
        _print_json({"plugins": [p.summary() for p in plugins]})
        return EXIT_OK

    if not plugins:
        print("No plugins found.")
        return EXIT_OK

    for plugin in plugins:
        print(f"{plugin.name} {plugin.version}")
        if plugin.description:
            print(f"  {plugin.description}")
        print(f"  agents ({len(plugin.agents)}):")
        for agent in plugin.agents:
            model = f" [{agent.model}]" if agent.model else ""
            print(f"    {agent.name}{model}")
        print(f"  commands ({len(plugin.commands)}):")
        for command in plugin.commands:
            hint = f" {command.argument_hint}" if command.argument_hint else ""
            print(f"    {command.invocation}{hint}")
        print(f"  skills ({len(plugin.skills)}):")
        for skill in plugin.skills:
            extra = f" ({len(skill.examples)} examples)" if skill.examples else ""
            print(f"    {skill.name}{extra}")
        events = sorted(plugin.hooks.hooks)
        print(f"  hooks: {', '.join(events) if events else 'none'}")
    return EXIT_OK


def _version_show(settings: Settings) -> int:
    marketplace = load_marketplace(settings.repo_path)
    if marketplace.metadata.version:
        print(f"marketplace metadata: {marketplace.metadata.version}")
    status = EXIT_OK
    for entry in marketplace.plugins:
        try:
            manifest = load_plugin_manifest(resolve_plugin_path(settings.repo_path, entry))
            plugin_version = manifest.version if "version" in manifest.model_fields_set else "missing"
        except ManifestError as e:
            logger.warning(f"{e}")
            plugin_version = "unreadable"
        marker = "" if plugin_version == entry.version else "  MISMATCH"
        if marker:
            status = EXIT_FINDINGS
        print(f"{entry.name}: plugin.json {plugin_version}, marketplace {entry.version}{marker}")
    return status


def _version_bump(settings: Settings, target: str, plugin: Optional[str]) -> int:
    new_version = target
    if target in BUMP_PARTS:
        marketplace = load_marketplace(settings.repo_path)
        entries = [e for e in marketplace.plugins if plugin is None or e.name == plugin]
        if len(entries) != 1:
            print("Error: name the plugin to bump with --plugin", file=sys.stderr)
            return EXIT_USAGE
        current = load_plugin_manifest(resolve_plugin_path(settings.repo_path, entries[0])).version
        new_version = next_version(current, target)

    written = bump_version(settings.repo_path, new_version, plugin=plugin)
    print(f"Version set to {new_version}")
    for path in written:
        print(f"  wrote {path}")
    return EXIT_OK


def cmd_version(args: argparse.Namespace) -> int:
    settings = _settings_for(args)
    try:
        if args.action == "bump":
            return _version_bump(settings, args.target, args.plugin)
        return _version_show(settings)
    except (ManifestError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE


def cmd_hooks(args: argparse.Namespace) -> int:
    settings = _settings_for(args)
    try:
        if args.plugin:
            plugin = find_plugin(settings.repo_path, args.plugin)
            plugins = [plugin] if plugin else []
        else:
            plugins = discover_plugins(settings.repo_path)
    except ManifestError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    if not plugins:
        print("No plugins found.", file=sys.stderr)
        return EXIT_USAGE

    tool_input = {}
    if args.file:
        tool_input["file_path"] = args.file
    if args.bash_command:
        tool_input["command"] = args.bash_command

    project_root = Path(args.project).expanduser().resolve()
    fired = 0
    for plugin in plugins:
        for entry in match_hooks(plugin.hooks, args.event, args.tool, tool_input, project_root):
            fired += 1
            print(f"{plugin.name}: {args.event} matcher={entry.matcher or '*'}")
            for handler in entry.hooks:
                detail = handler.command if handler.type == "command" else handler.prompt
                lines = (detail or "").strip().splitlines()
                first_line = lines[0] if lines else ""
                print(f"  {handler.type}: {first_line}")
    if not fired:
        print("No hooks would fire.")
    return EXIT_OK


def cmd_settings(args: argparse.Namespace) -> int:
    project = Path(args.project).expanduser().resolve()
    if args.action == "check":
        findings = check_user_settings(project)
        if not findings:
            print(f"{settings_file(project)}: ok")
            return EXIT_OK
        for item in findings:
            print(f"  {item.location()}: {item.message}")
        return EXIT_FINDINGS

    user_settings = load_user_settings(project)
    if args.json:
        _print_json(user_settings.model_dump())
        return EXIT_OK

    path = settings_file(project)
    print(f"Settings for {project}")
    print(f"  file: {path if path.exists() else 'none (defaults)'}")
    for key, value in user_settings.model_dump(exclude={"notes"}).items():
        if isinstance(value, list):
            value = ", ".join(value) if value else "(none)"
        print(f"  {key}: {value}")
    return EXIT_OK


def cmd_serve(args: argparse.Namespace) -> int:
    _settings_for(args)
    from rails_expert.server import main as serve_main

    serve_main(host=args.host, port=args.port)
    return EXIT_OK


# --- CLI entry point ---


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rails-expert",
        description="Rails Expert marketplace tooling",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--repo", help="Marketplace repository root (default: REPO_PATH or cwd)")
    parser.add_argument("--log-level", help="Log level (default: from config)")
    subparsers = parser.add_subparsers(dest="command")

    # check
    check_parser = subparsers.add_parser("check", help="Run content checks")
    check_parser.add_argument(
        "--only", nargs="+", choices=list(CHECKS), metavar="NAME",
        help=f"Run only these checks ({', '.join(CHECKS)})",
    )
    check_parser.add_argument(
        "--skip", nargs="+", choices=list(CHECKS), metavar="NAME",
        help="Skip these checks",
    )
    check_parser.add_argument("--json", action="store_true", help="Print a JSON report")

    # list
    list_parser = subparsers.add_parser("list", help="List plugin contents")
    list_parser.add_argument("--json", action="store_true", help="Print JSON")

    # version subcommand
    version_parser = subparsers.add_parser("version", help="Show or bump plugin versions")
    version_sub = version_parser.add_subparsers(dest="action")
    version_sub.add_parser("show", help="Show versions in both manifests")
    bump_parser = version_sub.add_parser("bump", help="Write a new version to both manifests")
    bump_parser.add_argument("target", help="major | minor | patch | X.Y.Z")
    bump_parser.add_argument("--plugin", help="Plugin to bump (when several are listed)")

    # hooks subcommand
    hooks_parser = subparsers.add_parser("hooks", help="Hook tools")
    hooks_sub = hooks_parser.add_subparsers(dest="action")
    match_parser = hooks_sub.add_parser("match", help="Show which hooks a tool call would fire")
    match_parser.add_argument(
        "--event", default=HookEvent.PRE_TOOL_USE.value,
        choices=[e.value for e in HookEvent], help="Host event (default: PreToolUse)",
    )
    match_parser.add_argument("--tool", help="Tool name, e.g. Edit or Bash")
    match_parser.add_argument("--file", help="file_path of the tool call")
    match_parser.add_argument("--command", dest="bash_command", help="Bash command of the tool call")
    match_parser.add_argument("--plugin", help="Limit to one plugin")
    match_parser.add_argument(
        "--project", default=".",
        help="Rails project root that absolute --file paths are relative to (default: cwd)",
    )

    # settings subcommand
    settings_parser = subparsers.add_parser("settings", help="User settings tools")
    settings_sub = settings_parser.add_subparsers(dest="action")
    for action, help_text in (("show", "Show effective settings"), ("check", "Validate the settings file")):
        action_parser = settings_sub.add_parser(action, help=help_text)
        action_parser.add_argument("--project", default=".", help="Rails project root (default: cwd)")
        if action == "show":
            action_parser.add_argument("--json", action="store_true", help="Print JSON")

    # serve
    serve_parser = subparsers.add_parser("serve", help="Run the catalog server")
    serve_parser.add_argument("--host", help="Bind address (default: from config)")
    serve_parser.add_argument("--port", type=int, help="Port (default: from config)")

    return parser


def run(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level)

    if args.command == "check":
        return cmd_check(args)
    elif args.command == "list":
        return cmd_list(args)
    elif args.command == "version":
        return cmd_version(args)
    elif args.command == "hooks":
        if args.action == "match":
            return cmd_hooks(args)
    elif args.command == "settings":
        if args.action in ("show", "check"):
            return cmd_settings(args)
    elif args.command == "serve":
        return cmd_serve(args)

    parser.print_help()
    return EXIT_USAGE


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
