"""Main entry point for the skillkit command line."""

import argparse
import asyncio
import importlib.metadata
import sys
from typing import Awaitable, Callable, Optional

from config import Config, ensure_config
from skillkit import (
    DeployOptions,
    DeployTarget,
    ImportOptions,
    LinkKind,
    LinkOptions,
    LinkRegistry,
    LinkSynchronizer,
    SkillkitError,
    SkillPaths,
    batch_deploy,
    deploy_skill,
    discover_skills,
    import_from_github,
    list_deployed_skills,
    remove_skill,
    validate_directory,
)
from skillkit.types import LinkResult, OutcomeStatus, SyncResult
from skillkit.validator import format_errors
from utils import get_log_file_path, get_logger, setup_logger, terminal_ui
from utils.runtime import ensure_runtime_dirs

logger = get_logger(__name__)

Handler = Callable[[argparse.Namespace, SkillPaths], Awaitable[int]]


def _resolve_targets(args: argparse.Namespace, all_targets: list[DeployTarget]) -> list[DeployTarget]:
    """Turn --target/--all into a target list.

    Raises:
        ValueError: Neither flag was given, or the target is unknown
    """
    if getattr(args, "all", False):
        return list(all_targets)
    if args.target:
        return [DeployTarget.parse(args.target)]
    raise ValueError("Must specify --target or --all")


def _deploy_options(args: argparse.Namespace, paths: SkillPaths) -> DeployOptions:
    return DeployOptions(
        targets=_resolve_targets(args, list(DeployTarget)),
        force=args.force,
        dry_run=args.dry_run,
        project_path=paths.expand(args.project_path) if args.project_path else None,
    )


async def cmd_validate(args: argparse.Namespace, paths: SkillPaths) -> int:
    skill_dir = paths.expand(args.dir)
    terminal_ui.print_info(f"Validating skill: {skill_dir}")
    result = await validate_directory(skill_dir)
    if result.valid:
        terminal_ui.print_success("Validation passed!")
        return 0
    terminal_ui.print_error(format_errors(result.errors), title="Validation failed")
    return 1


async def cmd_deploy(args: argparse.Namespace, paths: SkillPaths) -> int:
    options = _deploy_options(args, paths)
    skill_dir = paths.expand(args.dir)

    validation = await validate_directory(skill_dir)
    if not validation.valid:
        terminal_ui.print_error(format_errors(validation.errors), title="Validation failed")
        return 1
    terminal_ui.print_success("Validation passed")

    if options.dry_run:
        terminal_ui.print_warning("Dry run mode - no files will be written")
    terminal_ui.print_info(f"Deploying to: {', '.join(t.value for t in options.targets)}")

    outcomes = await deploy_skill(skill_dir, options, paths)
    failed = 0
    for outcome in outcomes:
        if outcome.success:
            terminal_ui.print_success(f"{outcome.target.value}: {outcome.path}")
        else:
            terminal_ui.print_failure(f"{outcome.target.value}: {outcome.error}")
            failed += 1
    terminal_ui.print_summary(len(outcomes) - failed, failed)
    return 1 if failed else 0


async def cmd_batch_deploy(args: argparse.Namespace, paths: SkillPaths) -> int:
    options = _deploy_options(args, paths)
    parent_dir = paths.expand(args.dir)
    terminal_ui.print_info(f"Discovering skills in: {parent_dir}")

    try:
        skill_dirs = await discover_skills(parent_dir)
    except SkillkitError as e:
        terminal_ui.print_error(str(e))
        return 1
    if not skill_dirs:
        terminal_ui.print_error(f"No skills found in {parent_dir}")
        return 1

    terminal_ui.console.print(f"Found {len(skill_dirs)} skill(s):")
    for skill_dir in skill_dirs:
        terminal_ui.console.print(f"  - {skill_dir.name}")
    if options.dry_run:
        terminal_ui.print_warning("Dry run mode - no files will be written")
    terminal_ui.print_info(f"Deploying to: {', '.join(t.value for t in options.targets)}")
    terminal_ui.print_divider()

    try:
        results = await batch_deploy(parent_dir, options, paths)
    except SkillkitError as e:
        terminal_ui.print_error(str(e))
        return 1

    succeeded = failed = 0
    for result in results:
        terminal_ui.console.print(f"\n[bold]\\[{result.skill_name}][/bold]")
        if result.validation_error:
            terminal_ui.print_failure(f"Validation error: {result.validation_error}", indent=2)
        for outcome in result.outcomes:
            if outcome.success:
                terminal_ui.print_success(f"{outcome.target.value}: {outcome.path}", indent=2)
            else:
                terminal_ui.print_failure(f"{outcome.target.value}: {outcome.error}", indent=2)
        if result.success:
            succeeded += 1
        else:
            failed += 1

    terminal_ui.print_divider()
    terminal_ui.print_summary(succeeded, failed)
    return 1 if failed else 0


async def cmd_list(args: argparse.Namespace, paths: SkillPaths) -> int:
    listable = [t for t in DeployTarget if not t.single_file]
    if args.target:
        targets = [DeployTarget.parse(args.target)]
    else:
        targets = listable
    project_path = paths.expand(args.project_path) if args.project_path else None

    status = 0
    for target in targets:
        try:
            names = await list_deployed_skills(target, paths, project_path)
        except SkillkitError as e:
            terminal_ui.print_error(str(e))
            status = 1
            continue
        terminal_ui.console.print(f"\n[bold]{target.value.upper()}[/bold]")
        if not names:
            terminal_ui.console.print("  (none)")
        for name in names:
            terminal_ui.console.print(f"  - {name}")
    return status


async def cmd_remove(args: argparse.Namespace, paths: SkillPaths) -> int:
    target = DeployTarget.parse(args.target)
    project_path = paths.expand(args.project_path) if args.project_path else None
    terminal_ui.print_info(f'Removing skill "{args.name}" from {target.value}...')
    result = await remove_skill(args.name, target, paths, project_path)
    if result.success:
        terminal_ui.print_success(f"Skill removed: {result.path}")
        return 0
    terminal_ui.print_failure(f"Failed to remove skill: {result.error}")
    return 1


async def cmd_import(args: argparse.Namespace, paths: SkillPaths) -> int:
    options = ImportOptions(
        branch=args.branch,
        skills_path=args.skills_path,
        target_dir=args.target_dir,
        force=args.force,
        dry_run=args.dry_run,
    )
    try:
        summary = await import_from_github(args.url, options, paths)
    except SkillkitError as e:
        terminal_ui.print_error(str(e), title="Import failed")
        return 1

    terminal_ui.print_info(f"Repository: {summary.repo_url} ({summary.branch})")
    terminal_ui.console.print(f"Found {summary.total_found} skill(s)")
    for result in summary.results:
        if result.status is OutcomeStatus.SUCCEEDED:
            verb = "Would be imported (dry run)" if options.dry_run else "Imported"
            terminal_ui.print_success(f"{result.skill_name}: {verb}", indent=2)
        elif result.status is OutcomeStatus.SKIPPED:
            terminal_ui.print_skipped(f"{result.skill_name}: {result.error}", indent=2)
        else:
            reason = "; ".join(result.validation_errors) or result.error or "failed"
            terminal_ui.print_failure(f"{result.skill_name}: {reason}", indent=2)
    terminal_ui.print_summary(summary.imported, summary.failed, summary.skipped)
    return 1 if summary.failed else 0


def _link_options(args: argparse.Namespace) -> LinkOptions:
    return LinkOptions(
        target=DeployTarget.parse(args.target),
        user_level=not args.project,
        force=getattr(args, "force", False),
    )


def _report_link_result(result: LinkResult, verb: str) -> int:
    if result.success and result.link is not None:
        terminal_ui.print_success(f'{verb} link "{result.link.name}"')
        return 0
    terminal_ui.print_failure(result.error or "Link operation failed")
    return 1


def _report_sync_result(result: SyncResult) -> None:
    name = result.link.name if result.link else "?"
    if result.status is OutcomeStatus.SUCCEEDED:
        paths = ", ".join(str(o.path) for o in result.deploy_results)
        terminal_ui.print_success(f"{name}: {paths}")
    elif result.status is OutcomeStatus.SKIPPED:
        terminal_ui.print_skipped(f"{name}: {result.error}")
    else:
        terminal_ui.print_failure(f"{name}: {result.error}")


async def cmd_link(args: argparse.Namespace, paths: SkillPaths) -> int:
    options = _link_options(args)
    registry = LinkRegistry(paths)
    scope = "user" if options.user_level else "project"

    if args.link_command == "add":
        kind = LinkKind(args.type) if args.type else None
        result = await registry.add(
            args.name,
            args.source,
            options,
            kind=kind,
            path=args.path,
            branch=args.branch,
            description=args.description,
        )
        return _report_link_result(result, "Added")

    if args.link_command == "remove":
        return _report_link_result(await registry.remove(args.name, options), "Removed")

    if args.link_command in ("enable", "disable"):
        enabled = args.link_command == "enable"
        result = await registry.toggle(args.name, enabled, options)
        return _report_link_result(result, "Enabled" if enabled else "Disabled")

    if args.link_command == "list":
        try:
            links = await registry.list_links(options)
        except SkillkitError as e:
            terminal_ui.print_error(str(e), title="Registry error")
            return 1
        if not links:
            terminal_ui.console.print(f"No links for {options.target.value} ({scope})")
            return 0
        terminal_ui.print_links_table(
            f"{options.target.value} links ({scope})",
            [
                (link.name, link.kind.value, link.source, link.enabled, link.description or "")
                for link in links
            ],
        )
        return 0

    synchronizer = LinkSynchronizer(registry)
    if args.link_command == "sync":
        result = await synchronizer.sync(args.name, options)
        _report_sync_result(result)
        return 0 if result.success else 1

    try:
        results = await synchronizer.sync_all(options)
    except SkillkitError as e:
        terminal_ui.print_error(str(e), title="Registry error")
        return 1
    if not results:
        terminal_ui.console.print("No enabled links to sync")
        return 0
    for result in results:
        _report_sync_result(result)
    succeeded = sum(1 for r in results if r.status is OutcomeStatus.SUCCEEDED)
    skipped = sum(1 for r in results if r.status is OutcomeStatus.SKIPPED)
    failed = len(results) - succeeded - skipped
    terminal_ui.print_summary(succeeded, failed, skipped)
    return 0 if succeeded == len(results) else 1


def _add_deploy_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("dir", help="Skill directory")
    parser.add_argument("--target", "-t", help="Target platform: claude, codex, cursor")
    parser.add_argument("--all", action="store_true", help="Deploy to all platforms")
    parser.add_argument("--force", action="store_true", help="Overwrite existing skills")
    parser.add_argument(
        "--dry-run", action="store_true", help="Simulate deployment without writing files"
    )
    parser.add_argument("--project-path", help="Deploy into this project folder")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skillkit", description="Cross-platform skill deployment for AI editors"
    )

    try:
        version = importlib.metadata.version("skillkit")
    except importlib.metadata.PackageNotFoundError:
        version = "dev"
    parser.add_argument("--version", "-V", action="version", version=f"skillkit {version}")
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging to ~/.skillkit/logs/"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    validate = commands.add_parser("validate", help="Validate SKILL.md format")
    validate.add_argument("dir", help="Skill directory")
    validate.set_defaults(handler=cmd_validate)

    deploy = commands.add_parser("deploy", help="Deploy a skill to target platforms")
    _add_deploy_flags(deploy)
    deploy.set_defaults(handler=cmd_deploy)

    batch = commands.add_parser("batch-deploy", help="Deploy all skills in a directory")
    _add_deploy_flags(batch)
    batch.set_defaults(handler=cmd_batch_deploy)

    list_cmd = commands.add_parser("list", help="List deployed skills")
    list_cmd.add_argument("--target", "-t", help="List skills from one target")
    list_cmd.add_argument("--all", action="store_true", help="List skills from all targets")
    list_cmd.add_argument("--project-path", help="List skills deployed into this project")
    list_cmd.set_defaults(handler=cmd_list)

    remove = commands.add_parser("remove", help="Remove a deployed skill")
    remove.add_argument("name", help="Skill name")
    remove.add_argument("--target", "-t", required=True, help="Target platform")
    remove.add_argument("--project-path", help="Remove from this project folder")
    remove.set_defaults(handler=cmd_remove)

    import_cmd = commands.add_parser("import", help="Import skills from a GitHub repository")
    import_cmd.add_argument("url", help="GitHub URL or owner/repo")
    import_cmd.add_argument("--branch", help=f"Branch to clone (default: {Config.DEFAULT_BRANCH})")
    import_cmd.add_argument(
        "--skills-path", help=f"Skills directory in the repo (default: {Config.IMPORT_SKILLS_PATH})"
    )
    import_cmd.add_argument(
        "--target-dir", help=f"Where to copy skills (default: {Config.IMPORT_TARGET_DIR})"
    )
    import_cmd.add_argument("--force", action="store_true", help="Overwrite existing skills")
    import_cmd.add_argument("--dry-run", action="store_true", help="Preview without copying")
    import_cmd.set_defaults(handler=cmd_import)

    link = commands.add_parser("link", help="Manage links to external skills")
    link_commands = link.add_subparsers(dest="link_command", required=True)

    def _link_parser(name: str, help_text: str, with_name: bool = True) -> argparse.ArgumentParser:
        sub = link_commands.add_parser(name, help=help_text)
        if with_name:
            sub.add_argument("name", help="Link name")
        sub.add_argument("--target", "-t", default="claude", help="Target platform")
        sub.add_argument(
            "--project", action="store_true", help="Use the project-level registry"
        )
        sub.set_defaults(handler=cmd_link)
        return sub

    add = _link_parser("add", "Add a link")
    add.add_argument("source", help="Local path, git URL or web URL")
    add.add_argument("--type", choices=[k.value for k in LinkKind], help="Override type detection")
    add.add_argument("--path", help="Skill location inside the source")
    add.add_argument("--branch", help="Git branch")
    add.add_argument("--description", help="Link description")
    add.add_argument("--force", action="store_true", help="Overwrite an existing link")

    _link_parser("list", "List links", with_name=False)
    _link_parser("remove", "Remove a link")
    _link_parser("enable", "Enable a link")
    _link_parser("disable", "Disable a link")
    sync = _link_parser("sync", "Sync one link")
    sync.add_argument("--force", action="store_true", help="Overwrite the deployed skill")
    sync_all = _link_parser("sync-all", "Sync all enabled links", with_name=False)
    sync_all.add_argument("--force", action="store_true", help="Overwrite deployed skills")

    return parser


def run(argv: Optional[list[str]] = None, paths: Optional[SkillPaths] = None) -> int:
    """Parse arguments, run one command and return its exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        ensure_runtime_dirs(create_logs=True)
        command = " ".join(filter(None, [args.command, getattr(args, "link_command", None)]))
        setup_logger(command)

    try:
        Config.validate()
    except ValueError as e:
        terminal_ui.print_error(str(e), title="Configuration Error")
        return 1

    paths = paths or SkillPaths.from_environment()
    handler: Handler = args.handler
    try:
        status = asyncio.run(handler(args, paths))
    except ValueError as e:
        terminal_ui.print_error(str(e))
        status = 1

    logger.debug(f"Command {args.command} finished with status {status}")
    log_file = get_log_file_path()
    if log_file:
        terminal_ui.print_log_location(str(log_file))
    return status


def main():
    """Main CLI entry point."""
    ensure_config()
    sys.exit(run())


if __name__ == "__main__":
    main()
