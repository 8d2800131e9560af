"""Click-based CLI for sidebarctl - Finder sidebar Shared File List editor."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, NoReturn, Optional

import click

from sidebarctl import __version__
from sidebarctl.config import (
    ConfigError,
    SidebarConfig,
    ensure_config_exists,
    get_config_path,
    load_config,
    validate_config_file,
)
from sidebarctl.errors import AccessError, SidebarError
from sidebarctl.operations import add_items, list_items, remove_all, replace_set
from sidebarctl.output import Console, create_console
from sidebarctl.reload import reload as reload_sidebar
from sidebarctl.sections import COMPOSITE_HELP, COMPOSITES, TOGGLES, SectionEditor
from sidebarctl.store import FormatSuffix, StoreKind, open_store, save_store, store_path

_TOGGLE_QUEUE = "sidebarsections.toggles"

# Stores whose sidebar state lives in properties rather than items
_PROPERTY_STORES = (StoreKind.FAVORITE_VOLUMES, StoreKind.NETWORK_BROWSER)


class UsageCommand(click.Command):
    """
    Command that prints its help to stdout on usage errors.

    Usage errors exit 1; an empty command line prints the help and exits
    with ``empty_exit_code``.
    """

    def __init__(self, *args: Any, empty_exit_code: int = 1, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.empty_exit_code = empty_exit_code

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        if not args:
            click.echo(ctx.get_help())
            ctx.exit(self.empty_exit_code)
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            _usage_exit(ctx, e.format_message())


def _usage_exit(ctx: click.Context, message: str) -> NoReturn:
    click.echo(f"Error: {message}", err=True)
    click.echo(ctx.get_help())
    ctx.exit(1)


@dataclass
class _Session:
    """Per-invocation settings resolved from options and configuration."""

    config: SidebarConfig
    console: Console
    directory: Optional[str]
    fmt: FormatSuffix


def _open_session(ctx: click.Context, config_path: Optional[Path], fmt: Optional[str], verbose: bool) -> _Session:
    try:
        config = load_config(config_path)
    except ConfigError as e:
        create_console().print_error(e.message)
        ctx.exit(1)

    console = create_console(verbose=verbose or config.output.verbose, colored=config.output.colored)
    return _Session(
        config=config,
        console=console,
        directory=config.shared_file_list_dir,
        fmt=FormatSuffix(fmt) if fmt else config.format,
    )


def _run_guarded(session: _Session, ctx: click.Context, action: Callable[[], int]) -> None:
    """Run an action, translating store errors into messages and exit 1."""
    try:
        code = action()
    except AccessError as e:
        session.console.print_remediation(e.message, e.path)
        ctx.exit(1)
    except SidebarError as e:
        session.console.print_error(e.message)
        ctx.exit(1)
    ctx.exit(code)


def _do_reload(session: _Session, force: bool) -> bool:
    result = reload_sidebar(force=force or session.config.reload.force)
    session.console.print_reload_result(result)
    return result.success


@click.command(cls=UsageCommand, empty_exit_code=1)
@click.option("--list", "list_", is_flag=True, help="List resolved item paths, one per line")
@click.option("--show-properties", is_flag=True, help="Also print store properties (implies --list)")
@click.option("--add", is_flag=True, help="Add PATHS to the store")
@click.option("--removeAll", "remove_all_", is_flag=True, help="Remove every item")
@click.option("--set", "set_", is_flag=True, help="Replace all items with PATHS, in order")
@click.option("--path", "show_path", is_flag=True, help="Print the store file path and exit")
@click.option("--apply", "apply_profile", is_flag=True, help="Apply the configured favorites and sections")
@click.option("--init-config", is_flag=True, help="Write the default configuration file")
@click.option("--validate-config", is_flag=True, help="Check the configuration file and report problems")
@click.option("--reload", "reload_", is_flag=True, help="Reload sharedfilelistd so Finder picks up changes")
@click.option("--force", is_flag=True, help="With --reload, also restart Finder")
@click.option(
    "--store",
    "store_kind",
    type=click.Choice([kind.value for kind in StoreKind]),
    default=StoreKind.FAVORITES.value,
    show_default=True,
    help="Store to operate on",
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice([suffix.value for suffix in FormatSuffix]),
    default=None,
    help="Store file format marker (default: from config, auto)",
)
@click.option("--config", "config_path", type=click.Path(path_type=Path), default=None, help="Configuration file")
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
@click.argument("paths", nargs=-1)
@click.version_option(version=__version__, prog_name="sidebarctl")
@click.pass_context
def sidebarctl(
    ctx: click.Context,
    list_: bool,
    show_properties: bool,
    add: bool,
    remove_all_: bool,
    set_: bool,
    show_path: bool,
    apply_profile: bool,
    init_config: bool,
    validate_config: bool,
    reload_: bool,
    force: bool,
    store_kind: str,
    fmt: Optional[str],
    config_path: Optional[Path],
    verbose: bool,
    paths: tuple[str, ...],
) -> None:
    """Manage Finder sidebar Favorites by editing the shared file list.

    \b
    Examples:
      sidebarctl --list
      sidebarctl --add ~/Projects
      sidebarctl --set ~ /Applications ~/Downloads --reload
    """
    list_ = list_ or show_properties
    chosen = [
        name
        for name, selected in (
            ("--list", list_),
            ("--add", add),
            ("--removeAll", remove_all_),
            ("--set", set_),
            ("--path", show_path),
            ("--apply", apply_profile),
            ("--init-config", init_config),
            ("--validate-config", validate_config),
        )
        if selected
    ]
    if len(chosen) > 1:
        _usage_exit(ctx, f"Options {', '.join(chosen)} cannot be combined")
    action = chosen[0] if chosen else None

    if action is None and not reload_:
        _usage_exit(ctx, "No action given")
    if action in ("--add", "--set") and not paths:
        _usage_exit(ctx, f"{action} requires at least one PATH")
    if paths and action not in ("--add", "--set"):
        _usage_exit(ctx, f"Unexpected arguments: {' '.join(paths)}")

    if init_config:
        console = create_console()
        path, created = ensure_config_exists(config_path)
        if created:
            console.print_success(f"Created configuration at {path}")
        else:
            console.print_info(f"Configuration already exists at {path}")
        ctx.exit(0)

    if validate_config:
        ctx.exit(_validate_config(config_path))

    session = _open_session(ctx, config_path, fmt, verbose)
    kind = StoreKind(store_kind)

    if show_path:
        click.echo(str(store_path(kind, session.directory, session.fmt)))
        ctx.exit(0)

    def run() -> int:
        code = 0
        changed = False

        if action == "--list":
            _list_store(session, kind, show_properties)
        elif action == "--add":
            code, changed = _add_paths(session, kind, paths)
        elif action == "--removeAll":
            store = open_store(kind, directory=session.directory, fmt=session.fmt)
            removed = remove_all(store)
            save_store(store)
            session.console.print_success(f"Removed {removed} item(s) from {kind.file_stem}")
            changed = True
        elif action == "--set":
            code, changed = _set_paths(session, kind, paths)
        elif action == "--apply":
            code, changed = _apply_profile(session)
            if changed and session.config.reload.after_apply and not reload_:
                if not _do_reload(session, force):
                    code = 1
                changed = False

        if reload_:
            if not _do_reload(session, force):
                code = 1
        elif changed:
            session.console.print_reload_reminder()

        return code

    _run_guarded(session, ctx, run)


def _list_store(session: _Session, kind: StoreKind, show_properties: bool) -> None:
    store = open_store(kind, directory=session.directory, fmt=session.fmt)
    listing = list_items(store)
    for error in listing.errors:
        session.console.print_warning(error)

    if session.console.verbose:
        session.console.print_listing_details(listing)
    else:
        for path in listing.paths:
            click.echo(path)

    if show_properties or kind in _PROPERTY_STORES:
        session.console.print_properties(store.properties)


def _validate_config(config_path: Optional[Path]) -> int:
    console = create_console()
    path = config_path or get_config_path()
    valid, errors = validate_config_file(path)
    if valid:
        console.print_success(f"Configuration at {path} is valid")
        return 0
    for error in errors:
        console.print_error(error)
    return 1


def _add_paths(session: _Session, kind: StoreKind, paths: tuple[str, ...]) -> tuple[int, bool]:
    store = open_store(kind, directory=session.directory, fmt=session.fmt)
    result = add_items(store, paths)
    session.console.print_batch_result(result)
    if not result.any_succeeded:
        return 1, False
    save_store(store)
    return 0, True


def _set_paths(session: _Session, kind: StoreKind, paths: tuple[str, ...] | list[str]) -> tuple[int, bool]:
    store = open_store(kind, directory=session.directory, fmt=session.fmt)
    result = replace_set(store, paths)
    save_store(store)
    session.console.print_batch_result(result)
    return (0 if result.all_succeeded else 1), True


def _apply_profile(session: _Session) -> tuple[int, bool]:
    """Write the configured favorites, then the configured section toggles."""
    code, changed = _set_paths(session, StoreKind.FAVORITES, session.config.favorites.resolved_paths())

    editor = SectionEditor(session.directory, session.fmt)
    for name in session.config.sections:
        for message in editor.apply(name):
            session.console.print_success(message)
        editor.save()
        changed = True

    return code, changed


def _queue_toggle(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    # Click processes parameters in command-line order
    if value:
        ctx.meta.setdefault(_TOGGLE_QUEUE, []).append(param.opts[0][2:])


def _toggle_options(func: Callable) -> Callable:
    entries = [(toggle.name, toggle.help) for toggle in TOGGLES.values()]
    entries += [(name, COMPOSITE_HELP[name]) for name in COMPOSITES]
    for name, help_text in reversed(entries):
        func = click.option(
            f"--{name}", is_flag=True, expose_value=False, callback=_queue_toggle, help=help_text
        )(func)
    return func


@click.command(cls=UsageCommand, empty_exit_code=0)
@_toggle_options
@click.option("--reload", "reload_", is_flag=True, help="Reload sharedfilelistd after applying changes")
@click.option("--force", is_flag=True, help="With --reload, also restart Finder")
@click.option(
    "--format",
    "fmt",
    type=click.Choice([suffix.value for suffix in FormatSuffix]),
    default=None,
    help="Store file format marker (default: from config, auto)",
)
@click.option("--config", "config_path", type=click.Path(path_type=Path), default=None, help="Configuration file")
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
@click.version_option(version=__version__, prog_name="sidebarsections")
@click.pass_context
def sidebarsections(
    ctx: click.Context,
    reload_: bool,
    force: bool,
    fmt: Optional[str],
    config_path: Optional[Path],
    verbose: bool,
) -> None:
    """Control Finder sidebar sections (Recents, Shared, Bonjour, Locations).

    Toggles are applied in the order given on the command line.
    """
    toggles: list[str] = ctx.meta.get(_TOGGLE_QUEUE, [])
    if not toggles and not reload_:
        click.echo(ctx.get_help())
        ctx.exit(0)

    session = _open_session(ctx, config_path, fmt, verbose)

    def run() -> int:
        editor = SectionEditor(session.directory, session.fmt)
        for name in toggles:
            for message in editor.apply(name):
                session.console.print_success(message)
            editor.save()

        if reload_:
            return 0 if _do_reload(session, force) else 1
        if toggles:
            session.console.print_reload_reminder()
        return 0

    _run_guarded(session, ctx, run)


def main() -> None:
    """Entry point for running as module."""
    sidebarctl()


if __name__ == "__main__":
    main()
