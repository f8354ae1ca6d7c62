#!/usr/bin/env python3

"""Derive the per-fork spec modules from the phase0 base modules."""

from dataclasses import dataclass
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from forkgen.config import GenSpecConfig, get_config
from forkgen.engine.pipeline import assemble
from forkgen.exceptions import GenSpecError, SourceReadError
from forkgen.render import render_output
from forkgen.utils.log import add_file_handler, logger

_console = Console(highlight=False)

_HELP_TEXT = """Regenerate every fork module derived from the phase0 base modules.

For each base module and fork, overridden and expired functions are dropped,
overrides from [bold green]<fork>/<module>_<fork>.rs[/bold green] are re-exported, and the
[bold]spec[/bold] import is pointed at the fork. Outputs are overwritten.
"""

app = typer.Typer(rich_markup_mode="rich", add_completion=False)


@dataclass(frozen=True)
class Target:
    source_module: str
    fork: str
    base_path: Path
    override_path: Path
    dest_path: Path


def iter_targets(root: Path, config: GenSpecConfig) -> list[Target]:
    """All (source module, fork) pairs, source-module major."""
    source_dir = root / config.base_fork
    targets = []
    for source_module in config.source_modules:
        for fork in config.forks:
            targets.append(
                Target(
                    source_module=source_module,
                    fork=fork,
                    base_path=(source_dir / source_module).with_suffix(config.extension),
                    override_path=(root / fork / f"{source_module}_{fork}").with_suffix(config.extension),
                    dest_path=(root / fork / source_module).with_suffix(config.extension),
                )
            )
    return targets


def read_override_source(path: Path) -> str | None:
    """Read an override module; a missing file means there are no overrides."""
    try:
        return path.read_text()
    except FileNotFoundError:
        logger.info(f"No override module at '{path}'")
        return None
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(path, str(e)) from e


def read_base_source(path: Path) -> str:
    try:
        return path.read_text()
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(path, str(e)) from e


def render_target(target: Target, config: GenSpecConfig) -> str:
    """Compute the full output text for one pair without touching the destination."""
    override_source = read_override_source(target.override_path)
    base_source = read_base_source(target.base_path)
    module = assemble(
        base_source,
        override_source,
        fork=target.fork,
        source_module=target.source_module,
        config=config,
        base_label=str(target.base_path),
        override_label=str(target.override_path),
    )
    return render_output(module, config)


def generate(root: Path, config: GenSpecConfig, *, check: bool = False) -> list[Path]:
    """Process every pair in order.

    Writes each output once it is fully computed and returns the written
    paths. With ``check`` nothing is written and the returned paths are the
    outputs whose content on disk differs from what would be generated.
    """
    changed = []
    for target in iter_targets(root, config):
        output = render_target(target, config)
        dest = target.dest_path
        if check:
            current = dest.read_text() if dest.exists() else None
            if current != output:
                changed.append(dest)
                _console.print(f"  [yellow]STALE[/yellow]  {escape(str(dest))}")
            else:
                _console.print(f"  [green]OK[/green]     {escape(str(dest))}")
            continue
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(output)
        changed.append(dest)
        logger.info(f"Derived {target.fork}/{target.source_module} from '{target.base_path}'")
        _console.print(f"  [green]WROTE[/green]  {escape(str(dest))}")
    return changed


# fmt: off
@app.command(help=_HELP_TEXT)
def main(
    root: Path = typer.Option(Path("src"), "--root", help="Source root holding phase0/ and one directory per fork"),
    check: bool = typer.Option(False, "--check", help="Only report outputs that are out of date; exit with 1 if any are"),
    log_file: Path | None = typer.Option(None, "--log-file", help="Also write the log to this file"),
) -> None:
    # fmt: on
    if log_file is not None:
        add_file_handler(log_file)
    config = get_config()
    try:
        changed = generate(root, config, check=check)
    except GenSpecError as e:
        logger.error(f"Generation aborted: {escape(str(e))}")
        _console.print(f"\n  [red bold]ABORTED[/red bold]  {escape(str(e))}")
        raise typer.Exit(code=1) from e

    if check:
        if changed:
            _console.print(f"\n  [red bold]{len(changed)} derived modules are out of date[/red bold]")
            raise typer.Exit(code=1)
        _console.print("\n  [green bold]All derived modules are up to date[/green bold]")
        return
    _console.print(f"\n  [bold]Derived {len(changed)} modules[/bold]")


if __name__ == "__main__":
    app()
