import logging
from pathlib import Path

import typer

from linestage.diff.errors import DiffError, EmptySelectionError
from linestage.diff.models import Diff
from linestage.diff.selection import DiffSelection
from linestage.diff.synthesizer import synthesize_patch
from linestage.git.operations import apply_patch_to_index, create_commit, get_diff, get_status
from linestage.git.process import GitCommandError
from linestage.git.status import WorkingDirectoryFileChange
from linestage.logging import setup_logging

app = typer.Typer(no_args_is_help=True)

REPO_OPTION = typer.Option(Path("."), "--repo", help="Path to the git working tree")


def parse_line_spec(spec: str) -> list[int]:
    """Turn "0,2,5-7" into [0, 2, 5, 6, 7]."""
    indices: list[int] = []
    for part in (p.strip() for p in spec.split(",")):
        if not part:
            continue
        try:
            if "-" in part:
                start, end = (int(v) for v in part.split("-", 1))
                if end < start:
                    raise ValueError(part)
                indices.extend(range(start, end + 1))
            else:
                indices.append(int(part))
        except ValueError:
            raise typer.BadParameter(f"Invalid line index or range: {part!r}")
    return indices


def _find_file(repo: Path, path: str) -> WorkingDirectoryFileChange:
    for file in get_status(repo):
        if file.path == path:
            return file
    raise typer.BadParameter(f"{path} has no changes in {repo}")


def _render_diff(diff: Diff) -> list[str]:
    out: list[str] = []
    index = 0
    for hunk in diff.hunks:
        out.append(hunk.header.render())
        for line in hunk.lines:
            label = "    "
            if line.is_change:
                label = f"{index:>4}"
                index += 1
            out.append(f"{label} {line.render()}")
    return out


@app.command("status")
def status_cmd(repo: Path = REPO_OPTION):
    """List changed files and their change kind."""
    try:
        files = get_status(repo)
    except GitCommandError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)

    for file in files:
        typer.echo(f"{file.status.value:<10} {file.path}")


@app.command("diff")
def diff_cmd(
    path: str,
    repo: Path = REPO_OPTION,
    json_output: bool = typer.Option(False, "--json", help="Print the parsed diff as JSON"),
):
    """Show the changed lines of a file with their selection indices."""
    try:
        file = _find_file(repo, path)
        diff = get_diff(repo, file)
    except (DiffError, GitCommandError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)

    if json_output:
        typer.echo(diff.model_dump_json(indent=2))
        return
    if diff.is_binary:
        typer.echo(f"Binary file {path} can only be staged as a whole")
        return
    for line in _render_diff(diff):
        typer.echo(line)


@app.command("stage")
def stage_cmd(
    path: str,
    lines: str = typer.Option(..., "--lines", help="Changed line indices, e.g. 0,2,5-7"),
    repo: Path = REPO_OPTION,
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the patch instead of applying it"),
):
    """Stage only the chosen changed lines of a file."""
    selection = DiffSelection.from_indices(parse_line_spec(lines))
    try:
        file = _find_file(repo, path)
        diff = get_diff(repo, file)
        patch = synthesize_patch(path, diff, selection, file.status, allow_empty=False)
    except EmptySelectionError:
        typer.echo(f"Nothing to stage in {path}")
        return
    except (DiffError, GitCommandError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)

    if dry_run:
        typer.echo(patch, nl=False)
        return

    try:
        apply_patch_to_index(repo, patch)
    except GitCommandError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    staged = sum(selection.resolve(diff).values())
    typer.echo(f"Staged {staged} line(s) of {path}")


@app.command("commit")
def commit_cmd(
    summary: str,
    description: str = typer.Option("", "--description", "-m", help="Commit body"),
    repo: Path = REPO_OPTION,
):
    """Commit every changed file in full."""
    try:
        files = get_status(repo)
        create_commit(repo, summary, description, files)
    except GitCommandError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Committed {len(files)} file(s)")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output")):
    """
    linestage CLI
    """
    setup_logging(level=logging.DEBUG if verbose else None)
