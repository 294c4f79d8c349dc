from __future__ import annotations

from collections.abc import Callable, Sequence
from functools import wraps
from typing import ParamSpec, TypeVar

import click
import typer  # type: ignore[import]

from devpods import __version__
from devpods.config import get_settings
from devpods.orchestrator import run_down, run_reset, run_status, run_up
from devpods.pods import ALL_PODS, Pod, UnknownPodError, resolve_pods
from devpods.system import RunContext, prepare_run
from devpods.utils.log_utils import console, err, escape, logger
from devpods.utils.podman import ImageUnavailableError, PodmanError, PodmanRuntime, rate_limit_help


app = typer.Typer(
    help="Instant local infrastructure via Podman pods.",
    add_completion=False,
    invoke_without_command=True,
    no_args_is_help=False,
)


_P = ParamSpec("_P")
_T = TypeVar("_T")

TARGET_HELP = "Pod alias (pg, mongo, redis, mail, seq, rmq, nats) or 'all'."


def usage_text() -> str:
    lines = [
        f"[bold cyan]🦭 DevPods[/] v{__version__} — Instant Local Infrastructure via Podman",
        "",
        "[bold]Usage:[/]",
        "  devpods \\[command] \\[pod|all]",
        "",
        "[bold]Commands:[/]",
        "  up     \\[pod|all]    Start pod(s)              (default: all)",
        "  down   \\[pod|all]    Stop and remove pod(s)",
        "  reset  \\[pod|all]    Stop + wipe data for pod(s)",
        "  status              Show state of all pods",
        "  help                This message",
        "",
        "[bold]Pod aliases:[/]",
    ]
    for pod in ALL_PODS:
        definition = pod.definition
        lines.append(f"  {definition.aliases[0]:<8} → {definition.name:<15} ({definition.title})")
    lines += [
        "",
        "[bold]Data root:[/] ~/.devpods/  (override with DEVPODS_DATA_ROOT)",
        "[bold]Credentials:[/] ~/.devpods/.env  (auto-created with defaults on first run)",
    ]
    return "\n".join(lines)


def _build_context() -> RunContext:
    settings = get_settings()
    return prepare_run(settings, PodmanRuntime(settings.podman_binary))


def _banner() -> None:
    console.rule(f"[bold cyan]🦭 DevPods v{__version__}[/]")


def _resolve(target: str) -> list[Pod]:
    try:
        return resolve_pods(target)
    except UnknownPodError as e:
        err(escape(str(e)))
        raise typer.Exit(code=1) from e


def _handle_errors(handler: Callable[_P, _T]) -> Callable[_P, _T]:
    """Turn fatal devpods errors into a diagnosis and a non-zero exit."""

    @wraps(handler)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _T:
        try:
            return handler(*args, **kwargs)
        except KeyboardInterrupt as e:
            logger.info("Interrupted by user")
            raise typer.Exit(code=130) from e
        except ImageUnavailableError as e:
            err(escape(str(e)))
            if e.rate_limited:
                console.print()
                for line in rate_limit_help(get_settings().mirror_registry):
                    console.print(f"  {line}")
            console.print()
            err("Aborting.")
            raise typer.Exit(code=1) from e
        except PodmanError as e:
            err(escape(str(e)))
            output = getattr(e, "output", "")
            if output:
                logger.debug(output)
            raise typer.Exit(code=1) from e

    return wrapper


@app.callback()
def _default(ctx: typer.Context) -> None:
    """Running ``devpods`` with no command brings every pod up."""
    if ctx.invoked_subcommand is None:
        up_command(target="all")


@app.command("up")
@_handle_errors
def up_command(
    target: str = typer.Argument("all", help=TARGET_HELP),
) -> None:
    """Start pod(s) (default: all)."""
    _banner()
    pods = _resolve(target)
    run_ctx = _build_context()
    run_up(run_ctx, pods)


@app.command("down")
@_handle_errors
def down_command(
    target: str = typer.Argument("all", help=TARGET_HELP),
) -> None:
    """Stop and remove pod(s)."""
    _banner()
    pods = _resolve(target)
    run_ctx = _build_context()
    run_down(run_ctx, pods)


@app.command("reset")
@_handle_errors
def reset_command(
    target: str = typer.Argument("all", help=TARGET_HELP),
    grace: float = typer.Option(
        3.0,
        "--grace",
        help="Seconds to wait before deleting data (Ctrl-C to abort).",
        show_default=True,
        min=0.0,
    ),
) -> None:
    """Stop pod(s) and wipe their data."""
    _banner()
    pods = _resolve(target)
    run_ctx = _build_context()
    run_reset(run_ctx, pods, grace=grace)


@app.command("status")
@_handle_errors
def status_command() -> None:
    """Show the state of all pods."""
    _banner()
    run_ctx = _build_context()
    run_status(run_ctx)


@app.command("help")
def help_command() -> None:
    """Show usage, commands and pod aliases."""
    console.print(usage_text())


def main(argv: Sequence[str] | None = None) -> int:
    try:
        result = app(args=list(argv) if argv is not None else None, standalone_mode=False)
        return int(result or 0)
    except click.exceptions.Abort:
        logger.info("Interrupted by user")
        return 130
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except SystemExit as exc:
        return int(exc.code or 0)


if __name__ == "__main__":  # pragma: no cover
    app()
