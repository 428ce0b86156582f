"""CLI interface for PyLiveSync."""

import logging
import signal
from pathlib import Path
from typing import Any, Optional

import click

from .config import build_deployer_url, config
from .deployer import DeployerClient
from .exceptions import DeployerError
from .output import OutputFormatter
from .sync import (
    LiveSyncConfig,
    SyncConfigError,
    Synchronizer,
    SyncScheduler,
    load_sync_config_from_json,
)
from .utils import strip_archive_suffix

logger = logging.getLogger(__name__)


def _load_config(path: str, out: OutputFormatter, ctx: Any) -> LiveSyncConfig:
    try:
        return load_sync_config_from_json(Path(path))
    except SyncConfigError as e:
        out.error(str(e))
        ctx.exit(1)
        raise


@click.group()
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option("--json", is_flag=True, help="Output in JSON format")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose/debug logging output",
)
@click.version_option(package_name="pylivesync")
@click.pass_context
def main(ctx: Any, quiet: bool, json: bool, verbose: bool) -> None:
    """PyLiveSync - Push build output into a running server and reload it."""
    ctx.ensure_object(dict)
    ctx.obj["out"] = OutputFormatter(json_output=json, quiet=quiet)
    ctx.obj["verbose"] = verbose

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        logging.getLogger("pylivesync").setLevel(logging.DEBUG)
    else:
        logging.basicConfig(
            level=logging.WARNING,
            format="%(asctime)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )


@main.command()
@click.option(
    "--deployer-url",
    prompt="Deployer URL",
    default=build_deployer_url(),
    help="Deployer endpoint of the running server",
)
@click.pass_context
def init(ctx: Any, deployer_url: str) -> None:
    """Store the deployer URL in ~/.config/pylivesync/config."""
    out: OutputFormatter = ctx.obj["out"]

    if not deployer_url.startswith(("http://", "https://")):
        out.error(f"Invalid deployer URL: {deployer_url}")
        ctx.exit(1)

    config.save_deployer_url(deployer_url)
    out.print_summary(
        "Initialization Complete",
        [
            ("Deployer", deployer_url),
            ("Config file", str(config.get_config_path())),
        ],
    )


@main.command()
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--reload-on-update/--no-reload-on-update",
    default=None,
    help="Reload the application after files were copied (overrides the file)",
)
@click.option("--deployer-url", help="Deployer endpoint of the running server")
@click.option(
    "--artifact",
    type=click.Path(),
    help="Deployed archive or directory of the application",
)
@click.pass_context
def watch(
    ctx: Any,
    config_file: str,
    reload_on_update: Optional[bool],
    deployer_url: Optional[str],
    artifact: Optional[str],
) -> None:
    """Copy changed files into the server until interrupted.

    CONFIG_FILE is a JSON file describing the sync units.
    """
    out: OutputFormatter = ctx.obj["out"]
    if not ctx.obj["verbose"]:
        logging.getLogger("pylivesync").setLevel(logging.INFO)

    live_config = _load_config(config_file, out, ctx)
    if not live_config.units:
        out.warning("No synchronization configured, nothing to watch.")
        return

    if reload_on_update is None:
        reload_on_update = live_config.reload_on_update
    deployed_artifact = Path(artifact) if artifact else live_config.deployed_artifact

    deployer = DeployerClient(deployer_url=deployer_url) if reload_on_update else None
    if deployer is not None and not deployer.deployer_url:
        out.warning("No deployer URL configured, reloads will fail.")
    scheduler = SyncScheduler(
        [Synchronizer(unit) for unit in live_config.units],
        deployer=deployer,
        reload_on_update=reload_on_update,
        deployed_artifact=deployed_artifact,
    )

    for unit in live_config.units:
        out.info(f"Watching {unit}")
    if reload_on_update:
        out.info(f"Reloading {deployed_artifact} on update")

    signal.signal(signal.SIGTERM, lambda signum, frame: scheduler.stop())
    scheduler.start()
    try:
        while scheduler.is_running:
            scheduler.join(timeout=1.0)
    except KeyboardInterrupt:
        out.warning("Interrupted, stopping synchronizer")
    finally:
        scheduler.stop()


@main.command()
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--since",
    type=float,
    default=None,
    help="Only copy files modified in the last N seconds (default: copy all)",
)
@click.pass_context
def sync(ctx: Any, config_file: str, since: Optional[float]) -> None:
    """Run one synchronization pass for every unit and exit."""
    out: OutputFormatter = ctx.obj["out"]
    live_config = _load_config(config_file, out, ctx)

    results = []
    for unit in live_config.units:
        synchronizer = Synchronizer(unit, watermark=0.0)
        if since is not None:
            synchronizer.watermark = synchronizer.clock() - since
        try:
            copied = synchronizer.run()
        except Exception as e:
            out.error(f"{unit}: {e}")
            ctx.exit(1)
        stats = synchronizer.last_stats
        results.append({"unit": str(unit), "copied": copied, **stats})

    if out.json_output:
        out.output_json(results)
        return

    for result in results:
        out.print_summary(
            result["unit"],
            [
                ("Created", result["created"]),
                ("Updated", result["updated"]),
                ("Failed", result["failed"]),
            ],
        )
    total = sum(r["copied"] for r in results)
    out.success(f"Copied {total} file(s)")


@main.command()
@click.argument("artifact")
@click.option("--deployer-url", help="Deployer endpoint of the running server")
@click.pass_context
def reload(ctx: Any, artifact: str, deployer_url: Optional[str]) -> None:
    """Reload a deployed application.

    ARTIFACT is the deployed archive or directory; a trailing .war or .ear
    is stripped.
    """
    out: OutputFormatter = ctx.obj["out"]
    path = strip_archive_suffix(str(Path(artifact).absolute()))

    try:
        DeployerClient(deployer_url=deployer_url).reload(path)
    except DeployerError as e:
        out.error(f"Reload failed: {e}")
        ctx.exit(1)

    out.success(f"Reloaded {path}")
