"""
CLI command that runs N concurrent browser sessions and reports click-to-modal latency.
"""
import asyncio
import logging
import sys
from typing import Optional

import click
from dotenv import find_dotenv, load_dotenv
from pydantic import ValidationError

from cli.utils import error_exit
from ui_loadtest.common.logging_config import setup_colored_logging
from ui_loadtest.config import LoadTestConfig
from ui_loadtest.exceptions import AppUnavailableError, BrowserLaunchError
from ui_loadtest.metrics import RunReport, RunReporter
from ui_loadtest.orchestrator import SessionOrchestrator
from ui_loadtest.preflight import wait_for_app

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_LAUNCH_FAILURE = 3
EXIT_INTERRUPTED = 130


def _report_results(config: LoadTestConfig, quiet: bool):
    def _on_complete(report: RunReport):
        reporter = RunReporter(report)
        if not quiet:
            reporter.print_summary()

        stats = report.statistics
        if stats is None:
            click.echo("Click-to-Modal stats (ms): none (no successful sessions)")
        else:
            click.echo(
                f"Click-to-Modal stats (ms): count={stats.count} mean={stats.mean:.1f} "
                f"p50={stats.p50:g} p95={stats.p95:g}"
            )

        path = reporter.save_json(config.output_dir)
        click.echo(click.style(f"Results saved to {path}", fg="green"))

    return _on_complete


async def _run_main(
    config: LoadTestConfig,
    preflight: bool,
    startup_timeout: int,
    quiet: bool,
) -> int:
    """Main async implementation of the run command."""
    if preflight:
        click.echo(click.style(f"Waiting for {config.login_url} (timeout: {startup_timeout}s)...", fg="blue"))
        try:
            await wait_for_app(config.login_url, timeout=startup_timeout)
        except AppUnavailableError as e:
            click.echo(click.style(str(e), fg="red"), err=True)
            return EXIT_FAILURE

    orchestrator = SessionOrchestrator(
        config,
        on_complete=_report_results(config, quiet),
    )

    try:
        await orchestrator.run()
    except BrowserLaunchError as e:
        click.echo(click.style(str(e), fg="red"), err=True)
        click.echo(
            click.style(
                "Install the managed browser with 'playwright install chromium' "
                "or point CHROME_PATH at a local Chrome/Chromium executable.",
                fg="yellow",
            ),
            err=True,
        )
        return EXIT_LAUNCH_FAILURE

    return EXIT_OK


@click.command(name="run")
@click.argument("num_sessions", required=False, type=click.IntRange(min=1))
@click.option(
    "--url",
    "-u",
    "login_url",
    default=None,
    help="Login page URL (default: $APP_URL or http://localhost:4200/login)",
)
@click.option(
    "--target-url",
    default=None,
    help="Page holding the start button (default: $TARGET_URL)",
)
@click.option(
    "--headless/--headful",
    default=None,
    help="Run browsers without a window (default: $HEADLESS or headful)",
)
@click.option(
    "--interactive/--no-interactive",
    default=None,
    help="Keep browsers open until Enter is pressed (default: on when headful)",
)
@click.option(
    "--no-interact",
    is_flag=True,
    help="Only measure; skip filling and submitting the form",
)
@click.option(
    "--max-concurrency",
    default=None,
    type=click.IntRange(min=1),
    help="Run at most this many sessions at once (default: all)",
)
@click.option(
    "--output-dir",
    "-o",
    default=None,
    type=click.Path(file_okay=False),
    help="Directory for the results JSON (default: $OUTPUT_DIR or .)",
)
@click.option(
    "--record-console",
    is_flag=True,
    help="Save every session's captured console messages to YAML",
)
@click.option(
    "--wait-for-app",
    "preflight",
    is_flag=True,
    help="Wait for the login URL to answer before launching browsers",
)
@click.option(
    "--startup-timeout",
    default=60,
    type=int,
    help="Timeout in seconds for --wait-for-app (default: 60)",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Only print the one-line statistics, not the full report",
)
@click.option(
    "--system-env",
    is_flag=True,
    help="Use system environment variables only; do not load .env file.",
)
@click.option(
    "--debug",
    is_flag=True,
    help="Enable debug output",
)
def run(
    num_sessions: Optional[int],
    login_url: Optional[str],
    target_url: Optional[str],
    headless: Optional[bool],
    interactive: Optional[bool],
    no_interact: bool,
    max_concurrency: Optional[int],
    output_dir: Optional[str],
    record_console: bool,
    preflight: bool,
    startup_timeout: int,
    quiet: bool,
    system_env: bool,
    debug: bool,
):
    """
    Open NUM_SESSIONS concurrent browser sessions and measure click-to-modal latency.

    Each session logs in, opens the target page, clicks the start button and
    waits for the task modal (FORM_READY console message or the modal
    element, whichever comes first). Results are written to
    ui_load_results_<timestamp>.json.

    \b
    Examples:
        # One headful session, pausing for inspection at the end
        ui-loadtest run

        # 50 headless sessions
        ui-loadtest run 50 --headless

        # Measure only, against another host
        ui-loadtest run 10 --headless --no-interact -u https://staging.example.com/login
    """
    setup_colored_logging(level=logging.DEBUG if debug else logging.INFO)

    if system_env:
        log.warning("Skipping .env file loading due to --system-env flag.")
    else:
        env_path = find_dotenv(usecwd=True)
        if env_path:
            load_dotenv(dotenv_path=env_path, override=True)
            log.info("Loaded environment variables from: %s", env_path)

    try:
        config = LoadTestConfig.from_env(
            num_sessions=num_sessions,
            login_url=login_url,
            target_url=target_url,
            headless=headless,
            interactive=interactive,
            interact=False if no_interact else None,
            max_concurrency=max_concurrency,
            output_dir=output_dir,
            record_console=True if record_console else None,
        )
    except ValidationError as e:
        error_exit(f"Invalid configuration:\n{e}", code=2)

    try:
        exit_code = asyncio.run(
            _run_main(
                config=config,
                preflight=preflight,
                startup_timeout=startup_timeout,
                quiet=quiet,
            )
        )
    except KeyboardInterrupt:
        click.echo("\n\nRun cancelled by user.")
        sys.exit(EXIT_INTERRUPTED)
    except Exception as e:
        if debug:
            import traceback
            traceback.print_exc()
        error_exit(f"Error: {e}")

    sys.exit(exit_code)
