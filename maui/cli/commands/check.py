from __future__ import annotations

import typer

from maui.cli.context import CLIContext, build_context
from maui.core.errors import ErrorCode
from maui.core.logging_config import setup_logging
from maui.manifest.loader import ManifestLoader
from maui.manifest.model import Manifest
from maui.output.console import Style
from maui.platform.http import RealHttpClient
from maui.services.check import CheckReport, CheckService
from maui.services.checkers import CheckResult, CheckStatus, DefaultCommandRunner, TargetPlatform
from maui.services.workload_deps import WorkloadDependencyReader

_COLUMNS = ("Component", "Status", "Message")


def check(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed diagnostics."),
    platform: str | None = typer.Option(
        None,
        "--platform",
        "-p",
        help="Only check one target: android, ios, maccatalyst or windows.",
    ),
    manifest: str | None = typer.Option(
        None,
        "--manifest",
        "-m",
        help="Manifest URL or file (defaults to the configured manifest URL).",
    ),
) -> None:
    """Check the .NET MAUI development environment."""
    try:
        target = TargetPlatform.parse(platform)
    except ValueError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    ctx = build_context()
    setup_logging(ctx.config.logging.level, ctx.config.logging.file)

    runner = DefaultCommandRunner(timeout=ctx.config.probe.timeout)
    service = CheckService(
        ctx.platform,
        _load_manifest(ctx, manifest),
        runner=runner,
        deps=WorkloadDependencyReader(runner=runner, host=ctx.platform),
    )
    report = service.run(target, verbose)

    _print_report(ctx, report, verbose)

    if report.has_errors():
        raise typer.Exit(code=int(report.exit_code))


def _load_manifest(ctx: CLIContext, source: str | None) -> Manifest:
    loader = ManifestLoader(RealHttpClient(), default_url=ctx.config.manifest.url)
    return loader.load(source)


def _print_report(ctx: CLIContext, report: CheckReport, verbose: bool) -> None:
    console = ctx.console
    console.print(f"platform: {ctx.platform}", Style.DIM)
    console.header(".NET MAUI environment")
    console.table(
        _COLUMNS,
        [((r.name, str(r.status), r.message), _style_for_status(r.status)) for r in report.results],
    )

    if verbose:
        _print_details(ctx, report.results)

    attention = report.needs_attention()
    if attention:
        console.header("Recommendations")
        for r in attention:
            console.print(f"{r.name}: {r.recommendation}", _style_for_status(r.status))

    console.newline()
    errors = report.count(CheckStatus.ERROR)
    warnings = report.count(CheckStatus.WARNING)
    if errors:
        console.error(f"{errors} error(s), {warnings} warning(s)")
    elif warnings:
        console.warning(f"{warnings} warning(s)")
    else:
        console.success("environment looks good")


def _print_details(ctx: CLIContext, results: list[CheckResult]) -> None:
    with_details = [r for r in results if r.details]
    if not with_details:
        return
    ctx.console.header("Details")
    for r in with_details:
        ctx.console.print(r.name, Style.BOLD)
        for key, value in (r.details or {}).items():
            ctx.console.detail(key, value)


def _style_for_status(status: CheckStatus) -> Style:
    match status:
        case CheckStatus.OK:
            return Style.SUCCESS
        case CheckStatus.WARNING:
            return Style.WARNING
        case CheckStatus.ERROR:
            return Style.ERROR
        case CheckStatus.NOT_APPLICABLE:
            return Style.DIM
