"""Install orchestrator: drives one install, upgrade or uninstall run.

Every collaborator that touches the network, the filesystem outside the
staging area, or external commands is injected, so the whole state
machine can be exercised with mocks.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from upstall.core.result import Err, Ok, Result
from upstall.install.appliers import applier_for
from upstall.install.integrity import IntegrityVerifier
from upstall.install.preflight import Preflight
from upstall.install.probe import ExecutableVersionProbe
from upstall.install.report import Outcome, RunReport, RunState
from upstall.install.signature import (
    NullSignatureVerifier,
    PkgutilSignatureVerifier,
    SignatureStatus,
)
from upstall.install.staging import staging_area
from upstall.install.uninstall import (
    FilesystemUninstallLocator,
    RegistryUninstallLocator,
    Uninstaller,
)
from upstall.net.download import ArtifactDownloader
from upstall.output.console import Style
from upstall.platform.detection import Platform
from upstall.platform.privilege import elevation_prefix
from upstall.release.assets import select_asset
from upstall.release.errors import DownloadFailed, InstallError
from upstall.release.platforms import platform_descriptor
from upstall.release.resolver import ReleaseResolver
from upstall.release.version import Ordering, compare

if TYPE_CHECKING:
    from upstall.core.config import InstallOptions, UpstallConfig
    from upstall.install.appliers import Applier
    from upstall.install.probe import VersionProbe
    from upstall.install.signature import SignatureVerifier
    from upstall.net.http import HttpClient
    from upstall.output.console import ConsoleProtocol
    from upstall.platform.detection import PlatformInfo
    from upstall.platform.process import CommandRunner
    from upstall.release.model import SelectionResult

__all__ = ["Orchestrator", "create_orchestrator"]


def _format_size(size: int) -> str:
    mb = size / (1024 * 1024)
    return f"{mb:.1f} MB" if mb >= 1 else f"{size / 1024:.1f} KB"


class Orchestrator:
    """Runs the install pipeline or the uninstall flow.

    Install: preflight, resolve, select, (dry-run stop), idempotency gate,
    prerequisites, disk space, download, verify, signature, apply, post-install
    probe. Temporary files are cleaned up on every exit route.
    """

    def __init__(
        self,
        *,
        config: UpstallConfig,
        platform: PlatformInfo,
        console: ConsoleProtocol,
        http: HttpClient,
        preflight: Preflight,
        probe: VersionProbe,
        applier: Applier,
        signature: SignatureVerifier,
        uninstaller: Uninstaller,
    ) -> None:
        self._config = config
        self._platform = platform
        self._console = console
        self._http = http
        self._preflight = preflight
        self._probe = probe
        self._applier = applier
        self._signature = signature
        self._uninstaller = uninstaller
        self._resolver = ReleaseResolver(http, config.index)
        self._verifier = IntegrityVerifier(http, console)
        self.last_report: RunReport | None = None

    def run(self, options: InstallOptions) -> Result[RunReport, InstallError]:
        """Execute one run.

        Returns:
            Ok(RunReport) with the outcome, or Err(InstallError). The report
            of a failed run stays available as `last_report`.
        """
        report = RunReport()
        self.last_report = report
        try:
            if options.uninstall:
                result = self._uninstall(options, report)
            else:
                result = self._install(options, report)
        except BaseException:
            report.enter(RunState.FAILED)
            raise
        if isinstance(result, Err):
            report.enter(RunState.FAILED)
        return result

    # -------------------------------------------------------------------------
    # Uninstall
    # -------------------------------------------------------------------------

    def _uninstall(
        self, options: InstallOptions, report: RunReport
    ) -> Result[RunReport, InstallError]:
        report.enter(RunState.UNINSTALLING)
        result = self._uninstaller.uninstall(dry_run=options.dry_run)
        if isinstance(result, Err):
            return result
        return Ok(report.finish(result.value))

    # -------------------------------------------------------------------------
    # Install
    # -------------------------------------------------------------------------

    def _install(
        self, options: InstallOptions, report: RunReport
    ) -> Result[RunReport, InstallError]:
        product = self._config.product
        self._console.header(f"{product.name} ({self._platform})")

        self._console.print("checking network connectivity", Style.DIM)
        online = self._preflight.check_network(self._config.index.api_base)
        if isinstance(online, Err):
            return online

        descriptor = platform_descriptor(self._platform)
        if isinstance(descriptor, Err):
            return descriptor

        report.enter(RunState.RESOLVING)
        resolved = self._resolver.resolve(options.tag)
        if isinstance(resolved, Err):
            return resolved
        release = resolved.value
        report.tag = release.tag

        selected = select_asset(release, descriptor.value, product.name)
        if isinstance(selected, Err):
            return selected
        selection = selected.value
        report.asset = selection.asset
        self._console.info(f"Release: {release.tag}")
        self._console.print(f"Asset: {selection.asset.name}", Style.DIM)

        if options.dry_run:
            self._describe_plan(options, selection, release.version)
            return Ok(report.finish(Outcome.DRY_RUN))

        installed = self._probe.installed_version()
        report.installed_before = installed
        if installed:
            self._console.print(f"Installed version: {installed}", Style.DIM)
            if not options.force and compare(installed, release.version) is Ordering.EQUAL:
                report.enter(RunState.SKIP_UP_TO_DATE)
                self._console.success(f"{product.name} {installed} is already installed")
                return Ok(report.finish(Outcome.ALREADY_CURRENT))

        ready = self._preflight.check_prerequisites(self._applier.required_commands)
        if isinstance(ready, Err):
            return ready

        space = self._preflight.check_disk_space(
            self._applier.target, self._config.preflight.min_free_mb
        )
        if isinstance(space, Err):
            return space
        if space.value is None:
            self._console.warning(f"could not determine free space at {self._applier.target}")

        with staging_area(options.output_directory) as staging:
            result = self._fetch_and_apply(
                options, report, selection, release.version, staging.path
            )
            if isinstance(result, Ok) and options.keep_artifact and staging.ephemeral:
                staging.keep = True
                report.kept_artifact = report.artifact
                self._console.info(f"Artifact kept at {report.artifact}")
            elif isinstance(result, Ok) and not staging.ephemeral:
                report.kept_artifact = report.artifact
        return result

    def _fetch_and_apply(
        self,
        options: InstallOptions,
        report: RunReport,
        selection: SelectionResult,
        version: str,
        directory: Path,
    ) -> Result[RunReport, InstallError]:
        product = self._config.product
        asset = selection.asset

        report.enter(RunState.DOWNLOADING)
        downloader = ArtifactDownloader(self._http, directory)
        self._console.print(f"downloading {asset.download_url}", Style.DIM)
        with self._console.transfer(asset.name) as progress:
            downloaded = downloader.download(asset.download_url, asset.name, progress=progress)
        if isinstance(downloaded, Err):
            return Err(DownloadFailed(url=asset.download_url, message=str(downloaded.error)))
        artifact = downloaded.value.path
        report.artifact = artifact
        if downloaded.value.replaced_stale:
            self._console.print("removed stale file from an earlier run", Style.DIM)
        self._console.print(
            f"downloaded {artifact.name} ({_format_size(downloaded.value.size)})", Style.DIM
        )

        report.enter(RunState.VERIFYING)
        verified = self._verifier.verify(
            artifact, selection.checksum_asset, skip=options.skip_checksum
        )
        if isinstance(verified, Err):
            return verified
        report.checksum = verified.value

        signature = self._signature.verify(artifact)
        report.signature = signature
        if signature is SignatureStatus.UNTRUSTED:
            self._console.warning(f"{artifact.name} is not signed by '{product.signer}'")

        report.enter(RunState.INSTALLING)
        self._console.print(f"installing {product.name} {version}")
        applied = self._applier.apply(artifact, version)
        if isinstance(applied, Err):
            return applied

        report.enter(RunState.VERIFYING_INSTALLED)
        if self._probe.locate() is None:
            self._console.warning(f"{product.executable} not found on PATH after install")
        else:
            report.installed_after = self._probe.installed_version()
            shown = report.installed_after or version
            self._console.success(f"{product.name} {shown} installed")
        return Ok(report.finish(Outcome.INSTALLED))

    def _describe_plan(
        self, options: InstallOptions, selection: SelectionResult, version: str
    ) -> None:
        directory = options.output_directory or Path("<temp-dir>")
        self._console.print(f"[dry-run] would download {selection.asset.name} to {directory}")
        if options.skip_checksum:
            self._console.print("[dry-run] would skip checksum verification")
        elif selection.checksum_asset is not None:
            self._console.print(f"[dry-run] would verify against {selection.checksum_asset.name}")
        else:
            self._console.print("[dry-run] no checksum sidecar published")
        artifact = directory / selection.asset.name
        for step in self._applier.steps(artifact, version):
            self._console.print(f"[dry-run] would run: {step}")


def create_orchestrator(
    config: UpstallConfig,
    platform: PlatformInfo,
    console: ConsoleProtocol,
    *,
    http: HttpClient,
    probe_http: HttpClient,
    runner: CommandRunner,
) -> Orchestrator:
    """Wire the platform's collaborators for a real run.

    Args:
        probe_http: Client for the connectivity check (short timeout)
    """
    product = config.product
    prefix = elevation_prefix(platform.platform)
    executable = platform.platform.exe_name(product.executable)

    if platform.platform is Platform.WINDOWS:
        locator = RegistryUninstallLocator(product.windows_display_name)
    else:
        locator = FilesystemUninstallLocator(
            product, runner, prefix=prefix, receipts=platform.is_macos
        )

    if platform.is_macos:
        signature: SignatureVerifier = PkgutilSignatureVerifier(runner, product.signer)
    else:
        signature = NullSignatureVerifier()

    return Orchestrator(
        config=config,
        platform=platform,
        console=console,
        http=http,
        preflight=Preflight(probe_http, platform),
        probe=ExecutableVersionProbe(runner, executable, product.version_args),
        applier=applier_for(platform.platform, runner, product, prefix),
        signature=signature,
        uninstaller=Uninstaller(
            runner,
            console,
            locator,
            product,
            prefix=prefix,
            prune_dirs=platform.platform.is_unix,
        ),
    )
