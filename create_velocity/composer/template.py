"""Base template retrieval and bundled overlay lookup.

A template locator is either ``github:<owner>/<repo>[#<ref>]``, downloaded as a
tarball over HTTPS, or a path to a local directory, which is copied. Bundled
overlays (``base`` and ``i18n``) ship inside the package.
"""

from __future__ import annotations

import asyncio
import io
import re
import shutil
import tarfile
from pathlib import Path, PurePosixPath

import httpx

from create_velocity.utils import load_json

OVERLAYS_ROOT = Path(__file__).resolve().parent.parent / "templates"
CODELOAD_URL = "https://codeload.github.com/{owner}/{repo}/tar.gz/{ref}"
DEFAULT_TEMPLATE_VERSION = "0.1.0-beta"

_GITHUB_LOCATOR_RE = re.compile(r"^github:(?P<owner>[\w.-]+)/(?P<repo>[\w.-]+)(?:#(?P<ref>.+))?$")


class TemplateRetrievalError(Exception):
    """Raised when the base template cannot be retrieved."""

    def __init__(self, locator: str, cause: str) -> None:
        self.locator = locator
        self.cause = cause
        super().__init__(
            f"Could not download template '{locator}'. "
            f"Please check your internet connection.\n{cause}"
        )


def parse_github_locator(locator: str) -> tuple[str, str, str] | None:
    """Split ``github:owner/repo#ref`` into its parts; ``ref`` defaults to ``main``."""
    match = _GITHUB_LOCATOR_RE.match(locator.strip())
    if match is None:
        return None
    return match.group("owner"), match.group("repo"), match.group("ref") or "main"


class TemplateFetcher:
    """Retrieves a template into a destination directory."""

    def __init__(self, timeout: int = 30) -> None:
        self.timeout = timeout

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            follow_redirects=True,
        )

    async def retrieve(self, locator: str, dest: str | Path) -> Path:
        """Place the template identified by *locator* into *dest*.

        Existing files in *dest* are overwritten.

        Raises:
            TemplateRetrievalError: The template could not be fetched or unpacked.
        """
        dest = Path(dest)
        github = parse_github_locator(locator)
        if github is not None:
            archive = await self._download(locator, *github)
            try:
                await asyncio.to_thread(extract_tarball, archive, dest)
            except (tarfile.TarError, OSError) as exc:
                raise TemplateRetrievalError(locator, f"Could not unpack archive: {exc}") from exc
            return dest

        source = Path(locator).expanduser()
        if not source.is_dir():
            raise TemplateRetrievalError(locator, "Locator is neither 'github:owner/repo' nor a directory")
        try:
            await asyncio.to_thread(shutil.copytree, source, dest, dirs_exist_ok=True)
        except OSError as exc:
            raise TemplateRetrievalError(locator, str(exc)) from exc
        return dest

    async def _download(self, locator: str, owner: str, repo: str, ref: str) -> bytes:
        url = CODELOAD_URL.format(owner=owner, repo=repo, ref=ref)
        try:
            async with self._client() as client:
                response = await client.get(url)
                response.raise_for_status()
                return response.content
        except httpx.HTTPStatusError as exc:
            raise TemplateRetrievalError(
                locator, f"HTTP {exc.response.status_code} from {url}"
            ) from exc
        except httpx.HTTPError as exc:
            raise TemplateRetrievalError(locator, f"{type(exc).__name__}: {exc}") from exc


def extract_tarball(data: bytes, dest: Path) -> list[Path]:
    """Extract a gzipped tarball into *dest*, stripping the leading directory.

    Links, devices and members that would land outside *dest* are skipped.
    """
    dest = Path(dest)
    dest.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []

    with tarfile.open(fileobj=io.BytesIO(data), mode="r:gz") as archive:
        for member in archive.getmembers():
            parts = PurePosixPath(member.name).parts[1:]
            if not parts or any(part in ("..", "") for part in parts) or member.name.startswith("/"):
                continue
            target = dest.joinpath(*parts)

            if member.isdir():
                target.mkdir(parents=True, exist_ok=True)
            elif member.isfile():
                extracted = archive.extractfile(member)
                if extracted is None:
                    continue
                target.parent.mkdir(parents=True, exist_ok=True)
                with extracted, open(target, "wb") as fh:
                    shutil.copyfileobj(extracted, fh)
                written.append(target)

    return written


def get_overlay_path(name: str, root: Path | None = None) -> Path:
    """Return the bundled overlay directory called *name*.

    Raises:
        FileNotFoundError: If the overlay is not shipped with the package.
    """
    path = (root or OVERLAYS_ROOT) / name
    if not path.is_dir():
        raise FileNotFoundError(f"Could not find {name} template at {path}. Package may be corrupted.")
    return path


def detect_template_version(project_dir: Path) -> str:
    """Read the template version from ``velocity-manifest.json`` or ``package.json``."""
    for filename in ("velocity-manifest.json", "package.json"):
        path = Path(project_dir) / filename
        if not path.is_file():
            continue
        try:
            version = load_json(path).get("version")
        except (OSError, ValueError):
            continue
        if isinstance(version, str) and version:
            return version
    return DEFAULT_TEMPLATE_VERSION
