"""Package resolution: which files does this command touch, and where do they go.

Resolution happens in two steps. :func:`select_packages` is pure and
validates every package and dependency name before anything touches the
filesystem. :func:`resolve_units` then expands each selected package into
file-level :class:`~dotr.domain.models.DeploymentUnit` objects through the
injected filesystem ports.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path, PurePosixPath

from ..domain.models import ConfigTree, DeploymentUnit, Package, Profile
from ..domain.paths import is_ignored, resolve_path
from .ports import DetectTemplate, ListFiles, ReadFile

logger = logging.getLogger(__name__)


def select_packages(
    config: ConfigTree,
    requested: Sequence[str] | None = None,
    profile: Profile | None = None,
) -> list[Package]:
    """Return the ordered, de-duplicated packages a command should process.

    Start from *requested* (or every package without ``skip``), follow each
    package's own ``dependencies`` right after it, then append the active
    profile's dependencies. The first occurrence of a name wins.

    Raises:
        UnknownPackageError: For an unknown requested name or dependency.

    Example:
        >>> tree = ConfigTree.from_mapping({
        ...     "packages": {
        ...         "bashrc": {"src": "a", "dest": "b", "dependencies": ["aliases"]},
        ...         "aliases": {"src": "c", "dest": "d"},
        ...         "ssh": {"src": "e", "dest": "f", "skip": True},
        ...     },
        ...     "profiles": {"work": {"dependencies": ["ssh"]}},
        ... })
        >>> [p.name for p in select_packages(tree)]
        ['bashrc', 'aliases']
        >>> [p.name for p in select_packages(tree, profile=tree.profile("work"))]
        ['bashrc', 'aliases', 'ssh']
        >>> [p.name for p in select_packages(tree, ["ssh"])]
        ['ssh']
    """
    if requested:
        roots = list(requested)
    else:
        roots = [name for name, package in config.packages.items() if not package.skip]
    if profile is not None:
        roots.extend(profile.dependencies)

    selected: dict[str, Package] = {}

    def visit(name: str) -> None:
        if name in selected:
            return
        package = config.package(name)
        selected[name] = package
        for dependency in package.dependencies:
            visit(dependency)

    for name in roots:
        visit(name)
    return list(selected.values())


def resolve_units(
    config: ConfigTree,
    requested: Sequence[str] | None = None,
    profile: Profile | None = None,
    *,
    repo_root: Path,
    list_files: ListFiles,
    read_file: ReadFile,
    detect_template: DetectTemplate,
    backup_suffix: str = ".dotrbak",
    home: Path | None = None,
    include_destination: bool = False,
) -> list[DeploymentUnit]:
    """Expand the selected packages into file-level deployment units.

    Destinations honour ``targets[profile]`` overrides. Directory packages
    become one unit per contained file, minus ``ignore`` globs and backup
    files. When a package source does not exist yet, units are expanded from
    the destination tree instead so ``update`` can populate the store. A
    source that cannot be read still yields its unit, so the failure is
    reported against that file alone.

    Args:
        config: Parsed repository configuration.
        requested: Explicit package names; ``None`` or empty means "all".
        profile: Active profile, if any.
        repo_root: Repository root used for relative paths.
        list_files: Directory listing port.
        read_file: File reading port.
        detect_template: Template syntax detector.
        backup_suffix: Suffix of backup files to leave out.
        home: Home directory override for ``~`` expansion.
        include_destination: Also emit files that exist only under a
            directory package's destination, as ``update`` needs them.

    Returns:
        Units in package order, files sorted within each package.
    """
    packages = select_packages(config, requested, profile)
    profile_name = profile.name if profile is not None else None

    units: list[DeploymentUnit] = []
    for package in packages:
        source_root = resolve_path(package.src, repo_root, home=home)
        dest_root = resolve_path(package.destination_for(profile_name), repo_root, home=home)
        expanded = _expand_package(
            package,
            profile_name,
            source_root,
            dest_root,
            list_files=list_files,
            read_file=read_file,
            detect_template=detect_template,
            backup_suffix=backup_suffix,
            include_destination=include_destination,
        )
        logger.debug(
            "Resolved package",
            extra={"package": package.name, "units": len(expanded), "dest": str(dest_root)},
        )
        units.extend(expanded)
    return units


def _expand_package(
    package: Package,
    profile_name: str | None,
    source_root: Path,
    dest_root: Path,
    *,
    list_files: ListFiles,
    read_file: ReadFile,
    detect_template: DetectTemplate,
    backup_suffix: str,
    include_destination: bool,
) -> list[DeploymentUnit]:
    relative_files = list_files(source_root)
    if relative_files is None and not _source_exists(source_root, read_file):
        # Source not stored yet: mirror whatever exists at the destination.
        relative_files = list_files(dest_root)
        if relative_files is None:
            return [DeploymentUnit(package, profile_name, source_root, dest_root)]
        return [
            DeploymentUnit(package, profile_name, source_root / rel, dest_root / rel, relative_path=Path(rel))
            for rel in _filter_files(relative_files, package.ignore, backup_suffix)
        ]

    if relative_files is None:
        template = _is_template(source_root, read_file, detect_template)
        return [DeploymentUnit(package, profile_name, source_root, dest_root, is_template=template)]

    stored = _filter_files(relative_files, package.ignore, backup_suffix)
    units = []
    for rel in stored:
        source_path = source_root / rel
        template = _is_template(source_path, read_file, detect_template)
        units.append(
            DeploymentUnit(
                package,
                profile_name,
                source_path,
                dest_root / rel,
                is_template=template,
                relative_path=Path(rel),
            )
        )
    if include_destination:
        known = set(stored)
        added = [
            rel
            for rel in _filter_files(list_files(dest_root) or [], package.ignore, backup_suffix)
            if rel not in known
        ]
        units.extend(
            DeploymentUnit(package, profile_name, source_root / rel, dest_root / rel, relative_path=Path(rel))
            for rel in added
        )
        units.sort(key=lambda unit: unit.relative_path or Path())
    return units


def _filter_files(
    relative_files: Sequence[PurePosixPath], patterns: Sequence[str], backup_suffix: str
) -> list[PurePosixPath]:
    return [
        rel
        for rel in relative_files
        if not rel.name.endswith(backup_suffix) and not is_ignored(rel, patterns)
    ]


def _source_exists(path: Path, read_file: ReadFile) -> bool:
    try:
        return read_file(path) is not None
    except OSError:
        # Unreadable but present; the pipeline reports it against the unit.
        return True


def _is_template(path: Path, read_file: ReadFile, detect_template: DetectTemplate) -> bool:
    try:
        data = read_file(path)
    except OSError as exc:
        logger.warning("Source unreadable while resolving", extra={"source": str(path), "error": str(exc)})
        return False
    if data is None:
        return False
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        return False
    return detect_template(text)


__all__ = ["resolve_units", "select_packages"]
