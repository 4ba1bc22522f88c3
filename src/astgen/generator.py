"""
Generation runs: a GrammarSpec in, one published module per family out.

A run renders every family in memory first. Only when rendering succeeded is
the output directory touched, and then every module is written to a temporary
file beside its target before any of them is renamed into place. A failed
rename restores the modules this run already replaced.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from os import PathLike
from pathlib import Path

from astgen.emitter import emit_family, module_filename
from astgen.errors import IOFailure, UnknownTypeReference
from astgen.grammar import GrammarSpec
from astgen.loader import validate

logger = logging.getLogger(__name__)


def render(spec: GrammarSpec, *, strict: bool = False) -> dict[str, str]:
    """
    Render every family of ``spec``.

    Args:
        spec: The grammar to generate from
        strict: Reject type references that name nothing known

    Returns:
        Module file name to source text, in family declaration order

    Raises:
        GrammarError: if the grammar cannot be generated
    """
    validate(spec)
    if strict:
        for family, variant, field, ref in spec.unresolved():
            raise UnknownTypeReference(family.name, variant.name, field.name, ref.name)

    sources: dict[str, str] = {}
    for family in spec.families:
        sources[module_filename(family)] = emit_family(spec, family)
        logger.debug("rendered %s with %d variants", family.name, len(family.variants))
    return sources


def generate(
    spec: GrammarSpec, output_dir: str | PathLike[str], *, strict: bool = False
) -> list[Path]:
    """
    Render ``spec`` and publish one module per family into ``output_dir``.

    Either every module is written or, on error, the output directory is left
    as it was.

    Returns:
        The paths written, in family declaration order

    Raises:
        GrammarError: before anything is written
        IOFailure: if the output could not be written
    """
    sources = render(spec, strict=strict)
    paths = publish(sources, Path(output_dir))
    logger.info("generated %d modules in %s", len(paths), output_dir)
    return paths


@dataclass
class _Staged:
    temp: Path
    target: Path
    backup: Path | None = None


def publish(sources: dict[str, str], output_dir: Path) -> list[Path]:
    """
    Write rendered sources so that either all of them are published or none.

    Every module is staged beside its target, and every existing target is
    hard-linked to a backup, before the first rename. If any step fails, the
    targets renamed so far are restored from their backups or removed, and
    directories this call created are removed again.

    Raises:
        IOFailure: naming the path that could not be written
    """
    created = [p for p in (output_dir, *output_dir.parents) if not p.exists()]
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise IOFailure(output_dir, exc) from exc

    staged: list[_Staged] = []
    renamed: list[_Staged] = []
    target = output_dir
    try:
        for filename, text in sources.items():
            target = output_dir / filename
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                newline="\n",
                dir=output_dir,
                prefix=f".{filename}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                staged.append(_Staged(Path(handle.name), target))
                handle.write(text)
            os.chmod(handle.name, 0o644)

        for entry in staged:
            target = entry.target
            if os.path.lexists(target):
                entry.backup = entry.temp.with_suffix(".bak")
                os.link(target, entry.backup, follow_symlinks=False)

        for entry in staged:
            target = entry.target
            os.replace(entry.temp, target)
            renamed.append(entry)
            logger.debug("wrote %s", target)
    except OSError as exc:
        _roll_back(staged, renamed, created)
        raise IOFailure(target, exc) from exc

    for entry in staged:
        if entry.backup is not None:
            entry.backup.unlink(missing_ok=True)
    return [entry.target for entry in staged]


def _roll_back(staged: list[_Staged], renamed: list[_Staged], created: list[Path]) -> None:
    for entry in reversed(renamed):
        try:
            if entry.backup is not None:
                os.replace(entry.backup, entry.target)
            else:
                entry.target.unlink()
        except OSError as exc:
            logger.error("could not restore %s: %s", entry.target, exc)

    for entry in staged:
        entry.temp.unlink(missing_ok=True)
        if entry.backup is not None:
            entry.backup.unlink(missing_ok=True)

    for directory in created:
        try:
            directory.rmdir()
        except OSError as exc:
            logger.warning("left directory %s in place: %s", directory, exc)
            break
