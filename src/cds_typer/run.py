"""Write generated modules to disk."""

from __future__ import annotations

import argparse
import asyncio
import glob
import logging
import os.path
from collections.abc import Sequence

from cds_typer.library import Library
from cds_typer.writer import File, create_base_definitions

logger = logging.getLogger(__name__)

TYPE_DEFS_FILE_NAME = "index.ts"
JS_EXPORTS_FILE_NAME = "index.js"
LIBRARY_SUFFIX = ".ts"


def output_directory(root: str, source: File) -> str:
    """The absolute directory that a module is written to.

    Args:
        root (str): The root output directory.
        source (File): The module.

    Returns:
        str: `root` joined with the directory form of the module's namespace, using native separators.
    """
    return os.path.abspath(os.path.join(root, source.path.as_directory(local=False, posix=False)))


def _write_text(file_path: str, contents: str):
    with open(file_path, "w", encoding="utf8") as f:
        f.write(contents)


async def _write_source(directory: str, source: File) -> bool:
    """Write both artifacts of a module. I/O failures are logged and reported as False."""
    # Serialization errors are bugs in the caller, not I/O failures, so they are raised before the guarded part.
    outputs = (
        (TYPE_DEFS_FILE_NAME, source.to_type_defs()),
        (JS_EXPORTS_FILE_NAME, source.to_js_exports()),
    )

    try:
        await asyncio.to_thread(os.makedirs, directory, exist_ok=True)
    except OSError as e:
        logger.error("Could not create parent directory %s: %s.", directory, e, exc_info=e)
        return False

    results = await asyncio.gather(
        *(asyncio.to_thread(_write_text, os.path.join(directory, name), contents) for name, contents in outputs),
        return_exceptions=True,
    )
    written = True
    for (name, _), result in zip(outputs, results):
        if isinstance(result, OSError):
            logger.error("Could not write %s to %s: %s.", name, directory, result, exc_info=result)
            written = False
        elif isinstance(result, BaseException):
            raise result

    if written:
        logger.debug("Wrote %s(%s/%s).", directory, TYPE_DEFS_FILE_NAME, JS_EXPORTS_FILE_NAME)
    return written


async def writeout(root: str, sources: Sequence[File]) -> list[str]:
    """Write the type definitions and the runtime stub of every module to disk.

    For each module, `index.ts` and `index.js` are written to the directory of its namespace below `root`.
    Missing directories are created. All modules are written concurrently; a module that fails to be
    written does not keep the others from being written.

    Args:
        root (str): The root directory to prefix all directories with.
        sources (Sequence[File]): The modules to write.

    Returns:
        list[str]: The directories of all modules, in the order of `sources`, regardless of failures.
    """
    directories = [output_directory(root, source) for source in sources]
    written = await asyncio.gather(
        *(_write_source(directory, source) for directory, source in zip(directories, sources))
    )
    logger.info("Wrote %d of %d module(s) to '%s'.", sum(written), len(sources), root)
    return directories


def collect_library_paths(
    patterns: Sequence[str], excludes: Sequence[str], recursive: bool, root_directory: str
) -> list[str]:
    """Resolve paths, directories and glob expressions to library files.

    Args:
        patterns (Sequence[str]): Paths or glob expressions, relative to `root_directory`.
        excludes (Sequence[str]): Paths or glob expressions to exclude from the matches.
        recursive (bool): Whether directories are searched recursively and `**` matches nested directories.
        root_directory (str): The directory to resolve relative paths against.

    Returns:
        list[str]: The library files, sorted.
    """
    excluded_paths: set[str] = set()
    for exclude in excludes:
        excluded_paths.update(glob.glob(os.path.join(root_directory, exclude), recursive=recursive))

    search_paths: set[str] = set()
    for pattern in patterns:
        search_path = os.path.join(root_directory, pattern)

        if os.path.isdir(search_path):
            if recursive:
                for root, _, files in os.walk(search_path):
                    search_paths.update(os.path.join(root, f) for f in files if f.endswith(LIBRARY_SUFFIX))
            else:
                for file in os.listdir(search_path):
                    file_path = os.path.join(search_path, file)
                    if os.path.isfile(file_path) and file.endswith(LIBRARY_SUFFIX):
                        search_paths.add(file_path)
        else:
            search_paths.update(glob.glob(search_path, recursive=recursive))

    return sorted(search_paths - excluded_paths)


def run(args: argparse.Namespace, root_directory: str) -> list[str]:
    """Write the base definitions and predefined libraries to the output directory.

    Args:
        args (argparse.Namespace): The arguments that were passed when calling the command line.
        root_directory (str): The directory, from which the command is executed.

    Returns:
        list[str]: The directories that were written to.
    """
    output_dir: str = os.path.join(root_directory, args.output_dir)
    library_patterns: list[str] = getattr(args, "libraries", [])
    excludes: list[str] = getattr(args, "excludes", [])
    recursive: bool = getattr(args, "recursive", False)
    skip_base_definitions: bool = getattr(args, "skip_base_definitions", False)

    sources: list[File] = []
    if not skip_base_definitions:
        sources.append(create_base_definitions())

    for path in collect_library_paths(library_patterns, excludes, recursive, root_directory):
        library = Library(path)
        library.referenced = True
        logger.info("Loaded library '%s' from '%s'.", library.namespace, path)
        sources.append(library)

    if not sources:
        logger.warning("Nothing to write.")
        return []

    return asyncio.run(writeout(output_dir, sources))
