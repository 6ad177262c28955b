# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import os
import re
import time
import zipfile
from collections.abc import Iterator
from datetime import datetime, timezone
from pathlib import Path
from typing import Self

from shovel_lib.core.common import resolve_in, translate_os_error
from shovel_lib.core.config import CFG
from shovel_lib.core.error import CorruptArchiveError, PathNotFoundError, ShovelError
from shovel_lib.core.logger import get_logger

from .ignore import IgnorePredicate, make_ignore_predicate
from .result import OperationResult

logger = get_logger(__name__, show_time=True)


class Archiver:
    """
    Packs a source directory into a timestamped zip archive and extracts
    archives into timestamped deploy directories.

    The timestamp is fixed at construction, so every archive and deploy
    directory produced by one Archiver share the same name suffix.

    Attributes:
        _timestamp (int): Seconds since the epoch used for all derived names.
        _log (dict[str, float]): Duration of the last completed run of each operation.
    """

    def __init__(self, timestamp: int | None = None):
        """
        Initialize the Archiver.

        Args:
            timestamp (int | None): Seconds since the epoch. The current time is used if None.

        Raises:
            ShovelError: If the timestamp cannot be represented as a date.
        """
        try:
            self._timestamp = int(time.time()) if timestamp is None else int(timestamp)
            Archiver.formatTimestamp(self._timestamp)
        except (ValueError, OverflowError, OSError) as e:
            raise ShovelError(f"Invalid timestamp '{timestamp}': {e}.") from e

        self._log: dict[str, float] = {}

    @classmethod
    def fromName(cls, name: str | Path) -> Self:
        """
        Initialize an Archiver reusing the timestamp embedded in an archive or deploy name.

        Args:
            name (str | Path): Archive file or deploy directory, e.g. `source_2018.02.07.230740.zip`.

        Returns:
            Archiver: Archiver with the recovered timestamp.

        Raises:
            ShovelError: If the name does not contain a timestamp.
        """
        if (timestamp := cls.timestampFromName(Path(name).name)) is None:
            raise ShovelError(f"Could not find a timestamp in '{name}'.")

        return cls(timestamp)

    @property
    def timestamp(self) -> int:
        return self._timestamp

    @staticmethod
    def formatTimestamp(timestamp: int | str) -> str:
        """
        Format a timestamp as `YYYY.MM.DD.HHMMSS` (24-hour clock, UTC).
        """
        return datetime.fromtimestamp(int(timestamp), tz=timezone.utc).strftime(
            CFG.date_formats.name
        )

    @staticmethod
    def archiveName(timestamp: int | str) -> str:
        """
        Get the name to use for an archive created at `timestamp`.
        """
        return f"{CFG.archiver.archive_prefix}{Archiver.formatTimestamp(timestamp)}{CFG.archiver.archive_suffix}"

    @staticmethod
    def deployName(timestamp: int | str) -> str:
        """
        Get the name to use for a deploy directory created at `timestamp`.
        """
        return f"{CFG.archiver.deploy_prefix}{Archiver.formatTimestamp(timestamp)}"

    @staticmethod
    def timestampFromName(name: str) -> int | None:
        """
        Recover the timestamp from an archive or deploy name.

        Args:
            name (str): Name containing a `YYYY.MM.DD.HHMMSS` component.

        Returns:
            int | None: Seconds since the epoch, or None if the name holds no valid timestamp.
        """
        if not (match := re.search(CFG.archiver.name_timestamp_regex, name)):
            return None

        try:
            moment = datetime.strptime(match.group(1), CFG.date_formats.name)
        except ValueError:
            logger.debug(f"'{match.group(1)}' in '{name}' is not a valid timestamp.")
            return None

        return int(moment.replace(tzinfo=timezone.utc).timestamp())

    def currentArchiveName(self) -> str:
        """
        Get the archive name based on this Archiver's timestamp.
        """
        return Archiver.archiveName(self._timestamp)

    def currentDeployName(self) -> str:
        """
        Get the deploy name based on this Archiver's timestamp.
        """
        return Archiver.deployName(self._timestamp)

    def log(self, type: str | None = None) -> float | dict[str, float]:
        """
        Get execution times of completed operations.

        Args:
            type (str | None): A specific operation (`create` or `extract`).

        Returns:
            float | dict[str, float]: Duration of the operation in seconds if it has
                been recorded, otherwise a copy of the whole log.
        """
        if type is not None and type in self._log:
            return self._log[type]

        return dict(self._log)

    def create(
        self,
        source_dir: str | Path,
        create_dir: str | Path | None = None,
        ignore: str | IgnorePredicate | None = None,
    ) -> bool:
        """
        Create an archive of `source_dir`. See `createArchive` for details.

        Returns:
            bool: Whether the archive was created successfully.
        """
        try:
            return self.createArchive(source_dir, create_dir, ignore).success
        except ShovelError as e:
            logger.error(e)
            return False

    def extract(
        self, source_archive: str | Path, destination_dir: str | Path | None = None
    ) -> bool:
        """
        Extract an archive into a deploy directory. See `extractArchive` for details.

        Returns:
            bool: Whether the archive was extracted successfully.
        """
        try:
            return self.extractArchive(source_archive, destination_dir).success
        except ShovelError as e:
            logger.error(e)
            return False

    def createArchive(
        self,
        source_dir: str | Path,
        create_dir: str | Path | None = None,
        ignore: str | IgnorePredicate | None = None,
    ) -> OperationResult:
        """
        Pack all files from `source_dir` into a zip archive.

        The archive is named after the Archiver's timestamp and placed in
        `create_dir`. Files are stored under their path relative to `source_dir`;
        empty directories are not preserved. Files whose resolved path is matched
        by `ignore` are skipped, as are dangling symbolic links. The archive is
        closed and reopened after every `CFG.archiver.flush_every` added files.

        Args:
            source_dir (str | Path): Directory to pack.
            create_dir (str | Path | None): Directory to put the archive in.
                Defaults to the current working directory.
            ignore (str | IgnorePredicate | None): Regex or predicate selecting files to skip.
                `None` uses the default pattern, an empty string includes all files.

        Returns:
            OperationResult: Path of the archive, timing and file counts.

        Raises:
            InvalidPatternError: If `ignore` is not a valid regular expression.
                Raised before anything is written.
            PathNotFoundError: If `source_dir` or `create_dir` does not exist.
            PermissionDeniedError: If a file cannot be read or the archive cannot be written.
            ShovelError: If the archive cannot be written for any other reason.
        """
        should_ignore = make_ignore_predicate(ignore)

        source = Path(source_dir)
        if not source.is_dir():
            raise PathNotFoundError(f"Source directory '{source}' does not exist.")
        source = source.resolve()

        archive = resolve_in(create_dir, self.currentArchiveName())
        logger.debug(f"Packing '{source}' into '{archive}' (ignoring {should_ignore}).")

        start = time.perf_counter()
        added = ignored = 0
        writer = _FlushingZipFile(archive, CFG.archiver.flush_every)
        try:
            with writer as zip:
                for file in _walk_files(source):
                    resolved = file.resolve()
                    if resolved == archive:
                        continue

                    if not resolved.is_file():
                        logger.debug(f"Skipping '{file}', not a regular file.")
                        continue

                    if should_ignore(resolved):
                        logger.debug(f"Ignoring '{resolved}'.")
                        ignored += 1
                        continue

                    zip.add(file, file.relative_to(source).as_posix())
                    added += 1

                success = zip.close()
        except OSError as e:
            if writer.written:
                _remove_partial(archive)
            raise translate_os_error(e, f"Could not create archive '{archive}'") from e
        except ShovelError:
            if writer.written:
                _remove_partial(archive)
            raise

        duration = time.perf_counter() - start
        self._log["create"] = duration
        logger.debug(f"Added {added} files to '{archive}', ignored {ignored}.")

        return OperationResult(
            operation="create",
            success=success,
            duration=duration,
            path=archive,
            files=added,
            ignored=ignored,
        )

    def extractArchive(
        self, source_archive: str | Path, destination_dir: str | Path | None = None
    ) -> OperationResult:
        """
        Extract all entries of `source_archive` into the Archiver's deploy directory.

        The deploy directory is `destination_dir` joined with `currentDeployName()`.
        It is created if it does not exist; existing files are overwritten.

        Args:
            source_archive (str | Path): The zip archive to extract.
            destination_dir (str | Path | None): Directory in which the deploy directory is created.
                Defaults to the current working directory.

        Returns:
            OperationResult: Path of the deploy directory, timing and number of extracted entries.

        Raises:
            PathNotFoundError: If the archive does not exist.
            CorruptArchiveError: If the archive is not a readable zip file.
            PermissionDeniedError: If the archive cannot be read or the target cannot be written.
            ShovelError: If extraction fails for any other reason.
        """
        archive = Path(source_archive)
        target = resolve_in(destination_dir, self.currentDeployName())
        logger.debug(f"Extracting '{archive}' into '{target}'.")

        start = time.perf_counter()
        try:
            with zipfile.ZipFile(archive) as zip:
                zip.extractall(target)
                count = sum(1 for info in zip.infolist() if not info.is_dir())
        except zipfile.BadZipFile as e:
            raise CorruptArchiveError(
                f"Could not extract '{archive}': not a valid zip archive ({e})."
            ) from e
        except OSError as e:
            raise translate_os_error(
                e, f"Could not extract archive '{archive}' into '{target}'"
            ) from e

        duration = time.perf_counter() - start
        self._log["extract"] = duration
        logger.debug(f"Extracted {count} files into '{target}'.")

        return OperationResult(
            operation="extract",
            success=True,
            duration=duration,
            path=target,
            files=count,
        )


class _FlushingZipFile:
    """
    Zip writer that closes and reopens the underlying archive every `flush_every` files.

    The first open truncates the archive, later reopens append to it.
    The archive is closed when the context exits, also on errors.

    Attributes:
        written (bool): Whether the archive file has been created or truncated.
    """

    def __init__(self, path: Path, flush_every: int):
        self._path = path
        self._flush_every = flush_every
        self._count = 0
        self._zip: zipfile.ZipFile | None = None
        self.written = False

    def __enter__(self) -> Self:
        self._zip = self._open("w")
        self.written = True
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._zip is None:
            return

        zip, self._zip = self._zip, None
        if exc_type is None:
            zip.close()
            return

        # the original exception is propagated, a failure to close is secondary
        try:
            zip.close()
        except Exception as close_error:
            logger.debug(f"Could not close '{self._path}': {close_error}.")

    def add(self, file: Path, arcname: str) -> None:
        """
        Write `file` into the archive as `arcname`, flushing the archive when due.
        """
        if self._zip is None:
            raise ShovelError(f"Archive '{self._path}' is not open for writing.")

        self._zip.write(file, arcname)
        self._count += 1

        if self._flush_every and self._count % self._flush_every == 0:
            logger.debug(f"Flushing '{self._path}' after {self._count} files.")
            self._zip.close()
            self._zip = None
            self._zip = self._open("a")

    def close(self) -> bool:
        """
        Close the archive, returning True once it has been written out.
        """
        if self._zip is not None:
            zip, self._zip = self._zip, None
            zip.close()
        return True

    def _open(self, mode: str) -> zipfile.ZipFile:
        try:
            return zipfile.ZipFile(self._path, mode, compression=zipfile.ZIP_DEFLATED)
        except zipfile.BadZipFile as e:
            raise CorruptArchiveError(
                f"Could not reopen '{self._path}' for writing: {e}."
            ) from e
        except OSError as e:
            raise translate_os_error(
                e, f"Could not open archive '{self._path}' for writing"
            ) from e


def _walk_files(directory: Path) -> Iterator[Path]:
    """
    Yield every file below `directory`, descending into subdirectories first.

    Symbolic links to directories are not followed.
    """

    def _raise(error: OSError) -> None:
        raise error

    for root, _dirs, files in os.walk(directory, topdown=False, onerror=_raise):
        for name in sorted(files):
            yield Path(root) / name


def _remove_partial(archive: Path) -> None:
    try:
        archive.unlink(missing_ok=True)
    except OSError as e:
        logger.debug(f"Could not remove partial archive '{archive}': {e}.")
