from __future__ import annotations

from typing import NoReturn

import typer

from cactus.core.errors import ErrorCode
from cactus.output.console import ConsoleProtocol, Style
from cactus.release.contracts import ReleaseResult
from cactus.release.errors import ReleaseErrorKind


def release_error_code(kind: ReleaseErrorKind | None) -> ErrorCode:
    if kind in {"invalid_version_input"}:
        return ErrorCode.USER_ERROR
    if kind in {"remote_auth_failure", "clone_failure", "push_failure"}:
        return ErrorCode.NETWORK_ERROR
    if kind in {"history_walk_failure"}:
        return ErrorCode.IO_ERROR
    return ErrorCode.ENV_ERROR


def result_exit_code(result: ReleaseResult) -> ErrorCode:
    match result.status:
        case "published":
            return ErrorCode.OK
        case "aborted":
            return ErrorCode.ABORTED
        case "failed":
            return release_error_code(result.error_kind)


def print_result(result: ReleaseResult, console: ConsoleProtocol) -> None:
    match result.status:
        case "published":
            console.success(result.summary)
        case "aborted":
            console.warning(result.summary)
        case "failed":
            console.error(result.summary)
    for line in result.details:
        console.print(line, Style.DIM)
    if result.hint:
        console.print(f"hint: {result.hint}", Style.DIM)


def finish(result: ReleaseResult, console: ConsoleProtocol) -> NoReturn:
    """Print the outcome and exit with its code."""
    print_result(result, console)
    raise typer.Exit(code=int(result_exit_code(result)))
