"""Command-line entrypoint for endpoint code generation."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import TextIO

import httpx

from api_typegen.config import (
    HTTP_METHODS,
    CliOverrides,
    GeneratorConfig,
    load_effective_config,
    write_project_config,
)
from api_typegen.fetching import (
    CancellationToken,
    FetchCancelledError,
    FetchError,
    build_headers,
    cancel_on_interrupt,
    fetch_json,
)
from api_typegen.generation import generate_declarations_for
from api_typegen.logging import GenerationEvent, JsonlGenerationLog
from api_typegen.openapi import (
    OpenApiLoadError,
    component_schemas,
    flatten_endpoints,
    load_openapi,
)
from api_typegen.sampling import schema_to_sample, type_name_from
from api_typegen.security import UnsafePathError
from api_typegen.writer import WriteSettings, write_endpoint_files


@dataclass(slots=True, frozen=True)
class EndpointJob:
    """Everything needed to write one endpoint."""

    api_name: str
    type_name: str
    url: str
    method: str
    types_content: str
    has_request_body: bool


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for all subcommands."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--project-root", required=False, default=".")
    common.add_argument("--data-dir", required=False, default=None)
    common.add_argument("--type-prefix", required=False, default=None)
    common.add_argument("--api-prefix", required=False, default=None)
    common.add_argument("--timeout", type=float, required=False, default=None)
    common.add_argument("--max-retries", type=int, required=False, default=None)

    parser = argparse.ArgumentParser(prog="api-typegen")
    subparsers = parser.add_subparsers(dest="command", required=True)

    fetch = subparsers.add_parser("fetch", parents=[common])
    fetch.add_argument("--url", required=True)
    fetch.add_argument("--type-name", required=False, default="ApiResponse")
    fetch.add_argument("--api-name", required=False, default="getData")
    fetch.add_argument("--method", choices=HTTP_METHODS, type=str.upper, default=None)
    auth = fetch.add_mutually_exclusive_group()
    auth.add_argument("--token", required=False, default=None)
    auth.add_argument("--cookie", required=False, default=None)
    fetch.add_argument("--body", required=False, default=None)
    fetch.add_argument("--output-dir", required=False, default=None)

    openapi = subparsers.add_parser("openapi", parents=[common])
    openapi.add_argument("source")
    openapi.add_argument("--output-dir", required=False, default=None)

    init = subparsers.add_parser("init", parents=[common])
    init.add_argument("--force", action="store_true")

    subparsers.add_parser("config", parents=[common])
    return parser


class Generator:
    """Runs generation commands and records one log event per endpoint."""

    def __init__(
        self,
        config: GeneratorConfig,
        out_stream: TextIO,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config = config
        self._out = out_stream
        self._transport = transport
        self._log = JsonlGenerationLog(path=config.data_dir / "generation.jsonl")
        self._settings = WriteSettings(
            request_module=config.request_module,
            type_prefix=config.type_prefix,
            api_prefix=config.api_prefix,
        )

    @property
    def log(self) -> JsonlGenerationLog:
        return self._log

    def run_fetch(
        self,
        url: str,
        type_name: str,
        api_name: str,
        method: str | None = None,
        token: str | None = None,
        cookie: str | None = None,
        body: str | None = None,
    ) -> int:
        """Fetch a live sample, generate declarations and write the endpoint."""
        active_method = (method or self._config.default_method).upper()
        type_name = type_name_from(type_name, fallback="ApiResponse")
        arguments: dict[str, object] = {
            "url": url,
            "method": active_method,
            "type_name": type_name,
            "token": token,
            "cookie": cookie,
            "body": body,
        }
        request_body: object = None
        if body is not None:
            try:
                request_body = json.loads(body)
            except json.JSONDecodeError as error:
                return self._fail("fetch", api_name, arguments, "INVALID_BODY", error.msg)

        cancel_token = CancellationToken()
        try:
            with cancel_on_interrupt(cancel_token):
                sample = fetch_json(
                    url,
                    method=active_method,
                    headers=build_headers(token=token, cookie=cookie),
                    body=request_body,
                    timeout=self._config.network.timeout_seconds,
                    max_retries=self._config.network.max_retries,
                    cancel_token=cancel_token,
                    transport=self._transport,
                )
        except FetchCancelledError as error:
            return self._fail("fetch", api_name, arguments, "CANCELLED", str(error))
        except FetchError as error:
            return self._fail("fetch", api_name, arguments, "FETCH_FAILED", str(error))

        has_request_body = request_body is not None
        roots = [(sample, type_name)]
        if has_request_body:
            roots.append((request_body, f"{type_name}Request"))

        job = EndpointJob(
            api_name=api_name,
            type_name=type_name,
            url=url,
            method=active_method,
            types_content=generate_declarations_for(roots),
            has_request_body=has_request_body,
        )
        return 0 if self.write_endpoint("fetch", job, arguments)["ok"] else 1

    def run_openapi(self, source: str) -> int:
        """Generate every JSON endpoint of an OpenAPI document; failures do not stop the batch."""
        fetcher = partial(
            fetch_json,
            timeout=self._config.network.timeout_seconds,
            max_retries=self._config.network.max_retries,
            transport=self._transport,
        )
        arguments: dict[str, object] = {"source": source}
        try:
            document = load_openapi(source, fetcher=fetcher)
        except OpenApiLoadError as error:
            return self._fail("openapi", "", arguments, "OPENAPI_LOAD_FAILED", str(error))

        endpoints = flatten_endpoints(document)
        components = component_schemas(document)
        succeeded = 0
        failed = 0
        for endpoint in endpoints:
            type_name = endpoint.type_name()
            roots = [(schema_to_sample(endpoint.schema, components), type_name)]
            if endpoint.has_request_body:
                request_sample = schema_to_sample(endpoint.request_schema, components)
                roots.append((request_sample, f"{type_name}Request"))
            job = EndpointJob(
                api_name=endpoint.api_name(),
                type_name=type_name,
                url=endpoint.url,
                method=endpoint.method.upper(),
                types_content=generate_declarations_for(roots),
                has_request_body=endpoint.has_request_body,
            )
            endpoint_arguments = {
                "source": source,
                "url": endpoint.url,
                "method": job.method,
                "type_name": type_name,
            }
            if self.write_endpoint("openapi", job, endpoint_arguments)["ok"]:
                succeeded += 1
            else:
                failed += 1

        self._emit(
            {
                "ok": failed == 0,
                "command": "openapi",
                "result": {"endpoints": len(endpoints), "succeeded": succeeded, "failed": failed},
            }
        )
        return 0 if failed == 0 else 1

    def write_endpoint(
        self,
        command: str,
        job: EndpointJob,
        arguments: dict[str, object],
    ) -> dict[str, object]:
        """Write one endpoint and return its response envelope."""
        try:
            result = write_endpoint_files(
                base_dir=self._config.output_dir,
                api_name=job.api_name,
                type_name=job.type_name,
                url=job.url,
                types_content=job.types_content,
                method=job.method,
                has_request_body=job.has_request_body,
                settings=self._settings,
            )
        except UnsafePathError as error:
            response = blocked_response(command, job.api_name, error.reason, error.hint)
            self._record(command, job.api_name, arguments, response)
            self._emit(response)
            return response
        except (OSError, UnicodeDecodeError) as error:
            response = error_response(command, job.api_name, "WRITE_FAILED", str(error))
            self._record(command, job.api_name, arguments, response)
            self._emit(response)
            return response

        response = success_response(command, result.api_name, result.to_dict())
        self._record(command, result.api_name, arguments, response)
        self._emit(response)
        return response

    def show_config(self) -> int:
        self._emit({"ok": True, "command": "config", "result": self._config.to_public_dict()})
        return 0

    def _fail(
        self,
        command: str,
        api_name: str,
        arguments: dict[str, object],
        code: str,
        message: str,
    ) -> int:
        response = error_response(command, api_name, code, message)
        self._record(command, api_name, arguments, response)
        self._emit(response)
        return 1

    def _record(
        self,
        command: str,
        api_name: str,
        arguments: dict[str, object],
        response: dict[str, object],
    ) -> None:
        self._log.append(GenerationEvent.from_response(command, api_name, arguments, response))

    def _emit(self, response: dict[str, object]) -> None:
        self._out.write(f"{json.dumps(response, sort_keys=True)}\n")
        self._out.flush()


def success_response(command: str, api_name: str, result: dict[str, object]) -> dict[str, object]:
    return {
        "ok": True,
        "blocked": False,
        "command": command,
        "api_name": api_name,
        "result": result,
    }


def error_response(command: str, api_name: str, code: str, message: str) -> dict[str, object]:
    return {
        "ok": False,
        "blocked": False,
        "command": command,
        "api_name": api_name,
        "error": {"code": code, "message": message},
    }


def blocked_response(command: str, api_name: str, reason: str, hint: str) -> dict[str, object]:
    return {
        "ok": False,
        "blocked": True,
        "command": command,
        "api_name": api_name,
        "error": {"code": "PATH_BLOCKED", "message": reason},
        "result": {"reason": reason, "hint": hint},
    }


def create_generator(
    project_root: str,
    cli_overrides: CliOverrides | None = None,
    out_stream: TextIO | None = None,
    transport: httpx.BaseTransport | None = None,
    home_dir: Path | None = None,
) -> Generator:
    """Create a configured generator instance."""
    config = load_effective_config(
        project_root=Path(project_root).resolve(),
        overrides=cli_overrides,
        home_dir=home_dir,
    )
    return Generator(config=config, out_stream=out_stream or sys.stdout, transport=transport)


def main(argv: list[str] | None = None, out_stream: TextIO | None = None) -> int:
    """Entrypoint for the api-typegen command."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    out = out_stream or sys.stdout

    if args.command == "init":
        try:
            path = write_project_config(Path(args.project_root), force=args.force)
        except FileExistsError as error:
            out.write(f"{json.dumps(error_response('init', '', 'CONFIG_EXISTS', str(error)))}\n")
            return 1
        out.write(f"{json.dumps({'ok': True, 'command': 'init', 'result': {'path': str(path)}})}\n")
        return 0

    output_dir = getattr(args, "output_dir", None)
    overrides = CliOverrides(
        output_dir=Path(output_dir) if output_dir is not None else None,
        data_dir=Path(args.data_dir) if args.data_dir is not None else None,
        type_prefix=args.type_prefix,
        api_prefix=args.api_prefix,
        timeout_seconds=args.timeout,
        max_retries=args.max_retries,
    )
    try:
        generator = create_generator(args.project_root, cli_overrides=overrides, out_stream=out)
    except ValueError as error:
        out.write(f"{json.dumps(error_response(args.command, '', 'INVALID_CONFIG', str(error)))}\n")
        return 1

    if args.command == "config":
        return generator.show_config()
    if args.command == "fetch":
        return generator.run_fetch(
            url=args.url,
            type_name=args.type_name,
            api_name=args.api_name,
            method=args.method,
            token=args.token,
            cookie=args.cookie,
            body=args.body,
        )
    return generator.run_openapi(args.source)


if __name__ == "__main__":
    raise SystemExit(main())
