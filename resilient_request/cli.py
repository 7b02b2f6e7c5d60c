"""CLI entry point for resilient-request.

    resilient-request get https://api.example.com/widgets/42
    resilient-request post https://api.example.com/widgets --body '{"name": "w"}'

Prints one JSON document and exits 0 on success, 1 otherwise.
"""

import functools
import json
import logging
import sys
import time
from typing import Optional

import click

from .client import Request
from .config import ConfigError, load_config, overrides_from_env
from .runner.classifier import classify
from .transport.models import RequestSpec, Success


def request_options(func):
    """Options shared by the get/post/put commands."""
    decorators = [
        click.argument("url"),
        click.option("--query", "-q", multiple=True, metavar="KEY=VALUE", help="Query parameter (repeatable)."),
        click.option("--header", "-H", multiple=True, metavar="NAME:VALUE", help="Extra header (repeatable)."),
        click.option("--body", metavar="JSON", help="JSON request body."),
        click.option("--interface-name", help="Interface name (default: last url segment)."),
        click.option("--config", "config_file", type=click.Path(dir_okay=False), help="YAML config file."),
        click.option("--max-retries", type=int, help="Retries after the first attempt."),
        click.option("--timeout-ms", type=float, help="Per-attempt timeout in milliseconds."),
        click.option("--retry-on-timeout/--no-retry-on-timeout", default=None, help="Retry attempts that time out."),
        click.option("--verbose", "-v", is_flag=True, help="Debug logging to stderr."),
        click.option("--pretty", is_flag=True, help="Pretty print output."),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


@click.group()
@click.version_option(package_name="resilient-request")
def main():
    """Send HTTP requests with classified retries and exponential backoff."""


@main.command()
@request_options
def get(**kwargs):
    """Send a GET request; --query becomes the query string."""
    run_request("get", **kwargs)


@main.command()
@request_options
def post(**kwargs):
    """Send a POST request with a JSON body."""
    run_request("post", **kwargs)


@main.command()
@request_options
def put(**kwargs):
    """Send a PUT request with a JSON body."""
    run_request("put", **kwargs)


def run_request(
    http_method: str,
    url: str,
    query: tuple[str, ...] = (),
    header: tuple[str, ...] = (),
    body: Optional[str] = None,
    interface_name: Optional[str] = None,
    config_file: Optional[str] = None,
    max_retries: Optional[int] = None,
    timeout_ms: Optional[float] = None,
    retry_on_timeout: Optional[bool] = None,
    verbose: bool = False,
    pretty: bool = False,
) -> None:
    """Build a client from file/env/flags, send one request, print JSON."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    emit = functools.partial(output, command=http_method, pretty=pretty)

    try:
        overrides = load_config(config_file) if config_file else {}
        overrides.update(overrides_from_env())
        if max_retries is not None:
            overrides["max_retries"] = max_retries
        if timeout_ms is not None:
            overrides["attempt_timeout_ms"] = timeout_ms
        if retry_on_timeout is not None:
            overrides["retry_on_timeout"] = retry_on_timeout

        spec = RequestSpec(
            query=parse_pairs(query, "=", "--query") or None,
            body=json.loads(body) if body is not None else None,
            interface_name=interface_name,
        )
        headers = parse_pairs(header, ":", "--header")
        client = Request(overrides)
    except (ConfigError, FileNotFoundError, ValueError) as e:
        emit(success=False, message=str(e))
        sys.exit(1)

    start_time = time.time()
    with client:
        built = client.build_spec(http_method, url, spec)
        built.options.headers.update(headers)
        result = client.send(built)
    duration_ms = int((time.time() - start_time) * 1000)

    outcome = result.outcome
    if isinstance(outcome, Success):
        emit(
            success=True,
            message="ok",
            data={"payload": outcome.payload, "attempts": result.attempts, "duration_ms": duration_ms},
        )
        return

    kind = classify(outcome)
    emit(
        success=False,
        message=outcome.err_message,
        data={
            **outcome.to_dict(),
            "kind": kind.value if kind else None,
            "attempts": result.attempts,
            "duration_ms": duration_ms,
        },
    )
    sys.exit(1)


def parse_pairs(items: tuple[str, ...], separator: str, flag: str) -> dict[str, str]:
    """Parse ``KEY<sep>VALUE`` strings into a dict."""
    pairs: dict[str, str] = {}
    for item in items:
        if separator not in item:
            raise ValueError(f"{flag} expects KEY{separator}VALUE, got {item!r}")
        key, value = item.split(separator, 1)
        pairs[key.strip()] = value.strip()
    return pairs


def output(success: bool, command: str, message: str, data=None, pretty: bool = False) -> None:
    """Print a result in the standard JSON envelope."""
    document = {
        "success": success,
        "command": command,
        "data": data,
        "message": message,
    }
    click.echo(json.dumps(document, ensure_ascii=False, indent=2 if pretty else None))


if __name__ == "__main__":
    main()
