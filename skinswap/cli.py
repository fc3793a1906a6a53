# skinswap/cli.py
import os
from pathlib import Path

import typer

app = typer.Typer(name="skinswap", help="skinswap resource override command-line interface")


def _resolver_for(root: Path):
    # 必须在插件加载前设置资源根目录
    os.environ["SKINSWAP_RESOURCE_ROOT"] = str(root)
    # stdout 只留给命令结果；日志走 stderr，默认只显示警告
    os.environ.setdefault("LOG_LEVEL", "WARNING")
    from skinswap.app import bootstrap
    container, _ = bootstrap(
        only=["core_logging", "core_resources", "resource_override"],
        announce=False,
    )
    return container.resolve("override_resolver")


@app.command("candidates")
def show_candidates(
    path: str = typer.Argument(..., help="Resource path, e.g. res://ui/medal.png"),
    suffix: str = typer.Option("", "--suffix", "-s", help="Variant suffix, e.g. silver."),
    root: Path = typer.Option(Path("."), "--root", "-r", help="Directory that res:// maps to."),
):
    """
    Prints the override and default candidate paths for PATH and whether each exists.
    """
    from plugins.resource_override.resolver import build_candidate_paths

    resolver = _resolver_for(root)
    candidates = build_candidate_paths(path, suffix)
    for label, candidate in (("override", candidates.override_path), ("default", candidates.default_path)):
        exists = resolver.loader.exists(candidate)
        typer.secho(
            f"{label:>8}: {candidate} [{'found' if exists else 'missing'}]",
            fg=typer.colors.GREEN if exists else typer.colors.YELLOW
        )


@app.command("resolve")
def resolve_resource(
    path: str = typer.Argument(..., help="Resource path, e.g. res://ui/medal.png"),
    suffix: str = typer.Option("", "--suffix", "-s", help="Variant suffix, e.g. silver."),
    root: Path = typer.Option(Path("."), "--root", "-r", help="Directory that res:// maps to."),
):
    """
    Prints the path PATH resolves to for SUFFIX.
    """
    from skinswap.core.contracts import Resource

    resolver = _resolver_for(root)
    loader = resolver.loader
    resource = loader.load(path) if loader.exists(path) else Resource(path=path)
    typer.echo(resolver.resolve(resource, suffix).path)


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address."),
    port: int = typer.Option(8000, help="Bind port."),
):
    """Runs the demo HTTP application."""
    import uvicorn
    uvicorn.run("skinswap.main:app", host=host, port=port)


if __name__ == "__main__":
    app()
