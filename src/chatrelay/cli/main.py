"""
chatrelay CLI - Main entry point.

Provides commands for:
- serve: Start the relay server
- providers: Show the provider table
- chat: Send a message through a running server
- config: Manage configuration
"""

import typer
from rich.console import Console

app = typer.Typer(
    name="chatrelay",
    help="Chat relay - forward chat requests to Grok, GPT-5 or Gemini with failover",
    add_completion=True,
)
console = Console()


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", "-h", help="Bind host"),
    port: int = typer.Option(8787, "--port", "-p", help="Bind port"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable hot reload"),
    log_level: str = typer.Option("INFO", "--log-level", "-l", help="Log level"),
) -> None:
    """Start the chatrelay server."""
    import logging

    import uvicorn

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    console.print(f"[bold green]Starting chatrelay server on {host}:{port}[/bold green]")
    console.print(f"[dim]Log level: {log_level}[/dim]")
    console.print(f"[dim]Reload: {reload}[/dim]")
    console.print()

    uvicorn.run(
        "chatrelay.server.app:app",
        host=host,
        port=port,
        reload=reload,
        log_level=log_level.lower(),
    )


@app.command()
def providers() -> None:
    """Show each provider's protocol, default model and key status."""
    from rich.table import Table

    from chatrelay.router import build_router_config
    from chatrelay.server.config import get_settings

    config = build_router_config(get_settings())

    table = Table(show_header=True, header_style="bold")
    table.add_column("Provider")
    table.add_column("Protocol")
    table.add_column("Default model")
    table.add_column("API key")

    for name, profile in config.profiles.items():
        key_status = "[green]set[/green]" if profile.is_configured else "[red]missing[/red]"
        table.add_row(name, profile.protocol.value, profile.default_model, key_status)

    console.print(table)


@app.command()
def chat(
    message: str = typer.Argument(..., help="Message to send"),
    chatbot: str = typer.Option("auto", "--chatbot", "-c", help="grok, gpt5, gemini or auto"),
    model: str | None = typer.Option(None, "--model", "-m", help="Upstream model override"),
    url: str | None = typer.Option(None, "--url", "-u", help="Server base URL"),
) -> None:
    """Send one message through a running server."""
    import httpx

    from chatrelay.server.config import get_settings

    settings = get_settings()
    base_url = url or f"http://{settings.server.host}:{settings.server.port}"

    payload: dict = {"chatbot": chatbot, "messages": [{"role": "user", "content": message}]}
    if model:
        payload["model"] = model

    try:
        with httpx.Client(timeout=None) as client:
            response = client.post(f"{base_url}/api/chat", json=payload)
    except httpx.HTTPError as e:
        console.print(f"[red]Error connecting to server: {e}[/red]")
        raise typer.Exit(1)

    try:
        data = response.json()
    except ValueError:
        console.print(f"[red]Error: {response.text}[/red]")
        raise typer.Exit(1)

    if response.status_code >= 400 or not isinstance(data, dict) or "error" in data:
        error = data.get("error", response.text) if isinstance(data, dict) else response.text
        console.print(f"[red]Error ({response.status_code}): {error}[/red]")
        raise typer.Exit(1)

    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        console.print_json(data=data)
        return

    console.print(content)


@app.command()
def config(
    action: str = typer.Argument("show", help="Action: show, init, path"),
) -> None:
    """Manage configuration."""
    from pathlib import Path

    from chatrelay.router import build_router_config
    from chatrelay.server.config import get_settings

    if action == "show":
        settings = get_settings()
        console.print_json(
            data={
                "server": {
                    "host": settings.server.host,
                    "port": settings.server.port,
                    "log_level": settings.server.log_level,
                    "upstream_timeout": settings.server.upstream_timeout,
                },
                "providers": build_router_config(settings).to_dict(),
            }
        )

    elif action == "init":
        config_path = Path("config.yaml")
        if config_path.exists():
            console.print(f"[yellow]Config file already exists: {config_path}[/yellow]")
            return

        default_config = """# chatrelay Configuration
server:
  host: 127.0.0.1
  port: 8787
  log_level: INFO

providers:
  grok:
    default_model: x-ai/grok-4.1-fast:free
  gpt5:
    default_model: openai/gpt-4-turbo
  gemini:
    default_model: gemini-2.5-flash

# Provider credentials are set via environment variables:
# GROK_API_KEY=sk-or-...
# GPT5_API_KEY=sk-or-...
# GEMINI_API_KEY=...
"""
        config_path.write_text(default_config)
        console.print(f"[green]Created config file: {config_path}[/green]")

    elif action == "path":
        settings = get_settings()
        if settings.server.config_path:
            console.print(str(settings.server.config_path))
        else:
            console.print("[dim]No config file specified[/dim]")

    else:
        console.print(f"[red]Unknown action: {action}[/red]")
        console.print("[dim]Available actions: show, init, path[/dim]")


@app.command()
def version() -> None:
    """Show version information."""
    from chatrelay import __version__

    console.print(f"chatrelay version {__version__}")


if __name__ == "__main__":
    app()
