from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from status_monitor.api_client import StatusAPIClient

app = typer.Typer(name="status-monitor", help="Device status monitor")
console = Console()

DEFAULT_URL = "http://localhost:3000"


def _get_api(url: str) -> StatusAPIClient:
    return StatusAPIClient(base_url=url)


def _status_markup(status: str) -> str:
    style = "green" if status == "online" else "red"
    return f"[{style}]{status}[/{style}]"


@app.command()
def serve():
    """Run the HTTP server and the offline sweep."""
    from status_monitor.main import run

    run()


@app.command()
def ping(url: str = typer.Option(DEFAULT_URL, "--url", envvar="SM_URL", help="Server URL")):
    """Check if the server is reachable."""
    try:
        client = _get_api(url)
        result = client.health()
        client.close()
        console.print(f"[green]Server is up:[/green] {result}")
    except Exception as e:
        console.print(f"[red]Server unreachable:[/red] {e}")
        raise typer.Exit(code=1)


@app.command()
def status(
    device_id: Optional[str] = typer.Option(None, "--device-id", help="Device to query"),
    url: str = typer.Option(DEFAULT_URL, "--url", envvar="SM_URL", help="Server URL"),
):
    """Show the current online/offline state."""
    try:
        client = _get_api(url)
        d = client.status(device_id)
        client.close()
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    if "device_id" not in d:
        console.print(f"[dim]{d.get('message', 'No device data')}[/dim]")
        return
    console.print(f"[bold]Device: {d['device_id']}[/bold]")
    console.print(f"  Status:    {_status_markup(d['status'])}")
    console.print(f"  Last seen: {d['last_seen']} ({d['minutes_since_last_seen']} min ago)")
    latest = d.get("latest_update")
    if latest:
        console.print(f"  Uptime:    {latest.get('uptime_seconds', 0)}s")
        console.print(f"  IP:        {latest.get('ip_address') or '-'}")
        console.print(f"  RSSI:      {latest.get('rssi')}")
        console.print(f"  Free heap: {latest.get('free_heap')}")


@app.command()
def history(
    limit: int = typer.Option(20, "--limit", "-n", help="Number of reports"),
    device_id: Optional[str] = typer.Option(None, "--device-id", help="Filter by device"),
    url: str = typer.Option(DEFAULT_URL, "--url", envvar="SM_URL", help="Server URL"),
):
    """Show report history, oldest first, with gap markers."""
    try:
        client = _get_api(url)
        rows = client.history(limit=limit, device_id=device_id)
        client.close()
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    if not rows:
        console.print("[dim]No reports yet.[/dim]")
        return

    table = Table(title="History")
    table.add_column("Time")
    table.add_column("Device", style="bold")
    table.add_column("Status")
    table.add_column("Uptime")
    table.add_column("RSSI")
    table.add_column("Boot")

    for r in rows:
        if r.get("is_offline_marker"):
            table.add_row(r["server_timestamp"][:19], r["device_id"], "[red]offline (gap)[/red]", "-", "-", "-")
            continue
        status_text = _status_markup(r["status"])
        if r.get("is_synthetic"):
            status_text += " [dim](sweep)[/dim]"
        table.add_row(
            r["server_timestamp"][:19],
            r["device_id"],
            status_text,
            f"{r.get('uptime_seconds', 0)}s",
            str(r.get("rssi", "-")),
            "yes" if r.get("is_boot") else "",
        )
    console.print(table)


@app.command()
def stats(url: str = typer.Option(DEFAULT_URL, "--url", envvar="SM_URL", help="Server URL")):
    """Show aggregate report counters."""
    try:
        client = _get_api(url)
        s = client.stats()
        client.close()
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    console.print(f"Total updates: {s['total_updates']}")
    console.print(f"Boot count:    {s['boot_count']}")
    console.print(f"First seen:    {s.get('first_seen') or '-'}")
    console.print(f"Last seen:     {s.get('last_seen') or '-'}")


@app.command()
def devices(url: str = typer.Option(DEFAULT_URL, "--url", envvar="SM_URL", help="Server URL")):
    """List all known devices."""
    try:
        client = _get_api(url)
        device_list = client.list_devices()
        client.close()
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    if not device_list:
        console.print("[dim]No devices have reported yet.[/dim]")
        return

    table = Table(title="Devices")
    table.add_column("Device", style="bold")
    table.add_column("Status")
    table.add_column("Stored")
    table.add_column("Last Seen")
    table.add_column("Minutes Ago")

    for d in device_list:
        table.add_row(
            d["device_id"],
            _status_markup(d["status"]),
            d["stored_status"],
            d["last_seen"][:19],
            str(d["minutes_since_last_seen"]),
        )
    console.print(table)


@app.command()
def transitions(
    limit: int = typer.Option(20, "--limit", "-n", help="Number of transitions"),
    device_id: Optional[str] = typer.Option(None, "--device-id", help="Filter by device"),
    url: str = typer.Option(DEFAULT_URL, "--url", envvar="SM_URL", help="Server URL"),
):
    """Show recent online/offline transitions, newest first."""
    try:
        client = _get_api(url)
        rows = client.transitions(limit=limit, device_id=device_id)
        client.close()
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    if not rows:
        console.print("[dim]No transitions recorded.[/dim]")
        return

    table = Table(title="Transitions")
    table.add_column("Time")
    table.add_column("Device", style="bold")
    table.add_column("From")
    table.add_column("To")
    table.add_column("Source")
    for t in rows:
        table.add_row(
            t["occurred_at"][:19],
            t["device_id"],
            t["from_status"],
            _status_markup(t["to_status"]),
            t["source"],
        )
    console.print(table)


@app.command()
def send(
    device_id: str = typer.Option("cli-device", "--device-id", help="Device id to report as"),
    report_status: str = typer.Option("online", "--status", help="Status tag"),
    uptime: int = typer.Option(0, "--uptime", help="Uptime in seconds"),
    boot: bool = typer.Option(False, "--boot", help="Mark as a boot report"),
    url: str = typer.Option(DEFAULT_URL, "--url", envvar="SM_URL", help="Server URL"),
):
    """Post one report, as a device would."""
    try:
        client = _get_api(url)
        result = client.send_report(
            device_id=device_id, status=report_status, uptime_seconds=uptime, is_boot=boot,
        )
        client.close()
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)
    console.print(f"[green]{result.get('message', 'sent')}[/green]")


if __name__ == "__main__":
    app()
