"""
Lead Agent CLI

Command-line interface for running the servers, placing calls and
inspecting the classifier.
"""

import asyncio
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import ConfigurationError, load_config
from .data.models import Category

console = Console()


@click.group()
def cli():
    """Lead Agent - WhatsApp and voice insurance sales bot."""
    pass


# =============================================================================
# Server Commands
# =============================================================================

@cli.command("serve")
@click.option("--host", default="0.0.0.0")
@click.option("--port", type=int, default=None, help="Defaults to PORT")
def serve(host: str, port: Optional[int]):
    """Start the WhatsApp webhook server."""
    config = load_config()
    port = port or config.port
    console.print(f"[bold blue]Starting WhatsApp bot on {host}:{port}[/]")
    console.print("[dim]Set the Twilio webhook to https://<ngrok-url>/whatsapp[/]")

    from .server import create_app
    import uvicorn

    app = create_app(config)
    uvicorn.run(app, host=host, port=port)


@cli.command("serve-voice")
@click.option("--host", default="0.0.0.0")
@click.option("--port", type=int, default=None, help="Defaults to VOICE_PORT")
def serve_voice(host: str, port: Optional[int]):
    """Start the ConversationRelay voice server."""
    config = load_config()
    port = port or config.voice_port
    console.print(f"[bold blue]Starting voice bot on {host}:{port}[/]")
    if not config.ngrok_url:
        console.print("[yellow]NGROK_URL not set - TwiML will not point at a reachable WebSocket[/]")

    from .voice_server import create_voice_app
    import uvicorn

    app = create_voice_app(config)
    uvicorn.run(app, host=host, port=port)


# =============================================================================
# Call Commands
# =============================================================================

@cli.command("call")
@click.option("--to", "to_number", default=None, help="Number to call (defaults to MY_PHONE_NUMBER)")
def call(to_number: Optional[str]):
    """Place an outbound call that connects to the voice bot."""
    from .telephony.twilio_client import TwilioClient

    config = load_config()
    twilio = TwilioClient(config)
    try:
        call_sid = twilio.make_call(to_number)
    except ConfigurationError as e:
        console.print(f"[red]Error: {e}[/]")
        if e.hint:
            console.print(f"[dim]{e.hint}[/]")
        raise SystemExit(1)

    console.print(f"[green]Call initiated! SID: {call_sid}[/]")
    console.print("Pick up your phone!")


# =============================================================================
# Agent Commands
# =============================================================================

@cli.command("classify")
@click.argument("text")
@click.option(
    "--previous", "-p",
    type=click.Choice([c.value for c in Category]),
    default=Category.WARM.value,
    help="Category before this message",
)
def classify_text(text: str, previous: str):
    """Show how a message would change a lead's category."""
    from .agent.classifier import classify

    before = Category(previous)
    after = classify(before, text)

    style = {"hot": "red", "warm": "yellow", "cold": "cyan"}[after.value]
    console.print(f"{before.value.upper()} -> [bold {style}]{after.value.upper()}[/]")


@cli.command("chat")
@click.option("--sender", default="whatsapp:+60000000000", help="Conversation id to use")
def chat(sender: str):
    """Chat with the WhatsApp persona in the terminal (no Twilio)."""
    from .agent.prompts import WHATSAPP_PERSONA
    from .agent.reply_generator import ReplyGenerator
    from .conversation import TextConversationHandler
    from .data.store import ConversationRegistry

    config = load_config()
    registry = ConversationRegistry("cli")
    handler = TextConversationHandler(registry, ReplyGenerator(config, WHATSAPP_PERSONA))

    console.print('[dim]Type a message ("reset", "stop" work too). Ctrl+C to quit.[/]')

    async def loop():
        while True:
            text = await asyncio.to_thread(console.input, "[bold]You:[/] ")
            reply = await handler.handle_inbound(sender, text)
            state = registry.get(sender).get()
            console.print(f"[green]Sarah:[/] {reply}")
            console.print(
                f"[dim]{state.category.value.upper()} | {state.stage.value} | "
                f"follow-ups {state.follow_up_count} | dnc {state.dnc_flag}[/]"
            )

    try:
        asyncio.run(loop())
    except (KeyboardInterrupt, EOFError):
        console.print("\n[yellow]Bye[/]")


# =============================================================================
# Setup Commands
# =============================================================================

@cli.command("config")
def show_config():
    """Show current configuration."""
    config = load_config()

    console.print(Panel(
        f"""[bold]Lead Agent Configuration[/]

Twilio Account: {'[green]Configured[/]' if config.twilio_account_sid else '[red]Not set[/]'}
Twilio Phone: {config.twilio_phone_number or '[red]Not set[/]'}
WhatsApp From: {config.whatsapp_from}
AI API: {'[green]Configured[/]' if config.ai_api_key else '[red]Not set[/]'} ({config.ai_base_url})
Models: {config.ai_model} (text), {config.voice_ai_model} (voice)
Public host: {config.ngrok_url or '[red]Not set[/]'}
Follow-ups: every {config.followup_minutes} min, {'enabled' if config.followup_enabled else 'disabled'}
""",
        title="Configuration",
    ))

    table = Table(title="Follow-up Limits")
    table.add_column("Category")
    table.add_column("Limit", justify="right")
    for category, limit in config.followup_limits.items():
        table.add_row(category, str(limit))
    console.print(table)

    missing = config.validate()
    if missing:
        console.print(f"[red]Missing: {', '.join(missing)}[/]")


if __name__ == "__main__":
    cli()
