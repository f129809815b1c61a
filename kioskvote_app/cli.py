# File: kioskvote_app/cli.py
# `flask kiosk`: a terminal kiosk driving ViewController against a running server.

import asyncio
import os
import sys
from typing import Optional, Sequence, Union

import click
from flask import current_app
from flask.cli import with_appcontext

from .controller import (
    Command,
    ControllerState,
    NetworkFailure,
    Renderer,
    Return,
    SelectionView,
    SetLanguage,
    Submit,
    ToggleItem,
    ToggleSlot,
    ViewController,
)
from .controller.http_backend import HttpKioskBackend

QUIT = 'quit'

HELP_TEXT = (
    "<n> toggle item n | s<n> clear slot n | go submit | "
    "lang <code> switch language | back return | quit"
)


def parse_command(line: str, items: Sequence[str]) -> Union[Command, str, None]:
    """Translate one line of terminal input into a controller command."""
    text = line.strip().lower()
    if not text:
        return None
    if text in ('q', 'quit', 'exit'):
        return QUIT
    if text in ('go', 'submit'):
        return Submit()
    if text in ('back', 'b'):
        return Return()
    if text.startswith('lang '):
        language = text.split(None, 1)[1].strip()
        return SetLanguage(language) if language else None
    if text.startswith('s') and text[1:].isdigit():
        return ToggleSlot(int(text[1:]) - 1)
    if text.isdigit():
        index = int(text) - 1
        if 0 <= index < len(items):
            return ToggleItem(items[index])
    return None


class TerminalRenderer(Renderer):

    def __init__(self, output_path: str, launch_duration: float = 0.0) -> None:
        super().__init__(launch_duration)
        self.output_path = output_path

    def render_selection(self, view: SelectionView, state: ControllerState) -> None:
        click.echo()
        click.secho(state.text('title'), bold=True)
        for number, item in enumerate(view.items, start=1):
            marker = '[x]' if item.selected else ('[-]' if item.disabled else '[ ]')
            click.echo(f"  {number:>2}. {marker} {item.label}")
        slots = ' | '.join(slot.label or '_' for slot in view.slots)
        click.echo(f"  slots: {slots}")
        if view.submit_enabled:
            click.secho(f"  type 'go' to {state.text('submit')}", fg='green')

    def render_result(self, state: ControllerState, image: bytes) -> None:
        with open(self.output_path, 'wb') as handle:
            handle.write(image)
        click.secho(f"{state.text('result_title')}: {self.output_path}", fg='cyan')

    def show_error(self, message: str) -> None:
        click.secho(message, fg='red', err=True)

    async def play_launch_animation(self) -> None:
        click.echo('Launching...')
        await super().play_launch_animation()


async def run_terminal_kiosk(controller: ViewController, items: Sequence[str],
                             stream=None) -> None:
    stream = stream or sys.stdin
    await controller.start()
    click.echo(HELP_TEXT)
    try:
        while True:
            line = await asyncio.to_thread(stream.readline)
            if not line:
                break
            command = parse_command(line, items)
            if command == QUIT:
                break
            if command is None:
                click.echo(HELP_TEXT)
                continue
            await controller.dispatch(command)
            if isinstance(command, Submit):
                await controller.wait_for_transition()
    finally:
        await controller.close()


@click.command('kiosk')
@click.option('--base-url', default='http://127.0.0.1:5000', show_default=True,
              help='Address of the running kiosk server.')
@click.option('--language', default=None, help='Initial language (defaults to the server default).')
@click.option('--output', default=None, help='Where displayed result images are written.')
@with_appcontext
def kiosk_command(base_url: str, language: Optional[str], output: Optional[str]) -> None:
    """Run a terminal kiosk against BASE_URL."""
    config = current_app.config
    backend = HttpKioskBackend(base_url)
    try:
        catalog = backend.fetch_items()
    except NetworkFailure as exc:
        raise click.ClickException(f"Kiosk server unreachable: {exc}")

    items = catalog['items']
    renderer = TerminalRenderer(
        output or os.path.join(config['RESULTS_FOLDER'], 'terminal_result.png'),
        launch_duration=config['LAUNCH_ANIMATION_SECONDS'],
    )
    controller = ViewController(
        backend,
        renderer,
        items,
        language=language or catalog.get('default_language') or config['DEFAULT_LANGUAGE'],
        idle_timeout=config['RESULT_IDLE_SECONDS'],
        capacity=catalog.get('choices') or config['VOTE_CHOICES'],
    )
    current_app.logger.info("Terminal kiosk connected to %s", base_url)
    asyncio.run(run_terminal_kiosk(controller, items))
