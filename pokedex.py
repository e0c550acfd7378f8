#!/usr/bin/env python3
"""
Pokédex - browse the first generation of Pokémon and play "Who's that Pokémon?"
Fetches the catalog from PokeAPI and renders it in the terminal.
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from colorama import init, Fore, Style

from app.config import ConfigError, load_config
from app.controller import PokedexController
from app.models import EntrySummary
from app.state import PokedexState
from pokeapi_client import PokeAPIClient
import terminal_view as view

# Initialize colorama for cross-platform colored terminal output
init(autoreset=True)

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

def setup_logging(level: str = 'WARNING') -> logging.Logger:
    """Configure the root Pokédex logger.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to WARNING so normal use is quiet.

    Returns:
        Configured logger instance.
    """
    numeric = getattr(logging, level.upper(), logging.WARNING)
    logger = logging.getLogger('pokedex')
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('[%(levelname)s] %(name)s: %(message)s'))
        logger.addHandler(handler)
    logger.setLevel(numeric)
    return logger


logger = setup_logging()


def find_entry(state: PokedexState, choice: str) -> Optional[EntrySummary]:
    """Resolve a menu choice (list position, dex number or name) to an entry."""
    choice = choice.strip().lower()
    if not choice:
        return None
    if choice.startswith('#') and choice[1:].isdecimal():
        wanted = int(choice[1:])
        return next((e for e in state.catalog if e.id == wanted), None)
    if choice.isdecimal():
        idx = int(choice) - 1
        if 0 <= idx < len(state.catalog):
            return state.catalog[idx]
        return None
    return next((e for e in state.catalog if e.name == choice), None)


async def ask(prompt: str) -> str:
    """Read a line without blocking the event loop."""
    loop = asyncio.get_running_loop()
    try:
        return (await loop.run_in_executor(None, input, prompt)).strip()
    except EOFError:
        return 'x'


class PokedexApp:
    """Terminal front end: forwards menu choices to the controller."""

    def __init__(self, controller: PokedexController) -> None:
        self.controller = controller
        self._unsubscribe = controller.subscribe(self._on_state)
        self._last_state = controller.state

    def _on_state(self, state: PokedexState) -> None:
        prev = self._last_state.quiz
        quiz = state.quiz
        if (prev is not None and quiz is not None and quiz.visible
                and prev.answered_incorrectly and not quiz.answered_incorrectly
                and not quiz.answered_correctly):
            print(f"\n{Fore.CYAN}You can guess again.")
        self._last_state = state

    async def load_catalog(self) -> bool:
        task = self.controller.start()
        if task is not None:
            await task
        return bool(self.controller.state.catalog)

    async def show_entry(self, entry: EntrySummary) -> None:
        await self.controller.select_entry(entry)
        view.render_detail_state(self.controller.state)
        self.controller.dismiss_detail()

    async def quiz_loop(self) -> None:
        self.controller.start_quiz()
        while True:
            quiz = self.controller.state.quiz
            if quiz is None:
                print(f"{Fore.RED}The catalog is empty, no quiz available.")
                return
            view.render_quiz(quiz)
            if quiz.answered_correctly:
                choice = await ask(f"{Fore.YELLOW}(n)ext or (c)lose: {Fore.WHITE}")
                if choice.lower() == 'n':
                    self.controller.next_quiz()
                    continue
                self.controller.close_quiz()
                return
            choice = await ask(f"{Fore.YELLOW}Your answer (1-{len(quiz.options)}, c to give up): {Fore.WHITE}")
            if choice.lower() in ('c', 'x', 'q'):
                print(f"{Fore.WHITE}It was {view.display_name(quiz.target.name)}.")
                self.controller.close_quiz()
                return
            if choice.isdecimal() and 1 <= int(choice) <= len(quiz.options):
                self.controller.check_answer(quiz.options[int(choice) - 1])
            else:
                self.controller.check_answer(choice.lower())

    async def interactive(self) -> None:
        """Run in interactive mode"""
        await self.load_catalog()
        while True:
            view.render_catalog(self.controller.state)
            print(f"\n{Fore.YELLOW}Enter a number, #dex number or name to see details")
            print(f"{Fore.YELLOW}q. {Fore.WHITE}Quiz   {Fore.YELLOW}r. {Fore.WHITE}Retry loading   "
                  f"{Fore.YELLOW}x. {Fore.WHITE}Exit")
            choice = await ask(f"{Fore.YELLOW}> {Fore.WHITE}")
            lowered = choice.lower()
            if lowered == 'x':
                return
            if lowered == 'q':
                await self.quiz_loop()
            elif lowered == 'r':
                task = self.controller.retry_catalog()
                if task is not None:
                    await task
            else:
                entry = find_entry(self.controller.state, choice)
                if entry is None:
                    print(f"{Fore.RED}No entry matches {choice!r}.")
                    continue
                await self.show_entry(entry)
                await ask(f"{Fore.YELLOW}Press Enter to go back{Fore.WHITE}")

    def close(self) -> None:
        self._unsubscribe()


async def run(args: argparse.Namespace, config: dict) -> int:
    client = PokeAPIClient(config['api_base_url'], timeout=float(config['request_timeout']))
    controller = PokedexController(client, config, autostart=False)
    app = PokedexApp(controller)
    try:
        if args.list or args.show or args.quiz:
            if not await app.load_catalog():
                print(f"{Fore.RED}Could not load the catalog: {controller.state.catalog_error}")
                return 1
            if args.list:
                view.render_catalog(controller.state)
            if args.show:
                entry = find_entry(controller.state, args.show)
                if entry is None:
                    print(f"{Fore.RED}No entry matches {args.show!r}.")
                    return 1
                await app.show_entry(entry)
            if args.quiz:
                await app.quiz_loop()
        else:
            await app.interactive()
    finally:
        app.close()
        await controller.aclose()
    return 0


def main(argv=None) -> int:
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description='Pokédex - browse PokeAPI and play the silhouette quiz',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python3 pokedex.py                 # Run in interactive mode
  python3 pokedex.py --list          # Print the catalog and exit
  python3 pokedex.py --show pikachu  # Show one entry and exit
  python3 pokedex.py --quiz          # Play the quiz
        """
    )
    parser.add_argument(
        '--config', '-c',
        default='config.json',
        help='Path to config file (default: config.json, optional)'
    )
    parser.add_argument(
        '--list', '-l',
        action='store_true',
        help='Print the catalog and exit'
    )
    parser.add_argument(
        '--show', '-s',
        type=str,
        metavar='NAME',
        help='Show details for an entry (name, list position or #dex number)'
    )
    parser.add_argument(
        '--quiz', '-q',
        action='store_true',
        help='Play "Who\'s that Pokémon?"'
    )
    parser.add_argument(
        '--log-level',
        type=str,
        metavar='LEVEL',
        help='Log level (DEBUG, INFO, WARNING, ERROR)'
    )
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"{Fore.RED}Error: {e}")
        return 1

    setup_logging(args.log_level or config['log_level'])

    print(f"{Fore.RED}{Style.BRIGHT}Pokédex{Style.RESET_ALL} {Fore.WHITE}powered by PokeAPI\n")
    try:
        return asyncio.run(run(args, config))
    except KeyboardInterrupt:
        print(f"\n{Fore.YELLOW}Goodbye!")
        return 0


if __name__ == '__main__':
    sys.exit(main())
