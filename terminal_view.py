"""
terminal_view.py
================
Renders :class:`~app.state.PokedexState` snapshots to the terminal with
colorama.  Only formatting lives here; every decision is made by the
controller.
"""
from typing import List, Optional, Sequence

from colorama import Fore, Style

from app.models import EntryDetail, EntrySummary
from app.state import PokedexState, QuizRound

RULE = '=' * 60


def display_name(name: str) -> str:
    """``"mr-mime"`` → ``"Mr-mime"`` (first letter upper-cased only)."""
    return name[:1].upper() + name[1:]


def format_dex_number(entry_id: int) -> str:
    return f"#{entry_id:03d}"


def format_height(detail: EntryDetail) -> str:
    return f"{detail.height_metres} m"


def format_weight(detail: EntryDetail) -> str:
    return f"{detail.weight_kilograms} kg"


def catalog_lines(catalog: Sequence[EntrySummary], columns: int = 2) -> List[str]:
    """Lay the catalog out in *columns* columns, numbered for selection."""
    cells = [
        f"{idx:>3}. {format_dex_number(entry.id)} {display_name(entry.name):<14}"
        for idx, entry in enumerate(catalog, start=1)
    ]
    return ['  '.join(cells[i:i + columns]) for i in range(0, len(cells), columns)]


def render_catalog(state: PokedexState) -> None:
    print(f"\n{Fore.RED}{Style.BRIGHT}{'POKÉDEX':^60}")
    print(f"{Fore.WHITE}{RULE}")
    if state.is_catalog_loading:
        print(f"{Fore.CYAN}Loading catalog...")
        return
    if state.catalog_error:
        print(f"{Fore.RED}Could not load the catalog: {state.catalog_error}")
        print(f"{Fore.YELLOW}Choose 'r' to retry.")
        return
    for line in catalog_lines(state.catalog):
        print(f"{Fore.WHITE}{line}")
    print(f"{Fore.GREEN}{len(state.catalog)} entries")


def render_detail(detail: EntryDetail) -> None:
    print(f"\n{Fore.GREEN}{RULE}")
    print(f"{Fore.CYAN}{Style.BRIGHT}{display_name(detail.name)} {format_dex_number(detail.id)}")
    print(f"{Fore.GREEN}{RULE}")
    print(f"{Fore.YELLOW}Types:  {Fore.WHITE}{'  '.join(c.upper() for c in detail.categories)}")
    print(f"{Fore.YELLOW}Weight: {Fore.WHITE}{format_weight(detail)}")
    print(f"{Fore.YELLOW}Height: {Fore.WHITE}{format_height(detail)}")
    if detail.artwork_url:
        print(f"{Fore.YELLOW}Artwork: {Fore.WHITE}{detail.artwork_url}")
    print(f"{Fore.GREEN}{RULE}\n")


def render_detail_state(state: PokedexState) -> None:
    if state.is_detail_loading:
        print(f"{Fore.CYAN}Fetching details...")
    elif state.detail_error:
        print(f"{Fore.RED}Could not load details: {state.detail_error}")
    elif state.selected_detail is not None:
        render_detail(state.selected_detail)


def option_label(quiz: QuizRound, option: str) -> str:
    if quiz.answered_correctly and option == quiz.target.name:
        return f"{Fore.GREEN}{display_name(option)} ✔"
    return f"{Fore.WHITE}{display_name(option)}"


def render_quiz(quiz: Optional[QuizRound]) -> None:
    if quiz is None or not quiz.visible:
        return
    print(f"\n{Fore.CYAN}{Style.BRIGHT}Who's that Pokémon?")
    if quiz.answered_correctly:
        print(f"{Fore.WHITE}Artwork: {quiz.target.image_url}")
    else:
        print(f"{Fore.WHITE}(silhouette of {format_dex_number(quiz.target.id)})")
    for idx, option in enumerate(quiz.options, start=1):
        print(f"{Fore.YELLOW}{idx}. {option_label(quiz, option)}")
    if quiz.answered_correctly:
        print(f"{Fore.GREEN}{Style.BRIGHT}Correct!")
    elif quiz.answered_incorrectly:
        print(f"{Fore.RED}Wrong, try again!")
