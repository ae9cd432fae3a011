# cli.py
import sys
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import IntPrompt, Confirm, Prompt
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.text import Text
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from bookstore.config import settings
from bookstore.main import configure_logging
from bookstore.models import DEFAULT_CLASSIFICATION
from bookstore.schemas import Book
from sdk.cart import Cart
from sdk.catalog import CatalogClient
from sdk.view import CatalogView, PAGE_SIZES, SORT_CHOICES

console = Console()

custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})


def _money(value: Decimal) -> str:
    return f"${value:.2f}"


# ---------------------------
# Display helpers
# ---------------------------
def _books_table(books: List[Book], title: Optional[str] = None) -> Table:
    table = Table(
        title=title,
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("ID", style="dim", width=6)
    table.add_column("Title", style="bold", width=28)
    table.add_column("Author", width=20)
    table.add_column("Category", width=14)
    table.add_column("Classification", width=14)
    table.add_column("Pages", justify="right", width=6)
    table.add_column("Price", justify="right", width=9)

    for b in books:
        table.add_row(
            str(b.id),
            b.title,
            b.author,
            b.category,
            b.classification,
            str(b.page_count),
            _money(b.price),
        )
    return table


def show_books(view: CatalogView, grouped: bool = False):
    if not view.books:
        console.print("[italic yellow]No books found[/italic yellow]")
        return

    if grouped:
        for classification, books in view.grouped_by_classification().items():
            console.print(_books_table(books, title=f"📚 {classification} ({len(books)})"))
    else:
        console.print(_books_table(view.books, title="📚 Books Catalog"))

    console.print(
        f"[dim]Page {view.page} of {max(1, view.total_pages)} · {view.total_books} books · "
        f"sort {view.sort_field} {view.sort_order} · category {view.category} · "
        f"{view.page_size} per page[/dim]"
    )


def show_cart(cart: Cart):
    title = Text()
    title.append("🛒 Shopping Cart", style="bold")
    title.append(f" - Subtotal ({cart.item_count} {'item' if cart.item_count == 1 else 'items'}): ", style="bold")
    title.append(_money(cart.subtotal), style="bold green")

    if cart.is_empty:
        console.print(Panel("Your cart is empty. Add some books to get started! 🛍️", title=title, style="blue"))
        return

    table = Table(box=box.ROUNDED, header_style="bold blue", show_lines=True)
    table.add_column("ID", style="dim", width=6)
    table.add_column("Book", style="bold", width=30)
    table.add_column("Price", justify="right", width=10)
    table.add_column("Qty", justify="right", width=6)
    table.add_column("Total", justify="right", width=10)

    for line in cart.lines:
        table.add_row(
            str(line.book.id),
            f"{line.book.title}\n[dim]{line.book.author} | {line.book.category}[/dim]",
            _money(line.book.price),
            str(line.quantity),
            _money(line.total),
        )

    console.print(Panel(table, title=title, border_style="blue"))


def show_notification(view: CatalogView):
    n = view.notification
    if n is None:
        return
    style = "red" if n.is_error else "green"
    console.print(Panel.fit(f"[{style}]{n.message}[/{style}]", title="Status"))


def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "📖 Bookstore",
        "[bold blue]Catalog & Cart[/bold blue]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


def with_spinner(fn, *args, **kwargs):
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        transient=True,
    ) as progress:
        progress.add_task(description="Loading...", total=None)
        return fn(*args, **kwargs)


# ---------------------------
# Input helpers with autocomplete
# ---------------------------
def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def ask_decimal(message: str, default: str = "0.00") -> Decimal:
    while True:
        raw = Prompt.ask(message, default=default)
        try:
            return Decimal(raw)
        except ArithmeticError:
            console.print("[red]Please enter a valid number.[/red]")


def pick_book(view: CatalogView) -> Optional[Book]:
    ids = {str(b.id): b for b in view.books}
    raw = prompt_with_autocomplete("Book ID", completer=WordCompleter(list(ids))).strip()
    book = ids.get(raw)
    if book is None:
        console.print(f"[yellow]Book {raw!r} is not on this page[/yellow]")
    return book


def _ask_text(label: str, base: Optional[Book], attr: str) -> str:
    if base is None:
        return Prompt.ask(label)
    return Prompt.ask(label, default=getattr(base, attr))


def ask_book_fields(base: Optional[Book] = None) -> Dict[str, object]:
    return {
        "title": _ask_text("Title", base, "title"),
        "author": _ask_text("Author", base, "author"),
        "publisher": _ask_text("Publisher", base, "publisher"),
        "isbn": _ask_text("ISBN", base, "isbn"),
        "category": _ask_text("Category", base, "category"),
        "classification": Prompt.ask(
            "Classification", default=base.classification if base else DEFAULT_CLASSIFICATION
        ),
        "pageCount": IntPrompt.ask("Pages", default=base.page_count if base else 1),
        "price": ask_decimal("Price", default=str(base.price) if base else "0.00"),
    }


# ---------------------------
# Cart screen
# ---------------------------
def cart_menu(view: CatalogView):
    cart = view.cart
    while True:
        show_cart(cart)
        show_notification(view)
        if cart.is_empty:
            console.print(f"[dim]Continue shopping at page {cart.last_viewed_page}[/dim]")
            return

        choice = prompt_with_autocomplete(
            "[+] more  [-] less  [r] remove  [c] clear  [k] checkout  [b] back:",
            completer=WordCompleter(["+", "-", "r", "c", "k", "b"]),
        ).strip().lower()

        if choice in ("+", "-", "r"):
            raw = prompt_with_autocomplete(
                "Book ID", completer=WordCompleter([str(line.book.id) for line in cart.lines])
            ).strip()
            if not raw.isdigit() or int(raw) not in cart:
                console.print(f"[yellow]Book {raw!r} is not in the cart[/yellow]")
                continue
            book_id = int(raw)
            if choice == "+":
                cart.update_quantity(book_id, cart.quantity(book_id) + 1)
            elif choice == "-":
                cart.update_quantity(book_id, cart.quantity(book_id) - 1)
            else:
                cart.remove_from_cart(book_id)
        elif choice == "c":
            cart.clear_cart()
        elif choice == "k":
            view.checkout()
            show_notification(view)
            return
        elif choice == "b":
            # continue shopping where the user left off
            view.go_to_page(cart.last_viewed_page)
            return


# ---------------------------
# Main menu
# ---------------------------
def menu(view: CatalogView):
    grouped = False

    console.clear()
    console.print(create_header())

    with_spinner(view.load_categories)
    with_spinner(view.refresh)

    while True:
        show_books(view, grouped)
        show_notification(view)

        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)

        options = [
            ("n", "➡️ Next page", "a", "🛒 Add to cart"),
            ("p", "⬅️ Previous page", "c", f"🛍️ View cart ({view.cart.item_count})"),
            ("g", "🔢 Go to page", "+", "➕ Add book"),
            ("f", "🏷️ Filter by category", "e", "✏️ Edit book"),
            ("s", "↕️ Sort", "d", "🗑️ Delete book"),
            ("z", "📏 Results per page", "r", "🔄 Refresh"),
            ("y", "🗂️ Group by classification", "q", "👋 Quit"),
        ]
        for row in options:
            menu_table.add_row(*row)

        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter([o[0] for o in options] + [o[2] for o in options] + ["quit", "exit"])
        ).strip().lower()

        if choice == "n":
            if not view.next_page():
                console.print("[yellow]Already on the last page[/yellow]")
        elif choice == "p":
            if not view.previous_page():
                console.print("[yellow]Already on the first page[/yellow]")
        elif choice == "g":
            page = IntPrompt.ask("Page", default=view.page)
            if not view.go_to_page(page):
                console.print(f"[yellow]Page must be between 1 and {max(1, view.total_pages)}[/yellow]")
        elif choice == "f":
            with_spinner(view.load_categories)
            category = prompt_with_autocomplete(
                "Category (All for everything)",
                completer=WordCompleter(["All"] + view.categories, ignore_case=True),
                default=view.category,
            ).strip()
            view.set_category(category)
        elif choice == "s":
            field = prompt_with_autocomplete(
                "Sort by", completer=WordCompleter(list(SORT_CHOICES), ignore_case=True), default=view.sort_field
            ).strip()
            order = Prompt.ask("Order", choices=["asc", "desc"], default=view.sort_order)
            view.set_sort(field, order)
        elif choice == "z":
            size = Prompt.ask("Results per page", choices=[str(s) for s in PAGE_SIZES], default=str(view.page_size))
            view.set_page_size(int(size))
        elif choice == "y":
            grouped = not grouped
        elif choice == "a":
            book = pick_book(view)
            if book is not None:
                view.add_to_cart(book)
        elif choice == "c":
            cart_menu(view)
        elif choice == "+":
            view.create_book(ask_book_fields())
            with_spinner(view.load_categories)
        elif choice == "e":
            book = pick_book(view)
            if book is not None:
                fields = ask_book_fields(book)
                view.update_book(Book.model_validate({"id": book.id, **fields}))
        elif choice == "d":
            book = pick_book(view)
            if book is not None and Confirm.ask(f"Delete [bold]{book.title}[/bold]?"):
                view.delete_book(book.id)
        elif choice == "r":
            with_spinner(view.load_categories)
        elif choice in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                console.print(Panel.fit("[bold green]Thanks for visiting the bookstore! 👋[/bold green]", title="Goodbye"))
                return

        with_spinner(view.refresh)
        console.print()
        console.rule(style="dim")


def main():
    configure_logging("WARNING")
    base_url = sys.argv[1] if len(sys.argv) > 1 else settings.client_base_url
    with CatalogClient(base_url=base_url) as client:
        menu(CatalogView(client))


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)
