"""
Main entry point for SmartScan.

Interactive CLI for scanning visiting cards, managing the stored contacts and
exporting them as vCard. Every menu action is also available as a
subcommand, e.g. ``python main.py scan card.jpg``.

File: main.py
Created: 2025-12-23
Last Modified: 2026-01-14
"""

import argparse
import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt, Confirm
from rich.table import Table
from rich import box

console = Console()

load_dotenv()

LOG_DIR = Path(__file__).parent / "logs"

# Menu definitions
COMMANDS = {
    "1": {
        "name": "Scan card",
        "description": "Extract a contact from one card image",
        "requires": "Image file",
    },
    "2": {
        "name": "Scan both sides",
        "description": "Extract one contact from front and back images",
        "requires": "Two image files",
    },
    "3": {
        "name": "List contacts",
        "description": "Show stored contacts (all, unsent, sent)",
        "requires": None,
    },
    "4": {
        "name": "Export",
        "description": "Write contacts to a .vcf file and mark them sent",
        "requires": None,
    },
    "5": {
        "name": "Delete contact",
        "description": "Remove a stored contact",
        "requires": None,
    },
    "6": {
        "name": "Stats",
        "description": "Contact counts and recent activity",
        "requires": None,
    },
    "7": {
        "name": "Add contact",
        "description": "Enter a contact by hand",
        "requires": None,
    },
    "8": {
        "name": "Edit contact",
        "description": "Change fields of a stored contact",
        "requires": None,
    },
}


def configure_logging(verbose: bool = False) -> None:
    """Log to a dated file under logs/ and to stderr."""
    LOG_DIR.mkdir(exist_ok=True)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s | %(levelname)-8s | %(message)s',
        handlers=[
            logging.FileHandler(LOG_DIR / f"smartscan_{datetime.now().strftime('%Y-%m-%d')}.log"),
            logging.StreamHandler()
        ]
    )
    # Suppress verbose logging from google-genai and HTTP libraries
    for logger_name in [
        "google",
        "google.genai",
        "google_genai",
        "httpx",
        "httpcore",
        "urllib3",
        "aiosqlite",
    ]:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def _build_extractor():
    from smartscan.config import ExtractorConfig
    from smartscan.extraction import ContactExtractor

    config = ExtractorConfig.from_env()
    if not config.vision_enabled:
        console.print("[yellow]GEMINI_API_KEY not set - using OCR Space and regex parsing only.[/]")
    return ContactExtractor(config)


def show_menu():
    """Display the main menu."""
    console.print()
    console.print(
        Panel.fit(
            "[bold cyan]SmartScan[/] - Visiting Card Digitization",
            border_style="cyan",
        )
    )
    console.print()

    table = Table(box=box.ROUNDED, show_header=True, header_style="bold")
    table.add_column("Key", style="cyan", width=4)
    table.add_column("Name", style="white")
    table.add_column("Description", style="dim")
    table.add_column("Requires", style="yellow")

    for key, command in COMMANDS.items():
        requires = command["requires"] or "-"
        table.add_row(key, command["name"], command["description"], requires)

    console.print(table)
    console.print()
    console.print("[dim]Commands:[/]")
    console.print("  [cyan]1-8[/]  Run an action")
    console.print("  [cyan]q[/]    Quit")
    console.print()


def _print_scan_result(result) -> None:
    if result.status == "failed":
        console.print(f"[red]Extraction failed:[/] {result.message}")
        return

    if result.status == "duplicate":
        existing = result.existing
        console.print(
            f"[yellow]Duplicate:[/] matches contact #{existing.id} "
            f"({existing.company_name or 'no company'}, {', '.join(existing.phones)})"
        )
        console.print("[dim]Run again with --force to save it anyway.[/]")
        return

    contact = result.contact
    table = Table(box=box.SIMPLE, show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Company", contact.company_name or "[dim]-[/]")
    for i, phone in enumerate(contact.phones, start=1):
        table.add_row(f"Phone {i}", phone)
    table.add_row("Email", contact.email or "[dim]-[/]")
    table.add_row("Website", contact.website or "[dim]-[/]")
    table.add_row("Address", contact.address or "[dim]-[/]")
    console.print(Panel(table, title=f"[green]Saved contact #{contact.id}[/]", border_style="green"))

    if not contact.company_name and not contact.phones:
        console.print("[yellow]No contact details found on this card.[/]")


async def cmd_scan(image: str, back: Optional[str] = None, force: bool = False) -> int:
    """Scan one card (or both sides) and store it."""
    from smartscan.database import init_local_database
    from smartscan.extraction import ExtractionAbortedError
    from smartscan.scanning import scan_card, scan_card_both_sides

    for path in filter(None, [image, back]):
        if not Path(path).is_file():
            console.print(f"[red]Image not found:[/] {path}")
            return 1

    await init_local_database()
    extractor = _build_extractor()

    try:
        with console.status("[bold blue]Extracting contact..."):
            if back:
                result = await scan_card_both_sides(extractor, image, back, force=force)
            else:
                result = await scan_card(extractor, image, force=force)
    except ExtractionAbortedError as e:
        console.print(f"[red]{e}[/]")
        return 2

    _print_scan_result(result)
    return 0 if result.status != "failed" else 1


async def cmd_list(filter: str = "all", search: Optional[str] = None) -> int:
    """List stored contacts."""
    from smartscan.database import init_local_database, list_contacts

    await init_local_database()
    contacts = await list_contacts(filter, search=search)

    if not contacts:
        console.print("[dim]No contacts.[/]")
        return 0

    table = Table(box=box.ROUNDED, show_header=True, header_style="bold")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Company", style="white")
    table.add_column("Phones")
    table.add_column("Email", style="dim")
    table.add_column("Sent", justify="center")
    table.add_column("Scanned", style="dim")

    for contact in contacts:
        table.add_row(
            str(contact.id),
            contact.company_name or "-",
            "\n".join(contact.phones) or "-",
            contact.email or "-",
            "[green]yes[/]" if contact.sent else "[yellow]no[/]",
            contact.created_at.strftime("%Y-%m-%d %H:%M"),
        )

    console.print(table)
    console.print(f"[dim]{len(contacts)} contact(s)[/]")
    return 0


async def cmd_export(filter: str = "all", out_dir: str = ".") -> int:
    """Export contacts to a .vcf file."""
    from smartscan.database import init_local_database
    from smartscan.export import ExportError, export_contacts, write_export

    await init_local_database()
    try:
        result = await export_contacts(filter)
    except ExportError as e:
        console.print(f"[yellow]{e}[/]")
        return 1

    path = write_export(result, out_dir)
    console.print(f"[green]Exported {result.count} contact(s)[/] → {path}")
    return 0


async def cmd_delete(contact_id: int, yes: bool = False) -> int:
    """Delete a contact."""
    from smartscan.database import delete_contact, get_contact, init_local_database, log_activity

    await init_local_database()
    contact = await get_contact(contact_id)
    if contact is None:
        console.print(f"[red]No contact #{contact_id}[/]")
        return 1

    if not yes and not Confirm.ask(
        f"Delete contact #{contact_id} ({contact.company_name or 'no company'})?",
        default=False,
    ):
        console.print("[dim]Skipped.[/]")
        return 0

    await delete_contact(contact_id)
    await log_activity(
        "deleted",
        contact_id=contact_id,
        description=f"Deleted contact: {contact.company_name}",
    )
    console.print(f"[green]Deleted contact #{contact_id}[/]")
    return 0


async def cmd_mark_sent(contact_ids: List[int]) -> int:
    """Mark specific contacts as sent."""
    from smartscan.database import init_local_database, log_activity, mark_contacts_sent

    await init_local_database()
    changed = await mark_contacts_sent(contact_ids)
    await log_activity(
        "marked_sent",
        description=f"Marked {changed} contact(s) as sent",
        metadata={"ids": contact_ids},
    )
    console.print(f"[green]Marked {changed} contact(s) as sent[/]")
    return 0


async def cmd_add(
    company: str,
    phones: Optional[List[str]] = None,
    email: Optional[str] = None,
    website: Optional[str] = None,
    address: Optional[str] = None,
    note: Optional[str] = None,
) -> int:
    """Add a contact by hand."""
    from smartscan.database import init_local_database
    from smartscan.manage import create_contact

    await init_local_database()
    contact = await create_contact(
        company,
        phones or [],
        email=email,
        website=website,
        address=address,
        note=note,
    )
    console.print(f"[green]Created contact #{contact.id}[/] ({contact.company_name or 'no company'})")
    return 0


async def cmd_edit(contact_id: int, **fields) -> int:
    """Edit fields of a contact. Only the given (non-None) fields change."""
    from smartscan.database import init_local_database
    from smartscan.manage import edit_contact

    changes = {key: value for key, value in fields.items() if value is not None}
    if not changes:
        console.print("[yellow]Nothing to change.[/]")
        return 1

    await init_local_database()
    contact = await edit_contact(contact_id, **changes)
    if contact is None:
        console.print(f"[red]No contact #{contact_id}[/]")
        return 1

    console.print(f"[green]Updated contact #{contact_id}[/] ({', '.join(sorted(changes))})")
    return 0


async def cmd_stats() -> int:
    """Show contact counts and recent activity."""
    from smartscan.database import get_contact_stats, get_recent_activities, init_local_database

    await init_local_database()
    stats = await get_contact_stats()

    console.print(
        Panel.fit(
            f"Total: [bold]{stats['total']}[/]   "
            f"Sent: [green]{stats['sent']}[/]   "
            f"Unsent: [yellow]{stats['unsent']}[/]   "
            f"Today: [cyan]{stats['today']}[/]",
            title="Contacts",
            border_style="cyan",
        )
    )

    activities = await get_recent_activities(limit=10)
    if activities:
        table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
        table.add_column("When", style="dim")
        table.add_column("Action", style="cyan")
        table.add_column("Description")
        for activity in activities:
            table.add_row(
                activity.created_at.strftime("%Y-%m-%d %H:%M"),
                activity.action,
                activity.description,
            )
        console.print(table)
    return 0


async def run_menu_choice(choice: str) -> None:
    """Prompt for the arguments of a menu action and run it."""
    console.rule(f"[bold]{COMMANDS[choice]['name']}")

    if choice == "1":
        image = Prompt.ask("Image path")
        force = Confirm.ask("Save even if the phone number already exists?", default=False)
        await cmd_scan(image, force=force)
    elif choice == "2":
        front = Prompt.ask("Front image path")
        back = Prompt.ask("Back image path")
        await cmd_scan(front, back=back)
    elif choice == "3":
        filter = Prompt.ask("Filter", choices=["all", "unsent", "sent"], default="all")
        await cmd_list(filter)
    elif choice == "4":
        filter = Prompt.ask("Filter", choices=["all", "unsent", "sent"], default="unsent")
        out_dir = Prompt.ask("Output directory", default=".")
        await cmd_export(filter, out_dir)
    elif choice == "5":
        contact_id = Prompt.ask("Contact ID")
        if contact_id.isdigit():
            await cmd_delete(int(contact_id))
        else:
            console.print("[red]Invalid ID.[/]")
    elif choice == "6":
        await cmd_stats()
    elif choice == "7":
        company = Prompt.ask("Company name")
        phones = [p.strip() for p in Prompt.ask("Phones (comma-separated)", default="").split(",")]
        email = Prompt.ask("Email", default="")
        address = Prompt.ask("Address", default="")
        await cmd_add(company, [p for p in phones if p], email=email, address=address)
    elif choice == "8":
        contact_id = Prompt.ask("Contact ID")
        if not contact_id.isdigit():
            console.print("[red]Invalid ID.[/]")
            return
        field = Prompt.ask(
            "Field",
            choices=["company_name", "phone1", "phone2", "phone3", "email", "website", "address", "note"],
        )
        value = Prompt.ask("New value (empty clears it)", default="")
        await cmd_edit(int(contact_id), **{field: value})


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SmartScan visiting card digitizer")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command")

    scan = sub.add_parser("scan", help="Scan a card image")
    scan.add_argument("image", help="Card image (front side)")
    scan.add_argument("--back", help="Back side image")
    scan.add_argument("--force", action="store_true", help="Save even if a duplicate exists")

    lst = sub.add_parser("list", help="List contacts")
    lst.add_argument("--filter", choices=["all", "unsent", "sent"], default="all")
    lst.add_argument("--search", help="Substring of company, phone or email")

    export = sub.add_parser("export", help="Export contacts as .vcf")
    export.add_argument("--filter", choices=["all", "unsent", "sent"], default="all")
    export.add_argument("--out", default=".", help="Output directory")

    delete = sub.add_parser("delete", help="Delete a contact")
    delete.add_argument("id", type=int)
    delete.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")

    mark = sub.add_parser("mark-sent", help="Mark contacts as sent")
    mark.add_argument("ids", type=int, nargs="+")

    add = sub.add_parser("add", help="Add a contact by hand")
    add.add_argument("company", help="Company name")
    add.add_argument("--phone", action="append", dest="phones", help="Phone number (repeat up to 3 times)")
    add.add_argument("--email")
    add.add_argument("--website")
    add.add_argument("--address")
    add.add_argument("--note")

    edit = sub.add_parser("edit", help="Edit a contact (empty value clears a field)")
    edit.add_argument("id", type=int)
    edit.add_argument("--company", dest="company_name")
    for slot in (1, 2, 3):
        edit.add_argument(f"--phone{slot}")
    edit.add_argument("--email")
    edit.add_argument("--website")
    edit.add_argument("--address")
    edit.add_argument("--note")
    edit.add_argument("--sent", choices=["yes", "no"], help="Set or clear the sent flag")

    sub.add_parser("stats", help="Show contact counts")
    return parser


async def run_command(args: argparse.Namespace) -> int:
    if args.command == "scan":
        return await cmd_scan(args.image, back=args.back, force=args.force)
    if args.command == "list":
        return await cmd_list(args.filter, args.search)
    if args.command == "export":
        return await cmd_export(args.filter, args.out)
    if args.command == "delete":
        return await cmd_delete(args.id, yes=args.yes)
    if args.command == "mark-sent":
        return await cmd_mark_sent(args.ids)
    if args.command == "add":
        return await cmd_add(
            args.company,
            phones=args.phones,
            email=args.email,
            website=args.website,
            address=args.address,
            note=args.note,
        )
    if args.command == "edit":
        return await cmd_edit(
            args.id,
            company_name=args.company_name,
            phone1=args.phone1,
            phone2=args.phone2,
            phone3=args.phone3,
            email=args.email,
            website=args.website,
            address=args.address,
            note=args.note,
            sent=None if args.sent is None else args.sent == "yes",
        )
    if args.command == "stats":
        return await cmd_stats()
    raise ValueError(f"Unknown command {args.command!r}")


async def main() -> int:
    """Main entry point with interactive menu."""
    args = build_parser().parse_args()
    configure_logging(args.verbose)

    # Non-interactive use
    if args.command:
        return await run_command(args)

    while True:
        show_menu()
        choice = Prompt.ask(
            "Select",
            choices=list(COMMANDS.keys()) + ["q"],
            default="q",
        )
        if choice == "q":
            console.print("[dim]Bye.[/]")
            return 0
        await run_menu_choice(choice)


if __name__ == "__main__":
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        console.print("\n[dim]Interrupted.[/]")
        sys.exit(130)
