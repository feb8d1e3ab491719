"""
Walkthrough of capbox capability assembly.

This demo showcases:
- Registering capability installers (plain calls and the decorator form)
- Assembling sandboxes with an explicit selector and with the wildcard
- Independent instances per assembly
- A module-level counter shared by every sandbox (the "private counter" idiom)
- Unknown-capability and member-collision failures
- Structured logging of registry and assembly events
"""

import itertools
import logging

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from capbox import (
    ALL,
    AssemblerLogger,
    AssemblyPolicy,
    CollisionPolicy,
    MemberCollisionError,
    UnknownCapabilityError,
    configure_structlog,
    create_assembler,
    members,
)

console = Console()

# Collisions and failures only; registry and assembly INFO events are filtered out
configure_structlog(level=logging.WARNING)
logger = AssemblerLogger("capbox.demo")

_event_ids = itertools.count(1)

assembler = create_assembler(logger=logger)
registry = assembler.registry


@registry.capability("dom")
def dom(sandbox):
    """DOM lookups by CSS-style selector."""
    sandbox.get_element = lambda selector: f"<element {selector}>"
    sandbox.get_style = lambda element, prop: f"{element}.style.{prop}"


@registry.capability("event")
def event(sandbox):
    """Event attachment with ids drawn from a shared counter."""

    def attach_event(element, name):
        return f"{name}#{next(_event_ids)} on {element}"

    sandbox.attach_event = attach_event


def ajax(sandbox):
    """Fake XHR helper."""
    sandbox.make_request = lambda url: {"url": url, "status": 200}


registry.register("ajax", ajax)


def show_members(title, sandbox):
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("Member", style="cyan")
    table.add_column("Value", style="dim")
    for name, value in sorted(members(sandbox).items()):
        table.add_row(name, repr(value))
    console.print(table)


def demo_registry():
    console.print(Panel("[bold]Demo: Registered capabilities[/bold]", style="magenta", expand=False))
    table = Table(box=box.ROUNDED)
    table.add_column("Capability", style="cyan")
    table.add_column("Installer")
    table.add_column("Summary", style="green")
    for info in registry.describe():
        table.add_row(info.name, info.installer, info.summary)
    console.print(table)


def demo_selected():
    console.print(Panel("[bold]Demo: Explicit selector[/bold]", style="magenta", expand=False))

    def main(sandbox):
        show_members("sandbox(['event'])", sandbox)
        console.print(sandbox.attach_event("#nav", "click"))
        console.print(f"has get_element: {hasattr(sandbox, 'get_element')}")

    assembler.assemble(["event"], main)


def demo_wildcard():
    console.print(Panel("[bold]Demo: Wildcard selector[/bold]", style="magenta", expand=False))

    def main(sandbox):
        show_members("sandbox('*')", sandbox)
        element = sandbox.get_element("#nav")
        console.print(sandbox.attach_event(element, "hover"))
        console.print(sandbox.make_request("/api/items"))

    assembler.assemble(ALL, main)
    report = assembler.last_report
    console.print(
        f"[green]✓ Assembly #{report.sequence}: {report.member_count} members "
        f"from {len(report.capabilities)} capabilities in {report.duration_ms:.3f} ms[/green]"
    )


def demo_failures():
    console.print(Panel("[bold]Demo: Failures[/bold]", style="magenta", expand=False))

    try:
        assembler.assemble(["dom", "storage"], lambda sandbox: console.print("never printed"))
    except UnknownCapabilityError as e:
        console.print(f"[red]✗ {e}[/red]")

    strict = create_assembler(
        policy=AssemblyPolicy(collision_policy=CollisionPolicy.REJECT), logger=logger
    )
    strict.registry.register("dom", dom)
    strict.registry.register("legacy_dom", lambda sandbox: setattr(sandbox, "get_element", None))
    try:
        strict.assemble(ALL, lambda sandbox: console.print("never printed"))
    except MemberCollisionError as e:
        console.print(f"[red]✗ {e}[/red]")


if __name__ == "__main__":
    demo_registry()
    demo_selected()
    demo_wildcard()
    demo_failures()
    console.print(f"\n[bold]Sandboxes assembled:[/bold] {assembler.assembled_count}")
