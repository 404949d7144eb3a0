"""Play solo heists in a terminal against an in-memory HeistForge app."""

from __future__ import annotations

import asyncio
import time

from rich.console import Console
from rich.prompt import Confirm, Prompt

from heistforge import CrimeMode, HeistApp, HeistForgeConfig, Risk
from heistforge.domain import events
from heistforge.domain.items import available_items, item_name

console = Console()
USER_ID = 1


async def announce_unlock(payload: events.ItemsUnlocked) -> None:
    names = ", ".join(item_name(item) for item in payload.items)
    console.print(f"[green]Unlocked:[/green] {names}")


async def play_round(app: HeistApp) -> None:
    service = app.heists
    session = await service.open_session(USER_ID)
    profile = await service.profile(USER_ID)
    console.print(
        f"Balance {profile.balance} • heat {profile.heat} • skill {profile.thief_skill} • pp {profile.pp}"
    )

    mode = Prompt.ask(
        "Mode",
        choices=[m.value for m in CrimeMode],
        default=(session.config.mode or CrimeMode.STANDARD).value,
    )
    risk = Prompt.ask(
        "Risk",
        choices=[r.value for r in Risk],
        default=(session.config.risk or Risk.MEDIUM).value,
    )
    await service.set_mode(USER_ID, CrimeMode(mode))
    await service.set_risk(USER_ID, Risk(risk))

    unlocked = available_items(profile.pp)
    console.print("Items: " + ", ".join(f"{item.value} ({item_name(item)})" for item in unlocked))
    picks = Prompt.ask("Loadout (space separated)", default="")
    await service.select_items(USER_ID, picks.split())

    forecast = await service.forecast(USER_ID)
    console.print(
        f"Chance {forecast.chance_if_success:.0f}% if you nail the sequence, "
        f"{forecast.chance_if_fail:.0f}% if you slip • loot {forecast.reward_min}-{forecast.reward_max}"
    )
    console.print(f"Heat: {forecast.heat_summary}")

    session = await service.start(USER_ID)
    console.print(f"Memorise: [bold]{' '.join(session.attempt.sequence)}[/bold]")
    time.sleep(session.preview_seconds())
    console.clear()

    while not session.attempt.finished:
        symbol = Prompt.ask("Next symbol", choices=["A", "B", "C", "D", "?"], case_sensitive=False)
        if symbol == "?":
            if await service.reveal(USER_ID):
                console.print(f"[bold]{' '.join(session.attempt.sequence)}[/bold]")
                time.sleep(session.preview_seconds())
                console.clear()
            else:
                console.print("No reveals left.")
            continue
        await service.press(USER_ID, symbol)

    view = await service.resolve(USER_ID)
    colour = "green" if view.outcome.success else "red"
    console.print(
        f"[{colour}]{'Success' if view.outcome.success else 'Busted'}[/{colour}] "
        f"{view.outcome.amount_final:+d} • heat +{view.outcome.heat_delta} • balance {view.after.balance}"
    )


async def main() -> None:
    app = HeistApp(HeistForgeConfig.from_env())
    await app.init_backend()
    app.event_bus.subscribe(events.ITEMS_UNLOCKED, announce_unlock)
    try:
        while True:
            await play_round(app)
            if not Confirm.ask("Another job?", default=True):
                break
    finally:
        await app.close()


if __name__ == "__main__":
    asyncio.run(main())
