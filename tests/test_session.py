import asyncio
from random import Random

import pytest

from heistforge.domain.exceptions import IncompleteConfig, InvalidTransition, SessionLocked
from heistforge.domain.session import SessionPhase, SessionRegistry, SoloSession, parse_item_keys
from heistforge.domain.types import CrimeMode, ItemKey, MinigameKind, MinigameResult, Risk


def _ready_session(**kwargs) -> SoloSession:
    session = SoloSession(user_id=1, **kwargs)
    session.set_mode(CrimeMode.STANDARD)
    session.set_risk(Risk.MEDIUM)
    return session


def test_select_items_drops_locked_unknown_and_surplus():
    session = SoloSession(user_id=1)
    session.select_items(["gloves", "bogus", "lockpick", "lockpick", "laptop"], pp=5)
    assert session.config.items == [ItemKey.PRO_GLOVES, ItemKey.LOCKPICK_SET]

    session.select_items(list(ItemKey), pp=100)
    assert len(session.config.items) == 3

    session.select_items(list(ItemKey), pp=100, max_items=1)
    assert session.config.items == [ItemKey.HACKER_LAPTOP]


def test_parse_item_keys_skips_unknown():
    assert parse_item_keys(["smoke", "nope", ItemKey.TOOLKIT]) == [
        ItemKey.SMOKE_GRENADE,
        ItemKey.TOOLKIT,
    ]


def test_start_requires_mode_and_risk():
    session = SoloSession(user_id=1)
    session.set_mode(CrimeMode.SHADOW)
    with pytest.raises(IncompleteConfig):
        session.start(rng=Random(1), now=0.0)
    assert session.phase is SessionPhase.CONFIG


def test_start_snapshots_config_and_forces_simon():
    session = _ready_session()
    session.select_items(["lockpick"], pp=0)
    spec = session.start(rng=Random(1), now=0.0)

    assert session.phase is SessionPhase.IN_SIMON
    assert spec.length == 4
    assert len(session.attempt.sequence) == 4
    assert session.base_config.minigame is MinigameKind.SIMON
    assert session.config.minigame is MinigameKind.QTE
    assert session.reveals_left == 1
    assert session.reveal_until == pytest.approx(3.0)


def test_configuration_is_frozen_once_running():
    session = _ready_session()
    session.start(rng=Random(1), now=0.0)
    with pytest.raises(InvalidTransition):
        session.set_mode(CrimeMode.SZALONY)
    with pytest.raises(InvalidTransition):
        session.select_items(["lockpick"], pp=0)
    with pytest.raises(InvalidTransition):
        session.start(rng=Random(1), now=1.0)
    assert session.active_config().mode is CrimeMode.STANDARD


def test_input_is_ignored_during_preview():
    session = _ready_session()
    session.start(rng=Random(5), now=0.0)
    first = session.attempt.sequence[0]
    assert session.press(first, now=1.0) is None
    assert session.attempt.cursor == 0

    assert session.press(first, now=10.0) is None
    assert session.attempt.cursor == 1


def test_full_sequence_wins_the_minigame():
    session = _ready_session()
    session.start(rng=Random(9), now=0.0)
    result = None
    for symbol in session.attempt.sequence:
        result = session.press(symbol.lower(), now=30.0)
    assert result == MinigameResult.success()
    assert session.minigame_result() == MinigameResult.success()


def test_wrong_symbol_fails_the_minigame():
    session = _ready_session()
    session.start(rng=Random(9), now=0.0)
    expected = session.attempt.sequence[0]
    wrong = next(s for s in "ABCD" if s != expected)
    assert session.press(wrong, now=30.0) == MinigameResult.fail()


def test_unfinished_minigame_counts_as_not_played():
    session = _ready_session()
    assert session.minigame_result() == MinigameResult.not_played()
    session.start(rng=Random(2), now=0.0)
    session.press(session.attempt.sequence[0], now=30.0)
    assert session.minigame_result() == MinigameResult.not_played()


def test_reveals_are_limited_by_risk():
    session = _ready_session()
    session.start(rng=Random(3), now=0.0)
    assert not session.reveal(now=1.0)
    assert session.reveal(now=10.0)
    assert session.revealing(now=11.0)
    assert session.reveals_left == 0
    assert not session.reveal(now=60.0)


def test_preview_uses_loadout_time_bonus():
    session = _ready_session()
    session.select_items(["gloves"], pp=5)
    session.start(rng=Random(3), now=0.0)
    assert session.preview_seconds() == pytest.approx(3.152)


def test_running_session_cannot_be_reset():
    session = _ready_session()
    session.start(rng=Random(3), now=0.0)
    with pytest.raises(SessionLocked):
        session.reset()


def test_resolved_session_only_resets():
    session = _ready_session()
    session.start(rng=Random(3), now=0.0)
    session.phase = SessionPhase.RESOLVED
    with pytest.raises(InvalidTransition):
        session.ensure_resolvable()
    with pytest.raises(InvalidTransition):
        session.press("A", now=30.0)
    session.reset()
    assert session.phase is SessionPhase.CONFIG
    assert session.config.mode is None


@pytest.mark.asyncio()
async def test_registry_creates_one_session_per_player():
    registry = SessionRegistry()
    sessions = await asyncio.gather(*(registry.get_or_create(7) for _ in range(20)))
    assert all(session is sessions[0] for session in sessions)
    assert len(registry) == 1

    fresh = await registry.replace(7)
    assert fresh is not sessions[0]
    assert registry.get(7) is fresh
    assert registry.lock_for(7) is registry.lock_for(7)
