import asyncio

from backend.voicechef.core.narration import NarrationCoordinator
from backend.voicechef.core.session import CookingSession, NarrationFinished, Tick
from backend.voicechef.models.commands import AddFavorite, NextStep, RemoveFavorite, SearchQuery, ShowIngredients
from backend.voicechef.models.session import SearchEffect, ShowIngredientsEffect, TimerStatus
from backend.voicechef.services.favorites import FavoritesStore
from backend.voicechef.services.recipe_catalog import RecipeCatalog


def test_load_starts_on_first_step(make_session, speaker):
    session = make_session()

    state = asyncio.run(session.load_recipe("eggs"))

    assert state.recipe.id == "eggs"
    assert state.step_index == 0
    assert not state.fallback
    assert state.narration.active
    assert speaker.said == [(1, "Bring water to a boil.")]


def test_missing_recipe_falls_back_to_default(make_session):
    session = make_session()

    state = asyncio.run(session.load_recipe("does-not-exist"))

    assert state.recipe.id == "toast"
    assert state.fallback
    assert "does-not-exist" in state.error


def test_voice_transcript_advances(make_session, speaker):
    session = make_session()

    async def run():
        await session.load_recipe("eggs")
        session.submit_transcript("go to the next step please", final=False)
        session.submit_transcript("next step")
        while not session.queue.empty():
            await session.handle(session.queue.get_nowait())

    asyncio.run(run())

    assert session.state.step_index == 1
    assert session.state.timer == TimerStatus(remaining_seconds=5, running=True)
    assert session.timer.running
    assert speaker.hushed == [1]
    assert speaker.said[-1] == (2, "Lower the eggs in.")


def test_timer_expiry_matches_explicit_next_step(make_session):
    ticked = make_session()
    spoken = make_session()

    async def run():
        for session in (ticked, spoken):
            await session.load_recipe("eggs")
            await session.handle(NextStep())
        for _ in range(5):
            await ticked.handle(Tick())
        await spoken.handle(NextStep())

    asyncio.run(run())

    assert ticked.state.step_index == 2
    assert ticked.state == spoken.state
    assert ticked.state.narration.text == "Cool under cold water."


def test_tick_without_timer_changes_nothing(make_session):
    session = make_session()
    published = []
    session.subscribe(published.append)

    async def run():
        await session.load_recipe("eggs")
        before = session.state
        await session.handle(Tick())
        return before

    before = asyncio.run(run())

    assert session.state == before
    assert len(published) == 1


def test_narration_finished_clears_active(make_session):
    session = make_session()

    async def run():
        await session.load_recipe("eggs")
        await session.handle(NarrationFinished(99))
        assert session.state.narration.active
        await session.handle(NarrationFinished(1))

    asyncio.run(run())

    assert not session.state.narration.active


def test_favorite_toggle_persists_twice_and_restores(make_session, favorites):
    session = make_session()

    async def run():
        await session.load_recipe("eggs")
        original = session.state.favorited
        await session.handle(AddFavorite())
        assert favorites.is_favorite("eggs")
        await session.handle(RemoveFavorite())
        return original

    original = asyncio.run(run())

    assert session.state.favorited == original
    assert favorites.calls == [("eggs", True), ("eggs", False)]


def test_intents_reach_listeners(make_session):
    session = make_session()
    intents = []
    session.on_intent(intents.append)

    async def run():
        await session.load_recipe("eggs")
        await session.handle(ShowIngredients())
        await session.handle(SearchQuery(text="pancakes"))

    asyncio.run(run())

    assert intents == [
        ShowIngredientsEffect(ingredients=["2 eggs", "water", "salt"]),
        SearchEffect(query="pancakes"),
    ]


def test_failing_listener_does_not_break_session(make_session):
    session = make_session()

    def broken(state):
        raise RuntimeError("renderer gone")

    session.subscribe(broken)

    async def run():
        await session.load_recipe("eggs")
        await session.handle(NextStep())

    asyncio.run(run())

    assert session.state.step_index == 1


def test_run_loop_serializes_queue(make_session):
    session = make_session(tick_interval=0.01)

    async def run():
        consumer = asyncio.create_task(session.run())
        session.request_load("eggs")
        session.submit_transcript("next step")
        session.start_ticker()
        await asyncio.sleep(0.5)
        await session.close()
        await consumer

    asyncio.run(run())

    # both timed steps ticked out; the last step has no timer
    assert session.state.step_index == 3
    assert session.state.timer == TimerStatus()
    assert not session.timer.running


def test_failed_favorite_write_keeps_session_running(tmp_path, eggs, toast, speaker):
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    favorites = FavoritesStore(str(blocker / "favorites.json"))
    session = CookingSession(
        catalog=RecipeCatalog([eggs]),
        favorites=favorites,
        narrator=NarrationCoordinator(speaker.say, speaker.hush),
        default_recipe=toast,
    )

    async def run():
        consumer = asyncio.create_task(session.run())
        session.request_load("eggs")
        session.submit(AddFavorite())
        session.submit_transcript("next step")
        await session.close()
        await consumer

    asyncio.run(run())

    assert session.state.step_index == 1
    assert not favorites.is_favorite("eggs")
    assert speaker.said[-1] == (2, "Lower the eggs in.")


class BrokenFavorites:
    def is_favorite(self, recipe_id):
        return False

    def set_favorite(self, recipe_id, favorited):
        raise RuntimeError("disk on fire")


def test_run_loop_survives_unexpected_error(eggs, toast, speaker):
    session = CookingSession(
        catalog=RecipeCatalog([eggs]),
        favorites=BrokenFavorites(),
        narrator=NarrationCoordinator(speaker.say, speaker.hush),
        default_recipe=toast,
    )

    async def run():
        consumer = asyncio.create_task(session.run())
        session.request_load("eggs")
        session.submit(AddFavorite())
        session.submit(NextStep())
        await session.close()
        await consumer

    asyncio.run(run())

    assert session.state.step_index == 1
