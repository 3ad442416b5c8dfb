"""
Tests for typeahead suggestions: the generator and the interactive engine.

The engine tests drive an event loop with asyncio.run() and use a zero or tiny
debounce so they run quickly.
"""

import asyncio

import pytest

from recipefind.suggestions import SuggestionEngine, get_search_suggestions


class TestGetSearchSuggestions:
    """Test cases for the synchronous generator."""

    def test_titles_tags_and_cuisines(self):
        """Test that matching titles, tags and cuisines are offered in order."""
        assert get_search_suggestions("ital") == ["italian", "Italian"]

    def test_deduplicated(self):
        """Test that the same string is offered only once."""
        suggestions = get_search_suggestions("vegetarian")
        assert suggestions == ["vegetarian"]

    def test_case_insensitive(self):
        assert get_search_suggestions("CURRY") == get_search_suggestions("curry")
        assert "curry" in get_search_suggestions("CURRY")

    def test_capped_at_eight(self):
        """Test the default cap of eight suggestions."""
        assert len(get_search_suggestions("a")) == 8

    def test_custom_limit(self):
        assert len(get_search_suggestions("a", limit=3)) == 3

    def test_blank_query(self):
        assert get_search_suggestions("  ") == []

    def test_no_match(self):
        assert get_search_suggestions("zzzxqy") == []


def make_engine(session, auth=None, fetch=None, debounce=0.0):
    return SuggestionEngine(session, auth=auth, fetch=fetch, debounce=debounce, min_fetch_length=3)


class TestShortQueries:
    """Test cases for the local (no fetch) path."""

    def test_short_query_uses_local_suggestions(self, session):
        """Test that 1-2 characters show local suggestions without a fetch."""
        calls = []

        async def fetch(query):
            calls.append(query)
            return []

        engine = make_engine(session, fetch=fetch)
        engine.on_input("it")
        assert engine.source == "local"
        assert engine.visible is True
        assert "italian" in engine.suggestions
        assert engine.loading is False
        assert calls == []

    def test_empty_input_shows_recent_history(self, auth, session):
        """Test that an empty box offers up to five recent searches."""
        asyncio.run(auth.register("Cook", "cook@example.com", "pw"))
        for q in ["a1", "a2", "a3", "a4", "a5", "a6"]:
            auth.add_to_search_history(q)

        engine = make_engine(session)
        engine.on_input("")
        assert engine.source == "history"
        assert engine.suggestions == ["a6", "a5", "a4", "a3", "a2"]
        assert engine.visible is True

    def test_empty_input_without_history_is_hidden(self, session):
        engine = make_engine(session)
        engine.on_input("   ")
        assert engine.visible is False
        assert engine.suggestions == []


class TestDebouncedFetch:
    """Test cases for the asynchronous fetch path."""

    def test_long_query_fetches_after_debounce(self, session):
        """Test that three or more characters trigger a fetch."""
        async def scenario():
            engine = make_engine(session, debounce=0.01)
            engine.on_input("cur")
            assert engine.loading is True
            await engine.wait()
            return engine

        engine = asyncio.run(scenario())
        assert engine.source == "remote"
        assert engine.loading is False
        assert engine.visible is True
        assert "curry" in engine.suggestions

    def test_only_last_keystroke_fetches(self, session):
        """Test that rapid typing issues a single fetch for the final text."""
        calls = []

        async def fetch(query):
            calls.append(query)
            return [query.upper()]

        async def scenario():
            engine = make_engine(session, fetch=fetch, debounce=0.05)
            for text in ["spa", "spag", "spagh"]:
                engine.on_input(text)
                await asyncio.sleep(0)
            await engine.wait()
            return engine

        engine = asyncio.run(scenario())
        assert calls == ["spagh"]
        assert engine.suggestions == ["SPAGH"]

    def test_superseded_fetch_never_applies(self, session):
        """Test that fetch A, then B before A resolves, leaves only B's result."""
        release = {}

        async def fetch(query):
            release[query] = asyncio.Event()
            await release[query].wait()
            return [f"result for {query}"]

        async def scenario():
            engine = make_engine(session, fetch=fetch, debounce=0)
            engine.on_input("aaa")
            await asyncio.sleep(0.01)  # A is now waiting inside fetch
            engine.on_input("bbb")
            await asyncio.sleep(0.01)
            release["aaa"].set()
            release["bbb"].set()
            await engine.wait()
            await asyncio.sleep(0.01)
            return engine

        engine = asyncio.run(scenario())
        assert engine.suggestions == ["result for bbb"]

    def test_stale_response_discarded_by_generation(self, session):
        """Test that a fetch that ignores cancellation still cannot apply stale data."""
        async def stubborn_fetch(query):
            # Finishes even when cancelled, like a response already in flight.
            try:
                await asyncio.sleep(0.02 if query == "aaa" else 0.04)
            except asyncio.CancelledError:
                pass
            return [f"result for {query}"]

        async def scenario():
            engine = make_engine(session, fetch=stubborn_fetch, debounce=0)
            engine.on_input("aaa")
            await asyncio.sleep(0.005)
            engine.on_input("bbb")
            await asyncio.sleep(0.1)
            return engine

        engine = asyncio.run(scenario())
        assert engine.suggestions == ["result for bbb"]
        assert engine.generation == 2

    def test_clear_aborts_in_flight_fetch(self, session):
        """Test that clearing the box prevents a pending response from applying."""
        async def fetch(query):
            await asyncio.sleep(0.02)
            return ["late"]

        async def scenario():
            engine = make_engine(session, fetch=fetch, debounce=0)
            engine.on_input("late")
            await asyncio.sleep(0.005)
            engine.clear()
            await asyncio.sleep(0.05)
            return engine

        engine = asyncio.run(scenario())
        assert engine.suggestions == []
        assert engine.visible is False
        assert engine.loading is False

    def test_short_query_cancels_pending_fetch(self, session):
        """Test that backspacing below the threshold cancels the fetch."""
        calls = []

        async def fetch(query):
            calls.append(query)
            return ["remote"]

        async def scenario():
            engine = make_engine(session, fetch=fetch, debounce=0.02)
            engine.on_input("ita")
            engine.on_input("it")
            await asyncio.sleep(0.05)
            return engine

        engine = asyncio.run(scenario())
        assert calls == []
        assert engine.source == "local"

    def test_fetch_error_clears_suggestions(self, session):
        """Test that a failing fetch does not raise into the caller."""
        async def fetch(query):
            raise RuntimeError("backend down")

        async def scenario():
            engine = make_engine(session, fetch=fetch)
            engine.on_input("pasta")
            await engine.wait()
            return engine

        engine = asyncio.run(scenario())
        assert engine.suggestions == []
        assert engine.loading is False


class TestNavigationDuringFetch:
    """Test cases for keyboard state when a fetch resolves."""

    def test_arriving_results_restore_typed_text(self, session):
        """Test that a highlight made while a fetch was pending is reset with the text."""
        async def fetch(query):
            return ["Greek Salad", "Greek"]

        async def scenario():
            engine = make_engine(session, fetch=fetch)
            engine.on_input("gr")
            engine.on_input("gre")
            engine.move_down()
            assert engine.text == "Greek Salad"
            await engine.wait()
            return engine

        engine = asyncio.run(scenario())
        assert engine.highlighted == -1
        assert engine.text == "gre"
        engine.move_up()
        assert engine.text == "gre"
        engine.move_down()
        assert engine.text == "Greek Salad"

    def test_failed_fetch_resets_highlight(self, session):
        """Test that a failing fetch leaves no highlight into the emptied list."""
        async def fetch(query):
            raise RuntimeError("backend down")

        async def scenario():
            engine = make_engine(session, fetch=fetch)
            engine.on_input("gr")
            engine.on_input("gre")
            engine.move_down()
            await engine.wait()
            return engine

        engine = asyncio.run(scenario())
        assert engine.highlighted == -1
        assert engine.text == "gre"
        engine.move_up()
        assert engine.commit() == "gre"

    def test_long_query_without_running_loop(self, session):
        """Test that a failed schedule does not leave the engine loading."""
        engine = make_engine(session)
        with pytest.raises(RuntimeError):
            engine.on_input("pasta")
        assert engine.loading is False


class TestKeyboardNavigation:
    """Test cases for arrow-key navigation and selection."""

    def make_local(self, session, auth=None):
        engine = make_engine(session, auth=auth)
        engine.on_input("gr")
        assert engine.suggestions == ["Greek Salad", "Greek", "Thai Green Curry"]
        return engine

    def test_down_and_up_restore_typed_text(self, session):
        """Test that moving above the first suggestion restores the typed text."""
        engine = self.make_local(session)
        engine.move_down()
        assert engine.highlighted == 0
        assert engine.text == "Greek Salad"
        engine.move_down()
        engine.move_down()
        assert engine.text == "Thai Green Curry"
        engine.move_down()  # stays on the last suggestion
        assert engine.highlighted == 2
        engine.move_up()
        engine.move_up()
        engine.move_up()
        assert engine.highlighted == -1
        assert engine.text == "gr"
        assert engine.typed == "gr"

    def test_navigation_never_fetches(self, session):
        calls = []

        async def fetch(query):
            calls.append(query)
            return ["pasta", "pastry"]

        async def scenario():
            engine = make_engine(session, fetch=fetch)
            engine.on_input("pas")
            await engine.wait()
            engine.move_down()
            engine.move_down()
            engine.move_up()
            await asyncio.sleep(0.01)
            return engine

        engine = asyncio.run(scenario())
        assert calls == ["pas"]
        assert engine.text == "pasta"
        assert engine.generation == 1

    def test_commit_highlighted_records_history(self, auth, session):
        asyncio.run(auth.register("Cook", "cook@example.com", "pw"))
        engine = self.make_local(session, auth)
        engine.move_down()

        assert engine.commit() == "Greek Salad"
        assert engine.visible is False
        assert session.user.search_history == ["Greek Salad"]

    def test_commit_without_highlight_uses_typed_text(self, auth, session):
        asyncio.run(auth.register("Cook", "cook@example.com", "pw"))
        engine = make_engine(session, auth=auth)
        engine.on_input(" gr ")
        assert engine.commit() == "gr"
        assert session.user.search_history == ["gr"]

    def test_select_by_click(self, auth, session):
        asyncio.run(auth.register("Cook", "cook@example.com", "pw"))
        engine = self.make_local(session, auth)
        assert engine.select(5) is None
        assert engine.select(1) == "Greek"
        assert session.user.search_history == ["Greek"]

    def test_blank_commit_records_nothing(self, auth, session):
        asyncio.run(auth.register("Cook", "cook@example.com", "pw"))
        engine = make_engine(session, auth=auth)
        engine.on_input("   ")
        assert engine.commit() is None
        assert session.user.search_history == []

    def test_close_and_focus(self, session):
        engine = self.make_local(session)
        engine.move_down()
        engine.close()
        assert engine.visible is False
        assert engine.text == "gr"
        engine.focus()
        assert engine.visible is True
