"""
Integration Tests

End-to-end tests that run the server with a real mutation delay and
drive it from several clients at once.

Run with: python -m pytest tests/test_integration.py -v
"""

import asyncio
import json
import pytest

MUTATION_DELAY = 0.3


@pytest.fixture
def mutation_delay() -> float:
    """Run the server for this module with artificial mutation latency."""
    return MUTATION_DELAY


def body(response: str):
    assert response.startswith("OK "), response
    return json.loads(response[3:])


@pytest.mark.asyncio
@pytest.mark.integration
class TestEndToEnd:
    """End-to-end integration tests."""

    async def test_complete_workflow(self, server, client_factory):
        """Test a complete create/read/update/filter workflow."""
        async with client_factory() as client:
            groceries = body(await client.send_command("ADD_TODO shopping buy milk"))
            chores = body(await client.send_command("ADD_TODO chore walk the dog"))

            assert body(await client.send_command(f"TODO {groceries['id']}")) == groceries
            assert len(body(await client.send_command("TODOS"))) == 2

            updated = body(await client.send_command(
                f"UPDATE_TODO {chores['id']} shopping buy dog food"
            ))
            assert updated["id"] == chores["id"]

            shopping = body(await client.send_command("TODOS_BY_TYPE shopping"))
            assert sorted(t["description"] for t in shopping) == ["buy dog food", "buy milk"]
            assert body(await client.send_command("TODOS_BY_TYPE chore")) == []

    async def test_reads_not_delayed_by_pending_mutation(self, server, client_factory):
        """Test a read on another connection answers while a mutation is in flight."""
        async with client_factory() as writer_client, client_factory() as reader_client:
            pending = asyncio.create_task(writer_client.send_command("ADD_TODO foo slow"))
            await asyncio.sleep(0.05)

            loop = asyncio.get_running_loop()
            started = loop.time()
            assert await reader_client.send_command("TODOS") == "OK []"
            assert loop.time() - started < MUTATION_DELAY

            created = body(await pending)
            assert body(await reader_client.send_command(f"TODO {created['id']}")) == created

    async def test_concurrent_mutations_overlap(self, server, client_factory):
        """Test mutations from separate clients wait out their delays in parallel."""
        clients = [client_factory() for _ in range(5)]
        for client in clients:
            await client.connect()

        try:
            loop = asyncio.get_running_loop()
            started = loop.time()
            responses = await asyncio.gather(*[
                client.send_command(f"ADD_TODO foo todo{i}")
                for i, client in enumerate(clients)
            ])
            elapsed = loop.time() - started
        finally:
            for client in clients:
                await client.disconnect()

        assert all(r.startswith("OK ") for r in responses)
        assert elapsed < MUTATION_DELAY * 3
        assert server.store.size() == 5

    async def test_failure_after_delay_leaves_store_unchanged(self, server, client_factory):
        """Test the fail sentinel errors only after the full delay."""
        async with client_factory() as client:
            loop = asyncio.get_running_loop()
            started = loop.time()
            response = await client.send_command("ADD_TODO fail rollback me")

            assert response == "ERROR failed on type == fail"
            assert loop.time() - started >= MUTATION_DELAY - 0.01
            assert await client.send_command("TODOS") == "OK []"
