"""ConnectionRegistry unit tests."""

import asyncio

from app.api.websocket.manager import ConnectionRegistry


class _Conn:
    def __init__(self, name: str) -> None:
        self.name = name


async def test_add_is_idempotent() -> None:
    registry = ConnectionRegistry()
    conn = _Conn("a")
    await registry.add(conn)
    await registry.add(conn)
    assert await registry.count() == 1


async def test_remove_reports_membership() -> None:
    registry = ConnectionRegistry()
    conn = _Conn("a")
    await registry.add(conn)
    assert await registry.remove(conn) is True
    assert await registry.remove(conn) is False
    assert await registry.count() == 0


async def test_remove_many() -> None:
    registry = ConnectionRegistry()
    conns = [_Conn(str(i)) for i in range(4)]
    for c in conns:
        await registry.add(c)
    await registry.remove_many(conns[:3])
    assert await registry.members() == [conns[3]]


async def test_for_each_tolerates_membership_changes() -> None:
    """fn may remove connections while iteration continues over the snapshot."""
    registry = ConnectionRegistry()
    conns = [_Conn(str(i)) for i in range(3)]
    for c in conns:
        await registry.add(c)
    visited: list[str] = []

    async def visit(conn: _Conn) -> None:
        visited.append(conn.name)
        await registry.remove(conn)

    await registry.for_each(visit)
    assert sorted(visited) == ["0", "1", "2"]
    assert await registry.count() == 0


async def test_concurrent_add_remove() -> None:
    registry = ConnectionRegistry()
    conns = [_Conn(str(i)) for i in range(100)]
    await asyncio.gather(*(registry.add(c) for c in conns))
    await asyncio.gather(*(registry.remove(c) for c in conns[::2]))
    assert await registry.count() == 50
