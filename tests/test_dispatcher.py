from __future__ import annotations

import pytest

from game_server.commands import CommandKind
from game_server.server import GameServer


@pytest.fixture
def pair(game: GameServer, connect):
    """Dois jogadores conectados, com os buffers limpos"""
    a_id, a = connect()
    b_id, b = connect()
    a.clear()
    b.clear()
    return (a_id, a), (b_id, b)


def test_every_command_kind_has_a_handler(game: GameServer) -> None:
    assert set(game.dispatcher.handlers) == set(CommandKind)


def test_chat_reaches_everyone_with_sender_label(game: GameServer, pair) -> None:
    (a_id, a), (_, b) = pair

    game.on_line(a_id, "hello")

    assert a.lines == [f"[{a_id}]: hello\n"]
    assert b.lines == [f"[{a_id}]: hello\n"]


def test_blank_line_is_not_broadcast(game: GameServer, pair) -> None:
    (a_id, a), (_, b) = pair

    game.on_line(a_id, "   ")

    assert a.sent == b.sent == []


def test_rename_success(game: GameServer, pair) -> None:
    (a_id, a), (_, b) = pair

    game.on_line(a_id, "/name Alice")

    assert game.registry.get(a_id).display_name == "Alice"
    assert a.lines == [
        "[System]: Your nickname is now: Alice\n",
        f"[System]: {a_id} is now known as Alice\n",
    ]
    assert b.lines == [f"[System]: {a_id} is now known as Alice\n"]


def test_second_rename_announces_previous_name(game: GameServer, pair) -> None:
    (a_id, _), (_, b) = pair
    game.on_line(a_id, "/name Alice")
    b.clear()

    game.on_line(a_id, "/name 爱丽丝")

    assert b.lines == ["[System]: Alice is now known as 爱丽丝\n"]


@pytest.mark.parametrize("line", ["/name", "/name    ", "/name bad name!", "/name " + "x" * 21])
def test_rename_rejected_without_mutation(game: GameServer, pair, line: str) -> None:
    (a_id, a), (_, b) = pair

    game.on_line(a_id, line)

    assert game.registry.get(a_id).display_name is None
    assert len(a.lines) == 1
    assert a.lines[0].startswith("[System]: ")
    assert b.sent == []


def test_list_marks_caller(game: GameServer, pair) -> None:
    (a_id, _), (b_id, b) = pair
    game.on_line(a_id, "/name Alice")
    b.clear()

    game.on_line(b_id, "/list")

    assert b.lines == [f"[System]: Online players:\n- Alice\n- {b_id} (you)\n"]


def test_list_is_repeatable(game: GameServer, pair) -> None:
    (_, _), (b_id, b) = pair

    game.on_line(b_id, "/list")
    game.on_line(b_id, "/LIST")

    assert b.lines[0] == b.lines[1]


def test_help_only_goes_to_caller(game: GameServer, pair) -> None:
    (a_id, a), (_, b) = pair

    game.on_line(a_id, "/help")

    assert len(a.lines) == 1
    assert "/name" in a.lines[0] and "/info" in a.lines[0] and "/quit" in a.lines[0]
    assert b.sent == []


def test_ping(game: GameServer, pair) -> None:
    (a_id, a), (_, b) = pair

    game.on_line(a_id, "/ping")

    assert a.lines == ["[System]: pong\n"]
    assert b.sent == []


def test_info_before_and_after_rename(game: GameServer, pair) -> None:
    (a_id, a), _ = pair

    game.on_line(a_id, "/info")
    game.on_line(a_id, "/name Alice")
    a.clear()
    game.on_line(a_id, "/info")

    assert a.lines == [
        "[System]: Server info:\n"
        "- Online players: 2\n"
        f"- Your ID: {a_id}\n"
        "- Your nickname: Alice\n"
    ]


def test_info_uses_placeholder_when_unnamed(game: GameServer, pair) -> None:
    (a_id, a), _ = pair

    game.on_line(a_id, "/info")

    assert a.lines[0].endswith("- Your nickname: Unnamed\n")


def test_quit_says_goodbye_and_disconnects(game: GameServer, pair) -> None:
    (a_id, a), (_, b) = pair

    game.on_line(a_id, "/quit")

    assert a.lines == ["[System]: Goodbye!\n"]
    assert a.closed
    assert a_id not in game.registry
    assert b.lines == [f"[System]: {a_id} left the game\n"]


def test_unknown_command_names_the_token(game: GameServer, pair) -> None:
    (a_id, a), (_, b) = pair

    game.on_line(a_id, "/Dance now")

    assert a.lines == ["[System]: Unknown command: /dance, type /help for available commands\n"]
    assert b.sent == []


def test_failing_handler_replies_and_keeps_session(game: GameServer, pair) -> None:
    (a_id, a), _ = pair

    def _boom(session, command):
        raise RuntimeError("boom")

    game.dispatcher.handlers[CommandKind.PING] = _boom
    game.on_line(a_id, "/ping")

    assert a.lines == ["[System]: Failed to process your message, please try again\n"]
    assert a_id in game.registry
    assert not a.closed


def test_dispatch_does_not_touch_other_identities(game: GameServer, pair) -> None:
    (a_id, _), (b_id, _) = pair

    game.on_line(a_id, "/name Alice")

    assert game.registry.get(b_id).display_name is None
