from typing import Iterable

SYSTEM_SENDER = "System"
LINE_TERMINATOR = "\n"

WELCOME = "Welcome to the game! Use /name to set your nickname"
SERVER_FULL = "Server is full, try again later"
GOODBYE = "Goodbye!"
PONG = "pong"
PROCESSING_ERROR = "Failed to process your message, please try again"
NAME_USAGE = "Please enter a nickname, format: /name <nickname>"

HELP = (
    "Available commands:\n"
    "/name <nickname> - set your nickname\n"
    "/list - list online players\n"
    "/info - show server info\n"
    "/help - show this help\n"
    "/ping - test the connection\n"
    "/quit - leave the game\n"
    "Type anything else to chat"
)


def format_line(sender: str, content: str) -> bytes:
    """Enquadra uma mensagem no formato do protocolo: [remetente]: conteúdo\\n"""
    return f"[{sender}]: {content}{LINE_TERMINATOR}".encode("utf-8")


def joined(label: str) -> str:
    return f"{label} joined the game"


def left(label: str) -> str:
    return f"{label} left the game"


def renamed(old_label: str, new_name: str) -> str:
    return f"{old_label} is now known as {new_name}"


def name_changed(new_name: str) -> str:
    return f"Your nickname is now: {new_name}"


def kicked(reason: str) -> str:
    return f"You have been kicked from the game: {reason}"


def unknown_command(token: str) -> str:
    return f"Unknown command: {token}, type /help for available commands"


def player_list(entries: Iterable[str]) -> str:
    lines = ["Online players:"]
    lines.extend(f"- {entry}" for entry in entries)
    return "\n".join(lines)


def server_info(online: int, session_id: str, name: str) -> str:
    return (
        "Server info:\n"
        f"- Online players: {online}\n"
        f"- Your ID: {session_id}\n"
        f"- Your nickname: {name}"
    )
