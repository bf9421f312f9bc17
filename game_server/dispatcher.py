"""
dispatcher.py - Execução das linhas recebidas dos jogadores
Um handler por CommandKind; falhas viram resposta ao jogador, nunca derrubam a sessão
"""
from typing import Callable, Dict

from .broadcaster import Broadcaster
from .commands import Chat, Command, CommandKind, InvalidNameError, parse_line, validate_display_name
from .sessions import Session, SessionRegistry
from . import messages
from .logger import get_logger

logger = get_logger("dispatcher")


class CommandDispatcher:
    def __init__(
        self,
        registry: SessionRegistry,
        broadcaster: Broadcaster,
        disconnect: Callable[[str], bool],
    ):
        self.registry = registry
        self.broadcaster = broadcaster
        self._disconnect = disconnect
        self.handlers: Dict[CommandKind, Callable[[Session, Command], None]] = {
            CommandKind.NAME: self.handle_name,
            CommandKind.LIST: self.handle_list,
            CommandKind.HELP: self.handle_help,
            CommandKind.QUIT: self.handle_quit,
            CommandKind.PING: self.handle_ping,
            CommandKind.INFO: self.handle_info,
            CommandKind.UNKNOWN: self.handle_unknown,
        }

    def dispatch(self, session: Session, line: str) -> None:
        """Processa uma linha (já sem espaços nas pontas) de uma sessão"""
        try:
            parsed = parse_line(line)
            if isinstance(parsed, Chat):
                self.handle_chat(session, parsed)
            else:
                logger.debug(f"Session {session.id}: command {parsed.token}")
                self.handlers[parsed.kind](session, parsed)
        except Exception as e:
            logger.exception(f"Session {session.id}: error processing line: {e}")
            self.reply(session, messages.PROCESSING_ERROR)

    def reply(self, session: Session, text: str) -> bool:
        return self.broadcaster.send_to(session.id, messages.SYSTEM_SENDER, text)

    def handle_chat(self, session: Session, chat: Chat) -> None:
        if not chat.text:
            return
        self.broadcaster.broadcast_all(session.label, chat.text)

    def handle_name(self, session: Session, command: Command) -> None:
        try:
            new_name = validate_display_name(command.argument)
        except InvalidNameError as e:
            logger.info(f"Session {session.id}: rename rejected ({e})")
            self.reply(session, str(e))
            return

        old_label = session.label
        session.display_name = new_name
        logger.info(f"Session {session.id}: renamed {old_label!r} -> {new_name!r}")
        self.reply(session, messages.name_changed(new_name))
        self.broadcaster.broadcast_all(messages.SYSTEM_SENDER, messages.renamed(old_label, new_name))

    def handle_list(self, session: Session, command: Command) -> None:
        entries = [
            f"{other.label} (you)" if other.id == session.id else other.label
            for other in self.registry.snapshot()
        ]
        self.reply(session, messages.player_list(entries))

    def handle_help(self, session: Session, command: Command) -> None:
        self.reply(session, messages.HELP)

    def handle_quit(self, session: Session, command: Command) -> None:
        self.reply(session, messages.GOODBYE)
        self._disconnect(session.id)

    def handle_ping(self, session: Session, command: Command) -> None:
        self.reply(session, messages.PONG)

    def handle_info(self, session: Session, command: Command) -> None:
        self.reply(session, messages.server_info(self.registry.count(), session.id, session.presence_name))

    def handle_unknown(self, session: Session, command: Command) -> None:
        self.reply(session, messages.unknown_command(command.token))
