"""Serviço de captura de notas.

Uma nota é acrescida ao histórico local e enviada por email para o endereço
configurado. Se o envio falhar, a nota permanece no histórico marcada como não
enviada, e o texto continua disponível para o chamador corrigir e reenviar.

Classes principais:
    - NoteService: registro, envio e consulta do histórico de notas
"""
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from flask import current_app
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from majorkey.infra.modulos import db
from majorkey.models.note import Note
from .email_providers import EmailProviderError
from .email_service import EmailService
from .settings_service import SettingsService

DEFAULT_SUBJECT_PREFIX = "[Major 🔑]"
SUBJECT_TAIL_LENGTH = 200  # O assunto aceita no máximo 255 caracteres


class NoteOperationResult(Enum):
    SENT = "sent"
    VALIDATION_ERROR = "validation_error"
    SEND_ERROR = "send_error"
    DATABASE_ERROR = "database_error"


@dataclass
class NoteResult:
    """Resultado do registro e envio de uma nota."""
    status: NoteOperationResult
    message: str
    note: Optional[Note] = None

    @property
    def ok(self) -> bool:
        return self.status == NoteOperationResult.SENT


def build_subject(text: str, prefix: str = DEFAULT_SUBJECT_PREFIX) -> str:
    """Monta o assunto com o prefixo e os últimos 200 caracteres da nota."""
    return f"{prefix} {text[-SUBJECT_TAIL_LENGTH:]}"


class NoteService:
    """Serviço para registro e envio de notas.

    Utiliza uma sessão SQLAlchemy configurável para permitir uso em diferentes contextos.
    """

    _default_session = db.session

    @classmethod
    def submit(cls,
               text: Optional[str],
               email_service: Optional[EmailService] = None,
               session=None) -> NoteResult:
        """Registra a nota no histórico e a envia por email.

        Args:
            text (typing.Optional[str]): Texto da nota.
            email_service (typing.Optional[EmailService]): Serviço de email; se None, usa a
                extensão ``email_service`` da aplicação.
            session: Sessão SQLAlchemy opcional. Se None, usa a sessão padrão da classe.

        Returns:
            NoteResult: SENT, VALIDATION_ERROR (texto vazio), SEND_ERROR (falha do provedor,
            nota mantida como não enviada) ou DATABASE_ERROR.
        """
        if session is None:
            session = cls._default_session
        if email_service is None:
            email_service = current_app.extensions['email_service']

        if text is None or not text.strip():
            return NoteResult(status=NoteOperationResult.VALIDATION_ERROR,
                              message="A nota não pode estar vazia.")

        note = Note(text=text, sent=False)
        try:
            session.add(note)
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            current_app.logger.error("Erro ao registrar nota: %s" % (str(e),))
            return NoteResult(status=NoteOperationResult.DATABASE_ERROR,
                              message="Erro ao registrar a nota no histórico.")

        config = current_app.config
        try:
            result = email_service.send_email(
                    to=SettingsService.get_recipient(session),
                    to_name=config.get('NOTES_RECIPIENT_NAME'),
                    subject=build_subject(text,
                                          config.get('NOTES_SUBJECT_PREFIX',
                                                     DEFAULT_SUBJECT_PREFIX)),
                    text_body=text)
        except (EmailProviderError, ValueError) as e:
            note.last_error = str(e)
            current_app.logger.warning("Nota %s não enviada: %s" % (note.id, str(e)))
            return cls._commit_outcome(session, note, NoteResult(
                    status=NoteOperationResult.SEND_ERROR,
                    message=str(e),
                    note=note))

        note.sent = True
        note.provider = result.provider
        note.message_id = result.message_id
        current_app.logger.info("Nota %s enviada via %s" % (note.id, result.provider))
        return cls._commit_outcome(session, note, NoteResult(
                status=NoteOperationResult.SENT,
                message="Nota enviada com sucesso!",
                note=note))

    @staticmethod
    def _commit_outcome(session, note: Note, result: NoteResult) -> NoteResult:
        """Grava o resultado do envio na nota; falhas do banco viram DATABASE_ERROR."""
        note_id = note.id
        try:
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            current_app.logger.error(
                    "Erro ao registrar o resultado do envio da nota %s: %s" % (note_id, str(e)))
            return NoteResult(status=NoteOperationResult.DATABASE_ERROR,
                              message="Erro ao registrar o resultado do envio no histórico.",
                              note=note)
        return result

    @classmethod
    def history(cls, limit: int = 20, session=None) -> List[Note]:
        """Lista as notas mais recentes primeiro.

        Args:
            limit (int): Quantidade máxima de notas.
            session: Sessão SQLAlchemy opcional. Se None, usa a sessão padrão da classe.

        Returns:
            typing.List[Note]: Notas do histórico.
        """
        if session is None:
            session = cls._default_session
        stmt = select(Note).order_by(Note.id.desc()).limit(limit)
        return list(session.execute(stmt).scalars().all())
