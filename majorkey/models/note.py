from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import Boolean, DateTime, func, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from majorkey.infra.modulos import db


class Note(db.Model):
    """Nota registrada no histórico local.

    O histórico é apenas acrescido: uma nota nunca é removida, e uma nota cujo envio
    falhou permanece com ``sent`` falso e a descrição do erro em ``last_error``.
    """
    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True),
                                                 server_default=func.now())
    sent: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    provider: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    message_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    last_error: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id'        : self.id,
            'text'      : self.text,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'sent'      : bool(self.sent),
            'provider'  : self.provider,
            'message_id': self.message_id,
            'last_error': self.last_error,
        }

    def __repr__(self):
        return f"<Note id={self.id} sent={self.sent}>"
