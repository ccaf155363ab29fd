from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from majorkey.infra.modulos import db


class Setting(db.Model):
    """Preferência alterada em tempo de execução (ex.: destinatário das notas)."""
    __tablename__ = "settings"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self):
        return f"<Setting {self.key}={self.value!r}>"
