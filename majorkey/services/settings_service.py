"""Preferências do usuário persistidas no banco.

O destinatário das notas pode ser trocado em tempo de execução; enquanto nenhum
valor for gravado vale a chave ``NOTES_RECIPIENT`` da configuração.
"""
from typing import Optional

from flask import current_app

from majorkey.infra.modulos import db
from majorkey.models.setting import Setting
from .email_service import EmailValidationService

RECIPIENT_KEY = 'notes_recipient'


class SettingsService:
    _default_session = db.session

    @classmethod
    def get_recipient(cls, session=None) -> Optional[str]:
        """Endereço que recebe as notas.

        Args:
            session: Sessão SQLAlchemy opcional. Se None, usa a sessão padrão da classe.

        Returns:
            typing.Optional[str]: Valor gravado ou, na falta dele, ``NOTES_RECIPIENT``.
        """
        if session is None:
            session = cls._default_session
        setting = session.get(Setting, RECIPIENT_KEY)
        if setting is not None:
            return setting.value
        return current_app.config.get('NOTES_RECIPIENT')

    @classmethod
    def set_recipient(cls, email: str, session=None) -> str:
        """Valida, normaliza e grava o destinatário das notas.

        Args:
            email (str): Novo endereço.
            session: Sessão SQLAlchemy opcional. Se None, usa a sessão padrão da classe.

        Returns:
            str: Endereço normalizado que foi gravado.

        Raises:
            ValueError: Se o endereço for inválido.
        """
        if session is None:
            session = cls._default_session
        normalizado = EmailValidationService.normalize(email)

        setting = session.get(Setting, RECIPIENT_KEY)
        if setting is None:
            session.add(Setting(key=RECIPIENT_KEY, value=normalizado))
        else:
            setting.value = normalizado
        session.commit()
        current_app.logger.info("Destinatário das notas alterado para %s" % (normalizado,))
        return normalizado
